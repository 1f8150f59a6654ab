"""统一异常体系

所有业务异常继承 GradleNodesError，CLI 层可据此输出友好提示。
除配置/模型校验错误外，流水线中的异常都在各自边界被恢复，不会中断整批处理。
"""

from __future__ import annotations

from typing import Any


class GradleNodesError(Exception):
    """基础异常"""

    code: str = "UNKNOWN"

    def __init__(self, message: str) -> None:
        super().__init__(message)


class ConfigError(GradleNodesError):
    """配置文件缺失或内容无效"""

    code = "CONFIG_ERROR"


class ValidationError(GradleNodesError):
    """构建模型等输入数据校验失败"""

    code = "VALIDATION_ERROR"


class ExtractionError(GradleNodesError):
    """单个模块的目标提取失败（由 Graph Emitter 捕获，模块被跳过）"""

    code = "EXTRACTION_ERROR"


class BridgeError(GradleNodesError):
    """调用原生构建工具失败"""

    code = "BRIDGE_ERROR"

    def __init__(self, message: str, entry_script: str = "") -> None:
        super().__init__(message)
        self.entry_script = entry_script


class AggregateCreateNodesError(GradleNodesError):
    """多个入口脚本调用失败的聚合异常

    errors: [(入口脚本路径, 异常)]，partial: 成功部分的结果（可为 None）
    """

    code = "AGGREGATE_CREATE_NODES_ERROR"

    def __init__(
        self,
        errors: list[tuple[str, Exception]],
        partial: Any = None,
    ) -> None:
        files = ", ".join(f for f, _ in errors)
        super().__init__(f"{len(errors)} 个入口脚本执行失败: {files}")
        self.errors = errors
        self.partial = partial
