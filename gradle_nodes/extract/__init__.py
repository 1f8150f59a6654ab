"""原生侧提取模块

拆分说明:
- targets.py: 模块任务 -> 目标 + 分组
- test_split.py: 测试类拆分为单文件 CI 目标
- dependencies.py: 模块间依赖边
- emitter.py: 遍历构建树并写出图产物
"""

from gradle_nodes.extract.dependencies import DependencyCollector
from gradle_nodes.extract.emitter import GraphEmitter, artifact_path
from gradle_nodes.extract.targets import TargetExtractor, gradlew_command
from gradle_nodes.extract.test_split import split_test_target

__all__ = [
    "DependencyCollector",
    "GraphEmitter",
    "TargetExtractor",
    "artifact_path",
    "gradlew_command",
    "split_test_target",
]
