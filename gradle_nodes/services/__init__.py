"""宿主侧服务

拆分说明:
- bridge.py: 调用原生构建工具并收集图产物
- projector.py: 按选项投影/重命名项目节点
- cache.py: 哈希键控的目标缓存
- hashing.py: 内容哈希
- discovery.py: 构建文件 / 入口脚本发现
- nodes_service.py: 批处理编排
"""

from gradle_nodes.services.bridge import ProcessBridge
from gradle_nodes.services.cache import TargetsCache
from gradle_nodes.services.nodes_service import NodesService
from gradle_nodes.services.projector import NodeProjector

__all__ = ["NodeProjector", "NodesService", "ProcessBridge", "TargetsCache"]
