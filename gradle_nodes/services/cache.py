"""目标缓存: 内容哈希 -> ProjectNode（提取后、投影前）

生命周期:
  - load(): 批处理开始时读取一次；文件不存在或损坏均视为空缓存（冷启动）
  - get()/put(): 每个模块只读写自己哈希对应的条目
  - flush(): 批处理结束时写回一次（原子写入）

缓存条目从不主动失效；源码或选项变化后哈希改变，旧条目不再被读取，
但仍留在文件中直到被外部清理。path 为 None 时为纯内存缓存。
"""

from __future__ import annotations

import json
import logging
from pathlib import Path

from gradle_nodes.core.models import ProjectNode
from gradle_nodes.utils.yaml_io import load_json, save_json

logger = logging.getLogger(__name__)

CACHE_KIND = "gradle"


def cache_path(workspace_data_dir: str | Path, options_hash: str, kind: str = CACHE_KIND) -> Path:
    """缓存文件路径: <workspaceDataDir>/<kind>-<optionsHash>.hash"""
    return Path(workspace_data_dir) / f"{kind}-{options_hash}.hash"


class TargetsCache:
    """哈希键控的项目节点缓存"""

    def __init__(
        self,
        path: Path | None = None,
        entries: dict[str, ProjectNode] | None = None,
    ) -> None:
        self.path = path
        self._entries: dict[str, ProjectNode] = dict(entries or {})
        self._dirty = False

    @classmethod
    def load(cls, path: Path | None) -> TargetsCache:
        """读取缓存文件，任何读取失败都退化为空缓存"""
        if path is None or not path.exists():
            return cls(path)
        try:
            data = load_json(path)
        except (OSError, json.JSONDecodeError) as e:
            logger.warning("缓存文件读取失败，按冷启动处理: %s (%s)", path, e)
            return cls(path)
        if not isinstance(data, dict):
            logger.warning("缓存文件格式无效，按冷启动处理: %s", path)
            return cls(path)

        entries: dict[str, ProjectNode] = {}
        for key, raw in data.items():
            if not isinstance(raw, dict):
                continue
            try:
                entries[key] = ProjectNode.from_dict(raw)
            except (KeyError, TypeError, ValueError, AttributeError) as e:
                logger.debug("忽略无效缓存条目 %s: %s", key, e)
        logger.debug("缓存已加载: %s (%d 条)", path, len(entries))
        return cls(path, entries)

    def get(self, key: str) -> ProjectNode | None:
        return self._entries.get(key)

    def put(self, key: str, node: ProjectNode) -> None:
        self._entries[key] = node
        self._dirty = True

    def __contains__(self, key: object) -> bool:
        return key in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def to_dict(self) -> dict[str, dict]:
        return {k: n.to_dict() for k, n in self._entries.items()}

    def flush(self) -> None:
        """写回缓存文件（无变更或纯内存缓存时不写）"""
        if self.path is None or not self._dirty:
            return
        save_json(self.path, self.to_dict())
        self._dirty = False
        logger.debug("缓存已写回: %s (%d 条)", self.path, len(self._entries))
