"""内容哈希

- hash_object: 任意可 JSON 序列化对象的稳定摘要（键排序）
- hash_directory: 目录下全部文件（相对路径 + 内容）的摘要
- calculate_hash_for_create_nodes: 缓存键 = (模块根, 选项, 源码状态)
"""

from __future__ import annotations

import hashlib
import json
import logging
import os
from pathlib import Path
from typing import Any, Iterable

from gradle_nodes.core.config import DEFAULT_IGNORED_DIRS

logger = logging.getLogger(__name__)

_CHUNK = 1024 * 1024

# 悬空链接、无权限或遍历期间被删除的文件
UNREADABLE_MARKER = "unreadable"


def hash_object(obj: Any) -> str:
    payload = json.dumps(obj, sort_keys=True, separators=(",", ":"), default=str)
    return hashlib.sha256(payload.encode("utf-8")).hexdigest()


def hash_file(path: str | Path) -> str:
    h = hashlib.sha256()
    with open(path, "rb") as f:
        for chunk in iter(lambda: f.read(_CHUNK), b""):
            h.update(chunk)
    return h.hexdigest()


def hash_directory(
    directory: str | Path, ignored_dirs: Iterable[str] = DEFAULT_IGNORED_DIRS,
) -> str:
    """目录内容摘要，遍历顺序固定；目录不存在时为空摘要"""
    ignored = set(ignored_dirs)
    root = Path(directory)
    h = hashlib.sha256()
    if not root.is_dir():
        return h.hexdigest()
    for current, dirs, files in os.walk(root):
        dirs[:] = sorted(d for d in dirs if d not in ignored)
        for name in sorted(files):
            full = Path(current) / name
            rel = full.relative_to(root).as_posix()
            h.update(rel.encode("utf-8"))
            h.update(b"\0")
            h.update(_file_digest(full).encode("ascii"))
            h.update(b"\n")
    return h.hexdigest()


def _file_digest(path: Path) -> str:
    """文件摘要；非常规文件或读取失败时返回占位标记，只以路径参与哈希"""
    if not path.is_file():
        return UNREADABLE_MARKER
    try:
        return hash_file(path)
    except OSError as e:
        logger.debug("文件无法读取，按占位标记参与哈希: %s (%s)", path, e)
        return UNREADABLE_MARKER


def calculate_hash_for_create_nodes(
    project_root: str,
    options: dict[str, Any],
    workspace_root: str | Path,
    ignored_dirs: Iterable[str] = DEFAULT_IGNORED_DIRS,
) -> str:
    """模块根 + 选项 + 模块目录源码状态 的组合哈希"""
    source_state = hash_directory(Path(workspace_root) / project_root, ignored_dirs)
    return hash_object([project_root, options, source_state])
