"""路径占位符规则

目标的 inputs / outputs / cwd 不能携带绝对路径，否则缓存无法跨机器复用:
  - 位于模块根目录下      -> {projectRoot}/...
  - 位于工作区根目录下    -> {workspaceRoot}/...
  - 两者都不是            -> None（与缓存无关，直接丢弃）

匹配按完整路径段进行，/ws/app2 不会被当成 /ws/app 的子路径。
"""

from __future__ import annotations

import os
from pathlib import Path

PROJECT_ROOT = "{projectRoot}"
WORKSPACE_ROOT = "{workspaceRoot}"


def _norm(p: str | Path) -> str:
    return os.path.normpath(str(p))


def _strip_root(path: str, root: str) -> str | None:
    """path 位于 root 之下时返回剩余部分（以 / 开头，或空串），否则 None"""
    if path == root:
        return ""
    prefix = root if root.endswith(os.sep) else root + os.sep
    if path.startswith(prefix):
        return "/" + path[len(prefix):].replace(os.sep, "/")
    return None


def replace_root_in_path(
    path: str | Path, project_root: str | Path, workspace_root: str | Path,
) -> str | None:
    """按占位符规则改写路径，两个根都不匹配时返回 None"""
    p = _norm(path)
    rest = _strip_root(p, _norm(project_root))
    if rest is not None:
        return PROJECT_ROOT + rest
    rest = _strip_root(p, _norm(workspace_root))
    if rest is not None:
        return WORKSPACE_ROOT + rest
    return None


def replace_roots(
    paths: list[str], project_root: str | Path, workspace_root: str | Path,
) -> list[str]:
    """批量改写，丢弃不匹配任何根的路径"""
    result = []
    for p in paths:
        replaced = replace_root_in_path(p, project_root, workspace_root)
        if replaced is not None:
            result.append(replaced)
    return result


def relative_cwd(directory: str | Path, workspace_root: str | Path) -> str:
    """目录相对工作区根的表示；二者相同为 "."，不在工作区内则保留绝对路径"""
    d = _norm(directory)
    rest = _strip_root(d, _norm(workspace_root))
    if rest is None:
        return d
    return rest.lstrip("/") or "."


def to_workspace_relative(path: str | Path, workspace_root: str | Path) -> str:
    """绝对路径转为工作区相对路径（/ 分隔）；工作区外的路径原样返回"""
    return relative_cwd(path, workspace_root).replace(os.sep, "/")
