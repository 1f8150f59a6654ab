"""工作区配置文件发现

查找 build.gradle(.kts) 和 gradlew / gradlew.bat，并拆分为:
  - 构建文件: 每个对应一个项目根
  - 入口脚本: 每个目录一个，按当前系统挑选 gradlew 或 gradlew.bat
"""

from __future__ import annotations

import os
import posixpath
from pathlib import Path
from typing import Iterable

from gradle_nodes.core.config import DEFAULT_IGNORED_DIRS
from gradle_nodes.utils.shell import is_windows

BUILD_FILES = ("build.gradle", "build.gradle.kts")
ENTRY_SCRIPTS = ("gradlew", "gradlew.bat")


def find_config_files(
    workspace_root: str | Path, ignored_dirs: Iterable[str] = DEFAULT_IGNORED_DIRS,
) -> list[str]:
    """返回工作区相对路径（/ 分隔，已排序）"""
    ignored = set(ignored_dirs)
    root = Path(workspace_root)
    found: list[str] = []
    for current, dirs, files in os.walk(root):
        dirs[:] = [d for d in dirs if d not in ignored]
        for name in files:
            if name in BUILD_FILES or name in ENTRY_SCRIPTS:
                found.append((Path(current) / name).relative_to(root).as_posix())
    return sorted(found)


def split_config_files(
    files: Iterable[str], os_name: str | None = None,
) -> tuple[list[str], list[str]]:
    """拆分为 (构建文件, 入口脚本)"""
    preferred, fallback = ENTRY_SCRIPTS[::-1] if is_windows(os_name) else ENTRY_SCRIPTS
    build_files: list[str] = []
    scripts_by_dir: dict[str, dict[str, str]] = {}
    for f in files:
        name = posixpath.basename(f)
        if name in BUILD_FILES:
            build_files.append(f)
        elif name in ENTRY_SCRIPTS:
            scripts_by_dir.setdefault(posixpath.dirname(f), {})[name] = f

    entry_scripts = [
        scripts.get(preferred) or scripts[fallback]
        for scripts in scripts_by_dir.values()
    ]
    return build_files, entry_scripts
