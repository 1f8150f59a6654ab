"""节点投影: 原始报告 -> 按调用选项重命名后的项目配置

流程（每个构建文件一次）:
  1. 计算 (模块根, 选项, 源码状态) 的哈希
  2. 缓存未命中时从原始报告取节点（先按相对路径，再按工作区绝对路径）；
     两者都没有则返回空结果
  3. 目标重命名: 名称 X 通过选项 "<X>TargetName" 重映射。伞形目标 ci 因此由
     ciTargetName 重命名，单文件目标 ci--Foo 只响应各自的 "ci--FooTargetName"；
     其他目标同项目内的 dependsOn 引用按同一规则解析。
     伞形目标被重命名为 ciTargetName 时记录 nonAtomizedTarget = testTargetName，
     并把它指向 ci 开头目标的引用换成新前缀（ci--Foo -> <ciTargetName>--Foo）
  4. 分组成员按同一规则解析，空名称过滤掉
  5. 写入 root，以模块根为键返回

投影在节点副本上进行，缓存中保存的始终是投影前的节点。
"""

from __future__ import annotations

import logging
import os
import posixpath
from pathlib import Path
from typing import Any, Iterable

from gradle_nodes.core.config import DEFAULT_IGNORED_DIRS
from gradle_nodes.core.models import ProjectNode, TargetRef
from gradle_nodes.core.paths import to_workspace_relative
from gradle_nodes.extract.test_split import CI_TARGET
from gradle_nodes.services.cache import TargetsCache
from gradle_nodes.services.hashing import calculate_hash_for_create_nodes

logger = logging.getLogger(__name__)

TARGET_NAME_SUFFIX = "TargetName"
TEST_TARGET_OPTION = "testTargetName"
CI_TARGET_OPTION = "ciTargetName"
DEFAULT_TEST_TARGET = "test"

# 只记录为元数据、不参与重命名的选项
_NON_RENAMING_OPTIONS = frozenset({TEST_TARGET_OPTION})


def normalize_options(options: dict[str, Any] | None) -> dict[str, Any]:
    """补齐默认选项（返回新字典）"""
    result = dict(options or {})
    if result.get(TEST_TARGET_OPTION) is None:
        result[TEST_TARGET_OPTION] = DEFAULT_TEST_TARGET
    return result


def resolve_target_name(name: str, options: dict[str, Any]) -> str:
    """按 "<name>TargetName" 选项解析目标名，未配置时保持原名"""
    key = f"{name}{TARGET_NAME_SUFFIX}"
    if key in _NON_RENAMING_OPTIONS:
        return name
    override = options.get(key)
    if isinstance(override, str) and override:
        return override
    return name


def project_node(node: ProjectNode, options: dict[str, Any]) -> ProjectNode:
    """对节点副本执行目标和分组的重命名"""
    result = node.clone()
    ci_target_name = options.get(CI_TARGET_OPTION)

    targets = {}
    for name, target in result.targets.items():
        new_name = resolve_target_name(name, options)
        if name == CI_TARGET and ci_target_name and new_name == ci_target_name:
            target.metadata.non_atomized_target = options.get(TEST_TARGET_OPTION)
            if target.depends_on:
                target.depends_on = [
                    _switch_ci_prefix(dep, ci_target_name) for dep in target.depends_on
                ]
        elif target.depends_on:
            target.depends_on = [_rename_ref(dep, options) for dep in target.depends_on]
        if new_name in targets:
            logger.warning("%s: 重命名后目标 %s 重复，后者覆盖前者", node.name, new_name)
        targets[new_name] = target
    result.targets = targets

    groups = {}
    for group_name, members in result.target_groups.items():
        groups[group_name] = [
            resolved for resolved in (resolve_target_name(m, options) for m in members)
            if resolved
        ]
    result.target_groups = groups
    return result


def _switch_ci_prefix(dep: str | TargetRef, ci_target_name: str) -> str | TargetRef:
    if (
        isinstance(dep, TargetRef)
        and dep.projects == "self"
        and dep.target.startswith(CI_TARGET)
    ):
        dep.target = ci_target_name + dep.target[len(CI_TARGET):]
    return dep


def _rename_ref(dep: str | TargetRef, options: dict[str, Any]) -> str | TargetRef:
    if isinstance(dep, TargetRef):
        if dep.projects == "self":
            dep.target = resolve_target_name(dep.target, options)
        return dep
    # "<项目>:<任务>" 指向其他项目，不在此处改写
    if ":" in dep:
        return dep
    return resolve_target_name(dep, options)


class NodeProjector:
    """按构建文件投影项目节点，读写共享的目标缓存"""

    def __init__(
        self,
        nodes: dict[str, ProjectNode],
        cache: TargetsCache,
        workspace_root: str,
        *,
        ignored_dirs: Iterable[str] = DEFAULT_IGNORED_DIRS,
    ) -> None:
        self.nodes = nodes
        self.cache = cache
        self.workspace_root = workspace_root
        self.ignored_dirs = list(ignored_dirs)

    def project_root_of(self, build_file: str) -> str:
        """构建文件所在目录的工作区相对路径，工作区根为 "." """
        path = build_file
        if os.path.isabs(path):
            path = to_workspace_relative(path, self.workspace_root)
        return posixpath.dirname(Path(path).as_posix()) or "."

    def lookup(self, project_root: str) -> ProjectNode | None:
        node = self.nodes.get(project_root)
        if node is None:
            absolute = os.path.normpath(os.path.join(self.workspace_root, project_root))
            node = self.nodes.get(absolute)
        return node

    def project(self, build_file: str, options: dict[str, Any] | None) -> dict[str, ProjectNode]:
        """投影单个构建文件对应的项目，原始报告中没有时返回 {}"""
        project_root = self.project_root_of(build_file)
        options = normalize_options(options)

        key = calculate_hash_for_create_nodes(
            project_root, options, self.workspace_root, self.ignored_dirs,
        )
        cached = self.cache.get(key)
        if cached is None:
            raw = self.lookup(project_root)
            if raw is None:
                logger.debug("原始报告中没有项目 %s", project_root)
                return {}
            cached = raw.clone()
            self.cache.put(key, cached)

        node = project_node(cached, options)
        node.root = project_root
        return {project_root: node}
