"""项目图服务: 串联 发现 -> 进程桥 -> 投影 -> 缓存

一次批处理:
  1. 发现构建文件和入口脚本（或由调用方传入）
  2. 按选项哈希定位缓存文件 <workspaceDataDir>/gradle-<optionsHash>.hash 并读取
  3. 调用全部入口脚本生成并合并图产物（失败的入口脚本记录错误，使用部分结果）
  4. 逐个构建文件投影（单个构建文件失败记录警告后跳过）
  5. 结束时（无论成败）写回缓存

用法:
    svc = NodesService("/path/to/workspace")
    report = svc.populate()
    for build_file, result in svc.create_nodes(report=report):
        ...
    deps = svc.create_dependencies(report)
"""

from __future__ import annotations

import logging
import os
from typing import Any

from gradle_nodes.core.config import Config, get_config
from gradle_nodes.core.exceptions import AggregateCreateNodesError, GradleNodesError
from gradle_nodes.core.models import GraphReport
from gradle_nodes.core.paths import to_workspace_relative
from gradle_nodes.services.bridge import ProcessBridge
from gradle_nodes.services.cache import TargetsCache, cache_path
from gradle_nodes.services.discovery import find_config_files, split_config_files
from gradle_nodes.services.hashing import hash_object
from gradle_nodes.services.projector import NodeProjector
from gradle_nodes.utils.shell import CommandExecutor

logger = logging.getLogger(__name__)

DEPENDENCY_TYPE_STATIC = "static"


class NodesService:
    """项目图批处理入口"""

    def __init__(
        self,
        workspace_root: str = "",
        *,
        config: Config | None = None,
        executor: CommandExecutor | None = None,
        os_name: str | None = None,
    ) -> None:
        self.workspace_root = os.path.normpath(os.path.abspath(workspace_root or os.getcwd()))
        self.config = config or get_config()
        self.executor = executor
        self.os_name = os_name

    def _files(self, files: list[str] | None) -> list[str]:
        if files is not None:
            return files
        return find_config_files(self.workspace_root, self.config.ignored_dirs)

    def populate(self, files: list[str] | None = None) -> GraphReport:
        """调用全部入口脚本，返回合并后的原始报告（失败部分记录日志后忽略）"""
        _, entry_scripts = split_config_files(self._files(files), self.os_name)
        bridge = ProcessBridge(
            self.workspace_root,
            output_directory=str(
                self.config.resolve(self.workspace_root, self.config.output_dir)
            ),
            hash_=self.config.hash,
            executor=self.executor,
            os_name=self.os_name,
        )
        scripts = [os.path.join(self.workspace_root, s) for s in entry_scripts]
        try:
            return bridge.populate_nodes(scripts)
        except AggregateCreateNodesError as e:
            for script, error in e.errors:
                logger.error("入口脚本失败 %s: %s", script, error, extra={"entry_script": script})
            return e.partial if e.partial is not None else GraphReport()

    def create_nodes(
        self,
        files: list[str] | None = None,
        options: dict[str, Any] | None = None,
        *,
        report: GraphReport | None = None,
    ) -> list[tuple[str, dict[str, Any]]]:
        """为每个构建文件生成 {"projects": {root: config}}"""
        files = self._files(files)
        build_files, _ = split_config_files(files, self.os_name)
        if options is None:
            options = dict(self.config.plugin_options)

        options_hash = hash_object(options)
        cache = TargetsCache.load(cache_path(
            self.config.resolve(self.workspace_root, self.config.workspace_data_dir),
            options_hash,
        ))
        if report is None:
            report = self.populate(files)

        results: list[tuple[str, dict[str, Any]]] = []
        try:
            projector = NodeProjector(
                report.nodes, cache, self.workspace_root,
                ignored_dirs=self.config.ignored_dirs,
            )
            for build_file in build_files:
                try:
                    projects = projector.project(build_file, options)
                except (OSError, GradleNodesError) as e:
                    logger.warning(
                        "构建文件 %s 投影失败，已跳过: %s", build_file, e,
                        extra={"build_file": build_file},
                    )
                    continue
                results.append((build_file, {
                    "projects": {root: node.to_dict() for root, node in projects.items()},
                }))
        finally:
            cache.flush()

        logger.info("已投影 %d 个构建文件 (缓存 %d 条)", len(results), len(cache))
        return results

    def create_dependencies(self, report: GraphReport) -> list[dict[str, str]]:
        """依赖边 -> 工作区相对路径的静态依赖记录（跳过自依赖）"""
        records = []
        for dep in sorted(report.dependencies):
            source = to_workspace_relative(dep.source, self.workspace_root)
            target = to_workspace_relative(dep.target, self.workspace_root)
            if source == target:
                continue
            records.append({
                "source": source,
                "target": target,
                "sourceFile": to_workspace_relative(dep.source_file, self.workspace_root),
                "type": DEPENDENCY_TYPE_STATIC,
            })
        return records
