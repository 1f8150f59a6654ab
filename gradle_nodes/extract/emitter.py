"""图产物生成: createNodes 的实现

遍历构建树中的全部模块（根模块 + 所有后代）:
  1. 收集依赖边（写入共享集合）
  2. 提取目标，组装 ProjectNode，以模块绝对目录为键

单个模块的任何异常都被捕获并记录，该模块从报告中省略，
但它已经收集到的依赖边保留。全部处理完后写出
<outputDirectory>/<构建名><hash>.json，并把路径打印到 stdout 作为交接信号。
复合构建引入的其他构建先于本构建处理，各自写出独立产物。
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Callable

from gradle_nodes.core.build_model import BuildTree
from gradle_nodes.core.models import Dependency, GraphReport, ProjectNode, save_report
from gradle_nodes.extract.dependencies import DependencyCollector
from gradle_nodes.extract.targets import TargetExtractor

logger = logging.getLogger(__name__)

CREATE_NODES_TASK = "createNodes"


def artifact_path(output_directory: str | Path, build_name: str, hash_: str = "") -> Path:
    """产物文件路径: <outputDirectory>/<buildName><hash>.json"""
    return Path(output_directory) / f"{build_name}{hash_}.json"


class GraphEmitter:
    """为一个构建生成图报告并写出产物"""

    def __init__(
        self,
        tree: BuildTree,
        *,
        workspace_root: str = "",
        output_directory: str = "",
        hash_: str = "",
        os_name: str | None = None,
        echo: Callable[[str], None] = print,
    ) -> None:
        self.tree = tree
        self.workspace_root = os.path.normpath(workspace_root or os.getcwd())
        self.output_directory = output_directory or os.path.join(
            self.workspace_root, ".nx", "cache",
        )
        self.hash = hash_
        self.os_name = os_name
        self._echo = echo

    def build_report(self) -> GraphReport:
        """逐模块提取，单模块失败不影响其他模块"""
        nodes: dict[str, ProjectNode] = {}
        dependencies: set[Dependency] = set()
        extractor = TargetExtractor(self.tree, self.workspace_root, os_name=self.os_name)
        collector = DependencyCollector(self.tree)

        for module in self.tree.all_modules():
            logger.info(
                "CreateNodes: 处理模块 %s (%s)", module.path, module.project_dir,
                extra={"module_path": module.path},
            )
            try:
                for dep in collector.collect(module):
                    dependencies.add(dep)
                extracted = extractor.extract(module)
            except Exception as e:
                logger.warning(
                    "CreateNodes: 模块 %s 提取失败，已跳过: %s", module.path, e,
                    extra={"module_path": module.path},
                )
                logger.debug("提取失败详情", exc_info=True)
                continue
            nodes[module.project_dir] = ProjectNode(
                name=module.name,
                targets=extracted.targets,
                target_groups=extracted.target_groups,
                description=module.description,
            )

        return GraphReport(nodes=nodes, dependencies=dependencies)

    def emit(self) -> list[Path]:
        """写出本构建及其引入构建的产物，返回全部产物路径"""
        paths: list[Path] = []
        for included in self.tree.included_builds:
            paths.extend(self._for_tree(included).emit())

        report = self.build_report()
        path = artifact_path(self.output_directory, self.tree.name, self.hash)
        save_report(report, path)
        logger.info(
            "CreateNodes: %s -> %s (%d 个节点, %d 条依赖)",
            self.tree.name, path, len(report.nodes), len(report.dependencies),
        )
        self._echo(str(path))
        paths.append(path)
        return paths

    def _for_tree(self, tree: BuildTree) -> GraphEmitter:
        return GraphEmitter(
            tree,
            workspace_root=self.workspace_root,
            output_directory=self.output_directory,
            hash_=self.hash,
            os_name=self.os_name,
            echo=self._echo,
        )
