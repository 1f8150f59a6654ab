"""模块间依赖收集

三类依赖边（源 -> 目标，sourceFile 为源模块的构建文件）:
  - compileClasspath / implementationDependenciesMetadata 中的项目依赖
  - 直接子模块
  - 复合构建引入的其他构建（指向其根目录）

按名称找不到的项目依赖直接丢弃。
"""

from __future__ import annotations

import logging
from typing import Iterator

from gradle_nodes.core.build_model import BuildModule, BuildTree
from gradle_nodes.core.models import Dependency

logger = logging.getLogger(__name__)

CLASSPATH_CONFIGURATIONS = ("compileClasspath", "implementationDependenciesMetadata")


class DependencyCollector:
    """按构建树收集依赖边"""

    def __init__(self, tree: BuildTree) -> None:
        self.tree = tree
        self._by_name: dict[str, BuildModule] = {}
        for module in tree.all_modules():
            self._by_name.setdefault(module.name, module)

    def collect(self, module: BuildModule) -> Iterator[Dependency]:
        """逐条产出依赖边，调用方中途失败时已产出的边仍然有效"""
        for config in CLASSPATH_CONFIGURATIONS:
            for dep_name in module.configurations.get(config, []):
                found = self._by_name.get(dep_name)
                if found is None:
                    logger.debug("%s: 项目依赖 %s 不在构建树中，忽略", module.path, dep_name)
                    continue
                yield Dependency(module.project_dir, found.project_dir, module.build_file)

        for child in module.children:
            yield Dependency(module.project_dir, child.project_dir, module.build_file)

        for included in self.tree.included_builds:
            yield Dependency(
                module.project_dir, included.root.project_dir, module.build_file,
            )
