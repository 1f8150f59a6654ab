"""构建模型: 已配置好的原生构建描述

对应 Gradle 侧的 Project / Task / Configuration / IncludedBuild。
模型以 YAML 导出，由 load_build_tree() 加载:

    name: gradle-tutorial
    root:
      name: gradle-tutorial
      path: ":"
      dir: .
      build_file: build.gradle
      tasks:
        - name: compileJava
          group: build
          inputs: [src/main/java/App.java]
          outputs: [build/classes/java/main]
          depends_on: [":lib:jar"]
      configurations:
        compileClasspath: [lib]
      children:
        - name: lib
    included_builds:
      - ../build-logic/build-model.yml

相对路径规则:
  - root.dir 相对模型文件所在目录，子模块 dir 相对父模块目录（默认为模块名）
  - build_file、任务 inputs/outputs 相对所属模块目录
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Iterator

import yaml

from gradle_nodes.core.exceptions import ValidationError
from gradle_nodes.utils.yaml_io import load_yaml

logger = logging.getLogger(__name__)

PATH_SEPARATOR = ":"


@dataclass
class BuildTask:
    """模块声明的单个任务"""

    name: str
    group: str | None = None
    description: str | None = None
    inputs: list[str] = field(default_factory=list)   # 绝对路径
    outputs: list[str] = field(default_factory=list)  # 绝对路径
    depends_on: list[str] = field(default_factory=list)  # ":app:jar" 或同模块的 "jar"


@dataclass
class BuildModule:
    """构建树中的一个模块（子项目）"""

    name: str
    path: str  # 构建树路径，如 ":" / ":app"
    project_dir: str
    build_file: str
    description: str | None = None
    tasks: list[BuildTask] = field(default_factory=list)
    configurations: dict[str, list[str]] = field(default_factory=dict)
    children: list[BuildModule] = field(default_factory=list)

    def all_modules(self) -> Iterator[BuildModule]:
        """自身及全部后代（深度优先）"""
        yield self
        for child in self.children:
            yield from child.all_modules()

    @property
    def path_prefix(self) -> str:
        """调用前缀，保证以 ':' 结尾"""
        return self.path if self.path.endswith(PATH_SEPARATOR) else self.path + PATH_SEPARATOR


@dataclass
class BuildTree:
    """一次构建（根模块 + 复合构建引入的其他构建）"""

    name: str
    root: BuildModule
    included_builds: list[BuildTree] = field(default_factory=list)

    def all_modules(self) -> list[BuildModule]:
        return list(self.root.all_modules())

    def find_module(self, path: str) -> BuildModule | None:
        """按构建树路径查找模块"""
        for module in self.root.all_modules():
            if module.path == path:
                return module
        return None


# =========================================================================
# 加载
# =========================================================================


def load_build_tree(path: str | Path) -> BuildTree:
    """从 YAML 文件加载构建模型

    异常:
        ValidationError: 文件不存在、格式错误或字段缺失
    """
    return _load_tree_file(Path(os.path.abspath(path)), set())


def _load_tree_file(path: Path, seen: set[Path]) -> BuildTree:
    if path in seen:
        raise ValidationError(f"复合构建存在循环引用: {path}")
    if not path.exists():
        raise ValidationError(f"构建模型文件不存在: {path}")
    seen.add(path)
    try:
        data = load_yaml(path)
    except (yaml.YAMLError, ValueError) as e:
        raise ValidationError(f"构建模型解析失败: {path} ({e})") from e
    if not data:
        raise ValidationError(f"构建模型为空: {path}")
    tree = parse_build_tree(data, path.parent, _seen=seen)
    logger.debug("构建模型已加载: %s (%d 个模块)", path, len(tree.all_modules()))
    return tree


def parse_build_tree(
    data: dict[str, Any], base_dir: str | Path, *, _seen: set[Path] | None = None,
) -> BuildTree:
    """从字典解析构建模型，相对路径以 base_dir 为基准"""
    seen = _seen if _seen is not None else set()
    base = Path(os.path.abspath(base_dir))
    root_data = data.get("root")
    if not isinstance(root_data, dict):
        raise ValidationError("构建模型缺少 root 模块")
    root = _parse_module(root_data, base, parent=None)

    included: list[BuildTree] = []
    for item in data.get("included_builds") or []:
        if isinstance(item, str):
            included.append(_load_tree_file(Path(os.path.abspath(base / item)), seen))
        elif isinstance(item, dict):
            included.append(parse_build_tree(item, base, _seen=seen))
        else:
            raise ValidationError(f"included_builds 条目无效: {item!r}")

    return BuildTree(
        name=_as_str(data.get("name")) or root.name,
        root=root,
        included_builds=included,
    )


def _parse_module(
    data: dict[str, Any], base: Path, parent: BuildModule | None,
) -> BuildModule:
    name = _as_str(data.get("name"))
    if not name:
        raise ValidationError("模块 name 为必填")

    default_dir = "." if parent is None else name
    project_dir = os.path.normpath(base / (_as_str(data.get("dir")) or default_dir))

    if parent is None:
        default_path = PATH_SEPARATOR
    else:
        default_path = parent.path_prefix + name
    module_path = _as_str(data.get("path")) or default_path

    build_file = os.path.normpath(
        Path(project_dir) / (_as_str(data.get("build_file")) or "build.gradle")
    )

    configurations: dict[str, list[str]] = {}
    raw_configs = data.get("configurations") or {}
    if not isinstance(raw_configs, dict):
        raise ValidationError(f"模块 {name} 的 configurations 必须是映射")
    for config_name, deps in raw_configs.items():
        configurations[str(config_name)] = _as_str_list(deps, f"{name}.configurations")

    module = BuildModule(
        name=name,
        path=module_path,
        project_dir=project_dir,
        build_file=build_file,
        description=_as_str(data.get("description")),
        configurations=configurations,
    )
    module.tasks = [
        _parse_task(t, project_dir, name) for t in (data.get("tasks") or [])
    ]
    module.children = [
        _parse_module(c, Path(project_dir), parent=module)
        for c in (data.get("children") or [])
    ]
    return module


def _parse_task(data: Any, project_dir: str, module_name: str) -> BuildTask:
    if not isinstance(data, dict) or not _as_str(data.get("name")):
        raise ValidationError(f"模块 {module_name} 存在无效任务定义: {data!r}")
    where = f"{module_name}.{data['name']}"
    return BuildTask(
        name=str(data["name"]),
        group=_as_str(data.get("group")),
        description=_as_str(data.get("description")),
        inputs=[_abs(project_dir, p) for p in _as_str_list(data.get("inputs"), where)],
        outputs=[_abs(project_dir, p) for p in _as_str_list(data.get("outputs"), where)],
        depends_on=_as_str_list(data.get("depends_on"), where),
    )


def _abs(project_dir: str, p: str) -> str:
    return os.path.normpath(Path(project_dir) / p)


def _as_str(value: Any) -> str | None:
    if value is None:
        return None
    return str(value)


def _as_str_list(value: Any, where: str) -> list[str]:
    if value is None:
        return []
    if not isinstance(value, list):
        raise ValidationError(f"{where} 必须是列表")
    return [str(v) for v in value]
