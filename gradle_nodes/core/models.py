"""核心数据模型

Target / ProjectNode / Dependency / GraphReport 集中定义。
to_dict() 输出编排器使用的 camelCase JSON 结构（未设置的字段省略），
from_dict() 负责从图产物和缓存文件还原。
"""

from __future__ import annotations

import copy
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from gradle_nodes.utils.yaml_io import load_json, save_json

TECHNOLOGY = "Gradle"
NOOP_EXECUTOR = "nx:noop"


# =========================================================================
# 目标
# =========================================================================


@dataclass
class TargetRef:
    """CI 转发引用: 同项目内的目标，参数透传"""

    target: str
    projects: str = "self"
    params: str = "forward"

    def to_dict(self) -> dict[str, str]:
        return {"target": self.target, "projects": self.projects, "params": self.params}


DependsOn = str | TargetRef


def _depends_on_from_dict(item: Any) -> DependsOn:
    if isinstance(item, dict):
        return TargetRef(
            target=item["target"],
            projects=item.get("projects", "self"),
            params=item.get("params", "forward"),
        )
    return str(item)


@dataclass
class TargetMetadata:
    """目标元数据"""

    description: str | None = None
    technologies: list[str] = field(default_factory=lambda: [TECHNOLOGY])
    help_command: str | None = None
    non_atomized_target: str | None = None  # 伞形 CI 目标对应的未拆分测试目标

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {}
        if self.description is not None:
            result["description"] = self.description
        result["technologies"] = list(self.technologies)
        if self.help_command is not None:
            result["help"] = {"command": self.help_command}
        if self.non_atomized_target is not None:
            result["nonAtomizedTarget"] = self.non_atomized_target
        return result

    @classmethod
    def from_dict(cls, data: dict[str, Any] | None) -> TargetMetadata:
        data = data or {}
        help_info = data.get("help") or {}
        return cls(
            description=data.get("description"),
            technologies=list(data.get("technologies") or [TECHNOLOGY]),
            help_command=help_info.get("command"),
            non_atomized_target=data.get("nonAtomizedTarget"),
        )


@dataclass
class Target:
    """编排器视角的目标（由构建任务规范化而来）"""

    command: str | None = None
    inputs: list[str] | None = None
    outputs: list[str] | None = None
    depends_on: list[DependsOn] | None = None
    cwd: str | None = None
    cache: bool = True
    executor: str | None = None
    metadata: TargetMetadata = field(default_factory=TargetMetadata)

    def clone(self) -> Target:
        """深拷贝，派生目标在副本上修改"""
        return copy.deepcopy(self)

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {"cache": self.cache}
        if self.command is not None:
            result["command"] = self.command
        if self.executor is not None:
            result["executor"] = self.executor
        if self.inputs is not None:
            result["inputs"] = list(self.inputs)
        if self.outputs is not None:
            result["outputs"] = list(self.outputs)
        if self.depends_on is not None:
            result["dependsOn"] = [
                d.to_dict() if isinstance(d, TargetRef) else d
                for d in self.depends_on
            ]
        if self.cwd is not None:
            result["options"] = {"cwd": self.cwd}
        result["metadata"] = self.metadata.to_dict()
        return result

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Target:
        depends_on = data.get("dependsOn")
        options = data.get("options") or {}
        return cls(
            command=data.get("command"),
            inputs=list(data["inputs"]) if data.get("inputs") is not None else None,
            outputs=list(data["outputs"]) if data.get("outputs") is not None else None,
            depends_on=(
                [_depends_on_from_dict(d) for d in depends_on]
                if depends_on is not None else None
            ),
            cwd=options.get("cwd"),
            cache=bool(data.get("cache", True)),
            executor=data.get("executor"),
            metadata=TargetMetadata.from_dict(data.get("metadata")),
        )


# =========================================================================
# 项目节点
# =========================================================================


@dataclass
class ProjectNode:
    """单个模块的项目配置"""

    name: str
    targets: dict[str, Target] = field(default_factory=dict)
    target_groups: dict[str, list[str]] = field(default_factory=dict)
    technologies: list[str] = field(default_factory=lambda: [TECHNOLOGY])
    description: str | None = None
    root: str | None = None  # 投影阶段写入

    def clone(self) -> ProjectNode:
        return copy.deepcopy(self)

    def to_dict(self) -> dict[str, Any]:
        metadata: dict[str, Any] = {
            "targetGroups": {g: list(m) for g, m in self.target_groups.items()},
            "technologies": list(self.technologies),
        }
        if self.description is not None:
            metadata["description"] = self.description
        result: dict[str, Any] = {
            "name": self.name,
            "targets": {n: t.to_dict() for n, t in self.targets.items()},
            "metadata": metadata,
        }
        if self.root is not None:
            result["root"] = self.root
        return result

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ProjectNode:
        metadata = data.get("metadata") or {}
        return cls(
            name=data.get("name", ""),
            targets={
                n: Target.from_dict(t) for n, t in (data.get("targets") or {}).items()
            },
            target_groups={
                g: list(m) for g, m in (metadata.get("targetGroups") or {}).items()
            },
            technologies=list(metadata.get("technologies") or [TECHNOLOGY]),
            description=metadata.get("description"),
            root=data.get("root"),
        )


# =========================================================================
# 依赖边与图报告
# =========================================================================


@dataclass(frozen=True, order=True)
class Dependency:
    """模块间依赖边，三元组完全相同即视为同一条边"""

    source: str
    target: str
    source_file: str

    def to_dict(self) -> dict[str, str]:
        return {"source": self.source, "target": self.target, "sourceFile": self.source_file}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Dependency:
        return cls(
            source=data["source"],
            target=data["target"],
            source_file=data.get("sourceFile", ""),
        )


@dataclass
class GraphReport:
    """跨进程交换的图产物: {nodes, dependencies}"""

    nodes: dict[str, ProjectNode] = field(default_factory=dict)
    dependencies: set[Dependency] = field(default_factory=set)

    def merge(self, other: GraphReport) -> None:
        """合并另一个构建的报告（同键节点以后者为准，依赖边取并集）"""
        self.nodes.update(other.nodes)
        self.dependencies |= other.dependencies

    def to_dict(self) -> dict[str, Any]:
        return {
            "nodes": {k: n.to_dict() for k, n in self.nodes.items()},
            "dependencies": [d.to_dict() for d in sorted(self.dependencies)],
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> GraphReport:
        return cls(
            nodes={
                k: ProjectNode.from_dict(n) for k, n in (data.get("nodes") or {}).items()
            },
            dependencies={
                Dependency.from_dict(d) for d in (data.get("dependencies") or [])
            },
        )


def save_report(report: GraphReport, path: str | Path) -> None:
    """写出图产物（原子写入）"""
    save_json(path, report.to_dict())


def load_report(path: str | Path) -> GraphReport:
    """读取图产物"""
    return GraphReport.from_dict(load_json(path))
