"""目标条目与分组折叠

提取阶段先为每个模块生成不可变的 TargetEntry 列表，
再通过 fold_entries() 一次性折叠成 (targets, targetGroups)。
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable

from gradle_nodes.core.models import Target


@dataclass(frozen=True)
class TargetEntry:
    """一个目标及其所属分组"""

    name: str
    target: Target
    group: str | None = None


def fold_entries(
    entries: Iterable[TargetEntry],
) -> tuple[dict[str, Target], dict[str, list[str]]]:
    """折叠条目: 目标按名称入表，非空分组按出现顺序追加成员"""
    targets: dict[str, Target] = {}
    groups: dict[str, list[str]] = {}
    for entry in entries:
        targets[entry.name] = entry.target
        if entry.group and entry.group.strip():
            groups.setdefault(entry.group, []).append(entry.name)
    return targets, groups
