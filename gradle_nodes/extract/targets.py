"""目标提取: 模块任务 -> 编排器目标

对模块中的每个任务:
  1. 非空 group -> 加入该分组（保持插入顺序）
  2. 输入/输出文件 -> 占位符路径，不在任何根目录下的文件直接丢弃
  3. cache 恒为 true（是否真正可缓存由编排器决定）
  4. 依赖任务 -> 同模块用裸名，跨模块用 "<模块名>:<任务名>"
  5. options.cwd -> 构建树根目录相对工作区的路径
  6. compileTest* 任务触发测试拆分
  7. command -> "<gradlew> <模块前缀><任务名>"
  8. metadata -> 描述、技术标签、help 命令

先生成不可变的 TargetEntry 列表，再折叠出分组索引。
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from gradle_nodes.core.build_model import PATH_SEPARATOR, BuildModule, BuildTask, BuildTree
from gradle_nodes.core.exceptions import ExtractionError
from gradle_nodes.core.models import Target, TargetMetadata
from gradle_nodes.core.paths import relative_cwd, replace_roots
from gradle_nodes.extract.entries import TargetEntry, fold_entries
from gradle_nodes.extract.test_split import split_test_target
from gradle_nodes.utils.shell import is_windows

logger = logging.getLogger(__name__)

TEST_COMPILE_PREFIX = "compileTest"


def gradlew_command(os_name: str | None = None) -> str:
    """当前系统下调用 Gradle Wrapper 的命令"""
    return ".\\gradlew.bat" if is_windows(os_name) else "./gradlew"


@dataclass
class ExtractedTargets:
    """单个模块的提取结果"""

    targets: dict[str, Target]
    target_groups: dict[str, list[str]]


class TargetExtractor:
    """按构建树提取各模块的目标"""

    def __init__(
        self, tree: BuildTree, workspace_root: str, *, os_name: str | None = None,
    ) -> None:
        self.tree = tree
        self.workspace_root = workspace_root
        self.invoker = gradlew_command(os_name)
        self.cwd = relative_cwd(tree.root.project_dir, workspace_root)

    def extract(self, module: BuildModule) -> ExtractedTargets:
        """提取模块的目标与分组

        异常:
            ExtractionError: 任务依赖指向构建树中不存在的模块
        """
        targets, groups = fold_entries(self.entries_for(module))
        return ExtractedTargets(targets=targets, target_groups=groups)

    def entries_for(self, module: BuildModule) -> list[TargetEntry]:
        entries: list[TargetEntry] = []
        test_tasks: list[tuple[BuildTask, Target]] = []

        for task in module.tasks:
            target = self._task_target(module, task)
            entries.append(TargetEntry(task.name, target, task.group))
            if task.name.startswith(TEST_COMPILE_PREFIX):
                test_tasks.append((task, target))

        if test_tasks:
            # 同一模块的多个测试编译任务合并拆分，保证只有一个伞形目标
            test_files = list(dict.fromkeys(
                f for task, _ in test_tasks for f in task.inputs
            ))
            entries.extend(split_test_target(
                test_files,
                parent=test_tasks[0][1],
                invoker=self.invoker,
                prefix=module.path_prefix,
                project_root=module.project_dir,
                workspace_root=self.workspace_root,
                reserved=frozenset(t.name for t in module.tasks),
            ))
        return entries

    def _task_target(self, module: BuildModule, task: BuildTask) -> Target:
        prefix = module.path_prefix
        return Target(
            command=f"{self.invoker} {prefix}{task.name}",
            inputs=(
                replace_roots(task.inputs, module.project_dir, self.workspace_root)
                if task.inputs else None
            ),
            outputs=(
                replace_roots(task.outputs, module.project_dir, self.workspace_root)
                if task.outputs else None
            ),
            depends_on=(
                [self._dependency_name(module, d) for d in task.depends_on]
                if task.depends_on else None
            ),
            cwd=self.cwd,
            cache=True,
            metadata=TargetMetadata(
                description=task.description,
                help_command=f"{self.invoker} help --task {prefix}{task.name}",
            ),
        )

    def _dependency_name(self, module: BuildModule, ref: str) -> str:
        """同模块 -> 裸任务名；跨模块 -> "<模块名>:<任务名>" """
        if PATH_SEPARATOR not in ref:
            return ref
        module_path, _, task_name = ref.rpartition(PATH_SEPARATOR)
        owner = self.tree.find_module(module_path or PATH_SEPARATOR)
        if owner is None:
            raise ExtractionError(
                f"任务依赖 {ref} 指向未知模块 (来自 {module.path})"
            )
        if owner is module:
            return task_name
        return f"{owner.name}:{task_name}"
