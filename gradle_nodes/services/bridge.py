"""进程桥: 在独立进程中调用原生构建工具的 createNodes 任务

交接协议: 每次调用由 Graph Emitter 写出产物文件，并把产物路径打印到 stdout；
桥按行拆分 stdout，取以 .json 结尾的行作为产物路径读取。

错误处理:
  - 入口脚本旁没有 build.gradle(.kts): 记录警告，视为没有可提取的内容
  - 进程无法启动或退出码非零: 包装为 BridgeError（带入口脚本路径和修复提示），
    不影响其他入口脚本；全部处理完后统一抛出 AggregateCreateNodesError，
    partial 中携带成功部分合并后的报告
"""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path

from gradle_nodes.core.exceptions import AggregateCreateNodesError, BridgeError
from gradle_nodes.core.models import GraphReport, load_report
from gradle_nodes.extract.emitter import CREATE_NODES_TASK
from gradle_nodes.services.discovery import BUILD_FILES
from gradle_nodes.utils.shell import CommandExecutor, LocalExecutor, is_windows

logger = logging.getLogger(__name__)

ARTIFACT_SUFFIX = ".json"


def newline_separator(os_name: str | None = None) -> str:
    return "\r\n" if is_windows(os_name) else "\n"


def has_build_file(entry_script: str | Path) -> bool:
    directory = Path(entry_script).parent
    return any((directory / name).exists() for name in BUILD_FILES)


class ProcessBridge:
    """调用入口脚本并收集图产物"""

    def __init__(
        self,
        workspace_root: str,
        *,
        output_directory: str = "",
        hash_: str = "",
        executor: CommandExecutor | None = None,
        os_name: str | None = None,
    ) -> None:
        self.workspace_root = workspace_root
        self.output_directory = output_directory or os.path.join(
            workspace_root, ".nx", "cache",
        )
        self.hash = hash_
        self.executor = executor or LocalExecutor()
        self.os_name = os_name

    def command_for(self, entry_script: str | Path) -> list[str]:
        cmd = [
            str(entry_script),
            CREATE_NODES_TASK,
            "--outputDirectory", self.output_directory,
            "--workspaceRoot", self.workspace_root,
        ]
        if self.hash:
            cmd += ["--hash", self.hash]
        return cmd

    def get_create_nodes_lines(self, entry_script: str | Path) -> list[str]:
        """执行 createNodes，返回 stdout 中的非空行

        异常:
            AggregateCreateNodesError: 进程无法启动或退出码非零
        """
        script = str(entry_script)
        if not has_build_file(script):
            logger.warning(
                "入口脚本 %s 旁未找到构建文件 (build.gradle / build.gradle.kts)，"
                "请先在构建中应用 createNodes 插件", script,
                extra={"entry_script": script},
            )
            return []

        cmd = self.command_for(script)
        logger.info("执行: %s", " ".join(cmd), extra={"entry_script": script})
        try:
            result = self.executor.execute(cmd, cwd=str(Path(script).parent))
        except OSError as e:
            raise self._invocation_error(script, str(e)) from e
        if not result.success:
            detail = (result.stderr or result.stdout).strip()[:500]
            raise self._invocation_error(script, f"rc={result.returncode} {detail}")

        return [
            line for line in result.stdout.split(newline_separator(self.os_name))
            if line.strip()
        ]

    def populate_nodes(self, entry_scripts: list[str]) -> GraphReport:
        """逐个入口脚本调用并合并产物

        异常:
            AggregateCreateNodesError: 至少一个入口脚本失败，partial 为已合并的报告
        """
        report = GraphReport()
        errors: list[tuple[str, Exception]] = []
        for script in entry_scripts:
            try:
                lines = self.get_create_nodes_lines(script)
                for artifact in self.artifact_paths(lines):
                    report.merge(self._read_artifact(script, artifact))
            except AggregateCreateNodesError as e:
                errors.extend(e.errors)
            except BridgeError as e:
                errors.append((script, e))

        logger.info(
            "图产物合并完成: %d 个节点, %d 条依赖, %d 个入口脚本失败",
            len(report.nodes), len(report.dependencies), len(errors),
        )
        if errors:
            raise AggregateCreateNodesError(errors, partial=report)
        return report

    @staticmethod
    def artifact_paths(lines: list[str]) -> list[str]:
        return [line.strip() for line in lines if line.strip().endswith(ARTIFACT_SUFFIX)]

    def _read_artifact(self, script: str, artifact: str) -> GraphReport:
        try:
            return load_report(artifact)
        except (OSError, json.JSONDecodeError, KeyError, TypeError, AttributeError) as e:
            raise BridgeError(
                f"无法读取 {script} 生成的图产物 {artifact}: {e}", entry_script=script,
            ) from e

    @staticmethod
    def _invocation_error(script: str, detail: str) -> AggregateCreateNodesError:
        error = BridgeError(
            f"无法通过 {script} 执行 '{CREATE_NODES_TASK}' 任务。"
            f"请确认构建中已应用 createNodes 插件并且入口脚本可执行。{detail}",
            entry_script=script,
        )
        return AggregateCreateNodesError([(script, error)])
