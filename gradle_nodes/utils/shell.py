"""Shell 命令执行工具 — 统一子进程调用

通过 CommandExecutor 协议抽象子进程执行，Process Bridge 调用 gradlew 时
通过它启动原生构建工具，测试时可注入 fake 实现，无需 patch subprocess。
"""

from __future__ import annotations

import logging
import platform
import subprocess
from dataclasses import dataclass
from typing import Protocol

logger = logging.getLogger(__name__)


def is_windows(os_name: str | None = None) -> bool:
    """os_name 默认取当前系统（platform.system()）"""
    return (os_name or platform.system()).lower().startswith("win")


# =========================================================================
# 命令执行结果
# =========================================================================

@dataclass
class CommandResult:
    """命令执行结果（与 subprocess 解耦）"""

    returncode: int
    stdout: str
    stderr: str

    @property
    def success(self) -> bool:
        return self.returncode == 0


# =========================================================================
# 命令执行器协议
# =========================================================================

class CommandExecutor(Protocol):
    """命令执行器协议，抽象子进程调用

    进程无法启动时实现应抛出 OSError；非零退出码通过 CommandResult 返回。
    """

    def execute(
        self,
        cmd: list[str],
        *,
        cwd: str = ".",
        env: dict[str, str] | None = None,
    ) -> CommandResult:
        """执行命令并返回结果"""
        ...


# =========================================================================
# 默认实现: 本地进程执行器
# =========================================================================

class LocalExecutor:
    """本地命令执行器（默认实现，不设超时，等待子进程结束）"""

    def execute(
        self,
        cmd: list[str],
        *,
        cwd: str = ".",
        env: dict[str, str] | None = None,
    ) -> CommandResult:
        logger.debug("执行命令: %s (cwd=%s)", " ".join(cmd), cwd)
        r = subprocess.run(
            cmd, capture_output=True, text=True,
            cwd=cwd, env=env, check=False,
        )
        return CommandResult(
            returncode=r.returncode,
            stdout=r.stdout,
            stderr=r.stderr,
        )
