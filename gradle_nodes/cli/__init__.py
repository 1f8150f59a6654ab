"""gradle-nodes 命令行接口

CLI 按领域拆分为子模块，每个模块注册自己的命令到 main group:
  - cmd_create_nodes: 原生侧 createNodes（写出图产物并打印路径）
  - cmd_graph: 宿主侧 nodes / deps（调用入口脚本、投影、输出项目配置）
"""

import click

from gradle_nodes import __version__
from gradle_nodes.utils.logger import setup_logging_from_env


def _parse_kv_pairs(pairs: tuple[str, ...]) -> dict[str, str]:
    """解析 key=value 参数对"""
    result: dict[str, str] = {}
    for p in pairs:
        if "=" in p:
            k, v = p.split("=", 1)
            result[k.strip()] = v.strip()
    return result


@click.group()
@click.version_option(version=__version__)
def main() -> None:
    """gradle-nodes - 从 Gradle 任务模型提取可缓存的项目图"""
    setup_logging_from_env()


# 注册各领域子命令
from gradle_nodes.cli.cmd_create_nodes import register as _reg_create_nodes  # noqa: E402
from gradle_nodes.cli.cmd_graph import register as _reg_graph  # noqa: E402

_reg_create_nodes(main)
_reg_graph(main)
