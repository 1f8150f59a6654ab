"""CLI — 宿主侧项目图命令"""

from __future__ import annotations

import json
from pathlib import Path

import click

from gradle_nodes.cli import _parse_kv_pairs
from gradle_nodes.core.config import DEFAULT_CONFIG_FILE, init_config
from gradle_nodes.core.exceptions import ConfigError
from gradle_nodes.services.nodes_service import NodesService


def register(group: click.Group) -> None:
    group.add_command(nodes)
    group.add_command(deps)


def _service(workspace: str, config: str) -> NodesService:
    config_path = Path(config)
    if not config_path.is_absolute():
        config_path = Path(workspace) / config_path
    try:
        cfg = init_config(config_path)
    except ConfigError as e:
        raise click.ClickException(str(e)) from e
    return NodesService(workspace, config=cfg)


@click.command()
@click.argument("workspace", default=".")
@click.option("--config", "-c", default=DEFAULT_CONFIG_FILE, help="配置文件路径（相对工作区）")
@click.option("--option", "-o", "option", multiple=True,
              help="重命名选项，格式: key=value，如 ciTargetName=test-ci（可多次指定）")
def nodes(workspace: str, config: str, option: tuple[str, ...]) -> None:
    """提取项目节点并按选项投影，输出 JSON"""
    svc = _service(workspace, config)
    options = {**svc.config.plugin_options, **_parse_kv_pairs(option)}
    results = svc.create_nodes(options=options)
    projects: dict = {}
    for _, result in results:
        projects.update(result["projects"])
    click.echo(json.dumps(projects, indent=2, ensure_ascii=False))


@click.command()
@click.argument("workspace", default=".")
@click.option("--config", "-c", default=DEFAULT_CONFIG_FILE, help="配置文件路径（相对工作区）")
def deps(workspace: str, config: str) -> None:
    """输出项目间静态依赖，JSON 格式"""
    svc = _service(workspace, config)
    report = svc.populate()
    click.echo(json.dumps(svc.create_dependencies(report), indent=2, ensure_ascii=False))
