"""CLI — createNodes（原生侧图产物生成）"""

from __future__ import annotations

import click

from gradle_nodes.core.build_model import load_build_tree
from gradle_nodes.core.exceptions import ValidationError
from gradle_nodes.extract.emitter import GraphEmitter

DEFAULT_MODEL_FILE = "build-model.yml"


def register(group: click.Group) -> None:
    group.add_command(create_nodes)


@click.command(name="create-nodes")
@click.option("--model", "model", default=DEFAULT_MODEL_FILE, help="构建模型文件路径")
@click.option("--outputDirectory", "output_directory", default="",
              help="产物输出目录，默认 {workspaceRoot}/.nx/cache")
@click.option("--workspaceRoot", "workspace_root", default="", help="工作区根目录，默认当前目录")
@click.option("--hash", "hash_", default="", help="追加到产物文件名的缓存失效后缀")
def create_nodes(model: str, output_directory: str, workspace_root: str, hash_: str) -> None:
    """为构建树生成项目节点和依赖，打印产物路径"""
    try:
        tree = load_build_tree(model)
    except ValidationError as e:
        raise click.ClickException(str(e)) from e
    GraphEmitter(
        tree,
        workspace_root=workspace_root,
        output_directory=output_directory,
        hash_=hash_,
        echo=click.echo,
    ).emit()
