"""CLI：杂项命令（配置查看）"""

from __future__ import annotations

import click

from linkpack.core.config import get_config
from linkpack.utils.yaml_io import dump_yaml


def register_commands(main: click.Group) -> None:
    main.add_command(show_config)


@click.command(name="config")
def show_config() -> None:
    """输出当前生效的配置（YAML）"""
    click.echo(dump_yaml(get_config().to_dict()), nl=False)
