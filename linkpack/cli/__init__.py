"""linkpack 命令行接口

CLI 按领域拆分为子模块，每个模块注册自己的命令到 main group。
"""

import os

import click

from linkpack import __version__
from linkpack.core.config import init_config
from linkpack.utils.logger import setup_logging


@click.group()
@click.version_option(version=__version__)
@click.option("--config", "-c", "config_path", default="configs/default.yml", help="配置文件路径")
def main(config_path: str) -> None:
    """linkpack - 本地包链接与打包准备"""
    setup_logging(
        level=os.getenv("LINKPACK_LOG_LEVEL", "INFO"),
        json_output=os.getenv("LINKPACK_LOG_JSON", "") == "1",
    )
    init_config(config_path)


# 注册各领域子命令
from linkpack.cli.link import register_commands as _reg_link  # noqa: E402
from linkpack.cli.misc import register_commands as _reg_misc  # noqa: E402
from linkpack.cli.repo import register_commands as _reg_repo  # noqa: E402

_reg_link(main)
_reg_repo(main)
_reg_misc(main)
