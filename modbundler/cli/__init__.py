"""modbundler 命令行接口

CLI 按领域拆分为子模块，每个模块注册自己的命令到 main group。
"""

import os

import click

from modbundler import __version__
from modbundler.utils.logger import setup_logging


@click.group()
@click.version_option(version=__version__)
def main() -> None:
    """module-bundler - 将 Composer vendor 中的 Magento 模块打包为 ZIP 制品"""
    setup_logging(
        level=os.getenv("MODBUNDLER_LOG_LEVEL", "WARNING"),
        json_output=os.getenv("MODBUNDLER_LOG_JSON", "") == "1",
    )


# 注册各领域子命令
from modbundler.cli.cmd_bundle import register as _reg_bundle  # noqa: E402

_reg_bundle(main)
