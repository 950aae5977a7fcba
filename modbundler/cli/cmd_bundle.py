"""CLI — 打包命令"""

from __future__ import annotations

import os
import sys
from pathlib import Path

import click

from modbundler.core.bundler import Bundler
from modbundler.core.config import init_config
from modbundler.core.exceptions import BundlerError
from modbundler.core.models import Behavior, BundleReport, OutputKind


def register(group: click.Group) -> None:
    group.add_command(bundle)


def _print_report(report: BundleReport) -> bool:
    """输出打包报告，返回是否存在失败记录"""
    for notice in report.notices:
        click.echo(f"Notice: {notice}")

    if not report.records:
        click.echo("No packages bundled.")
        return False

    has_error = False
    for record in report:
        if record.success:
            click.echo(
                f"→ Bundled package '{record.name}' into {Path(record.archive_path).name}"
            )
            if record.message:
                click.echo(record.message)
        else:
            click.echo(f"→ Failed to bundle package: {record.message}")
            has_error = True
    click.echo()
    return has_error


@click.command()
@click.option(
    "--package", "packages", multiple=True, required=True,
    help="包搜索串，可为绝对路径、相对路径、包名或通配串（可多次指定）",
)
@click.option("--app-root", default=None, help="Magento 应用根目录，默认当前目录")
@click.option("--output-path", default=None, help="归档输出目录，默认当前目录")
@click.option("--exclude", multiple=True, help="排除的文件路径正则（可多次指定）")
@click.option("--single-bundle", is_flag=True, help="所有匹配的包打进同一个归档")
@click.option("--composer-artifact", is_flag=True, help="输出 Composer 制品而非 Magento 目录结构")
@click.option("--config", "-c", "config_path", default="configs/bundler.yml", help="配置文件路径")
def bundle(
    packages: tuple[str, ...], app_root: str | None, output_path: str | None,
    exclude: tuple[str, ...], single_bundle: bool, composer_artifact: bool,
    config_path: str,
) -> None:
    """把 Composer vendor 中的模块打包为 ZIP 归档"""
    cfg = init_config(config_path)
    try:
        bundler = Bundler(app_root or cfg.base_path or os.getcwd(), config=cfg)
        report = bundler.bundle(
            list(packages),
            output_path=output_path or cfg.output_path,
            behavior=Behavior.SINGLE if single_bundle else Behavior.INDIVIDUAL,
            output_kind=OutputKind.PACKAGE_ARTIFACT if composer_artifact else OutputKind.NATIVE,
            exclude=list(exclude) if exclude else None,
        )
    except BundlerError as e:
        click.echo(str(e), err=True)
        sys.exit(1)

    if _print_report(report):
        sys.exit(1)
