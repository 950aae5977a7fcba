"""模块打包编排

把 Composer vendor 目录中的 Magento 模块打包为 ZIP 制品。某些场景下模块必须
通过 app/code 安装，即使它只提供了 Composer 安装方式；本工具把一个或多个
Composer 包打成可直接解压到应用根目录的归档，或打成 Composer artifact 仓库可用的包。

流程（每次 bundle() 调用）:
  1. PathResolver 把每个搜索串展开为 0..N 个源目录
  2. DescriptorResolver 对每个源目录分类，生成 pending 记录
  3. BundleBuilder 一次性写出全部归档
  4. 全部记录统一迁移为成功或失败（同一批次共享一个终态）

用法:
    from modbundler.core.bundler import Bundler
    from modbundler.core.models import Behavior, OutputKind

    report = Bundler("/var/www/magento").bundle(
        ["acme/*", "vendor/other/module"],
        output_path="/tmp/bundles",
        behavior=Behavior.SINGLE,
    )
    for record in report:
        print(record.name, record.archive_path, record.success)
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from pathlib import Path

from modbundler.core.bundle.builder import BundleBuilder, effective_behavior
from modbundler.core.bundle.walker import compile_excludes
from modbundler.core.config import Config, get_config
from modbundler.core.exceptions import BundlerError, ConfigError, PackageNotFoundError
from modbundler.core.models import (
    Behavior,
    BundleReport,
    ManifestEntry,
    OutcomeRecord,
    OutputKind,
)
from modbundler.core.resolve.descriptor import DescriptorResolver
from modbundler.core.resolve.lockfile import LockManifest
from modbundler.core.resolve.paths import PathResolver

logger = logging.getLogger(__name__)

WARNING_MISSING_VENDOR_PATH = "The Composer vendor directory was not found in the given base path."


def failure_message(error: BundlerError) -> str:
    """失败记录的消息: 异常信息 + 可选的状态码"""
    message = str(error)
    status = getattr(error, "status", 0)
    if status:
        message += f" (code {status})"
    return message


class Bundler:
    """打包编排器"""

    def __init__(self, base_path: str = "", config: Config | None = None) -> None:
        self.config = config or get_config()
        raw = base_path or self.config.base_path
        self.base_path = Path(raw.rstrip("/") or "/")
        self.warnings: list[str] = []
        self._check_base_path()

    def _check_base_path(self) -> None:
        vendor = self.base_path / self.config.vendor_dir
        if not vendor.exists():
            logger.warning("%s (%s)", WARNING_MISSING_VENDOR_PATH, vendor)
            self.warnings.append(WARNING_MISSING_VENDOR_PATH)

    def bundle(
        self,
        packages: Iterable[str],
        output_path: str = "",
        behavior: Behavior | int = Behavior.INDIVIDUAL,
        output_kind: OutputKind | int = OutputKind.NATIVE,
        exclude: Iterable[str] | None = None,
    ) -> BundleReport:
        """打包给定的包，返回按发现顺序排列的报告

        参数:
            packages: 包名、搜索串或路径
            output_path: 归档输出目录
            behavior: 1 = 每包一个归档, 2 = 单一归档
            output_kind: 1 = Magento 目录结构, 2 = Composer 制品
            exclude: 排除规则（正则，匹配包内相对路径）

        异常:
            PackageNotFoundError: 搜索串无匹配，或源目录无法识别（不会生成任何归档）
            ConfigError: 参数无效
        """
        behavior, output_kind = self._validate(behavior, output_kind)
        excludes = compile_excludes(
            list(exclude) if exclude is not None else self.config.exclude,
        )
        report = BundleReport(notices=list(self.warnings))

        lock = LockManifest(
            self.base_path / self.config.lock_file, self.config.manifest_file,
        )
        _, notice = effective_behavior(behavior, output_kind)
        if notice:
            report.notices.append(notice)

        with lock:
            manifest = self._collect(packages, output_kind, lock)
            builder = BundleBuilder(
                Path(output_path or self.config.output_path),
                archive_prefix=self.config.archive_prefix,
                excludes=excludes,
            )
            try:
                built = builder.build(manifest, behavior, output_kind)
            except BundlerError as e:
                logger.error("归档失败: %s", e)
                message = failure_message(e)
                report.records = [entry.record.failed(message) for entry in manifest]
            else:
                report.records = [
                    entry.record.archived(path).succeeded()
                    for entry, path in zip(manifest, built.archive_paths)
                ]

        return report

    @staticmethod
    def _validate(
        behavior: Behavior | int, output_kind: OutputKind | int,
    ) -> tuple[Behavior, OutputKind]:
        try:
            return Behavior(behavior), OutputKind(output_kind)
        except ValueError as e:
            raise ConfigError(f"无效的打包参数: {e}") from e

    def _collect(
        self, packages: Iterable[str], output_kind: OutputKind, lock: LockManifest,
    ) -> list[ManifestEntry]:
        """展开并分类全部搜索串，生成归档清单"""
        paths = PathResolver(self.base_path, lock=lock, vendor_dir=self.config.vendor_dir)
        descriptors = DescriptorResolver(
            output_kind,
            manifest_file=self.config.manifest_file,
            module_descriptor=self.config.module_descriptor,
        )

        manifest: list[ManifestEntry] = []
        for search in packages:
            sources = paths.expand(search)
            if not sources:
                raise PackageNotFoundError.for_search(search)

            for source in sources:
                descriptor = descriptors.classify(source)
                if not descriptor.resolved:
                    raise PackageNotFoundError.for_path(str(source))
                if descriptor.skip:
                    logger.info("跳过元包 '%s' (%s)", descriptor.name, source)
                    continue
                record = OutcomeRecord.pending(
                    search, source, descriptor, warning=" ".join(self.warnings),
                )
                manifest.append(ManifestEntry(source=source, descriptor=descriptor, record=record))

        return manifest
