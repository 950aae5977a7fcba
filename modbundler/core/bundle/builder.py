"""ZIP 归档构建

打包行为:
  - INDIVIDUAL: 每个条目一个归档，文件名取条目名称 <name>.zip
  - SINGLE:     所有条目共用一个归档，文件名为 <prefix><生成ID>.zip

PACKAGE_ARTIFACT 输出时强制使用 INDIVIDUAL，全部写完后再做一次合并:
把各个归档按文件名放进一个新的外层归档，删除中间归档，
所有条目的归档位置都改为外层归档。

每个文件在归档中的路径 = 源目录前缀替换为条目的 install_path；
install_path 为空时保持包内相对路径。
"""

from __future__ import annotations

import logging
import re
import uuid
import zipfile
from collections.abc import Sequence
from dataclasses import dataclass, field
from pathlib import Path

from modbundler.core.bundle.walker import iter_tree
from modbundler.core.exceptions import ArchiveCreationError
from modbundler.core.models import Behavior, ManifestEntry, OutputKind

logger = logging.getLogger(__name__)

NOTICE_BEHAVIOR_OVERRIDE = (
    "Composer artifacts are always combined into a single bundle; "
    "packages are archived individually first."
)


@dataclass
class BuildResult:
    """一次归档构建的结果，archive_paths 与输入条目一一对应"""

    archive_paths: list[Path] = field(default_factory=list)


def effective_behavior(behavior: Behavior, output_kind: OutputKind) -> tuple[Behavior, str]:
    """计算实际打包行为，返回 (行为, 提示信息)"""
    if output_kind == OutputKind.PACKAGE_ARTIFACT and behavior == Behavior.SINGLE:
        return Behavior.INDIVIDUAL, NOTICE_BEHAVIOR_OVERRIDE
    return behavior, ""


class BundleBuilder:
    """根据条目清单生成 ZIP 归档"""

    def __init__(
        self,
        output_path: Path,
        archive_prefix: str = "bundle_",
        excludes: Sequence[re.Pattern[str]] = (),
    ) -> None:
        self.output_path = output_path
        self.archive_prefix = archive_prefix
        self.excludes = excludes

    def generate_id(self) -> str:
        """进程内唯一的归档名（基于时间的 UUID）"""
        return f"{self.archive_prefix}{uuid.uuid1().hex}"

    def build(
        self,
        manifest: Sequence[ManifestEntry],
        behavior: Behavior = Behavior.INDIVIDUAL,
        output_kind: OutputKind = OutputKind.NATIVE,
    ) -> BuildResult:
        """写出全部归档

        异常:
            ArchiveCreationError: 归档无法创建或写入，剩余条目不再处理
        """
        result = BuildResult()
        behavior, notice = effective_behavior(behavior, output_kind)
        if notice:
            logger.warning(notice)

        try:
            self.output_path.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            # 目录创建失败时由后续打开归档报出具体错误
            logger.warning("无法创建输出目录 %s: %s", self.output_path, e)

        shared_name = self.generate_id() if behavior == Behavior.SINGLE else ""
        opened: set[Path] = set()
        written: set[tuple[Path, Path]] = set()

        for entry in manifest:
            name = entry.descriptor.name if behavior == Behavior.INDIVIDUAL else shared_name
            archive = self.output_path / f"{name}.zip"
            result.archive_paths.append(archive)
            # 多个搜索串命中同一源目录时只写一次
            if (archive, entry.source) in written:
                logger.debug("跳过重复条目 %s -> %s", entry.source, archive.name)
                continue
            self._write_entry(archive, name, entry, append=archive in opened)
            opened.add(archive)
            written.add((archive, entry.source))

        if output_kind == OutputKind.PACKAGE_ARTIFACT and result.archive_paths:
            combined = self.combine(result.archive_paths)
            result.archive_paths = [combined] * len(result.archive_paths)

        return result

    def _write_entry(
        self, archive: Path, name: str, entry: ManifestEntry, append: bool,
    ) -> None:
        install_path = entry.descriptor.install_path.strip("/")
        count = 0
        try:
            with self._open(archive, name, "a" if append else "w") as zf:
                if install_path:
                    zf.write(entry.source, install_path)
                for item in iter_tree(entry.source, self.excludes):
                    zf.write(item, self.archive_name(item, entry.source, install_path))
                    count += 1
        except OSError as e:
            raise ArchiveCreationError(name, status=e.errno or 0) from e
        logger.info(
            "已归档 %s -> %s (%d 项, 根路径 %s)",
            entry.source, archive.name, count, install_path or "<包内路径>",
        )

    @staticmethod
    def archive_name(item: Path, source: Path, install_path: str) -> str:
        """源文件在归档中的路径: 源目录前缀替换为 install_path"""
        relative = item.relative_to(source).as_posix()
        return f"{install_path}/{relative}" if install_path else relative

    @staticmethod
    def _open(archive: Path, name: str, mode: str) -> zipfile.ZipFile:
        try:
            return zipfile.ZipFile(archive, mode, compression=zipfile.ZIP_DEFLATED)
        except (OSError, zipfile.BadZipFile) as e:
            status = getattr(e, "errno", None) or 0
            logger.error("无法打开归档 %s: %s", archive, e)
            raise ArchiveCreationError(name, status=status) from e

    def combine(self, archives: Sequence[Path]) -> Path:
        """把多个归档按文件名放入一个新的外层归档，并删除原归档"""
        unique = list(dict.fromkeys(archives))
        name = self.generate_id()
        combined = self.output_path / f"{name}.zip"

        try:
            with self._open(combined, name, "w") as zf:
                for archive in unique:
                    zf.write(archive, archive.name)
        except OSError as e:
            raise ArchiveCreationError(name, status=e.errno or 0) from e

        for archive in unique:
            archive.unlink(missing_ok=True)
        logger.info("已合并 %d 个归档 -> %s", len(unique), combined.name)
        return combined
