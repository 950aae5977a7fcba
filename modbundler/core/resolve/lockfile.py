"""composer.lock 清单读取

元包 (metapackage) 只登记在 lock 文件里，不会出现在 vendor/ 下。
为了让后续分类与归档流程统一处理，这里为匹配到的元包合成一个临时目录，
目录中只包含根据 lock 条目重建的 composer.json。
"""

from __future__ import annotations

import logging
import re
import shutil
import tempfile
from pathlib import Path
from typing import Any

from modbundler.utils.json_io import dump_json, load_json

logger = logging.getLogger(__name__)

METAPACKAGE_TYPE = "metapackage"


def compile_wildcard(pattern: str) -> re.Pattern[str]:
    """把包名通配串编译为正则: 其余字符全部转义，`*` 匹配一个或多个任意字符"""
    return re.compile(re.escape(pattern).replace(r"\*", ".+"))


def short_name(package_name: str) -> str:
    """去掉 vendor 段: "acme/foo" -> "foo" """
    return package_name.split("/", 1)[-1]


class LockManifest:
    """lock 文件视图 + 合成元包目录的生命周期管理

    用作上下文管理器时，退出时自动删除所有合成目录。
    """

    def __init__(self, lock_path: Path, manifest_file: str = "composer.json") -> None:
        self.lock_path = lock_path
        self.manifest_file = manifest_file
        self._packages: list[dict[str, Any]] | None = None
        self._synthesized: dict[str, Path] = {}
        self._tmp_root: Path | None = None

    def __enter__(self) -> LockManifest:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.cleanup()

    @property
    def packages(self) -> list[dict[str, Any]]:
        """lock 文件中的包条目（首次访问时加载）"""
        if self._packages is None:
            data = load_json(self.lock_path)
            entries = data.get("packages")
            if not isinstance(entries, list):
                entries = []
            self._packages = [e for e in entries if isinstance(e, dict)]
            logger.debug("已加载 lock 文件 %s: %d 个条目", self.lock_path, len(self._packages))
        return self._packages

    def find_metapackages(self, search: str) -> list[dict[str, Any]]:
        """返回名称匹配通配串的元包条目

        完整包名或去掉 vendor 段后的短名任一匹配即可，
        与 vendor/<search> 和 vendor/*/<search> 两种目录形式对应。
        """
        pattern = compile_wildcard(search)
        matches = []
        for entry in self.packages:
            name = entry.get("name")
            if entry.get("type") != METAPACKAGE_TYPE or not isinstance(name, str):
                continue
            if pattern.fullmatch(name) or pattern.fullmatch(short_name(name)):
                matches.append(entry)
        return matches

    def metapackage_paths(self, search: str) -> list[Path]:
        """为匹配到的元包合成目录，返回目录路径列表"""
        return [self._synthesize(entry) for entry in self.find_metapackages(search)]

    def _synthesize(self, entry: dict[str, Any]) -> Path:
        name = entry["name"]
        if name in self._synthesized:
            return self._synthesized[name]

        if self._tmp_root is None:
            self._tmp_root = Path(tempfile.mkdtemp(prefix="modbundler-meta-"))
        package_dir = self._tmp_root / name.replace("/", "__")
        package_dir.mkdir(parents=True, exist_ok=True)
        dump_json(package_dir / self.manifest_file, entry)

        self._synthesized[name] = package_dir
        logger.info("已从 lock 文件合成元包目录: %s -> %s", name, package_dir)
        return package_dir

    def cleanup(self) -> None:
        """删除所有合成目录"""
        if self._tmp_root is not None:
            shutil.rmtree(self._tmp_root, ignore_errors=True)
            logger.debug("已清理元包临时目录: %s", self._tmp_root)
        self._tmp_root = None
        self._synthesized.clear()
