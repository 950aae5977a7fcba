"""搜索串展开

尝试的候选路径（全部尝试，存在的全部保留，最后去重）:
  1. 原样:        /path/to/vendor/acme/foo 或相对当前目录
  2. 相对应用根:  vendor/acme/foo
  3. 包名:        acme/foo -> <base>/vendor/acme/foo
  4. 通配:        acme/* 或 foo-* -> <base>/vendor/<search>, <base>/vendor/*/<search>
  5. lock 回退:   通配串匹配到的元包（只存在于 composer.lock）
"""

from __future__ import annotations

import glob
import logging
import os
from pathlib import Path

from modbundler.core.resolve.lockfile import LockManifest

logger = logging.getLogger(__name__)

_GLOB_CHARS = ("*", "?", "[")


def has_wildcard(search: str) -> bool:
    return "*" in search


def _has_glob_magic(path: str) -> bool:
    return any(c in path for c in _GLOB_CHARS)


def _absolute(path: str | Path) -> Path:
    """绝对化并规范化，不解析符号链接"""
    return Path(os.path.normpath(os.path.abspath(path)))


class PathResolver:
    """把用户搜索串展开为去重后的源目录列表（保持发现顺序）"""

    def __init__(
        self,
        base_path: Path,
        lock: LockManifest | None = None,
        vendor_dir: str = "vendor",
    ) -> None:
        self.base_path = base_path
        self.vendor_path = base_path / vendor_dir
        self.lock = lock

    def candidates(self, search: str) -> list[str]:
        """按尝试顺序生成候选路径（可能含通配符）"""
        native = search.replace("/", os.sep)
        paths = [
            search,
            str(self.base_path / search.lstrip("/" + os.sep)),
            str(self.vendor_path / native),
        ]
        if has_wildcard(search):
            paths.append(str(self.vendor_path / native))
            paths.append(str(self.vendor_path / "*" / native))
        return paths

    def expand(self, search: str) -> list[Path]:
        if not search:
            return []

        found: list[Path] = []
        for candidate in self.candidates(search):
            if os.path.exists(candidate):
                found.append(_absolute(candidate))
            elif _has_glob_magic(candidate):
                found.extend(
                    _absolute(m) for m in sorted(glob.glob(candidate)) if os.path.isdir(m)
                )

        if has_wildcard(search) and self.lock is not None:
            found.extend(_absolute(p) for p in self.lock.metapackage_paths(search))

        unique = list(dict.fromkeys(found))
        logger.debug("搜索 '%s' 命中 %d 个路径: %s", search, len(unique), unique)
        return unique
