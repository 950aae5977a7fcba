"""包目录遍历"""

from __future__ import annotations

import re
from collections.abc import Iterable, Iterator, Sequence
from pathlib import Path

from modbundler.core.exceptions import ConfigError


def compile_excludes(patterns: Iterable[str] | None) -> list[re.Pattern[str]]:
    """编译排除规则，非法正则报 ConfigError"""
    compiled = []
    for pattern in patterns or ():
        try:
            compiled.append(re.compile(pattern))
        except re.error as e:
            raise ConfigError(f"无效的排除规则 '{pattern}': {e}") from e
    return compiled


def is_excluded(relative: str, excludes: Sequence[re.Pattern[str]]) -> bool:
    return any(p.search(relative) for p in excludes)


def iter_tree(
    root: Path, excludes: Sequence[re.Pattern[str]] = (),
) -> Iterator[Path]:
    """深度优先列出 root 下的所有文件和目录（不含 root 本身）

    同级按名称排序，目录先于其内容输出。排除规则匹配的是相对 root 的
    POSIX 路径；被排除的目录连同其子树一起跳过。
    """
    yield from _walk(root, root, excludes)


def _walk(
    root: Path, current: Path, excludes: Sequence[re.Pattern[str]],
) -> Iterator[Path]:
    for item in sorted(current.iterdir(), key=lambda p: p.name):
        if excludes and is_excluded(item.relative_to(root).as_posix(), excludes):
            continue
        yield item
        # 不跟随目录符号链接，避免循环
        if item.is_dir() and not item.is_symlink():
            yield from _walk(root, item, excludes)
