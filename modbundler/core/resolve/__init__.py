"""搜索串解析模块

- lockfile.py: composer.lock 读取与元包目录合成
- paths.py: 搜索串展开为源目录
- descriptor.py: 源目录分类（库 / 模块 / 元包）
"""

from modbundler.core.resolve.descriptor import DescriptorResolver
from modbundler.core.resolve.lockfile import LockManifest, compile_wildcard
from modbundler.core.resolve.paths import PathResolver

__all__ = [
    "DescriptorResolver",
    "LockManifest",
    "PathResolver",
    "compile_wildcard",
]
