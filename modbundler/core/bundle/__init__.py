"""归档构建模块

- walker.py: 深度优先遍历包目录（支持排除规则）
- builder.py: ZIP 归档构建与合并
"""

from modbundler.core.bundle.builder import BuildResult, BundleBuilder
from modbundler.core.bundle.walker import compile_excludes, iter_tree

__all__ = [
    "BuildResult",
    "BundleBuilder",
    "compile_excludes",
    "iter_tree",
]
