"""modbundler - 将 Composer vendor 目录中的模块打包为 ZIP 制品"""

__version__ = "1.0.0"
