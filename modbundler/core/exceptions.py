"""统一异常体系

所有业务异常继承 BundlerError。CLI 层据此输出友好提示，
编排层据此把归档失败转换为失败记录。
"""

from __future__ import annotations

ERROR_CREATE_ARCHIVE = "Failed to create archive for package: %s"
ERROR_NO_MODULE = "Failed to locate module at path: %s"
ERROR_NO_PACKAGE = "Failed to locate package for search: %s"


class BundlerError(Exception):
    """打包工具基础异常"""

    code: str = "UNKNOWN"

    def __init__(self, message: str) -> None:
        super().__init__(message)


class ConfigError(BundlerError):
    """配置或调用参数无效"""

    code = "CONFIG_ERROR"


class PackageNotFoundError(BundlerError):
    """搜索串没有匹配到任何路径，或路径下找不到任何模块描述"""

    code = "NOT_FOUND"

    def __init__(self, message: str, target: str = "") -> None:
        super().__init__(message)
        self.target = target

    @classmethod
    def for_path(cls, path: str) -> PackageNotFoundError:
        return cls(ERROR_NO_MODULE % path, target=path)

    @classmethod
    def for_search(cls, search: str) -> PackageNotFoundError:
        return cls(ERROR_NO_PACKAGE % search, target=search)


class ArchiveCreationError(BundlerError):
    """归档文件无法创建或写入"""

    code = "ARCHIVE_ERROR"

    def __init__(self, name: str, status: int = 0) -> None:
        super().__init__(ERROR_CREATE_ARCHIVE % name)
        self.name = name
        self.status = status
