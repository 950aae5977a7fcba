"""核心数据模型

所有核心数据类集中定义。记录类均为不可变值，状态迁移通过返回新对象完成:

    OutcomeRecord.pending() -> .archived(path) -> .succeeded() / .failed(msg)
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum, IntEnum
from pathlib import Path


class Behavior(IntEnum):
    """打包行为"""

    INDIVIDUAL = 1  # 每个包一个归档
    SINGLE = 2      # 所有包共用一个归档


class OutputKind(IntEnum):
    """输出约定"""

    NATIVE = 1            # 按 Magento 目录结构 (app/code, lib)
    PACKAGE_ARTIFACT = 2  # Composer 制品，保持包内相对路径


class DescriptorKind(str, Enum):
    LIBRARY = "library"
    MODULE = "module"
    METAPACKAGE = "metapackage"
    UNRESOLVED = "unresolved"


@dataclass(frozen=True)
class PackageDescriptor:
    """一个源目录的分类结果

    install_path 使用 "/" 分隔；为空表示文件保持包内相对路径。
    """

    kind: DescriptorKind
    name: str
    install_path: str = ""
    message: str = ""
    skip: bool = False  # Native 输出下的元包不参与归档

    @property
    def resolved(self) -> bool:
        return self.kind != DescriptorKind.UNRESOLVED


@dataclass(frozen=True)
class OutcomeRecord:
    """一个 (搜索串, 源路径) 的处理结果"""

    key: str
    resolved_path: str
    name: str = ""
    install_path: str = ""
    archive_path: str = ""
    success: bool = False
    message: str = ""
    state: str = "pending"  # "pending", "archived", "succeeded", "failed"

    @classmethod
    def pending(
        cls, key: str, resolved_path: str | Path, descriptor: PackageDescriptor,
        warning: str = "",
    ) -> OutcomeRecord:
        """descriptor 没有附带消息时使用 warning 作为记录消息"""
        return cls(
            key=key,
            resolved_path=str(resolved_path),
            name=descriptor.name,
            install_path=descriptor.install_path,
            message=descriptor.message or warning,
        )

    def archived(self, archive_path: str | Path) -> OutcomeRecord:
        return replace(self, archive_path=str(archive_path), state="archived")

    def succeeded(self) -> OutcomeRecord:
        return replace(self, success=True, state="succeeded")

    def failed(self, message: str) -> OutcomeRecord:
        return replace(self, success=False, state="failed", message=message or self.message)

    def to_dict(self) -> dict[str, object]:
        return {
            "key": self.key,
            "path": self.resolved_path,
            "bundle": self.archive_path,
            "state": self.success,
            "name": self.name,
            "message": self.message,
        }


@dataclass(frozen=True)
class ManifestEntry:
    """交给 BundleBuilder 的一条归档任务"""

    source: Path
    descriptor: PackageDescriptor
    record: OutcomeRecord


@dataclass
class BundleReport:
    """一次 bundle() 调用的结果，按发现顺序排列

    可以像记录列表一样迭代、取长度和下标访问。
    """

    records: list[OutcomeRecord] = field(default_factory=list)
    notices: list[str] = field(default_factory=list)

    @property
    def success(self) -> bool:
        return all(r.success for r in self.records)

    def __iter__(self):
        return iter(self.records)

    def __len__(self) -> int:
        return len(self.records)

    def __getitem__(self, index: int) -> OutcomeRecord:
        return self.records[index]
