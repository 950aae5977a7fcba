"""源目录分类

按顺序检查，命中即返回:
  1. 元包:   composer.json 中 type == "metapackage"
  2. 库:     type == "library" 且 autoload.psr-4 非空
  3. 模块:   etc/module.xml 中 <module name="Vendor_Module">
都不命中时返回 UNRESOLVED，由调用方决定如何处理。

任一检查读取或解析失败只视为未命中，继续下一项检查。
"""

from __future__ import annotations

import logging
import xml.etree.ElementTree as ET
from pathlib import Path
from typing import Any

from modbundler.core.models import DescriptorKind, OutputKind, PackageDescriptor
from modbundler.core.resolve.lockfile import METAPACKAGE_TYPE, short_name
from modbundler.utils.json_io import load_json

logger = logging.getLogger(__name__)

WARNING_LIB_PATH_DETECTED = (
    "Lib path detected. It must be registered with your autoloader before use."
)

UNRESOLVED = PackageDescriptor(kind=DescriptorKind.UNRESOLVED, name="")


class DescriptorResolver:
    """根据磁盘元数据判断源目录类型，并计算名称与安装路径"""

    def __init__(
        self,
        output_kind: OutputKind = OutputKind.NATIVE,
        manifest_file: str = "composer.json",
        module_descriptor: str = "etc/module.xml",
    ) -> None:
        self.output_kind = output_kind
        self.manifest_file = manifest_file
        self.module_descriptor = module_descriptor

    @property
    def native(self) -> bool:
        return self.output_kind == OutputKind.NATIVE

    def classify(self, path: Path) -> PackageDescriptor:
        manifest = load_json(path / self.manifest_file)
        for check in (self._metapackage, self._library, self._module):
            descriptor = check(path, manifest)
            if descriptor is not None:
                logger.info(
                    "分类: %s -> %s '%s' (%s)",
                    path, descriptor.kind.value, descriptor.name,
                    descriptor.install_path or "<包内路径>",
                )
                return descriptor
        logger.debug("未识别的包目录: %s", path)
        return UNRESOLVED

    def _metapackage(self, path: Path, manifest: dict[str, Any]) -> PackageDescriptor | None:
        if manifest.get("type") != METAPACKAGE_TYPE:
            return None
        name = manifest.get("name")
        if not isinstance(name, str) or not name:
            return None
        return PackageDescriptor(
            kind=DescriptorKind.METAPACKAGE,
            name=short_name(name),
            skip=self.native,
        )

    def _library(self, path: Path, manifest: dict[str, Any]) -> PackageDescriptor | None:
        if manifest.get("type") != "library":
            return None
        autoload = manifest.get("autoload")
        psr4 = autoload.get("psr-4") if isinstance(autoload, dict) else None
        if not isinstance(psr4, dict) or not psr4:
            return None

        namespace = str(next(iter(psr4))).strip("\\")
        segments = [s for s in namespace.split("\\") if s]

        if not self.native:
            package_name = manifest.get("name")
            if isinstance(package_name, str) and package_name:
                return PackageDescriptor(kind=DescriptorKind.LIBRARY, name=short_name(package_name))
            if not segments:
                return None
            return PackageDescriptor(kind=DescriptorKind.LIBRARY, name=segments[-1])

        # 根命名空间 ("") 无法映射到 lib/ 下的目录
        if not segments:
            return None
        return PackageDescriptor(
            kind=DescriptorKind.LIBRARY,
            name=segments[-1],
            install_path="lib/" + "/".join(segments),
            message=WARNING_LIB_PATH_DETECTED,
        )

    def _module(self, path: Path, manifest: dict[str, Any]) -> PackageDescriptor | None:
        descriptor_path = path / self.module_descriptor
        if not descriptor_path.is_file():
            return None

        module_name = self._read_module_name(descriptor_path)
        if not module_name or "_" not in module_name:
            return None
        vendor, module = module_name.split("_", 1)
        if not vendor or not module:
            return None

        if self.native:
            return PackageDescriptor(
                kind=DescriptorKind.MODULE,
                name=module_name,
                install_path=f"app/code/{vendor}/{module}",
            )

        package_name = manifest.get("name")
        if isinstance(package_name, str) and package_name:
            module_name = short_name(package_name)
        return PackageDescriptor(kind=DescriptorKind.MODULE, name=module_name)

    @staticmethod
    def _read_module_name(descriptor_path: Path) -> str:
        """读取 module.xml 中第一个 <module> 元素的 name 属性"""
        try:
            tree = ET.parse(descriptor_path)
        except (ET.ParseError, OSError) as e:
            logger.debug("忽略无法解析的模块描述: %s (%s)", descriptor_path, e)
            return ""
        element = next(tree.getroot().iter("module"), None)
        if element is None:
            return ""
        return element.get("name", "")
