"""测试共享 fixture — 在 tmp_path 下搭建 Magento 应用根目录

目录结构:

  app/
    composer.lock              acme/module-foo, acme/bar（app_root_with_meta 追加元包 acme/meta-all）
    vendor/
      acme/
        foo/                   Magento 模块 Acme_Foo
          composer.json
          etc/module.xml
          registration.php
          Model/Item.php
        bar/                   PSR-4 库 Acme\\Bar\\
          composer.json
          src/Client.php
"""

from __future__ import annotations

import json
import logging
from pathlib import Path

import pytest

from modbundler.core.config import reset_config

MODULE_XML = """<?xml version="1.0"?>
<config xmlns:xsi="http://www.w3.org/2001/XMLSchema-instance"
        xsi:noNamespaceSchemaLocation="urn:magento:framework:Module/etc/module.xsd">
    <module name="{name}" setup_version="1.0.0"/>
</config>
"""


def write_json(path: Path, data: dict) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(data), encoding="utf-8")
    return path


def make_module(
    root: Path, module_name: str, package_name: str = "", files: dict[str, str] | None = None,
) -> Path:
    """创建一个 Magento 模块目录"""
    root.mkdir(parents=True, exist_ok=True)
    (root / "etc").mkdir(exist_ok=True)
    (root / "etc" / "module.xml").write_text(MODULE_XML.format(name=module_name))
    if package_name:
        write_json(root / "composer.json", {"name": package_name, "type": "magento2-module"})
    for rel, content in (files or {}).items():
        target = root / rel
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(content)
    return root


def make_library(
    root: Path, package_name: str, namespace: str, files: dict[str, str] | None = None,
) -> Path:
    """创建一个 PSR-4 库目录"""
    write_json(root / "composer.json", {
        "name": package_name,
        "type": "library",
        "autoload": {"psr-4": {namespace: "src/"}},
    })
    for rel, content in (files or {}).items():
        target = root / rel
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(content)
    return root


def make_lock(app_root: Path, packages: list[dict]) -> Path:
    return write_json(app_root / "composer.lock", {"packages": packages})


@pytest.fixture(autouse=True)
def _default_config():
    """每个用例使用默认全局配置"""
    reset_config()
    yield
    reset_config()


@pytest.fixture(autouse=True)
def _isolate_logging():
    """CLI 会重新配置根日志器，用例结束后恢复"""
    root = logging.getLogger()
    level = root.level
    yield
    for handler in root.handlers[:]:
        if type(handler) is logging.StreamHandler:
            root.removeHandler(handler)
    root.setLevel(level)


@pytest.fixture()
def app_root(tmp_path: Path) -> Path:
    root = tmp_path / "app"
    vendor = root / "vendor"
    make_module(
        vendor / "acme" / "foo", "Acme_Foo", "acme/module-foo",
        files={"registration.php": "<?php\n", "Model/Item.php": "<?php class Item {}\n"},
    )
    make_library(
        vendor / "acme" / "bar", "acme/bar", "Acme\\Bar\\",
        files={"src/Client.php": "<?php class Client {}\n"},
    )
    make_lock(root, [
        {"name": "acme/module-foo", "type": "magento2-module", "version": "1.0.0"},
        {"name": "acme/bar", "type": "library", "version": "2.1.0"},
    ])
    return root


@pytest.fixture()
def app_root_with_meta(app_root: Path) -> Path:
    """在 lock 文件中追加一个只存在于 lock 的元包"""
    make_lock(app_root, [
        {"name": "acme/module-foo", "type": "magento2-module", "version": "1.0.0"},
        {"name": "acme/bar", "type": "library", "version": "2.1.0"},
        {"name": "acme/meta-all", "type": "metapackage", "version": "1.0.0",
         "require": {"acme/module-foo": "^1.0", "acme/bar": "^2.1"}},
    ])
    return app_root


@pytest.fixture()
def output_dir(tmp_path: Path) -> Path:
    return tmp_path / "out"
