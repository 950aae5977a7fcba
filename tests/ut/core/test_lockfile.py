"""composer.lock 读取与元包目录合成测试"""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from conftest import make_lock, write_json
from modbundler.core.resolve.lockfile import LockManifest, compile_wildcard, short_name


class TestCompileWildcard:
    @pytest.mark.parametrize(("pattern", "name", "expected"), [
        ("acme/*", "acme/meta-all", True),
        ("acme/meta-*", "acme/meta-all", True),
        ("acme/meta-*", "acme/meta-", False),      # * 至少匹配一个字符
        ("meta-*", "acme/meta-all", False),        # fullmatch 整串
        ("acme/*", "other/meta-all", False),
        ("acme.x/*", "acmeXx/pkg", False),         # . 按字面匹配
        ("acme+/*", "acme+/pkg", True),
    ])
    def test_fullmatch(self, pattern: str, name: str, expected: bool) -> None:
        assert bool(compile_wildcard(pattern).fullmatch(name)) is expected


def test_short_name() -> None:
    assert short_name("acme/module-foo") == "module-foo"
    assert short_name("standalone") == "standalone"
    assert short_name("a/b/c") == "b/c"


class TestLockManifest:
    def test_missing_lock_file(self, tmp_path: Path) -> None:
        lock = LockManifest(tmp_path / "composer.lock")
        assert lock.packages == []
        assert lock.metapackage_paths("acme/*") == []

    def test_malformed_lock_file(self, tmp_path: Path) -> None:
        (tmp_path / "composer.lock").write_text("{not json")
        assert LockManifest(tmp_path / "composer.lock").packages == []

    @pytest.mark.parametrize("packages", [5, "x", {"a": 1}, None])
    def test_non_list_packages_is_empty(self, tmp_path: Path, packages) -> None:
        write_json(tmp_path / "composer.lock", {"packages": packages})
        lock = LockManifest(tmp_path / "composer.lock")
        assert lock.packages == []
        assert lock.metapackage_paths("acme/*") == []

    def test_only_metapackages_match(self, tmp_path: Path) -> None:
        make_lock(tmp_path, [
            {"name": "acme/meta-all", "type": "metapackage"},
            {"name": "acme/lib", "type": "library"},
            {"name": "other/meta", "type": "metapackage"},
            "garbage",
        ])
        lock = LockManifest(tmp_path / "composer.lock")
        names = [e["name"] for e in lock.find_metapackages("acme/*")]
        assert names == ["acme/meta-all"]

    def test_short_name_matches_vendorless_search(self, tmp_path: Path) -> None:
        make_lock(tmp_path, [{"name": "acme/meta-all", "type": "metapackage"}])
        lock = LockManifest(tmp_path / "composer.lock")
        assert [e["name"] for e in lock.find_metapackages("meta-*")] == ["acme/meta-all"]

    def test_synthesized_directory_contains_manifest(self, tmp_path: Path) -> None:
        entry = {"name": "acme/meta-all", "type": "metapackage", "version": "1.0.0"}
        make_lock(tmp_path, [entry])

        with LockManifest(tmp_path / "composer.lock") as lock:
            paths = lock.metapackage_paths("acme/*")
            assert len(paths) == 1
            package_dir = paths[0]
            assert [p.name for p in package_dir.iterdir()] == ["composer.json"]
            assert json.loads((package_dir / "composer.json").read_text()) == entry

            # 同一元包只合成一次
            assert lock.metapackage_paths("acme/meta-*") == paths

        assert not package_dir.exists()

    def test_custom_manifest_file_name(self, tmp_path: Path) -> None:
        make_lock(tmp_path, [{"name": "acme/meta", "type": "metapackage"}])
        with LockManifest(tmp_path / "composer.lock", manifest_file="package.json") as lock:
            (package_dir,) = lock.metapackage_paths("acme/*")
            assert (package_dir / "package.json").is_file()
