"""包定位器测试 — URL 与本地目录计算"""

from __future__ import annotations

import os
from pathlib import Path

import pytest

from mason.core.config import Config
from mason.core.exceptions import UnsupportedPlatformError
from mason.core.locator import PackageLocator
from mason.core.models import PackageKind
from mason.core.platform import HostContext


class TestHeaderPackage:
    def test_remote_key_and_url(self, locator: PackageLocator) -> None:
        d = locator.locate("protozero", "1.5.1", PackageKind.HEADER)
        assert d.platform == ""
        assert d.remote_key == "headers/protozero/1.5.1.tar.gz"
        assert d.source_url == (
            "https://s3.amazonaws.com/mason-binaries/headers/protozero/1.5.1.tar.gz"
        )

    def test_dest_dir(self, locator: PackageLocator, tmp_path: Path) -> None:
        d = locator.locate("protozero", "1.5.1", PackageKind.HEADER)
        assert d.dest_dir == os.path.join(
            str(tmp_path), "mason_packages", "headers", "protozero", "1.5.1",
        )


class TestCompiledPackage:
    def test_uses_host_platform(self, locator: PackageLocator, tmp_path: Path) -> None:
        d = locator.locate("cairo", "1.14.8", PackageKind.COMPILED)
        assert d.platform == "linux-x86_64"
        assert d.remote_key == "linux-x86_64/cairo/1.14.8.tar.gz"
        assert d.dest_dir.endswith(os.path.join("linux-x86_64", "cairo", "1.14.8"))

    def test_osx_platform(self, config: Config, tmp_path: Path) -> None:
        loc = PackageLocator(config, HostContext(root=str(tmp_path), platform="osx-x86_64"))
        d = loc.locate("cairo", "1.14.8", PackageKind.COMPILED)
        assert d.source_url.endswith("/osx-x86_64/cairo/1.14.8.tar.gz")

    def test_unsupported_platform(
        self, config: Config, tmp_path: Path, monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        monkeypatch.setattr("mason.core.platform._platform.system", lambda: "Windows")
        loc = PackageLocator(config, HostContext(root=str(tmp_path)))
        # header 包不需要平台
        loc.locate("protozero", "1.5.1", PackageKind.HEADER)
        with pytest.raises(UnsupportedPlatformError, match="Windows"):
            loc.locate("cairo", "1.14.8", PackageKind.COMPILED)


class TestDeterminism:
    def test_same_coordinates_same_paths(self, locator: PackageLocator) -> None:
        a = locator.locate("cairo", "1.14.8", PackageKind.COMPILED)
        b = locator.locate("cairo", "1.14.8", PackageKind.COMPILED)
        assert a == b
        assert a.source_url == b.source_url
        assert a.dest_dir == b.dest_dir

    def test_kind_changes_dest(self, locator: PackageLocator) -> None:
        a = locator.locate("cairo", "1.14.8", PackageKind.COMPILED)
        b = locator.locate("cairo", "1.14.8", PackageKind.HEADER)
        assert a.dest_dir != b.dest_dir

    def test_whitespace_stripped(self, locator: PackageLocator) -> None:
        d = locator.locate("proto zero", "1.5.1 ", PackageKind.HEADER)
        assert d.remote_key == "headers/protozero/1.5.1.tar.gz"
        assert " " not in d.source_url


class TestBucketUrl:
    def test_base_without_trailing_slash(self, tmp_path: Path) -> None:
        cfg = Config(bucket_url="https://mirror.example.com/binaries")
        loc = PackageLocator(cfg, HostContext(root=str(tmp_path), platform="linux-x86_64"))
        d = loc.locate("protozero", "1.5.1", PackageKind.HEADER)
        assert d.source_url == (
            "https://mirror.example.com/binaries/headers/protozero/1.5.1.tar.gz"
        )

    def test_link_root(self, locator: PackageLocator, tmp_path: Path) -> None:
        assert locator.link_root == os.path.join(str(tmp_path), "mason_packages", ".link")
