"""测试共享 fixture — 内存 tarball + 可编程的 HTTP opener

整体思路:

  make_tarball({...})  ──>  bytes (.tar.gz)
                              │
  StubOpener.routes[url] ─────┘   PackageFetcher(opener=stub)
                                        │
                                  fetch(descriptor) 不触发任何真实网络请求
"""

from __future__ import annotations

import io
import tarfile
import time
from pathlib import Path
from typing import Callable

import pytest

import mason.core.config as cfgmod
from mason.core.config import Config
from mason.core.fetcher import PackageFetcher
from mason.core.locator import PackageLocator
from mason.core.platform import HostContext

BUCKET = "https://s3.amazonaws.com/mason-binaries/"


# =========================================================================
# 归档构造
# =========================================================================


def _build_tarball(files: dict[str, bytes | None], top: str = "package") -> bytes:
    """构造 .tar.gz，所有条目位于 top/ 之下；值为 None 表示目录"""
    buf = io.BytesIO()
    with tarfile.open(fileobj=buf, mode="w:gz") as tar:
        root = tarfile.TarInfo(top)
        root.type = tarfile.DIRTYPE
        root.mode = 0o755
        root.mtime = int(time.time())
        tar.addfile(root)
        for name, data in files.items():
            info = tarfile.TarInfo(f"{top}/{name}")
            info.mtime = int(time.time())
            if data is None:
                info.type = tarfile.DIRTYPE
                info.mode = 0o755
                tar.addfile(info)
            else:
                info.size = len(data)
                info.mode = 0o644
                tar.addfile(info, io.BytesIO(data))
    return buf.getvalue()


@pytest.fixture()
def make_tarball() -> Callable[..., bytes]:
    return _build_tarball


# =========================================================================
# HTTP 桩
# =========================================================================


class FakeResponse(io.BytesIO):
    """模拟 urlopen 返回的响应对象"""

    def __init__(self, body: bytes, status: int = 200) -> None:
        super().__init__(body)
        self.status = status


class StubOpener:
    """按 URL 返回预置响应；未登记的 URL 返回 404"""

    def __init__(self) -> None:
        self.routes: dict[str, bytes | int | BaseException] = {}
        self.calls: list[str] = []

    def __call__(self, url: str) -> FakeResponse:
        import urllib.error

        self.calls.append(url)
        route = self.routes.get(url, 404)
        if isinstance(route, BaseException):
            raise route
        if isinstance(route, int):
            if route >= 400:
                raise urllib.error.HTTPError(url, route, "stub", {}, io.BytesIO())  # type: ignore[arg-type]
            return FakeResponse(b"", status=route)
        return FakeResponse(route)


@pytest.fixture()
def opener() -> StubOpener:
    return StubOpener()


@pytest.fixture()
def fetcher(opener: StubOpener) -> PackageFetcher:
    return PackageFetcher(opener=opener)


# =========================================================================
# 配置 / 宿主环境
# =========================================================================


@pytest.fixture(autouse=True)
def _isolated_config(monkeypatch: pytest.MonkeyPatch):
    """每个测试使用独立的全局配置"""
    monkeypatch.setattr(cfgmod, "_current", None)
    yield


@pytest.fixture()
def config() -> Config:
    return Config(bucket_url=BUCKET)


@pytest.fixture()
def host(tmp_path: Path) -> HostContext:
    return HostContext(root=str(tmp_path), platform="linux-x86_64")


@pytest.fixture()
def locator(config: Config, host: HostContext) -> PackageLocator:
    return PackageLocator(config, host)
