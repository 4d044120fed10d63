"""宿主平台识别测试"""

from __future__ import annotations

import os

import pytest

from mason.core.exceptions import ConfigError, UnsupportedPlatformError
from mason.core.platform import HostContext, detect_platform


class TestDetectPlatform:
    @pytest.mark.parametrize("system,expected", [
        ("Linux", "linux-x86_64"),
        ("Darwin", "osx-x86_64"),
    ])
    def test_supported(self, system: str, expected: str) -> None:
        assert detect_platform(system) == expected

    @pytest.mark.parametrize("system", ["Windows", "FreeBSD", ""])
    def test_unsupported(self, system: str) -> None:
        with pytest.raises(UnsupportedPlatformError, match="不支持的操作系统"):
            detect_platform(system)

    def test_unsupported_is_config_error(self) -> None:
        with pytest.raises(ConfigError):
            detect_platform("Windows")


class TestHostContext:
    def test_current_reads_cwd(self, tmp_path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.chdir(tmp_path)
        monkeypatch.setattr("mason.core.platform._platform.system", lambda: "Darwin")
        ctx = HostContext.current()
        assert ctx.root == os.getcwd()
        assert ctx.platform == "osx-x86_64"

    def test_current_without_platform(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr("mason.core.platform._platform.system", lambda: "Windows")
        assert HostContext.current(resolve_platform=False).platform == ""
        with pytest.raises(UnsupportedPlatformError):
            HostContext.current()
