"""安装状态检查测试"""

from __future__ import annotations

import os

from mason.core import install_state
from mason.core.locator import PackageLocator
from mason.core.models import InstallationState, PackageKind


class TestInspect:
    def test_states(self, tmp_path) -> None:
        target = tmp_path / "pkg"
        assert install_state.inspect(str(target)) is InstallationState.ABSENT
        target.mkdir()
        assert install_state.inspect(str(target)) is InstallationState.EMPTY_STUB
        (target / "include").mkdir()
        assert install_state.inspect(str(target)) is InstallationState.COMPLETE

    def test_inspect_has_no_side_effect(self, tmp_path) -> None:
        install_state.inspect(str(tmp_path / "pkg"))
        assert not (tmp_path / "pkg").exists()


class TestCheck:
    def test_absent_creates_dir(self, locator: PackageLocator) -> None:
        d = locator.locate("protozero", "1.5.1", PackageKind.HEADER)
        assert install_state.check(d) is False
        assert os.path.isdir(d.dest_dir)
        assert os.listdir(d.dest_dir) == []

    def test_empty_stub_not_installed(self, locator: PackageLocator) -> None:
        d = locator.locate("protozero", "1.5.1", PackageKind.HEADER)
        os.makedirs(d.dest_dir)
        assert install_state.check(d) is False
        assert os.path.isdir(d.dest_dir)

    def test_non_empty_is_installed(self, locator: PackageLocator) -> None:
        d = locator.locate("protozero", "1.5.1", PackageKind.HEADER)
        os.makedirs(d.dest_dir)
        with open(os.path.join(d.dest_dir, "mason.ini"), "w") as f:
            f.write("name=protozero\n")
        assert install_state.check(d) is True
