"""mason 命令行接口

CLI 按领域拆分为子模块，每个模块注册自己的命令到 main group。
"""

from __future__ import annotations

import os

import click

from mason import __version__
from mason.core.config import DEFAULT_CONFIG_FILE, init_config
from mason.core.exceptions import MasonError
from mason.core.package_manager import PackageManager
from mason.core.platform import HostContext
from mason.utils.logger import setup_logging


class _MasonGroup(click.Group):
    """把业务异常统一转换为单行错误提示 + 非零退出码"""

    def invoke(self, ctx: click.Context) -> object:
        try:
            return super().invoke(ctx)
        except (MasonError, OSError) as e:
            raise click.ClickException(str(e)) from e


def _manager(manifest: str = "", *, resolve_platform: bool = True) -> PackageManager:
    """按当前工作目录构建 PackageManager 的快捷方式"""
    host = HostContext.current(resolve_platform=resolve_platform)
    return PackageManager(host=host, manifest_path=manifest)


@click.group(cls=_MasonGroup)
@click.version_option(version=__version__)
@click.option("--config", "config_path", default=DEFAULT_CONFIG_FILE, help="配置文件路径")
def main(config_path: str) -> None:
    """mason - 预编译依赖包安装工具"""
    setup_logging(
        level=os.getenv("MASON_LOG_LEVEL", "INFO"),
        json_output=os.getenv("MASON_LOG_JSON", "") == "1",
    )
    init_config(config_path)


# 注册各领域子命令
from mason.cli.cmd_install import register as _reg_install  # noqa: E402
from mason.cli.cmd_manifest import register as _reg_manifest  # noqa: E402

_reg_install(main)
_reg_manifest(main)
