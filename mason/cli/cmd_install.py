"""CLI — 安装与软链合并命令"""

from __future__ import annotations

import click

from mason.core.models import PackageKind

_KIND_CHOICE = click.Choice([k.value for k in PackageKind])


def register(group: click.Group) -> None:
    group.add_command(install)
    group.add_command(link)


@click.command()
@click.argument("package", required=False)
@click.option("--type", "kind", default=None, type=_KIND_CHOICE, help="单包安装时的包类型")
@click.option("--save", is_flag=True, help="安装前写入清单")
@click.option("--manifest", default="", help="清单文件路径（默认 mason-versions.ini）")
def install(package: str | None, kind: str | None, save: bool, manifest: str) -> None:
    """安装清单中的全部包，或安装单个 NAME=VERSION"""
    if package is None and (kind or save):
        raise click.UsageError("--type / --save 只能与 PACKAGE 一起使用")

    from mason.cli import _manager
    pm = _manager(manifest)

    if package is None:
        fetched = pm.install()
        click.echo(f"安装完成: 新下载 {len(fetched)} 个包")
        return

    if kind is None:
        raise click.UsageError("安装单个包时必须指定 --type header|compiled")
    desc = pm.install_package(package, PackageKind(kind), save=save)
    click.echo(f"就绪: {desc.name}@{desc.version} -> {desc.dest_dir}")


@click.command()
@click.option("--manifest", default="", help="清单文件路径（默认 mason-versions.ini）")
def link(manifest: str) -> None:
    """把已安装的包以软链合并到 mason_packages/.link"""
    from mason.cli import _manager
    pm = _manager(manifest)
    pm.link()
    click.echo(f"已合并到: {pm.link_root}")
