"""CLI — 清单查看与编辑命令"""

from __future__ import annotations

import click

from mason.core.models import PackageKind


def register(group: click.Group) -> None:
    group.add_command(add)
    group.add_command(list_packages)


@click.command()
@click.argument("package")
@click.option(
    "--type", "kind", required=True,
    type=click.Choice([k.value for k in PackageKind]), help="包类型",
)
@click.option("--manifest", default="", help="清单文件路径（默认 mason-versions.ini）")
def add(package: str, kind: str, manifest: str) -> None:
    """向清单追加 NAME=VERSION（不下载）"""
    from mason.cli import _manager
    desc = _manager(manifest).add_package(package, PackageKind(kind))
    click.echo(f"已添加: {desc.name}={desc.version} [{desc.kind.value}]")


@click.command(name="list")
@click.option("--manifest", default="", help="清单文件路径（默认 mason-versions.ini）")
def list_packages(manifest: str) -> None:
    """列出清单中的包及本地安装状态"""
    from mason.cli import _manager
    packages = _manager(manifest).list_packages()
    if not packages:
        click.echo("清单中没有声明任何包。")
        return
    for p in packages:
        click.echo(
            f"  {p['name']:20s} {p['version']:12s} "
            f"[{p['kind']:8s}] {p['state']:10s} {p['path']}"
        )
