"""包管理器 - 对外统一入口

把清单解析、定位、安装编排和软链合并串起来，CLI 只和这一层打交道。

用法:
    from mason.core.package_manager import PackageManager

    pm = PackageManager()
    pm.install()                     # 安装清单中全部包
    pm.link()                        # 合并到 mason_packages/.link
    pm.install_package("protozero=1.5.1", PackageKind.HEADER, save=True)
"""

from __future__ import annotations

import logging
from pathlib import Path

from mason.core import install_state
from mason.core.config import Config, get_config
from mason.core.fetcher import PackageFetcher
from mason.core.installer import InstallOrchestrator
from mason.core.linker import TreeMerger, plan_links
from mason.core.locator import PackageLocator
from mason.core.manifest import (
    ManifestParser,
    append_package,
    generate_package_object,
    load_manifest,
)
from mason.core.models import PackageDescriptor, PackageKind
from mason.core.platform import HostContext

logger = logging.getLogger(__name__)


class PackageManager:
    """清单驱动的安装 / 合并入口"""

    def __init__(
        self,
        config: Config | None = None,
        host: HostContext | None = None,
        fetcher: PackageFetcher | None = None,
        manifest_path: str = "",
    ) -> None:
        self.config = config or get_config()
        self.host = host or HostContext.current(resolve_platform=False)
        self.locator = PackageLocator(self.config, self.host)
        self.parser = ManifestParser(self.locator)
        self.fetcher = fetcher or PackageFetcher()
        self.orchestrator = InstallOrchestrator(
            self.fetcher, concurrency=self.config.fetch_concurrency,
        )
        path = Path(manifest_path or self.config.manifest)
        self.manifest_path = path if path.is_absolute() else Path(self.host.root) / path

    @property
    def link_root(self) -> str:
        return self.locator.link_root

    def descriptors(self) -> list[PackageDescriptor]:
        """读取并解析清单文件"""
        if not self.manifest_path.exists():
            raise FileNotFoundError(f"清单文件不存在: {self.manifest_path}")
        text = self.manifest_path.read_text(encoding="utf-8")
        return self.parser.parse(text)

    def install(self) -> list[PackageDescriptor]:
        """安装清单中的全部包，返回本次实际下载的包"""
        descriptors = self.descriptors()
        logger.info("清单 %s: %d 个包", self.manifest_path, len(descriptors))
        return self.orchestrator.install_all(descriptors)

    def install_package(
        self, line: str, kind: PackageKind, *, save: bool = False,
    ) -> PackageDescriptor:
        """安装单个 name=version；save=True 时先写入清单

        写入清单失败（如重复声明）时不会下载。
        """
        spec = generate_package_object(line)
        if save:
            append_package(self.manifest_path, spec, kind)
        desc = self.locator.locate(spec.name, spec.version, kind)
        self.orchestrator.install_all([desc])
        return desc

    def add_package(self, line: str, kind: PackageKind) -> PackageDescriptor:
        """只追加到清单，不下载"""
        spec = generate_package_object(line)
        append_package(self.manifest_path, spec, kind)
        logger.info("已添加 %s 到 %s", spec, kind.section)
        return self.locator.locate(spec.name, spec.version, kind)

    def link(self) -> bool:
        """把清单中全部包合并到 link 根目录"""
        pairs = plan_links(self.descriptors(), self.link_root)
        merger = TreeMerger(sentinel=self.config.sentinel)
        merger.merge(pairs)
        logger.info("已创建 %d 个软链 -> %s", merger.linked, self.link_root)
        return True

    def list_packages(self) -> list[dict[str, str]]:
        """格式化清单中的包及其安装状态"""
        manifest = load_manifest(self.manifest_path)
        results = []
        for kind, spec in manifest.entries():
            desc = self.locator.locate(spec.name, spec.version, kind)
            results.append({
                "name": desc.name,
                "version": desc.version,
                "kind": desc.kind.value,
                "state": install_state.inspect(desc.dest_dir).value,
                "path": desc.dest_dir,
            })
        return results
