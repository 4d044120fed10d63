"""依赖清单解析与编辑

清单格式 (mason-versions.ini):

    [headers]
    protozero=1.5.1
    [compiled]
    cairo=1.14.8

规则:
  - 首个非空行必须是 [headers]，即使没有任何 header 包
  - [headers] / [compiled] 切换当前段
  - 含 "=" 的行是包声明，必须恰好是两段非空的 name=version
  - 其余行忽略

编辑走结构化路径：按段定位插入点后只插入一行，其余原文不动，
不依赖对段标记做子串匹配。
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING, Iterator

from mason.core.exceptions import (
    DuplicatePackageError,
    InvalidPackageSyntaxError,
    SectionOrderError,
)
from mason.core.models import PackageDescriptor, PackageKind, PackageSpec
from mason.utils.yaml_io import atomic_write

if TYPE_CHECKING:
    from mason.core.locator import PackageLocator

logger = logging.getLogger(__name__)

_SECTION_KINDS = {kind.section: kind for kind in PackageKind}


def generate_package_object(line: str) -> PackageSpec:
    """把 "name=version" 解析为 PackageSpec

    Raises:
        InvalidPackageSyntaxError: 不是恰好两段非空内容
    """
    parts = [p.strip() for p in line.strip().split("=")]
    if len(parts) != 2 or not all(parts):
        raise InvalidPackageSyntaxError(
            f"包声明格式错误 '{line.strip()}'，应为 name=version"
        )
    return PackageSpec(name=parts[0], version=parts[1])


def _check_first_section(lines: list[str]) -> None:
    first = next((ln for ln in lines if ln), None)
    if first != PackageKind.HEADER.section:
        raise SectionOrderError(
            f"清单首行必须是 {PackageKind.HEADER.section}，实际: {first!r}"
        )


@dataclass
class Manifest:
    """清单原文按行保存，包列表由原文推导

    编辑只在合适位置插入一行，注释、未知行和交错的段顺序原样保留。
    """

    lines: list[str] = field(default_factory=list)

    @classmethod
    def from_text(cls, text: str) -> Manifest:
        manifest = cls(lines=text.splitlines())
        _check_first_section([ln.strip() for ln in manifest.lines])
        # 提前暴露格式错误的声明行
        _ = manifest.items
        return manifest

    def _scan(self) -> Iterator[tuple[int, PackageKind, PackageSpec | None]]:
        """逐行遍历 (行号, 当前段, spec)；段标记行的 spec 为 None"""
        kind = PackageKind.HEADER
        for i, raw in enumerate(self.lines):
            line = raw.strip()
            if line in _SECTION_KINDS:
                kind = _SECTION_KINDS[line]
                yield i, kind, None
            elif "=" in line:
                yield i, kind, generate_package_object(line)

    @property
    def items(self) -> list[tuple[PackageKind, PackageSpec]]:
        return [(kind, spec) for _, kind, spec in self._scan() if spec is not None]

    def section(self, kind: PackageKind) -> list[PackageSpec]:
        return [spec for k, spec in self.items if k is kind]

    @property
    def headers(self) -> list[PackageSpec]:
        return self.section(PackageKind.HEADER)

    @property
    def compiled(self) -> list[PackageSpec]:
        return self.section(PackageKind.COMPILED)

    def entries(self) -> Iterator[tuple[PackageKind, PackageSpec]]:
        """按清单中出现的顺序遍历 (kind, spec)"""
        return iter(self.items)

    def __len__(self) -> int:
        return len(self.items)

    def contains(self, spec: PackageSpec) -> bool:
        """任意段中已声明同一 name=version 即视为存在"""
        return any(s == spec for _, s in self.items)

    def _insert_position(self, kind: PackageKind) -> int | None:
        """该段最后一个声明（或最后一个段标记）之后的行号，段不存在时为 None"""
        pos = None
        for i, current, _ in self._scan():
            if current is kind:
                pos = i + 1
        return pos

    def add(self, spec: PackageSpec, kind: PackageKind) -> None:
        """插入到对应段最后一个声明之后，重复声明抛 DuplicatePackageError"""
        if self.contains(spec):
            raise DuplicatePackageError(f"{spec} 已在清单中声明")
        if not self.lines:
            self.lines.append(PackageKind.HEADER.section)

        pos = self._insert_position(kind)
        if pos is None:
            self.lines.append(kind.section)
            pos = len(self.lines)
        self.lines.insert(pos, str(spec))

    def to_text(self) -> str:
        return "\n".join(self.lines) + "\n"


class ManifestParser:
    """清单文本 → 有序 PackageDescriptor 列表"""

    def __init__(self, locator: PackageLocator) -> None:
        self.locator = locator

    def parse(self, text: str) -> list[PackageDescriptor]:
        manifest = Manifest.from_text(text)
        descriptors = [
            self.locator.locate(spec.name, spec.version, kind)
            for kind, spec in manifest.entries()
        ]
        logger.debug("清单解析完成: %d 个包", len(descriptors))
        return descriptors


def load_manifest(path: str | Path) -> Manifest:
    """读取清单文件，不存在时抛 FileNotFoundError"""
    p = Path(path)
    if not p.exists():
        raise FileNotFoundError(f"清单文件不存在: {p}")
    return Manifest.from_text(p.read_text(encoding="utf-8"))


def save_manifest(path: str | Path, manifest: Manifest) -> None:
    atomic_write(Path(path), manifest.to_text())
    logger.info("清单已保存: %s (%d 个包)", path, len(manifest))


def append_package(
    path: str | Path, spec: PackageSpec, kind: PackageKind,
) -> Manifest:
    """向清单文件追加一个包；文件不存在时新建

    重复声明时抛 DuplicatePackageError，文件保持不变。
    """
    p = Path(path)
    manifest = load_manifest(p) if p.exists() else Manifest()
    manifest.add(spec, kind)
    save_manifest(p, manifest)
    return manifest
