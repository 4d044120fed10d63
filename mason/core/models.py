"""数据模型定义

数据类:
- PackageSpec: 清单中的一行 name=version
- PackageDescriptor: 定位完成、可直接安装的包
- LinkPair: 软链合并的 (源目录, 目标目录)
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class PackageKind(str, Enum):
    """包类型"""

    HEADER = "header"
    COMPILED = "compiled"

    @property
    def section(self) -> str:
        """清单中对应的段标记"""
        return _SECTIONS[self]


_SECTIONS = {
    PackageKind.HEADER: "[headers]",
    PackageKind.COMPILED: "[compiled]",
}


class InstallationState(str, Enum):
    """包在本地缓存中的安装状态（由目录推导，不落盘）"""

    ABSENT = "absent"
    EMPTY_STUB = "empty_stub"  # 目录存在但为空，上次安装中途失败
    COMPLETE = "complete"


@dataclass(frozen=True)
class PackageSpec:
    """清单中声明的一个包"""

    name: str
    version: str

    def __str__(self) -> str:
        return f"{self.name}={self.version}"


@dataclass(frozen=True)
class PackageDescriptor:
    """单个包的完整坐标：远程地址 + 本地解压目录

    (kind, platform, name, version) 相同的两个描述符总是得到相同的 dest_dir，
    安装因此是幂等的。
    """

    name: str
    version: str
    kind: PackageKind
    platform: str      # header 包为空串
    remote_key: str    # {headers|platform}/{name}/{version}.tar.gz
    source_url: str
    dest_dir: str

    @property
    def spec(self) -> PackageSpec:
        return PackageSpec(self.name, self.version)

    @property
    def log_extra(self) -> dict[str, str]:
        """日志上下文，用作 logger.info(..., extra=desc.log_extra)"""
        return {
            "package": str(self.spec),
            "url": self.source_url,
            "dest": self.dest_dir,
        }


@dataclass(frozen=True)
class LinkPair:
    source_dir: str
    dest_dir: str
