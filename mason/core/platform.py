"""宿主环境识别

进程启动时读取一次操作系统和工作目录，封装为不可变的 HostContext，
再显式传给 PackageLocator，避免各处随手读取全局状态。
"""

from __future__ import annotations

import logging
import os
import platform as _platform
from dataclasses import dataclass

from mason.core.exceptions import UnsupportedPlatformError

logger = logging.getLogger(__name__)

# platform.system() -> 制品平台标识
SUPPORTED_PLATFORMS: dict[str, str] = {
    "Linux": "linux-x86_64",
    "Darwin": "osx-x86_64",
}


def detect_platform(system: str | None = None) -> str:
    """返回当前操作系统对应的平台标识，不支持时抛 UnsupportedPlatformError"""
    system = system if system is not None else _platform.system()
    try:
        return SUPPORTED_PLATFORMS[system]
    except KeyError:
        raise UnsupportedPlatformError(
            f"不支持的操作系统 '{system}'，"
            f"仅支持: {', '.join(SUPPORTED_PLATFORMS)}"
        ) from None


@dataclass(frozen=True)
class HostContext:
    """宿主环境快照"""

    root: str            # 工作目录，本地缓存以此为根
    platform: str = ""   # 空串表示尚未解析，首次定位 compiled 包时再识别

    @classmethod
    def current(cls, *, resolve_platform: bool = True) -> HostContext:
        """读取当前进程的工作目录（和平台）"""
        plat = detect_platform() if resolve_platform else ""
        ctx = cls(root=os.getcwd(), platform=plat)
        logger.debug("宿主环境: root=%s platform=%s", ctx.root, ctx.platform or "-")
        return ctx
