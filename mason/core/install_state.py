"""安装状态检查

只看目录是否存在、是否为空，不校验内容。check() 在目录缺失时顺手创建，
后续下载直接解压到这个空目录里。
"""

from __future__ import annotations

import logging
import os

from mason.core.models import InstallationState, PackageDescriptor

logger = logging.getLogger(__name__)


def inspect(dest_dir: str) -> InstallationState:
    """无副作用地判断目录状态"""
    if not os.path.isdir(dest_dir):
        return InstallationState.ABSENT
    with os.scandir(dest_dir) as it:
        if next(it, None) is None:
            return InstallationState.EMPTY_STUB
    return InstallationState.COMPLETE


def check(descriptor: PackageDescriptor) -> bool:
    """返回包是否已安装

    - 目录不存在: 创建（含父目录），返回 False
    - 目录为空: 上次安装中途失败，原样保留，返回 False
    - 目录非空: 返回 True

    Raises:
        OSError: 目录创建或读取失败
    """
    state = inspect(descriptor.dest_dir)
    if state is InstallationState.ABSENT:
        os.makedirs(descriptor.dest_dir, exist_ok=True)
        logger.debug(
            "已创建安装目录: %s", descriptor.dest_dir, extra=descriptor.log_extra,
        )
        return False
    if state is InstallationState.EMPTY_STUB:
        logger.info(
            "发现空安装目录，重新安装: %s", descriptor.dest_dir,
            extra=descriptor.log_extra,
        )
        return False
    return True
