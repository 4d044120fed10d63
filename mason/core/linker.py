"""软链树合并

把每个已安装包的目录叠加到同一个 .link 根目录下：
  - 目录按原结构在目标侧重建
  - 文件和软链在目标侧变成指向源路径的软链
  - 包描述文件 (mason.ini) 不参与合并

目标侧已有的同名条目会先删除再重建，重复执行结果不变。
不做回滚：中途失败会留下部分合并的目录树。
"""

from __future__ import annotations

import logging
import os
import shutil
from typing import Iterable

from mason.core.models import LinkPair, PackageDescriptor

logger = logging.getLogger(__name__)


def plan_links(
    descriptors: Iterable[PackageDescriptor], link_root: str,
) -> list[LinkPair]:
    """每个包的 dest_dir 都合并到同一个 link_root，保持输入顺序"""
    return [LinkPair(source_dir=d.dest_dir, dest_dir=link_root) for d in descriptors]


def _remove(path: str) -> None:
    if os.path.isdir(path) and not os.path.islink(path):
        shutil.rmtree(path)
    else:
        os.unlink(path)


class TreeMerger:
    """把源目录树以软链形式叠加到目标目录"""

    def __init__(self, sentinel: str = "mason.ini") -> None:
        self.sentinel = sentinel
        self.linked = 0

    def merge(self, pairs: Iterable[LinkPair]) -> bool:
        """依次合并所有 (源, 目标) 对

        Raises:
            FileNotFoundError: 源目录不存在（包已声明但未安装）
            OSError: 其他文件系统错误
        """
        for pair in pairs:
            # 源路径不存在时 lstat 抛 FileNotFoundError，整体中止
            os.lstat(pair.source_dir)
            if not (os.path.isdir(pair.source_dir) or os.path.islink(pair.source_dir)):
                logger.debug("跳过非目录源: %s", pair.source_dir)
                continue
            logger.info("合并: %s -> %s", pair.source_dir, pair.dest_dir)
            os.makedirs(pair.dest_dir, exist_ok=True)
            self._merge_dir(pair.source_dir, pair.dest_dir, rel="")
        return True

    def _excluded(self, rel: str) -> bool:
        return self.sentinel in rel.split(os.sep)

    def _merge_dir(self, src_dir: str, dest_dir: str, rel: str) -> None:
        with os.scandir(src_dir) as it:
            entries = sorted(it, key=lambda e: e.name)

        for entry in entries:
            entry_rel = os.path.join(rel, entry.name) if rel else entry.name
            if self._excluded(entry_rel):
                continue
            dest = os.path.join(dest_dir, entry.name)

            if entry.is_dir(follow_symlinks=False):
                if os.path.lexists(dest) and not (
                    os.path.isdir(dest) and not os.path.islink(dest)
                ):
                    _remove(dest)
                os.makedirs(dest, exist_ok=True)
                self._merge_dir(entry.path, dest, entry_rel)
            elif entry.is_symlink() or entry.is_file(follow_symlinks=False):
                self._link_leaf(entry, dest)

    def _link_leaf(self, entry: os.DirEntry, dest: str) -> None:
        if os.path.lexists(dest):
            _remove(dest)
        os.symlink(os.path.abspath(entry.path), dest)
        self.linked += 1
