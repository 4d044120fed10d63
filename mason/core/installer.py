"""安装编排器 - 状态检查 + 有界下载队列

流程:
  1. 过滤掉 None
  2. 逐个同步执行 install_state.check()，已安装的跳过
  3. 未安装的按清单顺序进入下载队列（默认并发 1，严格串行）
  4. 第一个错误直接抛给调用方，尚未开始的下载不再启动

已经成功解压的包保留在磁盘上，不做回滚。
"""

from __future__ import annotations

import logging
import threading
from concurrent.futures import ThreadPoolExecutor
from typing import Iterable

from mason.core import install_state
from mason.core.fetcher import PackageFetcher
from mason.core.models import PackageDescriptor

logger = logging.getLogger(__name__)


class InstallOrchestrator:
    """按清单顺序安装一批包"""

    def __init__(self, fetcher: PackageFetcher, concurrency: int = 1) -> None:
        self.fetcher = fetcher
        self.concurrency = max(1, concurrency)

    def pending(
        self, descriptors: Iterable[PackageDescriptor | None],
    ) -> list[PackageDescriptor]:
        """返回需要下载的包，顺带创建缺失的安装目录"""
        queue: list[PackageDescriptor] = []
        for desc in descriptors:
            if desc is None:
                continue
            if install_state.check(desc):
                logger.info(
                    "已安装，跳过: %s@%s", desc.name, desc.version,
                    extra=desc.log_extra,
                )
                continue
            queue.append(desc)
        return queue

    def install_all(
        self, descriptors: Iterable[PackageDescriptor | None],
    ) -> list[PackageDescriptor]:
        """安装全部包，返回本次实际下载的包列表"""
        queue = self.pending(descriptors)
        if not queue:
            logger.info("所有包均已安装")
            return []

        logger.info("待下载 %d 个包 (并发 %d)", len(queue), self.concurrency)
        if self.concurrency == 1:
            for desc in queue:
                self.fetcher.fetch(desc)
            return queue

        return self._run_pool(queue)

    def _run_pool(self, queue: list[PackageDescriptor]) -> list[PackageDescriptor]:
        stop = threading.Event()

        def _task(desc: PackageDescriptor) -> None:
            # 队列已出错时，未开始的任务直接放弃
            if stop.is_set():
                return
            try:
                self.fetcher.fetch(desc)
            except Exception:
                stop.set()
                raise

        with ThreadPoolExecutor(max_workers=self.concurrency) as executor:
            futures = [executor.submit(_task, d) for d in queue]
            for future in futures:
                exc = future.exception()
                if exc is not None:
                    stop.set()
                    for f in futures:
                        f.cancel()
                    raise exc
        return queue
