"""远程包拉取器

职责:
- 流式 GET 远程 .tar.gz（不落地临时文件）
- 边下载边解压到 dest_dir，去掉归档顶层目录
- 统计解压条目数，空归档视为失败

失败原因 (FetchError.reason):
  transport        请求阶段网络错误
  bad_status       HTTP 状态码不是 200
  premature_close  归档未读完数据流就结束 / 损坏
  empty_archive    归档读完但没有解压出任何条目
"""

from __future__ import annotations

import copy
import http.client
import logging
import tarfile
import urllib.error
import urllib.request
import zlib
from enum import Enum
from typing import IO, Callable

from mason.core.exceptions import FetchError, ValidationError
from mason.core.models import PackageDescriptor
from mason.utils.net import validate_url_scheme

logger = logging.getLogger(__name__)

# 打开 URL 并返回可读响应（需带 status 属性），默认 urllib.request.urlopen
Opener = Callable[[str], IO[bytes]]

# 数据流中断或归档损坏
_STREAM_ERRORS = (
    tarfile.ReadError,
    tarfile.CompressionError,
    EOFError,
    zlib.error,
    http.client.IncompleteRead,
)


class FetchState(str, Enum):
    PENDING = "pending"
    FAILED = "failed"
    SUCCEEDED = "succeeded"


class FetchOutcome:
    """单次拉取的终态记录，只接受第一次离开 PENDING 的转移"""

    def __init__(self, descriptor: PackageDescriptor) -> None:
        self.descriptor = descriptor
        self.state = FetchState.PENDING
        self.error: FetchError | None = None
        self.entries = 0

    def fail(self, error: FetchError) -> bool:
        if self.state is not FetchState.PENDING:
            logger.debug(
                "忽略重复终态 (%s): %s", self.state.value, error,
                extra=self.descriptor.log_extra,
            )
            return False
        self.state = FetchState.FAILED
        self.error = error
        return True

    def succeed(self, entries: int) -> bool:
        if self.state is not FetchState.PENDING:
            return False
        self.state = FetchState.SUCCEEDED
        self.entries = entries
        return True

    def raise_for_state(self) -> None:
        if self.state is FetchState.FAILED and self.error is not None:
            raise self.error
        if self.state is FetchState.PENDING:
            raise RuntimeError(f"拉取未结束: {self.descriptor.source_url}")


def _strip_component(path: str) -> str:
    """去掉第一级路径，"pkg-1.0/include/a.h" -> "include/a.h" """
    parts = [p for p in path.split("/") if p and p != "."]
    return "/".join(parts[1:])


def _strip_member(member: tarfile.TarInfo) -> tarfile.TarInfo | None:
    name = _strip_component(member.name)
    if not name:
        return None
    stripped = copy.copy(member)
    stripped.name = name
    if member.islnk():
        # 硬链接目标也是归档内路径，需同步去掉顶层目录
        stripped.linkname = _strip_component(member.linkname)
    return stripped


class PackageFetcher:
    """流式下载并解压单个包"""

    def __init__(self, opener: Opener | None = None) -> None:
        self._opener = opener or urllib.request.urlopen

    def fetch(self, descriptor: PackageDescriptor) -> int:
        """下载 descriptor.source_url 并解压到 descriptor.dest_dir

        返回解压的条目数。

        Raises:
            FetchError: 下载或解压失败
            ValidationError: URL 协议不合法或归档含越界路径
            OSError: 本地写入失败
        """
        url = descriptor.source_url
        validate_url_scheme(url, context=f"package {descriptor.name}")
        outcome = FetchOutcome(descriptor)

        logger.info("下载: %s", url, extra=descriptor.log_extra)
        try:
            response = self._opener(url)
        except urllib.error.HTTPError as e:
            e.close()
            outcome.fail(FetchError(
                f"下载失败: {url} 返回 HTTP {e.code}",
                FetchError.BAD_STATUS, status_code=e.code,
            ))
        except (urllib.error.URLError, OSError) as e:
            outcome.fail(FetchError(
                f"下载失败: {url} - {e}", FetchError.TRANSPORT,
            ))
        else:
            with response:
                status = getattr(response, "status", 200)
                if status != 200:
                    outcome.fail(FetchError(
                        f"下载失败: {url} 返回 HTTP {status}",
                        FetchError.BAD_STATUS, status_code=status,
                    ))
                else:
                    self._extract(response, outcome)

        outcome.raise_for_state()
        logger.info(
            "已安装 %s@%s -> %s (%d 个条目)",
            descriptor.name, descriptor.version, descriptor.dest_dir, outcome.entries,
            extra=descriptor.log_extra,
        )
        return outcome.entries

    def _extract(self, stream: IO[bytes], outcome: FetchOutcome) -> None:
        descriptor = outcome.descriptor
        url = descriptor.source_url
        count = 0
        try:
            with tarfile.open(fileobj=stream, mode="r|gz") as tar:
                for member in tar:
                    stripped = _strip_member(member)
                    if stripped is None:
                        continue
                    tar.extract(stripped, descriptor.dest_dir, filter="data")
                    count += 1
        except _STREAM_ERRORS as e:
            outcome.fail(FetchError(
                f"数据流提前结束: {url} (已解压 {count} 个条目) - {e}",
                FetchError.PREMATURE_CLOSE,
            ))
            return
        except (ConnectionError, TimeoutError) as e:
            outcome.fail(FetchError(
                f"下载中断: {url} - {e}", FetchError.TRANSPORT,
            ))
            return
        except tarfile.FilterError as e:
            raise ValidationError(f"归档包含不安全的条目: {url} - {e}") from e

        if count == 0:
            outcome.fail(FetchError(
                f"归档为空: {url}", FetchError.EMPTY_ARCHIVE,
            ))
            return
        outcome.succeed(count)
