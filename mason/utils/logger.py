"""mason 日志配置

支持普通文本和结构化 JSON 两种输出格式，CI 中可用 MASON_LOG_JSON=1 切换。

按包处理的日志通过 ``extra=descriptor.log_extra`` 携带包上下文
(package / url / dest)，两种格式都会带出这些字段，并发下载时便于按包归并。
"""

from __future__ import annotations

import json
import logging
import sys
from datetime import datetime, timezone

# 由 extra= 注入 LogRecord 的包上下文字段
CONTEXT_FIELDS = ("package", "url", "dest")

TEXT_FORMAT = "%(asctime)s [%(levelname)-7s] %(name)s: %(message)s"


def record_context(record: logging.LogRecord) -> dict[str, str]:
    """取出记录上携带的包上下文，未携带的字段不出现"""
    return {
        name: getattr(record, name)
        for name in CONTEXT_FIELDS
        if getattr(record, name, None)
    }


class JSONFormatter(logging.Formatter):
    """结构化 JSON 日志格式器，便于 CI 流水线按包过滤

    输出格式:
        {
            "timestamp": "2024-01-01T12:00:00+00:00",
            "level": "INFO",
            "logger": "mason.core.fetcher",
            "message": "log message",
            "package": "protozero=1.5.1",   (仅在携带包上下文时)
            "url": "https://...",
            "dest": "/.../mason_packages/headers/protozero/1.5.1",
            "exception": "traceback..." (仅在有异常时)
        }
    """

    def format(self, record: logging.LogRecord) -> str:
        log_entry = {
            # 记录事件发生时间而非格式化时间
            "timestamp": datetime.fromtimestamp(
                record.created, tz=timezone.utc
            ).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        log_entry.update(record_context(record))
        if record.exc_info and record.exc_info[1]:
            log_entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(log_entry, ensure_ascii=False)


class PackageTextFormatter(logging.Formatter):
    """人类可读格式，携带包上下文时在行尾追加 [包名=版本]"""

    def __init__(self) -> None:
        super().__init__(TEXT_FORMAT)

    def formatMessage(self, record: logging.LogRecord) -> str:  # noqa: N802
        line = super().formatMessage(record)
        package = getattr(record, "package", None)
        return f"{line} [{package}]" if package else line


def setup_logging(level: str = "INFO", json_output: bool = False) -> None:
    """配置根日志器

    参数:
        level: 日志级别字符串（DEBUG, INFO, WARNING, ERROR, CRITICAL）
        json_output: 为 True 时使用 JSON 格式，否则使用人类可读格式

    说明:
        - 输出到 stderr，不干扰 stdout 上的命令输出
        - 自动清理已有 handlers，避免重复输出
    """
    root = logging.getLogger()
    reset_logging()

    root.setLevel(getattr(logging, level.upper(), logging.INFO))

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(JSONFormatter() if json_output else PackageTextFormatter())
    root.addHandler(handler)


def reset_logging() -> None:
    """清理根日志器上所有已注册的 handlers"""
    root = logging.getLogger()
    for handler in root.handlers[:]:
        root.removeHandler(handler)
        handler.close()
