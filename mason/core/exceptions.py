"""统一异常体系

所有业务异常继承 MasonError，替代散落的 ValueError / RuntimeError。
CLI 层可据此输出友好提示；文件系统错误沿用内置 OSError 体系。
"""

from __future__ import annotations


class MasonError(Exception):
    """框架基础异常"""

    code: str = "UNKNOWN"

    def __init__(self, message: str) -> None:
        super().__init__(message)


class ConfigError(MasonError):
    """配置文件缺失或内容无效"""

    code = "CONFIG_ERROR"


class UnsupportedPlatformError(ConfigError):
    """当前操作系统不在支持列表中"""

    code = "UNSUPPORTED_PLATFORM"


class ParseError(MasonError):
    """清单文件解析失败"""

    code = "PARSE_ERROR"


class InvalidPackageSyntaxError(ParseError):
    """包声明行不是 name=version 格式"""

    code = "INVALID_PACKAGE_SYNTAX"


class SectionOrderError(ParseError):
    """清单首个非空行不是 [headers]"""

    code = "SECTION_ORDER"


class DuplicatePackageError(MasonError):
    """向清单追加已声明的包"""

    code = "DUPLICATE_PACKAGE"


class FetchError(MasonError):
    """单个包下载或解压失败

    reason 取值: transport / bad_status / premature_close / empty_archive
    """

    code = "FETCH_ERROR"

    TRANSPORT = "transport"
    BAD_STATUS = "bad_status"
    PREMATURE_CLOSE = "premature_close"
    EMPTY_ARCHIVE = "empty_archive"

    def __init__(
        self, message: str, reason: str, status_code: int | None = None,
    ) -> None:
        super().__init__(message)
        self.reason = reason
        self.status_code = status_code


class ValidationError(MasonError):
    """输入数据校验失败"""

    code = "VALIDATION_ERROR"
