"""集中配置管理

替代各模块散落的 DEFAULT_* 常量，提供统一的配置入口。
支持从 YAML 文件加载 + 编程式覆盖。
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, fields

import yaml

from mason.core.exceptions import ConfigError
from mason.utils.yaml_io import load_yaml

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_FILE = ".mason.yml"
DEFAULT_BUCKET_URL = "https://s3.amazonaws.com/mason-binaries/"


@dataclass
class Config:
    """全局配置"""

    # 远程制品
    bucket_url: str = DEFAULT_BUCKET_URL

    # 本地目录（相对工作目录）
    packages_dir: str = "mason_packages"
    link_dir: str = ".link"
    manifest: str = "mason-versions.ini"

    # 软链合并时跳过的包描述文件
    sentinel: str = "mason.ini"

    # 同时进行的下载数
    fetch_concurrency: int = 1

    def __post_init__(self) -> None:
        if self.fetch_concurrency < 1:
            raise ConfigError(
                f"fetch_concurrency 必须 >= 1，实际: {self.fetch_concurrency}"
            )
        if not self.bucket_url:
            raise ConfigError("bucket_url 不能为空")

    @classmethod
    def from_file(cls, path: str = DEFAULT_CONFIG_FILE) -> Config:
        """从 YAML 文件加载配置，不存在则返回默认

        Raises:
            ConfigError: YAML 格式错误、文件过大或字段取值无效
        """
        try:
            data = load_yaml(path)
        except (yaml.YAMLError, ValueError) as e:
            raise ConfigError(f"配置文件无法读取: {path} - {e}") from e
        if not data:
            return cls()
        known = {f.name for f in fields(cls)}
        unknown = [str(k) for k in data if k not in known]
        if unknown:
            logger.warning("忽略未知配置项: %s (%s)", ", ".join(unknown), path)
        try:
            return cls(**{k: v for k, v in data.items() if k in known})
        except TypeError as e:
            raise ConfigError(f"配置文件内容无效: {path} - {e}") from e


# 全局单例，首次 import 时不加载文件；由 CLI 入口显式初始化
_current: Config | None = None


def get_config() -> Config:
    """获取当前配置（未初始化则返回默认值）"""
    global _current  # noqa: PLW0603
    if _current is None:
        _current = Config()
    return _current


def init_config(path: str = DEFAULT_CONFIG_FILE) -> Config:
    """从文件初始化全局配置"""
    global _current  # noqa: PLW0603
    _current = Config.from_file(path)
    logger.info("配置已加载: %s", path)
    return _current

