"""mason - 预编译依赖包安装工具"""

__version__ = "0.4.0"
