"""linkpack：本地包链接与打包准备工具"""

__version__ = "0.1.0"
