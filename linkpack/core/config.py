"""集中配置管理

包容器目录、缓存位置、特殊包名、构建工具命令等均在此统一定义。
支持从 YAML 文件加载 + 编程式覆盖。
"""

from __future__ import annotations

import logging
from dataclasses import asdict, dataclass, field

from linkpack.core.exceptions import ConfigError
from linkpack.utils.yaml_io import load_yaml

logger = logging.getLogger(__name__)


@dataclass
class Config:
    """全局配置"""

    # 仓库布局
    packages_dir: str = "packages"
    manifest_name: str = "package.json"

    # 缓存目录（相对 origin 仓库根目录）
    cache_dir: str = "node_modules/.cache"
    packed_dir: str = "tests/packed-pkgs"     # 相对 cache_dir
    build_cache_dir: str = "turbo"            # 相对 cache_dir

    # 特殊包策略
    native_package: str = "@next/swc"
    primary_package: str = "next"
    native_dir: str = "native"

    # 构建工具
    pack_script: str = "test-pack"
    pack_cmd: list[str] = field(default_factory=lambda: ["yarn", "pack", "-f"])
    runner_cmd: list[str] = field(default_factory=lambda: ["pnpm", "run"])
    build_tool: str = "turbo"
    descriptor_name: str = "turbo.json"
    lockfile_name: str = "pnpm-lock.yaml"

    # 执行
    max_workers: int = 8

    # git
    git_root: str = "https://github.com/"

    # 自定义扩展 (放不到字段里的配置项)
    extra: dict = field(default_factory=dict)

    @classmethod
    def from_file(cls, path: str = "configs/default.yml") -> Config:
        """从 YAML 文件加载配置，不存在则返回默认"""
        data = load_yaml(path)
        if not data:
            return cls()
        known = {f.name for f in cls.__dataclass_fields__.values()}
        matched = {k: v for k, v in data.items() if k in known}
        extra = {k: v for k, v in data.items() if k not in known}
        for key in ("pack_cmd", "runner_cmd"):
            if key in matched and not isinstance(matched[key], list):
                raise ConfigError(f"{key} 必须是参数列表: {path}")
        cfg = cls(**matched)
        cfg.extra = extra
        return cfg

    def to_dict(self) -> dict:
        return asdict(self)


# 全局单例，首次 import 时不加载文件；由 CLI 入口显式初始化
_current: Config | None = None


def get_config() -> Config:
    """获取当前配置（未初始化则返回默认值）"""
    global _current  # noqa: PLW0603
    if _current is None:
        _current = Config()
    return _current


def init_config(path: str = "configs/default.yml") -> Config:
    """从文件初始化全局配置"""
    global _current  # noqa: PLW0603
    _current = Config.from_file(path)
    logger.info("配置已加载: %s", path)
    return _current
