"""包清单加载器

职责:
- 枚举仓库包容器目录（默认 packages/）下的直接子目录
- 加载每个子目录的 package.json
- 按 manifest 中的 name 构建 PackageIndex

包容器目录不存在视为「没有本地包」，返回空索引；
子目录缺少 manifest 时跳过，不视为错误。
"""

from __future__ import annotations

import logging
from pathlib import Path

from linkpack.core.config import Config, get_config
from linkpack.core.exceptions import ManifestError
from linkpack.core.models import LinkPaths, PackageIndex, PackageRecord
from linkpack.utils.json_io import load_json

logger = logging.getLogger(__name__)

# 改写阶段会原地修改的字段
_FIELD_TYPES: dict[str, type] = {
    "dependencies": dict,
    "scripts": dict,
    "files": list,
}


class ManifestLoader:
    """从仓库目录加载本地包索引"""

    def __init__(self, config: Config | None = None) -> None:
        self.config = config or get_config()

    def list_package_dirs(self, repo_dir: Path) -> list[str] | None:
        """列出包容器下的子目录名；容器不存在返回 None，其他 IO 错误向上抛出"""
        container = repo_dir / self.config.packages_dir
        try:
            entries = sorted(container.iterdir(), key=lambda p: p.name)
        except FileNotFoundError:
            return None
        return [p.name for p in entries if p.is_dir()]

    def load(self, repo_dir: Path, paths: LinkPaths) -> PackageIndex:
        """构建包索引"""
        index: PackageIndex = {}
        dir_names = self.list_package_dirs(repo_dir)
        if dir_names is None:
            logger.info("没有需要链接的包: %s 不存在", repo_dir / self.config.packages_dir)
            return index

        for dir_name in dir_names:
            record = self._load_one(repo_dir, dir_name, paths)
            if record is None:
                continue
            existing = index.get(record.name)
            if existing is not None:
                raise ManifestError(
                    f"包名重复: {record.name} (已由 {existing.manifest_path} 声明)",
                    str(record.manifest_path),
                )
            index[record.name] = record

        logger.info("已加载 %d 个本地包", len(index))
        return index

    def _load_one(
        self, repo_dir: Path, dir_name: str, paths: LinkPaths,
    ) -> PackageRecord | None:
        working_dir = repo_dir / self.config.packages_dir / dir_name
        manifest_path = working_dir / self.config.manifest_name
        if not manifest_path.is_file():
            logger.info("跳过（无 manifest）: %s", manifest_path)
            return None

        manifest = load_json(manifest_path)
        name = manifest.get("name")
        if not isinstance(name, str) or not name:
            raise ManifestError("manifest 缺少 name 字段", str(manifest_path))
        for key, expected in _FIELD_TYPES.items():
            if key in manifest and not isinstance(manifest[key], expected):
                raise ManifestError(
                    f"{key} 字段类型错误 (实际类型: {type(manifest[key]).__name__})",
                    str(manifest_path),
                )

        return PackageRecord(
            name=name,
            dir_name=dir_name,
            manifest_path=manifest_path,
            source_dir=paths.origin_dir / self.config.packages_dir / dir_name,
            working_dir=working_dir,
            manifest=manifest,
            artifact_path=paths.artifact_for(dir_name),
        )
