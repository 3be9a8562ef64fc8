"""核心数据模型

一次链接流程内创建的所有实体都在这里定义，
流程结束返回 ArtifactMap 后即丢弃，不在进程内跨调用共享。
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import TYPE_CHECKING, Any, Mapping

if TYPE_CHECKING:
    from linkpack.core.protocols import Tracer


@dataclass
class PackageRecord:
    """单个本地包

    manifest 在写回磁盘前由本记录独占；
    source_dir 指向 origin 仓库中的源码，只作为构建输入引用，不做修改。
    """

    name: str
    dir_name: str
    manifest_path: Path
    source_dir: Path
    working_dir: Path
    manifest: dict[str, Any]
    artifact_path: Path

    @property
    def dependencies(self) -> dict[str, str]:
        deps: dict[str, str] = self.manifest.setdefault("dependencies", {})
        return deps

    def ensure_file_entry(self, entry: str) -> None:
        """保证 files 列表包含 entry（不存在则创建，不重复追加）"""
        files: list[str] = self.manifest.setdefault("files", [])
        if entry not in files:
            files.append(entry)


# 包名 -> PackageRecord，每次调用重新构建
PackageIndex = dict[str, PackageRecord]

# 包名 -> 产物路径（只读）
ArtifactMap = Mapping[str, str]


def freeze_artifacts(index: PackageIndex) -> ArtifactMap:
    """由索引生成只读的产物映射"""
    return MappingProxyType(
        {name: str(rec.artifact_path) for name, rec in index.items()}
    )


EMPTY_ARTIFACTS: ArtifactMap = MappingProxyType({})


@dataclass
class LinkPaths:
    """一次链接流程使用的共享目录"""

    origin_dir: Path
    packed_dir: Path        # 打包产物目录，各包写入不同文件
    build_cache_dir: Path   # 构建工具共享缓存，并发一致性由工具自身保证

    def artifact_for(self, dir_name: str) -> Path:
        return self.packed_dir / f"{dir_name}-packed.tgz"


@dataclass
class LinkRequest:
    """链接流程入参"""

    repo_dir: str
    origin_dir: str = ""
    native_override: dict[str, str] = field(default_factory=dict)
    tracer: Tracer | None = None
