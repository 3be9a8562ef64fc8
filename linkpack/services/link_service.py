"""链接服务：本地包链接与打包流水线入口

阶段严格顺序执行:
  1. load：加载包索引（包容器不存在则直接返回空映射，不做任何写入）
  2. prepare：改写全部 manifest，再统一写入构建描述文件
  3. pack：并发打包

任一阶段失败即整体失败，不返回部分结果。

用法:
    svc = LinkService()
    artifacts = svc.link(LinkRequest(repo_dir="/tmp/next.js"))
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

from linkpack.core.config import Config, get_config
from linkpack.core.descriptor import BuildDescriptorWriter
from linkpack.core.exceptions import ManifestError
from linkpack.core.loader import ManifestLoader
from linkpack.core.models import (
    ArtifactMap,
    EMPTY_ARTIFACTS,
    LinkPaths,
    LinkRequest,
    PackageIndex,
)
from linkpack.core.packer import PackerOrchestrator
from linkpack.core.protocols import Tracer
from linkpack.core.rewriter import DependencyRewriter
from linkpack.core.tracing import resolve_tracer
from linkpack.utils.json_io import load_json
from linkpack.utils.shell import CommandExecutor

logger = logging.getLogger(__name__)


class LinkService:
    """本地包链接流水线"""

    def __init__(
        self,
        config: Config | None = None,
        executor: CommandExecutor | None = None,
    ) -> None:
        self.config = config or get_config()
        self.loader = ManifestLoader(self.config)
        self.rewriter = DependencyRewriter(self.config, executor=executor)
        self.writer = BuildDescriptorWriter(self.config)
        self.packer = PackerOrchestrator(self.config, executor=executor)

    def resolve_paths(self, request: LinkRequest) -> LinkPaths:
        """计算共享目录（解析为绝对路径）；未指定 origin 时以 repo_dir 为准"""
        origin = Path(request.origin_dir or request.repo_dir).resolve()
        cache = origin / self.config.cache_dir
        return LinkPaths(
            origin_dir=origin,
            packed_dir=cache / self.config.packed_dir,
            build_cache_dir=cache / self.config.build_cache_dir,
        )

    def link(self, request: LinkRequest) -> ArtifactMap:
        """执行链接流水线，返回 {包名: 产物路径}"""
        root = resolve_tracer(request.tracer, "link_packages")
        return root.trace_fn(lambda span: self._run(request, span))

    def _run(self, request: LinkRequest, span: Tracer) -> ArtifactMap:
        repo_dir = Path(request.repo_dir).resolve()
        paths = self.resolve_paths(request)

        index = self.loader.load(repo_dir, paths)
        if not index:
            return EMPTY_ARTIFACTS

        span.trace_child("prepare packages for packing").trace_fn(
            lambda _s: self._prepare(index, repo_dir, paths, request.native_override),
        )
        # 依赖路径全部改写落盘后才开始打包
        return span.trace_child("packing packages").trace_fn(
            lambda packing: self.packer.pack_all(index, paths, packing),
        )

    def _prepare(
        self, index: PackageIndex, repo_dir: Path, paths: LinkPaths,
        native_override: dict[str, str],
    ) -> None:
        paths.packed_dir.mkdir(parents=True, exist_ok=True)
        root_manifest = self._load_root_manifest(repo_dir)
        self.rewriter.rewrite_all(index, root_manifest, native_override)
        self.writer.write_all(index)

    def _load_root_manifest(self, repo_dir: Path) -> dict[str, Any]:
        path = repo_dir / self.config.manifest_name
        try:
            return load_json(path)
        except FileNotFoundError as e:
            raise ManifestError("根 manifest 不存在", str(path)) from e


def link_packages(
    repo_dir: str, *,
    origin_dir: str = "",
    native_override: dict[str, str] | None = None,
    tracer: Tracer | None = None,
    config: Config | None = None,
    executor: CommandExecutor | None = None,
) -> ArtifactMap:
    """便捷入口"""
    return LinkService(config, executor).link(LinkRequest(
        repo_dir=repo_dir,
        origin_dir=origin_dir,
        native_override=dict(native_override or {}),
        tracer=tracer,
    ))
