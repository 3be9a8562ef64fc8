"""打包编排器

manifest 全部落盘后，为每个包并发调用一次构建工具的打包任务:

    pnpm run --dir=<origin> turbo run test-pack \
        --cache-dir=<共享缓存> --cwd=<包目录> -vvv

各包产物写入不同文件；共享缓存目录的并发一致性交由构建工具保证。
任一包失败即整体失败：等待已提交的调用结束后重新抛出第一个异常，不取消兄弟任务。
"""

from __future__ import annotations

import logging
from concurrent.futures import FIRST_EXCEPTION, ThreadPoolExecutor, wait

from linkpack.core.config import Config, get_config
from linkpack.core.models import (
    ArtifactMap,
    EMPTY_ARTIFACTS,
    LinkPaths,
    PackageIndex,
    PackageRecord,
    freeze_artifacts,
)
from linkpack.core.protocols import Tracer
from linkpack.core.tracing import NullTracer
from linkpack.utils.shell import CommandExecutor, CommandResult, run_cmd

logger = logging.getLogger(__name__)


class PackerOrchestrator:
    """并发打包"""

    def __init__(
        self,
        config: Config | None = None,
        executor: CommandExecutor | None = None,
    ) -> None:
        self.config = config or get_config()
        self.executor = executor

    def pack_command(self, record: PackageRecord, paths: LinkPaths) -> list[str]:
        return [
            *self.config.runner_cmd,
            f"--dir={paths.origin_dir}",
            self.config.build_tool, "run", self.config.pack_script,
            f"--cache-dir={paths.build_cache_dir}",
            f"--cwd={record.working_dir}",
            "-vvv",
        ]

    def pack_one(
        self, record: PackageRecord, paths: LinkPaths, span: Tracer,
    ) -> CommandResult:
        def _run(_span: Tracer) -> CommandResult:
            r = run_cmd(
                self.pack_command(record, paths), cwd=str(paths.origin_dir),
                label=f"pack {record.name}", executor=self.executor,
            )
            logger.debug("%s 打包输出:\n%s", record.name, r.stdout)
            return r

        return span.trace_child(f"pack {record.name}").trace_fn(_run)

    def pack_all(
        self, index: PackageIndex, paths: LinkPaths,
        tracer: Tracer | None = None,
    ) -> ArtifactMap:
        """并发打包全部包，返回 {包名: 产物路径}"""
        if not index:
            return EMPTY_ARTIFACTS
        span = tracer or NullTracer()
        workers = max(1, min(self.config.max_workers, len(index)))

        with ThreadPoolExecutor(max_workers=workers) as pool:
            futures = {
                pool.submit(self.pack_one, rec, paths, span): name
                for name, rec in index.items()
            }
            # 无异常时 wait 在全部完成后才返回
            done, _ = wait(futures, return_when=FIRST_EXCEPTION)
            for future in done:
                if future.exception() is not None:
                    logger.error("打包失败: %s", futures[future])
                    # 退出 with 时等待其余调用结束，然后抛出
                    future.result()

        logger.info("打包完成: %d 个包", len(index))
        return freeze_artifacts(index)
