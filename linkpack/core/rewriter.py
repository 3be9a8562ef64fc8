"""依赖改写器

对索引中的每个包:
  1. dependencies 中命中其他本地包的条目改为该包的打包产物路径
  2. 执行策略表中对应的特殊策略
  3. packageManager 缺省时继承根 manifest
  4. 覆盖写入打包脚本 (test-pack)

目标路径在改写开始前一次性快照，每个包只写自身 manifest，遍历顺序不影响结果。
不在索引中的依赖保持原版本号不变。
"""

from __future__ import annotations

import logging
import shlex
from typing import Any

from linkpack.core.config import Config, get_config
from linkpack.core.models import PackageIndex, PackageRecord
from linkpack.core.policies import PackagePolicy, PolicyContext, build_policies
from linkpack.utils.shell import CommandExecutor

logger = logging.getLogger(__name__)


class DependencyRewriter:
    """本地依赖替换"""

    def __init__(
        self,
        config: Config | None = None,
        policies: dict[str, PackagePolicy] | None = None,
        executor: CommandExecutor | None = None,
    ) -> None:
        self.config = config or get_config()
        self.policies = (
            policies if policies is not None
            else build_policies(self.config, executor)
        )

    def rewrite_all(
        self,
        index: PackageIndex,
        root_manifest: dict[str, Any],
        native_override: dict[str, str] | None = None,
    ) -> None:
        """改写索引中全部包的 manifest（仅内存，不落盘）"""
        ctx = PolicyContext(
            targets={name: str(rec.artifact_path) for name, rec in index.items()},
            native_override=dict(native_override or {}),
        )
        package_manager = root_manifest.get("packageManager")
        for record in index.values():
            self.rewrite_one(record, ctx, package_manager)

    def rewrite_one(
        self, record: PackageRecord, ctx: PolicyContext,
        package_manager: str | None = None,
    ) -> None:
        manifest = record.manifest
        deps = manifest.get("dependencies") or {}
        linked = []
        for dep_name in deps:
            if dep_name == record.name or dep_name not in ctx.targets:
                continue
            deps[dep_name] = ctx.targets[dep_name]
            linked.append(dep_name)
        if linked:
            logger.info("%s 链接本地依赖: %s", record.name, ", ".join(linked))

        policy = self.policies.get(record.name)
        if policy is not None:
            policy(record, ctx)

        # 构建工具要求声明 packageManager
        if not manifest.get("packageManager") and package_manager:
            manifest["packageManager"] = package_manager

        manifest["scripts"] = {
            **(manifest.get("scripts") or {}),
            self.config.pack_script: shlex.join(
                [*self.config.pack_cmd, str(record.artifact_path)]
            ),
        }
