"""特殊包策略表

按包名映射到策略函数，主遍历只负责查表调用：
  - native 二进制包: files 中加入 native 目录，并列出目录内容便于诊断
  - 主框架包: 按「外部覆盖 > 本地 native 包 > 自带 native 目录」顺序处理 native 依赖

策略只修改当前记录自己的 manifest，其他包的信息一律从 PolicyContext 快照读取。
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Callable

from linkpack.core.config import Config
from linkpack.core.models import PackageRecord
from linkpack.utils.shell import CommandExecutor, run_cmd

logger = logging.getLogger(__name__)


@dataclass
class PolicyContext:
    """策略执行上下文（只读快照）"""

    targets: dict[str, str]
    native_override: dict[str, str] = field(default_factory=dict)


PackagePolicy = Callable[[PackageRecord, PolicyContext], None]


def native_binary_policy(
    config: Config, executor: CommandExecutor | None = None,
) -> PackagePolicy:
    """native 二进制包: 保证编译产物随包发布"""

    def apply(record: PackageRecord, ctx: PolicyContext) -> None:
        record.ensure_file_entry(config.native_dir)
        binaries = record.working_dir / config.native_dir
        # 目录缺失时 ls 失败，以 ProcessError 向上传播
        r = run_cmd(
            ["ls", str(binaries)], cwd=str(record.working_dir),
            label="list native binaries", executor=executor,
        )
        logger.info("使用 native 二进制: %s\n%s", binaries, r.stdout.rstrip())

    return apply


def primary_package_policy(config: Config) -> PackagePolicy:
    """主框架包: 连接 native 依赖"""

    def apply(record: PackageRecord, ctx: PolicyContext) -> None:
        if ctx.native_override:
            record.dependencies.update(ctx.native_override)
            logger.info("%s 使用外部 native 依赖: %s", record.name, ctx.native_override)
        elif config.native_package in ctx.targets:
            record.dependencies[config.native_package] = ctx.targets[config.native_package]
        else:
            # 本地没有 native 包时，假定二进制位于主包自身目录
            record.ensure_file_entry(config.native_dir)
            logger.info("%s 未找到本地 %s，打包自带 %s 目录",
                        record.name, config.native_package, config.native_dir)

    return apply


def build_policies(
    config: Config, executor: CommandExecutor | None = None,
) -> dict[str, PackagePolicy]:
    """构建默认策略表"""
    return {
        config.native_package: native_binary_policy(config, executor),
        config.primary_package: primary_package_policy(config),
    }
