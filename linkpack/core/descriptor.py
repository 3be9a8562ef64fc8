"""构建描述文件写入器

每个包目录写入:
- turbo.json: 打包任务的 outputs=[产物路径]、inputs=[origin 源码目录]
- pnpm-lock.yaml: 空占位文件，构建工具据此接受该目录为 workspace 成员
- package.json: 改写后的 manifest

必须在全部包改写完成后调用；写入是原子且确定性的，重复执行输出一致。
"""

from __future__ import annotations

import logging
from typing import Any

from linkpack.core.config import Config, get_config
from linkpack.core.models import PackageIndex, PackageRecord
from linkpack.utils.json_io import save_json, save_text

logger = logging.getLogger(__name__)


class BuildDescriptorWriter:
    """落盘改写结果"""

    def __init__(self, config: Config | None = None) -> None:
        self.config = config or get_config()

    def descriptor_for(self, record: PackageRecord) -> dict[str, Any]:
        return {
            "pipeline": {
                self.config.pack_script: {
                    "outputs": [str(record.artifact_path)],
                    "inputs": [str(record.source_dir)],
                },
            },
        }

    def write_one(self, record: PackageRecord) -> None:
        save_json(record.working_dir / self.config.descriptor_name, self.descriptor_for(record))
        save_text(record.working_dir / self.config.lockfile_name, "")
        save_json(record.manifest_path, record.manifest)

    def write_all(self, index: PackageIndex) -> None:
        for record in index.values():
            self.write_one(record)
        logger.info("已写入 %d 个包的构建描述文件", len(index))
