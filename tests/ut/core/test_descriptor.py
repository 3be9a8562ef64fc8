"""BuildDescriptorWriter 单元测试"""

from __future__ import annotations

import json

import pytest

from linkpack.core.descriptor import BuildDescriptorWriter


class TestBuildDescriptorWriter:
    """构建描述文件落盘"""

    @pytest.fixture()
    def record(self, record_factory, tmp_path):
        rec = record_factory("core", {
            "name": "core",
            "dependencies": {"utils": "/cache/utils-packed.tgz"},
            "scripts": {"test-pack": "yarn pack -f /cache/core-packed.tgz"},
        }, root=tmp_path / "work")
        rec.source_dir = tmp_path / "origin" / "packages" / "core"
        rec.working_dir.mkdir(parents=True)
        return rec

    def test_writes_descriptor(self, config, record):
        BuildDescriptorWriter(config).write_all({"core": record})
        data = json.loads((record.working_dir / "turbo.json").read_text(encoding="utf-8"))
        assert data == {
            "pipeline": {
                "test-pack": {
                    "outputs": ["/cache/core-packed.tgz"],
                    "inputs": [str(record.source_dir)],
                },
            },
        }

    def test_writes_empty_lockfile(self, config, record):
        BuildDescriptorWriter(config).write_all({"core": record})
        lock = record.working_dir / "pnpm-lock.yaml"
        assert lock.exists()
        assert lock.read_text() == ""

    def test_persists_manifest_formatted(self, config, record):
        BuildDescriptorWriter(config).write_all({"core": record})
        text = record.manifest_path.read_text(encoding="utf-8")
        assert text == json.dumps(record.manifest, indent=2) + "\n"
        assert list(json.loads(text)) == ["name", "dependencies", "scripts"]

    def test_idempotent(self, config, record):
        writer = BuildDescriptorWriter(config)
        writer.write_all({"core": record})
        first = {p.name: p.read_bytes() for p in record.working_dir.iterdir()}
        writer.write_all({"core": record})
        second = {p.name: p.read_bytes() for p in record.working_dir.iterdir()}
        assert first == second

    def test_custom_file_names(self, config, record):
        config.descriptor_name = "pipeline.json"
        config.lockfile_name = "yarn.lock"
        BuildDescriptorWriter(config).write_one(record)
        assert (record.working_dir / "pipeline.json").exists()
        assert (record.working_dir / "yarn.lock").exists()
