"""ManifestLoader 单元测试"""

from __future__ import annotations

import pytest

from linkpack.core.exceptions import ManifestError
from linkpack.core.loader import ManifestLoader


class TestManifestLoader:
    """包索引加载"""

    @pytest.fixture()
    def loader(self, config):
        return ManifestLoader(config)

    def test_missing_container_returns_empty(self, loader, link_paths, tmp_path):
        repo = tmp_path / "repo"
        repo.mkdir()
        assert loader.load(repo, link_paths) == {}

    def test_container_is_file_propagates(self, loader, link_paths, tmp_path):
        repo = tmp_path / "repo"
        repo.mkdir()
        (repo / "packages").write_text("not a dir")
        with pytest.raises(NotADirectoryError):
            loader.load(repo, link_paths)

    def test_index_keyed_by_manifest_name(self, loader, link_paths, repo_factory):
        repo = repo_factory(link_paths.origin_dir, {
            "next-swc": {"name": "@next/swc", "version": "13.0.0"},
            "next": {"name": "next", "version": "13.0.0"},
        })
        index = loader.load(repo, link_paths)

        assert set(index) == {"@next/swc", "next"}
        swc = index["@next/swc"]
        assert swc.dir_name == "next-swc"
        assert swc.working_dir == repo / "packages" / "next-swc"
        assert swc.manifest_path == repo / "packages" / "next-swc" / "package.json"
        assert swc.artifact_path == link_paths.packed_dir / "next-swc-packed.tgz"
        assert swc.manifest["version"] == "13.0.0"

    def test_source_dir_points_to_origin(self, loader, link_paths, repo_factory, tmp_path):
        repo = repo_factory(tmp_path / "copy", {"core": {"name": "core"}})
        index = loader.load(repo, link_paths)
        assert index["core"].source_dir == link_paths.origin_dir / "packages" / "core"
        assert index["core"].working_dir == repo / "packages" / "core"

    def test_skips_dir_without_manifest(self, loader, link_paths, repo_factory):
        repo = repo_factory(link_paths.origin_dir, {"core": {"name": "core"}})
        (repo / "packages" / "docs").mkdir()
        (repo / "packages" / "README.md").write_text("# packages")
        index = loader.load(repo, link_paths)
        assert list(index) == ["core"]

    def test_malformed_manifest_raises(self, loader, link_paths, repo_factory):
        repo = repo_factory(link_paths.origin_dir, {"broken": '{"name": "broken",'})
        with pytest.raises(ManifestError, match="broken") as exc:
            loader.load(repo, link_paths)
        assert exc.value.path.endswith("package.json")

    def test_manifest_without_name_raises(self, loader, link_paths, repo_factory):
        repo = repo_factory(link_paths.origin_dir, {"anon": {"version": "1.0.0"}})
        with pytest.raises(ManifestError, match="name"):
            loader.load(repo, link_paths)

    @pytest.mark.parametrize("key,value", [
        ("dependencies", ["utils"]),
        ("scripts", "tsc"),
        ("files", "dist"),
        ("dependencies", None),
    ])
    def test_wrong_field_type_raises(self, loader, link_paths, repo_factory, key, value):
        repo = repo_factory(link_paths.origin_dir, {"core": {"name": "core", key: value}})
        with pytest.raises(ManifestError, match=key) as exc:
            loader.load(repo, link_paths)
        assert exc.value.path.endswith("package.json")

    def test_duplicate_name_raises(self, loader, link_paths, repo_factory):
        repo = repo_factory(link_paths.origin_dir, {
            "a": {"name": "same"},
            "b": {"name": "same"},
        })
        with pytest.raises(ManifestError, match="重复"):
            loader.load(repo, link_paths)

    def test_custom_container_dir(self, link_paths, repo_factory, config):
        config.packages_dir = "libs"
        repo = repo_factory(link_paths.origin_dir, {"core": {"name": "core"}})
        (repo / "packages").rename(repo / "libs")
        index = ManifestLoader(config).load(repo, link_paths)
        assert index["core"].working_dir == repo / "libs" / "core"
