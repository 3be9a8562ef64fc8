"""测试共享 fixture：伪执行器 + monorepo 构造"""

from __future__ import annotations

import json
import threading
from pathlib import Path
from typing import Callable

import pytest

from linkpack.core.config import Config
from linkpack.core.models import LinkPaths, PackageRecord
from linkpack.utils.shell import CommandResult

ROOT_MANIFEST = {"name": "monorepo", "private": True, "packageManager": "pnpm@8.6.0"}


class FakeExecutor:
    """记录调用的伪执行器，fail_on 命中时返回非 0 退出码"""

    def __init__(
        self,
        fail_on: Callable[[list[str]], bool] | None = None,
        stdout: str = "",
    ) -> None:
        self.calls: list[tuple[list[str], str]] = []
        self.fail_on = fail_on
        self.stdout = stdout
        self._lock = threading.Lock()

    def execute(
        self, args: list[str], *, cwd: str = ".",
        env: dict[str, str] | None = None,
    ) -> CommandResult:
        with self._lock:
            self.calls.append((list(args), cwd))
        if self.fail_on is not None and self.fail_on(args):
            return CommandResult(returncode=1, stdout="pack output", stderr="boom")
        return CommandResult(returncode=0, stdout=self.stdout, stderr="")

    def commands(self, program: str) -> list[list[str]]:
        return [args for args, _ in self.calls if args and args[0] == program]


def write_repo(
    repo: Path,
    packages: dict[str, dict | str],
    root: dict | None = ROOT_MANIFEST,
) -> Path:
    """在 repo 下写入 packages/<dir>/package.json；值为 str 时原样写入"""
    repo.mkdir(parents=True, exist_ok=True)
    if root is not None:
        (repo / "package.json").write_text(json.dumps(root, indent=2), encoding="utf-8")
    for dir_name, manifest in packages.items():
        pkg_dir = repo / "packages" / dir_name
        pkg_dir.mkdir(parents=True, exist_ok=True)
        text = manifest if isinstance(manifest, str) else json.dumps(manifest, indent=2)
        (pkg_dir / "package.json").write_text(text, encoding="utf-8")
    return repo


def make_record(
    name: str, manifest: dict | None = None, *,
    dir_name: str = "", root: Path = Path("/repo"),
) -> PackageRecord:
    dir_name = dir_name or name.split("/")[-1]
    return PackageRecord(
        name=name,
        dir_name=dir_name,
        manifest_path=root / "packages" / dir_name / "package.json",
        source_dir=root / "packages" / dir_name,
        working_dir=root / "packages" / dir_name,
        manifest=manifest if manifest is not None else {"name": name},
        artifact_path=Path("/cache") / f"{dir_name}-packed.tgz",
    )


@pytest.fixture()
def config() -> Config:
    return Config()


@pytest.fixture()
def fake_executor() -> FakeExecutor:
    return FakeExecutor()


@pytest.fixture()
def link_paths(tmp_path: Path) -> LinkPaths:
    cache = tmp_path / "repo" / "node_modules" / ".cache"
    return LinkPaths(
        origin_dir=tmp_path / "repo",
        packed_dir=cache / "tests" / "packed-pkgs",
        build_cache_dir=cache / "turbo",
    )


@pytest.fixture()
def executor_factory() -> type[FakeExecutor]:
    return FakeExecutor


@pytest.fixture()
def repo_factory() -> Callable[..., Path]:
    return write_repo


@pytest.fixture()
def record_factory() -> Callable[..., PackageRecord]:
    return make_record
