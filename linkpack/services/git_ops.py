"""Git 操作封装

为链接流水线提供仓库目录和 ref，本身不包含版本控制逻辑，
只是对 git 命令的薄封装：
  - clone / checkout / reset_to
  - last_stable_tag: 最新稳定 tag（不含预发布后缀，且未被 ref 引用）
  - commit_id
  - merge_branch: 合并 upstream 分支，冲突时 abort 并继续
"""

from __future__ import annotations

import logging
import re
import shutil
from pathlib import Path

from linkpack.core.exceptions import ProcessError, ValidationError
from linkpack.utils.shell import CommandExecutor, run_cmd

logger = logging.getLogger(__name__)

_SAFE_REF_RE = re.compile(r"^[a-zA-Z0-9_./@\-]+$")


def _check_ref(ref: str) -> str:
    # 以 - 开头会被 git 当作选项
    if not ref or ref.startswith("-") or not _SAFE_REF_RE.match(ref):
        raise ValidationError(f"ref 包含非法字符: {ref!r}")
    return ref


def version_key(tag: str) -> tuple[int, ...]:
    """稳定 tag 的排序键，如 v13.4.1 -> (13, 4, 1)"""
    return tuple(int(n) for n in re.findall(r"\d+", tag))


class GitOperations:
    """git 命令薄封装"""

    def __init__(self, git_root: str = "", executor: CommandExecutor | None = None) -> None:
        if not git_root:
            from linkpack.core.config import get_config
            git_root = get_config().git_root
        self.git_root = git_root
        self.executor = executor

    def _git(self, args: list[str], cwd: str | Path, label: str) -> str:
        r = run_cmd(["git", *args], cwd=str(cwd), label=label, executor=self.executor)
        return r.stdout

    def clone(self, repo_path: str, dest: str | Path) -> None:
        """克隆 git_root + repo_path 到 dest（dest 已存在则先删除）"""
        dest = Path(dest)
        shutil.rmtree(dest, ignore_errors=True)
        dest.parent.mkdir(parents=True, exist_ok=True)
        self._git(["clone", f"{self.git_root}{repo_path}", str(dest)], dest.parent, "git clone")

    def checkout(self, ref: str, repo_dir: str | Path) -> None:
        _check_ref(ref)
        self._git(["fetch"], repo_dir, "git fetch")
        self._git(["checkout", ref], repo_dir, "git checkout")

    def last_stable_tag(self, repo_dir: str | Path, ref: str = "") -> str | None:
        """返回最新稳定 tag；没有候选时返回 None"""
        out = self._git(["tag", "-l"], repo_dir, "git tag")
        latest: str | None = None
        for tag in reversed(out.strip().splitlines()):
            tag = tag.strip()
            # 稳定版不含 -canary / -beta 等后缀
            if not tag or "-" in tag or tag in ref:
                continue
            if latest is None or version_key(tag) > version_key(latest):
                latest = tag
        return latest

    def commit_id(self, repo_dir: str | Path) -> str:
        return self._git(["rev-parse", "HEAD"], repo_dir, "git rev-parse").strip()

    def reset_to(self, ref: str, repo_dir: str | Path) -> None:
        self._git(["reset", "--hard", _check_ref(ref)], repo_dir, "git reset")

    def merge_branch(self, ref: str, origin_dir: str | Path, dest_dir: str | Path) -> bool:
        """把 origin_dir 的 ref 分支合并进 dest_dir

        合并失败只记录日志；冲突时执行 merge --abort，保证工作区干净。
        返回是否合并成功。
        """
        _check_ref(ref)
        self._git(["remote", "add", "upstream", str(origin_dir)], dest_dir, "git remote add")
        self._git(["fetch", "upstream"], dest_dir, "git fetch upstream")

        try:
            self._git(["merge", "--no-edit", f"upstream/{ref}"], dest_dir, "git merge")
        except ProcessError as e:
            logger.error("自动合并主分支失败: %s", e)
            if "CONFLICT" in e.stdout:
                self._git(["merge", "--abort"], dest_dir, "git merge --abort")
                logger.info("已中止自动合并")
            return False
        logger.info("自动合并主分支成功")
        return True
