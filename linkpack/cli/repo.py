"""仓库操作命令"""

import click

from linkpack.core.exceptions import LinkPackError
from linkpack.services.git_ops import GitOperations


def register_commands(main: click.Group) -> None:
    """注册仓库操作相关命令"""
    main.add_command(repo_group)


@click.group(name="repo")
def repo_group() -> None:
    """仓库操作"""


@repo_group.command(name="last-stable")
@click.argument("repo_dir", type=click.Path(exists=True, file_okay=False))
@click.option("--ref", default="", help="排除已被该 ref 引用的 tag")
def repo_last_stable(repo_dir: str, ref: str) -> None:
    """输出最新稳定 tag"""
    try:
        tag = GitOperations().last_stable_tag(repo_dir, ref)
    except LinkPackError as e:
        raise click.ClickException(str(e)) from e
    if tag is None:
        raise click.ClickException("没有稳定 tag")
    click.echo(tag)


@repo_group.command(name="commit")
@click.argument("repo_dir", type=click.Path(exists=True, file_okay=False))
def repo_commit(repo_dir: str) -> None:
    """输出 HEAD commit"""
    try:
        click.echo(GitOperations().commit_id(repo_dir))
    except LinkPackError as e:
        raise click.ClickException(str(e)) from e


@repo_group.command(name="reset")
@click.argument("ref")
@click.argument("repo_dir", type=click.Path(exists=True, file_okay=False))
def repo_reset(ref: str, repo_dir: str) -> None:
    """硬重置到指定 ref"""
    try:
        GitOperations().reset_to(ref, repo_dir)
    except LinkPackError as e:
        raise click.ClickException(str(e)) from e
    click.echo(f"已重置: {repo_dir} -> {ref}")


@repo_group.command(name="merge")
@click.argument("ref")
@click.argument("origin_dir", type=click.Path(exists=True, file_okay=False))
@click.argument("dest_dir", type=click.Path(exists=True, file_okay=False))
def repo_merge(ref: str, origin_dir: str, dest_dir: str) -> None:
    """把 ORIGIN_DIR 的 REF 分支合并进 DEST_DIR（冲突时自动中止）"""
    try:
        merged = GitOperations().merge_branch(ref, origin_dir, dest_dir)
    except LinkPackError as e:
        raise click.ClickException(str(e)) from e
    click.echo("合并成功" if merged else "合并未完成，已保持原状态")
