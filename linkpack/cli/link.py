"""链接命令"""

import json

import click

from linkpack.core.exceptions import LinkPackError
from linkpack.core.models import LinkRequest
from linkpack.core.tracing import RecordingTracer
from linkpack.services.link_service import LinkService


def _parse_kv_pairs(pairs: tuple[str, ...]) -> dict[str, str]:
    """解析 key=value 参数对"""
    result: dict[str, str] = {}
    for p in pairs:
        if "=" not in p:
            raise click.BadParameter(f"格式应为 key=value: {p}")
        k, v = p.split("=", 1)
        result[k.strip()] = v.strip()
    return result


def register_commands(main: click.Group) -> None:
    """注册链接相关命令"""
    main.add_command(link)


@click.command()
@click.argument("repo_dir", type=click.Path(file_okay=False, resolve_path=True))
@click.option("--origin", default="", help="origin 仓库目录（默认与 REPO_DIR 相同）")
@click.option("--native-override", multiple=True, help="native 依赖覆盖，格式: name=version|path（可多次指定）")
@click.option("--trace", is_flag=True, help="输出各阶段耗时")
def link(repo_dir: str, origin: str, native_override: tuple[str, ...], trace: bool) -> None:
    """改写 REPO_DIR 下本地包的依赖并打包，输出 {包名: 产物路径}"""
    tracer = RecordingTracer() if trace else None
    try:
        artifacts = LinkService().link(LinkRequest(
            repo_dir=repo_dir, origin_dir=origin,
            native_override=_parse_kv_pairs(native_override),
            tracer=tracer,
        ))
    except LinkPackError as e:
        raise click.ClickException(f"[{e.code}] {e}") from e

    click.echo(json.dumps(dict(artifacts), indent=2, ensure_ascii=False))
    if tracer is not None:
        for s in tracer.spans:
            click.echo(f"  {s.duration:8.2f}s  [{s.status:5s}] {s.path}", err=True)
