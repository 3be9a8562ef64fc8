"""JSON / 文本文件统一读写工具

包清单、构建描述文件都经由这里落盘：
统一 encoding="utf-8"、原子写入、确定性格式（缩进 2，保持键顺序，末尾换行）。
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any

from linkpack.core.exceptions import ManifestError

logger = logging.getLogger(__name__)


def atomic_write(path: Path, content: str) -> None:
    """原子写入文件：先写临时文件再 rename，防止中途崩溃导致损坏

    参数:
        path: 目标文件路径
        content: 要写入的内容

    异常:
        OSError: 文件写入或移动失败
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp = tempfile.mkstemp(
        dir=str(path.parent), suffix=".tmp",
    )
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(content)
        os.replace(tmp, str(path))
    except Exception:
        # 只捕获普通异常，不拦截 KeyboardInterrupt/SystemExit
        try:
            os.unlink(tmp)
        except OSError:
            # 临时文件清理失败不影响原异常抛出
            pass
        raise


def dump_json(data: Any) -> str:
    """序列化为确定性的 JSON 文本"""
    return json.dumps(data, indent=2, ensure_ascii=False) + "\n"


def load_json(path: str | Path) -> dict[str, Any]:
    """读取 JSON 清单文件

    返回:
        dict: 解析后的字典

    异常:
        FileNotFoundError: 文件不存在（由调用方决定是否致命）
        ManifestError: 非 UTF-8 编码、JSON 格式错误或顶层不是对象
    """
    p = Path(path)
    try:
        data = json.loads(p.read_text(encoding="utf-8"))
    except UnicodeDecodeError as e:
        logger.error("读取 JSON 文件失败: %s, 错误: %s", p, e)
        raise ManifestError(f"不是合法的 UTF-8 文本 (位置 {e.start})", str(p)) from e
    except json.JSONDecodeError as e:
        logger.error("解析 JSON 文件失败: %s, 错误: %s", p, e)
        raise ManifestError(f"JSON 格式错误 ({e.msg}, 行 {e.lineno})", str(p)) from e
    if not isinstance(data, dict):
        raise ManifestError(
            f"顶层不是对象 (实际类型: {type(data).__name__})", str(p),
        )
    return data


def save_json(path: str | Path, data: Any) -> None:
    """原子写入 JSON 文件"""
    atomic_write(Path(path), dump_json(data))


def save_text(path: str | Path, content: str) -> None:
    """原子写入纯文本文件"""
    atomic_write(Path(path), content)
