"""领域协议定义

使用 typing.Protocol 而非 ABC，调用方自带的追踪器无需继承即可接入。
"""

from __future__ import annotations

from typing import Callable, Protocol, TypeVar

T = TypeVar("T")


class Tracer(Protocol):
    """追踪器协议

    trace_child 派生子 span；trace_fn 在当前 span 内执行 fn(span) 并返回其结果。
    """

    def trace_child(self, name: str) -> Tracer:
        ...

    def trace_fn(self, fn: Callable[[Tracer], T]) -> T:
        ...
