"""追踪垫片

两种实现，在流程入口由 resolve_tracer 选定一次：
  - NullTracer: 纯透传，无任何副作用
  - RecordingTracer: 记录每个 span 的耗时和状态，并输出日志

调用方也可以传入任何满足 Tracer 协议的对象。
"""

from __future__ import annotations

import logging
import threading
import time
from dataclasses import dataclass
from typing import Callable, TypeVar

from linkpack.core.protocols import Tracer

logger = logging.getLogger(__name__)

T = TypeVar("T")


class NullTracer:
    """空追踪器"""

    def trace_child(self, name: str) -> NullTracer:
        return self

    def trace_fn(self, fn: Callable[[Tracer], T]) -> T:
        return fn(self)


@dataclass
class SpanRecord:
    """已结束的 span"""

    path: str
    duration: float
    status: str  # "ok", "error"


class RecordingTracer:
    """记录型追踪器

    同一棵 span 树共享 spans 列表；打包阶段子 span 在工作线程中结束，写入需加锁。
    """

    def __init__(
        self, name: str = "", *,
        _spans: list[SpanRecord] | None = None,
        _lock: threading.Lock | None = None,
    ) -> None:
        self.path = name
        self.spans: list[SpanRecord] = _spans if _spans is not None else []
        self._lock = _lock or threading.Lock()

    def trace_child(self, name: str) -> RecordingTracer:
        path = f"{self.path}/{name}" if self.path else name
        return RecordingTracer(path, _spans=self.spans, _lock=self._lock)

    def trace_fn(self, fn: Callable[[Tracer], T]) -> T:
        start = time.monotonic()
        status = "error"
        try:
            result = fn(self)
            status = "ok"
            return result
        finally:
            duration = time.monotonic() - start
            with self._lock:
                self.spans.append(SpanRecord(self.path, duration, status))
            logger.info(
                "span 结束: %s [%s] (%.2fs)", self.path, status, duration,
                extra={"span": self.path},
            )

    def find(self, path: str) -> SpanRecord | None:
        with self._lock:
            return next((s for s in self.spans if s.path == path), None)


def resolve_tracer(tracer: Tracer | None, name: str) -> Tracer:
    """流程入口处选择追踪器：有则派生根 span，无则使用空追踪器"""
    if tracer is None:
        return NullTracer()
    return tracer.trace_child(name)
