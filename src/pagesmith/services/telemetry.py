"""Stage timings for ``--verbose`` runs.

A ``@traced`` service method opens a root :class:`Span`; pipeline stages
open children with :func:`trace_span`. The finished tree is attached to
``ServiceResult.meta["telemetry"]``, e.g.::

    GenerateService.generate
        registry
        discover   (files=12)
        parse      (workers=4)
        aggregate  (list_pages=2)

Collection is off by default and costs one ContextVar lookup per call.
Spans follow the calling context only: work running on the parse pool is
timed as a whole by the ``parse`` span around it.
"""

from __future__ import annotations

import functools
import time
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass, field
from typing import Any, ParamSpec, TypeVar

import structlog

from pagesmith.services.result import ServiceResult

logger = structlog.get_logger("pagesmith.telemetry")

_enabled: ContextVar[bool] = ContextVar("_enabled", default=False)
_current_span: ContextVar[Span | None] = ContextVar("_current_span", default=None)


@dataclass
class Span:
    """One timed section of a service call."""

    name: str
    children: list[Span] = field(default_factory=list)
    annotations: dict[str, Any] = field(default_factory=dict)
    started: float = field(default_factory=time.perf_counter)
    finished: float | None = None

    @property
    def duration_ms(self) -> float:
        """Milliseconds (two decimals); 0.0 while the span is still open."""
        if self.finished is None:
            return 0.0
        return round((self.finished - self.started) * 1000, 2)

    def child(self, name: str) -> Span:
        span = Span(name=name)
        self.children.append(span)
        return span

    def finish(self) -> None:
        self.finished = time.perf_counter()

    def annotate(self, **values: Any) -> None:
        self.annotations.update(values)

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"name": self.name, "duration_ms": self.duration_ms}
        if self.annotations:
            data["annotations"] = dict(self.annotations)
        if self.children:
            data["children"] = [c.to_dict() for c in self.children]
        return data


@contextmanager
def _activate(span: Span) -> Iterator[Span]:
    token = _current_span.set(span)
    try:
        yield span
    finally:
        span.finish()
        _current_span.reset(token)


@contextmanager
def trace_span(name: str) -> Iterator[Span | None]:
    """Time a pipeline stage as a child of the active span.

    Yields None when telemetry is off or no ``@traced`` call is active,
    so callers guard annotations with ``if span is not None``.
    """
    parent = get_current_span()
    if parent is None:
        yield None
        return
    with _activate(parent.child(name)) as span:
        yield span


_P = ParamSpec("_P")
_R = TypeVar("_R")


def traced(func: Callable[_P, _R]) -> Callable[_P, _R]:  # noqa: UP047
    """Time a service method; attach the span tree to a returned ServiceResult."""

    @functools.wraps(func)
    def wrapper(*args: _P.args, **kwargs: _P.kwargs) -> _R:
        if not _enabled.get():
            return func(*args, **kwargs)

        root = Span(name=func.__qualname__)
        try:
            with _activate(root):
                result = func(*args, **kwargs)
        finally:
            logger.debug(
                "span.complete",
                span_name=root.name,
                duration_ms=root.duration_ms,
                stages=[c.name for c in root.children],
            )

        if isinstance(result, ServiceResult):
            meta = {**(result.meta or {}), "telemetry": root.to_dict()}
            return result.model_copy(update={"meta": meta})  # type: ignore[return-value]
        return result

    return wrapper


def enable_telemetry() -> None:
    """Collect spans in the current context (``--verbose``)."""
    _enabled.set(True)


def disable_telemetry() -> None:
    _enabled.set(False)


def get_current_span() -> Span | None:
    if not _enabled.get():
        return None
    return _current_span.get()
