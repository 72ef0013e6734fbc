"""Span helper recording elapsed milliseconds onto a session's event list."""
from __future__ import annotations

import time
from contextlib import contextmanager
from typing import Any, Iterator


@contextmanager
def span(target: Any, name: str, **fields: Any) -> Iterator[None]:
    started = time.perf_counter()
    try:
        yield
    finally:
        entry = {"span": name, "ms": int((time.perf_counter() - started) * 1000)}
        entry.update(fields)
        target.events.append(entry)


__all__ = ["span"]
