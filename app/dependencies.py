from __future__ import annotations

from functools import lru_cache

from sync.reactors import ReactorContext


@lru_cache(maxsize=1)
def get_reactor_context() -> ReactorContext:
    # One index client per process, reused across invocations.
    return ReactorContext.from_settings()
