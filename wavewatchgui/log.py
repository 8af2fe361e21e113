"""Environment-gated debug output for the wavewatch GUI.

Usage::

    from wavewatchgui.log import dbg, timed

    dbg("wake-up received")
    with timed("frame 1200x700"):
        ...

Nothing is printed unless ``WW_DEBUG`` is ``1`` or ``true``
(case-insensitive).  Lines go to stderr as
``[HH:MM:SS.mmm Caller] message`` where *Caller* is the calling class or
module, so output can be filtered with grep.
"""

from __future__ import annotations

import inspect
import os
import sys
import time
from contextlib import contextmanager

_ENABLED: bool | None = None


def is_enabled() -> bool:
    global _ENABLED
    if _ENABLED is None:
        val = os.environ.get("WW_DEBUG", "").strip().lower()
        _ENABLED = val in ("1", "true")
    return _ENABLED


def _caller_name(depth: int) -> str:
    frame = inspect.currentframe()
    try:
        caller = frame
        for _ in range(depth):
            caller = caller.f_back if caller is not None else None
        if caller is None:
            return "?"
        self_obj = caller.f_locals.get("self")
        if self_obj is not None:
            return type(self_obj).__name__
        mod = caller.f_globals.get("__name__", "")
        return mod.rsplit(".", 1)[-1] if mod else "?"
    finally:
        del frame


def _emit(name: str, msg: str) -> None:
    now = time.time()
    stamp = time.strftime("%H:%M:%S", time.localtime(now))
    print(f"[{stamp}.{int((now % 1) * 1000):03d} {name}] {msg}",
          file=sys.stderr, flush=True)


def dbg(msg: str) -> None:
    if is_enabled():
        _emit(_caller_name(2), msg)


@contextmanager
def timed(label: str):
    """Report how long the ``with`` body took, in milliseconds."""
    if not is_enabled():
        yield
        return
    # contextmanager adds one frame between us and the caller
    name = _caller_name(3)
    t0 = time.perf_counter()
    try:
        yield
    finally:
        _emit(name, f"{label}: {(time.perf_counter() - t0) * 1000:.1f} ms")
