"""Watch one audio file and hand debounced change tokens to the renderer.

The coordinator runs on its own threads (the watchdog observer plus one
debounce thread) and only ever sends :class:`WatchEvent` tokens through a
single-producer/single-consumer channel.  Reading the file again is the
consumer's job, so the sample data never crosses threads.

Usage::

    sender, receiver = channel(wake=bridge.woken.emit)
    handle = watch("take.wav", sender)
    ...
    receiver.close()   # next send fails and the watcher exits
"""

from __future__ import annotations

import logging
import os
import queue
import threading
import time
import weakref
from collections import deque
from typing import Callable

from watchdog.events import FileSystemEvent, FileSystemEventHandler
from watchdog.observers import Observer

from .models import WatchEvent

log = logging.getLogger(__name__)

DEFAULT_DEBOUNCE = 0.25
RETRY_INTERVAL = 1.0
OBSERVER_JOIN_TIMEOUT = 2.0

# Read-only access to the file (our own reload included) is not a change.
_IGNORED_EVENT_TYPES = {"opened", "closed_no_write"}


# ---------------------------------------------------------------------------
# Channel
# ---------------------------------------------------------------------------

class ChannelClosed(Exception):
    """Raised by :meth:`Sender.send` once the receiving side is gone."""
    pass


class _ChannelState:
    def __init__(self, wake: Callable[[], None] | None):
        self.items: deque[WatchEvent] = deque()
        self.lock = threading.Lock()
        self.closed = False
        self.wake = wake

    def close(self):
        with self.lock:
            self.closed = True
            self.items.clear()


class Sender:
    def __init__(self, state: _ChannelState):
        self._state = state

    def send(self, event: WatchEvent) -> None:
        """Queue *event* and wake the consumer.  Never blocks."""
        state = self._state
        with state.lock:
            if state.closed:
                raise ChannelClosed()
            state.items.append(event)
        if state.wake is None:
            return
        if state.closed:
            raise ChannelClosed()
        try:
            state.wake()
        except RuntimeError as e:
            # The wake target may be torn down together with the receiver.
            if state.closed:
                raise ChannelClosed() from e
            raise


class Receiver:
    def __init__(self, state: _ChannelState):
        self._state = state
        # A dropped receiver counts as closed.
        self._finalizer = weakref.finalize(self, state.close)

    @property
    def closed(self) -> bool:
        return self._state.closed

    def try_recv(self) -> WatchEvent | None:
        with self._state.lock:
            if self._state.items:
                return self._state.items.popleft()
        return None

    def pending(self) -> int:
        with self._state.lock:
            return len(self._state.items)

    def close(self) -> None:
        self._finalizer()


def channel(wake: Callable[[], None] | None = None) -> tuple[Sender, Receiver]:
    """Create a connected ``(Sender, Receiver)`` pair.

    *wake* is called on the producer thread after every successful send;
    hosts use it to post a message into their event loop.
    """
    state = _ChannelState(wake)
    return Sender(state), Receiver(state)


# ---------------------------------------------------------------------------
# Watcher
# ---------------------------------------------------------------------------

_STOP = object()
_LOST = object()


def _norm(path: str) -> str:
    return os.path.normcase(os.path.abspath(path))


class _ChangeHandler(FileSystemEventHandler):
    """Forwards events that touch exactly one path to the debounce queue."""

    def __init__(self, target: str, directory: str, inbox: queue.SimpleQueue):
        super().__init__()
        self._target = target
        self._directory = directory
        self._inbox = inbox

    def on_any_event(self, event: FileSystemEvent):
        if event.event_type in _IGNORED_EVENT_TYPES:
            return
        src = _norm(os.fsdecode(event.src_path))
        if event.is_directory:
            if event.event_type in ("deleted", "moved") and src == self._directory:
                self._inbox.put(_LOST)
            return
        dest = getattr(event, "dest_path", "") or ""
        paths = {src}
        if dest:
            paths.add(_norm(os.fsdecode(dest)))
        if self._target in paths:
            self._inbox.put(time.monotonic())


class WatchHandle:
    """Running watch on one file.  Created by :func:`watch`."""

    def __init__(self, path: str, sender: Sender, debounce: float):
        self.path = path
        self.debounce = debounce
        self._sender = sender
        self._target = _norm(path)
        self._directory = os.path.dirname(self._target)
        self._inbox: queue.SimpleQueue = queue.SimpleQueue()
        self._handler = _ChangeHandler(self._target, self._directory, self._inbox)
        self._observer = Observer()
        self._observer.daemon = True
        self._watch = None
        self._stopped = threading.Event()
        self._thread = threading.Thread(
            target=self._run, name=f"watch:{os.path.basename(path)}",
            daemon=True,
        )

    @property
    def alive(self) -> bool:
        return self._thread.is_alive() or self._observer.is_alive()

    def start(self) -> None:
        self._observer.start()
        self._schedule()
        self._thread.start()

    def stop(self) -> None:
        """Stop observing.  Safe to call from any thread, more than once."""
        self._stopped.set()
        self._inbox.put(_STOP)

    def join(self, timeout: float | None = None) -> None:
        self._thread.join(timeout)

    # ── Internals ─────────────────────────────────────────────────────────

    def _schedule(self) -> bool:
        if self._watch is not None:
            return True
        try:
            self._watch = self._observer.schedule(
                self._handler, self._directory, recursive=False)
        except OSError as e:
            log.warning("Cannot watch %s (%s); retrying", self._directory, e)
            return False
        log.debug("Watching %s", self.path)
        return True

    def _unschedule(self) -> None:
        if self._watch is None:
            return
        try:
            self._observer.unschedule(self._watch)
        except (KeyError, OSError) as e:
            log.debug("Unschedule failed: %s", e)
        self._watch = None

    def _next(self, timeout: float | None):
        try:
            return self._inbox.get(timeout=timeout)
        except queue.Empty:
            return None

    def _run(self):
        try:
            while not self._stopped.is_set():
                timeout = None if self._schedule() else RETRY_INTERVAL
                item = self._next(timeout)
                if item is None:
                    continue
                if item is _STOP:
                    break
                if item is _LOST:
                    log.warning("Watched directory %s went away", self._directory)
                    self._unschedule()
                    continue

                # Swallow the rest of the burst: wait for a quiet period.
                while True:
                    item = self._next(self.debounce)
                    if item is None or item is _STOP or item is _LOST:
                        break
                if item is _STOP or self._stopped.is_set():
                    break
                if item is _LOST:
                    log.warning("Watched directory %s went away", self._directory)
                    self._unschedule()

                try:
                    self._sender.send(WatchEvent())
                except ChannelClosed:
                    log.debug("Receiver closed; watcher for %s exiting", self.path)
                    break
        finally:
            self._unschedule()
            self._observer.stop()
            self._observer.join(OBSERVER_JOIN_TIMEOUT)


def watch(path: str, sender: Sender, *,
          debounce: float = DEFAULT_DEBOUNCE) -> WatchHandle:
    """Start watching *path* and return its :class:`WatchHandle`.

    A burst of changes produces one :class:`WatchEvent` once *debounce*
    seconds pass without further changes.
    """
    handle = WatchHandle(path, sender, debounce)
    handle.start()
    return handle
