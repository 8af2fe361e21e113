"""Main window: hosts the waveform view and relays reload wake-ups."""

from __future__ import annotations

import os
import sys
import time

from PySide6.QtCore import QObject, Signal, Slot
from PySide6.QtWidgets import QApplication, QLabel, QMainWindow, QStatusBar

from wavewatchlib.audio import format_duration
from wavewatchlib.models import SampleSequence, ViewerOptions
from wavewatchlib.reload import WatchHandle, channel, watch
from wavewatchlib.viewer import WaveformViewer

from .log import dbg, timed
from .theme import COLORS, STYLESHEET
from .view import WaveformView
from .worker import SampleLoadWorker


class WakeBridge(QObject):
    """Turns a channel wake-up on the watcher thread into a GUI-thread slot call.

    ``woken`` is emitted from the watcher thread; because the bridge lives
    in the GUI thread Qt queues the emission into the GUI event loop.
    """

    woken = Signal()

    def wake(self):
        self.woken.emit()


class WaveformWindow(QMainWindow):
    """Single-file waveform window with live reload."""

    reloaded = Signal(bool)   # True if the samples were replaced

    def __init__(self, viewer: WaveformViewer, *, start_watch: bool = True,
                 parent=None):
        super().__init__(parent)
        self.viewer = viewer
        self._options: ViewerOptions = viewer.options
        self._worker: SampleLoadWorker | None = None
        self._queued_reloads = 0

        self.setWindowTitle(self._title())
        self.setStyleSheet(STYLESHEET)
        self.resize(1200, 700)

        self._view = WaveformView(viewer, self)
        self.setCentralWidget(self._view)
        self._status_label = QLabel()
        status = QStatusBar(self)
        status.addWidget(self._status_label)
        self.setStatusBar(status)
        self._show_status(f"Watching {os.path.basename(viewer.path)}")

        self._bridge = WakeBridge(self)
        self._bridge.woken.connect(self._on_woken)
        sender, self._receiver = channel(wake=self._bridge.wake)
        self._sender = sender
        self._watch: WatchHandle | None = None
        if start_watch:
            self._watch = watch(viewer.path, sender,
                                debounce=self._options.debounce_sec)

    @property
    def watch_sender(self):
        return self._sender

    @property
    def view(self) -> WaveformView:
        return self._view

    # ── Wake-up handling ──────────────────────────────────────────────────

    @Slot()
    def _on_woken(self):
        # One emission per token, so one reload per accepted change.
        if self._receiver.try_recv() is None:
            return
        dbg("wake-up received")
        if not self._options.decode_in_background:
            self._finish_reload(self.viewer.on_wake())
            return
        if self._worker is not None:
            self._queued_reloads += 1
            return
        self._start_worker()

    def _start_worker(self):
        worker = SampleLoadWorker(self.viewer.path, self.viewer.loader, self)
        worker.loaded.connect(self._on_worker_loaded)
        worker.error.connect(self._on_worker_error)
        worker.finished.connect(self._on_worker_done)
        self._worker = worker
        worker.start()

    @Slot(object)
    def _on_worker_loaded(self, samples: SampleSequence):
        self.viewer.replace(samples)
        self._finish_reload(True)

    @Slot(str)
    def _on_worker_error(self, message: str):
        self.viewer.last_error = message
        dbg(f"background reload failed: {message}")
        self._finish_reload(False)

    @Slot()
    def _on_worker_done(self):
        worker = self._worker
        self._worker = None
        if worker is not None:
            worker.deleteLater()
        if self._queued_reloads > 0 and not self._receiver.closed:
            self._queued_reloads -= 1
            self._start_worker()

    def _finish_reload(self, replaced: bool):
        if replaced:
            self.setWindowTitle(self._title())
            self._show_status(
                f"Reloaded at {time.strftime('%H:%M:%S')}"
                f" ({self.viewer.reload_count} reloads)")
            self._view.update()
        else:
            self._show_status(f"Reload failed: {self.viewer.last_error}",
                              error=True)
        self.reloaded.emit(replaced)

    # ── Helpers ───────────────────────────────────────────────────────────

    def _title(self) -> str:
        seq = self.viewer.samples
        name = os.path.basename(self.viewer.path)
        return f"{name} - {format_duration(seq.frames, seq.samplerate)} - wavewatch"

    def _show_status(self, text: str, error: bool = False):
        color = COLORS["error"] if error else COLORS["dim"]
        self._status_label.setStyleSheet(f"color: {color};")
        self._status_label.setText(text)

    def closeEvent(self, event):
        # The watcher notices the closed receiver on its next send.
        self._receiver.close()
        if self._watch is not None:
            self._watch.stop()
        if self._worker is not None:
            self._worker.wait()
        super().closeEvent(event)


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------

def run(path: str, samples: SampleSequence, options: ViewerOptions) -> int:
    """Open the window for an already-decoded file and run the event loop."""
    with timed("QApplication created"):
        app = QApplication.instance() or QApplication(sys.argv[:1])
        app.setStyle("Fusion")

    viewer = WaveformViewer(path, samples, options)
    with timed("window created"):
        window = WaveformWindow(viewer)
    window.show()
    return app.exec()
