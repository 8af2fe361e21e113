"""Background decode for reloads."""

from __future__ import annotations

from PySide6.QtCore import QThread, Signal

from wavewatchlib.audio import DecodeError, load_samples


class SampleLoadWorker(QThread):
    """Decode the watched file off the GUI thread.

    Emits ``loaded`` with the new SampleSequence, or ``error`` with a
    message if the file could not be decoded.  The worker never touches
    the viewer; the GUI thread installs the result.
    """

    loaded = Signal(object)   # SampleSequence
    error = Signal(str)

    def __init__(self, path: str, loader=load_samples, parent=None):
        super().__init__(parent)
        self._path = path
        self._loader = loader

    def run(self):
        try:
            samples = self._loader(self._path)
        except DecodeError as exc:
            self.error.emit(str(exc))
            return
        self.loaded.emit(samples)
