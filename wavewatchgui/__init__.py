"""wavewatch GUI: PySide6 host for the live waveform viewer."""

from .mainwindow import WakeBridge, WaveformWindow, run
from .view import WaveformView
from .worker import SampleLoadWorker

__all__ = ["WakeBridge", "WaveformWindow", "WaveformView",
           "SampleLoadWorker", "run"]
