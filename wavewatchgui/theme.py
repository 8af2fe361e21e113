"""Default raster colors and window chrome colors."""

from __future__ import annotations

# Raster palette (hex), editable in the config file's "colors" section.
DEFAULT_COLORS = {
    "background": "#fafaf7",
    "midline": "#cccccc",
    "trace": "#333333",
    "clip": "#ff5522",
}

COLORS = {
    "dim": "#888888",
    "error": "#cc3333",
}

STYLESHEET = """
    QMainWindow { background-color: #fafaf7; }
    QStatusBar { background-color: #eeeeea; color: #555555; }
"""
