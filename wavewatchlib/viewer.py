"""Render-side state: the current samples and the redraw / wake-up hooks."""

from __future__ import annotations

import logging
from typing import Callable

import numpy as np

from .audio import DecodeError, load_samples
from .models import SampleSequence, ViewerOptions
from .raster import rasterize
from .rescale import composite, fit

log = logging.getLogger(__name__)


def render_frame(samples: SampleSequence, width: int, height: int,
                 options: ViewerOptions) -> np.ndarray:
    """Produce the full window image for *samples* at ``width`` x ``height``.

    The raster is always rebuilt from the samples, never from a previous
    frame, so growing the window never shows a blurred upscale of an
    earlier, narrower render.
    """
    if width <= 0 or height <= 0:
        return np.empty((max(height, 0), max(width, 0), 3), dtype=np.uint8)

    raster_w = options.raster_width or width
    layout = options.layout
    # Rows below the window are never visible; skip drawing them.
    visible_rows = -(-max(height - layout.space, 0) // (layout.band_height + layout.space)) + 1
    data = samples.samples[:visible_rows * raster_w]
    raster = rasterize(data, raster_w, layout, options.palette)[:height]
    fitted = fit(raster, width, upscale=options.upscale)
    return composite(fitted, width, height, options.palette.background)


class WaveformViewer:
    """Holds the displayed :class:`SampleSequence` for one file.

    Owned by the rendering thread.  A reload swaps in a new sequence as a
    whole; a failed reload leaves the current one in place.
    """

    def __init__(self, path: str, samples: SampleSequence,
                 options: ViewerOptions | None = None,
                 loader: Callable[[str], SampleSequence] = load_samples):
        self.path = path
        self.options = options or ViewerOptions()
        self._samples = samples
        self.loader = loader
        self.reload_count = 0
        self.last_error: str | None = None

    @property
    def samples(self) -> SampleSequence:
        return self._samples

    def on_redraw(self, width: int, height: int) -> np.ndarray:
        return render_frame(self._samples, width, height, self.options)

    def on_wake(self) -> bool:
        """Re-read the file.  Returns True if the samples were replaced."""
        try:
            samples = self.loader(self.path)
        except DecodeError as e:
            self.last_error = str(e)
            log.warning("Reload failed, keeping previous waveform: %s", e)
            return False
        self.replace(samples)
        return True

    def replace(self, samples: SampleSequence) -> None:
        self._samples = samples
        self.reload_count += 1
        self.last_error = None
        log.info("Reloaded %s (%d samples)", self.path, len(samples))
