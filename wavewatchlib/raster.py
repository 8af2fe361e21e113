"""Banded waveform rasterizer and pixel-format conversion."""

from __future__ import annotations

import numpy as np

from .models import BandLayout, Palette

DEFAULT_LAYOUT = BandLayout()
DEFAULT_PALETTE = Palette()


def rasterize(samples, width: int, layout: BandLayout = DEFAULT_LAYOUT,
              palette: Palette = DEFAULT_PALETTE) -> np.ndarray:
    """Draw *samples* as rows of ``width`` columns, one band per row.

    Returns a ``(height, width, 3)`` uint8 RGB array.  The height depends
    only on how many rows ``len(samples)`` fills at this width.

    Each sample contributes one column: a vertical segment from the
    previous sample's point in the same row down (or up) to its own point,
    so dense traces stay connected.  Samples with ``|s| >= 1.0`` are drawn
    in the clip color but positioned at the clamped value.  The midline
    pixel of every visited column is drawn last so the band axis is always
    visible.
    """
    if width < 1:
        raise ValueError(f"width must be >= 1, got {width}")
    data = np.asarray(getattr(samples, "samples", samples), dtype=np.float64).reshape(-1)

    rows = layout.rows(data.size, width)
    height = layout.image_height(rows)
    image = np.empty((height, width, 3), dtype=np.uint8)
    image[:, :] = palette.background
    if data.size == 0:
        return image

    idx = np.arange(data.size, dtype=np.int64)
    x = idx % width
    center = layout.center_y(idx // width)

    # A midline past the bottom edge ends the pass for every later sample.
    overflow = np.flatnonzero((center < 0) | (center >= height))
    if overflow.size:
        stop = int(overflow[0])
        data, x, center = data[:stop], x[:stop], center[:stop]
        if data.size == 0:
            return image

    clipped = np.abs(data) >= 1.0
    positioned = np.nan_to_num(data, nan=0.0, posinf=1.0, neginf=-1.0)
    offset = np.rint(np.clip(positioned, -1.0, 1.0) * (layout.band_height / 2))
    y = center - offset.astype(np.int64)

    # Previous point within the same row; the first column of a row starts
    # its own segment.
    prev = np.empty_like(y)
    prev[1:] = y[:-1]
    row_start = x == 0
    prev[row_start] = y[row_start]

    lo = np.minimum(prev, y)
    lengths = np.abs(y - prev) + 1
    total = int(lengths.sum())
    first = np.repeat(np.cumsum(lengths) - lengths, lengths)
    ys = np.repeat(lo, lengths) + (np.arange(total, dtype=np.int64) - first)
    xs = np.repeat(x, lengths)
    colors = np.where(clipped[:, None],
                      np.asarray(palette.clip, dtype=np.uint8),
                      np.asarray(palette.trace, dtype=np.uint8))
    colors = np.repeat(colors, lengths, axis=0)

    inside = (ys >= 0) & (ys < height)
    image[ys[inside], xs[inside]] = colors[inside]
    image[center, x] = palette.midline
    return image


def to_rgb32(image: np.ndarray) -> np.ndarray:
    """Pack an RGB raster into ``0xffRRGGBB`` words for the display surface.

    Accepts only ``(height, width, 3)`` uint8 arrays; anything else raises
    ``ValueError``.  The result is a C-contiguous ``(height, width)`` uint32
    array whose row stride is ``width * 4`` bytes.
    """
    if not isinstance(image, np.ndarray):
        raise ValueError(f"expected numpy array, got {type(image).__name__}")
    if image.ndim != 3 or image.shape[2] != 3:
        raise ValueError(f"expected (height, width, 3) RGB image, got shape {image.shape}")
    if image.dtype != np.uint8:
        raise ValueError(f"expected uint8 pixels, got {image.dtype}")
    rgb = image.astype(np.uint32)
    packed = (np.uint32(0xff000000)
              | (rgb[:, :, 0] << np.uint32(16))
              | (rgb[:, :, 1] << np.uint32(8))
              | rgb[:, :, 2])
    return np.ascontiguousarray(packed, dtype=np.uint32)
