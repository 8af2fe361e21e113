"""Fit a raster to the window width without touching its height."""

from __future__ import annotations

import numpy as np
from scipy import sparse


def _triangle_weights(src_w: int, dst_w: int) -> sparse.csr_matrix:
    """Build a ``(dst_w, src_w)`` triangle-filter resampling matrix.

    The filter radius grows with the reduction ratio when downscaling so
    every source column contributes; when enlarging it stays at one source
    pixel, which is plain linear interpolation.  Rows are normalized to 1.
    """
    scale = src_w / dst_w
    radius = max(scale, 1.0)
    rows: list[np.ndarray] = []
    cols: list[np.ndarray] = []
    vals: list[np.ndarray] = []
    taps = int(np.ceil(radius)) * 2 + 1
    centers = (np.arange(dst_w) + 0.5) * scale
    first = np.floor(centers - radius).astype(np.int64)
    for k in range(taps + 1):
        j = first + k
        w = 1.0 - np.abs((j + 0.5 - centers) / radius)
        keep = (w > 0) & (j >= 0) & (j < src_w)
        rows.append(np.flatnonzero(keep))
        cols.append(j[keep])
        vals.append(w[keep])
    r = np.concatenate(rows)
    c = np.concatenate(cols)
    v = np.concatenate(vals)
    weights = sparse.csr_matrix((v, (r, c)), shape=(dst_w, src_w))
    norm = np.asarray(weights.sum(axis=1)).reshape(-1)
    norm[norm == 0] = 1.0
    return sparse.diags(1.0 / norm) @ weights


def resample_width(image: np.ndarray, dst_w: int) -> np.ndarray:
    """Resample the columns of an ``(h, w, c)`` uint8 image to ``dst_w``."""
    h, src_w, ch = image.shape
    weights = _triangle_weights(src_w, dst_w)
    columns = image.transpose(1, 0, 2).reshape(src_w, h * ch).astype(np.float64)
    out = weights @ columns
    out = np.clip(np.rint(out), 0, 255).astype(np.uint8)
    return np.ascontiguousarray(out.reshape(dst_w, h, ch).transpose(1, 0, 2))


def fit(image: np.ndarray, target_width: int, *, upscale: bool = False) -> np.ndarray:
    """Fit *image* to ``target_width`` columns; height is never changed.

    Wider images are downscaled with a triangle filter so dense traces do
    not alias.  Narrower images are returned at their natural width unless
    *upscale* is set, in which case they are stretched to fill.
    """
    if target_width < 1:
        raise ValueError(f"target_width must be >= 1, got {target_width}")
    width = image.shape[1]
    if width == target_width or width == 0:
        return image
    if width < target_width and not upscale:
        return image
    return resample_width(image, target_width)


def composite(image: np.ndarray, width: int, height: int,
              background) -> np.ndarray:
    """Place *image* at the top-left of a ``width`` x ``height`` canvas.

    Whatever does not fit is cropped; uncovered area is background.
    """
    canvas = np.empty((height, width, 3), dtype=np.uint8)
    canvas[:, :] = background
    h = min(height, image.shape[0])
    w = min(width, image.shape[1])
    canvas[:h, :w] = image[:h, :w]
    return canvas
