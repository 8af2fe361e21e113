from __future__ import annotations

from dataclasses import dataclass, field

import numpy as np


@dataclass(frozen=True)
class SampleSequence:
    """Decoded samples of one audio file.

    Attributes:
        samples:    1-D float64 array, read-only.  Values outside [-1, 1]
                    are kept as decoded and mark clipping.
        samplerate: Frames per second reported by the decoder.
        channels:   Channel count of the source file.  Multi-channel data
                    is kept interleaved, frame by frame.
        subtype:    Decoder subtype string, e.g. ``"PCM_16"``.
        path:       File the samples were read from.
    """
    samples: np.ndarray
    samplerate: int = 0
    channels: int = 1
    subtype: str = ""
    path: str = ""

    def __post_init__(self):
        data = np.array(self.samples, dtype=np.float64).reshape(-1)
        data.setflags(write=False)
        object.__setattr__(self, "samples", data)

    def __len__(self) -> int:
        return int(self.samples.size)

    @property
    def frames(self) -> int:
        return len(self) // max(self.channels, 1)

    @property
    def duration_sec(self) -> float:
        if self.samplerate <= 0:
            return 0.0
        return self.frames / self.samplerate


@dataclass(frozen=True)
class BandLayout:
    """Geometry of the banded raster: rows of samples stacked top to bottom."""
    band_height: int = 64
    space: int = 16

    def rows(self, count: int, width: int) -> int:
        if count <= 0:
            return 1
        return -(-count // width)

    def image_height(self, rows: int) -> int:
        return self.space + rows * (self.band_height + self.space)

    def center_y(self, row):
        """Midline y of *row*.  Accepts ints or integer numpy arrays."""
        return self.space + row * (self.band_height + self.space) + self.band_height // 2


RGB = tuple[int, int, int]


@dataclass(frozen=True)
class Palette:
    background: RGB = (0xfa, 0xfa, 0xf7)
    midline: RGB = (0xcc, 0xcc, 0xcc)
    trace: RGB = (0x33, 0x33, 0x33)
    clip: RGB = (0xff, 0x55, 0x22)


@dataclass(frozen=True)
class WatchEvent:
    """The watched file may have changed.  Carries nothing."""


@dataclass(frozen=True)
class ViewerOptions:
    raster_width: int = 2000        # 0 = rasterize at window width
    layout: BandLayout = field(default_factory=BandLayout)
    palette: Palette = field(default_factory=Palette)
    upscale: bool = False
    debounce_sec: float = 0.25
    decode_in_background: bool = False
