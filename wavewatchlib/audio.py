from __future__ import annotations

import os

import numpy as np
import soundfile as sf

from .models import SampleSequence


class DecodeError(Exception):
    """Raised when an audio file cannot be read or decoded."""
    pass


def format_duration(samples: int, samplerate: int) -> str:
    if samplerate <= 0:
        return "00:00.000"
    seconds = samples / samplerate
    m = int(seconds // 60)
    s = int(seconds % 60)
    ms = int((seconds % 1) * 1000)
    return f"{m:02d}:{s:02d}.{ms:03d}"


# ---------------------------------------------------------------------------
# File I/O
# ---------------------------------------------------------------------------

_SUBTYPE_MAP = {
    'PCM_U8': '8-bit',
    'PCM_16': '16-bit',
    'PCM_24': '24-bit',
    'PCM_32': '32-bit',
    'FLOAT': '32-bit Float',
    'DOUBLE': '64-bit Float',
}


def load_samples(filepath: str) -> SampleSequence:
    """Read an audio file into a :class:`SampleSequence`.

    Integer encodings are scaled so that full scale maps to ±1.0, the same
    convention float files already use.  Multi-channel files are returned
    interleaved (frame by frame).

    Raises :class:`DecodeError` if the file is missing, empty, truncated,
    or in a format libsndfile does not understand.
    """
    if not os.path.isfile(filepath):
        raise DecodeError(f"File not found: {filepath}")
    try:
        info = sf.info(filepath)
        data, samplerate = sf.read(filepath, dtype='float64', always_2d=True)
    except (sf.LibsndfileError, RuntimeError, OSError) as e:
        raise DecodeError(f"Cannot decode {filepath}: {e}") from e
    return SampleSequence(
        samples=np.ascontiguousarray(data).reshape(-1),
        samplerate=int(samplerate),
        channels=int(info.channels),
        subtype=info.subtype,
        path=filepath,
    )


def describe(seq: SampleSequence) -> str:
    """One-line summary of a decoded file's format and sample range."""
    bitdepth = _SUBTYPE_MAP.get(seq.subtype, seq.subtype or "?")
    parts = [
        os.path.basename(seq.path) or "<memory>",
        f"{seq.channels} ch",
        f"{seq.samplerate} Hz",
        bitdepth,
        format_duration(seq.frames, seq.samplerate),
        f"{len(seq)} samples",
    ]
    if len(seq):
        parts.append(f"min {float(np.min(seq.samples)):.4f} "
                     f"max {float(np.max(seq.samples)):.4f}")
    return ", ".join(parts)
