import os

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

from pathlib import Path

import numpy as np
import pytest
import soundfile as sf


def write_wav(path: Path, samples, samplerate: int = 8000,
              subtype: str = "FLOAT") -> Path:
    sf.write(str(path), np.asarray(samples, dtype=np.float64), samplerate,
             subtype=subtype)
    return path


@pytest.fixture
def sine_wav(tmp_path: Path) -> Path:
    t = np.arange(4000) / 8000.0
    return write_wav(tmp_path / "sine.wav", 0.5 * np.sin(2 * np.pi * 440 * t))
