from pathlib import Path

import numpy as np
import pytest
import soundfile as sf

from wavewatchlib.audio import DecodeError, describe, format_duration, load_samples
from wavewatchlib.models import SampleSequence

from conftest import write_wav


def test_load_float_wav_keeps_values(tmp_path: Path) -> None:
    path = write_wav(tmp_path / "f.wav", [0.0, 0.5, -0.25, 1.5, -2.0])
    seq = load_samples(str(path))
    assert isinstance(seq, SampleSequence)
    assert seq.samplerate == 8000
    assert seq.channels == 1
    assert seq.subtype == "FLOAT"
    # Out-of-range float samples are not clamped.
    assert np.allclose(seq.samples, [0.0, 0.5, -0.25, 1.5, -2.0])


def test_integer_full_scale_maps_to_unity(tmp_path: Path) -> None:
    path = tmp_path / "i16.wav"
    data = np.array([0, 16384, -32768, 32767], dtype=np.int16)
    sf.write(str(path), data, 44100, subtype="PCM_16")
    seq = load_samples(str(path))
    assert seq.samples[0] == 0.0
    assert seq.samples[1] == pytest.approx(0.5)
    assert seq.samples[2] == pytest.approx(-1.0)
    assert seq.samples[3] == pytest.approx(1.0, abs=1e-4)


def test_multichannel_is_interleaved(tmp_path: Path) -> None:
    path = tmp_path / "st.wav"
    frames = np.array([[0.1, -0.1], [0.2, -0.2], [0.3, -0.3]])
    sf.write(str(path), frames, 8000, subtype="FLOAT")
    seq = load_samples(str(path))
    assert seq.channels == 2
    assert seq.frames == 3
    assert np.allclose(seq.samples, [0.1, -0.1, 0.2, -0.2, 0.3, -0.3])


def test_samples_are_read_only(sine_wav: Path) -> None:
    seq = load_samples(str(sine_wav))
    with pytest.raises(ValueError):
        seq.samples[0] = 1.0


def test_missing_file(tmp_path: Path) -> None:
    with pytest.raises(DecodeError):
        load_samples(str(tmp_path / "nope.wav"))


def test_empty_file(tmp_path: Path) -> None:
    path = tmp_path / "empty.wav"
    path.write_bytes(b"")
    with pytest.raises(DecodeError):
        load_samples(str(path))


def test_garbage_file(tmp_path: Path) -> None:
    path = tmp_path / "junk.wav"
    path.write_bytes(b"RIFF\x00\x00garbage that is not audio")
    with pytest.raises(DecodeError):
        load_samples(str(path))


def test_describe_and_duration(sine_wav: Path) -> None:
    seq = load_samples(str(sine_wav))
    text = describe(seq)
    assert "sine.wav" in text
    assert "8000 Hz" in text
    assert "32-bit Float" in text
    assert "00:00.500" in text
    assert seq.duration_sec == pytest.approx(0.5)


def test_format_duration() -> None:
    assert format_duration(0, 0) == "00:00.000"
    assert format_duration(44100 * 61 + 22050, 44100) == "01:01.500"
