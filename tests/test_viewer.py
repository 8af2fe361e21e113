from pathlib import Path

import numpy as np

from wavewatchlib.audio import DecodeError, load_samples
from wavewatchlib.models import BandLayout, Palette, SampleSequence, ViewerOptions
from wavewatchlib.raster import rasterize
from wavewatchlib.viewer import WaveformViewer, render_frame

from conftest import write_wav


def _seq(n: int = 6000) -> SampleSequence:
    return SampleSequence(0.8 * np.sin(np.linspace(0, 300, n)), samplerate=8000)


def test_frame_matches_window_size() -> None:
    frame = render_frame(_seq(), 640, 480, ViewerOptions(raster_width=2000))
    assert frame.shape == (480, 640, 3)


def test_frame_excess_area_is_background() -> None:
    options = ViewerOptions(raster_width=100)
    frame = render_frame(_seq(150), 400, 300, options)
    bg = np.array(options.palette.background, dtype=np.uint8)
    # Raster is 100 wide, two rows (16 + 2 * 80 = 176 px) tall.
    assert (frame[:, 100:] == bg).all()
    assert (frame[176:] == bg).all()
    assert not (frame[:176, :100] == bg).all()


def test_zero_raster_width_follows_window() -> None:
    seq = _seq(300)
    frame = render_frame(seq, 300, 96, ViewerOptions(raster_width=0))
    assert np.array_equal(frame, rasterize(seq, 300))


def test_downscaled_then_widened_rerenders_from_samples() -> None:
    seq = _seq(8000)
    options = ViewerOptions(raster_width=2000)
    narrow = render_frame(seq, 500, 400, options)
    assert narrow.shape == (400, 500, 3)
    wide = render_frame(seq, 2000, 400, options)
    raster = rasterize(seq, 2000)
    assert raster.shape[0] < 400
    assert np.array_equal(wide[:raster.shape[0]], raster)


def test_upscale_option() -> None:
    seq = _seq(100)
    stretched = render_frame(seq, 400, 96, ViewerOptions(raster_width=100, upscale=True))
    natural = render_frame(seq, 400, 96, ViewerOptions(raster_width=100))
    bg = np.array(Palette().background, dtype=np.uint8)
    assert (natural[:, 100:] == bg).all()
    assert not (stretched[:, 300:] == bg).all()


def test_degenerate_size() -> None:
    assert render_frame(_seq(), 0, 10, ViewerOptions()).shape == (10, 0, 3)


def test_custom_layout_passes_through() -> None:
    options = ViewerOptions(raster_width=10, layout=BandLayout(band_height=20, space=2))
    frame = render_frame(_seq(10), 10, 24, options)
    assert np.array_equal(frame, rasterize(_seq(10), 10, options.layout))


def test_wake_replaces_samples(tmp_path: Path) -> None:
    path = write_wav(tmp_path / "a.wav", [0.1, 0.2])
    viewer = WaveformViewer(str(path), load_samples(str(path)))
    write_wav(path, [0.3, 0.4, 0.5])
    assert viewer.on_wake() is True
    assert len(viewer.samples) == 3
    assert viewer.reload_count == 1
    assert viewer.last_error is None


def test_failed_reload_keeps_previous_frame(tmp_path: Path) -> None:
    path = write_wav(tmp_path / "b.wav", np.linspace(-1.2, 1.2, 900))
    viewer = WaveformViewer(str(path), load_samples(str(path)),
                            ViewerOptions(raster_width=300))
    before = viewer.on_redraw(320, 200)
    original = viewer.samples

    path.write_bytes(b"")  # truncated mid-write
    assert viewer.on_wake() is False
    assert viewer.samples is original
    assert viewer.last_error
    assert np.array_equal(viewer.on_redraw(320, 200), before)


def test_wake_uses_injected_loader() -> None:
    calls = []

    def loader(path):
        calls.append(path)
        raise DecodeError("busy")

    viewer = WaveformViewer("x.wav", _seq(10), loader=loader)
    assert viewer.on_wake() is False
    assert calls == ["x.wav"]
    assert viewer.last_error == "busy"


def test_long_file_matches_full_raster_crop() -> None:
    seq = _seq(200_000)
    options = ViewerOptions(raster_width=1000)
    frame = render_frame(seq, 1000, 300, options)
    assert np.array_equal(frame, rasterize(seq, 1000)[:300])
