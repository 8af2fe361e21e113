from pathlib import Path

import pytest

import wavewatch


def test_no_arguments_prints_usage_and_fails(capsys) -> None:
    with pytest.raises(SystemExit) as exc:
        wavewatch.parse_arguments([])
    assert exc.value.code != 0
    assert "usage:" in capsys.readouterr().err


def test_too_many_arguments_fail(capsys) -> None:
    with pytest.raises(SystemExit) as exc:
        wavewatch.parse_arguments(["a.wav", "b.wav"])
    assert exc.value.code != 0
    assert "usage:" in capsys.readouterr().err


def test_single_argument_is_the_input() -> None:
    assert wavewatch.parse_arguments(["take.wav"]).input == "take.wav"


def test_initial_decode_error_is_fatal(tmp_path: Path, monkeypatch) -> None:
    launched = []
    monkeypatch.setattr("wavewatchgui.run", lambda *a: launched.append(a) or 0)
    assert wavewatch.main([str(tmp_path / "missing.wav")]) == 1
    assert launched == []


def test_main_loads_and_launches(sine_wav: Path, tmp_path: Path, monkeypatch) -> None:
    monkeypatch.setenv("WAVEWATCH_CONFIG", str(tmp_path / "cfg.json"))
    launched = []
    monkeypatch.setattr("wavewatchgui.run", lambda *a: launched.append(a) or 0)
    assert wavewatch.main([str(sine_wav)]) == 0
    path, samples, options = launched[0]
    assert path == str(sine_wav)
    assert len(samples) == 4000
    assert options.debounce_sec == pytest.approx(0.25)
