from wavewatchgui import log


class _Owner:
    def work(self):
        log.dbg("hello")
        with log.timed("step"):
            pass


def test_silent_unless_enabled(monkeypatch, capsys) -> None:
    monkeypatch.setattr(log, "_ENABLED", False)
    _Owner().work()
    assert capsys.readouterr().err == ""


def test_lines_name_the_calling_class(monkeypatch, capsys) -> None:
    monkeypatch.setattr(log, "_ENABLED", True)
    _Owner().work()
    lines = capsys.readouterr().err.splitlines()
    assert len(lines) == 2
    assert lines[0].endswith("_Owner] hello")
    assert "_Owner] step: " in lines[1]
    assert lines[1].endswith(" ms")
