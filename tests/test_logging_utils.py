import json

from delve.logging_utils import get_logger


def test_key_value_output(capsys):
    log = get_logger("delve.test")
    log.info(event="built", seed=42, size="10 x 10", skipped=None)
    err = capsys.readouterr().err.strip()
    assert err.startswith("level=info ts=")
    assert "event=built" in err and "seed=42" in err
    assert "size=10_x_10" in err
    assert "logger=delve.test" in err
    assert "skipped" not in err


def test_json_output(monkeypatch, capsys):
    monkeypatch.setenv("DELVE_LOG_JSON", "1")
    get_logger("delve.test").warn(event="corridor_pairing_failed", depth=2)
    rec = json.loads(capsys.readouterr().err.strip())
    assert rec["level"] == "warn"
    assert rec["event"] == "corridor_pairing_failed"
    assert rec["depth"] == 2
    assert isinstance(rec["ts"], int)


def test_level_filtering(monkeypatch, capsys):
    log = get_logger("delve.test")
    log.debug(event="hidden")
    assert capsys.readouterr().err == ""
    monkeypatch.setenv("DELVE_LOG_LEVEL", "debug")
    log.debug(event="shown")
    assert "event=shown" in capsys.readouterr().err
    monkeypatch.setenv("DELVE_LOG_LEVEL", "error")
    log.warn(event="quiet")
    assert capsys.readouterr().err == ""


def test_stdout_stays_clean(capsys):
    get_logger("delve.test").error(event="boom")
    out = capsys.readouterr()
    assert out.out == ""
    assert "level=error" in out.err


def test_loggers_are_cached():
    assert get_logger("delve.x") is get_logger("delve.x")


def test_module_has_no_default_logger():
    import delve.logging_utils as logging_utils
    import run

    assert not hasattr(logging_utils, "log")
    assert run.log is get_logger("delve.cli")
