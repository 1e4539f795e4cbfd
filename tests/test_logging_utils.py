import json
import logging

from cavern import app
from cavern import logging_utils
from cavern.server import _configure_logging


def test_key_value_format(monkeypatch):
    monkeypatch.setattr(logging_utils, "JSON_MODE", False)
    line = logging_utils._format("info", event="cave generated", rows=30, skipped=None)
    assert line.startswith("level=info ts=")
    assert "event=cave_generated" in line
    assert "rows=30" in line
    assert "skipped" not in line


def test_json_format(monkeypatch):
    monkeypatch.setattr(logging_utils, "JSON_MODE", True)
    rec = json.loads(logging_utils._format("warn", event="cap", regions=3))
    assert rec["level"] == "warn"
    assert rec["regions"] == 3
    assert "ts" in rec


def test_level_filter_and_streams(monkeypatch, capsys):
    monkeypatch.setattr(logging_utils, "JSON_MODE", False)
    monkeypatch.setattr(logging_utils, "CURRENT_LEVEL", logging_utils.LEVELS["warn"])
    log = logging_utils.get_logger("cavern.test")
    assert logging_utils.get_logger("cavern.test") is log
    log.info(event="quiet")
    log.warn(event="loud")
    log.error(event="bad")
    captured = capsys.readouterr()
    assert "quiet" not in captured.out
    assert "event=loud" in captured.out
    assert "logger=cavern.test" in captured.out
    assert "event=bad" in captured.err


def test_configure_logging_writes_instance_log(tmp_path, monkeypatch):
    monkeypatch.setattr(app, "instance_path", str(tmp_path))
    root = logging.getLogger()
    saved_handlers, saved_level = list(root.handlers), root.level
    try:
        _configure_logging()
        _configure_logging()
        assert len(root.handlers) == 2
        logging.getLogger("cavern.test").info("hello file")
        for h in root.handlers:
            h.flush()
        assert "hello file" in (tmp_path / "app.log").read_text()
    finally:
        for h in list(root.handlers):
            root.removeHandler(h)
            h.close()
        for h in saved_handlers:
            root.addHandler(h)
        root.setLevel(saved_level)
