# api/tests/test_logging_setup.py
from __future__ import annotations

import io
import logging
import sys
from types import SimpleNamespace

from erp_console.logging_setup import LOG_NAME, setup_logging
from erp_console.settings import Settings


def _file_handlers(lg):
    return [h for h in lg.handlers if getattr(h, "baseFilename", "").endswith(LOG_NAME)]


def test_log_file_under_data_root(tmp_path):
    root = logging.getLogger()
    before = list(root.handlers)
    try:
        for h in _file_handlers(root):
            root.removeHandler(h)
        cfg = SimpleNamespace(CONSOLE_DATA_ROOT=tmp_path, LOG_LEVEL="debug", LOG_TO_STDERR=False)

        path = setup_logging(cfg)
        setup_logging(cfg)

        assert path == tmp_path / "logs" / LOG_NAME
        assert len(_file_handlers(root)) == 1
        assert root.level == logging.DEBUG
        assert logging.getLogger("httpx").level == logging.WARNING
    finally:
        for h in _file_handlers(root):
            if h not in before:
                root.removeHandler(h)
                h.close()
        for h in before:
            if h not in root.handlers:
                root.addHandler(h)
        root.setLevel(logging.INFO)


def test_settings_read_environment(monkeypatch, tmp_path):
    monkeypatch.setenv("ERP_API_URL", "https://erp.example.vn/api")
    monkeypatch.setenv("CACHE_STALE_SECONDS", "120")
    monkeypatch.setenv("NOTIFICATION_POLLING", "false")
    monkeypatch.setenv("CONSOLE_DATA_ROOT", str(tmp_path))

    s = Settings(_env_file=None)

    assert s.ERP_API_URL == "https://erp.example.vn/api"
    assert s.CACHE_STALE_SECONDS == 120
    assert s.NOTIFICATION_POLLING is False
    assert s.CONSOLE_DATA_ROOT == tmp_path
    assert s.ERP_QUERY_RETRY == 1


def test_stderr_handler_added_once(monkeypatch, tmp_path):
    stream = io.StringIO()
    monkeypatch.setattr(sys, "stderr", stream)
    root = logging.getLogger()
    before = list(root.handlers)
    try:
        cfg = SimpleNamespace(CONSOLE_DATA_ROOT=tmp_path, LOG_LEVEL="info", LOG_TO_STDERR=True)
        setup_logging(cfg)
        setup_logging(cfg)

        added = [h for h in root.handlers if h not in before]
        stderr_handlers = [h for h in added if type(h) is logging.StreamHandler]
        assert len(stderr_handlers) == 1
        logging.getLogger("erp_console.test").warning("kho đầy")
        assert "kho đầy" in stream.getvalue()
    finally:
        for h in list(root.handlers):
            if h not in before:
                root.removeHandler(h)
                h.close()
