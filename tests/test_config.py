"""Tests for configuration loading and logging setup"""

import logging

import pytest

from qbeview.utils.config import Config, load_config
from qbeview.utils.constants import IdentifierQuote
from qbeview.utils.logger import setup_logging


def test_defaults():
    config = Config()
    assert config.identifier_quote == IdentifierQuote.BACKTICK
    assert config.database_url is None


def test_load_config_creates_log_dir(tmp_path, monkeypatch):
    for name in ("QBEVIEW_DATABASE_URL", "QBEVIEW_DATABASE", "QBEVIEW_LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)

    config = load_config(home=tmp_path)

    assert config.log_dir == str(tmp_path / '.qbeview' / 'logs')
    assert (tmp_path / '.qbeview' / 'logs').is_dir()
    assert config.log_level == "INFO"


def test_load_config_reads_environment(tmp_path, monkeypatch):
    monkeypatch.setenv("QBEVIEW_DATABASE_URL", "sqlite:///app.db")
    monkeypatch.setenv("QBEVIEW_DATABASE", "main")
    monkeypatch.setenv("QBEVIEW_LOG_LEVEL", "DEBUG")

    config = load_config(home=tmp_path)

    assert config.database_url == "sqlite:///app.db"
    assert config.default_database == "main"
    assert config.log_level == "DEBUG"


def test_unknown_quote_style():
    with pytest.raises(ValueError):
        IdentifierQuote.pair("backslash")


def test_setup_logging_writes_log_file(tmp_path):
    root = logging.getLogger()
    saved_handlers = root.handlers[:]
    saved_level = root.level
    try:
        log_file = setup_logging(str(tmp_path / "logs"), "DEBUG")
        logging.getLogger("qbeview.test").debug("debug line")
        for handler in root.handlers:
            handler.flush()

        assert log_file.exists()
        assert "debug line" in log_file.read_text(encoding="utf-8")
        assert root.level == logging.DEBUG
    finally:
        for handler in root.handlers:
            handler.close()
        root.handlers[:] = saved_handlers
        root.setLevel(saved_level)
