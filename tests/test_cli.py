import logging

import pytest

from liveuamap_news import cli
from liveuamap_news.db import SqlStateStore
from liveuamap_news.state import JsonStateStore


@pytest.fixture
def restore_root_handlers():
    original_handlers = list(logging.getLogger().handlers)
    for handler in logging.getLogger().handlers[:]:
        logging.getLogger().removeHandler(handler)
    yield
    for handler in logging.getLogger().handlers[:]:
        logging.getLogger().removeHandler(handler)
        handler.close()
    for handler in original_handlers:
        logging.getLogger().addHandler(handler)


class FakePoller:
    instances = []

    def __init__(self, **kwargs):
        self.kwargs = kwargs
        self.listing_url = kwargs["listing_url"]
        self.run_calls = []
        FakePoller.instances.append(self)

    def run(self, max_cycles=None):
        self.run_calls.append(max_cycles)


@pytest.fixture
def fake_poller(monkeypatch):
    FakePoller.instances = []
    monkeypatch.setattr(cli, "Poller", FakePoller)
    monkeypatch.setattr(cli, "configure_logging", lambda level, log_file=None: None)
    return FakePoller


def test_configure_logging_defaults_to_console_only(restore_root_handlers):
    cli.configure_logging("INFO")

    handlers = logging.getLogger().handlers
    assert any(isinstance(handler, logging.StreamHandler) for handler in handlers)
    assert not any(isinstance(handler, logging.FileHandler) for handler in handlers)


def test_configure_logging_with_log_file_creates_file_handler(
    restore_root_handlers, tmp_path
):
    log_path = tmp_path / "logs" / "custom.log"
    cli.configure_logging("INFO", str(log_path))

    assert log_path.exists()
    assert any(
        isinstance(handler, logging.FileHandler)
        for handler in logging.getLogger().handlers
    )


def test_configure_logging_rejects_unknown_level(restore_root_handlers):
    with pytest.raises(ValueError):
        cli.configure_logging("LOUD")


def test_symbol_formatter_uses_explicit_symbol_or_level():
    formatter = cli.SymbolFormatter("%(tag)s %(message)s")

    tagged = logging.LogRecord("x", logging.INFO, __file__, 1, "No news", None, None)
    tagged.symbol = "-"
    plain = logging.LogRecord("x", logging.ERROR, __file__, 1, "boom", None, None)

    assert formatter.format(tagged) == "[-] No news"
    assert formatter.format(plain) == "[!] boom"


def test_console_handler_uses_plain_symbol_tags(restore_root_handlers):
    cli.configure_logging("INFO")

    record = logging.LogRecord("x", logging.INFO, __file__, 1, "hi", None, None)
    record.symbol = "+"
    formatter = logging.getLogger().handlers[0].formatter

    assert isinstance(formatter, cli.SymbolFormatter)
    assert formatter.format(record) == "[+] hi"


def test_main_builds_poller_from_config(fake_poller, config_file):
    path = config_file(listingUrl="https://example.com/")

    exit_code = cli.main(["--config", str(path), "--once"])

    assert exit_code == 0
    poller = fake_poller.instances[0]
    assert poller.run_calls == [1]
    assert poller.listing_url == "https://example.com/"
    assert isinstance(poller.kwargs["state_store"], JsonStateStore)
    assert poller.kwargs["config_store"] is poller.kwargs["state_store"]
    assert poller.kwargs["sender"].url == "https://discord.com/api/webhooks/1/token"


def test_main_runs_forever_without_once(fake_poller, config_file):
    cli.main(["--config", str(config_file()), "--listing-url", "https://cli.example/"])

    poller = fake_poller.instances[0]
    assert poller.run_calls == [None]
    assert poller.listing_url == "https://cli.example/"


def test_main_uses_database_store_when_configured(fake_poller, config_file):
    path = config_file(database="sqlite:///:memory:")

    cli.main(["--config", str(path), "--once"])

    poller = fake_poller.instances[0]
    assert isinstance(poller.kwargs["state_store"], SqlStateStore)
    assert isinstance(poller.kwargs["config_store"], JsonStateStore)


def test_main_cli_overrides_logging(monkeypatch, fake_poller, config_file):
    captured = {}

    def fake_configure(level, log_file=None):
        captured["level"] = level
        captured["file"] = log_file

    monkeypatch.setattr(cli, "configure_logging", fake_configure)
    path = config_file(logging={"level": "INFO", "file": "config.log"})

    cli.main(["--config", str(path), "--log-level", "DEBUG", "--log-file", "cli.log"])

    assert captured == {"level": "DEBUG", "file": "cli.log"}


def test_main_missing_webhook_url_is_fatal(fake_poller, config_file):
    path = config_file(url=None)

    with pytest.raises(SystemExit) as excinfo:
        cli.main(["--config", str(path)])

    assert excinfo.value.code == 2
    assert fake_poller.instances == []


def test_main_invalid_webhook_url_is_fatal(fake_poller, config_file):
    path = config_file(url="not a url")

    with pytest.raises(SystemExit):
        cli.main(["--config", str(path)])

    assert fake_poller.instances == []


def test_main_missing_config_returns_error(fake_poller, tmp_path):
    assert cli.main(["--config", str(tmp_path / "missing.json")]) == 1


def test_main_stops_cleanly_on_interrupt(monkeypatch, fake_poller, config_file):
    def interrupted(self, max_cycles=None):
        raise KeyboardInterrupt

    monkeypatch.setattr(FakePoller, "run", interrupted)

    assert cli.main(["--config", str(config_file())]) == 0
