"""Tests for ContextVar-based scanner configuration."""

from threading import Thread

import pytest

from rulescan import (
    Scanner,
    ScannerConfig,
    get_scanner_config,
    reset_scanner_config,
    scanner_config_context,
    set_scanner_config,
)


@pytest.fixture(autouse=True)
def _reset_config():
    reset_scanner_config()
    yield
    reset_scanner_config()


class TestScannerConfigDataclass:
    """ScannerConfig frozen dataclass behavior."""

    def test_default_values(self) -> None:
        config = ScannerConfig()
        assert config.snippet_length == 20
        assert config.token_factory is None
        assert config.trace_tokens is False

    def test_immutability(self) -> None:
        config = ScannerConfig()
        with pytest.raises(AttributeError):
            config.snippet_length = 5  # type: ignore[misc]

    def test_from_dict_ignores_unknown_keys(self) -> None:
        config = ScannerConfig.from_dict({"snippet_length": 40, "unknown_key": 1})
        assert config.snippet_length == 40
        assert config.trace_tokens is False


class TestContextVarFunctions:
    """get/set/reset and the context manager."""

    def test_default_config(self) -> None:
        assert get_scanner_config() == ScannerConfig()

    def test_set_and_reset(self) -> None:
        set_scanner_config(ScannerConfig(snippet_length=3))
        assert get_scanner_config().snippet_length == 3
        reset_scanner_config()
        assert get_scanner_config().snippet_length == 20

    def test_context_manager_restores(self) -> None:
        with scanner_config_context(ScannerConfig(snippet_length=7)):
            assert get_scanner_config().snippet_length == 7
        assert get_scanner_config().snippet_length == 20

    def test_context_manager_restores_on_error(self) -> None:
        with pytest.raises(RuntimeError):
            with scanner_config_context(ScannerConfig(snippet_length=7)):
                raise RuntimeError
        assert get_scanner_config().snippet_length == 20

    def test_thread_isolation(self) -> None:
        seen = []

        def worker() -> None:
            seen.append(get_scanner_config().snippet_length)

        set_scanner_config(ScannerConfig(snippet_length=99))
        thread = Thread(target=worker)
        thread.start()
        thread.join()
        assert seen == [20]


class TestScannerUsesConfig:
    """Scanners capture the active config at construction."""

    def test_captures_context_config(self) -> None:
        with scanner_config_context(ScannerConfig(snippet_length=5)):
            scanner = Scanner("hello world")
        assert scanner.config.snippet_length == 5

    def test_explicit_config_wins(self) -> None:
        explicit = ScannerConfig(snippet_length=1)
        with scanner_config_context(ScannerConfig(snippet_length=5)):
            scanner = Scanner("x", config=explicit)
        assert scanner.config is explicit

    def test_config_token_factory(self) -> None:
        config = ScannerConfig(token_factory=lambda rule, m: rule)
        assert Scanner("a", {"a": r"^a"}, config=config).scan() == "a"

    def test_explicit_factory_beats_config(self) -> None:
        config = ScannerConfig(token_factory=lambda rule, m: "config")
        s = Scanner("a", {"a": r"^a"}, config=config, token_factory=lambda rule, m: "arg")
        assert s.scan() == "arg"
