"""Tests for esdocs.config -- configuration validation and env loading."""

from __future__ import annotations

import pytest

from esdocs.config import ESConfig


class TestESConfigValidation:
    def test_defaults_are_valid(self) -> None:
        config = ESConfig()
        assert config.base_url == "http://127.0.0.1:9200"
        assert config.timeout_connect == 5.0
        assert config.timeout_read == 30.0
        assert config.retries == 0
        assert config.auto_populate is False
        assert config.auth is None

    def test_empty_base_url(self) -> None:
        with pytest.raises(ValueError, match="base_url"):
            ESConfig(base_url="")

    def test_base_url_without_scheme(self) -> None:
        with pytest.raises(ValueError, match="http:// or https://"):
            ESConfig(base_url="es:9200")

    def test_negative_timeout(self) -> None:
        with pytest.raises(ValueError, match="timeout_connect"):
            ESConfig(timeout_connect=-1)

    def test_negative_retries(self) -> None:
        with pytest.raises(ValueError, match="retries"):
            ESConfig(retries=-1)

    def test_username_without_password(self) -> None:
        with pytest.raises(ValueError, match="username and password"):
            ESConfig(username="elastic")

    def test_auth_tuple(self) -> None:
        config = ESConfig(username="elastic", password="changeme")
        assert config.auth == ("elastic", "changeme")

    def test_frozen(self) -> None:
        config = ESConfig()
        with pytest.raises(AttributeError):
            config.auto_populate = True  # type: ignore[misc]

    def test_multiple_validation_errors(self) -> None:
        with pytest.raises(ValueError) as exc_info:
            ESConfig(timeout_read=0, retries=-1)
        assert "timeout_read" in str(exc_info.value)
        assert "retries" in str(exc_info.value)


class TestESConfigFromEnv:
    def test_reads_base_url_from_env(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("ESDOCS_BASE_URL", "http://from-env:9201")
        config = ESConfig.from_env()
        assert config.base_url == "http://from-env:9201"

    def test_strips_trailing_slash(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("ESDOCS_BASE_URL", "http://host:9200/")
        config = ESConfig.from_env()
        assert config.base_url == "http://host:9200"

    def test_reads_auto_populate(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("ESDOCS_AUTO_POPULATE", "yes")
        assert ESConfig.from_env().auto_populate is True

    def test_invalid_auto_populate_raises(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("ESDOCS_AUTO_POPULATE", "maybe")
        with pytest.raises(ValueError, match="ESDOCS_AUTO_POPULATE"):
            ESConfig.from_env()

    def test_invalid_timeout_env_raises(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("ESDOCS_TIMEOUT_READ", "slow")
        with pytest.raises(ValueError, match="ESDOCS_TIMEOUT_READ"):
            ESConfig.from_env()

    def test_invalid_retries_env_raises(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("ESDOCS_RETRIES", "1.5")
        with pytest.raises(ValueError, match="ESDOCS_RETRIES"):
            ESConfig.from_env()

    def test_overrides_take_precedence(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("ESDOCS_BASE_URL", "http://env-url:9200")
        config = ESConfig.from_env(base_url="http://override:9300/")
        assert config.base_url == "http://override:9300"

    def test_verify_ssl_false(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("ESDOCS_VERIFY_SSL", "false")
        assert ESConfig.from_env().verify_ssl is False

    def test_verify_ssl_path(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("ESDOCS_VERIFY_SSL", "/path/to/ca-bundle.crt")
        assert ESConfig.from_env().verify_ssl == "/path/to/ca-bundle.crt"

    def test_credentials_from_env(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("ESDOCS_USERNAME", "elastic")
        monkeypatch.setenv("ESDOCS_PASSWORD", "secret")
        assert ESConfig.from_env().auth == ("elastic", "secret")

    def test_none_overrides_ignored(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("ESDOCS_BASE_URL", raising=False)
        config = ESConfig.from_env(base_url=None, retries=None)
        assert config.base_url == "http://127.0.0.1:9200"
        assert config.retries == 0
