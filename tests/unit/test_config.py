"""
Unit tests for environment configuration.
"""

from localstack_fixture.config import (
    get_container_name,
    get_image,
    get_init_timeout,
    get_log_level,
)


class TestConfig:
    """Test suite for the environment getters."""

    def test_defaults(self, monkeypatch):
        for name in (
            "LOCALSTACK_FIXTURE_IMAGE",
            "LOCALSTACK_FIXTURE_INIT_TIMEOUT",
            "LOCALSTACK_FIXTURE_CONTAINER_NAME",
            "LOCALSTACK_FIXTURE_LOG_LEVEL",
        ):
            monkeypatch.delenv(name, raising=False)

        assert get_image() == "localstack/localstack:1.4"
        assert get_init_timeout() == 0
        assert get_container_name() == "localstack"
        assert get_log_level() == "INFO"

    def test_overrides(self, monkeypatch):
        monkeypatch.setenv("LOCALSTACK_FIXTURE_IMAGE", "localstack/localstack:3.0")
        monkeypatch.setenv("LOCALSTACK_FIXTURE_INIT_TIMEOUT", "90")
        monkeypatch.setenv("LOCALSTACK_FIXTURE_CONTAINER_NAME", "shared-aws")
        monkeypatch.setenv("LOCALSTACK_FIXTURE_LOG_LEVEL", "debug")

        assert get_image() == "localstack/localstack:3.0"
        assert get_init_timeout() == 90
        assert get_container_name() == "shared-aws"
        assert get_log_level() == "DEBUG"

    def test_invalid_timeout_falls_back(self, monkeypatch, caplog):
        monkeypatch.setenv("LOCALSTACK_FIXTURE_INIT_TIMEOUT", "soon")
        assert get_init_timeout() == 0
        assert "Invalid LOCALSTACK_FIXTURE_INIT_TIMEOUT" in caplog.text

    def test_negative_timeout_falls_back(self, monkeypatch):
        monkeypatch.setenv("LOCALSTACK_FIXTURE_INIT_TIMEOUT", "-5")
        assert get_init_timeout() == 0

    def test_invalid_log_level_falls_back(self, monkeypatch):
        monkeypatch.setenv("LOCALSTACK_FIXTURE_LOG_LEVEL", "LOUD")
        assert get_log_level() == "INFO"
