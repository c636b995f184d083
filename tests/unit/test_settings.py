"""Tests for settings loading from defaults, environment and YAML."""

from __future__ import annotations

from pathlib import Path

import pytest

from vespabridge.config.settings import Settings


class TestSettings:
    def test_defaults(self) -> None:
        s = Settings(_env_file=None)  # type: ignore[call-arg]
        assert s.backend.endpoint == "http://localhost:8080/"
        assert s.backend.document_type == "doc"
        assert s.backend.default_index == "default"
        assert s.proxy.path_prefix == ""

    def test_env_override(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("VESPABRIDGE_BACKEND__DOCUMENT_TYPE", "book")
        monkeypatch.setenv("VESPABRIDGE_SERVER__PORT", "9200")
        s = Settings(_env_file=None)  # type: ignore[call-arg]
        assert s.backend.document_type == "book"
        assert s.server.port == 9200

    def test_endpoint_normalized(self) -> None:
        s = Settings(_env_file=None, backend={"endpoint": "http://vespa:8080"})  # type: ignore[call-arg]
        assert s.backend.endpoint == "http://vespa:8080/"

    def test_path_prefix_normalized(self) -> None:
        s = Settings(_env_file=None, proxy={"path_prefix": "/es/"})  # type: ignore[call-arg]
        assert s.proxy.path_prefix == "/es"

    def test_from_yaml(self, tmp_path: Path) -> None:
        config = tmp_path / "vespabridge-config.yaml"
        config.write_text("backend:\n  endpoint: http://vespa:19071/\n  timeout: 5\nproxy:\n  path_prefix: /os\n")
        s = Settings.from_yaml(config)
        assert s.backend.endpoint == "http://vespa:19071/"
        assert s.backend.timeout == 5.0
        assert s.proxy.path_prefix == "/os"

    def test_from_yaml_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundError):
            Settings.from_yaml(tmp_path / "absent.yaml")

    def test_env_overrides_yaml(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        config = tmp_path / "vespabridge-config.yaml"
        config.write_text("server:\n  port: 9000\nobservability:\n  log_level: info\n  log_format: console\n")
        monkeypatch.setenv("VESPABRIDGE_OBSERVABILITY__LOG_LEVEL", "debug")
        s = Settings.from_yaml(config)
        assert s.observability.log_level == "debug"
        assert s.observability.log_format == "console"
        assert s.server.port == 9000
