"""Tests for GraphStoreSettings — unified settings with TOML source."""

from pathlib import Path

import pytest
from pydantic import ValidationError

from graphstore.config.settings import GraphStoreSettings
from graphstore.errors import ConfigError


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for var in (
        "GRAPHSTORE_CONFIG",
        "GRAPHSTORE_DATABASE__URL",
        "GRAPHSTORE_STREAM__BATCH_SIZE",
        "GRAPHSTORE_LOGGING__VERBOSE",
    ):
        monkeypatch.delenv(var, raising=False)


class TestDefaults:
    def test_all_defaults(self, tmp_path: Path) -> None:
        """With no TOML and no env vars, all fields use code defaults."""
        settings = GraphStoreSettings.load(start=tmp_path)
        assert settings.config_path is None
        assert settings.database.url == "sqlite:///graphstore.db"
        assert settings.database.driver == "mysql+pymysql"
        assert settings.database.pool_pre_ping is True
        assert settings.stream.batch_size == 100
        assert settings.logging.verbose is False
        assert settings.logging.json_logs is False

    def test_frozen(self, tmp_path: Path) -> None:
        settings = GraphStoreSettings.load(start=tmp_path)
        with pytest.raises(ValidationError):
            settings.config_path = tmp_path  # type: ignore[misc]

    def test_batch_size_must_be_positive(self) -> None:
        with pytest.raises(ValidationError):
            GraphStoreSettings(stream={"batch_size": 0})


class TestTomlSource:
    def test_discovered_by_walk_up(self, tmp_path: Path) -> None:
        toml = tmp_path / "graphstore.toml"
        toml.write_text('[database]\nurl = "sqlite:///walked.db"\n')
        child = tmp_path / "a" / "b"
        child.mkdir(parents=True)
        settings = GraphStoreSettings.load(start=child)
        assert settings.database.url == "sqlite:///walked.db"
        assert settings.config_path == toml

    def test_sparse_override(self, tmp_path: Path) -> None:
        """Only overridden fields change — rest keeps defaults."""
        (tmp_path / "graphstore.toml").write_text("[stream]\nbatch_size = 7\n")
        settings = GraphStoreSettings.load(start=tmp_path)
        assert settings.stream.batch_size == 7
        assert settings.database.url == "sqlite:///graphstore.db"

    def test_empty_toml_uses_defaults(self, tmp_path: Path) -> None:
        (tmp_path / "graphstore.toml").write_text("")
        settings = GraphStoreSettings.load(start=tmp_path)
        assert settings.stream.batch_size == 100

    def test_explicit_config_path(self, tmp_path: Path) -> None:
        custom = tmp_path / "custom" / "store.toml"
        custom.parent.mkdir(parents=True)
        custom.write_text("[logging]\nverbose = true\n")
        settings = GraphStoreSettings.load(config_path=str(custom))
        assert settings.logging.verbose is True
        assert settings.config_path == custom

    def test_explicit_config_path_missing(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigError, match="not found"):
            GraphStoreSettings.load(config_path=tmp_path / "nope.toml")

    def test_invalid_toml(self, tmp_path: Path) -> None:
        (tmp_path / "graphstore.toml").write_text("[stream\nbatch_size = ")
        with pytest.raises(ConfigError, match="Invalid TOML") as exc_info:
            GraphStoreSettings.load(start=tmp_path)
        assert exc_info.value.detail["path"].endswith("graphstore.toml")


class TestPrecedence:
    def test_env_overrides_toml(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        (tmp_path / "graphstore.toml").write_text("[stream]\nbatch_size = 5\n")
        monkeypatch.setenv("GRAPHSTORE_STREAM__BATCH_SIZE", "9")
        settings = GraphStoreSettings.load(start=tmp_path)
        assert settings.stream.batch_size == 9

    def test_kwargs_override_env(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("GRAPHSTORE_DATABASE__URL", "sqlite:///env.db")
        settings = GraphStoreSettings.load(start=tmp_path, database={"url": "sqlite:///kw.db"})
        assert settings.database.url == "sqlite:///kw.db"

    def test_env_var_selects_config_file(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        custom = tmp_path / "elsewhere.toml"
        custom.write_text("[stream]\nbatch_size = 3\n")
        monkeypatch.setenv("GRAPHSTORE_CONFIG", str(custom))
        settings = GraphStoreSettings.load(start=tmp_path / "unrelated")
        assert settings.stream.batch_size == 3
