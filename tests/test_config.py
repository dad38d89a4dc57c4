"""Tests for configuration loading and validation."""

from pathlib import Path

import pytest

from anki_link.config import Config, get_config, load_config, set_config
from anki_link.exceptions import ConfigurationError


class TestConfigDefaults:
    def test_defaults(self) -> None:
        config = Config()

        assert config.anki_connect_url == "http://127.0.0.1:8765"
        assert config.anki_connect_version == 6
        assert config.model_name == "AnkiLink Basic"
        assert config.managed_tag == "ankiLink"
        assert config.deck_key == "anki deck"
        assert config.default_deck is None
        assert config.max_batch_actions == 500

    def test_blank_default_deck_is_none(self) -> None:
        assert Config(default_deck="  ").default_deck is None

    def test_tag_without_spaces(self) -> None:
        with pytest.raises(ValueError):
            Config(managed_tag="anki link")

    def test_batch_size_positive(self) -> None:
        with pytest.raises(ValueError):
            Config(max_batch_actions=0)


class TestValidateConfig:
    def test_vault_required(self) -> None:
        with pytest.raises(ConfigurationError, match="vault_path is required"):
            Config().validate_config()

    def test_vault_must_exist(self, tmp_path) -> None:
        with pytest.raises(ConfigurationError, match="does not exist"):
            Config(vault_path=tmp_path / "missing").validate_config()

    def test_valid_vault(self, tmp_path) -> None:
        config = Config(vault_path=tmp_path)

        assert config.validate_config() is config


class TestLoadConfig:
    def test_yaml_file(self, tmp_path) -> None:
        path = tmp_path / "custom.yaml"
        path.write_text(
            f"vault_path: {tmp_path}\nMANAGED_TAG: myCards\ndefault_deck: Inbox\n",
            encoding="utf-8",
        )

        config = load_config(path)

        assert config.vault_path == tmp_path
        assert config.managed_tag == "myCards"
        assert config.default_deck == "Inbox"

    def test_config_yaml_in_working_directory(self, tmp_path) -> None:
        (tmp_path / "config.yaml").write_text("max_batch_actions: 50\n", encoding="utf-8")

        assert load_config().max_batch_actions == 50

    def test_env_variable_points_to_file(self, tmp_path, monkeypatch) -> None:
        path = tmp_path / "elsewhere.yaml"
        path.write_text("request_timeout: 5\n", encoding="utf-8")
        monkeypatch.setenv("ANKI_LINK_CONFIG", str(path))

        assert load_config().request_timeout == 5

    def test_environment_settings(self, monkeypatch) -> None:
        monkeypatch.setenv("ANKI_LINK_ANKI_CONNECT_URL", "http://anki:8765")

        assert load_config().anki_connect_url == "http://anki:8765"

    def test_overrides_win(self, tmp_path) -> None:
        path = tmp_path / "c.yaml"
        path.write_text("vault_path: /from/file\n", encoding="utf-8")

        config = load_config(path, overrides={"vault_path": tmp_path, "log_level": None})

        assert config.vault_path == tmp_path
        assert config.log_level == "INFO"

    def test_missing_explicit_file(self, tmp_path) -> None:
        with pytest.raises(ConfigurationError, match="not found"):
            load_config(tmp_path / "nope.yaml")

    def test_invalid_yaml(self, tmp_path) -> None:
        path = tmp_path / "bad.yaml"
        path.write_text("vault_path: [unclosed\n", encoding="utf-8")

        with pytest.raises(ConfigurationError) as exc_info:
            load_config(path)

        assert exc_info.value.suggestion is not None

    def test_invalid_value(self, tmp_path) -> None:
        path = tmp_path / "bad.yaml"
        path.write_text("max_batch_actions: -1\n", encoding="utf-8")

        with pytest.raises(ConfigurationError, match="Invalid configuration"):
            load_config(path)

    def test_not_a_mapping(self, tmp_path) -> None:
        path = tmp_path / "list.yaml"
        path.write_text("- a\n- b\n", encoding="utf-8")

        with pytest.raises(ConfigurationError):
            load_config(path)


class TestSingleton:
    def test_set_and_get(self) -> None:
        config = Config(default_deck="Shared")
        set_config(config)

        assert get_config() is config

    def test_get_loads_lazily(self, tmp_path) -> None:
        (tmp_path / "config.yaml").write_text(f"vault_path: {tmp_path}\n", encoding="utf-8")

        assert get_config().vault_path == Path(tmp_path)
