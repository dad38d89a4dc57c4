"""Config loader utilities."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from .config_settings import Config
from .exceptions import ConfigurationError
from .utils.logging import get_logger

_config: Config | None = None


def _candidate_paths(config_path: Path | None) -> list[Path]:
    if config_path:
        return [config_path.expanduser()]
    candidates: list[Path] = []
    env_path = os.getenv("ANKI_LINK_CONFIG")
    if env_path:
        candidates.append(Path(env_path).expanduser())
    candidates.append(Path.cwd() / "config.yaml")
    return candidates


def load_config(
    config_path: Path | None = None, *, overrides: dict[str, Any] | None = None
) -> Config:
    """Load configuration from config.yaml, environment and .env.

    Values from the YAML file take precedence over environment variables;
    ``overrides`` (typically CLI options) take precedence over both.
    """
    logger = get_logger(__name__)

    candidates = _candidate_paths(config_path)
    resolved_config_path = next((p for p in candidates if p.exists()), None)

    if config_path and resolved_config_path is None:
        msg = f"Config file not found: {config_path}"
        raise ConfigurationError(msg, suggestion="Check the --config path")

    yaml_data: dict[str, Any] = {}
    if resolved_config_path:
        logger.info("config_file_found", config_path=str(resolved_config_path))
        try:
            with open(resolved_config_path, encoding="utf-8") as f:
                yaml_data = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as e:
            msg = f"Failed to parse config file: {resolved_config_path}"
            suggestion = (
                "Check YAML syntax (indentation, colons, quotes). "
                f"Original error: {e}"
            )
            raise ConfigurationError(msg, suggestion=suggestion) from e
        if not isinstance(yaml_data, dict):
            msg = f"Config file must contain a mapping: {resolved_config_path}"
            raise ConfigurationError(msg)
    else:
        logger.debug(
            "config_file_not_found", searched_paths=[str(p) for p in candidates]
        )

    config_kwargs = {str(key).lower(): value for key, value in yaml_data.items()}
    config_kwargs.update({k: v for k, v in (overrides or {}).items() if v is not None})

    try:
        config = Config(**config_kwargs)
    except ValidationError as e:
        logger.error("config_validation_error", error=str(e))
        msg = "Invalid configuration"
        raise ConfigurationError(
            msg,
            suggestion=str(e),
            context={
                "config_path": str(resolved_config_path) if resolved_config_path else None
            },
        ) from e

    logger.debug(
        "config_loaded",
        vault_path=str(config.vault_path),
        anki_connect_url=config.anki_connect_url,
    )
    return config


def get_config() -> Config:
    """Get singleton config instance."""
    global _config
    if _config is None:
        _config = load_config()
    return _config


def set_config(config: Config) -> None:
    """Set singleton config instance (for testing)."""
    global _config
    _config = config


def reset_config() -> None:
    """Reset global config instance (for testing only)."""
    global _config
    _config = None


__all__ = ["Config", "get_config", "load_config", "reset_config", "set_config"]
