"""Settings model for the sync service."""

from __future__ import annotations

from pathlib import Path
from typing import Any

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .exceptions import ConfigurationError


class Config(BaseSettings):
    """Service configuration using pydantic-settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="ANKI_LINK_",
        env_ignore_empty=True,
        case_sensitive=False,
        extra="ignore",
        validate_assignment=True,
    )

    vault_path: Path = Field(default=Path(), description="Path to Obsidian vault")

    # Anki settings
    anki_connect_url: str = Field(
        default="http://127.0.0.1:8765", description="AnkiConnect URL"
    )
    anki_connect_version: int = Field(default=6, description="AnkiConnect API version")
    request_timeout: float = Field(
        default=30.0, gt=0, description="HTTP timeout for one request in seconds"
    )
    model_name: str = Field(
        default="AnkiLink Basic", description="Note type used for flashcards"
    )
    managed_tag: str = Field(
        default="ankiLink",
        description="Tag marking the notes this tool owns (orphans are deleted)",
    )
    max_batch_actions: int = Field(
        default=500, ge=1, description="Maximum actions per multi request"
    )

    # Documents
    deck_key: str = Field(
        default="anki deck", description="Front matter key holding the deck name"
    )
    default_deck: str | None = Field(
        default=None,
        description="Deck for documents without a deck key (None skips them)",
    )

    # Logging
    log_level: str = Field(default="INFO", description="Log level")
    log_dir: Path | None = Field(
        default=None, description="Directory for JSON log files (None disables)"
    )

    @field_validator("vault_path", mode="before")
    @classmethod
    def parse_vault_path(cls, v: Any) -> Path:
        """Convert string to Path; empty means not set."""
        if v is None or v == "":
            return Path()
        if isinstance(v, (str, Path)):
            return Path(v).expanduser()
        msg = f"vault_path must be string or Path, got {type(v).__name__}"
        raise ValueError(msg)

    @field_validator("log_dir", mode="before")
    @classmethod
    def parse_path(cls, v: Any) -> Path | None:
        """Convert string to Path."""
        if v is None:
            return None
        if isinstance(v, Path):
            return v.expanduser()
        if isinstance(v, str):
            return Path(v).expanduser() if v else None
        msg = f"Path field must be string or Path, got {type(v).__name__}"
        raise ValueError(msg)

    @field_validator("default_deck", mode="before")
    @classmethod
    def blank_deck_is_none(cls, v: Any) -> Any:
        if isinstance(v, str) and not v.strip():
            return None
        return v.strip() if isinstance(v, str) else v

    @field_validator("managed_tag", "model_name", "deck_key")
    @classmethod
    def not_blank(cls, v: str) -> str:
        if not v.strip():
            msg = "value must not be blank"
            raise ValueError(msg)
        return v.strip()

    @field_validator("managed_tag")
    @classmethod
    def tag_has_no_spaces(cls, v: str) -> str:
        if any(ch.isspace() for ch in v):
            msg = "Anki tags cannot contain whitespace"
            raise ValueError(msg)
        return v

    def validate_config(self) -> Config:
        """Validate values that depend on the filesystem."""
        vault = self.vault_path
        if vault == Path():
            msg = "vault_path is required"
            raise ConfigurationError(
                msg,
                suggestion="Set ANKI_LINK_VAULT_PATH, vault_path in config.yaml or pass --vault",
            )
        if not vault.is_dir():
            msg = f"Vault directory does not exist: {vault}"
            raise ConfigurationError(
                msg, suggestion="Check the vault_path setting"
            )
        return self
