"""Sensify Permissions — Host configuration.

Configuration is loaded from (in order of increasing priority):
    1. Built-in defaults (this file)
    2. Environment variables prefixed with SENSIFY_
    3. System config: /etc/sensify/config.yaml
    4. User config:   ~/.sensify/config.yaml
    5. An explicit config file passed to ``Settings.load()``

File values are passed as init arguments, so a top-level block present in a
file replaces the same block coming from the environment.

All settings are immutable after load.  Call ``Settings.load()`` once at host
startup, or let ``get_settings()`` do it lazily.  The lazy path also applies
the ``logging`` block through ``configure_from_settings()``.
"""

from __future__ import annotations

from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from sensify_permissions.logging import configure_from_settings


# ---------------------------------------------------------------------------
# Sub-configuration blocks
# ---------------------------------------------------------------------------


class PermissionsConfig(BaseModel):
    seed_from_platform: bool = Field(
        default=False,
        description=(
            "Seed is_granted from the oracle's current platform status when a "
            "controller is created, instead of always starting denied."
        ),
    )
    pending_policy: Literal["coalesce", "reject"] = Field(
        default="coalesce",
        description=(
            "What a second request_manually() call does while a dialog is in "
            "flight: coalesce (await the same result) or reject (raise)."
        ),
    )
    auto_trigger: bool = Field(
        default=True,
        description=(
            "Run the automatic on-activate trigger for AT_START requests. "
            "When False, mounts never ask on their own."
        ),
    )


class EventsConfig(BaseModel):
    log_file: Path | None = Field(
        default=None,
        description="NDJSON file receiving permission and lifecycle events. None = discard.",
    )


class LoggingConfig(BaseModel):
    level: Literal["debug", "info", "warning", "error", "critical"] = "info"
    format: Literal["json", "console"] = "console"
    file: Path | None = None


# ---------------------------------------------------------------------------
# Root settings
# ---------------------------------------------------------------------------


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="SENSIFY_",
        env_nested_delimiter="__",
        case_sensitive=False,
        extra="ignore",
    )

    permissions: PermissionsConfig = Field(default_factory=PermissionsConfig)
    events: EventsConfig = Field(default_factory=EventsConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    @field_validator("events", mode="before")
    @classmethod
    def expand_event_paths(cls, v: object) -> object:
        if isinstance(v, dict) and isinstance(v.get("log_file"), str):
            v["log_file"] = Path(v["log_file"]).expanduser()
        return v

    @classmethod
    def load(cls, config_file: Path | None = None) -> "Settings":
        """Load settings from file + environment variables."""
        data: dict[str, object] = {}

        candidates = [
            Path("/etc/sensify/config.yaml"),
            Path.home() / ".sensify" / "config.yaml",
        ]
        if config_file:
            candidates.append(config_file)

        for path in candidates:
            if path.exists():
                import yaml  # lazy import, only needed when a file exists

                with path.open() as f:
                    loaded = yaml.safe_load(f) or {}
                    data.update(loaded)

        return cls(**data)


# Module-level singleton, replaced by ``override_settings()`` in tests.
_settings: Settings | None = None


def get_settings() -> Settings:
    """Return the process settings, loading them and configuring logging on first use."""
    global _settings
    if _settings is None:
        _settings = Settings.load()
        configure_from_settings(_settings)
    return _settings


def override_settings(settings: Settings) -> None:
    """Replace the module-level singleton. Used in tests."""
    global _settings
    _settings = settings
