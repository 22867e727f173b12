"""Runtime settings for mermaid-runner.

Settings are read from ``MERMAID_*`` environment variables and an optional
``.env`` file. Only the values the runtime itself needs live here; diagram
theming and per-diagram configuration belong to the engine.

Fields
──────
start_on_load         : Let ``content_loaded()`` trigger a page scan
deterministic_ids     : Seed-prefixed sequential ids instead of random ones
deterministic_id_seed : Prefix used in deterministic mode
mmdc_path             : mermaid-cli executable used by ``MermaidCliEngine``
log_level             : Structlog log level
json_logs             : JSON log lines (None = auto, JSON when not a tty)

Examples:
    >>> settings = MermaidSettings(deterministic_ids=True, deterministic_id_seed="doc")
    >>> settings.to_config().deterministic_id_seed
    'doc'
"""

from __future__ import annotations

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from mermaid_runner.engine.protocol import MermaidConfig

_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


class MermaidSettings(BaseSettings):
    """Settings shared by the CLI and ``create_mermaid``."""

    model_config = SettingsConfigDict(
        env_prefix="MERMAID_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ── Scanning ─────────────────────────────────────────────────
    start_on_load: bool = True
    deterministic_ids: bool = False
    deterministic_id_seed: str | None = None

    # ── Engine ───────────────────────────────────────────────────
    mmdc_path: str = Field(
        default="mmdc",
        description="mermaid-cli executable name or path",
    )

    # ── Observability ────────────────────────────────────────────
    log_level: str = "INFO"
    json_logs: bool | None = None

    @field_validator("log_level")
    @classmethod
    def _check_log_level(cls, value: str) -> str:
        level = value.upper()
        if level not in _LOG_LEVELS:
            raise ValueError(f"log_level must be one of {sorted(_LOG_LEVELS)}, got {value!r}")
        return level

    def to_config(self) -> MermaidConfig:
        """Engine configuration derived from these settings."""
        return MermaidConfig(
            start_on_load=self.start_on_load,
            deterministic_ids=self.deterministic_ids,
            deterministic_id_seed=self.deterministic_id_seed,
        )
