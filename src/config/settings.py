# src/config/settings.py — v3
"""Typed configuration loaded from .env via pydantic-settings.

Single source of truth for transport endpoints, request defaults,
retry policy and logging.
"""

from __future__ import annotations

from pathlib import Path
from typing import Literal

from pydantic import field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from tikaclient.core.errors import ConfigurationError
from tikaclient.logging.logger import rotation_bytes

__all__ = ["ConfigurationError", "Settings", "load_settings"]


class Settings(BaseSettings):
    """Application settings loaded from .env file."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # === Process transport (tika-app) ===
    tika_jar_path: Path | None = None
    tika_java_binary: str | None = None
    tika_process_timeout_s: float | None = None

    # === Service transport (tika-server) ===
    tika_scheme: Literal["http", "https"] = "http"
    tika_host: str = "localhost"
    tika_port: int = 9998
    tika_timeout_s: float = 30.0
    tika_verify_ssl: bool = True
    tika_proxy: str = ""
    tika_headers: dict[str, str] = {}

    # === Requests ===
    encoding: str | None = None
    chunk_size: int = 1_048_576
    download_remote: bool = False
    remote_probe_timeout_s: float = 5.0
    download_timeout_s: float = 5.0

    # === Retry ===
    retries: int = 3
    retry_delay_s: float = 0.0
    retry_backoff_factor: float = 2.0

    # === Logging ===
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    log_format: Literal["json", "text"] = "text"
    log_file: Path | None = None
    log_rotation: str = "10MB"
    log_retention: int = 5

    # --- Validators ---

    @field_validator("chunk_size")
    @classmethod
    def validate_chunk_size(cls, v: int) -> int:  # noqa: N805
        if v <= 0:
            raise ValueError("chunk_size must be > 0")
        return v

    @field_validator("retries")
    @classmethod
    def validate_retries(cls, v: int) -> int:  # noqa: N805
        if v < 1:
            raise ValueError("retries must be >= 1")
        return v

    @field_validator("log_rotation")
    @classmethod
    def validate_log_rotation(cls, v: str) -> str:  # noqa: N805
        rotation_bytes(v)
        return v

    @model_validator(mode="after")
    def validate_config_consistency(self) -> Settings:
        """Validate cross-field consistency rules."""
        errors: list[str] = []

        if self.tika_jar_path is not None and self.tika_jar_path.suffix != ".jar":
            errors.append(f"TIKA_JAR_PATH must point to a .jar file, got {self.tika_jar_path}")

        if self.encoding is not None and not self.encoding.strip():
            errors.append("ENCODING must not be empty when set")

        if errors:
            raise ConfigurationError("; ".join(errors))

        return self

    # --- Helpers ---

    @property
    def uses_process_transport(self) -> bool:
        """Whether the configuration selects the local tika-app process."""
        return self.tika_jar_path is not None

    @property
    def service_options(self) -> dict[str, object]:
        """httpx client options derived from the service settings."""
        options: dict[str, object] = {
            "timeout": self.tika_timeout_s,
            "verify": self.tika_verify_ssl,
        }
        if self.tika_headers:
            options["headers"] = dict(self.tika_headers)
        if self.tika_proxy:
            options["proxy"] = self.tika_proxy
        return options


def load_settings(**overrides: object) -> Settings:
    """Load settings from .env with optional overrides.

    Args:
        **overrides: Field-level overrides (for testing or per-session config).

    Returns:
        Validated Settings instance.

    Raises:
        ConfigurationError: If configuration is internally inconsistent.
    """
    return Settings(**overrides)  # type: ignore[arg-type]
