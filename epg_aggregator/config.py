from pathlib import Path
from typing import Literal
import logging

from pydantic import field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


logger = logging.getLogger(__name__)

DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) "
    "AppleWebKit/537.36 (KHTML, like Gecko) "
    "Chrome/120.0.0.0 Safari/537.36"
)


class CustomSettings(BaseSettings):
    """Application settings loaded from environment variables.

    Validates configuration at startup to catch misconfiguration early.
    """

    thetv_base_url: str = "https://thetvapp.to"
    user_agent: str = DEFAULT_USER_AGENT
    request_timeout_sec: float = 20.0  # Per-request deadline for every provider call
    channels_file: str = "tvList.yaml"
    output_path: str = "epg.xml"
    source_time_format: str = "%Y-%m-%dT%H:%M:%S+00:00"
    output_time_format: str = "%Y%m%d%H%M%S %z"  # XMLTV
    max_concurrency: int = 0  # 0 = one task per channel, no cap
    discovery_concurrency: int = 0
    duration_policy: Literal["zero", "skip"] = "zero"
    log_level: str = "INFO"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @field_validator("thetv_base_url")
    @classmethod
    def validate_base_url(cls, value: str) -> str:
        """Validate provider URL is HTTP/HTTPS."""
        if not value.lower().startswith(("http://", "https://")):
            raise ValueError(f"Provider URL must be HTTP/HTTPS: {value}")
        return value.rstrip("/")

    @field_validator("user_agent")
    @classmethod
    def validate_user_agent(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("user_agent must not be empty")
        return value

    @field_validator("request_timeout_sec")
    @classmethod
    def validate_timeout(cls, value: float) -> float:
        """Validate HTTP request timeout (seconds)."""
        if value <= 0:
            raise ValueError("request_timeout_sec must be > 0")
        return value

    @field_validator("output_path")
    @classmethod
    def validate_output_path(cls, value: str) -> str:
        """Validate output directory is accessible."""
        path = Path(value)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            return value
        except (OSError, PermissionError) as exc:
            raise ValueError(f"Cannot access output path '{value}': {exc}") from exc

    @field_validator("source_time_format", "output_time_format")
    @classmethod
    def validate_time_format(cls, value: str, info) -> str:
        """Ensure time formats contain strftime directives."""
        if "%" not in value:
            raise ValueError(f"{info.field_name} must be a strftime format")
        return value

    @field_validator("max_concurrency", "discovery_concurrency")
    @classmethod
    def validate_concurrency(cls, value: int, info) -> int:
        """Ensure concurrency caps are non-negative (0 disables the cap)."""
        if value < 0:
            raise ValueError(f"{info.field_name} must be >= 0")
        return value

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, value: str) -> str:
        """Validate logging level name."""
        normalized = value.upper()
        allowed = {"CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"}
        if normalized not in allowed:
            raise ValueError(f"log_level must be one of {sorted(allowed)}")
        return normalized

    @model_validator(mode="after")
    def validate_paths(self):
        """Validate cross-field configuration."""
        if Path(self.channels_file).resolve() == Path(self.output_path).resolve():
            raise ValueError("channels_file and output_path must be different files")
        return self

    def log_configuration(self) -> None:
        """Log the effective configuration (call once logging is configured)."""
        logger.info("Configuration loaded:")
        logger.info("  Provider: %s", self.thetv_base_url)
        logger.info("  Request Timeout: %ss", self.request_timeout_sec)
        logger.info("  Channel Roster: %s", self.channels_file)
        logger.info("  Output: %s", self.output_path)
        logger.info(
            "  Max Concurrency: %s",
            self.max_concurrency or "unbounded",
        )
        logger.info("  Duration Policy: %s", self.duration_policy)


settings = CustomSettings()


def setup_logging(level: str | None = None) -> None:
    """Configure application logging."""
    logging.basicConfig(
        level=getattr(logging, (level or settings.log_level).upper()),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
