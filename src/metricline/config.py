"""Configuration management with pydantic-settings for metricline.

Loads from (in order of precedence):
1. Environment variables with the METRICLINE_ prefix (highest priority)
2. .env file in the working directory
3. Default values (lowest priority)

Config is frozen after load and shared through get_config().
"""

import codecs
from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

__all__ = ["MetricLineConfig", "get_config", "reset_config"]


class MetricLineConfig(BaseSettings):
    """Configuration for metricline hosts.

    The classifier itself takes no configuration. These settings govern the
    logging stack and the document-level host (CLI).

    Attributes:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_format: Log format (json for production, text for development)
        input_encoding: Text encoding used when reading exposition files
        fail_on_unrecognized: Exit non-zero when any line is unrecognized
        max_line_length: Lines longer than this are unrecognized (0 = no limit)
    """

    model_config = SettingsConfigDict(
        env_prefix="METRICLINE_",
        env_file=".env",
        env_file_encoding="utf-8",
        env_ignore_empty=True,  # Use defaults instead of empty strings
        case_sensitive=False,
        validate_default=True,
        frozen=True,  # Immutable after creation (thread-safe)
        extra="ignore",
    )

    log_level: str = Field(
        default="INFO",
        pattern="^(DEBUG|INFO|WARNING|ERROR|CRITICAL)$",
        description="Log level: DEBUG, INFO, WARNING, ERROR, CRITICAL",
    )

    log_format: str = Field(
        default="json",
        pattern="^(json|text)$",
        description="Log format: json (production), text (development)",
    )

    input_encoding: str = Field(
        default="utf-8", description="Encoding used to read exposition files"
    )

    fail_on_unrecognized: bool = Field(
        default=False,
        description="Exit with status 1 when any line is unrecognized",
    )

    max_line_length: int = Field(
        default=0,
        ge=0,
        description="Treat lines longer than this as unrecognized. 0 disables the limit.",
    )

    @field_validator("log_level", "log_format", mode="before")
    @classmethod
    def normalize_case(cls, v, info):
        """Accept any case for enumerated string settings."""
        if isinstance(v, str):
            v = v.strip()
            return v.upper() if info.field_name == "log_level" else v.lower()
        return v

    @field_validator("input_encoding")
    @classmethod
    def validate_encoding(cls, v: str) -> str:
        """Reject encodings Python does not know about."""
        try:
            codecs.lookup(v)
        except LookupError as e:
            raise ValueError(f"Unknown input encoding: '{v}'") from e
        return v


# Module-level singleton with lru_cache for thread-safety
@lru_cache(maxsize=1)
def get_config() -> MetricLineConfig:
    """Get global configuration singleton.

    First call loads from environment + .env file, subsequent calls return
    cached instance.

    Returns:
        MetricLineConfig singleton instance.

    Raises:
        ValidationError: If configuration values are invalid.
    """
    return MetricLineConfig()


def reset_config() -> None:
    """Reset configuration singleton for testing.

    Warning:
        Only use in test code. Production code should not reset config.
    """
    get_config.cache_clear()
