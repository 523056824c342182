"""
Centralized Configuration for GSAS

Provides pydantic-based configuration with:
- Environment variable loading (.env support)
- Type validation
- Default values

Usage:
    from gsas.core.config import get_config

    config = get_config()
    print(config.log_level)
"""

from pathlib import Path
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class GSASConfig(BaseSettings):
    """
    Central configuration for the governance substrate.

    All settings can be overridden via environment variables with the GSAS_
    prefix, e.g. GSAS_LOG_LEVEL, GSAS_STRICT_REGISTRATION.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="GSAS_",
        case_sensitive=False,
        extra="ignore",
    )

    # ============================================
    # Logging
    # ============================================

    log_level: str = Field(
        default="INFO",
        description="Logging level: DEBUG, INFO, WARNING, ERROR, CRITICAL"
    )

    # ============================================
    # Engine
    # ============================================

    strict_registration: bool = Field(
        default=False,
        description="Validate the primitive contract (non-empty version) at registration"
    )

    # ============================================
    # Determinism lint
    # ============================================

    determinism_rules_path: Optional[Path] = Field(
        default=None,
        description="YAML file overriding the packaged banned-token rules"
    )

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level"""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if v.upper() not in valid_levels:
            raise ValueError(
                f"log_level must be one of: {', '.join(valid_levels)}"
            )
        return v.upper()


# Global config instance
_config: Optional[GSASConfig] = None


def get_config(force_reload: bool = False) -> GSASConfig:
    """
    Get the global configuration instance

    Args:
        force_reload: Force reload configuration from environment

    Returns:
        GSASConfig instance
    """
    global _config

    if _config is None or force_reload:
        _config = GSASConfig()

    return _config
