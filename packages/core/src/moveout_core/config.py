"""Configuration for the moving-out budget engine.

Pydantic Settings-based configuration with environment variable support and
defaults suitable for embedding the engine in a web or desktop front end.

Usage:
    from moveout_core.config import EngineConfig, configure_logging

    config = EngineConfig()
    configure_logging(config)
    derived = compute_budget(inputs, constants, config=config)

The engine never builds an ``EngineConfig`` from the environment on its own;
without an explicit config it uses ``DEFAULT_ENGINE_CONFIG``.
"""

import logging

import structlog
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class EngineConfig(BaseSettings):
    """Root configuration for the budget engine.

    Environment Variables:
        MOVEOUT_ENV: Environment name (development, staging, production, test)
        MOVEOUT_LOG_LEVEL: Logging level (DEBUG, INFO, WARNING, ERROR)
        MOVEOUT_LOG_CALCULATION_STEPS: Log every intermediate budget step
        MOVEOUT_MISSING_FIELD_FIX_LIMIT: "Enter: ..." entries shown in fix-next

    Example:
        config = EngineConfig(log_level="debug", missing_field_fix_limit=3)
    """

    model_config = SettingsConfigDict(
        env_prefix="MOVEOUT_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    env: str = Field(
        default="development",
        description="Environment name (development, staging, production)",
    )
    log_level: str = Field(
        default="INFO",
        description="Logging level",
    )
    log_calculation_steps: bool = Field(
        default=False,
        description="Emit a debug event for every intermediate calculation step",
    )
    missing_field_fix_limit: int = Field(
        default=5,
        ge=1,
        le=20,
        description="Maximum number of missing-field entries in the fix-next list",
    )

    @field_validator("env")
    @classmethod
    def validate_env(cls, v: str) -> str:
        """Validate environment name."""
        valid_envs = {"development", "staging", "production", "test"}
        v_lower = v.lower().strip()
        if v_lower not in valid_envs:
            raise ValueError(f"Invalid environment: {v}. Must be one of: {valid_envs}")
        return v_lower

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate and normalize log level."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        v_upper = v.upper().strip()
        if v_upper not in valid_levels:
            raise ValueError(f"Invalid log level: {v}. Must be one of: {valid_levels}")
        return v_upper

    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.env == "production"

    @property
    def is_debug(self) -> bool:
        """Check if step logging or DEBUG level is enabled."""
        return self.log_calculation_steps or self.log_level == "DEBUG"


def configure_logging(config: EngineConfig) -> None:
    """Filter structlog output at the configured level."""
    structlog.configure(
        wrapper_class=structlog.make_filtering_bound_logger(
            getattr(logging, config.log_level)
        ),
    )


# Field defaults only: built without reading MOVEOUT_* variables or a .env file.
DEFAULT_ENGINE_CONFIG = EngineConfig.model_construct()
