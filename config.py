"""
Configuration management using Pydantic Settings with safe access wrapper
"""
from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import Any, Dict


VALID_ENVIRONMENTS = ["development", "testing", "production"]
VALID_LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


class Settings(BaseSettings):
    # Application settings
    app_name: str = "Recog"
    version: str = "1.0.0"
    environment: str = "production"

    # Logging settings
    log_level: str = "INFO"
    log_dir: str = "logs"
    log_file: str = "recog.log"
    log_file_max_bytes: int = 10485760
    log_file_backup_count: int = 10

    # Monitoring
    enable_metrics: bool = True

    # Matching settings
    temporary_param_prefix: str = "_tmp."
    default_fuzzy_threshold: float = 0.8
    batch_warn_threshold: int = 0  # 0 disables the warning

    # Loader settings
    loader_max_workers: int = 4

    model_config = SettingsConfigDict(
        env_prefix="RECOG_",
        env_file=".env",
        case_sensitive=False,
        extra="ignore",   # allow unknown env vars without error
    )

    @field_validator("environment")
    @classmethod
    def validate_environment(cls, value: str) -> str:
        if value not in VALID_ENVIRONMENTS:
            raise ValueError(f"Invalid environment: {value}. Valid options: {VALID_ENVIRONMENTS}")
        return value

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, value: str) -> str:
        if value.upper() not in VALID_LOG_LEVELS:
            raise ValueError(f"Invalid log level: {value}. Valid options: {VALID_LOG_LEVELS}")
        return value.upper()

    @field_validator("default_fuzzy_threshold")
    @classmethod
    def validate_threshold(cls, value: float) -> float:
        if not 0.0 <= value <= 1.0:
            raise ValueError(f"Fuzzy threshold must be within [0, 1], got {value}")
        return value

    @field_validator("batch_warn_threshold", "loader_max_workers")
    @classmethod
    def validate_non_negative(cls, value: int) -> int:
        if value < 0:
            raise ValueError(f"Value must not be negative, got {value}")
        return value


class SafeSettings:
    """Safe wrapper for settings with fallback defaults"""

    def __init__(self, settings: Settings):
        self._settings = settings
        self._defaults: Dict[str, Any] = {
            "log_level": "INFO",
            "log_dir": "logs",
            "log_file": "recog.log",
            "environment": "production",
            "enable_metrics": True,
            "temporary_param_prefix": "_tmp.",
            "default_fuzzy_threshold": 0.8,
            "batch_warn_threshold": 0,
            "loader_max_workers": 4,
        }

    def get(self, key: str, default: Any = None) -> Any:
        """Safely get setting value with fallback"""
        value = getattr(self._settings, key, None)
        if value is None:
            value = self._defaults.get(key, default)
        return value

    def __getattr__(self, key: str) -> Any:
        """Proxy attribute access with safety"""
        return self.get(key)

    @property
    def raw(self) -> Settings:
        """Get raw settings object"""
        return self._settings


# Initialize settings with safety wrapper
_raw_settings = Settings()
settings = SafeSettings(_raw_settings)


def get_settings() -> Settings:
    """Return the process-wide raw settings instance"""
    return _raw_settings
