"""
Logging configuration for applog using pydantic-settings.

Only this module reads environment variables. The logging engine receives a
LoggingSettings instance and never consults the environment itself, so the
configuration is fixed for the lifetime of the engine.
"""

from enum import Enum
from typing import Any, Optional

from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings

from applog.exceptions import ConfigurationException


class LogFormat(str, Enum):
    JSON = "json"
    PLAIN = "plain"


class LogStream(str, Enum):
    STDOUT = "stdout"
    STDERR = "stderr"


_TRUTHY = {"1", "true", "t", "yes", "y", "on"}


class LoggingSettings(BaseSettings):
    """Process-wide logging configuration.

    DEBUG lowers the minimum emitted severity to debug. LOG_FORMAT selects
    structured JSON output unless it is exactly ``plain``; LOG_STREAM picks
    the output stream.
    """
    debug: bool = Field(default=False, description="Emit debug records")
    log_format: LogFormat = Field(default=LogFormat.JSON, description="json or plain rendering")
    log_stream: LogStream = Field(default=LogStream.STDERR, description="stdout or stderr")
    
    model_config = {"env_prefix": "", "extra": "ignore", "env_ignore_empty": True}
    
    @field_validator('log_format', mode='before')
    @classmethod
    def normalize_log_format(cls, v: Any) -> Any:
        """Anything other than 'plain' means structured output"""
        if isinstance(v, LogFormat):
            return v
        if isinstance(v, str) and v.strip().lower() == LogFormat.PLAIN.value:
            return LogFormat.PLAIN
        return LogFormat.JSON
    
    @field_validator('debug', mode='before')
    @classmethod
    def normalize_debug(cls, v: Any) -> Any:
        """DEBUG is shared with other tools; values that are not booleans mean off"""
        if isinstance(v, str):
            return v.strip().lower() in _TRUTHY
        return v
    
    @field_validator('log_stream', mode='before')
    @classmethod
    def normalize_log_stream(cls, v: Any) -> Any:
        if isinstance(v, str):
            return v.strip().lower()
        return v
    
    @property
    def structured(self) -> bool:
        return self.log_format is LogFormat.JSON


_settings_instance: Optional[LoggingSettings] = None


def get_settings() -> LoggingSettings:
    """
    Get the global logging settings (singleton).
    
    Loads a .env file if present, without overriding variables that are
    already set in the process environment.
    
    Raises:
        ConfigurationException: If the environment holds invalid values
    """
    global _settings_instance
    if _settings_instance is None:
        from dotenv import load_dotenv
        
        load_dotenv(override=False)
        try:
            _settings_instance = LoggingSettings()
        except ValidationError as e:
            raise ConfigurationException(
                f"Logging settings initialization failed: {e}",
                details={"error_count": e.error_count()}
            ) from e
    return _settings_instance


def reset_settings() -> None:
    """
    Reset settings instance (primarily for testing).
    
    Forces recreation of settings on next get_settings() call.
    """
    global _settings_instance
    _settings_instance = None
