"""Custom exceptions for applog."""

from typing import Any, Dict, Optional


class ApplogException(Exception):
    """Base exception for all applog errors."""
    
    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.details = details or {}


class SerializationError(ApplogException):
    """Raised when a field mapping cannot be encoded into a log line."""
    
    def __init__(self, message: str, cause: Optional[BaseException] = None):
        super().__init__(message, details={"cause": str(cause)} if cause else None)
        self.cause = cause


class ConfigurationException(ApplogException):
    """Raised when logging configuration is invalid."""
    pass
