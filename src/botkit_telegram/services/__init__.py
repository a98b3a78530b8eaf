"""服務層"""

from botkit_telegram.services.errors import (
    ConfigurationError,
    ExternalServiceError,
    ServiceError,
    ValidationError,
)

__all__ = [
    "ConfigurationError",
    "ExternalServiceError",
    "ServiceError",
    "ValidationError",
]
