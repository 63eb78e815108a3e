# showtime/exceptions/__init__.py

from .base import AppError, ValidationError, Unauthorized
from .tmdb import (
    ConfigurationError,
    ProviderUnavailable,
    TransientProviderError,
    EnrichmentFailure,
)
from .media import MediaNotFound
from .handlers import register_exception_handlers

__all__ = [
    "AppError",
    "ValidationError",
    "Unauthorized",
    "ConfigurationError",
    "ProviderUnavailable",
    "TransientProviderError",
    "EnrichmentFailure",
    "MediaNotFound",
    "register_exception_handlers",
]
