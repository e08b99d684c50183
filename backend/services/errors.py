"""
Error taxonomy - Exceptions raised by services and their HTTP mapping
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any

from models.common import ErrorResponse

logger = logging.getLogger(__name__)


class ToolkitError(Exception):
    """Base class for errors reported to the client"""

    status_code = 500

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(message)
        self.message = message
        self.details = details


class ValidationError(ToolkitError):
    status_code = 400

    def __init__(self, message: str, field: str | None = None):
        super().__init__(message, {"field": field} if field else None)
        self.field = field


class CropParameterError(ToolkitError):
    status_code = 400

    def __init__(self, message: str, parameters: dict[str, Any]):
        super().__init__(message, {"parameters": parameters})
        self.parameters = parameters


class ImageProcessingError(ToolkitError):
    """Pillow failed to decode or transform an image"""

    status_code = 422


def get_http_status_for_error(error: Exception) -> int:
    if isinstance(error, ToolkitError):
        return error.status_code
    return 500


def create_error_response(
    error: Exception | str,
    details: dict[str, Any] | None = None,
) -> ErrorResponse:
    """Build the JSON error envelope"""
    message = error if isinstance(error, str) else str(error)
    if details is None and isinstance(error, ToolkitError):
        details = error.details
    return ErrorResponse(
        error=message,
        details=details,
        timestamp=datetime.now(timezone.utc).isoformat(),
    )


def log_error(context: str, error: Exception | str, details: dict[str, Any] | None = None):
    """Log an error with its traceback when one is available"""
    if isinstance(error, BaseException):
        logger.error("%s: %s", context, error, exc_info=error)
    else:
        logger.error("%s: %s", context, error)
    if details:
        logger.error("Details: %s", details)
