"""Shared response models"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel


class ValidationResult(BaseModel):
    """Outcome of an input check; ``errors`` holds user-facing messages"""

    is_valid: bool
    errors: list[str] = []


class ErrorResponse(BaseModel):
    """Body returned for every failed request"""

    success: bool = False
    error: str
    details: dict[str, Any] | None = None
    timestamp: str


class OperationMetrics(BaseModel):
    average: float  # milliseconds
    count: int


class HealthResponse(BaseModel):
    status: str
    timestamp: str
    uptime: float  # seconds
    performance: dict[str, OperationMetrics] = {}
    version: str
    python_version: str
