"""Models module - Pydantic data models"""

from .common import ErrorResponse, HealthResponse, OperationMetrics, ValidationResult
from .diff import (
    DiffLine,
    DiffStatistics,
    DiffSummary,
    DiffTag,
    FileDiffData,
    FileDiffResponse,
    FileStatistics,
    TextDiffData,
    TextDiffRequest,
    TextDiffResponse,
)
from .image import (
    CropArea,
    IconData,
    IconResponse,
    ImageDimensions,
    LayoutType,
    MergeData,
    MergeLayout,
    MergeResponse,
)

__all__ = [
    # Common models
    "ErrorResponse",
    "HealthResponse",
    "OperationMetrics",
    "ValidationResult",
    # Diff models
    "DiffLine",
    "DiffStatistics",
    "DiffSummary",
    "DiffTag",
    "FileDiffData",
    "FileDiffResponse",
    "FileStatistics",
    "TextDiffData",
    "TextDiffRequest",
    "TextDiffResponse",
    # Image models
    "CropArea",
    "IconData",
    "IconResponse",
    "ImageDimensions",
    "LayoutType",
    "MergeData",
    "MergeLayout",
    "MergeResponse",
]
