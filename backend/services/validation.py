"""
Input validation - Checks applied to uploads before any processing
"""

from __future__ import annotations

from collections.abc import Sequence

from models.common import ValidationResult
from services.file_utils import UploadedFile, format_file_size

MAX_FILE_SIZE = 64 * 1024 * 1024
MIN_FILES_IMAGE_MERGE = 2
MAX_FILES_IMAGE_MERGE = 6

SUPPORTED_IMAGE_FORMATS = [
    "image/png",
    "image/jpeg",
    "image/jpg",
    "image/gif",
    "image/webp",
]


def _result(errors: list[str]) -> ValidationResult:
    return ValidationResult(is_valid=not errors, errors=errors)


def _size_error(file: UploadedFile, max_size: int) -> str:
    return f'File "{file.name}" is too large. Maximum size is {format_file_size(max_size)}.'


def validate_image_file(file: UploadedFile, max_size: int = MAX_FILE_SIZE) -> ValidationResult:
    errors = []

    if file.size > max_size:
        errors.append(_size_error(file, max_size))

    if file.content_type not in SUPPORTED_IMAGE_FORMATS:
        errors.append(
            f'File "{file.name}" has unsupported format. '
            "Supported formats: PNG, JPG, JPEG, GIF, WEBP."
        )

    return _result(errors)


def validate_image_files(
    files: Sequence[UploadedFile],
    max_size: int = MAX_FILE_SIZE,
) -> ValidationResult:
    if not files:
        return _result(["Please select at least one file."])

    errors = []
    for file in files:
        errors.extend(validate_image_file(file, max_size).errors)
    return _result(errors)


def validate_dual_merge_files(
    files: Sequence[UploadedFile],
    max_size: int = MAX_FILE_SIZE,
) -> ValidationResult:
    if len(files) != 2:
        return _result(["Please select exactly 2 images for dual merge."])
    return validate_image_files(files, max_size)


def validate_multi_merge_files(
    files: Sequence[UploadedFile],
    max_size: int = MAX_FILE_SIZE,
) -> ValidationResult:
    if not MIN_FILES_IMAGE_MERGE <= len(files) <= MAX_FILES_IMAGE_MERGE:
        return _result(
            [
                f"Please select between {MIN_FILES_IMAGE_MERGE} and "
                f"{MAX_FILES_IMAGE_MERGE} images for multi merge."
            ]
        )
    return validate_image_files(files, max_size)


def validate_text_files(
    files: Sequence[UploadedFile],
    max_size: int = MAX_FILE_SIZE,
) -> ValidationResult:
    if len(files) != 2:
        return _result(["Please select exactly 2 files for comparison."])

    return _result([_size_error(file, max_size) for file in files if file.size > max_size])


def validate_crop_parameters(
    x: int,
    y: int,
    size: int,
    image_width: int,
    image_height: int,
) -> ValidationResult:
    """Check that a square crop lies inside the image"""
    errors = []

    if x < 0 or y < 0:
        errors.append("Crop position cannot be negative.")

    if size <= 0:
        errors.append("Crop size must be positive.")

    if x + size > image_width or y + size > image_height:
        errors.append("Crop area exceeds image boundaries.")

    return _result(errors)
