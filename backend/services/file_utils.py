"""File handling utilities"""

from __future__ import annotations

import time
from collections.abc import Sequence
from dataclasses import dataclass

from fastapi import UploadFile

SIZE_UNITS = ["B", "KB", "MB", "GB", "TB"]


@dataclass(frozen=True)
class UploadedFile:
    """An upload read fully into memory"""

    name: str
    content_type: str
    data: bytes

    @property
    def size(self) -> int:
        return len(self.data)


async def read_upload(upload: UploadFile) -> UploadedFile:
    data = await upload.read()
    return UploadedFile(
        name=upload.filename or "",
        content_type=upload.content_type or "",
        data=data,
    )


def get_file_extension(filename: str) -> str:
    """Lower-cased extension including the dot, or '' when there is none"""
    dot = filename.rfind(".")
    if dot <= 0:
        return ""
    return filename[dot:].lower()


def get_file_name_without_extension(filename: str) -> str:
    dot = filename.rfind(".")
    if dot <= 0:
        return filename
    return filename[:dot]


def sort_files_by_name(files: Sequence[UploadedFile]) -> list[UploadedFile]:
    """Case-insensitive name order; the input is left untouched"""
    return sorted(files, key=lambda f: (f.name.casefold(), f.name))


def format_file_size(size: int) -> str:
    """Human readable size: ``500 B``, ``1.5 KB``, ``1.0 MB``"""
    if size <= 0:
        return "0 B"

    exponent = 0
    while size >= 1024 ** (exponent + 1) and exponent < len(SIZE_UNITS) - 1:
        exponent += 1
    if exponent == 0:
        return f"{size} B"
    return f"{size / 1024 ** exponent:.1f} {SIZE_UNITS[exponent]}"


def generate_unique_filename(original_name: str, suffix: str | None = None) -> str:
    """``name[_suffix]_<ms timestamp>.ext``"""
    timestamp = int(time.time() * 1000)
    extension = get_file_extension(original_name)
    stem = get_file_name_without_extension(original_name)
    if suffix:
        return f"{stem}_{suffix}_{timestamp}{extension}"
    return f"{stem}_{timestamp}{extension}"


def decode_text(data: bytes) -> str:
    """Decode as UTF-8, falling back to Latin-1 for anything else"""
    try:
        return data.decode("utf-8")
    except UnicodeDecodeError:
        return data.decode("latin-1")
