"""Diff-related data models"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel


class DiffTag(str, Enum):
    """Classification of a single line pairing"""

    EQUAL = "equal"
    DELETE = "delete"
    INSERT = "insert"
    REPLACE = "replace"


class DiffLine(BaseModel):
    """One operation of a diff script.

    ``equal`` and ``replace`` carry both sides, ``delete`` only the left side
    and ``insert`` only the right side.
    """

    tag: DiffTag
    left_line: str | None = None
    right_line: str | None = None
    left_line_num: int | None = None  # 1-indexed
    right_line_num: int | None = None  # 1-indexed


class DiffSummary(BaseModel):
    """Operation counts for a diff script"""

    equal: int = 0
    insert: int = 0
    delete: int = 0
    replace: int = 0


class FileStatistics(BaseModel):
    """Size information for one compared file"""

    name: str
    lines: int
    characters: int
    size: int
    size_display: str


class DiffStatistics(BaseModel):
    file1: FileStatistics
    file2: FileStatistics


class FileDiffData(BaseModel):
    diff: str  # Rendered HTML table
    statistics: DiffStatistics
    summary: DiffSummary


class FileDiffResponse(BaseModel):
    """Response for an uploaded file comparison"""

    success: bool = True
    data: FileDiffData


class TextDiffRequest(BaseModel):
    """Request to compare two texts sent as JSON"""

    left_text: str
    right_text: str
    left_name: str = "left"
    right_name: str = "right"


class TextDiffData(BaseModel):
    diff: str
    lines: list[DiffLine]
    summary: DiffSummary


class TextDiffResponse(BaseModel):
    success: bool = True
    data: TextDiffData
