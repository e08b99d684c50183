"""File comparison API endpoints"""

from __future__ import annotations

import logging

from fastapi import APIRouter, File, UploadFile

from models.diff import (
    DiffStatistics,
    FileDiffData,
    FileDiffResponse,
    FileStatistics,
    TextDiffData,
    TextDiffRequest,
    TextDiffResponse,
)
from services.config_manager import ConfigManager
from services.diff_generator import DiffGenerator
from services.errors import ValidationError
from services.file_utils import UploadedFile, decode_text, format_file_size, read_upload
from services.html_renderer import render_diff_table
from services.performance import PerformanceMonitor, get_processing_queue
from services.validation import validate_text_files

logger = logging.getLogger(__name__)

router = APIRouter()
diff_generator = DiffGenerator()


def check_text_length(texts: list[str], max_characters: int):
    """Reject texts the diff engine should not be asked to scan"""
    if any(len(text) > max_characters for text in texts):
        raise ValidationError(
            f"Files are too large for comparison. "
            f"Maximum is {max_characters:,} characters per file."
        )


def diff_and_render(left_text: str, right_text: str, left_name: str, right_name: str):
    """Diff two texts and render the table; runs off the event loop"""
    lines = diff_generator.compute_diff(
        diff_generator.split_lines(left_text),
        diff_generator.split_lines(right_text),
    )
    return lines, render_diff_table(lines, left_name, right_name)


def build_file_statistics(file: UploadedFile, text: str) -> FileStatistics:
    return FileStatistics(
        name=file.name,
        lines=len(text.split("\n")),
        characters=len(text),
        size=file.size,
        size_display=format_file_size(file.size),
    )


@router.post("", response_model=FileDiffResponse)
async def compare_files(
    file1: UploadFile | None = File(None),
    file2: UploadFile | None = File(None),
) -> FileDiffResponse:
    """Compare two uploaded text files and render a side-by-side table"""
    if file1 is None or file2 is None:
        raise ValidationError("Please provide exactly 2 files for comparison.")

    limits = ConfigManager.get_instance().get_config()["limits"]
    files = [await read_upload(file1), await read_upload(file2)]

    validation = validate_text_files(files, limits["max_file_size"])
    if not validation.is_valid:
        raise ValidationError(", ".join(validation.errors))

    text1, text2 = (decode_text(f.data) for f in files)
    check_text_length([text1, text2], limits["max_diff_characters"])

    queue = get_processing_queue(limits["max_concurrent_operations"])
    stop = PerformanceMonitor.get_instance().start_timer("file-diff")
    try:
        lines, html_diff = await queue.run(diff_and_render, text1, text2, files[0].name, files[1].name)
    finally:
        elapsed = stop()

    stats1 = build_file_statistics(files[0], text1)
    stats2 = build_file_statistics(files[1], text2)
    logger.info(
        "Compared %s (%d lines) with %s (%d lines) in %.1fms",
        stats1.name,
        stats1.lines,
        stats2.name,
        stats2.lines,
        elapsed,
    )

    return FileDiffResponse(
        data=FileDiffData(
            diff=html_diff,
            statistics=DiffStatistics(file1=stats1, file2=stats2),
            summary=diff_generator.summarize(lines),
        )
    )


@router.post("/text", response_model=TextDiffResponse)
async def compare_texts(request: TextDiffRequest) -> TextDiffResponse:
    """Compare two texts sent as JSON; returns the diff script as well"""
    limits = ConfigManager.get_instance().get_config()["limits"]
    check_text_length([request.left_text, request.right_text], limits["max_diff_characters"])

    queue = get_processing_queue(limits["max_concurrent_operations"])
    stop = PerformanceMonitor.get_instance().start_timer("text-diff")
    try:
        lines, html_diff = await queue.run(
            diff_and_render,
            request.left_text,
            request.right_text,
            request.left_name,
            request.right_name,
        )
    finally:
        stop()

    return TextDiffResponse(
        data=TextDiffData(
            diff=html_diff,
            lines=lines,
            summary=diff_generator.summarize(lines),
        )
    )
