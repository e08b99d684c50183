"""Image merge API endpoints"""

from __future__ import annotations

import logging

from fastapi import APIRouter, File, Form, Request, UploadFile
from starlette.datastructures import UploadFile as StarletteUploadFile

from models.image import MergeData, MergeResponse
from services import image_ops
from services.config_manager import ConfigManager
from services.errors import ToolkitError, ValidationError, log_error
from services.file_utils import generate_unique_filename, read_upload, sort_files_by_name
from services.performance import PerformanceMonitor, get_processing_queue
from services.validation import (
    MAX_FILES_IMAGE_MERGE,
    MIN_FILES_IMAGE_MERGE,
    validate_dual_merge_files,
    validate_multi_merge_files,
)

logger = logging.getLogger(__name__)

router = APIRouter()

INTERNAL_ERROR = "Internal server error during image processing."


def _parse_bool(value) -> bool:
    return str(value).strip().lower() in ("true", "1", "yes", "on")


@router.post("/merge", response_model=MergeResponse)
async def merge_two(
    file1: UploadFile | None = File(None),
    file2: UploadFile | None = File(None),
    add_text_labels: bool = Form(False),
) -> MergeResponse:
    """Place two images side by side, optionally with before/after labels"""
    if file1 is None or file2 is None:
        raise ValidationError("Please provide exactly 2 image files.")

    config = ConfigManager.get_instance().get_config()
    limits, merge_cfg = config["limits"], config["merge"]
    files = [await read_upload(file1), await read_upload(file2)]

    validation = validate_dual_merge_files(files, limits["max_file_size"])
    if not validation.is_valid:
        raise ValidationError(", ".join(validation.errors))

    queue = get_processing_queue(limits["max_concurrent_operations"])
    stop = PerformanceMonitor.get_instance().start_timer("merge")
    try:
        merged = await queue.run(
            image_ops.merge_pair,
            files[0].data,
            files[1].data,
            add_labels=add_text_labels,
            labels=(merge_cfg["labels"]["before"], merge_cfg["labels"]["after"]),
            label_height=merge_cfg["label_height"],
        )
    except ToolkitError:
        raise
    except Exception as e:
        log_error("Error in dual merge API", e)
        raise ToolkitError(INTERNAL_ERROR) from e
    finally:
        stop()

    return MergeResponse(
        data=MergeData(
            image=image_ops.to_base64(merged),
            filename=generate_unique_filename("merged.png"),
        )
    )


@router.post("/multi-merge", response_model=MergeResponse)
async def merge_many(request: Request) -> MergeResponse:
    """Merge 2-6 images sent as ``file0`` .. ``file{n-1}``"""
    form = await request.form()

    try:
        file_count = int(form.get("file_count") or 0)
    except ValueError:
        file_count = 0
    if not MIN_FILES_IMAGE_MERGE <= file_count <= MAX_FILES_IMAGE_MERGE:
        raise ValidationError(
            f"Please provide between {MIN_FILES_IMAGE_MERGE} and {MAX_FILES_IMAGE_MERGE} image files.",
            field="file_count",
        )

    uploads = []
    for i in range(file_count):
        upload = form.get(f"file{i}")
        if not isinstance(upload, StarletteUploadFile):
            raise ValidationError(f"Missing file at position {i}.", field=f"file{i}")
        uploads.append(await read_upload(upload))

    config = ConfigManager.get_instance().get_config()
    limits = config["limits"]

    validation = validate_multi_merge_files(uploads, limits["max_file_size"])
    if not validation.is_valid:
        raise ValidationError(", ".join(validation.errors))

    if _parse_bool(form.get("sort_by_name", False)):
        uploads = sort_files_by_name(uploads)

    queue = get_processing_queue(limits["max_concurrent_operations"])
    stop = PerformanceMonitor.get_instance().start_timer("multi-merge")
    try:
        merged, layout, (width, height) = await queue.run(
            image_ops.merge_many,
            [f.data for f in uploads],
            add_sequence_numbers=_parse_bool(form.get("add_sequence_numbers", False)),
            grid_cell_max=config["merge"]["grid_cell_max"],
        )
    except ToolkitError:
        raise
    except Exception as e:
        log_error("Error in multi-merge API", e)
        raise ToolkitError(INTERNAL_ERROR) from e
    finally:
        stop()

    logger.info("Merged %d images into a %s layout (%dx%d)", file_count, layout.type.value, width, height)

    return MergeResponse(
        data=MergeData(
            image=image_ops.to_base64(merged),
            filename=generate_unique_filename("multi_merged.png", str(file_count)),
            layout=layout.type,
            dimensions=f"{width}x{height}",
        )
    )
