"""Icon maker API endpoints"""

from __future__ import annotations

from fastapi import APIRouter, File, Form, UploadFile

from models.image import CropArea, IconData, IconResponse, ImageDimensions
from services import image_ops
from services.config_manager import ConfigManager
from services.errors import CropParameterError, ToolkitError, ValidationError, log_error
from services.file_utils import read_upload
from services.performance import PerformanceMonitor, get_processing_queue
from services.validation import validate_crop_parameters, validate_image_file

router = APIRouter()


@router.post("", response_model=IconResponse)
async def make_icon(
    image: UploadFile | None = File(None),
    x: int = Form(...),
    y: int = Form(...),
    size: int = Form(...),
) -> IconResponse:
    """Crop a square region and export it as PNG and ICO"""
    if image is None:
        raise ValidationError("Please provide an image file.", field="image")

    config = ConfigManager.get_instance().get_config()
    limits = config["limits"]
    icon_size = config["icon"]["size"]
    upload = await read_upload(image)

    validation = validate_image_file(upload, limits["max_file_size"])
    if not validation.is_valid:
        raise ValidationError(", ".join(validation.errors))

    queue = get_processing_queue(limits["max_concurrent_operations"])
    width, height = await queue.run(image_ops.image_dimensions, upload.data)

    crop_validation = validate_crop_parameters(x, y, size, width, height)
    if not crop_validation.is_valid:
        raise CropParameterError(
            ", ".join(crop_validation.errors),
            {"x": x, "y": y, "size": size, "width": width, "height": height},
        )

    stop = PerformanceMonitor.get_instance().start_timer("icon-maker")
    try:
        png, ico = await queue.run(image_ops.make_icon, upload.data, x, y, size, icon_size)
    except ToolkitError:
        raise
    except Exception as e:
        log_error("Error in icon-maker API", e)
        raise ToolkitError("Internal server error during icon generation.") from e
    finally:
        stop()

    return IconResponse(
        data=IconData(
            png=image_ops.to_base64(png),
            ico=image_ops.to_base64(ico),
            size=icon_size,
            crop_area=CropArea(x=x, y=y, size=size),
            original_dimensions=ImageDimensions(width=width, height=height),
        )
    )
