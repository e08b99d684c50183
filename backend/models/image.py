"""Image merge and icon data models"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel


class LayoutType(str, Enum):
    """How merged images are arranged"""

    HORIZONTAL = "horizontal"
    VERTICAL = "vertical"
    GRID = "grid"


class MergeLayout(BaseModel):
    type: LayoutType
    rows: int
    cols: int


class ImageDimensions(BaseModel):
    width: int
    height: int


class CropArea(BaseModel):
    x: int
    y: int
    size: int


class MergeData(BaseModel):
    """Merged image payload"""

    image: str  # base64 PNG
    filename: str
    mime_type: str = "image/png"
    layout: LayoutType | None = None
    dimensions: str | None = None  # "WxH"


class MergeResponse(BaseModel):
    success: bool = True
    data: MergeData


class IconData(BaseModel):
    """Generated icon payload"""

    png: str  # base64
    ico: str  # base64
    size: int
    crop_area: CropArea
    original_dimensions: ImageDimensions


class IconResponse(BaseModel):
    success: bool = True
    data: IconData
