"""Image manipulation utilities.

This module wraps the Pillow operations behind the merge and icon endpoints:
decoding uploads, scaling them to a shared height/width or into grid cells,
compositing them onto a white canvas and encoding PNG/ICO output. Every
function here is blocking and is meant to be run through the
``ImageProcessingQueue``.
"""

from __future__ import annotations

import base64
import math
from collections.abc import Sequence
from io import BytesIO

from PIL import Image, ImageDraw, ImageFont, UnidentifiedImageError

from models.image import LayoutType, MergeLayout
from services.errors import ImageProcessingError

BACKGROUND = (255, 255, 255)
LABEL_FONT_SIZE = 16
BADGE_SIZE = 40
BADGE_OFFSET = 30  # Distance from the top of an image to the badge centre
# Pillow's ICO writer drops frames larger than this
MAX_ICO_SIZE = 256

# Layout used for each supported image count
MERGE_LAYOUTS: dict[int, MergeLayout] = {
    2: MergeLayout(type=LayoutType.HORIZONTAL, rows=1, cols=2),
    3: MergeLayout(type=LayoutType.VERTICAL, rows=3, cols=1),
    4: MergeLayout(type=LayoutType.GRID, rows=2, cols=2),
    5: MergeLayout(type=LayoutType.GRID, rows=2, cols=3),
    6: MergeLayout(type=LayoutType.GRID, rows=2, cols=3),
}


def _round(value: float) -> int:
    """Round half up, the way pixel sizes are usually computed"""
    return int(math.floor(value + 0.5))


def open_image(data: bytes) -> Image.Image:
    """Decode raw image bytes into an RGBA image."""
    try:
        img = Image.open(BytesIO(data))
        img.load()
    except (UnidentifiedImageError, OSError) as e:
        raise ImageProcessingError("Unable to read image dimensions.") from e
    if img.mode != "RGBA":
        img = img.convert("RGBA")
    return img


def to_png(img: Image.Image) -> bytes:
    buffer = BytesIO()
    img.save(buffer, format="PNG", compress_level=6)
    return buffer.getvalue()


def to_ico(img: Image.Image, size: int) -> bytes:
    """Encode a single-frame ICO, scaled down to MAX_ICO_SIZE when larger."""
    size = min(size, MAX_ICO_SIZE)
    if img.size != (size, size):
        img = img.resize((size, size), Image.Resampling.LANCZOS)
    buffer = BytesIO()
    img.save(buffer, format="ICO", sizes=[(size, size)])
    return buffer.getvalue()


def to_base64(data: bytes) -> str:
    return base64.b64encode(data).decode("ascii")


def resize_to_height(img: Image.Image, height: int) -> Image.Image:
    """Scale to ``height`` keeping the aspect ratio; never enlarges."""
    if img.height <= height:
        return img
    width = max(1, _round(img.width * height / img.height))
    return img.resize((width, height), Image.Resampling.LANCZOS)


def resize_to_width(img: Image.Image, width: int) -> Image.Image:
    """Scale to ``width`` keeping the aspect ratio; never enlarges."""
    if img.width <= width:
        return img
    height = max(1, _round(img.height * width / img.width))
    return img.resize((width, height), Image.Resampling.LANCZOS)


def fit_inside(img: Image.Image, width: int, height: int) -> Image.Image:
    """Shrink to fit a ``width`` x ``height`` box; never enlarges."""
    fitted = img.copy()
    fitted.thumbnail((width, height), Image.Resampling.LANCZOS)
    return fitted


def _load_font(size: int) -> ImageFont.ImageFont:
    try:
        return ImageFont.load_default(size=size)
    except (TypeError, ImportError, OSError):
        # Pillow built without FreeType only has the fixed bitmap font
        return ImageFont.load_default()


def _draw_centered_text(
    draw: ImageDraw.ImageDraw,
    box: tuple[int, int, int, int],
    text: str,
    fill,
    font,
):
    left, top, right, bottom = draw.textbbox((0, 0), text, font=font)
    x = box[0] + (box[2] - box[0] - (right - left)) / 2 - left
    y = box[1] + (box[3] - box[1] - (bottom - top)) / 2 - top
    draw.text((x, y), text, fill=fill, font=font)


def render_label(width: int, height: int, text: str) -> Image.Image:
    """White strip with ``text`` centred in black."""
    label = Image.new("RGB", (width, height), BACKGROUND)
    draw = ImageDraw.Draw(label)
    _draw_centered_text(draw, (0, 0, width, height), text, (0, 0, 0), _load_font(LABEL_FONT_SIZE))
    return label


def render_badge(number: int) -> Image.Image:
    """Translucent circular badge with a white sequence number."""
    badge = Image.new("RGBA", (BADGE_SIZE, BADGE_SIZE), (0, 0, 0, 0))
    draw = ImageDraw.Draw(badge)
    draw.ellipse((2, 2, BADGE_SIZE - 2, BADGE_SIZE - 2), fill=(0, 0, 0, 178), outline=(255, 255, 255, 255), width=2)
    _draw_centered_text(
        draw,
        (0, 0, BADGE_SIZE, BADGE_SIZE),
        str(number),
        (255, 255, 255, 255),
        _load_font(LABEL_FONT_SIZE),
    )
    return badge


def _composite(size: tuple[int, int], placements: Sequence[tuple[Image.Image, tuple[int, int]]]) -> Image.Image:
    canvas = Image.new("RGB", size, BACKGROUND)
    for img, position in placements:
        mask = img if img.mode == "RGBA" else None
        canvas.paste(img, position, mask)
    return canvas


def merge_pair(
    data1: bytes,
    data2: bytes,
    add_labels: bool = False,
    labels: tuple[str, str] = ("Before", "After"),
    label_height: int = 40,
) -> bytes:
    """Place two images side by side at a shared height.

    Args:
        data1: Left image bytes.
        data2: Right image bytes.
        add_labels: Put a caption strip above the images.
        labels: Captions for the left and right image.
        label_height: Height of the caption strip in pixels.

    Returns:
        The merged image as PNG bytes.
    """
    img1 = open_image(data1)
    img2 = open_image(data2)

    target_height = min(img1.height, img2.height)
    img1 = resize_to_height(img1, target_height)
    img2 = resize_to_height(img2, target_height)
    total_width = img1.width + img2.width

    if not add_labels:
        merged = _composite((total_width, target_height), [(img1, (0, 0)), (img2, (img1.width, 0))])
        return to_png(merged)

    merged = _composite(
        (total_width, target_height + label_height),
        [
            (render_label(img1.width, label_height, labels[0]), (0, 0)),
            (render_label(img2.width, label_height, labels[1]), (img1.width, 0)),
            (img1, (0, label_height)),
            (img2, (img1.width, label_height)),
        ],
    )
    return to_png(merged)


def get_merge_layout(count: int) -> MergeLayout:
    try:
        return MERGE_LAYOUTS[count]
    except KeyError:
        raise ImageProcessingError("Unsupported number of files.", {"count": count}) from None


def merge_many(
    images: Sequence[bytes],
    add_sequence_numbers: bool = False,
    grid_cell_max: int = 400,
) -> tuple[bytes, MergeLayout, tuple[int, int]]:
    """Merge 2-6 images using the layout for their count.

    Returns:
        PNG bytes, the layout used and the canvas (width, height).
    """
    layout = get_merge_layout(len(images))
    decoded = [open_image(data) for data in images]
    placements: list[tuple[Image.Image, tuple[int, int]]] = []
    badge_centers: list[tuple[float, float]] = []

    if layout.type is LayoutType.HORIZONTAL:
        target_height = min(img.height for img in decoded)
        width = sum(_round(img.width * target_height / img.height) for img in decoded)
        size = (width, target_height)
        x = 0
        for img in decoded:
            resized = resize_to_height(img, target_height)
            placements.append((resized, (x, 0)))
            badge_centers.append((x + resized.width / 2, BADGE_OFFSET))
            x += resized.width

    elif layout.type is LayoutType.VERTICAL:
        target_width = min(img.width for img in decoded)
        height = sum(_round(img.height * target_width / img.width) for img in decoded)
        size = (target_width, height)
        y = 0
        for img in decoded:
            resized = resize_to_width(img, target_width)
            placements.append((resized, (0, y)))
            badge_centers.append((target_width / 2, y + BADGE_OFFSET))
            y += resized.height

    else:
        cell_width = min(max(img.width for img in decoded), grid_cell_max)
        cell_height = min(max(img.height for img in decoded), grid_cell_max)
        size = (cell_width * layout.cols, cell_height * layout.rows)
        for index, img in enumerate(decoded):
            row, col = divmod(index, layout.cols)
            fitted = fit_inside(img, cell_width, cell_height)
            # Centre the image in its cell
            x = math.floor(col * cell_width + (cell_width - fitted.width) / 2)
            y = math.floor(row * cell_height + (cell_height - fitted.height) / 2)
            placements.append((fitted, (x, y)))
            badge_centers.append((col * cell_width + cell_width / 2, row * cell_height + BADGE_OFFSET))

    if add_sequence_numbers:
        half = BADGE_SIZE / 2
        for number, (cx, cy) in enumerate(badge_centers, start=1):
            placements.append((render_badge(number), (math.floor(cx - half), math.floor(cy - half))))

    return to_png(_composite(size, placements)), layout, size


def make_icon(data: bytes, x: int, y: int, size: int, icon_size: int = 128) -> tuple[bytes, bytes]:
    """Crop a square and scale it to ``icon_size``.

    The caller validates the crop box against the image first.

    Returns:
        (PNG bytes, ICO bytes)
    """
    img = open_image(data)
    icon = img.crop((x, y, x + size, y + size)).resize((icon_size, icon_size), Image.Resampling.LANCZOS)
    return to_png(icon), to_ico(icon, icon_size)


def image_dimensions(data: bytes) -> tuple[int, int]:
    img = open_image(data)
    return img.width, img.height
