"""Image recompression helpers for generated images.

Generated images are embedded into markdown as data URIs, so they are resized
and recompressed to JPEG before being stored. Every helper here degrades to the
original input when the image can't be decoded.
"""

import base64
import re
from io import BytesIO
from typing import Optional, Tuple

from loguru import logger
from PIL import Image

from seowizard.config import get_pipeline_config

DATA_URI_PATTERN = re.compile(r"^data:(image/[\w.+-]+);base64,(.*)$", re.DOTALL)


def parse_data_uri(data_uri: str) -> Optional[Tuple[str, bytes]]:
    """Split an image data URI into (mime_type, raw bytes), or None if it isn't one."""
    match = DATA_URI_PATTERN.match(data_uri or "")
    if not match:
        return None
    try:
        return match.group(1), base64.b64decode(match.group(2))
    except (ValueError, TypeError) as e:
        logger.warning(f"Invalid base64 payload in data URI: {e}")
        return None


def to_data_uri(data: bytes, mime_type: str) -> str:
    return f"data:{mime_type};base64,{base64.b64encode(data).decode('ascii')}"


def compress_image(data: bytes, max_width: Optional[int] = None, quality: Optional[int] = None) -> bytes:
    """Resize an image to at most max_width and re-encode it as JPEG.

    Transparent areas are flattened onto a white background.

    Args:
        data: Encoded image bytes (any format Pillow can read)
        max_width: Width clamp in pixels, height scaled proportionally
        quality: JPEG quality (1-95)

    Returns:
        JPEG bytes

    Raises:
        Exception: whatever Pillow raises for undecodable input
    """
    config = get_pipeline_config()
    max_width = max_width or config["image_max_width"]
    quality = quality or config["image_quality"]

    with Image.open(BytesIO(data)) as img:
        img.load()
        width, height = img.size
        if width > max_width:
            height = round(height * max_width / width)
            width = max_width
            img = img.resize((width, height), Image.Resampling.LANCZOS)

        if img.mode in ("RGBA", "LA", "P"):
            rgba = img.convert("RGBA")
            background = Image.new("RGB", rgba.size, (255, 255, 255))
            background.paste(rgba, mask=rgba.split()[-1])
            img = background
        elif img.mode != "RGB":
            img = img.convert("RGB")

        output = BytesIO()
        img.save(output, format="JPEG", quality=quality)
        return output.getvalue()


def compress_data_uri(data_uri: str, max_width: Optional[int] = None, quality: Optional[int] = None) -> str:
    """Recompress an image data URI to a JPEG data URI.

    Never raises: on any decode/encode failure the original URI is returned.
    """
    parsed = parse_data_uri(data_uri)
    if parsed is None:
        return data_uri

    _, data = parsed
    try:
        compressed = compress_image(data, max_width=max_width, quality=quality)
    except Exception as e:
        logger.warning(f"Image compression failed, keeping original: {e}")
        return data_uri

    return to_data_uri(compressed, "image/jpeg")


def compress_if_needed(data_uri: str, threshold: int = 500000) -> str:
    """Recompress unless the URI is already a JPEG smaller than threshold characters."""
    if data_uri.startswith("data:image/jpeg") and len(data_uri) < threshold:
        return data_uri
    return compress_data_uri(data_uri)
