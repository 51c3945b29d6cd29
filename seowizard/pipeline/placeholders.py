"""Image placeholders embedded in generated articles.

The writing stage marks image slots as ``[FEATURED_IMAGE_PROMPT: ...]`` (the
thumbnail) and ``[IMAGE_PROMPT: ...]`` (inline illustrations; ``[HÌNH ẢNH: ...]``
is an older synonym). Each slot is resolved in order of appearance into a
markdown image, or erased when no image could be generated.
"""

import re
import time
from dataclasses import dataclass
from typing import Callable, List, Optional

from loguru import logger

FEATURED_IMAGE_ALT = "FEATURED_IMAGE"

IMAGE_PLACEHOLDER_PATTERN = re.compile(
    r"\[(FEATURED_IMAGE_PROMPT|IMAGE_PROMPT|HÌNH ẢNH):\s*(.*?)\]",
    re.IGNORECASE
)


@dataclass
class ImagePlaceholder:
    tag: str
    prompt: str
    featured: bool


def find_image_placeholders(text: str) -> List[ImagePlaceholder]:
    """All placeholders in the text, first to last."""
    return [
        ImagePlaceholder(
            tag=match.group(0),
            prompt=match.group(2),
            featured=match.group(1).upper() == "FEATURED_IMAGE_PROMPT"
        )
        for match in IMAGE_PLACEHOLDER_PATTERN.finditer(text)
    ]


def render_image_markdown(placeholder: ImagePlaceholder, data_uri: str) -> str:
    """Markdown that replaces a resolved placeholder.

    The featured slot carries the FEATURED_IMAGE sentinel as alt text so the
    exporters can tell it apart from illustrations.
    """
    if placeholder.featured:
        return f"\n![{FEATURED_IMAGE_ALT}]({data_uri})\n"
    return f"\n\n![{placeholder.prompt}]({data_uri})\n"


def resolve_image_placeholders(text: str, generate_image: Callable[[str], Optional[str]],
                               sleep: Callable[[float], None] = time.sleep,
                               delay_seconds: float = 6.0,
                               on_progress: Optional[Callable[[int, int, ImagePlaceholder, str], None]] = None) -> str:
    """Replace every image placeholder with a generated image.

    Images are requested one at a time in order of appearance, with a fixed
    pause between requests (none after the last one).

    Args:
        text: Raw article text from the writing stage
        generate_image: Returns a data URI for a prompt, or None on failure
        sleep: Function used for the pause between requests
        delay_seconds: Pause between two image requests
        on_progress: Called as (index, total, placeholder, text_so_far) before each request
            and once more after the last substitution with index == total

    Returns:
        The article with each placeholder substituted or erased
    """
    placeholders = find_image_placeholders(text)
    total = len(placeholders)

    for index, placeholder in enumerate(placeholders):
        if on_progress:
            on_progress(index, total, placeholder, text)

        data_uri = generate_image(placeholder.prompt)
        if data_uri:
            replacement = render_image_markdown(placeholder, data_uri)
        else:
            logger.warning(f"No image for placeholder {index + 1}/{total}, dropping it")
            replacement = ""
        text = text.replace(placeholder.tag, replacement, 1)

        if index + 1 < total:
            sleep(delay_seconds)

    if on_progress and total:
        on_progress(total, total, None, text)
    return text
