"""Zip package export: markdown plus the embedded images as separate files."""

import base64
import zipfile
from io import BytesIO
from pathlib import Path
from typing import Tuple

from loguru import logger

from seowizard.utils import sanitize_filename
from .article_parser import parse_article, extract_embedded_images


def build_package(content: str, keyword: str) -> Tuple[str, bytes]:
    """Build the zip package for an article.

    Each embedded image is written to ``images/image-N.<ext>`` and the markdown
    is rewritten to reference that file instead of the inline data.

    Args:
        content: Raw article content
        keyword: Keyword of the article

    Returns:
        Tuple of (archive filename, archive bytes)
    """
    fields = parse_article(content, keyword)
    slug = sanitize_filename(fields.slug)
    processed = fields.clean_body

    buffer = BytesIO()
    with zipfile.ZipFile(buffer, "w", zipfile.ZIP_DEFLATED) as archive:
        for i, image in enumerate(extract_embedded_images(fields.clean_body), 1):
            filename = f"image-{i}.{image.extension}"
            payload = image.data_uri.split(",", 1)[1]
            archive.writestr(f"images/{filename}", base64.b64decode(payload))
            # Identical images all point at the first file written for them
            processed = processed.replace(image.markdown, f"![{image.alt}](images/{filename})")

        archive.writestr(f"{slug}.md", processed)

    logger.info(f"Built package for '{keyword}'")
    return f"{slug}-package.zip", buffer.getvalue()


def write_package(content: str, keyword: str, output_dir: Path) -> Path:
    """Write the zip package into output_dir and return its path."""
    filename, data = build_package(content, keyword)
    output_dir = Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)
    path = output_dir / filename
    path.write_bytes(data)
    logger.info(f"Package saved to {path}")
    return path
