"""
Utility functions for the SEO content wizard.
"""

import os
import re
from typing import List, Iterable
from loguru import logger


def setup_logging():
    """Set up logging configuration."""
    # Create logs directory if it doesn't exist
    os.makedirs("logs", exist_ok=True)

    # Configure logger
    logger.add(
        "logs/seowizard_{time}.log",
        rotation="10 MB",
        retention="1 week",
        level="INFO",
        format="{time:YYYY-MM-DD HH:mm:ss} | {level} | {name}:{function}:{line} - {message}",
        enqueue=True,
    )


def parse_keywords(lines: Iterable[str]) -> List[str]:
    """Turn raw input lines into the keyword queue.

    Lines are trimmed and blank ones dropped. Order and duplicates are kept.

    Args:
        lines: Raw lines, e.g. the contents of a keywords file split on newlines

    Returns:
        List of keywords in input order
    """
    return [line.strip() for line in lines if line and line.strip()]


def slugify(text: str) -> str:
    """Lowercase ASCII slug, runs of other characters collapsed to a dash."""
    return re.sub(r"[^a-z0-9]+", "-", text.lower())


def sanitize_filename(filename: str) -> str:
    """Sanitize a filename by removing or replacing invalid characters.

    Args:
        filename: Original filename to sanitize

    Returns:
        Sanitized filename
    """
    # Replace invalid characters with underscores
    invalid_chars = '<>:"/\\|?*'
    for char in invalid_chars:
        filename = filename.replace(char, '_')

    # Remove leading/trailing spaces and dots
    filename = filename.strip('. ')

    # Ensure filename is not empty
    if not filename:
        filename = 'untitled'

    return filename
