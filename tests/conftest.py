#!/usr/bin/env python3
"""
Test fixtures for SEO Wizard tests.

This module contains pytest fixtures that can be shared across multiple test files.
"""

import base64
import os
from io import BytesIO
from unittest.mock import MagicMock

import pytest
from PIL import Image

from seowizard.history_store import HistoryStore
from seowizard.llm_client import LLMClient


def make_png_bytes(width: int = 8, height: int = 4, color=(255, 0, 0, 255)) -> bytes:
    """Encode a solid-colour RGBA PNG."""
    buffer = BytesIO()
    Image.new("RGBA", (width, height), color).save(buffer, format="PNG")
    return buffer.getvalue()


def make_data_uri(data: bytes, mime_type: str = "image/png") -> str:
    return f"data:{mime_type};base64,{base64.b64encode(data).decode('ascii')}"


@pytest.fixture
def png_data_uri():
    """A small, valid PNG image as a data URI."""
    return make_data_uri(make_png_bytes())


@pytest.fixture
def mock_llm_client():
    """Create a mock LLM client."""
    return MagicMock(spec=LLMClient)


@pytest.fixture
def history_store(tmp_path):
    """History store backed by a temporary directory."""
    return HistoryStore(tmp_path / "history")


@pytest.fixture
def sample_article(png_data_uri):
    """Finished article content with meta block, featured image and one illustration."""
    return (
        "========== META DATA ==========\n"
        "Meta Title: Best Running Shoes 2025\n"
        "Meta Description: Our pick of the best running shoes for every runner.\n"
        "Slug: best-running-shoes\n"
        "=============================\n"
        "\n"
        "========== ARTICLE CONTENT ==========\n"
        "\n"
        f"![FEATURED_IMAGE]({png_data_uri})\n"
        "\n"
        "[INTRO] Choosing shoes matters.\n"
        "\n"
        "## Cushioning\n"
        "Soft foam helps on long runs.\n"
        "\n"
        f"![Runner on a road]({png_data_uri})\n"
        "\n"
        "## Conclusion\n"
        "Pick what fits.\n"
        "\n"
        "========== END OF ARTICLE ==========\n"
    )


@pytest.fixture
def mock_environment():
    """Set up mock environment variables for tests."""
    original_environ = os.environ.copy()

    # Set test environment variables
    os.environ["GEMINI_API_KEY"] = "test_gemini_key"
    os.environ["OPENAI_API_KEY"] = "test_openai_key"

    yield

    # Restore original environment
    os.environ.clear()
    os.environ.update(original_environ)
