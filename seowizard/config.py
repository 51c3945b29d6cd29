"""Configuration settings for the SEO content wizard."""

import os
from pathlib import Path
from typing import Dict, Any, Optional

from dotenv import load_dotenv
from loguru import logger

# Load environment variables
load_dotenv()

# Base directories
BASE_DIR = Path(__file__).parent.parent
DATA_DIR = Path(os.getenv("DATA_DIR", "data"))

# LLM Configuration
LLM_CONFIG = {
    "default_provider": os.getenv("LLM_PROVIDER", "gemini"),  # "gemini" or "openai"
    "gemini": {
        "api_key": os.getenv("GEMINI_API_KEY") or os.getenv("API_KEY"),
        "model": os.getenv("GEMINI_MODEL", "gemini-3-flash-preview"),
        "image_model": os.getenv("GEMINI_IMAGE_MODEL", "gemini-2.5-flash-image"),
        "temperature": 0.7,
        "top_k": 40,
        "top_p": 0.95,
        "use_search_grounding": os.getenv("GEMINI_SEARCH_GROUNDING", "true").lower() == "true"
    },
    "openai": {
        "api_key": os.getenv("OPENAI_API_KEY"),
        "model": os.getenv("OPENAI_MODEL", "gpt-4o"),
        "image_model": os.getenv("OPENAI_IMAGE_MODEL", "dall-e-3"),
        "temperature": 0.7
    }
}

# Pipeline Configuration
PIPELINE_CONFIG = {
    "image_delay_seconds": float(os.getenv("IMAGE_DELAY_SECONDS", "6")),
    "item_delay_seconds": float(os.getenv("ITEM_DELAY_SECONDS", "3")),
    "failure_delay_seconds": float(os.getenv("FAILURE_DELAY_SECONDS", "2")),
    "image_max_attempts": int(os.getenv("IMAGE_MAX_ATTEMPTS", "5")),
    "image_backoff_base_seconds": float(os.getenv("IMAGE_BACKOFF_BASE_SECONDS", "5")),
    "image_aspect_ratio": "16:9",
    "image_max_width": 1024,
    "image_quality": 60,
    "image_style_hint": os.getenv(
        "IMAGE_STYLE_HINT",
        "bối cảnh Việt Nam, người Việt Nam, phong cách chân thực, ảnh chụp chất lượng cao, 4k. "
        "(Vietnamese context, realistic style, high quality photography, cinematic lighting)."
    )
}

# Brand persona used by the prompts
BRAND_CONFIG = {
    "website_url": os.getenv("BRAND_WEBSITE_URL", "https://bestmarathon.vn"),
    "vi": {
        "brand_name": os.getenv("BRAND_NAME_VI", "Vietnam's Best Marathon"),
        "industry": "Chạy bộ, Marathon, Dinh dưỡng thể thao",
        "audience": "Runner Việt Nam (từ beginner đến elite)"
    },
    "en": {
        "brand_name": os.getenv("BRAND_NAME_EN", "World Best Marathon"),
        "industry": "Running, Marathon, Sports Nutrition",
        "audience": "Runners (beginner to elite)"
    }
}

# History Configuration
HISTORY_CONFIG = {
    "history_dir": Path(os.getenv("HISTORY_DIR", str(DATA_DIR / "history")))
}

# Export Configuration
EXPORT_CONFIG = {
    "default_category": os.getenv("EXPORT_CATEGORY", "Marathon"),
    "author": os.getenv("EXPORT_AUTHOR", "admin"),
    "channel_title": os.getenv("EXPORT_CHANNEL_TITLE", "BestMarathon Export"),
    "output_dir": Path(os.getenv("EXPORT_DIR", "exports")),
    "recompress_threshold": 500000
}

SUPPORTED_PROVIDERS = ["gemini", "openai"]


def get_llm_config(provider: Optional[str] = None) -> Dict[str, Any]:
    """Get the LLM configuration for a provider (defaults to the configured one)."""
    provider = (provider or LLM_CONFIG["default_provider"]).lower()
    if provider not in SUPPORTED_PROVIDERS:
        raise ValueError(f"Unsupported LLM provider: {provider}")
    return LLM_CONFIG[provider]


def get_pipeline_config() -> Dict[str, Any]:
    """Get the pipeline timing and image configuration."""
    return PIPELINE_CONFIG


def get_brand_config() -> Dict[str, Any]:
    """Get the brand persona configuration."""
    return BRAND_CONFIG


def get_history_config() -> Dict[str, Any]:
    """Get the history store configuration."""
    return HISTORY_CONFIG


def get_export_config() -> Dict[str, Any]:
    """Get the export configuration."""
    return EXPORT_CONFIG


def validate_api_key(provider: Optional[str] = None) -> bool:
    """Check that an API key is configured for the provider.

    Args:
        provider: Provider name, defaults to the configured provider

    Returns:
        True if a key is present, False otherwise
    """
    provider = (provider or LLM_CONFIG["default_provider"]).lower()
    config = get_llm_config(provider)
    if not config.get("api_key"):
        env_name = "GEMINI_API_KEY" if provider == "gemini" else "OPENAI_API_KEY"
        logger.error(f"Missing API key for provider '{provider}'. Please set {env_name}.")
        return False
    return True


def load_config() -> Dict[str, Any]:
    """Load all configuration settings.

    Returns:
        Dictionary containing all configuration settings
    """
    return {
        "llm": LLM_CONFIG,
        "pipeline": PIPELINE_CONFIG,
        "brand": BRAND_CONFIG,
        "history": HISTORY_CONFIG,
        "export": EXPORT_CONFIG
    }
