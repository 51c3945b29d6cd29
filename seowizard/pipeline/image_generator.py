"""Image generation with bounded exponential backoff on rate limiting."""

import time
from typing import Callable, Optional

from loguru import logger
from tenacity import RetryCallState, Retrying, retry_if_exception, stop_after_attempt

from seowizard.config import get_pipeline_config
from seowizard.llm_client import LLMClient
from . import prompts
from .image_processor import compress_data_uri


def backoff_delay(attempt: int, base_seconds: float = 5.0) -> float:
    """Seconds to wait after the given failed attempt (1-based): 5, 10, 20, 40..."""
    return base_seconds * (2 ** (attempt - 1))


def is_rate_limit_error(error: Exception) -> bool:
    """Whether an exception signals quota exhaustion / HTTP 429."""
    for attr in ("status_code", "code", "status"):
        if getattr(error, attr, None) == 429:
            return True
    message = str(error)
    return "429" in message or "quota" in message.lower()


class ImageGenerator:
    """Generates one image per call; failures come back as None, never raised."""

    def __init__(self, llm_client: LLMClient, sleep: Callable[[float], None] = time.sleep,
                 max_attempts: Optional[int] = None, base_delay: Optional[float] = None,
                 compress: Callable[[str], str] = compress_data_uri):
        """Initialize the image generator.

        Args:
            llm_client: LLM client providing generate_image
            sleep: Function used to wait between retries
            max_attempts: Maximum attempts per image (default from config)
            base_delay: First backoff delay in seconds (default from config)
            compress: Post-processing applied to the data URI of a successful image
        """
        config = get_pipeline_config()
        self.llm_client = llm_client
        self.sleep = sleep
        self.max_attempts = max_attempts or config["image_max_attempts"]
        self.base_delay = base_delay if base_delay is not None else config["image_backoff_base_seconds"]
        self.aspect_ratio = config["image_aspect_ratio"]
        self.style_hint = config["image_style_hint"]
        self.compress = compress

    def generate(self, description: str) -> Optional[str]:
        """Generate an image for a description.

        Args:
            description: Prompt text taken from the article placeholder

        Returns:
            Compressed image as a data URI, or None if no image could be produced
        """
        final_prompt = prompts.image_prompt(description, self.style_hint)
        retrying = Retrying(
            stop=stop_after_attempt(self.max_attempts),
            wait=lambda retry_state: backoff_delay(retry_state.attempt_number, self.base_delay),
            retry=retry_if_exception(is_rate_limit_error),
            sleep=self.sleep,
            before_sleep=self._log_retry,
            retry_error_callback=self._give_up
        )

        try:
            image = retrying(self.llm_client.generate_image, final_prompt, aspect_ratio=self.aspect_ratio)
        except Exception as e:
            logger.error(f"Image generation error: {e}")
            return None

        if image is None:
            return None
        return self.compress(image.to_data_uri())

    def _log_retry(self, retry_state: RetryCallState):
        logger.warning(
            f"Image quota exceeded (429). Retrying in {retry_state.next_action.sleep:g}s... "
            f"(Attempt {retry_state.attempt_number}/{self.max_attempts})"
        )

    @staticmethod
    def _give_up(retry_state: RetryCallState) -> None:
        logger.error("Image generation failed: max retries exceeded for quota.")
        return None
