"""
Bulk Keyword Pipeline for the SEO content wizard

This module drives a batch of keywords through the generation pipeline, one
keyword at a time:
1. Research (grounding data, kept in the model's context only)
2. Ideation
3. Outline
4. Writing (article text with image placeholders)
5. Image resolution for every placeholder
6. Persistence to the history store

A failing keyword is recorded as a failure and the batch moves on.
"""

import random
import threading
import time
from dataclasses import replace
from typing import Callable, Iterable, List, Optional

from loguru import logger

from seowizard.config import get_pipeline_config
from seowizard.history_store import HistoryStore
from seowizard.models import ArticleRecord, OutputLanguage, RunPhase, RunState, now_millis
from .content_generator import ContentGenerator, GenerationSession, SessionNotInitializedError
from .image_generator import ImageGenerator
from .placeholders import FEATURED_IMAGE_ALT, ImagePlaceholder, resolve_image_placeholders

__all__ = [
    "BulkPipeline",
    "RunInProgressError",
    "SessionNotInitializedError",
    "ContentGenerator",
    "GenerationSession",
    "ImageGenerator",
]

FAILED_SUFFIX = " (FAILED)"


class RunInProgressError(RuntimeError):
    """Raised when a run is started while another one is still running."""


class BulkPipeline:
    """Sequential FIFO processing of keywords into stored articles."""

    def __init__(self, content_generator: ContentGenerator, image_generator: ImageGenerator,
                 history_store: HistoryStore, sleep: Callable[[float], None] = time.sleep,
                 on_progress: Optional[Callable[[RunState], None]] = None):
        """Initialize the bulk pipeline.

        Args:
            content_generator: Runs the four text stages
            image_generator: Resolves one image prompt into a data URI (or None)
            history_store: Where finished and failed articles are persisted
            sleep: Function used for the fixed delays
            on_progress: Called with the run state after every observable change
        """
        config = get_pipeline_config()
        self.content_generator = content_generator
        self.image_generator = image_generator
        self.history_store = history_store
        self.sleep = sleep
        self.on_progress = on_progress

        self.image_delay = config["image_delay_seconds"]
        self.item_delay = config["item_delay_seconds"]
        self.failure_delay = config["failure_delay_seconds"]

        self.state = RunState(history=self.history_store.list_records())
        self._run_lock = threading.Lock()

    def _notify(self, status_message: Optional[str] = None):
        if status_message is not None:
            self.state.status_message = status_message
            logger.info(status_message)
        if self.on_progress:
            self.on_progress(self.state)

    def run(self, keywords: Iterable[str], language: OutputLanguage) -> RunState:
        """Process every keyword in order and return the final run state.

        Args:
            keywords: Keywords to process; duplicates are processed again
            language: Output language for the whole run

        Returns:
            The run state, in the COMPLETED phase

        Raises:
            RunInProgressError: if this pipeline is already running
            ValueError: if there is no keyword or the language is unsupported
        """
        language = OutputLanguage(language)
        queue = [keyword.strip() for keyword in keywords if keyword and keyword.strip()]
        if not queue:
            raise ValueError("No keywords to process")

        if not self._run_lock.acquire(blocking=False):
            raise RunInProgressError("A run is already in progress")

        try:
            self.state = RunState(
                phase=RunPhase.RUNNING,
                total=len(queue),
                queue=queue,
                history=self.state.history
            )
            logger.info(f"Starting bulk run of {len(queue)} keyword(s) [{language.label}]")
            self._notify()

            while self.state.queue:
                keyword = self.state.queue[0]
                try:
                    self._process_keyword(keyword, language)
                    delay = self.item_delay
                    message = f"[{keyword}] Finished! Starting next in {delay:g}s..."
                except Exception as e:
                    logger.error(f"Error processing '{keyword}': {e}")
                    self._record_failure(keyword, language, e)
                    delay = self.failure_delay
                    message = f'Error with "{keyword}". Moving to next...'

                self.state.queue.pop(0)
                self.state.completed += 1
                self._notify(message)

                if self.state.queue:
                    self.sleep(delay)

            self.state.phase = RunPhase.COMPLETED
            self.state.current_keyword = ""
            self._notify("All keywords processed successfully!")
            return self.state
        finally:
            self._run_lock.release()

    def _process_keyword(self, keyword: str, language: OutputLanguage):
        state = self.state
        state.current_keyword = keyword
        state.current_step = 0
        state.ideation = state.outline = state.article = ""

        tag = language.label
        session = self.content_generator.open_session(keyword, language)
        try:
            self._notify(f"[{keyword}][{tag}] Researching data (Step 1/4)...")
            self.content_generator.research(session)
            state.current_step = 1

            self._notify(f"[{keyword}][{tag}] Generating Ideation (Step 2/4)...")
            state.ideation = self.content_generator.ideate(session)
            state.current_step = 2

            self._notify(f"[{keyword}][{tag}] Creating Outline (Step 3/4)...")
            state.outline = self.content_generator.outline(session)
            state.current_step = 3

            self._notify(f"[{keyword}][{tag}] Writing Article (Step 4/4)...")
            state.article = self.content_generator.write(session)
            state.current_step = 4

            self._notify(f"[{keyword}] Generating Images...")
            state.article = resolve_image_placeholders(
                state.article,
                self.image_generator.generate,
                sleep=self.sleep,
                delay_seconds=self.image_delay,
                on_progress=lambda index, total, placeholder, text: self._image_progress(keyword, index, total, placeholder, text)
            )
        finally:
            session.close()

        record = ArticleRecord(keyword=keyword, content=state.article, language=language, created_at=now_millis())
        logger.info(f"Saving article for '{keyword}' to history...")
        state.history = self.history_store.upsert(record)

    def _image_progress(self, keyword: str, index: int, total: int,
                        placeholder: Optional[ImagePlaceholder], text: str):
        self.state.article = text
        if placeholder is None:
            self._notify()
            return
        suffix = " (Thumbnail)" if placeholder.featured else ""
        self._notify(f"[{keyword}] Image {index + 1}/{total}{suffix}...")

    def _record_failure(self, keyword: str, language: OutputLanguage, error: Exception):
        record = ArticleRecord(
            keyword=keyword + FAILED_SUFFIX,
            content=f"Error processing: {error}",
            language=language,
            created_at=now_millis()
        )
        self.state.history = self.history_store.upsert(record)

    def regenerate_image(self, record: ArticleRecord, old_src: str, alt_text: str) -> Optional[ArticleRecord]:
        """Replace one embedded image of a stored article with a fresh one.

        The featured image's alt text is only the sentinel, so its prompt is
        rebuilt from the keyword. Illustrations reuse their alt text with a
        variation suffix so the model doesn't return the same picture.

        Args:
            record: Stored article containing the image
            old_src: Data URI currently embedded in the content
            alt_text: Alt text of that image

        Returns:
            The updated record (same id), or None if no new image was generated
        """
        if alt_text == FEATURED_IMAGE_ALT:
            prompt = (
                f"Photography of {record.keyword}, cinematic lighting, 8k, realistic, "
                f"highly detailed, relevant to the topic of {record.keyword}."
            )
        else:
            prompt = f"{alt_text} (Variation {random.randint(0, 99)})"

        new_src = self.image_generator.generate(prompt)
        if not new_src:
            logger.warning(f"Could not regenerate image for '{record.keyword}'")
            return None

        updated = replace(record, content=record.content.replace(old_src, new_src, 1))
        self.state.history = self.history_store.upsert(updated)
        return updated

    @property
    def history(self) -> List[ArticleRecord]:
        return self.state.history
