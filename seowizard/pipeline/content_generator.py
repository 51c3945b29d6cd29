"""Four-stage text generation within one conversational session per keyword."""

from typing import Any, List, Optional

from loguru import logger

from seowizard.llm_client import LLMClient, ChatReply
from seowizard.models import OutputLanguage
from . import prompts


RESEARCH_FALLBACK_TEXT = "Data DS1 processed."

SOURCES_HEADINGS = {
    OutputLanguage.VI: "### Nguồn tham khảo (Sources)",
    OutputLanguage.EN: "### Sources"
}


class SessionNotInitializedError(RuntimeError):
    """Raised when a stage runs without a live session or out of order."""


class GenerationSession:
    """Conversational context bound to exactly one keyword.

    Later stages refer to what the model was told in earlier ones ('DS1',
    'DDD1', 'OL1'), so every stage of a keyword must go through the same session.
    """

    def __init__(self, keyword: str, language: OutputLanguage, chat: Any):
        self.keyword = keyword
        self.language = OutputLanguage(language)
        self.chat = chat
        self.completed_stages: List[str] = []
        self.closed = False

    def close(self):
        self.chat = None
        self.closed = True


class ContentGenerator:
    """Runs research, ideation, outline and writing against an LLM client."""

    STAGES = ("research", "ideation", "outline", "writing")

    def __init__(self, llm_client: LLMClient):
        """Initialize the content generator.

        Args:
            llm_client: LLM client for API interactions
        """
        self.llm_client = llm_client

    def open_session(self, keyword: str, language: OutputLanguage) -> GenerationSession:
        """Open a fresh session for a keyword.

        Args:
            keyword: Topic the session is about
            language: Output language of every stage

        Returns:
            A live GenerationSession
        """
        language = OutputLanguage(language)
        chat = self.llm_client.start_chat(prompts.system_instruction(language))
        logger.info(f"Opened generation session for '{keyword}' [{language.label}]")
        return GenerationSession(keyword, language, chat)

    def research(self, session: Optional[GenerationSession]) -> str:
        """Stage 1: feed the model research data on the keyword."""
        self._require(session, "research")
        return self._send(
            session, "research", prompts.research_prompt(session.keyword, session.language),
            default_text=RESEARCH_FALLBACK_TEXT
        )

    def ideate(self, session: Optional[GenerationSession]) -> str:
        """Stage 2: keyword, entity and search intent analysis."""
        self._require(session, "ideation")
        return self._send(session, "ideation", prompts.ideation_prompt(session.keyword, session.language))

    def outline(self, session: Optional[GenerationSession]) -> str:
        """Stage 3: content outline."""
        self._require(session, "outline")
        return self._send(session, "outline", prompts.outline_prompt(session.language))

    def write(self, session: Optional[GenerationSession]) -> str:
        """Stage 4: the full article, with meta block and image placeholders."""
        self._require(session, "writing")
        return self._send(session, "writing", prompts.writing_prompt(session.keyword, session.language))

    def _require(self, session: Optional[GenerationSession], stage: str):
        if session is None or session.closed:
            raise SessionNotInitializedError("Session not initialized")

        index = self.STAGES.index(stage)
        if index > 0:
            prior = self.STAGES[index - 1]
            if prior not in session.completed_stages:
                raise SessionNotInitializedError(
                    f"Stage '{stage}' requires '{prior}' to complete first in the same session"
                )

    def _send(self, session: GenerationSession, stage: str, prompt: str, default_text: str = "") -> str:
        logger.info(f"Running stage '{stage}' for '{session.keyword}'")
        try:
            reply = self.llm_client.send_message(session.chat, prompt)
        except Exception as e:
            logger.error(f"Stage '{stage}' failed for '{session.keyword}': {e}")
            raise

        session.completed_stages.append(stage)
        if not reply.text:
            reply = ChatReply(text=default_text, sources=reply.sources)
        return append_sources(reply, session.language)


def append_sources(reply: ChatReply, language: OutputLanguage) -> str:
    """Append a markdown Sources section when the reply carries citations.

    Args:
        reply: Chat reply with text and grounding sources
        language: Language used for the section heading

    Returns:
        Reply text, with the Sources section appended if there are sources
    """
    if not reply.sources:
        return reply.text

    lines = [f"\n\n{SOURCES_HEADINGS[OutputLanguage(language)]}"]
    for source in reply.sources:
        lines.append(f"- [{source.get('title') or 'Source'}]({source['uri']})")
    return reply.text + "\n".join(lines) + "\n"
