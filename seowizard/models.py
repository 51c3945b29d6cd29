"""Data types shared by the pipeline, the history store and the exporters."""

import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Any


class OutputLanguage(str, Enum):
    """Language the article is written in."""

    VI = "vi"
    EN = "en"

    @property
    def label(self) -> str:
        return self.value.upper()


class RunPhase(str, Enum):
    IDLE = "idle"
    RUNNING = "running"
    COMPLETED = "completed"


def now_millis() -> int:
    """Current time as epoch milliseconds."""
    return int(time.time() * 1000)


@dataclass
class ArticleRecord:
    """A generated article as kept in the history store.

    The id stays empty until the store assigns one on first save. Content is
    markdown and may embed images as data URIs.
    """

    keyword: str
    content: str
    language: OutputLanguage = OutputLanguage.VI
    created_at: int = field(default_factory=now_millis)
    id: str = ""

    def __post_init__(self):
        self.language = OutputLanguage(self.language)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "keyword": self.keyword,
            "content": self.content,
            "created_at": self.created_at,
            "language": self.language.value
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ArticleRecord":
        return cls(
            id=data.get("id", ""),
            keyword=data["keyword"],
            content=data.get("content", ""),
            created_at=int(data.get("created_at", 0)),
            language=OutputLanguage(data.get("language") or OutputLanguage.VI.value)
        )


@dataclass
class RunState:
    """Observable state of one bulk run.

    The head of ``queue`` is the keyword being processed; it is only popped
    once that keyword is finished, so ``completed + remaining == total`` holds
    whenever the state is observed.
    """

    phase: RunPhase = RunPhase.IDLE
    total: int = 0
    completed: int = 0
    queue: List[str] = field(default_factory=list)
    current_keyword: str = ""
    current_step: int = 0
    status_message: str = ""
    ideation: str = ""
    outline: str = ""
    article: str = ""
    history: List[ArticleRecord] = field(default_factory=list)

    @property
    def remaining(self) -> int:
        return len(self.queue)
