"""Parse result models for nltask."""

from datetime import date
from typing import List, Optional
from enum import Enum
from pydantic import BaseModel, Field


class Priority(str, Enum):
    """Task priority enumeration."""
    HIGH = "high"
    NORMAL = "normal"
    LOW = "low"
    LOWEST = "lowest"


class TokenKind(str, Enum):
    """Kind of a highlighted token in the input text."""
    TAG = "tag"
    PERSON = "person"
    PRIORITY = "priority"
    DATE = "date"
    EFFORT = "effort"
    GO_LIVE = "go_live"


class PriorityType(str, Enum):
    """Highlight flavour for priority tokens."""
    HIGH = "high"
    LOW = "low"


class DraftSource(str, Enum):
    """Which extraction path produced a draft."""
    LOCAL = "local"
    MERGED = "merged"


class ParsedTaskDraft(BaseModel):
    """Structured task attributes extracted from free text.

    Produced fresh for every parse call and never persisted directly; the
    caller maps it into a full task record (see task_factory).
    """

    title: str = Field(..., description="Task title")
    tag_names: List[str] = Field(default_factory=list, description="Tag names referenced with #")
    people_names: List[str] = Field(default_factory=list, description="People referenced with @")
    priority: Optional[Priority] = Field(None, description="Extracted priority")
    due_date_phrase: Optional[str] = Field(
        None,
        description="Verbatim substring of the input referring to the deadline",
    )
    due_date: Optional[date] = Field(None, description="Best-effort resolution of the date phrase")
    go_live_phrase: Optional[str] = Field(None, description="Verbatim go-live phrase, e.g. 'go live friday'")
    go_live_date: Optional[date] = Field(None, description="Resolved go-live date")
    effort_level: Optional[str] = Field(None, description="Effort phrase, e.g. 'couple hours'")
    description: Optional[str] = Field(None, description="Original input when the title dropped a lot of it")
    source: DraftSource = Field(DraftSource.LOCAL, description="Extraction path that produced this draft")

    class Config:
        """Pydantic configuration."""
        use_enum_values = True


class TokenAnnotation(BaseModel):
    """A highlighted range of the input text."""

    start: int = Field(..., ge=0, description="Start offset (inclusive)")
    end: int = Field(..., ge=0, description="End offset (exclusive)")
    kind: TokenKind
    text: str = Field(..., description="The verbatim slice text[start:end]")
    priority_type: Optional[PriorityType] = None

    class Config:
        """Pydantic configuration."""
        use_enum_values = True


class Suggestion(BaseModel):
    """Existing names offered for the #tag or @person being typed."""

    kind: Optional[TokenKind] = Field(None, description="tag or person; None when not typing a mention")
    query: str = Field("", description="Text typed after the trigger character")
    items: List[str] = Field(default_factory=list, description="Matching names")

    class Config:
        """Pydantic configuration."""
        use_enum_values = True
