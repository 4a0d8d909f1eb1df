"""Wire models for the parse function."""

from datetime import date
from typing import List, Optional, Protocol
from pydantic import BaseModel, Field


class ParseRequest(BaseModel):
    """Body of POST /parse-natural-language."""

    text: str = Field(..., description="Free-text task description")
    is_live_typing: bool = Field(False, alias="isLiveTyping")

    class Config:
        """Pydantic configuration."""
        populate_by_name = True


class RemoteExtraction(BaseModel):
    """Structured draft returned by the language-model extractor.

    originalDatePhrase, when set, is an exact substring of the request text.
    dueDate may be null even when a phrase was found.
    """

    people: List[str] = Field(default_factory=list)
    tags: List[str] = Field(default_factory=list)
    priority: Optional[str] = None
    due_date: Optional[date] = Field(None, alias="dueDate")
    original_date_phrase: Optional[str] = Field(None, alias="originalDatePhrase")
    effort: Optional[str] = None
    task_title: Optional[str] = Field(None, alias="taskTitle")
    success: bool = True

    class Config:
        """Pydantic configuration."""
        populate_by_name = True


class ParseErrorResponse(BaseModel):
    """Error body of the parse function (sent with a non-2xx status)."""

    error: str
    success: bool = False
    error_type: str = Field("api_error", alias="errorType")

    class Config:
        """Pydantic configuration."""
        populate_by_name = True


class SemanticExtractor(Protocol):
    """Anything that can turn task text into a RemoteExtraction.

    Implementations raise nltask.integrations.errors.RemoteExtractionError
    subclasses on failure.
    """

    def extract(
        self,
        text: str,
        *,
        is_live_typing: bool = False,
        current_date: Optional[date] = None,
    ) -> RemoteExtraction:
        ...
