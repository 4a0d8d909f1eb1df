"""Data models for nltask."""

from nltask.models.draft import ParsedTaskDraft, TokenAnnotation, TokenKind, Priority, PriorityType, DraftSource, Suggestion
from nltask.models.remote import ParseRequest, RemoteExtraction, ParseErrorResponse, SemanticExtractor
from nltask.models.task import TaskRecord, TaskStatus, DueDateType, Tag, Person

__all__ = [
    "ParsedTaskDraft",
    "TokenAnnotation",
    "TokenKind",
    "Priority",
    "PriorityType",
    "DraftSource",
    "Suggestion",
    "ParseRequest",
    "RemoteExtraction",
    "ParseErrorResponse",
    "SemanticExtractor",
    "TaskRecord",
    "TaskStatus",
    "DueDateType",
    "Tag",
    "Person",
]
