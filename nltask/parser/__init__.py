"""Natural-language task parsing for nltask."""

from nltask.parser.local import (
    extract_tags,
    extract_people,
    extract_priority,
    extract_date_phrase,
    extract_effort,
    extract_go_live_phrase,
    decorate,
    clean_title,
    parse_local,
    suggest,
)
from nltask.parser.dates import resolve_date_phrase, resolve_go_live_phrase
from nltask.parser.effort import effort_minutes, map_effort_level
from nltask.parser.merge import reconcile, union_names
from nltask.parser.live import LiveHighlighter, SequenceGate, should_refine_live
from nltask.parser.pipeline import NaturalLanguageTaskParser, is_ai_excluded

__all__ = [
    "extract_tags",
    "extract_people",
    "extract_priority",
    "extract_date_phrase",
    "extract_effort",
    "extract_go_live_phrase",
    "decorate",
    "clean_title",
    "parse_local",
    "suggest",
    "resolve_date_phrase",
    "resolve_go_live_phrase",
    "effort_minutes",
    "map_effort_level",
    "reconcile",
    "union_names",
    "LiveHighlighter",
    "SequenceGate",
    "should_refine_live",
    "NaturalLanguageTaskParser",
    "is_ai_excluded",
]
