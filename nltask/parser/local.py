"""Local natural language extraction for task text.

Fast, synchronous, no network. Used on every keystroke for highlighting and
as the fallback when the remote extractor is unavailable. Every function here
is pure and never raises: a category with no match yields None or [].
"""

from __future__ import annotations

import re
from datetime import date
from typing import Iterator, List, Optional, Sequence, Tuple

from nltask.models.constants import DESCRIPTION_LENGTH_THRESHOLD
from nltask.models.draft import (
    DraftSource,
    ParsedTaskDraft,
    Priority,
    PriorityType,
    Suggestion,
    TokenAnnotation,
    TokenKind,
)
from nltask.models.remote import RemoteExtraction
from nltask.parser.dates import resolve_date_phrase, resolve_go_live_phrase
from nltask.parser.vocabulary import (
    DATE_PATTERNS,
    EFFORT_PATTERNS,
    GO_LIVE_PATTERNS,
    NAME_BOUNDARY_WORDS,
    PRIORITY_PATTERNS,
)

Span = Tuple[int, int]

_NAME_WORD = r"[^\s#@,;:!?]+"
_NAME_BOUNDARY = "|".join(NAME_BOUNDARY_WORDS)
# Follow-on words extend a name only when capitalized and not a date/priority word.
_NAME_CONTINUATION = rf"(?:[ \t]+(?!(?i:{_NAME_BOUNDARY})\b)[A-Z][^\s#@,;:!?]*)*"


def _mention_pattern(prefix: str) -> re.Pattern:
    return re.compile(rf"(?<!\w){re.escape(prefix)}({_NAME_WORD}{_NAME_CONTINUATION})")


def _compile(patterns: Sequence[str]) -> re.Pattern:
    return re.compile(r"\b(?:" + "|".join(patterns) + r")\b", re.IGNORECASE)


_TAG_RE = _mention_pattern("#")
_PERSON_RE = _mention_pattern("@")
_DATE_RE = _compile(DATE_PATTERNS)
_EFFORT_RE = _compile(EFFORT_PATTERNS)
_GO_LIVE_RE = _compile(GO_LIVE_PATTERNS)
_PRIORITY_RES = [(priority, _compile(patterns)) for priority, patterns in PRIORITY_PATTERNS.items()]

_PRIORITY_TYPES = {
    Priority.HIGH: PriorityType.HIGH,
    Priority.LOW: PriorityType.LOW,
    Priority.LOWEST: PriorityType.LOW,
}


def _mentions(regex: re.Pattern, text: str) -> Iterator[Tuple[int, int, str]]:
    """Yield (start, end, name) for each mention; start includes the prefix."""
    for match in regex.finditer(text):
        name = match.group(1).rstrip(".")
        if not name:
            continue
        yield match.start(), match.start(1) + len(name), name


def _mention_spans(text: str) -> List[Span]:
    spans = [(start, end) for start, end, _ in _mentions(_TAG_RE, text)]
    spans.extend((start, end) for start, end, _ in _mentions(_PERSON_RE, text))
    return spans


def _overlaps(start: int, end: int, spans: Sequence[Span]) -> bool:
    return any(start < s_end and s_start < end for s_start, s_end in spans)


def _keyword_matches(regex: re.Pattern, text: str, blocked: Sequence[Span]) -> Iterator[re.Match]:
    """Keyword matches that do not overlap a blocked span (#tag, @person, go-live)."""
    for match in regex.finditer(text):
        if not _overlaps(match.start(), match.end(), blocked):
            yield match


def _go_live_spans(text: str, mention_spans: Sequence[Span]) -> List[Span]:
    return [match.span() for match in _keyword_matches(_GO_LIVE_RE, text, mention_spans)]


def extract_tags(text: str) -> List[str]:
    """Return #tag names in left-to-right order, case preserved."""
    if not text:
        return []
    return [name for _, _, name in _mentions(_TAG_RE, text)]


def extract_people(text: str) -> List[str]:
    """Return @person names in left-to-right order, case preserved."""
    if not text:
        return []
    return [name for _, _, name in _mentions(_PERSON_RE, text)]


def extract_priority(text: str) -> Optional[Priority]:
    """Return the priority named by keywords in the text, if any.

    Categories are checked high, normal, low, lowest; the first one with a
    match wins.
    """
    if not text:
        return None
    blocked = _mention_spans(text)
    for priority, regex in _PRIORITY_RES:
        if next(_keyword_matches(regex, text, blocked), None) is not None:
            return priority
    return None


def extract_date_phrase(text: str) -> Optional[str]:
    """Return the first deadline date phrase exactly as written in the text.

    Dates that belong to a go-live phrase are not deadlines and are skipped.
    """
    if not text:
        return None
    blocked = _mention_spans(text)
    blocked += _go_live_spans(text, blocked)
    match = next(_keyword_matches(_DATE_RE, text, blocked), None)
    return match.group(0) if match else None


def extract_go_live_phrase(text: str) -> Optional[str]:
    """Return the first go-live phrase ('go live on friday') as written."""
    if not text:
        return None
    match = next(_keyword_matches(_GO_LIVE_RE, text, _mention_spans(text)), None)
    return match.group(0) if match else None


def extract_effort(text: str) -> Optional[str]:
    """Return the first effort phrase exactly as written in the text."""
    if not text:
        return None
    match = next(_keyword_matches(_EFFORT_RE, text, _mention_spans(text)), None)
    return match.group(0) if match else None


def _verbatim_mentions(text: str, prefix: str, names: Sequence[str]) -> List[Span]:
    spans = []
    for name in names:
        if not name:
            continue
        pattern = re.compile(re.escape(prefix) + re.escape(name) + r"(?!\w)", re.IGNORECASE)
        spans.extend(match.span() for match in pattern.finditer(text))
    return spans


def _annotation(text: str, start: int, end: int, kind: TokenKind, **extra) -> TokenAnnotation:
    return TokenAnnotation(start=start, end=end, kind=kind, text=text[start:end], **extra)


def decorate(text: str, refinement: Optional[RemoteExtraction] = None) -> List[TokenAnnotation]:
    """Return highlight ranges for every match of every extractor.

    A live-typing refinement contributes its people and tags (matched
    verbatim, so multi-word names the local rules cut short are covered) and
    its date phrase. Refined mention spans replace overlapping local ones.
    """
    if not text:
        return []

    remote_mentions: List[Tuple[int, int, TokenKind]] = []
    if refinement is not None:
        candidates = [(s, e, TokenKind.PERSON) for s, e in _verbatim_mentions(text, "@", refinement.people)]
        candidates += [(s, e, TokenKind.TAG) for s, e in _verbatim_mentions(text, "#", refinement.tags)]
        # Longest first at equal starts; skip anything overlapping an accepted span.
        for start, end, kind in sorted(candidates, key=lambda c: (c[0], -c[1])):
            if not _overlaps(start, end, [(s, e) for s, e, _ in remote_mentions]):
                remote_mentions.append((start, end, kind))

    remote_spans = [(s, e) for s, e, _ in remote_mentions]
    annotations = [_annotation(text, s, e, kind) for s, e, kind in remote_mentions]
    mention_spans = list(remote_spans)
    for regex, kind in ((_TAG_RE, TokenKind.TAG), (_PERSON_RE, TokenKind.PERSON)):
        for start, end, _ in _mentions(regex, text):
            if not _overlaps(start, end, remote_spans):
                annotations.append(_annotation(text, start, end, kind))
                mention_spans.append((start, end))

    for priority, regex in _PRIORITY_RES:
        for match in _keyword_matches(regex, text, mention_spans):
            annotations.append(
                _annotation(text, match.start(), match.end(), TokenKind.PRIORITY,
                            priority_type=_PRIORITY_TYPES.get(priority))
            )
    go_live_spans = _go_live_spans(text, mention_spans)
    annotations.extend(_annotation(text, s, e, TokenKind.GO_LIVE) for s, e in go_live_spans)
    for match in _keyword_matches(_DATE_RE, text, mention_spans + go_live_spans):
        annotations.append(_annotation(text, match.start(), match.end(), TokenKind.DATE))
    for match in _keyword_matches(_EFFORT_RE, text, mention_spans):
        annotations.append(_annotation(text, match.start(), match.end(), TokenKind.EFFORT))

    if refinement is not None and refinement.original_date_phrase:
        idx = text.find(refinement.original_date_phrase)
        if idx != -1:
            end = idx + len(refinement.original_date_phrase)
            duplicate = any(a.kind == TokenKind.DATE and a.start == idx and a.end == end for a in annotations)
            if not duplicate and not _overlaps(idx, end, go_live_spans):
                annotations.append(_annotation(text, idx, end, TokenKind.DATE))

    annotations.sort(key=lambda a: (a.start, -a.end))
    return annotations


def _find_outside(text: str, phrase: str, blocked: Sequence[Span]) -> Optional[Span]:
    """First occurrence of `phrase` in `text` that does not overlap `blocked`."""
    idx = text.find(phrase)
    while idx != -1:
        span = (idx, idx + len(phrase))
        if not _overlaps(span[0], span[1], blocked):
            return span
        idx = text.find(phrase, idx + 1)
    return None


def clean_title(
    text: str,
    date_phrase: Optional[str] = None,
    people: Sequence[str] = (),
    tags: Sequence[str] = (),
) -> str:
    """Strip the date phrase, any go-live phrase and every #tag/@person token.

    `people` and `tags` add names (e.g. from the language model) that are
    removed verbatim as @name / #name on top of the locally matched tokens.
    Whitespace is collapsed.
    """
    if not text:
        return ""
    spans = _mention_spans(text)
    go_live_spans = _go_live_spans(text, spans)
    spans += go_live_spans
    spans += _verbatim_mentions(text, "@", people)
    spans += _verbatim_mentions(text, "#", tags)
    if date_phrase:
        span = _find_outside(text, date_phrase, go_live_spans)
        if span is not None:
            spans.append(span)

    pieces = []
    cursor = 0
    for start, end in sorted(spans):
        if start > cursor:
            pieces.append(text[cursor:start])
        cursor = max(cursor, end)
    pieces.append(text[cursor:])

    title = " ".join("".join(pieces).split())
    title = re.sub(r"\s+([,;.!?])", r"\1", title)
    return title.strip(" ,;")


def suggest(
    text: str,
    cursor: int,
    people: Sequence[str] = (),
    tags: Sequence[str] = (),
) -> Suggestion:
    """Offer existing names for the @person or #tag being typed at `cursor`.

    The trigger nearest before the cursor decides the kind. Matching is a
    case-insensitive substring test; a bare trigger offers every name.
    """
    if not text or cursor <= 0:
        return Suggestion()
    before = text[:cursor]
    triggers = [
        (before.rfind("@"), TokenKind.PERSON, people),
        (before.rfind("#"), TokenKind.TAG, tags),
    ]
    idx, kind, names = max(triggers, key=lambda t: t[0])
    if idx == -1 or (idx > 0 and (before[idx - 1].isalnum() or before[idx - 1] == "_")):
        return Suggestion()

    query = before[idx + 1:]
    needle = query.casefold()
    items = [name for name in names if needle in name.casefold()]
    return Suggestion(kind=kind, query=query, items=items)


def parse_local(text: str, today: Optional[date] = None) -> ParsedTaskDraft:
    """Build a draft from local extraction only."""
    raw = (text or "").strip()
    today = today or date.today()
    phrase = extract_date_phrase(raw)
    go_live = extract_go_live_phrase(raw)
    title = clean_title(raw, phrase) or raw
    return ParsedTaskDraft(
        title=title,
        tag_names=extract_tags(raw),
        people_names=extract_people(raw),
        priority=extract_priority(raw),
        due_date_phrase=phrase,
        due_date=resolve_date_phrase(phrase, today) if phrase else None,
        go_live_phrase=go_live,
        go_live_date=resolve_go_live_phrase(go_live, today),
        effort_level=extract_effort(raw),
        description=raw if len(raw) > len(title) + DESCRIPTION_LENGTH_THRESHOLD else None,
        source=DraftSource.LOCAL,
    )
