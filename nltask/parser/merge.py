"""Reconciliation of local and remote extraction results."""

from __future__ import annotations

from typing import Iterable, List, Optional

from nltask.models.constants import DESCRIPTION_LENGTH_THRESHOLD
from nltask.models.draft import DraftSource, ParsedTaskDraft, Priority
from nltask.models.remote import RemoteExtraction
from nltask.parser.local import clean_title


def union_names(*groups: Iterable[str]) -> List[str]:
    """Union name lists, de-duplicated case-insensitively, first casing kept."""
    seen = set()
    merged: List[str] = []
    for group in groups:
        for name in group:
            key = name.casefold()
            if key not in seen:
                seen.add(key)
                merged.append(name)
    return merged


def _remote_priority(value: Optional[str]) -> Optional[Priority]:
    try:
        return Priority(value) if value else None
    except ValueError:
        return None


def reconcile(local: ParsedTaskDraft, remote: RemoteExtraction, text: str) -> ParsedTaskDraft:
    """Merge a full-submission remote extraction into a local draft.

    Remote title, due date, priority and effort win when present; local
    values fill the gaps. Tags and people are unioned, local names first.
    The remote date phrase is used only if it occurs verbatim in `text` and
    is not part of the go-live phrase. The title never keeps the chosen
    date phrase: when the local phrase wins, the title is recomputed.
    """
    raw = text.strip()
    phrase = local.due_date_phrase
    remote_phrase = remote.original_date_phrase
    if remote_phrase and remote_phrase in raw and remote_phrase not in (local.go_live_phrase or ""):
        phrase = remote_phrase

    # A local date only makes sense for the local phrase
    due_date = remote.due_date if phrase == remote_phrase else None
    if due_date is None and phrase == local.due_date_phrase:
        due_date = local.due_date

    tags = union_names(local.tag_names, remote.tags)
    people = union_names(local.people_names, remote.people)
    if remote.task_title and phrase == remote_phrase:
        title = remote.task_title
    else:
        title = clean_title(raw, phrase, people=people, tags=tags) or local.title

    return ParsedTaskDraft(
        title=title,
        tag_names=tags,
        people_names=people,
        priority=_remote_priority(remote.priority) or local.priority,
        due_date_phrase=phrase,
        due_date=due_date,
        go_live_phrase=local.go_live_phrase,
        go_live_date=local.go_live_date,
        effort_level=remote.effort or local.effort_level,
        description=raw if len(raw) > len(title) + DESCRIPTION_LENGTH_THRESHOLD else None,
        source=DraftSource.MERGED,
    )
