"""Shared helpers for remote semantic extraction.

Language models tend to wrap their JSON in prose or code fences, and do not
always respect the contract (verbatim date phrase, ISO date). The helpers here
read the first JSON object out of a reply and bring the payload back in line
with the RemoteExtraction contract.
"""

from __future__ import annotations

import json
import logging
import re
from datetime import date
from typing import Any, Dict, List, Optional

from nltask.integrations.errors import InvalidResponse
from nltask.models.draft import Priority
from nltask.models.remote import RemoteExtraction
from nltask.parser.local import clean_title

logger = logging.getLogger(__name__)


def extract_json_block(reply: str) -> Dict[str, Any]:
    """Parse the first balanced {...} block found in a model reply.

    Braces inside JSON strings are ignored while balancing.

    Raises:
        InvalidResponse: If there is no balanced block or it is not a JSON object.
    """
    start = reply.find("{") if reply else -1
    if start == -1:
        raise InvalidResponse("No JSON object found in model response")

    depth = 0
    in_string = False
    escaped = False
    for pos in range(start, len(reply)):
        char = reply[pos]
        if in_string:
            if escaped:
                escaped = False
            elif char == "\\":
                escaped = True
            elif char == '"':
                in_string = False
            continue
        if char == '"':
            in_string = True
        elif char == "{":
            depth += 1
        elif char == "}":
            depth -= 1
            if depth == 0:
                try:
                    payload = json.loads(reply[start:pos + 1])
                except json.JSONDecodeError as e:
                    raise InvalidResponse(f"Malformed JSON in model response: {e.msg}") from e
                if not isinstance(payload, dict):
                    raise InvalidResponse("Model response JSON is not an object")
                return payload

    raise InvalidResponse("Unbalanced JSON object in model response")


def _names(value: Any, prefix: str) -> List[str]:
    if not isinstance(value, list):
        return []
    names = []
    for item in value:
        if isinstance(item, str):
            name = item.strip().lstrip(prefix).strip()
            if name:
                names.append(name)
    return names


def _optional_str(value: Any) -> Optional[str]:
    if isinstance(value, str) and value.strip() and value.strip().lower() != "null":
        return value.strip()
    return None


def _iso_date(value: Any) -> Optional[date]:
    text = _optional_str(value)
    if text is None:
        return None
    try:
        return date.fromisoformat(text[:10])
    except ValueError:
        logger.debug(f"Discarding non-ISO due date from model: {text!r}")
        return None


def _verbatim_phrase(phrase: Optional[str], text: str) -> Optional[str]:
    """Return the phrase as written in `text`, or None if it does not occur."""
    if phrase is None:
        return None
    if phrase in text:
        return phrase
    match = re.search(re.escape(phrase), text, re.IGNORECASE)
    return match.group(0) if match else None


def normalize_extraction(payload: Dict[str, Any], text: str, *, is_live_typing: bool) -> RemoteExtraction:
    """Coerce a raw model payload into a contract-abiding RemoteExtraction.

    - originalDatePhrase is relocated case-insensitively in the text; if it is
      not there at all it is dropped together with dueDate.
    - dueDate must be an ISO date, anything else becomes null.
    - taskTitle is derived from the text (date phrase, #tags and @people
      removed); live typing never carries priority, effort or a title.
    """
    people = _names(payload.get("people"), "@")
    tags = _names(payload.get("tags"), "#")
    raw_phrase = _optional_str(payload.get("originalDatePhrase"))
    phrase = _verbatim_phrase(raw_phrase, text)
    due_date = _iso_date(payload.get("dueDate"))
    if raw_phrase is not None and phrase is None:
        logger.warning("Model date phrase not found verbatim in input; dropping phrase and due date")
        due_date = None

    if is_live_typing:
        return RemoteExtraction(
            people=people,
            tags=tags,
            due_date=due_date,
            original_date_phrase=phrase,
        )

    priority = _optional_str(payload.get("priority"))
    if priority is not None:
        priority = priority.lower()
        if priority not in {p.value for p in Priority}:
            logger.debug(f"Discarding unknown priority from model: {priority!r}")
            priority = None

    title = clean_title(text, phrase, people=people, tags=tags)
    return RemoteExtraction(
        people=people,
        tags=tags,
        priority=priority,
        due_date=due_date,
        original_date_phrase=phrase,
        effort=_optional_str(payload.get("effort")),
        task_title=title or None,
    )
