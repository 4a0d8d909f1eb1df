"""Live-typing refinement with last-request-wins ordering.

Every keystroke issues a sequence number. Remote calls are debounced, run off
the event loop, and their results are applied only if nothing newer has been
applied already, so a slow answer for "meet @Al" can never overwrite the
answer for "meet @Alice".
"""

from __future__ import annotations

import asyncio
import logging
from datetime import date
from typing import Callable, List, Optional

from nltask.integrations.errors import RemoteExtractionError
from nltask.models.constants import (
    DEFAULT_PARSE_TIMEOUT_SECONDS,
    LIVE_DEBOUNCE_SECONDS,
    LIVE_MIN_TEXT_LENGTH,
    LIVE_TRIGGER_CHARS,
)
from nltask.models.draft import TokenAnnotation
from nltask.models.remote import RemoteExtraction, SemanticExtractor
from nltask.parser.local import decorate

logger = logging.getLogger(__name__)


def should_refine_live(text: str) -> bool:
    """Live remote calls only pay off once there is a mention to resolve."""
    if not text or len(text) < LIVE_MIN_TEXT_LENGTH:
        return False
    return any(char in text for char in LIVE_TRIGGER_CHARS)


class SequenceGate:
    """Monotonic request counter with last-applied tracking."""

    def __init__(self):
        self._issued = 0
        self._applied = 0

    @property
    def latest_issued(self) -> int:
        return self._issued

    @property
    def last_applied(self) -> int:
        return self._applied

    def issue(self) -> int:
        self._issued += 1
        return self._issued

    def is_latest(self, seq: int) -> bool:
        return seq == self._issued

    def try_apply(self, seq: int) -> bool:
        """Record `seq` as applied unless something newer already was."""
        if seq <= self._applied:
            return False
        self._applied = seq
        return True


class LiveHighlighter:
    """Keeps the highlight ranges of the input in sync with the text.

    Local decoration is recomputed synchronously on every change; the remote
    refinement arrives later and is merged in by `annotations()`.
    """

    def __init__(
        self,
        extractor: SemanticExtractor,
        *,
        debounce: float = LIVE_DEBOUNCE_SECONDS,
        timeout: float = DEFAULT_PARSE_TIMEOUT_SECONDS,
        today: Optional[Callable[[], date]] = None,
        on_refined: Optional[Callable[[str, RemoteExtraction], None]] = None,
    ):
        self.extractor = extractor
        self.debounce = debounce
        self.timeout = timeout
        self.today = today or date.today
        self.on_refined = on_refined
        self.gate = SequenceGate()
        self.text = ""
        self.refinement: Optional[RemoteExtraction] = None
        self.refined_text: Optional[str] = None

    def annotations(self) -> List[TokenAnnotation]:
        """Current highlight ranges for the current text."""
        return decorate(self.text, self.refinement)

    async def on_text_change(self, text: str) -> bool:
        """Handle a keystroke; returns True if a remote result was applied.

        Safe to schedule concurrently (one task per keystroke): older calls
        are coalesced during the debounce window and stale answers discarded.
        """
        self.text = text
        seq = self.gate.issue()
        if not should_refine_live(text):
            return False

        await asyncio.sleep(self.debounce)
        if not self.gate.is_latest(seq):
            logger.debug(f"Live request {seq} superseded during debounce")
            return False

        try:
            result = await asyncio.wait_for(
                asyncio.to_thread(
                    self.extractor.extract, text, is_live_typing=True, current_date=self.today()
                ),
                timeout=self.timeout,
            )
        except asyncio.TimeoutError:
            logger.warning(f"Live request {seq} timed out after {self.timeout}s")
            return False
        except RemoteExtractionError as e:
            logger.warning(f"Live request {seq} failed: {type(e).__name__}")
            return False

        # The text moved on while this call was in flight; a newer call owns the result
        if not self.gate.is_latest(seq) or not self.gate.try_apply(seq):
            logger.debug(f"Discarding stale live result {seq} (applied {self.gate.last_applied})")
            return False

        self.refinement = result
        self.refined_text = text
        if self.on_refined is not None:
            self.on_refined(text, result)
        return True
