"""Natural-language task parser.

Entry point used by task creation: local extraction is always available,
the remote semantic extractor refines it when reachable.

1. Local extraction never fails and is the baseline
2. AI-excluded text (leading '.') is never sent to the remote extractor
3. Exactly one remote call per submission; any remote error falls back to
   local results with the raw input as title
"""

import logging
from datetime import date
from typing import Callable, List, Optional

from nltask.integrations.errors import RemoteExtractionError
from nltask.models.draft import DraftSource, ParsedTaskDraft, TokenAnnotation
from nltask.models.remote import RemoteExtraction, SemanticExtractor
from nltask.parser.live import should_refine_live
from nltask.parser.local import decorate, parse_local
from nltask.parser.merge import reconcile

logger = logging.getLogger(__name__)


def is_ai_excluded(text: str) -> bool:
    """Text beginning with a period is private and must never reach the model."""
    return text.lstrip().startswith(".") if text else False


class NaturalLanguageTaskParser:
    """Convert free text into a ParsedTaskDraft."""

    def __init__(
        self,
        extractor: Optional[SemanticExtractor] = None,
        today: Optional[Callable[[], date]] = None,
    ):
        """Initialize the parser.

        Args:
            extractor: Remote semantic extractor; None means local-only parsing.
            today: Clock for date resolution (defaults to date.today).
        """
        self.extractor = extractor
        self.today = today or date.today

    def parse_local(self, text: str) -> ParsedTaskDraft:
        """Local-only draft, safe to call on every keystroke."""
        return parse_local(text, self.today())

    def decorate(self, text: str, refinement: Optional[RemoteExtraction] = None) -> List[TokenAnnotation]:
        return decorate(text, refinement)

    def should_refine_live(self, text: str) -> bool:
        return self.extractor is not None and not is_ai_excluded(text) and should_refine_live(text)

    def parse_for_submission(self, text: str) -> ParsedTaskDraft:
        """Parse text for task creation.

        Returns:
            The merged draft when the remote extractor answered, otherwise the
            local draft titled with the raw input text.
        """
        raw = (text or "").strip()
        if is_ai_excluded(raw):
            logger.debug("Task text is AI-excluded. Parsing locally only.")
            return self.parse_local(raw.lstrip(".").strip())

        local = self.parse_local(raw)
        if self.extractor is None or not raw:
            return local

        try:
            remote = self.extractor.extract(raw, is_live_typing=False, current_date=self.today())
        except RemoteExtractionError as e:
            # Don't fail task creation because of the model
            logger.warning(f"Remote extraction failed ({type(e).__name__}); using local extraction")
            return local.model_copy(update={"title": raw, "description": None, "source": DraftSource.LOCAL})

        draft = reconcile(local, remote, raw)
        logger.debug(f"Parsed task: title={draft.title!r} tags={draft.tag_names} people={draft.people_names}")
        return draft
