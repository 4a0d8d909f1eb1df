"""OpenAI API integration for nltask.

This module provides the language-model side of task parsing: given task text
and the current date it extracts people, tags, priority, effort and the
verbatim due-date phrase, with a best-effort ISO resolution of that phrase.
"""

import os
import logging
from datetime import date
from typing import Optional
from openai import OpenAI, APIConnectionError, APIError, APIStatusError
from dotenv import load_dotenv

from nltask.integrations.errors import ApiError, InvalidResponse, MissingCredential, NetworkError
from nltask.integrations.extraction import extract_json_block, normalize_extraction
from nltask.models.constants import DEFAULT_OPENAI_MODEL, DEFAULT_PARSE_TIMEOUT_SECONDS
from nltask.models.remote import RemoteExtraction

# Load environment variables
load_dotenv()

logger = logging.getLogger(__name__)

OPENAI_MODEL = os.getenv("NLTASK_OPENAI_MODEL", DEFAULT_OPENAI_MODEL)

# Live typing: only what the input widget needs for highlighting
LIVE_PROMPT_TEMPLATE = """You are a task parser assistant. Today is {weekday}, {current_date}.

Task being typed: "{text}"

Extract:
- "people": complete names written after @ symbols (e.g. "@John Smith" -> "John Smith")
- "tags": names written after # symbols, without the #
- "originalDatePhrase": the exact words of the task that refer to a deadline or date, copied
  character for character from the task, or null (a "go live" date is not a deadline)
- "dueDate": that date as YYYY-MM-DD if you are sure of it, otherwise null

Example response:
{{"people": ["John Smith"], "tags": ["work"], "originalDatePhrase": "next friday", "dueDate": "2024-05-10"}}

Respond only with the JSON object, no other text."""

# Full submission: every field
FULL_PROMPT_TEMPLATE = """You are a task parser assistant. Today is {weekday}, {current_date}.

Task: "{text}"

Extract:
- "people": complete names written after @ symbols (e.g. "@John Smith" -> "John Smith")
- "tags": names written after # symbols, without the #
- "priority": one of "high", "normal", "low", "lowest", or null if not stated
- "originalDatePhrase": the exact words of the task that refer to a deadline or date, copied
  character for character from the task, or null (a "go live" date is not a deadline)
- "dueDate": that date as YYYY-MM-DD if you can resolve it, otherwise null (do not guess)
- "effort": the words describing how long the task takes (e.g. "30 minutes", "couple hours"), or null
- "taskTitle": the task with the date phrase, every #tag and every @person removed

Example response:
{{"people": ["Mom"], "tags": ["family"], "priority": "high", "originalDatePhrase": "tomorrow", "dueDate": "2024-05-04", "effort": null, "taskTitle": "Call high priority"}}

Respond only with the JSON object, no other text."""


class OpenAIClient:
    """Client for OpenAI-backed task text extraction."""

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: Optional[str] = None,
        timeout: Optional[float] = None,
    ):
        """Initialize OpenAI client.

        Args:
            api_key: OpenAI API key. If None, reads from OPENAI_API_KEY environment variable.
            model: Chat model name. Defaults to NLTASK_OPENAI_MODEL or gpt-4o-mini.
            timeout: Request timeout in seconds. Defaults to NLTASK_PARSE_TIMEOUT.

        Note:
            A missing API key does not fail here; extract() raises MissingCredential
            so the parse function can answer with a typed error.
        """
        self.api_key = api_key or os.getenv("OPENAI_API_KEY")
        self.model = model or OPENAI_MODEL
        self.timeout = timeout or float(os.getenv("NLTASK_PARSE_TIMEOUT", DEFAULT_PARSE_TIMEOUT_SECONDS))
        self.client = None

        if self.api_key:
            # No SDK retries: callers prefer a fast fallback over a slow answer
            self.client = OpenAI(api_key=self.api_key, timeout=self.timeout, max_retries=0)
        else:
            logger.warning("OPENAI_API_KEY not found in environment. Remote task parsing will not be available.")

    def extract(
        self,
        text: str,
        *,
        is_live_typing: bool = False,
        current_date: Optional[date] = None,
    ) -> RemoteExtraction:
        """Extract task attributes from text.

        Args:
            text: Task text to analyze
            is_live_typing: Narrow, low-latency extraction for highlighting
            current_date: Date relative phrases are resolved against (default: today)

        Returns:
            RemoteExtraction normalized to the wire contract

        Raises:
            MissingCredential: API key is not configured
            NetworkError: Connection failure or timeout
            ApiError: OpenAI answered with an error status
            InvalidResponse: Reply contains no usable JSON object
        """
        if not self.client:
            raise MissingCredential("OPENAI_API_KEY not configured")

        if not text or not text.strip():
            logger.debug("Empty text provided. Returning empty extraction.")
            return RemoteExtraction()

        current_date = current_date or date.today()
        template = LIVE_PROMPT_TEMPLATE if is_live_typing else FULL_PROMPT_TEMPLATE
        prompt = template.format(
            text=text,
            current_date=current_date.isoformat(),
            weekday=current_date.strftime("%A"),
        )

        try:
            response = self.client.chat.completions.create(
                model=self.model,
                messages=[
                    {"role": "system", "content": "You are a task parser assistant. Respond only with valid JSON."},
                    {"role": "user", "content": prompt}
                ],
                temperature=0.2,  # extraction, not creativity
                max_tokens=150 if is_live_typing else 300,
            )
        except APIConnectionError as e:
            # Includes APITimeoutError
            logger.error(f"OpenAI API unreachable: {type(e).__name__}")
            raise NetworkError("Could not reach the language model") from e
        except APIStatusError as e:
            if e.status_code == 429:
                logger.warning("OpenAI API rate limit exceeded. Please wait before retrying.")
            else:
                logger.error(f"OpenAI API error: {e.status_code}")
            # Don't forward the provider's message, it might contain sensitive info
            raise ApiError(f"Language model error: {e.status_code}", status_code=e.status_code) from e
        except APIError as e:
            logger.error(f"OpenAI API error: {type(e).__name__}")
            raise ApiError("Language model error") from e

        content = (response.choices[0].message.content or "").strip() if response.choices else ""
        if not content:
            raise InvalidResponse("Empty response from language model")

        try:
            payload = extract_json_block(content)
        except InvalidResponse:
            logger.warning(f"Failed to read JSON from OpenAI response: {content[:100]}")
            raise

        result = normalize_extraction(payload, text, is_live_typing=is_live_typing)
        logger.debug(
            f"OpenAI extracted {len(result.people)} people, {len(result.tags)} tags, "
            f"date phrase {result.original_date_phrase!r}"
        )
        return result
