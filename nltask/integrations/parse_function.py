"""Client for the parse-natural-language function.

Callers (input widgets, importers) reach the language model only through this
HTTPS endpoint; the API key stays on the server.
"""

import os
import logging
from datetime import date
from typing import Optional
import requests
from dotenv import load_dotenv

from nltask.integrations.errors import (
    ERRORS_BY_TYPE,
    ApiError,
    InvalidResponse,
    MissingCredential,
    NetworkError,
)
from nltask.integrations.extraction import extract_json_block, normalize_extraction
from nltask.models.constants import DEFAULT_PARSE_TIMEOUT_SECONDS, PARSE_FUNCTION_PATH
from nltask.models.remote import RemoteExtraction

load_dotenv()

logger = logging.getLogger(__name__)


class ParseFunctionClient:
    """HTTP client for POST /parse-natural-language."""

    def __init__(
        self,
        base_url: Optional[str] = None,
        api_key: Optional[str] = None,
        timeout: Optional[float] = None,
    ):
        """Initialize the client.

        Args:
            base_url: Service URL. If None, reads NLTASK_PARSE_FUNCTION_URL.
            api_key: Optional bearer token. If None, reads NLTASK_PARSE_FUNCTION_KEY.
            timeout: Request timeout in seconds. If None, reads NLTASK_PARSE_TIMEOUT.
        """
        self.base_url = (base_url or os.getenv("NLTASK_PARSE_FUNCTION_URL") or "").rstrip("/")
        self.api_key = api_key or os.getenv("NLTASK_PARSE_FUNCTION_KEY")
        self.timeout = timeout or float(os.getenv("NLTASK_PARSE_TIMEOUT", DEFAULT_PARSE_TIMEOUT_SECONDS))

        self.headers = {"Content-Type": "application/json"}
        if self.api_key:
            self.headers["Authorization"] = f"Bearer {self.api_key}"

    def extract(
        self,
        text: str,
        *,
        is_live_typing: bool = False,
        current_date: Optional[date] = None,
    ) -> RemoteExtraction:
        """POST the text to the parse function and return its extraction.

        The server resolves dates against its own clock; current_date is part
        of the extractor interface but not sent on the wire.

        Raises:
            MissingCredential: No endpoint configured, or the server lacks its API key
            NetworkError: Connection failure or timeout
            ApiError: Non-2xx answer
            InvalidResponse: Body is not a JSON object
        """
        if not self.base_url:
            raise MissingCredential("NLTASK_PARSE_FUNCTION_URL not configured")

        url = f"{self.base_url}{PARSE_FUNCTION_PATH}"
        body = {"text": text, "isLiveTyping": is_live_typing}
        try:
            response = requests.post(url, json=body, headers=self.headers, timeout=self.timeout)
        except requests.Timeout as e:
            logger.error(f"Parse function timed out after {self.timeout}s")
            raise NetworkError("Parse function timed out") from e
        except requests.RequestException as e:
            logger.error(f"Parse function unreachable: {type(e).__name__}")
            raise NetworkError("Could not reach parse function") from e

        if not response.ok:
            raise self._error_from(response)

        try:
            payload = response.json()
        except ValueError:
            # Tolerate prose around the JSON object
            payload = extract_json_block(response.text)
        if not isinstance(payload, dict):
            raise InvalidResponse("Parse function returned a non-object JSON body")
        if payload.get("success") is False:
            raise ApiError(str(payload.get("error") or "Parse function reported failure"),
                           status_code=response.status_code)

        return normalize_extraction(payload, text, is_live_typing=is_live_typing)

    @staticmethod
    def _error_from(response: requests.Response) -> Exception:
        """Map an error answer to the typed error it describes."""
        message = f"Parse function error: {response.status_code}"
        error_type = None
        try:
            body = response.json()
            if isinstance(body, dict):
                message = str(body.get("error") or message)
                error_type = body.get("errorType")
        except ValueError:
            pass

        logger.error(f"Parse function returned {response.status_code} ({error_type or 'unknown'})")
        error_cls = ERRORS_BY_TYPE.get(error_type, ApiError)
        if error_cls is ApiError:
            return ApiError(message, status_code=response.status_code)
        return error_cls(message)
