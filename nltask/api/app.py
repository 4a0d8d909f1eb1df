"""FastAPI web application for nltask.

Serves the parse-natural-language function (the only place that holds the
language-model API key) plus a server-side task parsing endpoint.
"""

import logging
from typing import Optional
from fastapi import Depends, FastAPI
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field, ValidationError

from nltask.integrations.errors import (
    ApiError,
    InvalidResponse,
    MissingCredential,
    NetworkError,
    RemoteExtractionError,
)
from nltask.integrations.openai_client import OpenAIClient
from nltask.models.draft import ParsedTaskDraft
from nltask.models.remote import ParseErrorResponse, ParseRequest, RemoteExtraction, SemanticExtractor
from nltask.models.task import Person, Tag, TaskRecord
from nltask.models.task_factory import InMemoryEntityRepository, create_task_from_draft, user_message_for
from nltask.parser.pipeline import NaturalLanguageTaskParser

logger = logging.getLogger(__name__)

# Initialize FastAPI app
app = FastAPI(
    title="nltask API",
    description="Turns free-text task descriptions into structured task attributes",
    version="0.1.0"
)

# In-memory storage for MVP
tags_store = InMemoryEntityRepository(Tag)
people_store = InMemoryEntityRepository(Person)

_ERROR_STATUS = {
    MissingCredential: 500,
    InvalidResponse: 502,
    ApiError: 502,
    NetworkError: 504,
}

_extractor: Optional[OpenAIClient] = None


def get_semantic_extractor() -> SemanticExtractor:
    """Get or create the OpenAI-backed extractor (singleton)."""
    global _extractor
    if _extractor is None:
        _extractor = OpenAIClient()
    return _extractor


def _error_response(status_code: int, message: str, error_type: str) -> JSONResponse:
    body = ParseErrorResponse(error=message, error_type=error_type)
    return JSONResponse(status_code=status_code, content=body.model_dump(by_alias=True))


# Response models
class TaskParseRequest(BaseModel):
    """Request for server-side task parsing."""
    text: str = Field(..., description="Free-text task description")


class TaskParseResponse(BaseModel):
    """Response for server-side task parsing."""
    draft: ParsedTaskDraft
    task: TaskRecord
    notice: Optional[str] = Field(None, description="Non-blocking message for the user")


@app.get("/health")
async def health():
    """Health check endpoint."""
    return {"status": "healthy", "version": "0.1.0"}


@app.post("/parse-natural-language", response_model=RemoteExtraction)
def parse_natural_language(
    request_body: dict,
    extractor: SemanticExtractor = Depends(get_semantic_extractor),
):
    """Extract task attributes from text with the language model.

    Errors are answered as {"error", "success": false, "errorType"} with a
    non-2xx status so callers can fall back to local extraction.
    """
    try:
        payload = ParseRequest(**request_body)
    except ValidationError:
        return _error_response(400, "Invalid input: text field is required", "invalid_request")
    if not payload.text.strip():
        return _error_response(400, "Invalid input: text field is required", "invalid_request")

    logger.debug(f"Parsing task text (live={payload.is_live_typing}, {len(payload.text)} chars)")
    try:
        return extractor.extract(payload.text, is_live_typing=payload.is_live_typing)
    except RemoteExtractionError as e:
        status_code = _ERROR_STATUS.get(type(e), 502)
        logger.error(f"parse-natural-language failed: {type(e).__name__}")
        return _error_response(status_code, str(e), e.error_type)


@app.post("/tasks/parse", response_model=TaskParseResponse)
def parse_task(
    payload: TaskParseRequest,
    extractor: SemanticExtractor = Depends(get_semantic_extractor),
):
    """Parse text into a task record, resolving tags and people."""
    parser = NaturalLanguageTaskParser(extractor=extractor)
    draft = parser.parse_for_submission(payload.text)
    task = create_task_from_draft(draft, tags_store, people_store)
    return TaskParseResponse(draft=draft, task=task, notice=user_message_for(draft))


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
