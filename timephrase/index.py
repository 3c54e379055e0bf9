"""API endpoints for parsing time expressions."""

import logging
from datetime import datetime

from dotenv import load_dotenv
from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field

from timephrase.config import configure_logging, get_settings
from timephrase.services import TemporalParser, TemporalResult, is_parsable

load_dotenv()

# Configure logging from settings (uses LOG_LEVEL env var)
configure_logging()
logger = logging.getLogger(__name__)

app = FastAPI(title="timephrase")

app.add_middleware(
    CORSMiddleware,
    allow_origins=get_settings().cors_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


class ParseRequest(BaseModel):
    """Request body for the parse endpoint."""

    phrase: str = Field(description="English time expression")
    now: datetime | None = Field(
        default=None, description="Reference instant; server local time when omitted"
    )
    default_to_past: bool | None = Field(
        default=None, description="Override the configured search direction"
    )


class ValidateRequest(BaseModel):
    """Request body for the validate endpoint."""

    phrase: str


class ValidateResponse(BaseModel):
    phrase: str
    parsable: bool


@app.get("/")
def root():
    """Root endpoint."""
    return {"status": "ok"}


@app.get("/health")
def health():
    """Health check endpoint."""
    return {"status": "healthy"}


@app.post("/api/parse", response_model=TemporalResult)
def parse_phrase(request: ParseRequest):
    """Resolve a phrase to a half-open [start, end) range."""
    config = get_settings().resolver_config(request.default_to_past)
    result = TemporalParser(config).parse(request.phrase, now=request.now)
    if not result.success:
        logger.info(
            "Rejected phrase %r (%s): %s",
            request.phrase,
            result.error_kind.value if result.error_kind else "unknown",
            result.explanation,
        )
        raise HTTPException(status_code=422, detail=result.model_dump(mode="json"))
    return result


@app.post("/api/validate", response_model=ValidateResponse)
def validate_phrase(request: ValidateRequest):
    """Check a phrase against the grammar without resolving it."""
    return ValidateResponse(phrase=request.phrase, parsable=is_parsable(request.phrase))
