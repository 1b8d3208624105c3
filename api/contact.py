"""
Contact Form API

Accepts contact form submissions as JSON, URL-encoded form data or a raw
body, validates them, and appends a Contact Record to the JSON contact store.
"""

import json
import logging
import re
from typing import Any, Dict
from urllib.parse import parse_qsl

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from api.models import (
    ContactRecord,
    ContactResponse,
    ContactSubmission,
    ErrorResponse,
    HealthResponse,
)
from core.contact_store import ContactStore
from core.error_handling import (
    BodyParseError,
    ContactValidationError,
    PayloadTooLargeError,
    PortfolioError,
    StorageError,
    classify_error,
    log_error,
    public_error_message,
)
from core.logging_config import get_logger, log_submission

logger = logging.getLogger(__name__)
event_logger = get_logger(__name__)

# Create router
router = APIRouter(prefix="/api", tags=["contact"])

MAX_MESSAGE_LENGTH = 2000
EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")

SUCCESS_MESSAGE = "Thanks for reaching out! I'll respond within two business days."
MISSING_FIELDS_MESSAGE = "Please provide a name, email address, and message."
INVALID_EMAIL_MESSAGE = "Please enter a valid email address."
MESSAGE_TOO_LONG_MESSAGE = f"Messages should be {MAX_MESSAGE_LENGTH} characters or fewer."


def is_valid_email(email: str) -> bool:
    return EMAIL_PATTERN.match(email) is not None


async def read_body(request: Request, max_size: int) -> bytes:
    """
    Read the request body, aborting as soon as it grows past ``max_size`` bytes.

    Raises:
        PayloadTooLargeError: declared or streamed size exceeds the limit
    """
    declared = request.headers.get("content-length")
    if declared and declared.isdigit() and int(declared) > max_size:
        raise PayloadTooLargeError(
            "Declared body size exceeds limit", component="contact",
            context={"content_length": int(declared), "limit": max_size},
        )

    body = bytearray()
    async for chunk in request.stream():
        body.extend(chunk)
        if len(body) > max_size:
            raise PayloadTooLargeError(
                "Streamed body size exceeds limit", component="contact",
                context={"limit": max_size},
            )
    return bytes(body)


def parse_body(body: bytes, content_type: str) -> Dict[str, Any]:
    """
    Decode ``body`` according to its declared content type.

    JSON objects and URL-encoded forms become dicts; anything else is kept
    under the ``raw`` key.
    """
    if not body:
        return {}

    content_type = (content_type or "").lower()

    try:
        text = body.decode("utf-8")
    except UnicodeDecodeError as e:
        raise BodyParseError(f"Body is not valid UTF-8: {e}", component="contact") from e

    if "application/json" in content_type:
        try:
            payload = json.loads(text)
        except json.JSONDecodeError as e:
            raise BodyParseError(f"Invalid JSON body: {e}", component="contact") from e
        if not isinstance(payload, dict):
            raise BodyParseError(
                f"JSON body must be an object, got {type(payload).__name__}",
                component="contact",
            )
        return payload

    if "application/x-www-form-urlencoded" in content_type:
        return dict(parse_qsl(text, keep_blank_values=True))

    return {"raw": text}


def validate_submission(payload: Dict[str, Any]) -> ContactSubmission:
    """
    Normalise and validate submitted fields.

    Raises:
        ContactValidationError: with the message shown to the visitor
    """
    submission = ContactSubmission.model_validate(payload)

    if not submission.name or not submission.email or not submission.message:
        raise ContactValidationError(MISSING_FIELDS_MESSAGE, component="contact")

    if not is_valid_email(submission.email):
        raise ContactValidationError(INVALID_EMAIL_MESSAGE, component="contact")

    if len(submission.message) > MAX_MESSAGE_LENGTH:
        raise ContactValidationError(
            MESSAGE_TOO_LONG_MESSAGE, component="contact",
            context={"message_length": len(submission.message)},
        )

    return submission


def get_client_ip(request: Request) -> str:
    """Peer address of the connection"""
    if request.client:
        return request.client.host
    return "unknown"


def build_record(submission: ContactSubmission, request: Request) -> ContactRecord:
    return ContactRecord(
        name=submission.name,
        email=submission.email,
        message=submission.message,
        client_ip=get_client_ip(request),
        user_agent=request.headers.get("user-agent", ""),
    )


def error_response(exc: Exception) -> JSONResponse:
    status_code = exc.status_code if isinstance(exc, PortfolioError) else 500
    return JSONResponse(status_code=status_code, content={"error": public_error_message(exc)})


# API Endpoints

@router.get("/health", response_model=HealthResponse)
async def health(request: Request):
    """Liveness check, reports where submissions are stored."""
    store: ContactStore = request.app.state.store
    return HealthResponse(storage=str(store.path))


@router.post(
    "/contact",
    response_model=ContactResponse,
    status_code=201,
    responses={
        400: {"model": ErrorResponse},
        413: {"model": ErrorResponse},
        500: {"model": ErrorResponse},
    },
)
async def submit_contact_form(request: Request):
    """
    Submit a contact form

    Accepts ``name``, ``email`` and ``message`` as a JSON object or URL-encoded
    form. Messages are limited to 2000 characters.
    """
    settings = request.app.state.settings
    store: ContactStore = request.app.state.store

    try:
        body = await read_body(request, settings.max_payload_size)
        payload = parse_body(body, request.headers.get("content-type", ""))
        submission = validate_submission(payload)
    except PortfolioError as e:
        log_error(classify_error(e, "contact"), logger)
        return error_response(e)

    record = build_record(submission, request)

    try:
        await store.append(record.to_json_dict())
    except Exception as e:
        error = e if isinstance(e, StorageError) else StorageError(str(e), component="contact_store")
        log_error(classify_error(error, "contact", {"submission_id": record.id}), logger,
                  exc_info=True)
        return error_response(error)

    log_submission(event_logger, record.id, record.client_ip, len(record.message))

    return ContactResponse(message=SUCCESS_MESSAGE)
