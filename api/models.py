"""
Pydantic models for contact submissions and API responses.
"""

from datetime import datetime, timezone
from typing import Any
import uuid

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


def utc_timestamp() -> str:
    """ISO-8601 UTC timestamp with millisecond precision, e.g. 2024-05-01T12:00:00.000Z"""
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


class ContactSubmission(BaseModel):
    """Raw contact form fields after trimming.

    Missing or non-string values become empty strings so that field presence
    is checked in one place by the submission handler.
    """
    model_config = ConfigDict(extra="ignore")

    name: str = ""
    email: str = ""
    message: str = ""

    @field_validator("name", "email", "message", mode="before")
    @classmethod
    def coerce_text(cls, v: Any) -> str:
        if not isinstance(v, str):
            return ""
        return v.strip()

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v: str) -> str:
        """Normalize email to lowercase"""
        return v.lower()


class ContactRecord(BaseModel):
    """One persisted contact-form submission. Immutable once created."""
    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    name: str
    email: str
    message: str
    submitted_at: str = Field(default_factory=utc_timestamp)
    client_ip: str = "unknown"
    user_agent: str = ""

    def to_json_dict(self) -> dict:
        """Serialise with the camelCase keys used in the contacts file."""
        return self.model_dump(by_alias=True)


class ContactResponse(BaseModel):
    """Response for successful submission"""
    success: bool = True
    message: str


class HealthResponse(BaseModel):
    """Response for the health endpoint"""
    status: str = "ok"
    timestamp: str = Field(default_factory=utc_timestamp)
    storage: str


class ErrorResponse(BaseModel):
    """Body of every error response"""
    error: str
