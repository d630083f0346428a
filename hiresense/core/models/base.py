"""Base Pydantic schemas and helpers for HireSense models."""

import uuid
from datetime import datetime, timezone
from typing import Any, Generic, TypeVar

from pydantic import BaseModel, ConfigDict, Field

# Type variable for generic result types
T = TypeVar('T')


# =============================================================================
# Pydantic Base Classes
# =============================================================================


class HireSenseBaseModel(BaseModel):
    """Base Pydantic model for all schemas with common configuration."""

    model_config = ConfigDict(
        from_attributes=True,
        validate_assignment=True,
        use_enum_values=True,
        str_strip_whitespace=True,
        # Accept both field names and camelCase wire aliases
        populate_by_name=True,
    )


class TimestampSchema(HireSenseBaseModel):
    """Schema with timestamp fields."""

    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


class IdentifiedSchema(HireSenseBaseModel):
    """Schema with UUID identifier."""

    id: str = Field(default_factory=lambda: str(uuid.uuid4()), description="Unique identifier")


# =============================================================================
# Common Response Models
# =============================================================================


class AgentContext(HireSenseBaseModel):
    """Context passed to all agent executions."""

    candidate_id: str = Field(..., description="Candidate identifier")
    trace_id: str = Field(default_factory=lambda: str(uuid.uuid4()), description="Trace ID")
    config: dict[str, Any] = Field(default_factory=dict, description="Configuration")
    metadata: dict[str, Any] = Field(default_factory=dict, description="Additional metadata")


class AgentResult(HireSenseBaseModel, Generic[T]):
    """Standardized result wrapper for agent executions."""

    success: bool = Field(..., description="Whether execution succeeded")
    data: T | None = Field(None, description="Result data")
    error: str | None = Field(None, description="Error message if failed")
    tokens_used: int = Field(0, ge=0, description="Tokens consumed")
    duration_ms: int = Field(0, ge=0, description="Execution duration in milliseconds")
    metadata: dict[str, Any] = Field(default_factory=dict, description="Additional metadata")


# =============================================================================
# Utility Functions
# =============================================================================


def utc_now() -> datetime:
    """Get current UTC datetime.

    Returns:
        Current datetime in UTC timezone
    """
    return datetime.now(timezone.utc)
