"""Audit models for agent execution traces (Pydantic only)."""

from typing import Any

from pydantic import Field

from .base import IdentifiedSchema, TimestampSchema
from .enums import AgentType


class AgentTrace(IdentifiedSchema, TimestampSchema):
    """Agent execution trace for idempotency and debugging."""

    candidate_id: str = Field(..., description="Candidate identifier")
    agent_type: AgentType = Field(..., description="Agent type")

    # Idempotency
    input_hash: str = Field(..., description="SHA-256 hash of input for idempotency")

    # Execution data
    output_data: dict[str, Any] | None = Field(None, description="Agent output")
    success: bool = Field(True, description="Whether execution succeeded")
    error: str | None = Field(None, description="Error message if failed")

    # Performance metrics
    duration_ms: int = Field(0, ge=0, description="Execution duration in milliseconds")
    tokens_used: int = Field(0, ge=0, description="Tokens consumed")
    tokens_input: int = Field(0, ge=0, description="Input tokens")
    tokens_output: int = Field(0, ge=0, description="Output tokens")

    # Model info
    model_used: str | None = Field(None, description="Model used")
    temperature: float | None = Field(None, description="Sampling temperature")

    metadata: dict[str, Any] = Field(default_factory=dict, description="Additional metadata")
