"""Base agent class for all HireSense agents backed by the reasoning service."""

import hashlib
import json
import time
from abc import ABC, abstractmethod
from typing import Any, Generic, Type, TypeVar

from pydantic import BaseModel

from ..models.audit import AgentTrace
from ..models.base import AgentContext, AgentResult
from ..models.enums import AgentType
from ...integrations.reasoning_client import ReasoningClient
from ...observability.logger import get_logger

logger = get_logger(__name__)

TInput = TypeVar("TInput", bound=BaseModel)
TOutput = TypeVar("TOutput", bound=BaseModel)


class BaseAgent(ABC, Generic[TInput, TOutput]):
    """Abstract base class for all agents.

    Implements template method pattern with:
    - Idempotency checking via input hash
    - Full trace storage
    - Automatic retry via the reasoning client
    - Structured input/output with Pydantic
    """

    def __init__(self, client: ReasoningClient, store=None):
        """Initialize base agent.

        Args:
            client: Reasoning service client shared by all agents
            store: CandidateStore instance for trace persistence
        """
        self.client = client
        self.store = store
        self.logger = get_logger(f"{__name__}.{self.__class__.__name__}")

    @property
    @abstractmethod
    def agent_type(self) -> AgentType:
        """Return the agent type enum."""

    @property
    @abstractmethod
    def output_schema(self) -> Type[TOutput]:
        """Return the Pydantic schema for output."""

    async def execute(
        self, input_data: TInput, context: AgentContext
    ) -> AgentResult[TOutput]:
        """Main execution method with idempotency and trace.

        Args:
            input_data: Input data (Pydantic model)
            context: Execution context

        Returns:
            AgentResult with success status and data

        Raises:
            Exception: If processing fails after retries
        """
        start_time = time.time()
        input_hash = self._hash_input(input_data)

        self.logger.info(
            "agent_execution_start",
            agent=self.agent_type.value,
            candidate_id=context.candidate_id,
            trace_id=context.trace_id,
        )

        try:
            if context.config.get("pipeline", {}).get("idempotency", False):
                cached_result = self._get_cached_trace(context.candidate_id, input_hash)
                if cached_result:
                    self.logger.info(
                        "using_cached_result",
                        agent=self.agent_type.value,
                        candidate_id=context.candidate_id,
                        input_hash=input_hash,
                    )
                    return AgentResult(
                        success=True,
                        data=self.output_schema.model_validate(cached_result["output_data"]),
                        tokens_used=cached_result.get("tokens_used", 0),
                        duration_ms=cached_result.get("duration_ms", 0),
                        metadata={"from_cache": True},
                    )

            result = await self.process(input_data, context)

            duration_ms = int((time.time() - start_time) * 1000)
            result.duration_ms = duration_ms
            self._store_trace(context.candidate_id, input_hash, result, duration_ms, context)

            self.logger.info(
                "agent_execution_complete",
                agent=self.agent_type.value,
                candidate_id=context.candidate_id,
                success=result.success,
                duration_ms=duration_ms,
            )

            return result

        except Exception as e:
            duration_ms = int((time.time() - start_time) * 1000)
            self.logger.error(
                "agent_execution_failed",
                agent=self.agent_type.value,
                candidate_id=context.candidate_id,
                error=str(e),
                duration_ms=duration_ms,
                exc_info=True,
            )

            self._store_trace(
                context.candidate_id,
                input_hash,
                AgentResult(success=False, data=None, error=str(e)),
                duration_ms,
                context,
            )

            raise

    @abstractmethod
    async def process(
        self, input_data: TInput, context: AgentContext
    ) -> AgentResult[TOutput]:
        """Process the input and return result.

        This is where the agent-specific logic goes, including the call to
        the reasoning service and sanitizing its answer.
        """

    @abstractmethod
    def _build_prompt(self, input_data: TInput, context: AgentContext) -> str:
        """Build prompt for the reasoning service."""

    async def _call_reasoning(
        self, prompt: str, context: AgentContext
    ) -> tuple[dict[str, Any], dict[str, Any]]:
        """Call the reasoning service with the configured model and temperature.

        Args:
            prompt: Prompt text
            context: Execution context

        Returns:
            Tuple of (raw JSON object, metadata)
        """
        reasoning_config = context.config.get("reasoning", {})
        return await self.client.complete_json(
            prompt,
            model=reasoning_config.get("model"),
            temperature=reasoning_config.get("temperature"),
        )

    def _hash_input(self, input_data: TInput) -> str:
        """Create SHA-256 hash of input for idempotency."""
        data_dict = input_data.model_dump(mode="json")
        json_str = json.dumps(data_dict, sort_keys=True)
        return hashlib.sha256(json_str.encode()).hexdigest()

    def _get_cached_trace(self, candidate_id: str, input_hash: str) -> dict[str, Any] | None:
        if not self.store:
            return None

        trace = self.store.get_agent_trace(candidate_id, self.agent_type.value, input_hash)
        if trace and trace.get("success") and trace.get("output_data"):
            return {
                "output_data": trace["output_data"],
                "tokens_used": trace.get("tokens_used", 0),
                "duration_ms": trace.get("duration_ms", 0),
            }
        return None

    def _store_trace(
        self,
        candidate_id: str,
        input_hash: str,
        result: AgentResult[TOutput],
        duration_ms: int,
        context: AgentContext,
    ) -> None:
        if not self.store:
            return

        reasoning_config = context.config.get("reasoning", {})
        trace = AgentTrace(
            candidate_id=candidate_id,
            agent_type=self.agent_type,
            input_hash=input_hash,
            output_data=result.data.model_dump(mode="json", by_alias=True) if result.data else None,
            success=result.success,
            error=result.error,
            duration_ms=duration_ms,
            tokens_used=result.tokens_used,
            tokens_input=result.metadata.get("tokens_input", 0),
            tokens_output=result.metadata.get("tokens_output", 0),
            model_used=result.metadata.get("model") or reasoning_config.get("model"),
            temperature=reasoning_config.get("temperature"),
            metadata={"trace_id": context.trace_id},
        )

        self.store.save_agent_trace(candidate_id, self.agent_type.value, input_hash, trace)
