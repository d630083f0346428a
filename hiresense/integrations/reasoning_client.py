"""Reasoning service client: OpenAI-compatible chat completions with JSON output."""

import json
import os
from typing import Any

from openai import AsyncOpenAI, OpenAIError
from tenacity import (
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from ..observability.logger import get_logger

logger = get_logger(__name__)

DEFAULT_BASE_URL = "https://api.groq.com/openai/v1"
DEFAULT_MODEL = "openai/gpt-oss-20b"
DEFAULT_TEMPERATURE = 0.2


class ReasoningResponseError(ValueError):
    """The completion content could not be read as a JSON object."""


class ReasoningClient:
    """Wrapper for a JSON-object chat completion service with retry logic.

    The client is built once at startup and handed to the agents that need
    it. Close it with :meth:`aclose` (or use it as an async context manager)
    when the application shuts down.
    """

    def __init__(
        self,
        api_key: str | None = None,
        base_url: str | None = DEFAULT_BASE_URL,
        model: str = DEFAULT_MODEL,
        temperature: float = DEFAULT_TEMPERATURE,
        timeout: int = 60,
        max_retries: int = 3,
        api_key_env: str = "GROQ_API_KEY",
    ):
        """Initialize reasoning client.

        Args:
            api_key: Provider API key (defaults to the ``api_key_env`` variable)
            base_url: OpenAI-compatible endpoint
            model: Default model to use
            temperature: Default sampling temperature
            timeout: Request timeout in seconds
            max_retries: Maximum number of attempts for transient provider errors
            api_key_env: Environment variable holding the API key
        """
        self.test_mode = bool(os.getenv("HIRESENSE_TEST_MODE"))
        self.api_key = api_key or os.getenv(api_key_env)
        if not self.api_key and not self.test_mode:
            raise ValueError(f"API key must be provided or set in {api_key_env} env var")

        self.base_url = base_url
        self.model = model
        self.temperature = temperature
        self.timeout = timeout
        self.max_retries = max_retries

        self.client = None
        if not self.test_mode:
            # Retries are handled by tenacity below
            self.client = AsyncOpenAI(
                api_key=self.api_key,
                base_url=base_url,
                timeout=timeout,
                max_retries=0,
            )

        logger.info(
            "reasoning_client_initialized",
            model=model,
            base_url=base_url,
            test_mode=self.test_mode,
        )

    async def __aenter__(self) -> "ReasoningClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        """Release the underlying HTTP connection pool."""
        if self.client is not None:
            await self.client.close()
            self.client = None

    async def complete_json(
        self,
        prompt: str,
        model: str | None = None,
        temperature: float | None = None,
    ) -> tuple[dict[str, Any], dict[str, Any]]:
        """Send a single user prompt and parse the reply as a JSON object.

        Args:
            prompt: User-role prompt text
            model: Model to use (defaults to instance default)
            temperature: Sampling temperature (defaults to instance default)

        Returns:
            Tuple of (parsed JSON object, metadata including tokens used)

        Raises:
            OpenAIError: If the API call fails after retries
            ReasoningResponseError: If the content is not a JSON object
        """
        model = model or self.model
        temperature = self.temperature if temperature is None else temperature

        if self.test_mode:
            return {}, {"tokens_total": 0, "model": model, "mock": True}

        retrying = retry(
            stop=stop_after_attempt(max(1, self.max_retries)),
            wait=wait_exponential(multiplier=1, min=2, max=10),
            retry=retry_if_exception_type(OpenAIError),
            reraise=True,
        )
        return await retrying(self._complete)(prompt, model, temperature)

    async def _complete(
        self, prompt: str, model: str, temperature: float
    ) -> tuple[dict[str, Any], dict[str, Any]]:
        logger.info(
            "creating_completion",
            model=model,
            temperature=temperature,
            input_length=len(prompt),
        )

        try:
            completion = await self.client.chat.completions.create(
                model=model,
                messages=[{"role": "user", "content": prompt}],
                response_format={"type": "json_object"},
                temperature=temperature,
            )
        except OpenAIError as e:
            logger.error("reasoning_error", error=str(e), model=model, exc_info=True)
            raise

        content = self._extract_content(completion)
        parsed = self.parse_content(content)

        usage = getattr(completion, "usage", None)
        usage_metadata = {
            "tokens_total": getattr(usage, "total_tokens", 0) or 0,
            "tokens_input": getattr(usage, "prompt_tokens", 0) or 0,
            "tokens_output": getattr(usage, "completion_tokens", 0) or 0,
            "response_id": getattr(completion, "id", None),
            "model": getattr(completion, "model", model),
        }

        logger.info(
            "completion_created",
            response_id=usage_metadata["response_id"],
            tokens_total=usage_metadata["tokens_total"],
        )

        return parsed, usage_metadata

    @staticmethod
    def _extract_content(completion: Any) -> str:
        choices = getattr(completion, "choices", None) or []
        if not choices:
            return ""
        message = getattr(choices[0], "message", None)
        return (getattr(message, "content", None) or "").strip()

    @classmethod
    def parse_content(cls, content: str | None) -> dict[str, Any]:
        """Parse completion content into a JSON object.

        Empty content reads as an empty object. Anything else must be a JSON
        object, possibly wrapped in prose or code fences.
        """
        if not content or not content.strip():
            return {}
        try:
            parsed = json.loads(content)
        except ValueError:
            parsed = cls._repair_json(content)
            if parsed is None:
                raise ReasoningResponseError(
                    f"Completion is not valid JSON: {content[:200]!r}"
                ) from None
        if not isinstance(parsed, dict):
            raise ReasoningResponseError(
                f"Expected a JSON object, got {type(parsed).__name__}"
            )
        return parsed

    @classmethod
    def _repair_json(cls, text: str) -> Any | None:
        """Best-effort JSON repair: trim to outermost braces and parse."""
        if "{" not in text or "}" not in text:
            return None
        candidate = text[text.find("{"): text.rfind("}") + 1]
        try:
            return json.loads(candidate)
        except ValueError:
            return None


def build_reasoning_client(config: dict[str, Any] | None = None) -> ReasoningClient:
    """Construct a reasoning client from the ``reasoning`` config section.

    Args:
        config: Full configuration dict

    Returns:
        ReasoningClient instance
    """
    reasoning = (config or {}).get("reasoning", {})
    return ReasoningClient(
        base_url=reasoning.get("base_url", DEFAULT_BASE_URL),
        model=reasoning.get("model", DEFAULT_MODEL),
        temperature=reasoning.get("temperature", DEFAULT_TEMPERATURE),
        timeout=reasoning.get("timeout", 60),
        max_retries=reasoning.get("max_retries", 3),
        api_key_env=reasoning.get("api_key_env", "GROQ_API_KEY"),
    )
