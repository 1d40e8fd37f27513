"""Completion adapter for the Groq chat-completions API."""
import json
import logging
import random
import time
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence

import httpx
from groq import Groq
from groq import RateLimitError, AuthenticationError, APIError, APITimeoutError, APIConnectionError

from config import (
    COMPLETION_MAX_RETRIES,
    COMPLETION_MODEL,
    COMPLETION_RETRY_DELAY,
    COMPLETION_TIMEOUT,
    GROQ_API_KEY,
)
from models.conversation import Turn

logger = logging.getLogger(__name__)

MAX_SUGGESTIONS = 3
MAX_RETRY_DELAY = 10.0  # seconds
RETRYABLE_CODES = {"RATE_LIMIT_ERROR", "TIMEOUT_ERROR", "CONNECTION_ERROR"}


@dataclass
class Completion:
    """Parsed reply from the completion service."""
    content: str
    suggested_responses: List[str] = field(default_factory=list)
    raw: str = ""
    parsed: bool = True
    model_used: str = ""
    tokens_input: int = 0
    tokens_output: int = 0
    latency_ms: int = 0


@dataclass
class ServiceErrorInfo:
    """Structured error from a completion call."""
    code: str
    message: str
    details: Dict[str, Any]


class ServiceError(Exception):
    """Network, auth or rate-limit failure from the completion service."""

    def __init__(self, error: ServiceErrorInfo):
        self.error = error
        super().__init__(error.message)


class CompletionAdapter:
    """Sends conversation history to Groq and parses the structured reply."""

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: str = COMPLETION_MODEL,
        timeout: float = COMPLETION_TIMEOUT,
        max_retries: int = COMPLETION_MAX_RETRIES,
        retry_delay: float = COMPLETION_RETRY_DELAY,
    ):
        """
        Initialize the adapter with a Groq API key.

        Args:
            api_key: Groq API key (defaults to GROQ_API_KEY from environment)
            model: Chat model identifier
            timeout: Per-request timeout in seconds
            max_retries: Extra attempts after a rate-limit, timeout or connection failure
            retry_delay: Base delay in seconds for exponential backoff
        """
        self.api_key = api_key or GROQ_API_KEY
        if not self.api_key:
            raise ValueError("GROQ_API_KEY must be provided or set in environment")

        self.model = model
        self.timeout = timeout
        self.max_retries = max_retries
        self.retry_delay = retry_delay

        # Retries are handled here so the backoff is visible in our logs
        self.client = Groq(
            api_key=self.api_key,
            timeout=httpx.Timeout(timeout, connect=min(timeout, 5.0)),
            max_retries=0,
        )
        logger.info(f"CompletionAdapter initialized with model: {model}")

    def complete(self, history: Sequence[Turn], directive: Optional[str] = None) -> Completion:
        """
        Request the next assistant reply for ``history``.

        Args:
            history: Full turn history, system turn first
            directive: Optional per-turn system message appended after the history

        Returns:
            Completion with parsed content and suggested responses

        Raises:
            ServiceError: Structured error with code, message, and details
        """
        messages = self.build_messages(history, directive)
        delay = self.retry_delay

        for attempt in range(self.max_retries + 1):
            try:
                return self._complete_once(messages)
            except ServiceError as e:
                if e.error.code not in RETRYABLE_CODES or attempt >= self.max_retries:
                    raise
                wait = delay + random.uniform(0, delay)
                logger.warning(
                    f"Completion attempt {attempt + 1}/{self.max_retries + 1} failed "
                    f"({e.error.code}). Retrying in {wait:.2f}s...",
                    extra={"error_code": e.error.code, "model": self.model},
                )
                time.sleep(wait)
                delay = min(delay * 2, MAX_RETRY_DELAY)

        # Unreachable: the final attempt either returns or raises
        raise ServiceError(ServiceErrorInfo("UNKNOWN_ERROR", "Retries exhausted", {"model": self.model}))

    def _complete_once(self, messages: List[Dict[str, str]]) -> Completion:
        start_time = time.time()
        model = self.model

        try:
            logger.debug(f"Requesting completion: model={model}, messages={len(messages)}")

            response = self.client.chat.completions.create(
                model=model,
                messages=messages,
                response_format={"type": "json_object"},
            )

            latency_ms = int((time.time() - start_time) * 1000)
            raw = response.choices[0].message.content
            usage = getattr(response, "usage", None)
            tokens_input = getattr(usage, "prompt_tokens", 0) or 0
            tokens_output = getattr(usage, "completion_tokens", 0) or 0

        except RateLimitError as e:
            raise self._error(
                "RATE_LIMIT_ERROR",
                "Rate limit exceeded. Please try again in a few moments.",
                e, start_time, retry_after=60,
            )
        except AuthenticationError as e:
            raise self._error(
                "AUTHENTICATION_ERROR", "Authentication failed. Please check your API key.", e, start_time
            )
        except APITimeoutError as e:
            raise self._error("TIMEOUT_ERROR", "Request timed out. Please try again.", e, start_time)
        except APIConnectionError as e:
            raise self._error(
                "CONNECTION_ERROR", "Could not reach the completion service.", e, start_time
            )
        except APIError as e:
            raise self._error("API_ERROR", f"Groq API error: {str(e)}", e, start_time)
        except Exception as e:
            raise self._error(
                "UNKNOWN_ERROR",
                f"Unexpected error during completion: {str(e)}",
                e, start_time, error_type=type(e).__name__,
            )

        if not raw:
            raise ServiceError(ServiceErrorInfo(
                code="EMPTY_RESPONSE",
                message="Completion service returned an empty reply.",
                details={"model": model, "latency_ms": latency_ms},
            ))

        logger.info(
            f"Completion received: model={model}, "
            f"input_tokens={tokens_input}, output_tokens={tokens_output}, "
            f"latency={latency_ms}ms",
            extra={"latency_ms": latency_ms, "model": model},
        )

        completion = self.parse_reply(raw)
        completion.model_used = model
        completion.tokens_input = tokens_input
        completion.tokens_output = tokens_output
        completion.latency_ms = latency_ms
        return completion

    def _error(self, code: str, message: str, exc: Exception, start_time: float, **extra_details) -> ServiceError:
        latency_ms = int((time.time() - start_time) * 1000)
        details = {
            "model": self.model,
            "latency_ms": latency_ms,
            "original_error": str(exc),
        }
        details.update(extra_details)
        error = ServiceErrorInfo(code=code, message=message, details=details)
        logger.error(
            f"Completion error: code={code}, model={self.model}, latency={latency_ms}ms, error={exc}",
            exc_info=True,
            extra={"error_code": code, "error_details": details},
        )
        return ServiceError(error)

    @staticmethod
    def build_messages(history: Sequence[Turn], directive: Optional[str] = None) -> List[Dict[str, str]]:
        """Chat-completion message list for ``history`` plus an optional directive."""
        messages = [turn.to_message() for turn in history]
        if directive:
            messages.append({"role": "system", "content": directive})
        return messages

    @staticmethod
    def parse_reply(raw: str) -> Completion:
        """
        Decode a JSON reply of the form {"content": ..., "suggestedResponses": [...]}.

        Anything that does not decode to an object with string content is
        returned as plain content with no suggestions.
        """
        try:
            data = json.loads(raw)
        except (TypeError, ValueError) as e:
            logger.warning(f"Reply is not valid JSON, using raw text: {e}")
            return Completion(content=raw, raw=raw, parsed=False)

        if not isinstance(data, dict) or not isinstance(data.get("content"), str):
            logger.warning("Reply JSON has no string 'content' field, using raw text")
            return Completion(content=raw, raw=raw, parsed=False)

        suggestions = data.get("suggestedResponses") or []
        if not isinstance(suggestions, list):
            suggestions = []
        suggestions = [s for s in suggestions if isinstance(s, str) and s.strip()][:MAX_SUGGESTIONS]

        return Completion(content=data["content"], suggested_responses=suggestions, raw=raw)
