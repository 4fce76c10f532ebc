"""LLM invocation gateway.

Stateless boundary to the completion provider: a role-tagged message sequence
goes in, one completion string comes out. Every failure is classified as an
InvocationError subclass; nothing is retried and nothing is defaulted.
"""
from __future__ import annotations

import asyncio
import time
from typing import Any, Optional, Protocol, Sequence

import openai
import structlog

from api.features.tutor.context import ChatMessage
from api.shared.exceptions import (
    InvocationProviderError,
    InvocationTimeoutError,
    InvocationTransportError,
    MalformedCompletionError,
)
from infra.resources import OpenAIResource

logger = structlog.get_logger("tutor.gateway")


class LLMGateway(Protocol):
    async def complete(self, messages: Sequence[ChatMessage]) -> str: ...


def extract_completion_text(response: Any, *, model: str) -> str:
    """Pull the completion text out of a chat completion payload.

    Raises MalformedCompletionError when the payload carries no usable text.
    """
    choices = getattr(response, "choices", None)
    if not choices:
        raise MalformedCompletionError(model, "response contained no choices")
    message = getattr(choices[0], "message", None)
    if message is None:
        raise MalformedCompletionError(model, "first choice carried no message")
    content = getattr(message, "content", None)
    if not isinstance(content, str):
        raise MalformedCompletionError(
            model, f"completion content is {type(content).__name__}, expected text"
        )
    if not content.strip():
        raise MalformedCompletionError(model, "completion content is empty")
    return content.strip()


class OpenAIChatGateway:
    """Chat Completions gateway over the async OpenAI client."""

    def __init__(
        self,
        client_resource: OpenAIResource,
        *,
        model: str = "gpt-4o-mini",
        temperature: float = 0.2,
        max_tokens: Optional[int] = 2000,
        timeout: float = 60.0,
    ):
        self.client_resource = client_resource
        self.model = model
        self.temperature = temperature
        self.max_tokens = max_tokens
        self.timeout = timeout

    async def complete(self, messages: Sequence[ChatMessage]) -> str:
        try:
            client = self.client_resource.get_client()
        except RuntimeError as e:
            raise InvocationTransportError(self.model, str(e)) from e

        payload = [m.as_payload() for m in messages]
        start = time.time()
        try:
            response = await asyncio.wait_for(
                client.chat.completions.create(
                    model=self.model,
                    messages=payload,
                    temperature=self.temperature,
                    max_tokens=self.max_tokens,
                    timeout=self.timeout,
                ),
                timeout=self.timeout,
            )
        except (asyncio.TimeoutError, openai.APITimeoutError) as e:
            logger.warning("completion_timeout", model=self.model, timeout=self.timeout)
            raise InvocationTimeoutError(self.model, self.timeout) from e
        except openai.APIConnectionError as e:
            logger.warning("completion_transport_error", model=self.model, error=str(e))
            raise InvocationTransportError(self.model, str(e)) from e
        except openai.APIStatusError as e:
            logger.warning(
                "completion_provider_error",
                model=self.model,
                status_code=e.status_code,
                error=str(e),
            )
            raise InvocationProviderError(self.model, str(e), e.status_code) from e
        except openai.OpenAIError as e:
            logger.warning("completion_provider_error", model=self.model, error=str(e))
            raise InvocationProviderError(self.model, str(e)) from e

        answer = extract_completion_text(response, model=self.model)
        logger.info(
            "completion_ok",
            model=self.model,
            messages=len(payload),
            latency_ms=int((time.time() - start) * 1000),
        )
        return answer
