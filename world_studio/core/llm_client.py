"""
LLM client - Provider-agnostic text generation using LiteLLM

Every LiteLLM failure is re-raised as TransportError so callers deal with
the studio error types only.
"""

import os
import json
import re
import logging
from typing import Any, AsyncIterator

from world_studio.core.config import Settings
from world_studio.core.errors import FormatError, ParseError, TransportError

logger = logging.getLogger(__name__)

# Error markers that mean "try again later"
RETRYABLE_MARKERS = ("503", "429", "UNAVAILABLE", "RateLimit", "Timeout")


def _configure_api_keys(settings: Settings) -> None:
    """Configure API keys for LiteLLM from settings"""
    import litellm

    logger.debug(f"Configuring API keys for provider: {settings.provider}")

    if settings.provider == "gemini":
        if settings.api_key:
            os.environ["GEMINI_API_KEY"] = settings.api_key
    elif settings.provider == "openai":
        if settings.api_key:
            litellm.api_key = settings.api_key
    elif settings.provider == "anthropic":
        if settings.api_key:
            os.environ["ANTHROPIC_API_KEY"] = settings.api_key
    elif settings.provider == "ollama":
        os.environ["OLLAMA_API_BASE"] = settings.ollama_base_url


def _transport_error(e: Exception) -> TransportError:
    error_str = f"{type(e).__name__}: {e}"
    is_retryable = any(marker in error_str for marker in RETRYABLE_MARKERS)
    return TransportError(f"LLM request failed: {error_str}", is_retryable=is_retryable)


async def get_completion(
    messages: list[dict[str, str]],
    settings: Settings,
    temperature: float = 0.9,
    max_tokens: int = 2048,
    response_format: dict | None = None,
) -> str:
    """
    Get completion from configured LLM provider.

    Args:
        messages: List of message dicts with 'role' and 'content'
        settings: Studio settings (provider, model, credentials)
        temperature: Creativity (0-1)
        max_tokens: Maximum response length
        response_format: Optional format specification

    Returns:
        The generated text response

    Raises:
        TransportError: the provider call failed
        FormatError: the provider returned no text
    """
    import litellm

    _configure_api_keys(settings)
    model_string = settings.model_string()

    logger.info(
        f"LLM Request: model={model_string}, temperature={temperature}, max_tokens={max_tokens}"
    )
    logger.debug(f"Messages: {len(messages)} messages, response_format={response_format}")

    kwargs: dict[str, Any] = {
        "model": model_string,
        "messages": messages,
        "temperature": temperature,
        "max_tokens": max_tokens,
    }
    if response_format:
        kwargs["response_format"] = response_format

    try:
        response = await litellm.acompletion(**kwargs)
    except Exception as e:
        logger.error(f"LLM Error: {type(e).__name__}: {e}")
        raise _transport_error(e) from e

    choice = response.choices[0]
    content = choice.message.content
    finish_reason = getattr(choice, "finish_reason", "unknown")

    logger.info(
        f"LLM Response: finish_reason={finish_reason}, content_length={len(content) if content else 0}"
    )
    if finish_reason == "length":
        logger.warning(f"Response TRUNCATED due to max_tokens limit ({max_tokens}).")

    if not content or not content.strip():
        raise FormatError("No text returned from the model")

    preview = content[:200] + "..." if len(content) > 200 else content
    logger.debug(f"Response preview: {preview}")
    return content


async def stream_completion(
    messages: list[dict[str, str]],
    settings: Settings,
    temperature: float = 0.9,
    max_tokens: int = 4096,
) -> AsyncIterator[str]:
    """
    Stream a completion as text fragments in arrival order.

    Raises:
        TransportError: the call failed before or during the stream
    """
    import litellm

    _configure_api_keys(settings)
    model_string = settings.model_string()
    logger.info(f"LLM Stream Request: model={model_string}, messages={len(messages)}")

    try:
        stream = await litellm.acompletion(
            model=model_string,
            messages=messages,
            temperature=temperature,
            max_tokens=max_tokens,
            stream=True,
        )
        async for chunk in stream:
            choices = getattr(chunk, "choices", None)
            if not choices:
                continue
            delta = getattr(choices[0], "delta", None)
            text = getattr(delta, "content", None) if delta else None
            if text:
                yield text
    except Exception as e:
        logger.error(f"LLM Stream Error: {type(e).__name__}: {e}")
        raise _transport_error(e) from e


def parse_json_response(response: str | None) -> Any:
    """
    Parse a JSON response from the LLM.
    Handles markdown code blocks and other formatting.

    Raises:
        FormatError: the response is empty
        ParseError: no JSON value could be recovered
    """
    if response is None or not response.strip():
        raise FormatError("LLM returned empty response. Please try again.")

    # Remove markdown code blocks if present
    cleaned = response.strip()

    if cleaned.startswith("```json"):
        cleaned = cleaned[7:]
    elif cleaned.startswith("```"):
        cleaned = cleaned[3:]

    if cleaned.endswith("```"):
        cleaned = cleaned[:-3]

    cleaned = cleaned.strip()

    try:
        return json.loads(cleaned)
    except json.JSONDecodeError as e:
        logger.warning(f"Initial JSON parse failed: {e}")

    # Try to extract the outermost JSON object or array from surrounding prose
    json_match = re.search(r"[\[{][\s\S]*[\]}]", cleaned)
    if json_match:
        try:
            return json.loads(json_match.group())
        except json.JSONDecodeError:
            pass

    snippet = cleaned[:200] + "..." if len(cleaned) > 200 else cleaned
    raise ParseError(f"Failed to parse JSON from LLM response. Response preview: {snippet}")
