"""
Image Generator - Uses Google Gemini to paint a world from its visual prompt.

Images are returned as data URIs so they can be kept in memory with the
gallery entry; nothing is written to disk.
"""

import asyncio
import base64
import logging
import random

from world_studio.core.config import Settings
from world_studio.core.errors import FormatError, TransportError

logger = logging.getLogger(__name__)

# Retry configuration
MAX_RETRIES = 3
INITIAL_RETRY_DELAY = 3.0
MAX_RETRY_DELAY = 30.0
REQUEST_TIMEOUT = 120.0


def to_data_uri(data: bytes | str, mime_type: str | None = None) -> str:
    """Encode inline image data as a data URI."""
    if isinstance(data, bytes):
        data = base64.b64encode(data).decode("ascii")
    return f"data:{mime_type or 'image/png'};base64,{data}"


def _find_inline_image(response) -> str | None:
    """Return the first inline image part of a response as a data URI."""
    candidates = getattr(response, "candidates", None) or []
    if not candidates:
        return None
    content = getattr(candidates[0], "content", None)
    for part in getattr(content, "parts", None) or []:
        inline_data = getattr(part, "inline_data", None)
        if inline_data is not None and inline_data.data:
            return to_data_uri(inline_data.data, inline_data.mime_type)
    return None


def _retry_delay(attempt: int) -> float:
    return min(INITIAL_RETRY_DELAY * (2 ** attempt) + random.uniform(0, 1), MAX_RETRY_DELAY)


class ImageGenerator:
    """Generate world images with the Gemini image model."""

    def __init__(self, settings: Settings, client=None):
        self.settings = settings
        self._client = client

    @property
    def client(self):
        if self._client is None:
            from google import genai

            self._client = genai.Client(api_key=self.settings.gemini_api_key)
        return self._client

    def _build_config(self, aspect_ratio: str):
        from google.genai import types

        return types.GenerateContentConfig(
            response_modalities=["IMAGE"],
            image_config=types.ImageConfig(aspect_ratio=aspect_ratio),
        )

    async def generate(self, visual_prompt: str, aspect_ratio: str | None = None) -> str:
        """
        Generate an image for a visual prompt.

        Args:
            visual_prompt: English image-generation instruction
            aspect_ratio: Aspect ratio hint, defaults to the configured one

        Returns:
            The image as a data URI

        Raises:
            TransportError: the API failed (after retries for retryable errors)
            FormatError: the response carried no image
        """
        aspect_ratio = aspect_ratio or self.settings.aspect_ratio
        config = self._build_config(aspect_ratio)

        logger.info(
            f"Image Request: model={self.settings.image_model}, aspect_ratio={aspect_ratio}"
        )
        logger.debug(f"Visual prompt: {visual_prompt[:200]}")

        for attempt in range(MAX_RETRIES):
            try:
                response = await asyncio.wait_for(
                    asyncio.to_thread(
                        self.client.models.generate_content,
                        model=self.settings.image_model,
                        contents=visual_prompt,
                        config=config,
                    ),
                    timeout=REQUEST_TIMEOUT,
                )
            except asyncio.TimeoutError:
                if attempt < MAX_RETRIES - 1:
                    await asyncio.sleep(_retry_delay(attempt))
                    continue
                raise TransportError("Image API timeout", is_retryable=True)
            except Exception as e:
                error_str = str(e)
                is_retryable = any(code in error_str for code in ["503", "429", "UNAVAILABLE"])
                if is_retryable and attempt < MAX_RETRIES - 1:
                    logger.warning(f"Image API busy (attempt {attempt + 1}), retrying: {error_str}")
                    await asyncio.sleep(_retry_delay(attempt))
                    continue
                logger.error(f"Image Generation Error: {type(e).__name__}: {e}")
                raise TransportError(f"Image API error: {error_str}", is_retryable=is_retryable) from e

            image_url = _find_inline_image(response)
            if image_url:
                logger.info(f"Image generated ({len(image_url)} chars)")
                return image_url

            finish_reason = None
            if getattr(response, "candidates", None):
                finish_reason = getattr(response.candidates[0], "finish_reason", None)
            raise FormatError(f"No image generated (finish_reason={finish_reason})")

        raise TransportError("All retry attempts failed", is_retryable=True)
