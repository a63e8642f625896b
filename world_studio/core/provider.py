"""
Provider interfaces and the LiteLLM/Gemini implementation.

The studio core talks to the generative-AI service only through the
WorldProvider and ChatSession protocols, so tests can swap in scripted
doubles.

Component Flow:
    idea + style -> generate_lore -> Lore.visual_prompt -> generate_image
    chat text    -> ChatSession.send_stream -> text fragments
    reply text   -> suggest -> [Suggestion, ...]
"""

from __future__ import annotations

import logging
from typing import AsyncIterator, Protocol, runtime_checkable

from pydantic import ValidationError

from world_studio.core.catalog import Catalog, get_catalog
from world_studio.core.config import Settings, load_settings
from world_studio.core.errors import FormatError, ParseError
from world_studio.core.image_generator import ImageGenerator
from world_studio.core.llm_client import get_completion, parse_json_response, stream_completion
from world_studio.core.models import Lore, Suggestion
from world_studio.core.prompt_loader import PromptLoader, get_loader

logger = logging.getLogger(__name__)


@runtime_checkable
class ChatSession(Protocol):
    """Stateful conversation handle; keeps earlier turns as context."""

    def send_stream(self, text: str) -> AsyncIterator[str]:
        """Send a user message and yield the reply as text fragments."""
        ...


@runtime_checkable
class WorldProvider(Protocol):
    """Remote generative-AI operations used by the studio."""

    async def generate_lore(self, idea: str, style: str) -> Lore:
        """Expand an idea into title, description and visual prompt."""
        ...

    async def generate_image(self, visual_prompt: str, aspect_ratio: str | None = None) -> str:
        """Paint the visual prompt; returns an image URI."""
        ...

    async def enhance(self, text: str, random_mode: bool) -> str:
        """Rewrite ``text``, or invent a fresh concept in random mode."""
        ...

    def create_chat_session(self) -> ChatSession:
        """Start a conversation bound to the architect instruction."""
        ...

    async def suggest(self, context: str) -> list[Suggestion]:
        """Propose follow-up directions for the given reply text."""
        ...


class LiteLLMChatSession:
    """
    Chat session kept client-side: LiteLLM is stateless, so the session
    resends the system instruction and every committed turn.

    A turn is committed only after its reply streamed to the end. A failed
    stream leaves the history as it was.
    """

    def __init__(self, settings: Settings, system_instruction: str):
        self.settings = settings
        self.history: list[dict[str, str]] = [
            {"role": "system", "content": system_instruction}
        ]

    async def send_stream(self, text: str) -> AsyncIterator[str]:
        messages = self.history + [{"role": "user", "content": text}]
        reply = ""
        async for fragment in stream_completion(messages, self.settings):
            reply += fragment
            yield fragment

        self.history.append({"role": "user", "content": text})
        self.history.append({"role": "assistant", "content": reply})
        logger.debug(f"Chat turn committed, history length={len(self.history)}")


class StudioProvider:
    """WorldProvider backed by LiteLLM (text) and google-genai (images)."""

    def __init__(
        self,
        settings: Settings | None = None,
        catalog: Catalog | None = None,
        prompts: PromptLoader | None = None,
        image_generator: ImageGenerator | None = None,
    ):
        self.settings = settings or load_settings()
        # Missing credentials fail here, before any remote call
        self.settings.require_api_key()
        self.catalog = catalog or get_catalog()
        self.prompts = prompts or get_loader()
        self.image_generator = image_generator or ImageGenerator(self.settings)
        logger.info(
            f"StudioProvider initialized: model={self.settings.model_string()}, "
            f"image_model={self.settings.image_model}"
        )

    async def generate_lore(self, idea: str, style: str) -> Lore:
        system_message = self.prompts.render(
            "lore", "system_message.txt", language=self.settings.language
        )
        user_prompt = self.prompts.render("lore", "user_prompt.txt", idea=idea, style=style)

        response = await get_completion(
            [
                {"role": "system", "content": system_message},
                {"role": "user", "content": user_prompt},
            ],
            self.settings,
            response_format={"type": "json_object"},
        )
        parsed = parse_json_response(response)
        if not isinstance(parsed, dict):
            raise FormatError("Lore response is not a JSON object")

        try:
            lore = Lore.model_validate(parsed)
        except ValidationError as e:
            raise FormatError(f"Lore response missing fields: {e.error_count()} error(s)") from e

        logger.info(f"Lore generated: title={lore.title!r}")
        return lore

    async def generate_image(self, visual_prompt: str, aspect_ratio: str | None = None) -> str:
        return await self.image_generator.generate(visual_prompt, aspect_ratio)

    async def enhance(self, text: str, random_mode: bool) -> str:
        language = self.settings.language
        if random_mode:
            system_message = self.prompts.render("enhance", "random_system.txt", language=language)
            user_content = self.prompts.render("enhance", "random_request.txt")
        else:
            system_message = self.prompts.render("enhance", "rewrite_system.txt", language=language)
            user_content = text

        response = await get_completion(
            [
                {"role": "system", "content": system_message},
                {"role": "user", "content": user_content},
            ],
            self.settings,
            max_tokens=512,
        )
        return response.strip()

    def create_chat_session(self) -> LiteLLMChatSession:
        instruction = self.prompts.render(
            "architect",
            "system_message.txt",
            language=self.settings.language,
            styles=", ".join(self.catalog.styles),
        )
        return LiteLLMChatSession(self.settings, instruction)

    async def suggest(self, context: str) -> list[Suggestion]:
        prompt = self.prompts.render(
            "suggestions", "followup_prompt.txt", context=context, language=self.settings.language
        )
        response = await get_completion(
            [{"role": "user", "content": prompt}],
            self.settings,
            temperature=0.7,
            max_tokens=512,
            response_format={"type": "json_object"},
        )
        return parse_suggestions(parse_json_response(response))


def parse_suggestions(data) -> list[Suggestion]:
    """
    Validate a suggestion payload.

    JSON mode sometimes wraps the array in an object, e.g.
    {"suggestions": [...]}; a single array value is unwrapped.

    Raises:
        ParseError: the payload is not a list of {label, prompt} objects
    """
    if isinstance(data, dict):
        arrays = [value for value in data.values() if isinstance(value, list)]
        if len(arrays) != 1:
            raise ParseError("Suggestion response is not a JSON array")
        data = arrays[0]

    if not isinstance(data, list):
        raise ParseError("Suggestion response is not a JSON array")

    try:
        return [Suggestion.model_validate(item) for item in data]
    except ValidationError as e:
        raise ParseError(f"Malformed suggestion: {e.error_count()} error(s)") from e
