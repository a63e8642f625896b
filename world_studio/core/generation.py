"""
Generation Pipeline - idea + style -> lore -> image -> WorldEntry.

Status moves strictly Idle -> Thinking -> Painting -> Completed, or to Error
from Thinking / Painting. The image call only starts after the lore call
succeeded. A second request while Thinking or Painting is rejected without
touching the in-flight status.
"""

import logging
import uuid
from typing import Callable, Optional

from world_studio.core.catalog import Catalog, get_catalog
from world_studio.core.errors import (
    ConfigurationError,
    FormatError,
    GenerationError,
    PipelineBusyError,
)
from world_studio.core.models import GenerationStatus, WorldEntry
from world_studio.core.provider import WorldProvider

logger = logging.getLogger(__name__)

DEFAULT_ERROR_MESSAGE = "Failed to create world. Please try again."

StatusListener = Callable[[GenerationStatus], None]


def _new_world_id() -> str:
    return uuid.uuid4().hex


class GenerationPipeline:
    """Two-stage remote generation with a single observable status."""

    def __init__(
        self,
        provider: WorldProvider,
        catalog: Optional[Catalog] = None,
        id_factory: Callable[[], str] = _new_world_id,
    ):
        self.provider = provider
        self.catalog = catalog or get_catalog()
        self.id_factory = id_factory

        self.status = GenerationStatus.IDLE
        self.error: str | None = None
        self.result: WorldEntry | None = None
        self._listeners: list[StatusListener] = []

    @property
    def is_busy(self) -> bool:
        return self.status.is_busy

    def add_listener(self, callback: StatusListener) -> None:
        """Add a listener for status changes."""
        self._listeners.append(callback)

    def remove_listener(self, callback: StatusListener) -> None:
        """Remove a listener."""
        if callback in self._listeners:
            self._listeners.remove(callback)

    def _set_status(self, status: GenerationStatus) -> None:
        logger.info(f"Generation status: {self.status.value} -> {status.value}")
        self.status = status
        for listener in self._listeners:
            try:
                listener(status)
            except Exception as e:
                logger.error(f"Status listener error: {e}")

    def _fail(self, error: Exception) -> GenerationError:
        wrapped = GenerationError.from_error(error, DEFAULT_ERROR_MESSAGE)
        self.error = wrapped.message
        self._set_status(GenerationStatus.ERROR)
        return wrapped

    async def generate(self, idea: str, style: str) -> WorldEntry:
        """
        Run lore generation then image generation.

        Args:
            idea: Free-text idea (trimmed; must not be blank)
            style: One of the catalog styles

        Returns:
            The new WorldEntry (also kept in ``result``)

        Raises:
            ValueError: blank idea or unknown style (status untouched)
            PipelineBusyError: a generation is already running (status untouched)
            GenerationError: lore or image generation failed (status is Error)
            ConfigurationError: a credential is missing (status is Error)
        """
        idea = idea.strip()
        if not idea:
            raise ValueError("Idea must not be empty")
        if not self.catalog.is_valid_style(style):
            raise ValueError(f"Unknown style: {style}")
        if self.is_busy:
            raise PipelineBusyError(f"Generation already in progress ({self.status.value})")

        self.error = None
        self.result = None
        self._set_status(GenerationStatus.THINKING)

        try:
            lore = await self.provider.generate_lore(idea, style)
            if not lore.visual_prompt.strip():
                raise FormatError("Lore has no visual prompt")
        except ConfigurationError as e:
            self._fail(e)
            raise
        except Exception as e:
            logger.error(f"Lore Generation Error: {type(e).__name__}: {e}")
            raise self._fail(e) from e

        self._set_status(GenerationStatus.PAINTING)

        try:
            image_url = await self.provider.generate_image(lore.visual_prompt)
            if not image_url:
                raise FormatError("No image generated")
        except ConfigurationError as e:
            self._fail(e)
            raise
        except Exception as e:
            logger.error(f"Image Generation Error: {type(e).__name__}: {e}")
            raise self._fail(e) from e

        entry = WorldEntry(
            id=self.id_factory(),
            title=lore.title,
            description=lore.description,
            image_url=image_url,
            author=self.catalog.self_author,
            tags=[style, self.catalog.ai_tag],
            is_ai_generated=True,
            likes=0,
        )
        self.result = entry
        self._set_status(GenerationStatus.COMPLETED)
        logger.info(f"World created: id={entry.id}, title={entry.title!r}")
        return entry
