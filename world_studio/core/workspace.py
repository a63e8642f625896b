"""
Workspace - state of the create form (idea, style) and its actions.
"""

import logging
from typing import Optional

from world_studio.core.catalog import Catalog, get_catalog
from world_studio.core.enhancer import enhance_prompt
from world_studio.core.errors import EnhancementError, PipelineBusyError
from world_studio.core.generation import GenerationPipeline
from world_studio.core.models import DraftPayload, GenerationStatus, WorldEntry

logger = logging.getLogger(__name__)


class Workspace:
    """Idea and style inputs feeding the generation pipeline."""

    def __init__(self, pipeline: GenerationPipeline, catalog: Optional[Catalog] = None):
        self.pipeline = pipeline
        self.catalog = catalog or get_catalog()
        self.idea = ""
        self.style = self.catalog.default_style
        self.error: str | None = None

    @property
    def status(self) -> GenerationStatus:
        return self.pipeline.status

    @property
    def can_generate(self) -> bool:
        return bool(self.idea.strip()) and not self.status.is_busy

    @property
    def can_enhance(self) -> bool:
        return self.status in (GenerationStatus.IDLE, GenerationStatus.COMPLETED)

    @property
    def can_change_style(self) -> bool:
        return not self.status.is_busy

    def set_style(self, style: str) -> None:
        if not self.catalog.is_valid_style(style):
            raise ValueError(f"Unknown style: {style}")
        if not self.can_change_style:
            raise PipelineBusyError("Style cannot change while a world is being generated")
        self.style = style

    def apply_draft(self, draft: DraftPayload) -> bool:
        """
        Copy a draft into the form.

        The description always replaces the idea. The style is copied only
        when it is one of the known styles and no generation is running.

        Returns:
            True if the style was applied as well
        """
        self.idea = draft.description

        if not self.catalog.is_valid_style(draft.style):
            logger.info(f"Ignoring unknown draft style: {draft.style!r}")
            return False
        if not self.can_change_style:
            logger.info("Draft style not applied while generation is running")
            return False

        self.style = draft.style
        return True

    async def enhance(self) -> bool:
        """
        Replace the idea with an enhanced (or random) version.

        Returns:
            True on success; on failure the idea is unchanged and ``error``
            holds a message for the user
        """
        try:
            self.idea = await enhance_prompt(self.pipeline.provider, self.idea)
        except EnhancementError as e:
            self.error = e.message
            return False

        self.error = None
        return True

    async def generate(self) -> WorldEntry:
        """
        Generate a world from the current idea and style.

        ``error`` follows the pipeline only when a run actually started; a
        rejected request (blank idea, unknown style, busy) leaves it as is.
        """
        try:
            world = await self.pipeline.generate(self.idea, self.style)
        except (ValueError, PipelineBusyError):
            raise
        except Exception:
            self.error = self.pipeline.error
            raise

        self.error = None
        return world
