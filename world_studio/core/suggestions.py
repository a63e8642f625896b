"""
Suggestion Refresher - follow-up prompt chips for the architect chat.

Never raises: an empty context gives the starter list without a remote call,
and any failure gives the fallback list.
"""

import logging
from typing import Optional

from world_studio.core.catalog import Catalog, get_catalog
from world_studio.core.errors import FormatError
from world_studio.core.models import Suggestion
from world_studio.core.provider import WorldProvider

logger = logging.getLogger(__name__)

MAX_SUGGESTIONS = 3


async def fetch_suggestions(
    provider: WorldProvider,
    context: str,
    catalog: Optional[Catalog] = None,
) -> list[Suggestion]:
    """
    Get up to three follow-up suggestions for the latest assistant text.

    Args:
        provider: Remote provider
        context: Latest assistant reply, or '' at session start
        catalog: Source of the static lists

    Returns:
        Suggestions in display order
    """
    catalog = catalog or get_catalog()

    if not context.strip():
        return list(catalog.starter_suggestions)

    try:
        suggestions = await provider.suggest(context)
        if not suggestions:
            raise FormatError("Empty suggestion list")
    except Exception as e:
        logger.warning(f"Suggestion refresh failed, using fallback list: {type(e).__name__}: {e}")
        return list(catalog.fallback_suggestions)

    return list(suggestions[:MAX_SUGGESTIONS])


class SuggestionRefresher:
    """
    Keeps the displayed suggestion list current.

    Each refresh takes a sequence number; a result that arrives after a newer
    refresh was started is dropped, so a slow old request cannot overwrite a
    faster new one.
    """

    def __init__(self, provider: WorldProvider, catalog: Optional[Catalog] = None):
        self.provider = provider
        self.catalog = catalog or get_catalog()
        self.current: list[Suggestion] = []
        self._sequence = 0

    async def refresh(self, context: str) -> Optional[list[Suggestion]]:
        """
        Fetch suggestions for ``context`` and publish them if still current.

        Returns:
            The new list, or None when the result was stale and dropped
        """
        self._sequence += 1
        sequence = self._sequence

        suggestions = await fetch_suggestions(self.provider, context, self.catalog)

        if sequence != self._sequence:
            logger.debug(f"Dropping stale suggestions #{sequence} (latest #{self._sequence})")
            return None

        self.current = suggestions
        return suggestions
