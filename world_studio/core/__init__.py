"""
Studio core: world generation, the architect conversation and its draft
protocol, suggestions, and the in-memory gallery.

Nothing in here imports the TUI.
"""

from world_studio.core.architect import (
    ArchitectConversation,
    ReplyAccumulator,
    Transcript,
    TurnEvent,
    TurnEventKind,
)
from world_studio.core.draft import extract_draft
from world_studio.core.gallery import Gallery
from world_studio.core.generation import GenerationPipeline
from world_studio.core.models import (
    ChatRole,
    ChatTurn,
    DraftPayload,
    GenerationStatus,
    Lore,
    ParsedMessage,
    Suggestion,
    WorldEntry,
)
from world_studio.core.suggestions import SuggestionRefresher, fetch_suggestions
from world_studio.core.workspace import Workspace

__all__ = [
    "ArchitectConversation",
    "ReplyAccumulator",
    "Transcript",
    "TurnEvent",
    "TurnEventKind",
    "extract_draft",
    "Gallery",
    "GenerationPipeline",
    "ChatRole",
    "ChatTurn",
    "DraftPayload",
    "GenerationStatus",
    "Lore",
    "ParsedMessage",
    "Suggestion",
    "WorldEntry",
    "SuggestionRefresher",
    "fetch_suggestions",
    "Workspace",
]
