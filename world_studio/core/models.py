"""
Studio models - Pydantic models for worlds, lore, chat turns and drafts
"""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class GenerationStatus(str, Enum):
    """Status of a generation session."""
    IDLE = "IDLE"
    THINKING = "THINKING"  # Generating lore
    PAINTING = "PAINTING"  # Generating image
    COMPLETED = "COMPLETED"
    ERROR = "ERROR"

    @property
    def is_busy(self) -> bool:
        """Thinking and Painting block new requests and style changes."""
        return self in (GenerationStatus.THINKING, GenerationStatus.PAINTING)


class WorldEntry(BaseModel):
    """A gallery item: title, lore text and an image."""
    id: str
    title: str
    description: str
    image_url: str  # URL or data URI
    author: str
    tags: list[str] = Field(default_factory=list)
    is_ai_generated: bool = False
    likes: int = 0


class Lore(BaseModel):
    """Title, description and image prompt produced from a user idea."""
    model_config = ConfigDict(populate_by_name=True)

    title: str
    description: str
    visual_prompt: str = Field(alias="visualPrompt")


class DraftPayload(BaseModel):
    """World proposal embedded in an architect reply."""
    title: str
    description: str
    style: str
    reasoning: str


class ChatRole(str, Enum):
    USER = "user"
    ASSISTANT = "assistant"


class ChatTurn(BaseModel):
    """One message of the architect conversation."""
    model_config = ConfigDict(frozen=True)

    role: ChatRole
    content: str = ""

    def parsed(self) -> "ParsedMessage":
        """Split the content into display text and an optional draft."""
        from world_studio.core.draft import extract_draft

        if self.role != ChatRole.ASSISTANT:
            return ParsedMessage(clean_text=self.content)
        return extract_draft(self.content)


class ParsedMessage(BaseModel):
    """Display text of an assistant turn plus the draft it carried, if any."""
    clean_text: str
    draft: DraftPayload | None = None


class Suggestion(BaseModel):
    """Follow-up prompt chip for the architect chat."""
    label: str
    prompt: str
