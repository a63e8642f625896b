"""
Architect Conversation - streaming chat that helps the user refine a world.

One chat session lives for one editing session and is reused for every turn.
``ArchitectConversation.send`` does not touch any shared message list. It
yields TurnEvents, and the presentation layer applies them to its own
Transcript:

    USER       -> append the user turn
    STARTED    -> append an empty placeholder reply
    UPDATED    -> replace the placeholder with the latest snapshot
    COMPLETED  -> replace the placeholder with the final reply
    FAILED     -> show the "lost focus" turn; the session stays usable

Replies may carry an embedded draft; ``ChatTurn.parsed()`` extracts it from
whatever text has accumulated so far.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import AsyncIterator, Optional

from world_studio.core.catalog import Catalog, get_catalog
from world_studio.core.errors import ConfigurationError, ConversationBusyError
from world_studio.core.models import ChatRole, ChatTurn
from world_studio.core.provider import ChatSession, WorldProvider

logger = logging.getLogger(__name__)


class TurnEventKind(Enum):
    USER = "user"
    STARTED = "started"
    UPDATED = "updated"
    COMPLETED = "completed"
    FAILED = "failed"


@dataclass(frozen=True)
class TurnEvent:
    """One step of a send, carrying the turn to publish."""
    kind: TurnEventKind
    turn: ChatTurn


@dataclass
class ReplyAccumulator:
    """Collects the fragments of one streaming reply."""
    fragments: list[str] = field(default_factory=list)

    def add(self, fragment: str) -> None:
        self.fragments.append(fragment)

    @property
    def text(self) -> str:
        return "".join(self.fragments)

    def snapshot(self) -> ChatTurn:
        return ChatTurn(role=ChatRole.ASSISTANT, content=self.text)


class ArchitectConversation:
    """Turn-by-turn conversation with the World Architect."""

    def __init__(self, provider: WorldProvider, catalog: Optional[Catalog] = None):
        self.provider = provider
        self.catalog = catalog or get_catalog()
        self.session: ChatSession = provider.create_chat_session()
        self._sending = False

    @property
    def is_sending(self) -> bool:
        return self._sending

    def greeting(self) -> ChatTurn:
        """Opening assistant turn shown before the user says anything."""
        return ChatTurn(role=ChatRole.ASSISTANT, content=self.catalog.architect_greeting)

    def failure_turn(self) -> ChatTurn:
        return ChatTurn(role=ChatRole.ASSISTANT, content=self.catalog.architect_failure)

    def reset(self) -> None:
        """Start a fresh draft conversation with a new session."""
        if self._sending:
            raise ConversationBusyError("Cannot reset while a reply is streaming")
        self.session = self.provider.create_chat_session()
        logger.info("Architect session reset")

    async def send(self, text: str) -> AsyncIterator[TurnEvent]:
        """
        Send a user message and stream the reply as TurnEvents.

        Args:
            text: User message (must not be blank)

        Yields:
            USER, STARTED, then UPDATED per fragment and COMPLETED, or
            FAILED if the stream broke

        Raises:
            ValueError: blank message
            ConversationBusyError: the previous reply is still streaming
            ConfigurationError: a credential is missing
        """
        if not text.strip():
            raise ValueError("Message must not be empty")
        if self._sending:
            raise ConversationBusyError("Previous reply is still streaming")

        self._sending = True
        try:
            yield TurnEvent(TurnEventKind.USER, ChatTurn(role=ChatRole.USER, content=text))

            accumulator = ReplyAccumulator()
            yield TurnEvent(TurnEventKind.STARTED, accumulator.snapshot())

            try:
                async for fragment in self.session.send_stream(text):
                    if not fragment:
                        continue
                    accumulator.add(fragment)
                    yield TurnEvent(TurnEventKind.UPDATED, accumulator.snapshot())
            except ConfigurationError:
                raise
            except Exception as e:
                logger.error(f"Architect reply failed after {len(accumulator.text)} chars: {e}")
                yield TurnEvent(TurnEventKind.FAILED, self.failure_turn())
                return

            logger.info(f"Architect reply complete ({len(accumulator.text)} chars)")
            yield TurnEvent(TurnEventKind.COMPLETED, accumulator.snapshot())
        finally:
            self._sending = False


class Transcript:
    """Ordered, append-only list of chat turns owned by the presentation layer."""

    def __init__(self, turns: Optional[list[ChatTurn]] = None):
        self._turns: list[ChatTurn] = list(turns or [])
        self._pending: Optional[int] = None

    def __iter__(self):
        return iter(self._turns)

    def __len__(self) -> int:
        return len(self._turns)

    def __getitem__(self, index: int) -> ChatTurn:
        return self._turns[index]

    @property
    def turns(self) -> tuple[ChatTurn, ...]:
        return tuple(self._turns)

    @property
    def is_streaming(self) -> bool:
        return self._pending is not None

    def append(self, turn: ChatTurn) -> None:
        self._turns.append(turn)

    def apply(self, event: TurnEvent) -> None:
        """Publish a TurnEvent into the transcript."""
        if event.kind == TurnEventKind.USER:
            self._turns.append(event.turn)
        elif event.kind == TurnEventKind.STARTED:
            self._turns.append(event.turn)
            self._pending = len(self._turns) - 1
        elif event.kind in (TurnEventKind.UPDATED, TurnEventKind.COMPLETED):
            if self._pending is None:
                self._turns.append(event.turn)
                self._pending = len(self._turns) - 1
            else:
                self._turns[self._pending] = event.turn
            if event.kind == TurnEventKind.COMPLETED:
                self._pending = None
        elif event.kind == TurnEventKind.FAILED:
            if self._pending is not None and not self._turns[self._pending].content:
                self._turns[self._pending] = event.turn
            else:
                self._turns.append(event.turn)
            self._pending = None
