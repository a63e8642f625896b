"""
Error types shared by the studio core.

Provider adapters raise ConfigurationError / TransportError / FormatError /
ParseError. The generation pipeline and the enhancer wrap those into
GenerationError / EnhancementError so the UI has one thing to catch per flow.
"""

from enum import Enum


class ErrorKind(str, Enum):
    """Category of a provider-side failure."""
    CONFIGURATION = "configuration"
    TRANSPORT = "transport"
    FORMAT = "format"
    PARSE = "parse"


class StudioError(Exception):
    """Base class for all studio errors."""

    kind: ErrorKind | None = None

    def __init__(self, message: str = ""):
        super().__init__(message)
        self.message = message


class ConfigurationError(StudioError):
    """A provider credential or setting is missing. Not recoverable."""

    kind = ErrorKind.CONFIGURATION


class TransportError(StudioError):
    """Network or provider failure."""

    kind = ErrorKind.TRANSPORT

    def __init__(self, message: str = "", is_retryable: bool = False):
        super().__init__(message)
        self.is_retryable = is_retryable


class FormatError(StudioError):
    """Response is missing the expected text, JSON fields or image data."""

    kind = ErrorKind.FORMAT


class ParseError(StudioError):
    """Response text could not be parsed into the expected structure."""

    kind = ErrorKind.PARSE


class _WrappedError(StudioError):
    """Flow-level error that keeps the kind of the underlying failure."""

    def __init__(self, message: str = "", kind: ErrorKind | None = None):
        super().__init__(message)
        self.kind = kind

    @classmethod
    def from_error(cls, error: Exception, default_message: str):
        """Wrap ``error``, using ``default_message`` when it carries none."""
        message = getattr(error, "message", "") or str(error) or default_message
        kind = getattr(error, "kind", None) or ErrorKind.TRANSPORT
        return cls(message, kind=kind)


class GenerationError(_WrappedError):
    """Lore or image generation failed."""


class EnhancementError(_WrappedError):
    """Prompt enhancement failed."""


class PipelineBusyError(StudioError):
    """A generation request arrived while another one is in flight."""


class ConversationBusyError(StudioError):
    """A chat message was sent while the previous reply is still streaming."""
