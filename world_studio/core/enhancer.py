"""
Prompt enhancement - polish the user's idea, or invent one when it is blank.
"""

import logging

from world_studio.core.errors import ConfigurationError, EnhancementError, ErrorKind
from world_studio.core.provider import WorldProvider

logger = logging.getLogger(__name__)

DEFAULT_ERROR_MESSAGE = "Could not enhance the idea. Please try again later."


async def enhance_prompt(provider: WorldProvider, current_input: str) -> str:
    """
    Rewrite the current idea, or ask for a random concept when it is blank.

    Args:
        provider: Remote provider
        current_input: Current contents of the idea field

    Returns:
        Replacement text for the idea field

    Raises:
        EnhancementError: the provider failed or returned no text
        ConfigurationError: a credential is missing
    """
    is_random = not current_input.strip()
    logger.info(f"Enhancing prompt (random={is_random}, input_length={len(current_input)})")

    try:
        text = await provider.enhance(current_input, random_mode=is_random)
    except ConfigurationError:
        raise
    except Exception as e:
        logger.error(f"Prompt Enhancement Error: {type(e).__name__}: {e}")
        raise EnhancementError.from_error(e, DEFAULT_ERROR_MESSAGE) from e

    text = (text or "").strip()
    if not text:
        raise EnhancementError("No text returned from enhancement", kind=ErrorKind.FORMAT)
    return text
