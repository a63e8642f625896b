"""
Draft protocol - structured world proposals embedded in architect replies.

Grammar of an embedded draft (at most one is honoured per reply):

    ```json_draft
    {"title": "...", "description": "...", "style": "...", "reasoning": "..."}
    ```

The block may sit anywhere inside otherwise free text. Only the first block
is considered. If its payload is not a JSON object with the four string
fields, the reply is shown unchanged and no draft is offered. When the first
block is honoured, any later well-formed blocks are dropped from the display
text as well, so extracting again from the cleaned text finds nothing.
"""

import json
import logging
import re

from pydantic import ValidationError

from world_studio.core.models import DraftPayload, ParsedMessage

logger = logging.getLogger(__name__)

DRAFT_OPEN = "```json_draft"
DRAFT_CLOSE = "```"

# Non-greedy so the payload ends at the nearest closing fence
DRAFT_PATTERN = re.compile(
    re.escape(DRAFT_OPEN) + r"\s*([\s\S]*?)\s*" + re.escape(DRAFT_CLOSE)
)


def _join_around_block(before: str, after: str) -> str:
    """Glue the text on both sides of a removed block back together."""
    head = before.rstrip()
    tail = after.lstrip()
    if not head or not tail:
        return (head + tail).strip()

    seam = before[len(head):] + after[: len(after) - len(tail)]
    separator = "\n\n" if "\n" in seam else " "
    return f"{head}{separator}{tail}".strip()


def _parse_payload(payload: str) -> DraftPayload:
    return DraftPayload.model_validate(json.loads(payload))


def _strip_extra_drafts(text: str) -> str:
    """Remove every well-formed draft block; malformed ones stay as text."""
    lead = text[: len(text) - len(text.lstrip())]
    text = text.lstrip()
    position = 0
    while True:
        match = DRAFT_PATTERN.search(text, position)
        if not match:
            return lead + text
        try:
            _parse_payload(match.group(1))
        except (json.JSONDecodeError, ValidationError):
            position = match.end()
            continue

        logger.debug("Dropping extra draft block from reply")
        position = len(text[: match.start()].rstrip())
        text = _join_around_block(text[: match.start()], text[match.end():])


def extract_draft(raw_text: str) -> ParsedMessage:
    """
    Separate the human-readable text of a reply from its embedded draft.

    Args:
        raw_text: Accumulated assistant text (may be a partial stream)

    Returns:
        ParsedMessage with the display text and the draft, or the raw text
        unchanged and no draft when there is no well-formed block
    """
    match = DRAFT_PATTERN.search(raw_text)
    if not match:
        return ParsedMessage(clean_text=raw_text)

    try:
        draft = _parse_payload(match.group(1))
    except (json.JSONDecodeError, ValidationError) as e:
        logger.warning(f"Draft parsing failed, showing reply as plain text: {e}")
        return ParsedMessage(clean_text=raw_text)

    after = _strip_extra_drafts(raw_text[match.end():])
    clean_text = _join_around_block(raw_text[: match.start()], after)
    logger.debug(f"Extracted draft: title={draft.title!r}, style={draft.style!r}")
    return ParsedMessage(clean_text=clean_text, draft=draft)
