# src/verona_voice/intents/parser.py
import logging
from typing import Any, Optional

from pydantic import ValidationError

from verona_voice.utils.json_parser_utils import loads_fenced_json

from .types import INTENT_RESPONSE_ADAPTER, INTENT_TAGS, IntentResponse

logger = logging.getLogger(__name__)


class MalformedReplyError(ValueError):
    """The model reply could not be turned into a valid IntentResponse."""
    def __init__(self, message: str, raw_text: Optional[str] = None, errors: Any = None):
        super().__init__(message)
        self.raw_text = raw_text
        self.errors = errors


def parse_intent_reply(text: str) -> IntentResponse:
    """
    Validates a raw model reply and returns the tagged intent.

    The reply is trimmed and a surrounding code fence is removed before JSON
    parsing. The document must be an object with a recognised `intent` tag
    and a non-empty `message`.

    Raises:
        MalformedReplyError: on any parse or schema violation.
    """
    try:
        data = loads_fenced_json(text)
    except ValueError as e:
        raise MalformedReplyError(f"Reply is not valid JSON: {e}", raw_text=text) from e

    if not isinstance(data, dict):
        raise MalformedReplyError(f"Reply JSON is a {type(data).__name__}, expected an object.", raw_text=text)
    tag = data.get("intent")
    if tag not in INTENT_TAGS:
        raise MalformedReplyError(f"Reply has missing or unrecognized intent tag: {tag!r}.", raw_text=text)

    try:
        response = INTENT_RESPONSE_ADAPTER.validate_python(data)
    except ValidationError as e:
        raise MalformedReplyError(f"Reply failed '{tag}' validation: {e.error_count()} error(s).", raw_text=text, errors=e.errors()) from e
    logger.debug(f"Parsed intent reply as '{response.intent}'.")
    return response
