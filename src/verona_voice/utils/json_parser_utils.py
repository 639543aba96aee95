# src/verona_voice/utils/json_parser_utils.py
"""
Utility functions for reading JSON documents out of language-model replies.
"""
import json
import logging
import re
from typing import Any

logger = logging.getLogger(__name__)

# Whole-reply fence only: ```lang\n ... \n```
_FENCE_RE = re.compile(r"^```(\w*)?\s*\n?(.*?)\n?\s*```$", re.DOTALL)


def strip_code_fence(text: str) -> str:
    """
    Trims `text` and removes one markdown code fence wrapping the whole reply.

    The fence may carry a language tag (```json). Fences that do not enclose
    the entire reply are left alone, so prose around a code block is not
    silently discarded.
    """
    stripped = (text or "").strip()
    match = _FENCE_RE.match(stripped)
    if match:
        logger.debug(f"Removed code fence (language tag: '{match.group(1) or ''}') from model reply.")
        return match.group(2).strip()
    return stripped


def loads_fenced_json(text: str) -> Any:
    """
    Parses a model reply as JSON after `strip_code_fence`.

    Raises:
        ValueError: the reply is empty or not a JSON document
            (json.JSONDecodeError is a ValueError subclass).
    """
    body = strip_code_fence(text)
    if not body:
        raise ValueError("Model reply is empty.")
    return json.loads(body)
