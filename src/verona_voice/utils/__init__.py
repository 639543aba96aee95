# src/verona_voice/utils/__init__.py
from .json_parser_utils import loads_fenced_json, strip_code_fence

__all__ = ["loads_fenced_json", "strip_code_fence"]
