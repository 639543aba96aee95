"""Log adapter plugins: library logging setup and structured session events."""
from .abc import LogAdapter
from .impl.default_adapter import DefaultLogAdapter

__all__ = ["LogAdapter", "DefaultLogAdapter"]
