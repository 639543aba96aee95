import json
import logging
from typing import Any, Dict, FrozenSet, Optional

from verona_voice.log_adapters.abc import LogAdapter

logger = logging.getLogger(__name__)
DEFAULT_LIBRARY_LOGGER_NAME = "verona_voice"
REDACTED_PLACEHOLDER = "[REDACTED]"
MAX_EVENT_DATA_CHARS = 2000
CONSOLE_FORMAT = "%(asctime)s - %(name)s - [%(levelname)s] - %(message)s (%(module)s:%(lineno)d)"


class DefaultLogAdapter(LogAdapter):
    """
    Routes session events to the library logger as one JSON line each.

    On setup it sets the library logger's level and, unless the host already
    attached handlers, adds a console handler so events are visible.
    """
    plugin_id: str = "default_log_adapter_v1"
    description: str = "Configures standard Python logging for the library and logs session events as JSON."

    _library_logger: Optional[logging.Logger] = None
    _redact_keys: FrozenSet[str] = frozenset()

    async def setup(self, config: Dict[str, Any]) -> None:
        cfg = config or {}
        level_name = str(cfg.get("log_level", "INFO")).upper()
        logger_name = cfg.get("library_logger_name", DEFAULT_LIBRARY_LOGGER_NAME)
        library_logger = logging.getLogger(logger_name)

        if cfg.get("add_console_handler_if_no_handlers", True) and not library_logger.handlers:
            handler = logging.StreamHandler()
            handler.setFormatter(logging.Formatter(CONSOLE_FORMAT))
            library_logger.addHandler(handler)
            library_logger.propagate = False
            logger.debug(f"Added console handler to logger '{logger_name}'.")
        library_logger.setLevel(getattr(logging, level_name, logging.INFO))

        self._library_logger = library_logger
        # Transcripts are user speech; hosts may keep them out of logs.
        self._redact_keys = frozenset(str(k) for k in cfg.get("redact_keys", []))
        logger.info(f"{self.plugin_id}: '{logger_name}' at level {level_name}, redacting {sorted(self._redact_keys)}.")

    def _redact(self, value: Any) -> Any:
        if isinstance(value, dict):
            return {k: REDACTED_PLACEHOLDER if k in self._redact_keys else self._redact(v) for k, v in value.items()}
        if isinstance(value, (list, tuple)):
            return [self._redact(v) for v in value]
        return value

    def _render(self, data: Dict[str, Any]) -> str:
        payload = self._redact(data) if self._redact_keys else data
        try:
            rendered = json.dumps(payload, sort_keys=True, default=str)
        except (TypeError, ValueError):
            rendered = str(payload)
        if len(rendered) > MAX_EVENT_DATA_CHARS:
            rendered = rendered[:MAX_EVENT_DATA_CHARS] + "..."
        return rendered

    async def process_event(self, event_type: str, data: Dict[str, Any]) -> None:
        if self._library_logger is None:
            logger.debug(f"{self.plugin_id}: event '{event_type}' before setup; dropped.")
            return
        self._library_logger.info(f"EVENT: {event_type} | DATA: {self._render(data)}")

    async def teardown(self) -> None:
        logger.info(f"{self.plugin_id}: Tearing down.")
        self._library_logger = None
        self._redact_keys = frozenset()
