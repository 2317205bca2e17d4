"""Diagnostics sinks for unresolved names and load errors.

A sink is any callable accepting one human-readable string. The engine
only writes to it; it never reads back.
"""

import logging
from typing import Callable, List

logger = logging.getLogger(__name__)

DiagnosticsSink = Callable[[str], None]

MISSING_PREFIX = "missing: "
LOAD_ERROR_PREFIX = "load error: "


def format_missing(name: str) -> str:
    return f"{MISSING_PREFIX}{name}"


def format_load_error(definition: str, message: str) -> str:
    return f"{LOAD_ERROR_PREFIX}{definition}: {message}"


class LoggingDiagnostics:
    """Default sink: forward every message to the module logger as a warning."""

    def __init__(self, log: logging.Logger | None = None):
        self._logger = log or logger

    def __call__(self, message: str) -> None:
        self._logger.warning(message)


class DiagnosticsCollector:
    """Sink that records messages in order."""

    def __init__(self) -> None:
        self.messages: List[str] = []

    def __call__(self, message: str) -> None:
        self.messages.append(message)

    @property
    def missing_names(self) -> List[str]:
        """Names reported as unresolved, in report order."""
        return [
            m[len(MISSING_PREFIX):] for m in self.messages if m.startswith(MISSING_PREFIX)
        ]

    @property
    def load_errors(self) -> List[str]:
        return [m for m in self.messages if m.startswith(LOAD_ERROR_PREFIX)]

    def replay(self, sink: DiagnosticsSink) -> None:
        """Forward recorded messages to another sink."""
        for message in self.messages:
            sink(message)

    def clear(self) -> None:
        self.messages.clear()

    def __len__(self) -> int:
        return len(self.messages)
