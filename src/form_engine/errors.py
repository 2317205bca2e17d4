"""Error taxonomy for definition loading.

Every failure that concerns a single definition is expressed as a
``FormEngineError`` subclass carrying a stable ``LoadErrorCode``. The loader
converts these into inert error units; they are never raised to the host
from ``load_one`` / ``load_batch``.
"""

from enum import Enum
from typing import Optional


class LoadErrorCode(str, Enum):
    """Stable codes for definition load failures."""

    COMPILE_ERROR = "COMPILE_ERROR"  # Injected compiler rejected the text
    MISSING_ENTRY_POINT = "MISSING_ENTRY_POINT"  # No render entry point exported
    EVALUATION_ERROR = "EVALUATION_ERROR"  # Exception while executing the unit


class FormEngineError(Exception):
    """Base class for definition load failures."""

    code: LoadErrorCode = LoadErrorCode.EVALUATION_ERROR

    def __init__(self, message: str, definition: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.definition = definition

    def to_dict(self) -> dict:
        return {
            "code": self.code.value,
            "definition": self.definition,
            "message": self.message,
        }


class CompileError(FormEngineError):
    """Raised when definition text cannot be compiled."""

    code = LoadErrorCode.COMPILE_ERROR


class MissingEntryPointError(FormEngineError):
    """Raised when a compiled unit exports no usable render entry point."""

    code = LoadErrorCode.MISSING_ENTRY_POINT


class EvaluationError(FormEngineError):
    """Raised when executing a compiled unit fails."""

    code = LoadErrorCode.EVALUATION_ERROR

    def __init__(self, message: str, definition: Optional[str] = None, cause: Optional[BaseException] = None):
        super().__init__(message, definition)
        self.cause = cause


class SourceDiscoveryError(Exception):
    """Raised when definition sources cannot be read from disk."""
    pass


class SettingsError(Exception):
    """Raised when engine settings cannot be loaded or are invalid."""
    pass
