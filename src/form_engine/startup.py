"""Centralized initialization for form_engine entry points.

Loads a ``.env`` file from the project root once per process so settings
such as ``FORM_ENGINE_CONFIG`` can be provided there.
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

from form_engine.config.settings import clear_settings_cache

logger = logging.getLogger(__name__)


@dataclass
class StartupState:
    """Result of initialization."""

    project_root: Path
    env_loaded: bool = False


_state: Optional[StartupState] = None


def _find_project_root(start_path: Optional[Path] = None) -> Path:
    """Find the nearest directory holding a .env or pyproject.toml."""
    current = (start_path or Path.cwd()).resolve()
    for parent in [current] + list(current.parents):
        if (parent / ".env").is_file() or (parent / "pyproject.toml").is_file():
            return parent
    return current


def _load_env(project_root: Path) -> bool:
    env_path = project_root / ".env"
    if not env_path.is_file():
        logger.debug(f".env not found at {env_path}")
        return False
    load_dotenv(env_path)
    logger.debug(f"Loaded .env from {env_path}")
    return True


def ensure_initialized(start_path: Optional[Path] = None) -> StartupState:
    """Initialize the environment (idempotent).

    Returns:
        Current StartupState.
    """
    global _state
    if _state is not None:
        return _state

    project_root = _find_project_root(start_path)
    env_loaded = _load_env(project_root)
    if env_loaded:
        # FORM_ENGINE_CONFIG may have just been set
        clear_settings_cache()
    _state = StartupState(project_root=project_root, env_loaded=env_loaded)
    return _state


def reset_state() -> None:
    """Forget initialization state (used by tests)."""
    global _state
    _state = None
