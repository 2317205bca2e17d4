"""Entry point for ``python -m form_engine.cli``."""

from form_engine.cli import app
from form_engine.cli._common import setup_signal_handlers

setup_signal_handlers()
app()
