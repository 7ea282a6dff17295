"""CLI command implementations for splitkeeper.

This package contains the implementation of each CLI command,
separated from the CLI framework setup in cli.py.
"""

from .format import format_time
from .init import init
from .new import new
from .replay import replay
from .show import comparisons_cmd, history, show
from .validate import validate

__all__ = [
    "comparisons_cmd",
    "format_time",
    "history",
    "init",
    "new",
    "replay",
    "show",
    "validate",
]
