"""
dialectic - markdown dialect extension engine

Register inline, block and post-render rules on top of a small base
tokenizer and cook dialect text into HTML.
"""

__version__ = "1.0.0"

from .dialect import Dialect
from .hoist import HoistStore
from .log import LOG, state_connectToLogger
from .renderer import render
from .rules import register_standard_rules
from .tokenizer import Tokenizer

__all__ = [
    "Dialect",
    "HoistStore",
    "Tokenizer",
    "render",
    "register_standard_rules",
    "LOG",
    "state_connectToLogger",
    "__version__",
]
