"""
dialectic - markdown dialect extension engine

Custom inline tokens, multi-line blocks and post-render tree transforms on
top of a small base tokenizer, with raw content protected through sanitizing.
"""

__version__ = "1.0.0"

from .lib import Dialect, HoistStore, LOG, register_standard_rules, state_connectToLogger

__all__ = ["Dialect", "HoistStore", "register_standard_rules", "LOG", "state_connectToLogger", "__version__"]
