"""
Models package for dialectic

Contains data structures and type definitions for the cook pipeline.
"""

from .state import ProgramState, pipeline
from .chunk import Chunk, chunks_join, lines_count
from .events import ParseEvent
from .rules import BetweenRule, BlockRule, RegexpRule, RuleError
from .tree import RAW_TAG, Node, node_is, raw_is, raw_make

__all__ = [
    "ProgramState",
    "pipeline",
    "Chunk",
    "chunks_join",
    "lines_count",
    "ParseEvent",
    "BetweenRule",
    "BlockRule",
    "RegexpRule",
    "RuleError",
    "RAW_TAG",
    "Node",
    "node_is",
    "raw_is",
    "raw_make",
]
