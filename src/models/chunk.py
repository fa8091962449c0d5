"""
Block-matcher chunk model

The tokenizer splits source text on blank lines; each piece travels through
the block handlers as a Chunk. Handlers may push new chunks onto the front
of the remaining queue (a collections.deque) or consume from it.
"""

from dataclasses import dataclass
from typing import Sequence


@dataclass
class Chunk:
    """
    A line-numbered segment of the unprocessed input stream

    Attributes:
        text: Segment text (no surrounding blank lines)
        line_number: 1-based source line where the segment starts
        trailing: Separator that followed the segment in the source
                  (e.g., "\\n\\n"), empty for synthesized chunks

    Example:
        For source "one\\n\\ntwo":
        [Chunk("one", 1, "\\n\\n"), Chunk("two", 3, "")]
    """
    text: str
    line_number: int = 1
    trailing: str = ""

    def __str__(self) -> str:
        return self.text


def lines_count(text: str) -> int:
    """Number of terminated lines in text"""
    return text.count("\n")


def chunks_join(chunks: Sequence[Chunk]) -> str:
    """
    Reassemble captured chunks with the separators they had in the source.

    Example:
        chunks_join([Chunk("a", 1, "\\n\\n\\n"), Chunk("b", 4)]) -> "a\\n\\n\\nb"
    """
    if not chunks:
        return ""
    return "".join(chunk.text + chunk.trailing for chunk in chunks[:-1]) + chunks[-1].text
