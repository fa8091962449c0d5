"""
Block rule registry and the multi-chunk matcher

Block rules claim chunks of the input stream before they become paragraphs.
The replace() builder handles blocks delimited by a start pattern and a
literal stop marker that may be several chunks apart, e.g.

    [quote]
    Outer

    [quote]Inner[/quote]

    still outer
    [/quote]

Same-named blocks nest: every start marker seen before a stop marker raises
a nesting counter that the next stop marker lowers again. Only a stop
marker met at nesting 0 terminates the block.
"""

from typing import Any, Deque, List, Optional, Sequence, Tuple, TYPE_CHECKING

from ..config import AppSettings, appsettings
from ..models.chunk import Chunk, lines_count
from ..models.rules import BlockRule
from .log import LOG
from .tokenizer import BlockHandler

if TYPE_CHECKING:
    from .dialect import Dialect


def offsets_find(text: str, token: str) -> List[int]:
    """Ascending offsets of every non-overlapping occurrence of token"""
    offsets: List[int] = []
    pos = text.find(token)
    while pos != -1:
        offsets.append(pos)
        pos = text.find(token, pos + len(token))
    return offsets


def stop_findTerminating(
    start_offsets: Sequence[int], stop_offsets: Sequence[int], nesting: int = 0
) -> Tuple[Optional[int], int]:
    """
    Walk start and stop offsets of one chunk in lockstep.

    A start preceding the next stop opens a nested block; a stop closes the
    innermost open block, or terminates the current block when nothing is
    open.

    Args:
        start_offsets: Ascending offsets of start markers in the chunk
        stop_offsets: Ascending offsets of stop markers in the chunk
        nesting: Blocks left open by earlier chunks

    Returns:
        (index into stop_offsets of the terminating stop, nesting) when
        found, otherwise (None, nesting carried into the next chunk,
        including starts not closed in this chunk)

    Example:
        stop_findTerminating([0], [5, 9])    -> (1, 0)
        stop_findTerminating([0, 3], [9])    -> (None, 1)
        stop_findTerminating([], [2], 1)     -> (None, 0)
    """
    sp = ep = 0
    while ep < len(stop_offsets):
        if sp < len(start_offsets) and start_offsets[sp] < stop_offsets[ep]:
            sp += 1
            nesting += 1
        elif nesting > 0:
            ep += 1
            nesting -= 1
        else:
            return ep, nesting
    return None, nesting + len(start_offsets) - sp


class BlockRegistry:
    """
    Registers block handlers into the tokenizer's block dispatch table

    Handlers are consulted in registration order; registering the same
    name again replaces the handler in place.
    """

    def __init__(self, dialect: "Dialect") -> None:
        self.dialect = dialect

    def register(self, name: str, handler: BlockHandler) -> None:
        """
        Install handler under name.

        Args:
            name: Handler identity
            handler: (chunk, next_chunks) -> list of nodes | None
        """
        is_new = name not in self.dialect.tokenizer.block
        self.dialect.tokenizer.block[name] = handler
        if is_new:
            self.dialect.compiled_invalidate()
        LOG(f"Registered block handler {name}", level=3)

    def replace(self, rule: BlockRule) -> None:
        """
        Register a start/stop delimited block that may span several chunks.

        The emitter receives the captured chunks, the start match and the
        cook options. Text before the start marker becomes a paragraph, text
        after the stop marker goes back to the queue. A block whose stop
        marker occurs nowhere is left alone, so the start marker stays
        ordinary text.
        """
        self.register(rule.name, self.handler_make(rule))

    def handler_make(self, rule: BlockRule) -> BlockHandler:
        """Build the nesting-aware handler for rule"""
        dialect = self.dialect
        start, stop = rule.start, rule.stop

        def stop_isUnreachable(next_chunks: Deque[Chunk]) -> bool:
            # "Last chance": no queued chunk contains a stop marker
            return not any(stop in chunk.text for chunk in next_chunks)

        def handler(chunk: Chunk, next_chunks: Deque[Chunk]) -> Optional[List[Any]]:
            if rule.skip_if_traditional_linebreaks and dialect.linebreaks_areTraditional():
                return None

            match = start.search(chunk.text)
            if match is None:
                return None

            if stop not in chunk.text[match.end():] and stop_isUnreachable(next_chunks):
                LOG(f"Unterminated block at line {chunk.line_number}, left as text", level=3)
                return None

            snapshot = list(next_chunks)
            result: List[Any] = []

            leading = chunk.text[:match.start()]
            if leading:
                result.append(["p", *dialect.inline_process(leading)])

            trailing = chunk.text[match.end():].lstrip("\n")
            if trailing:
                consumed = chunk.text[:len(chunk.text) - len(trailing)]
                next_chunks.appendleft(
                    Chunk(trailing, chunk.line_number + lines_count(consumed), chunk.trailing)
                )

            contents: List[Chunk] = []
            nesting = 0
            terminator: Optional[int] = None
            current: Optional[Chunk] = None

            while next_chunks:
                current = next_chunks.popleft()
                start_offsets = [m.start() for m in start.finditer(current.text)]
                stop_offsets = offsets_find(current.text, stop)

                index, nesting = stop_findTerminating(start_offsets, stop_offsets, nesting)
                if index is not None:
                    terminator = stop_offsets[index]
                    break

                if stop_isUnreachable(next_chunks):
                    # Committed but unbalanced: the last stop closes the block
                    if stop_offsets:
                        terminator = stop_offsets[-1]
                    else:
                        contents.append(current)
                    break

                contents.append(current)

            if terminator is not None and current is not None:
                before = current.text[:terminator].rstrip("\n")
                after = current.text[terminator + len(stop):].lstrip("\n")
                if before:
                    contents.append(Chunk(before, current.line_number))
                if after:
                    consumed = current.text[:len(current.text) - len(after)]
                    next_chunks.appendleft(
                        Chunk(after, current.line_number + lines_count(consumed), current.trailing)
                    )

            emitted = rule.emitter(contents, match, dialect.options)
            if not emitted:
                next_chunks.clear()
                next_chunks.extend(snapshot)
                return None

            LOG(f"Block {start.pattern!r} matched at line {chunk.line_number}", level=3)
            result.append(emitted)
            return result

        return handler


def linebreaks_areTraditional(options: dict, settings: Optional[AppSettings] = None) -> bool:
    """Traditional line-break mode from the cook options OR the site settings"""
    settings = settings or appsettings
    return bool(options.get("traditional_markdown_linebreaks")) or settings.traditional_markdown_linebreaks
