"""
Base tokenizer for the dialect

Converts source text into a tagged tree. The grammar itself is deliberately
small (blank-line separated paragraphs); everything else comes from the
rules written into its two dispatch tables:

    block:  name  -> handler(chunk, next_chunks) -> list | None
    inline: token -> matcher(text, match, prev) -> (consumed, replacement) | None

Processing model:
1. Splitting: source text is cut on blank-line runs into Chunks
2. Block pass: each chunk is offered to the block handlers in registration
   order; the first one returning a list wins, the paragraph rule is last
3. Inline pass: paragraph text is scanned for the earliest trigger token and
   the token's matcher decides how much text it consumes

Example:
    >>> tokenizer = Tokenizer()
    >>> tokenizer.tree_build("Hello\\n\\nWorld")
    ['html', ['p', 'Hello'], ['p', 'World']]
"""

import re
from collections import deque
from typing import Any, Callable, Deque, Dict, Iterable, List, Optional, Pattern, Tuple

from ..models.chunk import Chunk, lines_count
from ..models.rules import RuleError
from .log import LOG

InlineMatcher = Callable[[str, "re.Match[str]", List[Any]], Optional[Tuple[int, Any]]]
BlockHandler = Callable[[Chunk, Deque[Chunk]], Optional[List[Any]]]

# One or more blank lines (whitespace-only lines count as blank)
_SEPARATOR = re.compile(r"(\n(?:[ \t]*\n)+)")


class Tokenizer:
    """
    Paragraph grammar with pluggable block and inline dispatch tables

    Attributes:
        block: Block handlers keyed by name, consulted in insertion order
        inline: Inline matchers keyed by trigger token
        block_order: Handler names frozen by blockOrder_build()
        inline_pattern: Alternation of all trigger tokens, longest first,
                        built by inlinePatterns_build()
    """

    def __init__(self) -> None:
        self.block: Dict[str, BlockHandler] = {}
        self.inline: Dict[str, InlineMatcher] = {}
        self.block_order: List[str] = []
        self.inline_pattern: Optional[Pattern[str]] = None

    def build(self) -> None:
        """Freeze dispatch order and compile the trigger-token pattern"""
        self.blockOrder_build()
        self.inlinePatterns_build()

    def blockOrder_build(self) -> None:
        """Freeze the order in which block handlers are consulted"""
        self.block_order = list(self.block)

    def inlinePatterns_build(self) -> None:
        """
        Compile all inline trigger tokens into one alternation.

        Longer tokens are listed first so that "**" wins over "*" when both
        start at the same offset.
        """
        tokens = sorted(self.inline, key=len, reverse=True)
        if not tokens:
            self.inline_pattern = None
            return
        self.inline_pattern = re.compile("|".join(re.escape(token) for token in tokens))
        LOG(f"Compiled {len(tokens)} inline trigger token(s)", level=3)

    def chunks_split(self, text: str) -> Deque[Chunk]:
        """
        Split source text on blank lines.

        Args:
            text: Source text

        Returns:
            Deque of non-empty Chunks with 1-based line numbers and the
            separator that followed each of them

        Example:
            "a\\nb\\n\\n\\nc" -> [Chunk("a\\nb", 1, "\\n\\n\\n"), Chunk("c", 5, "")]
        """
        text = text.replace("\r\n", "\n")
        parts = _SEPARATOR.split(text)
        chunks: Deque[Chunk] = deque()
        line_number = 1

        for index in range(0, len(parts), 2):
            block = parts[index]
            separator = parts[index + 1] if index + 1 < len(parts) else ""
            stripped = block.rstrip("\n")
            if stripped.strip():
                chunks.append(Chunk(stripped, line_number, block[len(stripped):] + separator))
            line_number += lines_count(block) + lines_count(separator)

        return chunks

    def tree_build(self, text: str) -> List[Any]:
        """
        Tokenize source text into a tagged tree rooted at "html".

        Args:
            text: Source text

        Returns:
            ["html", block, block, ...]
        """
        tree: List[Any] = ["html"]
        tree.extend(self.blocks_process(self.chunks_split(text)))
        return tree

    def blocks_process(self, chunks: Iterable[Chunk]) -> List[Any]:
        """
        Run the block pass over a sequence of chunks.

        Block emitters use this to process their captured contents as a
        nested document (e.g., a quote inside a quote).

        Args:
            chunks: Chunks to process, in order

        Returns:
            List of block nodes
        """
        queue: Deque[Chunk] = deque(chunks)
        nodes: List[Any] = []
        while queue:
            chunk = queue.popleft()
            nodes.extend(self.block_process(chunk, queue))
        return nodes

    def block_process(self, chunk: Chunk, next_chunks: Deque[Chunk]) -> List[Any]:
        """
        Offer one chunk to the block handlers.

        Handlers may consume further chunks from next_chunks or push new
        ones onto its front. The first handler returning a list (even an
        empty one) claims the chunk; otherwise it becomes a paragraph.

        Args:
            chunk: Chunk to process
            next_chunks: Remaining queue (mutable)

        Returns:
            List of block nodes produced for this chunk
        """
        for name in self.block_order:
            handler = self.block.get(name)
            if handler is None:
                continue
            result = handler(chunk, next_chunks)
            if result is not None:
                return result
        return [self.paragraph_make(chunk)]

    def paragraph_make(self, chunk: Chunk) -> List[Any]:
        """Default block rule: a paragraph of inline content"""
        return ["p", *self.inline_process(chunk.text)]

    def inline_process(self, text: str) -> List[Any]:
        """
        Run the inline pass over text.

        Args:
            text: Inline source text

        Returns:
            List of strings and nodes; adjacent strings are merged

        Raises:
            RuleError: If a matcher claims a match of non-positive length
        """
        out: List[Any] = []
        while text:
            consumed, items = self.element_next(text, out)
            if consumed <= 0:
                raise RuleError(f"inline matcher consumed {consumed} characters of {text[:20]!r}")
            for item in items:
                if isinstance(item, str) and out and isinstance(out[-1], str):
                    out[-1] += item
                else:
                    out.append(item)
            text = text[consumed:]
        return out

    def element_next(self, text: str, prev: List[Any]) -> Tuple[int, List[Any]]:
        """
        Produce the next inline element(s) at the start of text.

        Args:
            text: Remaining inline text
            prev: Output produced so far (used for boundary checks)

        Returns:
            (consumed length, items to append)
        """
        match = self.inline_pattern.search(text) if self.inline_pattern else None
        if match is None:
            return len(text), [text]
        if match.start() > 0:
            return match.start(), [text[:match.start()]]

        token = match.group(0)
        matcher = self.inline.get(token)
        result = matcher(text, match, prev) if matcher is not None else None
        if result is None:
            # Not a match after all: the token is ordinary text
            return len(token), [token]

        consumed, replacement = result
        return consumed, [replacement]
