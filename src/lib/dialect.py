"""
Dialect: the extension engine and its cook pipeline

A Dialect owns the tokenizer's dispatch tables, the text postprocessors and
the "parseNode" listeners. Rules are registered once, then cook() runs:

    tokenize -> walk -> render -> sanitize (optional) -> restore hoisted -> trim

Example:
    >>> dialect = Dialect()
    >>> dialect.inline_between(between="**", emitter=lambda c: ["strong", *c])
    >>> dialect.cook("a **b** c")
    '<p>a <strong>b</strong> c</p>'
"""

import re
from typing import Any, Callable, Dict, Iterable, List, Optional, Pattern, Union

from ..config import AppSettings, appsettings
from ..models.chunk import Chunk
from ..models.events import ParseEvent
from ..models.rules import BetweenRule, BlockRule, RegexpRule
from .block import BlockRegistry, linebreaks_areTraditional
from .events import EventTarget
from .hoist import HoistStore
from .inline import InlineRegistry
from .log import LOG
from .renderer import render
from .sanitizer import sanitize_html
from .tokenizer import BlockHandler, InlineMatcher, Tokenizer
from .walker import TextEmitter, TreeWalker


class Dialect(EventTarget):
    """
    Markdown dialect extension engine

    Attributes:
        settings: Application settings (placeholders, site-wide flags)
        tokenizer: Base tokenizer holding the block/inline dispatch tables
        inlines: Inline rule registry
        blocks: Block rule registry
        walker: Tree walker holding the text postprocessors
        options: Options of the cook() call in progress
        initialized: True once the dispatch tables are compiled
    """

    def __init__(self, settings: Optional[AppSettings] = None) -> None:
        super().__init__()
        self.settings = settings or appsettings
        self.tokenizer = Tokenizer()
        self.inlines = InlineRegistry(self.tokenizer, self)
        self.blocks = BlockRegistry(self)
        self.walker = TreeWalker(self, self)
        self.options: Dict[str, Any] = {}
        self.initialized = False

    # ------------------------------------------------------------------
    # Pipeline
    # ------------------------------------------------------------------

    def finalize(self) -> None:
        """Compile the dispatch tables (no-op when already compiled)"""
        if self.initialized:
            return
        self.tokenizer.build()
        self.initialized = True
        LOG(
            f"Dialect finalized: {len(self.tokenizer.block)} block, "
            f"{len(self.tokenizer.inline)} inline rule(s)",
            level=2,
        )

    def compiled_invalidate(self) -> None:
        """Schedule recompilation after a new table key was registered"""
        self.initialized = False

    def cook(self, text: str, opts: Optional[Dict[str, Any]] = None) -> str:
        """
        Cook dialect source text into HTML.

        Args:
            text: Source text
            opts: Cook options:
                - sanitize: run the bleach sanitizer on the output
                - sanitizer_function: custom sanitizer, used when sanitize
                  is not set
                - anything else is passed through to block emitters via
                  dialect.options (e.g., traditional_markdown_linebreaks)

        Returns:
            Cooked HTML, stripped of leading/trailing whitespace
        """
        options = dict(opts or {})
        self.finalize()
        self.options = options
        hoist = HoistStore(self.settings)

        LOG(f"Cooking {len(text)} characters", level=2)
        tree = self.tokenizer.tree_build(text)
        self.walker.walk(tree, hoist)
        result = render(tree)

        if options.get("sanitize"):
            result = sanitize_html(result)
        elif options.get("sanitizer_function"):
            result = options["sanitizer_function"](result)

        result = hoist.restore(result)
        return result.strip()

    def inline_process(self, text: str) -> List[Any]:
        """Run the inline pass over text (for use inside rules)"""
        return self.tokenizer.inline_process(text)

    def blocks_process(self, chunks: Iterable[Chunk]) -> List[Any]:
        """Run the block pass over chunks (for use inside block emitters)"""
        return self.tokenizer.blocks_process(chunks)

    def linebreaks_areTraditional(self) -> bool:
        """True if traditional line-break mode is on for the current cook"""
        return linebreaks_areTraditional(self.options, self.settings)

    # ------------------------------------------------------------------
    # Inline rules
    # ------------------------------------------------------------------

    def inline_register(self, token: str, matcher: InlineMatcher) -> None:
        """
        Register a raw inline matcher.

        Args:
            token: Literal trigger token
            matcher: (text, match, prev) -> (consumed, replacement) | None
        """
        self.inlines.register(token, matcher)

    def inline_replace(self, token: str, emitter: Callable[..., Any]) -> None:
        """
        Replace a literal token.

        Example:
            dialect.inline_replace(":)", lambda token, match, prev:
                ["img", {"src": "/images/smile.png", "alt": token}])
        """
        self.inlines.replace(token, emitter)

    def inline_regexp(
        self,
        start: str,
        matcher: Union[str, Pattern[str]],
        emitter: Callable[[re.Match], Any],
        word_boundary: bool = False,
        space_boundary: bool = False,
        space_or_tag_boundary: bool = False,
    ) -> None:
        """
        Match a regular expression at a trigger token.

        Example:
            dialect.inline_regexp(
                start="#",
                matcher=r"#(\\d+)",
                space_boundary=True,
                emitter=lambda m: ["a", {"href": f"/t/{m.group(1)}"}, m.group(0)],
            )
        """
        self.inlines.regexp(RegexpRule(
            start=start,
            matcher=matcher,
            emitter=emitter,
            word_boundary=word_boundary,
            space_boundary=space_boundary,
            space_or_tag_boundary=space_or_tag_boundary,
        ))

    def inline_between(
        self,
        emitter: Callable[[Any], Any],
        start: Optional[str] = None,
        stop: Optional[str] = None,
        between: Optional[str] = None,
        raw_contents: bool = False,
        word_boundary: bool = False,
        space_boundary: bool = False,
        space_or_tag_boundary: bool = False,
    ) -> None:
        """
        Replace content enclosed by markers.

        Example:
            dialect.inline_between(between="**", word_boundary=True,
                                   emitter=lambda contents: ["strong", *contents])
        """
        self.inlines.between(BetweenRule(
            emitter=emitter,
            start=start,
            stop=stop,
            between=between,
            raw_contents=raw_contents,
            word_boundary=word_boundary,
            space_boundary=space_boundary,
            space_or_tag_boundary=space_or_tag_boundary,
        ))

    # ------------------------------------------------------------------
    # Block rules
    # ------------------------------------------------------------------

    def block_register(self, name: str, handler: BlockHandler) -> None:
        """
        Register a raw block handler.

        Args:
            name: Handler identity
            handler: (chunk, next_chunks) -> list of nodes | None
        """
        self.blocks.register(name, handler)

    def block_replace(
        self,
        start: Union[str, Pattern[str]],
        stop: str,
        emitter: Callable[[List[Chunk], re.Match, Dict[str, Any]], Any],
        skip_if_traditional_linebreaks: bool = False,
    ) -> None:
        """
        Replace a block between a start pattern and a stop marker.

        Example:
            dialect.block_replace(
                start=re.compile(r"\\[code\\]", re.IGNORECASE),
                stop="[/code]",
                emitter=lambda chunks, match, options:
                    ["p", ["pre", chunks_join(chunks)]],
            )
        """
        self.blocks.replace(BlockRule(
            start=start,
            stop=stop,
            emitter=emitter,
            skip_if_traditional_linebreaks=skip_if_traditional_linebreaks,
        ))

    # ------------------------------------------------------------------
    # Post-processing
    # ------------------------------------------------------------------

    def textPostprocessor_add(self, emitter: TextEmitter) -> None:
        """
        Transform text nodes after tokenizing.

        Example:
            dialect.textPostprocessor_add(lambda text, event: text.upper())
        """
        self.walker.textEmitter_add(emitter)

    def tagPostprocessor_add(self, tag: str, emitter: Callable[[Any], Any]) -> None:
        """
        Rewrite the last child of every node with the given tag.

        Example:
            dialect.tagPostprocessor_add("code", lambda contents: "# " + contents)
        """
        def listener(event: ParseEvent) -> None:
            node = event.node
            if node[0] == tag and len(node) > 1:
                node[-1] = emitter(node[-1])

        self.on("parseNode", listener)
