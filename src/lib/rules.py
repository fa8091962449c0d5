"""
Standard rule set for the dialect

Registers the everyday formatting rules on a Dialect:

Inline:
    **bold**            -> <strong>
    *italic*            -> <em>
    `code`              -> <code> (contents kept literal)
    https://example.com -> <a href>
    (c)                 -> ©

Block:
    [code] ... [/code]          -> syntax-highlighted <pre> (raw, survives sanitizing)
    [code=python] ... [/code]
    [quote] ... [/quote]        -> <aside class="quote"> (nests)
    [quote=alice] ... [/quote]

Text postprocessor:
    @username           -> <a class="mention"> (not inside links or code)
"""

import re
from html import escape
from typing import Any, Dict, List

from pygments import highlight
from pygments.formatters import HtmlFormatter
from pygments.lexer import Lexer
from pygments.lexers import TextLexer, get_lexer_by_name
from pygments.util import ClassNotFound

from ..models.chunk import Chunk, chunks_join
from ..models.events import ParseEvent
from ..models.tree import raw_make
from .dialect import Dialect

URL_PATTERN = re.compile(
    r"https?://(?:[^\s()<>]+|\([^\s()<>]+\))+(?:\([^\s()<>]+\)|[^`!()\[\]{};:'\".,<>?\s])"
)
CODE_START = re.compile(r"\[code(?:=([\w#+-]+))?\]", re.IGNORECASE)
QUOTE_START = re.compile(r"\[quote(?:=([^\]\n]+))?\]", re.IGNORECASE)
MENTION_PATTERN = re.compile(r"(?<![\w@/])@(\w[\w.-]{0,59}\w|\w)")


def register_standard_rules(dialect: Dialect) -> Dialect:
    """
    Register every standard rule on dialect.

    Args:
        dialect: Engine to extend

    Returns:
        The same dialect, for chaining
    """
    inlineRules_register(dialect)
    blockRules_register(dialect)
    textPostprocessors_register(dialect)
    return dialect


def inlineRules_register(dialect: Dialect) -> None:
    """Register bold, italics, inline code, autolinks and symbols"""
    dialect.inline_between(
        between="**",
        word_boundary=True,
        emitter=lambda contents: ["strong", *contents],
    )
    dialect.inline_between(
        between="*",
        word_boundary=True,
        emitter=lambda contents: ["em", *contents],
    )
    dialect.inline_between(
        between="`",
        raw_contents=True,
        emitter=lambda contents: ["code", contents],
    )
    dialect.inline_regexp(
        start="http",
        matcher=URL_PATTERN,
        word_boundary=True,
        emitter=lambda match: ["a", {"href": match.group(0)}, match.group(0)],
    )
    dialect.inline_replace("(c)", lambda token, match, prev: "©")


def blockRules_register(dialect: Dialect) -> None:
    """Register the [code] and [quote] blocks"""

    def code_emit(chunks: List[Chunk], match: re.Match, options: Dict[str, Any]) -> Any:
        """Highlight the block contents and protect the HTML as raw content"""
        code = chunks_join(chunks).strip("\n")
        language = match.group(1) or options.get("default_code_lang") or "text"
        return raw_make(code_highlight(code, language, dialect.settings.code_style))

    def quote_emit(chunks: List[Chunk], match: re.Match, options: Dict[str, Any]) -> Any:
        """Wrap the contents, processed as a nested document, in an aside"""
        username = (match.group(1) or "").strip().strip('"')
        aside: List[Any] = ["aside", {"class": "quote"}]
        if username:
            aside[1]["data-username"] = username
            aside.append(["div", {"class": "title"}, f"{username} said:"])
        aside.append(["blockquote", *dialect.blocks_process(chunks)])
        return aside

    dialect.block_replace(start=CODE_START, stop="[/code]", emitter=code_emit)
    dialect.block_replace(start=QUOTE_START, stop="[/quote]", emitter=quote_emit)


def textPostprocessors_register(dialect: Dialect) -> None:
    """Register @mention links"""
    href_template = dialect.settings.mention_href

    def mentions_link(text: str, event: ParseEvent) -> Any:
        if event.inside("a") or event.inside("code") or event.inside("pre"):
            return None
        if "@" not in text or not MENTION_PATTERN.search(text):
            return None

        pieces: List[Any] = []
        pos = 0
        for match in MENTION_PATTERN.finditer(text):
            if match.start() > pos:
                pieces.append(text[pos:match.start()])
            username = match.group(1)
            pieces.append([
                "a",
                {"class": "mention", "href": href_template.format(username=username.lower())},
                f"@{username}",
            ])
            pos = match.end()
        if pos < len(text):
            pieces.append(text[pos:])
        return pieces

    dialect.textPostprocessor_add(mentions_link)


def code_highlight(code: str, language: str, style: str = "default") -> str:
    """
    Syntax-highlight code with Pygments.

    Args:
        code: Source code
        language: Pygments lexer alias (unknown aliases fall back to text)
        style: Pygments style name

    Returns:
        HTML <div class="highlight"><pre>...</pre></div> with inline styles
    """
    lexer: Lexer
    try:
        lexer = get_lexer_by_name(language)
    except ClassNotFound:
        lexer = TextLexer()

    formatter = HtmlFormatter(style=style, noclasses=True, cssclass=f"highlight lang-{escape(language)}")
    return highlight(code, lexer, formatter)
