"""
Rule description models

Declarative descriptions of the rules built by the inline and block
registries. The registries turn each description into a matcher/handler function
and install it in the tokenizer's dispatch tables.
"""

import re
from dataclasses import dataclass
from typing import Any, Callable, Optional, Pattern, Union


class RuleError(ValueError):
    """Raised when a rule is registered or behaves in an unusable way"""
    pass


def pattern_compile(pattern: Union[str, Pattern[str]], flags: int = 0) -> Pattern[str]:
    """Compile pattern unless it already is a compiled regular expression"""
    if isinstance(pattern, str):
        return re.compile(pattern, flags)
    return pattern


@dataclass
class RegexpRule:
    """
    Inline rule matching a regular expression

    Attributes:
        start: Trigger token that makes the tokenizer consult this rule
        matcher: Expression matched at the start of the remaining text
        emitter: Called with the re.Match, returns the replacement or None
        word_boundary: Reject when preceded by a word character or "/"
        space_boundary: Reject unless preceded by whitespace
        space_or_tag_boundary: Reject unless preceded by whitespace or ">"

    Example:
        RegexpRule(
            start="http",
            matcher=r"https?://\\S+",
            emitter=lambda m: ["a", {"href": m.group(0)}, m.group(0)],
            word_boundary=True,
        )
    """
    start: str
    matcher: Union[str, Pattern[str]]
    emitter: Callable[[re.Match], Any]
    word_boundary: bool = False
    space_boundary: bool = False
    space_or_tag_boundary: bool = False

    def __post_init__(self) -> None:
        if not self.start:
            raise RuleError("regexp rule needs a non-empty start token")
        self.matcher = pattern_compile(self.matcher)


@dataclass
class BetweenRule:
    """
    Inline rule for content enclosed by a start and a stop marker

    Attributes:
        emitter: Called with the contents (list of inline nodes, or the raw
                 string when raw_contents is set), returns the replacement
        start: Opening marker
        stop: Closing marker
        between: Shortcut for identical start and stop markers
        raw_contents: Pass the contents through without inline processing
        word_boundary / space_boundary / space_or_tag_boundary: see RegexpRule

    Example:
        BetweenRule(between="**", word_boundary=True,
                    emitter=lambda contents: ["strong", *contents])
    """
    emitter: Callable[[Any], Any]
    start: Optional[str] = None
    stop: Optional[str] = None
    between: Optional[str] = None
    raw_contents: bool = False
    word_boundary: bool = False
    space_boundary: bool = False
    space_or_tag_boundary: bool = False

    def __post_init__(self) -> None:
        self.start = self.start or self.between
        self.stop = self.stop or self.between
        if not self.start or not self.stop:
            raise RuleError("between rule needs start/stop markers or 'between'")


@dataclass
class BlockRule:
    """
    Multi-line block delimited by a start pattern and a literal stop marker

    The start pattern must match the opening marker only; its groups are
    handed to the emitter (e.g., the language of "[code=python]").

    Attributes:
        start: Opening marker expression
        stop: Literal closing marker
        emitter: Called with (chunks, start_match, options), returns a node
                 or None to leave the text to the other rules
        skip_if_traditional_linebreaks: Disable the rule in traditional
                                        line-break mode

    Example:
        BlockRule(
            start=re.compile(r"\\[code\\]", re.IGNORECASE),
            stop="[/code]",
            emitter=lambda chunks, match, options: ["pre", chunks_join(chunks)],
        )
    """
    start: Union[str, Pattern[str]]
    stop: str
    emitter: Callable[..., Any]
    skip_if_traditional_linebreaks: bool = False

    def __post_init__(self) -> None:
        if not self.stop:
            raise RuleError("block rule needs a non-empty stop marker")
        self.start = pattern_compile(self.start)

    @property
    def name(self) -> str:
        """Identity under which the handler is registered"""
        return repr(self.start)
