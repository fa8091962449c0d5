"""
Inline rule registry

Writes matchers into the tokenizer's inline dispatch table. A matcher is
called with the text starting at its trigger token, the token's re.Match
and the inline output produced so far, and answers with
(consumed_length, replacement) or None.

Three builders cover the common cases:
- replace: a literal token swapped for a fixed replacement
- regexp: an expression anchored at the token
- between: content enclosed by a start and a stop marker
"""

import re
from typing import Any, Callable, List, Optional, Tuple, Union, TYPE_CHECKING

from ..models.rules import BetweenRule, RegexpRule, RuleError
from .log import LOG
from .tokenizer import InlineMatcher, Tokenizer

if TYPE_CHECKING:
    from .dialect import Dialect

_WORD_END = re.compile(r"[\w/]$")
_SPACE_END = re.compile(r"\s$")
_SPACE_OR_TAG_END = re.compile(r"[\s>]$")

BoundaryRule = Union[RegexpRule, BetweenRule]


def boundary_isInvalid(rule: BoundaryRule, prev: List[Any]) -> bool:
    """
    Check the character preceding a candidate match.

    Only the last character of the last produced element counts, and only
    when that element is text; a preceding node (or no output at all)
    satisfies every boundary.

    Args:
        rule: Rule carrying the boundary flags
        prev: Inline output produced so far

    Returns:
        True if the match must be rejected

    Example:
        prev ending in "a"  -> word boundary invalid
        prev ending in " "  -> space boundary valid
        prev ending in "x>" -> space-or-tag boundary valid
    """
    if not (rule.word_boundary or rule.space_boundary or rule.space_or_tag_boundary):
        return False
    if not prev or not isinstance(prev[-1], str):
        return False

    last = prev[-1]
    if rule.word_boundary and _WORD_END.search(last):
        return True
    if rule.space_boundary and not _SPACE_END.search(last):
        return True
    if rule.space_or_tag_boundary and not _SPACE_OR_TAG_END.search(last):
        return True
    return False


def endPos_find(text: str, start: str, stop: str, offset: int) -> int:
    """
    Locate the stop marker closing a start marker.

    Scans for the next stop from offset; as long as another start occurs
    strictly before that stop, the stop is skipped and scanning resumes
    past it.

    Args:
        text: Text beginning with the start marker
        start: Opening marker
        stop: Closing marker
        offset: Where to begin scanning (just past the opening marker)

    Returns:
        Offset of the closing stop marker, or -1 if there is none

    Example:
        endPos_find("**b** c", "**", "**", 2) -> 3
        endPos_find("[b]x[b]y[/b]z[/b]", "[b]", "[/b]", 3) -> 13
    """
    while True:
        end_pos = text.find(stop, offset)
        if end_pos == -1:
            return -1
        next_start = text.find(start, offset)
        offset = end_pos + len(stop)
        if next_start == -1 or next_start >= end_pos:
            return end_pos


class InlineRegistry:
    """
    Registers inline rules into a tokenizer's inline dispatch table

    One matcher per trigger token; registering a token again replaces the
    previous matcher.
    """

    def __init__(self, tokenizer: Tokenizer, dialect: "Optional[Dialect]" = None) -> None:
        self.tokenizer = tokenizer
        self.dialect = dialect

    def register(self, token: str, matcher: InlineMatcher) -> None:
        """
        Install matcher for token.

        Args:
            token: Literal trigger token
            matcher: (text, match, prev) -> (consumed, replacement) | None

        Raises:
            RuleError: If token is empty
        """
        if not token:
            raise RuleError("inline trigger token must not be empty")
        is_new = token not in self.tokenizer.inline
        self.tokenizer.inline[token] = matcher
        if is_new and self.dialect is not None:
            self.dialect.compiled_invalidate()
        LOG(f"Registered inline token {token!r}", level=3)

    def replace(self, token: str, emitter: Callable[[str, "re.Match[str]", List[Any]], Any]) -> None:
        """
        Replace every occurrence of a literal token.

        Args:
            token: Token to replace
            emitter: (token, match, prev) -> replacement

        Example:
            registry.replace("(c)", lambda token, match, prev: "©")
        """
        def matcher(text: str, match: "re.Match[str]", prev: List[Any]) -> Optional[Tuple[int, Any]]:
            return len(token), emitter(token, match, prev)

        self.register(token, matcher)

    def regexp(self, rule: RegexpRule) -> None:
        """
        Register an inline rule driven by a regular expression.

        The expression is matched at the position of the trigger token; the
        whole match is consumed and the emitter receives the match object.
        """
        def matcher(text: str, match: "re.Match[str]", prev: List[Any]) -> Optional[Tuple[int, Any]]:
            if boundary_isInvalid(rule, prev):
                return None
            found = rule.matcher.match(text)
            if not found or not found.group(0):
                return None
            result = rule.emitter(found)
            if not result:
                return None
            return len(found.group(0)), result

        self.register(rule.start, matcher)

    def between(self, rule: BetweenRule) -> None:
        """
        Register an inline rule for content between two markers.

        Unless the rule asks for raw contents, the enclosed text is run
        through the inline pass again, so markup nests.

        Example:
            registry.between(BetweenRule(
                between="**", word_boundary=True,
                emitter=lambda contents: ["strong", *contents],
            ))
        """
        start, stop = rule.start, rule.stop
        start_length = len(start)

        def matcher(text: str, match: "re.Match[str]", prev: List[Any]) -> Optional[Tuple[int, Any]]:
            if boundary_isInvalid(rule, prev):
                return None

            end_pos = endPos_find(text, start, stop, start_length)
            if end_pos == -1:
                return None

            contents: Any = text[start_length:end_pos]
            if not rule.raw_contents:
                contents = self.tokenizer.inline_process(contents)

            result = rule.emitter(contents)
            if not result:
                return None
            return end_pos + len(stop), result

        self.register(start, matcher)
