"""
Default HTML sanitizer (bleach)

Applied by Dialect.cook() when the "sanitize" option is set. Hoisted raw
content is restored after this step, so it is never rewritten here.
"""

from functools import lru_cache
from typing import Dict, FrozenSet, List, Tuple

import bleach

from .log import LOG

# Elements produced by the paragraph grammar and the standard rules, plus
# the inline HTML authors commonly write by hand
DIALECT_TAGS = frozenset({
    "p", "br", "hr", "div", "span", "aside", "blockquote",
    "pre", "code", "kbd", "del", "ins", "sup", "sub", "img",
    "h1", "h2", "h3", "h4", "h5", "h6", "ul", "ol", "li",
    "table", "thead", "tbody", "tr", "th", "td",
})


@lru_cache(maxsize=1)
def _bleach_config() -> Tuple[FrozenSet[str], Dict[str, List[str]], List[str]]:
    """Allow-lists handed to bleach.clean(), built once per process"""
    allowed_tags = frozenset(bleach.sanitizer.ALLOWED_TAGS) | DIALECT_TAGS

    allowed_attrs = {
        "*": ["class", "title"],
        "a": ["href", "title", "rel"],
        "img": ["src", "alt", "title", "width", "height"],
        "aside": ["class", "data-username"],
        "code": ["class"],
        "pre": ["class"],
        "th": ["colspan", "rowspan"],
        "td": ["colspan", "rowspan"],
    }

    allowed_protocols = ["http", "https", "mailto"]

    return allowed_tags, allowed_attrs, allowed_protocols


def sanitize_html(html: str) -> str:
    """
    Sanitize rendered HTML using bleach.

    Disallowed tags are escaped rather than dropped, comments are removed.

    Args:
        html: Rendered HTML

    Returns:
        Sanitized HTML
    """
    allowed_tags, allowed_attrs, allowed_protocols = _bleach_config()
    LOG(f"Sanitizing {len(html)} characters", level=3)
    return bleach.clean(
        html,
        tags=allowed_tags,
        attributes=allowed_attrs,
        protocols=allowed_protocols,
        strip=False,
    )
