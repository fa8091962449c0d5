"""
Hoisting of raw content across the render/sanitize boundary

Raw nodes carry content (pre-highlighted code, trusted embeds) that the
sanitizer would otherwise rewrite. Before rendering, the walker swaps each
raw payload for a content-addressed placeholder; after sanitizing, the
placeholders are replaced with the original content.

A store lives for exactly one Dialect.cook() call.
"""

import hashlib
from typing import Dict, Optional

from ..config import AppSettings, appsettings
from .log import LOG


class HoistStore:
    """
    Content-addressed store of hoisted literal text

    Keys are the md5 digest of the content wrapped in the configured
    placeholder delimiters, so identical content protected twice shares one
    key and both occurrences are restored by the same global replacement.

    Example:
        >>> store = HoistStore()
        >>> key = store.protect("<b>kept</b>")
        >>> store.restore(f"<p>{key}</p>")
        '<p><b>kept</b></p>'
    """

    def __init__(self, settings: Optional[AppSettings] = None) -> None:
        self.settings = settings or appsettings
        self.hoisted: Dict[str, str] = {}

    def __len__(self) -> int:
        return len(self.hoisted)

    def __contains__(self, key: object) -> bool:
        return key in self.hoisted

    def key_make(self, content: str) -> str:
        """Placeholder key for content"""
        digest = hashlib.md5(content.encode("utf-8")).hexdigest()
        return self.settings.hoistKey_make(digest)

    def protect(self, content: str) -> str:
        """
        Store content and return its placeholder key.

        Args:
            content: Literal text that must survive rendering and sanitizing

        Returns:
            Opaque placeholder to put into the tree instead of content
        """
        key = self.key_make(content)
        self.hoisted[key] = content
        return key

    def restore(self, output: str) -> str:
        """
        Substitute every stored key in output with its content, then clear.

        Placeholder-shaped text with no stored mapping is left untouched.

        Args:
            output: Rendered (and possibly sanitized) text

        Returns:
            Output with all hoisted content put back
        """
        if self.hoisted:
            LOG(f"Restoring {len(self.hoisted)} hoisted fragment(s)", level=2)
        for key, content in self.hoisted.items():
            output = output.replace(key, content)
        self.hoisted.clear()
        return output
