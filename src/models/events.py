"""
Tree-walk notification model
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, TYPE_CHECKING

if TYPE_CHECKING:
    from ..lib.dialect import Dialect


@dataclass
class ParseEvent:
    """
    Payload of the "parseNode" notification

    One event is created per node visited by the TreeWalker. Listeners may
    rewrite ``node`` in place; the walker continues with whatever the node
    looks like after all listeners returned.

    Attributes:
        node: The node being visited (shared reference, mutable)
        path: Ancestors of the node, root first, node itself excluded
        inside_counts: Tag name -> number of open ancestors with that tag
        dialect: Engine that triggered the walk

    Example:
        While visiting the "code" node of
        ["html", ["p", ["a", ["code", "x"]]]]:
            path == [html, p, a]
            inside_counts == {"p": 1, "a": 1, "code": 1}
    """
    node: List[Any]
    path: List[List[Any]] = field(default_factory=list)
    inside_counts: Dict[str, int] = field(default_factory=dict)
    dialect: "Dialect | None" = None

    def inside(self, tag: str) -> bool:
        """True if any ancestor (or the node itself) has the given tag"""
        return self.inside_counts.get(tag, 0) > 0
