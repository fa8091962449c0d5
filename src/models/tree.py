"""
Tagged tree (JsonML) helpers

The tokenizer produces, the walker rewrites and the renderer consumes the
same plain-list representation:

    ["html",
        ["p", "Hello ", ["strong", "world"], "!"],
        ["aside", {"class": "quote"}, ["blockquote", ...]]]

Position 0 holds the tag name, an optional attribute dict may sit at
position 1 and everything after it is a child (a string or another node).
"""

from typing import Any, Dict, Iterator, List, Optional, Union

# Sentinel tag for content that must reach the output untouched
RAW_TAG = "__RAW"

Node = List[Any]
Child = Union[str, Node]


def node_is(value: Any) -> bool:
    """True if value is a tree node (a list whose head is a tag name)"""
    return isinstance(value, list) and len(value) >= 1 and isinstance(value[0], str)


def attrs_get(node: Node) -> Optional[Dict[str, Any]]:
    """Return the attribute dict of a node, or None if it has none"""
    if len(node) > 1 and isinstance(node[1], dict):
        return node[1]
    return None


def children_start(node: Node) -> int:
    """Index of the first child (skips the attribute dict)"""
    return 2 if attrs_get(node) is not None else 1


def children_iter(node: Node) -> Iterator[Child]:
    """Iterate over the children of a node"""
    for child in node[children_start(node):]:
        yield child


def raw_make(content: str) -> Node:
    """
    Build a raw-protected node.

    Raw nodes are hoisted out of the tree before rendering and restored
    after sanitizing, so their content reaches the output byte-identical.

    Example:
        >>> raw_make("<iframe src='x'></iframe>")
        ['__RAW', "<iframe src='x'></iframe>"]
    """
    return [RAW_TAG, content]


def raw_is(value: Any) -> bool:
    """True if value is a raw-protected node"""
    return node_is(value) and value[0] == RAW_TAG
