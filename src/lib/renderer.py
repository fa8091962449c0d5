"""
Renderer for tagged trees

Serializes the walked tree to HTML text. Text children are written as they
are: the dialect allows inline HTML and leaves its cleanup to the sanitizer.
Attribute values are escaped. Raw nodes are written without a wrapping tag.
"""

from html import escape
from typing import Any, Dict, List

from ..models.tree import RAW_TAG, Node, attrs_get, children_iter, node_is

VOID_TAGS = {
    "area", "base", "br", "col", "embed", "hr", "img", "input",
    "link", "meta", "source", "track", "wbr",
}


def render(tree: Node) -> str:
    """
    Render a tree rooted at "html" to HTML.

    Top-level blocks are separated by a blank line.

    Args:
        tree: Walked tree

    Returns:
        HTML text

    Example:
        >>> render(["html", ["p", "Hi ", ["strong", "there"]], ["hr"]])
        '<p>Hi <strong>there</strong></p>\\n\\n<hr>'
    """
    blocks: List[str] = [node_render(child) for child in children_iter(tree)]
    return "\n\n".join(block for block in blocks if block)


def attrs_render(attrs: Dict[str, Any]) -> str:
    """Render an attribute dict (None/False values are dropped)"""
    parts = []
    for name, value in attrs.items():
        if value is None or value is False:
            continue
        if value is True:
            parts.append(f" {name}")
        else:
            parts.append(f' {name}="{escape(str(value), quote=True)}"')
    return "".join(parts)


def node_render(node: Any) -> str:
    """Render a single child (string or node)"""
    if isinstance(node, str):
        return node
    if not node_is(node):
        return ""

    tag = node[0]
    content = "".join(node_render(child) for child in children_iter(node))
    if tag == RAW_TAG:
        return content

    attrs = attrs_get(node)
    opening = f"<{tag}{attrs_render(attrs) if attrs else ''}>"
    if tag in VOID_TAGS:
        return opening
    return f"{opening}{content}</{tag}>"
