"""
Tree walker: second pass over the tokenized tree

For every node, in document order:
1. Notify "parseNode" listeners with a ParseEvent (they may rewrite the node)
2. Hoist raw nodes, or run the text postprocessors over the string children
3. Visit child nodes, tracking how many ancestors of each tag are open
4. Normalize: comment-only paragraphs lose their <p>, paragraphs wrapping a
   single raw node become that raw node
"""

import re
from typing import Any, Callable, Dict, List, Optional, TYPE_CHECKING

from ..models.events import ParseEvent
from ..models.tree import RAW_TAG, Node, children_start, node_is, raw_is
from .events import EventTarget
from .hoist import HoistStore

if TYPE_CHECKING:
    from .dialect import Dialect

TextEmitter = Callable[[str, ParseEvent], Any]

_COMMENT_ONLY = re.compile(r"<!--[\s\S]*-->")


class TreeWalker:
    """
    Applies notifications, text postprocessors and hoisting to a tree

    Attributes:
        events: Target whose "parseNode" listeners are notified per node
        emitters: Text postprocessors, applied in registration order
        dialect: Engine reported in every ParseEvent
    """

    def __init__(self, events: EventTarget, dialect: "Optional[Dialect]" = None) -> None:
        self.events = events
        self.dialect = dialect
        self.emitters: List[TextEmitter] = []

    def textEmitter_add(self, emitter: TextEmitter) -> None:
        """
        Append a text postprocessor.

        The emitter is called as emitter(text, event) for every string child
        and returns None (keep the text), a list (spliced in place of the
        text; wrap a single node as [node]) or any other replacement value.
        """
        self.emitters.append(emitter)

    def walk(self, tree: Node, hoist: HoistStore) -> Node:
        """
        Walk tree in place.

        Args:
            tree: Root node produced by the tokenizer
            hoist: Store receiving the content of raw nodes for this run

        Returns:
            The same tree, rewritten
        """
        return self.node_parse(tree, [], {}, hoist)

    def node_parse(
        self, node: Node, path: List[Node], inside_counts: Dict[str, int], hoist: HoistStore
    ) -> Node:
        """Visit node and its descendants"""
        if not node_is(node):
            return node

        event = ParseEvent(node=node, path=path, inside_counts=inside_counts, dialect=self.dialect)
        self.events.trigger("parseNode", event)

        self.textNodes_process(node, event, hoist)

        path.append(node)
        i = children_start(node) - 1
        while i + 1 < len(node):
            i += 1
            child = node[i]
            if not node_is(child):
                continue

            tag = child[0]
            inside_counts[tag] = inside_counts.get(tag, 0) + 1

            if len(child) == 2 and tag == "p" and isinstance(child[1], str) \
                    and _COMMENT_ONLY.fullmatch(child[1]):
                node[i] = child[1]
            else:
                self.node_parse(child, path, inside_counts, hoist)

            inside_counts[tag] -= 1
            if inside_counts[tag] == 0:
                del inside_counts[tag]

        # Raw content wrapped in a paragraph is pulled up
        if len(node) == 2 and node[0] == "p" and raw_is(node[1]) and len(node[1]) > 1:
            content = node[1][1]
            node[0] = RAW_TAG
            node[1] = content

        path.pop()
        return node

    def textNodes_process(self, node: Node, event: ParseEvent, hoist: HoistStore) -> None:
        """
        Hoist a raw node, or run every text emitter over the string children.

        Args:
            node: Node being visited
            event: Event describing the visit
            hoist: Store receiving raw content
        """
        if len(node) < 2:
            return

        if node[0] == RAW_TAG:
            content = "".join(child for child in node[1:] if isinstance(child, str))
            node[1:] = [hoist.protect(content)]
            return

        for emitter in self.emitters:
            j = children_start(node)
            while j < len(node):
                text = node[j]
                if not isinstance(text, str):
                    j += 1
                    continue
                result = emitter(text, event)
                if result is None:
                    j += 1
                elif isinstance(result, list):
                    node[j:j + 1] = result
                    j += len(result)
                else:
                    node[j] = result
                    j += 1
