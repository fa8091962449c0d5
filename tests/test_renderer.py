"""
Renderer tests
"""

from dialectic.lib.renderer import attrs_render, render
from dialectic.models.tree import RAW_TAG


class TestRender:
    """Test HTML serialization"""

    def test_blocks_separated(self):
        """Top-level blocks are joined by a blank line"""
        assert render(["html", ["p", "Hi ", ["strong", "there"]], ["hr"]]) == \
            "<p>Hi <strong>there</strong></p>\n\n<hr>"

    def test_empty_tree(self):
        """A bare root renders to nothing"""
        assert render(["html"]) == ""

    def test_text_not_escaped(self):
        """Inline HTML in text is written as is"""
        assert render(["html", ["p", "<em>x</em> & y"]]) == "<p><em>x</em> & y</p>"

    def test_raw_without_tag(self):
        """Raw nodes have no wrapping element"""
        assert render(["html", [RAW_TAG, "KEY"]]) == "KEY"

    def test_top_level_string(self):
        """Collapsed comments render at top level"""
        assert render(["html", "<!-- c -->", ["p", "x"]]) == "<!-- c -->\n\n<p>x</p>"


class TestAttributes:
    """Test attribute serialization"""

    def test_values_escaped(self):
        """Attribute values are quoted and escaped"""
        assert attrs_render({"title": 'a "b" <c>'}) == ' title="a &quot;b&quot; &lt;c&gt;"'

    def test_boolean_and_missing(self):
        """True is a bare attribute, None and False are dropped"""
        assert attrs_render({"open": True, "hidden": False, "id": None}) == " open"

    def test_in_node(self):
        """Attributes are rendered in insertion order"""
        node = ["html", ["a", {"class": "mention", "href": "/u/bob"}, "@bob"]]
        assert render(node) == '<a class="mention" href="/u/bob">@bob</a>'
