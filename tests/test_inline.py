"""
Inline rule tests - boundaries, replace, regexp and between builders
"""

import re

import pytest

from dialectic.lib.inline import boundary_isInvalid, endPos_find
from dialectic.models.rules import BetweenRule, RegexpRule, RuleError


def _rule(**flags) -> RegexpRule:
    return RegexpRule(start="x", matcher="x", emitter=lambda m: m.group(0), **flags)


class TestBoundaries:
    """Test the preceding-character checks"""

    def test_word_boundary_after_letter(self):
        """A word character right before the token rejects the match"""
        assert boundary_isInvalid(_rule(word_boundary=True), ["a"]) is True

    def test_word_boundary_after_slash(self):
        """A slash counts as part of a word"""
        assert boundary_isInvalid(_rule(word_boundary=True), ["path/"]) is True

    def test_word_boundary_after_space(self):
        """Whitespace satisfies the word boundary"""
        assert boundary_isInvalid(_rule(word_boundary=True), ["a "]) is False

    def test_space_boundary(self):
        """Space boundary needs whitespace"""
        assert boundary_isInvalid(_rule(space_boundary=True), [" "]) is False
        assert boundary_isInvalid(_rule(space_boundary=True), ["a"]) is True

    def test_space_or_tag_boundary(self):
        """A closing angle bracket also satisfies the space-or-tag boundary"""
        assert boundary_isInvalid(_rule(space_or_tag_boundary=True), ["x>"]) is False
        assert boundary_isInvalid(_rule(space_or_tag_boundary=True), ["x "]) is False
        assert boundary_isInvalid(_rule(space_or_tag_boundary=True), ["xy"]) is True

    def test_preceding_node_satisfies_all(self):
        """Only text elements are inspected"""
        rule = _rule(word_boundary=True, space_boundary=True, space_or_tag_boundary=True)
        assert boundary_isInvalid(rule, [["b", "x"]]) is False

    def test_start_of_text_satisfies_all(self):
        """No output yet means no preceding character"""
        assert boundary_isInvalid(_rule(space_boundary=True), []) is False

    def test_no_flags(self):
        """A rule without boundary flags always passes"""
        assert boundary_isInvalid(_rule(), ["abc"]) is False


class TestEndPos:
    """Test locating the closing marker"""

    def test_simple(self):
        """Closing marker of a symmetric pair"""
        assert endPos_find("**b** c", "**", "**", 2) == 3

    def test_missing(self):
        """No closing marker"""
        assert endPos_find("**b c", "**", "**", 2) == -1

    def test_inner_start_skips_stop(self):
        """A start before the next stop skips that stop"""
        assert endPos_find("[b]x[b]y[/b]z[/b]", "[b]", "[/b]", 3) == 13


class TestRuleModels:
    """Test rule validation"""

    def test_between_fills_markers(self):
        """between sets both start and stop"""
        rule = BetweenRule(between="~~", emitter=lambda c: ["del", *c])
        assert (rule.start, rule.stop) == ("~~", "~~")

    def test_between_without_markers(self):
        """A between rule needs markers"""
        with pytest.raises(RuleError):
            BetweenRule(emitter=lambda c: c)

    def test_regexp_without_start(self):
        """A regexp rule needs a trigger token"""
        with pytest.raises(RuleError):
            RegexpRule(start="", matcher="x", emitter=lambda m: m)

    def test_regexp_compiles_string(self):
        """String matchers are compiled"""
        assert isinstance(_rule().matcher, re.Pattern)

    def test_empty_token_rejected(self, dialect):
        """The dispatch table refuses an empty trigger"""
        with pytest.raises(RuleError):
            dialect.inline_register("", lambda text, match, prev: None)


class TestReplace:
    """Test literal token replacement"""

    def test_token_replaced_by_node(self, dialect, tree):
        """A literal token is swapped for its replacement"""
        dialect.inline_replace("TK", lambda token, match, prev: ["br"])
        assert tree(dialect, "hi TK more") == ["html", ["p", "hi ", ["br"], " more"]]

    def test_re_registration_overrides(self, dialect, tree):
        """The last registration for a token wins"""
        dialect.inline_replace(":)", lambda token, match, prev: "first")
        dialect.inline_replace(":)", lambda token, match, prev: "second")
        assert tree(dialect, "a :)") == ["html", ["p", "a second"]]

    def test_emitter_sees_prev(self, dialect, tree):
        """The emitter receives the token and the output so far"""
        seen = []

        def emitter(token, match, prev):
            seen.append((token, match.group(0), list(prev)))
            return "!"

        dialect.inline_replace("(!)", emitter)
        tree(dialect, "hey (!)")
        assert seen == [("(!)", "(!)", ["hey "])]


class TestRegexp:
    """Test expression-driven rules"""

    @pytest.fixture
    def topics(self, dialect):
        dialect.inline_regexp(
            start="#",
            matcher=r"#(\d+)",
            emitter=lambda m: ["a", {"href": f"/t/{m.group(1)}"}, m.group(0)],
        )
        return dialect

    def test_match_at_token(self, topics, tree):
        """The expression is matched where the token occurs"""
        assert tree(topics, "see #12 now") == [
            "html", ["p", "see ", ["a", {"href": "/t/12"}, "#12"], " now"]
        ]

    def test_failed_expression_leaves_token(self, topics, tree):
        """A token whose expression fails stays literal, later tokens still match"""
        assert tree(topics, "#x #7") == [
            "html", ["p", "#x ", ["a", {"href": "/t/7"}, "#7"]]
        ]

    def test_word_boundary_rejects(self, dialect, tree):
        """A boundary violation leaves the text untouched"""
        dialect.inline_regexp(
            start="#",
            matcher=r"#(\d+)",
            word_boundary=True,
            emitter=lambda m: ["a", m.group(0)],
        )
        assert tree(dialect, "a#12") == ["html", ["p", "a#12"]]

    def test_falsy_emitter_result(self, dialect, tree):
        """An emitter returning None declines the match"""
        dialect.inline_regexp(start="#", matcher=r"#\d+", emitter=lambda m: None)
        assert tree(dialect, "x #1") == ["html", ["p", "x #1"]]


class TestBetween:
    """Test enclosed-content rules"""

    def test_consumed_length(self, dialect):
        """The matcher consumes through the closing marker"""
        dialect.inline_between(between="**", emitter=lambda contents: ["strong", *contents])
        dialect.finalize()
        text = "**b** c"
        match = dialect.tokenizer.inline_pattern.search(text)
        matcher = dialect.tokenizer.inline["**"]
        assert matcher(text, match, ["a "]) == (5, ["strong", "b"])

    def test_bold_in_paragraph(self, dialect, tree):
        """Enclosed text becomes a node"""
        dialect.inline_between(between="**", emitter=lambda contents: ["strong", *contents])
        assert tree(dialect, "a **b** c") == ["html", ["p", "a ", ["strong", "b"], " c"]]

    def test_contents_processed_recursively(self, dialect, tree):
        """Markup nests inside enclosed text"""
        dialect.inline_between(between="**", emitter=lambda c: ["strong", *c])
        dialect.inline_between(between="*", word_boundary=True, emitter=lambda c: ["em", *c])
        assert tree(dialect, "**a *b* c**") == [
            "html", ["p", ["strong", "a ", ["em", "b"], " c"]]
        ]

    def test_raw_contents(self, dialect, tree):
        """Raw contents reach the emitter as a string"""
        dialect.inline_between(between="*", emitter=lambda c: ["em", *c])
        dialect.inline_between(between="`", raw_contents=True, emitter=lambda c: ["code", c])
        assert tree(dialect, "`a *b*`") == ["html", ["p", ["code", "a *b*"]]]

    def test_unterminated(self, dialect, tree):
        """Without a closing marker the opening marker is text"""
        dialect.inline_between(between="**", emitter=lambda c: ["strong", *c])
        assert tree(dialect, "a **b") == ["html", ["p", "a **b"]]

    def test_distinct_markers(self, dialect, tree):
        """Different start and stop markers"""
        dialect.inline_between(start="[b]", stop="[/b]", emitter=lambda c: ["b", *c])
        assert tree(dialect, "x [b]y[/b] z") == ["html", ["p", "x ", ["b", "y"], " z"]]
