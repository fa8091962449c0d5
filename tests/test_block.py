"""
Block rule tests - stop matching, nesting and queue handling
"""

import re

import pytest

from dialectic.config import AppSettings
from dialectic.lib.block import offsets_find, stop_findTerminating
from dialectic.lib.dialect import Dialect
from dialectic.models.chunk import Chunk, chunks_join

Q_START = re.compile(r"\[q\]")
Q_STOP = "[/q]"


def chunk_texts(chunks) -> str:
    return "\n\n".join(chunk.text for chunk in chunks)


class TestStopFind:
    """Test the balanced stop search over one chunk"""

    def test_nested_pair_then_terminator(self):
        """A start before the first stop pushes the terminator to the second stop"""
        assert stop_findTerminating([0], [5, 9]) == (1, 0)

    def test_no_stop(self):
        """Unclosed starts carry over"""
        assert stop_findTerminating([0, 3], [9]) == (None, 1)

    def test_stop_closes_carried_nesting(self):
        """A stop lowers nesting left open by an earlier chunk"""
        assert stop_findTerminating([], [2], 1) == (None, 0)

    def test_first_stop_terminates(self):
        """Without open starts the first stop terminates"""
        assert stop_findTerminating([], [4, 8]) == (0, 0)

    def test_start_after_stop(self):
        """A start after the terminator does not matter"""
        assert stop_findTerminating([10], [4]) == (0, 0)

    def test_empty(self):
        """Nothing in the chunk"""
        assert stop_findTerminating([], [], 2) == (None, 2)

    def test_offsets_non_overlapping(self):
        """Occurrences are found left to right without overlap"""
        assert offsets_find("a[/q]b[/q]", "[/q]") == [1, 6]
        assert offsets_find("aaaa", "aa") == [0, 2]


class TestBlockReplace:
    """Test delimited blocks through the block pass"""

    def _quote(self, dialect, captured=None, result=None):
        def emitter(chunks, match, options):
            if captured is not None:
                captured.append(list(chunks))
            if result is not None:
                return result
            return ["blockquote", chunk_texts(chunks)]

        dialect.block_replace(start=Q_START, stop=Q_STOP, emitter=emitter)
        return dialect

    def test_single_chunk(self, dialect, tree):
        """Start and stop in one chunk"""
        self._quote(dialect)
        assert tree(dialect, "[q]hello[/q]") == ["html", ["blockquote", "hello"]]

    def test_leading_and_trailing_text(self, dialect, tree):
        """Text around the block becomes paragraphs"""
        self._quote(dialect)
        assert tree(dialect, "before [q]inside[/q] after") == [
            "html", ["p", "before "], ["blockquote", "inside"], ["p", " after"]
        ]

    def test_spanning_chunks(self, dialect, tree):
        """A block may span several blank-line separated chunks"""
        captured = []
        self._quote(dialect, captured)
        source = "[q]\nline one\n\nline two\n[/q]\n\nafter"
        assert tree(dialect, source) == [
            "html", ["blockquote", "line one\n\nline two"], ["p", "after"]
        ]
        assert [[(c.text, c.line_number) for c in chunks] for chunks in captured] == [
            [("line one", 2), ("line two", 4)]
        ]

    def test_nested_in_one_chunk(self, dialect, tree):
        """An inner pair stays inside the outer block's contents"""
        self._quote(dialect)
        assert tree(dialect, "[q]a [q]b[/q] c[/q]") == [
            "html", ["blockquote", "a [q]b[/q] c"]
        ]

    def test_nested_across_chunks(self, dialect, tree):
        """Nesting is carried from chunk to chunk"""
        self._quote(dialect)
        source = "[q]outer\n\n[q]inner[/q]\n\nstill[/q]\n\nafter"
        assert tree(dialect, source) == [
            "html",
            ["blockquote", "outer\n\n[q]inner[/q]\n\nstill"],
            ["p", "after"],
        ]

    def test_unterminated(self, dialect, tree):
        """Without any stop marker the start marker stays text"""
        self._quote(dialect)
        assert tree(dialect, "[q]never closed\n\nmore") == [
            "html", ["p", "[q]never closed"], ["p", "more"]
        ]

    def test_last_chance_takes_last_stop(self, dialect, tree):
        """Unbalanced but committed: the last stop in reach closes the block"""
        self._quote(dialect)
        assert tree(dialect, "[q]a [q]b[/q]\n\nafter") == [
            "html", ["blockquote", "a [q]b"], ["p", "after"]
        ]

    def test_declining_emitter_restores_queue(self, dialect, tree):
        """A falsy emitter result leaves the text and the queue as they were"""
        self._quote(dialect, result=[])
        assert tree(dialect, "x [q]y[/q]\n\nz") == [
            "html", ["p", "x [q]y[/q]"], ["p", "z"]
        ]

    def test_emitter_receives_options(self, dialect):
        """Cook options reach block emitters"""
        seen = []

        def emitter(chunks, match, options):
            seen.append(options.get("flavour"))
            return ["div", chunk_texts(chunks)]

        dialect.block_replace(start=Q_START, stop=Q_STOP, emitter=emitter)
        assert dialect.cook("[q]x[/q]", {"flavour": "mint"}) == "<div>x</div>"
        assert seen == ["mint"]

    def test_skip_in_traditional_linebreak_mode(self, dialect):
        """Rules can opt out of traditional line-break mode"""
        dialect.block_replace(
            start=Q_START,
            stop=Q_STOP,
            skip_if_traditional_linebreaks=True,
            emitter=lambda chunks, match, options: ["blockquote", chunk_texts(chunks)],
        )
        assert dialect.cook("[q]hi[/q]") == "<blockquote>hi</blockquote>"
        assert dialect.cook("[q]hi[/q]", {"traditional_markdown_linebreaks": True}) == "<p>[q]hi[/q]</p>"

    def test_skip_with_site_wide_traditional_linebreaks(self):
        """The engine settings switch traditional line-break mode on for every cook"""
        dialect = Dialect(AppSettings(traditional_markdown_linebreaks=True))
        dialect.block_replace(
            start=Q_START,
            stop=Q_STOP,
            skip_if_traditional_linebreaks=True,
            emitter=lambda chunks, match, options: ["blockquote", chunk_texts(chunks)],
        )
        assert dialect.linebreaks_areTraditional() is True
        assert dialect.cook("[q]hi[/q]") == "<p>[q]hi[/q]</p>"

    def test_rules_without_skip_ignore_linebreak_mode(self):
        """Only rules that opt out are disabled"""
        dialect = Dialect(AppSettings(traditional_markdown_linebreaks=True))
        dialect.block_replace(
            start=Q_START,
            stop=Q_STOP,
            emitter=lambda chunks, match, options: ["blockquote", chunk_texts(chunks)],
        )
        assert dialect.cook("[q]hi[/q]") == "<blockquote>hi</blockquote>"

    def test_block_rules_take_no_raw_flag(self, dialect):
        """Block contents always arrive as chunks, there is no raw switch"""
        with pytest.raises(TypeError):
            dialect.block_replace(
                start=Q_START,
                stop=Q_STOP,
                raw_contents=True,
                emitter=lambda chunks, match, options: ["pre", chunk_texts(chunks)],
            )

    def test_match_groups_reach_emitter(self, dialect, tree):
        """The start match is handed to the emitter"""
        dialect.block_replace(
            start=re.compile(r"\[note=(\w+)\]"),
            stop="[/note]",
            emitter=lambda chunks, match, options: ["div", {"class": match.group(1)}, chunk_texts(chunks)],
        )
        assert tree(dialect, "[note=warn]careful[/note]") == [
            "html", ["div", {"class": "warn"}, "careful"]
        ]

    def test_raw_handler_registration(self, dialect, tree):
        """block_register installs a handler as is"""
        dialect.block_register(
            "rule",
            lambda chunk, next_chunks: [["hr"]] if chunk.text == "---" else None,
        )
        assert tree(dialect, "a\n\n---\n\nb") == ["html", ["p", "a"], ["hr"], ["p", "b"]]


class TestChunksJoin:
    """Test reassembling captured chunks"""

    def test_keeps_separators(self):
        """Each chunk is followed by its own separator"""
        chunks = [Chunk("a", 1, "\n\n\n"), Chunk("b", 4, "\n  \n"), Chunk("c", 6, "\n\n")]
        assert chunks_join(chunks) == "a\n\n\nb\n  \nc"

    def test_empty(self):
        """No chunks, no text"""
        assert chunks_join([]) == ""

    def test_separators_survive_block_capture(self, dialect):
        """Chunks handed to a block emitter still carry their separators"""
        dialect.block_replace(
            start=Q_START,
            stop=Q_STOP,
            emitter=lambda chunks, match, options: ["pre", chunks_join(chunks)],
        )
        assert dialect.cook("[q]\none\n\n\n\ntwo\n[/q]") == "<pre>one\n\n\n\ntwo</pre>"
