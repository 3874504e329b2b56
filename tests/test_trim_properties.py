"""Property-based tests for whitespace trimming using Hypothesis."""

from __future__ import annotations

import re

from hypothesis import given, strategies as st

from sonar_dev.trimmer import trim_text

_LINE_BREAK = re.compile(r"\r\n|\r|\n")

# Lines without line breaks, built from words and runs of spaces and tabs.
_word = st.text(alphabet=st.characters(exclude_categories=("Cc", "Cs", "Zs", "Zl", "Zp")), min_size=1)
_gap = st.text(alphabet=" \t", min_size=1, max_size=5)
_padding = st.text(alphabet=" \t", max_size=5)


@st.composite
def padded_line(draw: st.DrawFn) -> tuple[str, str]:
    """A line with leading/trailing padding, and the line without it."""
    words = draw(st.lists(_word, min_size=1, max_size=5))
    gaps = [draw(_gap) for _ in words[1:]]
    core = words[0] + "".join(gap + word for gap, word in zip(gaps, words[1:]))
    return draw(_padding) + core + draw(_padding), core


class TestTrimInvariants:
    @given(st.text())
    def test_idempotent(self, text: str) -> None:
        """Property: trimming twice equals trimming once."""
        once = trim_text(text)
        assert trim_text(once) == once

    @given(st.lists(padded_line(), min_size=1, max_size=10), st.sampled_from(["\n", "\r\n", "\r"]))
    def test_interior_whitespace_preserved(
        self, lines: list[tuple[str, str]], newline: str
    ) -> None:
        """Property: each line keeps its interior whitespace byte-for-byte."""
        text = newline.join(padded for padded, _ in lines)
        expected = "".join(core + newline for _, core in lines)
        assert trim_text(text) == expected

    @given(st.text())
    def test_no_line_has_outer_whitespace(self, text: str) -> None:
        """Property: no output line starts or ends with whitespace."""
        for line in _LINE_BREAK.split(trim_text(text)):
            assert line == line.strip()

    @given(st.text())
    def test_empty_only_for_empty_input(self, text: str) -> None:
        """Property: only empty text trims to empty text."""
        assert (trim_text(text) == "") == (text == "")
