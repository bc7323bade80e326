"""
Tests for ANSI SGR decoding.
"""

from tailtabs.tui.ansi import parse_line
from tailtabs.tui.model import Span


class TestParseLine:
    """Tests for parse_line."""

    def test_plain_text(self):
        line = parse_line("hello world")

        assert line.text == "hello world"
        assert line.spans == (Span("hello world"),)

    def test_empty_line_has_no_spans(self):
        line = parse_line("")

        assert line.text == ""
        assert line.spans == ()

    def test_colour_and_reset(self):
        line = parse_line("\x1b[31mERROR\x1b[0m boom")

        assert line.text == "ERROR boom"
        assert line.spans == (Span("ERROR", 1), Span(" boom"))

    def test_bold_bright_and_default_foreground(self):
        line = parse_line("\x1b[1;92mOK\x1b[39m plain bold\x1b[22m normal")

        assert line.spans == (
            Span("OK", 10, True),
            Span(" plain bold", None, True),
            Span(" normal", None, False),
        )

    def test_extended_colours_are_skipped(self):
        line = parse_line("\x1b[38;5;208morange\x1b[38;2;1;2;3m rgb\x1b[m")

        assert line.text == "orange rgb"
        assert all(span.fg is None for span in line.spans)

    def test_non_sgr_sequences_are_stripped(self):
        line = parse_line("\x1b[2K\x1b[1Gprogress 50%")

        assert line.text == "progress 50%"

    def test_control_characters_removed(self):
        assert parse_line("tab\there\x07bell").text == "tab\there" + "bell"
