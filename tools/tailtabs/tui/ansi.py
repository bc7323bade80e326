"""
ANSI escape decoding for tailed lines.

Programs that log to a terminal often keep their colour codes when
redirected to a file. Drawing those bytes raw in curses shows garbage,
so each line is split into styled spans here and the escape sequences
are dropped from the plain text.

Supported SGR parameters:
    0        reset
    1 / 22   bold on / off
    30-37    standard foreground colours
    39       default foreground
    90-97    bright foreground colours

Everything else (cursor movement, background colours, 256-colour
codes) is parsed and ignored.
"""

import re
from typing import List, Optional

from .model import Line, Span

# CSI sequence: ESC [ params final-byte
CSI_PATTERN = re.compile(r"\x1b\[([0-9;?]*)([@-~])")
# Lone escapes and other C0 controls that would corrupt a curses cell
CONTROL_PATTERN = re.compile(r"[\x00-\x08\x0b-\x1f\x7f]")


def _apply_sgr(params: str, fg: Optional[int], bold: bool):
    codes = [int(p) for p in params.split(";") if p.isdigit()] or [0]
    i = 0
    while i < len(codes):
        code = codes[i]
        if code == 0:
            fg, bold = None, False
        elif code == 1:
            bold = True
        elif code == 22:
            bold = False
        elif 30 <= code <= 37:
            fg = code - 30
        elif code == 39:
            fg = None
        elif 90 <= code <= 97:
            fg = code - 90 + 8
        elif code in (38, 48):
            # Extended colour: skip "5;n" or "2;r;g;b"
            if i + 1 < len(codes) and codes[i + 1] == 5:
                i += 2
            elif i + 1 < len(codes) and codes[i + 1] == 2:
                i += 4
        i += 1
    return fg, bold


def parse_line(raw: str) -> Line:
    """
    Convert one decoded text line into a styled Line.

    Args:
        raw: Line text without its trailing newline; may contain escapes.

    Returns:
        Line: Plain text plus the spans that cover it.

    Example:
        >>> line = parse_line("\\x1b[31mERROR\\x1b[0m boom")
        >>> line.text
        'ERROR boom'
        >>> [(s.text, s.fg) for s in line.spans]
        [('ERROR', 1), (' boom', None)]
    """
    # Fast path: the vast majority of log lines carry no escapes
    if "\x1b" not in raw:
        return Line.plain(CONTROL_PATTERN.sub("", raw))

    spans: List[Span] = []
    fg: Optional[int] = None
    bold = False
    pos = 0

    for match in CSI_PATTERN.finditer(raw):
        chunk = CONTROL_PATTERN.sub("", raw[pos:match.start()])
        if chunk:
            spans.append(Span(chunk, fg, bold))
        if match.group(2) == "m":
            fg, bold = _apply_sgr(match.group(1), fg, bold)
        pos = match.end()

    chunk = CONTROL_PATTERN.sub("", raw[pos:])
    if chunk:
        spans.append(Span(chunk, fg, bold))

    return Line("".join(s.text for s in spans), tuple(spans))
