"""Apply byte-offset text edits to a source string in a single forward pass."""

import logging
from collections.abc import Iterable
from dataclasses import dataclass

from route_codemod.models import Edit

logger = logging.getLogger(__name__)

_WHITESPACE = b" \t\r\n\f\v"


@dataclass(frozen=True)
class FixResult:
    text: str
    applied: list[Edit]
    skipped: list[Edit]

    @property
    def fixed(self) -> bool:
        return bool(self.applied)


def trimmed_start(source: bytes, start: int, floor: int = 0, keep_line_break: bool = False) -> int:
    """Move ``start`` back over the whitespace that precedes it.

    Only when that whitespace spans a line break: the deleted node then takes
    its indentation and the blank lines above it, while the previous line
    keeps every character up to its last non-whitespace byte. With
    ``keep_line_break`` only the indentation after the last line break goes.
    A node sharing its line with earlier code keeps its original start.
    """
    pos = start
    while pos > floor and source[pos - 1] in _WHITESPACE:
        pos -= 1
    gap = source[pos:start]
    last_break = max(gap.rfind(b"\n"), gap.rfind(b"\r"))
    if last_break >= 0:
        return pos + last_break + 1 if keep_line_break else pos
    if pos == 0:
        return pos
    return start


def trimmed_span(source: bytes, start: int, end: int, floor: int = 0, ceiling: int | None = None) -> tuple[int, int]:
    """Widen a deletion over the whitespace around it.

    Code kept after the node on its line stays on that line, so only the
    node's indentation and the blanks before that code go. A deletion that
    reaches the start of the text also takes the line break ending its line.
    ``ceiling`` bounds the widened end, usually the start of the next edit.
    """
    if ceiling is None:
        ceiling = len(source)
    newline = source.find(b"\n", end)
    line_end = len(source) if newline == -1 else newline
    shares_line = bool(source[end:line_end].strip())

    start = trimmed_start(source, start, floor, keep_line_break=shares_line)
    if shares_line:
        while end < ceiling and source[end] in b" \t":
            end += 1
    elif start == 0 and line_end < ceiling:
        end = line_end + 1
    return start, end


def apply_edits(source: str, edits: Iterable[Edit]) -> FixResult:
    source_bytes = source.encode("utf-8")
    ordered = sorted(edits, key=lambda e: e.span.start)

    chunks: list[bytes] = []
    applied: list[Edit] = []
    skipped: list[Edit] = []
    last_end = 0

    for index, edit in enumerate(ordered):
        start, end = edit.span.start, edit.span.end
        if start > end or start < last_end or end > len(source_bytes):
            skipped.append(edit)
            continue
        if edit.trim_leading_whitespace:
            following = ordered[index + 1 :]
            ceiling = following[0].span.start if following else len(source_bytes)
            start, end = trimmed_span(source_bytes, start, end, last_end, max(ceiling, end))
        chunks.append(source_bytes[last_end:start])
        chunks.append(edit.replacement.encode("utf-8"))
        applied.append(edit)
        last_end = end

    chunks.append(source_bytes[last_end:])

    if skipped:
        logger.warning("Dropped %d conflicting edit(s)", len(skipped))
        for edit in skipped:
            logger.debug("Dropped edit %d..%d", edit.span.start, edit.span.end)

    skipped.sort(key=lambda e: (e.span.start, e.span.end))
    return FixResult(text=b"".join(chunks).decode("utf-8"), applied=applied, skipped=skipped)
