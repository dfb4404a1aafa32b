"""
Class attribute scope detection.

Decides whether the caret sits inside a `class="..."` value and which part of
the buffer a completion replaces. Both functions work on plain strings taken
from one document snapshot; offsets are only valid against that snapshot.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

CLASS_ATTRIBUTE_MARKER = 'class="'
QUOTE = '"'

_MARKER_PATTERN = re.compile(re.escape(CLASS_ATTRIBUTE_MARKER), re.IGNORECASE)

_TOKEN_SEPARATOR = re.compile(r"\s")


@dataclass(frozen=True)
class ScopeMatch:
    """Result of scope detection."""

    is_in_scope: bool
    partial_text: str = ""


@dataclass(frozen=True)
class ReplacementSpan:
    """Offsets of the token being typed: [start_offset, end_offset)."""

    start_offset: int
    end_offset: int

    def text(self, buffer: str) -> str:
        return buffer[self.start_offset:self.end_offset]


NOT_IN_SCOPE = ScopeMatch(is_in_scope=False)


def detect_scope(preceding_text: str) -> ScopeMatch:
    """
    Check if the end of `preceding_text` lies inside an open class attribute.

    Only the last `class="` marker is inspected. The caret is in scope when
    the first quote after that marker is also the last quote of the text,
    i.e. the attribute value has not been closed yet.

    Examples:
        '<div class="flex te'    -> in scope, partial text "flex te"
        '<div class="flex"> te'  -> not in scope
    """
    # Offsets must stay valid in preceding_text; lower() can change its length.
    marker = None
    for marker in _MARKER_PATTERN.finditer(preceding_text):
        pass
    if marker is None:
        return NOT_IN_SCOPE
    marker_index = marker.start()

    opening_quote = preceding_text.find(QUOTE, marker_index)
    if opening_quote == -1:
        return NOT_IN_SCOPE

    last_quote = preceding_text.rfind(QUOTE)
    if last_quote != opening_quote:
        return NOT_IN_SCOPE

    return ScopeMatch(is_in_scope=True, partial_text=preceding_text[opening_quote + 1:])


def current_class_token(partial_text: str) -> str:
    """Return the last whitespace-delimited token ('' after a trailing space)."""
    return _TOKEN_SEPARATOR.split(partial_text)[-1]


def _is_boundary(char: str) -> bool:
    return char == QUOTE or char.isspace()


def compute_replacement_span(buffer: str, caret_offset: int) -> ReplacementSpan:
    """
    Compute the span of the class token ending at `caret_offset`.

    Walks backwards from the caret until a quote or whitespace character.
    Line breaks count as whitespace so the span never leaves the caret's
    line. The walk stops at offset 0 when no boundary exists.
    """
    caret_offset = max(0, min(caret_offset, len(buffer)))

    start = caret_offset
    while start > 0 and not _is_boundary(buffer[start - 1]):
        start -= 1

    return ReplacementSpan(start_offset=start, end_offset=caret_offset)


def compute_token_span(buffer: str, offset: int) -> ReplacementSpan:
    """Span of the whole class token around `offset`, e.g. for hover."""
    span = compute_replacement_span(buffer, offset)

    end = span.end_offset
    while end < len(buffer) and not _is_boundary(buffer[end]):
        end += 1

    return ReplacementSpan(start_offset=span.start_offset, end_offset=end)
