"""Text utilities: display width measurement and word wrapping.

Widths are measured per grapheme cluster so that wide CJK characters,
combining marks and emoji sequences occupy the same number of columns the
terminal gives them.
"""

from __future__ import annotations

import unicodedata

import grapheme
import wcwidth as _wcwidth

# ---------------------------------------------------------------------------
# Width cache (capped at 512 entries)
# ---------------------------------------------------------------------------

_width_cache: dict[str, int] = {}
_WIDTH_CACHE_MAX = 512


def _cache_width(key: str, value: int) -> int:
    if len(_width_cache) >= _WIDTH_CACHE_MAX:
        _width_cache.clear()
    _width_cache[key] = value
    return value


# ---------------------------------------------------------------------------
# Grapheme width
# ---------------------------------------------------------------------------


def split_graphemes(text: str) -> list[str]:
    """Split *text* into user-perceived characters."""
    return list(grapheme.graphemes(text))


def grapheme_width(g: str) -> int:
    """Return the terminal display width of a single grapheme cluster.

    Rules:
    1. Zero-width characters (control, combining marks, etc.) -> 0
    2. Emoji (VS16, ZWJ sequences, skin tones, flags) -> 2
    3. Otherwise delegate to wcwidth for the first meaningful codepoint.
    """
    if not g:
        return 0

    if g == "\t":
        return 3

    if len(g) == 1:
        cp = ord(g)
        if cp < 0x20 or (0x7F <= cp <= 0x9F):
            return 0
        return max(_wcwidth.wcwidth(g), 0)

    for ch in g:
        cp = ord(ch)
        if cp in (0xFE0F, 0x200D):  # VS16, ZWJ
            return 2
        if 0x1F3FB <= cp <= 0x1F3FF:  # Skin tone modifiers
            return 2
        if 0x1F1E6 <= cp <= 0x1F1FF:  # Regional indicators
            return 2

    first_cp = ord(g[0])
    if first_cp >= 0x1F000:
        return 2

    cat = unicodedata.category(g[0])
    if cat.startswith("M") or cat == "Cf":
        return 0

    return max(_wcwidth.wcwidth(g[0]), 0)


# ---------------------------------------------------------------------------
# visible_width
# ---------------------------------------------------------------------------


def visible_width(text: str) -> int:
    """Calculate the terminal width of *text*.

    * Treats tabs as 3 spaces.
    * Uses a fast ASCII path when possible.
    * Caches results for non-ASCII strings.
    """
    if not text:
        return 0

    text = text.replace("\t", "   ")

    if text.isascii() and text.isprintable():
        return len(text)

    cached = _width_cache.get(text)
    if cached is not None:
        return cached

    total = sum(grapheme_width(g) for g in grapheme.graphemes(text))
    return _cache_width(text, total)


# ---------------------------------------------------------------------------
# wrap_text
# ---------------------------------------------------------------------------


def wrap_text(text: str, width: int, first_line_offset: int = 0) -> list[str]:
    """Word-wrap *text* to *width* columns.

    The first line starts with *first_line_offset* columns already used.
    Embedded newlines start a new line. Words longer than a line are broken
    at grapheme boundaries. The result always has at least one line.
    """
    if width <= 0:
        return [text]

    result: list[str] = []
    offset = first_line_offset
    for physical_line in text.split("\n"):
        result.extend(_wrap_single_line(physical_line, width, offset))
        offset = 0

    return result


def _wrap_single_line(line: str, width: int, offset: int) -> list[str]:
    """Wrap a single line (no embedded newlines) to *width* columns."""
    if not line:
        return [""]

    result_lines: list[str] = []
    current: list[str] = []
    current_width = offset

    for g in grapheme.graphemes(line):
        g_width = grapheme_width(g)

        if current_width + g_width > width and current_width > 0:
            before, after = _find_word_break(current)
            if before is not None and g != " ":
                result_lines.append("".join(before))
                current = after
                current_width = sum(grapheme_width(c) for c in after)
            else:
                result_lines.append("".join(current).rstrip(" "))
                current = []
                current_width = 0
                if g == " ":
                    continue

        current.append(g)
        current_width += g_width

    result_lines.append("".join(current))
    return result_lines


def _find_word_break(parts: list[str]) -> tuple[list[str] | None, list[str]]:
    """Split *parts* at its last space.

    Returns ``(before, after)`` with the space dropped, or ``(None, parts)``
    when there is no usable break point.
    """
    for i in range(len(parts) - 1, 0, -1):
        if parts[i] == " ":
            before = parts[:i]
            while before and before[-1] == " ":
                before.pop()
            if not before:
                break
            return before, parts[i + 1 :]
    return None, parts
