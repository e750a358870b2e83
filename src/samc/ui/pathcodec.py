"""Display-safe encoding of service paths in acme window bodies.

acme splits clicked words on spaces and punctuation, so those characters are
swapped for look-alike glyphs whenever a path is shown and swapped back when
clicked text is read.
"""

from __future__ import annotations

_PAIRS: tuple[tuple[str, str], ...] = (
    ("(", "〔"),
    (")", "〕"),
    ("&", "⊕"),
    ("?", "¿"),
    ("'", "´"),
    ("[", "【"),
    ("]", "】"),
    (":", "᛬"),
    ("<", "〈"),
    (">", "〉"),
    ("+", "±"),
    (".", "。"),
    ("-", "‒"),
    (",", "、"),
    (" ", "⋯"),
    ("!", "¡"),
    ("#", "﹟"),
    ("{", "﹛"),
    ("}", "﹜"),
)

PROTECTED_CHARS = frozenset(plain for plain, _ in _PAIRS)
SUBSTITUTE_GLYPHS = frozenset(glyph for _, glyph in _PAIRS)

_ENCODE = str.maketrans(dict(_PAIRS))
_DECODE = str.maketrans({glyph: plain for plain, glyph in _PAIRS})


def encode(text: str) -> str:
    """Replace structural characters with their display glyphs."""
    return text.translate(_ENCODE)


def decode(text: str) -> str:
    """Turn display glyphs back into the characters they stand for."""
    return text.translate(_DECODE)
