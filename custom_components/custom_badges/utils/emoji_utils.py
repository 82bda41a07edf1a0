# File: utils/emoji_utils.py
"""Emoji utilities for Custom Badges.

Pure Python string functions with ZERO Home Assistant dependencies.
All functions here can be unit tested without Home Assistant mocking.

⚠️ UTILS PURITY: NO `homeassistant.*` imports allowed.

Functions:
    - emoji_to_image_url: Resolve a glyph to its Twemoji PNG URL
    - emoji_codepoints: Hex codepoint sequence used in Twemoji file names
    - first_grapheme: First user-perceived character of a string
"""

from __future__ import annotations

# ==============================================================================
# Constants (local copies to avoid circular imports)
# ==============================================================================

TWEMOJI_URL_FMT = (
    "https://cdn.jsdelivr.net/gh/twitter/twemoji@14.0.2/assets/72x72/{}.png"
)

_VARIATION_SELECTORS = range(0xFE00, 0xFE10)
_ZERO_WIDTH_JOINER = 0x200D
_KEYCAP_COMBINER = 0x20E3
_SKIN_TONE_MODIFIERS = range(0x1F3FB, 0x1F400)
_TAG_CHARACTERS = range(0xE0020, 0xE0080)
_REGIONAL_INDICATORS = range(0x1F1E6, 0x1F200)


def emoji_codepoints(glyph: str) -> str:
    """Return the dash-joined hex codepoints of a glyph.

    Variation selectors (U+FE00..U+FE0F) and the zero width joiner are
    dropped, matching the file names the badge icons were published under.

    Examples:
        emoji_codepoints("🎮") -> "1f3ae"
        emoji_codepoints("❤️‍🔥") -> "2764-1f525"
    """
    return "-".join(
        format(ord(char), "x")
        for char in glyph
        if ord(char) not in _VARIATION_SELECTORS and ord(char) != _ZERO_WIDTH_JOINER
    )


def emoji_to_image_url(glyph: str) -> str:
    """Resolve an emoji glyph to an image URL.

    Total and pure: empty input yields an empty string.
    """
    if not glyph:
        return ""
    codepoints = emoji_codepoints(glyph)
    if not codepoints:
        return ""
    return TWEMOJI_URL_FMT.format(codepoints)


def first_grapheme(text: str) -> str:
    """Return the first user-perceived character of text.

    Covers the sequences badge emoji actually use: a base codepoint followed
    by variation selectors, skin tone modifiers, a keycap combiner or tag
    characters, ZWJ-joined continuations, and regional indicator flag pairs.
    """
    if not text:
        return ""

    chars = list(text)
    if (
        len(chars) > 1
        and ord(chars[0]) in _REGIONAL_INDICATORS
        and ord(chars[1]) in _REGIONAL_INDICATORS
    ):
        return chars[0] + chars[1]

    end = 1
    while end < len(chars):
        codepoint = ord(chars[end])
        if (
            codepoint in _VARIATION_SELECTORS
            or codepoint in _SKIN_TONE_MODIFIERS
            or codepoint in _TAG_CHARACTERS
            or codepoint == _KEYCAP_COMBINER
        ):
            end += 1
        elif codepoint == _ZERO_WIDTH_JOINER and end + 1 < len(chars):
            end += 2
        else:
            break
    return "".join(chars[:end])
