"""Tests for emoji utilities (pure, no Home Assistant)."""

import pytest

from custom_components.custom_badges import const
from custom_components.custom_badges.utils.emoji_utils import (
    TWEMOJI_URL_FMT,
    emoji_codepoints,
    emoji_to_image_url,
    first_grapheme,
)

HEART = "❤️"
HEART_ON_FIRE = "❤️‍\U0001f525"
WOMAN_TECHNOLOGIST = "\U0001f469‍\U0001f4bb"
THUMBS_UP_MEDIUM = "\U0001f44d\U0001f3fd"
KEYCAP_ONE = "1️⃣"
FLAG_NL = "\U0001f1f3\U0001f1f1"


@pytest.mark.parametrize(
    ("glyph", "expected"),
    [
        ("\U0001f3ae", "1f3ae"),
        ("\U0001f4bb", "1f4bb"),
        (HEART, "2764"),
        (HEART_ON_FIRE, "2764-1f525"),
        (WOMAN_TECHNOLOGIST, "1f469-1f4bb"),
        (THUMBS_UP_MEDIUM, "1f44d-1f3fd"),
        (FLAG_NL, "1f1f3-1f1f1"),
    ],
)
def test_emoji_codepoints(glyph: str, expected: str) -> None:
    """Codepoints are lower-case hex joined by '-', without FE0F or ZWJ."""
    assert emoji_codepoints(glyph) == expected


def test_emoji_to_image_url() -> None:
    """A glyph resolves to its Twemoji 72x72 PNG."""
    assert emoji_to_image_url("\U0001f3ae") == (
        "https://cdn.jsdelivr.net/gh/twitter/twemoji@14.0.2/assets/72x72/1f3ae.png"
    )


def test_emoji_to_image_url_empty() -> None:
    """Empty input and selector-only input resolve to no URL."""
    assert emoji_to_image_url("") == ""
    assert emoji_to_image_url("️") == ""


def test_url_format_matches_const() -> None:
    """The pure module's local URL format stays in sync with const."""
    assert TWEMOJI_URL_FMT == const.TWEMOJI_URL_FMT


@pytest.mark.parametrize(
    ("text", "expected"),
    [
        ("", ""),
        ("\U0001f3ae", "\U0001f3ae"),
        ("\U0001f3ae\U0001f4bb", "\U0001f3ae"),
        (HEART + " love", HEART),
        (THUMBS_UP_MEDIUM + "\U0001f44d", THUMBS_UP_MEDIUM),
        (WOMAN_TECHNOLOGIST + " dev", WOMAN_TECHNOLOGIST),
        (KEYCAP_ONE + "2️⃣", KEYCAP_ONE),
        (FLAG_NL + "\U0001f1e7\U0001f1ea", FLAG_NL),
        ("abc", "a"),
    ],
)
def test_first_grapheme(text: str, expected: str) -> None:
    """Only the first user-perceived character is kept."""
    assert first_grapheme(text) == expected


def test_first_grapheme_trailing_joiner() -> None:
    """A dangling zero width joiner is not consumed."""
    assert first_grapheme("\U0001f3ae‍") == "\U0001f3ae"
