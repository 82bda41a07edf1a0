"""Tests for badge record building, display rules and icon resolution."""

from custom_components.custom_badges import const
from custom_components.custom_badges.data_builders import (
    build_badge_record,
    build_badge_set,
    build_default_badge_set,
    is_displayable,
    resolve_icon_url,
)


def test_build_badge_record_defaults() -> None:
    """Missing fields become empty strings."""
    assert build_badge_record(None) == {"name": "", "emoji": "", "url": ""}
    assert build_badge_record({"name": "Solo"}) == {
        "name": "Solo",
        "emoji": "",
        "url": "",
    }


def test_build_badge_record_normalizes() -> None:
    """Name and URL are kept verbatim, emoji is cut to one grapheme, None is empty."""
    record = build_badge_record(
        {
            "name": "  Gaming ",
            "emoji": " \U0001f3ae\U0001f4bb",
            "url": None,
            "extra": "dropped",
        }
    )
    assert record == {"name": "  Gaming ", "emoji": "🎮", "url": ""}


def test_build_badge_record_non_string_values() -> None:
    """Non-string values are converted to text."""
    assert build_badge_record({"name": 42})["name"] == "42"


def test_build_badge_set_keeps_order_and_skips_malformed() -> None:
    """Order is display order; entries that are not mappings are dropped."""
    badge_set = build_badge_set(
        [{"name": "B", "emoji": "💻"}, "junk", None, {"name": "A", "emoji": "🎮"}]
    )
    assert [record["name"] for record in badge_set] == ["B", "A"]
    assert build_badge_set(None) == []
    assert build_badge_set([]) == []


def test_build_default_badge_set_returns_fresh_copies() -> None:
    """Defaults are Gaming and Developer, and callers cannot mutate the constant."""
    defaults = build_default_badge_set()
    assert defaults == [
        {"name": "Gaming", "emoji": "🎮", "url": ""},
        {"name": "Developer", "emoji": "💻", "url": ""},
    ]
    defaults[0]["name"] = "Changed"
    assert const.DEFAULT_BADGES[0][const.DATA_BADGE_NAME] == "Gaming"


def test_is_displayable() -> None:
    """A badge needs a name and an emoji or a URL."""
    assert is_displayable({"name": "G", "emoji": "🎮", "url": ""})
    assert is_displayable({"name": "G", "emoji": "", "url": "https://x/i.png"})
    assert not is_displayable({"name": "", "emoji": "🎮", "url": ""})
    assert not is_displayable({"name": "G", "emoji": "", "url": ""})


def test_resolve_icon_url_prefers_url() -> None:
    """An explicit URL wins over the emoji image."""
    assert (
        resolve_icon_url({"name": "X", "emoji": "🎮", "url": "https://x/i.png"})
        == "https://x/i.png"
    )
    assert resolve_icon_url({"name": "X", "emoji": "🎮", "url": ""}).endswith(
        "/1f3ae.png"
    )
