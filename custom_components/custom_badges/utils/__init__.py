# File: utils/__init__.py
"""Pure Python utilities for Custom Badges.

This module contains pure Python functions with ZERO Home Assistant dependencies.
All functions here can be unit tested without Home Assistant mocking.

Submodules:
    - emoji_utils: Glyph to image URL resolution, grapheme truncation

Usage:
    from .utils import emoji_utils
    from .utils.emoji_utils import emoji_to_image_url
"""

from . import emoji_utils

__all__ = ["emoji_utils"]
