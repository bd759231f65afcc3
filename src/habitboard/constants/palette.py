"""Fixed emoji and color palette offered when creating a tracker."""

from __future__ import annotations

NAME_MAX_LENGTH = 38

EMOJIS: tuple[str, ...] = (
    "🙂", "😻", "🌺", "🐶", "❤️", "😱",
    "😇", "😡", "🥶", "🤔", "🙌", "🍔",
    "🥦", "🏓", "🥇", "🎸", "🏝", "😪",
)

COLORS: tuple[str, ...] = tuple(f"CollectionColor{n}" for n in range(1, 19))


def is_palette_emoji(value: str) -> bool:
    return value in EMOJIS


def is_palette_color(value: str) -> bool:
    return value in COLORS


__all__ = ["COLORS", "EMOJIS", "NAME_MAX_LENGTH", "is_palette_color", "is_palette_emoji"]
