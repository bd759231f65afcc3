"""Static data shared by the store and the CLI."""

from .palette import COLORS, EMOJIS, NAME_MAX_LENGTH

__all__ = ["COLORS", "EMOJIS", "NAME_MAX_LENGTH"]
