"""
Display Preferences

Durable, per-device choices. Unlike the session these survive logout.
"""

from enum import Enum

from pydantic import BaseModel, ConfigDict


class Theme(str, Enum):
    LIGHT = "light"
    DARK = "dark"


class Accent(str, Enum):
    """Accent colour choices, each mapped to a chart palette."""
    PURPLE = "purple"
    BLUE = "blue"
    GREEN = "green"
    ORANGE = "orange"
    PINK = "pink"
    TEAL = "teal"


# Primary / secondary colours per accent
ACCENT_COLORS: dict[Accent, tuple[str, str]] = {
    Accent.PURPLE: ("#9333ea", "#c084fc"),
    Accent.BLUE: ("#2563eb", "#60a5fa"),
    Accent.GREEN: ("#16a34a", "#4ade80"),
    Accent.ORANGE: ("#ea580c", "#fb923c"),
    Accent.PINK: ("#db2777", "#f472b6"),
    Accent.TEAL: ("#0d9488", "#2dd4bf"),
}

# Five-step palettes used for pie slices
ACCENT_PALETTES: dict[Accent, tuple[str, ...]] = {
    Accent.PURPLE: ("#9333ea", "#c084fc", "#a855f7", "#d8b4fe", "#e9d5ff"),
    Accent.BLUE: ("#2563eb", "#60a5fa", "#3b82f6", "#93c5fd", "#dbeafe"),
    Accent.GREEN: ("#16a34a", "#4ade80", "#22c55e", "#86efac", "#dcfce7"),
    Accent.ORANGE: ("#ea580c", "#fb923c", "#f97316", "#fdba74", "#fed7aa"),
    Accent.PINK: ("#db2777", "#f472b6", "#ec4899", "#f9a8d4", "#fce7f3"),
    Accent.TEAL: ("#0d9488", "#2dd4bf", "#14b8a6", "#5eead4", "#ccfbf1"),
}


class Preferences(BaseModel):
    """Stored display preferences."""

    model_config = ConfigDict(frozen=True)

    dark_mode: bool = False
    hide_amounts: bool = False
    accent: Accent = Accent.PURPLE

    @property
    def theme(self) -> Theme:
        return Theme.DARK if self.dark_mode else Theme.LIGHT

    @property
    def primary_color(self) -> str:
        return ACCENT_COLORS[self.accent][0]

    @property
    def secondary_color(self) -> str:
        return ACCENT_COLORS[self.accent][1]

    @property
    def palette(self) -> tuple[str, ...]:
        return ACCENT_PALETTES[self.accent]
