from enum import Enum
from typing import Mapping, NamedTuple

import numpy as np
from numpy.typing import NDArray

class Language(Enum):
    ENGLISH = "en"
    CHINESE = "zh"
    FRENCH = "fr"
    JAPANESE = "ja"
    SPANISH = "es"

    @property
    def display_name(self) -> str:
        return _LANGUAGE_NAMES[self]

    def next(self) -> "Language":
        members = list(Language)
        return members[(members.index(self) + 1) % len(members)]

    @classmethod
    def from_code(cls, code: str) -> "Language":
        return cls(code.strip().lower())

_LANGUAGE_NAMES = {
    Language.ENGLISH: "English",
    Language.CHINESE: "中文",
    Language.FRENCH: "Français",
    Language.JAPANESE: "日本語",
    Language.SPANISH: "Español",
}

class ColorMode(Enum):
    TRUECOLOR = "truecolor"
    INDEXED = "256"

class PhaseModel(Enum):
    SIMPLE = "simple"
    MEEUS = "meeus"

class PhaseName(Enum):
    NEW = 0
    WAXING_CRESCENT = 1
    FIRST_QUARTER = 2
    WAXING_GIBBOUS = 3
    FULL = 4
    WANING_GIBBOUS = 5
    LAST_QUARTER = 6
    WANING_CRESCENT = 7

    @property
    def label(self) -> str:
        return _PHASE_LABELS[self]

_PHASE_LABELS = {
    PhaseName.NEW: "New Moon",
    PhaseName.WAXING_CRESCENT: "Waxing Crescent",
    PhaseName.FIRST_QUARTER: "First Quarter",
    PhaseName.WAXING_GIBBOUS: "Waxing Gibbous",
    PhaseName.FULL: "Full Moon",
    PhaseName.WANING_GIBBOUS: "Waning Gibbous",
    PhaseName.LAST_QUARTER: "Last Quarter",
    PhaseName.WANING_CRESCENT: "Waning Crescent",
}

class MoonStatus(NamedTuple):
    phase: PhaseName
    phase_fraction: float   # 0.0 = new, 0.5 = full, wraps at 1.0
    age_days: float
    illumination: float     # percent

class Texture(NamedTuple):
    grid: NDArray
    min_x: int
    max_x: int
    min_y: int
    max_y: int

    @property
    def crop_w(self) -> int:
        return self.max_x - self.min_x + 1

    @property
    def crop_h(self) -> int:
        return self.max_y - self.min_y + 1

    @property
    def is_empty(self) -> bool:
        return self.crop_w <= 0 or self.crop_h <= 0

    @property
    def aspect(self) -> float:
        return self.crop_w / self.crop_h if not self.is_empty else 0.0

class MoonFeature(NamedTuple):
    names: Mapping
    lat: float
    lon: float

    def name(self, language: Language) -> str:
        return self.names.get(language) or self.names[Language.ENGLISH]

class Color(NamedTuple):
    rgb: tuple
    index: int

    def ansi_fg(self, color_mode: ColorMode) -> str:
        if color_mode == ColorMode.TRUECOLOR:
            r, g, b = self.rgb
            return f"\x1b[38;2;{r};{g};{b}m"
        return f"\x1b[38;5;{self.index}m"

class Cell(NamedTuple):
    char: str
    fg: Color
    bold: bool = False

class RenderRequest(NamedTuple):
    width: int
    height: int
    phase_fraction: float
    show_labels: bool = False
    hide_dark: bool = False
    language: Language = Language.ENGLISH
    color_mode: ColorMode = ColorMode.TRUECOLOR

class DrawBox(NamedTuple):
    start_x: float
    start_y: float
    draw_w: float
    draw_h: float

    def cell_at(self, nx: float, ny: float) -> tuple:
        """Terminal cell holding the normalized point (nx, ny) of the box."""
        return (int(np.floor(self.start_x + nx * self.draw_w)),
                int(np.floor(self.start_y + ny * self.draw_h)))
