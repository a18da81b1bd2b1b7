"""Tests for the shared value types."""

import pytest

from asciimoon.types import Color, ColorMode, DrawBox, Language, MoonFeature


def test_language_cycles_in_order() -> None:
    order = [Language.ENGLISH]
    for _ in range(5):
        order.append(order[-1].next())
    assert order == [
        Language.ENGLISH, Language.CHINESE, Language.FRENCH,
        Language.JAPANESE, Language.SPANISH, Language.ENGLISH,
    ]


@pytest.mark.parametrize(
    "code, language, display_name",
    [
        ("en", Language.ENGLISH, "English"),
        ("ZH", Language.CHINESE, "中文"),
        (" fr ", Language.FRENCH, "Français"),
        ("ja", Language.JAPANESE, "日本語"),
        ("es", Language.SPANISH, "Español"),
    ],
)
def test_language_from_code(code: str, language: Language, display_name: str) -> None:
    assert Language.from_code(code) is language
    assert language.display_name == display_name


def test_language_from_unknown_code() -> None:
    with pytest.raises(ValueError):
        Language.from_code("de")


def test_color_encodings() -> None:
    color = Color(rgb=(1, 2, 3), index=42)
    assert color.ansi_fg(ColorMode.TRUECOLOR) == "\x1b[38;2;1;2;3m"
    assert color.ansi_fg(ColorMode.INDEXED) == "\x1b[38;5;42m"


def test_feature_name_fallback() -> None:
    feature = MoonFeature(names={Language.ENGLISH: "Plato", Language.SPANISH: ""}, lat=51.6, lon=-9.3)
    assert feature.name(Language.SPANISH) == "Plato"
    assert feature.name(Language.FRENCH) == "Plato"


def test_draw_box_cell_at() -> None:
    box = DrawBox(start_x=10.0, start_y=4.5, draw_w=20.0, draw_h=8.0)
    assert box.cell_at(0.0, 0.0) == (10, 4)
    assert box.cell_at(0.5, 0.5) == (20, 8)
    assert box.cell_at(-0.6, 0.0) == (-2, 4)
