"""Tests for texture and feature loading."""

import pytest

from asciimoon.data_loader import (
    load_moon_features,
    load_texture,
    parse_feature_line,
    parse_texture,
)
from asciimoon.types import Language


def test_parse_texture_crop_box() -> None:
    texture = parse_texture("  ##\n\n #  #\n")

    assert texture.grid.shape == (2, 5)
    assert (texture.min_x, texture.max_x, texture.min_y, texture.max_y) == (1, 4, 0, 1)
    assert texture.crop_w == 4
    assert texture.crop_h == 2
    assert texture.aspect == pytest.approx(2.0)
    assert not texture.is_empty
    # Short rows are padded with spaces
    assert "".join(texture.grid[0]) == "  ## "


@pytest.mark.parametrize("text", ["", "\n\n", "    \n   "])
def test_parse_blank_texture_is_empty(text: str) -> None:
    texture = parse_texture(text)
    assert texture.is_empty
    assert texture.aspect == 0.0
    assert texture.min_x > texture.max_x


def test_texture_grid_is_read_only(square_texture) -> None:
    with pytest.raises(ValueError):
        square_texture.grid[0, 0] = "x"


def test_packaged_texture() -> None:
    texture = load_texture()
    assert not texture.is_empty
    assert (texture.crop_w, texture.crop_h) == (200, 79)
    assert load_texture() is texture


def test_load_texture_missing_file(tmp_path) -> None:
    with pytest.raises(ValueError, match="Failed to read texture file"):
        load_texture(str(tmp_path / "missing.txt"))


def test_packaged_features() -> None:
    features = load_moon_features()
    assert len(features) == 10

    by_name = {feature.name(Language.ENGLISH): feature for feature in features}
    tycho = by_name["Tycho"]
    assert tycho.lat == pytest.approx(-43.3)
    assert tycho.lon == pytest.approx(-11.2)
    assert tycho.name(Language.CHINESE) == "第谷"
    assert by_name["Mare Imbrium"].name(Language.FRENCH) == "Mer des Pluies"
    assert by_name["Plato"].name(Language.SPANISH) == "Platón"


def test_parse_feature_line_falls_back_to_english() -> None:
    feature = parse_feature_line("Kepler:8.1:-38.0::::")
    assert feature.name(Language.JAPANESE) == "Kepler"
    assert feature.lat == pytest.approx(8.1)


def test_parse_feature_line_rejects_bad_rows() -> None:
    with pytest.raises(ValueError):
        parse_feature_line("Kepler:8.1")
    with pytest.raises(ValueError):
        parse_feature_line("Kepler:north:-38.0:a:b:c:d")
    with pytest.raises(ValueError):
        parse_feature_line("Kepler:98.1:-38.0:a:b:c:d")


def test_missing_features_file_warns(tmp_path, capsys) -> None:
    features = load_moon_features(str(tmp_path / "none.csv"))
    assert features == ()
    assert "Warning: Moon features file" in capsys.readouterr().out


def test_malformed_feature_rows_are_skipped(tmp_path, capsys) -> None:
    path = tmp_path / "features.csv"
    path.write_text(
        "# comment\n"
        "\n"
        "Good:1.0:2.0:zh:fr:ja:es\n"
        "Broken:abc:2.0:zh:fr:ja:es\n",
        encoding="utf-8",
    )

    features = load_moon_features(str(path))

    assert [feature.name(Language.ENGLISH) for feature in features] == ["Good"]
    assert features[0].name(Language.SPANISH) == "es"
    assert "Could not load Moon feature named Broken" in capsys.readouterr().out


def test_feature_names_are_read_only() -> None:
    tycho = next(f for f in load_moon_features() if f.name(Language.ENGLISH) == "Tycho")
    with pytest.raises(TypeError):
        tycho.names[Language.ENGLISH] = "Changed"
    assert load_moon_features()[5].name(Language.ENGLISH) == "Tycho"
