import pytest

from asciimoon.data_loader import parse_texture
from asciimoon.types import Language, MoonFeature


@pytest.fixture
def square_texture():
    """Solid 8x8 block, aspect ratio 1."""
    return parse_texture("\n".join(["#" * 8] * 8))


@pytest.fixture
def wide_texture():
    """Solid 20x10 block, aspect ratio 2."""
    return parse_texture("\n".join(["@" * 20] * 10))


@pytest.fixture
def lettered_texture():
    """8x8 texture whose character encodes its column and row."""
    rows = ["".join(chr(ord("a") + (x + 3 * y) % 26) for x in range(8)) for y in range(8)]
    return parse_texture("\n".join(rows))


@pytest.fixture
def center_feature():
    return MoonFeature(
        names={Language.ENGLISH: "Center", Language.CHINESE: "第谷"},
        lat=0.0,
        lon=0.0,
    )
