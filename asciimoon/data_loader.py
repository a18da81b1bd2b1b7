import os
from functools import lru_cache
from types import MappingProxyType

import numpy as np

from asciimoon.types import Language, MoonFeature, Texture

DATA_DIRECTORY_PATH = os.path.join(os.path.dirname(__file__), "data")
DEFAULT_TEXTURE_PATH = os.path.join(DATA_DIRECTORY_PATH, "moon.txt")
DEFAULT_FEATURES_PATH = os.path.join(DATA_DIRECTORY_PATH, "moon_features.csv")

# Column order of localized names after name, latitude, longitude
NAME_COLUMNS = (Language.CHINESE, Language.FRENCH, Language.JAPANESE, Language.SPANISH)

def parse_texture(text: str) -> Texture:
    """
    Build a texture grid from ASCII art.

    Empty lines are dropped and rows are right-padded with spaces. The crop box
    is the tight bounding box of non-space characters; for blank art it is
    inverted (min > max) and the texture reports is_empty.

    Parameters
    ----------
    text : str
        Raw ASCII art

    Returns
    -------
    Texture
        Read-only character grid with its crop box
    """
    rows = [line for line in text.splitlines() if line]
    width = max((len(row) for row in rows), default=0)
    if rows and width:
        grid = np.array([list(row.ljust(width)) for row in rows], dtype="<U1")
    else:
        grid = np.full((0, 0), " ", dtype="<U1")
    grid.flags.writeable = False

    ys, xs = np.nonzero(grid != " ")
    if len(xs) == 0:
        return Texture(grid=grid, min_x=0, max_x=-1, min_y=0, max_y=-1)

    return Texture(
        grid=grid,
        min_x=int(xs.min()),
        max_x=int(xs.max()),
        min_y=int(ys.min()),
        max_y=int(ys.max())
    )

@lru_cache(maxsize=None)
def load_texture(filepath: str = DEFAULT_TEXTURE_PATH) -> Texture:
    """
    Load the Moon texture once per path.

    Raises
    ------
    ValueError
        If the file cannot be read
    """
    try:
        with open(filepath, 'r', encoding='utf-8') as f:
            text = f.read()
    except OSError as e:
        raise ValueError(f"Failed to read texture file: {filepath}") from e
    return parse_texture(text)

def parse_feature_line(line: str) -> MoonFeature:
    parts = [part.strip() for part in line.split(':')]
    if len(parts) < 3 + len(NAME_COLUMNS):
        raise ValueError(f"expected {3 + len(NAME_COLUMNS)} fields, got {len(parts)}")
    # Handle Unicode minus sign (−) and regular minus (-)
    lat = float(parts[1].replace('−', '-'))
    lon = float(parts[2].replace('−', '-'))
    if not -90.0 <= lat <= 90.0 or not -180.0 <= lon <= 180.0:
        raise ValueError(f"coordinates out of range: {lat}, {lon}")
    names = {Language.ENGLISH: parts[0]}
    for language, name in zip(NAME_COLUMNS, parts[3:]):
        if name:
            names[language] = name
    return MoonFeature(names=MappingProxyType(names), lat=lat, lon=lon)

@lru_cache(maxsize=None)
def load_moon_features(filepath: str = DEFAULT_FEATURES_PATH) -> tuple:
    """
    Load Moon features from a CSV file.

    Parameters
    ----------
    filepath : str
        Path to CSV file with columns: name, latitude, longitude, name_zh, name_fr, name_ja, name_es
        Separator is ':'

    Returns
    -------
    tuple
        Tuple of MoonFeature, empty when the file is missing
    """
    moon_features = []
    if not os.path.isfile(filepath):
        print(f"Warning: Moon features file {filepath} was not found. Features not loaded.")
        return tuple(moon_features)

    try:
        with open(filepath, 'r', encoding='utf-8') as f:
            for line in f:
                line = line.strip()
                if not line or line.startswith('#'):
                    continue
                try:
                    moon_features.append(parse_feature_line(line))
                except ValueError as e:
                    name = line.split(':')[0].strip()
                    print(f"Warning: Could not load Moon feature named {name}: {e}")
    except (OSError, UnicodeDecodeError) as e:
        print(f"Warning: Could not load Moon features file: {e}")

    return tuple(moon_features)
