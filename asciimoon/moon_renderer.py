import math
from typing import Optional

import numpy as np

from asciimoon.data_loader import load_moon_features, load_texture
from asciimoon.moon_grid import MoonGrid, text_width
from asciimoon.types import Color, DrawBox, Language, RenderRequest, Texture

LIT_COLOR = Color(rgb=(255, 215, 0), index=220)      # warm gold
SHADOW_COLOR = Color(rgb=(98, 98, 98), index=241)    # earthshine gray
MARKER_COLOR = Color(rgb=(215, 0, 0), index=160)
LABEL_COLOR = Color(rgb=(0, 215, 215), index=44)

MARKER_CHAR = 'x'

# The Moon disk is the circle of radius 0.5 inscribed in the normalized draw box
MOON_RADIUS_SQ = 0.25

# Label calibration: pull labels slightly inwards and shift them down-left,
# the plain orthographic positions land too far up and right on the art.
LABEL_SCALE = 0.95
LABEL_OFFSET = (-0.10, -0.10)

def fit_to_area(area_w: float, area_h: float, art_aspect: float) -> Optional[DrawBox]:
    """
    Largest box with the art's aspect ratio that fits the area, centered.

    Parameters
    ----------
    area_w, area_h : float
        Area size in character cells
    art_aspect : float
        Width / height of the texture crop box

    Returns
    -------
    DrawBox or None
        None when the area or the aspect ratio is degenerate
    """
    if area_w <= 0 or area_h <= 0 or not art_aspect > 0:
        return None

    if area_w / area_h < art_aspect:
        # Limited by width
        draw_w, draw_h = area_w, area_w / art_aspect
    else:
        # Limited by height
        draw_w, draw_h = area_h * art_aspect, area_h

    if draw_w <= 0 or draw_h <= 0:
        return None

    return DrawBox(
        start_x=(area_w - draw_w) / 2.0,
        start_y=(area_h - draw_h) / 2.0,
        draw_w=draw_w,
        draw_h=draw_h
    )

def sun_direction(phase_fraction: float) -> tuple:
    """
    Sun vector (x, z) in view space for a phase fraction.

    Phase 0 (new) puts the Sun behind the Moon (0, -1), phase 0.5 (full)
    behind the observer (0, 1). The Sun always lies in the horizontal plane.
    """
    angle = (phase_fraction % 1.0) * 2.0 * np.pi
    return np.sin(angle), -np.cos(angle)

def shade_moon(width: int, height: int, phase_fraction: float, texture: Texture, box: DrawBox) -> tuple:
    """
    Sample the texture and compute the lit / shadow masks for every cell of the area.

    Returns
    -------
    tuple
        (chars, lit, shadow): character array and boolean masks, all of shape (height, width)
    """
    ys, xs = np.mgrid[0:height, 0:width]

    # Normalized coordinates relative to the drawn Moon box
    nx = (xs - box.start_x) / box.draw_w
    ny = (ys - box.start_y) / box.draw_h
    inside = (nx >= 0.0) & (nx < 1.0) & (ny >= 0.0) & (ny < 1.0)

    # Nearest neighbour sampling of the crop box
    rows, cols = texture.grid.shape
    src_x = np.floor(texture.min_x + nx * texture.crop_w).astype(np.int64)
    src_y = np.floor(texture.min_y + ny * texture.crop_h).astype(np.int64)
    inside &= (src_y >= 0) & (src_y < rows) & (src_x >= 0)

    sampled = texture.grid[np.clip(src_y, 0, rows - 1), np.clip(src_x, 0, cols - 1)]
    chars = np.where(src_x < cols, sampled, ' ')

    # Circular mask
    dx = nx - 0.5
    dy = ny - 0.5
    on_disk = inside & (dx * dx + dy * dy <= MOON_RADIUS_SQ)

    # Sphere normal (u, v, z) with z towards the viewer
    u = dx * 2.0
    v = dy * 2.0
    z = np.sqrt(np.clip(1.0 - u * u - v * v, 0.0, None))

    sun_x, sun_z = sun_direction(phase_fraction)
    intensity = u * sun_x + z * sun_z

    lit = on_disk & (intensity > 0.0)
    shadow = on_disk & ~lit
    return chars, lit, shadow

def project_feature(lat: float, lon: float) -> tuple:
    """
    Orthographic projection of selenographic coordinates onto the normalized draw box.

    Parameters
    ----------
    lat, lon : float
        Selenographic latitude and longitude in degrees

    Returns
    -------
    tuple
        (nx, ny), with ny growing downwards
    """
    lat_rad = math.radians(lat)
    lon_rad = math.radians(lon)

    u = math.cos(lat_rad) * math.sin(lon_rad)
    v = math.sin(lat_rad)

    u_adj = u * LABEL_SCALE + LABEL_OFFSET[0]
    v_adj = v * LABEL_SCALE + LABEL_OFFSET[1]

    return 0.5 + u_adj / 2.0, 0.5 - v_adj / 2.0

def draw_labels(grid: MoonGrid, box: DrawBox, moon_features, language: Language):
    """
    Mark each feature and write its localized name to the right of the marker.

    Names that would not fit before the right edge are skipped entirely.
    Labels may overwrite each other.
    """
    for moon_feature in moon_features:
        nx, ny = project_feature(moon_feature.lat, moon_feature.lon)
        x, y = box.cell_at(nx, ny)
        if not grid.in_bounds(x, y):
            continue

        grid.set_char(x, y, MARKER_CHAR, MARKER_COLOR)
        name = moon_feature.name(language)
        label_x = x + 1
        # The last column stays free
        if name and label_x + text_width(name) < grid.width:
            grid.set_string(label_x, y, name, LABEL_COLOR, bold=True)

def render_moon(request: RenderRequest,
                texture: Optional[Texture] = None,
                moon_features: Optional[list] = None) -> MoonGrid:
    """
    Rasterize the textured, phase-shaded Moon into a character grid.

    Parameters
    ----------
    request : RenderRequest
        Area size, phase fraction and rendering flags
    texture : Texture, optional
        ASCII-art texture, the packaged one by default
    moon_features : list, optional
        Features to label, the packaged ones by default

    Returns
    -------
    MoonGrid
        Grid of request.width x request.height cells. Degenerate input
        (empty area, blank texture) gives a grid with no written cells.
    """
    grid = MoonGrid(request.width, request.height, color_mode=request.color_mode)
    if grid.width == 0 or grid.height == 0:
        return grid

    if texture is None:
        texture = load_texture()
    if texture.is_empty:
        return grid

    box = fit_to_area(float(grid.width), float(grid.height), texture.aspect)
    if box is None:
        return grid

    chars, lit, shadow = shade_moon(grid.width, grid.height, request.phase_fraction, texture, box)

    for y, x in np.argwhere(lit):
        grid.set_char(int(x), int(y), str(chars[y, x]), LIT_COLOR)
    if not request.hide_dark:
        for y, x in np.argwhere(shadow):
            grid.set_char(int(x), int(y), str(chars[y, x]), SHADOW_COLOR)

    if request.show_labels:
        if moon_features is None:
            moon_features = load_moon_features()
        draw_labels(grid, box, moon_features, request.language)

    return grid
