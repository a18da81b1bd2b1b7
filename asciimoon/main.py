import argparse
import os
import shutil
import sys
from datetime import datetime, timezone

from asciimoon.astro import calculate_moon_phase, format_moon_info
from asciimoon.data_loader import DEFAULT_TEXTURE_PATH
from asciimoon.moon_renderer import render_moon
from asciimoon.types import ColorMode, Language, PhaseModel, RenderRequest

APP_NAME = "asciimoon"

# The texture is about twice as wide as it is tall (in character cells)
ART_ASPECT_RATIO = 2.0

DEFAULT_LINES = 24
DEFAULT_TERMINAL_WIDTH = 80

COLOR_CHOICES = ("auto", ColorMode.TRUECOLOR.value, ColorMode.INDEXED.value)

def parse_args(argv=None):

    parser = argparse.ArgumentParser(
        prog=APP_NAME,
        description=f"{APP_NAME} - print the Moon phase as colored ASCII art",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter
    )

    when = parser.add_mutually_exclusive_group()
    when.add_argument("--date", type=str, default=None,
                      help="Date in YYYY-MM-DD format, taken at 12:00 UTC. Example: 2025-12-04")
    when.add_argument("--time", type=str, default="now",
                      help="Time in ISO format with timezone information. Examples: 2024-01-01T12:00:00Z, 2025-12-26T16:30:00+01:00")
    parser.add_argument("--lines", type=int, default=DEFAULT_LINES,
                        help="Number of lines the Moon is rendered to. Width is twice that, capped at the terminal width. 0 prints nothing.")
    parser.add_argument("--hide-dark", action="store_true",
                        help="Hide the unlit part of the Moon")
    parser.add_argument("--labels", action="store_true",
                        help="Show names of major lunar features")
    parser.add_argument("--language", type=str, default=Language.ENGLISH.value,
                        choices=[language.value for language in Language],
                        help="Language of feature labels")
    parser.add_argument("--color", type=str, default="auto", choices=COLOR_CHOICES,
                        help="Color fidelity. 'auto' picks truecolor when COLORTERM advertises it.")
    parser.add_argument("--model", type=str, default=PhaseModel.MEEUS.value,
                        choices=[model.value for model in PhaseModel],
                        help="Phase model: ecliptic longitudes (meeus) or mean synodic month (simple)")
    parser.add_argument("--info", action="store_true",
                        help="Print phase details below the Moon")
    return parser.parse_args(argv)

def get_date_time_utc(time_iso: str):
    if time_iso.endswith("Z"):
        time_iso = time_iso.replace("Z", "+00:00")
    try:
        dt = datetime.fromisoformat(time_iso)
    except ValueError as e:
        return None, e
    if dt.tzinfo is None:
        return None, ValueError("Time without timezone information.")
    return dt.astimezone(timezone.utc), None

def get_date_midday_utc(date_str: str):
    try:
        day = datetime.strptime(date_str, "%Y-%m-%d")
    except ValueError:
        return None, ValueError("Invalid date format. Use YYYY-MM-DD")
    return day.replace(hour=12, tzinfo=timezone.utc), None

def detect_color_mode(choice: str) -> ColorMode:
    if choice != "auto":
        return ColorMode(choice)
    colorterm = os.environ.get("COLORTERM", "").lower()
    return ColorMode.TRUECOLOR if colorterm in ("truecolor", "24bit") else ColorMode.INDEXED

def check_texture_file(filepath: str = DEFAULT_TEXTURE_PATH) -> bool:
    if not os.path.isfile(filepath):
        print(f"Error: Moon texture file {filepath} not found.")
        return False
    return True

def get_render_width(lines: int) -> int:
    terminal_width = shutil.get_terminal_size((DEFAULT_TERMINAL_WIDTH, DEFAULT_LINES)).columns
    return min(int(lines * ART_ASPECT_RATIO), terminal_width)

def print_moon(dt_utc: datetime,
               lines: int,
               hide_dark: bool,
               show_labels: bool,
               language: Language,
               color_mode: ColorMode,
               model: PhaseModel,
               show_info: bool):
    moon = calculate_moon_phase(dt_utc, model=model)

    request = RenderRequest(
        width=get_render_width(lines),
        height=lines,
        phase_fraction=moon.phase_fraction,
        show_labels=show_labels,
        hide_dark=hide_dark,
        language=language,
        color_mode=color_mode
    )
    grid = render_moon(request)

    for line in grid.to_ansi_lines():
        print(line)

    if show_info:
        print()
        print(format_moon_info(moon, language=language, dt_utc=dt_utc))

def main(argv=None):

    args = parse_args(argv)

    if args.date is not None:
        dt_utc, error = get_date_midday_utc(args.date)
    else:
        time_iso = datetime.now(timezone.utc).isoformat(timespec="seconds") if args.time == "now" else args.time
        dt_utc, error = get_date_time_utc(time_iso)
    if error is not None:
        print(f"Incorrect time: {error}")
        sys.exit(1)

    if args.lines < 0:
        print("Invalid number of lines. Must be a non-negative integer.")
        sys.exit(1)

    if not check_texture_file():
        sys.exit(1)

    print_moon(dt_utc=dt_utc,
               lines=args.lines,
               hide_dark=args.hide_dark,
               show_labels=args.labels,
               language=Language.from_code(args.language),
               color_mode=detect_color_mode(args.color),
               model=PhaseModel(args.model),
               show_info=args.info)

if __name__ == "__main__":
    main()
