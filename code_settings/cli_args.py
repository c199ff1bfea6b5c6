"""Command-line parsing into configuration layers."""

from __future__ import annotations

import argparse
from dataclasses import dataclass
from typing import Callable, Optional, Sequence

from . import __version__
from .models import (
    DEFAULT_TAB_WIDTH,
    DEFAULT_THEME,
    MAX_TAB_WIDTH,
    SAVE_FORMATS,
    CodeConfigLayer,
    ContentSource,
    GenerationSettingsLayer,
)
from .ranges import (
    DEFAULT_RANGE_EXPRESSION,
    EXPECTED_RANGE_FORMAT,
    LineRange,
    RangeFormatError,
    parse_range,
)


@dataclass(slots=True)
class CliInput:
    """Layers parsed from the command line plus CLI-only switches."""

    code: CodeConfigLayer
    general: GenerationSettingsLayer
    verbosity: int = 0


def range_argument(field: str) -> Callable[[str], LineRange]:
    """Return an argparse ``type`` converter for the ``field`` range."""

    def convert(value: str) -> LineRange:
        try:
            return parse_range(value, field=field)
        except RangeFormatError as exc:
            raise argparse.ArgumentTypeError(str(exc)) from exc

    convert.__name__ = field
    return convert


def tab_width_argument(value: str) -> int:
    try:
        width = int(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(
            f"tab width must be an integer, got {value!r}"
        ) from exc
    if not 0 <= width <= MAX_TAB_WIDTH:
        raise argparse.ArgumentTypeError(
            f"tab width must be between 0 and {MAX_TAB_WIDTH}, got {width}"
        )
    return width


def non_negative_int(value: str) -> int:
    try:
        number = int(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(
            f"expected a non-negative integer, got {value!r}"
        ) from exc
    if number < 0:
        raise argparse.ArgumentTypeError(
            f"expected a non-negative integer, got {number}"
        )
    return number


def _add_code_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "content",
        nargs="?",
        type=ContentSource.from_argument,
        help="Content to take screenshot. A file path, or '-' for stdin.",
    )
    parser.add_argument(
        "--theme",
        "-t",
        help=(
            "Theme file to use. May be a path, or an embedded theme. "
            f"Embedded themes take precedence. [default: {DEFAULT_THEME}]"
        ),
    )
    parser.add_argument(
        "--vim-theme",
        help=(
            "[Not recommended for manual use] Set theme from vim highlights, "
            "format: group,bg,fg,style;group,bg,fg,style;"
        ),
    )
    parser.add_argument(
        "--list-file-types",
        "-l",
        action="store_true",
        help="Lists supported file types.",
    )
    parser.add_argument(
        "--list-themes",
        "-L",
        action="store_true",
        help="Lists themes.",
    )
    parser.add_argument(
        "--extra-syntaxes",
        help="Additional folder to search for .sublime-syntax files in.",
    )
    parser.add_argument(
        "--extension",
        "-e",
        help="Set the extension of language input.",
    )
    parser.add_argument(
        "--code-background",
        help=(
            "[default: #323232] Support: '#RRGGBBAA' "
            "'h;#RRGGBBAA;#RRGGBBAA' 'v;#RRGGBBAA;#RRGGBBAA' or file path."
        ),
    )
    parser.add_argument(
        "--lines",
        type=range_argument("lines"),
        default=DEFAULT_RANGE_EXPRESSION,
        help=(
            "Lines range to take screenshot, "
            f"format {EXPECTED_RANGE_FORMAT}. [default: ..]"
        ),
    )
    parser.add_argument(
        "--highlight-lines",
        type=range_argument("highlight_lines"),
        default=DEFAULT_RANGE_EXPRESSION,
        help=(
            "Lines to highlight over the rest, "
            f"format {EXPECTED_RANGE_FORMAT}. [default: ..]"
        ),
    )
    parser.add_argument(
        "--line-numbers",
        "-n",
        action="store_true",
        help="Show line numbers.",
    )
    parser.add_argument(
        "--tab-width",
        type=tab_width_argument,
        help=f"Tab width. [default: {DEFAULT_TAB_WIDTH}]",
    )


def _add_general_arguments(parser: argparse.ArgumentParser) -> None:
    group = parser.add_argument_group("general rendering options")
    group.add_argument(
        "--background",
        help="Background of the image. [default: #323232]",
    )
    group.add_argument(
        "--font",
        "-f",
        dest="fonts",
        help="Fonts to use, format 'Name=size;Other=size;'.",
    )
    group.add_argument("--author", help="Author name drawn on the image.")
    group.add_argument("--author-font", help="Font used for the author.")
    group.add_argument("--author-color", help="Color used for the author.")
    group.add_argument(
        "--window-controls",
        action="store_true",
        help="Draw window controls.",
    )
    group.add_argument("--window-title", help="Title drawn in the titlebar.")
    group.add_argument(
        "--shadow",
        action="store_true",
        help="Draw a drop shadow.",
    )
    group.add_argument("--shadow-color", help="Shadow color.")
    group.add_argument("--shadow-blur", type=float, help="Shadow blur.")
    group.add_argument("--radius", type=non_negative_int, help="Corner radius.")
    group.add_argument(
        "--padding-x",
        type=non_negative_int,
        help="Horizontal padding.",
    )
    group.add_argument(
        "--padding-y",
        type=non_negative_int,
        help="Vertical padding.",
    )
    group.add_argument("--output", "-o", help="Path of the image to write.")
    group.add_argument(
        "--copy",
        "-c",
        action="store_true",
        help="Copy the image to the clipboard.",
    )
    group.add_argument(
        "--save-format",
        type=str.lower,
        choices=SAVE_FORMATS,
        help="Image format. [default: png]",
    )


def build_arg_parser() -> argparse.ArgumentParser:
    """Build the parser for the ``sss-code`` command."""

    parser = argparse.ArgumentParser(
        prog="sss-code",
        description="Take screenshots of source code.",
    )
    _add_code_arguments(parser)
    _add_general_arguments(parser)
    parser.add_argument(
        "-v",
        "--verbose",
        action="count",
        default=0,
        help="Increase verbosity (can be specified multiple times).",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    return parser


def layers_from_namespace(args: argparse.Namespace) -> CliInput:
    """Split parsed arguments into the code and general layers."""

    code = CodeConfigLayer(
        content=args.content,
        theme=args.theme,
        vim_theme=args.vim_theme,
        list_file_types=args.list_file_types,
        list_themes=args.list_themes,
        extra_syntaxes=args.extra_syntaxes,
        extension=args.extension,
        code_background=args.code_background,
        lines=args.lines,
        highlight_lines=args.highlight_lines,
        line_numbers=args.line_numbers,
        tab_width=args.tab_width,
    )
    general = GenerationSettingsLayer(
        background=args.background,
        fonts=args.fonts,
        author=args.author,
        author_font=args.author_font,
        author_color=args.author_color,
        window_controls=args.window_controls,
        window_title=args.window_title,
        shadow=args.shadow,
        shadow_color=args.shadow_color,
        shadow_blur=args.shadow_blur,
        radius=args.radius,
        padding_x=args.padding_x,
        padding_y=args.padding_y,
        output=args.output,
        copy=args.copy,
        save_format=args.save_format,
    )
    return CliInput(code=code, general=general, verbosity=args.verbose)


def parse_cli(argv: Optional[Sequence[str]] = None) -> CliInput:
    """Parse ``argv`` (``sys.argv[1:]`` when omitted) into CLI layers."""

    args = build_arg_parser().parse_args(argv)
    return layers_from_namespace(args)


__all__ = [
    "CliInput",
    "build_arg_parser",
    "layers_from_namespace",
    "parse_cli",
    "range_argument",
]
