"""Dataclasses describing configuration layers and resolved settings."""

from __future__ import annotations

import sys
from dataclasses import dataclass, field
from types import MappingProxyType
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, TextIO

from .ranges import LineRange

DEFAULT_THEME = "base16-ocean.dark"
DEFAULT_TAB_WIDTH = 4
MAX_TAB_WIDTH = 255

DEFAULT_BACKGROUND = "#323232"
DEFAULT_FONTS = "Hack=12.0;"
DEFAULT_SHADOW_COLOR = "#707070"
DEFAULT_SHADOW_BLUR = 50.0
DEFAULT_RADIUS = 15
DEFAULT_PADDING_X = 80
DEFAULT_PADDING_Y = 100
DEFAULT_SAVE_FORMAT = "png"
SAVE_FORMATS = ("png", "jpeg", "jpg", "webp")

STDIN_MARKER = "-"


def _empty_extra() -> Dict[str, Any]:
    return {}


def _frozen_extra() -> Mapping[str, Any]:
    return MappingProxyType({})


@dataclass(frozen=True, slots=True)
class ContentSource:
    """Where the code to screenshot comes from: a file, or stdin when unset."""

    path: Optional[Path] = None

    @classmethod
    def from_argument(cls, value: str) -> "ContentSource":
        if value == STDIN_MARKER:
            return cls()
        return cls(Path(value))

    @property
    def is_stdin(self) -> bool:
        return self.path is None

    def read(self, stdin: TextIO | None = None) -> str:
        """Read the whole body of the source."""

        if self.path is None:
            stream = stdin if stdin is not None else sys.stdin
            return stream.read()
        return self.path.read_text(encoding="utf-8")

    def __str__(self) -> str:
        return STDIN_MARKER if self.path is None else str(self.path)


# Layers are partial views: ``None`` means the source said nothing about
# the field. Booleans cannot be silent and default to False.
@dataclass(slots=True)
class CodeConfigLayer:
    """One source's view of the code-specific options."""

    content: Optional[ContentSource] = None
    theme: Optional[str] = None
    vim_theme: Optional[str] = None
    list_file_types: bool = False
    list_themes: bool = False
    extra_syntaxes: Optional[str] = None
    extension: Optional[str] = None
    code_background: Optional[str] = None
    lines: Optional[LineRange] = None
    highlight_lines: Optional[LineRange] = None
    line_numbers: bool = False
    tab_width: Optional[int] = None


@dataclass(slots=True)
class GenerationSettingsLayer:
    """One source's view of the general rendering options."""

    background: Optional[str] = None
    fonts: Optional[str] = None
    author: Optional[str] = None
    author_font: Optional[str] = None
    author_color: Optional[str] = None
    window_controls: bool = False
    window_title: Optional[str] = None
    shadow: bool = False
    shadow_color: Optional[str] = None
    shadow_blur: Optional[float] = None
    radius: Optional[int] = None
    padding_x: Optional[int] = None
    padding_y: Optional[int] = None
    output: Optional[str] = None
    copy: bool = False
    save_format: Optional[str] = None
    extra: Dict[str, Any] = field(default_factory=_empty_extra)


@dataclass(frozen=True, slots=True)
class CodeConfig:
    """Resolved code-specific options handed to the renderer."""

    content: Optional[ContentSource] = None
    theme: str = DEFAULT_THEME
    vim_theme: Optional[str] = None
    list_file_types: bool = False
    list_themes: bool = False
    extra_syntaxes: Optional[str] = None
    extension: Optional[str] = None
    code_background: Optional[str] = None
    lines: LineRange = LineRange()
    highlight_lines: LineRange = LineRange()
    line_numbers: bool = False
    tab_width: int = DEFAULT_TAB_WIDTH

    @classmethod
    def from_layer(cls, layer: CodeConfigLayer) -> "CodeConfig":
        """Fill the gaps left by ``layer`` with the documented defaults."""

        return cls(
            content=layer.content,
            theme=layer.theme if layer.theme is not None else DEFAULT_THEME,
            vim_theme=layer.vim_theme,
            list_file_types=layer.list_file_types,
            list_themes=layer.list_themes,
            extra_syntaxes=layer.extra_syntaxes,
            extension=layer.extension,
            code_background=layer.code_background,
            lines=layer.lines or LineRange(),
            highlight_lines=layer.highlight_lines or LineRange(),
            line_numbers=layer.line_numbers,
            tab_width=(
                layer.tab_width
                if layer.tab_width is not None
                else DEFAULT_TAB_WIDTH
            ),
        )

    @property
    def lists_something(self) -> bool:
        return self.list_file_types or self.list_themes


@dataclass(frozen=True, slots=True)
class GenerationSettings:
    """Resolved general rendering options; unknown keys ride along in extra."""

    background: str = DEFAULT_BACKGROUND
    fonts: str = DEFAULT_FONTS
    author: Optional[str] = None
    author_font: Optional[str] = None
    author_color: Optional[str] = None
    window_controls: bool = False
    window_title: Optional[str] = None
    shadow: bool = False
    shadow_color: str = DEFAULT_SHADOW_COLOR
    shadow_blur: float = DEFAULT_SHADOW_BLUR
    radius: int = DEFAULT_RADIUS
    padding_x: int = DEFAULT_PADDING_X
    padding_y: int = DEFAULT_PADDING_Y
    output: Optional[str] = None
    copy: bool = False
    save_format: str = DEFAULT_SAVE_FORMAT
    extra: Mapping[str, Any] = field(default_factory=_frozen_extra)

    @classmethod
    def from_layer(cls, layer: GenerationSettingsLayer) -> "GenerationSettings":
        def pick(value: Any, default: Any) -> Any:
            return default if value is None else value

        return cls(
            background=pick(layer.background, DEFAULT_BACKGROUND),
            fonts=pick(layer.fonts, DEFAULT_FONTS),
            author=layer.author,
            author_font=layer.author_font,
            author_color=layer.author_color,
            window_controls=layer.window_controls,
            window_title=layer.window_title,
            shadow=layer.shadow,
            shadow_color=pick(layer.shadow_color, DEFAULT_SHADOW_COLOR),
            shadow_blur=float(pick(layer.shadow_blur, DEFAULT_SHADOW_BLUR)),
            radius=pick(layer.radius, DEFAULT_RADIUS),
            padding_x=pick(layer.padding_x, DEFAULT_PADDING_X),
            padding_y=pick(layer.padding_y, DEFAULT_PADDING_Y),
            output=layer.output,
            copy=layer.copy,
            save_format=pick(layer.save_format, DEFAULT_SAVE_FORMAT).lower(),
            extra=MappingProxyType(dict(layer.extra)),
        )


__all__ = [
    "CodeConfig",
    "CodeConfigLayer",
    "ContentSource",
    "DEFAULT_TAB_WIDTH",
    "MAX_TAB_WIDTH",
    "DEFAULT_THEME",
    "GenerationSettings",
    "GenerationSettingsLayer",
    "SAVE_FORMATS",
]
