"""Helpers for resolving the persisted configuration and CLI overrides."""

from __future__ import annotations

import logging
import tomllib
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Sequence, Tuple

from code_settings.cli_args import CliInput, parse_cli
from code_settings.merge import (
    CODE_MERGE_POLICY,
    GENERAL_MERGE_POLICY,
    MergeStrategy,
    merge_layers,
    persisted_fields,
)
from code_settings.models import (
    MAX_TAB_WIDTH,
    SAVE_FORMATS,
    CodeConfig,
    CodeConfigLayer,
    GenerationSettings,
    GenerationSettingsLayer,
)
from code_settings.paths import config_file_path

logger = logging.getLogger(__name__)

CODE_SECTION = "code"
GENERAL_SECTION = "general"

# Expected TOML value types for every key a config file may set.
CODE_FILE_TYPES: Dict[str, Tuple[type, ...]] = {
    "theme": (str,),
    "vim_theme": (str,),
    "extra_syntaxes": (str,),
    "code_background": (str,),
    "line_numbers": (bool,),
    "tab_width": (int,),
}

GENERAL_FILE_TYPES: Dict[str, Tuple[type, ...]] = {
    "background": (str,),
    "fonts": (str,),
    "author": (str,),
    "author_font": (str,),
    "author_color": (str,),
    "window_controls": (bool,),
    "window_title": (str,),
    "shadow": (bool,),
    "shadow_color": (str,),
    "shadow_blur": (int, float),
    "radius": (int,),
    "padding_x": (int,),
    "padding_y": (int,),
    "output": (str,),
    "save_format": (str,),
}


class ConfigError(Exception):
    """Raised when the persisted configuration cannot be used."""


def ensure_config_dir(path: Path) -> None:
    """Create ``path`` if missing; failures are logged and ignored."""

    try:
        path.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        logger.debug("Could not create config directory %s: %s", path, exc)


def read_config_text(path: Path) -> Optional[str]:
    """Return the config file text, or None when it cannot be read."""

    try:
        return path.read_text(encoding="utf-8")
    except FileNotFoundError:
        logger.debug("No configuration file at %s", path)
    except (OSError, UnicodeDecodeError) as exc:
        logger.info("Ignoring unreadable configuration file %s: %s", path, exc)
    return None


def load_config_file(path: Path) -> Optional[Dict[str, Any]]:
    """Load the TOML config at ``path``; None when absent or unreadable.

    A file that exists but is not valid TOML raises ``ConfigError``.
    """

    text = read_config_text(path)
    if text is None:
        return None

    logger.info("Reading configuration from %s", path)
    try:
        return tomllib.loads(text)
    except tomllib.TOMLDecodeError as exc:
        raise ConfigError(f"Malformed configuration file {path}: {exc}") from exc


def _section(document: Mapping[str, Any], name: str) -> Dict[str, Any]:
    value = document.get(name)
    if value is None:
        logger.debug("Configuration has no [%s] table", name)
        return {}
    if not isinstance(value, dict):
        raise ConfigError(f"[{name}] must be a table, got {type(value).__name__}")
    return value


def _checked_value(
    section: str, key: str, value: Any, expected: Tuple[type, ...]
) -> Any:
    # bool is a subclass of int; TOML booleans are never valid numbers here.
    if isinstance(value, bool) and bool not in expected:
        valid = False
    else:
        valid = isinstance(value, expected)
    if not valid:
        names = " or ".join(kind.__name__ for kind in expected)
        raise ConfigError(
            f"{section}.{key} must be {names}, got {type(value).__name__}"
        )
    return value


def _persisted_values(
    section_name: str,
    section: Mapping[str, Any],
    types: Mapping[str, Tuple[type, ...]],
    policy: Mapping[str, MergeStrategy],
) -> Tuple[Dict[str, Any], Dict[str, Any]]:
    """Split ``section`` into validated known values and leftover keys."""

    allowed = persisted_fields(policy)
    known: Dict[str, Any] = {}
    unknown: Dict[str, Any] = {}
    for key, value in section.items():
        if key in types and key in allowed:
            known[key] = _checked_value(section_name, key, value, types[key])
        elif key in policy and key not in allowed:
            logger.debug(
                "Ignoring %s.%s: it can only be set on the command line",
                section_name,
                key,
            )
        else:
            unknown[key] = value
    return known, unknown


def _require_range(
    section: str, key: str, value: Optional[int], low: int, high: int | None
) -> None:
    if value is None:
        return
    if value < low or (high is not None and value > high):
        bound = f"between {low} and {high}" if high is not None else f">= {low}"
        raise ConfigError(f"{section}.{key} must be {bound}, got {value}")


def code_layer_from_document(document: Mapping[str, Any]) -> CodeConfigLayer:
    """Build the file layer for code options from the ``[code]`` table."""

    section = _section(document, CODE_SECTION)
    known, unknown = _persisted_values(
        CODE_SECTION,
        section,
        CODE_FILE_TYPES,
        CODE_MERGE_POLICY,
    )
    for key in unknown:
        logger.debug("Ignoring unknown key %s.%s", CODE_SECTION, key)

    _require_range(
        CODE_SECTION, "tab_width", known.get("tab_width"), 0, MAX_TAB_WIDTH
    )
    return CodeConfigLayer(**known)


def general_layer_from_document(
    document: Mapping[str, Any],
) -> GenerationSettingsLayer:
    """Build the file layer for general options; unknown keys pass through."""

    section = _section(document, GENERAL_SECTION)
    known, unknown = _persisted_values(
        GENERAL_SECTION,
        section,
        GENERAL_FILE_TYPES,
        GENERAL_MERGE_POLICY,
    )

    for key in ("radius", "padding_x", "padding_y"):
        _require_range(GENERAL_SECTION, key, known.get(key), 0, None)
    save_format = known.get("save_format")
    if save_format is not None:
        save_format = save_format.lower()
        if save_format not in SAVE_FORMATS:
            raise ConfigError(
                f"{GENERAL_SECTION}.save_format must be one of "
                f"{', '.join(SAVE_FORMATS)}, got {known['save_format']!r}"
            )
        known["save_format"] = save_format

    return GenerationSettingsLayer(**known, extra=unknown)


def layers_from_document(
    document: Mapping[str, Any],
) -> Tuple[CodeConfigLayer, GenerationSettingsLayer]:
    for key in document:
        if key not in (CODE_SECTION, GENERAL_SECTION):
            logger.debug("Ignoring unknown configuration table [%s]", key)
    return (
        code_layer_from_document(document),
        general_layer_from_document(document),
    )


def resolve_config(
    cli_code: CodeConfigLayer,
    cli_general: GenerationSettingsLayer,
    *,
    document: Optional[Mapping[str, Any]],
) -> Tuple[CodeConfig, GenerationSettings]:
    """Resolve CLI layers against an optional parsed config document.

    Without a document the CLI layers are the only source and are returned
    as-is (defaults filled in). Otherwise the file is the base layer and
    the command line overrides it field by field.
    """

    if document is None:
        return (
            CodeConfig.from_layer(cli_code),
            GenerationSettings.from_layer(cli_general),
        )

    file_code, file_general = layers_from_document(document)
    code = merge_layers(file_code, cli_code, CODE_MERGE_POLICY)
    general = merge_layers(file_general, cli_general, GENERAL_MERGE_POLICY)
    return CodeConfig.from_layer(code), GenerationSettings.from_layer(general)


def get_config(
    argv: Optional[Sequence[str]] = None,
    *,
    cli: Optional[CliInput] = None,
    config_path: Optional[Path | str] = None,
) -> Tuple[CodeConfig, GenerationSettings]:
    """Return the resolved code options and general rendering settings.

    The config file is read before the command line is parsed, so a
    malformed file stops the process even when the arguments are valid.
    """

    path = Path(config_path) if config_path is not None else config_file_path()
    ensure_config_dir(path.parent)
    document = load_config_file(path)

    if cli is None:
        cli = parse_cli(argv)
    return resolve_config(cli.code, cli.general, document=document)


__all__ = [
    "ConfigError",
    "ensure_config_dir",
    "get_config",
    "layers_from_document",
    "load_config_file",
    "resolve_config",
]
