"""Field-by-field merge of a base layer with an override layer.

Every field of a layer dataclass is listed in a policy table with the
strategy used to combine the persisted file (base) with the command line
(override):

``override``
    The override value wins when it is not ``None``; otherwise the base
    value is kept.
``sticky_true``
    Booleans are OR-ed, so a flag enabled in either layer stays enabled.
``cli_only``
    The field is never persisted; the override value is taken as-is and
    the base value ignored.
``union``
    Mappings are combined, override keys winning.
"""

from __future__ import annotations

from dataclasses import fields
from types import MappingProxyType
from typing import Any, Literal, Mapping, TypeVar

from .models import CodeConfigLayer, GenerationSettingsLayer

MergeStrategy = Literal["override", "sticky_true", "cli_only", "union"]

OVERRIDE: MergeStrategy = "override"
STICKY_TRUE: MergeStrategy = "sticky_true"
CLI_ONLY: MergeStrategy = "cli_only"
UNION: MergeStrategy = "union"

LayerT = TypeVar("LayerT", CodeConfigLayer, GenerationSettingsLayer)

CODE_MERGE_POLICY: Mapping[str, MergeStrategy] = MappingProxyType(
    {
        "content": CLI_ONLY,
        "theme": OVERRIDE,
        "vim_theme": OVERRIDE,
        "list_file_types": CLI_ONLY,
        "list_themes": CLI_ONLY,
        "extra_syntaxes": OVERRIDE,
        "extension": CLI_ONLY,
        "code_background": OVERRIDE,
        "lines": CLI_ONLY,
        "highlight_lines": CLI_ONLY,
        "line_numbers": STICKY_TRUE,
        "tab_width": OVERRIDE,
    }
)

GENERAL_MERGE_POLICY: Mapping[str, MergeStrategy] = MappingProxyType(
    {
        "background": OVERRIDE,
        "fonts": OVERRIDE,
        "author": OVERRIDE,
        "author_font": OVERRIDE,
        "author_color": OVERRIDE,
        "window_controls": STICKY_TRUE,
        "window_title": OVERRIDE,
        "shadow": STICKY_TRUE,
        "shadow_color": OVERRIDE,
        "shadow_blur": OVERRIDE,
        "radius": OVERRIDE,
        "padding_x": OVERRIDE,
        "padding_y": OVERRIDE,
        "output": OVERRIDE,
        "copy": CLI_ONLY,
        "save_format": OVERRIDE,
        "extra": UNION,
    }
)


def persisted_fields(policy: Mapping[str, MergeStrategy]) -> frozenset[str]:
    """Return the fields a configuration file is allowed to set."""

    return frozenset(
        name for name, strategy in policy.items() if strategy != CLI_ONLY
    )


def merge_value(strategy: MergeStrategy, base: Any, override: Any) -> Any:
    if strategy == OVERRIDE:
        return base if override is None else override
    if strategy == STICKY_TRUE:
        return bool(base) or bool(override)
    if strategy == CLI_ONLY:
        return override
    if strategy == UNION:
        merged = dict(base or {})
        merged.update(override or {})
        return merged
    raise ValueError(f"Unknown merge strategy: {strategy!r}")


def merge_layers(
    base: LayerT,
    override: LayerT,
    policy: Mapping[str, MergeStrategy],
) -> LayerT:
    """Combine two layers of the same type according to ``policy``.

    A field missing from ``policy`` raises ``KeyError``.
    """

    if type(base) is not type(override):
        raise TypeError(
            f"Cannot merge {type(base).__name__} with "
            f"{type(override).__name__}"
        )

    values = {
        item.name: merge_value(
            policy[item.name],
            getattr(base, item.name),
            getattr(override, item.name),
        )
        for item in fields(base)
    }
    return type(base)(**values)


__all__ = [
    "CLI_ONLY",
    "CODE_MERGE_POLICY",
    "GENERAL_MERGE_POLICY",
    "MergeStrategy",
    "OVERRIDE",
    "STICKY_TRUE",
    "UNION",
    "merge_layers",
    "merge_value",
    "persisted_fields",
]
