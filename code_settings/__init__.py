"""Configuration layers, merge policy and range parsing for sss-code."""

__version__ = "0.1.0"

from .merge import CODE_MERGE_POLICY, GENERAL_MERGE_POLICY, merge_layers
from .models import (
    CodeConfig,
    CodeConfigLayer,
    ContentSource,
    GenerationSettings,
    GenerationSettingsLayer,
)
from .ranges import UNBOUNDED, LineRange, RangeFormatError, parse_range

__all__ = [
    "__version__",
    "CODE_MERGE_POLICY",
    "CodeConfig",
    "CodeConfigLayer",
    "ContentSource",
    "GENERAL_MERGE_POLICY",
    "GenerationSettings",
    "GenerationSettingsLayer",
    "LineRange",
    "RangeFormatError",
    "UNBOUNDED",
    "merge_layers",
    "parse_range",
]
