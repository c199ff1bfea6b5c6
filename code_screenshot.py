"""Command-line entry point that resolves settings for a code screenshot."""

from __future__ import annotations

import json
import logging
from dataclasses import asdict, fields
from typing import Any, Dict, Iterable, Optional, Protocol, Sequence, TextIO

from code_settings import (
    UNBOUNDED,
    CodeConfig,
    ContentSource,
    GenerationSettings,
)
from code_settings.cli_args import parse_cli
from config_loader import ConfigError, get_config
from logging_utils import configure_logging

logger = logging.getLogger(__name__)


class ScreenshotBackend(Protocol):
    """Highlighting and rasterizing collaborator fed with resolved settings."""

    def list_file_types(self) -> Iterable[str]: ...

    def list_themes(self) -> Iterable[str]: ...

    def render(
        self, content: str, code: CodeConfig, settings: GenerationSettings
    ) -> None: ...


def _json_default(value: Any) -> Any:
    return str(value)


def describe(code: CodeConfig, settings: GenerationSettings) -> Dict[str, Any]:
    """Return a JSON-friendly view of the resolved configuration."""

    code_view = asdict(code)
    code_view["content"] = str(code.content) if code.content else None
    for key in ("lines", "highlight_lines"):
        line_range = getattr(code, key)
        code_view[key] = {
            "start": line_range.start,
            "end": None if line_range.end == UNBOUNDED else line_range.end,
        }
    general_view = {
        item.name: getattr(settings, item.name) for item in fields(settings)
    }
    general_view["extra"] = dict(settings.extra)
    return {"code": code_view, "general": general_view}


def run(
    code: CodeConfig,
    settings: GenerationSettings,
    backend: ScreenshotBackend,
    *,
    stdin: TextIO | None = None,
) -> None:
    """Dispatch the resolved configuration to ``backend``."""

    if code.list_file_types:
        for name in backend.list_file_types():
            print(name)
    if code.list_themes:
        for name in backend.list_themes():
            print(name)
    if code.lists_something:
        return

    source = code.content
    if source is None:
        logger.debug("No content argument given; reading stdin")
        source = ContentSource()
    content = source.read(stdin)
    logger.info("Read %d lines from %s", len(content.splitlines()), source)
    backend.render(content, code, settings)


def main(
    argv: Optional[Sequence[str]] = None,
    backend: Optional[ScreenshotBackend] = None,
) -> int:
    """Entry point for the ``sss-code`` CLI."""

    cli = parse_cli(argv)
    configure_logging(cli.verbosity)

    try:
        code, settings = get_config(cli=cli)
    except ConfigError as exc:
        raise SystemExit(f"Config error: {exc}") from exc

    if backend is None:
        summary = describe(code, settings)
        print(json.dumps(summary, indent=2, default=_json_default))
        return 0

    try:
        run(code, settings, backend)
    except (OSError, UnicodeDecodeError) as exc:
        raise SystemExit(f"Input error: {exc}") from exc
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
