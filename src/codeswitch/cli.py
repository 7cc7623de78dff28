"""codeswitch CLI — presentation layer.

Thin adapter: the core finds and resolves codebases, the CLI maps the
command line onto it and formats output.

stdout carries the answer (or, on ambiguity, the numbered candidate list)
because the shell wrapper captures it; the single ``error:`` line goes to
stderr.
"""

from __future__ import annotations

import os
import stat
from collections.abc import Sequence

import structlog
import typer
from pydantic import ValidationError
from rich.console import Console
from rich.markup import escape

from codeswitch import __version__
from codeswitch.core.errors import (
    AmbiguityError,
    CodeswitchError,
    InvalidSettings,
    MultipleMatches,
    NotADirectory,
)
from codeswitch.core.logging import configure_logging
from codeswitch.core.models import ResolutionQuery
from codeswitch.core.paths import require_cache_dir
from codeswitch.core.settings import Settings
from codeswitch.core.source import PathSource
from codeswitch.defaults import load_default_rules
from codeswitch.resolver import resolve

logger = structlog.get_logger()

err_console = Console(stderr=True)

app = typer.Typer(
    help="Jump to a git repository nested under DIR by (part of) its name.",
    add_completion=False,
)


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"codeswitch {__version__}")
        raise typer.Exit()


def _print_candidates(candidates: Sequence[bytes]) -> None:
    for i, path in enumerate(candidates, start=1):
        typer.echo(f"  {i:2}  ".encode() + path)


def _fail(exc: BaseException) -> None:
    err_console.print(f"[red bold]error:[/red bold] {escape(str(exc))}", soft_wrap=True)
    raise typer.Exit(code=1)


def _describe(exc: ValidationError) -> str:
    return "; ".join(
        f"{'.'.join(str(p) for p in err['loc']) or 'settings'}: {err['msg']}" for err in exc.errors()
    )


def _check_root(directory: str) -> bytes:
    if not stat.S_ISDIR(os.stat(directory).st_mode):
        raise NotADirectory(directory)
    return os.fsencode(directory)


def run(
    settings: Settings,
    directory: str,
    codebase: str,
    filter_: str = "",
    *,
    rebuild: bool = False,
) -> list[bytes]:
    """Resolve *codebase* under *directory* and return the output lines."""
    root = _check_root(directory)
    assert settings.cache_dir is not None and settings.config_path is not None
    require_cache_dir(settings.cache_dir)

    query = ResolutionQuery.parse(os.fsencode(codebase), os.fsencode(filter_))
    # completion (`_`) must keep working with a broken rules file
    rules = None
    if not query.is_wildcard:
        rules = load_default_rules(settings.config_path, max_size_bytes=settings.defaults_max_size_bytes)
    source = PathSource(root, settings.cache_path, rebuild=rebuild)
    return resolve(query, source, rules)


# ── Command ─────────────────────────────────────────────────
@app.command()
def switch(
    directory: str = typer.Argument(..., metavar="DIR", help="The root directory to search."),
    codebase: str = typer.Argument(
        ..., metavar="CODEBASE", help="The codebase to search for (or '_' for all), optionally '/sub/path'."
    ),
    filter_: str = typer.Argument("", metavar="[FILTER]", help="String to filter by, or line index to return."),
    rebuild: bool = typer.Option(False, "--rebuild", "-f", help="Force rebuild of cache."),
    log_level: str | None = typer.Option(None, "--log-level", help="Log level (default: WARNING)."),
    log_json: bool | None = typer.Option(None, "--log-json/--log-text", help="JSON or human logs."),
    version: bool = typer.Option(
        False, "--version", callback=_version_callback, is_eager=True, help="Show version and exit."
    ),
) -> None:
    """Print the path of the codebase matching CODEBASE under DIR."""
    overrides: dict[str, object] = {}
    if log_level is not None:
        overrides["log_level"] = log_level
    if log_json is not None:
        overrides["log_json"] = log_json
    try:
        settings = Settings(**overrides)  # type: ignore[arg-type]
    except ValidationError as exc:
        _fail(InvalidSettings(_describe(exc)))
    configure_logging(level=settings.log_level, json_output=settings.log_json)

    try:
        lines = run(settings, directory, codebase, filter_, rebuild=rebuild)
    except AmbiguityError as exc:
        _print_candidates(exc.candidates)
        if isinstance(exc, MultipleMatches):
            typer.echo(f"hint: add '{exc.hint}' to {settings.config_path} to make it the default")
        logger.debug("resolution_failed", error=type(exc).__name__, candidates=len(exc.candidates))
        _fail(exc)
    except (CodeswitchError, OSError) as exc:
        logger.debug("resolution_failed", error=type(exc).__name__)
        _fail(exc)
    else:
        for line in lines:
            typer.echo(line)


# ── Entrypoint ──────────────────────────────────────────────
def main() -> None:  # noqa: D103
    app()
