# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Command line entry point: ``w3c-validate-css --target <file|folder>``."""

from __future__ import annotations

from functools import partial
from pathlib import Path

import typer

from .config import Settings, load_config
from .errors import ValidateCssError
from .invocation import InvocationRunner
from .logging import enable_verbose_logging, fail
from .models import Profile, RunSummary
from .provisioning import EngineProvisioner, ensure_java
from .reporting import ConsoleReporter, exit_code, render_json
from .validator import Validator

app = typer.Typer(
    add_completion=False,
    help="Validate CSS files with the W3C CSS validator.",
    no_args_is_help=True,
)


def build_validator(settings: Settings, reporter: ConsoleReporter | None) -> Validator:
    """Wire a :class:`Validator` from resolved ``settings``."""

    engine = settings.engine
    return Validator(
        provisioner=EngineProvisioner(
            cache_dir=engine.cache_dir,
            sources=engine.sources,
            timeout=engine.download_timeout,
        ),
        runner_factory=partial(InvocationRunner, java=engine.java, timeout=engine.invocation_timeout),
        host_check=partial(ensure_java, engine.java),
        observer=reporter,
    )


@app.command()
def main(
    target: Path = typer.Option(..., "--target", "-t", help="CSS file or folder to validate."),
    profile: Profile | None = typer.Option(
        None,
        "--profile",
        "-p",
        case_sensitive=False,
        help="CSS profile (default css3).",
    ),
    warnings: int | None = typer.Option(
        None,
        "--warnings",
        "-w",
        min=0,
        max=2,
        help="Warning level: 0 none, 1 normal, 2 all (default 2).",
    ),
    deprecations: bool | None = typer.Option(
        None,
        "--deprecations/--no-deprecations",
        "-d",
        help="Report deprecation warnings.",
    ),
    errors_only: bool | None = typer.Option(
        None,
        "--errors-only/--no-errors-only",
        "-e",
        help="Ignore warnings for pass/fail and output.",
    ),
    tolerate: str | None = typer.Option(
        None,
        "--tolerate",
        help='Property names whose "doesn\'t exist" errors become warnings, e.g. "prop,prop2".',
    ),
    json_output: bool | None = typer.Option(None, "--json/--no-json", help="Print a JSON summary."),
    timeout: float | None = typer.Option(None, "--timeout", help="Per-file engine timeout in seconds."),
    cache_dir: Path | None = typer.Option(None, "--cache-dir", help="Directory holding the cached engine."),
    config_root: Path = typer.Option(
        Path("."),
        "--config-root",
        help="Directory whose pyproject.toml supplies defaults.",
    ),
    color: bool = typer.Option(True, "--color/--no-color", help="Toggle ANSI colour."),
    emoji: bool = typer.Option(True, "--emoji/--no-emoji", help="Toggle emoji in messages."),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log provisioning and invocation details."),
) -> None:
    """Validate CSS and exit with status 1 when any file fails."""

    if verbose:
        enable_verbose_logging()

    try:
        settings = load_config(config_root.resolve()).with_overrides(
            {
                "profile": profile,
                "warnings": warnings,
                "deprecations": deprecations,
                "errors-only": errors_only,
                "tolerate": tolerate,
                "json": json_output,
                "timeout": timeout,
                "cache-dir": cache_dir,
            }
        )
        config = settings.validation
        reporter = None if config.output_json else ConsoleReporter(config, use_color=color, use_emoji=emoji)
        summary: RunSummary = build_validator(settings, reporter).validate(target, config)
    except ValidateCssError as exc:
        fail(f"error {exc}", use_emoji=emoji, use_color=color)
        raise typer.Exit(code=1) from exc

    if reporter is None:
        typer.echo(render_json(summary))
    else:
        reporter.finish(summary)
    raise typer.Exit(code=exit_code(summary))


__all__ = ["app", "build_validator", "main"]
