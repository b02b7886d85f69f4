from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.logging import RichHandler

from . import __version__
from .configuration import Settings, load_settings
from .errors import InputValidationError, VettaError
from .exit_codes import ExitCode
from .orchestration import (
    ExecutionOutcome,
    HealthReport,
    collect_health_report,
    handle_domain_error,
    run_analysis,
)
from .pipeline import PipelineState, Stage
from .reporting import ReportRenderOptions, render_error, render_result
from .utils import format_display_path, read_text_file

APP_NAME = "vetta"
_LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"
_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

app = typer.Typer(
    name=APP_NAME,
    add_completion=False,
    context_settings={"help_option_names": ["-h", "--help"]},
)


def configure_logging(*, quiet: bool = False, debug: bool = False) -> None:
    """Initialise application-wide logging."""

    if debug:
        level = logging.DEBUG
    elif quiet:
        level = logging.WARNING
    else:
        level = logging.INFO
    root = logging.getLogger()

    if getattr(configure_logging, "_configured", False):
        root.setLevel(level)
        for handler in root.handlers:
            handler.setLevel(level)
        configure_logging._level = level
        return

    handler = RichHandler(
        console=Console(stderr=True),
        rich_tracebacks=True,
        show_path=False,
        markup=False,
    )
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(_LOG_FORMAT, datefmt=_DATE_FORMAT))

    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(level)

    configure_logging._configured = True
    configure_logging._level = level


def _is_quiet_mode() -> bool:
    """Determine if the CLI is currently running in quiet mode."""

    return getattr(configure_logging, "_level", logging.INFO) == logging.WARNING


def _is_debug_mode() -> bool:
    return getattr(configure_logging, "_level", logging.INFO) == logging.DEBUG


def _resolve_job_description(jd: Optional[Path], jd_text: Optional[str]) -> str:
    """Return the job description from exactly one of --jd or --jd-text."""

    if jd is not None and jd_text is not None:
        raise InputValidationError(
            message="Both --jd and --jd-text were provided.",
            remediation="Pass the job description either as a file or as inline text, not both.",
        )
    if jd is not None:
        text, encoding = read_text_file(jd, "job description")
        logging.getLogger("vetta.cli").debug(
            "Job description %s decoded as %s", format_display_path(jd), encoding
        )
        return text
    # Missing text is reported by the pipeline's own validation stage.
    return jd_text or ""


def _progress_observer(resume_name: str):
    """Return an observer echoing stage progress to stderr."""

    messages = {
        Stage.EXTRACTING: f"Step 1/3: Extracting text from {resume_name}...",
        Stage.ANALYZING: "Step 2/3: Sending resume to the analysis service...",
        Stage.SUCCEEDED: "Step 3/3: Analysis complete.",
    }

    def _observe(state: PipelineState) -> None:
        message = messages.get(state.stage)
        if message:
            typer.echo(message, err=True)

    return _observe


def _render_health_report(report: HealthReport) -> None:
    """Pretty-print the health diagnostics to the console."""

    typer.echo("Vetta environment diagnostics")
    typer.echo(f"Python runtime     : {report.python_version}")
    typer.echo(f"Analysis endpoint  : {report.settings.endpoint}")

    typer.echo("")
    for check in report.checks:
        typer.echo(f"[{check.status}] {check.name} - {check.detail}")
        if check.remediation:
            typer.echo(f"    Remediation: {check.remediation}")

    typer.echo("")
    typer.echo(f"Overall status: {report.overall_status}")


def _render_outcome(outcome: ExecutionOutcome, options: ReportRenderOptions) -> None:
    state = outcome.state

    if state is not None and state.result is not None:
        typer.echo(render_result(state.result, options))
        if outcome.artifact_path is not None and not options.quiet:
            typer.echo(f"Saved analysis to {outcome.artifact_path}", err=True)
        return

    if state is not None and state.error is not None:
        typer.echo(
            render_error(
                state.error,
                attempt=state.attempt,
                remediation=outcome.remediation,
                options=options,
            ),
            err=True,
        )
        return

    if outcome.message:
        typer.echo(outcome.message, err=True)
    if outcome.remediation:
        typer.echo(f"Remediation: {outcome.remediation}", err=True)


@app.callback(invoke_without_command=True)
def main(
    ctx: typer.Context,
    quiet: bool = typer.Option(
        False,
        "--quiet",
        help="Reduce log output to warnings and errors.",
    ),
    debug: bool = typer.Option(
        False,
        "--debug",
        help="Enable debug logging and show diagnostic details on failure.",
    ),
    config: Optional[Path] = typer.Option(
        None,
        "--config",
        "-c",
        help="YAML settings file (defaults to $VETTA_CONFIG when set).",
    ),
    version: bool = typer.Option(
        False,
        "--version",
        help="Show the Vetta version and exit.",
    ),
    health: bool = typer.Option(
        False,
        "--health",
        help="Run offline diagnostics to verify environment readiness.",
    ),
) -> None:
    """Configure logging, load settings and handle global options."""

    configure_logging(quiet=quiet, debug=debug)

    if version:
        typer.echo(__version__)
        raise typer.Exit(code=int(ExitCode.SUCCESS))

    try:
        settings = load_settings(config)
    except VettaError as exc:
        outcome = handle_domain_error(exc)
        _render_outcome(outcome, ReportRenderOptions(quiet=quiet, debug=debug))
        raise typer.Exit(code=int(outcome.exit_code)) from exc
    ctx.obj = settings

    if health:
        _render_health_report(collect_health_report(settings))
        raise typer.Exit(code=int(ExitCode.SUCCESS))

    if ctx.invoked_subcommand is None:
        typer.echo(ctx.get_help())
        raise typer.Exit(code=int(ExitCode.SUCCESS))


@app.command("analyze")
def analyze(
    ctx: typer.Context,
    resume: Path = typer.Option(
        ...,
        "--resume",
        "-r",
        exists=True,
        file_okay=True,
        dir_okay=False,
        readable=True,
        help="Path to the resume PDF.",
    ),
    jd: Optional[Path] = typer.Option(
        None,
        "--jd",
        "-j",
        exists=True,
        file_okay=True,
        dir_okay=False,
        readable=True,
        help="Path to a job description text file.",
    ),
    jd_text: Optional[str] = typer.Option(
        None,
        "--jd-text",
        "-t",
        help="Job description passed inline.",
    ),
    advanced: bool = typer.Option(
        False,
        "--advanced",
        help="Request a deeper analysis (slower, larger token budget).",
    ),
    output: Optional[Path] = typer.Option(
        None,
        "--output",
        "-o",
        help="Write the critique to this file, or into this directory as resume-analysis.txt.",
    ),
) -> None:
    """Critique a resume against a job description."""

    settings: Settings = ctx.obj if isinstance(ctx.obj, Settings) else load_settings()
    options = ReportRenderOptions(quiet=_is_quiet_mode(), debug=_is_debug_mode())

    try:
        job_description = _resolve_job_description(jd, jd_text)
    except VettaError as exc:
        outcome = handle_domain_error(exc)
        _render_outcome(outcome, options)
        raise typer.Exit(code=int(outcome.exit_code)) from exc

    observer = None if options.quiet else _progress_observer(format_display_path(resume))
    outcome = run_analysis(
        resume,
        job_description=job_description,
        settings=settings,
        advanced=advanced,
        output_path=output,
        observer=observer,
    )

    _render_outcome(outcome, options)
    raise typer.Exit(code=int(outcome.exit_code))


def entrypoint() -> None:
    """Execute the Typer application."""

    app()


__all__ = ["app", "entrypoint", "configure_logging", "ExitCode"]
