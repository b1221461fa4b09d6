"""
Command line interface - Presentation Layer

Thin driver around the use cases: reads the realm file, runs one pass and
prints the report. Exit codes: 0 on success, 1 when ``--fail-on-failure``
is given and any check failed, 2 on configuration or setup errors.
"""

import asyncio
import signal
from pathlib import Path
from typing import Annotated, Optional

import typer

from uptimer import __version__
from uptimer.application.dtos.report_dto import ReportDTO
from uptimer.application.use_cases.realm_use_cases import RunChecksUseCase
from uptimer.domain.entities.errors import ConfigurationError, EngineSetupError
from uptimer.domain.entities.realm import Realm
from uptimer.main.config import AppSettings, get_settings
from uptimer.main.container import AppContainer, init_container
from uptimer.presentation.formatters import render_report
from uptimer.shared import EnumOutputFormat, get_logger, update_logging_from_settings

logger = get_logger(__name__)

EXIT_FAILURES = 1
EXIT_CONFIG_ERROR = 2

app = typer.Typer(
    help="Run availability checks against every host of a realm.",
    context_settings={"help_option_names": ["-h", "--help"]},
    no_args_is_help=True,
)


def version_callback(value: bool) -> None:
    if value:
        typer.echo(f"uptimer {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: Annotated[
        Optional[bool],
        typer.Option(
            "--version",
            "-V",
            callback=version_callback,
            is_eager=True,
            help="Show the version and exit",
        ),
    ] = None,
) -> None:
    """Uptimer host availability monitor."""


ConfigPath = Annotated[
    Path,
    typer.Argument(
        exists=True,
        dir_okay=False,
        readable=True,
        help="Realm configuration file (JSON)",
    ),
]


@app.command("run")
def run_command(
    config_path: ConfigPath,
    concurrency: Annotated[
        Optional[int],
        typer.Option("--concurrency", "-c", help="Maximum checks in flight"),
    ] = None,
    timeout: Annotated[
        Optional[float],
        typer.Option("--timeout", "-t", help="Per-check deadline in seconds"),
    ] = None,
    retries: Annotated[
        Optional[int],
        typer.Option("--retries", "-r", help="Extra attempts for failed checks"),
    ] = None,
    output_format: Annotated[
        EnumOutputFormat,
        typer.Option("--format", "-f", help="Report output format"),
    ] = EnumOutputFormat.TEXT,
    fail_on_failure: Annotated[
        bool,
        typer.Option(
            "--fail-on-failure", help="Exit with status 1 when any check fails"
        ),
    ] = False,
) -> None:
    """Run every check of the realm once and print the report."""

    container = _bootstrap(
        max_concurrency=concurrency, check_timeout=timeout, retries=retries
    )
    realm = _load_realm(container, config_path)

    try:
        use_case = container.run_checks_use_case()
        report = asyncio.run(_run_until_interrupted(use_case, realm))
    except EngineSetupError as exc:
        typer.echo(f"Error: {exc.message}", err=True)
        raise typer.Exit(EXIT_CONFIG_ERROR) from exc

    typer.echo(render_report(report, output_format))

    if fail_on_failure and report.summary.failures:
        raise typer.Exit(EXIT_FAILURES)


@app.command("validate")
def validate_command(
    config_path: ConfigPath,
    list_items: Annotated[
        bool, typer.Option("--list", "-l", help="List every work item")
    ] = False,
) -> None:
    """Check the realm configuration without probing any host."""

    container = _bootstrap()
    realm = _load_realm(container, config_path)

    try:
        labels = container.describe_realm_use_case().execute(realm)
    except EngineSetupError as exc:
        typer.echo(f"Error: {exc.message}", err=True)
        raise typer.Exit(EXIT_CONFIG_ERROR) from exc

    typer.echo(
        f"Configuration OK: {len(realm.services)} services, "
        f"{len(labels)} work items"
    )
    if list_items:
        for label in labels:
            typer.echo(f"  {label}")


def _bootstrap(
    *,
    max_concurrency: Optional[int] = None,
    check_timeout: Optional[float] = None,
    retries: Optional[int] = None,
) -> AppContainer:
    settings = get_settings()
    update_logging_from_settings(settings)
    settings = _apply_engine_overrides(
        settings,
        max_concurrency=max_concurrency,
        check_timeout=check_timeout,
        retries=retries,
    )
    return init_container(settings)


def _apply_engine_overrides(settings: AppSettings, **overrides: object) -> AppSettings:
    values = {key: value for key, value in overrides.items() if value is not None}
    if not values:
        return settings
    engine = settings.engine.model_copy(update=values)
    return settings.model_copy(update={"engine": engine})


def _load_realm(container: AppContainer, config_path: Path) -> Realm:
    try:
        document = config_path.read_bytes()
    except OSError as exc:
        typer.echo(f"Error: cannot read {config_path}: {exc}", err=True)
        raise typer.Exit(EXIT_CONFIG_ERROR) from exc

    try:
        return container.load_realm_use_case().execute(document)
    except ConfigurationError as exc:
        typer.echo(f"Error: {exc.message}", err=True)
        for error in exc.errors:
            typer.echo(f"  - {error}", err=True)
        raise typer.Exit(EXIT_CONFIG_ERROR) from exc


async def _run_until_interrupted(
    use_case: RunChecksUseCase, realm: Realm
) -> ReportDTO:
    """Run the checks; SIGINT abandons in-flight checks and keeps finished ones."""

    cancel_event = asyncio.Event()
    loop = asyncio.get_running_loop()
    handler_installed = False
    try:
        loop.add_signal_handler(signal.SIGINT, cancel_event.set)
        handler_installed = True
    except (NotImplementedError, RuntimeError) as exc:
        logger.debug("cli.signal_handler.unavailable", error=str(exc))

    try:
        return await use_case.execute(realm, cancel_event=cancel_event)
    finally:
        if handler_installed:
            loop.remove_signal_handler(signal.SIGINT)
