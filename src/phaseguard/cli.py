"""
PhaseGuard command line.

Usage:
    phaseguard serve --output-dir structured-workflow
    phaseguard presets
    phaseguard detect "Refactor the billing module"
    phaseguard check-config workflow.json

stdout belongs to the MCP transport while serving, so logs and console
output go to stderr.
"""

import asyncio
import logging
import sys

import click
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from phaseguard import __version__
from phaseguard.domain.exceptions import ConfigurationError
from phaseguard.domain.models import WorkflowConfiguration
from phaseguard.domain.phases import Phase, estimate_minutes
from phaseguard.domain.presets import PRESETS, detect_workflow_type
from phaseguard.infrastructure.config import LOG_LEVELS, ServerSettings, load_workflow_config

logger = logging.getLogger(__name__)

console = Console()
error_console = Console(stderr=True)

_SUPPRESS_LOGGERS = ("anyio", "httpx", "httpcore", "mcp", "sse_starlette", "uvicorn")
_HANDLER_NAME = "phaseguard-stderr"
_LIMITED_PHASES = (Phase.TEST, Phase.LINT, Phase.ITERATE)


def _configure_logging(level_name: str) -> None:
    """Send logs to stderr, suppressing noisy third-party loggers."""
    level = getattr(logging, level_name.upper(), logging.INFO)
    root = logging.getLogger()
    root.setLevel(level)
    # One handler per process; repeated invocations rebind it to the current stderr
    for existing in [h for h in root.handlers if h.get_name() == _HANDLER_NAME]:
        root.removeHandler(existing)
    handler = logging.StreamHandler(sys.stderr)
    handler.set_name(_HANDLER_NAME)
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s"))
    root.addHandler(handler)

    for name in _SUPPRESS_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def _print_error(message: str, hint: str | None = None) -> None:
    content = Text(f"ERROR: {message}", style="bold red")
    if hint:
        content.append(f"\n\nHint: {hint}", style="yellow")
    error_console.print(Panel(content, title="Error", border_style="red"))


def _config_table(config: WorkflowConfiguration) -> Table:
    table = Table(show_header=False, box=None)
    table.add_column("Key", style="cyan")
    table.add_column("Value")

    table.add_row("Phases", " -> ".join(p.value for p in config.selected_phases))
    table.add_row(
        "Iteration limits",
        ", ".join(f"{p.value}={n}" for p, n in config.iteration_limits.items()) or "-",
    )
    table.add_row("Guidance", config.guidance_mode.value)
    prefs = config.output_preferences
    table.add_row("Output directory", prefs.output_directory)
    table.add_row("Formats", ", ".join(f.value for f in prefs.formats))
    table.add_row("Task subdirectory", str(prefs.create_task_subdirectory))
    table.add_row("Phase artifacts", str(prefs.create_phase_artifacts))
    escalation = config.escalation_triggers
    table.add_row("User input", str(escalation.enable_user_input))
    table.add_row("Max validation attempts", str(escalation.max_validation_attempts))
    return table


@click.group()
@click.version_option(__version__, prog_name="phaseguard")
@click.option(
    "--log-level",
    default=None,
    type=click.Choice(LOG_LEVELS, case_sensitive=False),
    help="Log level (default: PHASEGUARD_LOG_LEVEL or INFO)",
)
@click.pass_context
def main(ctx: click.Context, log_level: str | None) -> None:
    """Phase-gated workflow orchestration for coding agents."""
    ctx.ensure_object(dict)
    try:
        settings = ServerSettings.from_env()
    except ConfigurationError as e:
        _print_error(e.message, e.resolution)
        ctx.exit(2)
    if log_level:
        settings = ServerSettings(
            output_directory=settings.output_directory,
            base_directory=settings.base_directory,
            log_level=log_level,
            config_file=settings.config_file,
        )
    _configure_logging(settings.log_level)
    ctx.obj["settings"] = settings


@main.command()
@click.option("--output-dir", default=None, help="Artifact root, relative to the base directory")
@click.option(
    "--base-dir",
    default=None,
    type=click.Path(file_okay=False),
    help="Directory that relative output paths resolve against",
)
@click.option(
    "--config",
    "config_file",
    default=None,
    type=click.Path(exists=True, dir_okay=False),
    help="Workflow configuration JSON used by plan_workflow",
)
@click.pass_context
def serve(
    ctx: click.Context,
    output_dir: str | None,
    base_dir: str | None,
    config_file: str | None,
) -> None:
    """Run the MCP tool server over stdio."""
    from phaseguard.server.mcp_server import serve as serve_stdio

    settings: ServerSettings = ctx.obj["settings"]
    settings = ServerSettings(
        output_directory=output_dir or settings.output_directory,
        base_directory=base_dir or settings.base_directory,
        log_level=settings.log_level,
        config_file=config_file or settings.config_file,
    )
    logger.info("phaseguard %s starting (base directory: %s)", __version__, settings.base_directory)
    try:
        asyncio.run(serve_stdio(settings))
    except ConfigurationError as e:
        _print_error(e.message, e.resolution)
        ctx.exit(1)
    except KeyboardInterrupt:
        logger.info("Interrupted")


@main.command()
def presets() -> None:
    """List the workflow presets."""
    table = Table(title="Workflow presets")
    table.add_column("Preset", style="cyan", no_wrap=True)
    table.add_column("Phases")
    table.add_column("Limits (test/lint/iterate)", justify="right")
    table.add_column("Minutes", justify="right")
    table.add_column("Description", style="dim")

    for workflow_type, preset in PRESETS.items():
        limits = "/".join(str(preset.iteration_limits.get(p, "-")) for p in _LIMITED_PHASES)
        minutes = estimate_minutes(preset.phases)
        table.add_row(
            workflow_type.value,
            ", ".join(p.value for p in preset.phases),
            limits,
            str(minutes),
            preset.description,
        )
    console.print(table)


@main.command()
@click.argument("task")
def detect(task: str) -> None:
    """Suggest a workflow preset for TASK."""
    workflow_type = detect_workflow_type(task)
    if workflow_type is None:
        console.print("No preset matches; use [cyan]plan_workflow[/cyan] or a custom workflow.")
        return
    preset = PRESETS[workflow_type]
    console.print(f"Suggested workflow: [bold cyan]{workflow_type.value}[/bold cyan]")
    console.print(f"  {preset.description}")


@main.command("check-config")
@click.argument("path", type=click.Path(dir_okay=False))
@click.pass_context
def check_config(ctx: click.Context, path: str) -> None:
    """Validate a workflow configuration file."""
    try:
        config, workflow_type = load_workflow_config(path)
    except ConfigurationError as e:
        _print_error(e.message, e.resolution)
        ctx.exit(1)
    title = f"{path} (preset: {workflow_type.value})" if workflow_type else path
    console.print(Panel(_config_table(config), title=title, border_style="green"))


if __name__ == "__main__":
    main()
