"""Main CLI application entry point.

Defines the Typer application. A single command selects the node mode with
one of ``-b``, ``-r`` or ``-x`` and runs every stage for it.
"""

import logging
from pathlib import Path
from typing import Annotated, NoReturn

import click
import typer
from rich.logging import RichHandler
from typer.core import TyperCommand

from torbootstrap import __version__
from torbootstrap.cli.display import create_results_table, print_results_summary
from torbootstrap.core.context import BootstrapContext
from torbootstrap.core.errors import EXIT_USAGE, PrivilegeError, SettingsError
from torbootstrap.core.pipeline import run_pipeline
from torbootstrap.core.settings import dump_settings, load_settings
from torbootstrap.models.mode import NodeMode
from torbootstrap.stages import default_stages
from torbootstrap.stages.preflight import invoking_login, require_root
from torbootstrap.utils.formatting import console, err_console, print_error, print_info

logger = logging.getLogger(__name__)

# Key in the context meta holding the last selected mode
MODE_META_KEY = "torbootstrap.mode"

# Parameter names of the mode flags
_MODE_PARAMS: dict[str | None, NodeMode] = {
    "bridge": NodeMode.BRIDGE,
    "relay": NodeMode.RELAY,
    "exit_relay": NodeMode.EXIT,
}

app = typer.Typer(
    name="torbootstrap",
    help="Provision a Debian host as a Tor bridge, relay or exit relay.",
    rich_markup_mode="rich",
    add_completion=False,
    context_settings={"help_option_names": ["-h", "--help"]},
)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        typer.echo(f"torbootstrap version {__version__}")
        raise typer.Exit()


class ModeCommand(TyperCommand):
    """Command resolving the node mode from the order the flags were given in.

    Click processes each option once, so repeated flags are collapsed. The
    parser still records every occurrence; the last mode flag in that
    record is the selected mode. Parse errors print the usage on standard
    output and exit with the usage status instead of Click's status 2.
    """

    def parse_args(self, ctx: typer.Context, args: list[str]) -> list[str]:
        try:
            _, _, order = self.make_parser(ctx).parse_args(args=list(args))
            modes = [_MODE_PARAMS[p.name] for p in order if p.name in _MODE_PARAMS]
            ctx.meta[MODE_META_KEY] = modes[-1] if modes else None
            return super().parse_args(ctx, args)
        except click.UsageError as e:
            _usage_exit(ctx, e.format_message())


def _usage_exit(ctx: typer.Context, message: str) -> NoReturn:
    """Print usage on standard output and exit with the usage status."""
    typer.echo(message)
    typer.echo(ctx.get_usage())
    raise typer.Exit(code=EXIT_USAGE)


def _configure_logging(verbose: bool) -> None:
    """Route log records through Rich on standard error."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=err_console, show_path=verbose, rich_tracebacks=True)],
        force=True,
    )


@app.command(
    cls=ModeCommand,
    context_settings={
        "help_option_names": ["-h", "--help"],
        "ignore_unknown_options": True,
        "allow_extra_args": True,
    },
)
def main(
    ctx: typer.Context,
    bridge: Annotated[
        bool,
        typer.Option(
            "--bridge",
            "-b",
            help="Set up an obfs4 Tor bridge.",
        ),
    ] = False,
    relay: Annotated[
        bool,
        typer.Option(
            "--relay",
            "-r",
            help="Set up a (non-exit) Tor relay.",
        ),
    ] = False,
    exit_relay: Annotated[
        bool,
        typer.Option(
            "--exit",
            "-x",
            help="Set up a Tor exit relay.",
        ),
    ] = False,
    dry_run: Annotated[
        bool,
        typer.Option(
            "--dry-run",
            "-n",
            help="Show what would change without changing anything.",
        ),
    ] = False,
    config: Annotated[
        Path | None,
        typer.Option(
            "--config",
            "-c",
            help="Configuration file (default: /etc/torbootstrap/config.toml).",
            dir_okay=False,
        ),
    ] = None,
    print_config: Annotated[
        bool,
        typer.Option(
            "--print-config",
            help="Print the effective configuration as TOML and exit.",
        ),
    ] = False,
    verbose: Annotated[
        bool,
        typer.Option(
            "--verbose",
            "-v",
            help="Enable verbose output.",
        ),
    ] = False,
    version: Annotated[
        bool | None,
        typer.Option(
            "--version",
            "-V",
            callback=version_callback,
            is_eager=True,
            help="Show version and exit.",
        ),
    ] = None,
) -> None:
    """torbootstrap - Tor node provisioning for Debian.

    Installs Tor from the official repository and configures Tor, the
    firewall, unattended upgrades, AppArmor and sshd for the selected mode.
    Safe to run again: files that already match are left alone.
    """
    _configure_logging(verbose)

    if ctx.args:
        _usage_exit(ctx, f"Unrecognized arguments: {' '.join(ctx.args)}")

    try:
        settings = load_settings(config)
    except SettingsError as e:
        print_error(str(e))
        raise typer.Exit(code=e.exit_code) from e

    if print_config:
        typer.echo(dump_settings(settings), nl=False)
        raise typer.Exit()

    mode: NodeMode | None = ctx.meta.get(MODE_META_KEY)
    if mode is None:
        _usage_exit(ctx, "Select one of --bridge, --relay or --exit.")

    try:
        require_root()
    except PrivilegeError as e:
        print_error(str(e))
        raise typer.Exit(code=e.exit_code) from e

    bootstrap = BootstrapContext(
        mode=mode,
        settings=settings,
        login=invoking_login(),
        dry_run=dry_run,
    )
    logger.debug("Running as login %s in %s mode", bootstrap.login, mode.value)

    print_info(f"Setting up this host as a {mode.label}")
    if dry_run:
        print_info("Dry run: no changes will be made")

    results = run_pipeline(default_stages(), bootstrap)

    console.print()
    console.print(create_results_table(results, dry_run=dry_run))
    print_results_summary(results)

    failed = next((r for r in results if r.failed), None)
    if failed is not None:
        raise typer.Exit(code=failed.exit_code)


if __name__ == "__main__":
    app()
