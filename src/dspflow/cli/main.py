"""dspflow CLI — top-level Click group."""

from __future__ import annotations

import click


@click.group()
@click.version_option(package_name="dspflow")
@click.option("--verbose", "-v", is_flag=True, help="Debug logging and full tracebacks on errors.")
def cli(verbose: bool) -> None:
    """dspflow — wavelet/FFT signal analysis against a processing service."""
    from dspflow.cli import utils

    utils.verbose = verbose
    utils.configure_logging(debug=verbose)


def _register_commands() -> None:
    """Register all subcommands — imports deferred to avoid loading heavy deps at startup."""
    from dspflow.cli.info import show_config, wavelets
    from dspflow.cli.run import run

    cli.add_command(run)
    cli.add_command(show_config)
    cli.add_command(wavelets)


_register_commands()
