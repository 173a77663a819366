"""dspflow wavelets / config — informational commands."""

from __future__ import annotations

import click
from rich.table import Table

from dspflow.cli.utils import console, error_handler
from dspflow.config import load_config
from dspflow.core.models import WAVELET_TYPES, Visualization


@click.command()
@click.option("--modes", is_flag=True, help="Also list each plot's display modes.")
@error_handler
def wavelets(modes: bool) -> None:
    """List supported wavelet families."""
    table = Table(show_header=True, title="Wavelet Families")
    table.add_column("Name", style="bold")
    for name in WAVELET_TYPES:
        table.add_row(name)
    console.print(table)

    if modes:
        mode_table = Table(show_header=True, title="Display Modes")
        mode_table.add_column("Plot", style="bold")
        mode_table.add_column("Modes")
        for viz in Visualization:
            mode_table.add_row(viz.value, ", ".join(m.value for m in viz.mode_type))
        console.print(mode_table)


@click.command("config")
@error_handler
def show_config() -> None:
    """Show the effective client configuration."""
    config = load_config()
    table = Table(show_header=True)
    table.add_column("Setting", style="bold")
    table.add_column("Value")
    table.add_row("base_url", config.base_url)
    table.add_row("timeout", "none" if config.timeout is None else f"{config.timeout:g}s")
    table.add_row(
        "plot_timeout",
        "none" if config.plot_timeout is None else f"{config.plot_timeout:g}s",
    )
    for key, value in config.defaults.to_dict().items():
        table.add_row(f"defaults.{key}", str(value))
    console.print(table)
