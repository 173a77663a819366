"""dspflow run — upload, process and fetch all four plots."""

from __future__ import annotations

import asyncio
import json
from collections.abc import Mapping
from dataclasses import replace
from enum import Enum
from pathlib import Path

import click
from rich.table import Table

from dspflow.cli.utils import console, error_handler, make_progress
from dspflow.config import ClientConfig, load_config
from dspflow.core.models import (
    WAVELET_TYPES,
    FFTMode,
    SourceSignalMode,
    SpectrumMode,
    Visualization,
    WaveletMode,
)
from dspflow.remote.client import HttpComputeClient, RemoteComputeClient
from dspflow.workflow.serialization import SessionSnapshot
from dspflow.workflow.session import WorkflowSession
from dspflow.workflow.slots import SlotStatus

_STATUS_STYLES = {
    SlotStatus.IDLE: "dim",
    SlotStatus.LOADING: "yellow",
    SlotStatus.READY: "green",
    SlotStatus.FAILED: "red",
}


def _make_client(config: ClientConfig) -> RemoteComputeClient:
    return HttpComputeClient(config.base_url, timeout=config.timeout)


def _choices(mode_type: type[Enum]) -> click.Choice:
    return click.Choice([m.value for m in mode_type])


@click.command()
@click.argument("files", nargs=-1, required=True, type=click.Path(exists=True, dir_okay=False))
@click.option("--select", "select_name", default=None,
              help="File name to process (defaults to the first uploaded).")
@click.option("--time-column", type=int, default=None, help="Time column index (0-9).")
@click.option("--signal-column", type=int, default=None, help="Signal column index (0-9).")
@click.option("--wavelet", type=click.Choice(WAVELET_TYPES), default=None,
              help="Wavelet family.")
@click.option("--levels", type=int, default=None, help="Decomposition levels (1-20).")
@click.option("--signal-mode", type=_choices(SourceSignalMode), default=None)
@click.option("--wavelet-mode", type=_choices(WaveletMode), default=None)
@click.option("--fft-mode", type=_choices(FFTMode), default=None)
@click.option("--spectrum-mode", type=_choices(SpectrumMode), default=None)
@click.option("--stats-dir", type=click.Path(file_okay=False), default=None,
              help="Write <name>_statistics.csv into this directory.")
@click.option("--plots-dir", type=click.Path(file_okay=False), default=None,
              help="Write each ready plot payload as JSON into this directory.")
@click.option("--load-session", type=click.Path(exists=True, dir_okay=False), default=None,
              help="Start from parameters saved in a session YAML.")
@click.option("--save-session", type=click.Path(dir_okay=False), default=None,
              help="Save the final session state as YAML.")
@click.option("--api-url", default=None, help="Processing service URL.")
@click.option("--plot-timeout", type=float, default=None,
              help="Seconds to wait for each plot before marking it failed.")
@click.option("--overwrite", is_flag=True, help="Overwrite existing output files.")
@error_handler
def run(
    files: tuple[str, ...],
    select_name: str | None,
    time_column: int | None,
    signal_column: int | None,
    wavelet: str | None,
    levels: int | None,
    signal_mode: str | None,
    wavelet_mode: str | None,
    fft_mode: str | None,
    spectrum_mode: str | None,
    stats_dir: str | None,
    plots_dir: str | None,
    load_session: str | None,
    save_session: str | None,
    api_url: str | None,
    plot_timeout: float | None,
    overwrite: bool,
) -> None:
    """Upload FILES, process one and fetch its four plots."""
    config = load_config()
    if api_url:
        config = replace(config, base_url=api_url)
    session = WorkflowSession(
        _make_client(config),
        defaults=config.defaults,
        plot_timeout=plot_timeout if plot_timeout is not None else config.plot_timeout,
    )

    if load_session:
        SessionSnapshot.load(load_session).apply_to(session)

    overrides = {
        "time_column": time_column,
        "signal_column": signal_column,
        "wavelet_type": wavelet,
        "n_levels": levels,
    }
    session.set_params(**{k: v for k, v in overrides.items() if v is not None})
    modes = {
        Visualization.SIGNAL: signal_mode,
        Visualization.WAVELET: wavelet_mode,
        Visualization.FFT: fft_mode,
        Visualization.SPECTRUM: spectrum_mode,
    }
    for viz, mode in modes.items():
        if mode is not None:
            session.params.set_mode(viz, mode)

    code = asyncio.run(_run_session(
        session,
        [Path(f) for f in files],
        select_name,
        Path(stats_dir) if stats_dir else None,
        Path(plots_dir) if plots_dir else None,
        Path(save_session) if save_session else None,
        overwrite,
    ))
    if code:
        raise SystemExit(code)


async def _run_session(
    session: WorkflowSession,
    files: list[Path],
    select_name: str | None,
    stats_dir: Path | None,
    plots_dir: Path | None,
    save_session: Path | None,
    overwrite: bool,
) -> int:
    try:
        with make_progress() as progress:
            task = progress.add_task("Uploading files...", total=len(files))

            def on_progress(current: int, total: int, name: str) -> None:
                progress.update(task, completed=current, description=f"Uploading {name}")

            report = await session.upload(*files, progress_callback=on_progress)
            progress.update(task, completed=len(files))
        for err in report.errors:
            console.print(f"[red]Upload error:[/red] {err}")
        if not report.added:
            console.print("[red]Error:[/red] No file was accepted by the service.")
            return 1
        console.print(f"Uploaded {len(report.added)} file(s): "
                      f"{', '.join(f.name for f in report.added)}")

        if select_name:
            session.select(select_name)

        params = session.params.params
        with console.status(f"[bold blue]Processing {session.files.selected_name}..."):
            result = await session.process()
        if result is None:
            console.print(f"[red]Error:[/red] {session.error}")
            return 1

        console.print(
            f"\n[bold]{result.filename}[/bold] — {params.wavelet_type}, "
            f"{params.n_levels} levels, columns {params.time_column}/{params.signal_column}\n"
        )
        _print_statistics(result.statistics)
        _print_slots(session)

        if stats_dir is not None:
            try:
                out = session.export_statistics(stats_dir, overwrite=overwrite)
            except (FileExistsError, FileNotFoundError) as e:
                console.print(f"[red]Error:[/red] {e}")
                return 1
            console.print(f"[green]Exported statistics to {out}[/green]")

        if plots_dir is not None:
            written = _write_plots(session, plots_dir, overwrite)
            if written is None:
                return 1
            console.print(f"[green]Wrote {written} plot payload(s) to {plots_dir}[/green]")

        if save_session is not None:
            session.snapshot().save(save_session)
            console.print(f"[green]Saved session to {save_session}[/green]")
        return 0
    finally:
        await session.aclose()


def _print_statistics(statistics: Mapping[str, float]) -> None:
    table = Table(show_header=True, title="Statistics")
    table.add_column("Metric", style="bold")
    table.add_column("Value", justify="right")
    for name, value in statistics.items():
        table.add_row(name, f"{value:.6g}")
    console.print(table)


def _print_slots(session: WorkflowSession) -> None:
    table = Table(show_header=True, title="Plots")
    table.add_column("Plot", style="bold")
    table.add_column("Mode")
    table.add_column("Status")
    table.add_column("Detail")
    for viz, slot in session.slots.items():
        style = _STATUS_STYLES[slot.status]
        mode = slot.mode.value if slot.mode is not None else "-"
        detail = str(slot.error) if slot.error else f"{slot.elapsed_seconds:.2f}s"
        table.add_row(viz.value, mode, f"[{style}]{slot.status.value}[/{style}]", detail)
    console.print(table)


def _write_plots(session: WorkflowSession, plots_dir: Path, overwrite: bool) -> int | None:
    """Write ready payloads as JSON. Returns the count, or None on error."""
    if not plots_dir.is_dir():
        console.print(f"[red]Error:[/red] Output directory does not exist: {plots_dir}")
        return None
    stem = Path(session.result.filename).stem if session.result else "plot"
    written = 0
    for viz, slot in session.slots.items():
        if slot.status is not SlotStatus.READY:
            continue
        out = plots_dir / f"{stem}_{viz.value}.json"
        if out.exists() and not overwrite:
            console.print(
                f"[red]Error:[/red] Output file already exists: {out}\n"
                "Use --overwrite to replace it."
            )
            return None
        out.write_text(json.dumps(slot.data))
        written += 1
    return written
