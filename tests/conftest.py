"""Shared test fixtures for dspflow."""

from __future__ import annotations

import asyncio
from enum import Enum
from pathlib import Path
from typing import Any

import pytest

from dspflow.core.exceptions import RemoteServiceError
from dspflow.core.models import (
    STATISTIC_NAMES,
    ProcessingParams,
    SignalResult,
    UploadAck,
    UploadedFile,
    Visualization,
)
from dspflow.remote.client import RemoteComputeClient


def make_statistics() -> dict[str, float]:
    """A full statistics mapping with distinct values."""
    return {name: float(i) + 0.5 for i, name in enumerate(STATISTIC_NAMES)}


def make_process_response(filename: str = "signal1.lvm", n_levels: int = 3) -> dict[str, Any]:
    """A /process JSON body as the service returns it."""
    return {
        "filename": filename,
        "time": [0.0, 0.1, 0.2, 0.3],
        "raw_signal": [1.0, 2.0, 1.5, 0.5],
        "denoised_signal": [1.1, 1.8, 1.4, 0.6],
        "wavelet_coeffs": {
            "approximation": [2.0, 1.0],
            "detail": [[0.1, -0.1] for _ in range(n_levels)],
        },
        "statistics": make_statistics(),
    }


def plot_payload(viz: Visualization, params: ProcessingParams, mode: Enum) -> dict[str, Any]:
    """Payload the fake client returns; echoes what it was asked for."""
    return {
        "data": [{"x": [0, 1, 2], "y": [1, 2, 3], "type": "scatter"}],
        "layout": {"title": f"{viz.value}:{mode.value}"},
        "params": params.to_dict(),
        "mode": mode.value,
    }


class FakeComputeClient(RemoteComputeClient):
    """Scriptable in-memory stand-in for the processing service.

    ``plot_delays`` maps (visualization, mode value) to a sleep in seconds,
    letting tests control the order in which responses resolve.
    ``process_delay`` keeps the process call in flight for that long.
    """

    def __init__(
        self,
        reject_uploads: set[str] | None = None,
        fail_process: bool = False,
        plot_failures: set[Visualization] | None = None,
        plot_delays: dict[tuple[Visualization, str], float] | None = None,
        hang: set[Visualization] | None = None,
        process_delay: float = 0.0,
    ) -> None:
        self.reject_uploads = reject_uploads or set()
        self.fail_process = fail_process
        self.plot_failures = plot_failures or set()
        self.plot_delays = plot_delays or {}
        self.hang = hang or set()
        self.process_delay = process_delay
        self.uploads: list[str] = []
        self.process_calls: list[tuple[str, ProcessingParams]] = []
        self.plot_calls: list[tuple[Visualization, ProcessingParams, str]] = []
        self.cancelled: list[tuple[Visualization, str]] = []
        self.closed = False

    async def upload(self, file: UploadedFile) -> UploadAck:
        self.uploads.append(file.name)
        if file.name in self.reject_uploads:
            raise RemoteServiceError("upload", "Unsupported file format", 400)
        return UploadAck(filename=file.name, columns=2, rows=4, status="success")

    async def process(self, file: UploadedFile, params: ProcessingParams) -> SignalResult:
        self.process_calls.append((file.name, params))
        await asyncio.sleep(self.process_delay)
        if self.fail_process:
            raise RemoteServiceError("process", "Column index out of range", 500)
        return SignalResult.from_response(
            file.name, params, make_process_response(file.name, params.n_levels),
        )

    async def plot(
        self,
        viz: Visualization,
        file: UploadedFile,
        params: ProcessingParams,
        mode: Enum,
    ) -> Any:
        self.plot_calls.append((viz, params, mode.value))
        try:
            if viz in self.hang:
                await asyncio.Event().wait()
            await asyncio.sleep(self.plot_delays.get((viz, mode.value), 0))
        except asyncio.CancelledError:
            self.cancelled.append((viz, mode.value))
            raise
        if viz in self.plot_failures:
            raise RemoteServiceError(f"{viz.value} plot", "plot backend unavailable", 503)
        return plot_payload(viz, params, mode)

    async def aclose(self) -> None:
        self.closed = True


@pytest.fixture
def fake_client() -> FakeComputeClient:
    return FakeComputeClient()


@pytest.fixture
def signal_file(tmp_path: Path) -> Path:
    """A small LabVIEW-style measurement file."""
    path = tmp_path / "signal1.lvm"
    path.write_text("0.0\t1.0\n0.1\t2.0\n0.2\t1.5\n0.3\t0.5\n")
    return path


@pytest.fixture
def signal_files(tmp_path: Path) -> list[Path]:
    """Three uploadable files."""
    paths = []
    for name in ("signal1.lvm", "signal2.txt", "signal3.lvm"):
        path = tmp_path / name
        path.write_text("0.0\t1.0\n0.1\t2.0\n")
        paths.append(path)
    return paths


@pytest.fixture
def uploaded_file(signal_file: Path) -> UploadedFile:
    return UploadedFile(
        name=signal_file.name,
        path=signal_file,
        ack=UploadAck(filename=signal_file.name, columns=2, rows=4, status="success"),
    )
