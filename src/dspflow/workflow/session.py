"""WorkflowSession: the typed store tying files, parameters and plots together."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Callable

from dspflow.core.exceptions import (
    NoFileSelectedError,
    NoResultError,
    ProcessError,
    RemoteServiceError,
    UnsupportedFileTypeError,
    UploadError,
)
from dspflow.core.models import (
    ACCEPTED_EXTENSIONS,
    ProcessingParams,
    SignalResult,
    UploadedFile,
    Visualization,
)
from dspflow.core.params import ParameterStore
from dspflow.core.registry import FileRegistry
from dspflow.export import ResultExporter
from dspflow.remote.client import RemoteComputeClient
from dspflow.workflow.orchestrator import PlotOrchestrator
from dspflow.workflow.serialization import SessionSnapshot
from dspflow.workflow.slots import PlotSlot

logger = logging.getLogger(__name__)


@dataclass
class UploadReport:
    """What happened during one multi-file upload."""

    added: list[UploadedFile] = field(default_factory=list)
    errors: list[UploadError] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors


class WorkflowSession:
    """One user's session: uploaded files, parameters, results and plots.

    Each public method is one user action. Remote failures are turned into
    state here: upload and process failures land in ``error`` (the global
    banner), plot failures land on their own slot.
    """

    def __init__(
        self,
        client: RemoteComputeClient,
        defaults: ProcessingParams | None = None,
        plot_timeout: float | None = None,
    ) -> None:
        self.client = client
        self.files = FileRegistry()
        self.params = ParameterStore(defaults)
        self.plots = PlotOrchestrator(client, plot_timeout=plot_timeout)
        self.error: str | None = None
        self.files.on_clear(self.plots.discard)

    # -- files ----------------------------------------------------------------

    async def upload(
        self,
        *paths: Path | str,
        progress_callback: Callable[[int, int, str], None] | None = None,
    ) -> UploadReport:
        """Upload files one by one; a rejected file never blocks the others.

        The first accepted file becomes selected if nothing is selected.
        ``progress_callback(current, total, name)`` is called before each file.
        """
        self.error = None
        report = UploadReport()
        for i, path in enumerate(paths):
            file = UploadedFile.from_path(path)
            if progress_callback is not None:
                progress_callback(i, len(paths), file.name)
            try:
                added = await self._upload_one(file)
            except UploadError as e:
                logger.warning("%s", e)
                report.errors.append(e)
                continue
            self.files.add(added)
            report.added.append(added)
            logger.info("Uploaded %s", added.name)

        if report.errors:
            self.error = "; ".join(str(e) for e in report.errors)
        return report

    async def _upload_one(self, file: UploadedFile) -> UploadedFile:
        if file.path.suffix.lower() not in ACCEPTED_EXTENSIONS:
            reason = str(UnsupportedFileTypeError(file.name, ACCEPTED_EXTENSIONS))
            raise UploadError(file.name, reason)
        try:
            ack = await self.client.upload(file)
        except RemoteServiceError as e:
            raise UploadError(file.name, str(e)) from e
        except OSError as e:
            raise UploadError(file.name, f"cannot read file: {e}") from e
        return UploadedFile(name=file.name, path=file.path, ack=ack)

    def select(self, name: str) -> None:
        """Select a file; plots shown for the previous file are cleared.

        Raises:
            FileNotRegisteredError: If the name was never uploaded.
        """
        previous = self.files.selected_name
        self.files.select(name)
        if name != previous:
            self.plots.reset_slots()

    def clear(self) -> None:
        """Forget every file, the result and all plots."""
        self.files.clear()
        self.error = None

    # -- parameters -----------------------------------------------------------

    def set_params(self, **fields: Any) -> ProcessingParams:
        """Update processing parameters. Plots are not refetched until process()."""
        self.params.update(**fields)
        return self.params.params

    def set_mode(self, viz: Visualization, mode: Enum | str) -> PlotSlot:
        """Change one plot's display mode and refetch only that plot.

        The refetch uses the current processing parameters. Nothing is
        fetched until the selected file has been processed.
        """
        mode = self.params.set_mode(viz, mode)
        file = self.files.selected
        result = self.plots.result
        if file is not None and result is not None and result.filename == file.name:
            self.plots.refresh(viz, file, self.params.params, mode)
        return self.plots.slots[viz]

    # -- processing -----------------------------------------------------------

    async def process(self, wait: bool = True) -> SignalResult | None:
        """Run the full computation, then load all four plots.

        Returns the new result, or None when processing failed (the
        reason is in ``error`` and previous results are kept) or when
        clear() or select() superseded the call while it was running.

        Raises:
            NoFileSelectedError: If no file is selected.
        """
        file = self.files.selected
        if file is None:
            raise NoFileSelectedError()

        self.error = None
        params = self.params.params
        modes = self.params.modes()
        try:
            result = await self.plots.process(file, params)
        except ProcessError as e:
            logger.warning("%s", e)
            self.error = str(e)
            return None
        if result is None or self.files.selected_name != file.name:
            return None

        self.plots.refresh_all(file, params, modes)
        if wait:
            await self.plots.wait()
        return result

    @property
    def result(self) -> SignalResult | None:
        return self.plots.result

    @property
    def slots(self) -> dict[Visualization, PlotSlot]:
        return self.plots.slots

    def stale_plots(self) -> list[Visualization]:
        """Plots whose data was fetched with other processing parameters."""
        current = self.params.params
        return [viz for viz, slot in self.plots.slots.items() if slot.is_stale(current)]

    # -- export ---------------------------------------------------------------

    def export_statistics(self, directory: Path | str, overwrite: bool = False) -> Path:
        """Write the current statistics to CSV and return the path.

        Raises:
            NoResultError: If nothing has been processed yet.
        """
        if self.result is None:
            raise NoResultError()
        return ResultExporter().export(
            self.result.statistics, self.result.filename, directory, overwrite=overwrite,
        )

    def snapshot(self) -> SessionSnapshot:
        """Serializable view of the session state."""
        return SessionSnapshot.from_session(self)

    async def aclose(self) -> None:
        """Cancel outstanding plot queries and close the client."""
        self.plots.reset_slots()
        await self.client.aclose()
