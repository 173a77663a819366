"""PlotOrchestrator: runs the process call and the four plot queries."""

from __future__ import annotations

import asyncio
import logging
import time
from enum import Enum
from typing import Mapping

from dspflow.core.exceptions import PlotError, ProcessError, RemoteServiceError
from dspflow.core.models import (
    ProcessingParams,
    SignalResult,
    UploadedFile,
    Visualization,
)
from dspflow.remote.client import RemoteComputeClient
from dspflow.workflow.slots import PlotSlot, SlotStatus

logger = logging.getLogger(__name__)


class PlotOrchestrator:
    """Coordinates the four independently loading, independently failing plots.

    A full refresh issues all four queries concurrently; a single refresh
    re-issues one. Each query is an asyncio task writing only to its own
    slot. Issuing a query cancels the slot's previous task, and the slot's
    generation check drops any answer that still arrives for it.

    Must be used from inside a running event loop.
    """

    def __init__(
        self,
        client: RemoteComputeClient,
        plot_timeout: float | None = None,
    ) -> None:
        self.client = client
        self.plot_timeout = plot_timeout
        self.result: SignalResult | None = None
        self.slots: dict[Visualization, PlotSlot] = {
            viz: PlotSlot(viz) for viz in Visualization
        }
        self._tasks: dict[Visualization, asyncio.Task[None]] = {}
        self._process_generation = 0

    async def process(
        self, file: UploadedFile, params: ProcessingParams,
    ) -> SignalResult | None:
        """Run the full computation and keep its result.

        Returns None, keeping nothing, when reset_slots() or discard() ran
        while the call was in flight.

        Raises:
            ProcessError: If the service call fails or the file cannot be
                read. The previous result and all slots are left untouched.
        """
        self._process_generation += 1
        generation = self._process_generation
        logger.info("Processing %s with %s", file.name, params)
        try:
            result = await self.client.process(file, params)
        except (RemoteServiceError, OSError) as e:
            if generation != self._process_generation:
                logger.debug("Discarded superseded failure for %s", file.name)
                return None
            if isinstance(e, OSError):
                raise ProcessError(file.name, f"cannot read file: {e}") from e
            raise ProcessError(file.name, str(e)) from e
        if generation != self._process_generation:
            logger.debug("Discarded superseded result for %s", file.name)
            return None
        self.result = result
        return result

    def refresh_all(
        self,
        file: UploadedFile,
        params: ProcessingParams,
        modes: Mapping[Visualization, Enum | str],
    ) -> dict[Visualization, asyncio.Task[None]]:
        """Reset every slot and issue all four plot queries concurrently."""
        tasks: dict[Visualization, asyncio.Task[None]] = {}
        for viz in Visualization:
            self.slots[viz].reset()
            tasks[viz] = self.refresh(viz, file, params, modes[viz])
        return tasks

    def refresh(
        self,
        viz: Visualization,
        file: UploadedFile,
        params: ProcessingParams,
        mode: Enum | str,
    ) -> asyncio.Task[None]:
        """Issue one plot query. Other slots are not touched."""
        mode = viz.coerce_mode(mode)
        slot = self.slots[viz]

        previous = self._tasks.pop(viz, None)
        if previous is not None and not previous.done():
            previous.cancel()
            logger.debug("Cancelled superseded %s request (generation %d)",
                         viz.value, slot.generation)

        generation = slot.begin(params, mode)
        task = asyncio.create_task(
            self._fetch(viz, generation, file, params, mode),
            name=f"plot-{viz.value}-{generation}",
        )
        self._tasks[viz] = task
        return task

    async def _fetch(
        self,
        viz: Visualization,
        generation: int,
        file: UploadedFile,
        params: ProcessingParams,
        mode: Enum,
    ) -> None:
        slot = self.slots[viz]
        start = time.monotonic()
        try:
            call = self.client.plot(viz, file, params, mode)
            if self.plot_timeout is not None:
                payload = await asyncio.wait_for(call, self.plot_timeout)
            else:
                payload = await call
        except asyncio.TimeoutError:
            error = PlotError(
                viz.value, f"no response within {self.plot_timeout}s", kind="timeout",
            )
        except RemoteServiceError as e:
            error = PlotError(viz.value, str(e), kind="service")
        except Exception as e:
            logger.error("Unexpected error fetching %s plot", viz.value, exc_info=True)
            error = PlotError(viz.value, f"{type(e).__name__}: {e}", kind="internal")
        else:
            elapsed = time.monotonic() - start
            if slot.succeed(generation, payload, elapsed):
                logger.debug("%s plot ready in %.2fs (mode=%s)", viz.value, elapsed, mode.value)
            else:
                logger.debug("Discarded stale %s plot (generation %d, current %d)",
                             viz.value, generation, slot.generation)
            return

        if slot.fail(generation, error, time.monotonic() - start):
            logger.warning("%s", error)
        else:
            logger.debug("Discarded stale %s failure (generation %d, current %d)",
                         viz.value, generation, slot.generation)

    async def wait(self) -> None:
        """Wait until no plot query is in flight, including re-issued ones."""
        while True:
            pending = [t for t in self._tasks.values() if not t.done()]
            if not pending:
                return
            await asyncio.gather(*pending, return_exceptions=True)

    def reset_slots(self) -> None:
        """Cancel in-flight queries and return every slot to Idle.

        A process call still in flight is superseded as well.
        """
        self._process_generation += 1
        for task in self._tasks.values():
            if not task.done():
                task.cancel()
        self._tasks.clear()
        for slot in self.slots.values():
            slot.reset()

    def discard(self) -> None:
        """Drop the current result and all plot state."""
        self.reset_slots()
        self.result = None
        logger.debug("Discarded results and plot state")

    @property
    def busy(self) -> bool:
        return any(not t.done() for t in self._tasks.values())

    def statuses(self) -> dict[Visualization, SlotStatus]:
        """Current status of all four slots."""
        return {viz: slot.status for viz, slot in self.slots.items()}
