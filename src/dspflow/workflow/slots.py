"""PlotSlot: per-visualization load state with generation-guarded transitions."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any

from dspflow.core.exceptions import PlotError
from dspflow.core.models import ProcessingParams, Visualization


class SlotStatus(Enum):
    """Status of one visualization's plot."""

    IDLE = "idle"
    LOADING = "loading"
    READY = "ready"
    FAILED = "failed"


@dataclass
class PlotSlot:
    """State cell for one visualization.

    Idle -> Loading -> {Ready, Failed}; Ready/Failed -> Loading on re-issue.
    Every begin() bumps ``generation``; succeed() and fail() only apply
    when called with the current generation, so a late answer to a
    superseded request can never overwrite a newer one.
    """

    viz: Visualization
    status: SlotStatus = SlotStatus.IDLE
    data: Any = None
    error: PlotError | None = None
    generation: int = 0
    params: ProcessingParams | None = None
    mode: Enum | None = None
    elapsed_seconds: float = 0.0

    @property
    def loading(self) -> bool:
        return self.status is SlotStatus.LOADING

    def begin(self, params: ProcessingParams, mode: Enum) -> int:
        """Mark a new request as issued and return its generation.

        The previous payload stays visible until the new one lands.
        """
        self.generation += 1
        self.status = SlotStatus.LOADING
        self.error = None
        self.params = params
        self.mode = mode
        return self.generation

    def succeed(self, generation: int, data: Any, elapsed_seconds: float = 0.0) -> bool:
        """Store a payload. Returns False (and changes nothing) if stale."""
        if generation != self.generation:
            return False
        self.status = SlotStatus.READY
        self.data = data
        self.error = None
        self.elapsed_seconds = elapsed_seconds
        return True

    def fail(self, generation: int, error: PlotError, elapsed_seconds: float = 0.0) -> bool:
        """Record a failure. Returns False (and changes nothing) if stale."""
        if generation != self.generation:
            return False
        self.status = SlotStatus.FAILED
        self.error = error
        self.elapsed_seconds = elapsed_seconds
        return True

    def reset(self) -> None:
        """Return to Idle and invalidate any in-flight request."""
        self.generation += 1
        self.status = SlotStatus.IDLE
        self.data = None
        self.error = None
        self.params = None
        self.mode = None
        self.elapsed_seconds = 0.0

    def is_stale(self, params: ProcessingParams) -> bool:
        """True if the shown data was fetched with different processing params."""
        return self.params is not None and self.params != params
