"""ParameterStore: current processing parameters and per-plot display modes."""

from __future__ import annotations

from enum import Enum
from typing import Any

from dspflow.core.models import (
    MAX_COLUMN,
    MAX_LEVELS,
    MIN_COLUMN,
    MIN_LEVELS,
    WAVELET_TYPES,
    ProcessingParams,
    Visualization,
)


def clamp(value: int, low: int, high: int) -> int:
    """Clamp an integer into [low, high]."""
    return max(low, min(high, int(value)))


class ParameterStore:
    """Independent mutable cells for processing parameters and display modes.

    Setters are pure state transitions. Re-fetching after a change is the
    caller's job (see WorkflowSession), never the store's.
    """

    def __init__(self, defaults: ProcessingParams | None = None) -> None:
        defaults = defaults or ProcessingParams()
        self._time_column = defaults.time_column
        self._signal_column = defaults.signal_column
        self._wavelet_type = defaults.wavelet_type
        self._n_levels = defaults.n_levels
        self._modes: dict[Visualization, Enum] = {
            viz: viz.default_mode for viz in Visualization
        }

    # -- processing parameters ------------------------------------------------

    @property
    def time_column(self) -> int:
        return self._time_column

    @time_column.setter
    def time_column(self, value: int) -> None:
        self._time_column = clamp(value, MIN_COLUMN, MAX_COLUMN)

    @property
    def signal_column(self) -> int:
        return self._signal_column

    @signal_column.setter
    def signal_column(self, value: int) -> None:
        self._signal_column = clamp(value, MIN_COLUMN, MAX_COLUMN)

    @property
    def wavelet_type(self) -> str:
        return self._wavelet_type

    @wavelet_type.setter
    def wavelet_type(self, value: str) -> None:
        if value not in WAVELET_TYPES:
            raise ValueError(
                f"Unsupported wavelet type: {value!r}. "
                f"Must be one of {list(WAVELET_TYPES)}"
            )
        self._wavelet_type = value

    @property
    def n_levels(self) -> int:
        return self._n_levels

    @n_levels.setter
    def n_levels(self, value: int) -> None:
        self._n_levels = clamp(value, MIN_LEVELS, MAX_LEVELS)

    @property
    def params(self) -> ProcessingParams:
        """Snapshot of the current processing parameters."""
        return ProcessingParams(
            time_column=self._time_column,
            signal_column=self._signal_column,
            wavelet_type=self._wavelet_type,
            n_levels=self._n_levels,
        )

    def update(self, **fields: Any) -> None:
        """Set several processing parameters at once.

        Raises:
            KeyError: If a field name is not a processing parameter.
        """
        for name, value in fields.items():
            if name not in ("time_column", "signal_column", "wavelet_type", "n_levels"):
                raise KeyError(f"Unknown processing parameter: {name!r}")
            setattr(self, name, value)

    # -- display modes --------------------------------------------------------

    def mode(self, viz: Visualization) -> Enum:
        return self._modes[viz]

    def set_mode(self, viz: Visualization, value: Enum | str) -> Enum:
        """Set one plot's display mode and return the coerced enum member."""
        mode = viz.coerce_mode(value)
        self._modes[viz] = mode
        return mode

    def modes(self) -> dict[Visualization, Enum]:
        """Snapshot of all four display modes."""
        return dict(self._modes)

    @property
    def signal_mode(self) -> Enum:
        return self._modes[Visualization.SIGNAL]

    @property
    def wavelet_mode(self) -> Enum:
        return self._modes[Visualization.WAVELET]

    @property
    def fft_mode(self) -> Enum:
        return self._modes[Visualization.FFT]

    @property
    def spectrum_mode(self) -> Enum:
        return self._modes[Visualization.SPECTRUM]

    # -- serialization --------------------------------------------------------

    def to_dict(self) -> dict[str, Any]:
        return {
            "params": self.params.to_dict(),
            "modes": {viz.value: mode.value for viz, mode in self._modes.items()},
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ParameterStore:
        """Rebuild a store from ``to_dict()`` output. Missing keys keep defaults."""
        store = cls()
        store.update(**data.get("params", {}))
        for key, value in data.get("modes", {}).items():
            store.set_mode(Visualization(key), value)
        return store
