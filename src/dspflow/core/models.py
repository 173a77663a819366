"""Data models for the dspflow core module."""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any

import numpy as np

from dspflow.core.exceptions import ResponseFormatError

ACCEPTED_EXTENSIONS = (".lvm", ".txt")

WAVELET_TYPES = (
    "bior1.3", "bior1.5", "bior2.2", "bior2.4",
    "bior2.6", "bior3.1", "bior3.3", "bior3.5",
    "bior3.7", "bior3.9", "bior4.4", "bior5.5", "bior6.8",
)

MIN_COLUMN, MAX_COLUMN = 0, 9
MIN_LEVELS, MAX_LEVELS = 1, 20

# Order matches the service's statistics payload and the exported CSV rows.
STATISTIC_NAMES = (
    "Mean",
    "Median",
    "Mode",
    "Std Dev",
    "Variance",
    "Mean Square",
    "RMS",
    "Max",
    "Peak-to-Peak",
    "Peak-to-RMS",
    "Skewness",
    "Kurtosis",
    "Energy",
    "Power",
    "Crest Factor",
    "Impulse Factor",
    "Shape Factor",
    "Shannon Entropy",
    "Signal-to-Noise Ratio",
    "Root Mean Square Error",
    "Maximum Error",
    "Mean Absolute Error",
    "Peak Signal-to-Noise Ratio",
    "Coefficient of Variation",
)


class SourceSignalMode(Enum):
    RAW = "raw"
    DENOISED = "denoised"


class WaveletMode(Enum):
    APPROX = "approx"
    DETAIL = "detail"
    PEARSON_APPROX = "pearson_approx"
    PEARSON_DETAIL = "pearson_detail"


class FFTMode(Enum):
    RAW = "raw"
    DENOISED = "denoised"
    APPROX = "approx"
    DETAIL = "detail"


class SpectrumMode(Enum):
    RAW = "raw"
    DENOISED = "denoised"


class Visualization(Enum):
    """The four independently loaded plots."""

    SIGNAL = "signal"
    WAVELET = "wavelet"
    FFT = "fft"
    SPECTRUM = "spectrum"

    @property
    def mode_type(self) -> type[Enum]:
        """Enum class of the display option this plot takes."""
        return _MODE_TYPES[self]

    @property
    def request_field(self) -> str:
        """Form field carrying the display option on the wire."""
        return _REQUEST_FIELDS[self]

    @property
    def endpoint(self) -> str:
        return f"/plot/{self.value}"

    @property
    def default_mode(self) -> Enum:
        return next(iter(self.mode_type))

    def coerce_mode(self, value: Enum | str) -> Enum:
        """Convert a mode value (enum member or its string) to this plot's enum.

        Raises:
            ValueError: If the value is not a valid option for this plot.
        """
        mode_type = self.mode_type
        if isinstance(value, mode_type):
            return value
        if isinstance(value, Enum):
            value = value.value
        try:
            return mode_type(value)
        except ValueError:
            valid = [m.value for m in mode_type]
            raise ValueError(
                f"Invalid {self.value} mode: {value!r}. Must be one of {valid}"
            ) from None


_MODE_TYPES: dict[Visualization, type[Enum]] = {
    Visualization.SIGNAL: SourceSignalMode,
    Visualization.WAVELET: WaveletMode,
    Visualization.FFT: FFTMode,
    Visualization.SPECTRUM: SpectrumMode,
}

_REQUEST_FIELDS: dict[Visualization, str] = {
    Visualization.SIGNAL: "signal_type",
    Visualization.WAVELET: "wavelet_option",
    Visualization.FFT: "fft_type",
    Visualization.SPECTRUM: "spectrum_type",
}


@dataclass(frozen=True)
class ProcessingParams:
    """Processing parameters shared by the process call and all four plots."""

    time_column: int = 0
    signal_column: int = 1
    wavelet_type: str = "bior2.4"
    n_levels: int = 7

    def __post_init__(self) -> None:
        """Validate ranges and wavelet family at construction time."""
        for name in ("time_column", "signal_column"):
            value = getattr(self, name)
            if not MIN_COLUMN <= value <= MAX_COLUMN:
                raise ValueError(
                    f"{name} must be in [{MIN_COLUMN}, {MAX_COLUMN}], got {value}"
                )
        if not MIN_LEVELS <= self.n_levels <= MAX_LEVELS:
            raise ValueError(
                f"n_levels must be in [{MIN_LEVELS}, {MAX_LEVELS}], got {self.n_levels}"
            )
        if self.wavelet_type not in WAVELET_TYPES:
            raise ValueError(
                f"Unsupported wavelet type: {self.wavelet_type!r}. "
                f"Must be one of {list(WAVELET_TYPES)}"
            )

    def to_form(self) -> dict[str, str]:
        """Form fields for a multipart request."""
        return {
            "time_column": str(self.time_column),
            "signal_column": str(self.signal_column),
            "wavelet_type": self.wavelet_type,
            "n_levels": str(self.n_levels),
        }

    def to_dict(self) -> dict[str, Any]:
        return {
            "time_column": self.time_column,
            "signal_column": self.signal_column,
            "wavelet_type": self.wavelet_type,
            "n_levels": self.n_levels,
        }


@dataclass(frozen=True)
class UploadAck:
    """The service's acknowledgement of an upload."""

    filename: str
    columns: int
    rows: int
    status: str

    @classmethod
    def from_response(cls, data: Any) -> UploadAck:
        try:
            return cls(
                filename=str(data["filename"]),
                columns=int(data["columns"]),
                rows=int(data["rows"]),
                status=str(data["status"]),
            )
        except (KeyError, TypeError, ValueError) as e:
            raise ResponseFormatError("upload", f"malformed upload response: {e}") from e


@dataclass(frozen=True)
class UploadedFile:
    """A file accepted by the service. Never mutated after creation."""

    name: str
    path: Path
    ack: UploadAck | None = None

    @classmethod
    def from_path(cls, path: Path | str) -> UploadedFile:
        path = Path(path)
        return cls(name=path.name, path=path)

    def read_bytes(self) -> bytes:
        return self.path.read_bytes()

    @property
    def columns(self) -> int | None:
        return self.ack.columns if self.ack else None

    @property
    def rows(self) -> int | None:
        return self.ack.rows if self.ack else None


class StatisticsSnapshot(Mapping[str, float]):
    """Immutable mapping of the named signal metrics."""

    def __init__(self, values: Mapping[str, float]) -> None:
        missing = [name for name in STATISTIC_NAMES if name not in values]
        if missing:
            raise ResponseFormatError(
                "process", f"statistics missing metrics: {', '.join(missing)}"
            )
        converted: dict[str, float] = {}
        for name in STATISTIC_NAMES:
            try:
                converted[name] = float(values[name])
            except (TypeError, ValueError):
                raise ResponseFormatError(
                    "process", f"statistic {name!r} is not numeric: {values[name]!r}"
                ) from None
        self._values = converted

    def __getitem__(self, name: str) -> float:
        return self._values[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def __repr__(self) -> str:
        return f"StatisticsSnapshot({self._values!r})"

    def to_dict(self) -> dict[str, float]:
        return dict(self._values)


@dataclass(frozen=True)
class SignalResult:
    """Full-process response: base arrays plus statistics.

    Replaced wholesale on every successful process call.
    """

    filename: str
    params: ProcessingParams
    time: np.ndarray
    raw_signal: np.ndarray
    denoised_signal: np.ndarray
    approximation: np.ndarray
    detail: list[np.ndarray]
    statistics: StatisticsSnapshot
    extras: dict[str, Any] = field(default_factory=dict)

    @property
    def n_levels(self) -> int:
        """Number of detail coefficient arrays (one per decomposition level)."""
        return len(self.detail)

    @classmethod
    def from_response(
        cls, filename: str, params: ProcessingParams, data: Any,
    ) -> SignalResult:
        """Build a SignalResult from the /process JSON body.

        Raises:
            ResponseFormatError: If a required field is missing or malformed.
        """
        if not isinstance(data, Mapping):
            raise ResponseFormatError("process", "response body is not an object")
        try:
            coeffs = data["wavelet_coeffs"]
            known = {"time", "raw_signal", "denoised_signal", "wavelet_coeffs",
                     "statistics", "filename"}
            return cls(
                filename=str(data.get("filename", filename)),
                params=params,
                time=np.asarray(data["time"], dtype=float),
                raw_signal=np.asarray(data["raw_signal"], dtype=float),
                denoised_signal=np.asarray(data["denoised_signal"], dtype=float),
                approximation=np.asarray(coeffs["approximation"], dtype=float),
                detail=[np.asarray(level, dtype=float) for level in coeffs["detail"]],
                statistics=StatisticsSnapshot(data["statistics"]),
                extras={k: v for k, v in data.items() if k not in known},
            )
        except KeyError as e:
            raise ResponseFormatError("process", f"missing field {e}") from e
        except (TypeError, ValueError) as e:
            raise ResponseFormatError("process", f"malformed array: {e}") from e
