"""dspflow core — models, parameter store, file registry, exceptions."""

from dspflow.core.exceptions import (
    DspFlowError,
    FileNotRegisteredError,
    NoFileSelectedError,
    NoResultError,
    PlotError,
    ProcessError,
    RemoteServiceError,
    ResponseFormatError,
    UnsupportedFileTypeError,
    UploadError,
)
from dspflow.core.models import (
    ACCEPTED_EXTENSIONS,
    STATISTIC_NAMES,
    WAVELET_TYPES,
    FFTMode,
    ProcessingParams,
    SignalResult,
    SourceSignalMode,
    SpectrumMode,
    StatisticsSnapshot,
    UploadAck,
    UploadedFile,
    Visualization,
    WaveletMode,
)
from dspflow.core.params import ParameterStore
from dspflow.core.registry import FileRegistry

__all__ = [
    # Models
    "ACCEPTED_EXTENSIONS",
    "STATISTIC_NAMES",
    "WAVELET_TYPES",
    "FFTMode",
    "ProcessingParams",
    "SignalResult",
    "SourceSignalMode",
    "SpectrumMode",
    "StatisticsSnapshot",
    "UploadAck",
    "UploadedFile",
    "Visualization",
    "WaveletMode",
    # State
    "ParameterStore",
    "FileRegistry",
    # Errors
    "DspFlowError",
    "FileNotRegisteredError",
    "NoFileSelectedError",
    "NoResultError",
    "PlotError",
    "ProcessError",
    "RemoteServiceError",
    "ResponseFormatError",
    "UnsupportedFileTypeError",
    "UploadError",
]
