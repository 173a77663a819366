"""Exception classes for dspflow."""

from __future__ import annotations


class DspFlowError(Exception):
    """Base exception for all dspflow errors."""


class FileNotRegisteredError(DspFlowError):
    """Raised when selecting or looking up a file that was never uploaded."""

    def __init__(self, name: str | None = None) -> None:
        msg = f"File not registered: {name}" if name else "File not registered"
        super().__init__(msg)
        self.name = name


class NoFileSelectedError(DspFlowError):
    """Raised when an action needs a selected file and none is selected."""

    def __init__(self) -> None:
        super().__init__("No file selected")


class UnsupportedFileTypeError(DspFlowError):
    """Raised when a file's extension is not accepted for upload."""

    def __init__(self, name: str, allowed: tuple[str, ...] = ()) -> None:
        msg = f"Unsupported file type: {name}"
        if allowed:
            msg += f" (accepted: {', '.join(allowed)})"
        super().__init__(msg)
        self.name = name
        self.allowed = allowed


class RemoteServiceError(DspFlowError):
    """Raised by a compute client when the remote service call fails.

    ``status_code`` is None for transport-level failures (connection
    refused, DNS, reset) where no HTTP response was received.
    """

    def __init__(
        self,
        operation: str,
        message: str,
        status_code: int | None = None,
    ) -> None:
        prefix = f"{operation} failed"
        if status_code is not None:
            prefix += f" (HTTP {status_code})"
        super().__init__(f"{prefix}: {message}")
        self.operation = operation
        self.message = message
        self.status_code = status_code


class ResponseFormatError(RemoteServiceError):
    """Raised when the service answers with a payload we cannot interpret."""

    def __init__(self, operation: str, message: str) -> None:
        super().__init__(operation, message)


class UploadError(DspFlowError):
    """A file was rejected during upload. Only that file's addition is aborted."""

    def __init__(self, filename: str, reason: str) -> None:
        super().__init__(f"Upload of {filename} failed: {reason}")
        self.filename = filename
        self.reason = reason


class ProcessError(DspFlowError):
    """The full process call failed; no plot queries are issued."""

    def __init__(self, filename: str, reason: str) -> None:
        super().__init__(f"Processing {filename} failed: {reason}")
        self.filename = filename
        self.reason = reason


class PlotError(DspFlowError):
    """A single plot query failed. Recorded on its slot, never propagated.

    ``kind`` is one of "service", "timeout" or "internal".
    """

    def __init__(self, visualization: str, reason: str, kind: str = "service") -> None:
        super().__init__(f"{visualization} plot failed ({kind}): {reason}")
        self.visualization = visualization
        self.reason = reason
        self.kind = kind


class NoResultError(DspFlowError):
    """Raised when an action needs a processed result and there is none."""

    def __init__(self) -> None:
        super().__init__("No processed result; run process first")
