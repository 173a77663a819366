"""Clients for the remote signal-processing service."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from enum import Enum
from typing import Any

import httpx

from dspflow.core.exceptions import RemoteServiceError, ResponseFormatError
from dspflow.core.models import (
    ProcessingParams,
    SignalResult,
    UploadAck,
    UploadedFile,
    Visualization,
)

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "http://localhost:8000"
DEFAULT_TIMEOUT = 60.0


class RemoteComputeClient(ABC):
    """Interface to the processing service.

    Every call is a suspension point. Implementations raise
    RemoteServiceError (or a subclass) on failure; callers convert that
    into state rather than letting it escape.
    """

    @abstractmethod
    async def upload(self, file: UploadedFile) -> UploadAck:
        """Register a file with the service."""

    @abstractmethod
    async def process(self, file: UploadedFile, params: ProcessingParams) -> SignalResult:
        """Run the full computation: statistics plus base arrays."""

    @abstractmethod
    async def plot(
        self,
        viz: Visualization,
        file: UploadedFile,
        params: ProcessingParams,
        mode: Enum,
    ) -> Any:
        """Fetch one plot payload. The payload is opaque to the client."""

    async def plot_signal(self, file: UploadedFile, params: ProcessingParams, mode: Enum) -> Any:
        return await self.plot(Visualization.SIGNAL, file, params, mode)

    async def plot_wavelet(self, file: UploadedFile, params: ProcessingParams, mode: Enum) -> Any:
        return await self.plot(Visualization.WAVELET, file, params, mode)

    async def plot_fft(self, file: UploadedFile, params: ProcessingParams, mode: Enum) -> Any:
        return await self.plot(Visualization.FFT, file, params, mode)

    async def plot_spectrum(self, file: UploadedFile, params: ProcessingParams, mode: Enum) -> Any:
        return await self.plot(Visualization.SPECTRUM, file, params, mode)

    async def aclose(self) -> None:
        """Release network resources. Default does nothing."""


def _error_detail(response: httpx.Response) -> str:
    """Best-effort human message from an error response."""
    try:
        body = response.json()
    except ValueError:
        return response.text.strip() or response.reason_phrase
    if isinstance(body, dict) and "detail" in body:
        return str(body["detail"])
    return str(body)


class HttpComputeClient(RemoteComputeClient):
    """RemoteComputeClient over HTTP using httpx.

    Files travel as multipart ``file``; parameters and the plot's display
    option travel as form fields. Responses are JSON.
    """

    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float | None = DEFAULT_TIMEOUT,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.base_url = base_url
        self._client = httpx.AsyncClient(
            base_url=base_url, timeout=timeout, transport=transport,
        )

    async def __aenter__(self) -> HttpComputeClient:
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def _post(
        self,
        operation: str,
        path: str,
        file: UploadedFile,
        data: dict[str, str] | None = None,
    ) -> Any:
        try:
            content = file.read_bytes()
        except OSError as e:
            raise RemoteServiceError(operation, f"cannot read file: {e}") from e
        logger.debug("POST %s%s (%s, %d bytes)", self.base_url, path, file.name, len(content))
        try:
            response = await self._client.post(
                path, files={"file": (file.name, content)}, data=data or {},
            )
        except httpx.TimeoutException as e:
            raise RemoteServiceError(operation, f"request timed out ({type(e).__name__})") from e
        except httpx.HTTPError as e:
            raise RemoteServiceError(operation, str(e) or type(e).__name__) from e

        if response.is_error:
            raise RemoteServiceError(operation, _error_detail(response), response.status_code)

        try:
            return response.json()
        except ValueError as e:
            raise ResponseFormatError(operation, f"response is not JSON: {e}") from e

    async def upload(self, file: UploadedFile) -> UploadAck:
        data = await self._post("upload", "/upload", file)
        return UploadAck.from_response(data)

    async def process(self, file: UploadedFile, params: ProcessingParams) -> SignalResult:
        data = await self._post("process", "/process", file, params.to_form())
        return SignalResult.from_response(file.name, params, data)

    async def plot(
        self,
        viz: Visualization,
        file: UploadedFile,
        params: ProcessingParams,
        mode: Enum,
    ) -> Any:
        mode = viz.coerce_mode(mode)
        form = params.to_form()
        form[viz.request_field] = mode.value
        return await self._post(f"{viz.value} plot", viz.endpoint, file, form)
