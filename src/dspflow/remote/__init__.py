"""dspflow remote — clients for the signal-processing service."""

from dspflow.remote.client import (
    DEFAULT_BASE_URL,
    DEFAULT_TIMEOUT,
    HttpComputeClient,
    RemoteComputeClient,
)

__all__ = [
    "DEFAULT_BASE_URL",
    "DEFAULT_TIMEOUT",
    "HttpComputeClient",
    "RemoteComputeClient",
]
