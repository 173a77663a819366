"""dspflow — client and workflow controller for a wavelet/FFT processing service."""

__version__ = "0.1.0"
