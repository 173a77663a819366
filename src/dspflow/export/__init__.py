"""dspflow export — statistics download."""

from dspflow.export.exporter import ResultExporter, statistics_filename

__all__ = ["ResultExporter", "statistics_filename"]
