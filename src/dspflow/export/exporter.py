"""ResultExporter — statistics to CSV."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from pathlib import Path

import pandas as pd

from dspflow.core.models import STATISTIC_NAMES

logger = logging.getLogger(__name__)


def statistics_filename(source_filename: str) -> str:
    """Name of the CSV written for a source file, e.g. ``run1_statistics.csv``."""
    return f"{Path(source_filename).stem}_statistics.csv"


class ResultExporter:
    """Formats a statistics mapping as a two-column Metric/Value table."""

    def to_frame(self, statistics: Mapping[str, float]) -> pd.DataFrame:
        """Known metrics first in their canonical order, then any extras."""
        names = [n for n in STATISTIC_NAMES if n in statistics]
        names += [n for n in statistics if n not in STATISTIC_NAMES]
        return pd.DataFrame(
            {"Metric": names, "Value": [float(statistics[n]) for n in names]}
        )

    def export(
        self,
        statistics: Mapping[str, float],
        source_filename: str,
        directory: Path | str,
        overwrite: bool = False,
    ) -> Path:
        """Write the statistics CSV into ``directory`` and return its path.

        Raises:
            FileNotFoundError: If the directory does not exist.
            FileExistsError: If the file exists and overwrite is False.
        """
        directory = Path(directory).expanduser()
        if not directory.is_dir():
            raise FileNotFoundError(f"Output directory does not exist: {directory}")

        out_path = directory / statistics_filename(source_filename)
        if out_path.exists() and not overwrite:
            raise FileExistsError(f"Output file already exists: {out_path}")

        self.to_frame(statistics).to_csv(out_path, index=False)
        logger.info("Exported %d statistics to %s", len(statistics), out_path)
        return out_path
