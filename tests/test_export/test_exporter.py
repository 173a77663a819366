"""Tests for ResultExporter."""

from __future__ import annotations

from pathlib import Path

import pandas as pd
import pytest

from dspflow.core.models import STATISTIC_NAMES, StatisticsSnapshot
from dspflow.export.exporter import ResultExporter, statistics_filename
from tests.conftest import make_statistics


@pytest.fixture
def statistics() -> StatisticsSnapshot:
    return StatisticsSnapshot(make_statistics())


class TestFilename:
    @pytest.mark.parametrize("source,expected", [
        ("signal1.lvm", "signal1_statistics.csv"),
        ("run.2.txt", "run.2_statistics.csv"),
        ("noext", "noext_statistics.csv"),
    ])
    def test_statistics_filename(self, source, expected):
        assert statistics_filename(source) == expected


class TestToFrame:
    def test_canonical_order(self, statistics):
        df = ResultExporter().to_frame(statistics)
        assert list(df.columns) == ["Metric", "Value"]
        assert list(df["Metric"]) == list(STATISTIC_NAMES)

    def test_extra_metrics_follow(self):
        values = dict(make_statistics())
        values["custom_metric"] = 9.0
        df = ResultExporter().to_frame(values)
        assert df["Metric"].iloc[-1] == "custom_metric"
        assert len(df) == len(STATISTIC_NAMES) + 1


class TestExport:
    def test_writes_csv(self, statistics, tmp_path: Path):
        out = ResultExporter().export(statistics, "signal1.lvm", tmp_path)
        assert out == tmp_path / "signal1_statistics.csv"
        df = pd.read_csv(out)
        assert len(df) == 24
        row = df[df["Metric"] == "Mean"]
        assert row["Value"].iloc[0] == pytest.approx(statistics["Mean"])

    def test_missing_directory(self, statistics, tmp_path: Path):
        with pytest.raises(FileNotFoundError):
            ResultExporter().export(statistics, "signal1.lvm", tmp_path / "missing")

    def test_refuses_overwrite(self, statistics, tmp_path: Path):
        exporter = ResultExporter()
        exporter.export(statistics, "signal1.lvm", tmp_path)
        with pytest.raises(FileExistsError):
            exporter.export(statistics, "signal1.lvm", tmp_path)

    def test_overwrite(self, statistics, tmp_path: Path):
        exporter = ResultExporter()
        exporter.export(statistics, "signal1.lvm", tmp_path)
        out = exporter.export(statistics, "signal1.lvm", tmp_path, overwrite=True)
        assert out.exists()
