"""Tests for dspflow.core.models."""

import numpy as np
import pytest

from dspflow.core.exceptions import ResponseFormatError
from dspflow.core.models import (
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
from tests.conftest import make_process_response, make_statistics


class TestConstants:
    def test_thirteen_wavelets(self):
        assert len(WAVELET_TYPES) == 13
        assert "bior2.4" in WAVELET_TYPES

    def test_statistic_names(self):
        assert len(STATISTIC_NAMES) == 24
        assert len(set(STATISTIC_NAMES)) == 24
        assert "Peak Signal-to-Noise Ratio" in STATISTIC_NAMES


class TestProcessingParams:
    def test_defaults(self):
        params = ProcessingParams()
        assert params.time_column == 0
        assert params.signal_column == 1
        assert params.wavelet_type == "bior2.4"
        assert params.n_levels == 7

    @pytest.mark.parametrize("kwargs", [
        {"time_column": -1},
        {"signal_column": 10},
        {"n_levels": 0},
        {"n_levels": 21},
        {"wavelet_type": "db4"},
    ])
    def test_invalid_values_rejected(self, kwargs):
        with pytest.raises(ValueError):
            ProcessingParams(**kwargs)

    def test_to_form_uses_strings(self):
        form = ProcessingParams(time_column=2, signal_column=3, n_levels=5).to_form()
        assert form == {
            "time_column": "2",
            "signal_column": "3",
            "wavelet_type": "bior2.4",
            "n_levels": "5",
        }

    def test_frozen(self):
        params = ProcessingParams()
        with pytest.raises(AttributeError):
            params.n_levels = 3  # type: ignore[misc]


class TestVisualization:
    def test_mode_types(self):
        assert Visualization.SIGNAL.mode_type is SourceSignalMode
        assert Visualization.WAVELET.mode_type is WaveletMode
        assert Visualization.FFT.mode_type is FFTMode
        assert Visualization.SPECTRUM.mode_type is SpectrumMode

    def test_request_fields(self):
        assert [v.request_field for v in Visualization] == [
            "signal_type", "wavelet_option", "fft_type", "spectrum_type",
        ]

    def test_endpoints(self):
        assert Visualization.FFT.endpoint == "/plot/fft"

    def test_default_modes(self):
        assert Visualization.SIGNAL.default_mode is SourceSignalMode.RAW
        assert Visualization.WAVELET.default_mode is WaveletMode.APPROX

    def test_coerce_from_string(self):
        assert Visualization.WAVELET.coerce_mode("pearson_detail") is WaveletMode.PEARSON_DETAIL

    def test_coerce_from_other_enum_with_same_value(self):
        assert Visualization.FFT.coerce_mode(SourceSignalMode.DENOISED) is FFTMode.DENOISED

    def test_coerce_invalid(self):
        with pytest.raises(ValueError, match="spectrum mode"):
            Visualization.SPECTRUM.coerce_mode("approx")


class TestUploadAck:
    def test_from_response(self):
        ack = UploadAck.from_response(
            {"filename": "a.lvm", "columns": 3, "rows": 100, "status": "success"}
        )
        assert ack == UploadAck("a.lvm", 3, 100, "success")

    def test_missing_field(self):
        with pytest.raises(ResponseFormatError):
            UploadAck.from_response({"filename": "a.lvm"})


class TestUploadedFile:
    def test_from_path_uses_basename(self, signal_file):
        f = UploadedFile.from_path(signal_file)
        assert f.name == "signal1.lvm"
        assert f.read_bytes().startswith(b"0.0")
        assert f.columns is None

    def test_ack_fields(self, uploaded_file):
        assert uploaded_file.columns == 2
        assert uploaded_file.rows == 4


class TestStatisticsSnapshot:
    def test_mapping_behaviour(self):
        stats = StatisticsSnapshot(make_statistics())
        assert len(stats) == 24
        assert list(stats) == list(STATISTIC_NAMES)
        assert stats["Mean"] == 0.5

    def test_missing_metric(self):
        values = make_statistics()
        del values["Kurtosis"]
        with pytest.raises(ResponseFormatError, match="Kurtosis"):
            StatisticsSnapshot(values)

    def test_non_numeric_metric(self):
        values = make_statistics()
        values["RMS"] = "n/a"
        with pytest.raises(ResponseFormatError, match="RMS"):
            StatisticsSnapshot(values)

    def test_source_mutation_does_not_leak(self):
        values = make_statistics()
        stats = StatisticsSnapshot(values)
        values["Mean"] = 999.0
        assert stats["Mean"] == 0.5


class TestSignalResult:
    def test_from_response(self):
        params = ProcessingParams(n_levels=3)
        result = SignalResult.from_response("signal1.lvm", params, make_process_response())
        assert result.filename == "signal1.lvm"
        assert result.params == params
        assert isinstance(result.raw_signal, np.ndarray)
        assert result.time.shape == (4,)
        assert result.n_levels == 3
        assert len(result.statistics) == 24

    def test_missing_field(self):
        data = make_process_response()
        del data["denoised_signal"]
        with pytest.raises(ResponseFormatError, match="denoised_signal"):
            SignalResult.from_response("x.lvm", ProcessingParams(), data)

    def test_not_an_object(self):
        with pytest.raises(ResponseFormatError):
            SignalResult.from_response("x.lvm", ProcessingParams(), [1, 2, 3])

    def test_unknown_fields_kept_as_extras(self):
        data = make_process_response()
        data["sampling_rate"] = 1000
        result = SignalResult.from_response("x.lvm", ProcessingParams(), data)
        assert result.extras == {"sampling_rate": 1000}
