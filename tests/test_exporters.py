"""Tests for the Parquet and CSV metadata exporters."""

from datetime import datetime, timezone

import numpy as np
import polars as pl
import pytest
from numpy.testing import assert_allclose

from rocket_telemetry.channels import CHANNEL_COUNT, Channel
from rocket_telemetry.config import TelemetryConfig
from rocket_telemetry.errors import ExportIOError, UnsupportedValueError
from rocket_telemetry.exporters import (
    PARQUET_SCHEMA,
    CsvMetadataExporter,
    ParquetExporter,
    metadata_frame,
    read_parquet,
    to_frame,
)
from rocket_telemetry.readings import TelemetryDataset, Text
from rocket_telemetry.simulation import TelemetryGenerator

LAUNCH = datetime(2024, 1, 1, tzinfo=timezone.utc)


def _dataset(**kwargs) -> TelemetryDataset:
    kwargs.setdefault("duration_s", 1)
    kwargs.setdefault("sample_rate_hz", 10)
    config = TelemetryConfig(**kwargs)
    return TelemetryGenerator(config).generate(progress=False, launch_time=LAUNCH)


def _with_text(dataset: TelemetryDataset, index: int) -> TelemetryDataset:
    readings = list(dataset.readings)
    readings[index] = readings[index]._replace(value=Text("NOMINAL"))
    return TelemetryDataset(
        readings=tuple(readings),
        config=dataset.config,
        launch_time=dataset.launch_time,
    )


# =============================================================================
# Parquet Tests
# =============================================================================


class TestParquetExporter:
    """Test columnar export."""

    @pytest.fixture
    def dataset(self) -> TelemetryDataset:
        return _dataset(seed=42)

    def test_writes_named_file(self, tmp_path, dataset) -> None:
        path = ParquetExporter(tmp_path).export(dataset)
        assert path == tmp_path / "SIM-001_10hz_1s.parquet"
        assert path.exists()

    def test_schema(self, tmp_path, dataset) -> None:
        frame = read_parquet(ParquetExporter(tmp_path).export(dataset))
        assert dict(frame.schema) == PARQUET_SCHEMA
        assert frame.height == 10 * CHANNEL_COUNT

    def test_round_trip_values(self, tmp_path, dataset) -> None:
        """Every value, code and elapsed time survives the round trip."""
        frame = read_parquet(ParquetExporter(tmp_path).export(dataset))

        expected = np.array([r.value.value for r in dataset.readings])
        assert_allclose(frame["value"].to_numpy(), expected, rtol=0, atol=0)
        assert frame["sensor_type"].to_list() == [r.channel.code for r in dataset.readings]
        assert frame["time_since_launch_ms"].to_list() == [
            r.time_since_launch_ms for r in dataset.readings
        ]

    def test_timestamps_microsecond_utc(self, tmp_path, dataset) -> None:
        frame = read_parquet(ParquetExporter(tmp_path).export(dataset))
        expected = [r.timestamp.replace(tzinfo=None) for r in dataset.readings]
        assert frame["timestamp"].to_list() == expected

    def test_thrust_rows(self, tmp_path, dataset) -> None:
        frame = read_parquet(ParquetExporter(tmp_path).export(dataset))
        thrust = frame.filter(pl.col("sensor_type") == "Trst")

        assert thrust.height == 10
        assert_allclose(thrust["value"].to_numpy(), dataset.channel_values(Channel.THRUST))

    def test_overwrites_existing_file(self, tmp_path, dataset) -> None:
        path = tmp_path / "SIM-001_10hz_1s.parquet"
        path.write_bytes(b"stale")
        ParquetExporter(tmp_path).export(dataset)
        assert read_parquet(path).height == len(dataset)

    def test_failed_write_keeps_previous_file(self, tmp_path, dataset, monkeypatch) -> None:
        """A write that fails part way leaves the earlier export intact."""
        path = ParquetExporter(tmp_path).export(dataset)
        before = path.read_bytes()

        def failing_write(self, file, **kwargs):
            file.write(b"PAR1")
            raise RuntimeError("encoder failure")

        monkeypatch.setattr(pl.DataFrame, "write_parquet", failing_write)
        with pytest.raises(RuntimeError, match="encoder failure"):
            ParquetExporter(tmp_path).export(dataset)

        assert path.read_bytes() == before
        assert [p.name for p in tmp_path.iterdir()] == [path.name]

    def test_empty_dataset_writes_nothing(self, tmp_path) -> None:
        dataset = _dataset(duration_s=0)
        assert ParquetExporter(tmp_path).export(dataset) is None
        assert list(tmp_path.iterdir()) == []

    def test_text_value_rejected(self, tmp_path, dataset) -> None:
        """A textual value aborts the export and no file is written."""
        bad = _with_text(dataset, 30)

        with pytest.raises(UnsupportedValueError) as excinfo:
            ParquetExporter(tmp_path).export(bad)

        assert excinfo.value.index == 30
        assert excinfo.value.variant == "Text"
        assert list(tmp_path.iterdir()) == []

    def test_to_frame_rejects_text(self, dataset) -> None:
        with pytest.raises(UnsupportedValueError):
            to_frame(_with_text(dataset, 0))

    def test_missing_directory(self, tmp_path, dataset) -> None:
        missing = tmp_path / "does" / "not" / "exist"
        with pytest.raises(ExportIOError) as excinfo:
            ParquetExporter(missing).export(dataset)
        assert excinfo.value.path == missing / "SIM-001_10hz_1s.parquet"

    def test_custom_stem(self, tmp_path, dataset) -> None:
        path = ParquetExporter(tmp_path).export(dataset, stem="run")
        assert path.name == "run.parquet"


# =============================================================================
# Metadata Tests
# =============================================================================


class TestCsvMetadataExporter:
    """Test run-level metadata export."""

    def test_single_summary_row(self, tmp_path) -> None:
        dataset = _dataset()
        path = CsvMetadataExporter(tmp_path).export(dataset)

        assert path == tmp_path / "SIM-001_10hz_1s.metadata.csv"
        lines = path.read_text().splitlines()
        assert lines == [
            "launch_id,launch_time,time_since_launch_ms,vehicle_type,engine_type,sample_rate_hz",
            "SIM-001,2024-01-01T00:00:00+00:00,0,Kerbal,Narwhal,10",
        ]

    def test_custom_labels(self, tmp_path) -> None:
        dataset = _dataset(launch_id="TEST-7", vehicle_type="Falcon", engine_type="Merlin")
        frame = metadata_frame(dataset)

        assert frame.height == 1
        assert frame.row(0, named=True)["launch_id"] == "TEST-7"
        assert frame.row(0, named=True)["vehicle_type"] == "Falcon"
        assert frame.row(0, named=True)["engine_type"] == "Merlin"

    def test_empty_dataset_writes_header(self, tmp_path) -> None:
        path = CsvMetadataExporter(tmp_path).export(_dataset(duration_s=0))

        lines = path.read_text().splitlines()
        assert path.name == "SIM-001_10hz_0s.metadata.csv"
        assert lines == [
            "launch_id,launch_time,time_since_launch_ms,vehicle_type,engine_type,sample_rate_hz",
        ]

    def test_accepts_text_values(self, tmp_path) -> None:
        """Metadata never writes reading values, so any variant is fine."""
        path = CsvMetadataExporter(tmp_path).export(_with_text(_dataset(), 0))
        assert len(path.read_text().splitlines()) == 2

    def test_failed_write_keeps_previous_file(self, tmp_path, monkeypatch) -> None:
        dataset = _dataset()
        path = CsvMetadataExporter(tmp_path).export(dataset)
        before = path.read_text()

        def failing_write(self, file=None, **kwargs):
            file.write(b"launch_id")
            raise RuntimeError("encoder failure")

        monkeypatch.setattr(pl.DataFrame, "write_csv", failing_write)
        with pytest.raises(RuntimeError, match="encoder failure"):
            CsvMetadataExporter(tmp_path).export(dataset)

        assert path.read_text() == before
        assert [p.name for p in tmp_path.iterdir()] == [path.name]

    def test_missing_directory(self, tmp_path) -> None:
        with pytest.raises(ExportIOError):
            CsvMetadataExporter(tmp_path / "missing").export(_dataset())
