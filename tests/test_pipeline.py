"""Tests for end-to-end runs and the command line interface."""

import logging
from datetime import datetime, timezone

import pytest

from rocket_telemetry import cli
from rocket_telemetry.config import InfluxConfig, TelemetryConfig
from rocket_telemetry.errors import BatchWriteError, ExportIOError
from rocket_telemetry.exporters import BatchExportSummary, read_parquet
from rocket_telemetry.pipeline import export_to_influx, generate_dataset, generate_to_files

LAUNCH = datetime(2024, 1, 1, tzinfo=timezone.utc)


class RecordingWriter:
    def __init__(self) -> None:
        self.payloads: list[str] = []

    def write_lines(self, payload: str) -> None:
        self.payloads.append(payload)


class TestGenerateToFiles:
    """Test generation followed by file export."""

    def test_writes_both_files(self, tmp_path) -> None:
        config = TelemetryConfig(duration_s=1, sample_rate_hz=10)
        report = generate_to_files(config, tmp_path, progress=False, launch_time=LAUNCH)

        assert report.parquet_path == tmp_path / "SIM-001_10hz_1s.parquet"
        assert report.metadata_path == tmp_path / "SIM-001_10hz_1s.metadata.csv"
        assert read_parquet(report.parquet_path).height == 290
        assert len(report.dataset) == 290
        assert report.elapsed_s >= 0.0

    def test_creates_output_directory(self, tmp_path) -> None:
        out = tmp_path / "nested" / "output"
        config = TelemetryConfig(duration_s=1, sample_rate_hz=5)
        report = generate_to_files(config, out, progress=False)
        assert report.parquet_path.parent == out
        assert report.metadata_path.exists()

    def test_zero_duration(self, tmp_path) -> None:
        """An empty run writes the metadata header and no Parquet file."""
        config = TelemetryConfig(duration_s=0, sample_rate_hz=10)
        report = generate_to_files(config, tmp_path, progress=False)

        assert report.parquet_path is None
        assert report.dataset.is_empty
        assert [p.name for p in tmp_path.iterdir()] == ["SIM-001_10hz_0s.metadata.csv"]

    def test_unwritable_output_directory(self, tmp_path) -> None:
        blocker = tmp_path / "blocker"
        blocker.write_text("not a directory")
        config = TelemetryConfig(duration_s=1, sample_rate_hz=10)

        with pytest.raises(ExportIOError) as excinfo:
            generate_to_files(config, blocker / "out", progress=False)
        assert excinfo.value.path == blocker / "out"

    def test_max_rows_is_advisory(self, caplog) -> None:
        """Exceeding max_rows logs a warning but still generates everything."""
        config = TelemetryConfig(duration_s=1, sample_rate_hz=10, max_rows=100)
        with caplog.at_level(logging.WARNING, logger="rocket_telemetry.pipeline"):
            dataset = generate_dataset(config, progress=False)

        assert len(dataset) == 290
        assert "exceed max rows" in caplog.text


class TestExportToInflux:
    """Test the time-series export entry point."""

    def test_uses_config_batch_size(self) -> None:
        config = TelemetryConfig(duration_s=1, sample_rate_hz=10, batch_size=100)
        dataset = generate_dataset(config, progress=False, launch_time=LAUNCH)
        writer = RecordingWriter()

        summary = export_to_influx(
            dataset,
            InfluxConfig(token="t", org="o", bucket="b"),
            progress=False,
            writer=writer,
        )

        assert summary.batch_count == 3
        assert [len(p.splitlines()) for p in writer.payloads] == [100, 100, 90]

    def test_batch_size_override(self) -> None:
        config = TelemetryConfig(duration_s=1, sample_rate_hz=10)
        dataset = generate_dataset(config, progress=False, launch_time=LAUNCH)
        writer = RecordingWriter()

        summary = export_to_influx(
            dataset,
            InfluxConfig(token="t", org="o", bucket="b", measurement="flight"),
            batch_size=290,
            progress=False,
            writer=writer,
        )

        assert summary.batch_count == 1
        assert writer.payloads[0].startswith("flight,launch_id=SIM-001,sensor_type=")


class TestCli:
    """Test the command line entry point."""

    def test_generate(self, tmp_path) -> None:
        code = cli.main([
            "generate", "--duration", "1", "--khz", "0.01",
            "--disable-progress", "-o", str(tmp_path),
        ])
        assert code == 0
        assert (tmp_path / "SIM-001_10hz_1s.parquet").exists()
        assert (tmp_path / "SIM-001_10hz_1s.metadata.csv").exists()

    def test_config_from_args(self) -> None:
        args = cli.build_parser().parse_args([
            "generate", "--khz", "2.5", "--launch-id", "X-9", "--seed", "3",
            "--timestamp-jitter", "0",
        ])
        config = cli.config_from_args(args)

        assert config.sample_rate_hz == 2500
        assert config.launch_id == "X-9"
        assert config.seed == 3
        assert config.timestamp_jitter_us == 0.0
        assert config.duration_s == 120

    def test_generate_unwritable_output_exit_code(self, tmp_path) -> None:
        """An output path beneath a regular file is reported, not raised."""
        blocker = tmp_path / "blocker"
        blocker.write_text("not a directory")
        code = cli.main([
            "generate", "--duration", "1", "--khz", "0.01",
            "--disable-progress", "-o", str(blocker / "out"),
        ])
        assert code == 1

    def test_invalid_rate_is_usage_error(self, tmp_path) -> None:
        with pytest.raises(SystemExit) as excinfo:
            cli.main(["generate", "--khz", "0", "-o", str(tmp_path)])
        assert excinfo.value.code == 2

    def test_influxdb_requires_credentials(self) -> None:
        with pytest.raises(SystemExit):
            cli.main(["influxdb", "--org", "o", "--bucket", "b"])

    def test_influxdb_failure_exit_code(self, monkeypatch) -> None:
        def failing_export(dataset, influx, **kwargs):
            raise BatchWriteError(failed_batch=2, committed_batches=1,
                                  readings_committed=5000, batch_count=3)

        monkeypatch.setattr(cli, "export_to_influx", failing_export)
        code = cli.main([
            "influxdb", "--duration", "1", "--khz", "0.01", "--disable-progress",
            "-t", "secret", "--org", "o", "-b", "b",
        ])
        assert code == 1

    def test_influxdb_success(self, monkeypatch) -> None:
        sent = {}

        def fake_export(dataset, influx, **kwargs):
            sent["readings"] = len(dataset)
            sent["bucket"] = influx.bucket
            return BatchExportSummary(batch_count=1, readings_written=len(dataset))

        monkeypatch.setattr(cli, "export_to_influx", fake_export)
        code = cli.main([
            "influxdb", "--duration", "1", "--khz", "0.01", "--disable-progress",
            "-t", "secret", "--org", "o", "-b", "telemetry",
        ])
        assert code == 0
        assert sent == {"readings": 290, "bucket": "telemetry"}
