"""End-to-end runs: generate a dataset, then hand it to the exporters.

Exporters run one after another, after generation has finished.

Example:
    >>> from rocket_telemetry import TelemetryConfig
    >>> from rocket_telemetry.pipeline import generate_to_files
    >>>
    >>> report = generate_to_files(TelemetryConfig(duration_s=10, sample_rate_hz=100), "output")
    >>> print(report.parquet_path)
"""

import logging
import time
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path

from beartype import beartype

from rocket_telemetry.channels import CHANNEL_COUNT
from rocket_telemetry.config import InfluxConfig, TelemetryConfig
from rocket_telemetry.errors import ExportIOError
from rocket_telemetry.exporters import (
    BatchExportSummary,
    CsvMetadataExporter,
    InfluxDBWriter,
    LineProtocolWriter,
    ParquetExporter,
    TimeSeriesExporter,
)
from rocket_telemetry.readings import TelemetryDataset
from rocket_telemetry.simulation import TelemetryGenerator

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RunReport:
    """What a file-export run produced."""

    dataset: TelemetryDataset
    parquet_path: Path | None
    metadata_path: Path
    elapsed_s: float


@beartype
def generate_dataset(
    config: TelemetryConfig,
    progress: bool = True,
    launch_time: datetime | None = None,
) -> TelemetryDataset:
    """Generate the dataset for ``config``, warning when it exceeds ``max_rows``."""
    logger.info("Number of channels: %d", CHANNEL_COUNT)
    logger.info("Sample rate: %s Hz, duration: %d s", f"{config.sample_rate_hz:,}", config.duration_s)
    logger.info("Estimated number of data points: %s", f"{config.estimated_points:,}")

    if config.exceeds_row_cap:
        logger.warning(
            "Estimated points (%d) exceed max rows (%d). "
            "Consider increasing max rows or decreasing sample rate/duration.",
            config.estimated_points, config.max_rows,
        )

    return TelemetryGenerator(config).generate(progress=progress, launch_time=launch_time)


@beartype
def generate_to_files(
    config: TelemetryConfig,
    output_dir: str | Path,
    progress: bool = True,
    launch_time: datetime | None = None,
) -> RunReport:
    """Generate a run and write its Parquet and metadata CSV files.

    Args:
        config: Run configuration
        output_dir: Directory for the output files (created if missing)
        progress: Show progress bars
        launch_time: Launch wall-clock time (defaults to now, UTC)

    Returns:
        RunReport with the dataset and the paths written

    Raises:
        ExportIOError: If the output directory or a file cannot be written
        UnsupportedValueError: If a reading cannot be stored in Parquet
    """
    start = time.perf_counter()
    output_dir = Path(output_dir)
    try:
        output_dir.mkdir(parents=True, exist_ok=True)
    except OSError as err:
        raise ExportIOError(output_dir, "Failed to create output directory") from err

    dataset = generate_dataset(config, progress=progress, launch_time=launch_time)

    parquet_file = ParquetExporter(output_dir, progress=progress).export(dataset)

    logger.info("Writing out metadata for the run")
    metadata_file = CsvMetadataExporter(output_dir).export(dataset)

    elapsed = time.perf_counter() - start
    logger.info("Generation completed in %.2f s", elapsed)
    logger.info("Generated %s readings", f"{len(dataset):,}")

    return RunReport(
        dataset=dataset,
        parquet_path=parquet_file,
        metadata_path=metadata_file,
        elapsed_s=elapsed,
    )


@beartype
def export_to_influx(
    dataset: TelemetryDataset,
    influx: InfluxConfig,
    batch_size: int | None = None,
    progress: bool = True,
    writer: LineProtocolWriter | None = None,
) -> BatchExportSummary:
    """Send a dataset to the time-series store.

    Args:
        dataset: Dataset to send
        influx: Server and destination settings
        batch_size: Readings per batch (defaults to the dataset config's)
        progress: Show a progress bar over batches
        writer: Alternative writer (defaults to an ``InfluxDBWriter``)

    Raises:
        BatchWriteError: If a batch fails part way through
    """
    size = batch_size if batch_size is not None else dataset.config.batch_size
    logger.info("Sending data to %s, bucket %s, batch size %d", influx.url, influx.bucket, size)

    if writer is not None:
        exporter = TimeSeriesExporter(writer, size, influx.measurement, progress)
        return exporter.export(dataset)

    with InfluxDBWriter(influx) as influx_writer:
        exporter = TimeSeriesExporter(influx_writer, size, influx.measurement, progress)
        return exporter.export(dataset)
