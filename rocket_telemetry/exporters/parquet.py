"""Columnar export of every reading to Parquet.

Schema (fixed):

    timestamp             Datetime(us)
    time_since_launch_ms  UInt64
    sensor_type           String  (channel short code)
    value                 Float64

Only numeric values fit the schema. A textual value aborts the export with
``UnsupportedValueError``; it is never coerced to a placeholder number.
An empty dataset writes nothing.
"""

import logging
from datetime import datetime, timezone
from pathlib import Path

import polars as pl
from beartype import beartype
from tqdm import tqdm

from rocket_telemetry.errors import ExportIOError, UnsupportedValueError
from rocket_telemetry.readings import Numeric, TelemetryDataset

logger = logging.getLogger(__name__)

PARQUET_SCHEMA: dict[str, pl.DataType] = {
    "timestamp": pl.Datetime("us"),
    "time_since_launch_ms": pl.UInt64(),
    "sensor_type": pl.String(),
    "value": pl.Float64(),
}

COMPRESSION: str = "snappy"

# Progress bar refresh interval [readings]
PROGRESS_INTERVAL: int = 10_000


def _naive_utc(timestamp: datetime) -> datetime:
    if timestamp.tzinfo is None:
        return timestamp
    return timestamp.astimezone(timezone.utc).replace(tzinfo=None)


@beartype
def parquet_path(output_dir: str | Path, stem: str) -> Path:
    """Deterministic Parquet file path for a run."""
    return Path(output_dir) / f"{stem}.parquet"


@beartype
def to_frame(dataset: TelemetryDataset, progress: bool = False) -> pl.DataFrame:
    """Convert the readings to a polars DataFrame with the export schema.

    Raises:
        UnsupportedValueError: If any reading carries a non-numeric value
    """
    n = len(dataset.readings)
    timestamps = []
    elapsed = []
    codes = []
    values = []

    pbar = tqdm(total=n, desc="Converting readings", unit="reading", disable=not progress)
    try:
        for i, reading in enumerate(dataset.readings):
            if i % PROGRESS_INTERVAL == 0:
                pbar.n = i
                pbar.refresh()

            if not isinstance(reading.value, Numeric):
                raise UnsupportedValueError(i, reading.channel, type(reading.value).__name__)

            timestamps.append(_naive_utc(reading.timestamp))
            elapsed.append(reading.time_since_launch_ms)
            codes.append(reading.channel.code)
            values.append(reading.value.value)

        pbar.n = n
        pbar.refresh()
    finally:
        pbar.close()

    return pl.DataFrame(
        {
            "timestamp": timestamps,
            "time_since_launch_ms": elapsed,
            "sensor_type": codes,
            "value": values,
        },
        schema=PARQUET_SCHEMA,
    )


class ParquetExporter:
    """Writes ``<stem>.parquet`` holding every reading of a run.

    Accepts numeric values only.
    """

    ACCEPTS: tuple[str, ...] = ("numeric",)

    @beartype
    def __init__(self, output_dir: str | Path, progress: bool = False) -> None:
        self.output_dir = Path(output_dir)
        self.progress = progress

    @beartype
    def export(self, dataset: TelemetryDataset, stem: str | None = None) -> Path | None:
        """Write the dataset as a snappy-compressed Parquet file.

        Args:
            dataset: Dataset to export
            stem: File stem; defaults to the config's ``output_stem``

        Returns:
            Path of the written file, or None when the dataset is empty

        Raises:
            UnsupportedValueError: If any reading carries a non-numeric value
            ExportIOError: If the file cannot be created or written
        """
        if dataset.is_empty:
            logger.warning("No readings to export, skipping Parquet output")
            return None

        path = parquet_path(self.output_dir, stem or dataset.config.output_stem)

        # Convert before opening the file so a schema failure leaves no partial output
        frame = to_frame(dataset, progress=self.progress)

        # Write beside the target, then move into place
        partial = path.with_name(path.name + ".partial")
        try:
            with open(partial, "wb") as f:
                frame.write_parquet(f, compression=COMPRESSION)
            partial.replace(path)
        except OSError as err:
            raise ExportIOError(path, "Failed to write Parquet file") from err
        finally:
            partial.unlink(missing_ok=True)

        logger.info("Exported %d readings to %s", frame.height, path)
        return path


@beartype
def read_parquet(path: str | Path) -> pl.DataFrame:
    """Load an exported Parquet file."""
    return pl.read_parquet(path)
