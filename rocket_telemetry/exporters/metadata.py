"""Run-level metadata export to CSV.

Writes a single summary row describing the run, never the readings
themselves. An empty dataset still produces the file, header only.
"""

import logging
from pathlib import Path

import polars as pl
from beartype import beartype

from rocket_telemetry.errors import ExportIOError
from rocket_telemetry.readings import TelemetryDataset

logger = logging.getLogger(__name__)

METADATA_SCHEMA: dict[str, pl.DataType] = {
    "launch_id": pl.String(),
    "launch_time": pl.String(),
    "time_since_launch_ms": pl.UInt64(),
    "vehicle_type": pl.String(),
    "engine_type": pl.String(),
    "sample_rate_hz": pl.UInt64(),
}


@beartype
def metadata_path(output_dir: str | Path, stem: str) -> Path:
    """Deterministic metadata file path for a run."""
    return Path(output_dir) / f"{stem}.metadata.csv"


@beartype
def metadata_frame(dataset: TelemetryDataset) -> pl.DataFrame:
    """Build the metadata table: zero rows for an empty dataset, else one."""
    first = dataset.first
    if first is None:
        return pl.DataFrame(schema=METADATA_SCHEMA)

    config = dataset.config
    return pl.DataFrame(
        {
            "launch_id": [config.launch_id],
            "launch_time": [dataset.launch_time.isoformat()],
            "time_since_launch_ms": [first.time_since_launch_ms],
            "vehicle_type": [config.vehicle_type],
            "engine_type": [config.engine_type],
            "sample_rate_hz": [config.sample_rate_hz],
        },
        schema=METADATA_SCHEMA,
    )


class CsvMetadataExporter:
    """Writes ``<stem>.metadata.csv`` summarizing a run.

    Accepts every value variant: no reading values are written.
    """

    ACCEPTS: tuple[str, ...] = ("numeric", "text")

    @beartype
    def __init__(self, output_dir: str | Path) -> None:
        self.output_dir = Path(output_dir)

    @beartype
    def export(self, dataset: TelemetryDataset, stem: str | None = None) -> Path:
        """Create (or overwrite) the metadata file.

        Args:
            dataset: Dataset to summarize
            stem: File stem; defaults to the config's ``output_stem``

        Returns:
            Path of the written file

        Raises:
            ExportIOError: If the file cannot be created or written
        """
        path = metadata_path(self.output_dir, stem or dataset.config.output_stem)
        frame = metadata_frame(dataset)
        logger.info("Writing run metadata to %s", path)

        partial = path.with_name(path.name + ".partial")
        try:
            with open(partial, "wb") as f:
                frame.write_csv(f)
            partial.replace(path)
        except OSError as err:
            raise ExportIOError(path, "Failed to write metadata file") from err
        finally:
            partial.unlink(missing_ok=True)

        if frame.is_empty():
            logger.warning("Dataset is empty, wrote metadata header only to %s", path)
        return path
