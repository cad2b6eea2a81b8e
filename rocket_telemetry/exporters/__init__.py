"""Exporters for an assembled telemetry dataset.

Each exporter is an independent, read-only consumer of the same
``TelemetryDataset``. Their empty-dataset behavior differs on purpose:

- ``CsvMetadataExporter`` always writes a file (header only when empty)
- ``ParquetExporter`` writes nothing for an empty dataset
- ``TimeSeriesExporter`` sends nothing and reports zero batches
"""

from rocket_telemetry.exporters.influx import (
    BatchExportSummary,
    InfluxDBWriter,
    LineProtocolWriter,
    TimeSeriesExporter,
    batch_count,
    batch_payload,
    to_line_protocol,
)
from rocket_telemetry.exporters.metadata import (
    METADATA_SCHEMA,
    CsvMetadataExporter,
    metadata_frame,
    metadata_path,
)
from rocket_telemetry.exporters.parquet import (
    PARQUET_SCHEMA,
    ParquetExporter,
    parquet_path,
    read_parquet,
    to_frame,
)

__all__ = [
    # Metadata
    "METADATA_SCHEMA",
    "CsvMetadataExporter",
    "metadata_frame",
    "metadata_path",
    # Parquet
    "PARQUET_SCHEMA",
    "ParquetExporter",
    "parquet_path",
    "read_parquet",
    "to_frame",
    # Time series
    "BatchExportSummary",
    "InfluxDBWriter",
    "LineProtocolWriter",
    "TimeSeriesExporter",
    "batch_count",
    "batch_payload",
    "to_line_protocol",
]
