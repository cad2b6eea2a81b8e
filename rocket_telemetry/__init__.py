"""Rocket Telemetry - Reproducible synthetic telemetry for a simulated launch.

A deterministic phase-based flight model, seeded sensor noise and
timestamp jitter produce one reading per channel per tick. The resulting
dataset exports to Parquet, a run-metadata CSV, and a line-protocol
time-series store.

Example:
    >>> from rocket_telemetry import TelemetryConfig, TelemetryGenerator, ParquetExporter
    >>>
    >>> config = TelemetryConfig(duration_s=10, sample_rate_hz=100, seed=42)
    >>> dataset = TelemetryGenerator(config).generate(progress=False)
    >>> ParquetExporter("output").export(dataset)
"""

__version__ = "0.1.0"

from rocket_telemetry.channels import (
    CHANNEL_COUNT,
    CHANNEL_INFO,
    CHANNELS,
    Channel,
    ChannelInfo,
    channel_from_code,
    list_channels,
)
from rocket_telemetry.config import InfluxConfig, TelemetryConfig
from rocket_telemetry.errors import (
    BatchWriteError,
    ExportIOError,
    TelemetryError,
    TimeSeriesWriteError,
    UnsupportedValueError,
)
from rocket_telemetry.exporters import (
    BatchExportSummary,
    CsvMetadataExporter,
    InfluxDBWriter,
    LineProtocolWriter,
    ParquetExporter,
    TimeSeriesExporter,
)
from rocket_telemetry.pipeline import (
    RunReport,
    export_to_influx,
    generate_dataset,
    generate_to_files,
)
from rocket_telemetry.readings import Numeric, Reading, TelemetryDataset, Text, Value
from rocket_telemetry.simulation import (
    PHASES,
    SimulationState,
    TelemetryGenerator,
    advance,
)

__all__ = [
    # Version
    "__version__",
    # Channels
    "CHANNEL_COUNT",
    "CHANNEL_INFO",
    "CHANNELS",
    "Channel",
    "ChannelInfo",
    "channel_from_code",
    "list_channels",
    # Configuration
    "InfluxConfig",
    "TelemetryConfig",
    # Data model
    "Numeric",
    "Reading",
    "TelemetryDataset",
    "Text",
    "Value",
    # Simulation
    "PHASES",
    "SimulationState",
    "TelemetryGenerator",
    "advance",
    # Exporters
    "BatchExportSummary",
    "CsvMetadataExporter",
    "InfluxDBWriter",
    "LineProtocolWriter",
    "ParquetExporter",
    "TimeSeriesExporter",
    # Pipeline
    "RunReport",
    "export_to_influx",
    "generate_dataset",
    "generate_to_files",
    # Errors
    "BatchWriteError",
    "ExportIOError",
    "TelemetryError",
    "TimeSeriesWriteError",
    "UnsupportedValueError",
]
