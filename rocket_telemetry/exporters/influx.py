"""Batched export to a time-series store over line protocol.

Readings are rendered one per line and submitted in fixed-size batches,
strictly in order, one blocking write at a time. A failed batch stops the
export immediately: earlier batches stay committed on the server and the
failure is raised as ``BatchWriteError`` so the caller sees exactly how far
the export got. There is no retry and no deduplication; exporting the same
dataset twice writes it twice.

Example:
    >>> from rocket_telemetry.config import InfluxConfig
    >>> from rocket_telemetry.exporters import InfluxDBWriter, TimeSeriesExporter
    >>>
    >>> writer = InfluxDBWriter(InfluxConfig(token="t", org="o", bucket="b"))
    >>> summary = TimeSeriesExporter(writer, batch_size=5000).export(dataset)
    >>> print(f"Sent {summary.readings_written} readings")
"""

import logging
import math
from abc import abstractmethod
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Protocol, runtime_checkable

import requests
from beartype import beartype
from tqdm import tqdm

from rocket_telemetry.config import DEFAULT_BATCH_SIZE, DEFAULT_MEASUREMENT, InfluxConfig
from rocket_telemetry.errors import BatchWriteError, TimeSeriesWriteError
from rocket_telemetry.readings import Numeric, Reading, TelemetryDataset, Text

logger = logging.getLogger(__name__)

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)

# =============================================================================
# Line Protocol
# =============================================================================


def _escape_key(value: str) -> str:
    """Escape a measurement, tag key or tag value."""
    return value.replace("\\", "\\\\").replace(",", "\\,").replace("=", "\\=").replace(" ", "\\ ")


def _escape_measurement(value: str) -> str:
    return value.replace("\\", "\\\\").replace(",", "\\,").replace(" ", "\\ ")


def _format_field(value: Numeric | Text) -> str:
    if isinstance(value, Numeric):
        return repr(float(value.value))
    escaped = value.value.replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'


def epoch_us(timestamp: datetime) -> int:
    """Microseconds since the Unix epoch (naive timestamps are taken as UTC)."""
    if timestamp.tzinfo is None:
        timestamp = timestamp.replace(tzinfo=timezone.utc)
    delta = timestamp - _EPOCH
    return (delta.days * 86_400 + delta.seconds) * 1_000_000 + delta.microseconds


@beartype
def to_line_protocol(
    reading: Reading,
    measurement: str = DEFAULT_MEASUREMENT,
    launch_id: str | None = None,
) -> str:
    """Render one reading as a line-protocol line (no trailing newline).

    Format::

        <measurement>,launch_id=<id>,sensor_type=<code> value=<v> <epoch_us>

    Numeric values become float fields; textual values become string fields.
    """
    tags = []
    if launch_id is not None:
        tags.append(f"launch_id={_escape_key(launch_id)}")
    tags.append(f"sensor_type={_escape_key(reading.channel.code)}")

    series = ",".join([_escape_measurement(measurement), *tags])
    return f"{series} value={_format_field(reading.value)} {epoch_us(reading.timestamp)}"


@beartype
def batch_payload(
    readings: tuple[Reading, ...] | list[Reading],
    measurement: str = DEFAULT_MEASUREMENT,
    launch_id: str | None = None,
) -> str:
    """Newline-delimited payload for one batch."""
    return "".join(to_line_protocol(r, measurement, launch_id) + "\n" for r in readings)


# =============================================================================
# Writers
# =============================================================================


@runtime_checkable
class LineProtocolWriter(Protocol):
    """Anything that can submit one line-protocol payload to a store."""

    @abstractmethod
    def write_lines(self, payload: str) -> None:
        """Submit one payload and block until the store acknowledges it.

        Raises:
            TimeSeriesWriteError: If the store rejects the write or is unreachable
        """
        ...


class InfluxDBWriter:
    """Writes line protocol to an InfluxDB v2 ``/api/v2/write`` endpoint.

    Args:
        config: Server URL, credentials and destination
        session: Optional pre-built ``requests.Session``
    """

    def __init__(self, config: InfluxConfig, session: requests.Session | None = None) -> None:
        self.config = config
        self._session = session

    @property
    def write_url(self) -> str:
        return f"{self.config.url.rstrip('/')}/api/v2/write"

    def _get_session(self) -> requests.Session:
        if self._session is None:
            self._session = requests.Session()
            self._session.headers.update({
                "Authorization": f"Token {self.config.token}",
                "Content-Type": "text/plain; charset=utf-8",
                "Accept": "application/json",
            })
        return self._session

    def write_lines(self, payload: str) -> None:
        session = self._get_session()
        try:
            response = session.post(
                self.write_url,
                params={
                    "org": self.config.org,
                    "bucket": self.config.bucket,
                    "precision": "us",
                },
                data=payload.encode("utf-8"),
                timeout=self.config.timeout_s,
            )
            response.raise_for_status()
        except requests.RequestException as err:
            raise TimeSeriesWriteError(f"Write to {self.write_url} failed: {err}") from err

    def close(self) -> None:
        if self._session is not None:
            self._session.close()
            self._session = None

    def __enter__(self) -> "InfluxDBWriter":
        return self

    def __exit__(self, exc_type: object, exc_val: object, exc_tb: object) -> None:
        self.close()


# =============================================================================
# Exporter
# =============================================================================


@dataclass(frozen=True)
class BatchExportSummary:
    """Outcome of a fully committed batch export."""

    batch_count: int
    readings_written: int


@beartype
def batch_count(total_readings: int, batch_size: int) -> int:
    """Number of batches needed: ``ceil(total_readings / batch_size)``."""
    if batch_size <= 0:
        raise ValueError(f"batch_size must be positive, got {batch_size}")
    return math.ceil(total_readings / batch_size)


class TimeSeriesExporter:
    """Submits a dataset to a time-series store in sequential batches.

    Accepts numeric and textual values (line protocol has string fields).

    Args:
        writer: Destination for each batch payload
        batch_size: Maximum readings per batch
        measurement: Measurement name on every line
        progress: Show a tqdm progress bar over batches
    """

    ACCEPTS: tuple[str, ...] = ("numeric", "text")

    @beartype
    def __init__(
        self,
        writer: LineProtocolWriter,
        batch_size: int = DEFAULT_BATCH_SIZE,
        measurement: str = DEFAULT_MEASUREMENT,
        progress: bool = False,
    ) -> None:
        if batch_size <= 0:
            raise ValueError(f"batch_size must be positive, got {batch_size}")
        self.writer = writer
        self.batch_size = batch_size
        self.measurement = measurement
        self.progress = progress

    def batches(self, dataset: TelemetryDataset) -> list[tuple[Reading, ...]]:
        """Split the readings into consecutive batches of at most ``batch_size``."""
        readings = dataset.readings
        return [
            readings[start:start + self.batch_size]
            for start in range(0, len(readings), self.batch_size)
        ]

    @beartype
    def export(self, dataset: TelemetryDataset) -> BatchExportSummary:
        """Send every reading, one batch at a time, in order.

        Returns:
            Summary of the committed export (zero batches for an empty dataset)

        Raises:
            BatchWriteError: If a batch fails; earlier batches remain committed
        """
        if dataset.is_empty:
            logger.warning("No data to export to the time-series store")
            return BatchExportSummary(batch_count=0, readings_written=0)

        n_batches = batch_count(len(dataset), self.batch_size)
        launch_id = dataset.config.launch_id
        committed_readings = 0

        pbar = tqdm(
            total=n_batches,
            desc=f"Sending batches of {self.batch_size}",
            unit="batch",
            disable=not self.progress,
        )
        try:
            for batch_idx, chunk in enumerate(self.batches(dataset)):
                payload = batch_payload(chunk, self.measurement, launch_id)
                try:
                    self.writer.write_lines(payload)
                except TimeSeriesWriteError as err:
                    logger.error(
                        "Failed to send batch %d/%d (%d readings): %s",
                        batch_idx + 1, n_batches, len(chunk), err,
                    )
                    raise BatchWriteError(
                        failed_batch=batch_idx + 1,
                        committed_batches=batch_idx,
                        readings_committed=committed_readings,
                        batch_count=n_batches,
                    ) from err

                committed_readings += len(chunk)
                pbar.update(1)
                logger.debug("Sent batch %d/%d (%d readings)", batch_idx + 1, n_batches, len(chunk))
        finally:
            pbar.close()

        logger.info(
            "Exported %d readings in %d batches to the time-series store",
            committed_readings, n_batches,
        )
        return BatchExportSummary(batch_count=n_batches, readings_written=committed_readings)
