"""Exception hierarchy for telemetry generation and export.

Every failure an exporter can report has its own type so callers can tell
an unwritable output path from a schema mismatch or a partially committed
remote export.
"""

from pathlib import Path


class TelemetryError(Exception):
    """Base class for all telemetry errors."""


class ExportIOError(TelemetryError):
    """An output file could not be created or written."""

    def __init__(self, path: Path, message: str = "Failed to write output file") -> None:
        self.path = Path(path)
        super().__init__(f"{message}: {self.path}")


class UnsupportedValueError(TelemetryError):
    """A reading carries a value variant the exporter has no column for."""

    def __init__(self, index: int, channel: object, variant: str) -> None:
        self.index = index
        self.channel = channel
        self.variant = variant
        super().__init__(
            f"Reading {index} ({channel}) has a {variant} value, "
            "which the columnar schema cannot store"
        )


class TimeSeriesWriteError(TelemetryError):
    """A single write call to the time-series store failed."""


class BatchWriteError(TelemetryError):
    """A batch export aborted part way through.

    Batches before ``failed_batch`` stay committed on the remote store;
    nothing is rolled back.

    Attributes:
        failed_batch: 1-based number of the batch that failed
        committed_batches: Number of batches committed before the failure
        readings_committed: Number of readings in the committed batches
        batch_count: Total number of batches the export would have sent
    """

    def __init__(
        self,
        failed_batch: int,
        committed_batches: int,
        readings_committed: int,
        batch_count: int,
    ) -> None:
        self.failed_batch = failed_batch
        self.committed_batches = committed_batches
        self.readings_committed = readings_committed
        self.batch_count = batch_count
        super().__init__(
            f"Batch {failed_batch}/{batch_count} failed; "
            f"{committed_batches} batch(es) ({readings_committed} readings) "
            "remain committed"
        )

    @property
    def last_committed_batch(self) -> int | None:
        """1-based number of the last committed batch, or None."""
        return self.committed_batches or None
