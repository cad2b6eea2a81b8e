"""Reading values, readings, and the assembled telemetry dataset.

A dataset is produced once by the generator and then only read: every
exporter consumes the same immutable ``TelemetryDataset``.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import NamedTuple

import numpy as np
from beartype import beartype
from numpy.typing import NDArray

from rocket_telemetry.channels import CHANNEL_COUNT, Channel
from rocket_telemetry.config import TelemetryConfig


@dataclass(frozen=True, slots=True)
class Numeric:
    """Floating point sensor value."""

    value: float


@dataclass(frozen=True, slots=True)
class Text:
    """Textual sensor value (status strings and the like)."""

    value: str


Value = Numeric | Text


class Reading(NamedTuple):
    """One channel sample at one tick.

    ``timestamp`` carries per-reading jitter and may go backwards between
    readings; ``time_since_launch_ms`` is derived from the tick index only.
    """

    timestamp: datetime
    time_since_launch_ms: int
    channel: Channel
    value: Value


@beartype
@dataclass(frozen=True)
class TelemetryDataset:
    """All readings of one run, with the run's configuration and launch time.

    Attributes:
        readings: Readings in emission order (tick-major, channel-minor)
        config: Configuration the run was generated from
        launch_time: Wall-clock launch time (timezone-aware UTC)
    """

    readings: tuple[Reading, ...]
    config: TelemetryConfig
    launch_time: datetime

    def __len__(self) -> int:
        return len(self.readings)

    @property
    def is_empty(self) -> bool:
        return not self.readings

    @property
    def first(self) -> Reading | None:
        return self.readings[0] if self.readings else None

    @property
    def tick_count(self) -> int:
        return len(self.readings) // CHANNEL_COUNT

    def elapsed_ms(self) -> NDArray[np.uint64]:
        """Elapsed-time column for every reading [ms]."""
        return np.fromiter(
            (r.time_since_launch_ms for r in self.readings),
            dtype=np.uint64,
            count=len(self.readings),
        )

    def channel_values(self, channel: Channel) -> NDArray[np.float64]:
        """Numeric values of one channel, in tick order.

        Raises:
            TypeError: If the channel carries a textual value
        """
        values = []
        for reading in self.readings:
            if reading.channel is not channel:
                continue
            if not isinstance(reading.value, Numeric):
                raise TypeError(f"{channel} carries a non-numeric value: {reading.value!r}")
            values.append(reading.value.value)
        return np.array(values, dtype=np.float64)
