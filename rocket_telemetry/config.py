"""Run configuration for telemetry generation and export.

Example:
    >>> from rocket_telemetry.config import TelemetryConfig
    >>> config = TelemetryConfig(duration_s=10, sample_rate_hz=100, seed=42)
    >>> config.total_ticks
    1000
"""

from dataclasses import dataclass

from beartype import beartype

from rocket_telemetry.channels import CHANNEL_COUNT

DEFAULT_BATCH_SIZE: int = 5000
DEFAULT_MEASUREMENT: str = "rocket_telemetry"


@beartype
@dataclass(frozen=True)
class TelemetryConfig:
    """Configuration for one simulated flight.

    Attributes:
        duration_s: Simulated flight duration [s]
        sample_rate_hz: Ticks per simulated second [Hz]
        launch_id: Identifier written into every export
        seed: Seed for the session random stream
        max_rows: Advisory cap on the number of readings (warns when exceeded)
        timestamp_jitter_us: Standard deviation of per-reading timestamp jitter [us]
        batch_size: Maximum readings per time-series write call
        vehicle_type: Vehicle label for the run metadata
        engine_type: Engine label for the run metadata
    """

    duration_s: int = 120
    sample_rate_hz: int = 1000
    launch_id: str = "SIM-001"
    seed: int = 1337
    max_rows: int | None = None
    timestamp_jitter_us: float | int = 50.0
    batch_size: int = DEFAULT_BATCH_SIZE
    vehicle_type: str = "Kerbal"
    engine_type: str = "Narwhal"

    def __post_init__(self) -> None:
        if self.sample_rate_hz <= 0:
            raise ValueError(f"sample_rate_hz must be positive, got {self.sample_rate_hz}")
        if self.duration_s < 0:
            raise ValueError(f"duration_s must be non-negative, got {self.duration_s}")
        if self.timestamp_jitter_us < 0:
            raise ValueError(
                f"timestamp_jitter_us must be non-negative, got {self.timestamp_jitter_us}"
            )
        if self.batch_size <= 0:
            raise ValueError(f"batch_size must be positive, got {self.batch_size}")
        if self.max_rows is not None and self.max_rows < 0:
            raise ValueError(f"max_rows must be non-negative, got {self.max_rows}")
        if not self.launch_id:
            raise ValueError("launch_id must not be empty")

    @property
    def total_ticks(self) -> int:
        """Number of simulation ticks in the run."""
        return self.duration_s * self.sample_rate_hz

    @property
    def time_step_s(self) -> float:
        """Fixed tick period [s]."""
        return 1.0 / self.sample_rate_hz

    @property
    def estimated_points(self) -> int:
        """Readings the run will produce (one per channel per tick)."""
        return self.total_ticks * CHANNEL_COUNT

    @property
    def total_points(self) -> int:
        """Estimated readings, capped at ``max_rows`` when one is set."""
        if self.max_rows is None:
            return self.estimated_points
        return min(self.estimated_points, self.max_rows)

    @property
    def exceeds_row_cap(self) -> bool:
        return self.max_rows is not None and self.estimated_points > self.max_rows

    @property
    def output_stem(self) -> str:
        """File stem shared by every file export of this run."""
        return f"{self.launch_id}_{self.sample_rate_hz}hz_{self.duration_s}s"


@beartype
@dataclass(frozen=True)
class InfluxConfig:
    """Connection settings for the time-series store.

    Attributes:
        token: API token sent in the Authorization header
        org: Organization that owns the bucket
        bucket: Destination bucket
        url: Base URL of the server
        measurement: Measurement name written on every line
        timeout_s: Per-request timeout [s]
    """

    token: str
    org: str
    bucket: str
    url: str = "http://localhost:8086"
    measurement: str = DEFAULT_MEASUREMENT
    timeout_s: float | int = 30.0

    def __post_init__(self) -> None:
        for name in ("token", "org", "bucket", "url", "measurement"):
            if not getattr(self, name):
                raise ValueError(f"{name} must not be empty")
        if self.timeout_s <= 0:
            raise ValueError(f"timeout_s must be positive, got {self.timeout_s}")

    def __repr__(self) -> str:
        return (
            f"InfluxConfig(url={self.url!r}, org={self.org!r}, bucket={self.bucket!r}, "
            f"measurement={self.measurement!r}, token='***')"
        )
