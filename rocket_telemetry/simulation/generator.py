"""Telemetry generation: phase model, noise, and per-channel fan-out.

Example:
    >>> from rocket_telemetry.config import TelemetryConfig
    >>> from rocket_telemetry.simulation import TelemetryGenerator
    >>>
    >>> config = TelemetryConfig(duration_s=1, sample_rate_hz=10, seed=42)
    >>> dataset = TelemetryGenerator(config).generate(progress=False)
    >>> len(dataset)
    290
"""

import logging
from datetime import datetime, timedelta, timezone

import numpy as np
from beartype import beartype
from tqdm import tqdm

from rocket_telemetry.channels import CHANNEL_COUNT, CHANNEL_INFO, CHANNELS
from rocket_telemetry.config import TelemetryConfig
from rocket_telemetry.readings import Numeric, Reading, TelemetryDataset
from rocket_telemetry.simulation.noise import NoiseSample, TimestampJitter
from rocket_telemetry.simulation.phases import advance
from rocket_telemetry.simulation.state import SimulationState

logger = logging.getLogger(__name__)

# Progress bar refresh interval [ticks]
PROGRESS_INTERVAL: int = 1000


@beartype
def elapsed_ms(tick_index: int, sample_rate_hz: int) -> int:
    """Milliseconds since launch of a tick, derived from its index only."""
    return round(tick_index * 1000 / sample_rate_hz)


@beartype
def fan_out(
    state: SimulationState,
    noise: NoiseSample,
    timestamps: list[datetime],
    time_since_launch_ms: int,
) -> list[Reading]:
    """Expand one tick's state into one reading per channel.

    Args:
        state: Phase-model state for the tick
        noise: Noise drawn for the tick
        timestamps: One jittered timestamp per channel, in channel order
        time_since_launch_ms: Elapsed time of the tick [ms]

    Returns:
        ``CHANNEL_COUNT`` readings in channel order
    """
    if len(timestamps) != CHANNEL_COUNT:
        raise ValueError(f"Expected {CHANNEL_COUNT} timestamps, got {len(timestamps)}")

    offsets = noise.offsets()
    return [
        Reading(
            timestamp=timestamp,
            time_since_launch_ms=time_since_launch_ms,
            channel=channel,
            value=Numeric(float(getattr(state, CHANNEL_INFO[channel].state_field) + offsets[channel])),
        )
        for channel, timestamp in zip(CHANNELS, timestamps)
    ]


class TelemetryGenerator:
    """Generates the full telemetry dataset for one run.

    Owns the session random stream, seeded once from the configuration.
    Calling ``generate`` twice on the same generator continues the stream;
    build a new generator to reproduce a run.

    Args:
        config: Validated run configuration
    """

    @beartype
    def __init__(self, config: TelemetryConfig) -> None:
        self.config = config
        self.rng = np.random.default_rng(config.seed)
        self.jitter = TimestampJitter(config.timestamp_jitter_us)
        logger.info("Seeding RNG with %d", config.seed)

    @beartype
    def generate(
        self,
        progress: bool = True,
        launch_time: datetime | None = None,
    ) -> TelemetryDataset:
        """Run the simulation and assemble every reading in memory.

        Args:
            progress: Show a tqdm progress bar
            launch_time: Launch wall-clock time (defaults to now, UTC)

        Returns:
            Immutable dataset with ``total_ticks * CHANNEL_COUNT`` readings
        """
        config = self.config
        if launch_time is None:
            launch_time = datetime.now(timezone.utc)

        total_ticks = config.total_ticks
        if total_ticks == 0:
            logger.warning("No data points to generate, returning empty dataset")
            return TelemetryDataset(readings=(), config=config, launch_time=launch_time)

        dt = config.time_step_s
        logger.info("Time step is %.6f s (%.4f ms)", dt, dt * 1000.0)

        state = SimulationState.on_pad()
        readings: list[Reading] = []

        pbar = tqdm(
            total=total_ticks,
            desc="Generating telemetry",
            unit="tick",
            disable=not progress,
        )
        try:
            for i in range(total_ticks):
                if i % PROGRESS_INTERVAL == 0:
                    pbar.n = i
                    pbar.refresh()

                state = advance(state, i, total_ticks, dt)
                noise = NoiseSample.draw(self.rng)

                t_ms = elapsed_ms(i, config.sample_rate_hz)
                base = launch_time + timedelta(milliseconds=t_ms)
                timestamps = self.jitter.apply(base, self.rng)

                readings.extend(fan_out(state, noise, timestamps, t_ms))

            pbar.n = total_ticks
            pbar.refresh()
        finally:
            pbar.close()

        logger.info("Telemetry dataset generated with %d readings", len(readings))
        return TelemetryDataset(
            readings=tuple(readings),
            config=config,
            launch_time=launch_time,
        )
