"""Flight-state simulation and telemetry generation.

Example:
    >>> from rocket_telemetry.config import TelemetryConfig
    >>> from rocket_telemetry.simulation import TelemetryGenerator
    >>>
    >>> dataset = TelemetryGenerator(TelemetryConfig(duration_s=2, sample_rate_hz=50)).generate()
"""

from rocket_telemetry.simulation.generator import (
    TelemetryGenerator,
    elapsed_ms,
    fan_out,
)
from rocket_telemetry.simulation.noise import NoiseSample, TimestampJitter
from rocket_telemetry.simulation.phases import (
    PHASES,
    PhaseDescriptor,
    advance,
    phase_for_progress,
    tick_progress,
)
from rocket_telemetry.simulation.state import SimulationState

__all__ = [
    "PHASES",
    "NoiseSample",
    "PhaseDescriptor",
    "SimulationState",
    "TelemetryGenerator",
    "TimestampJitter",
    "advance",
    "elapsed_ms",
    "fan_out",
    "phase_for_progress",
    "tick_progress",
]
