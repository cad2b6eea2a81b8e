"""Seeded sensor noise and timestamp jitter.

The generator owns a single ``numpy.random.Generator`` for the whole run
and passes it to every call that needs entropy. Nothing here seeds or
copies that stream, so the same seed and configuration always reproduce
the same values.

Per tick a fixed, ordered set of noise samples is drawn exactly once.
Several channels share a draw scaled by different coefficients (chamber,
oxidizer and fuel pressure all move together), which keeps the channels
correlated the way real sensors on a common manifold are.
"""

from dataclasses import dataclass
from datetime import datetime, timedelta

import numpy as np
from beartype import beartype
from numpy.typing import NDArray

from rocket_telemetry.channels import CHANNEL_COUNT, Channel

# Gaussian noise standard deviations
ALTITUDE_NOISE_STD: float = 0.01  # [m]
PRESSURE_NOISE_STD: float = 1000.0  # [Pa]
TEMPERATURE_NOISE_STD: float = 1.0  # [K]
FLOW_RATE_NOISE_STD: float = 0.1  # [kg/s]
VIBRATION_NOISE_STD: float = 0.01  # [g]

# Uniform noise ranges (low, high)
TURBOPUMP_RPM_NOISE_RANGE: tuple[float, float] = (-50.0, 50.0)
THRUST_NOISE_RANGE: tuple[float, float] = (-10.0, 100.0)
SPECIFIC_IMPULSE_NOISE_RANGE: tuple[float, float] = (-0.5, 0.5)
ATTITUDE_NOISE_RANGE: tuple[float, float] = (-0.5, 0.5)
VIBRATION_FREQ_NOISE_RANGE: tuple[float, float] = (-5.0, 5.0)


@dataclass(frozen=True)
class NoiseSample:
    """All noise drawn for one tick."""

    altitude: float
    pressure: float
    temperature: float
    flow_rate: float
    vibration_x: float
    vibration_y: float
    vibration_z: float
    turbopump_rpm: float
    thrust: float
    specific_impulse: float
    nozzle_temperature: float
    roll: float
    pitch: float
    yaw: float
    vibration_freq: float

    @classmethod
    def draw(cls, rng: np.random.Generator) -> "NoiseSample":
        """Draw one tick of noise. The draw order is part of the output format."""
        return cls(
            altitude=rng.normal(0.0, ALTITUDE_NOISE_STD),
            pressure=rng.normal(0.0, PRESSURE_NOISE_STD),
            temperature=rng.normal(0.0, TEMPERATURE_NOISE_STD),
            flow_rate=rng.normal(0.0, FLOW_RATE_NOISE_STD),
            vibration_x=rng.normal(0.0, VIBRATION_NOISE_STD),
            vibration_y=rng.normal(0.0, VIBRATION_NOISE_STD),
            vibration_z=rng.normal(0.0, VIBRATION_NOISE_STD),
            turbopump_rpm=rng.uniform(*TURBOPUMP_RPM_NOISE_RANGE),
            thrust=rng.uniform(*THRUST_NOISE_RANGE),
            specific_impulse=rng.uniform(*SPECIFIC_IMPULSE_NOISE_RANGE),
            nozzle_temperature=rng.normal(0.0, TEMPERATURE_NOISE_STD) * 2.0,
            roll=rng.uniform(*ATTITUDE_NOISE_RANGE),
            pitch=rng.uniform(*ATTITUDE_NOISE_RANGE),
            yaw=rng.uniform(*ATTITUDE_NOISE_RANGE),
            vibration_freq=rng.uniform(*VIBRATION_FREQ_NOISE_RANGE),
        )

    def offsets(self) -> dict[Channel, float]:
        """Noise contribution of this sample to every channel."""
        return {
            Channel.ACCELERATION: 0.0,
            Channel.ALTITUDE: self.altitude,
            Channel.VELOCITY: 0.0,
            Channel.CHAMBER_PRESSURE: self.pressure * 0.5,
            Channel.CHAMBER_TEMPERATURE: self.temperature * 0.2,
            Channel.OXIDIZER_PRESSURE: self.pressure * 0.5,
            Channel.OXIDIZER_FLOW_RATE: self.flow_rate,
            Channel.OXIDIZER_TEMPERATURE: self.temperature * 0.2,
            Channel.FUEL_PRESSURE: self.pressure * 0.5,
            Channel.FUEL_FLOW_RATE: self.flow_rate,
            Channel.FUEL_TEMPERATURE: self.temperature,
            Channel.TURBOPUMP_RPM: self.turbopump_rpm,
            Channel.THRUST: self.thrust,
            Channel.SPECIFIC_IMPULSE: self.specific_impulse,
            Channel.NOZZLE_TEMPERATURE: self.nozzle_temperature,
            Channel.ROLL_ANGLE: self.roll,
            Channel.PITCH_ANGLE: self.pitch,
            Channel.YAW_ANGLE: self.yaw,
            Channel.ROLL_RATE: 0.0,
            Channel.PITCH_RATE: 0.0,
            Channel.YAW_RATE: 0.0,
            # Ground track noise follows the attitude sensors
            Channel.LATITUDE: self.pitch,
            Channel.LONGITUDE: self.roll,
            Channel.VIBRATION_X: self.vibration_x,
            Channel.VIBRATION_Y: self.vibration_y,
            Channel.VIBRATION_Z: self.vibration_z,
            Channel.VIBRATION_FREQ: self.vibration_freq,
            Channel.MISSION_PHASE: 0.0,
            Channel.BATTERY_VOLTAGE: 0.0,
        }


@beartype
class TimestampJitter:
    """Zero-mean Gaussian jitter on reading timestamps.

    Each reading gets its own draw, so readings of the same tick do not
    share a timestamp.

    Args:
        std_dev_us: Standard deviation of the jitter [us]
    """

    def __init__(self, std_dev_us: float | int) -> None:
        if std_dev_us < 0:
            raise ValueError(f"std_dev_us must be non-negative, got {std_dev_us}")
        self.std_dev_us = std_dev_us

    def offsets_us(self, rng: np.random.Generator, n: int = CHANNEL_COUNT) -> NDArray[np.int64]:
        """Draw ``n`` independent jitter offsets, rounded to whole microseconds."""
        return np.rint(rng.normal(0.0, self.std_dev_us, size=n)).astype(np.int64)

    def apply(
        self,
        timestamp: datetime,
        rng: np.random.Generator,
        n: int = CHANNEL_COUNT,
    ) -> list[datetime]:
        """Return ``n`` independently jittered copies of ``timestamp``."""
        return [
            timestamp + timedelta(microseconds=int(offset))
            for offset in self.offsets_us(rng, n)
        ]
