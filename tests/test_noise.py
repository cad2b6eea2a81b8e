"""Tests for seeded sensor noise and timestamp jitter."""

from datetime import datetime, timezone

import numpy as np
import pytest
from numpy.testing import assert_allclose

from rocket_telemetry.channels import CHANNEL_COUNT, CHANNELS, Channel
from rocket_telemetry.simulation import NoiseSample, TimestampJitter
from rocket_telemetry.simulation.noise import (
    ATTITUDE_NOISE_RANGE,
    THRUST_NOISE_RANGE,
    TURBOPUMP_RPM_NOISE_RANGE,
    VIBRATION_FREQ_NOISE_RANGE,
)

LAUNCH = datetime(2024, 1, 1, tzinfo=timezone.utc)


class TestNoiseSample:
    """Test per-tick noise draws."""

    def test_same_seed_same_draws(self) -> None:
        a = NoiseSample.draw(np.random.default_rng(7))
        b = NoiseSample.draw(np.random.default_rng(7))
        assert a == b

    def test_different_seed_different_draws(self) -> None:
        a = NoiseSample.draw(np.random.default_rng(7))
        b = NoiseSample.draw(np.random.default_rng(8))
        assert a != b

    def test_draw_advances_stream(self) -> None:
        rng = np.random.default_rng(7)
        assert NoiseSample.draw(rng) != NoiseSample.draw(rng)

    def test_draw_order(self) -> None:
        """The first three draws are altitude, pressure, temperature normals."""
        rng = np.random.default_rng(123)
        sample = NoiseSample.draw(rng)

        ref = np.random.default_rng(123)
        assert sample.altitude == ref.normal(0.0, 0.01)
        assert sample.pressure == ref.normal(0.0, 1000.0)
        assert sample.temperature == ref.normal(0.0, 1.0)

    def test_uniform_ranges(self) -> None:
        rng = np.random.default_rng(0)
        for _ in range(500):
            s = NoiseSample.draw(rng)
            assert TURBOPUMP_RPM_NOISE_RANGE[0] <= s.turbopump_rpm < TURBOPUMP_RPM_NOISE_RANGE[1]
            assert THRUST_NOISE_RANGE[0] <= s.thrust < THRUST_NOISE_RANGE[1]
            assert ATTITUDE_NOISE_RANGE[0] <= s.roll < ATTITUDE_NOISE_RANGE[1]
            assert ATTITUDE_NOISE_RANGE[0] <= s.pitch < ATTITUDE_NOISE_RANGE[1]
            assert ATTITUDE_NOISE_RANGE[0] <= s.yaw < ATTITUDE_NOISE_RANGE[1]
            assert VIBRATION_FREQ_NOISE_RANGE[0] <= s.vibration_freq < VIBRATION_FREQ_NOISE_RANGE[1]

    def test_offsets_cover_every_channel(self) -> None:
        offsets = NoiseSample.draw(np.random.default_rng(1)).offsets()
        assert list(offsets) == list(CHANNELS)

    def test_pressures_are_correlated(self) -> None:
        """Chamber, oxidizer and fuel pressure share one draw."""
        sample = NoiseSample.draw(np.random.default_rng(1))
        offsets = sample.offsets()

        assert offsets[Channel.CHAMBER_PRESSURE] == sample.pressure * 0.5
        assert offsets[Channel.OXIDIZER_PRESSURE] == offsets[Channel.CHAMBER_PRESSURE]
        assert offsets[Channel.FUEL_PRESSURE] == offsets[Channel.CHAMBER_PRESSURE]

    def test_temperature_scaling(self) -> None:
        sample = NoiseSample.draw(np.random.default_rng(1))
        offsets = sample.offsets()

        assert_allclose(offsets[Channel.CHAMBER_TEMPERATURE], sample.temperature * 0.2)
        assert_allclose(offsets[Channel.OXIDIZER_TEMPERATURE], sample.temperature * 0.2)
        assert offsets[Channel.FUEL_TEMPERATURE] == sample.temperature

    def test_noiseless_channels(self) -> None:
        offsets = NoiseSample.draw(np.random.default_rng(1)).offsets()
        for channel in (
            Channel.ACCELERATION,
            Channel.VELOCITY,
            Channel.ROLL_RATE,
            Channel.PITCH_RATE,
            Channel.YAW_RATE,
            Channel.MISSION_PHASE,
            Channel.BATTERY_VOLTAGE,
        ):
            assert offsets[channel] == 0.0


class TestTimestampJitter:
    """Test per-reading timestamp jitter."""

    def test_zero_jitter_is_exact(self) -> None:
        stamps = TimestampJitter(0.0).apply(LAUNCH, np.random.default_rng(0))
        assert len(stamps) == CHANNEL_COUNT
        assert all(t == LAUNCH for t in stamps)

    def test_readings_get_independent_offsets(self) -> None:
        stamps = TimestampJitter(50.0).apply(LAUNCH, np.random.default_rng(0))
        assert len(set(stamps)) > 1

    def test_offsets_are_whole_microseconds(self) -> None:
        offsets = TimestampJitter(50.0).offsets_us(np.random.default_rng(0), n=1000)
        assert offsets.dtype == np.int64
        assert offsets.shape == (1000,)
        assert abs(offsets.mean()) < 10.0
        assert 40.0 < offsets.std() < 60.0

    def test_integer_std(self) -> None:
        stamps = TimestampJitter(25).apply(LAUNCH, np.random.default_rng(0))
        assert len(stamps) == CHANNEL_COUNT

    def test_negative_std_raises(self) -> None:
        with pytest.raises(ValueError, match="non-negative"):
            TimestampJitter(-1.0)

    def test_preserves_timezone(self) -> None:
        stamps = TimestampJitter(50.0).apply(LAUNCH, np.random.default_rng(0), n=3)
        assert len(stamps) == 3
        assert all(t.tzinfo is timezone.utc for t in stamps)
