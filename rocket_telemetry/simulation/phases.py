"""Phase-based flight model.

Normalized mission progress ``p = tick_index / total_ticks`` selects one of
five ordered phases. Each phase sets closed-form targets for the engine,
attitude and vibration quantities plus the vehicle acceleration; velocity
and altitude then integrate with explicit Euler over the fixed tick period.

Phase intervals are half-open on the lower bound, so a tick landing exactly
on a boundary belongs to the later phase:

    Ignition / liftoff   [0.00, 0.05)
    Max-Q                [0.05, 0.15)
    Main ascent          [0.15, 0.40)
    Stage separation     [0.40, 0.55)
    Orbital insertion    [0.55, 1.00]

The model consumes no randomness. Noise is layered on afterwards by
``rocket_telemetry.simulation.noise``.

Example:
    >>> from rocket_telemetry.simulation import SimulationState, advance
    >>> state = SimulationState.on_pad()
    >>> state = advance(state, tick_index=100, total_ticks=1000, dt=0.01)
    >>> state.mission_phase
    1.0
"""

import math
from collections.abc import Callable
from dataclasses import dataclass, replace

from beartype import beartype

from rocket_telemetry.simulation.state import (
    AMBIENT_PRESSURE_PA,
    BATTERY_NOMINAL_V,
    SimulationState,
)

# =============================================================================
# Engine and vehicle constants
# =============================================================================

CHAMBER_PRESSURE_MAX_PA: float = 5_000_000.0
CHAMBER_TEMPERATURE_MAX_K: float = 3500.0
OXIDIZER_FLOW_MAX_KGPS: float = 250.0
FUEL_FLOW_MAX_KGPS: float = 50.0
TURBOPUMP_RPM_MAX: float = 30_000.0
THRUST_MAX_N: float = 1_000_000.0
UPPER_STAGE_THRUST_MAX_N: float = 2_000_000.0
SPECIFIC_IMPULSE_MAX_S: float = 300.0

# Feed pressure = chamber pressure + injector drop + line losses (fractions of Pc)
INJECTOR_DP_FRACTION: float = 0.20
OXIDIZER_LINE_LOSS_FRACTION: float = 0.05
FUEL_LINE_LOSS_FRACTION: float = 0.08  # fuel runs through the regen jacket

G0: float = 9.81  # [m/s^2]
BATTERY_DISCHARGE_V: float = 2.0  # bus voltage drop over the full run

# Physical floors applied after every phase update
PRESSURE_FLOOR_PA: float = 0.0
TEMPERATURE_FLOOR_K: float = 273.0
TURBOPUMP_RPM_FLOOR: float = 0.0

# Flat-Earth ground track
EARTH_RADIUS_M: float = 6_371_000.0
GROUND_TRACK_CLEARANCE_M: float = 100.0
METERS_PER_DEGREE: float = EARTH_RADIUS_M * math.pi / 180.0


def _clamp01(x: float) -> float:
    return min(max(x, 0.0), 1.0)


# =============================================================================
# Phase update rules
# =============================================================================


def ignition(state: SimulationState, p: float) -> None:
    """Engine start and liftoff: everything throttles up linearly."""
    throttle = _clamp01(p / 0.05)

    state.chamber_pressure_pa = CHAMBER_PRESSURE_MAX_PA * throttle
    state.chamber_temperature_k = CHAMBER_TEMPERATURE_MAX_K * throttle
    state.oxidizer_flow_rate_kgps = OXIDIZER_FLOW_MAX_KGPS * throttle
    state.fuel_flow_rate_kgps = FUEL_FLOW_MAX_KGPS * throttle
    state.turbopump_rpm = TURBOPUMP_RPM_MAX * throttle
    state.thrust_n = THRUST_MAX_N * throttle
    state.specific_impulse_s = SPECIFIC_IMPULSE_MAX_S * throttle
    state.nozzle_temperature_k = CHAMBER_TEMPERATURE_MAX_K * throttle

    # Held down for the first 1% of the run, then ramp to 15 m/s^2
    state.acceleration_mps2 = 0.0 if p < 0.01 else (p - 0.01) / 0.04 * 15.0

    # Mean liftoff buffet; the random part comes from the vibration noise
    state.vibration_x_g = 0.025
    state.vibration_y_g = 0.025
    state.vibration_z_g = 0.05
    state.vibration_freq_hz = 22.5


def max_q(state: SimulationState, p: float) -> None:
    """Throttle bucket through maximum dynamic pressure, start of pitch-over."""
    frac = _clamp01((p - 0.05) / 0.10)
    throttle = 1.0 - 0.2 * frac

    state.chamber_pressure_pa = CHAMBER_PRESSURE_MAX_PA * throttle
    state.thrust_n = THRUST_MAX_N * throttle
    state.oxidizer_flow_rate_kgps = OXIDIZER_FLOW_MAX_KGPS * throttle
    state.fuel_flow_rate_kgps = FUEL_FLOW_MAX_KGPS * throttle
    state.acceleration_mps2 = 15.0 * throttle

    state.pitch_deg = 90.0 - 15.0 * frac
    state.pitch_rate_dps = -0.3

    state.vibration_x_g = 1.0 + (1.0 - throttle) * 2.0
    state.vibration_y_g = 1.0 + (1.0 - throttle) * 2.0
    state.vibration_z_g = 1.5 + (1.0 - throttle) * 3.0
    state.vibration_freq_hz = 80.0 + (1.0 - throttle) * 40.0

    state.nozzle_temperature_k = 1500.0 + frac * 300.0


def main_ascent(state: SimulationState, p: float) -> None:
    """Full thrust; acceleration grows as propellant mass drops."""
    state.chamber_pressure_pa = CHAMBER_PRESSURE_MAX_PA
    state.thrust_n = THRUST_MAX_N
    state.oxidizer_flow_rate_kgps = OXIDIZER_FLOW_MAX_KGPS
    state.fuel_flow_rate_kgps = FUEL_FLOW_MAX_KGPS

    state.acceleration_mps2 = 15.0 * (1.0 + ((p - 0.15) / 0.25) * 0.5)

    state.pitch_deg = 75.0 - 25.0 * ((p - 0.15) / 0.3)
    state.pitch_rate_dps = -0.1

    # Buffet fades as the atmosphere thins
    vib_factor = 1.0 - (p - 0.15) / 0.3
    state.vibration_x_g = 0.5 * vib_factor
    state.vibration_y_g = 0.5 * vib_factor
    state.vibration_z_g = 0.75 * vib_factor
    state.vibration_freq_hz = 60.0


def stage_separation(state: SimulationState, p: float) -> None:
    """First stage shutdown, coast, separation shock, second stage light."""
    # Clamped from below too: no over-throttle spike before p = 0.45
    shutdown = 1.0 - _clamp01((p - 0.45) / 0.05)

    state.chamber_pressure_pa = CHAMBER_PRESSURE_MAX_PA * shutdown
    state.thrust_n = THRUST_MAX_N * shutdown
    state.oxidizer_flow_rate_kgps = OXIDIZER_FLOW_MAX_KGPS * shutdown
    state.fuel_flow_rate_kgps = FUEL_FLOW_MAX_KGPS * shutdown
    state.turbopump_rpm = TURBOPUMP_RPM_MAX * shutdown

    # Coast between stages: engines dark
    if 0.50 < p < 0.52:
        state.chamber_pressure_pa = 0.0
        state.thrust_n = 0.0
        state.oxidizer_flow_rate_kgps = 0.0
        state.fuel_flow_rate_kgps = 0.0
        state.turbopump_rpm = 0.0

    # Separation shock
    if 0.50 < p < 0.51:
        state.vibration_x_g = 3.0
        state.vibration_y_g = 3.0
        state.vibration_z_g = 5.0
        state.vibration_freq_hz = 100.0
    else:
        state.vibration_x_g = 0.5 * shutdown
        state.vibration_y_g = 0.5 * shutdown
        state.vibration_z_g = 0.75 * shutdown
        state.vibration_freq_hz = 40.0 * shutdown

    if p < 0.50:
        state.acceleration_mps2 = 20.0 * shutdown
    elif p < 0.52:
        state.acceleration_mps2 = -G0
    else:
        state.acceleration_mps2 = -G0 + ((p - 0.52) / 0.03) * 15.0


def orbital_insertion(state: SimulationState, p: float) -> None:
    """Second stage burn to insertion, tailing off over the last 10%."""
    stage_time = (p - 0.55) / 0.45
    startup = min(stage_time / 20.0, 1.0)

    state.chamber_pressure_pa = CHAMBER_PRESSURE_MAX_PA * startup
    state.chamber_temperature_k = CHAMBER_TEMPERATURE_MAX_K * startup + 300.0
    state.oxidizer_flow_rate_kgps = OXIDIZER_FLOW_MAX_KGPS * startup
    state.fuel_flow_rate_kgps = FUEL_FLOW_MAX_KGPS * startup
    state.turbopump_rpm = TURBOPUMP_RPM_MAX * startup
    state.thrust_n = UPPER_STAGE_THRUST_MAX_N * startup
    state.specific_impulse_s = SPECIFIC_IMPULSE_MAX_S * startup
    state.acceleration_mps2 = 5.0 * startup

    if stage_time > 0.9:
        shutdown = 1.0 - (stage_time - 0.9) / 0.1
        state.chamber_pressure_pa *= shutdown
        state.thrust_n *= shutdown
        state.oxidizer_flow_rate_kgps *= shutdown
        state.fuel_flow_rate_kgps *= shutdown
        state.turbopump_rpm *= shutdown
        state.acceleration_mps2 *= shutdown

    # Vacuum: almost no vibration
    state.vibration_x_g = 0.01 * startup
    state.vibration_y_g = 0.01 * startup
    state.vibration_z_g = 0.03 * startup
    state.vibration_freq_hz = 30.0 * startup

    state.pitch_deg = 50.0 - 40.0 * stage_time


# =============================================================================
# Phase table
# =============================================================================


@dataclass(frozen=True)
class PhaseDescriptor:
    """One mission phase: a half-open progress interval and its update rule.

    Attributes:
        index: Position of the phase in mission order
        name: Human-readable phase name
        start: Inclusive lower progress bound
        end: Exclusive upper progress bound (the last phase also includes 1.0)
        update: Sets the phase targets on a working copy of the state
    """

    index: int
    name: str
    start: float
    end: float
    update: Callable[[SimulationState, float], None]

    def contains(self, p: float) -> bool:
        return self.start <= p < self.end


PHASES: tuple[PhaseDescriptor, ...] = (
    PhaseDescriptor(0, "Ignition/Liftoff", 0.00, 0.05, ignition),
    PhaseDescriptor(1, "Max-Q", 0.05, 0.15, max_q),
    PhaseDescriptor(2, "Main Ascent", 0.15, 0.40, main_ascent),
    PhaseDescriptor(3, "Stage Separation", 0.40, 0.55, stage_separation),
    PhaseDescriptor(4, "Orbital Insertion", 0.55, 1.00, orbital_insertion),
)


@beartype
def phase_for_progress(p: float | int) -> PhaseDescriptor:
    """Select the phase whose interval contains ``p``.

    Raises:
        ValueError: If ``p`` lies outside [0, 1]
    """
    for phase in PHASES:
        if phase.contains(p):
            return phase
    if p == PHASES[-1].end:
        return PHASES[-1]
    raise ValueError(f"Progress must be in [0, 1], got {p}")


# =============================================================================
# Post-phase relations
# =============================================================================


def _update_feed_pressures(state: SimulationState) -> None:
    """Pump outlet pressures track the chamber, never below ambient."""
    pc = state.chamber_pressure_pa
    state.oxidizer_pressure_pa = max(
        AMBIENT_PRESSURE_PA, pc * (1.0 + INJECTOR_DP_FRACTION + OXIDIZER_LINE_LOSS_FRACTION)
    )
    state.fuel_pressure_pa = max(
        AMBIENT_PRESSURE_PA, pc * (1.0 + INJECTOR_DP_FRACTION + FUEL_LINE_LOSS_FRACTION)
    )


def _apply_floors(state: SimulationState) -> None:
    state.chamber_pressure_pa = max(state.chamber_pressure_pa, PRESSURE_FLOOR_PA)
    state.oxidizer_pressure_pa = max(state.oxidizer_pressure_pa, PRESSURE_FLOOR_PA)
    state.fuel_pressure_pa = max(state.fuel_pressure_pa, PRESSURE_FLOOR_PA)
    state.oxidizer_flow_rate_kgps = max(state.oxidizer_flow_rate_kgps, 0.0)
    state.fuel_flow_rate_kgps = max(state.fuel_flow_rate_kgps, 0.0)
    state.thrust_n = max(state.thrust_n, 0.0)
    state.specific_impulse_s = max(state.specific_impulse_s, 0.0)
    state.turbopump_rpm = max(state.turbopump_rpm, TURBOPUMP_RPM_FLOOR)
    state.chamber_temperature_k = max(state.chamber_temperature_k, TEMPERATURE_FLOOR_K)
    state.nozzle_temperature_k = max(state.nozzle_temperature_k, TEMPERATURE_FLOOR_K)


def _update_ground_track(state: SimulationState, dt: float) -> None:
    """Move lat/lon along the heading once clear of the pad and pitched over."""
    if state.altitude_m <= GROUND_TRACK_CLEARANCE_M or state.pitch_deg >= 90.0:
        return

    horizontal_m = state.velocity_mps * dt * math.cos(math.radians(state.pitch_deg))
    heading_rad = math.radians(state.yaw_deg)

    state.latitude_deg += horizontal_m * math.cos(heading_rad) / METERS_PER_DEGREE
    state.longitude_deg += horizontal_m * math.sin(heading_rad) / (
        METERS_PER_DEGREE * math.cos(math.radians(state.latitude_deg))
    )


# =============================================================================
# Public API
# =============================================================================


@beartype
def tick_progress(tick_index: int, total_ticks: int) -> float:
    """Normalized progress of a tick, in [0, 1)."""
    if total_ticks <= 0:
        raise ValueError(f"total_ticks must be positive, got {total_ticks}")
    if not 0 <= tick_index < total_ticks:
        raise ValueError(f"tick_index must be in [0, {total_ticks}), got {tick_index}")
    return tick_index / total_ticks


@beartype
def advance(
    state: SimulationState,
    tick_index: int,
    total_ticks: int,
    dt: float | int,
) -> SimulationState:
    """Advance the state by one tick.

    Pure: returns a new state and leaves ``state`` untouched.

    Args:
        state: State at the previous tick
        tick_index: Index of the tick being computed (0-based)
        total_ticks: Number of ticks in the run
        dt: Tick period [s]

    Returns:
        State at ``tick_index``
    """
    p = tick_progress(tick_index, total_ticks)
    phase = phase_for_progress(p)

    new = replace(state)
    phase.update(new, p)
    _update_feed_pressures(new)

    new.velocity_mps += new.acceleration_mps2 * dt
    new.altitude_m += new.velocity_mps * dt

    _apply_floors(new)
    _update_ground_track(new, dt)

    new.mission_phase = float(phase.index)
    new.battery_voltage_v = BATTERY_NOMINAL_V - BATTERY_DISCHARGE_V * p

    return new
