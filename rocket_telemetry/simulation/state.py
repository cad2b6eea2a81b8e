"""Physical state snapshot advanced once per simulation tick.

The state is owned by the generation loop. ``advance`` never mutates the
snapshot it is given, so a state can be kept for comparison while the loop
moves on.
"""

from dataclasses import dataclass

# Launch site: Cape Canaveral
LAUNCH_LATITUDE_DEG: float = 28.5721
LAUNCH_LONGITUDE_DEG: float = -80.648
LAUNCH_HEADING_DEG: float = 90.0  # due east

AMBIENT_PRESSURE_PA: float = 101_325.0
AMBIENT_TEMPERATURE_K: float = 288.15
BATTERY_NOMINAL_V: float = 28.8


@dataclass
class SimulationState:
    """Physical quantities of the vehicle at one tick.

    Units are SI except angles (degrees) and vibration (g).
    """

    altitude_m: float = 0.0
    velocity_mps: float = 0.0
    acceleration_mps2: float = 0.0

    # Engine
    chamber_pressure_pa: float = 0.0
    chamber_temperature_k: float = AMBIENT_TEMPERATURE_K
    oxidizer_pressure_pa: float = AMBIENT_PRESSURE_PA
    oxidizer_flow_rate_kgps: float = 0.0
    oxidizer_temperature_k: float = AMBIENT_TEMPERATURE_K
    fuel_pressure_pa: float = AMBIENT_PRESSURE_PA
    fuel_flow_rate_kgps: float = 0.0
    fuel_temperature_k: float = AMBIENT_TEMPERATURE_K
    turbopump_rpm: float = 0.0
    thrust_n: float = 0.0
    specific_impulse_s: float = 0.0
    nozzle_temperature_k: float = AMBIENT_TEMPERATURE_K

    # Attitude (pitch 90 deg = vertical on the pad)
    roll_deg: float = 0.0
    pitch_deg: float = 90.0
    yaw_deg: float = LAUNCH_HEADING_DEG
    roll_rate_dps: float = 0.0
    pitch_rate_dps: float = 0.0
    yaw_rate_dps: float = 0.0

    # Ground track
    latitude_deg: float = LAUNCH_LATITUDE_DEG
    longitude_deg: float = LAUNCH_LONGITUDE_DEG

    # Vibration
    vibration_x_g: float = 0.0
    vibration_y_g: float = 0.0
    vibration_z_g: float = 0.0
    vibration_freq_hz: float = 0.0

    # Vehicle status
    mission_phase: float = 0.0
    battery_voltage_v: float = BATTERY_NOMINAL_V

    @classmethod
    def on_pad(cls) -> "SimulationState":
        """State of the vehicle on the launch pad before ignition."""
        return cls()
