"""Telemetry channel definitions.

Each channel is one sensor identity with static metadata: a unit, a short
code used in the exports, a long descriptive name, and the simulation state
field it samples. The metadata lives in a single lookup table so adding a
channel means adding one row.

Example:
    >>> from rocket_telemetry.channels import Channel, CHANNELS
    >>> Channel.THRUST.code
    'Trst'
    >>> len(CHANNELS)
    29
"""

from enum import Enum
from typing import NamedTuple


class Channel(Enum):
    """Fixed set of telemetry channels, in emission order."""

    # Flight profile
    ACCELERATION = "acceleration"
    ALTITUDE = "altitude"
    VELOCITY = "velocity"

    # Engine
    CHAMBER_PRESSURE = "chamber_pressure"
    CHAMBER_TEMPERATURE = "chamber_temperature"
    OXIDIZER_PRESSURE = "oxidizer_pressure"
    OXIDIZER_FLOW_RATE = "oxidizer_flow_rate"
    OXIDIZER_TEMPERATURE = "oxidizer_temperature"
    FUEL_PRESSURE = "fuel_pressure"
    FUEL_FLOW_RATE = "fuel_flow_rate"
    FUEL_TEMPERATURE = "fuel_temperature"
    TURBOPUMP_RPM = "turbopump_rpm"
    THRUST = "thrust"
    SPECIFIC_IMPULSE = "specific_impulse"
    NOZZLE_TEMPERATURE = "nozzle_temperature"

    # GNC
    ROLL_ANGLE = "roll_angle"
    PITCH_ANGLE = "pitch_angle"
    YAW_ANGLE = "yaw_angle"
    ROLL_RATE = "roll_rate"
    PITCH_RATE = "pitch_rate"
    YAW_RATE = "yaw_rate"
    LATITUDE = "latitude"
    LONGITUDE = "longitude"

    # Vibration
    VIBRATION_X = "vibration_x"
    VIBRATION_Y = "vibration_y"
    VIBRATION_Z = "vibration_z"
    VIBRATION_FREQ = "vibration_freq"

    # Vehicle status
    MISSION_PHASE = "mission_phase"
    BATTERY_VOLTAGE = "battery_voltage"

    def __str__(self) -> str:
        return self.name

    @property
    def info(self) -> "ChannelInfo":
        return CHANNEL_INFO[self]

    @property
    def code(self) -> str:
        """Short code used as ``sensor_type`` in the exports."""
        return CHANNEL_INFO[self].code

    @property
    def unit(self) -> str:
        return CHANNEL_INFO[self].unit

    @property
    def long_name(self) -> str:
        return CHANNEL_INFO[self].name


class ChannelInfo(NamedTuple):
    """Static metadata for one channel."""

    unit: str
    code: str
    name: str
    state_field: str


CHANNEL_INFO: dict[Channel, ChannelInfo] = {
    Channel.ACCELERATION: ChannelInfo("m/s^2", "acc", "acceleration_mps2", "acceleration_mps2"),
    Channel.ALTITUDE: ChannelInfo("m", "alt", "altitude_m", "altitude_m"),
    Channel.VELOCITY: ChannelInfo("m/s", "vel", "velocity_mps", "velocity_mps"),
    Channel.CHAMBER_PRESSURE: ChannelInfo("Pa", "cmb_pa", "chamber_pressure_pa", "chamber_pressure_pa"),
    Channel.CHAMBER_TEMPERATURE: ChannelInfo("K", "cmb_k", "chamber_temp_k", "chamber_temperature_k"),
    Channel.OXIDIZER_PRESSURE: ChannelInfo("Pa", "ox_pa", "oxidizer_pressure_pa", "oxidizer_pressure_pa"),
    Channel.OXIDIZER_FLOW_RATE: ChannelInfo(
        "kg/s", "Ox_f", "oxidizer_flow_rate_kgps", "oxidizer_flow_rate_kgps"
    ),
    Channel.OXIDIZER_TEMPERATURE: ChannelInfo(
        "K", "Ox_k", "oxidizer_temperature_k", "oxidizer_temperature_k"
    ),
    Channel.FUEL_PRESSURE: ChannelInfo("Pa", "F_pa", "fuel_pressure_pa", "fuel_pressure_pa"),
    Channel.FUEL_FLOW_RATE: ChannelInfo("kg/s", "F_f", "fuel_flow_rate_kgps", "fuel_flow_rate_kgps"),
    Channel.FUEL_TEMPERATURE: ChannelInfo("K", "F_k", "fuel_temperature_k", "fuel_temperature_k"),
    Channel.TURBOPUMP_RPM: ChannelInfo("RPM", "Rpm", "turbopump_rpm", "turbopump_rpm"),
    Channel.THRUST: ChannelInfo("N", "Trst", "thrust_n", "thrust_n"),
    Channel.SPECIFIC_IMPULSE: ChannelInfo("s", "SI", "specific_impulse_s", "specific_impulse_s"),
    Channel.NOZZLE_TEMPERATURE: ChannelInfo(
        "K", "Nz", "nozzle_temperature_k", "nozzle_temperature_k"
    ),
    Channel.ROLL_ANGLE: ChannelInfo("deg", "RA", "roll_angle_deg", "roll_deg"),
    Channel.PITCH_ANGLE: ChannelInfo("deg", "PA", "pitch_angle_deg", "pitch_deg"),
    Channel.YAW_ANGLE: ChannelInfo("deg", "YA", "yaw_angle_deg", "yaw_deg"),
    Channel.ROLL_RATE: ChannelInfo("deg/s", "RR", "roll_rate_dps", "roll_rate_dps"),
    Channel.PITCH_RATE: ChannelInfo("deg/s", "PR", "pitch_rate_dps", "pitch_rate_dps"),
    Channel.YAW_RATE: ChannelInfo("deg/s", "YR", "yaw_rate_dps", "yaw_rate_dps"),
    Channel.LATITUDE: ChannelInfo("deg", "Lat", "latitude_deg", "latitude_deg"),
    Channel.LONGITUDE: ChannelInfo("deg", "Lng", "longitude_deg", "longitude_deg"),
    Channel.VIBRATION_X: ChannelInfo("g", "VbX", "vibration_x_g", "vibration_x_g"),
    Channel.VIBRATION_Y: ChannelInfo("g", "VbY", "vibration_y_g", "vibration_y_g"),
    Channel.VIBRATION_Z: ChannelInfo("g", "VbZ", "vibration_z_g", "vibration_z_g"),
    Channel.VIBRATION_FREQ: ChannelInfo("Hz", "Vb_hz", "vibration_freq_hz", "vibration_freq_hz"),
    Channel.MISSION_PHASE: ChannelInfo("phase", "Ph", "mission_phase_index", "mission_phase"),
    Channel.BATTERY_VOLTAGE: ChannelInfo("V", "Bat_v", "battery_voltage_v", "battery_voltage_v"),
}

# Emission order for every tick
CHANNELS: tuple[Channel, ...] = tuple(Channel)

CHANNEL_COUNT: int = len(CHANNELS)

_BY_CODE: dict[str, Channel] = {info.code: channel for channel, info in CHANNEL_INFO.items()}


def channel_from_code(code: str) -> Channel:
    """Look up a channel by its short code.

    Raises:
        KeyError: If no channel uses this code
    """
    try:
        return _BY_CODE[code]
    except KeyError:
        raise KeyError(f"Unknown channel code '{code}'. Available: {sorted(_BY_CODE)}") from None


def list_channels() -> list[str]:
    """List all channel short codes in emission order."""
    return [channel.code for channel in CHANNELS]
