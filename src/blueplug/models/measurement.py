"""Physical measurements decoded from sensor advertisements."""

from __future__ import annotations

from enum import StrEnum
from typing import Annotated, ClassVar, Literal, assert_never

from pydantic import BaseModel, Field


class MeasurementKind(StrEnum):
    HUMIDITY = "humidity"
    TEMPERATURE = "temperature"
    BATTERY = "battery"
    VOLTAGE = "voltage"


class _MeasurementBase(BaseModel):
    model_config = {"frozen": True, "extra": "forbid"}

    unit: ClassVar[str]

    value: float = Field(allow_inf_nan=False)


class Humidity(_MeasurementBase):
    """Relative humidity in percent."""

    unit: ClassVar[str] = "%"
    kind: Literal[MeasurementKind.HUMIDITY] = MeasurementKind.HUMIDITY


class Temperature(_MeasurementBase):
    """Temperature in degrees Celsius."""

    unit: ClassVar[str] = "°C"
    kind: Literal[MeasurementKind.TEMPERATURE] = MeasurementKind.TEMPERATURE


class Battery(_MeasurementBase):
    """Remaining battery charge in percent."""

    unit: ClassVar[str] = "%"
    kind: Literal[MeasurementKind.BATTERY] = MeasurementKind.BATTERY


class Voltage(_MeasurementBase):
    """Battery potential in volts."""

    unit: ClassVar[str] = "V"
    kind: Literal[MeasurementKind.VOLTAGE] = MeasurementKind.VOLTAGE


Measurement = Annotated[
    Humidity | Temperature | Battery | Voltage, Field(discriminator="kind")
]


def sort_key(measurement: Measurement) -> int:
    """Position of the measurement's kind in the canonical emission order."""
    match measurement:
        case Humidity():
            return 0
        case Temperature():
            return 1
        case Battery():
            return 2
        case Voltage():
            return 3
        case _:
            assert_never(measurement)

