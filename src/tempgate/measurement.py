"""
Measurement domain model.

Defines the Quantity and MeasurementRecord dataclasses for sensor readings.
"""

import math
import numbers
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


@dataclass(frozen=True)
class Quantity:
    """
    A numeric value paired with its unit symbol.

    Attributes:
        value: Numeric reading (int or float; booleans are rejected).
        unit: Unit symbol as written by the sensor (e.g. '°C', 'Cel', 'hPa').
    """

    value: float
    unit: str

    def __post_init__(self):
        if isinstance(self.value, bool) or not isinstance(self.value, numbers.Real):
            raise ValueError(f"Quantity value must be a number, got {self.value!r}")
        if isinstance(self.value, float) and not math.isfinite(self.value):
            raise ValueError(f"Quantity value must be finite, got {self.value!r}")
        if not isinstance(self.unit, str) or not self.unit.strip():
            raise ValueError(f"Invalid unit: {self.unit!r}")

    def __str__(self) -> str:
        return f"{format_number(self.value)} {self.unit}"


@dataclass(frozen=True)
class MeasurementRecord:
    """
    Represents a single reading taken by a sensor.

    Attributes:
        sensor_id: Identifier of the sensor that took the reading.
        time: When the reading was taken. Naive datetimes are treated as UTC.
        measurement: The measured Quantity.
    """

    sensor_id: str
    time: datetime
    measurement: Quantity

    def __post_init__(self):
        if not isinstance(self.sensor_id, str) or not self.sensor_id.strip():
            raise ValueError(f"Invalid sensor ID: {self.sensor_id!r}")
        if not isinstance(self.time, datetime):
            raise ValueError(f"time must be a datetime, got {type(self.time).__name__}")
        if not isinstance(self.measurement, Quantity):
            raise ValueError(
                f"measurement must be a Quantity, got {type(self.measurement).__name__}"
            )

    @property
    def epoch_seconds(self) -> int:
        """Timestamp as whole seconds since the Unix epoch, truncated towards the past."""
        ts = self.time if self.time.tzinfo else self.time.replace(tzinfo=timezone.utc)
        return (ts - _EPOCH) // timedelta(seconds=1)


def format_number(value: float) -> str:
    """
    Render a numeric value in its plain string form.

    Integral floats drop the trailing '.0' (10.0 -> '10'); everything else uses
    the shortest repr Python produces (21.5 -> '21.5').
    """
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)
