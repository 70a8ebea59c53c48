from datetime import datetime, timezone

import pytest

from tempgate.measurement import MeasurementRecord, Quantity


@pytest.fixture
def celsius_record() -> MeasurementRecord:
    """
    21.5 °C from sensor s1 at 2021-01-01T00:00:01.500Z.
    """
    return MeasurementRecord(
        sensor_id="s1",
        time=datetime(2021, 1, 1, 0, 0, 1, 500000, tzinfo=timezone.utc),
        measurement=Quantity(value=21.5, unit="°C"),
    )


@pytest.fixture
def whole_degree_record() -> MeasurementRecord:
    return MeasurementRecord(
        sensor_id="s2",
        time=datetime(2021, 1, 1, tzinfo=timezone.utc),
        measurement=Quantity(value=10, unit="°C"),
    )
