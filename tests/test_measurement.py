from datetime import datetime, timedelta, timezone

import pytest
from tempgate.measurement import MeasurementRecord, Quantity, format_number


def test_valid_record_instantiation(celsius_record):
    """A valid MeasurementRecord should be created without error."""
    assert isinstance(celsius_record, MeasurementRecord)
    assert celsius_record.measurement.unit == "°C"


def test_record_is_immutable(celsius_record):
    with pytest.raises(AttributeError):
        celsius_record.sensor_id = "other"


def test_epoch_seconds_truncates_fraction(celsius_record):
    """2021-01-01T00:00:01.500Z is 1609459201.5; the fraction is dropped."""
    assert celsius_record.epoch_seconds == 1609459201


def test_epoch_seconds_honours_offset():
    """The same instant expressed in another zone gives the same epoch value."""
    cet = timezone(timedelta(hours=1))
    record = MeasurementRecord(
        sensor_id="s1",
        time=datetime(2021, 1, 1, 1, 0, 1, 999999, tzinfo=cet),
        measurement=Quantity(1, "K"),
    )
    assert record.epoch_seconds == 1609459201


def test_naive_time_is_treated_as_utc():
    record = MeasurementRecord("s1", datetime(1970, 1, 1, 0, 1), Quantity(1, "K"))
    assert record.epoch_seconds == 60


@pytest.mark.parametrize("bad_sensor", ["", "   ", None, 42])
def test_invalid_sensor_id_raises(bad_sensor):
    with pytest.raises(ValueError):
        MeasurementRecord(bad_sensor, datetime.now(timezone.utc), Quantity(1, "K"))


def test_time_must_be_datetime():
    with pytest.raises(ValueError):
        MeasurementRecord("s1", "2021-01-01T00:00:00Z", Quantity(1, "K"))


def test_measurement_must_be_quantity():
    with pytest.raises(ValueError):
        MeasurementRecord("s1", datetime.now(timezone.utc), 21.5)


@pytest.mark.parametrize("bad_value", [True, "21.5", None, float("nan"), float("inf")])
def test_invalid_quantity_value_raises(bad_value):
    """Quantity values must be finite real numbers."""
    with pytest.raises(ValueError):
        Quantity(bad_value, "°C")


@pytest.mark.parametrize("bad_unit", ["", "  ", None])
def test_invalid_quantity_unit_raises(bad_unit):
    with pytest.raises(ValueError):
        Quantity(1.0, bad_unit)


def test_quantity_str_includes_unit():
    assert str(Quantity(21.5, "°C")) == "21.5 °C"


@pytest.mark.parametrize(
    "value, expected",
    [(21.5, "21.5"), (10, "10"), (10.0, "10"), (-3.25, "-3.25"), (0.1, "0.1"), (1e-07, "1e-07")],
)
def test_format_number(value, expected):
    assert format_number(value) == expected
