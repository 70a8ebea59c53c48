import pathlib
import typing

import pandas as pd
from stairval.notepad import Notepad

from .measurement import MeasurementRecord, Quantity

# Columns that need renaming → MeasurementRecord fields
RENAME_MAP = {
    "sensor": "sensor_id",
    "sensorid": "sensor_id",
    "name": "sensor_id",
    "timestamp": "time",
    "quantity": "value",
    "measurement": "value",
}

# Minimal required columns (after renaming)
READING_KEY_COLUMNS = {"sensor_id", "time", "value", "unit"}

_EXCEL_SUFFIXES = {".xlsx", ".xls"}


def _normalize_headers(df: pd.DataFrame) -> pd.DataFrame:
    df.columns = (
        df.columns.astype(str)
        .str.strip()
        .str.replace(r"\s*\(.*?\)", "", regex=True)  # drop any "(…)"
        .str.replace(r"\s+", "_", regex=True)  # spaces → underscore
        .str.replace(":", "", regex=False)  # drop colons
        .str.lower()
    )
    return df.rename(
        columns={orig: target for orig, target in RENAME_MAP.items() if orig in df.columns}
    )


def load_readings_table(path: str) -> pd.DataFrame:
    """
    Read a table of readings from CSV or Excel:
      - first row = header
      - normalize all headers to snake_case lowercase
      - apply renames from RENAME_MAP
    Excel workbooks are read from their first sheet only.
    """
    suffix = pathlib.Path(path).suffix.lower()
    if suffix in _EXCEL_SUFFIXES:
        df = pd.read_excel(path, sheet_name=0, header=0)
    else:
        df = pd.read_csv(path, header=0)
    return _normalize_headers(df)


def _cell_to_str(cell: typing.Any) -> str:
    if cell is None or pd.isna(cell):
        return ""
    # numeric IDs come back from pandas as floats (101 → 101.0)
    if isinstance(cell, float) and cell.is_integer():
        return str(int(cell))
    return str(cell).strip()


def parse_reading_row(
    row: pd.Series, sheet_name: str, notepad: Notepad
) -> typing.Optional[MeasurementRecord]:
    """
    Build one MeasurementRecord from a table row.
    Problems are written to the notepad and None is returned.
    """
    label = f"Sheet {sheet_name!r} row {row.name}"

    time_cell = row.get("time")
    if time_cell is None or pd.isna(time_cell):
        notepad.add_error(f"{label}: missing time")
        return None
    try:
        time = pd.Timestamp(time_cell).to_pydatetime()
    except (ValueError, TypeError) as e:
        notepad.add_error(f"{label}: cannot parse time {time_cell!r}: {e}")
        return None

    value_cell = row.get("value")
    try:
        value = float(value_cell)
    except (ValueError, TypeError):
        notepad.add_error(f"{label}: value {value_cell!r} is not a number")
        return None

    try:
        return MeasurementRecord(
            sensor_id=_cell_to_str(row.get("sensor_id")),
            time=time,
            measurement=Quantity(value=value, unit=_cell_to_str(row.get("unit"))),
        )
    except ValueError as e:
        notepad.add_error(f"{label}: {e}")
        return None


def map_readings(df: pd.DataFrame, notepad: Notepad, sheet_name: str = "readings") -> list[MeasurementRecord]:
    """
    Turn a normalized readings table into MeasurementRecords, skipping bad rows.
    """
    missing = READING_KEY_COLUMNS - set(df.columns)
    if missing:
        notepad.add_error(f"Sheet {sheet_name!r}: missing required columns {sorted(missing)}")
        return []

    records: list[MeasurementRecord] = []
    for _, row in df.iterrows():
        record = parse_reading_row(row, sheet_name, notepad)
        if record is not None:
            records.append(record)
    return records
