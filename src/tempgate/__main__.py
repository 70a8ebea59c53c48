"""
Command‑line interface for the tempgate poster.
Posts single readings or whole tables of readings to a DIANA or SPARK back-end.
"""

import click
import logging
import sys
import typing

from datetime import datetime, timezone
from stairval.notepad import create_notepad

from .loader import load_readings_table, map_readings
from .measurement import MeasurementRecord, Quantity
from .poster import DEFAULT_TIMEOUT, MeasurementRecordPoster, render_body
from .server_type import ServerType
from .unit_format import UnitFormatError

SERVER_TYPE_LABELS = [member.name.lower() for member in ServerType]


def _server_type_option(f):
    return click.option(
        "-s",
        "--server-type",
        "server_type_label",
        envvar="TEMPGATE_SERVER_TYPE",
        required=True,
        type=click.Choice(SERVER_TYPE_LABELS, case_sensitive=False),
        help="back-end type (env: TEMPGATE_SERVER_TYPE)",
    )(f)


def _target_options(f):
    f = click.option(
        "--timeout",
        envvar="TEMPGATE_TIMEOUT",
        default=DEFAULT_TIMEOUT,
        show_default=True,
        type=click.FloatRange(min=0, min_open=True),
        help="seconds to wait for the back-end (env: TEMPGATE_TIMEOUT)",
    )(f)
    f = _server_type_option(f)
    f = click.option(
        "-u",
        "--url",
        "post_target",
        envvar="TEMPGATE_URL",
        required=True,
        help="POST URL of the back-end (env: TEMPGATE_URL)",
    )(f)
    return f


def _reading_options(f):
    f = click.option(
        "--time",
        "time_text",
        default=None,
        help="ISO‑8601 timestamp of the reading (default: now, UTC)",
    )(f)
    f = click.option("--unit", required=True, help="unit symbol, e.g. '°C'")(f)
    f = click.option("--value", required=True, type=float, help="numeric reading")(f)
    f = click.option("--sensor-id", required=True, help="sensor identifier")(f)
    return f


def _logging_options(f):
    f = click.option(
        "--log-file-path",
        type=click.Path(dir_okay=False, writable=True),
        help="Append timestamped logs to this file",
    )(f)
    f = click.option(
        "--verbose-logging",
        is_flag=True,
        help="Also emit debug logs to stderr",
    )(f)
    return f


@click.group()
def main():
    """tempgate: post sensor readings to DIANA or SPARK back-ends."""
    pass


@main.command(name="post")
@_target_options
@_reading_options
@_logging_options
def post(
    post_target: str,
    server_type_label: str,
    timeout: float,
    sensor_id: str,
    value: float,
    unit: str,
    time_text: typing.Optional[str],
    verbose_logging: bool,
    log_file_path: typing.Optional[str],
):
    """
    POST a single reading and report whether the back-end accepted it.
    """
    _configure_logging(verbose_logging, log_file_path)
    record = _build_record(sensor_id, value, unit, time_text)
    poster = _build_poster(post_target, server_type_label, timeout)

    if not poster.post(record):
        click.echo(f"Error: {poster.post_target} did not accept the reading", err=True)
        sys.exit(1)
    click.echo(f"Posted {record.sensor_id} = {record.measurement} to {poster.post_target}")


@main.command(name="post-file")
@click.argument(
    "readings_path",
    type=click.Path(exists=True, dir_okay=False),
)
@_target_options
@_logging_options
def post_file(
    readings_path: str,
    post_target: str,
    server_type_label: str,
    timeout: float,
    verbose_logging: bool,
    log_file_path: typing.Optional[str],
):
    """
    Read a CSV or Excel table (columns: sensor_id, time, value, unit) and
    POST every valid row. Rows that cannot be parsed are reported and skipped.
    """
    _configure_logging(verbose_logging, log_file_path)
    poster = _build_poster(post_target, server_type_label, timeout)

    logging.info(f"Loading readings from '{readings_path}'")
    try:
        table = load_readings_table(readings_path)
    except Exception as e:
        click.echo(f"Error: failed to read '{readings_path}': {e}", err=True)
        sys.exit(1)

    notepad = create_notepad("readings")
    records = map_readings(table, notepad)
    _report_issues(notepad)

    failed = [record for record in records if not poster.post(record)]

    click.echo(f"Posted {len(records) - len(failed)} of {len(records)} readings to {poster.post_target}")
    if failed:
        click.echo(f"Failed {len(failed)} readings", err=True)
        sys.exit(1)


@main.command(name="preview")
@_server_type_option
@_reading_options
def preview(
    server_type_label: str,
    sensor_id: str,
    value: float,
    unit: str,
    time_text: typing.Optional[str],
):
    """
    Print the body a reading would be posted with, without sending it.
    """
    record = _build_record(sensor_id, value, unit, time_text)
    server_type = ServerType.from_label(server_type_label)
    try:
        body = render_body(server_type, record)
    except UnitFormatError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)
    if body is None:
        click.echo(f"Error: server type {server_type.name} has no wire format", err=True)
        sys.exit(1)
    click.echo(body)


def _configure_logging(verbose_logging: bool, log_file_path: typing.Optional[str]) -> None:
    handlers: list[logging.Handler] = []
    if log_file_path:
        handlers.append(logging.FileHandler(log_file_path, mode="a", encoding="utf-8"))
    if verbose_logging:
        handlers.append(logging.StreamHandler(sys.stderr))
    if handlers:
        logging.basicConfig(
            level=logging.DEBUG if verbose_logging else logging.INFO,
            format="%(asctime)s %(levelname)s %(name)s %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
            handlers=handlers,
        )


def _parse_time(time_text: typing.Optional[str]) -> datetime:
    # no timestamp given → now
    if not time_text:
        return datetime.now(timezone.utc)
    text = time_text.strip()
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    try:
        return datetime.fromisoformat(text)
    except ValueError:
        raise click.BadParameter(f"not an ISO‑8601 timestamp: {time_text!r}", param_hint="'--time'")


def _build_record(
    sensor_id: str, value: float, unit: str, time_text: typing.Optional[str]
) -> MeasurementRecord:
    try:
        return MeasurementRecord(
            sensor_id=sensor_id,
            time=_parse_time(time_text),
            measurement=Quantity(value=value, unit=unit),
        )
    except ValueError as e:
        raise click.UsageError(str(e))


def _build_poster(post_target: str, server_type_label: str, timeout: float) -> MeasurementRecordPoster:
    try:
        return MeasurementRecordPoster(
            post_target, ServerType.from_label(server_type_label), timeout=timeout
        )
    except ValueError as e:
        raise click.UsageError(str(e))


def _report_issues(notepad):
    # if there were errors, show them
    if notepad.has_errors(include_subsections=True):
        click.echo("Errors found in readings:")
        for err in notepad.errors():
            click.echo(f"- {err}")
    # show any warnings but keep going
    if notepad.has_warnings(include_subsections=True):
        click.echo("Warnings found in readings:")
        for w in notepad.warnings():
            click.echo(f"- {w}")


if __name__ == "__main__":
    main()
