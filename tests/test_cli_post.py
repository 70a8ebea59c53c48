"""
CLI tests driven through click's CliRunner.
requests.Session is patched so nothing leaves the machine.
"""

import json
from unittest.mock import Mock, patch

from click.testing import CliRunner
from tempgate.__main__ import main

READING_ARGS = ["--sensor-id", "s1", "--value", "21.5", "--unit", "°C", "--time", "2021-01-01T00:00:01.500Z"]


def make_session(status_code):
    session = Mock()
    session.post.return_value = Mock(status_code=status_code, reason="")
    return session


def test_post_command_success():
    runner = CliRunner()
    session = make_session(201)
    with patch("tempgate.poster.requests.Session", return_value=session):
        res = runner.invoke(main, ["post", "-u", "http://x/m", "-s", "diana", *READING_ARGS])
    assert res.exit_code == 0, res.output
    assert "Posted s1" in res.output
    body = json.loads(session.post.call_args.kwargs["data"])
    assert body == {"sensorId": "s1", "time": 1609459201, "quantity": "21.5"}


def test_post_command_failure_exits_nonzero():
    runner = CliRunner()
    with patch("tempgate.poster.requests.Session", return_value=make_session(500)):
        res = runner.invoke(main, ["post", "-u", "http://x/m", "-s", "spark", *READING_ARGS])
    assert res.exit_code == 1


def test_post_command_reads_environment():
    runner = CliRunner()
    session = make_session(200)
    env = {"TEMPGATE_URL": "http://env/m", "TEMPGATE_SERVER_TYPE": "SPARK", "TEMPGATE_TIMEOUT": "4"}
    with patch("tempgate.poster.requests.Session", return_value=session):
        res = runner.invoke(main, ["post", *READING_ARGS], env=env)
    assert res.exit_code == 0, res.output
    call = session.post.call_args
    assert call.args[0] == "http://env/m"
    assert call.kwargs["data"] == b"name=s1&value=21.5&unit=Cel"
    assert call.kwargs["timeout"] == 4.0


def test_post_command_rejects_bad_time():
    runner = CliRunner()
    res = runner.invoke(
        main,
        ["post", "-u", "http://x/m", "-s", "diana", "--sensor-id", "s1", "--value", "1", "--unit", "K", "--time", "yesterday"],
    )
    assert res.exit_code == 2


def test_post_file_command(tmp_path):
    path = tmp_path / "readings.csv"
    path.write_text(
        "sensor_id,time,value,unit\n"
        "s1,2021-01-01T00:00:00Z,21.5,°C\n"
        "s2,2021-01-01T00:00:10Z,10,°C\n"
        "s3,bad,1,°C\n",
        encoding="utf-8",
    )
    runner = CliRunner()
    with patch("tempgate.poster.requests.Session", return_value=make_session(204)):
        res = runner.invoke(main, ["post-file", str(path), "-u", "http://x/m", "-s", "spark"])
    assert res.exit_code == 0, res.output
    assert "Errors found in readings" in res.output
    assert "Posted 2 of 2 readings" in res.output


def test_post_file_command_reports_failures(tmp_path):
    path = tmp_path / "readings.csv"
    path.write_text("sensor_id,time,value,unit\ns1,2021-01-01T00:00:00Z,21.5,°C\n", encoding="utf-8")
    runner = CliRunner()
    with patch("tempgate.poster.requests.Session", return_value=make_session(400)):
        res = runner.invoke(main, ["post-file", str(path), "-u", "http://x/m", "-s", "diana"])
    assert res.exit_code == 1
    assert "Posted 0 of 1 readings" in res.output


def test_preview_prints_spark_body_without_network():
    runner = CliRunner()
    with patch("tempgate.poster.requests.Session") as session_cls:
        res = runner.invoke(main, ["preview", "-s", "spark", *READING_ARGS])
    session_cls.assert_not_called()
    assert res.exit_code == 0, res.output
    assert res.output.strip() == "name=s1&value=21.5&unit=Cel"


def test_preview_unsupported_exits_nonzero():
    runner = CliRunner()
    res = runner.invoke(main, ["preview", "-s", "unsupported", *READING_ARGS])
    assert res.exit_code == 1
