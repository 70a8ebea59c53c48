"""
POSTs MeasurementRecords to a gateway back-end.

High level
----------
A MeasurementRecordPoster is bound to one target URL and one ServerType. Each
call to `post` serializes the record in that back-end's wire format, performs
a single HTTP POST and reports the outcome as a boolean:

- DIANA : JSON body {"sensorId", "time", "quantity"} (quantity is the bare value)
- SPARK : form body name=<sensor>&value=<value>&unit=<ASCII unit symbol>
- other : nothing is sent; a warning is logged and the call returns False

Key behaviors
-------------
- A fresh `requests.Session` is opened and closed on every call; instances hold
  no mutable state and can be shared between threads. Pooling connections
  would make the session shared state and is not done here.
- No retries. Status 200/201/204 means success, anything else is a failure.
- `post` never raises for serialization or transport problems; they are logged
  and collapse to False. Only a missing record is rejected with ValueError.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, Tuple
from urllib.parse import urlencode

import requests

from .measurement import MeasurementRecord, format_number
from .server_type import ServerType
from .unit_format import format_ascii

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 10.0
SUCCESS_STATUS_CODES = frozenset({200, 201, 204})


# ------------------------------------------------------------------------------
# Serializers (pure functions: record -> body text)
# ------------------------------------------------------------------------------


def diana_payload(record: MeasurementRecord) -> Dict[str, Any]:
    """JSON object for DIANA. The unit is not part of the payload."""
    return {
        "sensorId": record.sensor_id,
        "time": record.epoch_seconds,
        "quantity": format_number(record.measurement.value),
    }


def serialize_diana(record: MeasurementRecord) -> str:
    return json.dumps(diana_payload(record), indent=2, ensure_ascii=False)


def spark_form(record: MeasurementRecord) -> List[Tuple[str, str]]:
    """Ordered form fields for SPARK."""
    return [
        ("name", record.sensor_id),
        ("value", format_number(record.measurement.value)),
        ("unit", format_ascii(record.measurement.unit)),
    ]


def serialize_spark(record: MeasurementRecord) -> str:
    return urlencode(spark_form(record))


@dataclass(frozen=True)
class WireFormat:
    """How one back-end wants its readings: serializer plus fixed headers."""

    serialize: Callable[[MeasurementRecord], str]
    content_type: str
    accept: str

    def headers(self) -> Dict[str, str]:
        return {"Content-Type": self.content_type, "Accept": self.accept}


WIRE_FORMATS: Dict[ServerType, WireFormat] = {
    ServerType.DIANA: WireFormat(
        serialize=serialize_diana,
        content_type="application/json; charset=utf-8",
        accept="text/plain, application/json",
    ),
    ServerType.SPARK: WireFormat(
        serialize=serialize_spark,
        content_type="application/x-www-form-urlencoded",
        accept="text/plain",
    ),
}


def render_body(server_type: ServerType, record: MeasurementRecord) -> Optional[str]:
    """
    Body that would be posted for `record`, or None if the server type is unsupported.

    Raises whatever the serializer raises (e.g. UnitFormatError).
    """
    wire = WIRE_FORMATS.get(server_type)
    if wire is None:
        return None
    return wire.serialize(record)


# ------------------------------------------------------------------------------
# Poster
# ------------------------------------------------------------------------------


class MeasurementRecordPoster:
    """
    POSTs MeasurementRecords to a given URL.

    Instances are thread-safe.
    """

    def __init__(
        self,
        post_target: str,
        server_type: ServerType,
        *,
        timeout: Optional[float] = DEFAULT_TIMEOUT,
    ):
        """
        Parameters
        ----------
        post_target : str
            The POST URL. Must be non-empty.
        server_type : ServerType
            The back-end type; decides the wire format.
        timeout : float, optional
            Seconds to wait on connect/read (default 10.0). None waits forever.
        """
        if post_target is None or not str(post_target).strip():
            raise ValueError("POST URL is empty")
        self._post_target = str(post_target).strip()
        self._server_type = server_type
        self._timeout = timeout

    @property
    def post_target(self) -> str:
        return self._post_target

    @property
    def server_type(self) -> ServerType:
        return self._server_type

    @property
    def timeout(self) -> Optional[float]:
        return self._timeout

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(post_target={self._post_target!r}, "
            f"server_type={self._server_type!r})"
        )

    def post(self, record: MeasurementRecord) -> bool:
        """
        POST a MeasurementRecord. A new connection is established and torn
        down with every call.

        Parameters
        ----------
        record : MeasurementRecord
            A non-None record to be posted.

        Returns
        -------
        bool
            True if the service answered 200, 201 or 204; False otherwise,
            including when nothing was sent.

        Raises
        ------
        ValueError
            If `record` is None.
        """
        if record is None:
            raise ValueError("record is None")
        logger.debug("Posting: %s", record)

        session: Optional[requests.Session] = None
        try:
            response: Optional[requests.Response] = None
            wire = WIRE_FORMATS.get(self._server_type)
            if wire is None:
                logger.warning("Unsupported server type %r, not posting.", self._server_type)
            else:
                body = wire.serialize(record)
                logger.debug("Converted to %s as: %s", wire.content_type, body)
                session = requests.Session()
                response = session.post(
                    self._post_target,
                    data=body.encode("utf-8"),
                    headers=wire.headers(),
                    timeout=self._timeout,
                )

            if response is None:
                logger.warning("No response found.")
                return False

            logger.debug("Response status: %s %s", response.status_code, response.reason)
            if response.status_code in SUCCESS_STATUS_CODES:
                logger.debug("Back-end accepted the reading with %s", response.status_code)
                return True
            logger.warning("Response code %s is not one of 200/201/204", response.status_code)
            logger.warning("More details: %s %s", response.status_code, response.reason)
            return False
        except Exception:
            logger.error("Error posting to %s", self._post_target, exc_info=True)
            return False
        finally:
            if session is not None:
                try:
                    session.close()
                except Exception:
                    logger.warning("Error closing session", exc_info=True)
