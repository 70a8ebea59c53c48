"""
Back-end server types.

Each server type selects the wire format a reading is posted in.
"""

from enum import Enum, auto


class ServerType(Enum):
    """
    Enumeration of the back-ends a gateway can post to.

    DIANA accepts JSON, SPARK accepts URL-encoded forms. UNSUPPORTED marks a
    back-end the poster knows nothing about; posting to it is a no-op.
    """
    DIANA = auto()
    SPARK = auto()
    UNSUPPORTED = auto()

    @classmethod
    def from_label(cls, label: str) -> "ServerType":
        """
        Convert a human‑readable label into the corresponding enum.
        Matching ignores case and surrounding whitespace.
        """
        key = label.strip().lower().replace("-", "_").replace(" ", "_")
        mapping = {
            "diana": cls.DIANA,
            "spark": cls.SPARK,
            "unsupported": cls.UNSUPPORTED,
        }
        try:
            return mapping[key]
        except KeyError:
            raise ValueError(f"Unknown server type label: {label!r}")
