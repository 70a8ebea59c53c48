"""
ASCII unit symbols.

Sensors report units the way they print on a label ('°C', 'µg/m³', 'kΩ').
Form-encoded back-ends want plain ASCII, so symbols are rewritten using the
case-sensitive UCUM conventions:

    °C -> Cel       °F -> [degF]     ° -> deg
    Ω  -> Ohm       ‰  -> [ppth]     µ -> u
    ²  -> 2         ⁻¹ -> -1         · -> .

Symbols that are already ASCII pass through untouched.
"""

from __future__ import annotations

from typing import Dict


class UnitFormatError(ValueError):
    """Raised when a unit symbol has no ASCII rendering."""


# Multi-character symbols, replaced before single characters so '°C' wins over '°'
_SYMBOLS: Dict[str, str] = {
    "°C": "Cel",
    "°F": "[degF]",
    "°K": "K",
}

_CHARACTERS: Dict[str, str] = {
    "℃": "Cel",
    "℉": "[degF]",
    "°": "deg",
    "Ω": "Ohm",  # GREEK CAPITAL LETTER OMEGA
    "\u2126": "Ohm",  # OHM SIGN
    "‰": "[ppth]",
    "µ": "u",  # MICRO SIGN
    "μ": "u",  # GREEK SMALL LETTER MU
    "Å": "Ao",
    "·": ".",
    "⋅": ".",
    "×": ".",
    "⁰": "0",
    "¹": "1",
    "²": "2",
    "³": "3",
    "⁴": "4",
    "⁵": "5",
    "⁶": "6",
    "⁷": "7",
    "⁸": "8",
    "⁹": "9",
    "⁻": "-",
    "⁺": "+",
}

_TRANSLATION = str.maketrans(_CHARACTERS)


def format_ascii(unit: str) -> str:
    """
    Render a unit symbol using ASCII characters only.

    Parameters
    ----------
    unit : str
        Unit symbol as reported by the sensor, e.g. '°C' or 'm³/h'.

    Returns
    -------
    str
        ASCII-only symbol, e.g. 'Cel' or 'm3/h'.

    Raises
    ------
    UnitFormatError
        If the symbol is empty or still contains non-ASCII characters after
        translation.
    """
    if not isinstance(unit, str) or not unit.strip():
        raise UnitFormatError(f"Cannot format empty unit {unit!r}")

    symbol = unit.strip()
    if symbol.isascii():
        return symbol

    for raw, ascii_symbol in _SYMBOLS.items():
        symbol = symbol.replace(raw, ascii_symbol)
    symbol = symbol.translate(_TRANSLATION)

    if not symbol.isascii():
        leftovers = sorted({ch for ch in symbol if not ch.isascii()})
        raise UnitFormatError(f"No ASCII symbol for {unit!r} (unmapped: {''.join(leftovers)!r})")
    return symbol
