"""KNX Datapoint Type (DPT) codec on top of the Telegram accessors.

The telegram buffer carries no format tag: the same payload bytes read as a
boolean, an integer, a float or text depending on which accessor is used.
This module is the caller-side tag. A DPT id picks the accessor pair that
writes a Python value into a Telegram and reads it back, plus metadata
(unit, range) for display.

Usage:
    from dpt import encode, decode, get_dpt_info

    encode(telegram, "9.001", 21.5)     # writes bytes 8-9, length = 3
    value = decode(telegram, "9.001")   # → 21.5
    info = get_dpt_info("9.001")        # → {"name": "Temperature", "unit": "°C", ...}
"""

import logging
from typing import Any, Callable, Optional

from knxtp import Telegram

logger = logging.getLogger("knxcodec.dpt")


class DPTInfo:
    """Metadata for a DPT."""

    __slots__ = ("id", "name", "unit", "min_val", "max_val", "encoding_size")

    def __init__(
        self,
        id: str,
        name: str,
        unit: str = "",
        min_val: Any = None,
        max_val: Any = None,
        encoding_size: int = 1,
    ):
        self.id = id
        self.name = name
        self.unit = unit
        self.min_val = min_val
        self.max_val = max_val
        self.encoding_size = encoding_size

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "unit": self.unit,
            "min": self.min_val,
            "max": self.max_val,
            "encoding_size": self.encoding_size,
        }


def _require_dict(value, dpt: str, keys: tuple[str, ...]) -> dict:
    if not isinstance(value, dict):
        raise ValueError(f"DPT {dpt} expects an object with keys {', '.join(keys)}")
    return value


# ---------------------------------------------------------------------------
# Encode/Decode functions
# ---------------------------------------------------------------------------


def _encode_dpt1(telegram: Telegram, value):
    """DPT 1.x — Boolean (bit 0 of the 6-bit first data byte)."""
    telegram.set_bool(bool(value))


def _decode_dpt1(telegram: Telegram) -> bool:
    return telegram.get_bool()


def _encode_dpt3(telegram: Telegram, value: dict):
    """DPT 3.x — Direction + 3-bit dimming/blinds step."""
    value = _require_dict(value, "3", ("direction", "step"))
    telegram.set_4bit_dimming_value(bool(value.get("direction", False)), int(value.get("step", 0)))


def _decode_dpt3(telegram: Telegram) -> dict:
    direction, step = telegram.get_4bit_dimming_value()
    return {"direction": direction, "step": step}


def _encode_dpt5(telegram: Telegram, value):
    """DPT 5.x — Unsigned 8-bit (0–255)."""
    telegram.set_1byte_uchar_value(max(0, min(255, int(value))))


def _decode_dpt5(telegram: Telegram) -> int:
    return telegram.get_1byte_uchar_value()


def _encode_dpt5_001(telegram: Telegram, value):
    """DPT 5.001 — Scaling (0–100% → 0–255)."""
    v = max(0.0, min(100.0, float(value)))
    telegram.set_1byte_uchar_value(round(v * 255.0 / 100.0))


def _decode_dpt5_001(telegram: Telegram) -> float:
    return round(telegram.get_1byte_uchar_value() * 100.0 / 255.0, 1)


def _encode_dpt5_003(telegram: Telegram, value):
    """DPT 5.003 — Angle (0–360° → 0–255)."""
    v = max(0.0, min(360.0, float(value)))
    telegram.set_1byte_uchar_value(round(v * 255.0 / 360.0))


def _decode_dpt5_003(telegram: Telegram) -> float:
    return round(telegram.get_1byte_uchar_value() * 360.0 / 255.0, 1)


def _encode_dpt7(telegram: Telegram, value):
    """DPT 7.x — Unsigned 16-bit (0–65535)."""
    telegram.set_2byte_uchar_value(max(0, min(65535, int(value))))


def _decode_dpt7(telegram: Telegram) -> int:
    return telegram.get_2byte_uchar_value()


def _encode_dpt8(telegram: Telegram, value):
    """DPT 8.x — Signed 16-bit (-32768 to 32767)."""
    telegram.set_2byte_int_value(max(-32768, min(32767, int(value))))


def _decode_dpt8(telegram: Telegram) -> int:
    return telegram.get_2byte_int_value()


def _encode_dpt9(telegram: Telegram, value):
    """DPT 9.x — 2-byte float, value = M * 2^E / 2048 with E in 0..7."""
    telegram.set_2byte_float_value(float(value))


def _decode_dpt9(telegram: Telegram) -> float:
    return telegram.get_2byte_float_value()


def _encode_dpt10(telegram: Telegram, value: dict):
    """DPT 10.x — Time of day (day, hour, minute, second)."""
    value = _require_dict(value, "10", ("day", "hour", "minute", "second"))
    telegram.set_3byte_time(
        int(value.get("day", 0)),
        int(value.get("hour", 0)),
        int(value.get("minute", 0)),
        int(value.get("second", 0)),
    )


def _decode_dpt10(telegram: Telegram) -> dict:
    return {
        "day": telegram.get_3byte_weekday_value(),
        "hour": telegram.get_3byte_hour_value(),
        "minute": telegram.get_3byte_minute_value(),
        "second": telegram.get_3byte_second_value(),
    }


def _encode_dpt11(telegram: Telegram, value: dict):
    """DPT 11.x — Date as laid out by this bus: year nibble, month nibble, day byte.

    The year is the raw 4-bit field (0–15), not a calendar year.
    """
    value = _require_dict(value, "11", ("year", "month", "day"))
    telegram.set_3byte_date(
        int(value.get("year", 0)),
        int(value.get("month", 1)),
        int(value.get("day", 1)),
    )


def _decode_dpt11(telegram: Telegram) -> dict:
    return {
        "year": telegram.get_3byte_date_year_value(),
        "month": telegram.get_3byte_date_month_value(),
        "day": telegram.get_3byte_date_day_value(),
    }


def _encode_dpt14(telegram: Telegram, value):
    """DPT 14.x — 4-byte IEEE 754 float."""
    telegram.set_4byte_float_value(float(value))


def _decode_dpt14(telegram: Telegram) -> float:
    return telegram.get_4byte_float_value()


def _encode_dpt16(telegram: Telegram, value: str):
    """DPT 16.x — 14-character string."""
    telegram.set_14byte_value(str(value))


def _decode_dpt16(telegram: Telegram) -> str:
    return telegram.get_14byte_value()


# ---------------------------------------------------------------------------
# DPT Registry
# ---------------------------------------------------------------------------

# (encoder, decoder, DPTInfo)
_REGISTRY: dict[str, tuple[Callable, Callable, DPTInfo]] = {}


def _register(dpt_id: str, encoder: Callable, decoder: Callable, info: DPTInfo):
    _REGISTRY[dpt_id] = (encoder, decoder, info)
    # Also register the main type (e.g., "1" for "1.001")
    main_type = dpt_id.split(".")[0]
    if main_type not in _REGISTRY:
        _REGISTRY[main_type] = (encoder, decoder, info)


# DPT 1.x — Boolean
_register("1", _encode_dpt1, _decode_dpt1, DPTInfo("1", "Boolean", "", False, True, 1))
_register("1.001", _encode_dpt1, _decode_dpt1, DPTInfo("1.001", "Switch", "", False, True, 1))
_register("1.002", _encode_dpt1, _decode_dpt1, DPTInfo("1.002", "Boolean", "", False, True, 1))
_register("1.003", _encode_dpt1, _decode_dpt1, DPTInfo("1.003", "Enable", "", False, True, 1))
_register("1.008", _encode_dpt1, _decode_dpt1, DPTInfo("1.008", "Up/Down", "", False, True, 1))
_register(
    "1.009", _encode_dpt1, _decode_dpt1, DPTInfo("1.009", "Open/Close", "", False, True, 1)
)

# DPT 3.x — Dimming/Blinds Control
_register("3", _encode_dpt3, _decode_dpt3, DPTInfo("3", "Control Dimming", "", None, None, 1))
_register(
    "3.007", _encode_dpt3, _decode_dpt3, DPTInfo("3.007", "Dimming Control", "", None, None, 1)
)
_register(
    "3.008", _encode_dpt3, _decode_dpt3, DPTInfo("3.008", "Blinds Control", "", None, None, 1)
)

# DPT 5.x — Unsigned 8-bit
_register("5", _encode_dpt5, _decode_dpt5, DPTInfo("5", "Unsigned 8-bit", "", 0, 255, 1))
_register(
    "5.001", _encode_dpt5_001, _decode_dpt5_001, DPTInfo("5.001", "Scaling", "%", 0, 100, 1)
)
_register("5.003", _encode_dpt5_003, _decode_dpt5_003, DPTInfo("5.003", "Angle", "°", 0, 360, 1))
_register(
    "5.010",
    _encode_dpt5,
    _decode_dpt5,
    DPTInfo("5.010", "Counter Pulses", "pulses", 0, 255, 1),
)

# DPT 7.x — Unsigned 16-bit
_register("7", _encode_dpt7, _decode_dpt7, DPTInfo("7", "Unsigned 16-bit", "", 0, 65535, 2))
_register("7.001", _encode_dpt7, _decode_dpt7, DPTInfo("7.001", "Pulses", "pulses", 0, 65535, 2))
_register(
    "7.005", _encode_dpt7, _decode_dpt7, DPTInfo("7.005", "Time (seconds)", "s", 0, 65535, 2)
)

# DPT 8.x — Signed 16-bit
_register("8", _encode_dpt8, _decode_dpt8, DPTInfo("8", "Signed 16-bit", "", -32768, 32767, 2))
_register(
    "8.001",
    _encode_dpt8,
    _decode_dpt8,
    DPTInfo("8.001", "Pulses Difference", "pulses", -32768, 32767, 2),
)

# DPT 9.x — 2-byte float (M * 2^E / 2048, E in 0..7)
_register("9", _encode_dpt9, _decode_dpt9, DPTInfo("9", "2-byte Float", "", -127.94, 127.94, 2))
_register(
    "9.001", _encode_dpt9, _decode_dpt9, DPTInfo("9.001", "Temperature", "°C", -127.94, 127.94, 2)
)
_register(
    "9.002",
    _encode_dpt9,
    _decode_dpt9,
    DPTInfo("9.002", "Temperature Diff", "K", -127.94, 127.94, 2),
)
_register("9.007", _encode_dpt9, _decode_dpt9, DPTInfo("9.007", "Humidity", "%", 0, 100, 2))

# DPT 10.x — Time of Day
_register("10", _encode_dpt10, _decode_dpt10, DPTInfo("10", "Time of Day", "", None, None, 3))
_register(
    "10.001", _encode_dpt10, _decode_dpt10, DPTInfo("10.001", "Time of Day", "", None, None, 3)
)

# DPT 11.x — Date (4-bit year)
_register("11", _encode_dpt11, _decode_dpt11, DPTInfo("11", "Date", "", None, None, 2))
_register("11.001", _encode_dpt11, _decode_dpt11, DPTInfo("11.001", "Date", "", None, None, 2))

# DPT 14.x — 4-byte float
_register("14", _encode_dpt14, _decode_dpt14, DPTInfo("14", "4-byte Float", "", None, None, 4))
_register(
    "14.056", _encode_dpt14, _decode_dpt14, DPTInfo("14.056", "Power (W)", "W", None, None, 4)
)
_register(
    "14.068",
    _encode_dpt14,
    _decode_dpt14,
    DPTInfo("14.068", "Temperature (°C)", "°C", None, None, 4),
)

# DPT 16.x — String
_register("16", _encode_dpt16, _decode_dpt16, DPTInfo("16", "String", "", None, None, 14))
_register(
    "16.000", _encode_dpt16, _decode_dpt16, DPTInfo("16.000", "ASCII String", "", None, None, 14)
)
_register(
    "16.001",
    _encode_dpt16,
    _decode_dpt16,
    DPTInfo("16.001", "ISO 8859-1 String", "", None, None, 14),
)


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def _lookup(dpt_id: str):
    entry = _REGISTRY.get(dpt_id)
    if not entry:
        # Try main type fallback
        entry = _REGISTRY.get(dpt_id.split(".")[0])
    return entry


class DPTCodec:
    """Central access point for DPT encoding/decoding."""

    @staticmethod
    def encode(telegram: Telegram, dpt_id: str, value: Any) -> Telegram:
        """Write a Python value into the telegram payload for the given DPT."""
        entry = _lookup(dpt_id)
        if not entry:
            raise ValueError(f"Unknown DPT: {dpt_id}")
        try:
            entry[0](telegram, value)
        except (TypeError, OverflowError) as exc:
            raise ValueError(f"Cannot encode {value!r} as DPT {dpt_id}: {exc}") from exc
        logger.debug("Encoded %r as DPT %s", value, dpt_id)
        return telegram

    @staticmethod
    def decode(telegram: Telegram, dpt_id: str) -> Any:
        """Read the telegram payload as a Python value for the given DPT."""
        entry = _lookup(dpt_id)
        if not entry:
            raise ValueError(f"Unknown DPT: {dpt_id}")
        return entry[1](telegram)

    @staticmethod
    def get_info(dpt_id: str) -> Optional[DPTInfo]:
        """Get metadata for a DPT."""
        entry = _lookup(dpt_id)
        return entry[2] if entry else None

    @staticmethod
    def list_dpts() -> list[dict]:
        """List all registered DPTs with metadata."""
        return [info.to_dict() for _, (_, _, info) in sorted(_REGISTRY.items())]

    @staticmethod
    def is_supported(dpt_id: str) -> bool:
        """Check if a DPT is supported."""
        return _lookup(dpt_id) is not None


# Module-level convenience functions
def encode(telegram: Telegram, dpt_id: str, value: Any) -> Telegram:
    return DPTCodec.encode(telegram, dpt_id, value)


def decode(telegram: Telegram, dpt_id: str) -> Any:
    return DPTCodec.decode(telegram, dpt_id)


def get_dpt_info(dpt_id: str) -> Optional[dict]:
    info = DPTCodec.get_info(dpt_id)
    return info.to_dict() if info else None
