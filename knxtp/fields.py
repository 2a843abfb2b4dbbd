"""Bit-field table for the 24-byte TP telegram buffer.

Every semantic field is a (byte, mask, shift) triple. Reads mask then shift;
writes clear the field's bits, then OR in the shifted value truncated to the
field width. Nothing here raises for out-of-range values.

Bytes 5, 6 and 7 are shared by several fields:

  byte 5: [type flag: 1b] [routing counter: 3b] [length - 1: 4b]
  byte 6: [comm type: 2b] [sequence: 4b] [control data / command high: 2b]
  byte 7: [command low: 2b] [first data byte: 6b]

The routing counter is the one field whose write also clears a sibling:
it keeps only the type flag, so the length nibble resets to 0.
"""

from typing import NamedTuple

from . import constants as C


class BitField(NamedTuple):
    byte: int
    mask: int
    shift: int
    keep: int | None = None  # bits preserved on write; defaults to ~mask

    @property
    def width_mask(self) -> int:
        return self.mask >> self.shift

    def read(self, buf) -> int:
        return (buf[self.byte] & self.mask) >> self.shift

    def write(self, buf, value: int) -> None:
        keep = (~self.mask & 0xFF) if self.keep is None else self.keep
        buf[self.byte] = (buf[self.byte] & keep) | ((int(value) << self.shift) & self.mask)


# ---------------------------------------------------------------------------
# Control field (byte 0)
# ---------------------------------------------------------------------------

NOT_REPEATED = BitField(C.CONTROL_FIELD, 0b00100000, 5)
PRIORITY = BitField(C.CONTROL_FIELD, 0b00001100, 2)

# ---------------------------------------------------------------------------
# Addresses (bytes 1-4)
# ---------------------------------------------------------------------------

SOURCE_AREA = BitField(C.SOURCE_ADDR_H, 0b11110000, 4)
SOURCE_LINE = BitField(C.SOURCE_ADDR_H, 0b00001111, 0)
SOURCE_MEMBER = BitField(C.SOURCE_ADDR_L, 0xFF, 0)

TARGET_AREA = BitField(C.TARGET_ADDR_H, 0b11110000, 4)
TARGET_LINE = BitField(C.TARGET_ADDR_H, 0b00001111, 0)
TARGET_MEMBER = BitField(C.TARGET_ADDR_L, 0xFF, 0)

TARGET_MAIN_GROUP = BitField(C.TARGET_ADDR_H, 0b11111000, 3)
TARGET_MIDDLE_GROUP = BitField(C.TARGET_ADDR_H, 0b00000111, 0)
TARGET_SUB_GROUP = BitField(C.TARGET_ADDR_L, 0xFF, 0)

# ---------------------------------------------------------------------------
# Routing field (byte 5)
# ---------------------------------------------------------------------------

TARGET_IS_GROUP = BitField(C.ROUTING_FIELD, 0b10000000, 7)
ROUTING_COUNTER = BitField(C.ROUTING_FIELD, 0b01110000, 4, keep=0b10000000)
PAYLOAD_LENGTH = BitField(C.ROUTING_FIELD, 0b00001111, 0)  # stores length - 1

# ---------------------------------------------------------------------------
# TPCI / APCI (bytes 6-7)
# ---------------------------------------------------------------------------

COMMUNICATION_TYPE = BitField(C.COMMAND_H, 0b11000000, 6)
SEQUENCE_NUMBER = BitField(C.COMMAND_H, 0b00111100, 2)
CONTROL_DATA = BitField(C.COMMAND_H, 0b00000011, 0)
COMMAND_HIGH = BitField(C.COMMAND_H, 0b00000011, 0)
COMMAND_LOW = BitField(C.COMMAND_L, 0b11000000, 6)
FIRST_DATA_BYTE = BitField(C.COMMAND_L, 0b00111111, 0)

# Sub-fields of the first data byte
DATA_BOOL = BitField(C.COMMAND_L, 0b00000001, 0)
DATA_4BIT = BitField(C.COMMAND_L, 0b00001111, 0)
DATA_DIRECTION = BitField(C.COMMAND_L, 0b00001000, 3)
DATA_STEPS = BitField(C.COMMAND_L, 0b00000111, 0)

# ---------------------------------------------------------------------------
# Long payload (bytes 8+)
# ---------------------------------------------------------------------------

TIME_WEEKDAY = BitField(8, 0b11100000, 5)
TIME_HOUR = BitField(8, 0b00011111, 0)
TIME_MINUTE = BitField(9, 0b00111111, 0)
TIME_SECOND = BitField(10, 0b00111111, 0)

DATE_YEAR = BitField(8, 0b11110000, 4)
DATE_MONTH = BitField(8, 0b00001111, 0)
DATE_DAY = BitField(9, 0xFF, 0)

FLOAT16_SIGN = BitField(8, 0b10000000, 7)
FLOAT16_EXPONENT = BitField(8, 0b01111000, 3)
FLOAT16_MANTISSA_HIGH = BitField(8, 0b00000111, 0)
FLOAT16_MANTISSA_LOW = BitField(9, 0xFF, 0)
