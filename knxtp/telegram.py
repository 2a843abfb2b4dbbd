"""KNX TP1 telegram codec.

A Telegram owns a fixed 24-byte buffer. Every field is a view onto that
buffer: getters recompute from the bytes on each call, setters mask in only
the bits they own and leave every other bit alone.

Layout (bit 7 = MSB):
  [0]     control: not-repeated (b5), priority (b3-2)
  [1-2]   source individual address  area.line / member
  [3-4]   target address             main.middle / sub  or  area.line / member
  [5]     target is group (b7), routing counter (b6-4), length - 1 (b3-0)
  [6]     comm type (b7-6), sequence (b5-2), control data / command high (b1-0)
  [7]     command low (b7-6), first data byte (b5-0)
  [8-21]  long payload
  [22-23] unused

No operation raises for out-of-range input. Setters truncate to the field
width; getters always return a value, even when the bytes were written with
a different datapoint encoding (there is no format tag on the wire).
"""

import logging
import math
import struct

from . import constants as C
from . import fields as F
from .constants import Command, CommunicationType, ControlData, Priority

logger = logging.getLogger("knxcodec.telegram")

FLOAT16_MANTISSA_MAX = 0x7FF
FLOAT16_EXPONENT_MAX = 7
FLOAT16_MAX = FLOAT16_MANTISSA_MAX * (1 << FLOAT16_EXPONENT_MAX) / 2048


class Telegram:
    """One KNX bus frame backed by a 24-byte buffer."""

    __slots__ = ("_buf",)

    def __init__(self):
        self._buf = bytearray(C.TELEGRAM_SIZE)
        self.clear()

    @classmethod
    def from_bytes(cls, data) -> "Telegram":
        """Build a telegram from raw bytes received off the bus."""
        telegram = cls()
        telegram.set_buffer(data)
        return telegram

    # ------------------------------------------------------------------
    # Raw buffer
    # ------------------------------------------------------------------

    def clear(self):
        """Reset to the canonical default frame."""
        for i in range(C.TELEGRAM_SIZE):
            self._buf[i] = 0
        self._buf[C.CONTROL_FIELD] = C.CONTROL_FIELD_DEFAULT
        self._buf[C.ROUTING_FIELD] = C.ROUTING_FIELD_DEFAULT

    def set_buffer(self, data):
        """Copy raw bytes verbatim into the buffer.

        At most 24 bytes are taken. A shorter input fills the leading bytes
        and zeroes the rest.
        """
        raw = bytes(b & 0xFF for b in data[: C.TELEGRAM_SIZE])
        if len(raw) < C.TELEGRAM_SIZE:
            logger.debug("Short telegram buffer: %d bytes, zero-filling", len(raw))
        self._buf[:] = raw.ljust(C.TELEGRAM_SIZE, b"\x00")

    @property
    def buffer(self) -> bytes:
        """Snapshot of all 24 bytes, ready for transmission."""
        return bytes(self._buf)

    def to_bytes(self) -> bytes:
        return bytes(self._buf)

    def __bytes__(self):
        return bytes(self._buf)

    def read_raw_byte(self, index: int) -> int:
        return self._buf[index]

    def write_raw_byte(self, index: int, value: int):
        self._buf[index] = int(value) & 0xFF

    def copy(self) -> "Telegram":
        return Telegram.from_bytes(self._buf)

    def __eq__(self, other):
        if not isinstance(other, Telegram):
            return NotImplemented
        return self._buf == other._buf

    __hash__ = None

    def __repr__(self):
        return f"Telegram({self._buf.hex()})"

    # ------------------------------------------------------------------
    # Control field
    # ------------------------------------------------------------------

    def is_repeated(self) -> bool:
        """A cleared bit 5 marks a repeated frame."""
        return not F.NOT_REPEATED.read(self._buf)

    def set_repeated(self, repeated: bool):
        F.NOT_REPEATED.write(self._buf, 0 if repeated else 1)

    def get_priority(self) -> Priority:
        return Priority(F.PRIORITY.read(self._buf))

    def set_priority(self, priority: Priority):
        F.PRIORITY.write(self._buf, priority)

    # ------------------------------------------------------------------
    # Source address
    # ------------------------------------------------------------------

    def set_source_individual_address(self, area: int, line: int, member: int):
        F.SOURCE_AREA.write(self._buf, area)
        F.SOURCE_LINE.write(self._buf, line)
        F.SOURCE_MEMBER.write(self._buf, member)

    def get_source_area(self) -> int:
        return F.SOURCE_AREA.read(self._buf)

    def get_source_line(self) -> int:
        return F.SOURCE_LINE.read(self._buf)

    def get_source_member(self) -> int:
        return F.SOURCE_MEMBER.read(self._buf)

    def get_source_address(self) -> tuple[int, int, int]:
        return self.get_source_area(), self.get_source_line(), self.get_source_member()

    # ------------------------------------------------------------------
    # Target address
    # ------------------------------------------------------------------

    def set_target_group_address(self, main: int, middle: int, sub: int):
        F.TARGET_IS_GROUP.write(self._buf, 1)
        F.TARGET_MAIN_GROUP.write(self._buf, main)
        F.TARGET_MIDDLE_GROUP.write(self._buf, middle)
        F.TARGET_SUB_GROUP.write(self._buf, sub)

    def set_target_individual_address(self, area: int, line: int, member: int):
        F.TARGET_IS_GROUP.write(self._buf, 0)
        F.TARGET_AREA.write(self._buf, area)
        F.TARGET_LINE.write(self._buf, line)
        F.TARGET_MEMBER.write(self._buf, member)

    def is_target_group(self) -> bool:
        return bool(F.TARGET_IS_GROUP.read(self._buf))

    def get_target_area(self) -> int:
        return F.TARGET_AREA.read(self._buf)

    def get_target_line(self) -> int:
        return F.TARGET_LINE.read(self._buf)

    def get_target_member(self) -> int:
        return F.TARGET_MEMBER.read(self._buf)

    def get_target_main_group(self) -> int:
        return F.TARGET_MAIN_GROUP.read(self._buf)

    def get_target_middle_group(self) -> int:
        return F.TARGET_MIDDLE_GROUP.read(self._buf)

    def get_target_sub_group(self) -> int:
        return F.TARGET_SUB_GROUP.read(self._buf)

    def get_target_address(self) -> tuple[int, int, int]:
        """Target components, shaped by the address type flag."""
        if self.is_target_group():
            return (
                self.get_target_main_group(),
                self.get_target_middle_group(),
                self.get_target_sub_group(),
            )
        return self.get_target_area(), self.get_target_line(), self.get_target_member()

    # ------------------------------------------------------------------
    # Routing counter / payload length
    # ------------------------------------------------------------------

    def set_routing_counter(self, counter: int):
        """Write the hop count. Only the type flag survives; length resets to 1."""
        F.ROUTING_COUNTER.write(self._buf, counter)

    def get_routing_counter(self) -> int:
        return F.ROUTING_COUNTER.read(self._buf)

    def set_payload_length(self, length: int):
        F.PAYLOAD_LENGTH.write(self._buf, int(length) - 1)

    def get_payload_length(self) -> int:
        return min(F.PAYLOAD_LENGTH.read(self._buf) + 1, C.PAYLOAD_MAX_LENGTH)

    # ------------------------------------------------------------------
    # TPCI / APCI
    # ------------------------------------------------------------------

    def set_command(self, command: Command):
        command = int(command)
        F.COMMAND_HIGH.write(self._buf, command >> 2)
        F.COMMAND_LOW.write(self._buf, command & 0b11)

    def get_command(self) -> Command:
        high = F.COMMAND_HIGH.read(self._buf)
        low = F.COMMAND_LOW.read(self._buf)
        return Command((high << 2) | low)

    def set_control_data(self, control: ControlData):
        F.CONTROL_DATA.write(self._buf, control)

    def get_control_data(self) -> ControlData:
        return ControlData(F.CONTROL_DATA.read(self._buf))

    def set_communication_type(self, comm_type: CommunicationType):
        F.COMMUNICATION_TYPE.write(self._buf, comm_type)

    def get_communication_type(self) -> CommunicationType:
        return CommunicationType(F.COMMUNICATION_TYPE.read(self._buf))

    def set_sequence_number(self, sequence: int):
        F.SEQUENCE_NUMBER.write(self._buf, sequence)

    def get_sequence_number(self) -> int:
        return F.SEQUENCE_NUMBER.read(self._buf)

    # ------------------------------------------------------------------
    # Checksum
    # ------------------------------------------------------------------

    def calculate_checksum(self) -> int:
        """BCC: XOR of bytes 0..6. Never stored, never verified here."""
        bcc = 0
        for i in range(C.HEADER_CHECKSUM_SIZE):
            bcc ^= self._buf[i]
        return bcc

    # ------------------------------------------------------------------
    # Short payloads (first data byte, byte 7 bits 5-0)
    # ------------------------------------------------------------------

    def set_first_data_byte(self, value: int):
        F.FIRST_DATA_BYTE.write(self._buf, value)

    def get_first_data_byte(self) -> int:
        return F.FIRST_DATA_BYTE.read(self._buf)

    def set_bool(self, value: bool):
        self.set_first_data_byte(1 if value else 0)

    def get_bool(self) -> bool:
        return bool(F.DATA_BOOL.read(self._buf))

    def set_4bit_int_value(self, value: int):
        self.set_first_data_byte(int(value) & F.DATA_4BIT.width_mask)

    def get_4bit_int_value(self) -> int:
        return F.DATA_4BIT.read(self._buf)

    def set_4bit_direction_value(self, direction: bool):
        F.DATA_DIRECTION.write(self._buf, 1 if direction else 0)

    def get_4bit_direction_value(self) -> bool:
        return bool(F.DATA_DIRECTION.read(self._buf))

    def set_4bit_steps_value(self, steps: int):
        F.DATA_STEPS.write(self._buf, steps)

    def get_4bit_steps_value(self) -> int:
        return F.DATA_STEPS.read(self._buf)

    def set_4bit_dimming_value(self, direction: bool, steps: int):
        """Direction and step code together, as sent by dimmers and blinds."""
        self.set_first_data_byte(0)
        self.set_4bit_direction_value(direction)
        self.set_4bit_steps_value(steps)

    def get_4bit_dimming_value(self) -> tuple[bool, int]:
        return self.get_4bit_direction_value(), self.get_4bit_steps_value()

    # ------------------------------------------------------------------
    # Long payloads (byte 8 onward)
    # ------------------------------------------------------------------

    def set_1byte_uchar_value(self, value: int):
        self._buf[8] = int(value) & 0xFF
        self.set_payload_length(2)

    def get_1byte_uchar_value(self) -> int:
        return self._buf[8]

    def set_2byte_uchar_value(self, value: int):
        struct.pack_into("!H", self._buf, 8, int(value) & 0xFFFF)
        self.set_payload_length(3)

    def get_2byte_uchar_value(self) -> int:
        return struct.unpack_from("!H", self._buf, 8)[0]

    def set_2byte_int_value(self, value: int):
        struct.pack_into("!H", self._buf, 8, int(value) & 0xFFFF)
        self.set_payload_length(3)

    def get_2byte_int_value(self) -> int:
        return struct.unpack_from("!h", self._buf, 8)[0]

    def set_2byte_float_value(self, value: float):
        """KNX 2-byte float: S EEEE MMM MMMMMMMM, value = M * 2^E / 2048.

        Picks the smallest exponent 0..7 whose mantissa fits in 11 bits.
        Magnitudes past the top of the range saturate; NaN encodes as 0.
        """
        value = float(value)
        if math.isnan(value):
            value = 0.0
        sign = 1 if value < 0 else 0
        magnitude = min(abs(value), FLOAT16_MAX)

        exponent = 0
        mantissa = math.floor(magnitude * 2048 + 0.5)
        while mantissa > FLOAT16_MANTISSA_MAX and exponent < FLOAT16_EXPONENT_MAX:
            exponent += 1
            mantissa = math.floor(magnitude / (1 << exponent) * 2048 + 0.5)
        mantissa = min(mantissa, FLOAT16_MANTISSA_MAX)

        F.FLOAT16_SIGN.write(self._buf, sign)
        F.FLOAT16_EXPONENT.write(self._buf, exponent)
        F.FLOAT16_MANTISSA_HIGH.write(self._buf, mantissa >> 8)
        F.FLOAT16_MANTISSA_LOW.write(self._buf, mantissa)
        self.set_payload_length(3)

    def get_2byte_float_value(self) -> float:
        exponent = min(F.FLOAT16_EXPONENT.read(self._buf), FLOAT16_EXPONENT_MAX)
        high = F.FLOAT16_MANTISSA_HIGH.read(self._buf)
        mantissa = (high << 8) | F.FLOAT16_MANTISSA_LOW.read(self._buf)
        value = mantissa * (1 << exponent) / 2048
        if F.FLOAT16_SIGN.read(self._buf):
            value = -value
        return value

    def set_3byte_time(self, weekday: int, hour: int, minute: int, second: int):
        """Bytes 8-10 are written whole; bits 7-6 of minute and second end up 0."""
        self._buf[8] = 0
        self._buf[9] = 0
        self._buf[10] = 0
        F.TIME_WEEKDAY.write(self._buf, weekday)
        F.TIME_HOUR.write(self._buf, hour)
        F.TIME_MINUTE.write(self._buf, minute)
        F.TIME_SECOND.write(self._buf, second)
        self.set_payload_length(4)

    def get_3byte_weekday_value(self) -> int:
        return F.TIME_WEEKDAY.read(self._buf)

    def get_3byte_hour_value(self) -> int:
        return F.TIME_HOUR.read(self._buf)

    def get_3byte_minute_value(self) -> int:
        return F.TIME_MINUTE.read(self._buf)

    def get_3byte_second_value(self) -> int:
        return F.TIME_SECOND.read(self._buf)

    def set_3byte_date(self, year: int, month: int, day: int):
        """Year nibble / month nibble in byte 8, day in byte 9.

        The 4-bit year is how the bus devices this talks to lay it out;
        it is kept as-is rather than widened to the DPT 11 layout.
        """
        F.DATE_YEAR.write(self._buf, year)
        F.DATE_MONTH.write(self._buf, month)
        F.DATE_DAY.write(self._buf, day)
        self.set_payload_length(3)

    def get_3byte_date_year_value(self) -> int:
        return F.DATE_YEAR.read(self._buf)

    def get_3byte_date_month_value(self) -> int:
        return F.DATE_MONTH.read(self._buf)

    def get_3byte_date_day_value(self) -> int:
        return F.DATE_DAY.read(self._buf)

    def set_4byte_float_value(self, value: float):
        """IEEE 754 single precision, most significant byte first."""
        try:
            struct.pack_into("!f", self._buf, 8, float(value))
        except OverflowError:
            struct.pack_into("!f", self._buf, 8, math.copysign(math.inf, value))
        self.set_payload_length(5)

    def get_4byte_float_value(self) -> float:
        return struct.unpack_from("!f", self._buf, 8)[0]

    def set_14byte_value(self, text: str):
        """Write up to 14 ISO 8859-1 characters, NUL-padded. Length is untouched."""
        encoded = text.encode("latin-1", errors="replace")[: C.LONG_PAYLOAD_SIZE]
        end = C.LONG_PAYLOAD_OFFSET + C.LONG_PAYLOAD_SIZE
        self._buf[C.LONG_PAYLOAD_OFFSET : end] = encoded.ljust(C.LONG_PAYLOAD_SIZE, b"\x00")

    def get_14byte_value(self) -> str:
        end = C.LONG_PAYLOAD_OFFSET + C.LONG_PAYLOAD_SIZE
        raw = bytes(self._buf[C.LONG_PAYLOAD_OFFSET : end])
        return raw.split(b"\x00", 1)[0].decode("latin-1")
