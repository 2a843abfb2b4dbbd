# KNX TP1 telegram constants
# Reference: KNX Standard 03_02_02 (Communication Medium TP1), 03_03_07 (Application Layer)

from enum import IntEnum

# Buffer
TELEGRAM_SIZE = 24
HEADER_CHECKSUM_SIZE = 7  # BCC covers bytes 0..6
PAYLOAD_MAX_LENGTH = 16
LONG_PAYLOAD_OFFSET = 8
LONG_PAYLOAD_SIZE = 14  # bytes 8..21

# Byte offsets
CONTROL_FIELD = 0
SOURCE_ADDR_H = 1
SOURCE_ADDR_L = 2
TARGET_ADDR_H = 3
TARGET_ADDR_L = 4
ROUTING_FIELD = 5
COMMAND_H = 6
COMMAND_L = 7

# Cleared state
CONTROL_FIELD_DEFAULT = 0b10111100  # not repeated, normal priority
ROUTING_FIELD_DEFAULT = 0b11100001  # group target, routing counter 6, length nibble 1 (length 2)


class Priority(IntEnum):
    """Bits 3-2 of the control field. Not an ordinal scale."""

    SYSTEM = 0b00
    HIGH = 0b01
    ALARM = 0b10
    NORMAL = 0b11


class Command(IntEnum):
    """4-bit APCI command, split across bytes 6 and 7."""

    READ = 0b0000
    ANSWER = 0b0001
    WRITE = 0b0010
    INDIVIDUAL_ADDR_WRITE = 0b0011
    INDIVIDUAL_ADDR_REQUEST = 0b0100
    INDIVIDUAL_ADDR_RESPONSE = 0b0101
    ADC_READ = 0b0110
    ADC_ANSWER = 0b0111
    MEMORY_READ = 0b1000
    MEMORY_ANSWER = 0b1001
    MEMORY_WRITE = 0b1010
    UNKNOWN = 0b1011
    MASK_VERSION_READ = 0b1100
    MASK_VERSION_RESPONSE = 0b1101
    RESTART = 0b1110
    ESCAPE = 0b1111


class CommunicationType(IntEnum):
    """TPCI communication type (bits 7-6 of byte 6)."""

    UDP = 0b00  # unnumbered data packet
    NDP = 0b01  # numbered data packet
    UCD = 0b10  # unnumbered control data
    NCD = 0b11  # numbered control data


class ControlData(IntEnum):
    """TPCI control data (bits 1-0 of byte 6)."""

    CONNECT = 0b00
    DISCONNECT = 0b01
    POS_CONFIRM = 0b10
    NEG_CONFIRM = 0b11
