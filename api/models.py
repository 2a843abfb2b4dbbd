"""Pydantic models for the telegram codec API.

Defines request/response schemas for decoding raw frames and building
frames from fields.
"""

from typing import Any

from pydantic import BaseModel, Field, field_validator

from knxtp.constants import TELEGRAM_SIZE, Command, CommunicationType, Priority


def _enum_name(value: str | None, enum_cls) -> str | None:
    if value is None:
        return None
    name = value.strip().upper()
    if name not in enum_cls.__members__:
        choices = ", ".join(m.lower() for m in enum_cls.__members__)
        raise ValueError(f"must be one of: {choices}")
    return name


# ---------------------------------------------------------------------------
# Decoded fields
# ---------------------------------------------------------------------------


class TelegramFields(BaseModel):
    """Every header/control field of a telegram, decoded."""

    source: str = Field(..., description="Source individual address (e.g., '1.1.10')")
    destination: str = Field(..., description="Target address, group or individual")
    is_group: bool
    repeated: bool
    priority: str
    routing_counter: int
    payload_length: int
    communication_type: str
    sequence_number: int
    control_data: str
    command: str
    first_data_byte: int
    checksum: int = Field(..., description="XOR of bytes 0-6")
    raw: str = Field(..., description="All 24 bytes as hex")


# ---------------------------------------------------------------------------
# Decode
# ---------------------------------------------------------------------------


class DecodeRequest(BaseModel):
    raw: str = Field(..., description="Raw telegram bytes as hex (up to 24 bytes)")
    dpt: str | None = Field(default=None, description="Datapoint type for the payload")
    bus: str = Field(default="default", min_length=1, max_length=64)
    record: bool = Field(default=True, description="Store in telegram history")

    @field_validator("raw")
    @classmethod
    def check_hex(cls, v: str) -> str:
        cleaned = "".join(v.split())
        try:
            data = bytes.fromhex(cleaned)
        except ValueError:
            raise ValueError("raw must be a hex string") from None
        if not 1 <= len(data) <= TELEGRAM_SIZE:
            raise ValueError(f"raw must hold 1-{TELEGRAM_SIZE} bytes")
        return cleaned


class DecodeResponse(BaseModel):
    telegram: TelegramFields
    dpt: str | None = None
    value: Any = None
    unit: str = ""


# ---------------------------------------------------------------------------
# Encode
# ---------------------------------------------------------------------------


class EncodeRequest(BaseModel):
    target: str = Field(..., description="'1/2/3' for a group, '1.1.10' for a device")
    source: str | None = Field(default=None, description="Defaults to the configured address")
    priority: str | None = Field(default=None, description="system, high, alarm or normal")
    repeated: bool = False
    routing_counter: int | None = Field(default=None, ge=0, le=7)
    communication_type: str = Field(default="udp", validate_default=True)
    sequence_number: int = Field(default=0, ge=0, le=15)
    command: str = Field(default="write", validate_default=True)
    dpt: str | None = None
    value: Any = None
    bus: str = Field(default="default", min_length=1, max_length=64)
    record: bool = True

    @field_validator("priority")
    @classmethod
    def check_priority(cls, v):
        return _enum_name(v, Priority)

    @field_validator("command")
    @classmethod
    def check_command(cls, v):
        return _enum_name(v, Command)

    @field_validator("communication_type")
    @classmethod
    def check_comm_type(cls, v):
        return _enum_name(v, CommunicationType)


class EncodeResponse(BaseModel):
    raw: str
    checksum: int
    telegram: TelegramFields
