"""Telegram codec routes.

Decode raw frames into fields, build frames from fields, and browse the
ring buffer of recently handled telegrams.
"""

import logging
import math

from fastapi import APIRouter, HTTPException, Query

from core.telegram_inspector import format_target
from dpt.codec import DPTCodec
from knxtp import Command, CommunicationType, Priority, Telegram
from knxtp.addresses import (
    format_individual_address,
    is_group_address_text,
    parse_group_address,
    parse_individual_address,
)

from .models import DecodeRequest, DecodeResponse, EncodeRequest, EncodeResponse

logger = logging.getLogger("knxcodec.api")

router = APIRouter(prefix="/api/v1", tags=["telegrams"])


def telegram_fields(telegram: Telegram) -> dict:
    """Flatten every header/control field for a response body."""
    return {
        "source": format_individual_address(*telegram.get_source_address()),
        "destination": format_target(telegram),
        "is_group": telegram.is_target_group(),
        "repeated": telegram.is_repeated(),
        "priority": telegram.get_priority().name.lower(),
        "routing_counter": telegram.get_routing_counter(),
        "payload_length": telegram.get_payload_length(),
        "communication_type": telegram.get_communication_type().name.lower(),
        "sequence_number": telegram.get_sequence_number(),
        "control_data": telegram.get_control_data().name.lower(),
        "command": telegram.get_command().name.lower(),
        "first_data_byte": telegram.get_first_data_byte(),
        "checksum": telegram.calculate_checksum(),
        "raw": telegram.to_bytes().hex(),
    }


def _unit_for(dpt: str | None) -> str:
    info = DPTCodec.get_info(dpt) if dpt else None
    return info.unit if info else ""


def _json_value(value):
    # JSON has no NaN/Infinity; a 4-byte float payload can hold either
    if isinstance(value, float) and not math.isfinite(value):
        return str(value)
    return value


# ---------------------------------------------------------------------------
# Decode / encode
# ---------------------------------------------------------------------------


@router.post("/telegrams/decode", response_model=DecodeResponse)
def decode_telegram(body: DecodeRequest):
    """Decode a raw frame; optionally read its payload as a DPT."""
    telegram = Telegram.from_bytes(bytes.fromhex(body.raw))

    value = None
    if body.dpt:
        try:
            value = _json_value(DPTCodec.decode(telegram, body.dpt))
        except ValueError as exc:
            logger.warning("Rejected decode request: %s", exc)
            raise HTTPException(status_code=400, detail=str(exc)) from exc

    unit = _unit_for(body.dpt)
    if body.record:
        router.app.state.telegram_inspector.record(
            body.bus, telegram, direction="rx", dpt=body.dpt, decoded_value=value, unit=unit
        )
    return {
        "telegram": telegram_fields(telegram),
        "dpt": body.dpt,
        "value": value,
        "unit": unit,
    }


@router.post("/telegrams/encode", response_model=EncodeResponse)
def encode_telegram(body: EncodeRequest):
    """Build a frame from fields, with an optional DPT-encoded payload."""
    defaults = router.app.state.defaults

    try:
        source = parse_individual_address(body.source or defaults["source_address"])
        if is_group_address_text(body.target):
            target = parse_group_address(body.target)
        else:
            target = parse_individual_address(body.target)
    except ValueError as exc:
        logger.warning("Rejected encode request: %s", exc)
        raise HTTPException(status_code=400, detail=str(exc)) from exc

    priority = body.priority or defaults["priority"].upper()
    routing_counter = (
        body.routing_counter if body.routing_counter is not None else defaults["routing_counter"]
    )

    telegram = Telegram()
    telegram.set_repeated(body.repeated)
    telegram.set_priority(Priority[priority])
    telegram.set_source_individual_address(*source)
    if is_group_address_text(body.target):
        telegram.set_target_group_address(*target)
    else:
        telegram.set_target_individual_address(*target)
    # Routing counter resets the length nibble, so it goes before the payload
    telegram.set_routing_counter(routing_counter)
    telegram.set_communication_type(CommunicationType[body.communication_type])
    telegram.set_sequence_number(body.sequence_number)
    telegram.set_command(Command[body.command])

    value = None
    if body.dpt:
        try:
            DPTCodec.encode(telegram, body.dpt, body.value)
        except ValueError as exc:
            logger.warning("Rejected encode request: %s", exc)
            raise HTTPException(status_code=400, detail=str(exc)) from exc
        # value as carried by the frame, after clamping and quantization
        value = _json_value(DPTCodec.decode(telegram, body.dpt))

    if body.record:
        router.app.state.telegram_inspector.record(
            body.bus,
            telegram,
            direction="tx",
            dpt=body.dpt,
            decoded_value=value,
            unit=_unit_for(body.dpt),
        )
    return {
        "raw": telegram.to_bytes().hex(),
        "checksum": telegram.calculate_checksum(),
        "telegram": telegram_fields(telegram),
    }


# ---------------------------------------------------------------------------
# History
# ---------------------------------------------------------------------------


@router.get("/buses/{bus_id}/telegrams")
def get_telegram_history(
    bus_id: str,
    limit: int = Query(default=100, ge=1, le=1000),
    offset: int = Query(default=0, ge=0),
    direction: str | None = Query(default=None, pattern="^(rx|tx)$"),
    ga: str | None = Query(default=None),
):
    """Get recent telegram history for a bus (newest first).

    Optional filters:
        direction: "rx" or "tx"
        ga: destination substring (e.g. "1/2" matches "1/2/3")
    """
    inspector = router.app.state.telegram_inspector
    entries = inspector.get_history(
        bus_id,
        limit=limit,
        offset=offset,
        direction=direction,
        ga=ga,
    )
    stats = inspector.get_stats(bus_id)
    return {
        "telegrams": entries,
        "count": len(entries),
        "total_buffered": stats.get("buffered", 0),
    }


@router.get("/buses/{bus_id}/telegrams/stats")
def get_telegram_stats(bus_id: str):
    """Get telegram statistics for a bus."""
    inspector = router.app.state.telegram_inspector
    return inspector.get_stats(bus_id)


@router.delete("/buses/{bus_id}/telegrams")
def clear_telegram_history(bus_id: str):
    """Clear telegram history for a bus."""
    inspector = router.app.state.telegram_inspector
    inspector.clear(bus_id)
    return {"status": "cleared", "bus_id": bus_id}
