"""Reference data routes — DPT catalog and telegram layout.

Lets API clients discover which datapoint types the codec can read and
write, and how the 24-byte frame is laid out.
"""

from fastapi import APIRouter, HTTPException

from dpt.codec import DPTCodec

router = APIRouter(prefix="/api/v1/reference", tags=["reference"])


TELEGRAM_LAYOUT = {
    "size": 24,
    "checksum": "XOR of bytes 0-6, computed on request, never stored",
    "bytes": [
        {"index": "0", "content": "Control: not-repeated (bit 5), priority (bits 3-2)"},
        {"index": "1-2", "content": "Source individual address area.line / member"},
        {"index": "3-4", "content": "Target address main.middle / sub or area.line / member"},
        {
            "index": "5",
            "content": "Target is group (bit 7), routing counter (bits 6-4), length - 1 (bits 3-0)",
        },
        {
            "index": "6",
            "content": "Comm type (bits 7-6), sequence (bits 5-2), control data / command high (bits 1-0)",
        },
        {"index": "7", "content": "Command low (bits 7-6), first data byte (bits 5-0)"},
        {"index": "8-21", "content": "Long payload"},
    ],
    "priorities": {"system": 0b00, "high": 0b01, "alarm": 0b10, "normal": 0b11},
}


@router.get("/dpts")
def list_dpts():
    """List all supported datapoint types with unit and range."""
    return DPTCodec.list_dpts()


@router.get("/dpts/{dpt_id}")
def get_dpt(dpt_id: str):
    """Get metadata for one datapoint type."""
    info = DPTCodec.get_info(dpt_id)
    if not info:
        raise HTTPException(status_code=404, detail="DPT not found")
    return info.to_dict()


@router.get("/layout")
def get_layout():
    """Byte layout of a TP telegram."""
    return TELEGRAM_LAYOUT
