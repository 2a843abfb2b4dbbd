"""Telegram Inspector — ring buffer for decoded telegram history.

Stores the last N telegrams per bus for REST access. Each entry is a
snapshot taken at record time: timestamp, direction, addresses, priority,
command, raw bytes, checksum and (when a DPT was supplied) the decoded value.

Thread-safe: uses a lock since telegrams may be recorded from a transport
thread while the API reads history on the event loop.
"""

import logging
import threading
import time
from collections import Counter, deque
from typing import Any, Optional

from knxtp import Telegram
from knxtp.addresses import format_group_address, format_individual_address

logger = logging.getLogger("knxcodec.inspector")

# Direction descriptions for clarity
DIRECTION_INFO = {
    "rx": {"label": "RX", "description": "Received from the bus"},
    "tx": {"label": "TX", "description": "Built for transmission"},
}


def format_target(telegram: Telegram) -> str:
    """Target address text, group or individual depending on the type flag."""
    if telegram.is_target_group():
        return format_group_address(*telegram.get_target_address())
    return format_individual_address(*telegram.get_target_address())


class TelegramEntry:
    """A single decoded telegram record."""

    __slots__ = (
        "timestamp",
        "bus_id",
        "direction",
        "source",
        "destination",
        "is_group",
        "priority",
        "command",
        "payload_length",
        "checksum",
        "raw_hex",
        "dpt",
        "decoded_value",
        "unit",
    )

    def __init__(
        self,
        bus_id: str,
        direction: str,
        telegram: Telegram,
        dpt: Optional[str] = None,
        decoded_value: Any = None,
        unit: Optional[str] = None,
    ):
        self.timestamp = time.time()
        self.bus_id = bus_id
        self.direction = direction  # "rx" or "tx"
        self.source = format_individual_address(*telegram.get_source_address())
        self.destination = format_target(telegram)
        self.is_group = telegram.is_target_group()
        self.priority = telegram.get_priority().name
        self.command = telegram.get_command().name
        self.payload_length = telegram.get_payload_length()
        self.checksum = telegram.calculate_checksum()
        self.raw_hex = telegram.to_bytes().hex()
        self.dpt = dpt
        self.decoded_value = decoded_value
        self.unit = unit

    def to_dict(self) -> dict:
        dir_info = DIRECTION_INFO.get(self.direction, {})
        return {
            "timestamp": self.timestamp,
            "bus_id": self.bus_id,
            "direction": self.direction,
            "direction_label": dir_info.get("label", self.direction.upper()),
            "source": self.source,
            "destination": self.destination,
            "is_group": self.is_group,
            "priority": self.priority,
            "command": self.command,
            "payload_length": self.payload_length,
            "checksum": self.checksum,
            "raw": self.raw_hex,
            "dpt": self.dpt,
            "decoded_value": self.decoded_value,
            "unit": self.unit or "",
        }


class TelegramInspector:
    """Ring buffer storing decoded telegram history per bus."""

    def __init__(self, max_size: int = 1000):
        self._max_size = max_size
        # bus_id -> deque of TelegramEntry
        self._buffers: dict[str, deque[TelegramEntry]] = {}
        self._lock = threading.Lock()
        self._total_count = 0

    @property
    def total_count(self) -> int:
        return self._total_count

    def record(
        self,
        bus_id: str,
        telegram: Telegram,
        direction: str = "rx",
        dpt: Optional[str] = None,
        decoded_value: Any = None,
        unit: Optional[str] = None,
    ) -> dict:
        """Record a telegram snapshot into the ring buffer.

        Args:
            bus_id: Which bus/line this telegram belongs to
            telegram: The telegram; its fields are captured now
            direction: "rx" (received) or "tx" (built for sending)
            dpt: DPT ID string (e.g., "9.001") if known
            decoded_value: Decoded Python value (e.g., 21.5 for temperature)
            unit: Unit string from DPT info (e.g., "°C")

        Returns the recorded entry as a dict.
        """
        entry = TelegramEntry(
            bus_id=bus_id,
            direction=direction,
            telegram=telegram,
            dpt=dpt,
            decoded_value=decoded_value,
            unit=unit,
        )

        with self._lock:
            if bus_id not in self._buffers:
                self._buffers[bus_id] = deque(maxlen=self._max_size)
            self._buffers[bus_id].append(entry)
            self._total_count += 1

        logger.debug("Recorded %s telegram on %s: %s", direction, bus_id, entry.raw_hex)
        return entry.to_dict()

    def get_history(
        self,
        bus_id: str,
        limit: int = 100,
        offset: int = 0,
        direction: Optional[str] = None,
        ga: Optional[str] = None,
    ) -> list[dict]:
        """Get telegram history for a bus (newest first).

        Args:
            bus_id: Which bus to query
            limit: Max entries to return (default 100)
            offset: Skip this many entries from the newest
            direction: Only "rx" or only "tx"
            ga: Destination substring (e.g. "1/2" matches "1/2/3")
        """
        with self._lock:
            buf = self._buffers.get(bus_id)
            if not buf:
                return []
            entries = [
                e
                for e in reversed(buf)
                if (direction is None or e.direction == direction)
                and (ga is None or ga in e.destination)
            ]
        return [e.to_dict() for e in entries[offset : offset + limit]]

    def get_stats(self, bus_id: Optional[str] = None) -> dict:
        """Get telegram statistics."""
        with self._lock:
            if bus_id:
                buf = self._buffers.get(bus_id) or ()
                destinations = Counter(e.destination for e in buf)
                return {
                    "bus_id": bus_id,
                    "buffered": len(buf),
                    "buffer_max": self._max_size,
                    "rx_count": sum(1 for e in buf if e.direction == "rx"),
                    "tx_count": sum(1 for e in buf if e.direction == "tx"),
                    "unique_destinations": len(destinations),
                    "top_destinations": [
                        {"destination": d, "count": n} for d, n in destinations.most_common(5)
                    ],
                }
            return {
                "total_recorded": self._total_count,
                "buses": {bid: len(buf) for bid, buf in self._buffers.items()},
                "buffer_max": self._max_size,
            }

    def clear(self, bus_id: Optional[str] = None):
        """Clear telegram history."""
        with self._lock:
            if bus_id:
                self._buffers.pop(bus_id, None)
            else:
                self._buffers.clear()
                self._total_count = 0
