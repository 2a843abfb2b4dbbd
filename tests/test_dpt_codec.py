"""Tests for the DPT registry writing into and reading from telegrams."""

from __future__ import annotations

import pytest

from dpt.codec import _REGISTRY, DPTCodec, get_dpt_info
from knxtp import Telegram


def _sample_value_for(dpt_id: str):
    """Return a representative value for the given DPT id."""
    main = dpt_id.split(".")[0]

    if dpt_id == "5.001":
        return 50.0
    if dpt_id == "5.003":
        return 90.0
    if dpt_id == "9.007":
        return 45.5

    if main == "1":
        return True
    if main == "3":
        return {"direction": True, "step": 5}
    if main == "5":
        return 42
    if main == "7":
        return 1234
    if main == "8":
        return -1234
    if main == "9":
        return 21.5
    if main == "10":
        return {"day": 2, "hour": 14, "minute": 30, "second": 15}
    if main == "11":
        return {"year": 9, "month": 2, "day": 24}
    if main == "14":
        return 0.5
    if main == "16":
        return "Hello KNX"

    raise AssertionError(f"No sample value configured for DPT {dpt_id}")


def _param_id(dpt_id: str) -> str:
    """Return a readable pytest id including DPT family grouping."""
    main = dpt_id.split(".")[0]
    return f"{dpt_id} ({main}.x)"


@pytest.mark.parametrize("dpt_id", sorted(_REGISTRY.keys()), ids=_param_id)
def test_every_registered_dpt_reads_back(dpt_id: str):
    """Writing a value through a DPT and reading it back yields the value."""
    value = _sample_value_for(dpt_id)
    telegram = DPTCodec.encode(Telegram(), dpt_id, value)
    decoded = DPTCodec.decode(telegram, dpt_id)

    if dpt_id == "5.001":
        assert decoded == pytest.approx(value, abs=0.5)
        return
    if dpt_id == "5.003":
        assert decoded == pytest.approx(value, abs=1.0)
        return

    assert decoded == value


def test_dpt_registry_entries_have_encoders_and_decoders():
    """Ensure all registry entries expose encoder/decoder callables."""
    for dpt_id, entry in _REGISTRY.items():
        assert len(entry) == 3
        encoder, decoder, info = entry
        assert callable(encoder)
        assert callable(decoder)
        assert info is not None


@pytest.mark.parametrize(
    "dpt_id,length",
    [("1.001", 2), ("3.007", 2), ("5.001", 2), ("7.001", 3), ("9.001", 3), ("10.001", 4),
     ("11.001", 3), ("14.056", 5), ("16.001", 2)],
)
def test_payload_length_follows_the_accessor(dpt_id: str, length: int):
    telegram = DPTCodec.encode(Telegram(), dpt_id, _sample_value_for(dpt_id))
    assert telegram.get_payload_length() == length


def test_dpt9_matches_telegram_accessor():
    telegram = Telegram()
    DPTCodec.encode(telegram, "9.001", 21.5)
    assert telegram.get_2byte_float_value() == 21.5


@pytest.mark.parametrize("value,expected", [(-10, 0), (300, 255)])
def test_dpt5_clamps(value, expected):
    telegram = DPTCodec.encode(Telegram(), "5", value)
    assert DPTCodec.decode(telegram, "5") == expected


@pytest.mark.parametrize("value", [0.0, 100.0])
def test_dpt5_001_boundaries(value: float):
    """DPT 5.001 should clamp to 0..100 and roundtrip at boundaries."""
    telegram = DPTCodec.encode(Telegram(), "5.001", value)
    assert DPTCodec.decode(telegram, "5.001") == pytest.approx(value, abs=0.1)


def test_main_type_fallback():
    """Unregistered subtypes fall back to the main type."""
    telegram = DPTCodec.encode(Telegram(), "9.999", 12.5)
    assert DPTCodec.decode(telegram, "9.999") == 12.5
    assert DPTCodec.is_supported("9.999") is True


def test_unknown_dpt_id_raises():
    """Unknown DPT IDs should raise ValueError on encode/decode."""
    with pytest.raises(ValueError):
        DPTCodec.encode(Telegram(), "99.999", 1)
    with pytest.raises(ValueError):
        DPTCodec.decode(Telegram(), "99.999")
    assert DPTCodec.is_supported("99.999") is False
    assert get_dpt_info("99.999") is None


@pytest.mark.parametrize(
    "dpt_id,value",
    [("10.001", 5), ("11.001", "2024-01-01"), ("3.007", True), ("7.001", None), ("8", "abc")],
)
def test_wrong_value_shape_raises_value_error(dpt_id: str, value):
    with pytest.raises(ValueError):
        DPTCodec.encode(Telegram(), dpt_id, value)


def test_decode_never_fails_on_blank_telegram():
    """Every DPT decodes something from a cleared telegram."""
    telegram = Telegram()
    for dpt_id in _REGISTRY:
        DPTCodec.decode(telegram, dpt_id)


def test_get_dpt_info():
    info = get_dpt_info("9.001")
    assert info["name"] == "Temperature"
    assert info["unit"] == "°C"
    assert info["encoding_size"] == 2


def test_list_dpts_contains_main_and_sub_types():
    ids = {d["id"] for d in DPTCodec.list_dpts()}
    assert {"1", "1.001", "9.001", "16.001"} <= ids


def test_package_exports_codec_entry_points():
    import dpt

    telegram = dpt.encode(Telegram(), "7.001", 4000)
    assert dpt.decode(telegram, "7.001") == 4000
    assert isinstance(dpt.DPTCodec.get_info("7.001"), dpt.DPTInfo)
