"""Datapoint types: Python values in and out of a Telegram payload."""

from .codec import DPTCodec, DPTInfo, decode, encode, get_dpt_info

__all__ = ["DPTCodec", "DPTInfo", "encode", "decode", "get_dpt_info"]
