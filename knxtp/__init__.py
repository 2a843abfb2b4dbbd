"""KNX TP1 telegram codec package."""

from .constants import Command, CommunicationType, ControlData, Priority
from .telegram import Telegram

__all__ = ["Telegram", "Priority", "Command", "CommunicationType", "ControlData"]
