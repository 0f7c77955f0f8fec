"""Payout table: split a total reward across rows by percentage or amount."""

from .core import get_logger, get_settings
from .main import create_app

__all__ = ["create_app", "get_logger", "get_settings"]
