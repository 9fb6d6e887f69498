"""Locations, users and the active session (``stock_modules.access``)."""

from stock_modules.access.directory import LocationDirectory
from stock_modules.access.session import UserSession

__all__ = ["LocationDirectory", "UserSession"]
