"""
User Session (``stock_modules.access.session``).

Responsibility
--------------
Holds who is acting and at which location.  Login picks the starting
location from the role; logout clears the actor, the location and the
notification dedup set.
"""

from __future__ import annotations

from stock_kernel.domain.dtos import Actor, User
from stock_kernel.domain.values import (
    GLOBAL_VIEW,
    MAMMAL,
    UserRole,
    is_stock_location,
)
from stock_kernel.exceptions import InvalidLocationError
from stock_kernel.logging_config import LogContext, get_logger
from stock_modules.access.directory import LocationDirectory
from stock_modules.notifications.emitter import NotificationEmitter

logger = get_logger("modules.access.session")


class UserSession:
    """The acting user and their active location."""

    def __init__(
        self,
        directory: LocationDirectory,
        emitter: NotificationEmitter | None = None,
    ):
        self._directory = directory
        self._emitter = emitter
        self.user: User | None = None
        self.location_id: str | None = None

    @property
    def is_authenticated(self) -> bool:
        return self.user is not None

    @property
    def actor(self) -> Actor:
        if self.user is None:
            raise RuntimeError("No user logged in. Call login() first.")
        return self.user.as_actor()

    @property
    def is_global_view(self) -> bool:
        return self.location_id == GLOBAL_VIEW

    def login(self, user: User) -> Actor:
        """Start a session; branch managers and mammal staff land on their location."""
        self.user = user
        if user.role is UserRole.BRANCH_MANAGER:
            self.location_id = user.branch_code
        elif user.role is UserRole.MAMMAL_EMPLOYEE:
            self.location_id = MAMMAL
        else:
            self.location_id = None
        LogContext.set(actor_id=user.id)
        logger.info(
            "session_started",
            extra={"role": user.role.value, "active_location": self.location_id},
        )
        return self.actor

    def select_location(self, location_id: str) -> str:
        """Switch the active location (``all`` selects the global view)."""
        if location_id != GLOBAL_VIEW:
            self._directory.get_location(location_id)
        self.location_id = location_id
        logger.info("location_selected", extra={"active_location": location_id})
        return location_id

    def require_stock_location(self) -> str:
        if not is_stock_location(self.location_id):
            raise InvalidLocationError(
                self.location_id, "select a single stock location first",
            )
        return self.location_id

    def logout(self) -> None:
        user_id = self.user.id if self.user else None
        self.user = None
        self.location_id = None
        if self._emitter is not None:
            self._emitter.reset()
        LogContext.clear()
        logger.info("session_ended", extra={"user_id": user_id})
