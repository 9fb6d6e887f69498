"""
Location Directory (``stock_modules.access.directory``).

Responsibility
--------------
The set of locations a client can work with, and the user records that
define it.  Static locations (warehouse, mammal) come from configuration and
the ``locations`` collection; every branch manager with a branch code
provisions one branch location.  User create / edit / delete are optimistic
and queued like every other mutation.

Invariants
----------
- A branch location never shadows a static location with the same id.
- One branch per distinct branch code, named after the first manager's
  ``branch_name`` (or the code itself).
- Branch locations are derived, never stored; they disappear with their
  last manager.
"""

from __future__ import annotations

from dataclasses import replace
from typing import Sequence

from stock_kernel.domain.dtos import Location, User
from stock_kernel.domain.values import LocationKind, UserRole
from stock_kernel.exceptions import LocationNotFoundError, UserNotFoundError
from stock_kernel.logging_config import get_logger
from stock_kernel.services.client_state import ClientState
from stock_kernel.services.record_store import Collection

logger = get_logger("modules.access.directory")


class LocationDirectory:
    """Static plus user-provisioned branch locations, and user maintenance."""

    def __init__(
        self,
        state: ClientState,
        static_locations: Sequence[Location] = (),
        branch_description: str = "Branch Inventory",
        branch_icon: str = "store",
    ):
        self._state = state
        self._static = tuple(static_locations)
        self._branch_description = branch_description
        self._branch_icon = branch_icon

    # -- locations ----------------------------------------------------------

    def static_locations(self) -> tuple[Location, ...]:
        merged: dict[str, Location] = {loc.id: loc for loc in self._static}
        for loc in self._state.locations:
            merged[loc.id] = loc
        return tuple(merged.values())

    def available_locations(self) -> tuple[Location, ...]:
        static = self.static_locations()
        seen = {loc.id for loc in static}
        branches: list[Location] = []
        for user in self._state.users.values():
            code = user.branch_code
            if user.role is not UserRole.BRANCH_MANAGER or not code or code in seen:
                continue
            seen.add(code)
            branches.append(Location(
                id=code,
                name=user.branch_name or code,
                description=self._branch_description,
                icon=self._branch_icon,
                kind=LocationKind.BRANCH,
            ))
        return static + tuple(branches)

    def get_location(self, location_id: str) -> Location:
        for loc in self.available_locations():
            if loc.id == location_id:
                return loc
        raise LocationNotFoundError(location_id)

    # -- users --------------------------------------------------------------

    def users(self) -> tuple[User, ...]:
        return tuple(self._state.users.values())

    def get_user(self, user_id: str) -> User:
        user = self._state.users.get(user_id)
        if user is None:
            raise UserNotFoundError(user_id)
        return user

    def find_by_username(self, username: str) -> User | None:
        for user in self._state.users.values():
            if user.username == username:
                return user
        return None

    def create_user(
        self,
        username: str,
        name: str,
        role: UserRole | str,
        branch_code: str | None = None,
        branch_name: str | None = None,
        accessible_branches: Sequence[str] = (),
    ) -> User:
        user = User(
            id=self._state.ids.placeholder_id(),
            username=username,
            name=name,
            role=role,
            branch_code=branch_code or None,
            branch_name=branch_name or None,
            accessible_branches=tuple(accessible_branches),
        )
        self._state.users[user.id] = user
        self._state.queue.insert(Collection.APP_USERS, [user.to_record()])
        logger.info(
            "user_created",
            extra={"user_id": user.id, "role": user.role.value, "branch_code": branch_code},
        )
        self._state.after_mutation()
        return user

    def edit_user(self, user: User) -> User:
        self.get_user(user.id)
        self._state.users[user.id] = user
        record = user.to_record()
        record.pop("id")
        self._state.queue.update(Collection.APP_USERS, user.id, record)
        logger.info("user_updated", extra={"user_id": user.id})
        self._state.after_mutation()
        return user

    def rename_branch(self, branch_code: str, branch_name: str) -> tuple[User, ...]:
        """Set ``branch_name`` on every manager of ``branch_code``."""
        changed = []
        for user in list(self._state.users.values()):
            if user.branch_code == branch_code:
                changed.append(self.edit_user(replace(user, branch_name=branch_name)))
        return tuple(changed)

    def delete_user(self, user_id: str) -> User:
        user = self.get_user(user_id)
        del self._state.users[user_id]
        self._state.queue.delete(Collection.APP_USERS, [user_id])
        logger.info("user_deleted", extra={"user_id": user_id})
        self._state.after_mutation()
        return user
