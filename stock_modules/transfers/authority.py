"""
Source-location authority for transfers.

Responsibility:
    Decide whether an actor may deduct stock at a transfer's origin without a
    separate outbound confirmation.  The answer fixes a new transfer's
    initial status.

Invariants:
    - Pure function of (actor, location); no I/O, no cache access.
    - The actor's identity is supplied by the caller; nothing is resolved here.
"""

from __future__ import annotations

from stock_kernel.domain.dtos import Actor
from stock_kernel.domain.values import MAMMAL, WAREHOUSE, UserRole

# Locations a warehouse manager runs directly.
CENTRAL_LOCATIONS: frozenset[str] = frozenset({WAREHOUSE, MAMMAL})


def source_authority(
    actor: Actor,
    location_id: str,
    central_locations: frozenset[str] = CENTRAL_LOCATIONS,
) -> tuple[bool, str]:
    """Return (is_manager, reason) for ``actor`` at ``location_id``."""
    if actor.role is UserRole.ADMIN:
        return True, "admin"
    if actor.role is UserRole.BRANCH_MANAGER:
        if actor.branch_code and actor.branch_code == location_id:
            return True, "branch_manager_of_source"
        return False, "branch_manager_of_other_branch"
    if actor.role is UserRole.WAREHOUSE_MANAGER:
        if location_id in central_locations:
            return True, "warehouse_manager_of_central_location"
        return False, "warehouse_manager_outside_central_locations"
    return False, f"role_{actor.role.value}_has_no_source_authority"


def is_manager_of_source(
    actor: Actor,
    location_id: str,
    central_locations: frozenset[str] = CENTRAL_LOCATIONS,
) -> bool:
    return source_authority(actor, location_id, central_locations)[0]
