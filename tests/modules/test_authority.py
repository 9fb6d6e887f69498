"""
Tests for source-location authority.

The authority decision fixes a new transfer's initial status, so every role
is checked against central and branch locations.
"""

import pytest

from stock_kernel.domain.dtos import Actor
from stock_kernel.domain.values import UserRole
from stock_modules.transfers.authority import (
    CENTRAL_LOCATIONS,
    is_manager_of_source,
    source_authority,
)
from tests.helpers import BRANCH, OTHER_BRANCH


class TestSourceAuthority:

    @pytest.mark.parametrize("location", ["warehouse", "mammal", BRANCH, OTHER_BRANCH])
    def test_admin_manages_everything(self, admin, location):
        assert source_authority(admin, location) == (True, "admin")

    @pytest.mark.parametrize("location", sorted(CENTRAL_LOCATIONS))
    def test_warehouse_manager_runs_central_locations(self, warehouse_manager, location):
        assert is_manager_of_source(warehouse_manager, location)

    def test_warehouse_manager_not_branch(self, warehouse_manager):
        is_manager, reason = source_authority(warehouse_manager, BRANCH)
        assert not is_manager
        assert reason == "warehouse_manager_outside_central_locations"

    def test_branch_manager_only_own_branch(self, branch_manager):
        assert is_manager_of_source(branch_manager, BRANCH)
        assert not is_manager_of_source(branch_manager, OTHER_BRANCH)
        assert not is_manager_of_source(branch_manager, "warehouse")

    def test_branch_manager_without_code(self):
        actor = Actor(id="u", name="No Branch", role=UserRole.BRANCH_MANAGER)
        assert source_authority(actor, BRANCH) == (
            False, "branch_manager_of_other_branch",
        )

    @pytest.mark.parametrize("location", ["mammal", "warehouse"])
    def test_mammal_employee_never_manages(self, mammal_employee, location):
        is_manager, reason = source_authority(mammal_employee, location)
        assert not is_manager
        assert reason == "role_mammal_employee_has_no_source_authority"

    def test_custom_central_locations(self, warehouse_manager):
        central = frozenset({"warehouse"})
        assert is_manager_of_source(warehouse_manager, "warehouse", central)
        assert not is_manager_of_source(warehouse_manager, "mammal", central)
