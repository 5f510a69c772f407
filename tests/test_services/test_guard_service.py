"""
Tests for the referential guard's delete preconditions.
"""

from datetime import date

import pytest

from assetdesk.errors import Blocked, NotFound
from assetdesk.models.asset import Asset
from assetdesk.models.employee import Employee
from assetdesk.services.guard_service import ReferentialGuard
from assetdesk.services.store import MemoryStore


@pytest.fixture()
def store():
    store = MemoryStore()
    for employee_id, name in (("E1", "Ada Lovelace"), ("E2", "Grace Hopper")):
        store.employees.create(
            Employee(
                id=employee_id,
                name=name,
                email=f"{employee_id}@example.com",
                department="Engineering",
                role="Developer",
                status="Active",
            )
        )
    for asset_id, name, status, holder in (
        ("A1", "MacBook Pro", "Available", None),
        ("A2", "Dell Monitor", "Assigned", "E1"),
        ("A3", "Broken Phone", "Repair", None),
    ):
        store.assets.create(
            Asset(
                id=asset_id,
                asset_name=name,
                asset_type="Laptop",
                serial_number=f"SN-{asset_id}",
                purchase_date=date(2024, 1, 15),
                status=status,
                assigned_to=holder,
            )
        )
    return store


class TestAssetDeletable:
    """Tests for ReferentialGuard.ensure_asset_deletable()."""

    def test_available_asset_is_deletable(self, store):
        """Available assets may be deleted."""
        asset = ReferentialGuard(store).ensure_asset_deletable("A1")
        assert asset.id == "A1"

    def test_repair_asset_is_deletable(self, store):
        """Assets under repair may be deleted."""
        assert ReferentialGuard(store).ensure_asset_deletable("A3").id == "A3"

    def test_assigned_asset_is_blocked(self, store):
        """Assigned assets may not be deleted."""
        with pytest.raises(Blocked) as exc_info:
            ReferentialGuard(store).ensure_asset_deletable("A2")
        assert exc_info.value.reason == "asset is assigned"

    def test_missing_asset(self, store):
        """Unknown assets raise NotFound."""
        with pytest.raises(NotFound):
            ReferentialGuard(store).ensure_asset_deletable("missing")


class TestEmployeeDeletable:
    """Tests for ReferentialGuard.ensure_employee_deletable()."""

    def test_employee_holding_asset_is_blocked(self, store):
        """The refusal names the asset the employee holds."""
        with pytest.raises(Blocked) as exc_info:
            ReferentialGuard(store).ensure_employee_deletable("E1")
        assert exc_info.value.asset_name == "Dell Monitor"
        assert str(exc_info.value) == (
            'Cannot delete: employee has an assigned asset ("Dell Monitor"). '
            "Please return the asset first."
        )

    def test_employee_without_assets_is_deletable(self, store):
        """Employees holding nothing may be deleted."""
        assert ReferentialGuard(store).ensure_employee_deletable("E2").id == "E2"

    def test_missing_employee(self, store):
        """Unknown employees raise NotFound."""
        with pytest.raises(NotFound) as exc_info:
            ReferentialGuard(store).ensure_employee_deletable("missing")
        assert str(exc_info.value) == "Employee missing not found."
