"""
Tests for the entity store implementations.

``MemoryStore`` is tested directly; ``SqlStore`` runs against the
in-memory SQLite database from ``conftest.py``.
"""

from datetime import date

import pytest
from sqlalchemy.exc import OperationalError

from assetdesk.errors import NotFound, StoreError
from assetdesk.models.asset import Asset, Assignment
from assetdesk.models.employee import Employee
from assetdesk.services.store import MemoryStore, SqlStore


def _employee(employee_id="E1", name="Ada Lovelace"):
    return Employee(
        id=employee_id,
        name=name,
        email="ada@example.com",
        department="Engineering",
        role="Developer",
        status="Active",
    )


def _asset(asset_id="A1", status="Available", assigned_to=None):
    return Asset(
        id=asset_id,
        asset_name="MacBook Pro",
        asset_type="Laptop",
        serial_number="SN-1",
        purchase_date=date(2024, 1, 15),
        status=status,
        assigned_to=assigned_to,
    )


def _assignment(assignment_id, asset_id="A1", status="Active"):
    return Assignment(
        id=assignment_id,
        asset_id=asset_id,
        employee_id="E1",
        asset_name="MacBook Pro",
        employee_name="Ada Lovelace",
        assigned_date=date(2025, 1, 1),
        returned_date=None if status == "Active" else date(2025, 2, 1),
        status=status,
    )


class _LockedSession:
    """Session stand-in whose every read times out."""

    def get(self, *args, **kwargs):
        raise OperationalError("SELECT", {}, Exception("database is locked"))


class TestMemoryStore:
    """Tests for the dict-backed store."""

    def test_get_missing_returns_none(self):
        """get() returns None for unknown ids."""
        assert MemoryStore().assets.get("missing") is None

    def test_update_missing_raises(self):
        """update() raises NotFound for unknown ids."""
        with pytest.raises(NotFound):
            MemoryStore().assets.update("missing", {"status": "Repair"})

    def test_delete_missing_raises(self):
        """delete() raises NotFound for unknown ids."""
        with pytest.raises(NotFound):
            MemoryStore().employees.delete("missing")

    def test_duplicate_create_raises(self):
        """Creating the same id twice is a store fault."""
        store = MemoryStore()
        store.employees.create(_employee())
        with pytest.raises(StoreError):
            store.employees.create(_employee())

    def test_update_if_applies_when_matching(self):
        """update_if() writes the fields when the expected values hold."""
        store = MemoryStore()
        store.assets.create(_asset())

        updated = store.assets.update_if(
            "A1", {"status": "Available"}, {"status": "Assigned", "assigned_to": "E1"}
        )

        assert updated is store.assets.get("A1")
        assert updated.status == "Assigned"
        assert updated.assigned_to == "E1"

    def test_update_if_skips_when_stale(self):
        """update_if() returns None and writes nothing on a mismatch."""
        store = MemoryStore()
        store.assets.create(_asset(status="Repair"))

        stale = store.assets.update_if(
            "A1", {"status": "Available"}, {"status": "Assigned"}
        )
        assert stale is None
        assert store.assets.update_if("missing", {}, {"status": "Repair"}) is None
        assert store.assets.get("A1").status == "Repair"

    def test_transaction_commits(self):
        """Changes made in a successful block persist."""
        store = MemoryStore()
        store.assets.create(_asset())
        with store.transaction():
            store.assets.update("A1", {"status": "Repair"})
        assert store.assets.get("A1").status == "Repair"

    def test_transaction_undoes_every_change(self):
        """A failing block reverts creates, updates and deletes."""
        store = MemoryStore()
        store.employees.create(_employee())
        store.assets.create(_asset())

        with pytest.raises(RuntimeError):
            with store.transaction():
                store.assets.update("A1", {"status": "Repair", "asset_name": "X"})
                store.employees.delete("E1")
                store.employees.create(_employee("E2", "Grace Hopper"))
                raise RuntimeError("boom")

        asset = store.assets.get("A1")
        assert asset.status == "Available"
        assert asset.asset_name == "MacBook Pro"
        assert store.employees.get("E1") is not None
        assert store.employees.get("E2") is None

    def test_nested_transaction_joins_outer(self):
        """An inner block's changes are undone when the outer one fails."""
        store = MemoryStore()
        store.assets.create(_asset())

        with pytest.raises(RuntimeError):
            with store.transaction():
                with store.transaction():
                    store.assets.update("A1", {"status": "Repair"})
                raise RuntimeError("boom")

        assert store.assets.get("A1").status == "Available"


class TestSqlStore:
    """Tests for the SQLAlchemy-backed store."""

    def test_create_and_get(self, db_session):
        """Entities created in a transaction can be read back."""
        store = SqlStore(db_session)
        with store.transaction():
            store.employees.create(_employee())

        assert store.employees.get("E1").name == "Ada Lovelace"
        assert [e.id for e in store.employees.list()] == ["E1"]

    def test_update_missing_raises(self, db_session):
        """update() raises NotFound for unknown ids."""
        with pytest.raises(NotFound):
            SqlStore(db_session).assets.update("missing", {"status": "Repair"})

    def test_transaction_rolls_back_on_error(self, db_session):
        """A failing block leaves the database untouched."""
        store = SqlStore(db_session)
        with store.transaction():
            store.assets.create(_asset())

        with pytest.raises(RuntimeError):
            with store.transaction():
                store.assets.update("A1", {"status": "Repair"})
                raise RuntimeError("boom")

        assert store.assets.get("A1").status == "Available"

    def test_update_if_applies_when_matching(self, db_session):
        """update_if() writes the fields and returns the refreshed entity."""
        store = SqlStore(db_session)
        with store.transaction():
            store.employees.create(_employee())
            store.assets.create(_asset())

        with store.transaction():
            updated = store.assets.update_if(
                "A1",
                {"status": "Available"},
                {"status": "Assigned", "assigned_to": "E1"},
            )

        assert updated.status == "Assigned"
        assert store.assets.get("A1").assigned_to == "E1"

    def test_update_if_skips_when_stale(self, db_session):
        """update_if() returns None when the row no longer matches."""
        store = SqlStore(db_session)
        with store.transaction():
            store.assets.create(_asset(status="Repair"))

        with store.transaction():
            updated = store.assets.update_if(
                "A1", {"status": "Available"}, {"status": "Assigned"}
            )

        assert updated is None
        assert store.assets.get("A1").status == "Repair"

    def test_second_active_assignment_is_rejected(self, db_session):
        """The database holds at most one Active assignment per asset."""
        store = SqlStore(db_session)
        with store.transaction():
            store.assignments.create(_assignment("AS1"))
            store.assignments.create(_assignment("AS0", status="Returned"))

        with pytest.raises(StoreError):
            with store.transaction():
                store.assignments.create(_assignment("AS2"))

        assert [a.id for a in store.assignments.list() if a.status == "Active"] == ["AS1"]

    def test_check_constraint_becomes_store_error(self, db_session):
        """An Assigned asset with no holder violates the CHECK constraint."""
        store = SqlStore(db_session)
        with pytest.raises(StoreError) as exc_info:
            with store.transaction():
                store.assets.create(_asset(status="Assigned", assigned_to=None))

        assert exc_info.value.__cause__ is not None
        assert store.assets.get("A1") is None

    def test_driver_failure_becomes_store_error(self):
        """Driver-level faults surface as StoreError."""
        store = SqlStore(_LockedSession())
        with pytest.raises(StoreError) as exc_info:
            store.assets.get("A1")
        assert isinstance(exc_info.value.__cause__, OperationalError)
