"""
Assignment service — the asset lifecycle engine.

``AssignmentEngine`` owns every transition of ``Asset.status`` into or
out of Assigned, the matching ``Assignment`` rows, and the guarded
deletes.  It works against any ``EntityStore`` passed to it, so the
same rules run over the database in the web app and over a
``MemoryStore`` in tests.

State rules:
  - **assign:**  Available asset -> Assigned, plus a new Active
    assignment.  Assigned or Repair assets are refused.
  - **return:**  Assigned asset -> Available, and its Active assignment
    -> Returned with ``returned_date`` set.
  - Both steps of each transition happen inside one store transaction.

The module-level functions at the bottom are what routes and CLI
commands call; they bind an engine to the Flask-SQLAlchemy session.
"""

import logging
import uuid
from collections import defaultdict
from dataclasses import dataclass
from datetime import date
from typing import Callable

from sqlalchemy import desc, or_

from assetdesk.errors import InvalidState, NotFound
from assetdesk.extensions import db
from assetdesk.models.asset import Asset, AssetStatus, Assignment, AssignmentStatus
from assetdesk.models.employee import EmployeeStatus
from assetdesk.services.guard_service import ReferentialGuard
from assetdesk.services.store import EntityStore, SqlStore

logger = logging.getLogger(__name__)


def new_id() -> str:
    """Return a fresh opaque entity id."""
    return str(uuid.uuid4())


# =========================================================================
# Data classes for structured results
# =========================================================================


@dataclass
class AssignResult:
    """Outcome of a successful assign."""

    asset: Asset
    assignment: Assignment


@dataclass
class ReturnResult:
    """Outcome of a successful return."""

    asset: Asset
    assignment: Assignment
    returned_date: date


@dataclass
class Inconsistency:
    """One asset/assignment pair that breaks a lifecycle invariant."""

    kind: str
    asset_id: str | None
    assignment_id: str | None = None
    detail: str = ""


# Inconsistency kinds reported by ``reconcile``.
ASSIGNED_WITHOUT_ASSIGNMENT = "assigned_without_assignment"
ASSIGNMENT_WITHOUT_ASSIGNED_ASSET = "assignment_without_assigned_asset"
DUPLICATE_ACTIVE_ASSIGNMENT = "duplicate_active_assignment"
ASSIGNED_TO_MISMATCH = "assigned_to_mismatch"


# =========================================================================
# Engine
# =========================================================================


class AssignmentEngine:
    """
    Assign/return state machine plus guarded deletes.

    Args:
        store:      The entity store to read and write.
        today:      Callable returning the current date.
        id_factory: Callable returning a new assignment id.
    """

    def __init__(
        self,
        store: EntityStore,
        today: Callable[[], date] = date.today,
        id_factory: Callable[[], str] = new_id,
    ):
        self.store = store
        self.guard = ReferentialGuard(store)
        self._today = today
        self._new_id = id_factory

    def _require_asset(self, asset_id: str):
        asset = self.store.assets.get(asset_id)
        if asset is None:
            raise NotFound("asset", asset_id)
        return asset

    @staticmethod
    def _refuse(action: str, asset_id: str, reason: str) -> InvalidState:
        logger.warning("Refused %s of asset %s: %s", action, asset_id, reason)
        return InvalidState(reason)

    # -- Transitions -------------------------------------------------------

    def assign(self, asset_id: str, employee_id: str) -> AssignResult:
        """
        Assign an Available asset to an Active employee.

        Preconditions are checked in order and the first failure wins:
        the asset exists, the asset is Available, the employee exists,
        the employee is Active.

        Raises:
            NotFound:     Unknown asset or employee.
            InvalidState: Asset already assigned or under repair, or
                          employee inactive.
            StoreError:   Persisting either record failed; nothing is
                          left half-written.
        """
        asset = self._require_asset(asset_id)
        if asset.status == AssetStatus.ASSIGNED.value:
            raise self._refuse("assign", asset_id, "already assigned")
        if asset.status == AssetStatus.REPAIR.value:
            raise self._refuse("assign", asset_id, "under repair")

        employee = self.store.employees.get(employee_id)
        if employee is None:
            raise NotFound("employee", employee_id)
        if employee.status != EmployeeStatus.ACTIVE.value:
            raise self._refuse("assign", asset_id, "employee is inactive")

        assignment = Assignment(
            id=self._new_id(),
            asset_id=asset.id,
            employee_id=employee.id,
            asset_name=asset.asset_name,
            employee_name=employee.name,
            assigned_date=self._today(),
            returned_date=None,
            status=AssignmentStatus.ACTIVE.value,
        )

        with self.store.transaction():
            # The write itself re-checks Available.
            updated = self.store.assets.update_if(
                asset_id,
                {"status": AssetStatus.AVAILABLE.value},
                {"status": AssetStatus.ASSIGNED.value, "assigned_to": employee_id},
            )
            if updated is None:
                raise self._refuse("assign", asset_id, "already assigned")
            created = self.store.assignments.create(assignment)

        logger.info(
            "Assigned asset %s (%s) to employee %s (%s)",
            asset_id,
            created.asset_name,
            employee_id,
            created.employee_name,
        )
        return AssignResult(asset=updated, assignment=created)

    def return_asset(self, asset_id: str, assignment_id: str) -> ReturnResult:
        """
        Close an Active assignment and make its asset Available again.

        Raises:
            NotFound:     Unknown asset or assignment.
            InvalidState: The assignment belongs to another asset or has
                          already been returned.
            StoreError:   Persisting either record failed.
        """
        self._require_asset(asset_id)

        assignment = self.store.assignments.get(assignment_id)
        if assignment is None:
            raise NotFound("assignment", assignment_id)
        if assignment.asset_id != asset_id:
            raise self._refuse(
                "return", asset_id, "assignment does not belong to this asset"
            )
        if assignment.status != AssignmentStatus.ACTIVE.value:
            raise self._refuse("return", asset_id, "already returned")

        returned_date = self._today()
        with self.store.transaction():
            closed = self.store.assignments.update_if(
                assignment_id,
                {"status": AssignmentStatus.ACTIVE.value},
                {
                    "status": AssignmentStatus.RETURNED.value,
                    "returned_date": returned_date,
                },
            )
            if closed is None:
                raise self._refuse("return", asset_id, "already returned")
            updated_asset = self.store.assets.update(
                asset_id,
                {"status": AssetStatus.AVAILABLE.value, "assigned_to": None},
            )

        logger.info(
            "Returned asset %s from assignment %s on %s",
            asset_id,
            assignment_id,
            returned_date.isoformat(),
        )
        return ReturnResult(
            asset=updated_asset, assignment=closed, returned_date=returned_date
        )

    # -- Guarded deletes ---------------------------------------------------

    def delete_asset(self, asset_id: str) -> None:
        """Delete an asset unless it is assigned (raises ``Blocked``)."""
        with self.store.transaction():
            self.guard.ensure_asset_deletable(asset_id)
            self.store.assets.delete(asset_id)
        logger.info("Deleted asset %s", asset_id)

    def delete_employee(self, employee_id: str) -> None:
        """Delete an employee unless an asset is assigned to them."""
        with self.store.transaction():
            self.guard.ensure_employee_deletable(employee_id)
            self.store.employees.delete(employee_id)
        logger.info("Deleted employee %s", employee_id)

    # -- Sanity pass -------------------------------------------------------

    def reconcile(self) -> list[Inconsistency]:
        """
        Report every asset/assignment pair that breaks an invariant.

        Read-only.  Used by ``flask reconcile`` and the optional startup
        check in ``wsgi.py``.
        """
        problems: list[Inconsistency] = []
        assets = {asset.id: asset for asset in self.store.assets.list()}

        active_by_asset: dict[str, list] = defaultdict(list)
        for assignment in self.store.assignments.list():
            if assignment.status == AssignmentStatus.ACTIVE.value:
                active_by_asset[assignment.asset_id].append(assignment)

        for asset in assets.values():
            is_assigned = asset.status == AssetStatus.ASSIGNED.value
            if is_assigned != (asset.assigned_to is not None):
                problems.append(
                    Inconsistency(
                        kind=ASSIGNED_TO_MISMATCH,
                        asset_id=asset.id,
                        detail=(
                            f"status={asset.status} "
                            f"assigned_to={asset.assigned_to}"
                        ),
                    )
                )
            if is_assigned and not active_by_asset.get(asset.id):
                problems.append(
                    Inconsistency(
                        kind=ASSIGNED_WITHOUT_ASSIGNMENT,
                        asset_id=asset.id,
                        detail=f"{asset.asset_name} has no active assignment",
                    )
                )

        for asset_id, active in active_by_asset.items():
            if len(active) > 1:
                problems.append(
                    Inconsistency(
                        kind=DUPLICATE_ACTIVE_ASSIGNMENT,
                        asset_id=asset_id,
                        detail=f"{len(active)} active assignments",
                    )
                )
            asset = assets.get(asset_id)
            for assignment in active:
                if asset is None:
                    detail = "asset no longer exists"
                elif asset.status != AssetStatus.ASSIGNED.value:
                    detail = f"asset status is {asset.status}"
                elif asset.assigned_to != assignment.employee_id:
                    detail = f"asset is assigned to {asset.assigned_to}"
                else:
                    continue
                problems.append(
                    Inconsistency(
                        kind=ASSIGNMENT_WITHOUT_ASSIGNED_ASSET,
                        asset_id=asset_id,
                        assignment_id=assignment.id,
                        detail=detail,
                    )
                )

        for problem in problems:
            logger.warning(
                "Reconcile: %s asset=%s assignment=%s %s",
                problem.kind,
                problem.asset_id,
                problem.assignment_id,
                problem.detail,
            )
        return problems


# =========================================================================
# Web-facing helpers bound to the Flask-SQLAlchemy session
# =========================================================================


def get_engine() -> AssignmentEngine:
    """Build an engine over the current database session."""
    return AssignmentEngine(SqlStore(db.session))


def assign_asset(asset_id: str, employee_id: str) -> AssignResult:
    """Assign an asset to an employee (see ``AssignmentEngine.assign``)."""
    return get_engine().assign(asset_id, employee_id)


def return_asset(asset_id: str, assignment_id: str) -> ReturnResult:
    """Return an asset (see ``AssignmentEngine.return_asset``)."""
    return get_engine().return_asset(asset_id, assignment_id)


def reconcile() -> list[Inconsistency]:
    """Run the sanity pass over the database."""
    return get_engine().reconcile()


def get_assignment_by_id(assignment_id: str) -> Assignment | None:
    """Return an assignment by primary key."""
    return db.session.get(Assignment, assignment_id)


def get_assignments(search: str | None = None, page: int = 1, per_page: int = 10):
    """
    Return a page of assignments, newest first.

    Args:
        search:   Case-insensitive substring matched against asset name,
                  employee name and status.
        page:     Page number (1-indexed).
        per_page: Records per page.

    Returns:
        A Flask-SQLAlchemy pagination object.
    """
    query = Assignment.query.order_by(
        desc(Assignment.assigned_date), desc(Assignment.created_at)
    )
    if search:
        pattern = f"%{search.strip()}%"
        query = query.filter(
            or_(
                Assignment.asset_name.ilike(pattern),
                Assignment.employee_name.ilike(pattern),
                Assignment.status.ilike(pattern),
            )
        )
    return query.paginate(page=page, per_page=per_page, error_out=False)
