"""
Asset inventory and assignment history.

``Asset.status`` is the state-machine field.  The pair
(``status == 'Assigned'``, ``assigned_to``) is owned by the assignment
lifecycle engine: no other code path sets it.  A CHECK constraint keeps
the pair consistent at the database level.

``Assignment`` rows are append-mostly: created Active by an assign,
closed exactly once by a return, never deleted.  ``asset_id`` and
``employee_id`` are plain references (no foreign key) so that history
outlives the asset or employee it mentions.
"""

from enum import Enum

from assetdesk.extensions import db


class AssetStatus(Enum):
    AVAILABLE = "Available"
    ASSIGNED = "Assigned"
    REPAIR = "Repair"


class AssignmentStatus(Enum):
    ACTIVE = "Active"
    RETURNED = "Returned"


class Asset(db.Model):
    """A physical or IT asset that can be assigned to one employee."""

    __tablename__ = "asset"
    __table_args__ = (
        db.CheckConstraint(
            "status IN ('Available', 'Assigned', 'Repair')",
            name="CK_asset_status",
        ),
        db.CheckConstraint(
            "(status = 'Assigned' AND assigned_to IS NOT NULL) "
            "OR (status <> 'Assigned' AND assigned_to IS NULL)",
            name="CK_asset_assigned_to",
        ),
    )

    id = db.Column(db.String(36), primary_key=True)
    asset_name = db.Column(db.String(200), nullable=False)
    asset_type = db.Column(db.String(50), nullable=False)
    serial_number = db.Column(db.String(100), nullable=False)
    purchase_date = db.Column(db.Date, nullable=False)
    status = db.Column(
        db.String(20), nullable=False, default=AssetStatus.AVAILABLE.value
    )
    assigned_to = db.Column(
        db.String(36), db.ForeignKey("employee.id"), nullable=True, index=True
    )
    created_at = db.Column(
        db.DateTime, nullable=False, server_default=db.func.current_timestamp()
    )
    updated_at = db.Column(
        db.DateTime, nullable=False, server_default=db.func.current_timestamp()
    )

    # -- Relationships -----------------------------------------------------
    assignee = db.relationship("Employee", foreign_keys=[assigned_to])

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "asset_name": self.asset_name,
            "asset_type": self.asset_type,
            "serial_number": self.serial_number,
            "purchase_date": (
                self.purchase_date.isoformat() if self.purchase_date else None
            ),
            "status": self.status,
            "assigned_to": self.assigned_to,
        }

    def __repr__(self) -> str:
        return f"<Asset {self.asset_name} ({self.status})>"


class Assignment(db.Model):
    """
    One asset lent to one employee for a bounded period.

    ``asset_name`` and ``employee_name`` are snapshots taken when the
    assignment is created; renaming the asset or employee later does
    not change them.
    """

    __tablename__ = "assignment"
    __table_args__ = (
        db.CheckConstraint(
            "status IN ('Active', 'Returned')", name="CK_assignment_status"
        ),
        # At most one Active assignment per asset.
        db.Index(
            "ux_assignment_active_asset",
            "asset_id",
            unique=True,
            sqlite_where=db.text("status = 'Active'"),
            postgresql_where=db.text("status = 'Active'"),
        ),
    )

    id = db.Column(db.String(36), primary_key=True)
    asset_id = db.Column(db.String(36), nullable=False, index=True)
    employee_id = db.Column(db.String(36), nullable=False, index=True)
    asset_name = db.Column(db.String(200), nullable=False)
    employee_name = db.Column(db.String(200), nullable=False)
    assigned_date = db.Column(db.Date, nullable=False)
    returned_date = db.Column(db.Date, nullable=True)
    status = db.Column(
        db.String(20), nullable=False, default=AssignmentStatus.ACTIVE.value
    )
    created_at = db.Column(
        db.DateTime, nullable=False, server_default=db.func.current_timestamp()
    )

    @property
    def is_active(self) -> bool:
        return self.status == AssignmentStatus.ACTIVE.value

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "asset_id": self.asset_id,
            "employee_id": self.employee_id,
            "asset_name": self.asset_name,
            "employee_name": self.employee_name,
            "assigned_date": self.assigned_date.isoformat(),
            "returned_date": (
                self.returned_date.isoformat() if self.returned_date else None
            ),
            "status": self.status,
        }

    def __repr__(self) -> str:
        return (
            f"<Assignment asset={self.asset_id} "
            f"to={self.employee_name} ({self.status})>"
        )
