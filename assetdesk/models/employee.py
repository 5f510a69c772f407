"""
Employee records managed from the admin console.
"""

from enum import Enum

from assetdesk.extensions import db


class EmployeeStatus(Enum):
    ACTIVE = "Active"
    INACTIVE = "Inactive"


class Employee(db.Model):
    """
    A person assets can be assigned to.

    ``id`` is a UUID string generated by the service layer at creation.
    Deletion is refused while any ``Asset.assigned_to`` points here;
    see ``ReferentialGuard``.
    """

    __tablename__ = "employee"
    __table_args__ = (
        db.CheckConstraint(
            "status IN ('Active', 'Inactive')", name="CK_employee_status"
        ),
    )

    id = db.Column(db.String(36), primary_key=True)
    name = db.Column(db.String(200), nullable=False)
    email = db.Column(db.String(200), nullable=False)
    department = db.Column(db.String(100), nullable=False)
    role = db.Column(db.String(100), nullable=False)
    status = db.Column(
        db.String(20), nullable=False, default=EmployeeStatus.ACTIVE.value
    )
    created_at = db.Column(
        db.DateTime, nullable=False, server_default=db.func.current_timestamp()
    )
    updated_at = db.Column(
        db.DateTime, nullable=False, server_default=db.func.current_timestamp()
    )

    @property
    def is_active(self) -> bool:
        return self.status == EmployeeStatus.ACTIVE.value

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "email": self.email,
            "department": self.department,
            "role": self.role,
            "status": self.status,
        }

    def __repr__(self) -> str:
        return f"<Employee {self.name} ({self.status})>"
