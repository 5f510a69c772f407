"""
Employee service — CRUD for employee records.

Deletes go through the assignment engine so the referential guard runs
first: an employee holding an asset cannot be removed.
"""

import logging
import re
from datetime import datetime, timezone

from flask import current_app
from sqlalchemy import or_

from assetdesk.errors import NotFound, ValidationError
from assetdesk.extensions import db
from assetdesk.models.employee import Employee, EmployeeStatus
from assetdesk.services import assignment_service
from assetdesk.services.store import commit

logger = logging.getLogger(__name__)

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")

_EMPLOYEE_STATUSES = [status.value for status in EmployeeStatus]


# -- Form validation -------------------------------------------------------


def clean_employee_form(form) -> dict:
    """
    Validate submitted employee fields and return them stripped.

    Raises:
        ValidationError: Listing every invalid field.
    """
    data = {
        "name": form.get("name", "").strip(),
        "email": form.get("email", "").strip(),
        "department": form.get("department", "").strip(),
        "role": form.get("role", "").strip(),
        "status": form.get("status", EmployeeStatus.ACTIVE.value).strip(),
    }

    errors = []
    if not data["name"]:
        errors.append("Name is required.")
    if not data["email"]:
        errors.append("Email is required.")
    elif not EMAIL_PATTERN.match(data["email"]):
        errors.append("Invalid email format.")
    if not data["department"]:
        errors.append("Department is required.")
    if not data["role"]:
        errors.append("Role is required.")
    if data["status"] not in _EMPLOYEE_STATUSES:
        errors.append(f"Status must be one of: {', '.join(_EMPLOYEE_STATUSES)}.")

    if errors:
        raise ValidationError(errors)
    return data


# -- Queries ---------------------------------------------------------------


def get_employee_by_id(employee_id: str) -> Employee | None:
    """Return an employee by primary key."""
    return db.session.get(Employee, employee_id)


def get_employees(search: str | None = None, page: int = 1, per_page: int | None = None):
    """
    Return a page of employees ordered by name.

    Args:
        search:   Case-insensitive substring matched against name,
                  email, department and role.
        page:     Page number (1-indexed).
        per_page: Records per page; defaults to ``ROWS_PER_PAGE``.
    """
    if per_page is None:
        per_page = current_app.config["ROWS_PER_PAGE"]

    query = Employee.query.order_by(Employee.name)
    if search:
        pattern = f"%{search.strip()}%"
        query = query.filter(
            or_(
                Employee.name.ilike(pattern),
                Employee.email.ilike(pattern),
                Employee.department.ilike(pattern),
                Employee.role.ilike(pattern),
            )
        )
    return query.paginate(page=page, per_page=per_page, error_out=False)


def get_active_employees() -> list[Employee]:
    """Return Active employees, the only ones assets can be assigned to."""
    return (
        Employee.query.filter(Employee.status == EmployeeStatus.ACTIVE.value)
        .order_by(Employee.name)
        .all()
    )


# -- Mutations -------------------------------------------------------------


def create_employee(
    name: str,
    email: str,
    department: str,
    role: str,
    status: str = EmployeeStatus.ACTIVE.value,
) -> Employee:
    """Create a new employee with a freshly generated id."""
    employee = Employee(
        id=assignment_service.new_id(),
        name=name,
        email=email,
        department=department,
        role=role,
        status=status,
    )
    db.session.add(employee)
    commit(db.session, "create employee")

    logger.info("Created employee %s (%s)", employee.id, name)
    return employee


def update_employee(employee_id: str, **fields) -> Employee:
    """
    Update an employee's editable fields.

    Only ``name``, ``email``, ``department``, ``role`` and ``status``
    are applied; ``None`` values are skipped.

    Raises:
        NotFound: If the employee does not exist.
    """
    employee = get_employee_by_id(employee_id)
    if employee is None:
        raise NotFound("employee", employee_id)

    for key in ("name", "email", "department", "role", "status"):
        value = fields.get(key)
        if value is not None:
            setattr(employee, key, value)
    employee.updated_at = datetime.now(timezone.utc)
    commit(db.session, f"update employee {employee_id}")

    logger.info("Updated employee %s", employee_id)
    return employee


def delete_employee(employee_id: str) -> None:
    """
    Delete an employee after the referential guard has passed.

    Raises:
        NotFound: If the employee does not exist.
        Blocked:  If an asset is still assigned to the employee.
    """
    assignment_service.get_engine().delete_employee(employee_id)
