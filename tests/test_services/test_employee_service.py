"""
Tests for the employee service: form validation, CRUD and search.
"""

from datetime import date

import pytest
from werkzeug.datastructures import MultiDict

from assetdesk.errors import Blocked, NotFound, ValidationError
from assetdesk.services import asset_service, assignment_service, employee_service


def _form(**overrides):
    data = {
        "name": "Ada Lovelace",
        "email": "ada@example.com",
        "department": "Engineering",
        "role": "Developer",
        "status": "Active",
    }
    data.update(overrides)
    return MultiDict(data)


class TestCleanEmployeeForm:
    """Tests for clean_employee_form()."""

    def test_valid_form_is_stripped(self):
        """Surrounding whitespace is removed from every field."""
        data = employee_service.clean_employee_form(_form(name="  Ada Lovelace "))
        assert data["name"] == "Ada Lovelace"

    def test_missing_fields_are_all_reported(self):
        """Every missing required field produces its own message."""
        with pytest.raises(ValidationError) as exc_info:
            employee_service.clean_employee_form(
                _form(name="", email="", department="", role="")
            )
        assert exc_info.value.errors == [
            "Name is required.",
            "Email is required.",
            "Department is required.",
            "Role is required.",
        ]

    def test_malformed_email(self):
        """An address without a domain is rejected."""
        with pytest.raises(ValidationError) as exc_info:
            employee_service.clean_employee_form(_form(email="ada@nowhere"))
        assert exc_info.value.errors == ["Invalid email format."]

    def test_unknown_status(self):
        """Only Active and Inactive are accepted."""
        with pytest.raises(ValidationError):
            employee_service.clean_employee_form(_form(status="Retired"))


class TestEmployeeCrud:
    """Tests for create/update/delete against the database."""

    def test_create_employee(self, db_session):
        """A new employee gets a UUID id and Active status."""
        employee = employee_service.create_employee(
            "Ada Lovelace", "ada@example.com", "Engineering", "Developer"
        )
        assert len(employee.id) == 36
        assert employee_service.get_employee_by_id(employee.id).status == "Active"

    def test_update_employee(self, db_session):
        """Only the supplied fields change."""
        employee = employee_service.create_employee(
            "Ada Lovelace", "ada@example.com", "Engineering", "Developer"
        )
        employee_service.update_employee(employee.id, role="Lead", name=None)

        updated = employee_service.get_employee_by_id(employee.id)
        assert updated.role == "Lead"
        assert updated.name == "Ada Lovelace"

    def test_update_missing_employee(self, db_session):
        """Updating an unknown id raises NotFound."""
        with pytest.raises(NotFound):
            employee_service.update_employee("missing", role="Lead")

    def test_delete_employee(self, db_session):
        """An employee holding nothing is removed."""
        employee = employee_service.create_employee(
            "Ada Lovelace", "ada@example.com", "Engineering", "Developer"
        )
        employee_id = employee.id
        employee_service.delete_employee(employee_id)
        assert employee_service.get_employee_by_id(employee_id) is None

    def test_delete_employee_holding_asset_is_blocked(self, db_session):
        """The refusal names the held asset and nothing is deleted."""
        employee = employee_service.create_employee(
            "Linus Torvalds", "linus@example.com", "Engineering", "Developer"
        )
        asset = asset_service.create_asset(
            "ThinkPad X1", "Laptop", "SN-X1", date(2024, 5, 1)
        )
        assignment_service.assign_asset(asset.id, employee.id)

        with pytest.raises(Blocked) as exc_info:
            employee_service.delete_employee(employee.id)

        assert exc_info.value.asset_name == "ThinkPad X1"
        assert employee_service.get_employee_by_id(employee.id) is not None


class TestEmployeeQueries:
    """Tests for search, pagination and the active list."""

    @pytest.fixture()
    def staff(self, db_session):
        employee_service.create_employee(
            "Ada Lovelace", "ada@example.com", "Engineering", "Developer"
        )
        employee_service.create_employee(
            "Grace Hopper", "grace@navy.example", "Operations", "Admiral"
        )
        employee_service.create_employee(
            "Alan Turing", "alan@example.com", "Finance", "Analyst", "Inactive"
        )

    def test_list_is_ordered_by_name(self, staff):
        """Employees are listed alphabetically."""
        page = employee_service.get_employees()
        assert [e.name for e in page.items] == [
            "Ada Lovelace",
            "Alan Turing",
            "Grace Hopper",
        ]

    @pytest.mark.parametrize(
        "term, expected",
        [
            ("grace", ["Grace Hopper"]),
            ("NAVY", ["Grace Hopper"]),
            ("finance", ["Alan Turing"]),
            ("developer", ["Ada Lovelace"]),
            ("nobody", []),
        ],
    )
    def test_search_matches_name_email_department_role(self, staff, term, expected):
        """Search is a case-insensitive substring match."""
        page = employee_service.get_employees(search=term)
        assert [e.name for e in page.items] == expected

    def test_pagination(self, staff):
        """per_page limits each page."""
        page = employee_service.get_employees(page=2, per_page=2)
        assert page.total == 3
        assert [e.name for e in page.items] == ["Grace Hopper"]

    def test_active_employees_excludes_inactive(self, staff):
        """Only Active employees can receive assets."""
        names = [e.name for e in employee_service.get_active_employees()]
        assert names == ["Ada Lovelace", "Grace Hopper"]
