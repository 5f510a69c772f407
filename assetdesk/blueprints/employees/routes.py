"""
Routes for the employees blueprint — list, create, edit, delete.

Delete is refused while an asset is assigned to the employee; the
refusal message names the asset so the admin knows what to return.
"""

import logging

from flask import current_app, flash, redirect, render_template, request, url_for
from flask_login import login_required

from assetdesk.blueprints.employees import bp
from assetdesk.errors import StoreError, ValidationError
from assetdesk.services import employee_service, paging

logger = logging.getLogger(__name__)


def _render_form(mode: str, employee=None, form_data=None, status_code: int = 200):
    return (
        render_template(
            "employees/form.html",
            mode=mode,
            employee=employee,
            form_data=form_data or {},
            departments=current_app.config["DEPARTMENTS"],
        ),
        status_code,
    )


@bp.route("/")
@login_required
def employee_list():
    """List employees with optional search and pagination."""
    search = request.args.get("q", "").strip()
    page = request.args.get("page", 1, type=int)
    per_page = paging.resolve_per_page(request.args.get("per_page", type=int))
    pagination = employee_service.get_employees(
        search=search or None, page=page, per_page=per_page
    )
    return render_template(
        "employees/list.html",
        pagination=pagination,
        employees=pagination.items,
        search=search,
        per_page=per_page,
    )


@bp.route("/new", methods=["GET", "POST"])
@login_required
def employee_create():
    """Create a new employee."""
    if request.method == "POST":
        try:
            data = employee_service.clean_employee_form(request.form)
        except ValidationError as exc:
            for error in exc.errors:
                flash(error, "danger")
            return _render_form("create", form_data=request.form, status_code=400)

        try:
            employee_service.create_employee(**data)
        except StoreError as exc:
            flash(f"Error creating employee: {exc}", "danger")
            return _render_form("create", form_data=request.form, status_code=500)

        flash(f"Employee '{data['name']}' added successfully.", "success")
        return redirect(url_for("employees.employee_list"))

    return _render_form("create")


@bp.route("/<employee_id>/edit", methods=["GET", "POST"])
@login_required
def employee_edit(employee_id):
    """Edit an existing employee."""
    employee = employee_service.get_employee_by_id(employee_id)
    if employee is None:
        flash("Employee not found.", "warning")
        return redirect(url_for("employees.employee_list"))

    if request.method == "POST":
        try:
            data = employee_service.clean_employee_form(request.form)
            employee_service.update_employee(employee_id, **data)
        except ValidationError as exc:
            for error in exc.errors:
                flash(error, "danger")
            return _render_form(
                "edit", employee=employee, form_data=request.form, status_code=400
            )
        except (ValueError, StoreError) as exc:
            flash(str(exc), "danger")
            return _render_form(
                "edit", employee=employee, form_data=request.form, status_code=400
            )

        flash("Employee updated successfully.", "success")
        return redirect(url_for("employees.employee_list"))

    return _render_form("edit", employee=employee, form_data=employee.to_dict())


@bp.route("/<employee_id>/delete", methods=["POST"])
@login_required
def employee_delete(employee_id):
    """Delete an employee unless an asset is still assigned to them."""
    try:
        employee_service.delete_employee(employee_id)
        flash("Employee deleted successfully.", "success")
    except (ValueError, StoreError) as exc:
        flash(str(exc), "danger")
    return redirect(url_for("employees.employee_list"))
