"""
Routes for the assignments blueprint — history, assign, return.

Every lifecycle refusal (asset not found, already assigned, under
repair, already returned) is flashed to the admin verbatim.
"""

import logging

from flask import flash, redirect, render_template, request, url_for
from flask_login import login_required

from assetdesk.blueprints.assignments import bp
from assetdesk.errors import StoreError
from assetdesk.services import (
    asset_service,
    assignment_service,
    employee_service,
    paging,
)

logger = logging.getLogger(__name__)


@bp.route("/")
@login_required
def assignment_list():
    """List assignments newest first, with search and pagination."""
    search = request.args.get("q", "").strip()
    page = request.args.get("page", 1, type=int)
    per_page = paging.resolve_per_page(request.args.get("per_page", type=int))
    pagination = assignment_service.get_assignments(
        search=search or None, page=page, per_page=per_page
    )
    return render_template(
        "assignments/list.html",
        pagination=pagination,
        assignments=pagination.items,
        search=search,
        per_page=per_page,
    )


@bp.route("/new", methods=["GET", "POST"])
@login_required
def assignment_create():
    """Assign an available asset to an active employee."""
    if request.method == "POST":
        asset_id = request.form.get("asset_id", "").strip()
        employee_id = request.form.get("employee_id", "").strip()

        errors = []
        if not asset_id:
            errors.append("Please select an asset.")
        if not employee_id:
            errors.append("Please select an employee.")

        if not errors:
            try:
                result = assignment_service.assign_asset(asset_id, employee_id)
                flash(
                    f"'{result.assignment.asset_name}' assigned to "
                    f"{result.assignment.employee_name}.",
                    "success",
                )
                return redirect(url_for("assignments.assignment_list"))
            except (ValueError, StoreError) as exc:
                errors.append(str(exc))

        for error in errors:
            flash(error, "danger")
        return _render_form(form_data=request.form, status_code=400)

    return _render_form()


@bp.route("/<assignment_id>/return", methods=["POST"])
@login_required
def assignment_return(assignment_id):
    """Return the asset held under an active assignment."""
    asset_id = request.form.get("asset_id", "").strip()
    if not asset_id:
        assignment = assignment_service.get_assignment_by_id(assignment_id)
        asset_id = assignment.asset_id if assignment else ""

    try:
        result = assignment_service.return_asset(asset_id, assignment_id)
        flash(f"'{result.assignment.asset_name}' returned.", "success")
    except (ValueError, StoreError) as exc:
        flash(str(exc), "danger")
    return redirect(url_for("assignments.assignment_list"))


def _render_form(form_data=None, status_code: int = 200):
    return (
        render_template(
            "assignments/form.html",
            available_assets=asset_service.get_available_assets(),
            employees=employee_service.get_active_employees(),
            form_data=form_data or {},
        ),
        status_code,
    )
