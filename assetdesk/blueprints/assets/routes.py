"""
Routes for the assets blueprint — list, create, edit, delete.

The status field offers Available and Repair only.  Assigning and
returning happen on the assignments blueprint.
"""

import logging

from flask import current_app, flash, redirect, render_template, request, url_for
from flask_login import login_required

from assetdesk.blueprints.assets import bp
from assetdesk.errors import StoreError, ValidationError
from assetdesk.services import asset_service, paging

logger = logging.getLogger(__name__)


def _render_form(mode: str, asset=None, form_data=None, status_code: int = 200):
    return (
        render_template(
            "assets/form.html",
            mode=mode,
            asset=asset,
            form_data=form_data or {},
            asset_types=current_app.config["ASSET_TYPES"],
            statuses=asset_service.EDITABLE_STATUSES,
        ),
        status_code,
    )


@bp.route("/")
@login_required
def asset_list():
    """List assets with optional search and pagination."""
    search = request.args.get("q", "").strip()
    page = request.args.get("page", 1, type=int)
    per_page = paging.resolve_per_page(request.args.get("per_page", type=int))
    pagination = asset_service.get_assets(
        search=search or None, page=page, per_page=per_page
    )
    return render_template(
        "assets/list.html",
        pagination=pagination,
        assets=pagination.items,
        search=search,
        per_page=per_page,
    )


@bp.route("/new", methods=["GET", "POST"])
@login_required
def asset_create():
    """Create a new asset."""
    if request.method == "POST":
        try:
            data = asset_service.clean_asset_form(request.form)
            asset_service.create_asset(**data)
        except ValidationError as exc:
            for error in exc.errors:
                flash(error, "danger")
            return _render_form("create", form_data=request.form, status_code=400)
        except (ValueError, StoreError) as exc:
            flash(str(exc), "danger")
            return _render_form("create", form_data=request.form, status_code=400)

        flash(f"Asset '{data['asset_name']}' added successfully.", "success")
        return redirect(url_for("assets.asset_list"))

    return _render_form("create")


@bp.route("/<asset_id>/edit", methods=["GET", "POST"])
@login_required
def asset_edit(asset_id):
    """Edit an existing asset."""
    asset = asset_service.get_asset_by_id(asset_id)
    if asset is None:
        flash("Asset not found.", "warning")
        return redirect(url_for("assets.asset_list"))

    if request.method == "POST":
        try:
            data = asset_service.clean_asset_form(request.form)
            asset_service.update_asset(asset_id, **data)
        except ValidationError as exc:
            for error in exc.errors:
                flash(error, "danger")
            return _render_form(
                "edit", asset=asset, form_data=request.form, status_code=400
            )
        except (ValueError, StoreError) as exc:
            flash(str(exc), "danger")
            return _render_form(
                "edit", asset=asset, form_data=request.form, status_code=400
            )

        flash("Asset updated successfully.", "success")
        return redirect(url_for("assets.asset_list"))

    return _render_form("edit", asset=asset, form_data=asset.to_dict())


@bp.route("/<asset_id>/delete", methods=["POST"])
@login_required
def asset_delete(asset_id):
    """Delete an asset unless it is currently assigned."""
    try:
        asset_service.delete_asset(asset_id)
        flash("Asset deleted successfully.", "success")
    except (ValueError, StoreError) as exc:
        flash(str(exc), "danger")
    return redirect(url_for("assets.asset_list"))
