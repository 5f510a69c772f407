"""
Asset service — CRUD for the asset inventory.

Manual edits may move an asset between Available and Repair only.  The
Assigned status and ``assigned_to`` belong to the assignment engine,
so this module refuses to set them and refuses to change the status of
an asset that is currently assigned.  Deletes run the referential guard
through the engine.
"""

import logging
from datetime import date, datetime, timezone

from flask import current_app
from sqlalchemy import or_

from assetdesk.errors import InvalidState, NotFound, ValidationError
from assetdesk.extensions import db
from assetdesk.models.asset import Asset, AssetStatus
from assetdesk.services import assignment_service
from assetdesk.services.store import commit

logger = logging.getLogger(__name__)

# Statuses an administrator may pick by hand.
EDITABLE_STATUSES = [AssetStatus.AVAILABLE.value, AssetStatus.REPAIR.value]


# -- Form validation -------------------------------------------------------


def parse_iso_date(value: str) -> date:
    """Parse a ``YYYY-MM-DD`` string; raises ValueError if malformed."""
    return date.fromisoformat(value.strip())


def clean_asset_form(form) -> dict:
    """
    Validate submitted asset fields.

    Returns:
        A dict with ``purchase_date`` converted to a ``date``.

    Raises:
        ValidationError: Listing every invalid field.
    """
    data = {
        "asset_name": form.get("asset_name", "").strip(),
        "asset_type": form.get("asset_type", "").strip(),
        "serial_number": form.get("serial_number", "").strip(),
        "status": form.get("status", AssetStatus.AVAILABLE.value).strip(),
    }

    errors = []
    if not data["asset_name"]:
        errors.append("Asset name is required.")
    if not data["asset_type"]:
        errors.append("Asset type is required.")
    if not data["serial_number"]:
        errors.append("Serial number is required.")

    purchase_date_str = form.get("purchase_date", "").strip()
    if not purchase_date_str:
        errors.append("Purchase date is required.")
    else:
        try:
            data["purchase_date"] = parse_iso_date(purchase_date_str)
        except ValueError:
            errors.append("Purchase date must be a valid date (YYYY-MM-DD).")

    if errors:
        raise ValidationError(errors)
    return data


def _check_manual_status(status: str) -> None:
    if status == AssetStatus.ASSIGNED.value:
        raise InvalidState("assets can only be assigned from the Assignments page")
    if status not in EDITABLE_STATUSES:
        raise InvalidState(f"unknown asset status '{status}'")


# -- Queries ---------------------------------------------------------------


def get_asset_by_id(asset_id: str) -> Asset | None:
    """Return an asset by primary key."""
    return db.session.get(Asset, asset_id)


def get_assets(search: str | None = None, page: int = 1, per_page: int | None = None):
    """
    Return a page of assets ordered by name.

    Args:
        search:   Case-insensitive substring matched against name, type,
                  serial number and status.
        page:     Page number (1-indexed).
        per_page: Records per page; defaults to ``ROWS_PER_PAGE``.
    """
    if per_page is None:
        per_page = current_app.config["ROWS_PER_PAGE"]

    query = Asset.query.order_by(Asset.asset_name)
    if search:
        pattern = f"%{search.strip()}%"
        query = query.filter(
            or_(
                Asset.asset_name.ilike(pattern),
                Asset.asset_type.ilike(pattern),
                Asset.serial_number.ilike(pattern),
                Asset.status.ilike(pattern),
            )
        )
    return query.paginate(page=page, per_page=per_page, error_out=False)


def get_available_assets() -> list[Asset]:
    """Return assets that can be assigned right now."""
    return (
        Asset.query.filter(Asset.status == AssetStatus.AVAILABLE.value)
        .order_by(Asset.asset_name)
        .all()
    )


# -- Mutations -------------------------------------------------------------


def create_asset(
    asset_name: str,
    asset_type: str,
    serial_number: str,
    purchase_date: date,
    status: str = AssetStatus.AVAILABLE.value,
) -> Asset:
    """
    Create a new, unassigned asset.

    Raises:
        InvalidState: If ``status`` is Assigned or unknown.
    """
    _check_manual_status(status)

    asset = Asset(
        id=assignment_service.new_id(),
        asset_name=asset_name,
        asset_type=asset_type,
        serial_number=serial_number,
        purchase_date=purchase_date,
        status=status,
        assigned_to=None,
    )
    db.session.add(asset)
    commit(db.session, "create asset")

    logger.info("Created asset %s (%s)", asset.id, asset_name)
    return asset


def update_asset(asset_id: str, **fields) -> Asset:
    """
    Update an asset's descriptive fields and, when allowed, its status.

    Raises:
        NotFound:     If the asset does not exist.
        InvalidState: If the new status is Assigned, or the asset is
                      assigned and the status would change.
    """
    asset = get_asset_by_id(asset_id)
    if asset is None:
        raise NotFound("asset", asset_id)

    status = fields.get("status")
    if status is not None and status != asset.status:
        if asset.status == AssetStatus.ASSIGNED.value:
            raise InvalidState("return the asset before changing its status")
        _check_manual_status(status)
        asset.status = status

    for key in ("asset_name", "asset_type", "serial_number", "purchase_date"):
        value = fields.get(key)
        if value is not None:
            setattr(asset, key, value)
    asset.updated_at = datetime.now(timezone.utc)
    commit(db.session, f"update asset {asset_id}")

    logger.info("Updated asset %s", asset_id)
    return asset


def delete_asset(asset_id: str) -> None:
    """
    Delete an asset after the referential guard has passed.

    Raises:
        NotFound: If the asset does not exist.
        Blocked:  If the asset is currently assigned.
    """
    assignment_service.get_engine().delete_asset(asset_id)
