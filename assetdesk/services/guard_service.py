"""
Referential guard — pre-delete checks for employees and assets.

An asset may not be deleted while it is Assigned, and an employee may
not be deleted while any asset's ``assigned_to`` points at them.  The
employee check is a full scan over assets, which is fine at
organisation scale.
"""

import logging

from assetdesk.errors import Blocked, NotFound
from assetdesk.models.asset import AssetStatus
from assetdesk.services.store import EntityStore

logger = logging.getLogger(__name__)


class ReferentialGuard:
    """Delete preconditions evaluated against an ``EntityStore``."""

    def __init__(self, store: EntityStore):
        self.store = store

    def ensure_asset_deletable(self, asset_id: str):
        """
        Return the asset if it may be deleted.

        Raises:
            NotFound: If the asset does not exist.
            Blocked:  If the asset is currently assigned.
        """
        asset = self.store.assets.get(asset_id)
        if asset is None:
            raise NotFound("asset", asset_id)
        if asset.status == AssetStatus.ASSIGNED.value:
            logger.warning("Refused delete of assigned asset %s", asset_id)
            raise Blocked("asset is assigned")
        return asset

    def ensure_employee_deletable(self, employee_id: str):
        """
        Return the employee if they may be deleted.

        Raises:
            NotFound: If the employee does not exist.
            Blocked:  If any asset is assigned to the employee; the
                      exception names the first such asset.
        """
        employee = self.store.employees.get(employee_id)
        if employee is None:
            raise NotFound("employee", employee_id)

        for asset in self.store.assets.list():
            if asset.assigned_to == employee_id:
                logger.warning(
                    "Refused delete of employee %s: asset %s is assigned",
                    employee_id,
                    asset.id,
                )
                raise Blocked(
                    "employee has an assigned asset", asset_name=asset.asset_name
                )
        return employee
