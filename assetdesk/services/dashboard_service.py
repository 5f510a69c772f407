"""
Dashboard service — aggregate figures for the landing page.
"""

import logging
from dataclasses import dataclass, field

from sqlalchemy import desc, func

from assetdesk.extensions import db
from assetdesk.models.asset import Asset, AssetStatus, Assignment
from assetdesk.models.employee import Employee

logger = logging.getLogger(__name__)

# Number of assignments shown in the "recent" panel.
RECENT_ASSIGNMENT_COUNT = 5


@dataclass
class DashboardStats:
    """Counts and recent activity shown on the dashboard."""

    total_employees: int = 0
    total_assets: int = 0
    assigned_assets: int = 0
    available_assets: int = 0
    repair_assets: int = 0
    recent_assignments: list[Assignment] = field(default_factory=list)
    department_counts: dict[str, int] = field(default_factory=dict)


def get_dashboard_stats() -> DashboardStats:
    """Compute every dashboard figure in a handful of grouped queries."""
    stats = DashboardStats()

    stats.total_employees = db.session.scalar(
        db.select(func.count()).select_from(Employee)
    )

    status_rows = db.session.execute(
        db.select(Asset.status, func.count()).group_by(Asset.status)
    ).all()
    by_status = {status: count for status, count in status_rows}
    stats.assigned_assets = by_status.get(AssetStatus.ASSIGNED.value, 0)
    stats.available_assets = by_status.get(AssetStatus.AVAILABLE.value, 0)
    stats.repair_assets = by_status.get(AssetStatus.REPAIR.value, 0)
    stats.total_assets = sum(by_status.values())

    stats.recent_assignments = (
        Assignment.query.order_by(
            desc(Assignment.assigned_date), desc(Assignment.created_at)
        )
        .limit(RECENT_ASSIGNMENT_COUNT)
        .all()
    )

    department_rows = db.session.execute(
        db.select(Employee.department, func.count())
        .group_by(Employee.department)
        .order_by(Employee.department)
    ).all()
    stats.department_counts = {dept: count for dept, count in department_rows}

    logger.debug(
        "Dashboard: %d employees, %d assets (%d assigned)",
        stats.total_employees,
        stats.total_assets,
        stats.assigned_assets,
    )
    return stats
