"""
Model package — imports all models so Alembic and SQLAlchemy can
discover them automatically when ``flask db`` commands are run.

  - employee.py -> employee
  - asset.py    -> asset, assignment
  - user.py     -> app_user
"""

from assetdesk.models.employee import Employee, EmployeeStatus  # noqa: F401
from assetdesk.models.asset import (  # noqa: F401
    Asset,
    AssetStatus,
    Assignment,
    AssignmentStatus,
)
from assetdesk.models.user import User  # noqa: F401
