"""Initial schema: employee, asset, assignment, app_user

Creates the four application tables.

    employee    — people assets can be lent to.
    asset       — inventory; ``assigned_to`` references employee.id.
    assignment  — lending history; plain id references so rows outlive
                  the asset or employee they mention.
    app_user    — the administrator login.

CHECK constraints pin the status vocabularies and keep the asset pair
(status = 'Assigned', assigned_to IS NOT NULL) consistent.  A partial unique
index allows at most one Active assignment per asset.

Revision ID: 3c1f9a7d2b40
Revises:
Create Date: 2026-10-19 09:12:44.511203

"""

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = "3c1f9a7d2b40"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    """Create all application tables."""
    op.create_table(
        "employee",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column("name", sa.String(length=200), nullable=False),
        sa.Column("email", sa.String(length=200), nullable=False),
        sa.Column("department", sa.String(length=100), nullable=False),
        sa.Column("role", sa.String(length=100), nullable=False),
        sa.Column("status", sa.String(length=20), nullable=False),
        sa.Column(
            "created_at",
            sa.DateTime(),
            nullable=False,
            server_default=sa.func.current_timestamp(),
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(),
            nullable=False,
            server_default=sa.func.current_timestamp(),
        ),
        sa.CheckConstraint(
            "status IN ('Active', 'Inactive')", name="CK_employee_status"
        ),
    )

    op.create_table(
        "asset",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column("asset_name", sa.String(length=200), nullable=False),
        sa.Column("asset_type", sa.String(length=50), nullable=False),
        sa.Column("serial_number", sa.String(length=100), nullable=False),
        sa.Column("purchase_date", sa.Date(), nullable=False),
        sa.Column("status", sa.String(length=20), nullable=False),
        sa.Column(
            "assigned_to",
            sa.String(length=36),
            sa.ForeignKey("employee.id"),
            nullable=True,
        ),
        sa.Column(
            "created_at",
            sa.DateTime(),
            nullable=False,
            server_default=sa.func.current_timestamp(),
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(),
            nullable=False,
            server_default=sa.func.current_timestamp(),
        ),
        sa.CheckConstraint(
            "status IN ('Available', 'Assigned', 'Repair')",
            name="CK_asset_status",
        ),
        sa.CheckConstraint(
            "(status = 'Assigned' AND assigned_to IS NOT NULL) "
            "OR (status <> 'Assigned' AND assigned_to IS NULL)",
            name="CK_asset_assigned_to",
        ),
    )
    op.create_index("ix_asset_assigned_to", "asset", ["assigned_to"])

    op.create_table(
        "assignment",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column("asset_id", sa.String(length=36), nullable=False),
        sa.Column("employee_id", sa.String(length=36), nullable=False),
        sa.Column("asset_name", sa.String(length=200), nullable=False),
        sa.Column("employee_name", sa.String(length=200), nullable=False),
        sa.Column("assigned_date", sa.Date(), nullable=False),
        sa.Column("returned_date", sa.Date(), nullable=True),
        sa.Column("status", sa.String(length=20), nullable=False),
        sa.Column(
            "created_at",
            sa.DateTime(),
            nullable=False,
            server_default=sa.func.current_timestamp(),
        ),
        sa.CheckConstraint(
            "status IN ('Active', 'Returned')", name="CK_assignment_status"
        ),
    )
    op.create_index("ix_assignment_asset_id", "assignment", ["asset_id"])
    op.create_index("ix_assignment_employee_id", "assignment", ["employee_id"])
    op.create_index(
        "ux_assignment_active_asset",
        "assignment",
        ["asset_id"],
        unique=True,
        sqlite_where=sa.text("status = 'Active'"),
        postgresql_where=sa.text("status = 'Active'"),
    )

    op.create_table(
        "app_user",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("email", sa.String(length=200), nullable=False, unique=True),
        sa.Column("name", sa.String(length=200), nullable=False),
        sa.Column("role", sa.String(length=50), nullable=False),
        sa.Column("password_hash", sa.String(length=128), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False),
        sa.Column("last_login", sa.DateTime(), nullable=True),
        sa.Column(
            "created_at",
            sa.DateTime(),
            nullable=False,
            server_default=sa.func.current_timestamp(),
        ),
    )


def downgrade() -> None:
    """Drop all application tables."""
    op.drop_table("app_user")
    op.drop_index("ux_assignment_active_asset", table_name="assignment")
    op.drop_index("ix_assignment_employee_id", table_name="assignment")
    op.drop_index("ix_assignment_asset_id", table_name="assignment")
    op.drop_table("assignment")
    op.drop_index("ix_asset_assigned_to", table_name="asset")
    op.drop_table("asset")
    op.drop_table("employee")
