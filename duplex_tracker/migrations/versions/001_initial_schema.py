"""Initial schema: users, purchases, work projects/payments, attachments, audit log.

Revision ID: 001_initial_schema
Revises:
Create Date: 2026-10-18 00:00:00.000000

"""

import sqlalchemy as sa
from alembic import op

# revision identifiers, used by Alembic.
revision = "001_initial_schema"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    # Create users table
    op.create_table(
        "users",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("email", sa.String(length=255), nullable=False, comment="Login identity, unique"),
        sa.Column(
            "full_name",
            sa.String(length=255),
            nullable=False,
            comment="Display name stamped on purchases",
        ),
        sa.Column(
            "role",
            sa.Enum("USER", "ADMIN", name="userrole"),
            nullable=False,
            comment="user or admin",
        ),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("idx_user_email", "users", ["email"], unique=True)

    # Create purchase_types table
    op.create_table(
        "purchase_types",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("name", sa.String(length=100), nullable=False),
        sa.Column("name_ar", sa.String(length=100), nullable=False),
        sa.Column("created_by", sa.String(length=255), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("name"),
        sa.UniqueConstraint("name_ar"),
    )

    # Create purchases table
    op.create_table(
        "purchases",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column(
            "duplex_number", sa.Integer(), nullable=False, comment="Duplex unit number, 1..N"
        ),
        sa.Column(
            "type",
            sa.String(length=100),
            nullable=False,
            comment="Free-text category, built-in or custom-<purchase_type_id>",
        ),
        sa.Column("purchase_date", sa.Date(), nullable=False),
        sa.Column("price", sa.Numeric(precision=12, scale=2), nullable=False),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column(
            "created_by",
            sa.String(length=255),
            nullable=False,
            comment="Display name of the user who recorded the purchase",
        ),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_purchases_duplex_number", "purchases", ["duplex_number"])
    op.create_index("ix_purchases_purchase_date", "purchases", ["purchase_date"])
    op.create_index(
        "idx_purchase_identity",
        "purchases",
        ["name", "duplex_number", "type", "purchase_date"],
    )

    # Create purchases_attachments table
    op.create_table(
        "purchases_attachments",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("purchase_id", sa.Integer(), nullable=False),
        sa.Column("attachment_path", sa.String(length=255), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(["purchase_id"], ["purchases.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(
        "ix_purchases_attachments_purchase_id", "purchases_attachments", ["purchase_id"]
    )

    # Create work_projects table
    op.create_table(
        "work_projects",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column(
            "name", sa.String(length=255), nullable=False, comment='Stored as "<name> - duplex(<n>)"'
        ),
        sa.Column("total_price", sa.Numeric(precision=12, scale=2), nullable=False),
        sa.Column("duration", sa.Integer(), nullable=False, comment="Planned duration in days"),
        sa.Column("start_date", sa.Date(), nullable=False),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("duplex_number", sa.Integer(), nullable=False),
        sa.Column("created_by", sa.String(length=255), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_work_projects_duplex_number", "work_projects", ["duplex_number"])

    # Create work_payments table
    op.create_table(
        "work_payments",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("project_id", sa.Integer(), nullable=False),
        sa.Column("amount", sa.Numeric(precision=12, scale=2), nullable=False),
        sa.Column("date", sa.Date(), nullable=False),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("duplex_number", sa.Integer(), nullable=False),
        sa.Column(
            "created_by",
            sa.String(length=255),
            nullable=True,
            comment="Email of the recording user, or the value supplied by the client",
        ),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(["project_id"], ["work_projects.id"]),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_work_payments_project_id", "work_payments", ["project_id"])
    op.create_index("ix_work_payments_date", "work_payments", ["date"])
    op.create_index("ix_work_payments_duplex_number", "work_payments", ["duplex_number"])
    op.create_index(
        "idx_work_payment_identity", "work_payments", ["project_id", "amount", "date"]
    )

    # Create work_payment_attachments table
    op.create_table(
        "work_payment_attachments",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("payment_id", sa.Integer(), nullable=False),
        sa.Column("attachment_path", sa.String(length=255), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(["payment_id"], ["work_payments.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(
        "ix_work_payment_attachments_payment_id", "work_payment_attachments", ["payment_id"]
    )

    # Create audit_logs table
    op.create_table(
        "audit_logs",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("entity_type", sa.String(length=50), nullable=False),
        sa.Column("entity_id", sa.Integer(), nullable=False),
        sa.Column("action", sa.String(length=50), nullable=False),
        sa.Column("actor_id", sa.Integer(), nullable=True),
        sa.Column("changes", sa.JSON(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(["actor_id"], ["users.id"], ondelete="SET NULL"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("idx_audit_entity", "audit_logs", ["entity_type", "entity_id"])


def downgrade() -> None:
    op.drop_index("idx_audit_entity", table_name="audit_logs")
    op.drop_table("audit_logs")
    op.drop_index("ix_work_payment_attachments_payment_id", table_name="work_payment_attachments")
    op.drop_table("work_payment_attachments")
    op.drop_index("idx_work_payment_identity", table_name="work_payments")
    op.drop_index("ix_work_payments_duplex_number", table_name="work_payments")
    op.drop_index("ix_work_payments_date", table_name="work_payments")
    op.drop_index("ix_work_payments_project_id", table_name="work_payments")
    op.drop_table("work_payments")
    op.drop_index("ix_work_projects_duplex_number", table_name="work_projects")
    op.drop_table("work_projects")
    op.drop_index("ix_purchases_attachments_purchase_id", table_name="purchases_attachments")
    op.drop_table("purchases_attachments")
    op.drop_index("idx_purchase_identity", table_name="purchases")
    op.drop_index("ix_purchases_purchase_date", table_name="purchases")
    op.drop_index("ix_purchases_duplex_number", table_name="purchases")
    op.drop_table("purchases")
    op.drop_table("purchase_types")
    op.drop_index("idx_user_email", table_name="users")
    op.drop_table("users")
