"""Initial schema - users, organizations, memberships, roles, templates, resources.

Revision ID: 001
Revises:
Create Date: 2026-10-18

"""

from collections.abc import Sequence

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects.postgresql import JSONB

# revision identifiers, used by Alembic.
revision: str = "001"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None

ID = sa.String(24)


def upgrade() -> None:
    op.create_table(
        "app_user",
        sa.Column("id", ID, primary_key=True),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("username", sa.String(100), nullable=False),
        sa.Column("google_id", sa.String(255), nullable=True),
        sa.Column("github_id", sa.String(255), nullable=True),
        sa.Column("current_organization_id", ID, nullable=True),
        sa.Column("last_login_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index(
        "ux_app_user_email", "app_user", [sa.text("lower(email)")], unique=True
    )

    op.create_table(
        "organization",
        sa.Column("id", ID, primary_key=True),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("description", sa.Text(), nullable=False, server_default=""),
        sa.Column("created_by", ID, sa.ForeignKey("app_user.id"), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
    )

    # role is a built-in name or a custom_role id, so no foreign key
    op.create_table(
        "membership",
        sa.Column("id", ID, primary_key=True),
        sa.Column("user_id", ID, sa.ForeignKey("app_user.id", ondelete="CASCADE"), nullable=False),
        sa.Column(
            "organization_id",
            ID,
            sa.ForeignKey("organization.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("role", sa.String(64), nullable=False),
        sa.Column("status", sa.String(20), nullable=False, server_default="active"),
        sa.Column("title", sa.String(255), nullable=True),
        sa.Column("permissions", JSONB(), nullable=False, server_default=sa.text("'{}'::jsonb")),
        sa.Column("invited_by", ID, nullable=True),
        sa.Column("joined_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("removed_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.CheckConstraint(
            "status IN ('active', 'invited', 'inactive', 'suspended', 'removed')",
            name="ck_membership_status",
        ),
    )
    op.create_index(
        "ux_membership_active",
        "membership",
        ["user_id", "organization_id"],
        unique=True,
        postgresql_where=sa.text("status = 'active'"),
    )
    op.create_index("ix_membership_org_role", "membership", ["organization_id", "role"])

    op.create_table(
        "custom_role",
        sa.Column("id", ID, primary_key=True),
        sa.Column(
            "organization_id",
            ID,
            sa.ForeignKey("organization.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("description", sa.Text(), nullable=False, server_default=""),
        sa.Column("based_on", sa.String(20), nullable=False),
        sa.Column("permissions", JSONB(), nullable=False, server_default=sa.text("'{}'::jsonb")),
        sa.Column(
            "resource_overrides", JSONB(), nullable=False, server_default=sa.text("'[]'::jsonb")
        ),
        sa.Column("is_system_role", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("status", sa.String(20), nullable=False, server_default="active"),
        sa.Column("created_by", ID, nullable=True),
        sa.Column("updated_by", ID, nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("deleted_at", sa.DateTime(timezone=True), nullable=True),
        sa.CheckConstraint(
            "based_on IN ('admin', 'manager', 'member', 'guest', 'custom')",
            name="ck_custom_role_based_on",
        ),
        sa.CheckConstraint(
            "status IN ('draft', 'active', 'deleted')", name="ck_custom_role_status"
        ),
    )
    op.create_index(
        "ux_custom_role_org_name",
        "custom_role",
        ["organization_id", "name"],
        unique=True,
        postgresql_where=sa.text("status <> 'deleted'"),
    )

    op.create_table(
        "permission_template",
        sa.Column("id", ID, primary_key=True),
        sa.Column(
            "organization_id",
            ID,
            sa.ForeignKey("organization.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("description", sa.Text(), nullable=False, server_default=""),
        sa.Column("permissions", JSONB(), nullable=False, server_default=sa.text("'{}'::jsonb")),
        sa.Column("applicable_resource_types", JSONB(), nullable=False),
        sa.Column("is_default", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("created_by", ID, nullable=True),
        sa.Column("updated_by", ID, nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.CheckConstraint(
            "jsonb_array_length(applicable_resource_types) > 0",
            name="ck_permission_template_types",
        ),
    )
    op.create_index(
        "ux_permission_template_org_name",
        "permission_template",
        ["organization_id", "name"],
        unique=True,
    )

    op.create_table(
        "template_application",
        sa.Column("id", ID, primary_key=True),
        sa.Column(
            "template_id",
            ID,
            sa.ForeignKey("permission_template.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("organization_id", ID, nullable=False),
        sa.Column("resource_type", sa.String(20), nullable=False),
        sa.Column("resource_id", ID, nullable=False),
        sa.Column("role_id", ID, nullable=True),
        sa.Column("applied_by", ID, nullable=False),
        sa.Column("applied_at", sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index(
        "ix_template_application_template", "template_application", ["template_id"]
    )

    op.create_table(
        "resource",
        sa.Column("id", ID, primary_key=True),
        sa.Column("resource_type", sa.String(20), nullable=False),
        sa.Column("title", sa.String(500), nullable=False, server_default=""),
        sa.Column("owner_id", ID, nullable=True),
        sa.Column("organization_id", ID, nullable=True),
        sa.Column("is_shared", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("shared_with", JSONB(), nullable=False, server_default=sa.text("'[]'::jsonb")),
        sa.Column("collaborators", JSONB(), nullable=False, server_default=sa.text("'[]'::jsonb")),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.CheckConstraint(
            "resource_type IN ('project', 'team', 'task', 'note')",
            name="ck_resource_type",
        ),
    )
    op.create_index("ix_resource_type_id", "resource", ["resource_type", "id"])
    op.create_index("ix_resource_organization", "resource", ["organization_id"])

    op.create_table(
        "resource_override",
        sa.Column("id", ID, primary_key=True),
        sa.Column(
            "organization_id",
            ID,
            sa.ForeignKey("organization.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("resource_type", sa.String(20), nullable=False),
        sa.Column("resource_id", ID, nullable=False),
        sa.Column("permissions", JSONB(), nullable=False, server_default=sa.text("'{}'::jsonb")),
        sa.Column("template_id", ID, nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.UniqueConstraint(
            "organization_id",
            "resource_type",
            "resource_id",
            name="ux_resource_override_target",
        ),
    )
    op.create_index("ix_resource_override_template", "resource_override", ["template_id"])


def downgrade() -> None:
    op.drop_table("resource_override")
    op.drop_table("resource")
    op.drop_table("template_application")
    op.drop_table("permission_template")
    op.drop_table("custom_role")
    op.drop_table("membership")
    op.drop_table("organization")
    op.drop_table("app_user")
