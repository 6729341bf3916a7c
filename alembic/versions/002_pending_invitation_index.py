"""One pending invitation per user and organization.

Revision ID: 002
Revises: 001
Create Date: 2026-10-18

"""

from collections.abc import Sequence

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = "002"
down_revision: str | None = "001"
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    op.create_index(
        "ux_membership_invited",
        "membership",
        ["user_id", "organization_id"],
        unique=True,
        postgresql_where=sa.text("status = 'invited'"),
    )


def downgrade() -> None:
    op.drop_index("ux_membership_invited", table_name="membership")
