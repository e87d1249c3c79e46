"""adding user.social_medias and relationship.mutual_block

Revision ID: 8b41f2c6d0e3
Revises: 5d0c3a9e7b21
Create Date: 2026-10-18 16:40:02.517349

"""

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = "8b41f2c6d0e3"
down_revision = "5d0c3a9e7b21"
branch_labels = None
depends_on = None


def upgrade() -> None:
    with op.batch_alter_table("users", schema=None) as batch_op:
        batch_op.add_column(
            sa.Column("social_medias", sa.JSON(), nullable=False, server_default="[]")
        )

    with op.batch_alter_table("relationships", schema=None) as batch_op:
        batch_op.add_column(
            sa.Column(
                "mutual_block", sa.Boolean(), nullable=False, server_default=sa.false()
            )
        )


def downgrade() -> None:
    with op.batch_alter_table("relationships", schema=None) as batch_op:
        batch_op.drop_column("mutual_block")

    with op.batch_alter_table("users", schema=None) as batch_op:
        batch_op.drop_column("social_medias")
