"""初始表结构：sys_users 与 lh_articles"""

import sqlalchemy as sa
from alembic import op

# Revision identifiers, used by Alembic.
revision = "20261019_0001"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "sys_users",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("username", sa.String(length=50), nullable=True),
        sa.Column("full_name", sa.String(length=100), nullable=False),
        sa.Column("email", sa.String(length=255), nullable=True),
        sa.Column("role_code", sa.String(length=20), nullable=False, server_default="student"),
        sa.Column("is_active", sa.Boolean(), server_default=sa.true()),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    )
    op.create_index("ix_sys_users_id", "sys_users", ["id"])
    op.create_index("ix_sys_users_username", "sys_users", ["username"], unique=True)

    op.create_table(
        "lh_articles",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("title", sa.String(length=255), nullable=False),
        sa.Column("slug", sa.String(length=255), nullable=False),
        sa.Column("content", sa.Text(), nullable=False),
        sa.Column("excerpt", sa.Text(), nullable=True),
        sa.Column("cover_image", sa.Text(), nullable=True),
        sa.Column("category", sa.String(length=100), nullable=True),
        sa.Column("tags", sa.JSON(), nullable=False),
        sa.Column("status", sa.String(length=20), nullable=False, server_default="draft"),
        sa.Column("author_id", sa.Integer(), nullable=True),
        sa.Column("views", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("published_at", sa.DateTime(timezone=True), nullable=True),
    )
    op.create_index("ix_lh_articles_id", "lh_articles", ["id"])
    op.create_index("ix_lh_articles_slug", "lh_articles", ["slug"], unique=True)
    op.create_index("ix_lh_articles_category", "lh_articles", ["category"])
    op.create_index("ix_lh_articles_status", "lh_articles", ["status"])
    op.create_index("ix_lh_articles_author_id", "lh_articles", ["author_id"])


def downgrade() -> None:
    op.drop_table("lh_articles")
    op.drop_table("sys_users")
