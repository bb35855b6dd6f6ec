"""Initial schema with all tables.

Revision ID: 001_initial
Revises:
Create Date: 2026-10-19

This migration creates the complete Adaptive Chat database schema:
- Tables: users, modes, chats, chat_messages
- Indexes: chat listing (pinned, updated) and date filtering, message order
- Checks: persona mode names

Types are portable so the same migration runs on PostgreSQL and SQLite;
JSON columns become JSONB on PostgreSQL. Timestamps and ids are assigned
by the application.
"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = "001_initial"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

JSON = sa.JSON().with_variant(postgresql.JSONB(), "postgresql")
MODE_CHECK = "IN ('developer', 'learner', 'hr')"


def upgrade() -> None:
    # ==========================================================================
    # USERS TABLE
    # ==========================================================================
    op.create_table(
        "users",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("email", sa.String(320), nullable=False),
        sa.Column("password_hash", sa.String(255), nullable=False),
        sa.Column("profile_picture", sa.Text(), nullable=False, server_default=""),
        sa.Column("preferences", JSON, nullable=False),
        sa.Column("integrations", JSON, nullable=False),
        sa.Column("total_chats", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("favorite_mode", sa.String(20), nullable=False, server_default="developer"),
        sa.Column("learning_xp", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("streak_days", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("last_active", sa.DateTime(timezone=True), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_users_email", "users", ["email"], unique=True)

    # ==========================================================================
    # MODES TABLE (reference data, filled by scripts/seed_modes.py)
    # ==========================================================================
    op.create_table(
        "modes",
        sa.Column("name", sa.String(20), nullable=False),
        sa.Column("display_name", sa.String(100), nullable=False),
        sa.Column("icon", sa.String(16), nullable=False),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("system_prompt", sa.Text(), nullable=False),
        sa.Column("greeting", sa.Text(), nullable=False),
        sa.Column("themes", JSON, nullable=False),
        sa.Column("position", sa.Integer(), nullable=False, server_default="0"),
        sa.PrimaryKeyConstraint("name"),
        sa.CheckConstraint(f"name {MODE_CHECK}", name="valid_mode_name"),
    )

    # ==========================================================================
    # CHATS TABLE
    # ==========================================================================
    op.create_table(
        "chats",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("user_id", sa.Uuid(), nullable=False),
        sa.Column("mode", sa.String(20), nullable=False),
        sa.Column("title", sa.String(255), nullable=False, server_default="New Chat"),
        sa.Column("is_pinned", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("message_count", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("version", sa.Integer(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="CASCADE"),
        sa.CheckConstraint(f"mode {MODE_CHECK}", name="valid_chat_mode"),
    )
    op.create_index("idx_chats_user_pinned_updated", "chats", ["user_id", "is_pinned", "updated_at"])
    op.create_index("idx_chats_user_created", "chats", ["user_id", "created_at"])

    # ==========================================================================
    # CHAT_MESSAGES TABLE
    # ==========================================================================
    op.create_table(
        "chat_messages",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("chat_id", sa.Uuid(), nullable=False),
        sa.Column("position", sa.Integer(), nullable=False),
        sa.Column("role", sa.String(20), nullable=False),
        sa.Column("content", sa.Text(), nullable=False),
        sa.Column("attachments", JSON, nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["chat_id"], ["chats.id"], ondelete="CASCADE"),
    )
    op.create_index("idx_chat_messages_chat_position", "chat_messages", ["chat_id", "position"])


def downgrade() -> None:
    op.drop_index("idx_chat_messages_chat_position", table_name="chat_messages")
    op.drop_table("chat_messages")
    op.drop_index("idx_chats_user_created", table_name="chats")
    op.drop_index("idx_chats_user_pinned_updated", table_name="chats")
    op.drop_table("chats")
    op.drop_table("modes")
    op.drop_index("ix_users_email", table_name="users")
    op.drop_table("users")
