"""Initial schema: conversations, chat messages, file contexts, summaries.

Revision ID: 001
Revises:
Create Date: 2026-10-19
"""

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects.postgresql import JSONB, TIMESTAMP, UUID

# revision identifiers, used by Alembic.
revision = "001"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    # ==========================================================================
    # CONVERSATIONS TABLE
    # ==========================================================================
    op.create_table(
        "conversations",
        sa.Column("id", UUID(as_uuid=True), primary_key=True, server_default=sa.text("gen_random_uuid()")),
        sa.Column("title", sa.String(), nullable=False, server_default="New Chat"),
        sa.Column("mode", sa.String(), nullable=False, server_default="exam"),  # exam, coding, syllabus
        sa.Column("created_at", TIMESTAMP(timezone=True), server_default=sa.text("NOW()"), nullable=False),
        sa.Column("updated_at", TIMESTAMP(timezone=True), server_default=sa.text("NOW()"), nullable=False),
    )
    op.create_index("idx_conversations_updated_at", "conversations", ["updated_at"])

    # ==========================================================================
    # CHAT MESSAGES TABLE
    # ==========================================================================
    op.create_table(
        "chat_messages",
        sa.Column("id", UUID(as_uuid=True), primary_key=True, server_default=sa.text("gen_random_uuid()")),
        sa.Column(
            "conversation_id",
            UUID(as_uuid=True),
            sa.ForeignKey("conversations.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("position", sa.Integer(), nullable=False),
        sa.Column("role", sa.String(), nullable=False),  # user, assistant
        sa.Column("content", sa.Text(), nullable=False),
        sa.Column("created_at", TIMESTAMP(timezone=True), server_default=sa.text("NOW()"), nullable=False),
    )
    op.create_index(
        "idx_chat_messages_conversation_position",
        "chat_messages",
        ["conversation_id", "position"],
        unique=True,
    )

    # ==========================================================================
    # FILE CONTEXTS TABLE
    # ==========================================================================
    op.create_table(
        "file_contexts",
        sa.Column("id", UUID(as_uuid=True), primary_key=True, server_default=sa.text("gen_random_uuid()")),
        sa.Column(
            "conversation_id",
            UUID(as_uuid=True),
            sa.ForeignKey("conversations.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("file_name", sa.String(), nullable=False),
        sa.Column("file_type", sa.String(), nullable=False),
        sa.Column("content", sa.Text(), nullable=False, server_default=""),
        sa.Column("uploaded_at", TIMESTAMP(timezone=True), server_default=sa.text("NOW()"), nullable=False),
    )
    op.create_index("idx_file_contexts_conversation_id", "file_contexts", ["conversation_id"])

    # ==========================================================================
    # SUMMARIES TABLE (no FK: summaries outlive their conversation)
    # ==========================================================================
    op.create_table(
        "summaries",
        sa.Column("id", UUID(as_uuid=True), primary_key=True, server_default=sa.text("gen_random_uuid()")),
        sa.Column("chat_id", UUID(as_uuid=True), nullable=False),
        sa.Column("file_name", sa.String(), nullable=True),
        sa.Column("original_content", sa.Text(), nullable=False, server_default=""),
        sa.Column("summary", JSONB(), nullable=False, server_default=sa.text("'{}'::jsonb")),
        sa.Column("placeholder", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("created_at", TIMESTAMP(timezone=True), server_default=sa.text("NOW()"), nullable=False),
    )
    op.create_index("idx_summaries_chat_id", "summaries", ["chat_id"])


def downgrade() -> None:
    op.drop_index("idx_summaries_chat_id", table_name="summaries")
    op.drop_table("summaries")
    op.drop_index("idx_file_contexts_conversation_id", table_name="file_contexts")
    op.drop_table("file_contexts")
    op.drop_index("idx_chat_messages_conversation_position", table_name="chat_messages")
    op.drop_table("chat_messages")
    op.drop_index("idx_conversations_updated_at", table_name="conversations")
    op.drop_table("conversations")
