"""Initial schema

Revision ID: 3b7c1e9a2f40
Revises:
Create Date: 2026-10-19 09:00:00.000000

"""

from typing import Sequence, Union

import sqlalchemy as sa

from alembic import op

# revision identifiers, used by Alembic.
revision: str = "3b7c1e9a2f40"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade schema."""
    op.create_table(
        "profiles",
        sa.Column("id", sa.String(64), primary_key=True),
        sa.Column("display_name", sa.String(30), nullable=False),
        sa.Column("date_of_birth", sa.Date(), nullable=False),
        sa.Column("pronouns", sa.String(30), nullable=True),
        sa.Column("region", sa.String(30), nullable=True),
        sa.Column("bio", sa.Text(), nullable=True),
        sa.Column("platforms", sa.JSON(), nullable=False),
        sa.Column("favorite_genres", sa.JSON(), nullable=False),
        sa.Column("top_games", sa.JSON(), nullable=False),
        sa.Column("playstyle", sa.String(20), nullable=True),
        sa.Column("voice_chat", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("typical_play_times", sa.JSON(), nullable=False),
        sa.Column("photo_urls", sa.JSON(), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("is_banned", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("onboarding_completed", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("created_at", sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(), nullable=False, server_default=sa.func.now()),
    )
    op.create_index("ix_profiles_is_active", "profiles", ["is_active"])
    op.create_index("ix_profiles_is_banned", "profiles", ["is_banned"])
    op.create_index("ix_profiles_onboarding_completed", "profiles", ["onboarding_completed"])

    op.create_table(
        "swipes",
        sa.Column("id", sa.String(64), primary_key=True),
        sa.Column("swiper_id", sa.String(64), sa.ForeignKey("profiles.id"), nullable=False),
        sa.Column("swiped_id", sa.String(64), sa.ForeignKey("profiles.id"), nullable=False),
        sa.Column("action", sa.String(10), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.UniqueConstraint("swiper_id", "swiped_id", name="uq_swipes_swiper_swiped"),
        sa.CheckConstraint("swiper_id <> swiped_id", name="ck_swipes_no_self_swipe"),
    )
    op.create_index("ix_swipes_swiper_id", "swipes", ["swiper_id"])
    op.create_index("ix_swipes_created_at", "swipes", ["created_at"])
    op.create_index("idx_swipes_swiped_action", "swipes", ["swiped_id", "action"])

    # One row per unordered pair; user1_id always sorts first
    op.create_table(
        "matches",
        sa.Column("id", sa.String(64), primary_key=True),
        sa.Column("user1_id", sa.String(64), sa.ForeignKey("profiles.id"), nullable=False),
        sa.Column("user2_id", sa.String(64), sa.ForeignKey("profiles.id"), nullable=False),
        sa.Column("matched_at", sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("unmatched_at", sa.DateTime(), nullable=True),
        sa.Column("unmatched_by", sa.String(64), nullable=True),
        sa.Column("unmatch_reason", sa.String(30), nullable=True),
        sa.UniqueConstraint("user1_id", "user2_id", name="uq_matches_pair"),
        sa.CheckConstraint("user1_id < user2_id", name="ck_matches_canonical_order"),
    )
    op.create_index("ix_matches_user1_id", "matches", ["user1_id"])
    op.create_index("ix_matches_user2_id", "matches", ["user2_id"])
    op.create_index("ix_matches_is_active", "matches", ["is_active"])

    op.create_table(
        "blocks",
        sa.Column("id", sa.String(64), primary_key=True),
        sa.Column("blocker_id", sa.String(64), sa.ForeignKey("profiles.id"), nullable=False),
        sa.Column("blocked_id", sa.String(64), sa.ForeignKey("profiles.id"), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.UniqueConstraint("blocker_id", "blocked_id", name="uq_blocks_pair"),
    )
    op.create_index("ix_blocks_blocker_id", "blocks", ["blocker_id"])
    op.create_index("ix_blocks_blocked_id", "blocks", ["blocked_id"])

    op.create_table(
        "reports",
        sa.Column("id", sa.String(64), primary_key=True),
        sa.Column("reporter_id", sa.String(64), sa.ForeignKey("profiles.id"), nullable=False),
        sa.Column("reported_id", sa.String(64), sa.ForeignKey("profiles.id"), nullable=False),
        sa.Column("category", sa.String(30), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("status", sa.String(20), nullable=False, server_default=sa.text("'pending'")),
        sa.Column("admin_notes", sa.Text(), nullable=True),
        sa.Column("reviewed_by", sa.String(64), nullable=True),
        sa.Column("reviewed_at", sa.DateTime(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False, server_default=sa.func.now()),
    )
    op.create_index("ix_reports_reporter_id", "reports", ["reporter_id"])
    op.create_index("ix_reports_reported_id", "reports", ["reported_id"])
    op.create_index("ix_reports_status", "reports", ["status"])
    op.create_index("ix_reports_created_at", "reports", ["created_at"])

    op.create_table(
        "deletion_requests",
        sa.Column("user_id", sa.String(64), sa.ForeignKey("profiles.id"), primary_key=True),
        sa.Column("requested_at", sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.Column("scheduled_deletion_at", sa.DateTime(), nullable=False),
        sa.Column("cancelled_at", sa.DateTime(), nullable=True),
    )
    op.create_index("ix_deletion_requests_scheduled_deletion_at", "deletion_requests", ["scheduled_deletion_at"])


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_table("deletion_requests")
    op.drop_table("reports")
    op.drop_table("blocks")
    op.drop_table("matches")
    op.drop_table("swipes")
    op.drop_table("profiles")
