"""real_vs_ai_core

Revision ID: 0001_real_vs_ai_core
Revises:
Create Date: 2026-10-19 09:00:00.000000
"""
from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op
from sqlalchemy.dialects import postgresql

revision: str = "0001_real_vs_ai_core"
down_revision: str | None = None
branch_labels: Sequence[str] | None = None
depends_on: Sequence[str] | None = None


def upgrade() -> None:
    op.create_table(
        "images",
        sa.Column("id", sa.BigInteger(), primary_key=True),
        sa.Column("filename", sa.String(255), nullable=False),
        sa.Column("type", sa.String(8), nullable=False),
        sa.Column("difficulty", sa.String(8), nullable=True),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("category", sa.String(64), nullable=True),
        sa.CheckConstraint("type IN ('real','ai')", name="ck_images_type"),
        sa.CheckConstraint(
            "difficulty IS NULL OR difficulty IN ('easy','medium','hard')",
            name="ck_images_difficulty",
        ),
        sa.UniqueConstraint("filename", name="uq_images_filename"),
    )
    op.create_index("idx_images_type_difficulty", "images", ["type", "difficulty"])

    op.create_table(
        "game_sessions",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column("owner_user_id", sa.BigInteger(), nullable=True),
        sa.Column("mode", sa.String(16), nullable=False),
        sa.Column("difficulty", sa.String(8), nullable=False),
        sa.Column("current_turn", sa.Integer(), nullable=False, server_default=sa.text("1")),
        sa.Column("total_turns", sa.Integer(), nullable=False),
        sa.Column("score", sa.Integer(), nullable=False, server_default=sa.text("0")),
        sa.Column("lives", sa.Integer(), nullable=False),
        sa.Column("starting_lives", sa.Integer(), nullable=False),
        sa.Column("current_streak", sa.Integer(), nullable=False, server_default=sa.text("0")),
        sa.Column("current_real_image_id", sa.BigInteger(), nullable=True),
        sa.Column("current_ai_image_id", sa.BigInteger(), nullable=True),
        sa.Column("left_is_real", sa.Boolean(), nullable=False, server_default=sa.text("false")),
        sa.Column(
            "shown_images",
            postgresql.JSONB(astext_type=sa.Text()),
            nullable=False,
            server_default=sa.text("'[]'::jsonb"),
        ),
        sa.Column("time_penalty", sa.Boolean(), nullable=False, server_default=sa.text("false")),
        sa.Column("last_answer_key", sa.String(96), nullable=True),
        sa.Column("last_answer_correct", sa.Boolean(), nullable=True),
        sa.Column("pending_bonus_type", sa.String(16), nullable=True),
        sa.Column("bonus_real_image_id", sa.BigInteger(), nullable=True),
        sa.Column("completed", sa.Boolean(), nullable=False, server_default=sa.text("false")),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.text("now()")),
        sa.Column("completed_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("local_date", sa.Date(), nullable=False),
        sa.CheckConstraint("mode IN ('single','endless','daily_challenge')", name="ck_game_sessions_mode"),
        sa.CheckConstraint(
            "difficulty IN ('easy','medium','hard','endless')",
            name="ck_game_sessions_difficulty",
        ),
        sa.CheckConstraint("current_turn >= 1", name="ck_game_sessions_current_turn_positive"),
        sa.CheckConstraint("total_turns >= 0", name="ck_game_sessions_total_turns_non_negative"),
        sa.CheckConstraint("score >= 0", name="ck_game_sessions_score_non_negative"),
        sa.CheckConstraint("lives >= 0", name="ck_game_sessions_lives_non_negative"),
        sa.CheckConstraint("lives <= starting_lives", name="ck_game_sessions_lives_cap"),
        sa.CheckConstraint("current_streak >= 0", name="ck_game_sessions_current_streak_non_negative"),
        sa.CheckConstraint(
            "current_real_image_id IS NULL OR current_ai_image_id IS NULL "
            "OR current_real_image_id != current_ai_image_id",
            name="ck_game_sessions_distinct_pair",
        ),
        sa.CheckConstraint(
            "pending_bonus_type IS NULL OR pending_bonus_type IN ('four_image','single_image')",
            name="ck_game_sessions_pending_bonus_type",
        ),
    )
    op.create_index("idx_game_sessions_owner_created", "game_sessions", ["owner_user_id", "created_at"])
    op.create_index(
        "uq_game_sessions_daily_owner_date",
        "game_sessions",
        ["owner_user_id", "local_date"],
        unique=True,
        postgresql_where=sa.text("mode = 'daily_challenge'"),
    )

    op.create_table(
        "multiplayer_games",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column("room_code", sa.String(8), nullable=False),
        sa.Column("is_public", sa.Boolean(), nullable=False),
        sa.Column("status", sa.String(16), nullable=False),
        sa.Column("current_turn", sa.Integer(), nullable=False, server_default=sa.text("1")),
        sa.Column("total_turns", sa.Integer(), nullable=False),
        sa.Column("current_real_image_id", sa.BigInteger(), nullable=True),
        sa.Column("current_ai_image_id", sa.BigInteger(), nullable=True),
        sa.Column("left_is_real", sa.Boolean(), nullable=False, server_default=sa.text("false")),
        sa.Column(
            "shown_images",
            postgresql.JSONB(astext_type=sa.Text()),
            nullable=False,
            server_default=sa.text("'[]'::jsonb"),
        ),
        sa.Column("has_bots", sa.Boolean(), nullable=False, server_default=sa.text("false")),
        sa.Column("winner_slot_indexes", postgresql.JSONB(astext_type=sa.Text()), nullable=True),
        sa.Column("wait_timeout_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.text("now()")),
        sa.Column("started_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("completed_at", sa.DateTime(timezone=True), nullable=True),
        sa.CheckConstraint(
            "status IN ('waiting','in_progress','completed')",
            name="ck_multiplayer_games_status",
        ),
        sa.CheckConstraint("current_turn >= 1", name="ck_multiplayer_games_current_turn_positive"),
        sa.CheckConstraint(
            "total_turns >= 5 AND total_turns <= 100",
            name="ck_multiplayer_games_total_turns_range",
        ),
        sa.CheckConstraint(
            "current_real_image_id IS NULL OR current_ai_image_id IS NULL "
            "OR current_real_image_id != current_ai_image_id",
            name="ck_multiplayer_games_distinct_pair",
        ),
        sa.UniqueConstraint("room_code", name="uq_multiplayer_games_room_code"),
    )
    op.create_index(
        "idx_multiplayer_games_status_timeout",
        "multiplayer_games",
        ["status", "wait_timeout_at"],
    )
    op.create_index(
        "idx_multiplayer_games_public_waiting",
        "multiplayer_games",
        ["is_public", "status", "created_at"],
    )

    op.create_table(
        "multiplayer_players",
        sa.Column("id", sa.BigInteger(), primary_key=True),
        sa.Column("game_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("slot_index", sa.Integer(), nullable=False),
        sa.Column("user_id", sa.BigInteger(), nullable=True),
        sa.Column("name", sa.String(64), nullable=False),
        sa.Column("is_bot", sa.Boolean(), nullable=False),
        sa.Column("score", sa.Integer(), nullable=False, server_default=sa.text("0")),
        sa.Column("streak", sa.Integer(), nullable=False, server_default=sa.text("0")),
        sa.Column("answered_turn", sa.Integer(), nullable=False, server_default=sa.text("0")),
        sa.Column("last_answer_correct", sa.Boolean(), nullable=True),
        sa.Column("finished", sa.Boolean(), nullable=False, server_default=sa.text("false")),
        sa.Column("finished_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("joined_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.text("now()")),
        sa.CheckConstraint(
            "slot_index >= 0 AND slot_index <= 3",
            name="ck_multiplayer_players_slot_index_range",
        ),
        sa.CheckConstraint("score >= 0", name="ck_multiplayer_players_score_non_negative"),
        sa.CheckConstraint("streak >= 0", name="ck_multiplayer_players_streak_non_negative"),
        sa.ForeignKeyConstraint(["game_id"], ["multiplayer_games.id"]),
        sa.UniqueConstraint("game_id", "slot_index", name="uq_multiplayer_players_game_slot"),
    )
    op.create_index("idx_multiplayer_players_user", "multiplayer_players", ["user_id"])

    op.create_table(
        "bonus_chest_games",
        sa.Column("id", sa.BigInteger(), primary_key=True),
        sa.Column("game_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("chest_values", postgresql.JSONB(astext_type=sa.Text()), nullable=False),
        sa.Column("chest_claims", postgresql.JSONB(astext_type=sa.Text()), nullable=False),
        sa.Column("completed", sa.Boolean(), nullable=False, server_default=sa.text("false")),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.text("now()")),
        sa.ForeignKeyConstraint(["game_id"], ["multiplayer_games.id"]),
        sa.UniqueConstraint("game_id", name="uq_bonus_chest_games_game_id"),
    )

    op.create_table(
        "leaderboard_entries",
        sa.Column("id", sa.BigInteger(), primary_key=True),
        sa.Column("user_id", sa.BigInteger(), nullable=False),
        sa.Column("username", sa.String(64), nullable=False),
        sa.Column("score", sa.Integer(), nullable=False),
        sa.Column("game_mode", sa.String(16), nullable=False),
        sa.Column("difficulty", sa.String(8), nullable=True),
        sa.Column("session_id", postgresql.UUID(as_uuid=True), nullable=True),
        sa.Column("score_nonce", sa.String(64), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.text("now()")),
        sa.CheckConstraint("score > 0", name="ck_leaderboard_entries_score_positive"),
        sa.CheckConstraint(
            "game_mode IN ('single','endless','multiplayer','daily_challenge')",
            name="ck_leaderboard_entries_game_mode",
        ),
        sa.UniqueConstraint("score_nonce", name="uq_leaderboard_entries_score_nonce"),
    )
    op.create_index(
        "idx_leaderboard_mode_difficulty_score",
        "leaderboard_entries",
        ["game_mode", "difficulty", "score"],
    )
    op.create_index("idx_leaderboard_user_created", "leaderboard_entries", ["user_id", "created_at"])

    op.create_table(
        "achievement_awards",
        sa.Column("id", sa.BigInteger(), primary_key=True),
        sa.Column("user_id", sa.BigInteger(), nullable=False),
        sa.Column("slug", sa.String(64), nullable=False),
        sa.Column(
            "payload",
            postgresql.JSONB(astext_type=sa.Text()),
            nullable=False,
            server_default=sa.text("'{}'::jsonb"),
        ),
        sa.Column("awarded_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.text("now()")),
        sa.UniqueConstraint("user_id", "slug", name="uq_achievement_awards_user_slug"),
    )


def downgrade() -> None:
    op.drop_table("achievement_awards")
    op.drop_index("idx_leaderboard_user_created", table_name="leaderboard_entries")
    op.drop_index("idx_leaderboard_mode_difficulty_score", table_name="leaderboard_entries")
    op.drop_table("leaderboard_entries")
    op.drop_table("bonus_chest_games")
    op.drop_index("idx_multiplayer_players_user", table_name="multiplayer_players")
    op.drop_table("multiplayer_players")
    op.drop_index("idx_multiplayer_games_public_waiting", table_name="multiplayer_games")
    op.drop_index("idx_multiplayer_games_status_timeout", table_name="multiplayer_games")
    op.drop_table("multiplayer_games")
    op.drop_index("uq_game_sessions_daily_owner_date", table_name="game_sessions")
    op.drop_index("idx_game_sessions_owner_created", table_name="game_sessions")
    op.drop_table("game_sessions")
    op.drop_index("idx_images_type_difficulty", table_name="images")
    op.drop_table("images")
