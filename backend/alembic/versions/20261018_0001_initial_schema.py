"""Initial schema: sketches, team members, characters, props, scripts, media, blob store, order counters

Revision ID: 0001
Revises: None
Create Date: 2026-10-18 09:00:00
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = "0001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

_MYSQL = {"mysql_charset": "utf8mb4", "mysql_collate": "utf8mb4_unicode_ci"}


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column("created_at", sa.DateTime, nullable=True, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime, nullable=True, server_default=sa.func.now()),
    ]


def _media_columns() -> list[sa.Column]:
    return [
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("file_id", sa.String(36), nullable=False),
        sa.Column("file_name", sa.String(255), nullable=False),
        sa.Column("file_type", sa.String(100), nullable=False),
        sa.Column("width", sa.Integer, nullable=True),
        sa.Column("height", sa.Integer, nullable=True),
        sa.Column("created_at", sa.DateTime, nullable=True, server_default=sa.func.now()),
    ]


def upgrade() -> None:
    # --- ordered collections ---
    op.create_table(
        "sketches",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("title", sa.String(100), nullable=False),
        sa.Column("duration", sa.String(50), nullable=True),
        sa.Column("description", sa.Text, nullable=True),
        sa.Column("image_id", sa.String(36), nullable=True),
        sa.Column("order", sa.Integer, nullable=False, server_default="0"),
        *_timestamps(),
        **_MYSQL,
    )
    op.create_index("ix_sketches_order", "sketches", ["order"])

    op.create_table(
        "team_members",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("order", sa.Integer, nullable=False, server_default="0"),
        *_timestamps(),
        **_MYSQL,
    )
    op.create_index("ix_team_members_order", "team_members", ["order"])

    # --- sketch children ---
    op.create_table(
        "characters",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("sketch_id", sa.String(36), sa.ForeignKey("sketches.id"), nullable=False),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("assigned_to", sa.String(36), sa.ForeignKey("team_members.id"), nullable=True),
        *_timestamps(),
        **_MYSQL,
    )
    op.create_index("ix_characters_sketch_id", "characters", ["sketch_id"])
    op.create_index("ix_characters_assigned_to", "characters", ["assigned_to"])

    op.create_table(
        "props",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("status", sa.String(20), nullable=False, server_default="idea", comment="idea | planned | ready"),
        sa.Column("responsible_person_id", sa.String(36), sa.ForeignKey("team_members.id"), nullable=True),
        sa.Column("notes", sa.Text, nullable=True),
        *_timestamps(),
        **_MYSQL,
    )
    op.create_index("ix_props_responsible_person_id", "props", ["responsible_person_id"])

    op.create_table(
        "sketch_props",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("sketch_id", sa.String(36), sa.ForeignKey("sketches.id"), nullable=False),
        sa.Column("prop_id", sa.String(36), sa.ForeignKey("props.id"), nullable=False),
        sa.UniqueConstraint("sketch_id", "prop_id", name="uq_sketch_props_pair"),
        **_MYSQL,
    )
    op.create_index("ix_sketch_props_sketch_id", "sketch_props", ["sketch_id"])
    op.create_index("ix_sketch_props_prop_id", "sketch_props", ["prop_id"])

    op.create_table(
        "scripts",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("sketch_id", sa.String(36), sa.ForeignKey("sketches.id"), nullable=False),
        sa.Column("file_id", sa.String(36), nullable=False),
        sa.Column("file_name", sa.String(255), nullable=False),
        sa.Column("version", sa.Integer, nullable=False, server_default="1"),
        sa.Column("created_at", sa.DateTime, nullable=True, server_default=sa.func.now()),
        **_MYSQL,
    )
    op.create_index("ix_scripts_sketch_id", "scripts", ["sketch_id"])
    op.create_index("ix_scripts_sketch_version", "scripts", ["sketch_id", "version"])

    op.create_table(
        "sketch_media",
        *_media_columns(),
        sa.Column("sketch_id", sa.String(36), sa.ForeignKey("sketches.id"), nullable=False),
        **_MYSQL,
    )
    op.create_index("ix_sketch_media_sketch_id", "sketch_media", ["sketch_id"])

    op.create_table(
        "prop_media",
        *_media_columns(),
        sa.Column("prop_id", sa.String(36), sa.ForeignKey("props.id"), nullable=False),
        **_MYSQL,
    )
    op.create_index("ix_prop_media_prop_id", "prop_media", ["prop_id"])

    op.create_table(
        "order_counters",
        sa.Column("collection", sa.String(64), primary_key=True),
        sa.Column("high_water", sa.Integer, nullable=False, server_default="-1"),
        **_MYSQL,
    )

    # --- blob store ---
    op.create_table(
        "stored_files",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("path", sa.String(1024), nullable=False),
        sa.Column("content_type", sa.String(100), nullable=True),
        sa.Column("size_bytes", sa.BigInteger, nullable=False, server_default="0"),
        sa.Column("checksum", sa.String(64), nullable=True),
        sa.Column("created_at", sa.DateTime, nullable=True, server_default=sa.func.now()),
        **_MYSQL,
    )
    op.create_table(
        "upload_slots",
        sa.Column("token", sa.String(64), primary_key=True),
        sa.Column("created_at", sa.DateTime, nullable=True, server_default=sa.func.now()),
        sa.Column("expires_at", sa.DateTime, nullable=False),
        sa.Column("consumed_at", sa.DateTime, nullable=True),
        sa.Column("file_id", sa.String(36), nullable=True),
        **_MYSQL,
    )


def downgrade() -> None:
    op.drop_table("order_counters")
    op.drop_table("upload_slots")
    op.drop_table("stored_files")
    op.drop_index("ix_prop_media_prop_id", table_name="prop_media")
    op.drop_table("prop_media")
    op.drop_index("ix_sketch_media_sketch_id", table_name="sketch_media")
    op.drop_table("sketch_media")
    op.drop_index("ix_scripts_sketch_version", table_name="scripts")
    op.drop_index("ix_scripts_sketch_id", table_name="scripts")
    op.drop_table("scripts")
    op.drop_index("ix_sketch_props_prop_id", table_name="sketch_props")
    op.drop_index("ix_sketch_props_sketch_id", table_name="sketch_props")
    op.drop_table("sketch_props")
    op.drop_index("ix_props_responsible_person_id", table_name="props")
    op.drop_table("props")
    op.drop_index("ix_characters_assigned_to", table_name="characters")
    op.drop_index("ix_characters_sketch_id", table_name="characters")
    op.drop_table("characters")
    op.drop_index("ix_team_members_order", table_name="team_members")
    op.drop_table("team_members")
    op.drop_index("ix_sketches_order", table_name="sketches")
    op.drop_table("sketches")
