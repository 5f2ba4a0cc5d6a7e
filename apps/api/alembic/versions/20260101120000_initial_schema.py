"""initial schema

Revision ID: 20260101120000
Revises:
Create Date: 2026-01-01 12:00:00.000000

"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = "20260101120000"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

user_role = sa.Enum(
    "ADMIN",
    "SECRETARY",
    "FINANCE",
    "MEMBER",
    "COORDENADOR",
    "VICE_COORDENADOR",
    "CELEBRANTE",
    name="user_role",
)
member_status = sa.Enum("ativo", "inativo", name="member_status")
baptism_status = sa.Enum(
    "Solicitado", "Em Triagem", "Agendado", "Concluído", name="baptism_status"
)
gender = sa.Enum("m", "f", name="gender")
presence_status = sa.Enum("pendente", "confirmado", "ausente", name="presence_status")
transaction_type = sa.Enum("entrada", "saída", name="transaction_type")


def upgrade() -> None:
    """Create all pastoral tables."""
    # Members
    op.create_table(
        "users",
        sa.Column("id", sa.String(length=191), nullable=False),
        sa.Column("role", user_role, nullable=False, server_default="MEMBER"),
        sa.Column("name", sa.String(length=200), nullable=False),
        sa.Column("email", sa.String(length=320), nullable=False, server_default=""),
        sa.Column("phone", sa.String(length=40), nullable=True),
        sa.Column("status", member_status, nullable=False, server_default="ativo"),
        sa.Column("birth_date", sa.String(length=5), nullable=True),
        sa.Column("address", sa.String(length=500), nullable=True),
        sa.Column("marital_status", sa.String(length=50), nullable=True),
        sa.Column("spouse_name", sa.String(length=200), nullable=True),
        sa.Column("wedding_date", sa.String(length=5), nullable=True),
        sa.Column("has_children", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("children_data", sa.Text(), nullable=True),
        sa.Column("sacraments", sa.Text(), nullable=True),
        sa.Column("photo_url", sa.String(length=1000), nullable=True),
        sa.Column("created_at", sa.TIMESTAMP(timezone=True), nullable=True),
        sa.Column("updated_at", sa.TIMESTAMP(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_users")),
    )

    # Baptisms and the ceremony scale
    op.create_table(
        "baptisms",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("child_name", sa.String(length=200), nullable=False),
        sa.Column("parent_names", sa.String(length=500), nullable=True),
        sa.Column("godparents_names", sa.String(length=500), nullable=True),
        sa.Column("status", baptism_status, nullable=False, server_default="Solicitado"),
        sa.Column("scheduled_date", sa.Date(), nullable=True),
        sa.Column("celebrant_id", sa.String(length=191), nullable=True),
        sa.Column("course_done", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("docs_ok", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("observations", sa.Text(), nullable=True),
        sa.Column("gender", gender, nullable=True),
        sa.Column("age", sa.Integer(), nullable=True),
        sa.Column("city", sa.String(length=120), nullable=True),
        sa.ForeignKeyConstraint(
            ["celebrant_id"],
            ["users.id"],
            name=op.f("fk_baptisms_celebrant_id_users"),
            ondelete="RESTRICT",
        ),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_baptisms")),
    )
    op.create_index(op.f("ix_baptisms_status"), "baptisms", ["status"], unique=False)
    op.create_index(
        op.f("ix_baptisms_scheduled_date"), "baptisms", ["scheduled_date"], unique=False
    )

    op.create_table(
        "schedules",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("baptism_id", sa.Integer(), nullable=False),
        sa.Column("user_id", sa.String(length=191), nullable=False),
        sa.Column("role", sa.String(length=100), nullable=True),
        sa.Column("presence_status", presence_status, nullable=False, server_default="pendente"),
        sa.ForeignKeyConstraint(
            ["baptism_id"],
            ["baptisms.id"],
            name=op.f("fk_schedules_baptism_id_baptisms"),
            ondelete="CASCADE",
        ),
        sa.ForeignKeyConstraint(
            ["user_id"],
            ["users.id"],
            name=op.f("fk_schedules_user_id_users"),
            ondelete="RESTRICT",
        ),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_schedules")),
        sa.UniqueConstraint("baptism_id", "user_id", name="uq_schedules_baptism_user"),
    )
    op.create_index(op.f("ix_schedules_baptism_id"), "schedules", ["baptism_id"], unique=False)
    op.create_index(op.f("ix_schedules_user_id"), "schedules", ["user_id"], unique=False)

    # Finance
    op.create_table(
        "finance",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("type", transaction_type, nullable=False),
        sa.Column("value", sa.Numeric(precision=12, scale=2), nullable=False),
        sa.Column("description", sa.String(length=500), nullable=False),
        sa.Column("date", sa.Date(), nullable=False),
        sa.Column("category", sa.String(length=100), nullable=True),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_finance")),
    )
    op.create_index(op.f("ix_finance_date"), "finance", ["date"], unique=False)

    # Activities
    op.create_table(
        "minutes",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("meeting_date", sa.Date(), nullable=False),
        sa.Column("meeting_time", sa.String(length=5), nullable=True),
        sa.Column("title", sa.String(length=200), nullable=True),
        sa.Column("type", sa.String(length=50), nullable=True),
        sa.Column("responsible_id", sa.String(length=191), nullable=True),
        sa.Column("location", sa.String(length=300), nullable=True),
        sa.Column("content", sa.Text(), nullable=True),
        sa.Column("file_url", sa.String(length=1000), nullable=True),
        sa.Column("author_id", sa.String(length=191), nullable=False),
        sa.ForeignKeyConstraint(
            ["responsible_id"],
            ["users.id"],
            name=op.f("fk_minutes_responsible_id_users"),
            ondelete="RESTRICT",
        ),
        sa.ForeignKeyConstraint(
            ["author_id"],
            ["users.id"],
            name=op.f("fk_minutes_author_id_users"),
            ondelete="RESTRICT",
        ),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_minutes")),
    )
    op.create_index(op.f("ix_minutes_meeting_date"), "minutes", ["meeting_date"], unique=False)

    op.create_table(
        "events",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("title", sa.String(length=200), nullable=False),
        sa.Column("date", sa.Date(), nullable=False),
        sa.Column("time", sa.String(length=5), nullable=True),
        sa.Column("location", sa.String(length=300), nullable=True),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("status", sa.String(length=50), nullable=False, server_default="Agendado"),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_events")),
    )
    op.create_index(op.f("ix_events_date"), "events", ["date"], unique=False)

    op.create_table(
        "requests",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("title", sa.String(length=200), nullable=False),
        sa.Column("type", sa.String(length=20), nullable=False),
        sa.Column("urgency", sa.String(length=10), nullable=False, server_default="medium"),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("status", sa.String(length=50), nullable=False, server_default="Pendente"),
        sa.Column("author_id", sa.String(length=191), nullable=True),
        sa.Column("created_at", sa.TIMESTAMP(timezone=True), nullable=True),
        sa.ForeignKeyConstraint(
            ["author_id"],
            ["users.id"],
            name=op.f("fk_requests_author_id_users"),
            ondelete="RESTRICT",
        ),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_requests")),
    )
    op.create_index(op.f("ix_requests_status"), "requests", ["status"], unique=False)

    op.create_table(
        "formations",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("title", sa.String(length=200), nullable=False),
        sa.Column("date", sa.Date(), nullable=False),
        sa.Column("facilitator", sa.String(length=200), nullable=True),
        sa.Column("content", sa.Text(), nullable=True),
        sa.Column("file_url", sa.String(length=1000), nullable=True),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_formations")),
    )
    op.create_index(op.f("ix_formations_date"), "formations", ["date"], unique=False)

    op.create_table(
        "communications",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("title", sa.String(length=200), nullable=False),
        sa.Column("content", sa.Text(), nullable=False),
        sa.Column("file_url", sa.String(length=1000), nullable=True),
        sa.Column("date", sa.Date(), nullable=False),
        sa.Column("author_id", sa.String(length=191), nullable=True),
        sa.ForeignKeyConstraint(
            ["author_id"],
            ["users.id"],
            name=op.f("fk_communications_author_id_users"),
            ondelete="RESTRICT",
        ),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_communications")),
    )
    op.create_index(op.f("ix_communications_date"), "communications", ["date"], unique=False)

    # System
    op.create_table(
        "uploads",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("name", sa.String(length=200), nullable=False),
        sa.Column("filename", sa.String(length=300), nullable=False),
        sa.Column("url", sa.String(length=1000), nullable=False),
        sa.Column("category", sa.String(length=50), nullable=False, server_default="Template"),
        sa.Column("created_at", sa.TIMESTAMP(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_uploads")),
    )

    op.create_table(
        "configs",
        sa.Column("key", sa.String(length=100), nullable=False),
        sa.Column("value", sa.Text(), nullable=False),
        sa.Column("updated_at", sa.TIMESTAMP(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint("key", name=op.f("pk_configs")),
    )


def downgrade() -> None:
    """Drop all pastoral tables."""
    op.drop_table("configs")
    op.drop_table("uploads")
    op.drop_index(op.f("ix_communications_date"), table_name="communications")
    op.drop_table("communications")
    op.drop_index(op.f("ix_formations_date"), table_name="formations")
    op.drop_table("formations")
    op.drop_index(op.f("ix_requests_status"), table_name="requests")
    op.drop_table("requests")
    op.drop_index(op.f("ix_events_date"), table_name="events")
    op.drop_table("events")
    op.drop_index(op.f("ix_minutes_meeting_date"), table_name="minutes")
    op.drop_table("minutes")
    op.drop_index(op.f("ix_finance_date"), table_name="finance")
    op.drop_table("finance")
    op.drop_index(op.f("ix_schedules_user_id"), table_name="schedules")
    op.drop_index(op.f("ix_schedules_baptism_id"), table_name="schedules")
    op.drop_table("schedules")
    op.drop_index(op.f("ix_baptisms_scheduled_date"), table_name="baptisms")
    op.drop_index(op.f("ix_baptisms_status"), table_name="baptisms")
    op.drop_table("baptisms")
    op.drop_table("users")

    bind = op.get_bind()
    for enum_type in (
        transaction_type,
        presence_status,
        gender,
        baptism_status,
        member_status,
        user_role,
    ):
        enum_type.drop(bind, checkfirst=True)
