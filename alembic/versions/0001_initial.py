"""cards and stage funding schema"""

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql


revision = "0001_initial"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "cards",
        sa.Column("id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("title", sa.Text(), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("creators", postgresql.ARRAY(sa.Text()), nullable=True),
        sa.Column("date", sa.DateTime(timezone=True), nullable=True),
        sa.Column("contributors", sa.Integer(), nullable=True),
        sa.Column("tags", postgresql.ARRAY(sa.Text()), nullable=True),
        sa.Column("priority", sa.String(length=10), nullable=True),
        sa.Column("funding_earned", sa.Numeric(precision=20, scale=8), nullable=True),
        sa.Column("funding_spent", sa.Numeric(precision=20, scale=8), nullable=True),
        sa.Column("funding_requested", sa.Numeric(precision=20, scale=8), nullable=True),
        sa.Column("funding_received", sa.Numeric(precision=20, scale=8), nullable=True),
        sa.Column("funding_available", sa.Numeric(precision=20, scale=8), nullable=True),
        sa.Column("percent_funded", sa.Numeric(precision=10, scale=2), nullable=True),
        sa.Column("visibility", sa.String(length=20), nullable=False, server_default="PUBLIC"),
        sa.Column("milestones", postgresql.JSONB(), nullable=True),
        sa.Column("status", sa.String(length=20), nullable=True),
        sa.Column("stage", sa.String(length=20), nullable=True),
        sa.Column("created_by", sa.Text(), nullable=True),
        sa.Column("owned_by", sa.Text(), nullable=True),
        sa.Column("last_updated", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=True),
        sa.Column("wallet_addresses", postgresql.ARRAY(sa.Text()), nullable=True),
        sa.Column("view_keys", postgresql.ARRAY(sa.Text()), nullable=True),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_cards_priority"), "cards", ["priority"], unique=False)
    op.create_index(op.f("ix_cards_status"), "cards", ["status"], unique=False)
    op.create_index(op.f("ix_cards_stage"), "cards", ["stage"], unique=False)
    op.create_index(op.f("ix_cards_visibility"), "cards", ["visibility"], unique=False)
    op.create_index("ix_cards_tags", "cards", ["tags"], unique=False, postgresql_using="gin")

    op.create_table(
        "card_stage_funding",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("card_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("stage", sa.String(length=20), nullable=False),
        sa.Column("funding_requested", sa.Numeric(precision=20, scale=8), nullable=True),
        sa.Column("currency", sa.String(length=10), nullable=True),
        sa.Column("note", sa.Text(), nullable=True),
        sa.ForeignKeyConstraint(["card_id"], ["cards.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_card_stage_funding_card_id"), "card_stage_funding", ["card_id"], unique=False)


def downgrade() -> None:
    op.drop_index(op.f("ix_card_stage_funding_card_id"), table_name="card_stage_funding")
    op.drop_table("card_stage_funding")
    op.drop_index("ix_cards_tags", table_name="cards")
    op.drop_index(op.f("ix_cards_visibility"), table_name="cards")
    op.drop_index(op.f("ix_cards_stage"), table_name="cards")
    op.drop_index(op.f("ix_cards_status"), table_name="cards")
    op.drop_index(op.f("ix_cards_priority"), table_name="cards")
    op.drop_table("cards")
