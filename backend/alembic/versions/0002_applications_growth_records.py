"""Input applications and crop growth records.

Revision ID: 0002
Revises: 0001
Create Date: 2026-10-18
"""

revision = "0002"
down_revision = "0001"
branch_labels = None
depends_on = None

from alembic import op
import sqlalchemy as sa


def _org():
    return sa.Column(
        "organization_id",
        sa.String(36),
        sa.ForeignKey("organizations.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )


def _timestamps():
    return [
        sa.Column("created_at", sa.DateTime(), server_default=sa.func.now(), nullable=False, index=True),
        sa.Column("updated_at", sa.DateTime(), server_default=sa.func.now(), nullable=False),
    ]


def upgrade() -> None:
    op.create_table(
        "applications",
        sa.Column("id", sa.String(36), primary_key=True),
        _org(),
        sa.Column(
            "farmer_id", sa.String(36), sa.ForeignKey("farmers.id", ondelete="SET NULL"), index=True
        ),
        sa.Column(
            "crop_id", sa.String(36), sa.ForeignKey("crops.id", ondelete="SET NULL"), index=True
        ),
        sa.Column("product_name", sa.String(255), nullable=False),
        sa.Column("product_type", sa.String(20), nullable=False, index=True),
        sa.Column("application_date", sa.Date(), nullable=False),
        sa.Column("application_method", sa.String(100)),
        sa.Column("quantity", sa.Float(), nullable=False),
        sa.Column("unit", sa.String(20), nullable=False),
        sa.Column("target_pest_disease", sa.String(255)),
        sa.Column("weather_conditions", sa.String(255)),
        sa.Column("next_application_date", sa.Date()),
        sa.Column("cost", sa.Float()),
        sa.Column("notes", sa.Text()),
        *_timestamps(),
    )

    op.create_table(
        "growth_records",
        sa.Column("id", sa.String(36), primary_key=True),
        _org(),
        sa.Column(
            "crop_id",
            sa.String(36),
            sa.ForeignKey("crops.id", ondelete="CASCADE"),
            nullable=False,
            index=True,
        ),
        sa.Column("stage_name", sa.String(100), nullable=False),
        sa.Column("start_date", sa.Date(), nullable=False),
        sa.Column("end_date", sa.Date()),
        sa.Column("health_score", sa.Integer()),
        sa.Column("images", sa.JSON()),
        sa.Column("notes", sa.Text()),
        sa.Column("created_by", sa.String(36)),
        *_timestamps(),
    )


def downgrade() -> None:
    op.drop_table("growth_records")
    op.drop_table("applications")
