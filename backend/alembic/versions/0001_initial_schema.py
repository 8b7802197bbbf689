"""Initial schema: organizations and their farm records.

Revision ID: 0001
Revises:
Create Date: 2026-10-18
"""

revision = "0001"
down_revision = None
branch_labels = None
depends_on = None

from alembic import op
import sqlalchemy as sa


def _id():
    return sa.Column("id", sa.String(36), primary_key=True)


def _org():
    return sa.Column(
        "organization_id",
        sa.String(36),
        sa.ForeignKey("organizations.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )


def _farmer():
    return sa.Column(
        "farmer_id", sa.String(36), sa.ForeignKey("farmers.id", ondelete="SET NULL"), index=True
    )


def _timestamps(indexed=True):
    return [
        sa.Column("created_at", sa.DateTime(), server_default=sa.func.now(), nullable=False, index=indexed),
        sa.Column("updated_at", sa.DateTime(), server_default=sa.func.now(), nullable=False),
    ]


def _record_columns():
    return [
        _id(),
        sa.Column("organization_id", sa.String(36), nullable=False, index=True),
        sa.Column(
            "livestock_id",
            sa.String(36),
            sa.ForeignKey("livestock.id", ondelete="CASCADE"),
            nullable=False,
            index=True,
        ),
        sa.Column("notes", sa.Text()),
        *_timestamps(indexed=False),
    ]


def upgrade() -> None:
    op.create_table(
        "organizations",
        _id(),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("email", sa.String(255), unique=True),
        sa.Column("phone", sa.String(20)),
        sa.Column("address", sa.Text()),
        sa.Column("latitude", sa.Float()),
        sa.Column("longitude", sa.Float()),
        sa.Column("subscription_plan", sa.String(50), server_default="basic", nullable=False),
        sa.Column("subscription_status", sa.String(50), server_default="trial", nullable=False),
        sa.Column("subscription_end", sa.DateTime()),
        *_timestamps(indexed=False),
    )

    op.create_table(
        "farmers",
        _id(),
        _org(),
        sa.Column("farmer_code", sa.String(50), nullable=False),
        sa.Column("first_name", sa.String(100), nullable=False),
        sa.Column("last_name", sa.String(100), nullable=False),
        sa.Column("phone", sa.String(20)),
        sa.Column("email", sa.String(255)),
        sa.Column("date_of_birth", sa.Date()),
        sa.Column("gender", sa.String(20)),
        sa.Column("id_number", sa.String(50)),
        sa.Column("address", sa.Text()),
        sa.Column("state", sa.String(100)),
        sa.Column("lga", sa.String(100)),
        sa.Column("farm_size", sa.Float()),
        sa.Column("farm_location", sa.String(255)),
        sa.Column("latitude", sa.Float()),
        sa.Column("longitude", sa.Float()),
        sa.Column("crops_grown", sa.JSON()),
        sa.Column("livestock_owned", sa.JSON()),
        sa.Column("status", sa.String(20), server_default="active", nullable=False, index=True),
        sa.Column("notes", sa.Text()),
        *_timestamps(),
        sa.UniqueConstraint("organization_id", "farmer_code", name="uq_farmers_org_code"),
    )

    op.create_table(
        "livestock",
        _id(),
        _org(),
        _farmer(),
        sa.Column("name", sa.String(255)),
        sa.Column("livestock_type", sa.String(50), nullable=False),
        sa.Column("breed", sa.String(100)),
        sa.Column("gender", sa.String(20)),
        sa.Column("status", sa.String(20), server_default="active", nullable=False, index=True),
        sa.Column("quantity", sa.Integer(), server_default="1", nullable=False),
        sa.Column("date_of_birth", sa.Date()),
        sa.Column("ear_tag", sa.String(50)),
        sa.Column("weight", sa.Float()),
        sa.Column("weight_unit", sa.String(10)),
        sa.Column("location", sa.String(255)),
        sa.Column("breeding_status", sa.String(50)),
        sa.Column("acquisition_date", sa.Date()),
        sa.Column("acquisition_cost", sa.Float()),
        sa.Column("productivity_data", sa.JSON()),
        sa.Column("notes", sa.Text()),
        sa.Column("health_records", sa.JSON()),
        sa.Column("breeding_records", sa.JSON()),
        sa.Column("feeding_records", sa.JSON()),
        *_timestamps(),
    )

    op.create_table(
        "health_records",
        *_record_columns(),
        sa.Column("date", sa.Date(), nullable=False),
        sa.Column("diagnosis", sa.Text(), nullable=False),
        sa.Column("treatment", sa.Text(), nullable=False),
        sa.Column("vet_notes", sa.Text()),
        sa.Column("medication", sa.String(255)),
        sa.Column("dosage", sa.String(100)),
        sa.Column("next_checkup_date", sa.Date()),
        sa.Column("cost", sa.Float()),
        sa.Column("vet_name", sa.String(255)),
    )
    op.create_table(
        "breeding_records",
        *_record_columns(),
        sa.Column("breeding_date", sa.Date(), nullable=False),
        sa.Column("expected_birth_date", sa.Date(), nullable=False),
        sa.Column("actual_birth_date", sa.Date()),
        sa.Column("status", sa.String(20), server_default="in_progress", nullable=False),
        sa.Column("breeding_method", sa.String(50)),
        sa.Column("sire_id", sa.String(100)),
        sa.Column("dam_id", sa.String(100)),
        sa.Column("number_of_offspring", sa.Integer()),
    )
    op.create_table(
        "feeding_records",
        *_record_columns(),
        sa.Column("feed_type", sa.String(100), nullable=False),
        sa.Column("quantity", sa.Float(), nullable=False),
        sa.Column("unit", sa.String(20), nullable=False),
        sa.Column("feeding_time", sa.String(50), nullable=False),
        sa.Column("cost_per_unit", sa.Float()),
        sa.Column("supplier", sa.String(255)),
    )

    op.create_table(
        "crops",
        _id(),
        _org(),
        _farmer(),
        sa.Column("crop_name", sa.String(100), nullable=False),
        sa.Column("variety", sa.String(100)),
        sa.Column("status", sa.String(30), server_default="planted", nullable=False, index=True),
        sa.Column("season", sa.String(50)),
        sa.Column("planting_date", sa.Date()),
        sa.Column("expected_harvest_date", sa.Date()),
        sa.Column("actual_harvest_date", sa.Date()),
        sa.Column("farm_area", sa.Float()),
        sa.Column("quantity_planted", sa.Float()),
        sa.Column("quantity_harvested", sa.Float()),
        sa.Column("unit", sa.String(20)),
        sa.Column("latitude", sa.Float()),
        sa.Column("longitude", sa.Float()),
        sa.Column("image_url", sa.String(1024)),
        sa.Column("notes", sa.Text()),
        *_timestamps(),
    )

    op.create_table(
        "financial_services",
        _id(),
        _org(),
        _farmer(),
        sa.Column("service_type", sa.String(30), nullable=False, index=True),
        sa.Column("provider", sa.String(255), nullable=False),
        sa.Column("amount", sa.Float()),
        sa.Column("interest_rate", sa.Float()),
        sa.Column("duration_months", sa.Integer()),
        sa.Column("status", sa.String(20), server_default="pending", nullable=False, index=True),
        sa.Column("application_date", sa.Date()),
        sa.Column("approval_date", sa.Date()),
        sa.Column("disbursement_date", sa.Date()),
        sa.Column("repayment_schedule", sa.JSON()),
        sa.Column("notes", sa.Text()),
        *_timestamps(),
    )

    op.create_table(
        "extension_services",
        _id(),
        _org(),
        sa.Column("title", sa.String(255), nullable=False),
        sa.Column("description", sa.Text()),
        sa.Column("content", sa.Text()),
        sa.Column("video_url", sa.String(1024)),
        sa.Column("audio_url", sa.String(1024)),
        sa.Column("language", sa.String(10), server_default="en", nullable=False),
        sa.Column("category", sa.String(100), index=True),
        sa.Column("target_audience", sa.JSON()),
        sa.Column("seasonal_relevance", sa.JSON()),
        sa.Column("views_count", sa.Integer(), server_default="0", nullable=False),
        sa.Column("is_active", sa.Boolean(), server_default=sa.true(), nullable=False),
        *_timestamps(),
    )


def downgrade() -> None:
    for table in (
        "extension_services",
        "financial_services",
        "crops",
        "feeding_records",
        "breeding_records",
        "health_records",
        "livestock",
        "farmers",
        "organizations",
    ):
        op.drop_table(table)
