"""initial schema: patients, clinical_data, discharge_summaries

Revision ID: 0001
Revises:
Create Date: 2026-10-18 00:00:00

"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = "0001"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "patients",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("name", sa.String(length=200), nullable=False),
        sa.Column("age", sa.Integer(), nullable=False),
        sa.Column("gender", sa.String(length=20), nullable=False),
        sa.Column("regd_no", sa.String(length=50), nullable=True),
        sa.Column("ip_no", sa.String(length=50), nullable=True),
        sa.Column("department", sa.String(length=100), nullable=False),
        sa.Column("ward", sa.String(length=100), nullable=False),
        sa.Column("doa", sa.Date(), nullable=False),
        sa.Column("dodeath", sa.Date(), nullable=True),
        sa.Column("primary_consultant", sa.String(length=200), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
    )
    op.create_table(
        "clinical_data",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column(
            "patient_id",
            sa.Integer(),
            sa.ForeignKey("patients.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("final_diagnosis", sa.Text(), nullable=False),
        sa.Column("chief_complaints", sa.Text(), nullable=False),
        sa.Column("past_medical_history", sa.Text(), nullable=True),
        sa.Column("oemd", sa.Text(), nullable=True),
        sa.Column("hospital_course", sa.Text(), nullable=False),
        sa.Column("investigations", sa.Text(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
    )
    op.create_index("ix_clinical_data_patient_id", "clinical_data", ["patient_id"])
    op.create_table(
        "discharge_summaries",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column(
            "patient_id",
            sa.Integer(),
            sa.ForeignKey("patients.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("summary_text", sa.Text(), nullable=False),
        sa.Column("reviewed", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("generated_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=True),
    )
    op.create_index("ix_discharge_summaries_patient_id", "discharge_summaries", ["patient_id"])
    op.create_index("ix_discharge_summaries_generated_at", "discharge_summaries", ["generated_at"])


def downgrade() -> None:
    op.drop_index("ix_discharge_summaries_generated_at", table_name="discharge_summaries")
    op.drop_index("ix_discharge_summaries_patient_id", table_name="discharge_summaries")
    op.drop_table("discharge_summaries")
    op.drop_index("ix_clinical_data_patient_id", table_name="clinical_data")
    op.drop_table("clinical_data")
    op.drop_table("patients")
