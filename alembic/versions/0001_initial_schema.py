"""initial schema

Revision ID: 0001_initial
Revises:
Create Date: 2026-10-19 10:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = "0001_initial"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _record_columns():
    return [
        sa.Column("id", sa.Uuid(), primary_key=True, nullable=False),
        sa.Column("is_deleted", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    ]


def _fk(name, target, nullable=False):
    return sa.Column(name, sa.Uuid(), sa.ForeignKey(f"{target}.id"), nullable=nullable)


RECORD_TABLES = (
    "users", "projects", "wings", "floors", "flats", "bank_details", "amenities", "documents",
    "disbursements", "clients", "enquiries", "enquiry_remarks", "bookings", "follow_ups",
    "follow_up_nodes", "notifications",
)


def upgrade():
    op.create_table(
        "users",
        *_record_columns(),
        sa.Column("username", sa.String(length=128), nullable=False, unique=True),
        sa.Column("password_hash", sa.String(length=256), nullable=False),
        sa.Column("full_name", sa.String(length=256), nullable=False),
        sa.Column("email", sa.String(length=256), nullable=True),
        sa.Column("mobile_number", sa.String(length=16), nullable=True),
        sa.Column("role", sa.String(length=16), nullable=False),
        sa.Column("enabled", sa.Boolean(), nullable=False, server_default=sa.true()),
    )

    op.create_table(
        "projects",
        *_record_columns(),
        sa.Column("project_name", sa.String(length=256), nullable=False),
        sa.Column("maharera_no", sa.String(length=32), nullable=False),
        sa.Column("start_date", sa.Date(), nullable=True),
        sa.Column("completion_date", sa.Date(), nullable=True),
        sa.Column("status", sa.String(length=16), nullable=False),
        sa.Column("progress", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("project_address", sa.String(length=512), nullable=True),
        sa.Column("letter_head_file_url", sa.String(length=512), nullable=True),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.CheckConstraint("progress >= 0 AND progress <= 100", name="ck_projects_progress_range"),
    )

    op.create_table(
        "wings",
        *_record_columns(),
        _fk("project_id", "projects"),
        sa.Column("wing_name", sa.String(length=64), nullable=False),
        sa.Column("no_of_floors", sa.Integer(), nullable=False),
        sa.Column("no_of_properties", sa.Integer(), nullable=False),
    )
    op.create_index("ix_wings_project", "wings", ["project_id"])

    op.create_table(
        "floors",
        *_record_columns(),
        _fk("project_id", "projects"),
        _fk("wing_id", "wings"),
        sa.Column("floor_no", sa.Integer(), nullable=False),
        sa.Column("floor_name", sa.String(length=32), nullable=False),
        sa.Column("property_type", sa.String(length=32), nullable=False),
        sa.Column("area", sa.Numeric(12, 2), nullable=False),
        sa.Column("quantity", sa.Integer(), nullable=False),
    )
    op.create_index("ix_floors_wing_no", "floors", ["wing_id", "floor_no"])

    op.create_table(
        "flats",
        *_record_columns(),
        _fk("project_id", "projects"),
        _fk("wing_id", "wings"),
        _fk("floor_id", "floors"),
        sa.Column("unit_number", sa.String(length=32), nullable=False),
        sa.Column("status", sa.String(length=16), nullable=False),
        sa.Column("area", sa.Numeric(12, 2), nullable=False),
        sa.Column("bhk", sa.String(length=16), nullable=False),
    )
    op.create_index("ix_flats_project_status", "flats", ["project_id", "status"])
    op.create_index("ix_flats_wing", "flats", ["wing_id"])

    op.create_table(
        "bank_details",
        *_record_columns(),
        _fk("project_id", "projects"),
        sa.Column("bank_name", sa.String(length=128), nullable=False),
        sa.Column("branch_name", sa.String(length=128), nullable=False),
        sa.Column("contact_person", sa.String(length=128), nullable=False),
        sa.Column("contact_number", sa.String(length=16), nullable=False),
        sa.Column("ifsc", sa.String(length=16), nullable=True),
    )
    op.create_table(
        "amenities",
        *_record_columns(),
        _fk("project_id", "projects"),
        sa.Column("amenity_name", sa.String(length=128), nullable=False),
    )
    op.create_table(
        "documents",
        *_record_columns(),
        _fk("project_id", "projects"),
        sa.Column("document_type", sa.String(length=32), nullable=False),
        sa.Column("document_title", sa.String(length=256), nullable=False),
        sa.Column("document_url", sa.String(length=512), nullable=True),
    )
    op.create_table(
        "disbursements",
        *_record_columns(),
        _fk("project_id", "projects"),
        sa.Column("disbursement_title", sa.String(length=128), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("percentage", sa.Numeric(5, 2), nullable=False),
        sa.CheckConstraint("percentage > 0 AND percentage <= 100", name="ck_disbursements_percentage"),
    )
    for table in ("bank_details", "amenities", "documents", "disbursements"):
        op.create_index(f"ix_{table}_project_id", table, ["project_id"])

    op.create_table(
        "clients",
        *_record_columns(),
        sa.Column("client_name", sa.String(length=256), nullable=False),
        sa.Column("email", sa.String(length=256), nullable=False),
        sa.Column("mobile_number", sa.String(length=16), nullable=False),
        sa.Column("dob", sa.Date(), nullable=True),
        sa.Column("city", sa.String(length=128), nullable=True),
        sa.Column("address", sa.String(length=512), nullable=True),
        sa.Column("occupation", sa.String(length=128), nullable=True),
        sa.Column("company", sa.String(length=128), nullable=True),
        sa.Column("pan_no", sa.String(length=10), nullable=True),
        sa.Column("aadhar_no", sa.String(length=12), nullable=True),
    )
    op.create_index("ix_clients_mobile", "clients", ["mobile_number"])

    op.create_table(
        "enquiries",
        *_record_columns(),
        _fk("project_id", "projects"),
        _fk("client_id", "clients"),
        _fk("property_id", "flats"),
        sa.Column("budget", sa.String(length=64), nullable=False),
        sa.Column("reference", sa.String(length=128), nullable=True),
        sa.Column("reference_name", sa.String(length=128), nullable=True),
        sa.Column("status", sa.String(length=16), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    )
    op.create_index("ix_enquiries_project_status", "enquiries", ["project_id", "status"])
    op.create_index("ix_enquiries_client", "enquiries", ["client_id"])

    op.create_table(
        "enquiry_remarks",
        *_record_columns(),
        _fk("enquiry_id", "enquiries"),
        sa.Column("body", sa.Text(), nullable=False),
        sa.Column("author", sa.String(length=256), nullable=True),
    )
    op.create_index("ix_enquiry_remarks_enquiry", "enquiry_remarks", ["enquiry_id", "created_at"])

    op.create_table(
        "bookings",
        *_record_columns(),
        _fk("project_id", "projects"),
        _fk("client_id", "clients"),
        _fk("property_id", "flats"),
        _fk("enquiry_id", "enquiries", nullable=True),
        sa.Column("booking_amount", sa.Numeric(14, 2), nullable=False),
        sa.Column("agreement_amount", sa.Numeric(14, 2), nullable=False),
        sa.Column("gst_percentage", sa.Numeric(5, 2), nullable=False),
        sa.Column("booking_date", sa.Date(), nullable=False),
        sa.Column("cheque_no", sa.String(length=64), nullable=True),
        sa.Column("is_registered", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("registration_date", sa.Date(), nullable=True),
        sa.Column("is_cancelled", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("cancellation_reason", sa.Text(), nullable=True),
        sa.Column("cancelled_at", sa.DateTime(timezone=True), nullable=True),
        sa.CheckConstraint("booking_amount > 0", name="ck_bookings_booking_amount_pos"),
        sa.CheckConstraint("agreement_amount > 0", name="ck_bookings_agreement_amount_pos"),
        sa.CheckConstraint("gst_percentage >= 0 AND gst_percentage <= 100", name="ck_bookings_gst_range"),
    )
    op.create_index("ix_bookings_property_active", "bookings", ["property_id", "is_cancelled", "is_deleted"])
    op.create_index("ix_bookings_client", "bookings", ["client_id"])

    op.create_table(
        "follow_ups",
        *_record_columns(),
        _fk("enquiry_id", "enquiries"),
        sa.Column("follow_up_date", sa.Date(), nullable=False),
        sa.Column("follow_up_time", sa.String(length=8), nullable=False),
        sa.Column("status", sa.String(length=16), nullable=False),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("agent_name", sa.String(length=256), nullable=True),
        sa.Column("completed_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("reminded_on", sa.Date(), nullable=True),
    )
    op.create_index("ix_follow_ups_status_date", "follow_ups", ["status", "follow_up_date"])
    op.create_index("ix_follow_ups_enquiry", "follow_ups", ["enquiry_id"])

    op.create_table(
        "follow_up_nodes",
        *_record_columns(),
        _fk("follow_up_id", "follow_ups"),
        sa.Column("follow_up_date_time", sa.DateTime(timezone=True), nullable=False),
        sa.Column("body", sa.Text(), nullable=False),
        sa.Column("agent_name", sa.String(length=256), nullable=True),
        sa.Column("user_id", sa.String(length=64), nullable=True),
    )
    op.create_index("ix_follow_up_nodes_parent", "follow_up_nodes", ["follow_up_id", "follow_up_date_time"])

    op.create_table(
        "notifications",
        *_record_columns(),
        sa.Column("user_id", sa.Uuid(), nullable=True),
        sa.Column("notification_type", sa.String(length=32), nullable=False),
        sa.Column("title", sa.String(length=256), nullable=False),
        sa.Column("message", sa.Text(), nullable=True),
        sa.Column("ref_id", sa.String(length=64), nullable=True),
        sa.Column("is_read", sa.Boolean(), nullable=False, server_default=sa.false()),
    )
    op.create_index("ix_notifications_user_read", "notifications", ["user_id", "is_read"])

    op.create_table(
        "activity_log",
        sa.Column("id", sa.Uuid(), primary_key=True, nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("request_id", sa.String(length=128), nullable=True),
        sa.Column("actor_user_id", sa.String(length=64), nullable=True),
        sa.Column("actor_name", sa.String(length=256), nullable=False),
        sa.Column("action", sa.String(length=64), nullable=False),
        sa.Column("entity", sa.String(length=64), nullable=False),
        sa.Column("entity_id", sa.String(length=64), nullable=True),
        sa.Column("details_json", sa.JSON(), nullable=False),
    )
    op.create_index("ix_activity_created", "activity_log", ["created_at"])
    op.create_index("ix_activity_entity", "activity_log", ["entity", "entity_id"])

    for table in RECORD_TABLES:
        op.create_index(f"ix_{table}_is_deleted", table, ["is_deleted"])


def downgrade():
    op.drop_table("activity_log")
    for table in reversed(RECORD_TABLES):
        op.drop_table(table)
