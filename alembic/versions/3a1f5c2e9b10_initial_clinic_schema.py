"""Initial clinic schema

Revision ID: 3a1f5c2e9b10
Revises:
Create Date: 2026-10-18 10:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = '3a1f5c2e9b10'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

PERMISSION_COLUMNS = (
    'perm_patients', 'perm_prescriptions', 'perm_medicines', 'perm_opticals',
    'perm_receipts', 'perm_analytics', 'perm_staff', 'perm_operations',
    'perm_reports', 'perm_dues_follow_up', 'perm_data', 'perm_certificates', 'perm_labs',
)


def _timestamps(updated: bool = True):
    columns = [sa.Column('created_at', sa.DateTime(timezone=True), nullable=True)]
    if updated:
        columns.append(sa.Column('updated_at', sa.DateTime(timezone=True), nullable=True))
    return columns


def _index(table: str, column: str, unique: bool = False) -> None:
    op.create_index(op.f(f'ix_{table}_{column}'), table, [column], unique=unique)


def upgrade() -> None:
    # Staff accounts with one flag column per module
    op.create_table(
        'staff',
        sa.Column('id', sa.String(), nullable=False),
        sa.Column('username', sa.String(), nullable=False),
        sa.Column('password_hash', sa.String(), nullable=False),
        sa.Column('full_name', sa.String(), nullable=False),
        sa.Column('position', sa.String(), nullable=True),
        sa.Column('salary', sa.Float(), nullable=True),
        sa.Column('phone', sa.String(), nullable=True),
        sa.Column('email', sa.String(), nullable=True),
        sa.Column('is_admin', sa.Boolean(), nullable=False),
        *[sa.Column(name, sa.Boolean(), nullable=False) for name in PERMISSION_COLUMNS],
        sa.Column('extra', sa.JSON(), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id')
    )
    _index('staff', 'id')
    _index('staff', 'username', unique=True)

    op.create_table(
        'audit_logs',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('staff_id', sa.String(), nullable=True),
        sa.Column('action', sa.String(), nullable=False),
        sa.Column('details', sa.JSON(), nullable=True),
        sa.Column('ip_address', sa.String(), nullable=True),
        sa.Column('timestamp', sa.DateTime(timezone=True), nullable=True),
        sa.ForeignKeyConstraint(['staff_id'], ['staff.id'], ondelete='SET NULL'),
        sa.PrimaryKeyConstraint('id')
    )
    _index('audit_logs', 'id')
    _index('audit_logs', 'action')
    _index('audit_logs', 'timestamp')

    op.create_table(
        'patients',
        sa.Column('id', sa.String(), nullable=False),
        sa.Column('patient_id', sa.String(), nullable=False),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('guardian', sa.String(), nullable=True),
        sa.Column('dob', sa.Date(), nullable=True),
        sa.Column('age', sa.Integer(), nullable=True),
        sa.Column('gender', sa.String(), nullable=True),
        sa.Column('phone', sa.String(), nullable=True),
        sa.Column('address', sa.String(), nullable=True),
        sa.Column('doctor_name', sa.String(), nullable=True),
        sa.Column('department', sa.String(), nullable=True),
        sa.Column('referred_by', sa.String(), nullable=True),
        sa.Column('status', sa.String(), nullable=True),
        sa.Column('created_by', sa.String(), nullable=True),
        sa.Column('date', sa.Date(), nullable=True),
        sa.Column('extra', sa.JSON(), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id')
    )
    _index('patients', 'id')
    _index('patients', 'patient_id', unique=True)
    _index('patients', 'name')
    _index('patients', 'phone')
    _index('patients', 'date')
    _index('patients', 'created_at')

    # Prescriptions double as billing receipts
    op.create_table(
        'prescriptions',
        sa.Column('id', sa.String(), nullable=False),
        sa.Column('sno', sa.Integer(), nullable=False),
        sa.Column('receipt_no', sa.String(), nullable=False),
        sa.Column('date', sa.Date(), nullable=True),
        sa.Column('patient_id', sa.String(), nullable=True),
        sa.Column('patient_name', sa.String(), nullable=True),
        sa.Column('guardian_name', sa.String(), nullable=True),
        sa.Column('phone_number', sa.String(), nullable=True),
        sa.Column('age', sa.String(), nullable=True),
        sa.Column('gender', sa.String(), nullable=True),
        sa.Column('address', sa.String(), nullable=True),
        sa.Column('doctor_name', sa.String(), nullable=True),
        sa.Column('department', sa.String(), nullable=True),
        sa.Column('referred_by', sa.String(), nullable=True),
        sa.Column('paid_for', sa.String(), nullable=True),
        sa.Column('mode', sa.String(), nullable=True),
        sa.Column('total_amount', sa.Float(), nullable=True),
        sa.Column('advance_paid', sa.Float(), nullable=True),
        sa.Column('amount_received', sa.Float(), nullable=True),
        sa.Column('discount', sa.Float(), nullable=True),
        sa.Column('amount_due', sa.Float(), nullable=True),
        sa.Column('present_complain', sa.String(), nullable=True),
        sa.Column('previous_history', sa.String(), nullable=True),
        sa.Column('others', sa.String(), nullable=True),
        sa.Column('diagnosis', sa.String(), nullable=True),
        sa.Column('review_on', sa.Date(), nullable=True),
        sa.Column('created_by', sa.String(), nullable=True),
        sa.Column('extra', sa.JSON(), nullable=True),
        *_timestamps(updated=False),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('receipt_no')
    )
    _index('prescriptions', 'id')
    _index('prescriptions', 'sno', unique=True)
    _index('prescriptions', 'date')
    _index('prescriptions', 'patient_id')
    _index('prescriptions', 'created_at')

    op.create_table(
        'operations',
        sa.Column('id', sa.String(), nullable=False),
        sa.Column('patient_id', sa.String(), nullable=False),
        sa.Column('patient_name', sa.String(), nullable=True),
        sa.Column('date_of_admit', sa.Date(), nullable=True),
        sa.Column('time_of_admit', sa.String(), nullable=True),
        sa.Column('date_of_operation', sa.Date(), nullable=True),
        sa.Column('time_of_operation', sa.String(), nullable=True),
        sa.Column('date_of_discharge', sa.Date(), nullable=True),
        sa.Column('time_of_discharge', sa.String(), nullable=True),
        sa.Column('operation_details', sa.String(), nullable=True),
        sa.Column('operation_procedure', sa.String(), nullable=True),
        sa.Column('provision_diagnosis', sa.String(), nullable=True),
        sa.Column('review_on', sa.Date(), nullable=True),
        sa.Column('operated_by', sa.String(), nullable=True),
        sa.Column('total_amount', sa.Float(), nullable=True),
        sa.Column('bill_number', sa.String(), nullable=True),
        sa.Column('created_by', sa.String(), nullable=True),
        sa.Column('extra', sa.JSON(), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('bill_number')
    )
    _index('operations', 'id')
    _index('operations', 'patient_id')
    _index('operations', 'date_of_operation')

    op.create_table(
        'inpatients',
        sa.Column('id', sa.String(), nullable=False),
        sa.Column('patient_id', sa.String(), nullable=False),
        sa.Column('name', sa.String(), nullable=True),
        sa.Column('age', sa.String(), nullable=True),
        sa.Column('gender', sa.String(), nullable=True),
        sa.Column('phone', sa.String(), nullable=True),
        sa.Column('address', sa.String(), nullable=True),
        sa.Column('dob', sa.Date(), nullable=True),
        sa.Column('guardian_name', sa.String(), nullable=True),
        sa.Column('operation_name', sa.String(), nullable=True),
        sa.Column('operation_date', sa.Date(), nullable=True),
        sa.Column('operation_details', sa.String(), nullable=True),
        sa.Column('operation_procedure', sa.String(), nullable=True),
        sa.Column('provision_diagnosis', sa.String(), nullable=True),
        sa.Column('department', sa.String(), nullable=True),
        sa.Column('doctor_names', sa.JSON(), nullable=True),
        sa.Column('on_duty_doctor', sa.String(), nullable=True),
        sa.Column('prescriptions', sa.JSON(), nullable=True),
        sa.Column('date', sa.Date(), nullable=True),
        sa.Column('extra', sa.JSON(), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id')
    )
    _index('inpatients', 'id')
    _index('inpatients', 'patient_id')
    _index('inpatients', 'date')
    _index('inpatients', 'created_at')

    op.create_table(
        'medicines',
        sa.Column('id', sa.String(), nullable=False),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('batch_number', sa.String(), nullable=True),
        sa.Column('expiry_date', sa.Date(), nullable=True),
        sa.Column('quantity', sa.Integer(), nullable=False),
        sa.Column('price', sa.Float(), nullable=False),
        sa.Column('status', sa.String(), nullable=False),
        sa.Column('extra', sa.JSON(), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id')
    )
    _index('medicines', 'id')
    _index('medicines', 'name')
    _index('medicines', 'status')

    op.create_table(
        'medicine_dispense_records',
        sa.Column('id', sa.String(), nullable=False),
        sa.Column('medicine_id', sa.String(), nullable=False),
        sa.Column('medicine_name', sa.String(), nullable=False),
        sa.Column('batch_number', sa.String(), nullable=True),
        sa.Column('expiry_date', sa.Date(), nullable=True),
        sa.Column('quantity', sa.Integer(), nullable=False),
        sa.Column('price', sa.Float(), nullable=False),
        sa.Column('total_amount', sa.Float(), nullable=False),
        sa.Column('dispensed_date', sa.DateTime(timezone=True), nullable=True),
        sa.Column('patient_id', sa.String(), nullable=True),
        sa.Column('patient_name', sa.String(), nullable=True),
        sa.Column('dispensed_by', sa.String(), nullable=True),
        sa.PrimaryKeyConstraint('id')
    )
    _index('medicine_dispense_records', 'id')
    _index('medicine_dispense_records', 'medicine_id')
    _index('medicine_dispense_records', 'dispensed_date')
    _index('medicine_dispense_records', 'patient_id')

    op.create_table(
        'opticals',
        sa.Column('id', sa.String(), nullable=False),
        sa.Column('type', sa.String(), nullable=False),
        sa.Column('brand', sa.String(), nullable=False),
        sa.Column('model', sa.String(), nullable=True),
        sa.Column('size', sa.String(), nullable=True),
        sa.Column('power', sa.String(), nullable=True),
        sa.Column('quantity', sa.Integer(), nullable=False),
        sa.Column('price', sa.Float(), nullable=False),
        sa.Column('status', sa.String(), nullable=False),
        sa.Column('extra', sa.JSON(), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id')
    )
    _index('opticals', 'id')
    _index('opticals', 'type')
    _index('opticals', 'brand')
    _index('opticals', 'status')

    op.create_table(
        'optical_dispense_records',
        sa.Column('id', sa.String(), nullable=False),
        sa.Column('optical_id', sa.String(), nullable=False),
        sa.Column('optical_type', sa.String(), nullable=False),
        sa.Column('brand', sa.String(), nullable=True),
        sa.Column('model', sa.String(), nullable=True),
        sa.Column('quantity', sa.Integer(), nullable=False),
        sa.Column('price', sa.Float(), nullable=False),
        sa.Column('patient_id', sa.String(), nullable=True),
        sa.Column('patient_name', sa.String(), nullable=True),
        sa.Column('dispensed_by', sa.String(), nullable=True),
        sa.Column('dispensed_at', sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint('id')
    )
    _index('optical_dispense_records', 'id')
    _index('optical_dispense_records', 'optical_id')
    _index('optical_dispense_records', 'optical_type')
    _index('optical_dispense_records', 'patient_id')
    _index('optical_dispense_records', 'dispensed_at')

    op.create_table(
        'labs',
        sa.Column('id', sa.String(), nullable=False),
        sa.Column('date', sa.Date(), nullable=True),
        sa.Column('patient_id', sa.String(), nullable=True),
        sa.Column('patient_name', sa.String(), nullable=True),
        sa.Column('type', sa.String(), nullable=False),
        sa.Column('tests', sa.JSON(), nullable=True),
        sa.Column('vtests', sa.JSON(), nullable=True),
        sa.Column('total_amount', sa.Float(), nullable=True),
        sa.Column('discount_percentage', sa.Float(), nullable=True),
        sa.Column('amount_received', sa.Float(), nullable=True),
        sa.Column('amount_due', sa.Float(), nullable=True),
        sa.Column('vamount_received', sa.Float(), nullable=True),
        sa.Column('extra', sa.JSON(), nullable=True),
        *_timestamps(updated=False),
        sa.PrimaryKeyConstraint('id')
    )
    _index('labs', 'id')
    _index('labs', 'date')
    _index('labs', 'patient_id')
    _index('labs', 'created_at')

    op.create_table(
        'dropdown_options',
        sa.Column('id', sa.String(), nullable=False),
        sa.Column('field_name', sa.String(), nullable=False),
        sa.Column('option_value', sa.String(), nullable=False),
        *_timestamps(updated=False),
        sa.PrimaryKeyConstraint('id')
    )
    _index('dropdown_options', 'id')
    _index('dropdown_options', 'field_name')


def downgrade() -> None:
    for table in (
        'dropdown_options', 'labs', 'optical_dispense_records', 'opticals',
        'medicine_dispense_records', 'medicines', 'inpatients', 'operations',
        'prescriptions', 'patients', 'audit_logs', 'staff',
    ):
        op.drop_table(table)
