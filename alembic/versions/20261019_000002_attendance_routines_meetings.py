"""Attendance, class routines, meetings, student imports and budget links

Revision ID: 20261019_000002
Revises: 20261019_000001
Create Date: 2026-10-19

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = '20261019_000002'
down_revision: Union[str, None] = '20261019_000001'
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

UUID = postgresql.UUID(as_uuid=True)
JSONB = postgresql.JSONB(astext_type=sa.Text())


def _scoped_columns() -> list:
    return [
        sa.Column('id', UUID, nullable=False),
        sa.Column('school_id', UUID, nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.Column('deleted_at', sa.DateTime(timezone=True), nullable=True),
        sa.ForeignKeyConstraint(['school_id'], ['schools.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
    ]


def upgrade() -> None:
    # === TRANSACTION -> BUDGET LINK ===
    op.add_column('transactions', sa.Column('budget_id', UUID, nullable=True))
    op.create_foreign_key(
        'fk_transactions_budget_id', 'transactions', 'budgets', ['budget_id'], ['id'], ondelete='SET NULL'
    )
    op.create_index('idx_transactions_budget', 'transactions', ['budget_id'])

    # === ATTENDANCE ===
    op.create_table(
        'attendance_records',
        *_scoped_columns(),
        sa.Column('student_id', UUID, nullable=False),
        sa.Column('class_name', sa.String(length=50), nullable=True),
        sa.Column('section', sa.String(length=20), nullable=True),
        sa.Column('subject', sa.String(length=100), nullable=True),
        sa.Column('attendance_date', sa.Date(), nullable=False, server_default=sa.text('CURRENT_DATE')),
        sa.Column('status', sa.String(length=20), nullable=False, server_default='present'),
        sa.Column('remarks', sa.Text(), nullable=True),
        sa.Column('recorded_by', UUID, nullable=True),
        sa.ForeignKeyConstraint(['student_id'], ['students.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['recorded_by'], ['users.id'], ondelete='SET NULL'),
    )
    op.create_index('ix_attendance_records_school_id', 'attendance_records', ['school_id'])
    op.create_index('idx_attendance_school_date', 'attendance_records', ['school_id', 'attendance_date'],
                    postgresql_where=sa.text('deleted_at IS NULL'))
    op.create_index('idx_attendance_student_date', 'attendance_records', ['student_id', 'attendance_date'])
    op.create_index('idx_attendance_class_date', 'attendance_records',
                    ['school_id', 'class_name', 'section', 'attendance_date'])

    # === CLASS ROUTINES ===
    op.create_table(
        'class_routines',
        *_scoped_columns(),
        sa.Column('class_name', sa.String(length=50), nullable=False),
        sa.Column('section', sa.String(length=20), nullable=False),
        sa.Column('academic_year', sa.String(length=20), nullable=False),
        sa.Column('semester', sa.String(length=50), nullable=True),
        sa.Column('institute_name', sa.String(length=255), nullable=False),
        sa.Column('institute_address', sa.Text(), nullable=True),
        sa.Column('class_teacher', sa.String(length=200), nullable=False),
        sa.Column('total_students', sa.Integer(), nullable=True),
        sa.Column('effective_date', sa.Date(), nullable=False),
        sa.Column('week_structure', sa.String(length=10), nullable=False, server_default='6-day'),
        sa.Column('periods_per_day', sa.Integer(), nullable=False, server_default='7'),
        sa.Column('period_duration', sa.Integer(), nullable=False, server_default='45'),
        sa.Column('start_time', sa.Time(), nullable=False, server_default='08:00'),
        sa.Column('include_breaks', sa.Boolean(), nullable=False, server_default='true'),
        sa.Column('prayer_breaks', JSONB, nullable=False, server_default='[]'),
        sa.Column('template', sa.String(length=20), nullable=False, server_default='standard'),
        sa.Column('color_coding', sa.Boolean(), nullable=False, server_default='true'),
        sa.Column('show_teacher_names', sa.Boolean(), nullable=False, server_default='true'),
        sa.Column('show_room_numbers', sa.Boolean(), nullable=False, server_default='false'),
        sa.Column('language_option', sa.String(length=20), nullable=False, server_default='bilingual'),
        sa.Column('paper_size', sa.String(length=10), nullable=False, server_default='A4'),
        sa.Column('orientation', sa.String(length=20), nullable=False, server_default='landscape'),
        sa.Column('status', sa.String(length=20), nullable=False, server_default='active'),
        sa.Column('created_by', UUID, nullable=True),
        sa.ForeignKeyConstraint(['created_by'], ['users.id'], ondelete='SET NULL'),
    )
    op.create_index('ix_class_routines_school_id', 'class_routines', ['school_id'])
    op.create_index('idx_class_routines_school_class', 'class_routines', ['school_id', 'class_name', 'section'],
                    postgresql_where=sa.text('deleted_at IS NULL'))

    op.create_table(
        'routine_periods',
        sa.Column('id', UUID, nullable=False),
        sa.Column('routine_id', UUID, nullable=False),
        sa.Column('day_of_week', sa.Integer(), nullable=False),
        sa.Column('period_number', sa.Integer(), nullable=False),
        sa.Column('start_time', sa.Time(), nullable=False),
        sa.Column('end_time', sa.Time(), nullable=False),
        sa.Column('subject', sa.String(length=100), nullable=False),
        sa.Column('subject_bn', sa.String(length=100), nullable=True),
        sa.Column('teacher_id', UUID, nullable=True),
        sa.Column('teacher_name', sa.String(length=200), nullable=True),
        sa.Column('room_number', sa.String(length=50), nullable=True),
        sa.Column('period_type', sa.String(length=20), nullable=False, server_default='regular'),
        sa.Column('background_color', sa.String(length=20), nullable=True),
        sa.Column('text_color', sa.String(length=20), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.ForeignKeyConstraint(['routine_id'], ['class_routines.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['teacher_id'], ['teachers.id'], ondelete='SET NULL'),
        sa.CheckConstraint('day_of_week BETWEEN 0 AND 6', name='ck_routine_periods_day'),
        sa.CheckConstraint('end_time > start_time', name='ck_routine_periods_times'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('idx_routine_periods_routine', 'routine_periods',
                    ['routine_id', 'day_of_week', 'period_number'])

    # === MEETINGS ===
    op.create_table(
        'meetings',
        *_scoped_columns(),
        sa.Column('title', sa.String(length=255), nullable=False),
        sa.Column('title_bn', sa.String(length=255), nullable=True),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('description_bn', sa.Text(), nullable=True),
        sa.Column('meeting_type', sa.String(length=20), nullable=False, server_default='class'),
        sa.Column('scheduled_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('duration', sa.Integer(), nullable=False, server_default='60'),
        sa.Column('max_participants', sa.Integer(), nullable=False, server_default='50'),
        sa.Column('current_participants', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('meeting_code', sa.String(length=50), nullable=False),
        sa.Column('room_id', sa.String(length=100), nullable=False),
        sa.Column('status', sa.String(length=20), nullable=False, server_default='scheduled'),
        sa.Column('is_recording', sa.Boolean(), nullable=False, server_default='false'),
        sa.Column('host_id', UUID, nullable=True),
        sa.Column('host_name', sa.String(length=200), nullable=True),
        sa.Column('started_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('ended_at', sa.DateTime(timezone=True), nullable=True),
        sa.ForeignKeyConstraint(['host_id'], ['users.id'], ondelete='SET NULL'),
    )
    op.create_index('ix_meetings_school_id', 'meetings', ['school_id'])
    op.create_index('idx_meetings_school_scheduled', 'meetings', ['school_id', 'scheduled_at'],
                    postgresql_where=sa.text('deleted_at IS NULL'))
    op.create_index('idx_meetings_code', 'meetings', ['meeting_code'], unique=True)

    # === STUDENT IMPORTS ===
    op.create_table(
        'student_import_batches',
        *_scoped_columns(),
        sa.Column('file_name', sa.String(length=255), nullable=False),
        sa.Column('file_size', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('total_records', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('successful_imports', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('failed_imports', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('status', sa.String(length=20), nullable=False, server_default='processing'),
        sa.Column('errors', JSONB, nullable=False, server_default='[]'),
        sa.Column('uploaded_by', UUID, nullable=True),
        sa.Column('completed_at', sa.DateTime(timezone=True), nullable=True),
        sa.ForeignKeyConstraint(['uploaded_by'], ['users.id'], ondelete='SET NULL'),
    )
    op.create_index('ix_student_import_batches_school_id', 'student_import_batches', ['school_id'])
    op.create_index('idx_student_imports_school_created', 'student_import_batches', ['school_id', 'created_at'])


def downgrade() -> None:
    op.drop_table('student_import_batches')
    op.drop_table('meetings')
    op.drop_table('routine_periods')
    op.drop_table('class_routines')
    op.drop_table('attendance_records')
    op.drop_index('idx_transactions_budget', table_name='transactions')
    op.drop_constraint('fk_transactions_budget_id', 'transactions', type_='foreignkey')
    op.drop_column('transactions', 'budget_id')
