"""Initial schema with all tables

Revision ID: 20261019_000001
Revises:
Create Date: 2026-10-19

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = '20261019_000001'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

UUID = postgresql.UUID(as_uuid=True)
JSONB = postgresql.JSONB(astext_type=sa.Text())


def _scoped_columns() -> list:
    """id, school_id and timestamp columns shared by every school-scoped table."""
    return [
        sa.Column('id', UUID, nullable=False),
        sa.Column('school_id', UUID, nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.Column('deleted_at', sa.DateTime(timezone=True), nullable=True),
        sa.ForeignKeyConstraint(['school_id'], ['schools.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
    ]


def _timestamps() -> list:
    return [
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
    ]


def upgrade() -> None:
    # === SCHOOLS ===
    op.create_table(
        'schools',
        sa.Column('id', UUID, nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('slug', sa.String(length=100), nullable=False),
        sa.Column('address', sa.Text(), nullable=True),
        sa.Column('phone', sa.String(length=50), nullable=True),
        sa.Column('email', sa.String(length=255), nullable=True),
        sa.Column('website', sa.String(length=255), nullable=True),
        sa.Column('principal_name', sa.String(length=255), nullable=True),
        sa.Column('established_year', sa.Integer(), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default='true'),
        *_timestamps(),
        sa.Column('deleted_at', sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('slug'),
    )
    op.create_index('idx_schools_slug', 'schools', ['slug'], postgresql_where=sa.text('deleted_at IS NULL'))

    # === STUDENTS ===
    op.create_table(
        'students',
        *_scoped_columns(),
        sa.Column('student_code', sa.String(length=50), nullable=False),
        sa.Column('name', sa.String(length=200), nullable=False),
        sa.Column('name_bn', sa.String(length=200), nullable=True),
        sa.Column('class_name', sa.String(length=50), nullable=True),
        sa.Column('section', sa.String(length=20), nullable=True),
        sa.Column('roll_number', sa.String(length=20), nullable=True),
        sa.Column('date_of_birth', sa.Date(), nullable=True),
        sa.Column('gender', sa.String(length=10), nullable=True),
        sa.Column('blood_group', sa.String(length=5), nullable=True),
        sa.Column('father_name', sa.String(length=200), nullable=True),
        sa.Column('mother_name', sa.String(length=200), nullable=True),
        sa.Column('guardian_name', sa.String(length=200), nullable=True),
        sa.Column('guardian_phone', sa.String(length=50), nullable=True),
        sa.Column('guardian_relation', sa.String(length=50), nullable=True),
        sa.Column('present_address', sa.Text(), nullable=True),
        sa.Column('permanent_address', sa.Text(), nullable=True),
        sa.Column('phone', sa.String(length=50), nullable=True),
        sa.Column('email', sa.String(length=255), nullable=True),
        sa.Column('status', sa.String(length=20), nullable=False, server_default='active'),
        sa.Column('photo_url', sa.String(length=500), nullable=True),
        sa.Column('admission_date', sa.Date(), nullable=False, server_default=sa.text('CURRENT_DATE')),
    )
    op.create_index('ix_students_school_id', 'students', ['school_id'])
    op.create_index('idx_students_school_code', 'students', ['school_id', 'student_code'], unique=True,
                    postgresql_where=sa.text('deleted_at IS NULL'))
    op.create_index('idx_students_school_class', 'students', ['school_id', 'class_name', 'section'],
                    postgresql_where=sa.text('deleted_at IS NULL'))

    # === TEACHERS ===
    op.create_table(
        'teachers',
        *_scoped_columns(),
        sa.Column('teacher_code', sa.String(length=50), nullable=False),
        sa.Column('name', sa.String(length=200), nullable=False),
        sa.Column('name_bn', sa.String(length=200), nullable=True),
        sa.Column('qualification', sa.String(length=255), nullable=True),
        sa.Column('subject', sa.String(length=100), nullable=True),
        sa.Column('designation', sa.String(length=100), nullable=True),
        sa.Column('date_of_birth', sa.Date(), nullable=True),
        sa.Column('gender', sa.String(length=10), nullable=True),
        sa.Column('address', sa.Text(), nullable=True),
        sa.Column('phone', sa.String(length=50), nullable=True),
        sa.Column('email', sa.String(length=255), nullable=True),
        sa.Column('status', sa.String(length=20), nullable=False, server_default='active'),
        sa.Column('photo_url', sa.String(length=500), nullable=True),
        sa.Column('joining_date', sa.Date(), nullable=True),
    )
    op.create_index('ix_teachers_school_id', 'teachers', ['school_id'])
    op.create_index('idx_teachers_school_code', 'teachers', ['school_id', 'teacher_code'], unique=True,
                    postgresql_where=sa.text('deleted_at IS NULL'))

    # === USERS ===
    op.create_table(
        'users',
        sa.Column('id', UUID, nullable=False),
        sa.Column('school_id', UUID, nullable=True),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('password_hash', sa.String(length=255), nullable=False),
        sa.Column('first_name', sa.String(length=100), nullable=False),
        sa.Column('last_name', sa.String(length=100), nullable=False),
        sa.Column('phone', sa.String(length=50), nullable=True),
        sa.Column('role', sa.String(length=20), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default='true'),
        sa.Column('last_login_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('student_id', UUID, nullable=True),
        sa.Column('teacher_id', UUID, nullable=True),
        *_timestamps(),
        sa.Column('deleted_at', sa.DateTime(timezone=True), nullable=True),
        sa.ForeignKeyConstraint(['school_id'], ['schools.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['student_id'], ['students.id'], ondelete='SET NULL'),
        sa.ForeignKeyConstraint(['teacher_id'], ['teachers.id'], ondelete='SET NULL'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_users_school_id', 'users', ['school_id'])
    op.create_index('idx_users_email_school', 'users', ['email', 'school_id'], unique=True,
                    postgresql_where=sa.text('deleted_at IS NULL AND school_id IS NOT NULL'))
    op.create_index('idx_users_email_super', 'users', ['email'], unique=True,
                    postgresql_where=sa.text('deleted_at IS NULL AND school_id IS NULL'))
    op.create_index('idx_users_school_role', 'users', ['school_id', 'role'],
                    postgresql_where=sa.text('deleted_at IS NULL'))

    # === PARENT STUDENTS ===
    op.create_table(
        'parent_students',
        sa.Column('id', UUID, nullable=False),
        sa.Column('parent_id', UUID, nullable=False),
        sa.Column('student_id', UUID, nullable=False),
        sa.Column('relationship', sa.String(length=30), nullable=False, server_default='PARENT'),
        sa.Column('is_primary', sa.Boolean(), nullable=False, server_default='false'),
        *_timestamps(),
        sa.ForeignKeyConstraint(['parent_id'], ['users.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['student_id'], ['students.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('idx_parent_students_parent', 'parent_students', ['parent_id'])
    op.create_index('idx_parent_students_student', 'parent_students', ['student_id'])
    op.create_index('idx_parent_students_unique', 'parent_students', ['parent_id', 'student_id'], unique=True)

    # === LIBRARY ===
    op.create_table(
        'library_books',
        *_scoped_columns(),
        sa.Column('title', sa.String(length=255), nullable=False),
        sa.Column('title_bn', sa.String(length=255), nullable=True),
        sa.Column('author', sa.String(length=255), nullable=False),
        sa.Column('isbn', sa.String(length=20), nullable=True),
        sa.Column('category', sa.String(length=100), nullable=False),
        sa.Column('publisher', sa.String(length=255), nullable=True),
        sa.Column('publish_year', sa.Integer(), nullable=True),
        sa.Column('total_copies', sa.Integer(), nullable=False, server_default='1'),
        sa.Column('available_copies', sa.Integer(), nullable=False, server_default='1'),
        sa.Column('location', sa.String(length=100), nullable=True),
        sa.Column('description', sa.Text(), nullable=True),
        sa.CheckConstraint('total_copies >= 0', name='ck_library_books_total_copies'),
        sa.CheckConstraint('available_copies >= 0 AND available_copies <= total_copies',
                           name='ck_library_books_available_copies'),
    )
    op.create_index('ix_library_books_school_id', 'library_books', ['school_id'])
    op.create_index('idx_library_books_school_title', 'library_books', ['school_id', 'title'],
                    postgresql_where=sa.text('deleted_at IS NULL'))

    op.create_table(
        'library_borrowed_books',
        *_scoped_columns(),
        sa.Column('book_id', UUID, nullable=False),
        sa.Column('student_id', UUID, nullable=False),
        sa.Column('borrow_date', sa.Date(), nullable=False, server_default=sa.text('CURRENT_DATE')),
        sa.Column('due_date', sa.Date(), nullable=False),
        sa.Column('return_date', sa.Date(), nullable=True),
        sa.Column('status', sa.String(length=20), nullable=False, server_default='active'),
        sa.Column('fine', sa.Numeric(10, 2), nullable=False, server_default='0'),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.ForeignKeyConstraint(['book_id'], ['library_books.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['student_id'], ['students.id'], ondelete='CASCADE'),
    )
    op.create_index('ix_library_borrowed_books_school_id', 'library_borrowed_books', ['school_id'])
    op.create_index('idx_library_loans_book', 'library_borrowed_books', ['book_id'])
    op.create_index('idx_library_loans_student', 'library_borrowed_books', ['student_id'])
    op.create_index('idx_library_loans_school_status', 'library_borrowed_books', ['school_id', 'status'],
                    postgresql_where=sa.text('deleted_at IS NULL'))

    # === INVENTORY ===
    op.create_table(
        'inventory_items',
        *_scoped_columns(),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('name_bn', sa.String(length=255), nullable=True),
        sa.Column('category', sa.String(length=100), nullable=False),
        sa.Column('subcategory', sa.String(length=100), nullable=True),
        sa.Column('brand', sa.String(length=100), nullable=True),
        sa.Column('model', sa.String(length=100), nullable=True),
        sa.Column('serial_number', sa.String(length=100), nullable=True),
        sa.Column('unit_price', sa.Numeric(10, 2), nullable=False, server_default='0'),
        sa.Column('current_quantity', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('minimum_threshold', sa.Integer(), nullable=False, server_default='10'),
        sa.Column('unit', sa.String(length=20), nullable=False, server_default='pcs'),
        sa.Column('supplier', sa.String(length=255), nullable=True),
        sa.Column('location', sa.String(length=100), nullable=True),
        sa.Column('condition', sa.String(length=20), nullable=False, server_default='good'),
        sa.Column('description', sa.Text(), nullable=True),
        sa.CheckConstraint('current_quantity >= 0', name='ck_inventory_items_quantity'),
    )
    op.create_index('ix_inventory_items_school_id', 'inventory_items', ['school_id'])
    op.create_index('idx_inventory_items_school_category', 'inventory_items', ['school_id', 'category'],
                    postgresql_where=sa.text('deleted_at IS NULL'))

    op.create_table(
        'inventory_movements',
        *_scoped_columns(),
        sa.Column('item_id', UUID, nullable=False),
        sa.Column('type', sa.String(length=20), nullable=False),
        sa.Column('quantity', sa.Integer(), nullable=False),
        sa.Column('reason', sa.String(length=255), nullable=False),
        sa.Column('reference', sa.String(length=100), nullable=True),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('created_by', UUID, nullable=True),
        sa.ForeignKeyConstraint(['item_id'], ['inventory_items.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['created_by'], ['users.id'], ondelete='SET NULL'),
        sa.CheckConstraint('quantity >= 0', name='ck_inventory_movements_quantity'),
    )
    op.create_index('ix_inventory_movements_school_id', 'inventory_movements', ['school_id'])
    op.create_index('idx_inventory_movements_item', 'inventory_movements', ['item_id'])

    # === TRANSPORT ===
    op.create_table(
        'transport_routes',
        *_scoped_columns(),
        sa.Column('route_name', sa.String(length=255), nullable=False),
        sa.Column('pickup_points', JSONB, nullable=False, server_default='[]'),
        sa.Column('timings', JSONB, nullable=False, server_default='{}'),
        sa.Column('monthly_fee', sa.Numeric(10, 2), nullable=False, server_default='0'),
    )
    op.create_index('ix_transport_routes_school_id', 'transport_routes', ['school_id'])
    op.create_index('idx_transport_routes_school', 'transport_routes', ['school_id'],
                    postgresql_where=sa.text('deleted_at IS NULL'))

    op.create_table(
        'transport_vehicles',
        *_scoped_columns(),
        sa.Column('vehicle_number', sa.String(length=50), nullable=False),
        sa.Column('type', sa.String(length=50), nullable=False, server_default='bus'),
        sa.Column('capacity', sa.Integer(), nullable=False),
        sa.Column('driver_name', sa.String(length=200), nullable=True),
        sa.Column('driver_phone', sa.String(length=50), nullable=True),
        sa.Column('helper_name', sa.String(length=200), nullable=True),
        sa.Column('helper_phone', sa.String(length=50), nullable=True),
        sa.Column('route_id', UUID, nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default='true'),
        sa.ForeignKeyConstraint(['route_id'], ['transport_routes.id'], ondelete='SET NULL'),
    )
    op.create_index('ix_transport_vehicles_school_id', 'transport_vehicles', ['school_id'])
    op.create_index('idx_transport_vehicles_school_number', 'transport_vehicles', ['school_id', 'vehicle_number'],
                    unique=True, postgresql_where=sa.text('deleted_at IS NULL'))
    op.create_index('idx_transport_vehicles_route', 'transport_vehicles', ['route_id'])

    op.create_table(
        'transport_student_assignments',
        *_scoped_columns(),
        sa.Column('student_id', UUID, nullable=False),
        sa.Column('route_id', UUID, nullable=False),
        sa.Column('vehicle_id', UUID, nullable=True),
        sa.Column('pickup_point', sa.String(length=255), nullable=False),
        sa.Column('drop_point', sa.String(length=255), nullable=True),
        sa.Column('monthly_fee', sa.Numeric(10, 2), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default='true'),
        sa.ForeignKeyConstraint(['student_id'], ['students.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['route_id'], ['transport_routes.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['vehicle_id'], ['transport_vehicles.id'], ondelete='SET NULL'),
    )
    op.create_index('ix_transport_student_assignments_school_id', 'transport_student_assignments', ['school_id'])
    op.create_index('idx_transport_assignments_student', 'transport_student_assignments', ['student_id'])
    op.create_index('idx_transport_assignments_route', 'transport_student_assignments', ['route_id'])
    op.create_index('idx_transport_assignments_vehicle', 'transport_student_assignments', ['vehicle_id'])

    # === ACADEMIC CALENDAR ===
    op.create_table(
        'academic_years',
        *_scoped_columns(),
        sa.Column('name', sa.String(length=100), nullable=False),
        sa.Column('name_bn', sa.String(length=100), nullable=True),
        sa.Column('start_date', sa.Date(), nullable=False),
        sa.Column('end_date', sa.Date(), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default='false'),
        sa.Column('is_current', sa.Boolean(), nullable=False, server_default='false'),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('status', sa.String(length=20), nullable=False, server_default='draft'),
        sa.CheckConstraint('end_date >= start_date', name='ck_academic_years_dates'),
    )
    op.create_index('ix_academic_years_school_id', 'academic_years', ['school_id'])
    op.create_index('idx_academic_years_current', 'academic_years', ['school_id'], unique=True,
                    postgresql_where=sa.text('is_current AND deleted_at IS NULL'))

    op.create_table(
        'academic_terms',
        *_scoped_columns(),
        sa.Column('academic_year_id', UUID, nullable=False),
        sa.Column('name', sa.String(length=100), nullable=False),
        sa.Column('name_bn', sa.String(length=100), nullable=True),
        sa.Column('start_date', sa.Date(), nullable=False),
        sa.Column('end_date', sa.Date(), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default='true'),
        sa.Column('exam_scheduled', sa.Boolean(), nullable=False, server_default='false'),
        sa.Column('result_published', sa.Boolean(), nullable=False, server_default='false'),
        sa.Column('status', sa.String(length=20), nullable=False, server_default='upcoming'),
        sa.ForeignKeyConstraint(['academic_year_id'], ['academic_years.id'], ondelete='CASCADE'),
        sa.CheckConstraint('end_date >= start_date', name='ck_academic_terms_dates'),
    )
    op.create_index('ix_academic_terms_school_id', 'academic_terms', ['school_id'])
    op.create_index('idx_academic_terms_year', 'academic_terms', ['academic_year_id'])

    # === FINANCE ===
    op.create_table(
        'transactions',
        *_scoped_columns(),
        sa.Column('amount', sa.Numeric(12, 2), nullable=False),
        sa.Column('type', sa.String(length=20), nullable=False),
        sa.Column('category', sa.String(length=30), nullable=False),
        sa.Column('description', sa.Text(), nullable=False),
        sa.Column('payment_method', sa.String(length=30), nullable=False, server_default='cash'),
        sa.Column('reference', sa.String(length=100), nullable=True),
        sa.Column('transaction_date', sa.Date(), nullable=False, server_default=sa.text('CURRENT_DATE')),
        sa.Column('created_by', UUID, nullable=True),
        sa.ForeignKeyConstraint(['created_by'], ['users.id'], ondelete='SET NULL'),
        sa.CheckConstraint('amount > 0', name='ck_transactions_amount'),
    )
    op.create_index('ix_transactions_school_id', 'transactions', ['school_id'])
    op.create_index('idx_transactions_school_date', 'transactions', ['school_id', 'transaction_date'],
                    postgresql_where=sa.text('deleted_at IS NULL'))

    op.create_table(
        'budgets',
        *_scoped_columns(),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('total_amount', sa.Numeric(12, 2), nullable=False),
        sa.Column('used_amount', sa.Numeric(12, 2), nullable=False, server_default='0'),
        sa.Column('category', sa.String(length=30), nullable=False),
        sa.Column('start_date', sa.Date(), nullable=False),
        sa.Column('end_date', sa.Date(), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default='true'),
        sa.Column('created_by', UUID, nullable=True),
        sa.ForeignKeyConstraint(['created_by'], ['users.id'], ondelete='SET NULL'),
        sa.CheckConstraint('end_date >= start_date', name='ck_budgets_dates'),
    )
    op.create_index('ix_budgets_school_id', 'budgets', ['school_id'])
    op.create_index('idx_budgets_school_category', 'budgets', ['school_id', 'category'],
                    postgresql_where=sa.text('deleted_at IS NULL'))

    op.create_table(
        'fee_structures',
        *_scoped_columns(),
        sa.Column('class_name', sa.String(length=50), nullable=False),
        sa.Column('fee_type', sa.String(length=100), nullable=False),
        sa.Column('amount', sa.Numeric(10, 2), nullable=False),
        sa.Column('frequency', sa.String(length=20), nullable=False, server_default='monthly'),
        sa.Column('due_day', sa.Integer(), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default='true'),
        sa.Column('created_by', UUID, nullable=True),
        sa.ForeignKeyConstraint(['created_by'], ['users.id'], ondelete='SET NULL'),
    )
    op.create_index('ix_fee_structures_school_id', 'fee_structures', ['school_id'])
    op.create_index('idx_fee_structures_school_class', 'fee_structures', ['school_id', 'class_name'],
                    postgresql_where=sa.text('deleted_at IS NULL'))

    op.create_table(
        'student_fees',
        *_scoped_columns(),
        sa.Column('student_id', UUID, nullable=False),
        sa.Column('fee_structure_id', UUID, nullable=False),
        sa.Column('amount_due', sa.Numeric(10, 2), nullable=False),
        sa.Column('amount_paid', sa.Numeric(10, 2), nullable=False, server_default='0'),
        sa.Column('due_date', sa.Date(), nullable=False),
        sa.Column('paid_date', sa.Date(), nullable=True),
        sa.Column('status', sa.String(length=20), nullable=False, server_default='pending'),
        sa.Column('payment_method', sa.String(length=30), nullable=True),
        sa.Column('transaction_reference', sa.String(length=100), nullable=True),
        sa.Column('created_by', UUID, nullable=True),
        sa.ForeignKeyConstraint(['student_id'], ['students.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['fee_structure_id'], ['fee_structures.id'], ondelete='RESTRICT'),
        sa.ForeignKeyConstraint(['created_by'], ['users.id'], ondelete='SET NULL'),
        sa.CheckConstraint('amount_paid >= 0 AND amount_paid <= amount_due', name='ck_student_fees_amount_paid'),
    )
    op.create_index('ix_student_fees_school_id', 'student_fees', ['school_id'])
    op.create_index('idx_student_fees_student', 'student_fees', ['student_id'])
    op.create_index('idx_student_fees_school_status', 'student_fees', ['school_id', 'status'],
                    postgresql_where=sa.text('deleted_at IS NULL'))

    # === CALENDAR EVENTS ===
    op.create_table(
        'calendar_events',
        *_scoped_columns(),
        sa.Column('title', sa.String(length=255), nullable=False),
        sa.Column('title_bn', sa.String(length=255), nullable=True),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('start_date', sa.Date(), nullable=False),
        sa.Column('end_date', sa.Date(), nullable=False),
        sa.Column('start_time', sa.Time(), nullable=True),
        sa.Column('end_time', sa.Time(), nullable=True),
        sa.Column('type', sa.String(length=20), nullable=False, server_default='event'),
        sa.Column('is_public', sa.Boolean(), nullable=False, server_default='true'),
        sa.Column('location', sa.String(length=255), nullable=True),
        sa.Column('organizer', sa.String(length=255), nullable=True),
        sa.Column('attendees', JSONB, nullable=False, server_default='[]'),
        sa.Column('created_by', UUID, nullable=True),
        sa.ForeignKeyConstraint(['created_by'], ['users.id'], ondelete='SET NULL'),
        sa.CheckConstraint('end_date >= start_date', name='ck_calendar_events_dates'),
    )
    op.create_index('ix_calendar_events_school_id', 'calendar_events', ['school_id'])
    op.create_index('idx_calendar_events_school_start', 'calendar_events', ['school_id', 'start_date'],
                    postgresql_where=sa.text('deleted_at IS NULL'))

    # === NOTIFICATIONS ===
    op.create_table(
        'notifications',
        *_scoped_columns(),
        sa.Column('title', sa.String(length=255), nullable=False),
        sa.Column('title_bn', sa.String(length=255), nullable=True),
        sa.Column('message', sa.Text(), nullable=False),
        sa.Column('message_bn', sa.Text(), nullable=True),
        sa.Column('type', sa.String(length=20), nullable=False, server_default='info'),
        sa.Column('priority', sa.String(length=20), nullable=False, server_default='medium'),
        sa.Column('category', sa.String(length=50), nullable=False, server_default='general'),
        sa.Column('recipient_id', UUID, nullable=True),
        sa.Column('is_public', sa.Boolean(), nullable=False, server_default='false'),
        sa.Column('action_required', sa.Boolean(), nullable=False, server_default='false'),
        sa.Column('is_read', sa.Boolean(), nullable=False, server_default='false'),
        sa.Column('read_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('sender', sa.String(length=255), nullable=True),
        sa.ForeignKeyConstraint(['recipient_id'], ['users.id'], ondelete='CASCADE'),
    )
    op.create_index('ix_notifications_school_id', 'notifications', ['school_id'])
    op.create_index('idx_notifications_recipient_unread', 'notifications', ['recipient_id', 'is_read'],
                    postgresql_where=sa.text('is_read = false'))

    # === DOCUMENT TEMPLATES ===
    op.create_table(
        'document_templates',
        *_scoped_columns(),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('name_bn', sa.String(length=255), nullable=True),
        sa.Column('type', sa.String(length=50), nullable=False),
        sa.Column('category', sa.String(length=100), nullable=False),
        sa.Column('category_bn', sa.String(length=100), nullable=True),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('description_bn', sa.Text(), nullable=True),
        sa.Column('template', JSONB, nullable=False, server_default='{}'),
        sa.Column('settings', JSONB, nullable=False, server_default='{}'),
        sa.Column('tags', JSONB, nullable=False, server_default='[]'),
        sa.Column('required_credits', sa.Integer(), nullable=False, server_default='1'),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default='true'),
        sa.Column('is_favorite', sa.Boolean(), nullable=False, server_default='false'),
        sa.Column('is_default', sa.Boolean(), nullable=False, server_default='false'),
        sa.Column('version', sa.String(length=20), nullable=False, server_default='1.0'),
        sa.Column('usage_count', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('last_used_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('created_by', UUID, nullable=True),
        sa.ForeignKeyConstraint(['created_by'], ['users.id'], ondelete='SET NULL'),
    )
    op.create_index('ix_document_templates_school_id', 'document_templates', ['school_id'])
    op.create_index('idx_document_templates_school_type', 'document_templates', ['school_id', 'type'],
                    postgresql_where=sa.text('deleted_at IS NULL'))

    # === SETTINGS ===
    op.create_table(
        'school_settings',
        sa.Column('id', UUID, nullable=False),
        sa.Column('school_id', UUID, nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('name_bn', sa.String(length=255), nullable=True),
        sa.Column('address', sa.Text(), nullable=True),
        sa.Column('address_bn', sa.Text(), nullable=True),
        sa.Column('email', sa.String(length=255), nullable=True),
        sa.Column('phone', sa.String(length=50), nullable=True),
        sa.Column('website', sa.String(length=255), nullable=True),
        sa.Column('school_type', sa.String(length=20), nullable=False, server_default='school'),
        sa.Column('establishment_year', sa.Integer(), nullable=True),
        sa.Column('eiin', sa.String(length=20), nullable=True),
        sa.Column('registration_number', sa.String(length=50), nullable=True),
        sa.Column('principal_name', sa.String(length=255), nullable=True),
        sa.Column('principal_phone', sa.String(length=50), nullable=True),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('description_bn', sa.Text(), nullable=True),
        sa.Column('primary_color', sa.String(length=20), nullable=False, server_default='#3B82F6'),
        sa.Column('secondary_color', sa.String(length=20), nullable=False, server_default='#10B981'),
        sa.Column('accent_color', sa.String(length=20), nullable=False, server_default='#F59E0B'),
        sa.Column('motto', sa.String(length=255), nullable=True),
        sa.Column('motto_bn', sa.String(length=255), nullable=True),
        sa.Column('use_watermark', sa.Boolean(), nullable=False, server_default='true'),
        sa.Column('use_letterhead', sa.Boolean(), nullable=False, server_default='true'),
        sa.Column('logo_url', sa.String(length=500), nullable=True),
        sa.Column('timezone', sa.String(length=50), nullable=False, server_default='Asia/Dhaka'),
        sa.Column('language', sa.String(length=10), nullable=False, server_default='bn'),
        sa.Column('date_format', sa.String(length=20), nullable=False, server_default='DD/MM/YYYY'),
        sa.Column('currency', sa.String(length=10), nullable=False, server_default='BDT'),
        sa.Column('academic_year_start', sa.String(length=10), nullable=False, server_default='01/01'),
        sa.Column('week_starts_on', sa.String(length=10), nullable=False, server_default='sunday'),
        sa.Column('enable_notifications', sa.Boolean(), nullable=False, server_default='true'),
        sa.Column('enable_sms', sa.Boolean(), nullable=False, server_default='false'),
        sa.Column('enable_email', sa.Boolean(), nullable=False, server_default='true'),
        sa.Column('auto_backup', sa.Boolean(), nullable=False, server_default='true'),
        sa.Column('data_retention', sa.Integer(), nullable=False, server_default='365'),
        sa.Column('max_students', sa.Integer(), nullable=False, server_default='500'),
        sa.Column('max_teachers', sa.Integer(), nullable=False, server_default='50'),
        sa.Column('allow_online_payments', sa.Boolean(), nullable=False, server_default='false'),
        *_timestamps(),
        sa.ForeignKeyConstraint(['school_id'], ['schools.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('school_id'),
    )

    op.create_table(
        'admin_settings',
        sa.Column('id', UUID, nullable=False),
        sa.Column('user_id', UUID, nullable=False),
        sa.Column('display_name', sa.String(length=255), nullable=True),
        sa.Column('bio', sa.Text(), nullable=True),
        sa.Column('profile_picture', sa.String(length=500), nullable=True),
        sa.Column('contact_phone', sa.String(length=50), nullable=True),
        sa.Column('emergency_contact', sa.String(length=255), nullable=True),
        sa.Column('language', sa.String(length=10), nullable=False, server_default='bn'),
        sa.Column('dark_mode', sa.Boolean(), nullable=False, server_default='false'),
        sa.Column('email_notifications', sa.Boolean(), nullable=False, server_default='true'),
        sa.Column('sms_notifications', sa.Boolean(), nullable=False, server_default='false'),
        sa.Column('push_notifications', sa.Boolean(), nullable=False, server_default='true'),
        sa.Column('two_factor_enabled', sa.Boolean(), nullable=False, server_default='false'),
        sa.Column('session_timeout', sa.Integer(), nullable=False, server_default='60'),
        sa.Column('password_expiry', sa.Integer(), nullable=False, server_default='90'),
        sa.Column('allow_multiple_sessions', sa.Boolean(), nullable=False, server_default='false'),
        sa.Column('default_dashboard', sa.String(length=50), nullable=False, server_default='overview'),
        sa.Column('sidebar_collapsed', sa.Boolean(), nullable=False, server_default='false'),
        sa.Column('show_welcome_message', sa.Boolean(), nullable=False, server_default='true'),
        sa.Column('items_per_page', sa.Integer(), nullable=False, server_default='25'),
        *_timestamps(),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('user_id'),
    )


def downgrade() -> None:
    # Reverse order of creation
    op.drop_table('admin_settings')
    op.drop_table('school_settings')
    op.drop_table('document_templates')
    op.drop_table('notifications')
    op.drop_table('calendar_events')
    op.drop_table('student_fees')
    op.drop_table('fee_structures')
    op.drop_table('budgets')
    op.drop_table('transactions')
    op.drop_table('academic_terms')
    op.drop_table('academic_years')
    op.drop_table('transport_student_assignments')
    op.drop_table('transport_vehicles')
    op.drop_table('transport_routes')
    op.drop_table('inventory_movements')
    op.drop_table('inventory_items')
    op.drop_table('library_borrowed_books')
    op.drop_table('library_books')
    op.drop_table('parent_students')
    op.drop_table('users')
    op.drop_table('teachers')
    op.drop_table('students')
    op.drop_table('schools')
