"""Create booking schema

Revision ID: create_booking_schema
Revises:
Create Date: 2024-09-02 10:00:00.000000

"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = 'create_booking_schema'
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    op.create_table(
        'context',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('contextlevel', sa.Integer(), nullable=False),
        sa.Column('instanceid', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('path', sa.String(255)),
        sa.Column('depth', sa.Integer(), nullable=False, server_default='0'),
    )
    op.create_index('ix_context_level_instance', 'context', ['contextlevel', 'instanceid'])

    op.create_table(
        'users',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('username', sa.String(100), nullable=False, unique=True),
        sa.Column('email', sa.String(255), nullable=False),
        sa.Column('firstname', sa.String(100), nullable=False, server_default=''),
        sa.Column('lastname', sa.String(100), nullable=False, server_default=''),
        sa.Column('password_hash', sa.String(255)),
        sa.Column('active', sa.Boolean(), server_default=sa.true()),
        sa.Column('is_siteadmin', sa.Boolean(), server_default=sa.false()),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
    )

    op.create_table(
        'capability_assignments',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('userid', sa.Integer(), sa.ForeignKey('users.id'), nullable=False),
        sa.Column('contextid', sa.Integer(), sa.ForeignKey('context.id'), nullable=False),
        sa.Column('capability', sa.String(255), nullable=False),
        sa.UniqueConstraint('userid', 'contextid', 'capability', name='uq_capability_assignment'),
    )

    op.create_table(
        'course_categories',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('description', sa.Text()),
        sa.Column('parent', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('path', sa.String(255), nullable=False, server_default=''),
        sa.Column('coursecount', sa.Integer(), nullable=False, server_default='0'),
    )

    op.create_table(
        'modules',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('name', sa.String(50), nullable=False, unique=True),
    )

    op.create_table(
        'course_modules',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('course', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('module', sa.Integer(), sa.ForeignKey('modules.id'), nullable=False),
        sa.Column('instance', sa.Integer(), nullable=False),
    )

    op.create_table(
        'booking',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('course', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('intro', sa.Text()),
    )

    op.create_table(
        'booking_options',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('bookingid', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('text', sa.String(255), nullable=False),
        sa.Column('description', sa.Text()),
        sa.Column('maxanswers', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('maxoverbooking', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('timemodified', sa.Integer(), nullable=False, server_default='0'),
    )

    op.create_table(
        'booking_answers',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('optionid', sa.Integer(), sa.ForeignKey('booking_options.id'), nullable=False),
        sa.Column('userid', sa.Integer(), sa.ForeignKey('users.id'), nullable=False),
        sa.Column('waitinglist', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('timecreated', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('timemodified', sa.Integer(), nullable=False, server_default='0'),
    )
    op.create_index('ix_booking_answers_option_status', 'booking_answers', ['optionid', 'waitinglist'])

    # No unique constraint on (area, capability, contextid): saves check before writing
    op.create_table(
        'booking_form_config',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('area', sa.String(100), nullable=False),
        sa.Column('capability', sa.String(255), nullable=False),
        sa.Column('contextid', sa.Integer(), sa.ForeignKey('context.id'), nullable=False),
        sa.Column('json', sa.Text()),
    )


def downgrade():
    op.drop_table('booking_form_config')
    op.drop_index('ix_booking_answers_option_status', table_name='booking_answers')
    op.drop_table('booking_answers')
    op.drop_table('booking_options')
    op.drop_table('booking')
    op.drop_table('course_modules')
    op.drop_table('modules')
    op.drop_table('course_categories')
    op.drop_table('capability_assignments')
    op.drop_table('users')
    op.drop_index('ix_context_level_instance', table_name='context')
    op.drop_table('context')
