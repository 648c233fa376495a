"""Create leasing tables

Revision ID: 20261019_000001
Revises: None
Create Date: 2026-10-19

Creates users, shops, tenants, lease_agreements, rent_payments, expenses and
activity_log, including the partial unique index that allows one ACTIVE
agreement per shop.
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '20261019_000001'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

SHOP_STATUS = ('VACANT', 'OCCUPIED', 'UNDER_MAINTENANCE', 'RESERVED')
AGREEMENT_STATUS = ('ACTIVE', 'EXPIRED', 'TERMINATED', 'RENEWED')
PAYMENT_METHOD = ('CASH', 'BANK_TRANSFER', 'CHEQUE', 'DIGITAL_WALLET')
PAYMENT_STATUS = ('PAID', 'PENDING', 'PARTIAL', 'OVERDUE')
EXPENSE_CATEGORY = ('MAINTENANCE', 'UTILITIES', 'REPAIRS', 'TAXES', 'INSURANCE', 'CLEANING', 'SECURITY', 'OTHER')
RECURRING_FREQUENCY = ('DAILY', 'WEEKLY', 'MONTHLY', 'QUARTERLY', 'YEARLY')


def upgrade() -> None:
    """Create the leasing tables."""
    op.create_table(
        'users',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('username', sa.String(length=100), nullable=False),
        sa.Column('password_hash', sa.String(length=255), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=True),
        sa.Column('full_name', sa.String(length=200), nullable=False),
        sa.Column('phone_number', sa.String(length=50), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=False),
        sa.Column('created_at', sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.Column('last_login', sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint('id', name='pk_users'),
    )
    op.create_index('ix_users_username', 'users', ['username'], unique=True)

    op.create_table(
        'shops',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('user_id', sa.Integer(), nullable=False),
        sa.Column('shop_number', sa.String(length=50), nullable=False),
        sa.Column('floor', sa.Integer(), nullable=False),
        sa.Column('building_name', sa.String(length=255), nullable=False),
        sa.Column('address', sa.String(length=500), nullable=False),
        sa.Column('area', sa.Numeric(precision=10, scale=2), nullable=False),
        sa.Column('monthly_rent', sa.Numeric(precision=12, scale=2), nullable=False),
        sa.Column('security_deposit', sa.Numeric(precision=12, scale=2), nullable=False),
        sa.Column('amenities', sa.Text(), nullable=True),
        sa.Column('status', sa.Enum(*SHOP_STATUS, name='shop_status', create_constraint=True), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint('id', name='pk_shops'),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], name='fk_shops_user_id_users', ondelete='CASCADE'),
    )
    op.create_index('ix_shops_user_id', 'shops', ['user_id'])
    op.create_index('ix_shops_status', 'shops', ['status'])

    op.create_table(
        'tenants',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('user_id', sa.Integer(), nullable=False),
        sa.Column('full_name', sa.String(length=200), nullable=False),
        sa.Column('phone_number', sa.String(length=50), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=True),
        sa.Column('address', sa.String(length=500), nullable=False),
        sa.Column('id_type', sa.String(length=100), nullable=True),
        sa.Column('id_number', sa.String(length=100), nullable=True),
        sa.Column('emergency_contact', sa.String(length=200), nullable=True),
        sa.Column('emergency_phone', sa.String(length=50), nullable=True),
        sa.Column('company_name', sa.String(length=255), nullable=True),
        sa.Column('business_type', sa.String(length=100), nullable=True),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=False),
        sa.Column('created_at', sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint('id', name='pk_tenants'),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], name='fk_tenants_user_id_users', ondelete='CASCADE'),
    )
    op.create_index('ix_tenants_user_id', 'tenants', ['user_id'])

    op.create_table(
        'lease_agreements',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('user_id', sa.Integer(), nullable=False),
        sa.Column('agreement_number', sa.String(length=64), nullable=False),
        sa.Column('shop_id', sa.Integer(), nullable=False),
        sa.Column('tenant_id', sa.Integer(), nullable=False),
        sa.Column('start_date', sa.Date(), nullable=False),
        sa.Column('end_date', sa.Date(), nullable=False),
        sa.Column('monthly_rent', sa.Numeric(precision=12, scale=2), nullable=False),
        sa.Column('security_deposit', sa.Numeric(precision=12, scale=2), nullable=False),
        sa.Column('rent_due_day', sa.Integer(), nullable=False),
        sa.Column('payment_terms', sa.Text(), nullable=True),
        sa.Column('maintenance_charges', sa.Numeric(precision=12, scale=2), nullable=False),
        sa.Column('utilities_included', sa.Boolean(), nullable=False),
        sa.Column('notice_period_days', sa.Integer(), nullable=False),
        sa.Column('agreement_document_path', sa.String(length=500), nullable=True),
        sa.Column(
            'status',
            sa.Enum(*AGREEMENT_STATUS, name='agreement_status', create_constraint=True),
            nullable=False
        ),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint('id', name='pk_lease_agreements'),
        sa.ForeignKeyConstraint(
            ['user_id'], ['users.id'],
            name='fk_lease_agreements_user_id_users',
            ondelete='CASCADE'
        ),
        sa.ForeignKeyConstraint(
            ['shop_id'], ['shops.id'],
            name='fk_lease_agreements_shop_id_shops',
            ondelete='CASCADE'
        ),
        sa.ForeignKeyConstraint(
            ['tenant_id'], ['tenants.id'],
            name='fk_lease_agreements_tenant_id_tenants',
            ondelete='CASCADE'
        ),
    )
    op.create_index('ix_lease_agreements_user_id', 'lease_agreements', ['user_id'])
    op.create_index('ix_lease_agreements_agreement_number', 'lease_agreements', ['agreement_number'], unique=True)
    op.create_index('ix_lease_agreements_shop_id', 'lease_agreements', ['shop_id'])
    op.create_index('ix_lease_agreements_tenant_id', 'lease_agreements', ['tenant_id'])
    op.create_index('ix_lease_agreements_end_date', 'lease_agreements', ['end_date'])
    op.create_index('ix_lease_agreements_status', 'lease_agreements', ['status'])
    op.create_index(
        'uq_lease_agreements_active_shop',
        'lease_agreements',
        ['shop_id'],
        unique=True,
        sqlite_where=sa.text("status = 'ACTIVE'"),
        postgresql_where=sa.text("status = 'ACTIVE'"),
        mssql_where=sa.text("status = 'ACTIVE'"),
    )

    op.create_table(
        'rent_payments',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('agreement_id', sa.Integer(), nullable=False),
        sa.Column('amount', sa.Numeric(precision=12, scale=2), nullable=False),
        sa.Column('payment_date', sa.Date(), nullable=False),
        sa.Column('month', sa.Integer(), nullable=False),
        sa.Column('year', sa.Integer(), nullable=False),
        sa.Column(
            'payment_method',
            sa.Enum(*PAYMENT_METHOD, name='payment_method', create_constraint=True),
            nullable=False
        ),
        sa.Column('reference_number', sa.String(length=255), nullable=True),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('is_late', sa.Boolean(), nullable=False),
        sa.Column('late_fee', sa.Numeric(precision=12, scale=2), nullable=False),
        sa.Column(
            'status',
            sa.Enum(*PAYMENT_STATUS, name='payment_status', create_constraint=True),
            nullable=False
        ),
        sa.PrimaryKeyConstraint('id', name='pk_rent_payments'),
        sa.ForeignKeyConstraint(
            ['agreement_id'], ['lease_agreements.id'],
            name='fk_rent_payments_agreement_id_lease_agreements',
            ondelete='CASCADE'
        ),
    )
    op.create_index('ix_rent_payments_agreement_id', 'rent_payments', ['agreement_id'])
    op.create_index('ix_rent_payments_payment_date', 'rent_payments', ['payment_date'])
    op.create_index('ix_rent_payments_period', 'rent_payments', ['month', 'year'])
    op.create_index('ix_rent_payments_agreement_period', 'rent_payments', ['agreement_id', 'year', 'month'])

    op.create_table(
        'expenses',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('shop_id', sa.Integer(), nullable=True),
        sa.Column(
            'category',
            sa.Enum(*EXPENSE_CATEGORY, name='expense_category', create_constraint=True),
            nullable=False
        ),
        sa.Column('amount', sa.Numeric(precision=12, scale=2), nullable=False),
        sa.Column('description', sa.String(length=500), nullable=False),
        sa.Column('expense_date', sa.Date(), nullable=False),
        sa.Column('receipt_path', sa.String(length=500), nullable=True),
        sa.Column('is_recurring', sa.Boolean(), nullable=False),
        sa.Column(
            'recurring_frequency',
            sa.Enum(*RECURRING_FREQUENCY, name='recurring_frequency', create_constraint=True),
            nullable=True
        ),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.PrimaryKeyConstraint('id', name='pk_expenses'),
        sa.ForeignKeyConstraint(['shop_id'], ['shops.id'], name='fk_expenses_shop_id_shops', ondelete='CASCADE'),
    )
    op.create_index('ix_expenses_shop_id', 'expenses', ['shop_id'])
    op.create_index('ix_expenses_category', 'expenses', ['category'])
    op.create_index('ix_expenses_expense_date', 'expenses', ['expense_date'])

    op.create_table(
        'activity_log',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('user_id', sa.Integer(), nullable=False),
        sa.Column('message', sa.String(length=500), nullable=False),
        sa.Column('timestamp', sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint('id', name='pk_activity_log'),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], name='fk_activity_log_user_id_users', ondelete='CASCADE'),
    )
    op.create_index('ix_activity_log_user_id', 'activity_log', ['user_id'])
    op.create_index('ix_activity_log_timestamp', 'activity_log', ['timestamp'])


def downgrade() -> None:
    """Drop the leasing tables."""
    op.drop_table('activity_log')
    op.drop_table('expenses')
    op.drop_table('rent_payments')
    op.drop_table('lease_agreements')
    op.drop_table('tenants')
    op.drop_table('shops')
    op.drop_table('users')

    # Drop the enum types
    if op.get_bind().dialect.name == 'postgresql':
        for enum_name in ('recurring_frequency', 'expense_category', 'payment_status',
                          'payment_method', 'agreement_status', 'shop_status'):
            op.execute(f"DROP TYPE IF EXISTS {enum_name}")
