"""create users, accounts, members and ledger tables

Revision ID: 3f1c2a9b7d10
Revises: 
Create Date: 2026-10-16 10:12:44.518203

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '3f1c2a9b7d10'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _enum(name: str, *values: str) -> sa.Enum:
    return sa.Enum(*values, name=name, native_enum=False, length=20)


def upgrade() -> None:
    op.create_table(
        'users',
        sa.Column('id', sa.Uuid, primary_key=True),
        sa.Column('email', sa.String(255), nullable=False),
        sa.Column('password_hash', sa.String(255), nullable=False),
        sa.Column('is_active', sa.Boolean, nullable=False),
        sa.Column('full_name', sa.String(255), nullable=False),
        sa.Column('avatar_url', sa.String(500), nullable=True),
        sa.Column('last_login_at', sa.DateTime, nullable=True),
        sa.Column('created_at', sa.DateTime, nullable=True),
        sa.Column('updated_at', sa.DateTime, nullable=True),
        sa.UniqueConstraint('email', name='uq_user_email'),
    )
    op.create_index('idx_users_email', 'users', ['email'])

    op.create_table(
        'accounts',
        sa.Column('id', sa.Uuid, primary_key=True),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('type', _enum('accounttype', 'personal', 'household', 'company', 'joint', 'other'), nullable=False),
        sa.Column('currency', sa.String(3), nullable=False),
        sa.Column('initial_balance', sa.DECIMAL(15, 2), nullable=False),
        sa.Column('current_balance', sa.DECIMAL(15, 2), nullable=False),
        sa.Column('color', sa.String(7), nullable=True),
        sa.Column('icon', sa.String(50), nullable=True),
        sa.Column('is_active', sa.Boolean, nullable=False),
        sa.Column('deleted_at', sa.DateTime, nullable=True),
        sa.Column('created_at', sa.DateTime, nullable=True),
        sa.Column('updated_at', sa.DateTime, nullable=True),
    )

    op.create_table(
        'account_members',
        sa.Column('id', sa.Uuid, primary_key=True),
        sa.Column('account_id', sa.Uuid, sa.ForeignKey('accounts.id'), nullable=False),
        sa.Column('user_id', sa.Uuid, sa.ForeignKey('users.id'), nullable=False),
        sa.Column('invited_by', sa.Uuid, sa.ForeignKey('users.id'), nullable=True),
        sa.Column('role', _enum('memberrole', 'owner', 'editor', 'viewer'), nullable=False),
        sa.Column('status', _enum('memberstatus', 'pending', 'accepted'), nullable=False),
        sa.Column('created_at', sa.DateTime, nullable=True),
        sa.Column('accepted_at', sa.DateTime, nullable=True),
        sa.UniqueConstraint('account_id', 'user_id', name='uq_account_member'),
    )
    op.create_index('idx_account_members_user', 'account_members', ['user_id', 'status'])

    op.create_table(
        'categories',
        sa.Column('id', sa.Uuid, primary_key=True),
        sa.Column('account_id', sa.Uuid, sa.ForeignKey('accounts.id'), nullable=False),
        sa.Column('parent_id', sa.Uuid, sa.ForeignKey('categories.id'), nullable=True),
        sa.Column('name', sa.String(100), nullable=False),
        sa.Column('type', _enum('categorytype', 'expense', 'income'), nullable=False),
        sa.Column('color', sa.String(7), nullable=True),
        sa.Column('icon', sa.String(50), nullable=True),
        sa.Column('is_active', sa.Boolean, nullable=False),
        sa.Column('created_at', sa.DateTime, nullable=True),
        sa.Column('updated_at', sa.DateTime, nullable=True),
        sa.UniqueConstraint('account_id', 'name', 'type', name='uq_account_category_name'),
    )
    op.create_index('idx_categories_account', 'categories', ['account_id'])

    op.create_table(
        'transactions',
        sa.Column('id', sa.Uuid, primary_key=True),
        sa.Column('account_id', sa.Uuid, sa.ForeignKey('accounts.id'), nullable=False),
        sa.Column('category_id', sa.Uuid, sa.ForeignKey('categories.id'), nullable=True),
        sa.Column('created_by', sa.Uuid, sa.ForeignKey('users.id'), nullable=False),
        sa.Column('date', sa.Date, nullable=False),
        sa.Column('description', sa.String(500), nullable=False),
        sa.Column('amount', sa.DECIMAL(15, 2), nullable=False),
        sa.Column('type', _enum('transactiontype', 'income', 'expense'), nullable=False),
        sa.Column('payment_method', sa.String(50), nullable=True),
        sa.Column('notes', sa.Text, nullable=True),
        sa.Column('tags', sa.JSON, nullable=True),
        sa.Column('is_recurring', sa.Boolean, nullable=False),
        sa.Column('created_at', sa.DateTime, nullable=True),
        sa.Column('updated_at', sa.DateTime, nullable=True),
    )
    op.create_index('idx_transactions_account_date', 'transactions', ['account_id', 'date'])
    op.create_index('idx_transactions_category', 'transactions', ['category_id'])

    op.create_table(
        'budgets',
        sa.Column('id', sa.Uuid, primary_key=True),
        sa.Column('account_id', sa.Uuid, sa.ForeignKey('accounts.id'), nullable=False),
        sa.Column('category_id', sa.Uuid, sa.ForeignKey('categories.id'), nullable=True),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('amount', sa.DECIMAL(15, 2), nullable=False),
        sa.Column('period', _enum('budgetperiod', 'monthly', 'yearly'), nullable=False),
        sa.Column('start_date', sa.Date, nullable=False),
        sa.Column('end_date', sa.Date, nullable=True),
        sa.Column('alert_threshold', sa.Integer, nullable=False),
        sa.Column('is_active', sa.Boolean, nullable=False),
        sa.Column('created_at', sa.DateTime, nullable=True),
        sa.Column('updated_at', sa.DateTime, nullable=True),
    )
    op.create_index('idx_budgets_account', 'budgets', ['account_id'])

    op.create_table(
        'goals',
        sa.Column('id', sa.Uuid, primary_key=True),
        sa.Column('account_id', sa.Uuid, sa.ForeignKey('accounts.id'), nullable=False),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('description', sa.Text, nullable=True),
        sa.Column('target_amount', sa.DECIMAL(15, 2), nullable=False),
        sa.Column('current_amount', sa.DECIMAL(15, 2), nullable=False),
        sa.Column('target_date', sa.Date, nullable=True),
        sa.Column('is_achieved', sa.Boolean, nullable=False),
        sa.Column('created_at', sa.DateTime, nullable=True),
        sa.Column('updated_at', sa.DateTime, nullable=True),
    )

    op.create_table(
        'investment_assets',
        sa.Column('id', sa.Uuid, primary_key=True),
        sa.Column('account_id', sa.Uuid, sa.ForeignKey('accounts.id'), nullable=False),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('type', _enum('investmenttype', 'fixed_income', 'fund', 'stock', 'other'), nullable=False),
        sa.Column('ticker', sa.String(20), nullable=True),
        sa.Column('quantity', sa.DECIMAL(18, 6), nullable=True),
        sa.Column('purchase_price', sa.DECIMAL(15, 2), nullable=True),
        sa.Column('current_price', sa.DECIMAL(15, 2), nullable=True),
        sa.Column('purchase_date', sa.Date, nullable=True),
        sa.Column('notes', sa.Text, nullable=True),
        sa.Column('created_at', sa.DateTime, nullable=True),
        sa.Column('updated_at', sa.DateTime, nullable=True),
    )
    op.create_index('idx_investments_account', 'investment_assets', ['account_id'])

    op.create_table(
        'notifications',
        sa.Column('id', sa.Uuid, primary_key=True),
        sa.Column('user_id', sa.Uuid, sa.ForeignKey('users.id'), nullable=False),
        sa.Column('type', sa.String(50), nullable=False),
        sa.Column('title', sa.String(255), nullable=False),
        sa.Column('message', sa.Text, nullable=False),
        sa.Column('data', sa.JSON, nullable=True),
        sa.Column('is_read', sa.Boolean, nullable=False),
        sa.Column('created_at', sa.DateTime, nullable=True),
    )
    op.create_index('idx_notifications_user', 'notifications', ['user_id', 'is_read'])


def downgrade() -> None:
    op.drop_table('notifications')
    op.drop_table('investment_assets')
    op.drop_table('goals')
    op.drop_table('budgets')
    op.drop_table('transactions')
    op.drop_table('categories')
    op.drop_table('account_members')
    op.drop_table('accounts')
    op.drop_table('users')
