"""create_ledger_tables

Revision ID: a1c3e5f7b9d2
Revises:
Create Date: 2026-10-19 10:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = 'a1c3e5f7b9d2'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps():
    return [
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('created_by', sa.String(), nullable=True),
        sa.Column('updated_by', sa.String(), nullable=True),
    ]


def upgrade() -> None:
    """Upgrade schema."""
    account_type = sa.Enum('ASSET', 'LIABILITY', 'EQUITY', 'INCOME', 'EXPENSE', name='accounttype')
    expense_status = sa.Enum('PENDING', 'APPROVED', 'REJECTED', name='expensestatus')

    op.create_table(
        'chart_of_accounts',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('tenant_id', sa.String(), nullable=False),
        sa.Column('parent_id', sa.Integer(), sa.ForeignKey('chart_of_accounts.id'), nullable=True),
        sa.Column('account_code', sa.String(length=20), nullable=False),
        sa.Column('account_name', sa.String(length=100), nullable=False),
        sa.Column('account_type', account_type, nullable=False),
        sa.Column('sub_type', sa.String(length=50), nullable=True),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('balance', sa.Numeric(14, 2), nullable=False, server_default='0'),
        sa.Column('is_system', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        *_timestamps(),
        sa.UniqueConstraint('tenant_id', 'account_code', name='_tenant_account_code_uc'),
    )
    op.create_index('ix_chart_of_accounts_id', 'chart_of_accounts', ['id'])
    op.create_index('ix_chart_of_accounts_tenant_id', 'chart_of_accounts', ['tenant_id'])
    op.create_index('ix_chart_of_accounts_parent_id', 'chart_of_accounts', ['parent_id'])
    op.create_index('ix_chart_of_accounts_account_code', 'chart_of_accounts', ['account_code'])

    op.create_table(
        'journal_entries',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('tenant_id', sa.String(), nullable=False),
        sa.Column('account_id', sa.Integer(), sa.ForeignKey('chart_of_accounts.id'), nullable=False),
        sa.Column('date', sa.Date(), nullable=False),
        sa.Column('debit', sa.Numeric(14, 2), sa.CheckConstraint('debit >= 0'), nullable=False),
        sa.Column('credit', sa.Numeric(14, 2), sa.CheckConstraint('credit >= 0'), nullable=False),
        sa.Column('description', sa.String(), nullable=True),
        sa.Column('ref_type', sa.String(length=30), nullable=False),
        sa.Column('ref_id', sa.String(length=64), nullable=False),
        *_timestamps(),
        sa.CheckConstraint(
            '(debit > 0 AND credit = 0) OR (debit = 0 AND credit > 0)',
            name='check_debit_or_credit_exclusive'
        ),
    )
    op.create_index('ix_journal_entries_id', 'journal_entries', ['id'])
    op.create_index('ix_journal_entries_tenant_id', 'journal_entries', ['tenant_id'])
    op.create_index('ix_journal_entries_account_id', 'journal_entries', ['account_id'])
    op.create_index('ix_journal_entries_reference', 'journal_entries', ['tenant_id', 'ref_type', 'ref_id'])

    for prefix in ('expense', 'income'):
        op.create_table(
            f'{prefix}_categories',
            sa.Column('id', sa.Integer(), primary_key=True),
            sa.Column('tenant_id', sa.String(), nullable=False),
            sa.Column('name', sa.String(length=100), nullable=False),
            sa.Column('description', sa.Text(), nullable=True),
            sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
            *_timestamps(),
            sa.UniqueConstraint('tenant_id', 'name', name=f'_tenant_{prefix}_category_uc'),
        )
        op.create_index(f'ix_{prefix}_categories_id', f'{prefix}_categories', ['id'])
        op.create_index(f'ix_{prefix}_categories_tenant_id', f'{prefix}_categories', ['tenant_id'])

    for table, category_table, extra in (
        ('expenses', 'expense_categories', [sa.Column('status', expense_status, nullable=False)]),
        ('incomes', 'income_categories', []),
    ):
        op.create_table(
            table,
            sa.Column('id', sa.Integer(), primary_key=True),
            sa.Column('tenant_id', sa.String(), nullable=False),
            sa.Column('category_id', sa.Integer(), sa.ForeignKey(f'{category_table}.id'), nullable=False),
            sa.Column('account_id', sa.Integer(), sa.ForeignKey('chart_of_accounts.id'), nullable=False),
            sa.Column('date', sa.Date(), nullable=False),
            sa.Column('amount', sa.Numeric(14, 2), nullable=False),
            sa.Column('reference', sa.String(length=100), nullable=True),
            sa.Column('description', sa.Text(), nullable=True),
            sa.Column('attachment', sa.String(length=500), nullable=True),
            *extra,
            *_timestamps(),
        )
        op.create_index(f'ix_{table}_id', table, ['id'])
        op.create_index(f'ix_{table}_tenant_id', table, ['tenant_id'])

    op.create_table(
        'audit_log',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('tenant_id', sa.String(), nullable=False),
        sa.Column('table_name', sa.String(), nullable=False),
        sa.Column('record_id', sa.Integer(), nullable=False),
        sa.Column('changed_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('changed_by', sa.String(), nullable=True),
        sa.Column('action', sa.String(), nullable=False),
        sa.Column('old_values', sa.JSON(), nullable=True),
        sa.Column('new_values', sa.JSON(), nullable=True),
    )
    op.create_index('ix_audit_log_id', 'audit_log', ['id'])
    op.create_index('ix_audit_log_tenant_id', 'audit_log', ['tenant_id'])


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_table('audit_log')
    op.drop_table('incomes')
    op.drop_table('expenses')
    op.drop_table('income_categories')
    op.drop_table('expense_categories')
    op.drop_table('journal_entries')
    op.drop_table('chart_of_accounts')
    sa.Enum(name='expensestatus').drop(op.get_bind(), checkfirst=True)
    sa.Enum(name='accounttype').drop(op.get_bind(), checkfirst=True)
