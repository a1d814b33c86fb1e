from sqlalchemy import Column, Integer, String, Date, Numeric, ForeignKey, CheckConstraint, Index, event
from database import Base
from models.audit_mixin import TimestampMixin
from exceptions import ImmutableJournalEntry

class JournalEntry(Base, TimestampMixin):
    __tablename__ = "journal_entries"

    id = Column(Integer, primary_key=True, index=True)
    tenant_id = Column(String, index=True, nullable=False)
    account_id = Column(Integer, ForeignKey("chart_of_accounts.id"), nullable=False, index=True)
    date = Column(Date, nullable=False)
    debit = Column(Numeric(14, 2), CheckConstraint('debit >= 0'), nullable=False, default=0)
    credit = Column(Numeric(14, 2), CheckConstraint('credit >= 0'), nullable=False, default=0)
    description = Column(String, nullable=True)
    ref_type = Column(String(30), nullable=False)  # EXPENSE, INCOME, ...
    ref_id = Column(String(64), nullable=False)

    __table_args__ = (
        CheckConstraint(
            '(debit > 0 AND credit = 0) OR (debit = 0 AND credit > 0)',
            name='check_debit_or_credit_exclusive'
        ),
        Index('ix_journal_entries_reference', 'tenant_id', 'ref_type', 'ref_id'),
    )


@event.listens_for(JournalEntry, "before_update")
def reject_journal_entry_update(mapper, connection, target):
    raise ImmutableJournalEntry(f"Journal entry {target.id} is immutable")
