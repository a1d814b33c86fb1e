"""
Typed failures raised by the ledger engine.

Every error carries a stable `code` and the HTTP status the API layer maps it
to. Only PostingIntegrityFailure is retryable; the others are deterministic
validation outcomes.
"""


class LedgerError(Exception):
    code = "LEDGER_ERROR"
    status_code = 400
    retryable = False

    def __init__(self, message: str = None):
        super().__init__(message or self.code)
        self.message = message or self.code


class NotFound(LedgerError):
    code = "NOT_FOUND"
    status_code = 404


class DuplicateCode(LedgerError):
    code = "DUPLICATE_CODE"
    status_code = 409


class DuplicateName(LedgerError):
    code = "DUPLICATE_NAME"
    status_code = 409


class CategoryInUse(LedgerError):
    code = "CATEGORY_IN_USE"
    status_code = 409


class SystemAccountProtected(LedgerError):
    code = "SYSTEM_ACCOUNT_PROTECTED"
    status_code = 403


class HasChildren(LedgerError):
    code = "HAS_CHILDREN"
    status_code = 409


class HasTransactions(LedgerError):
    code = "HAS_TRANSACTIONS"
    status_code = 409


class CrossTenantReference(LedgerError):
    code = "CROSS_TENANT_REFERENCE"
    status_code = 400


class InvalidHierarchy(LedgerError):
    code = "INVALID_HIERARCHY"
    status_code = 422


class InvalidDateRange(LedgerError):
    code = "INVALID_DATE_RANGE"
    status_code = 422


class ImmutableJournalEntry(LedgerError):
    code = "IMMUTABLE_JOURNAL_ENTRY"
    status_code = 409


class PostingIntegrityFailure(LedgerError):
    """The balance + journal transaction could not commit. Nothing was applied."""
    code = "POSTING_INTEGRITY_FAILURE"
    status_code = 503
    retryable = True


class InvalidStatementMethod(LedgerError):
    code = "INVALID_STATEMENT_METHOD"
    status_code = 422


class InvalidTransfer(LedgerError):
    code = "INVALID_TRANSFER"
    status_code = 422


class InsufficientBalance(LedgerError):
    code = "INSUFFICIENT_BALANCE"
    status_code = 409
