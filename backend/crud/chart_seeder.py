import logging
from typing import Dict, NamedTuple, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from crud.chart_of_accounts import build_account, get_account_by_code
from models.chart_of_accounts import AccountType
from schemas.chart_of_accounts import ChartOfAccountsCreate, SeedResult

logger = logging.getLogger(__name__)


class AccountTemplate(NamedTuple):
    code: str
    name: str
    account_type: AccountType
    sub_type: Optional[str] = None
    parent_code: Optional[str] = None


DEFAULT_ACCOUNT_TEMPLATE = (
    # Assets
    AccountTemplate("1000", "Assets", AccountType.ASSET),
    AccountTemplate("1100", "Cash", AccountType.ASSET, "CASH", "1000"),
    AccountTemplate("1200", "Bank", AccountType.ASSET, "BANK", "1000"),
    AccountTemplate("1300", "Accounts Receivable", AccountType.ASSET, "RECEIVABLE", "1000"),
    AccountTemplate("1400", "Inventory", AccountType.ASSET, "INVENTORY", "1000"),

    # Liabilities
    AccountTemplate("2000", "Liabilities", AccountType.LIABILITY),
    AccountTemplate("2100", "Accounts Payable", AccountType.LIABILITY, "PAYABLE", "2000"),
    AccountTemplate("2200", "Tax Payable", AccountType.LIABILITY, "TAX", "2000"),

    # Equity
    AccountTemplate("3000", "Equity", AccountType.EQUITY),
    AccountTemplate("3100", "Capital", AccountType.EQUITY, "CAPITAL", "3000"),
    AccountTemplate("3200", "Retained Earnings", AccountType.EQUITY, "RETAINED", "3000"),

    # Income
    AccountTemplate("4000", "Income", AccountType.INCOME),
    AccountTemplate("4100", "Sales Revenue", AccountType.INCOME, "SALES", "4000"),
    AccountTemplate("4200", "Other Income", AccountType.INCOME, "OTHER", "4000"),

    # Expenses
    AccountTemplate("5000", "Expenses", AccountType.EXPENSE),
    AccountTemplate("5100", "Cost of Goods Sold", AccountType.EXPENSE, "COGS", "5000"),
    AccountTemplate("5200", "Operating Expenses", AccountType.EXPENSE, "OPERATING", "5000"),
    AccountTemplate("5300", "Salary Expenses", AccountType.EXPENSE, "SALARY", "5000"),
)


def _seed(db: Session, tenant_id: str, user_id: Optional[str]) -> SeedResult:
    created = 0
    existing = 0
    parent_ids: Dict[str, int] = {}

    # Parent accounts first
    for template in DEFAULT_ACCOUNT_TEMPLATE:
        if template.parent_code:
            continue
        account = get_account_by_code(db, template.code, tenant_id)
        if account:
            existing += 1
        else:
            account = build_account(db, ChartOfAccountsCreate(
                account_code=template.code,
                account_name=template.name,
                account_type=template.account_type,
                sub_type=template.sub_type,
            ), tenant_id, user_id, is_system=True)
            created += 1
        parent_ids[template.code] = account.id

    for template in DEFAULT_ACCOUNT_TEMPLATE:
        if not template.parent_code:
            continue
        if get_account_by_code(db, template.code, tenant_id):
            existing += 1
            continue
        build_account(db, ChartOfAccountsCreate(
            account_code=template.code,
            account_name=template.name,
            account_type=template.account_type,
            sub_type=template.sub_type,
            parent_id=parent_ids[template.parent_code],
        ), tenant_id, user_id, is_system=True)
        created += 1

    return SeedResult(created=created, existing=existing)


def seed_default_accounts(db: Session, tenant_id: str, user_id: Optional[str] = None) -> SeedResult:
    """Materialize the default chart for a tenant. Safe to call repeatedly."""
    # A second pass only happens when a concurrent seed inserted the same codes first.
    for attempt in range(2):
        try:
            result = _seed(db, tenant_id, user_id)
            db.commit()
            break
        except IntegrityError:
            db.rollback()
            if attempt == 1:
                raise
            logger.warning(f"Concurrent seeding detected for tenant {tenant_id}, retrying")
        except Exception:
            db.rollback()
            raise

    logger.info(f"Seeded default accounts for tenant {tenant_id}: {result.created} created, {result.existing} existing")
    return result
