"""Domain error types.

Every error derives from ValueError so API routes can keep a single
``except ValueError`` fallback while still mapping not-found cases to 404.
"""


class DomainError(ValueError):
    """Base class for bookkeeping errors."""


class ValidationError(DomainError):
    """Invalid input, rejected before anything is written."""


class NotFoundError(DomainError):
    """Requested row does not exist."""


class UnbalancedTransactionError(ValidationError):
    """Line amounts of a transaction do not sum to zero."""


class PeriodClosedError(DomainError):
    """Transaction date falls in a closed accounting period."""


class SettlementError(ValidationError):
    """Credit-card settlement selection is not settleable."""


class BankSyncError(DomainError):
    """Bank data aggregator returned an error."""


def account_not_found(account_id: int) -> str:
    return f"Account {account_id} not found"


def transaction_not_found(transaction_id: int) -> str:
    return f"Transaction {transaction_id} not found"


def deal_not_found(deal_id: int) -> str:
    return f"Real estate deal {deal_id} not found"
