"""
Shared enumerations for database models.

Python enums mapped to database enums ensure that only valid
values can be stored.
"""

import enum


class AccountType(str, enum.Enum):
    """Balance-sheet accounts hold the cash side, P&L accounts the category side."""
    ASSET = "asset"
    LIABILITY = "liability"
    INCOME = "income"
    EXPENSE = "expense"


class Purpose(str, enum.Enum):
    BUSINESS = "business"
    PERSONAL = "personal"
    MIXED = "mixed"


class ReportCategory(str, enum.Enum):
    """Explicit reporting bucket assigned when an account is created."""
    JOB_INCOME = "job_income"
    RENTAL_INCOME = "rental_income"
    JOB_EXPENSE = "job_expense"
    RENTAL_EXPENSE = "rental_expense"
    FLIP_EXPENSE = "flip_expense"
    MARKETING = "marketing"
    OVERHEAD = "overhead"


class CostType(str, enum.Enum):
    """Flip cost type: labor, materials, services, interest, holding."""
    LABOR = "L"
    MATERIALS = "M"
    SERVICES = "S"
    INTEREST = "I"
    HOLDING = "H"


class JobStatus(str, enum.Enum):
    OPEN = "open"
    CLOSED = "closed"


class DealType(str, enum.Enum):
    FLIP = "flip"
    RENTAL = "rental"


class DealStatus(str, enum.Enum):
    ACTIVE = "active"
    SOLD = "sold"
    CLOSED = "closed"


class EntryKind(str, enum.Enum):
    """Kind of a simple two-sided entry."""
    INCOME = "income"
    EXPENSE = "expense"
    TRANSFER = "transfer"


class ExpenseKind(str, enum.Enum):
    """Job expense kind; decides whether a vendor or installer is required."""
    MATERIAL = "material"
    LABOR = "labor"
    OTHER = "other"


class FlipEventType(str, enum.Enum):
    """Lifecycle events of a flip deal."""
    ACQUISITION = "acquisition"
    REHAB_LABOR = "rehab_labor"
    REHAB_MATERIAL = "rehab_material"
    REHAB_SERVICE = "rehab_service"
    LOAN_DRAW = "loan_draw"
    HOLDING = "holding"
    INTEREST = "interest"
    REFUND = "refund"
    SALE = "sale"
