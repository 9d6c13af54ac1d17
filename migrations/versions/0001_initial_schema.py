"""initial schema

Revision ID: 0001
Revises:
Create Date: 2024-01-15 00:00:00
"""

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

revision = "0001"
down_revision = None
branch_labels = None
depends_on = None

account_type_enum = sa.Enum("ASSET", "LIABILITY", "INCOME", "EXPENSE", name="account_type_enum")
purpose_enum = sa.Enum("BUSINESS", "PERSONAL", "MIXED", name="purpose_enum")
# Second use of the same type; created with the accounts table
line_purpose_enum = postgresql.ENUM(
    "BUSINESS", "PERSONAL", "MIXED", name="purpose_enum", create_type=False
)
report_category_enum = sa.Enum(
    "JOB_INCOME", "RENTAL_INCOME", "JOB_EXPENSE", "RENTAL_EXPENSE",
    "FLIP_EXPENSE", "MARKETING", "OVERHEAD",
    name="report_category_enum",
)
cost_type_enum = sa.Enum("LABOR", "MATERIALS", "SERVICES", "INTEREST", "HOLDING", name="cost_type_enum")
job_status_enum = sa.Enum("OPEN", "CLOSED", name="job_status_enum")
deal_type_enum = sa.Enum("FLIP", "RENTAL", name="deal_type_enum")
deal_status_enum = sa.Enum("ACTIVE", "SOLD", "CLOSED", name="deal_status_enum")


def upgrade() -> None:
    op.create_table(
        "accounts",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("code", sa.String(20), nullable=True, unique=True),
        sa.Column("account_type", account_type_enum, nullable=False),
        sa.Column("default_purpose", purpose_enum, nullable=True),
        sa.Column("report_category", report_category_enum, nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
    )

    op.create_table(
        "lead_sources",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("nick_name", sa.String(50), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False),
    )
    op.create_table(
        "vendors",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False),
    )
    op.create_table(
        "installers",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("first_name", sa.String(100), nullable=False),
        sa.Column("last_name", sa.String(100), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False),
    )
    op.create_table(
        "jobs",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("name", sa.String(150), nullable=False),
        sa.Column("address", sa.String(255), nullable=True),
        sa.Column("status", job_status_enum, nullable=False),
        sa.Column("start_date", sa.Date(), nullable=True),
        sa.Column("end_date", sa.Date(), nullable=True),
        sa.Column("lead_source_id", sa.Integer(), sa.ForeignKey("lead_sources.id"), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
    )

    op.create_table(
        "real_estate_deals",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("nickname", sa.String(100), nullable=False),
        sa.Column("address", sa.String(255), nullable=True),
        sa.Column("deal_type", deal_type_enum, nullable=False),
        sa.Column("status", deal_status_enum, nullable=False),
        sa.Column("asset_account_id", sa.Integer(), sa.ForeignKey("accounts.id"), nullable=True),
        sa.Column("loan_account_id", sa.Integer(), sa.ForeignKey("accounts.id"), nullable=True),
        sa.Column("purchase_price", sa.Numeric(14, 2), nullable=True),
        sa.Column("arv", sa.Numeric(14, 2), nullable=True),
        sa.Column("original_loan_amount", sa.Numeric(14, 2), nullable=True),
        sa.Column("interest_rate", sa.Numeric(6, 3), nullable=True),
        sa.Column("loan_term_months", sa.Integer(), nullable=True),
        sa.Column("monthly_taxes", sa.Numeric(14, 2), nullable=True),
        sa.Column("monthly_insurance", sa.Numeric(14, 2), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
    )
    op.create_table(
        "rehab_categories",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("code", sa.String(10), nullable=False, unique=True),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("category_group", sa.String(50), nullable=True),
    )

    op.create_table(
        "transactions",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("date", sa.Date(), nullable=False),
        sa.Column("description", sa.String(255), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
    )
    op.create_index("ix_transactions_date", "transactions", ["date"])

    op.create_table(
        "transaction_lines",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column(
            "transaction_id", sa.Integer(),
            sa.ForeignKey("transactions.id", ondelete="CASCADE"), nullable=False,
        ),
        sa.Column("account_id", sa.Integer(), sa.ForeignKey("accounts.id"), nullable=False),
        sa.Column("amount", sa.Numeric(14, 2), nullable=False),
        sa.Column("is_cleared", sa.Boolean(), nullable=False),
        sa.Column("cleared_date", sa.Date(), nullable=True),
        sa.Column("purpose", line_purpose_enum, nullable=False),
        sa.Column("job_id", sa.Integer(), sa.ForeignKey("jobs.id"), nullable=True),
        sa.Column("vendor_id", sa.Integer(), sa.ForeignKey("vendors.id"), nullable=True),
        sa.Column("installer_id", sa.Integer(), sa.ForeignKey("installers.id"), nullable=True),
        sa.Column(
            "real_estate_deal_id", sa.Integer(),
            sa.ForeignKey("real_estate_deals.id"), nullable=True,
        ),
        sa.Column(
            "rehab_category_id", sa.Integer(),
            sa.ForeignKey("rehab_categories.id"), nullable=True,
        ),
        sa.Column("cost_type", cost_type_enum, nullable=True),
        sa.Column("cc_settled", sa.Boolean(), nullable=False),
    )
    op.create_index("ix_transaction_lines_transaction_id", "transaction_lines", ["transaction_id"])
    op.create_index("ix_transaction_lines_account_id", "transaction_lines", ["account_id"])
    op.create_index("ix_transaction_lines_job_id", "transaction_lines", ["job_id"])
    op.create_index(
        "ix_transaction_lines_real_estate_deal_id", "transaction_lines", ["real_estate_deal_id"]
    )

    op.create_table(
        "closed_periods",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("year_month", sa.String(7), nullable=False),
        sa.Column("closed_at", sa.DateTime(), nullable=False),
        sa.Column("closed_by", sa.String(100), nullable=True),
        sa.Column("notes", sa.Text(), nullable=True),
    )
    op.create_index("ix_closed_periods_year_month", "closed_periods", ["year_month"], unique=True)

    op.create_table(
        "audit_log",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("event_type", sa.String(100), nullable=False),
        sa.Column("details", sa.Text(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
    )

    op.create_table(
        "bank_links",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("institution_name", sa.String(100), nullable=True),
        sa.Column("access_token", sa.String(255), nullable=False),
        sa.Column("cursor", sa.String(500), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
    )
    op.create_table(
        "imported_bank_transactions",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("bank_link_id", sa.Integer(), sa.ForeignKey("bank_links.id"), nullable=False),
        sa.Column("external_id", sa.String(100), nullable=False, unique=True),
        sa.Column("external_account_id", sa.String(100), nullable=True),
        sa.Column("date", sa.Date(), nullable=False),
        sa.Column("amount", sa.Numeric(14, 2), nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("merchant_name", sa.String(255), nullable=True),
        sa.Column("category", sa.String(255), nullable=True),
        sa.Column("pending", sa.Boolean(), nullable=False),
        sa.Column(
            "transaction_id", sa.Integer(),
            sa.ForeignKey("transactions.id", ondelete="SET NULL"), nullable=True,
        ),
        sa.Column("created_at", sa.DateTime(), nullable=False),
    )
    op.create_index(
        "ix_imported_bank_transactions_bank_link_id",
        "imported_bank_transactions", ["bank_link_id"],
    )


def downgrade() -> None:
    op.drop_table("imported_bank_transactions")
    op.drop_table("bank_links")
    op.drop_table("audit_log")
    op.drop_table("closed_periods")
    op.drop_table("transaction_lines")
    op.drop_table("transactions")
    op.drop_table("rehab_categories")
    op.drop_table("real_estate_deals")
    op.drop_table("jobs")
    op.drop_table("installers")
    op.drop_table("vendors")
    op.drop_table("lead_sources")
    op.drop_table("accounts")
    for enum in (
        deal_status_enum, deal_type_enum, job_status_enum, cost_type_enum,
        report_category_enum, purpose_enum, account_type_enum,
    ):
        enum.drop(op.get_bind(), checkfirst=True)
