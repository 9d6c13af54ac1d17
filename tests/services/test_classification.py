import pytest

from contractor_books.models.enums import AccountType, Purpose, ReportCategory
from contractor_books.services.classification import (
    classify_line,
    is_bank_code,
    is_cash_account_code,
    is_credit_card_code,
    parse_account_code,
)


class TestCodes:

    @pytest.mark.parametrize("code, expected", [
        ("1000", 1000),
        ("62-013", 62013),
        ("", None),
        (None, None),
        ("abc", None),
    ])
    def test_parse_account_code(self, code, expected):
        assert parse_account_code(code) == expected

    def test_bank_and_card_ranges(self):
        assert is_bank_code("1010")
        assert not is_bank_code("2010")
        assert is_credit_card_code("2999")
        assert is_cash_account_code("2000")
        assert not is_cash_account_code("40000")


class TestClassifyLine:

    def test_balance_sheet_line_has_no_category(self):
        result = classify_line(AccountType.ASSET, "1000", Purpose.BUSINESS, has_job=False)
        assert result.income_category is None
        assert result.expense_category is None

    def test_income_defaults_to_job(self):
        result = classify_line(AccountType.INCOME, "40000", None, has_job=False)
        assert result.income_category == "job"
        assert result.is_business

    def test_rental_income_by_code(self):
        result = classify_line(AccountType.INCOME, "61000", Purpose.BUSINESS, has_job=False)
        assert result.income_category == "rental"

    @pytest.mark.parametrize("code, has_job, expected", [
        ("62014", False, "flip"),
        ("62010", False, "rental"),
        ("50000", True, "job"),
        ("55100", False, "marketing"),
        ("58000", False, "overhead"),
    ])
    def test_expense_by_code_range(self, code, has_job, expected):
        result = classify_line(AccountType.EXPENSE, code, Purpose.BUSINESS, has_job=has_job)
        assert result.expense_category == expected

    def test_flip_range_wins_over_job_link(self):
        result = classify_line(AccountType.EXPENSE, "62013", Purpose.BUSINESS, has_job=True)
        assert result.expense_category == "flip"

    def test_report_category_overrides_code(self):
        result = classify_line(
            AccountType.EXPENSE, "62014", Purpose.BUSINESS,
            has_job=False, report_category=ReportCategory.MARKETING,
        )
        assert result.expense_category == "marketing"

    def test_uncoded_account_uses_report_category(self):
        result = classify_line(
            AccountType.INCOME, None, Purpose.BUSINESS,
            has_job=False, report_category=ReportCategory.RENTAL_INCOME,
        )
        assert result.income_category == "rental"

    def test_personal_expense_is_personal(self):
        result = classify_line(AccountType.EXPENSE, "62014", Purpose.PERSONAL, has_job=True)
        assert result.expense_category == "personal"
        assert result.is_personal
        assert not result.is_business

    def test_mixed_counts_as_business(self):
        result = classify_line(AccountType.EXPENSE, "58000", Purpose.MIXED, has_job=False)
        assert result.is_business
        assert not result.is_personal
