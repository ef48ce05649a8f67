import os
import sys
from datetime import date, timedelta
from decimal import Decimal
from types import SimpleNamespace

# Ensure project root on sys.path
PROJECT_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)

from app.schemas.bill import BillStatus
from app.utils.bills import (
    format_currency,
    format_date,
    get_bill_status,
    get_frequency_label,
    get_status_color,
    is_paid_by_user,
    paid_flag_field,
    split_amount,
)

TODAY = date(2025, 3, 5)


def _bill(due, paid_1=False, paid_2=False, created_by=1, amount=Decimal("100.00")):
    return SimpleNamespace(
        due_date=due,
        paid_by_user_1=paid_1,
        paid_by_user_2=paid_2,
        created_by=created_by,
        amount=amount,
    )


def test_fully_paid_bill_is_paid_even_when_long_overdue():
    bill = _bill(TODAY - timedelta(days=400), paid_1=True, paid_2=True)
    assert get_bill_status(bill, TODAY) == BillStatus.PAID


def test_due_today_counts_as_due():
    bill = _bill(TODAY)
    assert get_bill_status(bill, TODAY) == BillStatus.DUE
    assert format_currency(bill.amount, "$") == "$100.00"


def test_past_due_unpaid_bill_is_due():
    assert get_bill_status(_bill(TODAY - timedelta(days=1), paid_1=True), TODAY) == BillStatus.DUE


def test_future_bill_is_upcoming_unless_both_sides_paid():
    future = TODAY + timedelta(days=3)
    assert get_bill_status(_bill(future), TODAY) == BillStatus.UPCOMING
    assert get_bill_status(_bill(future, paid_2=True), TODAY) == BillStatus.UPCOMING
    assert get_bill_status(_bill(future, True, True), TODAY) == BillStatus.PAID


def test_status_colors_and_unknown_fallback():
    assert get_status_color(BillStatus.PAID) == "#28A745"
    assert get_status_color("due") == "#DC3545"
    assert get_status_color("archived") == "#6C757D"


def test_formatting_helpers():
    assert format_currency(Decimal("12.5"), "$") == "$12.50"
    assert format_currency(0, "€") == "€0.00"
    assert format_date(date(2025, 3, 5)) == "Mar 5, 2025"
    assert get_frequency_label("one-time") == "One-time"
    assert get_frequency_label("monthly") == "Monthly"


def test_paid_flag_belongs_to_creator_side():
    bill = _bill(TODAY, paid_1=True, created_by=7)
    assert paid_flag_field(bill, 7) == "paid_by_user_1"
    assert paid_flag_field(bill, 8) == "paid_by_user_2"
    assert is_paid_by_user(bill, 7) is True
    assert is_paid_by_user(bill, 8) is False


def test_split_amount_shares_sum_to_total():
    first, second = split_amount(Decimal("100.00"), Decimal("33.33"))
    assert first == Decimal("33.33")
    assert first + second == Decimal("100.00")

    first, second = split_amount(Decimal("10.01"), 50)
    assert first + second == Decimal("10.01")
