"""Pure helpers for bill display status, formatting and per-user attribution."""

from datetime import date, datetime, timezone
from decimal import Decimal, ROUND_HALF_UP
from typing import Optional, Tuple

from app.core.config import settings
from app.schemas.bill import BillStatus

CENTS = Decimal("0.01")

STATUS_COLORS = {
	BillStatus.DUE: "#DC3545",
	BillStatus.UPCOMING: "#FFC107",
	BillStatus.PAID: "#28A745",
}
UNKNOWN_STATUS_COLOR = "#6C757D"

FREQUENCY_LABELS = {
	"one-time": "One-time",
	"weekly": "Weekly",
	"monthly": "Monthly",
}


def utcnow() -> datetime:
	return datetime.now(timezone.utc)


def ensure_utc(value: datetime) -> datetime:
	"""SQLite hands back naive datetimes; every stored timestamp is UTC."""
	if value.tzinfo is None:
		return value.replace(tzinfo=timezone.utc)
	return value


def _as_date(value) -> date:
	if isinstance(value, datetime):
		return value.date()
	if isinstance(value, str):
		return datetime.fromisoformat(value).date()
	return value


def is_fully_paid(paid_by_user_1: bool, paid_by_user_2: bool) -> bool:
	return bool(paid_by_user_1) and bool(paid_by_user_2)


def get_bill_status(bill, today: Optional[date] = None) -> BillStatus:
	"""Paid when both sides paid, due when the due date is today or earlier, else upcoming."""
	if is_fully_paid(bill.paid_by_user_1, bill.paid_by_user_2):
		return BillStatus.PAID
	today = today or date.today()
	if _as_date(bill.due_date) <= today:
		return BillStatus.DUE
	return BillStatus.UPCOMING


def get_status_color(status) -> str:
	try:
		return STATUS_COLORS[BillStatus(status)]
	except ValueError:
		return UNKNOWN_STATUS_COLOR


def format_currency(amount, symbol: Optional[str] = None) -> str:
	value = Decimal(str(amount)).quantize(CENTS, rounding=ROUND_HALF_UP)
	return f"{symbol if symbol is not None else settings.CURRENCY_SYMBOL}{value}"


def format_date(value) -> str:
	"""'Mar 5, 2025' style label."""
	d = _as_date(value)
	return f"{d.strftime('%b')} {d.day}, {d.year}"


def get_frequency_label(frequency) -> str:
	key = getattr(frequency, "value", frequency)
	return FREQUENCY_LABELS.get(key, key)


def paid_flag_field(bill, user_id: int) -> str:
	"""Column holding this user's paid-flag: the creator owns flag 1, the counterpart flag 2."""
	return "paid_by_user_1" if bill.created_by == user_id else "paid_by_user_2"


def is_paid_by_user(bill, user_id: int) -> bool:
	return bool(getattr(bill, paid_flag_field(bill, user_id)))


def split_amount(amount, user_1_percentage) -> Tuple[Decimal, Decimal]:
	"""Each side's share; the rounding remainder goes to side 2 so the shares sum to the amount."""
	total = Decimal(str(amount)).quantize(CENTS, rounding=ROUND_HALF_UP)
	first = (total * Decimal(str(user_1_percentage)) / Decimal(100)).quantize(CENTS, rounding=ROUND_HALF_UP)
	return first, total - first
