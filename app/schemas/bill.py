from __future__ import annotations

import datetime as dt
from decimal import Decimal
from enum import Enum
from typing import Optional, List

from pydantic import Field, field_validator

from .mixin import CamelModel, TimestampModel


class BillFrequency(str, Enum):
	ONE_TIME = "one-time"
	WEEKLY = "weekly"
	MONTHLY = "monthly"


class BillStatus(str, Enum):
	DUE = "due"
	UPCOMING = "upcoming"
	PAID = "paid"


def _clean_name(v: str) -> str:
	if not v or not v.strip():
		raise ValueError("Bill name cannot be empty")
	return " ".join(v.split())


class BillCreate(CamelModel):
	name: str = Field(..., min_length=1, max_length=100)
	amount: Decimal = Field(..., ge=0, max_digits=12, decimal_places=2)
	due_date: dt.date
	frequency: BillFrequency = BillFrequency.ONE_TIME
	notes: Optional[str] = None

	@field_validator('name')
	@classmethod
	def validate_name(cls, v: str) -> str:
		return _clean_name(v)

	@field_validator('notes')
	@classmethod
	def blank_notes_to_none(cls, v: Optional[str]) -> Optional[str]:
		if v is None or not v.strip():
			return None
		return v.strip()


class BillUpdate(CamelModel):
	"""Partial update; unset fields are left alone."""
	name: Optional[str] = Field(default=None, min_length=1, max_length=100)
	amount: Optional[Decimal] = Field(default=None, ge=0, max_digits=12, decimal_places=2)
	due_date: Optional[dt.date] = None
	frequency: Optional[BillFrequency] = None
	notes: Optional[str] = None
	paid_by_user_1: Optional[bool] = None
	paid_by_user_2: Optional[bool] = None

	@field_validator('name')
	@classmethod
	def validate_name(cls, v: Optional[str]) -> Optional[str]:
		return None if v is None else _clean_name(v)


class BillRead(TimestampModel):
	id: int
	name: str
	amount: Decimal
	due_date: dt.date
	frequency: BillFrequency
	notes: Optional[str] = None
	created_by: int
	shared_connection_id: Optional[int] = None
	paid_by_user_1: bool
	paid_by_user_2: bool


class BillView(BillRead):
	"""A bill as seen by one user, with derived display fields."""
	status: BillStatus
	status_color: str
	is_shared: bool
	is_paid_by_current_user: bool
	formatted_amount: str
	formatted_due_date: str
	frequency_label: str


class BillCommentCreate(CamelModel):
	text: str = Field(..., min_length=1, max_length=1000)


class BillSplitUpdate(CamelModel):
	user_1_percentage: Decimal = Field(..., ge=0, le=100, decimal_places=2)
	user_2_percentage: Decimal = Field(..., ge=0, le=100, decimal_places=2)


class BillSplitRead(CamelModel):
	bill_id: int
	shared_connection_id: int
	user_1_percentage: Decimal
	user_2_percentage: Decimal
	share_amounts: List[Decimal] = Field(default_factory=list)
