from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import Field, field_validator

from .mixin import CamelModel, TimestampModel


class ConnectionStatus(str, Enum):
	PENDING = "pending"
	ACTIVE = "active"


class CodeValidity(str, Enum):
	VALID = "valid"
	NOT_FOUND = "not_found"
	EXPIRED = "expired"
	ALREADY_USED = "already_used"


class ConnectionCodeRead(CamelModel):
	code: str
	created_by: int
	created_at: datetime
	expires_at: datetime
	used: bool = False
	used_by: Optional[int] = None
	used_at: Optional[datetime] = None


class CodeValidationResult(CamelModel):
	"""Tagged outcome of looking up a code."""
	status: CodeValidity
	code: Optional[ConnectionCodeRead] = None

	@property
	def is_valid(self) -> bool:
		return self.status == CodeValidity.VALID


class JoinConnectionInput(CamelModel):
	code: str = Field(..., min_length=1, max_length=16)

	@field_validator('code')
	@classmethod
	def normalize_code(cls, v: str) -> str:
		cleaned = v.strip().upper()
		if not cleaned:
			raise ValueError("Code cannot be empty")
		return cleaned


class SharedConnectionRead(TimestampModel):
	id: int
	user_id_1: int
	user_id_2: int
	user_1_accepted: bool
	user_2_accepted: bool
	status: ConnectionStatus
	partner_name: Optional[str] = None
