from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Any, Dict, Optional

from .mixin import CamelModel


class ActivityType(str, Enum):
	CREATED = "created"
	PAID = "paid"
	UNPAID = "unpaid"
	EDITED = "edited"
	COMMENTED = "commented"
	DELETED = "deleted"


class BillActivityRead(CamelModel):
	id: int
	bill_id: int
	type: ActivityType
	user_id: int
	user_name: Optional[str] = None
	description: str
	metadata: Optional[Dict[str, Any]] = None
	timestamp: datetime

	@classmethod
	def from_row(cls, row) -> "BillActivityRead":
		"""Flatten a bill_activities row; the JSON details column carries the text fields."""
		details = row.details or {}
		return cls(
			id=row.id,
			bill_id=row.bill_id,
			type=row.action,
			user_id=row.user_id,
			user_name=details.get("userName"),
			description=details.get("description", ""),
			metadata=details.get("metadata"),
			timestamp=row.created_at,
		)
