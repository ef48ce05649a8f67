from typing import List

from pydantic import Field, field_validator

from .mixin import CamelModel


class NotificationPreferenceBase(CamelModel):
	days_before_due: List[int] = Field(default_factory=lambda: [1])
	notify_on_paid: bool = True
	notify_on_overdue: bool = True

	@field_validator('days_before_due')
	@classmethod
	def normalize_offsets(cls, v: List[int]) -> List[int]:
		if any(day < 0 for day in v):
			raise ValueError("Reminder offsets must be zero or positive")
		return sorted(set(v))


class NotificationPreferenceUpdate(NotificationPreferenceBase):
	pass


class NotificationPreferenceRead(NotificationPreferenceBase):
	user_id: int
