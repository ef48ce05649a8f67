"""Notification preference repository (one row per user)."""

from typing import Optional, List
from sqlalchemy.orm import Session

from app.repositories.base import BaseRepository
from app.db.models.notification_preference import NotificationPreference


class NotificationPreferenceRepository(BaseRepository[NotificationPreference]):
	"""Repository for NotificationPreference entity operations."""

	def __init__(self, db: Session, correlation_id: Optional[str] = None):
		super().__init__(db, NotificationPreference, correlation_id)

	def get_by_user(self, user_id: int) -> Optional[NotificationPreference]:
		result = self.db.query(self.model).filter(self.model.user_id == user_id).first()
		self._log_operation("get_by_user", user_id=user_id, found=result is not None)
		return result

	def upsert(self, user_id: int, days_before_due: List[int], notify_on_paid: bool, notify_on_overdue: bool) -> NotificationPreference:
		fields = {
			"days_before_due": list(days_before_due),
			"notify_on_paid": notify_on_paid,
			"notify_on_overdue": notify_on_overdue,
		}
		existing = self.get_by_user(user_id)
		if existing:
			return self.update(existing.id, fields)
		return self.create({"user_id": user_id, **fields})
