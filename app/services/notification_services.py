from typing import Optional

from sqlalchemy.orm import Session

from app.services.base import BaseService
from app.schemas.notification import NotificationPreferenceRead, NotificationPreferenceUpdate


class NotificationService(BaseService):
    """Reminder preferences; one record per user with upsert semantics."""

    def __init__(self, preference_repo, correlation_id: Optional[str] = None):
        super().__init__(correlation_id)
        self._set_repositories(preference_repo=preference_repo)

    def get_preferences(self, user_id: int) -> NotificationPreferenceRead:
        """Stored preferences, or the defaults when the user never saved any."""
        record = self.preference_repo.get_by_user(user_id)
        if record is None:
            return NotificationPreferenceRead(user_id=user_id)
        return NotificationPreferenceRead.model_validate(record)

    def save_preferences(self, user_id: int, prefs: NotificationPreferenceUpdate, db: Session) -> NotificationPreferenceRead:
        def op():
            return self.preference_repo.upsert(
                user_id,
                days_before_due=prefs.days_before_due,
                notify_on_paid=prefs.notify_on_paid,
                notify_on_overdue=prefs.notify_on_overdue,
            )
        record = self.run_in_transaction(db, op)
        self.log_operation("save_preferences", user_id=user_id, offsets=prefs.days_before_due)
        return NotificationPreferenceRead.model_validate(record)
