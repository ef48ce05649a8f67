from sqlalchemy import Column, Integer, Boolean, ForeignKey, JSON
from sqlalchemy.orm import relationship
from app.db.base_class import TimestampMixin, Base

class NotificationPreference(Base, TimestampMixin):
	__tablename__ = "notification_preferences"

	id = Column(Integer, primary_key=True, index=True)
	user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, unique=True, index=True)
	days_before_due = Column(JSON, nullable=False, default=lambda: [1])
	notify_on_paid = Column(Boolean, default=True, nullable=False)
	notify_on_overdue = Column(Boolean, default=True, nullable=False)

	user = relationship("User", back_populates="notification_preference")
