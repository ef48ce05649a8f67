from sqlalchemy import Column, Integer, String, Boolean, ForeignKey
from app.db.base_class import TimestampMixin, Base

class SharedConnection(Base, TimestampMixin):
	__tablename__ = "shared_connections"

	id = Column(Integer, primary_key=True, index=True)
	user_id_1 = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, unique=True, index=True)
	user_id_2 = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, unique=True, index=True)
	user_1_accepted = Column(Boolean, default=False, nullable=False)
	user_2_accepted = Column(Boolean, default=False, nullable=False)
	status = Column(String(16), nullable=False, default="pending", index=True)  # pending, active

	@property
	def is_active(self) -> bool:
		return bool(self.user_1_accepted and self.user_2_accepted)

	def partner_of(self, user_id: int) -> int:
		return self.user_id_2 if self.user_id_1 == user_id else self.user_id_1
