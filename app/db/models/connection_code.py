from sqlalchemy import Column, Integer, String, ForeignKey, DateTime
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from app.db.base_class import Base

class ConnectionCode(Base):
	__tablename__ = "connection_codes"

	id = Column(Integer, primary_key=True, index=True)
	code = Column(String(16), unique=True, index=True, nullable=False)
	created_by = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
	created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
	expires_at = Column(DateTime(timezone=True), nullable=False)
	used_by = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
	used_at = Column(DateTime(timezone=True), nullable=True)

	creator = relationship("User", back_populates="connection_codes", foreign_keys=[created_by])

	@property
	def used(self) -> bool:
		return self.used_at is not None
