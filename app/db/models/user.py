from sqlalchemy import Column, Integer, String, Boolean, ForeignKey, DateTime
from sqlalchemy.orm import relationship
from app.db.base_class import TimestampMixin, Base

class User(Base, TimestampMixin):
	__tablename__ = "users"

	id = Column(Integer, primary_key=True, index=True)
	email = Column(String, unique=True, index=True, nullable=False)
	name = Column(String, nullable=False)
	avatar_url = Column(String, nullable=True)
	hashed_password = Column(String, nullable=False)
	is_verified = Column(Boolean, default=False, nullable=False)

	bills = relationship("Bill", back_populates="creator", cascade="all, delete-orphan")
	connection_codes = relationship("ConnectionCode", back_populates="creator", foreign_keys="ConnectionCode.created_by", cascade="all, delete-orphan")
	notification_preference = relationship("NotificationPreference", back_populates="user", uselist=False, cascade="all, delete-orphan")


class RevokedToken(Base):
	__tablename__ = "revoked_tokens"

	jti = Column(String(64), primary_key=True)
	user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
	expires_at = Column(DateTime(timezone=True), nullable=False)
