from sqlalchemy import Column, Integer, String, Boolean, ForeignKey, Date, Numeric, Text
from sqlalchemy.orm import relationship
from app.db.base_class import TimestampMixin, Base

class Bill(Base, TimestampMixin):
	__tablename__ = "bills"

	id = Column(Integer, primary_key=True, index=True)
	created_by = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
	shared_connection_id = Column(Integer, ForeignKey("shared_connections.id", ondelete="SET NULL"), nullable=True, index=True)
	name = Column(String(100), nullable=False)
	amount = Column(Numeric(12, 2), nullable=False)
	due_date = Column(Date, nullable=False, index=True)
	frequency = Column(String(16), nullable=False, default="one-time")
	notes = Column(Text, nullable=True)
	# Flag 1 belongs to the creator's side, flag 2 to the counterpart's
	paid_by_user_1 = Column(Boolean, default=False, nullable=False)
	paid_by_user_2 = Column(Boolean, default=False, nullable=False)

	creator = relationship("User", back_populates="bills")
	split = relationship("BillSplit", back_populates="bill", uselist=False, cascade="all, delete-orphan")
