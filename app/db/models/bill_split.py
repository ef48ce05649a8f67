from sqlalchemy import Column, Integer, ForeignKey, Numeric
from sqlalchemy.orm import relationship
from app.db.base_class import TimestampMixin, Base

class BillSplit(Base, TimestampMixin):
	__tablename__ = "bill_splits"

	id = Column(Integer, primary_key=True, index=True)
	bill_id = Column(Integer, ForeignKey("bills.id", ondelete="CASCADE"), nullable=False, unique=True, index=True)
	shared_connection_id = Column(Integer, ForeignKey("shared_connections.id", ondelete="CASCADE"), nullable=False, index=True)
	user_1_percentage = Column(Numeric(5, 2), nullable=False)
	user_2_percentage = Column(Numeric(5, 2), nullable=False)

	bill = relationship("Bill", back_populates="split")
