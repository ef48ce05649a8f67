from sqlalchemy import Column, Integer, String, DateTime, JSON
from sqlalchemy.sql import func
from app.db.base_class import Base


class BillActivity(Base):
	__tablename__ = "bill_activities"

	id = Column(Integer, primary_key=True, index=True)
	# No foreign key: entries outlive the bill they describe
	bill_id = Column(Integer, nullable=False, index=True)
	user_id = Column(Integer, nullable=False, index=True)
	action = Column(String(16), nullable=False)  # created, paid, unpaid, edited, commented, deleted
	details = Column(JSON, nullable=False, default=dict)
	created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False, index=True)
