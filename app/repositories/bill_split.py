"""Bill split repository."""

from decimal import Decimal
from typing import Optional
from sqlalchemy.orm import Session

from app.repositories.base import BaseRepository
from app.db.models.bill_split import BillSplit


class BillSplitRepository(BaseRepository[BillSplit]):
	"""Repository for BillSplit entity operations."""

	def __init__(self, db: Session, correlation_id: Optional[str] = None):
		super().__init__(db, BillSplit, correlation_id)

	def get_by_bill(self, bill_id: int) -> Optional[BillSplit]:
		result = self.db.query(self.model).filter(self.model.bill_id == bill_id).first()
		self._log_operation("get_by_bill", bill_id=bill_id, found=result is not None)
		return result

	def upsert(self, bill_id: int, connection_id: int, user_1_percentage: Decimal, user_2_percentage: Decimal) -> BillSplit:
		existing = self.get_by_bill(bill_id)
		fields = {
			"shared_connection_id": connection_id,
			"user_1_percentage": user_1_percentage,
			"user_2_percentage": user_2_percentage,
		}
		if existing:
			return self.update(existing.id, fields)
		return self.create({"bill_id": bill_id, **fields})

	def delete_for_connection(self, connection_id: int) -> int:
		deleted = self.db.query(self.model).filter(
			self.model.shared_connection_id == connection_id
		).delete(synchronize_session=False)
		self._log_operation("delete_for_connection", connection_id=connection_id, deleted=deleted)
		return deleted
