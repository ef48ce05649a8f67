"""Append-only repository for the bill audit log."""

from typing import Optional, List, Dict, Any, Iterable
from sqlalchemy import or_
from sqlalchemy.orm import Session

from app.repositories.base import BaseRepository
from app.db.models.bill_activity import BillActivity


class BillActivityRepository(BaseRepository[BillActivity]):
	"""Repository for BillActivity entries. Entries are never updated or deleted."""

	def __init__(self, db: Session, correlation_id: Optional[str] = None):
		super().__init__(db, BillActivity, correlation_id)

	def add(
		self,
		bill_id: int,
		user_id: int,
		action: str,
		description: str,
		user_name: Optional[str] = None,
		metadata: Optional[Dict[str, Any]] = None,
	) -> BillActivity:
		return self.create({
			"bill_id": bill_id,
			"user_id": user_id,
			"action": action,
			"details": {
				"description": description,
				"userName": user_name,
				"metadata": metadata,
			},
		})

	def list_for_bill(self, bill_id: int, limit: int = 100) -> List[BillActivity]:
		return self.get_multi(limit=limit, filters={"bill_id": bill_id}, order_by="created_at")

	def list_for_participants(self, user_ids: Iterable[int], bill_ids: Iterable[int], limit: int = 100) -> List[BillActivity]:
		"""Entries by any participant or about any visible bill, newest first."""
		user_ids, bill_ids = list(user_ids), list(bill_ids)
		clauses = [self.model.user_id.in_(user_ids)]
		if bill_ids:
			clauses.append(self.model.bill_id.in_(bill_ids))
		results = self.db.query(self.model).filter(or_(*clauses)).order_by(
			self.model.created_at.desc(), self.model.id.desc()
		).limit(limit).all()
		self._log_operation("list_for_participants", user_ids=user_ids, count=len(results))
		return results
