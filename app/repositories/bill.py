"""Bill repository for bill-related database operations."""

from typing import Optional, List, Iterable
from sqlalchemy import or_, update
from sqlalchemy.orm import Session

from app.repositories.base import BaseRepository
from app.db.models.bill import Bill
from app.schemas.bill import BillCreate


class BillRepository(BaseRepository[Bill]):
    """Repository for Bill entity operations."""
    
    def __init__(self, db: Session, correlation_id: Optional[str] = None):
        super().__init__(db, Bill, correlation_id)

    def _visible_filter(self, owner_ids: Iterable[int], connection_id: Optional[int]):
        clauses = [self.model.created_by.in_(list(owner_ids))]
        if connection_id is not None:
            clauses.append(self.model.shared_connection_id == connection_id)
        return or_(*clauses)
    
    def get_visible(self, owner_ids: Iterable[int], connection_id: Optional[int] = None) -> List[Bill]:
        """Get bills created by any of the owners or attached to the connection.
        
        Args:
            owner_ids: Caller ID, plus the partner ID when the connection is active
            connection_id: Active connection ID, if any
            
        Returns:
            Bills ordered by due date, then ID
        """
        owner_ids = list(owner_ids)
        results = self.db.query(self.model).filter(
            self._visible_filter(owner_ids, connection_id)
        ).order_by(self.model.due_date, self.model.id).all()
        
        self._log_operation("get_visible", owner_ids=owner_ids, connection_id=connection_id, count=len(results))
        return results
    
    def get_visible_by_id(self, bill_id: int, owner_ids: Iterable[int], connection_id: Optional[int] = None) -> Optional[Bill]:
        """Get a single bill if the caller is allowed to see it.
        
        Args:
            bill_id: Bill ID
            owner_ids: Caller ID, plus the partner ID when the connection is active
            connection_id: Active connection ID, if any
            
        Returns:
            Bill instance or None if not found or not visible
        """
        owner_ids = list(owner_ids)
        result = self.db.query(self.model).filter(
            self.model.id == bill_id,
            self._visible_filter(owner_ids, connection_id)
        ).first()
        
        self._log_operation("get_visible_by_id", bill_id=bill_id, owner_ids=owner_ids, found=result is not None)
        return result
    
    def create_bill(self, bill_in: BillCreate, user_id: int, connection_id: Optional[int] = None) -> Bill:
        """Create a new bill with both paid-flags cleared.
        
        Args:
            bill_in: Validated bill fields
            user_id: Creator user ID
            connection_id: Active connection to attach the bill to
            
        Returns:
            Created Bill instance
        """
        create_data = {
            "name": bill_in.name,
            "amount": bill_in.amount,
            "due_date": bill_in.due_date,
            "frequency": bill_in.frequency.value,
            "notes": bill_in.notes,
            "created_by": user_id,
            "shared_connection_id": connection_id,
            "paid_by_user_1": False,
            "paid_by_user_2": False,
        }
        return self.create(create_data)

    def detach_connection(self, connection_id: int) -> int:
        """Clear the connection link on every bill attached to it."""
        stmt = (
            update(self.model)
            .where(self.model.shared_connection_id == connection_id)
            .values(shared_connection_id=None)
            .execution_options(synchronize_session=False)
        )
        updated = self.db.execute(stmt).rowcount
        self.db.expire_all()
        self._log_operation("detach_connection", connection_id=connection_id, updated=updated)
        return updated
