"""Shared connection repository for the two-user pairing rows."""

from typing import Optional
from sqlalchemy import and_, case, func, or_, true, update
from sqlalchemy.orm import Session

from app.repositories.base import BaseRepository
from app.db.models.shared_connection import SharedConnection


class SharedConnectionRepository(BaseRepository[SharedConnection]):
    """Repository for SharedConnection entity operations."""

    def __init__(self, db: Session, correlation_id: Optional[str] = None):
        super().__init__(db, SharedConnection, correlation_id)

    def _involving(self, user_id: int):
        return or_(self.model.user_id_1 == user_id, self.model.user_id_2 == user_id)

    def get_for_user(self, user_id: int) -> Optional[SharedConnection]:
        """Get the connection the user belongs to on either side, pending or active."""
        result = self.db.query(self.model).filter(self._involving(user_id)).first()
        self._log_operation("get_for_user", user_id=user_id, found=result is not None)
        return result

    def get_active_for_user(self, user_id: int) -> Optional[SharedConnection]:
        result = self.db.query(self.model).filter(
            self._involving(user_id),
            self.model.user_1_accepted == True,
            self.model.user_2_accepted == True
        ).first()
        self._log_operation("get_active_for_user", user_id=user_id, found=result is not None)
        return result

    def create_connection(self, inviter_id: int, accepter_id: int) -> SharedConnection:
        """Create a pending connection; the inviter's side starts accepted."""
        return self.create({
            "user_id_1": inviter_id,
            "user_id_2": accepter_id,
            "user_1_accepted": True,
            "user_2_accepted": False,
            "status": "pending",
        })

    def accept(self, connection_id: int, user_id: int) -> Optional[SharedConnection]:
        """Accept the caller's side and recompute status in one UPDATE.
        
        SET expressions see the row's prior values, so the status check ORs
        in the side being accepted rather than re-reading the flags.
        
        Args:
            connection_id: Connection ID
            user_id: Accepting participant
            
        Returns:
            Refreshed SharedConnection, or None if the user is not a participant
        """
        is_user_1 = self.model.user_id_1 == user_id
        is_user_2 = self.model.user_id_2 == user_id
        side_1 = or_(is_user_1, self.model.user_1_accepted == True)
        side_2 = or_(is_user_2, self.model.user_2_accepted == True)

        stmt = (
            update(self.model)
            .where(self.model.id == connection_id, or_(is_user_1, is_user_2))
            .values(
                user_1_accepted=case((is_user_1, true()), else_=self.model.user_1_accepted),
                user_2_accepted=case((is_user_2, true()), else_=self.model.user_2_accepted),
                status=case((and_(side_1, side_2), "active"), else_="pending"),
                updated_at=func.now(),
            )
            .execution_options(synchronize_session=False)
        )
        matched = self.db.execute(stmt).rowcount
        self._log_operation("accept", connection_id=connection_id, user_id=user_id, matched=matched)
        if not matched:
            return None
        return self.db.query(self.model).populate_existing().filter(self.model.id == connection_id).first()

    def delete_for_user(self, user_id: int) -> int:
        """Hard delete every connection row with the user on either side."""
        deleted = self.db.query(self.model).filter(self._involving(user_id)).delete(synchronize_session=False)
        self.db.expire_all()
        self._log_operation("delete_for_user", user_id=user_id, deleted=deleted)
        return deleted
