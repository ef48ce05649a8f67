"""Connection code repository for pairing invitation tokens."""

from datetime import datetime
from typing import Optional
from sqlalchemy import update
from sqlalchemy.orm import Session

from app.repositories.base import BaseRepository
from app.db.models.connection_code import ConnectionCode


class ConnectionCodeRepository(BaseRepository[ConnectionCode]):
    """Repository for ConnectionCode entity operations."""

    def __init__(self, db: Session, correlation_id: Optional[str] = None):
        super().__init__(db, ConnectionCode, correlation_id)

    def get_by_code(self, code: str) -> Optional[ConnectionCode]:
        """Get a code record regardless of its state.
        
        Args:
            code: The code string
            
        Returns:
            ConnectionCode instance or None if never issued
        """
        result = self.db.query(self.model).filter(self.model.code == code).first()
        self._log_operation("get_by_code", found=result is not None)
        return result

    def code_exists(self, code: str) -> bool:
        return self.db.query(self.model.id).filter(self.model.code == code).first() is not None

    def create_code(self, code: str, created_by: int, created_at: datetime, expires_at: datetime) -> ConnectionCode:
        return self.create({
            "code": code,
            "created_by": created_by,
            "created_at": created_at,
            "expires_at": expires_at,
        })

    def consume(self, code: str, user_id: int, now: datetime) -> bool:
        """Mark a code used in a single guarded statement.
        
        The update only matches an unused, unexpired code, so two callers
        racing on the same code cannot both succeed.
        
        Args:
            code: The code string
            user_id: Redeeming user ID
            now: Current time, also used as used_at
            
        Returns:
            True if this call consumed the code, False otherwise
        """
        stmt = (
            update(self.model)
            .where(
                self.model.code == code,
                self.model.used_at.is_(None),
                self.model.expires_at > now,
            )
            .values(used_by=user_id, used_at=now)
            .execution_options(synchronize_session=False)
        )
        consumed = self.db.execute(stmt).rowcount == 1
        self.db.expire_all()
        self._log_operation("consume", user_id=user_id, consumed=consumed)
        return consumed
