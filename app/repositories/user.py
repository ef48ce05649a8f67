"""User repository for user-related database operations."""

from datetime import datetime, timezone
from typing import Optional
from sqlalchemy.orm import Session

from app.repositories.base import BaseRepository
from app.db.models.user import User, RevokedToken
from app.schemas.user import UserCreate


class UserRepository(BaseRepository[User]):
    """Repository for User entity operations."""
    
    def __init__(self, db: Session, correlation_id: Optional[str] = None):
        super().__init__(db, User, correlation_id)
    
    def get_by_email(self, email: str) -> Optional[User]:
        """Get user by email address.
        
        Args:
            email: User's email address
            
        Returns:
            User instance or None if not found
        """
        result = self.db.query(self.model).filter(self.model.email == email).first()
        self._log_operation("get_by_email", email_domain=email.split('@')[-1], found=result is not None)
        return result
    
    def email_exists(self, email: str, exclude_id: Optional[int] = None) -> bool:
        """Check if email is already registered.
        
        Args:
            email: Email address to check
            exclude_id: Optional user ID to exclude from check (for updates)
            
        Returns:
            True if email exists, False otherwise
        """
        query = self.db.query(self.model.id).filter(self.model.email == email)
        
        if exclude_id:
            query = query.filter(self.model.id != exclude_id)
        
        result = query.first() is not None
        self._log_operation("email_exists", exists=result, exclude_id=exclude_id)
        return result
    
    def create_user(self, user_in: UserCreate, hashed_password: str) -> User:
        user_data = user_in.model_dump(exclude={"password"})
        user_data["email"] = user_data["email"].lower().strip()
        user_data["hashed_password"] = hashed_password
        user_data["is_verified"] = False
        return self.create(user_data)

    def revoke_token(self, jti: str, user_id: int, expires_at: datetime) -> None:
        """Record a signed-out token so it can no longer authenticate."""
        if self.db.get(RevokedToken, jti) is None:
            self.db.add(RevokedToken(jti=jti, user_id=user_id, expires_at=expires_at))
            self.db.flush()
        self._log_operation("revoke_token", user_id=user_id)

    def is_token_revoked(self, jti: str) -> bool:
        return self.db.get(RevokedToken, jti) is not None

    def purge_expired_tokens(self) -> int:
        """Drop revocation rows whose tokens have expired anyway."""
        deleted = self.db.query(RevokedToken).filter(
            RevokedToken.expires_at < datetime.now(timezone.utc)
        ).delete(synchronize_session=False)
        self._log_operation("purge_expired_tokens", deleted=deleted)
        return deleted
