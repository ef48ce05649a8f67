"""Profile operations for the signed-in user."""

from typing import Optional
from sqlalchemy.orm import Session

from app.services.base import BaseService
from app.services.exceptions import ResourceNotFoundError, ValidationError
from app.db.models.user import User
from app.schemas.user import UserRead, UserUpdate


class UserService(BaseService):
    def __init__(self, user_repo, correlation_id: Optional[str] = None):
        super().__init__(correlation_id)
        self._set_repositories(user_repo=user_repo)

    def get_profile(self, user_id: int) -> UserRead:
        user = self.user_repo.get_by_id(user_id)
        if not user:
            raise ResourceNotFoundError(resource_type="User", resource_id=user_id, correlation_id=self.correlation_id)
        return UserRead.model_validate(user)

    def update_profile(self, user_id: int, updates: UserUpdate, db: Session) -> UserRead:
        fields = updates.model_dump(exclude_unset=True)
        if "name" in fields:
            if not fields["name"] or not fields["name"].strip():
                raise ValidationError(field="name", message="Name cannot be empty", correlation_id=self.correlation_id)
            fields["name"] = fields["name"].strip()

        def op() -> User:
            user = self.user_repo.update(user_id, fields)
            if not user:
                raise ResourceNotFoundError(resource_type="User", resource_id=user_id, correlation_id=self.correlation_id)
            return user

        user = self.run_in_transaction(db, op)
        self.log_operation("update_profile", user_id=user_id, fields=list(fields.keys()))
        return UserRead.model_validate(user)
