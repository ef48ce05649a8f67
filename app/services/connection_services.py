"""Pairing service: connection codes and the two-sided shared connection.

Lifecycle of a code: issued -> consumed, or issued -> expired (checked at read
time). Lifecycle of a connection: none -> pending (inviter auto-accepted) ->
active (both sides accepted) -> none again on disconnect, which hard deletes.
"""

from datetime import datetime, timedelta
from typing import Callable, Optional

from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.security import generate_connection_code
from app.services.base import BaseService
from app.services.exceptions import (
    AlreadyConnectedError,
    BackendError,
    ConnectionCodeInvalidError,
    ConnectionNotFoundError,
    SelfConnectionError,
    ValidationError
)
from app.db.models.connection_code import ConnectionCode
from app.db.models.shared_connection import SharedConnection
from app.schemas.connection import (
    CodeValidity,
    CodeValidationResult,
    ConnectionCodeRead,
    SharedConnectionRead
)
from app.utils.bills import utcnow, ensure_utc


class ConnectionService(BaseService):
    """Service class for connection codes and shared connections."""

    def __init__(
        self,
        correlation_id: Optional[str] = None,
        clock: Callable[[], datetime] = utcnow,
        **repositories
    ):
        """Initialize connection service.

        Args:
            correlation_id: Optional request correlation ID for logging
            clock: Returns the current UTC time; replaceable in tests
            **repositories: code_repo, connection_repo, bill_repo, split_repo, user_repo
        """
        super().__init__(correlation_id)
        self.clock = clock
        if repositories:
            self._set_repositories(**repositories)

        for name in ("code_repo", "connection_repo", "bill_repo", "split_repo", "user_repo"):
            if not hasattr(self, name):
                raise ValidationError(
                    field=name,
                    message=f"{name} is required for ConnectionService",
                    correlation_id=correlation_id
                )

    # -------------------------------------------------------------------------
    # Codes
    # -------------------------------------------------------------------------

    def generate_code(self, user_id: int, db: Session) -> ConnectionCodeRead:
        """Issue a new code valid for the configured TTL.

        The code column is unique, so a collision with any issued code is
        re-rolled, up to CONNECTION_CODE_MAX_ATTEMPTS times.
        """
        self.log_operation("generate_code_attempt", user_id=user_id)

        def _generate() -> ConnectionCode:
            now = self.clock()
            for attempt in range(settings.CONNECTION_CODE_MAX_ATTEMPTS):
                code = generate_connection_code()
                if not self.code_repo.code_exists(code):
                    return self.code_repo.create_code(
                        code=code,
                        created_by=user_id,
                        created_at=now,
                        expires_at=now + timedelta(hours=settings.CONNECTION_CODE_TTL_HOURS)
                    )
                self.log_operation("generate_code_collision", user_id=user_id, attempt=attempt + 1)
            raise BackendError(
                operation="generate_code",
                reason="no free code after maximum attempts",
                correlation_id=self.correlation_id
            )

        record = self.run_in_transaction(db, _generate)
        self.log_operation("generate_code_success", user_id=user_id)
        return ConnectionCodeRead.model_validate(record)

    def validate_code(self, code: str) -> CodeValidationResult:
        """Classify a code as valid, not found, expired or already used.

        Expiry wins over use: a consumed code past its expiry reports expired.
        """
        normalized = code.strip().upper()
        record = self.code_repo.get_by_code(normalized)
        if record is None:
            status = CodeValidity.NOT_FOUND
        elif self.clock() >= ensure_utc(record.expires_at):
            status = CodeValidity.EXPIRED
        elif record.used:
            status = CodeValidity.ALREADY_USED
        else:
            status = CodeValidity.VALID

        self.log_operation("validate_code", status=status.value)
        return CodeValidationResult(
            status=status,
            code=ConnectionCodeRead.model_validate(record) if record is not None else None
        )

    def consume_code(self, code: str, user_id: int) -> None:
        """Atomically mark the code used by user_id; caller owns the transaction.

        Raises:
            ConnectionCodeInvalidError: Code was not redeemable at update time
        """
        normalized = code.strip().upper()
        if not self.code_repo.consume(normalized, user_id, self.clock()):
            result = self.validate_code(normalized)
            reason = result.status.value if not result.is_valid else CodeValidity.ALREADY_USED.value
            raise ConnectionCodeInvalidError(reason=reason, correlation_id=self.correlation_id)

    # -------------------------------------------------------------------------
    # Connections
    # -------------------------------------------------------------------------

    def _to_read(self, connection: SharedConnection, viewer_id: Optional[int] = None) -> SharedConnectionRead:
        data = SharedConnectionRead.model_validate(connection)
        if viewer_id is not None:
            partner = self.user_repo.get_by_id(connection.partner_of(viewer_id))
            data.partner_name = partner.name if partner else None
        return data

    def create_connection(self, inviter_id: int, accepter_id: int) -> SharedConnection:
        """Create a pending connection; caller owns the transaction.

        Raises:
            SelfConnectionError: Both IDs are the same user
            AlreadyConnectedError: Either user already belongs to a connection
        """
        if inviter_id == accepter_id:
            raise SelfConnectionError(user_id=accepter_id, correlation_id=self.correlation_id)
        for user_id in (inviter_id, accepter_id):
            if self.connection_repo.get_for_user(user_id) is not None:
                raise AlreadyConnectedError(user_id=user_id, correlation_id=self.correlation_id)
        return self.connection_repo.create_connection(inviter_id, accepter_id)

    def connect_with_code(self, code: str, user_id: int, db: Session) -> SharedConnectionRead:
        """Redeem a code: validate, consume and create the pending connection together.

        Any failure rolls the whole redemption back, so a rejected join
        leaves the code unconsumed.
        """
        self.log_operation("connect_with_code_attempt", user_id=user_id)

        def _connect() -> SharedConnection:
            result = self.validate_code(code)
            if not result.is_valid:
                raise ConnectionCodeInvalidError(reason=result.status.value, correlation_id=self.correlation_id)

            self.consume_code(code, user_id)
            return self.create_connection(result.code.created_by, user_id)

        connection = self.run_in_transaction(db, _connect)
        self.log_operation("connect_with_code_success", user_id=user_id, connection_id=connection.id)
        return self._to_read(connection, user_id)

    def accept_connection(self, user_id: int, db: Session) -> SharedConnectionRead:
        """Accept the caller's side of their connection.

        Raises:
            ConnectionNotFoundError: User has no connection
        """
        self.log_operation("accept_connection_attempt", user_id=user_id)

        def _accept() -> SharedConnection:
            connection = self.connection_repo.get_for_user(user_id)
            if connection is None:
                raise ConnectionNotFoundError(user_id=user_id, correlation_id=self.correlation_id)
            accepted = self.connection_repo.accept(connection.id, user_id)
            if accepted is None:
                raise ConnectionNotFoundError(user_id=user_id, correlation_id=self.correlation_id)
            return accepted

        connection = self.run_in_transaction(db, _accept)
        self.log_operation("accept_connection_success", user_id=user_id, status=connection.status)
        return self._to_read(connection, user_id)

    def disconnect(self, user_id: int, db: Session) -> bool:
        """Delete the user's connection for both participants.

        Bills keep their creators but lose the connection link, and splits
        tied to the connection are removed.

        Returns:
            True if a connection was removed
        """
        self.log_operation("disconnect_attempt", user_id=user_id)

        def _disconnect() -> int:
            connection = self.connection_repo.get_for_user(user_id)
            if connection is not None:
                self.split_repo.delete_for_connection(connection.id)
                self.bill_repo.detach_connection(connection.id)
            return self.connection_repo.delete_for_user(user_id)

        deleted = self.run_in_transaction(db, _disconnect)
        self.log_operation("disconnect_success", user_id=user_id, deleted=deleted)
        return deleted > 0

    def get_connection(self, user_id: int) -> Optional[SharedConnectionRead]:
        connection = self.connection_repo.get_for_user(user_id)
        return self._to_read(connection, user_id) if connection else None

    def get_active_connection(self, user_id: int) -> Optional[SharedConnection]:
        """Connection that grants shared visibility, i.e. both sides accepted."""
        return self.connection_repo.get_active_for_user(user_id)
