"""Service dependency providers for FastAPI dependency injection."""

from fastapi import Depends, Request
from sqlalchemy.orm import Session
from typing import Optional

from app.api.dependencies.database import get_db
from app.services.auth_services import AuthService
from app.services.bill_services import BillService
from app.services.connection_services import ConnectionService
from app.services.notification_services import NotificationService
from app.services.user_services import UserService
from app.repositories.user import UserRepository
from app.repositories.bill import BillRepository
from app.repositories.bill_activity import BillActivityRepository
from app.repositories.bill_split import BillSplitRepository
from app.repositories.connection_code import ConnectionCodeRepository
from app.repositories.shared_connection import SharedConnectionRepository
from app.repositories.notification_preference import NotificationPreferenceRepository


def get_correlation_id(request: Request) -> Optional[str]:
	"""Extract or generate correlation ID for logging and tracing."""
	from app.core.observability import generate_correlation_id
	cid = getattr(request.state, "correlation_id", None)
	if not cid:
		cid = generate_correlation_id(request.headers.get("X-Correlation-ID"))
		setattr(request.state, "correlation_id", cid)
	return cid


# Repository Dependencies
def get_user_repository(
    db: Session = Depends(get_db),
    correlation_id: Optional[str] = Depends(get_correlation_id)
) -> UserRepository:
    """Provide UserRepository instance."""
    return UserRepository(db=db, correlation_id=correlation_id)


def get_bill_repository(
    db: Session = Depends(get_db),
    correlation_id: Optional[str] = Depends(get_correlation_id)
) -> BillRepository:
    """Provide BillRepository instance."""
    return BillRepository(db=db, correlation_id=correlation_id)


def get_bill_activity_repository(
    db: Session = Depends(get_db),
    correlation_id: Optional[str] = Depends(get_correlation_id)
) -> BillActivityRepository:
    return BillActivityRepository(db=db, correlation_id=correlation_id)


def get_bill_split_repository(
    db: Session = Depends(get_db),
    correlation_id: Optional[str] = Depends(get_correlation_id)
) -> BillSplitRepository:
    return BillSplitRepository(db=db, correlation_id=correlation_id)


def get_connection_code_repository(
    db: Session = Depends(get_db),
    correlation_id: Optional[str] = Depends(get_correlation_id)
) -> ConnectionCodeRepository:
    """Provide ConnectionCodeRepository instance."""
    return ConnectionCodeRepository(db=db, correlation_id=correlation_id)


def get_shared_connection_repository(
    db: Session = Depends(get_db),
    correlation_id: Optional[str] = Depends(get_correlation_id)
) -> SharedConnectionRepository:
    """Provide SharedConnectionRepository instance."""
    return SharedConnectionRepository(db=db, correlation_id=correlation_id)


def get_notification_preference_repository(
    db: Session = Depends(get_db),
    correlation_id: Optional[str] = Depends(get_correlation_id)
) -> NotificationPreferenceRepository:
    return NotificationPreferenceRepository(db=db, correlation_id=correlation_id)


# Service Dependencies
def get_auth_service(
    user_repo: UserRepository = Depends(get_user_repository),
    correlation_id: Optional[str] = Depends(get_correlation_id)
) -> AuthService:
    """Provide AuthService instance with user repository and correlation ID.

    Args:
        user_repo: User repository from dependency injection
        correlation_id: Optional correlation ID from request headers

    Returns:
        Configured AuthService instance
    """
    return AuthService(correlation_id=correlation_id, user_repo=user_repo)


def get_user_service(
    user_repo: UserRepository = Depends(get_user_repository),
    correlation_id: Optional[str] = Depends(get_correlation_id)
) -> UserService:
    return UserService(user_repo=user_repo, correlation_id=correlation_id)


def get_bill_service(
    bill_repo: BillRepository = Depends(get_bill_repository),
    activity_repo: BillActivityRepository = Depends(get_bill_activity_repository),
    split_repo: BillSplitRepository = Depends(get_bill_split_repository),
    connection_repo: SharedConnectionRepository = Depends(get_shared_connection_repository),
    correlation_id: Optional[str] = Depends(get_correlation_id)
) -> BillService:
    """Provide BillService instance with all required repositories.

    Args:
        bill_repo: Bill repository from dependency injection
        activity_repo: Bill activity repository from dependency injection
        split_repo: Bill split repository from dependency injection
        connection_repo: Shared connection repository, used for visibility
        correlation_id: Optional correlation ID from request headers

    Returns:
        Configured BillService instance
    """
    return BillService(
        bill_repo=bill_repo,
        activity_repo=activity_repo,
        split_repo=split_repo,
        connection_repo=connection_repo,
        correlation_id=correlation_id
    )


def get_connection_service(
    code_repo: ConnectionCodeRepository = Depends(get_connection_code_repository),
    connection_repo: SharedConnectionRepository = Depends(get_shared_connection_repository),
    bill_repo: BillRepository = Depends(get_bill_repository),
    split_repo: BillSplitRepository = Depends(get_bill_split_repository),
    user_repo: UserRepository = Depends(get_user_repository),
    correlation_id: Optional[str] = Depends(get_correlation_id)
) -> ConnectionService:
    """Provide ConnectionService instance with required repositories.

    Args:
        code_repo: Connection code repository from dependency injection
        connection_repo: Shared connection repository from dependency injection
        bill_repo: Bill repository, used to detach bills on disconnect
        split_repo: Bill split repository, used to drop splits on disconnect
        user_repo: User repository, used to resolve the partner's name
        correlation_id: Optional correlation ID from request headers

    Returns:
        Configured ConnectionService instance
    """
    return ConnectionService(
        code_repo=code_repo,
        connection_repo=connection_repo,
        bill_repo=bill_repo,
        split_repo=split_repo,
        user_repo=user_repo,
        correlation_id=correlation_id
    )


def get_notification_service(
    preference_repo: NotificationPreferenceRepository = Depends(get_notification_preference_repository),
    correlation_id: Optional[str] = Depends(get_correlation_id)
) -> NotificationService:
    return NotificationService(preference_repo=preference_repo, correlation_id=correlation_id)
