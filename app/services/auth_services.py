"""Authentication service for sign-up, sign-in and sign-out.

Passwords are bcrypt-hashed and sessions are stateless JWT bearer tokens; the
only server-side session state is the list of revoked token IDs.
"""

from datetime import datetime, timezone
from typing import Optional
from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.security import get_password_hash, verify_password, create_access_token, decode_access_token
from app.services.base import BaseService
from app.services.exceptions import (
    AuthenticationError,
    UserNotFoundError,
    InvalidPasswordError,
    EmailAlreadyExistsError,
    TokenRevokedError,
    ValidationError
)
from app.db.models.user import User
from app.schemas.user import UserCreate
from app.schemas.auth import UserLogin, AuthResult, RegistrationResult, Token


class AuthService(BaseService):
    """Service class for handling user authentication operations.

    - Registration creates a verification-pending account
    - Login returns a bearer token carrying the user ID and a token ID
    - Sign-out revokes that token ID
    - Token resolution backs the current-user dependency
    """

    def __init__(self, correlation_id: Optional[str] = None, **repositories):
        """Initialize authentication service.

        Args:
            correlation_id: Optional request correlation ID for logging
            **repositories: Repository instances (user_repo)
        """
        super().__init__(correlation_id)
        if repositories:
            self._set_repositories(**repositories)

        if not hasattr(self, 'user_repo'):
            raise ValidationError(
                field="user_repo",
                message="UserRepository is required for AuthService",
                correlation_id=correlation_id
            )

    def register_user(self, user_in: UserCreate, db: Session) -> RegistrationResult:
        """Create a new user if the email is not already registered.

        Args:
            user_in: User creation data containing email, name, and password
            db: Database session for transaction management

        Returns:
            RegistrationResult with success status and user ID or error info
        """
        sanitized_email = user_in.email.lower().strip()
        self.log_operation(
            "register_user_attempt",
            email_domain=sanitized_email.split('@')[1] if '@' in sanitized_email else 'unknown'
        )

        try:
            def _register_operation() -> User:
                if self.user_repo.email_exists(sanitized_email):
                    raise EmailAlreadyExistsError(
                        email=sanitized_email,
                        correlation_id=self.correlation_id
                    )

                hashed_password = get_password_hash(user_in.password)
                new_user = self.user_repo.create_user(user_in, hashed_password)

                self.log_operation("register_user_success", user_id=new_user.id)
                return new_user

            user = self.run_in_transaction(db, _register_operation)
            return RegistrationResult(
                success=True,
                user_id=user.id,
                message="User registered successfully, verification pending"
            )

        except EmailAlreadyExistsError as e:
            self.log_operation(
                "register_user_failed",
                error_code=e.error_code,
                reason="email_already_exists"
            )
            return RegistrationResult(
                success=False,
                error_code=e.error_code,
                message=e.message
            )

    def authenticate_user_and_create_token(self, login_data: UserLogin) -> AuthResult:
        """Authenticate a user by email and password.

        Args:
            login_data: Validated login credentials

        Returns:
            AuthResult with token on success or error details on failure
        """
        sanitized_email = login_data.email.lower().strip()
        self.log_operation(
            "authenticate_user_attempt",
            email_domain=sanitized_email.split('@')[1] if '@' in sanitized_email else 'unknown'
        )

        try:
            user = self.user_repo.get_by_email(sanitized_email)
            if not user:
                raise UserNotFoundError(
                    email=sanitized_email,
                    correlation_id=self.correlation_id
                )

            if not verify_password(login_data.password, user.hashed_password):
                raise InvalidPasswordError(correlation_id=self.correlation_id)

            access_token = create_access_token({"sub": str(user.id)})

            self.log_operation("authenticate_user_success", user_id=user.id)
            return AuthResult(
                success=True,
                token=Token(
                    access_token=access_token,
                    token_type="bearer",
                    expires_in=settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60
                )
            )

        except (UserNotFoundError, InvalidPasswordError) as e:
            self.log_operation(
                "authenticate_user_failed",
                error_code=e.error_code,
                reason=e.error_code.lower()
            )
            return AuthResult(
                success=False,
                error_code=e.error_code,
                message=e.message
            )

    def _claims(self, token: str) -> dict:
        claims = decode_access_token(token)
        if not claims or "sub" not in claims:
            raise AuthenticationError(
                message="Could not validate credentials",
                correlation_id=self.correlation_id
            )
        return claims

    def resolve_user(self, token: str) -> User:
        """Return the signed-in user for a bearer token.

        Raises:
            AuthenticationError: Token is malformed, expired or names no user
            TokenRevokedError: Token was signed out
        """
        claims = self._claims(token)
        jti = claims.get("jti")
        if jti and self.user_repo.is_token_revoked(jti):
            raise TokenRevokedError(correlation_id=self.correlation_id)
        user = self.user_repo.get_by_id(int(claims["sub"]))
        if not user:
            raise AuthenticationError(
                message="Token subject no longer exists",
                correlation_id=self.correlation_id
            )
        return user

    def sign_out(self, token: str, db: Session) -> None:
        """Revoke the token so later requests carrying it are rejected."""
        claims = self._claims(token)
        user_id = int(claims["sub"])

        def _sign_out() -> None:
            self.user_repo.purge_expired_tokens()
            if claims.get("jti"):
                self.user_repo.revoke_token(
                    claims["jti"],
                    user_id,
                    datetime.fromtimestamp(claims["exp"], tz=timezone.utc)
                )

        self.run_in_transaction(db, _sign_out)
        self.log_operation("sign_out", user_id=user_id)
