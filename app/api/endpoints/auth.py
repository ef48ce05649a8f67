from fastapi import Depends, HTTPException, status
from app.api.router import create_router
from fastapi.security import OAuth2PasswordRequestForm
from sqlalchemy.orm import Session

from app.api.dependencies.auth import oauth2_scheme
from app.api.dependencies.database import get_db
from app.api.dependencies.services import get_auth_service, get_user_service
from app.schemas.auth import Token, UserLogin
from app.schemas.user import UserCreate, UserRead
from app.services.auth_services import AuthService
from app.services.exceptions import EmailAlreadyExistsError
from app.services.user_services import UserService

router = create_router(name="auth")

@router.post("/register", response_model=UserRead, status_code=201)
def register(
    user_in: UserCreate,
    db: Session = Depends(get_db),
    auth_service: AuthService = Depends(get_auth_service),
    user_service: UserService = Depends(get_user_service)
) -> UserRead:
	"""Register a new user if the email is not already taken; the account starts unverified."""
	registration_result = auth_service.register_user(user_in, db)
	if not registration_result.success:
		if registration_result.error_code == "EMAIL_EXISTS":
			raise EmailAlreadyExistsError(
				email=user_in.email.lower().strip(),
				correlation_id=auth_service.correlation_id
			)
		raise HTTPException(
			status_code=400,
			detail=registration_result.message or "Registration failed"
		)
	return user_service.get_profile(registration_result.user_id)

@router.post("/login", response_model=Token)
def login(
    form_data: OAuth2PasswordRequestForm = Depends(),
    auth_service: AuthService = Depends(get_auth_service),
) -> Token:
    """Authenticate user and return access token."""
    login_data = UserLogin(email=form_data.username, password=form_data.password)
    auth_result = auth_service.authenticate_user_and_create_token(login_data)

    if not auth_result.success:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=auth_result.message or "Invalid credentials"
        )

    return auth_result.token

@router.post("/logout", status_code=204)
def logout(
    token: str = Depends(oauth2_scheme),
    db: Session = Depends(get_db),
    auth_service: AuthService = Depends(get_auth_service),
) -> None:
    """Revoke the presented token."""
    auth_service.sign_out(token, db)
