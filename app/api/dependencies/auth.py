from fastapi import Depends, HTTPException, Request, status
from fastapi.security import OAuth2PasswordBearer

from app.api.dependencies.services import get_auth_service
from app.db.models.user import User
from app.services.auth_services import AuthService
from app.services.exceptions import AuthError

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/auth/login")


def get_current_user(
	request: Request,
	token: str = Depends(oauth2_scheme),
	auth_service: AuthService = Depends(get_auth_service)
) -> User:
	"""Resolve the bearer token to a user; every failure is a 401."""
	try:
		user = auth_service.resolve_user(token)
	except AuthError as e:
		raise HTTPException(
			status_code=status.HTTP_401_UNAUTHORIZED,
			detail=e.user_message,
			headers={"WWW-Authenticate": "Bearer"},
		)
	request.state.user_id = user.id
	return user
