from typing import Optional

from fastapi import Depends, Path, Response
from app.api.router import create_router
from sqlalchemy.orm import Session
from app.api.dependencies.database import get_db
from app.api.dependencies.auth import get_current_user
from app.api.dependencies.services import get_connection_service
from app.services.connection_services import ConnectionService
from app.schemas.connection import (
	CodeValidationResult,
	ConnectionCodeRead,
	JoinConnectionInput,
	SharedConnectionRead
)

router = create_router(
	name="connection",
	extra_responses={400: {"description": "Code not redeemable; the body carries a reason"}},
)


@router.post("/codes", status_code=201, response_model=ConnectionCodeRead)
def generate_code(
	db: Session = Depends(get_db),
	current_user=Depends(get_current_user),
	connection_service: ConnectionService = Depends(get_connection_service)
):
	"""
	Issue a single-use invitation code for a partner to redeem.
	"""
	return connection_service.generate_code(current_user.id, db)


@router.get("/codes/{code}", response_model=CodeValidationResult)
def validate_code(
	code: str = Path(..., min_length=1, max_length=16, pattern=r"^[A-Za-z0-9]+$"),
	current_user=Depends(get_current_user),
	connection_service: ConnectionService = Depends(get_connection_service)
):
	return connection_service.validate_code(code)


@router.post("/join", status_code=201, response_model=SharedConnectionRead)
def join_with_code(
	join_in: JoinConnectionInput,
	db: Session = Depends(get_db),
	current_user=Depends(get_current_user),
	connection_service: ConnectionService = Depends(get_connection_service)
):
	"""
	Redeem a code; creates a pending connection with the code's creator.
	"""
	return connection_service.connect_with_code(join_in.code, current_user.id, db)


@router.post("/accept", response_model=SharedConnectionRead)
def accept_connection(
	db: Session = Depends(get_db),
	current_user=Depends(get_current_user),
	connection_service: ConnectionService = Depends(get_connection_service)
):
	return connection_service.accept_connection(current_user.id, db)


@router.get("/me", response_model=Optional[SharedConnectionRead])
def get_my_connection(
	current_user=Depends(get_current_user),
	connection_service: ConnectionService = Depends(get_connection_service)
):
	return connection_service.get_connection(current_user.id)


@router.delete("", status_code=204)
def disconnect(
	db: Session = Depends(get_db),
	current_user=Depends(get_current_user),
	connection_service: ConnectionService = Depends(get_connection_service)
):
	"""
	Remove the connection for both participants, whatever its state.
	"""
	connection_service.disconnect(current_user.id, db)
	return Response(status_code=204)
