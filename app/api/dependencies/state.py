from fastapi import Depends
from sqlalchemy.orm import Session

from app.api.dependencies.auth import get_current_user
from app.api.dependencies.database import get_db
from app.api.dependencies.services import get_bill_service, get_connection_service, get_user_service
from app.services.bill_services import BillService
from app.services.connection_services import ConnectionService
from app.services.user_services import UserService
from app.state import BillTrackerState


def get_app_state(
	db: Session = Depends(get_db),
	current_user=Depends(get_current_user),
	bill_service: BillService = Depends(get_bill_service),
	connection_service: ConnectionService = Depends(get_connection_service),
	user_service: UserService = Depends(get_user_service)
) -> BillTrackerState:
	"""Per-request state container, loaded for the signed-in user."""
	state = BillTrackerState(db, current_user, bill_service, connection_service, user_service)
	return state.load()
