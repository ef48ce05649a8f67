from fastapi import Depends, HTTPException, Path
from app.api.router import create_router
from app.api.dependencies.state import get_app_state
from app.schemas.bill import BillCreate, BillUpdate
from app.schemas.connection import JoinConnectionInput
from app.schemas.dashboard import DashboardRead
from app.schemas.user import UserUpdate
from app.state import BillTrackerState

router = create_router(name="dashboard")

@router.get("", response_model=DashboardRead)
def get_dashboard(state: BillTrackerState = Depends(get_app_state)):
	"""Everything the home screen shows, loaded in one pass."""
	return state.snapshot()


# The routes below change one thing and answer with the refreshed home screen

@router.post("/bills", status_code=201, response_model=DashboardRead)
def add_bill(bill_in: BillCreate, state: BillTrackerState = Depends(get_app_state)):
	state.add_bill(bill_in)
	return state.snapshot()

@router.patch("/bills/{bill_id}", response_model=DashboardRead)
def update_bill(
	bill_in: BillUpdate,
	bill_id: int = Path(..., gt=0),
	state: BillTrackerState = Depends(get_app_state)
):
	state.update_bill(bill_id, bill_in)
	return state.snapshot()

@router.post("/bills/{bill_id}/toggle-paid", response_model=DashboardRead)
def toggle_paid(bill_id: int = Path(..., gt=0), state: BillTrackerState = Depends(get_app_state)):
	state.toggle_paid(bill_id)
	return state.snapshot()

@router.delete("/bills/{bill_id}", response_model=DashboardRead)
def delete_bill(bill_id: int = Path(..., gt=0), state: BillTrackerState = Depends(get_app_state)):
	state.delete_bill(bill_id)
	return state.snapshot()

@router.post("/connection/join", response_model=DashboardRead)
def join_connection(join_in: JoinConnectionInput, state: BillTrackerState = Depends(get_app_state)):
	"""Redeem a partner's code.

	Only says whether the code worked; GET /connections/codes/{code} tells
	the reasons apart.
	"""
	if not state.connect_with_code(join_in.code):
		raise HTTPException(status_code=400, detail="Invalid or expired connection code")
	return state.snapshot()

@router.post("/connection/accept", response_model=DashboardRead)
def accept_connection(state: BillTrackerState = Depends(get_app_state)):
	state.accept_connection()
	return state.snapshot()

@router.delete("/connection", response_model=DashboardRead)
def disconnect(state: BillTrackerState = Depends(get_app_state)):
	state.disconnect()
	return state.snapshot()

@router.patch("/profile", response_model=DashboardRead)
def update_profile(updates: UserUpdate, state: BillTrackerState = Depends(get_app_state)):
	state.update_profile(updates)
	return state.snapshot()
