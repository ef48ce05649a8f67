from typing import List

from fastapi import Depends, Query
from app.api.router import create_router
from app.api.dependencies.auth import get_current_user
from app.api.dependencies.services import get_bill_service
from app.services.bill_services import BillService
from app.schemas.activity import BillActivityRead

router = create_router(name="activity")


@router.get("", response_model=List[BillActivityRead])
def list_recent_activities(
	limit: int = Query(50, ge=1, le=200),
	current_user=Depends(get_current_user),
	bill_service: BillService = Depends(get_bill_service)
):
	"""
	Newest activity across every bill the current user can see.
	"""
	return bill_service.list_recent_activities(current_user.id, limit=limit)
