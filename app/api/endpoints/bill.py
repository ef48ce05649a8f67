from typing import List, Optional

from fastapi import Depends, Path, Response
from app.api.router import create_router
from sqlalchemy.orm import Session
from app.api.dependencies.database import get_db
from app.api.dependencies.auth import get_current_user
from app.api.dependencies.services import get_bill_service
from app.services.bill_services import BillService
from app.schemas.activity import BillActivityRead
from app.schemas.bill import (
	BillCommentCreate,
	BillCreate,
	BillSplitRead,
	BillSplitUpdate,
	BillUpdate,
	BillView
)

router = create_router(name="bill")


@router.post("", status_code=201, response_model=BillView)
def create_bill(
	bill_in: BillCreate,
	db: Session = Depends(get_db),
	current_user=Depends(get_current_user),
	bill_service: BillService = Depends(get_bill_service)
):
	"""
	Create a bill; it joins the creator's active connection when there is one.
	"""
	return bill_service.create_bill(bill_in, current_user, db)


@router.get("", response_model=List[BillView])
def list_bills(
	current_user=Depends(get_current_user),
	bill_service: BillService = Depends(get_bill_service)
):
	"""
	Bills visible to the current user, ordered by due date.
	"""
	return bill_service.list_bills(current_user.id)


@router.get("/{bill_id}", response_model=BillView)
def get_bill(
	bill_id: int = Path(..., gt=0),
	current_user=Depends(get_current_user),
	bill_service: BillService = Depends(get_bill_service)
):
	return bill_service.get_bill(bill_id, current_user.id)


@router.patch("/{bill_id}", response_model=BillView)
def update_bill(
	updates: BillUpdate,
	bill_id: int = Path(..., gt=0),
	db: Session = Depends(get_db),
	current_user=Depends(get_current_user),
	bill_service: BillService = Depends(get_bill_service)
):
	return bill_service.update_bill(bill_id, updates, current_user, db)


@router.delete("/{bill_id}", status_code=204)
def delete_bill(
	bill_id: int = Path(..., gt=0),
	db: Session = Depends(get_db),
	current_user=Depends(get_current_user),
	bill_service: BillService = Depends(get_bill_service)
):
	bill_service.delete_bill(bill_id, current_user, db)
	return Response(status_code=204)


@router.post("/{bill_id}/toggle-paid", response_model=BillView)
def toggle_paid(
	bill_id: int = Path(..., gt=0),
	db: Session = Depends(get_db),
	current_user=Depends(get_current_user),
	bill_service: BillService = Depends(get_bill_service)
):
	"""
	Flip the current user's own paid flag on the bill.
	"""
	return bill_service.toggle_paid(bill_id, current_user, db)


@router.post("/{bill_id}/comments", status_code=201, response_model=BillActivityRead)
def add_comment(
	comment: BillCommentCreate,
	bill_id: int = Path(..., gt=0),
	db: Session = Depends(get_db),
	current_user=Depends(get_current_user),
	bill_service: BillService = Depends(get_bill_service)
):
	return bill_service.add_comment(bill_id, comment.text, current_user, db)


@router.get("/{bill_id}/activities", response_model=List[BillActivityRead])
def list_bill_activities(
	bill_id: int = Path(..., gt=0),
	current_user=Depends(get_current_user),
	bill_service: BillService = Depends(get_bill_service)
):
	return bill_service.list_activities(bill_id, current_user.id)


@router.get("/{bill_id}/split", response_model=Optional[BillSplitRead])
def get_split(
	bill_id: int = Path(..., gt=0),
	current_user=Depends(get_current_user),
	bill_service: BillService = Depends(get_bill_service)
):
	return bill_service.get_split(bill_id, current_user.id)


@router.put("/{bill_id}/split", response_model=BillSplitRead)
def set_split(
	split_in: BillSplitUpdate,
	bill_id: int = Path(..., gt=0),
	db: Session = Depends(get_db),
	current_user=Depends(get_current_user),
	bill_service: BillService = Depends(get_bill_service)
):
	"""
	Set the percentage split; requires an active connection and a total of 100.
	"""
	return bill_service.set_split(bill_id, split_in, current_user, db)
