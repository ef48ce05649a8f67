from fastapi import Depends
from app.api.router import create_router
from sqlalchemy.orm import Session
from app.api.dependencies.database import get_db
from app.api.dependencies.auth import get_current_user
from app.api.dependencies.services import get_notification_service
from app.services.notification_services import NotificationService
from app.schemas.notification import NotificationPreferenceRead, NotificationPreferenceUpdate

router = create_router(name="notification")


@router.get("/preferences", response_model=NotificationPreferenceRead)
def get_preferences(
	current_user=Depends(get_current_user),
	notification_service: NotificationService = Depends(get_notification_service)
):
	return notification_service.get_preferences(current_user.id)


@router.put("/preferences", response_model=NotificationPreferenceRead)
def save_preferences(
	prefs: NotificationPreferenceUpdate,
	db: Session = Depends(get_db),
	current_user=Depends(get_current_user),
	notification_service: NotificationService = Depends(get_notification_service)
):
	return notification_service.save_preferences(current_user.id, prefs, db)
