"""In-memory application state for one signed-in user.

The state object is built per request by a dependency and handed to the
endpoints that need it. Every mutator writes through the owning service
first and only then reflects the result in memory, so a failed write leaves
the in-memory copy untouched. Reads degrade to empty on backend failure.
"""

import logging
from typing import List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.schemas.activity import BillActivityRead
from app.schemas.bill import BillCreate, BillUpdate, BillView
from app.schemas.connection import ConnectionCodeRead, ConnectionStatus, SharedConnectionRead
from app.schemas.dashboard import DashboardRead
from app.schemas.user import UserRead, UserUpdate
from app.services.bill_services import BillService
from app.services.connection_services import ConnectionService
from app.services.exceptions import BackendError, ConnectionCodeInvalidError
from app.services.user_services import UserService

logger = logging.getLogger(__name__)


class BillTrackerState:
    """Signed-in user, visible bills, pairing status and recent activity."""

    def __init__(
        self,
        db: Session,
        user,
        bill_service: BillService,
        connection_service: ConnectionService,
        user_service: UserService,
    ):
        self.db = db
        self.user = user
        self.bill_service = bill_service
        self.connection_service = connection_service
        self.user_service = user_service

        self.current_user: Optional[UserRead] = None
        self.bills: List[BillView] = []
        self.connection: Optional[SharedConnectionRead] = None
        self.activities: List[BillActivityRead] = []
        self.is_loading = False

    @property
    def is_shared(self) -> bool:
        return self.connection is not None and self.connection.status == ConnectionStatus.ACTIVE

    def _read(self, label: str, fn, default):
        try:
            return fn()
        except (BackendError, SQLAlchemyError) as e:
            logger.warning(
                "State read failed, using empty value",
                extra={"read": label, "user_id": self.user.id, "error": str(e)}
            )
            return default

    def load(self) -> "BillTrackerState":
        self.is_loading = True
        try:
            self.current_user = self._read(
                "profile", lambda: self.user_service.get_profile(self.user.id), None
            )
            self.connection = self._read(
                "connection", lambda: self.connection_service.get_connection(self.user.id), None
            )
            self.bills = self._read("bills", lambda: self.bill_service.list_bills(self.user.id), [])
            self._refresh_activities()
        finally:
            self.is_loading = False
        return self

    def _refresh_activities(self) -> None:
        self.activities = self._read(
            "activities", lambda: self.bill_service.list_recent_activities(self.user.id), []
        )

    def _replace_bill(self, view: BillView) -> None:
        self.bills = [view if bill.id == view.id else bill for bill in self.bills]

    # Bills

    def add_bill(self, bill_in: BillCreate) -> BillView:
        view = self.bill_service.create_bill(bill_in, self.user, self.db)
        self.bills = [view] + self.bills
        self._refresh_activities()
        return view

    def update_bill(self, bill_id: int, updates: BillUpdate) -> BillView:
        view = self.bill_service.update_bill(bill_id, updates, self.user, self.db)
        self._replace_bill(view)
        self._refresh_activities()
        return view

    def toggle_paid(self, bill_id: int) -> BillView:
        view = self.bill_service.toggle_paid(bill_id, self.user, self.db)
        self._replace_bill(view)
        self._refresh_activities()
        return view

    def delete_bill(self, bill_id: int) -> None:
        self.bill_service.delete_bill(bill_id, self.user, self.db)
        self.bills = [bill for bill in self.bills if bill.id != bill_id]
        self._refresh_activities()

    # Pairing

    def generate_code(self) -> ConnectionCodeRead:
        return self.connection_service.generate_code(self.user.id, self.db)

    def connect_with_code(self, code: str) -> bool:
        """Redeem a partner's code; False when the code is not redeemable."""
        try:
            self.connection = self.connection_service.connect_with_code(code, self.user.id, self.db)
        except ConnectionCodeInvalidError as e:
            logger.info("Connection code rejected", extra={"user_id": self.user.id, "reason": e.reason})
            return False
        return True

    def accept_connection(self) -> SharedConnectionRead:
        self.connection = self.connection_service.accept_connection(self.user.id, self.db)
        # An active connection widens the visible bill set
        self.bills = self._read("bills", lambda: self.bill_service.list_bills(self.user.id), [])
        return self.connection

    def disconnect(self) -> bool:
        removed = self.connection_service.disconnect(self.user.id, self.db)
        self.connection = None
        self.bills = self._read("bills", lambda: self.bill_service.list_bills(self.user.id), [])
        self._refresh_activities()
        return removed

    # Profile

    def update_profile(self, updates: UserUpdate) -> UserRead:
        self.current_user = self.user_service.update_profile(self.user.id, updates, self.db)
        return self.current_user

    def snapshot(self) -> DashboardRead:
        return DashboardRead(
            current_user=self.current_user,
            bills=self.bills,
            connection=self.connection,
            is_shared=self.is_shared,
            activities=self.activities,
        )
