"""Bill service: CRUD, paid-flag toggling, activity log and splits.

Every mutation commits the bill change first and then appends its activity
entry in a separate transaction; a failed activity insert is logged and does
not undo the bill change.
"""

from datetime import date
from typing import Any, Dict, List, Optional, Tuple

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.services.base import BaseService
from app.services.exceptions import (
    BillNotFoundError,
    ConnectionNotActiveError,
    InvalidSplitError,
    ValidationError
)
from app.db.models.bill import Bill
from app.db.models.shared_connection import SharedConnection
from app.schemas.activity import ActivityType, BillActivityRead
from app.schemas.bill import (
    BillCreate,
    BillRead,
    BillSplitRead,
    BillSplitUpdate,
    BillUpdate,
    BillView
)
from app.utils.bills import (
    format_currency,
    format_date,
    get_bill_status,
    get_frequency_label,
    get_status_color,
    is_fully_paid,
    is_paid_by_user,
    paid_flag_field,
    split_amount
)


class BillService(BaseService):
    """Service class for bill operations seen from one signed-in user."""

    def __init__(self, correlation_id: Optional[str] = None, **repositories):
        """Initialize bill service.

        Args:
            correlation_id: Optional request correlation ID for logging
            **repositories: bill_repo, activity_repo, split_repo, connection_repo
        """
        super().__init__(correlation_id)
        if repositories:
            self._set_repositories(**repositories)

        for name in ("bill_repo", "activity_repo", "split_repo", "connection_repo"):
            if not hasattr(self, name):
                raise ValidationError(
                    field=name,
                    message=f"{name} is required for BillService",
                    correlation_id=correlation_id
                )

    # -------------------------------------------------------------------------
    # Visibility
    # -------------------------------------------------------------------------

    def _viewer_scope(self, user_id: int) -> Tuple[Optional[SharedConnection], List[int]]:
        """Active connection (if any) and the creator IDs whose bills the user sees.

        A pending connection grants nothing beyond the user's own bills.
        """
        connection = self.connection_repo.get_active_for_user(user_id)
        if connection is None:
            return None, [user_id]
        return connection, [user_id, connection.partner_of(user_id)]

    def _get_visible_bill(self, bill_id: int, user_id: int) -> Tuple[Bill, Optional[SharedConnection]]:
        connection, owner_ids = self._viewer_scope(user_id)
        bill = self.bill_repo.get_visible_by_id(bill_id, owner_ids, connection.id if connection else None)
        if bill is None:
            raise BillNotFoundError(bill_id=bill_id, user_id=user_id, correlation_id=self.correlation_id)
        return bill, connection

    def to_view(self, bill: Bill, user_id: int, is_shared: bool, today: Optional[date] = None) -> BillView:
        status = get_bill_status(bill, today)
        return BillView(
            **BillRead.model_validate(bill).model_dump(),
            status=status,
            status_color=get_status_color(status),
            is_shared=is_shared,
            is_paid_by_current_user=is_paid_by_user(bill, user_id),
            formatted_amount=format_currency(bill.amount),
            formatted_due_date=format_date(bill.due_date),
            frequency_label=get_frequency_label(bill.frequency),
        )

    # -------------------------------------------------------------------------
    # Activity log
    # -------------------------------------------------------------------------

    def _record_activity(
        self,
        db: Session,
        bill_id: int,
        user,
        action: ActivityType,
        description: str,
        metadata: Optional[Dict[str, Any]] = None
    ) -> None:
        try:
            self.activity_repo.add(
                bill_id=bill_id,
                user_id=user.id,
                action=action.value,
                description=description,
                user_name=user.name,
                metadata=metadata
            )
            db.commit()
        except SQLAlchemyError as e:
            db.rollback()
            self.logger.error(
                "Failed to record bill activity",
                extra={
                    "correlation_id": self.correlation_id,
                    "service": self.__class__.__name__,
                    "bill_id": bill_id,
                    "action": action.value,
                    "error": str(e)
                }
            )

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    def list_bills(self, user_id: int, today: Optional[date] = None) -> List[BillView]:
        connection, owner_ids = self._viewer_scope(user_id)
        bills = self.bill_repo.get_visible(owner_ids, connection.id if connection else None)
        self.log_operation("list_bills", user_id=user_id, count=len(bills), shared=connection is not None)
        return [self.to_view(bill, user_id, connection is not None, today) for bill in bills]

    def get_bill(self, bill_id: int, user_id: int, today: Optional[date] = None) -> BillView:
        bill, connection = self._get_visible_bill(bill_id, user_id)
        return self.to_view(bill, user_id, connection is not None, today)

    def list_activities(self, bill_id: int, user_id: int) -> List[BillActivityRead]:
        """Activities of one bill, newest first; still readable after the bill is deleted."""
        connection, owner_ids = self._viewer_scope(user_id)
        bill = self.bill_repo.get_visible_by_id(bill_id, owner_ids, connection.id if connection else None)
        entries = self.activity_repo.list_for_bill(bill_id)
        if bill is None:
            entries = [entry for entry in entries if entry.user_id in owner_ids]
            if not entries:
                raise BillNotFoundError(bill_id=bill_id, user_id=user_id, correlation_id=self.correlation_id)
        return [BillActivityRead.from_row(entry) for entry in entries]

    def list_recent_activities(self, user_id: int, limit: int = 50) -> List[BillActivityRead]:
        connection, owner_ids = self._viewer_scope(user_id)
        bill_ids = [bill.id for bill in self.bill_repo.get_visible(owner_ids, connection.id if connection else None)]
        entries = self.activity_repo.list_for_participants(owner_ids, bill_ids, limit=limit)
        return [BillActivityRead.from_row(entry) for entry in entries]

    # -------------------------------------------------------------------------
    # Mutations
    # -------------------------------------------------------------------------

    def create_bill(self, bill_in: BillCreate, user, db: Session) -> BillView:
        """Create a bill, attached to the creator's active connection if any."""
        self.log_operation("create_bill_attempt", user_id=user.id)

        def _create() -> Tuple[Bill, Optional[SharedConnection]]:
            connection, _ = self._viewer_scope(user.id)
            bill = self.bill_repo.create_bill(bill_in, user.id, connection.id if connection else None)
            return bill, connection

        bill, connection = self.run_in_transaction(db, _create)
        view = self.to_view(bill, user.id, connection is not None)
        self._record_activity(
            db, bill.id, user, ActivityType.CREATED,
            f"{user.name} created {bill.name}",
            {"amount": str(bill.amount)}
        )
        self.log_operation("create_bill_success", user_id=user.id, bill_id=view.id)
        return view

    def update_bill(self, bill_id: int, updates: BillUpdate, user, db: Session) -> BillView:
        """Apply a partial update.

        The caller may only move their own paid-flag. When it changes, one
        activity is logged: paid if both flags are now set, unpaid otherwise.
        Plain field edits are not logged.
        """
        self.log_operation("update_bill_attempt", user_id=user.id, bill_id=bill_id)
        fields = updates.model_dump(exclude_unset=True)
        if "frequency" in fields and fields["frequency"] is not None:
            fields["frequency"] = fields["frequency"].value
        for required in ("name", "amount", "due_date", "frequency", "paid_by_user_1", "paid_by_user_2"):
            if required in fields and fields[required] is None:
                raise ValidationError(field=required, message="cannot be null", correlation_id=self.correlation_id)

        def _update() -> Tuple[Bill, Optional[SharedConnection], Tuple[bool, bool]]:
            bill, connection = self._get_visible_bill(bill_id, user.id)
            own_flag = paid_flag_field(bill, user.id)
            for flag in ("paid_by_user_1", "paid_by_user_2"):
                if flag != own_flag and flag in fields and fields[flag] != getattr(bill, flag):
                    raise ValidationError(
                        field=flag,
                        message="only the other participant can change this flag",
                        correlation_id=self.correlation_id
                    )
            before = (bill.paid_by_user_1, bill.paid_by_user_2)
            updated = self.bill_repo.update(bill.id, fields)
            return updated, connection, before

        bill, connection, before = self.run_in_transaction(db, _update)
        after = (bill.paid_by_user_1, bill.paid_by_user_2)
        if after != before:
            self._log_paid_change(db, bill, user, before, after)

        self.log_operation("update_bill_success", user_id=user.id, bill_id=bill_id, fields=list(fields.keys()))
        return self.to_view(bill, user.id, connection is not None)

    def _log_paid_change(self, db: Session, bill: Bill, user, before: Tuple[bool, bool], after: Tuple[bool, bool]) -> None:
        # Classified on the conjunction of both flags, not on which flag moved
        if is_fully_paid(*after):
            action, verb = ActivityType.PAID, "paid"
        else:
            action, verb = ActivityType.UNPAID, "unpaid"
        self._record_activity(
            db, bill.id, user, action,
            f"{user.name} marked {bill.name} as {verb}",
            {"before": list(before), "after": list(after)}
        )

    def toggle_paid(self, bill_id: int, user, db: Session) -> BillView:
        """Flip the caller's own paid-flag: creator owns flag 1, counterpart flag 2."""
        bill, _ = self._get_visible_bill(bill_id, user.id)
        field = paid_flag_field(bill, user.id)
        return self.update_bill(bill_id, BillUpdate(**{field: not getattr(bill, field)}), user, db)

    def delete_bill(self, bill_id: int, user, db: Session) -> None:
        """Hard delete; the activity trail is kept and records the last known name."""
        self.log_operation("delete_bill_attempt", user_id=user.id, bill_id=bill_id)

        def _delete() -> str:
            bill, _ = self._get_visible_bill(bill_id, user.id)
            name = bill.name
            self.bill_repo.delete(bill.id)
            return name

        name = self.run_in_transaction(db, _delete)
        self._record_activity(db, bill_id, user, ActivityType.DELETED, f"{user.name} deleted {name}")
        self.log_operation("delete_bill_success", user_id=user.id, bill_id=bill_id)

    def add_comment(self, bill_id: int, text: str, user, db: Session) -> BillActivityRead:
        """Comments live only in the activity log."""
        self._get_visible_bill(bill_id, user.id)

        def _comment():
            return self.activity_repo.add(
                bill_id=bill_id,
                user_id=user.id,
                action=ActivityType.COMMENTED.value,
                description=text.strip(),
                user_name=user.name
            )

        entry = self.run_in_transaction(db, _comment)
        self.log_operation("add_comment_success", user_id=user.id, bill_id=bill_id)
        return BillActivityRead.from_row(entry)

    # -------------------------------------------------------------------------
    # Splits
    # -------------------------------------------------------------------------

    def _split_read(self, bill: Bill, split) -> BillSplitRead:
        return BillSplitRead(
            bill_id=split.bill_id,
            shared_connection_id=split.shared_connection_id,
            user_1_percentage=split.user_1_percentage,
            user_2_percentage=split.user_2_percentage,
            share_amounts=list(split_amount(bill.amount, split.user_1_percentage)),
        )

    def get_split(self, bill_id: int, user_id: int) -> Optional[BillSplitRead]:
        bill, _ = self._get_visible_bill(bill_id, user_id)
        split = self.split_repo.get_by_bill(bill.id)
        return self._split_read(bill, split) if split else None

    def set_split(self, bill_id: int, split_in: BillSplitUpdate, user, db: Session) -> BillSplitRead:
        """Store how the bill divides between the two sides of an active connection."""
        if split_in.user_1_percentage + split_in.user_2_percentage != 100:
            raise InvalidSplitError(bill_id=bill_id, reason="percentages must sum to 100", correlation_id=self.correlation_id)

        def _split():
            bill, connection = self._get_visible_bill(bill_id, user.id)
            if connection is None:
                raise ConnectionNotActiveError(user_id=user.id, correlation_id=self.correlation_id)
            split = self.split_repo.upsert(
                bill.id,
                connection.id,
                split_in.user_1_percentage,
                split_in.user_2_percentage
            )
            return bill, split

        bill, split = self.run_in_transaction(db, _split)
        self.log_operation("set_split_success", user_id=user.id, bill_id=bill_id)
        return self._split_read(bill, split)
