# Import every model so Base.metadata and relationship strings resolve
from app.db.base_class import Base  # noqa: F401
from app.db.models.user import User, RevokedToken  # noqa: F401
from app.db.models.connection_code import ConnectionCode  # noqa: F401
from app.db.models.shared_connection import SharedConnection  # noqa: F401
from app.db.models.bill import Bill  # noqa: F401
from app.db.models.bill_activity import BillActivity  # noqa: F401
from app.db.models.bill_split import BillSplit  # noqa: F401
from app.db.models.notification_preference import NotificationPreference  # noqa: F401
from app.db.models.request_log import RequestLog  # noqa: F401
