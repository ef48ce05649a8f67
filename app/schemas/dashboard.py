from typing import List, Optional

from .mixin import CamelModel
from .user import UserRead
from .bill import BillView
from .connection import SharedConnectionRead
from .activity import BillActivityRead


class DashboardRead(CamelModel):
	current_user: Optional[UserRead] = None
	bills: List[BillView] = []
	connection: Optional[SharedConnectionRead] = None
	is_shared: bool = False
	activities: List[BillActivityRead] = []
