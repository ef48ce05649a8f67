from typing import Optional, Dict, Any
from sqlalchemy.orm import Session

from app.db.models.request_log import RequestLog


class RequestLogRepository:
	"""Lightweight repository for request telemetry inserts."""

	def __init__(self, db: Session):
		self.db = db

	def _truncate(self, value: Optional[str], max_len: int) -> Optional[str]:
		if value is None:
			return None
		return value[:max_len]

	def insert_inbound(self, payload: Dict[str, Any]) -> None:
		log = RequestLog(
			correlation_id=self._truncate(payload.get("correlation_id"), 64) or "unknown",
			method=self._truncate(payload.get("method"), 16),
			path_template=self._truncate(payload.get("path_template"), 512),
			raw_path=self._truncate(payload.get("raw_path"), 512),
			status_code=payload.get("status_code"),
			duration_ms=int(payload.get("duration_ms", 0)),
			client_ip=self._truncate(payload.get("client_ip"), 64),
			user_agent=self._truncate(payload.get("user_agent"), 256),
			auth_type=self._truncate(payload.get("auth_type"), 16),
			user_id=payload.get("user_id"),
		)
		self.db.add(log)
		self.db.commit()

	def count_for_correlation(self, correlation_id: str) -> int:
		return self.db.query(RequestLog).filter(RequestLog.correlation_id == correlation_id).count()
