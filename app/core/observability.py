from __future__ import annotations

import logging
import time
import uuid
from random import random
from typing import Callable, Optional, Any

from fastapi import Request
from sqlalchemy.exc import SQLAlchemyError
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response
from starlette.background import BackgroundTask

from app.core.config import settings
from app.db.session import SessionLocal
from app.repositories.request_log import RequestLogRepository

logger = logging.getLogger(__name__)


def configure_logging() -> None:
	"""Apply the configured level to the root logger once at startup."""
	logging.basicConfig(
		level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
		format="%(asctime)s %(levelname)s %(name)s %(message)s",
	)


def generate_correlation_id(existing: Optional[str]) -> str:
	if existing and existing.strip():
		return existing.strip()
	return str(uuid.uuid4())


def _is_sampled_out() -> bool:
	rate = float(settings.LOG_SAMPLE_RATE)
	return rate < 1.0 and random() > rate


class RequestLoggingMiddleware(BaseHTTPMiddleware):
	"""Tag every request with a correlation ID and persist a request log row."""

	async def dispatch(self, request: Request, call_next: Callable[[Request], Any]) -> Response:
		correlation_id = generate_correlation_id(request.headers.get("X-Correlation-ID"))
		request.state.correlation_id = correlation_id

		start_ns = time.monotonic_ns()
		response = await call_next(request)
		duration_ms = int((time.monotonic_ns() - start_ns) / 1_000_000)

		response.headers["X-Correlation-ID"] = correlation_id
		if settings.ENABLE_REQUEST_LOGGING and not _is_sampled_out():
			payload = _build_inbound_payload(request, correlation_id, response.status_code, duration_ms)
			response.background = BackgroundTask(_insert_inbound, payload)
		return response


def _build_inbound_payload(request: Request, correlation_id: str, status_code: int, duration_ms: int) -> dict:
	# Route template is unavailable for 404s
	route = request.scope.get("route")
	path_template = getattr(route, "path", None) if route is not None else None

	xff = request.headers.get("x-forwarded-for")
	client_ip = (xff.split(",")[0].strip() if xff else (request.client.host if request.client else None))

	auth_header = request.headers.get("authorization") or ""
	auth_type = "bearer" if auth_header.lower().startswith("bearer ") else "none"

	return {
		"correlation_id": correlation_id,
		"method": request.method,
		"raw_path": request.url.path,
		"path_template": path_template or request.url.path,
		"status_code": status_code,
		"duration_ms": duration_ms,
		"client_ip": client_ip,
		"user_agent": (request.headers.get("user-agent") or "")[:256],
		"auth_type": auth_type,
		"user_id": getattr(request.state, "user_id", None),
	}


def _insert_inbound(payload: dict) -> None:
	db = SessionLocal()
	try:
		RequestLogRepository(db).insert_inbound(payload)
	except SQLAlchemyError as e:
		# Request logging never affects the request path
		db.rollback()
		logger.warning("Failed to persist request log", extra={"correlation_id": payload.get("correlation_id"), "error": str(e)})
	finally:
		db.close()
