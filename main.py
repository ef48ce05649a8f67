# main.py
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from app.api.endpoints import auth, user, bill, activity, connection, notification, dashboard
from app.core.observability import configure_logging, RequestLoggingMiddleware
from app.services.exceptions import ServiceError, create_error_response, get_http_status_for_error
# Import all models to ensure relationships are properly resolved
from app.db import base  # This imports all models

configure_logging()

app = FastAPI(title="Bill Tracker API")

app.add_middleware(RequestLoggingMiddleware)


@app.exception_handler(ServiceError)
async def service_error_handler(request: Request, exc: ServiceError) -> JSONResponse:
    return JSONResponse(
        status_code=get_http_status_for_error(exc).value,
        content=create_error_response(exc),
        headers={"X-Correlation-ID": getattr(request.state, "correlation_id", "") or ""},
    )


app.include_router(auth.router, prefix="/auth", tags=["auth"])
app.include_router(user.router, prefix="/users", tags=["users"])
app.include_router(bill.router, prefix="/bills", tags=["bills"])
app.include_router(activity.router, prefix="/activities", tags=["activities"])
app.include_router(connection.router, prefix="/connections", tags=["connections"])
app.include_router(notification.router, prefix="/notifications", tags=["notifications"])
app.include_router(dashboard.router, prefix="/dashboard", tags=["dashboard"])
