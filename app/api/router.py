from __future__ import annotations

from typing import Any, Dict, List, Optional, Sequence

from fastapi import APIRouter, Depends


# Error responses every router documents; bodies follow ServiceError.to_dict()
DEFAULT_ERROR_RESPONSES: Dict[int, Dict[str, Any]] = {
    400: {"description": "Business rule or validation failure"},
    401: {"description": "Missing, invalid or revoked bearer token"},
    404: {"description": "Resource not found or not visible to the caller"},
    409: {"description": "Conflicting pairing state"},
    500: {"description": "Backend failure"},
}


def create_router(
    *,
    name: Optional[str] = None,
    tags: Optional[List[str]] = None,
    dependencies: Optional[Sequence[Depends]] = None,
    extra_responses: Optional[Dict[int, Dict[str, Any]]] = None,
) -> APIRouter:
    """Create an APIRouter carrying the shared error responses.

    Args:
        name: Logical router name, kept as an attribute for debugging.
        tags: OpenAPI tags; main.py may also set them at include time.
        dependencies: Dependencies applied to every route in the router.
        extra_responses: Additional or overriding response docs.

    Returns:
        Configured APIRouter instance.
    """
    responses = dict(DEFAULT_ERROR_RESPONSES)
    if extra_responses:
        responses.update(extra_responses)
    router = APIRouter(
        tags=tags,
        dependencies=list(dependencies) if dependencies else None,
        responses=responses,
    )
    if name:
        setattr(router, "name", name)
    return router
