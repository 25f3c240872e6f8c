"""Admin API endpoints with simple token auth."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from fastapi import APIRouter, Depends, Header, HTTPException, Request, status

if TYPE_CHECKING:
    from meal_budget.containers import AppContainer

router = APIRouter(prefix="/admin", tags=["admin"])

_logger = logging.getLogger(__name__)


def _get_admin_token(request: Request) -> str:
    container: AppContainer = request.app.state.container
    return container.settings.admin_token


async def require_admin(
    x_admin_token: str | None = Header(default=None),
    admin_token: str = Depends(_get_admin_token),
) -> None:
    """Ensure requests include a valid admin token."""
    if not admin_token or not x_admin_token or x_admin_token != admin_token:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED)


@router.get("/errors", dependencies=[Depends(require_admin)])
async def recent_errors(request: Request, limit: int = 20) -> dict[str, object]:
    """Return failures that were recovered with default values."""
    container: AppContainer = request.app.state.container
    return {
        "errors": [
            {
                "code": int(error.code),
                "name": error.code.name,
                "message": error.message,
                "details": error.details,
                "timestamp": error.timestamp.isoformat(),
            }
            for error in container.error_reporter.recent(limit)
        ]
    }


@router.post("/reset", dependencies=[Depends(require_admin)])
async def reset_data(request: Request) -> dict[str, str]:
    """Wipe all stored data and re-seed the defaults."""
    container: AppContainer = request.app.state.container
    container.repository.reset()
    container.people_service.ensure_defaults()
    container.error_reporter.clear()
    _logger.warning("All tracker data was reset")
    return {"status": "ok"}
