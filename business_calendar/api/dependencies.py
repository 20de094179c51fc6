"""FastAPI dependencies shared by the calendar and admin routers."""

from __future__ import annotations

import secrets

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPBasic, HTTPBasicCredentials
from loguru import logger

from business_calendar.calendar.processor import SyncScheduler
from business_calendar.core.settings import Settings
from business_calendar.store.base import Store

ADMIN_USER = "admin"
REALM = "business-calendar"

basic_auth = HTTPBasic(realm=REALM, auto_error=False)


def get_store(request: Request) -> Store:
    return request.app.state.store


def get_scheduler(request: Request) -> SyncScheduler:
    return request.app.state.scheduler


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def require_admin(
    credentials: HTTPBasicCredentials | None = Depends(basic_auth),
    settings: Settings = Depends(get_settings),
) -> str:
    """Check HTTP basic credentials of the admin user.

    Admin endpoints are closed entirely when no admin password is configured.
    """
    passwd = settings.web_admin_passwd
    authorized = (
        bool(passwd)
        and credentials is not None
        and secrets.compare_digest(credentials.username.encode(), ADMIN_USER.encode())
        and secrets.compare_digest(credentials.password.encode(), passwd.encode())
    )
    if not authorized:
        logger.warning("[API] Rejected admin request: invalid credentials")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="unauthorized",
            headers={"WWW-Authenticate": f'Basic realm="{REALM}"'},
        )
    return ADMIN_USER
