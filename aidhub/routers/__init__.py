"""API routers."""

from aidhub.routers.aid_requests import router as aid_requests_router
from aidhub.routers.auth import router as auth_router

__all__ = ["auth_router", "aid_requests_router"]
