from __future__ import annotations

from fastapi import APIRouter, Depends, Request

from golf_course_admin.auth.dependencies import get_system_principal
from golf_course_admin.domain.entities.auth import LoginRequest
from golf_course_admin.domain.entities.system_user import SystemUser
from golf_course_admin.services.auth_service import AuthService
from golf_course_admin.services.rate_limit import LoginRateLimiter
from golf_course_admin.utils.response import success
from golf_course_admin.configs.logging_config import get_logger

log = get_logger(__name__)

router = APIRouter(prefix="/api/auth", tags=["auth"])


def _service(request: Request) -> AuthService:
    return request.app.state.auth_service


def _limiter(request: Request) -> LoginRateLimiter:
    return request.app.state.login_rate_limiter


@router.post("/login")
async def login(request: Request, body: LoginRequest) -> dict:
    await _limiter(request).check("system", request)
    username, password = body.credentials(allow_name_alias=True)
    log.info("auth.login.start typ=system username=%s", username)
    data = await _service(request).login_system(username, password)
    return success(data)


@router.post("/logout")
async def logout(principal: SystemUser = Depends(get_system_principal)) -> dict:
    # tokens are stateless; the client discards its copy
    log.info("auth.logout typ=system user_id=%s", principal.id)
    return success(message="Logged out successfully")


@router.get("/profile")
async def profile(principal: SystemUser = Depends(get_system_principal)) -> dict:
    return success({"user": principal.public()})
