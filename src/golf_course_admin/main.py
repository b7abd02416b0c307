from __future__ import annotations

import time
import uuid
from dataclasses import dataclass
from typing import Any

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from golf_course_admin.auth.jwt import TokenService
from golf_course_admin.auth.passwords import PasswordHasher
from golf_course_admin.auth.resolver import CourseAuthResolver, SystemAuthResolver
from golf_course_admin.configs.logging_config import get_logger, setup_logging
from golf_course_admin.configs.settings import Settings, get_settings
from golf_course_admin.errors import AppError
from golf_course_admin.repositories.course_user_repository import CourseUserRepository
from golf_course_admin.repositories.device_repository import DeviceRepository
from golf_course_admin.repositories.golf_course_repository import GolfCourseRepository
from golf_course_admin.repositories.mongo import get_mongo_client, get_mongo_db
from golf_course_admin.repositories.redis_client import redis_client
from golf_course_admin.repositories.system_user_repository import SystemUserRepository
from golf_course_admin.routers.admin_router import router as admin_router
from golf_course_admin.routers.auth_router import router as auth_router
from golf_course_admin.routers.course_router import router as course_router
from golf_course_admin.routers.health_router import router as health_router
from golf_course_admin.services.auth_service import AuthService
from golf_course_admin.services.course_user_service import CourseUserService
from golf_course_admin.services.device_service import DeviceService
from golf_course_admin.services.golf_course_service import GolfCourseService
from golf_course_admin.services.rate_limit import LoginRateLimiter
from golf_course_admin.services.system_user_service import SystemUserService
from golf_course_admin.utils.response import failure

log = get_logger(__name__)


@dataclass
class Stores:
    """Backing stores; built from Mongo/Redis on startup unless supplied."""

    system_users: SystemUserRepository
    course_users: CourseUserRepository
    golf_courses: GolfCourseRepository
    devices: DeviceRepository
    redis: Any = None


def _validation_message(exc: RequestValidationError) -> str:
    errors = exc.errors()
    if not errors:
        return "invalid request"
    first = errors[0]
    field = ".".join(str(p) for p in first.get("loc", ()) if p not in ("body", "query", "path"))
    msg = first.get("msg", "invalid value")
    return f"{field}: {msg}" if field else msg


def create_app(
    settings: Settings | None = None,
    *,
    stores: Stores | None = None,
    token_service: TokenService | None = None,
) -> FastAPI:
    settings = settings or get_settings()
    # resolve the signing secret now so a strict deployment without one fails to start
    tokens = token_service or TokenService.from_settings(settings)

    app = FastAPI(title="golf_course_admin", version="0.1.0")
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins(),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def request_logging_middleware(request: Request, call_next):
        start = time.perf_counter()
        method = request.method
        path = request.url.path
        request_id = (
            request.headers.get("x-request-id")
            or request.headers.get("x-correlation-id")
            or uuid.uuid4().hex
        )

        log.info("request.start method=%s path=%s request_id=%s", method, path, request_id)
        response = None
        try:
            response = await call_next(request)
            response.headers["X-Request-ID"] = request_id
        finally:
            elapsed_ms = int((time.perf_counter() - start) * 1000)
            status_code = getattr(response, "status_code", "unknown")
            log.info(
                "request.end method=%s path=%s status=%s request_id=%s elapsed_ms=%s",
                method,
                path,
                status_code,
                request_id,
                elapsed_ms,
            )
        return response

    app.include_router(health_router)
    app.include_router(auth_router)
    app.include_router(admin_router)
    app.include_router(course_router)

    @app.exception_handler(AppError)
    async def app_error_handler(_: Request, exc: AppError) -> JSONResponse:
        log.info("request.error type=app_error status=%s message=%s", exc.http_status, exc.message)
        return JSONResponse(status_code=exc.http_status, content=failure(exc.message), headers=exc.headers)

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(_: Request, exc: RequestValidationError) -> JSONResponse:
        message = _validation_message(exc)
        log.info("request.error type=validation message=%s", message)
        return JSONResponse(status_code=400, content=failure(message))

    @app.exception_handler(Exception)
    async def unhandled_error_handler(_: Request, exc: Exception) -> JSONResponse:
        log.exception("Unhandled error: %s", str(exc))
        return JSONResponse(status_code=500, content=failure("internal server error"))

    @app.on_event("startup")
    async def startup() -> None:
        setup_logging(settings.LOG_LEVEL)

        wired = stores
        if wired is None:
            mongo_client = get_mongo_client(settings)
            mongo_db = get_mongo_db(mongo_client, settings)
            app.state.mongo_client = mongo_client

            wired = Stores(
                system_users=SystemUserRepository(mongo_db, settings),
                course_users=CourseUserRepository(mongo_db, settings),
                golf_courses=GolfCourseRepository(mongo_db, settings),
                devices=DeviceRepository(mongo_db, settings),
                redis=await redis_client.connect_optional(settings.redis_url),
            )
            log.info("startup.ensure_indexes begin")
            await wired.system_users.ensure_indexes()
            await wired.course_users.ensure_indexes()
            await wired.devices.ensure_indexes()
            log.info("startup.ensure_indexes done")

        hasher = PasswordHasher(rounds=settings.BCRYPT_ROUNDS)

        app.state.settings = settings
        app.state.stores = wired
        app.state.token_service = tokens
        app.state.system_resolver = SystemAuthResolver(tokens, wired.system_users)
        app.state.course_resolver = CourseAuthResolver(tokens, wired.course_users, wired.golf_courses)
        app.state.login_rate_limiter = LoginRateLimiter(
            wired.redis,
            attempts=settings.LOGIN_RATE_LIMIT_ATTEMPTS,
            window_seconds=settings.LOGIN_RATE_LIMIT_WINDOW_SECONDS,
            enabled=settings.LOGIN_RATE_LIMIT_ENABLED,
            trust_proxy_headers=settings.TRUST_PROXY_HEADERS,
        )

        app.state.auth_service = AuthService(
            system_users=wired.system_users,
            course_users=wired.course_users,
            golf_courses=wired.golf_courses,
            hasher=hasher,
            tokens=tokens,
        )
        app.state.system_user_service = SystemUserService(wired.system_users, hasher)
        app.state.golf_course_service = GolfCourseService(wired.golf_courses, wired.course_users, wired.devices)
        app.state.device_service = DeviceService(wired.devices, wired.golf_courses)
        app.state.course_user_service = CourseUserService(wired.course_users, wired.golf_courses, hasher)

        await app.state.system_user_service.bootstrap_admin(settings)
        log.info("startup.done env=%s", settings.ENVIRONMENT)

    @app.on_event("shutdown")
    async def shutdown() -> None:
        log.info("shutdown.begin")
        await redis_client.close()
        mongo_client = getattr(app.state, "mongo_client", None)
        if mongo_client is not None:
            mongo_client.close()
        log.info("shutdown.done")

    return app


def get_app() -> FastAPI:
    """ASGI factory: `uvicorn golf_course_admin.main:get_app --factory`."""
    return create_app()
