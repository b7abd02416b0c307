from __future__ import annotations


class AppError(Exception):
    """Base error for expected failures."""

    def __init__(
        self,
        message: str,
        *,
        http_status: int = 400,
        headers: dict[str, str] | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.http_status = http_status
        self.headers = headers


class ValidationError(AppError):
    def __init__(self, message: str = "invalid request"):
        super().__init__(message, http_status=400)


class AuthError(AppError):
    reason = "unauthorized"

    def __init__(self, message: str = "unauthorized"):
        super().__init__(message, http_status=401)


class ForbiddenError(AppError):
    reason = "forbidden"

    def __init__(self, message: str = "forbidden"):
        super().__init__(message, http_status=403)


class NotFoundError(AppError):
    def __init__(self, message: str = "not found"):
        super().__init__(message, http_status=404)


class ConflictError(AppError):
    def __init__(self, message: str = "already exists"):
        super().__init__(message, http_status=409)


class RateLimitError(AppError):
    def __init__(self, message: str, *, limit: int, remaining: int, reset_at: int, retry_after: int):
        super().__init__(
            message,
            http_status=429,
            headers={
                "Retry-After": str(retry_after),
                "X-RateLimit-Limit": str(limit),
                "X-RateLimit-Remaining": str(remaining),
                "X-RateLimit-Reset": str(reset_at),
            },
        )


class ConfigurationError(RuntimeError):
    """Raised at startup when the service cannot be configured safely."""


# Auth denials. The response message is fixed per class; the finer cause
# (expired vs malformed, deleted vs deactivated) only goes to the logs.


class MissingToken(AuthError):
    reason = "missing_token"

    def __init__(self) -> None:
        super().__init__("authorization token required")


class InvalidToken(AuthError):
    reason = "invalid_token"

    def __init__(self) -> None:
        super().__init__("invalid or expired token")


class InactiveOrUnknown(AuthError):
    reason = "inactive_or_unknown"

    def __init__(self) -> None:
        super().__init__("invalid or inactive user")


class TenantMismatch(ForbiddenError):
    reason = "tenant_mismatch"

    def __init__(self) -> None:
        super().__init__("user does not belong to this golf course")


class InsufficientRole(ForbiddenError):
    reason = "insufficient_role"

    def __init__(self, message: str = "insufficient permissions") -> None:
        super().__init__(message)
