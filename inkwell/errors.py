# inkwell/errors.py
from __future__ import annotations


class DomainError(ValueError):
    """
    Servis katmanının fırlattığı tüm hataların tabanı.
    Controller'lar mesaja değil `kind` / sınıfa bakarak HTTP koduna çevirir.
    """
    kind = "error"
    status_code = 400

    def __init__(self, message: str, **extra):
        super().__init__(message)
        self.message = message
        self.extra = extra

    def payload(self) -> dict:
        data = {"success": False, "error": self.kind, "message": self.message}
        data.update(self.extra)
        return data


class ValidationError(DomainError):
    kind = "validation_error"
    status_code = 400

    def __init__(self, message: str, reason: str = "invalid_field", **extra):
        super().__init__(message, reason=reason, **extra)
        self.reason = reason


class AuthError(DomainError):
    kind = "unauthorized"
    status_code = 401


class NotFoundError(DomainError):
    kind = "not_found"
    status_code = 404


class ConflictError(DomainError):
    kind = "conflict"
    status_code = 409


class RateLimitError(DomainError):
    kind = "rate_limited"
    status_code = 429

    def __init__(self, message: str, count: int, limit: int, retry_after_seconds: int):
        super().__init__(
            message,
            count=count,
            limit=limit,
            retry_after_seconds=retry_after_seconds,
        )
        self.count = count
        self.limit = limit
        self.retry_after_seconds = retry_after_seconds


class StoreError(DomainError):
    kind = "store_error"
    status_code = 500
