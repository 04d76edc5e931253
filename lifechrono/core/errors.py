"""Domain exceptions shared by services and controllers."""

from __future__ import annotations


class LifeChronoError(Exception):
    """Base exception carrying an API error code and HTTP status."""

    code = "error"
    status = 400

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.code)
        self.message = message or self.code

    def to_dict(self) -> dict:
        return {"ok": False, "error": self.code, "message": self.message}


class ValidationError(LifeChronoError):
    """Input violates a domain rule (duration, overlap, goals, mood score)."""

    code = "validation_error"
    status = 400


class NotFoundError(LifeChronoError):
    code = "not_found"
    status = 404


class AuthorizationError(LifeChronoError):
    """Resource exists but belongs to another user."""

    code = "forbidden"
    status = 403


class ExternalServiceError(LifeChronoError):
    """Generative model call failed; callers degrade to the fallback analyzer."""

    code = "external_service_error"
    status = 502
