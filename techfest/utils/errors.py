"""
Taxonomie des erreurs applicatives.

Chaque erreur est une HTTPException portant un `code` stable (lisible par la
machine) en plus du message humain. Les services lèvent ces erreurs, le handler
enregistré dans app_setup.exceptions les sérialise en {"detail", "code"}.
"""
from typing import Any, Dict, List, Optional
from fastapi import HTTPException


class AppError(HTTPException):
    status_code = 500
    code = "internal_error"
    message = "Erreur interne"

    def __init__(self, detail: Optional[str] = None, extra: Optional[Dict[str, Any]] = None):
        super().__init__(status_code=self.status_code, detail=detail or self.message)
        self.extra = extra or {}

    def to_dict(self) -> Dict[str, Any]:
        body = {"detail": self.detail, "code": self.code}
        body.update(self.extra)
        return body


class Unauthorized(AppError):
    status_code = 401
    code = "unauthorized"
    message = "Missing or invalid credentials"


class Forbidden(AppError):
    status_code = 403
    code = "forbidden"
    message = "You are not allowed to access this resource"


class NotFound(AppError):
    status_code = 404
    code = "not_found"
    message = "Resource not found"


class InvalidInput(AppError):
    status_code = 400
    code = "invalid_input"
    message = "Invalid input"


class VerificationFailed(AppError):
    status_code = 400
    code = "verification_failed"
    message = "Payment verification failed"


class DuplicateRegistration(AppError):
    status_code = 409
    code = "duplicate_registration"
    message = "A registration already exists for these details"

    def __init__(self, fields: List[str], detail: Optional[str] = None):
        super().__init__(detail, extra={"duplicate_fields": list(fields)})
        self.fields = list(fields)


class GatewayRejected(AppError):
    status_code = 502
    code = "gateway_rejected"
    message = "The payment provider rejected the request"


class GatewayUnavailable(AppError):
    status_code = 503
    code = "payment_not_configured"
    message = "Payments are not configured"


class AuthUnavailable(AppError):
    status_code = 503
    code = "auth_unavailable"
    message = "Authentication is not configured"


class StoreUnavailable(AppError):
    status_code = 503
    code = "store_unavailable"
    message = "The registration store is unavailable, please retry"
