"""Custom exception classes for the application"""

from typing import Optional, Dict, Any


class ConfigurationError(Exception):
    """Fatal startup misconfiguration (empty signing secret, bad settings)"""


class BaseAPIException(Exception):
    """Base exception for all API errors"""

    def __init__(
        self,
        message: str,
        status_code: int = 500,
        details: Optional[Dict[str, Any]] = None
    ):
        self.message = message
        self.status_code = status_code
        self.details = details or {}
        super().__init__(self.message)


# Authentication Errors
class AuthenticationError(BaseAPIException):
    """Base authentication error"""
    def __init__(self, message: str = "Authentication failed"):
        super().__init__(message, status_code=401)


class UnauthorizedError(AuthenticationError):
    """Bad credentials at login; never says which half was wrong"""
    def __init__(self, message: str = "Incorrect email or password"):
        super().__init__(message)


class UnauthenticatedError(AuthenticationError):
    """Missing, invalid, expired or revoked token"""
    def __init__(self, message: str = "Invalid or expired token"):
        super().__init__(message)


# Authorization Errors
class AuthorizationError(BaseAPIException):
    """Insufficient permissions"""
    def __init__(self, message: str = "Forbidden"):
        super().__init__(message, status_code=403)


# Resource Errors
class ResourceNotFoundError(BaseAPIException):
    """Resource not found"""
    def __init__(self, resource: str):
        super().__init__(f"{resource} not found", status_code=404)


class ResourceAlreadyExistsError(BaseAPIException):
    """Resource already exists"""
    def __init__(self, resource: str):
        super().__init__(f"{resource} already exists", status_code=409)


# Validation Errors
class ValidationError(BaseAPIException):
    """Validation error"""
    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, status_code=400, details=details)


# System Errors
class HashingError(BaseAPIException):
    """Password hashing primitive failed or stored hash is malformed"""
    def __init__(self, message: str = "Password hashing failed"):
        super().__init__(message, status_code=500)


class PersistenceError(BaseAPIException):
    """Database operation failed"""
    def __init__(self, message: str = "Database operation failed"):
        super().__init__(message, status_code=500)


class OperationCancelledError(BaseAPIException):
    """Request deadline passed before the operation completed"""
    def __init__(self, message: str = "Request deadline exceeded"):
        super().__init__(message, status_code=503)


# Token errors. These never reach the client directly; the session
# service collapses them into UnauthenticatedError.
class AccessTokenError(Exception):
    """Access token failed verification"""


class TokenMalformedError(AccessTokenError):
    """Token is not three base64url JSON segments or has unusable claims"""


class TokenSignatureError(AccessTokenError):
    """Signature does not match the signing secret"""


class TokenExpiredError(AccessTokenError):
    """Token is past its exp claim"""


class RefreshTokenError(Exception):
    """Refresh token cannot be exchanged"""


class RefreshTokenNotFoundError(RefreshTokenError):
    pass


class RefreshTokenRevokedError(RefreshTokenError):
    pass


class RefreshTokenExpiredError(RefreshTokenError):
    pass
