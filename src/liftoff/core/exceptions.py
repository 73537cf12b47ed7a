"""Custom exceptions for Liftoff."""

from typing import Any, Optional


class LiftoffError(Exception):
    """Base exception for all liftoff errors."""
    
    def __init__(self, message: str, code: Optional[str] = None):
        super().__init__(message)
        self.code = code


class CredentialsError(LiftoffError):
    """No usable API key could be resolved."""
    pass


class ApiError(LiftoffError):
    """Heroku API answered with a non-success status."""
    
    def __init__(self, message: str, status_code: int, body: Any = None):
        super().__init__(message, code=f"http_{status_code}")
        self.status_code = status_code
        self.body = body


class UnexpectedResponseError(LiftoffError):
    """Response body did not have the expected shape."""
    
    def __init__(self, message: str, body: Any = None):
        super().__init__(message, code="unexpected_response")
        self.body = body


class RendezvousError(LiftoffError):
    """Rendezvous session could not be established or stalled."""
    pass
