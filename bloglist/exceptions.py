"""
Bloglist — Custom Exception Hierarchy
======================================

What:  The errors the API reports to clients, one class per HTTP outcome.
How:   Every exception has a client-safe `message` and a `context` dict for
       the logs. main.register_exception_handlers() maps each class to its
       status code and the JSON body {error, message, request_id, details?}.
Who:   Raised by services, the bearer dependency and the rate limiter.

Exception Hierarchy:
    BloglistError (base)          → 500
    ├── ValidationError           → 400 missing fields, malformed id, registration rules
    ├── AuthenticationError       → 401 bad credentials, missing/invalid/expired token
    ├── NotFoundError             → 404 GET/PUT of an absent blog
    ├── DatabaseError             → 500 storage failure (generic message to client)
    └── RateLimitExceededError    → 429 with Retry-After
"""

from typing import Any, Dict, Optional


class BloglistError(Exception):
    """
    Base of all application errors.

    Attributes:
        message:  Text returned to the client
        context:  Extra detail for the server log; only ValidationError and
                  RateLimitExceededError expose it (as `details`)
    """

    def __init__(self, message: str = "internal error", context: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.context = dict(context or {})


class ValidationError(BloglistError):
    """
    Client input was rejected. `field` names the offending input when there
    is one and is copied into the context.
    """

    def __init__(
        self,
        message: str = "invalid input",
        field: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message, context)
        self.field = field
        if field:
            self.context["field"] = field


class AuthenticationError(BloglistError):
    """
    The request could not be tied to a user.

    Login failures use the default message whether the username is unknown
    or the password is wrong.
    """

    def __init__(self, message: str = "invalid username or password", context: Optional[Dict[str, Any]] = None):
        super().__init__(message, context)


class NotFoundError(BloglistError):
    """An id that parses but matches nothing. DELETE never raises this."""

    def __init__(
        self,
        resource: str = "resource",
        resource_id: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = {"resource": resource, **(context or {})}
        if resource_id:
            ctx["resource_id"] = resource_id
            message = f"{resource} '{resource_id}' not found"
        else:
            message = f"{resource} not found"
        super().__init__(message, ctx)


class DatabaseError(BloglistError):
    """A storage operation failed; details stay in the context and the log."""

    def __init__(self, message: str = "database unavailable", context: Optional[Dict[str, Any]] = None):
        super().__init__(message, context)


class RateLimitExceededError(BloglistError):
    """Too many requests from one client inside the window."""

    def __init__(self, retry_after: int = 60, context: Optional[Dict[str, Any]] = None):
        ctx = {**(context or {}), "retry_after": retry_after}
        super().__init__(f"too many requests, retry in {retry_after}s", ctx)
        self.retry_after = retry_after
