"""Error taxonomy shared by the services and the HTTP layer.

Each error carries the status code the API answers with; the handlers in
``portfolio_api.main`` turn them into ``{"error": message}`` bodies.
"""

from fastapi import status


class PortfolioAPIError(Exception):
    """Base class for errors that map to a fixed HTTP status."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = "Internal server error"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(PortfolioAPIError):
    """Required input is missing or malformed."""

    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Invalid request"


class ConflictError(PortfolioAPIError):
    """A uniqueness rule would be violated."""

    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Resource already exists"


class AuthError(PortfolioAPIError):
    """Credentials were rejected."""

    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Invalid email or password"


class InvalidTokenError(PortfolioAPIError):
    """A bearer token failed signature, format or expiry checks."""

    status_code = status.HTTP_403_FORBIDDEN
    default_message = "Invalid or expired token."


class MissingTokenError(InvalidTokenError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Access denied. No token provided."


class NotFoundError(PortfolioAPIError):
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Not found"


class InternalError(PortfolioAPIError):
    pass
