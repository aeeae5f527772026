from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from portfolio_api.auth import jwt_handler
from portfolio_api.core.errors import MissingTokenError
from portfolio_api.services.auth_service import AuthService
from portfolio_api.services.portfolio_store import PortfolioStore

# Missing credentials are reported by get_current_claims with the API's own
# error body instead of FastAPI's default.
security = HTTPBearer(auto_error=False)


def get_current_claims(
    request: Request,
    credentials: HTTPAuthorizationCredentials | None = Depends(security),
) -> dict:
    if credentials is None or not credentials.credentials:
        raise MissingTokenError()

    claims = jwt_handler.decode_access_token(credentials.credentials)
    request.state.user = claims
    return claims


def get_auth_service(request: Request) -> AuthService:
    return request.app.state.auth_service


def get_portfolio_store(request: Request) -> PortfolioStore:
    return request.app.state.portfolio_store
