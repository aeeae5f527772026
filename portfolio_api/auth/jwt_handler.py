from datetime import datetime, timedelta, timezone

import jwt

from portfolio_api.core import config
from portfolio_api.core.errors import InvalidTokenError
from portfolio_api.models.user import User

REQUIRED_CLAIMS = ["userId", "email", "role", "iat", "exp"]


def create_access_token(
    user: User,
    now: datetime | None = None,
    expires_in: timedelta | None = None,
) -> str:
    if expires_in is None:
        expires_in = config.JWT_EXPIRES_IN
    issued_at = (now or datetime.now(timezone.utc)).replace(microsecond=0)
    expire = issued_at + expires_in
    payload = {
        "userId": user.id,
        "email": user.email,
        "role": user.role,
        "iat": issued_at,
        "exp": expire,
    }
    return jwt.encode(payload, config.JWT_SECRET_KEY, algorithm=config.JWT_ALGORITHM)


def decode_access_token(token: str) -> dict:
    """Return the claims of a valid token.

    A token is rejected once the current time reaches its ``exp`` claim;
    no leeway is applied.
    """
    try:
        return jwt.decode(
            token,
            config.JWT_SECRET_KEY,
            algorithms=[config.JWT_ALGORITHM],
            options={"require": REQUIRED_CLAIMS},
        )
    except jwt.PyJWTError as exc:
        raise InvalidTokenError() from exc
