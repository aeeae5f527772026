"""Account lifecycle: registration, login, admin bootstrap and self-service.

Operations raise the typed errors from ``portfolio_api.core.errors``; the HTTP
layer maps them to status codes. Password hashing always happens outside the
store lock since it is the slow part of every request.

Tokens are stateless, so changing a password or deleting an account does not
invalidate tokens issued before it. They stay valid until they expire.
"""

import logging

from portfolio_api.auth import passwords
from portfolio_api.core import config
from portfolio_api.core.errors import AuthError, ConflictError, NotFoundError, ValidationError
from portfolio_api.models.user import ADMIN_ROLE, USER_ROLE, User
from portfolio_api.services.user_store import UserStore

logger = logging.getLogger(__name__)

ADMIN_USER_ID = 1


class AuthService:
    def __init__(self, store: UserStore, bcrypt_rounds: int | None = None):
        self.store = store
        self._bcrypt_rounds = bcrypt_rounds

    def _hash(self, password: str) -> str:
        return passwords.hash_password(password, rounds=self._bcrypt_rounds)

    def register(self, email: str | None, password: str | None, name: str | None) -> User:
        if not email or not password or not name:
            raise ValidationError("Email, password, and name are required")

        # Cheap pre-check so a duplicate does not pay for a hash; the store
        # repeats it under its lock.
        if self.store.find_by_email(email) is not None:
            raise ConflictError("User with this email already exists")

        return self.store.insert(email=email, password_hash=self._hash(password), name=name, role=USER_ROLE)

    def initialize_admin(
        self,
        email: str | None = None,
        password: str | None = None,
        name: str | None = None,
    ) -> tuple[User, dict]:
        """Create the first account with the admin role.

        Only allowed while the store is empty. The admin gets id 1 unless the
        store has already issued ids to accounts that were deleted since. Returns the user together with
        the credentials used, since they may be the built-in defaults.
        """
        if self.store.count() > 0:
            raise ConflictError("Users already exist. Cannot initialize admin.")

        # Defaults only replace omitted fields; explicit empty strings are kept.
        if email is None:
            email = config.DEFAULT_ADMIN_EMAIL
        if password is None:
            password = config.DEFAULT_ADMIN_PASSWORD
        if name is None:
            name = config.DEFAULT_ADMIN_NAME

        user = self.store.insert(
            email=email,
            password_hash=self._hash(password),
            name=name,
            role=ADMIN_ROLE,
            preferred_id=ADMIN_USER_ID,
            require_empty=True,
        )
        return user, {"email": email, "password": password}

    def authenticate(self, email: str | None, password: str | None) -> User:
        if not email or not password:
            raise ValidationError("Email and password are required")

        user = self.store.find_by_email(email)
        if user is None or not self.verify_password(user, password):
            logger.warning("Failed login attempt for %s", email)
            raise AuthError("Invalid email or password")
        return user

    def verify_password(self, user: User, plain_password: str) -> bool:
        return passwords.verify_password(plain_password, user.password_hash)

    def change_password(self, user: User, current_password: str | None, new_password: str | None) -> User:
        if not current_password or not new_password:
            raise ValidationError("Current password and new password are required")
        if not self.verify_password(user, current_password):
            raise AuthError("Current password is incorrect")

        updated = self.store.update(user.id, password_hash=self._hash(new_password))
        user.password_hash = updated.password_hash
        logger.info("Password changed for user id=%s", user.id)
        return updated

    def get_self(self, claims: dict) -> User:
        user = self.store.find_by_id(claims["userId"])
        if user is None:
            raise NotFoundError("User not found")
        return user

    def update_profile(self, claims: dict, name: str | None = None, email: str | None = None) -> User:
        changes = {}
        if name:
            changes["name"] = name
        if email:
            changes["email"] = email
        return self.store.update(claims["userId"], **changes)

    def change_own_password(self, claims: dict, current_password: str | None, new_password: str | None) -> User:
        if not current_password or not new_password:
            raise ValidationError("Current password and new password are required")
        return self.change_password(self.get_self(claims), current_password, new_password)

    def delete_account(self, claims: dict) -> User:
        user = self.store.delete(claims["userId"])
        logger.info("Deleted account id=%s", user.id)
        return user
