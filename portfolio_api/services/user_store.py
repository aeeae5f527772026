"""In-memory store for registered users.

Each ``UserStore`` owns its own SQLite in-memory database, so an application
instance (or a test) gets a private set of accounts that disappears with the
process. Every read-modify-write sequence runs under the store's lock because
FastAPI serves sync handlers from a thread pool.
"""

import logging
from contextlib import contextmanager
from threading import RLock
from typing import Iterator

from sqlalchemy import func
from sqlalchemy.orm import Session, sessionmaker

from portfolio_api.core.errors import ConflictError, NotFoundError
from portfolio_api.database import build_session_factory
from portfolio_api.models.user import USER_ROLE, User

logger = logging.getLogger(__name__)

UPDATABLE_FIELDS = {"email", "name", "password_hash"}


class UserStore:
    def __init__(self, session_factory: sessionmaker | None = None):
        self._session_factory = session_factory or build_session_factory()
        self._lock = RLock()
        self._ids_issued = False

    @contextmanager
    def session(self) -> Iterator[Session]:
        with self._lock:
            db = self._session_factory()
            try:
                yield db
                db.commit()
            except Exception:
                db.rollback()
                raise
            finally:
                db.close()

    def count(self) -> int:
        with self.session() as db:
            return db.query(func.count(User.id)).scalar()

    def find_by_id(self, user_id: int) -> User | None:
        with self.session() as db:
            return db.get(User, user_id)

    def find_by_email(self, email: str) -> User | None:
        with self.session() as db:
            return db.query(User).filter(User.email == email).first()

    def insert(
        self,
        email: str,
        password_hash: str,
        name: str,
        role: str = USER_ROLE,
        preferred_id: int | None = None,
        require_empty: bool = False,
    ) -> User:
        """Add a user, enforcing email uniqueness.

        ``require_empty`` makes the insert conditional on the store holding no
        users at all, checked under the same lock as the insert.
        ``preferred_id`` is honoured only while this store has never issued an
        id; after that the user gets the next fresh id, so a token held by a
        deleted account can never resolve to the new user.
        """
        with self.session() as db:
            if require_empty and db.query(User.id).first() is not None:
                raise ConflictError("Users already exist. Cannot initialize admin.")
            if db.query(User.id).filter(User.email == email).first() is not None:
                raise ConflictError("User with this email already exists")

            user_id = None if self._ids_issued else preferred_id
            user = User(id=user_id, email=email, password_hash=password_hash, name=name, role=role)
            db.add(user)
            db.flush()
            self._ids_issued = True
            logger.info("Created %s account %s (id=%s)", role, email, user.id)
            return user

    def update(self, user_id: int, **changes) -> User:
        unknown = set(changes) - UPDATABLE_FIELDS
        if unknown:
            raise ValueError(f"Cannot update user fields: {sorted(unknown)}")

        with self.session() as db:
            user = db.get(User, user_id)
            if user is None:
                raise NotFoundError("User not found")

            new_email = changes.get("email")
            if new_email and new_email != user.email:
                taken = db.query(User.id).filter(User.email == new_email, User.id != user_id).first()
                if taken is not None:
                    raise ConflictError("Email already in use")

            for field, value in changes.items():
                setattr(user, field, value)
            db.flush()
            return user

    def delete(self, user_id: int) -> User:
        with self.session() as db:
            user = db.get(User, user_id)
            if user is None:
                raise NotFoundError("User not found")
            db.delete(user)
            return user
