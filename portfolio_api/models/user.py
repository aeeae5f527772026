"""User model definitions."""

from pydantic import BaseModel
from sqlalchemy import Column, Integer, String

from portfolio_api.database import Base

USER_ROLE = "user"
ADMIN_ROLE = "admin"


class User(Base):
    """Represents a registered account."""
    __tablename__ = "users"
    # AUTOINCREMENT keeps SQLite from handing out the id of a deleted row again.
    __table_args__ = {"sqlite_autoincrement": True}

    id = Column(Integer, primary_key=True, index=True)
    email = Column(String, unique=True, index=True, nullable=False)
    password_hash = Column(String, nullable=False)
    name = Column(String, nullable=False)
    role = Column(String, nullable=False, default=USER_ROLE)  # user/admin


class UserResponse(BaseModel):
    """Client-facing view of a user; never includes the password hash."""
    id: int
    email: str
    name: str
    role: str

    class Config:
        from_attributes = True
