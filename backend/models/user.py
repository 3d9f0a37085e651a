# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20261017v1
# ---------------------------------------------------------------------------
"""User ORM model."""

from sqlalchemy import Column, Integer, String, Enum, DateTime
from sqlalchemy.sql import func

from database import Base


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(200), nullable=False)
    # Stored lower-cased; the unique index is the only guard against two
    # concurrent registrations of the same address.
    email = Column(String(255), unique=True, nullable=False, index=True)
    phone = Column(String(32), nullable=False, server_default="")
    password_hash = Column(String(255), nullable=False)
    # Hash of the normalised passphrase.  NULL for the seeded admin, which
    # never goes through the passphrase step.
    passphrase_hash = Column(String(255), nullable=True)
    role = Column(Enum("admin", "user", name="user_role"), nullable=False, default="user")
    last_login = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )

    def __repr__(self):
        return f"<User {self.email}>"
