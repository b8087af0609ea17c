"""
World API Backend — User SQLAlchemy Model
=========================================

What:  ORM model for the `users` table (username + bcrypt hash).
Who:   Written once by signup, read by login.

`Username` is the primary key, so the database rejects a second row with
the same name even when two signups race past the existence check.
"""

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column

from worldapi.database import Base


class User(Base):
    __tablename__ = "users"

    username: Mapped[str] = mapped_column("Username", String(255), primary_key=True)
    # bcrypt output is 60 characters
    hashed_password: Mapped[str] = mapped_column("HashedPass", String(255), nullable=False)

    def __repr__(self) -> str:
        # Never include the hash
        return f"<User(username={self.username!r})>"
