"""
World API Backend — Server-Side Session Model
=============================================

What:  One row per browser session, keyed by the id carried in the signed
       session cookie.
How:   `payload` holds the JSON of services.session_gate.SessionPayload.
       `expires_at` is a Unix timestamp; rows past it are treated as empty.
Who:   Read and written only by SessionGate.
"""

from sqlalchemy import BigInteger, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from worldapi.database import Base


class SessionRecord(Base):
    __tablename__ = "sessions"

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    payload: Mapped[str] = mapped_column(Text, nullable=False, default="{}")
    expires_at: Mapped[int] = mapped_column(BigInteger, nullable=False, index=True)

    def __repr__(self) -> str:
        return f"<SessionRecord(id={self.id[:8]}..., expires_at={self.expires_at})>"
