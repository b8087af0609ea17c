"""
World API Backend — Country SQLAlchemy Model
============================================

What:  ORM model for the read-only `country` table.
Who:   Queried by WorldStore for name → code lookups and country listings.

Only `Code` and `Name` are read by the service. The remaining columns exist
so a freshly created schema can hold the usual world dataset; all of them
are nullable.
"""

from typing import Optional

from sqlalchemy import BigInteger, Index, String
from sqlalchemy.orm import Mapped, mapped_column

from worldapi.database import Base


class Country(Base):
    __tablename__ = "country"

    code: Mapped[str] = mapped_column("Code", String(3), primary_key=True)
    name: Mapped[str] = mapped_column("Name", String(52), nullable=False, default="")
    continent: Mapped[Optional[str]] = mapped_column("Continent", String(32), nullable=True)
    region: Mapped[Optional[str]] = mapped_column("Region", String(26), nullable=True)
    population: Mapped[Optional[int]] = mapped_column("Population", BigInteger, nullable=True)

    # Name lookups and ordered listings both go through this index
    __table_args__ = (Index("idx_country_name", "Name"),)

    def __repr__(self) -> str:
        return f"<Country(code={self.code!r}, name={self.name!r})>"
