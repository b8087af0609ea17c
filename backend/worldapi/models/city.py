"""
World API Backend — City SQLAlchemy Model
=========================================

What:  ORM model representing the `city` table.
Who:   Read and written by WorldStore; serialized by schemas.city.CityResponse.

Every column except the identity is nullable. A NULL column stays `None` on
the model and is omitted from the JSON representation.
"""

from typing import Optional

from sqlalchemy import BigInteger, ForeignKey, Index, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from worldapi.database import Base


class City(Base):
    """
    One city row.

    Query Patterns:
        - By name:                 WHERE Name = :name
        - By country, ordered:     WHERE CountryCode = :code ORDER BY Name
        - By country and name:     WHERE CountryCode = :code AND Name = :name
    """

    __tablename__ = "city"

    # Assigned by the database on insert and echoed back by POST /cities
    id: Mapped[int] = mapped_column("ID", Integer, primary_key=True, autoincrement=True)
    name: Mapped[Optional[str]] = mapped_column("Name", String(35), nullable=True)
    country_code: Mapped[Optional[str]] = mapped_column(
        "CountryCode",
        String(3),
        ForeignKey("country.Code"),
        nullable=True,
    )
    district: Mapped[Optional[str]] = mapped_column("District", String(20), nullable=True)
    population: Mapped[Optional[int]] = mapped_column("Population", BigInteger, nullable=True)

    __table_args__ = (
        Index("idx_city_name", "Name"),
        Index("idx_city_country_name", "CountryCode", "Name"),
    )

    def __repr__(self) -> str:
        return f"<City(id={self.id}, name={self.name!r}, country_code={self.country_code!r})>"
