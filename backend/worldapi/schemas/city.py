"""
World API Backend — City Schemas
================================

What:  JSON shapes for reading a city and for creating one.
Who:   CityResponse is returned by GET /cities/{cityName} and by the world
       drill-down; CityInput is bound from POST /cities and echoed back.

Serialization rules:
    CityResponse   → None fields are omitted (NULL columns never appear as null)
    CityInput      → zero-valued fields ("" / 0) are omitted
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from worldapi.models.city import City


class CityResponse(BaseModel):
    """
    A stored city. Routes serialize it with `response_model_exclude_none=True`.

    Example:
        {"id": 1532, "name": "Tokyo", "countryCode": "JPN",
         "district": "Tokyo-to", "population": 7980230}
    """

    model_config = ConfigDict(populate_by_name=True)

    id: int = Field(description="Identity assigned by the database")
    name: Optional[str] = Field(default=None)
    country_code: Optional[str] = Field(default=None, alias="countryCode")
    district: Optional[str] = Field(default=None)
    population: Optional[int] = Field(default=None)

    @classmethod
    def from_model(cls, city: City) -> "CityResponse":
        return cls(
            id=city.id,
            name=city.name,
            country_code=city.country_code,
            district=city.district,
            population=city.population,
        )


class CityInput(BaseModel):
    """
    Body of POST /cities.

    Fields are not validated beyond their types and the 64-bit population
    range: a missing field keeps its zero value and empty strings are
    stored as-is. `id` is ignored on input and replaced
    with the generated identity before the body is echoed.
    """

    model_config = ConfigDict(populate_by_name=True)

    id: int = 0
    name: str = ""
    country_code: str = Field(default="", alias="countryCode")
    district: str = ""
    # Stored in a signed 64-bit column
    population: int = Field(default=0, ge=-(2**63), le=2**63 - 1)
