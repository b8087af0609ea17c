"""
World API Backend — World Route Handler
=======================================

What:  GET /world/{countryName}/{cityName}.
How:   WorldService picks the branch; this route only serializes the result.

Examples:
    /world/allCountries/x       → ["Afghanistan", "Albania", ...]
    /world/Japan/allCities      → ["Akashi", "Akita", ...]
    /world/Japan/Tokyo          → {"id": 1532, "name": "Tokyo", ...}
"""

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from worldapi.dependencies import get_world_service
from worldapi.schemas.city import CityResponse
from worldapi.services.world_service import WorldService

router = APIRouter(tags=["World"])


@router.get(
    "/world/{country_name}/{city_name}",
    response_model=None,
    responses={
        200: {"description": "Array of names, or a single city"},
        404: {"description": "Country or city not found"},
    },
    summary="Browse countries and their cities",
)
async def world_info(
    country_name: str,
    city_name: str,
    service: WorldService = Depends(get_world_service),
) -> JSONResponse:
    result = await service.world_info(country_name, city_name)
    if isinstance(result, CityResponse):
        return JSONResponse(content=result.model_dump(by_alias=True, exclude_none=True))
    return JSONResponse(content=result)
