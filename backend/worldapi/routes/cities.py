"""
World API Backend — City Route Handlers
=======================================

What:  GET /cities/{cityName} and POST /cities.
How:   Binds input, delegates to WorldService, returns JSON. Store outcomes
       become responses through the global exception handlers:
       NotFoundError → 404 (empty), DatabaseError → 500 (empty).
"""

import logging

from fastapi import APIRouter, Depends, Request

from worldapi.binding import bind_body
from worldapi.dependencies import get_world_service
from worldapi.schemas.city import CityInput, CityResponse
from worldapi.services.world_service import WorldService

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Cities"])


@router.get(
    "/cities/{city_name}",
    response_model=CityResponse,
    response_model_exclude_none=True,
    responses={
        404: {"description": "No city with this name"},
        500: {"description": "Store failure"},
    },
    summary="Get a city by exact name",
)
async def get_city(
    city_name: str,
    service: WorldService = Depends(get_world_service),
) -> CityResponse:
    return await service.get_city(city_name)


@router.post(
    "/cities",
    status_code=201,
    response_model=CityInput,
    response_model_exclude_defaults=True,
    responses={
        400: {"description": "Body is not a valid city"},
        500: {"description": "Insert failed"},
    },
    summary="Create a city",
    description=(
        "Accepts {name, countryCode, district, population} as JSON or form fields "
        "and echoes the body back with the generated id. Fields with zero values "
        "are omitted from the response."
    ),
)
async def create_city(
    request: Request,
    service: WorldService = Depends(get_world_service),
) -> CityInput:
    city_input = await bind_body(request, CityInput, json_error=True)
    return await service.create_city(city_input)
