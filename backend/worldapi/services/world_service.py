"""
World API Backend — World Service
=================================

What:  City lookups and the three-way world browsing endpoint.
How:   Composes WorldStore calls. Listings use either one ordered query or
       the count-then-offset loop, depending on WORLD_ENUMERATION.
Who:   Called by routes/cities.py and routes/world.py.

World Branches (GET /world/{countryName}/{cityName}):
    countryName == "allCountries"   → every country name, ascending
    cityName == "allCities"         → resolve country code, then its city names
    otherwise                       → resolve country code, then that one city

The country lookup always runs first, so an unknown country is a 404 before
any city query is issued.
"""

import logging
from typing import List, Union

from worldapi.config import Settings
from worldapi.schemas.city import CityInput, CityResponse
from worldapi.services.world_store import WorldStore

logger = logging.getLogger(__name__)

ALL_COUNTRIES = "allCountries"
ALL_CITIES = "allCities"


class WorldService:
    def __init__(self, store: WorldStore, settings: Settings):
        self.store = store
        self.use_offset_loop = settings.world_enumeration == "offset"

    # ── Cities ────────────────────────────────────────────────────────────

    async def get_city(self, city_name: str) -> CityResponse:
        city = await self.store.find_city_by_name(city_name)
        return CityResponse.from_model(city)

    async def create_city(self, city_input: CityInput) -> CityInput:
        city_id = await self.store.insert_city(city_input)
        await self.store.commit("insert_city")
        logger.info("City created: id=%d name=%s", city_id, city_input.name)
        return city_input.model_copy(update={"id": city_id})

    # ── World ─────────────────────────────────────────────────────────────

    async def country_names(self) -> List[str]:
        if not self.use_offset_loop:
            return await self.store.list_country_names()

        total = await self.store.count_countries()
        return [await self.store.nth_country_name(i) for i in range(total)]

    async def city_names(self, country_code: str) -> List[str]:
        if not self.use_offset_loop:
            return await self.store.list_city_names_by_country_code(country_code)

        total = await self.store.count_cities_by_country_code(country_code)
        return [
            await self.store.nth_city_name_by_country(country_code, i)
            for i in range(total)
        ]

    async def world_info(
        self, country_name: str, city_name: str
    ) -> Union[List[str], CityResponse]:
        logger.debug("World lookup: country=%s city=%s", country_name, city_name)

        if country_name == ALL_COUNTRIES:
            return await self.country_names()

        country_code = await self.store.find_country_code_by_name(country_name)
        if city_name == ALL_CITIES:
            return await self.city_names(country_code)

        city = await self.store.find_city_by_country_code_and_name(country_code, city_name)
        return CityResponse.from_model(city)
