"""
World API Backend — WorldStore (Data Access)
============================================

What:  Stateless adapter over the country / city / users tables.
How:   Each method builds exactly one SQLAlchemy statement, so every value
       travels as a bind parameter, and maps the result to an ORM row, a
       scalar or a list.
Who:   Constructed per request by dependencies.get_world_store() with that
       request's AsyncSession; used by the services.

Outcome contract:
    - zero rows where one was required  → NotFoundError
    - duplicate username on insert      → ConflictError
    - anything else the driver raises   → DatabaseError (logged here)
"""

import logging
from typing import Any, Awaitable, Callable, List, Optional, TypeVar

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from worldapi.exceptions import ConflictError, DatabaseError, NotFoundError
from worldapi.models.city import City
from worldapi.models.country import Country
from worldapi.models.user import User
from worldapi.schemas.city import CityInput

logger = logging.getLogger(__name__)

T = TypeVar("T")


class WorldStore:
    """
    Data access for one request.

    The store owns no state beyond the session it was given. Writers call
    commit() before returning; rollback on error stays with get_db_session().
    """

    def __init__(self, db: AsyncSession):
        self.db = db

    async def _run(self, operation: str, call: Callable[[], Awaitable[T]], **context: Any) -> T:
        try:
            return await call()
        except SQLAlchemyError as e:
            logger.error("Store operation %s failed: %s", operation, e)
            raise DatabaseError(
                message=f"Store operation {operation} failed",
                context={"operation": operation, "error_type": type(e).__name__, **context},
            ) from e

    async def commit(self, operation: str) -> None:
        """Commit the request transaction; a failure is a DatabaseError like any other."""
        await self._run(f"{operation}:commit", self.db.commit)

    async def _scalar(self, operation: str, stmt, **context: Any) -> Any:
        async def call():
            result = await self.db.execute(stmt)
            return result.scalars().first()

        return await self._run(operation, call, **context)

    async def _scalars(self, operation: str, stmt, **context: Any) -> List[Any]:
        async def call():
            result = await self.db.execute(stmt)
            return list(result.scalars().all())

        return await self._run(operation, call, **context)

    # ── Cities ────────────────────────────────────────────────────────────

    async def find_city_by_name(self, name: str) -> City:
        """First city with this exact name (lowest ID when several match)."""
        stmt = select(City).where(City.name == name).order_by(City.id).limit(1)
        city = await self._scalar("find_city_by_name", stmt, name=name)
        if city is None:
            raise NotFoundError(resource="city", resource_id=name)
        return city

    async def insert_city(self, city_input: CityInput) -> int:
        """Insert a city and return the identity the database generated."""
        city = City(
            name=city_input.name,
            country_code=city_input.country_code,
            district=city_input.district,
            population=city_input.population,
        )

        async def call() -> int:
            self.db.add(city)
            await self.db.flush()
            return city.id

        city_id = await self._run("insert_city", call, name=city_input.name)
        if not city_id:
            raise DatabaseError(
                message="Insert returned no identity",
                context={"operation": "insert_city", "name": city_input.name},
            )
        return city_id

    async def count_cities_by_country_code(self, code: str) -> int:
        stmt = select(func.count()).select_from(City).where(City.country_code == code)
        return int(await self._scalar("count_cities_by_country_code", stmt, code=code) or 0)

    async def nth_city_name_by_country(self, code: str, offset: int) -> str:
        """City name at `offset` (zero-based) in ascending name order."""
        stmt = (
            select(City.name)
            .where(City.country_code == code)
            .order_by(City.name.asc())
            .limit(1)
            .offset(offset)
        )
        rows = await self._scalars("nth_city_name_by_country", stmt, code=code, offset=offset)
        if not rows:
            raise NotFoundError(resource="city", resource_id=f"{code}#{offset}")
        return rows[0]

    async def list_city_names_by_country_code(self, code: str) -> List[str]:
        stmt = select(City.name).where(City.country_code == code).order_by(City.name.asc())
        return await self._scalars("list_city_names_by_country_code", stmt, code=code)

    async def find_city_by_country_code_and_name(self, code: str, name: str) -> City:
        stmt = (
            select(City)
            .where(City.country_code == code, City.name == name)
            .order_by(City.id)
            .limit(1)
        )
        city = await self._scalar(
            "find_city_by_country_code_and_name", stmt, code=code, name=name
        )
        if city is None:
            raise NotFoundError(resource="city", resource_id=f"{code}/{name}")
        return city

    # ── Countries ─────────────────────────────────────────────────────────

    async def find_country_code_by_name(self, name: str) -> str:
        stmt = select(Country.code).where(Country.name == name).limit(1)
        code: Optional[str] = await self._scalar("find_country_code_by_name", stmt, name=name)
        if code is None:
            raise NotFoundError(resource="country", resource_id=name)
        return code

    async def count_countries(self) -> int:
        stmt = select(func.count()).select_from(Country)
        return int(await self._scalar("count_countries", stmt) or 0)

    async def nth_country_name(self, offset: int) -> str:
        """Country name at `offset` (zero-based) in ascending name order."""
        stmt = select(Country.name).order_by(Country.name.asc()).limit(1).offset(offset)
        rows = await self._scalars("nth_country_name", stmt, offset=offset)
        if not rows:
            raise NotFoundError(resource="country", resource_id=f"#{offset}")
        return rows[0]

    async def list_country_names(self) -> List[str]:
        stmt = select(Country.name).order_by(Country.name.asc())
        return await self._scalars("list_country_names", stmt)

    # ── Users ─────────────────────────────────────────────────────────────

    async def count_users_by_username(self, username: str) -> int:
        stmt = select(func.count()).select_from(User).where(User.username == username)
        return int(await self._scalar("count_users_by_username", stmt) or 0)

    async def insert_user(self, username: str, hashed_password: str) -> None:
        user = User(username=username, hashed_password=hashed_password)

        async def call() -> None:
            self.db.add(user)
            await self.db.flush()

        try:
            await self._run("insert_user", call)
        except DatabaseError as e:
            if isinstance(e.__cause__, IntegrityError):
                logger.warning("Duplicate username rejected by the database: %s", username)
                raise ConflictError(context={"username": username}) from e
            raise

    async def find_user_by_username(self, username: str) -> User:
        stmt = select(User).where(User.username == username).limit(1)
        user = await self._scalar("find_user_by_username", stmt)
        if user is None:
            raise NotFoundError(resource="user")
        return user
