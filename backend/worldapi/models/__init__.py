"""
ORM models for the world dataset, user accounts and server-side sessions.

Importing this package registers every table on `Base.metadata`.
"""

from worldapi.models.city import City
from worldapi.models.country import Country
from worldapi.models.session import SessionRecord
from worldapi.models.user import User

__all__ = ["City", "Country", "SessionRecord", "User"]
