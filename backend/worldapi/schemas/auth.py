"""
World API Backend — Auth Schemas
================================

What:  Signup/login credentials and the /me response.
"""

from pydantic import BaseModel, Field


class Credentials(BaseModel):
    """
    Body of POST /signup and POST /login (JSON or form fields).

    Both fields default to "" so a missing field and an empty field take
    the same "Username or Password is empty" path.
    """

    username: str = ""
    password: str = ""


class MeResponse(BaseModel):
    username: str = Field(description="Name stored in the caller's session")
