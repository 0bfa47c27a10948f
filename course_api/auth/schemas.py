"""Public user projection shared by the auth dependency and the routes."""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class UserProfile(BaseModel):
    """Fields of a user that are safe to show other callers. Never the hash."""

    model_config = ConfigDict(
        from_attributes=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )

    id: int
    first_name: str
    last_name: str
    email_address: str
