"""Schemas shared by every service."""
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """
    Base schema exposing camelCase keys on the wire.

    Accepts both camelCase and snake_case on input and reads ORM attributes.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class MessageResponse(BaseModel):
    """Confirmation body returned by delete endpoints."""

    message: str

