"""
Base request/response models.

The front-end speaks camelCase JSON (albumName, projectId, ...). Models use
snake_case attributes with a camelCase alias generator, and every response
carries the {"ok": true} envelope.
"""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class GatewayRequest(BaseModel):
    """
    Base for JSON request bodies.

    Numeric JSON values are accepted for string fields, so
    {"projectId": 42} validates the same as {"projectId": "42"}.
    """
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        coerce_numbers_to_str=True,
    )


class GatewayResponse(BaseModel):
    """Base for success responses."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    ok: bool = True
