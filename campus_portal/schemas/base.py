"""Schema Base Classes — shared Pydantic configuration for requests and responses."""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class RequestModel(BaseModel):
    """Strict inbound payload: unknown fields are a validation error."""
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="forbid",
        str_strip_whitespace=True,
    )


class ResponseModel(BaseModel):
    """Outbound payload built from ORM objects, serialized in camelCase."""
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class UserRef(ResponseModel):
    """Minimal user projection embedded in other resources."""
    id: str
    name: str
