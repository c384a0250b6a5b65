"""Base schema configuration."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class BaseSchema(BaseModel):
    """
    Base schema with common configuration.

    Records are stored and served with camelCase keys (``assistantId``,
    ``threadId``, ``createdAt``); snake_case names are accepted on input too.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        validate_by_name=True,
        validate_by_alias=True,
        serialize_by_alias=True,
        from_attributes=True,
        str_strip_whitespace=True,
        validate_assignment=True,
    )


class TimestampMixin(BaseSchema):
    """Mixin for createdAt/updatedAt timestamps."""

    created_at: datetime | None = None
    updated_at: datetime | None = None


class IDMixin(BaseSchema):
    """Mixin for the opaque string identifier."""

    id: str


class StatusMessage(BaseSchema):
    """Confirmation body returned by delete endpoints."""

    message: str
