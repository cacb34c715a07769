"""Common Pydantic schemas used across the application."""

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class BaseSchema(BaseModel):
    """Base schema; documents use camelCase keys on the wire."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        str_strip_whitespace=True,
        extra="ignore",
    )

    def to_document(self, partial: bool = False) -> dict[str, Any]:
        """
        Dump the schema as a camelCased document.

        Partial dumps keep only the fields the client sent, for updates.
        """
        return self.model_dump(
            by_alias=True,
            mode="json",
            exclude_unset=partial,
            exclude_none=not partial,
        )


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    version: str
    redis: Optional[str] = None
