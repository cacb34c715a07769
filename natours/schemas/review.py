"""Review schemas for request validation."""

from typing import Optional

from pydantic import Field

from natours.schemas.common import BaseSchema


class ReviewCreate(BaseSchema):
    """Schema for creating a review."""

    review: str = Field(..., min_length=1, max_length=2000)
    rating: int = Field(..., ge=1, le=5)
    tour: str = Field(..., min_length=1)
    user: str = Field(..., min_length=1)


class ReviewUpdate(BaseSchema):
    """Schema for updating a review."""

    review: Optional[str] = Field(default=None, min_length=1, max_length=2000)
    rating: Optional[int] = Field(default=None, ge=1, le=5)
