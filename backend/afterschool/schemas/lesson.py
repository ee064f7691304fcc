"""
After School Lessons Backend — Lesson Request/Response Schemas
================================================================

What:  The wire shape of a lesson, the seed-file shape, and the typed
       command for PUT /lessons/{id}.
How:   Response models read ORM objects (`from_attributes`). Commands are
       built from the raw JSON body with `from_payload()`, which turns any
       shape mismatch into InvalidArgumentError (HTTP 400) instead of
       FastAPI's default 422.

Wire format:
    {
        "_id": "0b6f8c1e-...",
        "subject": "Mathematics",
        "location": "Hendon",
        "price": 100,
        "spaces": 5,
        "icon": "fa-calculator",
        "image": "mathematics.svg",
        "description": "Advanced math tutoring for all levels"
    }
"""

import uuid
from typing import Any, Optional, Union

from pydantic import AliasChoices, BaseModel, Field, StrictInt, field_serializer
from pydantic import ValidationError as PydanticValidationError

from afterschool.exceptions import InvalidArgumentError
from afterschool.schemas.common import error_fields, error_types

# Largest value the INTEGER spaces column holds (PostgreSQL int4)
MAX_SPACES = 2_147_483_647


class LessonResponse(BaseModel):
    """One lesson as returned by GET /lessons, GET /search and PUT /lessons/{id}."""
    id: uuid.UUID = Field(
        validation_alias=AliasChoices("id", "_id"),
        serialization_alias="_id",
        description="Lesson identifier",
    )
    subject: str
    location: str
    price: float = Field(ge=0)
    spaces: int = Field(ge=0)
    icon: Optional[str] = None
    image: Optional[str] = None
    description: Optional[str] = None

    model_config = {"from_attributes": True}

    @field_serializer("price")
    def serialize_price(self, price: float) -> Union[int, float]:
        """Whole prices go out as integers (100, not 100.0)."""
        return int(price) if float(price).is_integer() else price


class LessonCreate(BaseModel):
    """
    One entry of the seed file (lessons.json).

    Unknown keys are ignored so older seed files keep loading.
    """
    subject: str = Field(min_length=1)
    location: str = Field(min_length=1)
    price: float = Field(ge=0)
    spaces: int = Field(ge=0, le=MAX_SPACES)
    icon: Optional[str] = None
    image: Optional[str] = None
    description: Optional[str] = None

    model_config = {"str_strip_whitespace": True}


class UpdateSpacesCommand(BaseModel):
    """Validated body of PUT /lessons/{id}: `{"spaces": <integer >= 0>}`."""
    spaces: StrictInt = Field(ge=0, le=MAX_SPACES)

    @classmethod
    def from_payload(cls, payload: Any) -> "UpdateSpacesCommand":
        """
        Build the command from a decoded JSON body.

        Raises:
            InvalidArgumentError: body is not an object, spaces is missing,
                                  not an integer (booleans included), negative,
                                  or larger than MAX_SPACES.
        """
        if not isinstance(payload, dict):
            raise InvalidArgumentError(message="Request body must be a JSON object")
        try:
            return cls.model_validate(payload)
        except PydanticValidationError as e:
            if "greater_than_equal" in error_types(e):
                raise InvalidArgumentError(
                    message="Spaces cannot be negative",
                    field="spaces",
                ) from e
            if "less_than_equal" in error_types(e):
                raise InvalidArgumentError(
                    message=f"Spaces cannot exceed {MAX_SPACES}",
                    field="spaces",
                ) from e
            raise InvalidArgumentError(
                message="Please provide a valid number for spaces",
                field="spaces",
                context={"fields": error_fields(e)},
            ) from e
