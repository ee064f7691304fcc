"""
After School Lessons Backend — Order Request/Response Schemas
===============================================================

What:  The typed command for POST /order and the 201 response body.

Request:
    {"name": "Jo", "phone": "555", "lessonIds": ["<lesson id>", ...], "spaces": 2}

Response (201):
    {
        "message": "Order created successfully",
        "orderId": "9d1e...",
        "order": {"_id": "9d1e...", "name": "Jo", "phone": "555",
                  "lessonIds": [...], "spaces": 2, "orderDate": "2024-..."}
    }

`spaces` is optional and stored exactly as sent (any JSON value); it is
never a reason to reject an order. `orderDate` never comes from
the client; it is stamped by OrderRepository.create().
"""

import uuid
from datetime import datetime
from typing import Any, List

from pydantic import AliasChoices, BaseModel, Field, field_validator
from pydantic import ValidationError as PydanticValidationError

from afterschool.exceptions import InvalidArgumentError
from afterschool.schemas.common import error_fields

REQUIRED_ORDER_FIELDS = ["name", "phone", "lessonIds", "spaces"]


class CreateOrderCommand(BaseModel):
    """Validated body of POST /order."""
    name: str
    phone: str
    lesson_ids: List[str] = Field(alias="lessonIds", min_length=1)
    # Free-form: echoed and stored as given
    spaces: Any = None

    model_config = {"populate_by_name": True, "str_strip_whitespace": True}

    @field_validator("name", "phone")
    @classmethod
    def not_blank(cls, v: str) -> str:
        if not v:
            raise ValueError("must not be empty")
        return v

    @field_validator("lesson_ids")
    @classmethod
    def no_blank_ids(cls, v: List[str]) -> List[str]:
        if any(not lesson_id for lesson_id in v):
            raise ValueError("lesson identifiers must not be empty")
        return v

    @classmethod
    def from_payload(cls, payload: Any) -> "CreateOrderCommand":
        """
        Build the command from a decoded JSON body.

        Raises:
            InvalidArgumentError: body is not an object, or name, phone or
                                  lessonIds is missing, empty or mistyped.
        """
        if not isinstance(payload, dict):
            raise InvalidArgumentError(
                message="Request body must be a JSON object",
                context={"required": REQUIRED_ORDER_FIELDS},
            )
        try:
            return cls.model_validate(payload)
        except PydanticValidationError as e:
            raise InvalidArgumentError(
                message="Missing required fields",
                context={"required": REQUIRED_ORDER_FIELDS, "fields": error_fields(e)},
            ) from e


class OrderResponse(BaseModel):
    """Echo of the stored order."""
    id: uuid.UUID = Field(validation_alias=AliasChoices("id", "_id"), serialization_alias="_id")
    name: str
    phone: str
    lesson_ids: List[str] = Field(
        validation_alias=AliasChoices("lesson_ids", "lessonIds"), serialization_alias="lessonIds"
    )
    spaces: Any = None
    order_date: datetime = Field(
        validation_alias=AliasChoices("order_date", "orderDate"), serialization_alias="orderDate"
    )

    model_config = {"from_attributes": True}


class CreateOrderResponse(BaseModel):
    message: str = Field(default="Order created successfully")
    order_id: uuid.UUID = Field(
        validation_alias=AliasChoices("order_id", "orderId"), serialization_alias="orderId"
    )
    order: OrderResponse
