"""
After School Lessons Backend — Order Route Handler
====================================================

What:  POST /order: records a booking and echoes it back with its new ID.
Who:   Called by the storefront checkout form.

Request Flow:
    1. Decode body → CreateOrderCommand (400 on missing/empty fields)
    2. OrderRepository.create() stamps orderDate and inserts
    3. Return 201 with {message, orderId, order}
"""

import logging
from typing import Any

from fastapi import APIRouter, Body, Depends

from afterschool.repositories import OrderRepository
from afterschool.routes.dependencies import get_order_repository
from afterschool.schemas.common import ErrorResponse
from afterschool.schemas.order import CreateOrderCommand, CreateOrderResponse, OrderResponse

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Orders"])


@router.post(
    "/order",
    status_code=201,
    response_model=CreateOrderResponse,
    responses={
        201: {"description": "Order created", "model": CreateOrderResponse},
        400: {"description": "Missing required fields", "model": ErrorResponse},
        500: {"description": "Store failure", "model": ErrorResponse},
    },
    summary="Create a new order",
)
async def create_order(
    payload: Any = Body(
        default=None,
        examples=[{"name": "Jo", "phone": "555", "lessonIds": ["<lesson id>"], "spaces": 1}],
    ),
    orders: OrderRepository = Depends(get_order_repository),
) -> CreateOrderResponse:
    command = CreateOrderCommand.from_payload(payload)
    order = await orders.create(command)
    return CreateOrderResponse(
        message="Order created successfully",
        order_id=order.id,
        order=OrderResponse.model_validate(order),
    )
