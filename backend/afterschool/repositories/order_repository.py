"""
After School Lessons Backend — Order Repository
=================================================

What:  Façade over the `orders` collection. Insert-only: there is no read,
       update or delete for orders anywhere in the API.
"""

import logging
from datetime import datetime, timezone

from afterschool.models.order import Order
from afterschool.repositories.base import BaseRepository
from afterschool.schemas.order import CreateOrderCommand

logger = logging.getLogger(__name__)


class OrderRepository(BaseRepository):
    """Operations on the `orders` collection."""

    async def create(self, command: CreateOrderCommand) -> Order:
        """
        Persist a new order stamped with the current server time.

        `command` has already rejected missing or empty name, phone and
        lessonIds. Requested spaces are stored as given; they are not
        checked against, or subtracted from, the lessons' remaining spaces.

        Raises:
            StoreUnavailableError: store failure or timeout.
        """
        order = Order(
            name=command.name,
            phone=command.phone,
            lesson_ids=list(command.lesson_ids),
            spaces=command.spaces,
            order_date=datetime.now(timezone.utc),
        )
        await self._run("create_order", self._insert(order))
        logger.info("New order created with ID: %s", order.id)
        return order

    async def _insert(self, order: Order) -> None:
        self.session.add(order)
        await self.session.flush()
        await self.session.commit()
