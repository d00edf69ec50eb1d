"""UpdateOrderStatus: administrative status change.

Any status may replace any other; no transition rules are enforced.
"""

import structlog
from protean.fields import Identifier, String
from protean.utils.globals import current_domain
from protean.utils.mixins import handle

from bookstore.domain import bookstore
from bookstore.order.order import Order

logger = structlog.get_logger(__name__)


@bookstore.command(part_of="Order")
class UpdateOrderStatus:
    order_id = Identifier(required=True)
    status = String(required=True, max_length=20)


@bookstore.command_handler(part_of=Order)
class UpdateOrderStatusHandler:
    @handle(UpdateOrderStatus)
    def update_order_status(self, command):
        repo = current_domain.repository_for(Order)
        order = repo.get(str(command.order_id))
        previous = order.status

        order.change_status(command.status)
        repo.add(order)

        logger.info("order_status_changed", order_id=str(order.id), previous=previous, status=order.status)
