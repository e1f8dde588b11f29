"""Order use cases"""
from .order_numbers import allocate_order_number
from .place_order import PlaceOrder
from .update_order_status import UpdateOrderStatus, BulkUpdateOrderStatus
from .get_order import GetOrder, ListScheduledOrders, ListUserOrders, ListOrdersByStatus
from .dtos import (
    OrderLineDTO,
    PlaceOrderCommandDTO,
    UpdateOrderStatusCommandDTO,
    BulkUpdateOrderStatusCommandDTO,
    OrderResponseDTO,
    ListOrdersResponseDTO,
    ListUserOrdersResponseDTO,
    ListOrdersByStatusResponseDTO,
    to_order_response,
)

__all__ = [
    "allocate_order_number",
    "PlaceOrder",
    "UpdateOrderStatus",
    "BulkUpdateOrderStatus",
    "GetOrder",
    "ListScheduledOrders",
    "ListUserOrders",
    "ListOrdersByStatus",
    "OrderLineDTO",
    "PlaceOrderCommandDTO",
    "UpdateOrderStatusCommandDTO",
    "BulkUpdateOrderStatusCommandDTO",
    "OrderResponseDTO",
    "ListOrdersResponseDTO",
    "ListUserOrdersResponseDTO",
    "ListOrdersByStatusResponseDTO",
    "to_order_response",
]
