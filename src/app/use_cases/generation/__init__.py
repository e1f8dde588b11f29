"""Subscription order generation use cases"""
from .materialize_order import MaterializeSubscriptionOrder
from .generate_orders import GenerateSubscriptionOrders
from .dtos import (
    MaterializeOutcome,
    MaterializeResponseDTO,
    GenerationErrorDTO,
    GenerationReportDTO,
)

__all__ = [
    "MaterializeSubscriptionOrder",
    "GenerateSubscriptionOrders",
    "MaterializeOutcome",
    "MaterializeResponseDTO",
    "GenerationErrorDTO",
    "GenerationReportDTO",
]
