"""Service interfaces used by the order use cases"""
from .unit_of_work import UnitOfWork
from .notification_service import NotificationService
from .repository_scope import RepositoryScope, ScopeFactory

__all__ = [
    "UnitOfWork",
    "NotificationService",
    "RepositoryScope",
    "ScopeFactory",
]
