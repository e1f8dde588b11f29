"""SQLAlchemy and notification service implementations"""
from .unit_of_work import SqlAlchemyUnitOfWork
from .repository_scope import SqlAlchemyScopeFactory
from .notification_service import (
    LoggingNotificationService,
    WebhookNotificationService,
    CompositeNotificationService,
    create_notification_service,
)

__all__ = [
    "SqlAlchemyUnitOfWork",
    "SqlAlchemyScopeFactory",
    "LoggingNotificationService",
    "WebhookNotificationService",
    "CompositeNotificationService",
    "create_notification_service",
]
