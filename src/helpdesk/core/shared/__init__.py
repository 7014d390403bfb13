"""
Shared Domain Components.

Contém componentes compartilhados entre todos os domínios:
- Exceções de domínio
- Interfaces (Ports) transversais
- Base class para Domain Events
"""

from .exceptions import (
    DomainException,
    ValidationError,
    EntityNotFoundError,
    NotFoundError,
    AccessDeniedError,
    PersistenceError,
    AttachmentError,
)
from .events import DomainEvent
from .interfaces import UnitOfWork, EventPublisher

__all__ = [
    "DomainException",
    "ValidationError",
    "EntityNotFoundError",
    "NotFoundError",
    "AccessDeniedError",
    "PersistenceError",
    "AttachmentError",
    "DomainEvent",
    "UnitOfWork",
    "EventPublisher",
]
