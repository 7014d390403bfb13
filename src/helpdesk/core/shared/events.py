"""
Domain Events - Comunicação desacoplada entre domínio e infraestrutura.

Eventos representam fatos já ocorridos (ticket criado, ticket atribuído)
e são publicados pelo UnitOfWork somente após commit bem-sucedido.

Características:
- Auto-geração de ID e timestamp
- Serializáveis para transporte (Celery) e logging
- Rastreáveis via aggregate_id

Consumidores típicos:
    - Handlers Celery (notificações, métricas)
    - PushNotificationFeed (entrega de notificações por assinatura)
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict
import uuid


def _agora() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class DomainEvent(ABC):
    """
    Classe base abstrata para Domain Events.

    Subclasses declaram seus próprios campos (todos com default, pois
    os campos da base já têm default) e o tipo do agregado.

    Attributes:
        event_id: Identificador único do evento
        aggregate_id: ID do agregado que gerou o evento
        occurred_at: Momento em que o evento ocorreu (UTC)
        version: Versão do schema do evento

    Example:
        @dataclass
        class TicketCriadoEvent(DomainEvent):
            organization_id: str = ""

            @property
            def aggregate_type(self) -> str:
                return "Ticket"
    """

    event_id: str = field(default_factory=lambda: str(uuid.uuid4()))
    aggregate_id: str = ""
    occurred_at: datetime = field(default_factory=_agora)
    version: int = 1

    def __post_init__(self):
        if not self.aggregate_id:
            raise ValueError("aggregate_id é obrigatório")

    @property
    @abstractmethod
    def aggregate_type(self) -> str:
        """Tipo do agregado que gerou o evento (ex: "Ticket")."""
        ...

    @property
    def event_type(self) -> str:
        """Tipo do evento (nome da classe)."""
        return self.__class__.__name__

    def to_dict(self) -> Dict[str, Any]:
        """
        Serializa evento para dicionário.

        Formato usado pelo CeleryEventPublisher e pelo
        LoggingEventPublisher.

        Returns:
            Dicionário com envelope do evento e seus dados em "data"
        """
        return {
            "event_id": self.event_id,
            "event_type": self.event_type,
            "aggregate_id": self.aggregate_id,
            "aggregate_type": self.aggregate_type,
            "occurred_at": self.occurred_at.isoformat(),
            "version": self.version,
            "data": self._get_event_data(),
        }

    def _get_event_data(self) -> Dict[str, Any]:
        """Dados específicos do evento (todos os campos fora da base)."""
        base_fields = {"event_id", "aggregate_id", "occurred_at", "version"}
        return {
            key: value
            for key, value in self.__dict__.items()
            if key not in base_fields and not key.startswith("_")
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "DomainEvent":
        """
        Reconstrói evento a partir do envelope gerado por to_dict().

        Args:
            data: Dicionário com envelope do evento

        Returns:
            Instância do evento reconstruída
        """
        event_data = data.get("data", {})
        return cls(
            event_id=data.get("event_id", str(uuid.uuid4())),
            aggregate_id=data["aggregate_id"],
            occurred_at=datetime.fromisoformat(data["occurred_at"]),
            version=data.get("version", 1),
            **event_data,
        )

    def __repr__(self) -> str:
        return (
            f"{self.event_type}("
            f"event_id={self.event_id[:8]}..., "
            f"aggregate_id={self.aggregate_id}, "
            f"occurred_at={self.occurred_at.isoformat()}"
            f")"
        )
