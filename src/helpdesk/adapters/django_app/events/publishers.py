"""
Event Publishers - Publicadores de Eventos de Domínio.

Implementações do port EventPublisher (helpdesk.core.shared.interfaces):
- LoggingEventPublisher: Loga e executa handlers locais (modo "sync")
- CeleryEventPublisher: Envia para dispatch_domain_event (modo "celery")
- InMemoryEventPublisher: Para testes

Em todos os modos os handlers síncronos registrados (ex: o
PushNotificationFeed) são executados no processo que publicou.
"""

from typing import List
import json
import logging

from helpdesk.core.shared.events import DomainEvent
from helpdesk.core.shared.interfaces import EventPublisher

logger = logging.getLogger(__name__)


class LoggingEventPublisher(EventPublisher):
    """
    Publisher que loga eventos.

    Usado em desenvolvimento para visualizar eventos
    sem necessidade de infraestrutura de mensageria.
    """

    def __init__(self, log_level: int = logging.INFO):
        super().__init__()
        self._log_level = log_level

    def publish(self, event: DomainEvent) -> None:
        logger.log(
            self._log_level,
            f"[EVENT] {event.event_type} | "
            f"aggregate={event.aggregate_id} | "
            f"data={json.dumps(event.to_dict()['data'], default=str)}"
        )
        self._dispatch_to_handlers(event)


class CeleryEventPublisher(EventPublisher):
    """
    Publisher que envia eventos para Celery.

    Usado em produção para processamento assíncrono (notificação,
    métricas). Falha no broker é logada e não quebra o fluxo principal,
    pois o commit já aconteceu.
    """

    def __init__(self, also_log: bool = True):
        super().__init__()
        self._also_log = also_log

    def publish(self, event: DomainEvent) -> None:
        from helpdesk.adapters.django_app.events.handlers import dispatch_domain_event

        if self._also_log:
            logger.info(
                f"[EVENT->CELERY] {event.event_type} | "
                f"aggregate={event.aggregate_id}"
            )

        try:
            dispatch_domain_event.delay(event.event_type, event.to_dict())
        except Exception as e:
            logger.error(f"Falha ao publicar evento no Celery: {e}", exc_info=True)

        self._dispatch_to_handlers(event)


class InMemoryEventPublisher(EventPublisher):
    """
    Publisher em memória para testes.

    Armazena eventos publicados para verificação em testes.
    """

    def __init__(self):
        super().__init__()
        self._published_events: List[DomainEvent] = []

    def publish(self, event: DomainEvent) -> None:
        self._published_events.append(event)
        self._dispatch_to_handlers(event)

    @property
    def published_events(self) -> List[DomainEvent]:
        return self._published_events.copy()

    def clear(self) -> None:
        self._published_events.clear()

    def get_events_by_type(self, event_type: str) -> List[DomainEvent]:
        """Filtra eventos por tipo."""
        return [e for e in self._published_events if e.event_type == event_type]
