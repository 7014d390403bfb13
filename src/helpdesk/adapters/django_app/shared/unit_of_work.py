"""
Unit of Work - Implementação Django.

Gerencia transações atômicas entre repositórios e gateways,
garantindo consistência de dados.

Responsabilidades:
- Iniciar/finalizar transações (transaction.atomic)
- Commit/Rollback coordenado
- Publicar eventos após commit bem-sucedido

Como usa transaction.atomic, o UoW pode ser aninhado dentro de uma
transação externa (ex: testes com pytest-django); nesse caso vira um
savepoint.
"""

from typing import List, Optional
import logging

from django.db import transaction

from helpdesk.core.shared.events import DomainEvent
from helpdesk.core.shared.interfaces import EventPublisher, UnitOfWork

logger = logging.getLogger(__name__)


class DjangoUnitOfWork(UnitOfWork):
    """
    Implementação Django do Unit of Work.

    Eventos são publicados apenas após commit bem-sucedido; falha
    na publicação é logada e não desfaz o que já foi gravado.

    Example:
        with DjangoUnitOfWork(event_publisher) as uow:
            ticket = repo.insert(ticket)
            uow.publish_event(TicketCriadoEvent(aggregate_id=ticket.id, ...))
        # Commit automático + eventos publicados

    Example com rollback:
        with DjangoUnitOfWork() as uow:
            repo.update(ticket_id, campos)
            raise ValidationError("Erro!")
        # Rollback automático, eventos descartados
    """

    def __init__(self, event_publisher: Optional[EventPublisher] = None):
        """
        Args:
            event_publisher: Publicador de eventos (logging, Celery...)
        """
        super().__init__()
        self._event_publisher = event_publisher
        self._atomic = None
        self._committed = False
        self._rolled_back = False

    def _begin_transaction(self) -> None:
        self._committed = False
        self._rolled_back = False
        self._atomic = transaction.atomic()
        self._atomic.__enter__()
        logger.debug("Transaction started")

    def commit(self) -> None:
        """
        Ordem de execução:
        1. Commit da transação no banco
        2. Publicar eventos para handlers
        3. Limpar estado interno
        """
        if self._atomic is None:
            logger.warning("Commit sem transação ativa")
            return

        atomic, self._atomic = self._atomic, None
        atomic.__exit__(None, None, None)
        self._committed = True
        logger.debug("Transaction committed")

        self._publish_events()

    def rollback(self) -> None:
        """
        Desfaz todas as mudanças e descarta eventos.

        Chamado automaticamente se exceção ocorrer dentro do contexto.
        """
        if self._atomic is not None:
            atomic, self._atomic = self._atomic, None
            transaction.set_rollback(True)
            atomic.__exit__(None, None, None)
            logger.debug("Transaction rolled back")

        self._rolled_back = True
        self.clear_events()

    def _publish_events(self) -> None:
        events: List[DomainEvent] = self.collect_events()
        self.clear_events()

        for event in events:
            logger.info(
                f"Publishing event: {event.event_type} "
                f"for aggregate {event.aggregate_id}"
            )

            if self._event_publisher:
                try:
                    self._event_publisher.publish(event)
                except Exception as e:
                    # O commit já aconteceu: apenas loga
                    logger.error(f"Failed to publish event {event.event_type}: {e}")

    @property
    def is_committed(self) -> bool:
        return self._committed

    @property
    def is_rolled_back(self) -> bool:
        return self._rolled_back


class InMemoryUnitOfWork(UnitOfWork):
    """
    Unit of Work em memória para testes.

    Não persiste nada; guarda os eventos "publicados" e, se houver
    publisher, repassa a ele (como o DjangoUnitOfWork).

    Example:
        uow = InMemoryUnitOfWork()
        with uow:
            uow.publish_event(event)

        assert uow.committed
        assert len(uow.published_events) == 1
    """

    def __init__(self, event_publisher: Optional[EventPublisher] = None):
        super().__init__()
        self._event_publisher = event_publisher
        self._committed = False
        self._rolled_back = False
        self._published_events: List[DomainEvent] = []

    def _begin_transaction(self) -> None:
        pass

    def commit(self) -> None:
        self._committed = True
        events = self.collect_events()
        self.clear_events()
        self._published_events.extend(events)
        if self._event_publisher:
            self._event_publisher.publish_batch(events)

    def rollback(self) -> None:
        self._rolled_back = True
        self.clear_events()

    @property
    def committed(self) -> bool:
        return self._committed

    @property
    def rolled_back(self) -> bool:
        return self._rolled_back

    @property
    def published_events(self) -> List[DomainEvent]:
        """Retorna eventos que foram 'publicados'."""
        return self._published_events

    def reset(self) -> None:
        """Reset para próximo teste."""
        self._committed = False
        self._rolled_back = False
        self._published_events.clear()
        self.clear_events()
