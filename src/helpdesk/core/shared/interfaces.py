"""
Interfaces (Ports) compartilhadas entre Core e Adapters.

Ports da Arquitetura Hexagonal usados por todos os domínios:
- UnitOfWork: fronteira transacional + fila de eventos pós-commit
- EventPublisher: entrega de eventos para consumidores

Os ports específicos de cada domínio (TicketRepository, UserDirectory,
NotificationGateway...) ficam no módulo `ports` do próprio domínio.

Princípio: Core define interfaces; Adapters implementam.
"""

from abc import ABC, abstractmethod
from typing import Callable, Dict, List
import logging

from .events import DomainEvent

logger = logging.getLogger(__name__)

EventHandler = Callable[[DomainEvent], None]


class UnitOfWork(ABC):
    """
    Unit of Work - Coordena transações atômicas.

    Pattern: Context Manager
        with uow:
            repo.update(ticket_id, campos)
            gateway.notify_assignment(ticket_id, usuario_id)
            uow.publish_event(event)
        # Commit automático ao sair sem erro
        # Rollback automático se exceção

    Eventos enfileirados via publish_event() só chegam aos
    consumidores depois de um commit bem-sucedido.
    """

    def __init__(self):
        self._events: List[DomainEvent] = []

    def __enter__(self) -> "UnitOfWork":
        self._begin_transaction()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> bool:
        if exc_type is not None:
            self.rollback()
        else:
            self.commit()
        return False  # Não suprime exceções

    @abstractmethod
    def _begin_transaction(self) -> None:
        """Inicia uma nova transação."""
        raise NotImplementedError

    @abstractmethod
    def commit(self) -> None:
        """
        Persiste as mudanças e publica eventos.

        Ordem de execução:
        1. Commit da transação
        2. Publicação de eventos enfileirados
        3. Limpeza de estado interno
        """
        raise NotImplementedError

    @abstractmethod
    def rollback(self) -> None:
        """Desfaz as mudanças e descarta eventos."""
        raise NotImplementedError

    def publish_event(self, event: DomainEvent) -> None:
        """
        Enfileira evento para publicação após commit.

        Args:
            event: Evento de domínio a ser publicado
        """
        self._events.append(event)

    def collect_events(self) -> List[DomainEvent]:
        """Retorna eventos enfileirados (para testing/debugging)."""
        return list(self._events)

    def clear_events(self) -> None:
        """Limpa fila de eventos."""
        self._events.clear()


class EventPublisher(ABC):
    """
    Interface para publicação de eventos.

    Implementações vivem no adapter de eventos (logging, Celery,
    memória). Handlers síncronos podem ser registrados por tipo de
    evento; é assim que o PushNotificationFeed recebe atribuições.
    """

    def __init__(self):
        self._handlers: Dict[str, List[EventHandler]] = {}

    @abstractmethod
    def publish(self, event: DomainEvent) -> None:
        """
        Publica evento para consumidores.

        Args:
            event: Evento de domínio a ser publicado
        """
        raise NotImplementedError

    def publish_batch(self, events: List[DomainEvent]) -> None:
        """Publica múltiplos eventos, na ordem recebida."""
        for event in events:
            self.publish(event)

    def register_handler(self, event_type: str, handler: EventHandler) -> None:
        """
        Registra handler síncrono para um tipo de evento.

        Args:
            event_type: Nome da classe do evento (ex: "TicketAtribuidoEvent")
            handler: Callable que recebe o evento
        """
        self._handlers.setdefault(event_type, []).append(handler)

    def unregister_handler(self, event_type: str, handler: EventHandler) -> None:
        """Remove handler registrado (ignora se não existir)."""
        handlers = self._handlers.get(event_type, [])
        if handler in handlers:
            handlers.remove(handler)

    def _dispatch_to_handlers(self, event: DomainEvent) -> None:
        """Executa handlers registrados; falha de um handler não afeta os demais."""
        for handler in list(self._handlers.get(event.event_type, [])):
            try:
                handler(event)
            except Exception as e:
                logger.error(f"Erro em handler para {event.event_type}: {e}", exc_info=True)


# Type alias para facilitar tipagem
UoW = UnitOfWork
