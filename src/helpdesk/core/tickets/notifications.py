"""
Notificações de atribuição.

Quando um ticket passa a um novo responsável, um registro de notificação
é criado para ele (NotificationGateway). A entrega ao usuário é uma
capacidade com duas implementações intercambiáveis:

- PollingNotificationFeed: pull, consulta o gateway periodicamente
- PushNotificationFeed: push, reage ao TicketAtribuidoEvent publicado

Abrir a notificação de um ticket open move o ticket para in_progress.
"""

import logging
from abc import ABC, abstractmethod
from typing import Callable, Dict, List

from helpdesk.core.shared.events import DomainEvent
from helpdesk.core.shared.exceptions import EntityNotFoundError, ValidationError
from helpdesk.core.shared.interfaces import EventPublisher, UnitOfWork

from .dtos import AbrirNotificacaoInputDTO, TicketListItemDTO, TicketOutputDTO
from .entities import TicketEntity
from .events import TicketAtribuidoEvent, TicketEmAtendimentoEvent
from .ports import NotificationGateway, TicketRepository

logger = logging.getLogger(__name__)

NotificationCallback = Callable[[List[TicketEntity]], None]


class NotificationFeed(ABC):
    """
    Capacidade de entrega de notificações a um usuário.

    Example:
        cancelar = feed.subscribe("user-1", lambda tickets: print(tickets))
        ...
        cancelar()
    """

    def __init__(self, notification_gateway: NotificationGateway):
        self.notification_gateway = notification_gateway
        self._subscribers: Dict[str, List[NotificationCallback]] = {}

    @abstractmethod
    def fetch(self, user_id: str) -> List[TicketEntity]:
        """Tickets com notificação não lida para o usuário."""
        raise NotImplementedError

    def subscribe(self, user_id: str, callback: NotificationCallback) -> Callable[[], None]:
        """
        Assina as notificações de um usuário.

        Returns:
            Função que cancela a assinatura
        """
        self._subscribers.setdefault(user_id, []).append(callback)

        def cancelar() -> None:
            callbacks = self._subscribers.get(user_id, [])
            if callback in callbacks:
                callbacks.remove(callback)
            if not callbacks:
                self._subscribers.pop(user_id, None)

        return cancelar

    @property
    def assinantes(self) -> List[str]:
        return list(self._subscribers)

    def _entregar(self, user_id: str) -> None:
        callbacks = list(self._subscribers.get(user_id, []))
        if not callbacks:
            return

        tickets = self.fetch(user_id)
        for callback in callbacks:
            try:
                callback(tickets)
            except Exception as e:
                logger.error(f"Erro ao entregar notificações para {user_id}: {e}", exc_info=True)


class PollingNotificationFeed(NotificationFeed):
    """Entrega por consulta: poll() consulta o gateway para cada assinante."""

    def fetch(self, user_id: str) -> List[TicketEntity]:
        return self.notification_gateway.get_notifications(user_id)

    def poll(self) -> int:
        """
        Consulta e entrega notificações de todos os assinantes.

        Returns:
            Número de usuários consultados
        """
        usuarios = self.assinantes
        for user_id in usuarios:
            self._entregar(user_id)
        return len(usuarios)


class PushNotificationFeed(NotificationFeed):
    """
    Entrega por evento: cada TicketAtribuidoEvent publicado aciona a
    entrega para o novo responsável, se ele tiver assinatura.
    """

    def __init__(self, notification_gateway: NotificationGateway, event_publisher: EventPublisher):
        super().__init__(notification_gateway)
        self.event_publisher = event_publisher
        self.event_publisher.register_handler("TicketAtribuidoEvent", self._on_atribuicao)

    def fetch(self, user_id: str) -> List[TicketEntity]:
        return self.notification_gateway.get_notifications(user_id)

    def close(self) -> None:
        """Deixa de escutar eventos de atribuição."""
        self.event_publisher.unregister_handler("TicketAtribuidoEvent", self._on_atribuicao)

    def _on_atribuicao(self, event: DomainEvent) -> None:
        if isinstance(event, TicketAtribuidoEvent):
            logger.debug(f"Push de notificação para {event.assigned_to}")
            self._entregar(event.assigned_to)


class ListarNotificacoesService:
    """Use Case: notificações não lidas do usuário (pull)."""

    def __init__(self, feed: NotificationFeed):
        self.feed = feed

    def execute(self, user_id: str) -> List[TicketListItemDTO]:
        if not user_id:
            raise ValidationError("Usuário é obrigatório", field="user_id")
        return [TicketListItemDTO.from_entity(t) for t in self.feed.fetch(user_id)]


class AbrirNotificacaoService:
    """
    Use Case: usuário abre (reconhece) a notificação de um ticket.

    Fluxo:
    1. Buscar ticket; só quem foi notificado pode abri-lo
    2. Marcar notificação como lida
    3. Se o ticket está open, mover para in_progress
    """

    def __init__(
        self,
        ticket_repo: TicketRepository,
        notification_gateway: NotificationGateway,
        uow: UnitOfWork,
    ):
        self.ticket_repo = ticket_repo
        self.notification_gateway = notification_gateway
        self.uow = uow

    def execute(self, input_dto: AbrirNotificacaoInputDTO) -> TicketOutputDTO:
        """
        Raises:
            EntityNotFoundError: Se ticket não existe ou o usuário
                não tem notificação dele
        """
        with self.uow:
            ticket = self.ticket_repo.select_by_id(input_dto.ticket_id)
            # Sem notificação o ticket é tratado como inexistente
            if not ticket or not self.notification_gateway.has_notification(
                input_dto.usuario_id, ticket.id
            ):
                raise EntityNotFoundError(
                    f"Ticket {input_dto.ticket_id} não encontrado",
                    entity_type="Ticket",
                    entity_id=input_dto.ticket_id
                )

            self.notification_gateway.mark_read(input_dto.usuario_id, ticket.id)

            if ticket.marcar_em_atendimento():
                ticket = self.ticket_repo.update(ticket.id, {
                    "status": ticket.status,
                    "responded_at": ticket.responded_at,
                    "updated_at": ticket.updated_at,
                })
                self.uow.publish_event(
                    TicketEmAtendimentoEvent(
                        aggregate_id=ticket.id,
                        organization_id=ticket.organization_id,
                        usuario_id=input_dto.usuario_id,
                    )
                )
                logger.info(
                    f"Ticket {ticket.ticket_no} em atendimento por {input_dto.usuario_id}"
                )

        return TicketOutputDTO.from_entity(ticket)
