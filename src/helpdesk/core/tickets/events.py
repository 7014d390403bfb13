"""
Domain Events do Domínio de Tickets.

Eventos:
- TicketCriadoEvent: Novo ticket foi criado
- TicketAtualizadoEvent: Campos do ticket foram alterados
- TicketAtribuidoEvent: Ticket passou para um novo responsável
- TicketFechadoEvent: Ticket foi fechado
- TicketReabertoEvent: Ticket fechado voltou a open/in_progress
- TicketEmAtendimentoEvent: Responsável abriu a notificação de um ticket open

Uso:
    with uow:
        ticket = self.ticket_repo.insert(TicketEntity.criar(...))
        uow.publish_event(TicketCriadoEvent(aggregate_id=ticket.id, ...))
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from helpdesk.core.shared.events import DomainEvent


@dataclass
class TicketCriadoEvent(DomainEvent):
    """
    Evento: Ticket foi criado.

    Handlers típicos:
    - Registrar métrica de abertura por organização/tipo de problema
    """

    organization_id: str = ""
    ticket_no: str = ""
    opened_by: str = ""
    issue_type: str = ""
    assigned_to: Optional[str] = None

    @property
    def aggregate_type(self) -> str:
        return "Ticket"


@dataclass
class TicketAtualizadoEvent(DomainEvent):
    """
    Evento: Campos do ticket foram alterados.

    Attributes:
        organization_id: Tenant do ticket
        campos: Nomes dos campos alterados
    """

    organization_id: str = ""
    campos: List[str] = field(default_factory=list)

    @property
    def aggregate_type(self) -> str:
        return "Ticket"

    def _get_event_data(self) -> Dict[str, Any]:
        return {
            "organization_id": self.organization_id,
            "campos": list(self.campos),
        }


@dataclass
class TicketAtribuidoEvent(DomainEvent):
    """
    Evento: Ticket foi atribuído a um novo responsável.

    Disparado somente quando assigned_to passa a um valor não nulo
    diferente do anterior. Acompanha a criação do registro de
    notificação para o novo responsável.

    Handlers típicos:
    - PushNotificationFeed (entrega imediata ao assinante)
    - Celery: notify_user

    Attributes:
        organization_id: Tenant do ticket
        ticket_no: Número do ticket
        assigned_to: Novo responsável
        atribuido_anterior: Responsável anterior (se houver)
    """

    organization_id: str = ""
    ticket_no: str = ""
    assigned_to: str = ""
    atribuido_anterior: Optional[str] = None

    @property
    def aggregate_type(self) -> str:
        return "Ticket"

    def _get_event_data(self) -> Dict[str, Any]:
        data = {
            "organization_id": self.organization_id,
            "ticket_no": self.ticket_no,
            "assigned_to": self.assigned_to,
        }
        if self.atribuido_anterior:
            data["atribuido_anterior"] = self.atribuido_anterior
        return data


@dataclass
class TicketFechadoEvent(DomainEvent):
    """
    Evento: Ticket foi fechado.

    Attributes:
        organization_id: Tenant do ticket
        closed_by: Quem fechou
        closed_on: Data de fechamento (ISO)
        tempo_resposta_horas: Horas até o primeiro atendimento
    """

    organization_id: str = ""
    closed_by: str = ""
    closed_on: str = ""
    tempo_resposta_horas: Optional[float] = None

    @property
    def aggregate_type(self) -> str:
        return "Ticket"


@dataclass
class TicketReabertoEvent(DomainEvent):
    """Evento: Ticket fechado voltou para open ou in_progress."""

    organization_id: str = ""
    status: str = ""

    @property
    def aggregate_type(self) -> str:
        return "Ticket"


@dataclass
class TicketEmAtendimentoEvent(DomainEvent):
    """
    Evento: Responsável abriu a notificação e o ticket saiu de open.

    Attributes:
        organization_id: Tenant do ticket
        usuario_id: Usuário que abriu a notificação
    """

    organization_id: str = ""
    usuario_id: str = ""

    @property
    def aggregate_type(self) -> str:
        return "Ticket"
