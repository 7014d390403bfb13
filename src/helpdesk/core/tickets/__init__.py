"""
Domínio de Tickets - Atendimento multi-organização.

Este módulo contém toda a lógica de negócio relacionada a tickets
de atendimento, incluindo:
- Entidades (TicketEntity, TicketStatus, IssueType, AttachmentEntity)
- Use Cases (CriarTicket, AtualizarTicket, AtribuirTicket, BuscarTickets)
- Dashboard (estatísticas e contagens por status)
- Notificações de atribuição (pull e push)
- Upload de anexos em lote
- Domain Events e DTOs
- Ports (repositório, storage, notificações)

Características do Domínio:
- Toda operação recebe organization_id explicitamente
- Validações de campos obrigatórios na entidade, antes de I/O
- Fechamento exige closed_on e closed_by
- Atribuição a novo responsável gera notificação
"""

from .entities import TicketEntity, TicketStatus, IssueType, AttachmentEntity
from .events import (
    TicketCriadoEvent,
    TicketAtualizadoEvent,
    TicketAtribuidoEvent,
    TicketFechadoEvent,
    TicketReabertoEvent,
    TicketEmAtendimentoEvent,
)
from .dtos import (
    CriarTicketInputDTO,
    AtualizarTicketInputDTO,
    AtribuirTicketInputDTO,
    AbrirNotificacaoInputDTO,
    ArquivoUploadDTO,
    BuscarTicketsQueryDTO,
    TicketOutputDTO,
    TicketListItemDTO,
    DashboardStatsDTO,
    StatusCountsDTO,
    ResultadoUploadDTO,
)
from .ports import TicketRepository, AttachmentStorage, NotificationGateway
from .use_cases import (
    CriarTicketService,
    AtualizarTicketService,
    AtribuirTicketService,
    ObterTicketService,
    BuscarTicketsService,
)
from .dashboard import (
    calcular_estatisticas,
    contar_por_status,
    ObterEstatisticasDashboardService,
    ContarTicketsPorStatusService,
)
from .notifications import (
    NotificationFeed,
    PollingNotificationFeed,
    PushNotificationFeed,
    ListarNotificacoesService,
    AbrirNotificacaoService,
)
from .attachments import EnviarAnexosService

__all__ = [
    # Entities
    "TicketEntity",
    "TicketStatus",
    "IssueType",
    "AttachmentEntity",
    # Events
    "TicketCriadoEvent",
    "TicketAtualizadoEvent",
    "TicketAtribuidoEvent",
    "TicketFechadoEvent",
    "TicketReabertoEvent",
    "TicketEmAtendimentoEvent",
    # DTOs
    "CriarTicketInputDTO",
    "AtualizarTicketInputDTO",
    "AtribuirTicketInputDTO",
    "AbrirNotificacaoInputDTO",
    "ArquivoUploadDTO",
    "BuscarTicketsQueryDTO",
    "TicketOutputDTO",
    "TicketListItemDTO",
    "DashboardStatsDTO",
    "StatusCountsDTO",
    "ResultadoUploadDTO",
    # Ports
    "TicketRepository",
    "AttachmentStorage",
    "NotificationGateway",
    # Use Cases
    "CriarTicketService",
    "AtualizarTicketService",
    "AtribuirTicketService",
    "ObterTicketService",
    "BuscarTicketsService",
    "calcular_estatisticas",
    "contar_por_status",
    "ObterEstatisticasDashboardService",
    "ContarTicketsPorStatusService",
    "NotificationFeed",
    "PollingNotificationFeed",
    "PushNotificationFeed",
    "ListarNotificacoesService",
    "AbrirNotificacaoService",
    "EnviarAnexosService",
]
