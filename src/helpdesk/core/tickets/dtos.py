"""
Data Transfer Objects (DTOs) do Domínio de Tickets.

DTOs são estruturas simples para transportar dados entre camadas,
evitando vazamento de entidades para views/API.

Tipos de DTOs:
- Input DTOs: Recebem dados de entrada (de Forms/APIs)
- Output DTOs: Formatam dados para resposta (para APIs)
- Query DTOs: Parâmetros de busca

Todo DTO de operação sobre tickets carrega organization_id
explicitamente: o tenant nunca vem de estado global.
"""

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any, Dict, List, Optional, Tuple

from .entities import AttachmentEntity, TicketEntity


# =============================================================================
# INPUT DTOs (Entrada)
# =============================================================================

@dataclass(frozen=True)
class CriarTicketInputDTO:
    """
    DTO de entrada para criar ticket.

    Attributes:
        organization_id: Organização selecionada
        opened_by: Email de quem abre o ticket
        client_file_no: Número do arquivo do cliente
        mobile_no: Celular do cliente
        name_of_client: Nome do cliente
        issue_type: Tipo de problema
        description: Descrição
        resolution: Resolução (opcional)
        assigned_to: Responsável inicial (opcional)
        attachments: Anexos já enviados ao storage
    """

    organization_id: str
    opened_by: str
    client_file_no: str
    mobile_no: str
    name_of_client: str
    issue_type: str
    description: str
    resolution: str = ""
    assigned_to: Optional[str] = None
    attachments: Tuple[AttachmentEntity, ...] = field(default_factory=tuple)

    def to_dict(self) -> dict:
        return {
            "organization_id": self.organization_id,
            "opened_by": self.opened_by,
            "client_file_no": self.client_file_no,
            "mobile_no": self.mobile_no,
            "name_of_client": self.name_of_client,
            "issue_type": self.issue_type,
            "description": self.description,
            "resolution": self.resolution,
            "assigned_to": self.assigned_to,
            "attachments": [a.to_dict() for a in self.attachments],
        }


@dataclass(frozen=True)
class AtualizarTicketInputDTO:
    """
    DTO de entrada para atualização parcial.

    Attributes:
        organization_id: Tenant de onde parte a alteração
        ticket_id: ID do ticket
        campos: Campos a alterar, com nomes das colunas
        alterado_por: ID de quem altera (auditoria em log)
    """

    organization_id: str
    ticket_id: str
    campos: Dict[str, Any] = field(default_factory=dict)
    alterado_por: Optional[str] = None


@dataclass(frozen=True)
class AtribuirTicketInputDTO:
    """
    DTO de entrada para atribuir ticket.

    Attributes:
        organization_id: Tenant de onde parte a atribuição
        ticket_id: ID do ticket
        usuario_id: Novo responsável
        atribuido_por: Quem está atribuindo
    """

    organization_id: str
    ticket_id: str
    usuario_id: str
    atribuido_por: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "organization_id": self.organization_id,
            "ticket_id": self.ticket_id,
            "usuario_id": self.usuario_id,
            "atribuido_por": self.atribuido_por,
        }


@dataclass(frozen=True)
class AbrirNotificacaoInputDTO:
    """DTO de entrada para reconhecer (abrir) uma notificação."""

    usuario_id: str
    ticket_id: str


@dataclass(frozen=True)
class ArquivoUploadDTO:
    """
    Arquivo recebido para upload.

    Attributes:
        name: Nome original
        content: Conteúdo em bytes
        mime_type: Tipo MIME declarado pelo cliente
    """

    name: str
    content: bytes
    mime_type: str

    @property
    def size(self) -> int:
        return len(self.content)

    @property
    def extensao(self) -> str:
        if "." not in self.name:
            return ""
        return self.name.rsplit(".", 1)[-1].lower()


# =============================================================================
# QUERY DTOs (Filtros de Busca)
# =============================================================================

@dataclass(frozen=True)
class BuscarTicketsQueryDTO:
    """
    Parâmetros de busca de tickets.

    Strings vazias equivalem a "sem filtro".

    Attributes:
        organization_id: Tenant (igualdade exata, obrigatório)
        termo: Substring procurada em celular, arquivo, nome ou número
        status: Status exato ("open", "in_progress", "closed")
    """

    organization_id: str
    termo: Optional[str] = None
    status: Optional[str] = None

    @property
    def termo_normalizado(self) -> Optional[str]:
        termo = (self.termo or "").strip()
        return termo or None

    @property
    def status_normalizado(self) -> Optional[str]:
        status = (self.status or "").strip()
        return status or None

    def to_dict(self) -> dict:
        return {
            "organization_id": self.organization_id,
            "termo": self.termo_normalizado,
            "status": self.status_normalizado,
        }


# =============================================================================
# OUTPUT DTOs (Saída)
# =============================================================================

def _iso(valor: Optional[date]) -> Optional[str]:
    return valor.isoformat() if valor else None


@dataclass
class TicketOutputDTO:
    """
    DTO de saída completo com dados do ticket.

    Usado para resposta detalhada de um único ticket.
    """

    id: str
    ticket_no: Optional[str]
    organization_id: str
    created_on: date
    opened_by: str
    client_file_no: str
    mobile_no: str
    name_of_client: str
    issue_type: str
    description: str
    resolution: str
    status: str
    closed_on: Optional[date]
    closed_by: Optional[str]
    assigned_to: Optional[str]
    created_at: datetime
    updated_at: datetime
    attachments: List[AttachmentEntity] = field(default_factory=list)

    @classmethod
    def from_entity(cls, entity: TicketEntity) -> "TicketOutputDTO":
        return cls(
            id=entity.id,
            ticket_no=entity.ticket_no,
            organization_id=entity.organization_id,
            created_on=entity.created_on,
            opened_by=entity.opened_by,
            client_file_no=entity.client_file_no,
            mobile_no=entity.mobile_no,
            name_of_client=entity.name_of_client,
            issue_type=entity.issue_type,
            description=entity.description,
            resolution=entity.resolution,
            status=entity.status.value,
            closed_on=entity.closed_on,
            closed_by=entity.closed_by,
            assigned_to=entity.assigned_to,
            created_at=entity.created_at,
            updated_at=entity.updated_at,
            attachments=list(entity.attachments),
        )

    def to_dict(self) -> dict:
        """Converte para dicionário (serialização JSON)."""
        return {
            "id": self.id,
            "ticket_no": self.ticket_no,
            "organization_id": self.organization_id,
            "created_on": _iso(self.created_on),
            "opened_by": self.opened_by,
            "client_file_no": self.client_file_no,
            "mobile_no": self.mobile_no,
            "name_of_client": self.name_of_client,
            "issue_type": self.issue_type,
            "description": self.description,
            "resolution": self.resolution,
            "status": self.status,
            "closed_on": _iso(self.closed_on),
            "closed_by": self.closed_by,
            "assigned_to": self.assigned_to,
            "created_at": self.created_at.isoformat(),
            "updated_at": self.updated_at.isoformat(),
            "attachments": [a.to_dict() for a in self.attachments],
        }


@dataclass
class TicketListItemDTO:
    """
    DTO otimizado para listagens (tabela do dashboard e notificações).
    """

    id: str
    ticket_no: Optional[str]
    created_on: date
    client_file_no: str
    mobile_no: str
    name_of_client: str
    issue_type: str
    status: str
    assigned_to: Optional[str] = None

    @classmethod
    def from_entity(cls, entity: TicketEntity) -> "TicketListItemDTO":
        return cls(
            id=entity.id,
            ticket_no=entity.ticket_no,
            created_on=entity.created_on,
            client_file_no=entity.client_file_no,
            mobile_no=entity.mobile_no,
            name_of_client=entity.name_of_client,
            issue_type=entity.issue_type,
            status=entity.status.value,
            assigned_to=entity.assigned_to,
        )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "ticket_no": self.ticket_no,
            "created_on": _iso(self.created_on),
            "client_file_no": self.client_file_no,
            "mobile_no": self.mobile_no,
            "name_of_client": self.name_of_client,
            "issue_type": self.issue_type,
            "status": self.status,
            "assigned_to": self.assigned_to,
        }


@dataclass
class DashboardStatsDTO:
    """
    Estatísticas do dashboard de uma organização.

    Attributes:
        total_tickets: Todos os tickets do tenant
        open_tickets: Tickets com status open
        resolved_today: Fechados com closed_on igual à data atual
        avg_response_time_hours: Média de horas até o primeiro atendimento
            (tickets fechados; 0 quando não há nenhum)
    """

    total_tickets: int = 0
    open_tickets: int = 0
    resolved_today: int = 0
    avg_response_time_hours: float = 0.0

    def to_dict(self) -> dict:
        return {
            "total_tickets": self.total_tickets,
            "open_tickets": self.open_tickets,
            "resolved_today": self.resolved_today,
            "avg_response_time_hours": self.avg_response_time_hours,
        }


@dataclass
class StatusCountsDTO:
    """Contagens por status (e atribuídos) de uma organização."""

    assigned: int = 0
    closed: int = 0
    open: int = 0
    in_progress: int = 0

    @property
    def total_por_status(self) -> int:
        """Soma open + in_progress + closed."""
        return self.open + self.in_progress + self.closed

    def to_dict(self) -> dict:
        return {
            "assigned": self.assigned,
            "closed": self.closed,
            "open": self.open,
            "in_progress": self.in_progress,
        }


@dataclass
class ResultadoUploadDTO:
    """
    Resultado do upload de um arquivo do lote.

    Attributes:
        name: Nome do arquivo
        sucesso: Se o arquivo foi aceito e armazenado
        anexo: Anexo criado (em caso de sucesso)
        erro: Mensagem do AttachmentError (em caso de falha)
    """

    name: str
    sucesso: bool
    anexo: Optional[AttachmentEntity] = None
    erro: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "sucesso": self.sucesso,
            "anexo": self.anexo.to_dict() if self.anexo else None,
            "erro": self.erro,
        }
