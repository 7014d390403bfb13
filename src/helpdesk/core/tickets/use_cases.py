"""
Use Cases (Application Services) do Domínio de Tickets.

Este módulo contém os casos de uso da aplicação, que orquestram
a lógica de negócio coordenando entidades, repositórios e eventos.

Use Cases implementados:
- CriarTicketService: Cria novo ticket na organização selecionada
- AtualizarTicketService: Atualização parcial (inclui status e atribuição)
- AtribuirTicketService: Atribui ticket a um usuário
- ObterTicketService: Obtém ticket específico
- BuscarTicketsService: Busca com termo e filtro de status

Responsabilidades dos Use Cases:
- Validar entrada (via DTOs e entidades) antes de qualquer I/O
- Garantir o escopo da organização em toda leitura e escrita
- Gerenciar transações (via UoW)
- Disparar notificação e eventos de domínio na atribuição

Princípios:
- Um Use Case = Uma operação de negócio
- Dependências injetadas (DI)
- Sem lógica de infraestrutura
"""

import logging
from typing import Any, Dict, List, Optional

from helpdesk.core.organizations.ports import UserDirectory
from helpdesk.core.shared.exceptions import EntityNotFoundError, ValidationError
from helpdesk.core.shared.interfaces import UnitOfWork

from .dtos import (
    AtribuirTicketInputDTO,
    AtualizarTicketInputDTO,
    BuscarTicketsQueryDTO,
    CriarTicketInputDTO,
    TicketListItemDTO,
    TicketOutputDTO,
)
from .entities import TicketEntity, TicketStatus
from .events import (
    TicketAtribuidoEvent,
    TicketAtualizadoEvent,
    TicketCriadoEvent,
    TicketFechadoEvent,
    TicketReabertoEvent,
)
from .ports import NotificationGateway, TicketRepository

logger = logging.getLogger(__name__)


def obter_ticket_da_organizacao(
    ticket_repo: TicketRepository,
    ticket_id: str,
    organization_id: str,
) -> TicketEntity:
    """
    Busca ticket garantindo que pertence à organização.

    Ticket de outra organização é tratado como inexistente.

    Raises:
        EntityNotFoundError: Se ticket não existe no tenant
    """
    ticket = ticket_repo.select_by_id(ticket_id) if ticket_id else None

    if not ticket or ticket.organization_id != organization_id:
        raise EntityNotFoundError(
            f"Ticket {ticket_id} não encontrado",
            entity_type="Ticket",
            entity_id=ticket_id
        )

    return ticket


def garantir_usuario(user_directory: UserDirectory, user_id: str) -> None:
    """
    Raises:
        EntityNotFoundError: Se usuário não existe no diretório
    """
    if not user_directory.get_by_id(user_id):
        raise EntityNotFoundError(
            f"Usuário {user_id} não encontrado",
            entity_type="User",
            entity_id=user_id
        )


class _NotificaAtribuicaoMixin:
    """Notificação + evento quando o ticket passa a um novo responsável."""

    notification_gateway: NotificationGateway
    uow: UnitOfWork

    def _notificar_atribuicao(
        self,
        ticket: TicketEntity,
        atribuido_anterior: Optional[str] = None,
    ) -> None:
        self.notification_gateway.notify_assignment(ticket.id, ticket.assigned_to)
        self.uow.publish_event(
            TicketAtribuidoEvent(
                aggregate_id=ticket.id,
                organization_id=ticket.organization_id,
                ticket_no=ticket.ticket_no or "",
                assigned_to=ticket.assigned_to,
                atribuido_anterior=atribuido_anterior,
            )
        )
        logger.info(f"Ticket {ticket.ticket_no} atribuído a {ticket.assigned_to}")


class CriarTicketService(_NotificaAtribuicaoMixin):
    """
    Use Case: Criar um novo ticket.

    Fluxo:
    1. Validar campos obrigatórios (local, sem I/O)
    2. Validar responsável inicial, se informado
    3. Persistir via repositório (gera ticket_no)
    4. Notificar responsável e disparar eventos
    5. Retornar DTO de saída

    Attributes:
        ticket_repo: Repositório de tickets
        uow: Unit of Work para transações
        user_directory: Diretório de usuários (responsáveis)
        notification_gateway: Registros de notificação

    Example:
        service = CriarTicketService(ticket_repo, uow, users, notifications)
        output = service.execute(CriarTicketInputDTO(
            organization_id="O1",
            opened_by="agente@empresa.com",
            client_file_no="F100",
            mobile_no="9998887776",
            name_of_client="Jane Doe",
            issue_type="Payment",
            description="late payment",
        ))
        print(output.ticket_no)  # TKT-000001
    """

    def __init__(
        self,
        ticket_repo: TicketRepository,
        uow: UnitOfWork,
        user_directory: UserDirectory,
        notification_gateway: NotificationGateway,
    ):
        self.ticket_repo = ticket_repo
        self.uow = uow
        self.user_directory = user_directory
        self.notification_gateway = notification_gateway

    def execute(self, input_dto: CriarTicketInputDTO) -> TicketOutputDTO:
        """
        Executa criação de ticket em transação atômica.

        Raises:
            ValidationError: Se campos obrigatórios vazios
            EntityNotFoundError: Se responsável não existe
            PersistenceError: Se armazenamento falhar
        """
        # Validação antes de qualquer chamada ao armazenamento
        ticket = TicketEntity.criar(
            organization_id=input_dto.organization_id,
            opened_by=input_dto.opened_by,
            client_file_no=input_dto.client_file_no,
            mobile_no=input_dto.mobile_no,
            name_of_client=input_dto.name_of_client,
            issue_type=input_dto.issue_type,
            description=input_dto.description,
            resolution=input_dto.resolution,
            assigned_to=input_dto.assigned_to,
            attachments=list(input_dto.attachments),
        )

        if ticket.assigned_to:
            garantir_usuario(self.user_directory, ticket.assigned_to)

        with self.uow:
            ticket = self.ticket_repo.insert(ticket)

            self.uow.publish_event(
                TicketCriadoEvent(
                    aggregate_id=ticket.id,
                    organization_id=ticket.organization_id,
                    ticket_no=ticket.ticket_no or "",
                    opened_by=ticket.opened_by,
                    issue_type=ticket.issue_type,
                    assigned_to=ticket.assigned_to,
                )
            )

            if ticket.assigned_to:
                self._notificar_atribuicao(ticket)

        logger.info(
            f"Ticket {ticket.ticket_no} criado na organização "
            f"{ticket.organization_id} por {ticket.opened_by}"
        )
        return TicketOutputDTO.from_entity(ticket)


class AtualizarTicketService(_NotificaAtribuicaoMixin):
    """
    Use Case: Atualização parcial de ticket.

    Fluxo:
    1. Buscar ticket no tenant
    2. Aplicar alterações na entidade (regras de fechamento, imutáveis)
    3. Gravar somente os campos alterados (last-write-wins por campo)
    4. Notificar novo responsável, se houver
    5. Disparar eventos de atualização/fechamento/reabertura
    """

    def __init__(
        self,
        ticket_repo: TicketRepository,
        uow: UnitOfWork,
        user_directory: UserDirectory,
        notification_gateway: NotificationGateway,
    ):
        self.ticket_repo = ticket_repo
        self.uow = uow
        self.user_directory = user_directory
        self.notification_gateway = notification_gateway

    def execute(self, input_dto: AtualizarTicketInputDTO) -> TicketOutputDTO:
        """
        Raises:
            EntityNotFoundError: Se ticket (ou responsável) não existe
            ValidationError: Se alteração inválida ou fechamento inconsistente
        """
        campos = dict(input_dto.campos or {})
        if not campos:
            raise ValidationError("Nenhum campo informado para atualização")

        with self.uow:
            ticket = obter_ticket_da_organizacao(
                self.ticket_repo, input_dto.ticket_id, input_dto.organization_id
            )
            atribuido_anterior = ticket.assigned_to
            status_anterior = ticket.status

            if campos.get("assigned_to"):
                garantir_usuario(self.user_directory, campos["assigned_to"])

            alteracoes = ticket.aplicar_alteracoes(campos)
            if not alteracoes:
                logger.debug(f"Ticket {ticket.ticket_no} sem alterações")
                return TicketOutputDTO.from_entity(ticket)

            ticket = self.ticket_repo.update(ticket.id, alteracoes)

            self.uow.publish_event(
                TicketAtualizadoEvent(
                    aggregate_id=ticket.id,
                    organization_id=ticket.organization_id,
                    campos=self._nomes_alterados(alteracoes),
                )
            )

            if alteracoes.get("assigned_to"):
                self._notificar_atribuicao(ticket, atribuido_anterior)

            if "status" in alteracoes:
                self._publicar_mudanca_status(ticket, status_anterior)

        logger.info(
            f"Ticket {ticket.ticket_no} atualizado "
            f"({', '.join(self._nomes_alterados(alteracoes))})"
            + (f" por {input_dto.alterado_por}" if input_dto.alterado_por else "")
        )
        return TicketOutputDTO.from_entity(ticket)

    @staticmethod
    def _nomes_alterados(alteracoes: Dict[str, Any]) -> List[str]:
        return sorted(c for c in alteracoes if c not in ("updated_at", "responded_at"))

    def _publicar_mudanca_status(self, ticket: TicketEntity, status_anterior: TicketStatus) -> None:
        if ticket.esta_fechado:
            self.uow.publish_event(
                TicketFechadoEvent(
                    aggregate_id=ticket.id,
                    organization_id=ticket.organization_id,
                    closed_by=ticket.closed_by,
                    closed_on=ticket.closed_on.isoformat(),
                    tempo_resposta_horas=ticket.tempo_resposta_horas,
                )
            )
        elif status_anterior == TicketStatus.FECHADO:
            self.uow.publish_event(
                TicketReabertoEvent(
                    aggregate_id=ticket.id,
                    organization_id=ticket.organization_id,
                    status=ticket.status.value,
                )
            )


class AtribuirTicketService(_NotificaAtribuicaoMixin):
    """
    Use Case: Atribuir ticket a um usuário.

    Fluxo:
    1. Buscar ticket no tenant
    2. Validar que o usuário existe
    3. Executar atribuição na entidade (status não muda)
    4. Persistir e notificar se o responsável mudou
    """

    def __init__(
        self,
        ticket_repo: TicketRepository,
        uow: UnitOfWork,
        user_directory: UserDirectory,
        notification_gateway: NotificationGateway,
    ):
        self.ticket_repo = ticket_repo
        self.uow = uow
        self.user_directory = user_directory
        self.notification_gateway = notification_gateway

    def execute(self, input_dto: AtribuirTicketInputDTO) -> TicketOutputDTO:
        """
        Executa atribuição de ticket.

        Raises:
            ValidationError: Se usuário não informado
            EntityNotFoundError: Se ticket ou usuário não existe
        """
        if not input_dto.usuario_id:
            raise ValidationError("Usuário é obrigatório", field="usuario_id")

        with self.uow:
            ticket = obter_ticket_da_organizacao(
                self.ticket_repo, input_dto.ticket_id, input_dto.organization_id
            )
            garantir_usuario(self.user_directory, input_dto.usuario_id)

            atribuido_anterior = ticket.assigned_to
            if not ticket.atribuir_a(input_dto.usuario_id):
                logger.debug(
                    f"Ticket {ticket.ticket_no} já atribuído a {input_dto.usuario_id}"
                )
                return TicketOutputDTO.from_entity(ticket)

            ticket = self.ticket_repo.update(
                ticket.id,
                {"assigned_to": ticket.assigned_to, "updated_at": ticket.updated_at},
            )
            self._notificar_atribuicao(ticket, atribuido_anterior)

        return TicketOutputDTO.from_entity(ticket)


class ObterTicketService:
    """
    Use Case: Obter detalhes de um ticket específico.
    """

    def __init__(self, ticket_repo: TicketRepository):
        self.ticket_repo = ticket_repo

    def execute(self, organization_id: str, ticket_id: str) -> TicketOutputDTO:
        """
        Raises:
            EntityNotFoundError: Se ticket não existe na organização
        """
        ticket = obter_ticket_da_organizacao(self.ticket_repo, ticket_id, organization_id)
        logger.debug(f"Ticket {ticket.ticket_no} consultado")
        return TicketOutputDTO.from_entity(ticket)


class BuscarTicketsService:
    """
    Use Case: Buscar tickets da organização.

    Não usa UoW pois é operação de leitura (não precisa de transação).

    Regras:
    - organization_id sempre filtra por igualdade exata
    - termo: substring case-insensitive em celular, arquivo, nome ou número
    - status: igualdade exata
    - ordenação: created_on decrescente
    """

    def __init__(self, ticket_repo: TicketRepository):
        self.ticket_repo = ticket_repo

    def execute(self, query: BuscarTicketsQueryDTO) -> List[TicketListItemDTO]:
        """
        Raises:
            ValidationError: Se organização ausente ou status inválido
        """
        if not query.organization_id:
            raise ValidationError("Organização é obrigatória", field="organization_id")

        status = query.status_normalizado
        if status:
            try:
                status = TicketStatus.from_string(status).value
            except ValueError as e:
                raise ValidationError(str(e), field="status")

        tickets = self.ticket_repo.select_by_organization(
            query.organization_id,
            termo=query.termo_normalizado,
            status=status,
        )
        logger.debug(
            f"Busca em {query.organization_id} "
            f"(termo={query.termo_normalizado!r}, status={status!r}): {len(tickets)} tickets"
        )
        return [TicketListItemDTO.from_entity(t) for t in tickets]
