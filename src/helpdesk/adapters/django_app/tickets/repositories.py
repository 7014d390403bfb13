"""
Repositórios Django para persistência de Tickets e Notificações.

Implementam as interfaces (Ports) definidas no Core.
São DRIVEN ADAPTERS - acionados pelo Core em resposta a operações.

Responsabilidades:
- Implementar TicketRepository e NotificationGateway
- Mapear entities para models e vice-versa
- Gerar ticket_no pela sequência da organização
- Traduzir DatabaseError em PersistenceError

Princípios:
- Repository não contém lógica de negócio
- Usa Mapper para conversões
- Leituras sempre escopadas por organização
"""

from typing import Any, Dict, List, Optional
import logging

from django.db import DatabaseError, transaction
from django.db.models import Q
from django.utils import timezone

from helpdesk.core.shared.exceptions import EntityNotFoundError, PersistenceError
from helpdesk.core.tickets.entities import TicketEntity, TicketStatus

from .mappers import AttachmentMapper, TicketMapper
from .models import (
    AssignmentNotificationModel,
    TicketAttachmentModel,
    TicketModel,
    TicketSequenceModel,
)

logger = logging.getLogger(__name__)


class DjangoTicketRepository:
    """
    Implementação Django do TicketRepository.

    Example:
        repo = DjangoTicketRepository()

        # Criar
        ticket = repo.insert(ticket_entity)   # ticket.ticket_no == "TKT-000001"

        # Buscar
        tickets = repo.select_by_organization(org_id, termo="jane", status="open")
    """

    NUMERO_FORMATO = "TKT-{:06d}"

    def __init__(self):
        self._mapper = TicketMapper()

    def _queryset(self):
        return TicketModel.objects.prefetch_related('attachments')

    def insert(self, ticket: TicketEntity) -> TicketEntity:
        """
        Persiste novo ticket com número gerado na sequência da organização.

        Raises:
            PersistenceError: Se falha na persistência
        """
        try:
            with transaction.atomic():
                ticket.ticket_no = self._proximo_numero(ticket.organization_id)

                TicketModel.objects.create(**self._mapper.to_fields(ticket))
                TicketAttachmentModel.objects.bulk_create([
                    AttachmentMapper.to_model(anexo, ticket.id, posicao)
                    for posicao, anexo in enumerate(ticket.attachments)
                ])
        except DatabaseError as e:
            logger.error(f"Falha ao inserir ticket na organização {ticket.organization_id}: {e}")
            raise PersistenceError(f"Falha ao criar ticket: {e}", operation="insert")

        logger.info(f"Ticket inserted: {ticket.ticket_no} ({ticket.id})")
        return self.select_by_id(ticket.id)

    def _proximo_numero(self, organization_id: str) -> str:
        sequencia, _ = (
            TicketSequenceModel.objects
            .select_for_update()
            .get_or_create(organization_id=organization_id)
        )
        sequencia.last_value += 1
        sequencia.save(update_fields=['last_value'])
        return self.NUMERO_FORMATO.format(sequencia.last_value)

    def update(self, ticket_id: str, campos: Dict[str, Any]) -> TicketEntity:
        """
        Atualização parcial (apenas as colunas informadas).

        Raises:
            EntityNotFoundError: Se ticket não existe
            PersistenceError: Se falha na persistência
        """
        colunas = self._mapper.to_columns(campos)

        try:
            atualizados = TicketModel.objects.filter(id=ticket_id).update(**colunas)
        except DatabaseError as e:
            logger.error(f"Falha ao atualizar ticket {ticket_id}: {e}")
            raise PersistenceError(f"Falha ao atualizar ticket: {e}", operation="update")

        if not atualizados:
            raise EntityNotFoundError(
                f"Ticket {ticket_id} não encontrado",
                entity_type="Ticket",
                entity_id=ticket_id
            )

        logger.info(f"Ticket updated: {ticket_id} ({', '.join(sorted(colunas))})")
        return self.select_by_id(ticket_id)

    def select_by_organization(
        self,
        organization_id: str,
        termo: Optional[str] = None,
        status: Optional[str] = None,
    ) -> List[TicketEntity]:
        queryset = self._queryset().filter(organization_id=organization_id)

        if status:
            queryset = queryset.filter(status=status)

        if termo:
            queryset = queryset.filter(
                Q(mobile_no__icontains=termo)
                | Q(client_file_no__icontains=termo)
                | Q(name_of_client__icontains=termo)
                | Q(ticket_no__icontains=termo)
            )

        try:
            models = list(queryset.order_by('-created_on', '-created_at'))
        except DatabaseError as e:
            raise PersistenceError(f"Falha ao buscar tickets: {e}", operation="select_by_organization")

        return self._mapper.to_entity_list(models)

    def select_by_id(self, ticket_id: str) -> Optional[TicketEntity]:
        try:
            model = self._queryset().filter(id=ticket_id).first()
        except DatabaseError as e:
            raise PersistenceError(f"Falha ao buscar ticket: {e}", operation="select_by_id")

        if not model:
            logger.debug(f"Ticket not found: {ticket_id}")
            return None
        return self._mapper.to_entity(model)

    def count_by_organization(
        self,
        organization_id: str,
        status: Optional[TicketStatus] = None,
        apenas_atribuidos: bool = False,
    ) -> int:
        queryset = TicketModel.objects.filter(organization_id=organization_id)

        if status is not None:
            queryset = queryset.filter(status=status.value)
        if apenas_atribuidos:
            queryset = queryset.filter(assigned_to__isnull=False)

        try:
            return queryset.count()
        except DatabaseError as e:
            raise PersistenceError(f"Falha ao contar tickets: {e}", operation="count_by_organization")


class DjangoNotificationGateway:
    """
    Implementação Django do NotificationGateway.

    Mantém no máximo uma notificação não lida por (usuário, ticket):
    uma nova atribuição ao mesmo usuário apenas renova a data.
    """

    def notify_assignment(self, ticket_id: str, assignee_id: str) -> None:
        try:
            AssignmentNotificationModel.objects.update_or_create(
                ticket_id=ticket_id,
                user_id=assignee_id,
                read=False,
                defaults={'created_at': timezone.now()},
            )
        except DatabaseError as e:
            raise PersistenceError(f"Falha ao registrar notificação: {e}", operation="notify_assignment")

        logger.info(f"Notification created: ticket {ticket_id} → {assignee_id}")

    def get_notifications(self, user_id: str) -> List[TicketEntity]:
        try:
            notificacoes = list(
                AssignmentNotificationModel.objects
                .filter(user_id=user_id, read=False)
                .select_related('ticket')
                .prefetch_related('ticket__attachments')
                .order_by('-created_at')
            )
        except DatabaseError as e:
            raise PersistenceError(f"Falha ao buscar notificações: {e}", operation="get_notifications")

        tickets = []
        vistos = set()
        for notificacao in notificacoes:
            if notificacao.ticket_id in vistos:
                continue
            vistos.add(notificacao.ticket_id)
            tickets.append(TicketMapper.to_entity(notificacao.ticket))
        return tickets

    def mark_read(self, user_id: str, ticket_id: str) -> None:
        try:
            AssignmentNotificationModel.objects.filter(
                user_id=user_id,
                ticket_id=ticket_id,
                read=False,
            ).update(read=True, read_at=timezone.now())
        except DatabaseError as e:
            raise PersistenceError(f"Falha ao marcar notificação: {e}", operation="mark_read")

    def has_notification(self, user_id: str, ticket_id: str) -> bool:
        try:
            return AssignmentNotificationModel.objects.filter(
                user_id=user_id,
                ticket_id=ticket_id,
            ).exists()
        except DatabaseError as e:
            raise PersistenceError(f"Falha ao buscar notificação: {e}", operation="has_notification")
