"""
Django Models para o domínio de Tickets.

Estes models são ADAPTERS - implementam a persistência para as
entidades de domínio definidas em helpdesk/core/tickets/entities.py.

IMPORTANTE:
- Models NÃO contêm lógica de negócio
- Lógica de negócio fica nas Entities do Core
- Models são mapeados para/de Entities via Mappers

Relacionamentos:
- TicketModel: Tabela principal de tickets (pertence a uma organização)
- TicketAttachmentModel: Arquivos anexados
- TicketSequenceModel: Sequência de ticket_no por organização
- AssignmentNotificationModel: Notificações de atribuição
"""

import datetime

from django.db import models
from django.utils import timezone

from helpdesk.adapters.django_app.organizations.models import OrganizationModel


class TicketStatusChoices(models.TextChoices):
    """Choices para status de ticket (espelha TicketStatus do Core)."""
    OPEN = 'open', 'Aberto'
    IN_PROGRESS = 'in_progress', 'Em Progresso'
    CLOSED = 'closed', 'Fechado'


class TicketModel(models.Model):
    """
    Model Django para persistência de Tickets.

    Este model é um ADAPTER que persiste dados do TicketEntity.
    NÃO contém lógica de negócio - apenas estrutura de dados.

    Fields:
        id: UUID como primary key (gerado pela Entity)
        ticket_no: Número legível, único por organização
        organization: Organização dona do ticket
        created_on / opened_by: Abertura
        client_file_no / mobile_no / name_of_client: Dados do cliente
        issue_type / description / resolution: Problema
        status / closed_on / closed_by: Estado
        assigned_to: ID do usuário responsável (referência fraca)
        created_at / updated_at / responded_at: Timestamps
    """

    # Primary Key - UUID gerado pela Entity
    id = models.CharField(
        max_length=36,
        primary_key=True,
        editable=False,
        help_text="UUID único do ticket"
    )

    ticket_no = models.CharField(
        max_length=20,
        help_text="Número legível (sequência da organização)"
    )

    organization = models.ForeignKey(
        OrganizationModel,
        on_delete=models.PROTECT,
        related_name='tickets',
        help_text="Organização dona do ticket"
    )

    # Abertura
    created_on = models.DateField(default=datetime.date.today)

    opened_by = models.CharField(
        max_length=254,
        help_text="Email de quem abriu o ticket"
    )

    # Dados do cliente
    client_file_no = models.CharField(max_length=100)
    mobile_no = models.CharField(max_length=30)
    name_of_client = models.CharField(max_length=200)

    # Problema
    issue_type = models.CharField(max_length=100)
    description = models.TextField()
    resolution = models.TextField(blank=True, default='')

    # Estado
    status = models.CharField(
        max_length=20,
        choices=TicketStatusChoices.choices,
        default=TicketStatusChoices.OPEN,
        db_index=True,
        help_text="Estado atual do ticket"
    )

    closed_on = models.DateField(null=True, blank=True)
    closed_by = models.CharField(max_length=254, null=True, blank=True)

    assigned_to = models.CharField(
        max_length=100,
        null=True,
        blank=True,
        db_index=True,
        help_text="ID do usuário responsável"
    )

    # Timestamps
    created_at = models.DateTimeField(default=timezone.now, db_index=True)
    updated_at = models.DateTimeField(default=timezone.now)
    responded_at = models.DateTimeField(
        null=True,
        blank=True,
        help_text="Primeira saída do status open"
    )

    class Meta:
        db_table = 'tickets'
        verbose_name = 'Ticket'
        verbose_name_plural = 'Tickets'
        ordering = ['-created_on', '-created_at']
        constraints = [
            models.UniqueConstraint(
                fields=['organization', 'ticket_no'],
                name='unique_ticket_no_per_organization',
            ),
        ]
        indexes = [
            # Índices compostos para queries frequentes
            models.Index(fields=['organization', 'status'], name='tickets_org_status_idx'),
            models.Index(fields=['organization', 'created_on'], name='tickets_org_created_idx'),
        ]

    def __str__(self):
        return f"{self.ticket_no} - {self.name_of_client}"

    def __repr__(self):
        return f"<TicketModel id={self.id[:8]} status={self.status}>"


class TicketAttachmentModel(models.Model):
    """Arquivo anexado a um ticket (metadados; o conteúdo fica no storage)."""

    id = models.BigAutoField(primary_key=True)

    ticket = models.ForeignKey(
        TicketModel,
        on_delete=models.CASCADE,
        related_name='attachments',
    )

    name = models.CharField(max_length=255)
    size = models.PositiveIntegerField(help_text="Tamanho em bytes")
    mime_type = models.CharField(max_length=100)
    url = models.CharField(max_length=500)
    position = models.PositiveSmallIntegerField(default=0)
    created_at = models.DateTimeField(default=timezone.now)

    class Meta:
        db_table = 'ticket_attachments'
        verbose_name = 'Anexo'
        verbose_name_plural = 'Anexos'
        ordering = ['position', 'id']

    def __str__(self):
        return self.name


class TicketSequenceModel(models.Model):
    """
    Último ticket_no emitido por organização.

    Lida com select_for_update dentro de transaction.atomic, de forma
    que duas criações simultâneas nunca recebem o mesmo número.
    """

    organization = models.OneToOneField(
        OrganizationModel,
        on_delete=models.CASCADE,
        primary_key=True,
        related_name='ticket_sequence',
    )

    last_value = models.PositiveIntegerField(default=0)

    class Meta:
        db_table = 'ticket_sequences'
        verbose_name = 'Sequência de Tickets'
        verbose_name_plural = 'Sequências de Tickets'

    def __str__(self):
        return f"{self.organization_id}: {self.last_value}"


class AssignmentNotificationModel(models.Model):
    """
    Notificação de atribuição endereçada ao novo responsável.

    No máximo uma notificação não lida por (usuário, ticket).
    """

    id = models.BigAutoField(primary_key=True)

    ticket = models.ForeignKey(
        TicketModel,
        on_delete=models.CASCADE,
        related_name='notifications',
    )

    user_id = models.CharField(max_length=100, db_index=True)
    read = models.BooleanField(default=False)
    created_at = models.DateTimeField(default=timezone.now)
    read_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        db_table = 'assignment_notifications'
        verbose_name = 'Notificação de Atribuição'
        verbose_name_plural = 'Notificações de Atribuição'
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['user_id', 'read'], name='notif_user_read_idx'),
        ]

    def __str__(self):
        estado = 'lida' if self.read else 'não lida'
        return f"{self.user_id} ← {self.ticket_id[:8]} ({estado})"
