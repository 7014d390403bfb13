"""
Django Admin para o domínio de Tickets.

Configuração do admin para gerenciamento de tickets via interface web.
"""

from django.contrib import admin
from django.utils.html import format_html

from .models import (
    AssignmentNotificationModel,
    TicketAttachmentModel,
    TicketModel,
    TicketSequenceModel,
)


class TicketAttachmentInline(admin.TabularInline):
    model = TicketAttachmentModel
    extra = 0
    fields = ['position', 'name', 'mime_type', 'size', 'url']
    readonly_fields = ['size']


@admin.register(TicketModel)
class TicketAdmin(admin.ModelAdmin):
    """Admin para TicketModel."""

    list_display = [
        'ticket_no',
        'organization',
        'name_of_client',
        'issue_type',
        'status_badge',
        'assigned_to',
        'created_on',
    ]

    list_filter = [
        'status',
        'organization',
        'issue_type',
        'created_on',
    ]

    search_fields = [
        'ticket_no',
        'mobile_no',
        'client_file_no',
        'name_of_client',
    ]

    readonly_fields = [
        'id',
        'ticket_no',
        'organization',
        'created_on',
        'opened_by',
        'created_at',
        'updated_at',
        'responded_at',
    ]

    fieldsets = [
        ('Identificação', {
            'fields': ['id', 'ticket_no', 'organization', 'created_on', 'opened_by'],
        }),
        ('Cliente', {
            'fields': ['client_file_no', 'mobile_no', 'name_of_client'],
        }),
        ('Problema', {
            'fields': ['issue_type', 'description', 'resolution'],
        }),
        ('Status', {
            'fields': ['status', 'assigned_to', 'closed_on', 'closed_by'],
        }),
        ('Timestamps', {
            'fields': ['created_at', 'updated_at', 'responded_at'],
            'classes': ['collapse'],
        }),
    ]

    inlines = [TicketAttachmentInline]

    ordering = ['-created_on', '-created_at']

    date_hierarchy = 'created_on'

    def status_badge(self, obj):
        """Exibe status com badge colorido."""
        colors = {
            'open': '#17a2b8',
            'in_progress': '#ffc107',
            'closed': '#343a40',
        }
        color = colors.get(obj.status, '#6c757d')
        return format_html(
            '<span style="background-color: {}; color: white; padding: 3px 8px; '
            'border-radius: 3px; font-size: 11px;">{}</span>',
            color,
            obj.get_status_display()
        )
    status_badge.short_description = 'Status'


@admin.register(TicketSequenceModel)
class TicketSequenceAdmin(admin.ModelAdmin):
    list_display = ['organization', 'last_value']
    readonly_fields = ['organization', 'last_value']


@admin.register(AssignmentNotificationModel)
class AssignmentNotificationAdmin(admin.ModelAdmin):
    """Admin para notificações de atribuição."""

    list_display = [
        'ticket_no',
        'user_id',
        'read',
        'created_at',
        'read_at',
    ]

    list_filter = [
        'read',
        'created_at',
    ]

    search_fields = [
        'ticket__ticket_no',
        'user_id',
    ]

    readonly_fields = [
        'ticket',
        'user_id',
        'created_at',
        'read_at',
    ]

    def ticket_no(self, obj):
        return obj.ticket.ticket_no
    ticket_no.short_description = 'Ticket'
