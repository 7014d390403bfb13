"""
API Views JSON para o domínio de Tickets.

Endpoints (todos escopados pela organização do <slug>, exceto notificações):
- GET   /api/<slug>/tickets/?q=&status=  - Buscar tickets
- POST  /api/<slug>/tickets/             - Criar ticket
- GET   /api/<slug>/tickets/<id>/        - Obter ticket
- PATCH /api/<slug>/tickets/<id>/        - Atualizar ticket parcial
- POST  /api/<slug>/tickets/<id>/atribuir/ - Atribuir ticket
- GET   /api/<slug>/dashboard/           - Estatísticas e contagens
- POST  /api/<slug>/anexos/              - Upload de anexos (multipart)
- GET   /api/notificacoes/               - Notificações do usuário
- POST  /api/notificacoes/<id>/abrir/    - Abrir notificação

Formato:
- Entrada: JSON
- Saída: JSON com estrutura {success, data/error, meta}
"""

import logging

from django.conf import settings
from django.http import HttpRequest, JsonResponse

from helpdesk.core.shared.exceptions import ValidationError
from helpdesk.core.tickets.dtos import (
    AbrirNotificacaoInputDTO,
    ArquivoUploadDTO,
    AtribuirTicketInputDTO,
    AtualizarTicketInputDTO,
    BuscarTicketsQueryDTO,
    CriarTicketInputDTO,
)
from helpdesk.core.tickets.entities import AttachmentEntity

from ..shared.api import BaseAPIView, get_user_id, json_response
from .forms import TicketAtribuirForm, TicketCreateForm, TicketFiltroForm, TicketUpdateForm

logger = logging.getLogger(__name__)


def _parse_attachments(valor) -> tuple:
    """Anexos já enviados, no formato retornado por /anexos/."""
    if not valor:
        return ()
    if not isinstance(valor, list):
        raise ValidationError("attachments deve ser uma lista", field="attachments")
    try:
        return tuple(AttachmentEntity.from_dict(item) for item in valor)
    except (KeyError, TypeError, ValueError) as e:
        raise ValidationError(f"Anexo inválido: {e}", field="attachments")


# =============================================================================
# Ticket API Views
# =============================================================================

class TicketAPIListView(BaseAPIView):
    """
    API para buscar e criar tickets.

    GET  /api/<slug>/tickets/ - Busca tickets
    POST /api/<slug>/tickets/ - Cria ticket
    """

    def get(self, request: HttpRequest, slug: str) -> JsonResponse:
        """
        Query params:
        - q: Termo (celular, arquivo, nome do cliente ou número)
        - status: open | in_progress | closed
        """
        try:
            context = self.get_context(request, slug)

            form = TicketFiltroForm(request.GET)
            if not form.is_valid():
                return self.form_errors(form)

            buscar_service = self.get_service('buscar_tickets_service')
            tickets = buscar_service.execute(
                BuscarTicketsQueryDTO(
                    organization_id=context.organization_id,
                    termo=form.cleaned_data['q'],
                    status=form.cleaned_data['status'],
                )
            )

            return json_response(
                success=True,
                data=[t.to_dict() for t in tickets],
                meta={'total': len(tickets), 'organization': context.organization_slug}
            )

        except Exception as e:
            return self.handle_exception(e)

    def post(self, request: HttpRequest, slug: str) -> JsonResponse:
        """
        Cria novo ticket.

        Body JSON:
        {
            "client_file_no": "string (obrigatório)",
            "mobile_no": "string (obrigatório)",
            "name_of_client": "string (obrigatório)",
            "issue_type": "item do catálogo (obrigatório)",
            "description": "string (obrigatório)",
            "resolution": "string (opcional)",
            "assigned_to": "id de usuário (opcional)",
            "attachments": [{"name", "size", "mime_type", "url"}] (opcional)
        }
        """
        try:
            context = self.get_context(request, slug)
            data = self.parse_body(request)

            form = TicketCreateForm(data)
            if not form.is_valid():
                return self.form_errors(form)

            criar_service = self.get_service('criar_ticket_service')
            output = criar_service.execute(
                CriarTicketInputDTO(
                    organization_id=context.organization_id,
                    opened_by=context.user_email,
                    attachments=_parse_attachments(data.get('attachments')),
                    **form.cleaned_data,
                )
            )

            logger.info(f"API: Ticket criado: {output.ticket_no} em {context.organization_slug}")

            return json_response(
                success=True,
                data=output.to_dict(),
                status=201
            )

        except Exception as e:
            return self.handle_exception(e)


class TicketAPIDetailView(BaseAPIView):
    """
    API para operações em ticket específico.

    GET   /api/<slug>/tickets/<id>/ - Obter ticket
    PATCH /api/<slug>/tickets/<id>/ - Atualizar ticket
    """

    def get(self, request: HttpRequest, slug: str, pk: str) -> JsonResponse:
        try:
            context = self.get_context(request, slug)
            obter_service = self.get_service('obter_ticket_service')
            ticket = obter_service.execute(context.organization_id, pk)

            return json_response(success=True, data=ticket.to_dict())

        except Exception as e:
            return self.handle_exception(e)

    def patch(self, request: HttpRequest, slug: str, pk: str) -> JsonResponse:
        """
        Atualiza ticket parcialmente.

        Body JSON: qualquer subconjunto dos campos editáveis. Fechar
        exige "closed_on" (YYYY-MM-DD) e "closed_by" juntos.
        """
        try:
            context = self.get_context(request, slug)
            data = self.parse_body(request)

            form = TicketUpdateForm(data)
            if not form.is_valid():
                return self.form_errors(form)

            atualizar_service = self.get_service('atualizar_ticket_service')
            output = atualizar_service.execute(
                AtualizarTicketInputDTO(
                    organization_id=context.organization_id,
                    ticket_id=pk,
                    campos=form.campos_alterados(data),
                    alterado_por=context.user_id,
                )
            )

            return json_response(success=True, data=output.to_dict())

        except Exception as e:
            return self.handle_exception(e)


class TicketAPIAtribuirView(BaseAPIView):
    """
    API para atribuir ticket.

    POST /api/<slug>/tickets/<id>/atribuir/
    """

    def post(self, request: HttpRequest, slug: str, pk: str) -> JsonResponse:
        """
        Body JSON:
        {
            "usuario_id": "string (obrigatório)"
        }
        """
        try:
            context = self.get_context(request, slug)
            form = TicketAtribuirForm(self.parse_body(request))
            if not form.is_valid():
                return self.form_errors(form)

            atribuir_service = self.get_service('atribuir_ticket_service')
            output = atribuir_service.execute(
                AtribuirTicketInputDTO(
                    organization_id=context.organization_id,
                    ticket_id=pk,
                    usuario_id=form.cleaned_data['usuario_id'],
                    atribuido_por=context.user_id,
                )
            )

            logger.info(f"API: Ticket {pk} atribuído a {form.cleaned_data['usuario_id']}")

            return json_response(success=True, data=output.to_dict())

        except Exception as e:
            return self.handle_exception(e)


class DashboardAPIView(BaseAPIView):
    """
    API para estatísticas do dashboard.

    GET /api/<slug>/dashboard/?estrategia=passagem_unica|consultas
    """

    def get(self, request: HttpRequest, slug: str) -> JsonResponse:
        try:
            context = self.get_context(request, slug)

            estatisticas_service = self.get_service('obter_estatisticas_dashboard_service')
            contagem_service = self.get_service('contar_tickets_por_status_service')

            stats = estatisticas_service.execute(context.organization_id)
            counts = contagem_service.execute(
                context.organization_id,
                estrategia=request.GET.get('estrategia') or 'passagem_unica',
            )

            return json_response(
                success=True,
                data={
                    **stats.to_dict(),
                    'status_counts': counts.to_dict(),
                }
            )

        except Exception as e:
            return self.handle_exception(e)


class AnexosAPIView(BaseAPIView):
    """
    API para upload de anexos.

    POST /api/<slug>/anexos/ (multipart, campo "files")

    Cada arquivo é aceito ou rejeitado individualmente; a resposta
    traz um resultado por arquivo, na ordem de envio.
    """

    def post(self, request: HttpRequest, slug: str) -> JsonResponse:
        try:
            self.get_context(request, slug)

            arquivos = [
                ArquivoUploadDTO(
                    name=f.name,
                    content=f.read(),
                    mime_type=f.content_type or 'application/octet-stream',
                )
                for f in request.FILES.getlist('files')
            ]
            if not arquivos:
                raise ValidationError("Nenhum arquivo enviado", field="files")

            enviar_service = self.get_service('enviar_anexos_service')
            resultados = enviar_service.execute(arquivos, user_id=get_user_id(request))

            enviados = len([r for r in resultados if r.sucesso])
            return json_response(
                success=True,
                data=[r.to_dict() for r in resultados],
                meta={
                    'enviados': enviados,
                    'falhas': len(resultados) - enviados,
                    'max_size': settings.ATTACHMENT_MAX_SIZE,
                }
            )

        except Exception as e:
            return self.handle_exception(e)


# =============================================================================
# Notificações
# =============================================================================

class NotificacoesAPIView(BaseAPIView):
    """GET /api/notificacoes/ - tickets com notificação não lida."""

    def get(self, request: HttpRequest) -> JsonResponse:
        try:
            listar_service = self.get_service('listar_notificacoes_service')
            tickets = listar_service.execute(get_user_id(request))

            return json_response(
                success=True,
                data=[t.to_dict() for t in tickets],
                meta={'total': len(tickets)}
            )

        except Exception as e:
            return self.handle_exception(e)


class AbrirNotificacaoAPIView(BaseAPIView):
    """POST /api/notificacoes/<ticket_id>/abrir/ - reconhece notificação."""

    def post(self, request: HttpRequest, ticket_id: str) -> JsonResponse:
        try:
            abrir_service = self.get_service('abrir_notificacao_service')
            output = abrir_service.execute(
                AbrirNotificacaoInputDTO(
                    usuario_id=get_user_id(request),
                    ticket_id=ticket_id,
                )
            )

            return json_response(success=True, data=output.to_dict())

        except Exception as e:
            return self.handle_exception(e)
