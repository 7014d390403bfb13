"""
Event Handlers - Processadores de Eventos de Domínio.

Handlers são executados de forma assíncrona via Celery quando
Domain Events são publicados pelo CeleryEventPublisher. Isso permite:

- Desacoplamento: Produtores não conhecem consumidores
- Escalabilidade: Processamento distribuído em workers
- Resiliência: Retry do próprio Celery em falhas

Tipos de Handlers:
- Notificação: avisar o novo responsável de um ticket
- Agregação: métricas e relatório diário por organização

Padrão:
    @shared_task(bind=True, ...)
    def handle_<evento>(self, event_data: dict) -> None:
        # event_data é o DomainEvent.to_dict(); campos próprios em "data"
"""

import logging
from datetime import date, datetime, timezone
from typing import Any, Dict, List

from celery import shared_task

logger = logging.getLogger(__name__)


def _dados(event_data: Dict[str, Any]) -> Dict[str, Any]:
    return event_data.get('data') or {}


# =============================================================================
# Event Handlers - Tickets
# =============================================================================

@shared_task(
    bind=True,
    max_retries=3,
    default_retry_delay=60,
    autoretry_for=(Exception,),
    acks_late=True,
)
def handle_ticket_criado(self, event_data: Dict[str, Any]) -> None:
    """
    Handler para evento TicketCriadoEvent.

    Ações:
    - Registrar métrica de abertura por organização e tipo de problema
    """
    ticket_id = event_data.get('aggregate_id')
    dados = _dados(event_data)

    logger.info(
        f"[HANDLER] TicketCriado: {ticket_id} | "
        f"Número: {dados.get('ticket_no')} | Org: {dados.get('organization_id')}"
    )

    record_metric.delay(
        metric_name='tickets_created',
        value=1,
        tags={
            'organization_id': dados.get('organization_id', ''),
            'issue_type': dados.get('issue_type', ''),
        }
    )


@shared_task(
    bind=True,
    max_retries=3,
    default_retry_delay=60,
    acks_late=True,
)
def handle_ticket_atribuido(self, event_data: Dict[str, Any]) -> None:
    """
    Handler para evento TicketAtribuidoEvent.

    Ações:
    - Avisar o novo responsável (o registro de notificação já foi
      criado na mesma transação da atribuição)
    """
    dados = _dados(event_data)
    assigned_to = dados.get('assigned_to')
    ticket_no = dados.get('ticket_no') or event_data.get('aggregate_id')

    logger.info(f"[HANDLER] TicketAtribuido: {ticket_no} | Responsável: {assigned_to}")

    if assigned_to:
        notify_user.delay(
            user_id=assigned_to,
            message=f"Você foi atribuído ao ticket {ticket_no}",
            channel='email'
        )


@shared_task(
    bind=True,
    max_retries=3,
    default_retry_delay=60,
    acks_late=True,
)
def handle_ticket_fechado(self, event_data: Dict[str, Any]) -> None:
    """
    Handler para evento TicketFechadoEvent.

    Ações:
    - Registrar métricas de fechamento e tempo de resposta
    """
    ticket_id = event_data.get('aggregate_id')
    dados = _dados(event_data)
    organization_id = dados.get('organization_id', '')

    logger.info(
        f"[HANDLER] TicketFechado: {ticket_id} | "
        f"Fechado por: {dados.get('closed_by')} em {dados.get('closed_on')}"
    )

    record_metric.delay(
        metric_name='tickets_closed',
        value=1,
        tags={'organization_id': organization_id}
    )

    if dados.get('tempo_resposta_horas') is not None:
        record_metric.delay(
            metric_name='response_time_hours',
            value=dados['tempo_resposta_horas'],
            tags={'organization_id': organization_id}
        )


@shared_task(
    bind=True,
    max_retries=3,
    default_retry_delay=60,
    acks_late=True,
)
def handle_ticket_reaberto(self, event_data: Dict[str, Any]) -> None:
    """Handler para evento TicketReabertoEvent: métrica de reabertura."""
    ticket_id = event_data.get('aggregate_id')
    dados = _dados(event_data)

    logger.info(f"[HANDLER] TicketReaberto: {ticket_id} | Novo status: {dados.get('status')}")

    record_metric.delay(
        metric_name='tickets_reopened',
        value=1,
        tags={'organization_id': dados.get('organization_id', '')}
    )


# =============================================================================
# Event Dispatcher (Router)
# =============================================================================

@shared_task(bind=True, max_retries=5, default_retry_delay=30)
def dispatch_domain_event(self, event_type: str, event_data: Dict[str, Any]) -> None:
    """
    Dispatcher central para Domain Events.

    Roteia eventos para os handlers apropriados. Eventos sem handler
    (ex: TicketAtualizadoEvent) são apenas registrados no log.

    Args:
        event_type: Tipo do evento (ex: 'TicketCriadoEvent')
        event_data: Dados do evento serializado
    """
    handlers = {
        'TicketCriadoEvent': handle_ticket_criado,
        'TicketAtribuidoEvent': handle_ticket_atribuido,
        'TicketFechadoEvent': handle_ticket_fechado,
        'TicketReabertoEvent': handle_ticket_reaberto,
    }

    handler = handlers.get(event_type)

    if handler:
        logger.info(f"[DISPATCHER] Roteando {event_type} para handler")
        handler.delay(event_data)
    else:
        logger.debug(f"[DISPATCHER] Sem handler para {event_type}")


# =============================================================================
# Notification Tasks
# =============================================================================

@shared_task(bind=True, max_retries=3, default_retry_delay=120)
def notify_user(
    self,
    user_id: str,
    message: str,
    channel: str = 'email',
) -> None:
    """
    Avisa usuário por canal externo.

    O aviso dentro da aplicação é o próprio registro de notificação
    (consultado em /api/notificacoes/); este task só registra o envio.
    """
    logger.info(f"[NOTIFICATION] {channel.upper()} para {user_id}: {message}")


# =============================================================================
# Metric Tasks
# =============================================================================

@shared_task(bind=True, ignore_result=True)
def record_metric(
    self,
    metric_name: str,
    value: float,
    tags: Dict[str, str] = None
) -> None:
    """
    Registra métrica para monitoramento.

    Args:
        metric_name: Nome da métrica
        value: Valor
        tags: Tags para dimensões
    """
    logger.info(f"[METRIC] {metric_name}={value} | tags={tags or {}}")


# =============================================================================
# Scheduled Tasks (Beat)
# =============================================================================

@shared_task(bind=True)
def generate_daily_report(self) -> Dict[str, Any]:
    """
    Gera relatório diário com as estatísticas de cada organização.

    Executada diariamente pelo Celery Beat.

    Returns:
        Dados do relatório
    """
    logger.info("[SCHEDULED] Gerando relatório diário...")

    # Importação tardia para evitar circular import
    from helpdesk.config.container import get_container

    container = get_container()
    org_repo = container.organization_repository()
    estatisticas_service = container.obter_estatisticas_dashboard_service()
    contagem_service = container.contar_tickets_por_status_service()

    hoje = date.today()
    organizacoes: List[Dict[str, Any]] = []

    for organization in org_repo.list_all():
        try:
            stats = estatisticas_service.execute(organization.id, hoje=hoje)
            counts = contagem_service.execute(organization.id)
        except Exception as e:
            logger.error(
                f"Erro no relatório da organização {organization.slug}: {e}",
                exc_info=True
            )
            continue

        organizacoes.append({
            'organization_id': organization.id,
            'slug': organization.slug,
            **stats.to_dict(),
            'por_status': counts.to_dict(),
        })

    report = {
        'data': datetime.now(timezone.utc).isoformat(),
        'organizacoes': organizacoes,
    }

    logger.info(f"[SCHEDULED] Relatório gerado para {len(organizacoes)} organizações")
    return report
