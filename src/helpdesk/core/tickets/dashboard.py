"""
Agregações do dashboard de uma organização.

Funções puras (calcular_estatisticas, contar_por_status) operam sobre um
conjunto de tickets já escopado; os services buscam esse conjunto no
repositório.

Tempo médio de resposta:
    Média, sobre os tickets fechados, das horas entre created_at e o
    primeiro atendimento (responded_at; updated_at quando ausente).
    Nunca negativo; 0.0 sem tickets fechados; duas casas decimais.
"""

import logging
from datetime import date
from typing import Iterable, Optional

from helpdesk.core.shared.exceptions import ValidationError

from .dtos import DashboardStatsDTO, StatusCountsDTO
from .entities import TicketEntity, TicketStatus
from .ports import TicketRepository

logger = logging.getLogger(__name__)


def calcular_estatisticas(tickets: Iterable[TicketEntity], hoje: date) -> DashboardStatsDTO:
    """
    Calcula total, abertos, resolvidos hoje e tempo médio de resposta.

    Args:
        tickets: Tickets de uma única organização
        hoje: Data corrente (injetada para testes determinísticos)
    """
    stats = DashboardStatsDTO()
    tempos = []

    for ticket in tickets:
        stats.total_tickets += 1

        if ticket.status == TicketStatus.ABERTO:
            stats.open_tickets += 1

        if ticket.esta_fechado:
            if ticket.closed_on == hoje:
                stats.resolved_today += 1
            tempos.append(ticket.tempo_resposta_horas or 0.0)

    if tempos:
        stats.avg_response_time_hours = round(sum(tempos) / len(tempos), 2)

    return stats


def contar_por_status(tickets: Iterable[TicketEntity]) -> StatusCountsDTO:
    """Contagens por status e atribuídos em uma única passagem."""
    counts = StatusCountsDTO()

    for ticket in tickets:
        if ticket.esta_atribuido:
            counts.assigned += 1

        if ticket.status == TicketStatus.ABERTO:
            counts.open += 1
        elif ticket.status == TicketStatus.EM_PROGRESSO:
            counts.in_progress += 1
        elif ticket.status == TicketStatus.FECHADO:
            counts.closed += 1

    return counts


class ObterEstatisticasDashboardService:
    """
    Use Case: estatísticas do dashboard.

    Example:
        service = ObterEstatisticasDashboardService(ticket_repo)
        stats = service.execute("O1")
        stats.to_dict()  # {"total_tickets": 3, "open_tickets": 1, ...}
    """

    def __init__(self, ticket_repo: TicketRepository):
        self.ticket_repo = ticket_repo

    def execute(self, organization_id: str, hoje: Optional[date] = None) -> DashboardStatsDTO:
        if not organization_id:
            raise ValidationError("Organização é obrigatória", field="organization_id")

        tickets = self.ticket_repo.select_by_organization(organization_id)
        stats = calcular_estatisticas(tickets, hoje or date.today())

        logger.debug(f"Estatísticas de {organization_id}: {stats.to_dict()}")
        return stats


class ContarTicketsPorStatusService:
    """
    Use Case: contagens por status.

    Estratégias (devem concordar para os mesmos dados):
    - "passagem_unica": uma leitura, contagem em memória
    - "consultas": quatro contagens filtradas no repositório
    """

    ESTRATEGIAS = ("passagem_unica", "consultas")

    def __init__(self, ticket_repo: TicketRepository):
        self.ticket_repo = ticket_repo

    def execute(self, organization_id: str, estrategia: str = "passagem_unica") -> StatusCountsDTO:
        """
        Raises:
            ValidationError: Se organização ausente ou estratégia desconhecida
        """
        if not organization_id:
            raise ValidationError("Organização é obrigatória", field="organization_id")

        if estrategia == "passagem_unica":
            return contar_por_status(self.ticket_repo.select_by_organization(organization_id))

        if estrategia == "consultas":
            return StatusCountsDTO(
                assigned=self.ticket_repo.count_by_organization(
                    organization_id, apenas_atribuidos=True
                ),
                closed=self.ticket_repo.count_by_organization(
                    organization_id, status=TicketStatus.FECHADO
                ),
                open=self.ticket_repo.count_by_organization(
                    organization_id, status=TicketStatus.ABERTO
                ),
                in_progress=self.ticket_repo.count_by_organization(
                    organization_id, status=TicketStatus.EM_PROGRESSO
                ),
            )

        raise ValidationError(
            f"Estratégia inválida: {estrategia}. Use: {', '.join(self.ESTRATEGIAS)}",
            field="estrategia"
        )
