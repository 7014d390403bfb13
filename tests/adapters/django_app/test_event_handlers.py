"""
Testes dos publishers e handlers Celery.

Tasks são chamadas diretamente (execução síncrona no processo);
as chamadas .delay encadeadas são substituídas por mocks.
"""

from unittest.mock import patch

import pytest

from helpdesk.adapters.django_app.events import handlers
from helpdesk.adapters.django_app.events.publishers import (
    CeleryEventPublisher,
    LoggingEventPublisher,
)
from helpdesk.core.tickets.events import TicketAtribuidoEvent, TicketFechadoEvent

HANDLERS = "helpdesk.adapters.django_app.events.handlers"


def _evento_atribuido():
    return TicketAtribuidoEvent(
        aggregate_id="t-1",
        organization_id="O1",
        ticket_no="TKT-000001",
        assigned_to="u2",
    )


class TestPublishers:

    def test_logging_publisher_executa_handlers_locais(self, caplog):
        publisher = LoggingEventPublisher()
        recebidos = []
        publisher.register_handler("TicketAtribuidoEvent", recebidos.append)

        with caplog.at_level("INFO"):
            publisher.publish(_evento_atribuido())

        assert len(recebidos) == 1
        assert "[EVENT] TicketAtribuidoEvent" in caplog.text

    def test_celery_publisher_envia_para_dispatcher(self):
        with patch(f"{HANDLERS}.dispatch_domain_event") as dispatch:
            CeleryEventPublisher(also_log=False).publish(_evento_atribuido())

        event_type, event_data = dispatch.delay.call_args.args
        assert event_type == "TicketAtribuidoEvent"
        assert event_data["data"]["assigned_to"] == "u2"

    def test_celery_publisher_tolera_broker_fora(self):
        publisher = CeleryEventPublisher(also_log=False)
        recebidos = []
        publisher.register_handler("TicketAtribuidoEvent", recebidos.append)

        with patch(f"{HANDLERS}.dispatch_domain_event") as dispatch:
            dispatch.delay.side_effect = ConnectionError("broker indisponível")
            publisher.publish(_evento_atribuido())

        assert len(recebidos) == 1


class TestHandlers:

    def test_dispatcher_roteia_para_handler(self):
        with patch(f"{HANDLERS}.handle_ticket_atribuido") as handler:
            handlers.dispatch_domain_event("TicketAtribuidoEvent", {"data": {}})

        handler.delay.assert_called_once_with({"data": {}})

    def test_dispatcher_ignora_evento_sem_handler(self):
        with patch(f"{HANDLERS}.handle_ticket_criado") as handler:
            handlers.dispatch_domain_event("TicketAtualizadoEvent", {"data": {}})

        handler.delay.assert_not_called()

    def test_atribuicao_avisa_responsavel(self):
        with patch(f"{HANDLERS}.notify_user") as notify:
            handlers.handle_ticket_atribuido(_evento_atribuido().to_dict())

        kwargs = notify.delay.call_args.kwargs
        assert kwargs["user_id"] == "u2"
        assert "TKT-000001" in kwargs["message"]

    def test_fechamento_registra_tempo_de_resposta(self):
        evento = TicketFechadoEvent(
            aggregate_id="t-1",
            organization_id="O1",
            closed_by="ana@helpdesk.com",
            closed_on="2024-01-05",
            tempo_resposta_horas=3.5,
        )

        with patch(f"{HANDLERS}.record_metric") as metric:
            handlers.handle_ticket_fechado(evento.to_dict())

        nomes = [c.kwargs["metric_name"] for c in metric.delay.call_args_list]
        assert nomes == ["tickets_closed", "response_time_hours"]


@pytest.mark.django_db
class TestRelatorioDiario:

    def test_relatorio_por_organizacao(self, organizacoes):
        report = handlers.generate_daily_report()

        assert {o["slug"] for o in report["organizacoes"]} == {"acme", "beta"}
        acme = next(o for o in report["organizacoes"] if o["slug"] == "acme")
        assert acme["total_tickets"] == 0
        assert acme["por_status"] == {"assigned": 0, "closed": 0, "open": 0, "in_progress": 0}
