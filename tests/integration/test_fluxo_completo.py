"""
Testes de integração do fluxo completo via container DI.

Usa o container de teste (infraestrutura InMemory) para exercitar
os services exatamente como as views os obtêm.

Cenário:
1. Usuário seleciona a organização O1
2. Cria o ticket F100 / Jane Doe
3. Atribui a um agente, que abre a notificação
4. Fecha o ticket e confere o dashboard
"""

from datetime import date

import pytest

from helpdesk.config.container import criar_container_de_teste
from helpdesk.core.organizations.dtos import SelecionarOrganizacaoInputDTO
from helpdesk.core.organizations.entities import OrganizationEntity, UserEntity
from helpdesk.core.shared.exceptions import EntityNotFoundError, ValidationError
from helpdesk.core.tickets.dtos import (
    AbrirNotificacaoInputDTO,
    AtribuirTicketInputDTO,
    AtualizarTicketInputDTO,
    BuscarTicketsQueryDTO,
    CriarTicketInputDTO,
)

pytestmark = pytest.mark.integration


def _montar(feed_mode="pull"):
    container = criar_container_de_teste(notification_feed_mode=feed_mode)

    organizacoes = container.organization_repository()
    organizacoes.add(OrganizationEntity(id="O1", name="Org Um", slug="o1"))
    organizacoes.add(OrganizationEntity(id="O2", name="Org Dois", slug="o2"))
    organizacoes.add_membership("u1", "O1")
    organizacoes.add_membership("u2", "O1")

    usuarios = container.user_directory()
    usuarios.add(UserEntity(id="u1", email="ana@helpdesk.com"))
    usuarios.add(UserEntity(id="u2", email="bruno@helpdesk.com"))
    return container


@pytest.fixture
def container():
    return _montar()


def _criar(container, dados_ticket, organization_id="O1", **kwargs):
    return container.criar_ticket_service().execute(
        CriarTicketInputDTO(
            organization_id=organization_id,
            opened_by="ana@helpdesk.com",
            **{**dados_ticket, **kwargs},
        )
    )


class TestFluxoCompleto:

    def test_cenario_ponta_a_ponta(self, container, dados_ticket):
        context = container.selecionar_organizacao_service().execute(
            SelecionarOrganizacaoInputDTO(user_id="u1", user_email="ana@helpdesk.com", slug="o1")
        )

        ticket = _criar(container, dados_ticket, organization_id=context.organization_id)

        assert ticket.status == "open"
        assert ticket.organization_id == "O1"
        assert ticket.id
        assert ticket.ticket_no

        container.atribuir_ticket_service().execute(
            AtribuirTicketInputDTO(organization_id="O1", ticket_id=ticket.id, usuario_id="u2")
        )
        notificacoes = container.listar_notificacoes_service().execute("u2")
        assert [n.id for n in notificacoes] == [ticket.id]

        aberto = container.abrir_notificacao_service().execute(
            AbrirNotificacaoInputDTO(usuario_id="u2", ticket_id=ticket.id)
        )
        assert aberto.status == "in_progress"

        fechado = container.atualizar_ticket_service().execute(
            AtualizarTicketInputDTO(
                organization_id="O1",
                ticket_id=ticket.id,
                campos={"status": "closed", "closed_on": date.today(), "closed_by": "bruno@helpdesk.com"},
            )
        )
        assert fechado.status == "closed"

        stats = container.obter_estatisticas_dashboard_service().execute("O1")
        assert stats.total_tickets == 1
        assert stats.open_tickets == 0
        assert stats.resolved_today == 1
        assert stats.avg_response_time_hours >= 0

        eventos = [e.event_type for e in container.event_publisher().published_events]
        assert eventos[0] == "TicketCriadoEvent"
        assert "TicketAtribuidoEvent" in eventos
        assert "TicketEmAtendimentoEvent" in eventos
        assert eventos[-1] == "TicketFechadoEvent"

    def test_fechar_sem_data_e_rejeitado(self, container, dados_ticket):
        ticket = _criar(container, dados_ticket)

        with pytest.raises(ValidationError):
            container.atualizar_ticket_service().execute(
                AtualizarTicketInputDTO(
                    organization_id="O1",
                    ticket_id=ticket.id,
                    campos={"status": "closed", "closed_on": None, "closed_by": "ana@helpdesk.com"},
                )
            )

        assert container.obter_ticket_service().execute("O1", ticket.id).status == "open"


class TestIsolamentoEntreOrganizacoes:

    def test_numeracao_independente(self, container, dados_ticket):
        a1 = _criar(container, dados_ticket, organization_id="O1")
        a2 = _criar(container, dados_ticket, organization_id="O1")
        b1 = _criar(container, dados_ticket, organization_id="O2")

        assert a1.ticket_no != a2.ticket_no
        assert b1.ticket_no == a1.ticket_no

    def test_busca_e_leitura_escopadas(self, container, dados_ticket):
        _criar(container, dados_ticket, organization_id="O1")
        outro = _criar(container, dados_ticket, organization_id="O2")

        encontrados = container.buscar_tickets_service().execute(
            BuscarTicketsQueryDTO(organization_id="O1", termo="9998887776")
        )

        assert outro.id not in [t.id for t in encontrados]
        with pytest.raises(EntityNotFoundError):
            container.obter_ticket_service().execute("O1", outro.id)


class TestConsistencia:

    def test_estrategias_de_contagem_concordam(self, container, dados_ticket):
        _criar(container, dados_ticket, assigned_to="u1")
        _criar(container, dados_ticket)
        fechar = _criar(container, dados_ticket)
        container.atualizar_ticket_service().execute(
            AtualizarTicketInputDTO(
                organization_id="O1",
                ticket_id=fechar.id,
                campos={"status": "closed", "closed_on": date(2024, 1, 5), "closed_by": "ana@helpdesk.com"},
            )
        )
        service = container.contar_tickets_por_status_service()

        passagem_unica = service.execute("O1", estrategia="passagem_unica")
        consultas = service.execute("O1", estrategia="consultas")

        assert passagem_unica == consultas
        assert passagem_unica.total_por_status == 3
        assert passagem_unica.assigned == 1

    def test_pull_e_push_entregam_o_mesmo(self, dados_ticket):
        entregas = {}
        for modo in ("pull", "push"):
            container = _montar(modo)
            feed = container.notification_feed()
            recebidos = []
            feed.subscribe("u2", recebidos.append)

            ticket = _criar(container, dados_ticket)
            container.atribuir_ticket_service().execute(
                AtribuirTicketInputDTO(organization_id="O1", ticket_id=ticket.id, usuario_id="u2")
            )
            if modo == "pull":
                feed.poll()

            entregas[modo] = [[t.ticket_no for t in lote] for lote in recebidos]

        assert entregas["pull"] == entregas["push"] == [["TKT-000001"]]
