"""
Testes para notificações de atribuição.

Coverage:
- PollingNotificationFeed (pull)
- PushNotificationFeed (push via TicketAtribuidoEvent)
- ListarNotificacoesService
- AbrirNotificacaoService
"""

import pytest

from helpdesk.core.shared.exceptions import EntityNotFoundError, ValidationError
from helpdesk.core.tickets.dtos import (
    AbrirNotificacaoInputDTO,
    AtribuirTicketInputDTO,
    CriarTicketInputDTO,
)
from helpdesk.core.tickets.entities import TicketStatus
from helpdesk.core.tickets.notifications import (
    AbrirNotificacaoService,
    ListarNotificacoesService,
    PollingNotificationFeed,
    PushNotificationFeed,
)
from helpdesk.core.tickets.use_cases import AtribuirTicketService, CriarTicketService


@pytest.fixture
def criar(ticket_repo, uow, user_directory, notification_gateway, dados_ticket):
    service = CriarTicketService(ticket_repo, uow, user_directory, notification_gateway)

    def _criar(**kwargs):
        return service.execute(
            CriarTicketInputDTO(organization_id="O1", opened_by="a@b.com", **{**dados_ticket, **kwargs})
        )

    return _criar


@pytest.fixture
def atribuir(ticket_repo, uow, user_directory, notification_gateway):
    service = AtribuirTicketService(ticket_repo, uow, user_directory, notification_gateway)

    def _atribuir(ticket_id, usuario_id):
        return service.execute(
            AtribuirTicketInputDTO(organization_id="O1", ticket_id=ticket_id, usuario_id=usuario_id)
        )

    return _atribuir


@pytest.fixture
def abrir_service(ticket_repo, notification_gateway, uow):
    return AbrirNotificacaoService(ticket_repo, notification_gateway, uow)


class TestPollingNotificationFeed:

    def test_fetch_retorna_nao_lidas(self, criar, notification_gateway):
        ticket = criar(assigned_to="u1")
        feed = PollingNotificationFeed(notification_gateway)

        assert [t.id for t in feed.fetch("u1")] == [ticket.id]
        assert feed.fetch("u2") == []

    def test_poll_entrega_para_assinantes(self, criar, notification_gateway):
        feed = PollingNotificationFeed(notification_gateway)
        recebidos = []
        feed.subscribe("u1", recebidos.append)
        ticket = criar(assigned_to="u1")

        assert feed.poll() == 1
        assert [t.id for t in recebidos[0]] == [ticket.id]

    def test_cancelar_assinatura(self, notification_gateway):
        feed = PollingNotificationFeed(notification_gateway)
        cancelar = feed.subscribe("u1", lambda tickets: None)

        cancelar()

        assert feed.assinantes == []
        assert feed.poll() == 0

    def test_callback_com_erro_nao_interrompe_os_demais(self, criar, notification_gateway):
        feed = PollingNotificationFeed(notification_gateway)
        recebidos = []

        def quebra(tickets):
            raise RuntimeError("cliente desconectado")

        feed.subscribe("u1", quebra)
        feed.subscribe("u1", recebidos.append)
        criar(assigned_to="u1")

        feed.poll()

        assert len(recebidos) == 1


class TestPushNotificationFeed:

    def test_atribuicao_aciona_entrega(self, criar, atribuir, notification_gateway, event_publisher):
        feed = PushNotificationFeed(notification_gateway, event_publisher)
        recebidos = []
        feed.subscribe("u2", recebidos.append)
        ticket = criar()

        atribuir(ticket.id, "u2")

        assert len(recebidos) == 1
        assert [t.id for t in recebidos[0]] == [ticket.id]

    def test_sem_assinatura_nao_entrega(self, criar, atribuir, notification_gateway, event_publisher):
        feed = PushNotificationFeed(notification_gateway, event_publisher)
        recebidos = []
        feed.subscribe("u1", recebidos.append)
        ticket = criar()

        atribuir(ticket.id, "u2")

        assert recebidos == []

    def test_close_para_de_escutar(self, criar, atribuir, notification_gateway, event_publisher):
        feed = PushNotificationFeed(notification_gateway, event_publisher)
        recebidos = []
        feed.subscribe("u1", recebidos.append)
        feed.close()

        atribuir(criar().id, "u1")

        assert recebidos == []

    def test_pull_e_push_concordam(self, criar, notification_gateway, event_publisher):
        push = PushNotificationFeed(notification_gateway, event_publisher)
        pull = PollingNotificationFeed(notification_gateway)
        criar(assigned_to="u1")
        criar(assigned_to="u1")

        assert [t.id for t in push.fetch("u1")] == [t.id for t in pull.fetch("u1")]


class TestListarNotificacoesService:

    def test_lista_itens(self, criar, notification_gateway):
        ticket = criar(assigned_to="u1")
        service = ListarNotificacoesService(PollingNotificationFeed(notification_gateway))

        itens = service.execute("u1")

        assert [i.ticket_no for i in itens] == [ticket.ticket_no]

    def test_usuario_obrigatorio(self, notification_gateway):
        service = ListarNotificacoesService(PollingNotificationFeed(notification_gateway))
        with pytest.raises(ValidationError):
            service.execute("")


class TestAbrirNotificacaoService:

    def test_abrir_move_para_in_progress(self, criar, abrir_service, notification_gateway,
                                         ticket_repo, event_publisher):
        ticket = criar(assigned_to="u1")

        output = abrir_service.execute(AbrirNotificacaoInputDTO(usuario_id="u1", ticket_id=ticket.id))

        assert output.status == "in_progress"
        assert notification_gateway.get_notifications("u1") == []
        armazenado = ticket_repo.select_by_id(ticket.id)
        assert armazenado.status == TicketStatus.EM_PROGRESSO
        assert armazenado.responded_at is not None
        assert len(event_publisher.get_events_by_type("TicketEmAtendimentoEvent")) == 1

    def test_abrir_ticket_ja_em_andamento_so_marca_lida(self, criar, abrir_service, atribuir,
                                                       notification_gateway, event_publisher):
        ticket = criar(assigned_to="u1")
        abrir_service.execute(AbrirNotificacaoInputDTO(usuario_id="u1", ticket_id=ticket.id))
        atribuir(ticket.id, "u2")
        event_publisher.clear()

        output = abrir_service.execute(AbrirNotificacaoInputDTO(usuario_id="u2", ticket_id=ticket.id))

        assert output.status == "in_progress"
        assert notification_gateway.get_notifications("u2") == []
        assert event_publisher.published_events == []

    def test_ticket_inexistente(self, abrir_service):
        with pytest.raises(EntityNotFoundError):
            abrir_service.execute(AbrirNotificacaoInputDTO(usuario_id="u1", ticket_id="nao-existe"))

    def test_usuario_sem_notificacao_nao_abre(self, criar, abrir_service, ticket_repo, event_publisher):
        ticket = criar(assigned_to="u1")
        event_publisher.clear()

        with pytest.raises(EntityNotFoundError):
            abrir_service.execute(AbrirNotificacaoInputDTO(usuario_id="intruso", ticket_id=ticket.id))

        assert ticket_repo.select_by_id(ticket.id).status == TicketStatus.ABERTO
        assert event_publisher.published_events == []

    def test_reabrir_notificacao_ja_lida(self, criar, abrir_service):
        ticket = criar(assigned_to="u1")
        abrir_service.execute(AbrirNotificacaoInputDTO(usuario_id="u1", ticket_id=ticket.id))

        output = abrir_service.execute(AbrirNotificacaoInputDTO(usuario_id="u1", ticket_id=ticket.id))

        assert output.status == "in_progress"
