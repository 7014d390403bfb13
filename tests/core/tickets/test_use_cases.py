"""
Testes Unitários para Use Cases do Domínio de Tickets.

Estratégia de Teste:
- InMemoryTicketRepository / InMemoryNotificationGateway (fakes)
- InMemoryUnitOfWork + InMemoryEventPublisher para verificar eventos
- Cenários de sucesso, erro e isolamento entre organizações

Coverage:
- CriarTicketService
- AtualizarTicketService
- AtribuirTicketService
- ObterTicketService
- BuscarTicketsService
"""

from datetime import date, timedelta
from unittest.mock import Mock

import pytest

from helpdesk.core.shared.exceptions import EntityNotFoundError, PersistenceError, ValidationError
from helpdesk.core.tickets.dtos import (
    AtribuirTicketInputDTO,
    AtualizarTicketInputDTO,
    BuscarTicketsQueryDTO,
    CriarTicketInputDTO,
)
from helpdesk.core.tickets.entities import AttachmentEntity, TicketStatus
from helpdesk.core.tickets.use_cases import (
    AtribuirTicketService,
    AtualizarTicketService,
    BuscarTicketsService,
    CriarTicketService,
    ObterTicketService,
)


@pytest.fixture
def criar_service(ticket_repo, uow, user_directory, notification_gateway):
    return CriarTicketService(ticket_repo, uow, user_directory, notification_gateway)


@pytest.fixture
def atualizar_service(ticket_repo, uow, user_directory, notification_gateway):
    return AtualizarTicketService(ticket_repo, uow, user_directory, notification_gateway)


@pytest.fixture
def atribuir_service(ticket_repo, uow, user_directory, notification_gateway):
    return AtribuirTicketService(ticket_repo, uow, user_directory, notification_gateway)


@pytest.fixture
def criar(criar_service, dados_ticket):
    """Cria ticket em O1 (ou na organização informada)."""

    def _criar(organization_id="O1", **kwargs):
        dados = {**dados_ticket, **kwargs}
        return criar_service.execute(
            CriarTicketInputDTO(
                organization_id=organization_id,
                opened_by="agente@helpdesk.com",
                **dados,
            )
        )

    return _criar


# =============================================================================
# CriarTicketService
# =============================================================================

class TestCriarTicketService:

    def test_criar_ticket_sucesso(self, criar, uow, event_publisher):
        """Deve criar ticket aberto com número sequencial."""
        output = criar()

        assert output.ticket_no == "TKT-000001"
        assert output.status == "open"
        assert output.organization_id == "O1"
        assert output.assigned_to is None
        assert uow.committed

        eventos = event_publisher.get_events_by_type("TicketCriadoEvent")
        assert len(eventos) == 1
        assert eventos[0].ticket_no == "TKT-000001"

    def test_numeracao_por_organizacao(self, criar):
        assert criar("O1").ticket_no == "TKT-000001"
        assert criar("O1").ticket_no == "TKT-000002"
        assert criar("O2").ticket_no == "TKT-000001"

    def test_campo_obrigatorio_vazio_nao_chama_repositorio(self, uow, user_directory, notification_gateway,
                                                           dados_ticket):
        """Validação acontece antes de qualquer I/O."""
        repo = Mock()
        service = CriarTicketService(repo, uow, user_directory, notification_gateway)
        dados_ticket["mobile_no"] = ""

        with pytest.raises(ValidationError) as exc_info:
            service.execute(CriarTicketInputDTO(organization_id="O1", opened_by="a@b.com", **dados_ticket))

        assert exc_info.value.field == "mobile_no"
        repo.insert.assert_not_called()

    def test_criar_com_responsavel_notifica(self, criar, notification_gateway, event_publisher):
        output = criar(assigned_to="u1")

        assert output.assigned_to == "u1"
        assert output.status == "open"
        assert [t.id for t in notification_gateway.get_notifications("u1")] == [output.id]
        assert len(event_publisher.get_events_by_type("TicketAtribuidoEvent")) == 1

    def test_criar_com_responsavel_inexistente(self, criar, ticket_repo):
        with pytest.raises(EntityNotFoundError):
            criar(assigned_to="fantasma")
        assert ticket_repo.select_by_organization("O1") == []

    def test_criar_com_anexos(self, criar):
        anexo = AttachmentEntity(name="a.pdf", size=10, mime_type="application/pdf", url="memory://a")
        output = criar(attachments=(anexo,))
        assert output.attachments == [anexo]

    def test_falha_de_persistencia_propaga_sem_eventos(self, uow, event_publisher, user_directory,
                                                       notification_gateway, dados_ticket):
        repo = Mock()
        repo.insert.side_effect = PersistenceError("banco fora", operation="insert")
        service = CriarTicketService(repo, uow, user_directory, notification_gateway)

        with pytest.raises(PersistenceError):
            service.execute(CriarTicketInputDTO(organization_id="O1", opened_by="a@b.com", **dados_ticket))

        assert uow.rolled_back
        assert event_publisher.published_events == []


# =============================================================================
# AtualizarTicketService
# =============================================================================

class TestAtualizarTicketService:

    def test_atualizar_campo(self, criar, atualizar_service, event_publisher):
        ticket = criar()

        output = atualizar_service.execute(
            AtualizarTicketInputDTO(organization_id="O1", ticket_id=ticket.id, campos={"resolution": "Pago"})
        )

        assert output.resolution == "Pago"
        evento = event_publisher.get_events_by_type("TicketAtualizadoEvent")[0]
        assert evento.campos == ["resolution"]

    def test_sem_campos(self, criar, atualizar_service):
        ticket = criar()
        with pytest.raises(ValidationError):
            atualizar_service.execute(AtualizarTicketInputDTO(organization_id="O1", ticket_id=ticket.id))

    def test_outra_organizacao_nao_encontra(self, criar, atualizar_service, ticket_repo):
        ticket = criar("O1")

        with pytest.raises(EntityNotFoundError):
            atualizar_service.execute(
                AtualizarTicketInputDTO(organization_id="O2", ticket_id=ticket.id, campos={"resolution": "x"})
            )

        assert ticket_repo.select_by_id(ticket.id).resolution == ""

    def test_fechar_ticket(self, criar, atualizar_service, event_publisher):
        ticket = criar()

        output = atualizar_service.execute(AtualizarTicketInputDTO(
            organization_id="O1",
            ticket_id=ticket.id,
            campos={"status": "closed", "closed_on": "2024-01-05", "closed_by": "u1"},
        ))

        assert output.status == "closed"
        assert output.closed_on == date(2024, 1, 5)
        fechado = event_publisher.get_events_by_type("TicketFechadoEvent")[0]
        assert fechado.closed_by == "u1"
        assert fechado.tempo_resposta_horas is not None

    def test_fechar_sem_data_nao_grava(self, criar, atualizar_service, ticket_repo):
        ticket = criar()

        with pytest.raises(ValidationError):
            atualizar_service.execute(AtualizarTicketInputDTO(
                organization_id="O1", ticket_id=ticket.id, campos={"status": "closed", "closed_by": "u1"}
            ))

        assert ticket_repo.select_by_id(ticket.id).status == TicketStatus.ABERTO

    def test_reabrir_ticket(self, criar, atualizar_service, event_publisher):
        ticket = criar()
        atualizar_service.execute(AtualizarTicketInputDTO(
            organization_id="O1",
            ticket_id=ticket.id,
            campos={"status": "closed", "closed_on": "2024-01-05", "closed_by": "u1"},
        ))

        output = atualizar_service.execute(
            AtualizarTicketInputDTO(organization_id="O1", ticket_id=ticket.id, campos={"status": "open"})
        )

        assert output.status == "open"
        assert output.closed_on is None
        assert output.closed_by is None
        assert len(event_publisher.get_events_by_type("TicketReabertoEvent")) == 1

    def test_alterar_responsavel_notifica(self, criar, atualizar_service, notification_gateway):
        ticket = criar()

        atualizar_service.execute(
            AtualizarTicketInputDTO(organization_id="O1", ticket_id=ticket.id, campos={"assigned_to": "u2"})
        )

        assert len(notification_gateway.get_notifications("u2")) == 1

    def test_campo_imutavel(self, criar, atualizar_service):
        ticket = criar()
        with pytest.raises(ValidationError):
            atualizar_service.execute(
                AtualizarTicketInputDTO(organization_id="O1", ticket_id=ticket.id, campos={"ticket_no": "X"})
            )

    def test_sem_alteracao_real_nao_publica(self, criar, atualizar_service, event_publisher):
        ticket = criar()
        event_publisher.clear()

        atualizar_service.execute(
            AtualizarTicketInputDTO(organization_id="O1", ticket_id=ticket.id, campos={"mobile_no": "9998887776"})
        )

        assert event_publisher.published_events == []


# =============================================================================
# AtribuirTicketService
# =============================================================================

class TestAtribuirTicketService:

    def test_atribuir_sucesso(self, criar, atribuir_service, notification_gateway, event_publisher):
        ticket = criar()

        output = atribuir_service.execute(
            AtribuirTicketInputDTO(organization_id="O1", ticket_id=ticket.id, usuario_id="u1")
        )

        assert output.assigned_to == "u1"
        assert output.status == "open"
        assert len(notification_gateway.get_notifications("u1")) == 1
        evento = event_publisher.get_events_by_type("TicketAtribuidoEvent")[0]
        assert evento.assigned_to == "u1"
        assert evento.atribuido_anterior is None

    def test_reatribuir_registra_anterior(self, criar, atribuir_service, event_publisher):
        ticket = criar(assigned_to="u1")
        event_publisher.clear()

        atribuir_service.execute(AtribuirTicketInputDTO(organization_id="O1", ticket_id=ticket.id, usuario_id="u2"))

        evento = event_publisher.get_events_by_type("TicketAtribuidoEvent")[0]
        assert evento.atribuido_anterior == "u1"

    def test_mesmo_responsavel_nao_notifica_de_novo(self, criar, atribuir_service, event_publisher):
        ticket = criar(assigned_to="u1")
        event_publisher.clear()

        atribuir_service.execute(AtribuirTicketInputDTO(organization_id="O1", ticket_id=ticket.id, usuario_id="u1"))

        assert event_publisher.published_events == []

    def test_usuario_inexistente(self, criar, atribuir_service):
        ticket = criar()
        with pytest.raises(EntityNotFoundError):
            atribuir_service.execute(
                AtribuirTicketInputDTO(organization_id="O1", ticket_id=ticket.id, usuario_id="fantasma")
            )

    def test_usuario_vazio(self, atribuir_service):
        with pytest.raises(ValidationError):
            atribuir_service.execute(AtribuirTicketInputDTO(organization_id="O1", ticket_id="x", usuario_id=""))

    def test_ticket_inexistente(self, atribuir_service):
        with pytest.raises(EntityNotFoundError):
            atribuir_service.execute(
                AtribuirTicketInputDTO(organization_id="O1", ticket_id="nao-existe", usuario_id="u1")
            )


# =============================================================================
# Leitura
# =============================================================================

class TestObterTicketService:

    def test_obter_na_organizacao(self, criar, ticket_repo):
        ticket = criar()
        output = ObterTicketService(ticket_repo).execute("O1", ticket.id)
        assert output.ticket_no == ticket.ticket_no

    def test_obter_de_outra_organizacao(self, criar, ticket_repo):
        ticket = criar("O1")
        with pytest.raises(EntityNotFoundError):
            ObterTicketService(ticket_repo).execute("O2", ticket.id)


class TestBuscarTicketsService:

    @pytest.fixture
    def buscar(self, ticket_repo):
        service = BuscarTicketsService(ticket_repo)

        def _buscar(termo=None, status=None, organization_id="O1"):
            return service.execute(BuscarTicketsQueryDTO(organization_id, termo=termo, status=status))

        return _buscar

    def test_busca_por_termo(self, criar, buscar):
        criar(name_of_client="Jane Doe")
        criar(name_of_client="John Smith", mobile_no="1112223334", client_file_no="F200")

        resultado = buscar("jane")
        assert [t.name_of_client for t in resultado] == ["Jane Doe"]

    def test_busca_por_numero(self, criar, buscar):
        criar()
        segundo = criar()
        assert [t.id for t in buscar("TKT-000002")] == [segundo.id]

    def test_busca_por_status(self, criar, buscar, atualizar_service):
        aberto = criar()
        fechado = criar()
        atualizar_service.execute(AtualizarTicketInputDTO(
            organization_id="O1",
            ticket_id=fechado.id,
            campos={"status": "closed", "closed_on": date.today().isoformat(), "closed_by": "u1"},
        ))

        assert [t.id for t in buscar(status="open")] == [aberto.id]
        assert [t.id for t in buscar(status="closed")] == [fechado.id]

    def test_termo_vazio_nao_filtra(self, criar, buscar):
        criar()
        criar()
        assert len(buscar("   ")) == 2

    def test_isolamento_entre_organizacoes(self, criar, buscar):
        criar("O1", name_of_client="Jane Doe")
        criar("O2", name_of_client="Jane Roe")

        resultado = buscar("jane", organization_id="O2")
        assert [t.name_of_client for t in resultado] == ["Jane Roe"]

    def test_ordenado_por_criacao_decrescente(self, criar, buscar, ticket_repo):
        antigo = criar()
        ticket_repo.update(antigo.id, {"created_on": date.today() - timedelta(days=3)})
        novo = criar()

        assert [t.id for t in buscar()] == [novo.id, antigo.id]

    def test_status_invalido(self, buscar):
        with pytest.raises(ValidationError):
            buscar(status="pending")

    def test_sem_organizacao(self, ticket_repo):
        with pytest.raises(ValidationError):
            BuscarTicketsService(ticket_repo).execute(BuscarTicketsQueryDTO(organization_id=""))
