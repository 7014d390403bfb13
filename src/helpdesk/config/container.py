"""
Dependency Injection Container.

Configura e gerencia todas as dependências da aplicação.
Usa dependency-injector para lazy-loading e injeção automática.

Padrões:
- Singleton: Uma instância para toda app (repositories, gateways, feed)
- Factory: Nova instância por chamada (services, UoW)
- Selector: Implementação escolhida pela configuração
  (EVENT_PUBLISHER_MODE, NOTIFICATION_FEED_MODE)

Adapters Django são importados sob demanda: o container pode ser
carregado antes do registro de apps estar pronto.
"""

from importlib import import_module
from typing import Optional

from dependency_injector import containers, providers

from helpdesk.core.organizations.ports import InMemoryOrganizationRepository, InMemoryUserDirectory
from helpdesk.core.organizations.use_cases import (
    ListarOrganizacoesService,
    ListarUsuariosService,
    SelecionarOrganizacaoService,
)
from helpdesk.core.tickets.attachments import EnviarAnexosService
from helpdesk.core.tickets.dashboard import (
    ContarTicketsPorStatusService,
    ObterEstatisticasDashboardService,
)
from helpdesk.core.tickets.notifications import (
    AbrirNotificacaoService,
    ListarNotificacoesService,
    PollingNotificationFeed,
    PushNotificationFeed,
)
from helpdesk.core.tickets.ports import (
    InMemoryAttachmentStorage,
    InMemoryNotificationGateway,
    InMemoryTicketRepository,
)
from helpdesk.core.tickets.use_cases import (
    AtribuirTicketService,
    AtualizarTicketService,
    BuscarTicketsService,
    CriarTicketService,
    ObterTicketService,
)


def _lazy(module_path: str, class_name: str):
    """Construtor que importa a classe apenas na primeira resolução."""

    def construir(*args, **kwargs):
        return getattr(import_module(module_path), class_name)(*args, **kwargs)

    construir.__name__ = class_name
    return construir


_DJANGO_APP = 'helpdesk.adapters.django_app'


class Container(containers.DeclarativeContainer):
    """
    Container principal de Dependency Injection.

    Organização:
    - Configuration: valores vindos do Django settings
    - Infrastructure: publisher de eventos, feed de notificações
    - Repositories: persistência
    - Unit of Work: transações
    - Services: Use Cases

    Example:
        from helpdesk.config.container import get_container

        container = get_container()
        service = container.criar_ticket_service()
        result = service.execute(input_dto)
    """

    # =========================================================================
    # Configuration
    # =========================================================================

    config = providers.Configuration()

    # =========================================================================
    # Infrastructure
    # =========================================================================

    event_publisher = providers.Selector(
        config.event_publisher_mode,
        sync=providers.Singleton(_lazy(f'{_DJANGO_APP}.events.publishers', 'LoggingEventPublisher')),
        celery=providers.Singleton(_lazy(f'{_DJANGO_APP}.events.publishers', 'CeleryEventPublisher')),
    )

    # =========================================================================
    # Repositories / Gateways (Singleton)
    # =========================================================================

    organization_repository = providers.Singleton(
        _lazy(f'{_DJANGO_APP}.organizations.repositories', 'DjangoOrganizationRepository')
    )

    user_directory = providers.Singleton(
        _lazy(f'{_DJANGO_APP}.organizations.repositories', 'DjangoUserDirectory')
    )

    ticket_repository = providers.Singleton(
        _lazy(f'{_DJANGO_APP}.tickets.repositories', 'DjangoTicketRepository')
    )

    notification_gateway = providers.Singleton(
        _lazy(f'{_DJANGO_APP}.tickets.repositories', 'DjangoNotificationGateway')
    )

    attachment_storage = providers.Singleton(
        _lazy(f'{_DJANGO_APP}.tickets.storage', 'DjangoAttachmentStorage')
    )

    notification_feed = providers.Selector(
        config.notification_feed_mode,
        pull=providers.Singleton(
            PollingNotificationFeed,
            notification_gateway=notification_gateway,
        ),
        push=providers.Singleton(
            PushNotificationFeed,
            notification_gateway=notification_gateway,
            event_publisher=event_publisher,
        ),
    )

    # =========================================================================
    # Unit of Work (Factory - nova instância por operação)
    # =========================================================================

    unit_of_work = providers.Factory(
        _lazy(f'{_DJANGO_APP}.shared.unit_of_work', 'DjangoUnitOfWork'),
        event_publisher=event_publisher,
    )

    # =========================================================================
    # Services / Use Cases (Factory - nova instância por chamada)
    # =========================================================================

    # Organizações
    listar_organizacoes_service = providers.Factory(
        ListarOrganizacoesService,
        org_repo=organization_repository,
    )

    selecionar_organizacao_service = providers.Factory(
        SelecionarOrganizacaoService,
        org_repo=organization_repository,
    )

    listar_usuarios_service = providers.Factory(
        ListarUsuariosService,
        user_directory=user_directory,
    )

    # Escrita de tickets
    criar_ticket_service = providers.Factory(
        CriarTicketService,
        ticket_repo=ticket_repository,
        uow=unit_of_work,
        user_directory=user_directory,
        notification_gateway=notification_gateway,
    )

    atualizar_ticket_service = providers.Factory(
        AtualizarTicketService,
        ticket_repo=ticket_repository,
        uow=unit_of_work,
        user_directory=user_directory,
        notification_gateway=notification_gateway,
    )

    atribuir_ticket_service = providers.Factory(
        AtribuirTicketService,
        ticket_repo=ticket_repository,
        uow=unit_of_work,
        user_directory=user_directory,
        notification_gateway=notification_gateway,
    )

    # Leitura (sem UoW)
    obter_ticket_service = providers.Factory(
        ObterTicketService,
        ticket_repo=ticket_repository,
    )

    buscar_tickets_service = providers.Factory(
        BuscarTicketsService,
        ticket_repo=ticket_repository,
    )

    obter_estatisticas_dashboard_service = providers.Factory(
        ObterEstatisticasDashboardService,
        ticket_repo=ticket_repository,
    )

    contar_tickets_por_status_service = providers.Factory(
        ContarTicketsPorStatusService,
        ticket_repo=ticket_repository,
    )

    # Notificações
    listar_notificacoes_service = providers.Factory(
        ListarNotificacoesService,
        feed=notification_feed,
    )

    abrir_notificacao_service = providers.Factory(
        AbrirNotificacaoService,
        ticket_repo=ticket_repository,
        notification_gateway=notification_gateway,
        uow=unit_of_work,
    )

    # Anexos
    enviar_anexos_service = providers.Factory(
        EnviarAnexosService,
        storage=attachment_storage,
        max_size=config.attachment_max_size,
        max_workers=config.attachment_upload_workers,
    )


# =============================================================================
# Container Global (Singleton)
# =============================================================================

_container: Optional[Container] = None


def _config_from_settings() -> dict:
    from django.conf import settings

    return {
        'event_publisher_mode': getattr(settings, 'EVENT_PUBLISHER_MODE', 'sync'),
        'notification_feed_mode': getattr(settings, 'NOTIFICATION_FEED_MODE', 'pull'),
        'attachment_max_size': getattr(settings, 'ATTACHMENT_MAX_SIZE', None),
        'attachment_upload_workers': getattr(settings, 'ATTACHMENT_UPLOAD_WORKERS', 4),
    }


def get_container() -> Container:
    """
    Retorna instância global do container.

    Cria se não existir (lazy initialization), configurada a partir
    do Django settings.
    """
    global _container

    if _container is None:
        _container = Container()
        _container.config.from_dict(_config_from_settings())

    return _container


def reset_container() -> None:
    """
    Reset do container (para testes).

    Permite criar novo container limpo.
    """
    global _container
    _container = None


# =============================================================================
# Testing Container
# =============================================================================

def criar_container_de_teste(**config) -> Container:
    """
    Container para testes sem banco.

    Sobrescreve a infraestrutura com as implementações InMemory; o
    publisher guarda os eventos para asserções.

    Example:
        container = criar_container_de_teste(notification_feed_mode='push')
        service = container.criar_ticket_service()
    """
    from helpdesk.adapters.django_app.events.publishers import InMemoryEventPublisher
    from helpdesk.adapters.django_app.shared.unit_of_work import InMemoryUnitOfWork

    container = Container()
    container.config.from_dict({
        'event_publisher_mode': 'sync',
        'notification_feed_mode': 'pull',
        'attachment_max_size': None,
        'attachment_upload_workers': 4,
        **config,
    })

    container.event_publisher.override(providers.Singleton(InMemoryEventPublisher))
    container.organization_repository.override(providers.Singleton(InMemoryOrganizationRepository))
    container.user_directory.override(providers.Singleton(InMemoryUserDirectory))
    container.ticket_repository.override(providers.Singleton(InMemoryTicketRepository))
    container.notification_gateway.override(
        providers.Singleton(InMemoryNotificationGateway, ticket_repo=container.ticket_repository)
    )
    container.attachment_storage.override(providers.Singleton(InMemoryAttachmentStorage))
    container.unit_of_work.override(
        providers.Factory(InMemoryUnitOfWork, event_publisher=container.event_publisher)
    )
    return container
