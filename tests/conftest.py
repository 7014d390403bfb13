"""
Configurações globais do Pytest para o Helpdesk.

Este arquivo é carregado automaticamente pelo pytest e
fornece Django configurado (SQLite em memória) e fixtures
compartilhadas pelos testes de core, adapters e integração.
"""

import sys
import tempfile
from pathlib import Path

import pytest

# Adicionar src ao path para imports
src_path = Path(__file__).parent.parent / "src"
sys.path.insert(0, str(src_path))


def pytest_configure(config):
    """Configura Django antes dos testes."""
    import django
    from django.conf import settings

    config.addinivalue_line(
        "markers", "integration: marks tests as integration tests"
    )

    if not settings.configured:
        settings.configure(
            DEBUG=False,
            DATABASES={
                'default': {
                    'ENGINE': 'django.db.backends.sqlite3',
                    'NAME': ':memory:',
                }
            },
            INSTALLED_APPS=[
                'django.contrib.admin',
                'django.contrib.auth',
                'django.contrib.contenttypes',
                'django.contrib.sessions',
                'django.contrib.messages',
                'helpdesk.adapters.django_app.organizations',
                'helpdesk.adapters.django_app.tickets',
            ],
            MIDDLEWARE=[
                'django.contrib.sessions.middleware.SessionMiddleware',
                'django.middleware.common.CommonMiddleware',
                'django.contrib.auth.middleware.AuthenticationMiddleware',
                'django.contrib.messages.middleware.MessageMiddleware',
            ],
            TEMPLATES=[{
                'BACKEND': 'django.template.backends.django.DjangoTemplates',
                'DIRS': [],
                'APP_DIRS': True,
                'OPTIONS': {
                    'context_processors': [
                        'django.template.context_processors.request',
                        'django.contrib.auth.context_processors.auth',
                        'django.contrib.messages.context_processors.messages',
                    ],
                },
            }],
            ROOT_URLCONF='helpdesk.config.urls',
            MEDIA_ROOT=tempfile.mkdtemp(prefix='helpdesk-media-'),
            MEDIA_URL='/media/',
            DEFAULT_AUTO_FIELD='django.db.models.BigAutoField',
            USE_TZ=True,
            TIME_ZONE='America/Sao_Paulo',
            SECRET_KEY='test-secret-key',
            PASSWORD_HASHERS=['django.contrib.auth.hashers.MD5PasswordHasher'],
            EVENT_PUBLISHER_MODE='sync',
            NOTIFICATION_FEED_MODE='pull',
            ATTACHMENT_MAX_SIZE=10 * 1024 * 1024,
            ATTACHMENT_UPLOAD_WORKERS=2,
        )
        django.setup()


@pytest.fixture(autouse=True)
def reset_container():
    """
    Reset do container DI entre testes.

    Garante que cada teste inicia com singletons limpos.
    """
    from helpdesk.config.container import reset_container as _reset

    _reset()
    yield
    _reset()


# =============================================================================
# Fixtures de Core (InMemory)
# =============================================================================

@pytest.fixture
def event_publisher():
    from helpdesk.adapters.django_app.events.publishers import InMemoryEventPublisher
    return InMemoryEventPublisher()


@pytest.fixture
def uow(event_publisher):
    """Unit of Work em memória que encaminha eventos ao publisher."""
    from helpdesk.adapters.django_app.shared.unit_of_work import InMemoryUnitOfWork
    return InMemoryUnitOfWork(event_publisher=event_publisher)


@pytest.fixture
def ticket_repo():
    from helpdesk.core.tickets.ports import InMemoryTicketRepository
    return InMemoryTicketRepository()


@pytest.fixture
def notification_gateway(ticket_repo):
    from helpdesk.core.tickets.ports import InMemoryNotificationGateway
    return InMemoryNotificationGateway(ticket_repo)


@pytest.fixture
def user_directory():
    """Diretório com dois agentes: u1 e u2."""
    from helpdesk.core.organizations.entities import UserEntity
    from helpdesk.core.organizations.ports import InMemoryUserDirectory

    return InMemoryUserDirectory([
        UserEntity(id="u1", email="ana@helpdesk.com"),
        UserEntity(id="u2", email="bruno@helpdesk.com"),
    ])


@pytest.fixture
def dados_ticket():
    """Campos válidos de um novo ticket (sem organização)."""
    return {
        "client_file_no": "F100",
        "mobile_no": "9998887776",
        "name_of_client": "Jane Doe",
        "issue_type": "Payment",
        "description": "late payment",
    }
