"""
Fixtures para testes com Django (banco SQLite em memória).

Fornece:
- Usuários do django.contrib.auth
- Organizações O1 (acme) e O2 (beta) com associações
- Clients autenticados
"""

import uuid

import pytest


@pytest.fixture
def usuarios(db):
    """ana (membro de acme e beta), bruno (membro de beta)."""
    from django.contrib.auth import get_user_model

    User = get_user_model()
    ana = User.objects.create_user(username="ana", email="ana@helpdesk.com", password="senha-forte-123")
    bruno = User.objects.create_user(username="bruno", email="bruno@helpdesk.com", password="senha-forte-123")
    return {"ana": ana, "bruno": bruno}


@pytest.fixture
def organizacoes(usuarios):
    from helpdesk.adapters.django_app.organizations.models import (
        MembershipModel,
        MembershipRoleChoices,
        OrganizationModel,
    )

    acme = OrganizationModel.objects.create(id=str(uuid.uuid4()), name="Acme", slug="acme")
    beta = OrganizationModel.objects.create(
        id=str(uuid.uuid4()), name="Beta", slug="beta", theme_primary_color="#ff0000"
    )
    MembershipModel.objects.create(user=usuarios["ana"], organization=acme, role=MembershipRoleChoices.ADMIN)
    MembershipModel.objects.create(user=usuarios["ana"], organization=beta)
    MembershipModel.objects.create(user=usuarios["bruno"], organization=beta)
    return {"acme": acme, "beta": beta}


@pytest.fixture
def client_ana(client, usuarios):
    client.force_login(usuarios["ana"])
    return client


@pytest.fixture
def client_bruno(usuarios):
    from django.test import Client

    client = Client()
    client.force_login(usuarios["bruno"])
    return client

