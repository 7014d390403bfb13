"""
Testes das APIs JSON (Django test client + SQLite).

Coverage:
- Autenticação e escopo por organização (401/403/404)
- CRUD de tickets, atribuição e fechamento
- Dashboard (ambas as estratégias de contagem)
- Upload de anexos multipart
- Notificações (listar/abrir)
- Organizações e usuários
"""

import json

import pytest
from django.core.files.uploadedfile import SimpleUploadedFile
from django.test import Client
from django.urls import reverse

pytestmark = pytest.mark.django_db


def _post_json(client, url, dados):
    return client.post(url, data=json.dumps(dados), content_type="application/json")


def _patch_json(client, url, dados):
    return client.patch(url, data=json.dumps(dados), content_type="application/json")


@pytest.fixture
def criar_ticket(client_ana, organizacoes, dados_ticket):
    def _criar(slug="acme", **kwargs):
        response = _post_json(
            client_ana,
            reverse("tickets:api_list", kwargs={"slug": slug}),
            {**dados_ticket, **kwargs},
        )
        assert response.status_code == 201, response.json()
        return response.json()["data"]

    return _criar


class TestAutenticacaoEEscopo:

    def test_sem_login_retorna_401(self, organizacoes):
        response = Client().get(reverse("tickets:api_list", kwargs={"slug": "acme"}))
        assert response.status_code == 401
        assert response.json()["success"] is False

    def test_nao_membro_retorna_403(self, client_bruno, organizacoes):
        response = client_bruno.get(reverse("tickets:api_list", kwargs={"slug": "acme"}))
        assert response.status_code == 403

    def test_slug_inexistente_retorna_404(self, client_ana, organizacoes):
        response = client_ana.get(reverse("tickets:api_list", kwargs={"slug": "gama"}))
        assert response.status_code == 404

    def test_ticket_de_outra_organizacao_retorna_404(self, client_ana, criar_ticket):
        ticket = criar_ticket("acme")

        response = client_ana.get(
            reverse("tickets:api_detail", kwargs={"slug": "beta", "pk": ticket["id"]})
        )

        assert response.status_code == 404

    def test_health_nao_exige_login(self, db):
        response = Client().get(reverse("health"))
        assert response.json() == {"status": "ok"}


class TestTicketAPI:

    def test_criar_ticket(self, criar_ticket):
        ticket = criar_ticket()

        assert ticket["ticket_no"] == "TKT-000001"
        assert ticket["status"] == "open"
        assert ticket["opened_by"] == "ana@helpdesk.com"
        assert ticket["closed_on"] is None

    def test_criar_com_anexos_ja_enviados(self, criar_ticket):
        anexo = {"name": "a.pdf", "size": 10, "mime_type": "application/pdf", "url": "/media/a.pdf"}

        ticket = criar_ticket(attachments=[anexo])

        assert ticket["attachments"] == [anexo]

    def test_campos_obrigatorios(self, client_ana, organizacoes, dados_ticket):
        dados = {**dados_ticket}
        del dados["name_of_client"]

        response = _post_json(client_ana, reverse("tickets:api_list", kwargs={"slug": "acme"}), dados)

        assert response.status_code == 400
        assert "name_of_client" in response.json()["meta"]["errors"]

    def test_tipo_fora_do_catalogo(self, client_ana, organizacoes, dados_ticket):
        response = _post_json(
            client_ana,
            reverse("tickets:api_list", kwargs={"slug": "acme"}),
            {**dados_ticket, "issue_type": "Outro"},
        )

        assert response.status_code == 400
        assert "issue_type" in response.json()["meta"]["errors"]

    def test_json_invalido(self, client_ana, organizacoes):
        response = client_ana.post(
            reverse("tickets:api_list", kwargs={"slug": "acme"}),
            data="{nao e json",
            content_type="application/json",
        )
        assert response.status_code == 400

    def test_buscar_por_termo(self, client_ana, criar_ticket):
        criar_ticket()
        criar_ticket(name_of_client="John Smith", mobile_no="1112223334")

        response = client_ana.get(reverse("tickets:api_list", kwargs={"slug": "acme"}), {"q": "jane"})

        corpo = response.json()
        assert corpo["meta"] == {"total": 1, "organization": "acme"}
        assert corpo["data"][0]["name_of_client"] == "Jane Doe"

    def test_filtro_status_invalido(self, client_ana, organizacoes):
        response = client_ana.get(
            reverse("tickets:api_list", kwargs={"slug": "acme"}), {"status": "pendente"}
        )
        assert response.status_code == 400

    def test_busca_nao_mistura_organizacoes(self, client_ana, criar_ticket):
        criar_ticket("acme")

        response = client_ana.get(reverse("tickets:api_list", kwargs={"slug": "beta"}))

        assert response.json()["data"] == []

    def test_fechar_ticket(self, client_ana, criar_ticket):
        ticket = criar_ticket()

        response = _patch_json(
            client_ana,
            reverse("tickets:api_detail", kwargs={"slug": "acme", "pk": ticket["id"]}),
            {"status": "closed", "closed_on": "2024-01-05", "closed_by": "ana@helpdesk.com"},
        )

        assert response.status_code == 200
        dados = response.json()["data"]
        assert dados["status"] == "closed"
        assert dados["closed_on"] == "2024-01-05"

    def test_fechar_sem_responsavel_pelo_fechamento(self, client_ana, criar_ticket):
        ticket = criar_ticket()

        response = _patch_json(
            client_ana,
            reverse("tickets:api_detail", kwargs={"slug": "acme", "pk": ticket["id"]}),
            {"status": "closed", "closed_on": "2024-01-05"},
        )

        assert response.status_code == 400

    def test_campo_imutavel(self, client_ana, criar_ticket):
        ticket = criar_ticket()

        response = _patch_json(
            client_ana,
            reverse("tickets:api_detail", kwargs={"slug": "acme", "pk": ticket["id"]}),
            {"ticket_no": "TKT-999999"},
        )

        assert response.status_code == 400

    def test_atribuir(self, client_ana, criar_ticket, usuarios):
        ticket = criar_ticket()

        response = _post_json(
            client_ana,
            reverse("tickets:api_atribuir", kwargs={"slug": "acme", "pk": ticket["id"]}),
            {"usuario_id": str(usuarios["bruno"].pk)},
        )

        assert response.status_code == 200
        assert response.json()["data"]["assigned_to"] == str(usuarios["bruno"].pk)
        assert response.json()["data"]["status"] == "open"

    def test_atribuir_usuario_inexistente(self, client_ana, criar_ticket):
        ticket = criar_ticket()

        response = _post_json(
            client_ana,
            reverse("tickets:api_atribuir", kwargs={"slug": "acme", "pk": ticket["id"]}),
            {"usuario_id": "99999"},
        )

        assert response.status_code == 404


class TestDashboardAPI:

    def test_estatisticas_e_contagens(self, client_ana, criar_ticket, usuarios):
        criar_ticket(assigned_to=str(usuarios["bruno"].pk))
        fechado = criar_ticket()
        _patch_json(
            client_ana,
            reverse("tickets:api_detail", kwargs={"slug": "acme", "pk": fechado["id"]}),
            {"status": "closed", "closed_on": "2024-01-05", "closed_by": "ana@helpdesk.com"},
        )
        url = reverse("tickets:api_dashboard", kwargs={"slug": "acme"})

        passagem_unica = client_ana.get(url).json()["data"]
        consultas = client_ana.get(url, {"estrategia": "consultas"}).json()["data"]

        assert passagem_unica["total_tickets"] == 2
        assert passagem_unica["open_tickets"] == 1
        assert passagem_unica["resolved_today"] == 0
        assert passagem_unica["status_counts"] == {
            "assigned": 1, "closed": 1, "open": 1, "in_progress": 0,
        }
        assert consultas["status_counts"] == passagem_unica["status_counts"]

    def test_estrategia_invalida(self, client_ana, organizacoes):
        response = client_ana.get(
            reverse("tickets:api_dashboard", kwargs={"slug": "acme"}), {"estrategia": "magica"}
        )
        assert response.status_code == 400


class TestAnexosAPI:

    def test_upload_em_lote(self, client_ana, organizacoes):
        response = client_ana.post(
            reverse("tickets:api_anexos", kwargs={"slug": "acme"}),
            {"files": [
                SimpleUploadedFile("contrato.pdf", b"%PDF-1.4", content_type="application/pdf"),
                SimpleUploadedFile("script.sh", b"rm -rf", content_type="application/x-sh"),
            ]},
        )

        assert response.status_code == 200
        corpo = response.json()
        assert [r["name"] for r in corpo["data"]] == ["contrato.pdf", "script.sh"]
        assert [r["sucesso"] for r in corpo["data"]] == [True, False]
        assert corpo["meta"]["enviados"] == 1
        assert corpo["meta"]["falhas"] == 1
        assert corpo["data"][0]["anexo"]["url"].startswith("/media/ticket-attachments/")

    def test_sem_arquivos(self, client_ana, organizacoes):
        response = client_ana.post(reverse("tickets:api_anexos", kwargs={"slug": "acme"}), {})
        assert response.status_code == 400


class TestNotificacoesAPI:

    def test_fluxo_de_notificacao(self, criar_ticket, client_bruno, usuarios):
        ticket = criar_ticket("beta", assigned_to=str(usuarios["bruno"].pk))

        listagem = client_bruno.get(reverse("tickets:api_notificacoes")).json()
        assert [t["id"] for t in listagem["data"]] == [ticket["id"]]

        aberto = client_bruno.post(
            reverse("tickets:api_abrir_notificacao", kwargs={"ticket_id": ticket["id"]})
        )
        assert aberto.status_code == 200
        assert aberto.json()["data"]["status"] == "in_progress"

        assert client_bruno.get(reverse("tickets:api_notificacoes")).json()["data"] == []

    def test_abrir_ticket_de_outra_organizacao_sem_notificacao(self, criar_ticket, client_ana, client_bruno):
        ticket = criar_ticket("acme")

        response = client_bruno.post(
            reverse("tickets:api_abrir_notificacao", kwargs={"ticket_id": ticket["id"]})
        )

        assert response.status_code == 404
        assert "data" not in response.json()
        detalhe = client_ana.get(
            reverse("tickets:api_detail", kwargs={"slug": "acme", "pk": ticket["id"]})
        )
        assert detalhe.json()["data"]["status"] == "open"

    def test_abrir_ticket_inexistente(self, client_bruno):
        response = client_bruno.post(
            reverse("tickets:api_abrir_notificacao", kwargs={"ticket_id": "nao-existe"})
        )
        assert response.status_code == 404


class TestOrganizacoesAPI:

    def test_listar_organizacoes_do_usuario(self, client_ana, client_bruno, organizacoes):
        assert [o["slug"] for o in client_ana.get(reverse("organizations:api_list")).json()["data"]] == [
            "acme", "beta",
        ]
        assert [o["slug"] for o in client_bruno.get(reverse("organizations:api_list")).json()["data"]] == [
            "beta",
        ]

    def test_selecionar_organizacao(self, client_ana, organizacoes):
        response = client_ana.get(reverse("organizations:api_selecionar", kwargs={"slug": "beta"}))

        dados = response.json()["data"]
        assert dados["organization"]["theme_primary_color"] == "#ff0000"
        assert dados["role"] == "member"
        assert dados["user_email"] == "ana@helpdesk.com"

    def test_selecionar_sem_associacao(self, client_bruno, organizacoes):
        response = client_bruno.get(reverse("organizations:api_selecionar", kwargs={"slug": "acme"}))
        assert response.status_code == 403

    def test_listar_usuarios(self, client_ana, usuarios):
        response = client_ana.get(reverse("organizations:api_usuarios"))

        assert [u["email"] for u in response.json()["data"]] == [
            "ana@helpdesk.com", "bruno@helpdesk.com",
        ]
