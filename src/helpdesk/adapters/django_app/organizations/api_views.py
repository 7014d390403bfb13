"""
API Views JSON para Organizações e Usuários.

Endpoints:
- GET /api/organizacoes/        - Organizações do usuário autenticado
- GET /api/organizacoes/<slug>/ - Selecionar organização (contexto + tema)
- GET /api/usuarios/            - Usuários disponíveis para atribuição
"""

import logging

from django.http import HttpRequest, JsonResponse

from ..shared.api import BaseAPIView, get_user_id, json_response

logger = logging.getLogger(__name__)


class OrganizacoesAPIView(BaseAPIView):
    """GET /api/organizacoes/"""

    def get(self, request: HttpRequest) -> JsonResponse:
        try:
            listar_service = self.get_service('listar_organizacoes_service')
            organizacoes = listar_service.execute(get_user_id(request))

            return json_response(
                success=True,
                data=[o.to_dict() for o in organizacoes],
                meta={'total': len(organizacoes)}
            )

        except Exception as e:
            return self.handle_exception(e)


class SelecionarOrganizacaoAPIView(BaseAPIView):
    """
    GET /api/organizacoes/<slug>/

    Valida a associação do usuário e devolve o contexto da sessão
    junto com o tema da organização.
    """

    def get(self, request: HttpRequest, slug: str) -> JsonResponse:
        try:
            context = self.get_context(request, slug)

            listar_service = self.get_service('listar_organizacoes_service')
            organizacao = next(
                o for o in listar_service.execute(context.user_id)
                if o.id == context.organization_id
            )

            logger.info(f"API: Usuário {context.user_id} selecionou {context.organization_slug}")

            return json_response(
                success=True,
                data={
                    'organization': organizacao.to_dict(),
                    'role': context.role.value,
                    'user_email': context.user_email,
                }
            )

        except Exception as e:
            return self.handle_exception(e)


class UsuariosAPIView(BaseAPIView):
    """GET /api/usuarios/"""

    def get(self, request: HttpRequest) -> JsonResponse:
        try:
            listar_service = self.get_service('listar_usuarios_service')
            usuarios = listar_service.execute()

            return json_response(
                success=True,
                data=[u.to_dict() for u in usuarios],
                meta={'total': len(usuarios)}
            )

        except Exception as e:
            return self.handle_exception(e)
