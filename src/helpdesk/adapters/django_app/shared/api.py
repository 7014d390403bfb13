"""
Infraestrutura comum das APIs JSON.

Formato:
- Entrada: JSON (ou multipart, no upload de anexos)
- Saída: JSON com estrutura {success, data/error, meta}

Autenticação:
- Session do django.contrib.auth (401 se ausente)
- Endpoints por organização resolvem o <slug> em OrganizationContext
"""

import json
import logging
from typing import Any, Dict

from django.http import HttpRequest, JsonResponse
from django.utils.decorators import method_decorator
from django.views import View
from django.views.decorators.csrf import csrf_exempt

from helpdesk.config.container import get_container
from helpdesk.core.organizations.dtos import SelecionarOrganizacaoInputDTO
from helpdesk.core.organizations.entities import OrganizationContext
from helpdesk.core.shared.exceptions import (
    AccessDeniedError,
    AttachmentError,
    DomainException,
    EntityNotFoundError,
    PersistenceError,
    ValidationError,
)

logger = logging.getLogger(__name__)


# =============================================================================
# Helpers
# =============================================================================

def json_response(success: bool, data: Any = None, error: str = None,
                  status: int = 200, meta: Dict = None) -> JsonResponse:
    """
    Cria resposta JSON padronizada.

    Args:
        success: Se operação foi bem sucedida
        data: Dados da resposta
        error: Mensagem de erro (se aplicável)
        status: HTTP status code
        meta: Metadados adicionais
    """
    response = {'success': success}

    if data is not None:
        response['data'] = data

    if error is not None:
        response['error'] = error

    if meta is not None:
        response['meta'] = meta

    return JsonResponse(response, status=status)


def parse_json_body(request: HttpRequest) -> Dict:
    """
    Parseia body JSON do request.

    Raises:
        ValueError: Se JSON inválido ou não for um objeto
    """
    if not request.body:
        return {}

    try:
        data = json.loads(request.body)
    except json.JSONDecodeError as e:
        raise ValueError(f"JSON inválido: {e}")

    if not isinstance(data, dict):
        raise ValueError("Corpo da requisição deve ser um objeto JSON")
    return data


def get_user_id(request: HttpRequest) -> str:
    """Extrai ID do usuário autenticado."""
    return str(request.user.pk)


def get_user_email(request: HttpRequest) -> str:
    return request.user.email or request.user.get_username()


# =============================================================================
# Base API View
# =============================================================================

@method_decorator(csrf_exempt, name='dispatch')
class BaseAPIView(View):
    """
    View base para APIs JSON.

    Fornece:
    - Exigência de usuário autenticado
    - Parsing de JSON
    - Acesso ao container DI
    - Resolução do contexto de organização
    - Tratamento de erros padronizado
    """

    def dispatch(self, request: HttpRequest, *args, **kwargs):
        if not request.user.is_authenticated:
            return json_response(
                success=False,
                error="Autenticação necessária",
                status=401
            )
        return super().dispatch(request, *args, **kwargs)

    def get_container(self):
        return get_container()

    def get_service(self, service_name: str):
        """Obtém service do container pelo nome do provider."""
        return getattr(self.get_container(), service_name)()

    def parse_body(self, request: HttpRequest) -> Dict:
        return parse_json_body(request)

    def get_context(self, request: HttpRequest, slug: str) -> OrganizationContext:
        """
        Resolve a organização da URL para o usuário autenticado.

        Raises:
            EntityNotFoundError: Se slug não existe
            AccessDeniedError: Se usuário não é membro
        """
        selecionar_service = self.get_service('selecionar_organizacao_service')
        return selecionar_service.execute(
            SelecionarOrganizacaoInputDTO(
                user_id=get_user_id(request),
                user_email=get_user_email(request),
                slug=slug,
            )
        )

    def handle_exception(self, e: Exception) -> JsonResponse:
        """
        Trata exceções e retorna resposta apropriada.

        Mapeamento:
        - ValidationError / AttachmentError / ValueError → 400
        - AccessDeniedError → 403
        - EntityNotFoundError → 404
        - PersistenceError → 503
        - Inesperado → 500 (logado com traceback)
        """
        if isinstance(e, ValidationError):
            return json_response(
                success=False,
                error=str(e),
                status=400,
                meta={'field': getattr(e, 'field', None)}
            )

        if isinstance(e, EntityNotFoundError):
            return json_response(
                success=False,
                error=str(e),
                status=404
            )

        if isinstance(e, AccessDeniedError):
            return json_response(
                success=False,
                error=str(e),
                status=403
            )

        if isinstance(e, PersistenceError):
            logger.error(f"Falha de persistência na API: {e}")
            return json_response(
                success=False,
                error="Falha ao acessar o armazenamento. Tente novamente.",
                status=503
            )

        if isinstance(e, AttachmentError):
            return json_response(
                success=False,
                error=str(e),
                status=400,
                meta={'file_name': e.file_name, 'reason': e.reason}
            )

        if isinstance(e, DomainException):
            return json_response(
                success=False,
                error=str(e),
                status=400
            )

        if isinstance(e, ValueError):
            return json_response(
                success=False,
                error=str(e),
                status=400
            )

        # Erro inesperado
        logger.exception(f"Erro inesperado na API: {e}")
        return json_response(
            success=False,
            error="Erro interno do servidor",
            status=500
        )

    def form_errors(self, form) -> JsonResponse:
        """Resposta 400 com erros de um Django Form."""
        return json_response(
            success=False,
            error="Dados inválidos",
            status=400,
            meta={'errors': {campo: list(erros) for campo, erros in form.errors.items()}}
        )
