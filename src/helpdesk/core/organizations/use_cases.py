"""
Use Cases do Domínio de Organizações (contexto de sessão).

Use Cases implementados:
- ListarOrganizacoesService: organizações visíveis para o usuário
- SelecionarOrganizacaoService: resolve slug → OrganizationContext
- ListarUsuariosService: usuários disponíveis para atribuição

O contexto retornado por SelecionarOrganizacaoService é o que autoriza
as operações de ticket de um tenant: sem associação, não há contexto.
"""

from typing import List

from helpdesk.core.shared.exceptions import AccessDeniedError, EntityNotFoundError, ValidationError

from .dtos import OrganizationOutputDTO, SelecionarOrganizacaoInputDTO, UserOutputDTO
from .entities import OrganizationContext
from .ports import OrganizationRepository, UserDirectory


class ListarOrganizacoesService:
    """
    Use Case: listar organizações do usuário.

    Example:
        service = ListarOrganizacoesService(org_repo)
        orgs = service.execute("user-1")
    """

    def __init__(self, org_repo: OrganizationRepository):
        self.org_repo = org_repo

    def execute(self, user_id: str) -> List[OrganizationOutputDTO]:
        organizations = self.org_repo.list_for_user(user_id)
        return [OrganizationOutputDTO.from_entity(o) for o in organizations]


class SelecionarOrganizacaoService:
    """
    Use Case: selecionar o tenant da sessão.

    Fluxo:
    1. Resolver organização pelo slug
    2. Verificar associação do usuário
    3. Retornar OrganizationContext imutável
    """

    def __init__(self, org_repo: OrganizationRepository):
        self.org_repo = org_repo

    def execute(self, input_dto: SelecionarOrganizacaoInputDTO) -> OrganizationContext:
        """
        Raises:
            ValidationError: Se usuário não informado
            EntityNotFoundError: Se slug não existe
            AccessDeniedError: Se usuário não é membro da organização
        """
        if not input_dto.user_id:
            raise ValidationError("Usuário autenticado é obrigatório", field="user_id")

        organization = self.org_repo.get_by_slug(input_dto.slug)
        if not organization:
            raise EntityNotFoundError(
                f"Organização {input_dto.slug} não encontrada",
                entity_type="Organization",
                entity_id=input_dto.slug
            )

        membership = self.org_repo.get_membership(input_dto.user_id, organization.id)
        if not membership:
            raise AccessDeniedError(
                f"Usuário {input_dto.user_id} não pertence à organização {organization.slug}",
                organization_id=organization.id
            )

        return OrganizationContext(
            user_id=input_dto.user_id,
            user_email=input_dto.user_email,
            organization_id=organization.id,
            organization_slug=organization.slug,
            role=membership.role,
        )


class ListarUsuariosService:
    """Use Case: listar usuários que podem receber tickets."""

    def __init__(self, user_directory: UserDirectory):
        self.user_directory = user_directory

    def execute(self) -> List[UserOutputDTO]:
        return [UserOutputDTO.from_entity(u) for u in self.user_directory.list_users()]
