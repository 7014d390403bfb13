"""
Domínio de Organizações - Tenants e Contexto de Sessão.

Cada organização isola seus próprios tickets; a associação
usuário ↔ organização (membership) determina a visibilidade.
"""

from .entities import (
    OrganizationEntity,
    UserEntity,
    UserRole,
    MembershipEntity,
    MembershipRole,
    OrganizationContext,
)
from .ports import OrganizationRepository, UserDirectory
from .use_cases import (
    ListarOrganizacoesService,
    SelecionarOrganizacaoService,
    ListarUsuariosService,
)

__all__ = [
    "OrganizationEntity",
    "UserEntity",
    "UserRole",
    "MembershipEntity",
    "MembershipRole",
    "OrganizationContext",
    "OrganizationRepository",
    "UserDirectory",
    "ListarOrganizacoesService",
    "SelecionarOrganizacaoService",
    "ListarUsuariosService",
]
