"""
Repositórios Django para Organizações e Usuários.

Implementam OrganizationRepository e UserDirectory
(helpdesk/core/organizations/ports.py) sobre o ORM e o
django.contrib.auth.
"""

from typing import List, Optional
import logging

from django.contrib.auth import get_user_model
from django.db import DatabaseError

from helpdesk.core.organizations.entities import (
    MembershipEntity,
    OrganizationEntity,
    UserEntity,
)
from helpdesk.core.shared.exceptions import PersistenceError

from .mappers import MembershipMapper, OrganizationMapper, UserMapper
from .models import MembershipModel, OrganizationModel

logger = logging.getLogger(__name__)


class DjangoOrganizationRepository:
    """
    Implementação Django do OrganizationRepository.

    Example:
        repo = DjangoOrganizationRepository()
        org = repo.get_by_slug("acme")
        membership = repo.get_membership(str(request.user.pk), org.id)
    """

    def get_by_id(self, organization_id: str) -> Optional[OrganizationEntity]:
        try:
            model = OrganizationModel.objects.filter(id=organization_id).first()
        except DatabaseError as e:
            raise PersistenceError(f"Falha ao buscar organização: {e}", operation="get_by_id")
        return OrganizationMapper.to_entity(model) if model else None

    def get_by_slug(self, slug: str) -> Optional[OrganizationEntity]:
        try:
            model = OrganizationModel.objects.filter(slug=slug).first()
        except DatabaseError as e:
            raise PersistenceError(f"Falha ao buscar organização: {e}", operation="get_by_slug")

        if not model:
            logger.debug(f"Organization not found: {slug}")
            return None
        return OrganizationMapper.to_entity(model)

    def list_for_user(self, user_id: str) -> List[OrganizationEntity]:
        try:
            models = list(
                OrganizationModel.objects
                .filter(memberships__user_id=user_id)
                .order_by('name')
            )
        except (DatabaseError, ValueError) as e:
            raise PersistenceError(f"Falha ao listar organizações: {e}", operation="list_for_user")
        return [OrganizationMapper.to_entity(m) for m in models]

    def list_all(self) -> List[OrganizationEntity]:
        try:
            models = list(OrganizationModel.objects.order_by('name'))
        except DatabaseError as e:
            raise PersistenceError(f"Falha ao listar organizações: {e}", operation="list_all")
        return [OrganizationMapper.to_entity(m) for m in models]

    def get_membership(
        self,
        user_id: str,
        organization_id: str
    ) -> Optional[MembershipEntity]:
        try:
            model = MembershipModel.objects.filter(
                user_id=user_id,
                organization_id=organization_id,
            ).first()
        except ValueError:
            # user_id que não é chave válida: não há associação
            return None
        except DatabaseError as e:
            raise PersistenceError(f"Falha ao buscar associação: {e}", operation="get_membership")
        return MembershipMapper.to_entity(model) if model else None


class DjangoUserDirectory:
    """
    Diretório de usuários sobre django.contrib.auth.

    Apenas usuários ativos podem receber tickets.
    """

    def list_users(self) -> List[UserEntity]:
        User = get_user_model()
        try:
            users = list(User.objects.filter(is_active=True).order_by('email', 'pk'))
        except DatabaseError as e:
            raise PersistenceError(f"Falha ao listar usuários: {e}", operation="list_users")
        return [UserMapper.to_entity(u) for u in users]

    def get_by_id(self, user_id: str) -> Optional[UserEntity]:
        User = get_user_model()
        try:
            user = User.objects.filter(pk=user_id, is_active=True).first()
        except ValueError:
            return None
        except DatabaseError as e:
            raise PersistenceError(f"Falha ao buscar usuário: {e}", operation="get_by_id")
        return UserMapper.to_entity(user) if user else None
