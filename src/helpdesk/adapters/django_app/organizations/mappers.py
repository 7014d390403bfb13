"""
Mappers entre Models Django e Entities de Organizações.

Mappers são stateless e não contêm lógica de negócio.
"""

from django.utils import timezone

from helpdesk.core.organizations.entities import (
    MembershipEntity,
    MembershipRole,
    OrganizationEntity,
    UserEntity,
    UserRole,
)

from .models import MembershipModel, OrganizationModel


class OrganizationMapper:
    """Conversão OrganizationModel ↔ OrganizationEntity."""

    @staticmethod
    def to_entity(model: OrganizationModel) -> OrganizationEntity:
        # Sem validações: dados já validados na criação
        return OrganizationEntity(
            id=model.id,
            name=model.name,
            slug=model.slug,
            theme_primary_color=model.theme_primary_color,
            theme_secondary_color=model.theme_secondary_color,
            theme_accent_color=model.theme_accent_color,
            logo_url=model.logo_url or None,
        )

    @staticmethod
    def to_model(entity: OrganizationEntity) -> OrganizationModel:
        return OrganizationModel(
            id=entity.id,
            name=entity.name,
            slug=entity.slug,
            theme_primary_color=entity.theme_primary_color,
            theme_secondary_color=entity.theme_secondary_color,
            theme_accent_color=entity.theme_accent_color,
            logo_url=entity.logo_url,
        )


class MembershipMapper:

    @staticmethod
    def to_entity(model: MembershipModel) -> MembershipEntity:
        return MembershipEntity(
            user_id=str(model.user_id),
            organization_id=model.organization_id,
            role=MembershipRole.from_string(model.role),
        )


class UserMapper:
    """
    Converte usuários do django.contrib.auth para UserEntity.

    Staff e superusers recebem papel admin.
    """

    @staticmethod
    def to_entity(user) -> UserEntity:
        role = UserRole.ADMIN if (user.is_staff or user.is_superuser) else UserRole.USER
        return UserEntity(
            id=str(user.pk),
            email=user.email or user.get_username(),
            role=role,
            created_at=user.date_joined or timezone.now(),
        )
