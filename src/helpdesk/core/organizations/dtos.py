"""
Data Transfer Objects (DTOs) do Domínio de Organizações.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from .entities import OrganizationEntity, UserEntity


@dataclass(frozen=True)
class SelecionarOrganizacaoInputDTO:
    """
    DTO de entrada para selecionar o tenant da sessão.

    Attributes:
        user_id: ID do usuário autenticado
        user_email: Email do usuário autenticado
        slug: Slug da organização escolhida
    """

    user_id: str
    user_email: str
    slug: str


@dataclass
class OrganizationOutputDTO:
    """DTO de saída com dados de uma organização e seu tema."""

    id: str
    name: str
    slug: str
    theme_primary_color: str
    theme_secondary_color: str
    theme_accent_color: str
    logo_url: Optional[str] = None

    @classmethod
    def from_entity(cls, entity: OrganizationEntity) -> "OrganizationOutputDTO":
        return cls(
            id=entity.id,
            name=entity.name,
            slug=entity.slug,
            theme_primary_color=entity.theme_primary_color,
            theme_secondary_color=entity.theme_secondary_color,
            theme_accent_color=entity.theme_accent_color,
            logo_url=entity.logo_url,
        )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "slug": self.slug,
            "theme_primary_color": self.theme_primary_color,
            "theme_secondary_color": self.theme_secondary_color,
            "theme_accent_color": self.theme_accent_color,
            "logo_url": self.logo_url,
        }


@dataclass
class UserOutputDTO:
    """DTO de saída de usuário (lista de assignees)."""

    id: str
    email: str
    role: str
    created_at: datetime

    @classmethod
    def from_entity(cls, entity: UserEntity) -> "UserOutputDTO":
        return cls(
            id=entity.id,
            email=entity.email,
            role=entity.role.value,
            created_at=entity.created_at,
        )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "email": self.email,
            "role": self.role,
            "created_at": self.created_at.isoformat(),
        }
