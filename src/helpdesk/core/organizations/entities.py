"""
Entidades do Domínio de Organizações (tenants).

Entidades:
- OrganizationEntity: tenant isolado, dono dos seus tickets
- UserEntity: usuário autenticado (assignee potencial)
- MembershipEntity: associação N:N usuário ↔ organização
- OrganizationContext: contexto explícito (usuário + tenant) passado
  para as operações do core, no lugar de uma "organização selecionada"
  global
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Optional
import re
import uuid

from helpdesk.core.shared.exceptions import ValidationError


class UserRole(Enum):
    """Papel global do usuário no sistema."""

    ADMIN = "admin"
    USER = "user"

    @classmethod
    def from_string(cls, value: str) -> "UserRole":
        """
        Converte string para enum (aceita nome ou valor).

        Raises:
            ValueError: Se valor inválido
        """
        for role in cls:
            if value and value.lower() in (role.value, role.name.lower()):
                return role
        raise ValueError(f"Papel de usuário inválido: {value}")


class MembershipRole(Enum):
    """Papel do usuário dentro de uma organização."""

    ADMIN = "admin"
    MEMBER = "member"

    @classmethod
    def from_string(cls, value: str) -> "MembershipRole":
        for role in cls:
            if value and value.lower() in (role.value, role.name.lower()):
                return role
        raise ValueError(f"Papel de membro inválido: {value}")


@dataclass
class OrganizationEntity:
    """
    Entidade de Domínio: Organização (tenant).

    Invariantes:
    - Nome obrigatório
    - Slug único, minúsculo, apenas letras, números e hífen
    - Cores do tema em hexadecimal (#RRGGBB)

    Attributes:
        id: Identificador único (UUID)
        name: Nome de exibição
        slug: Identificador legível usado nas URLs
        theme_primary_color: Cor primária do tema
        theme_secondary_color: Cor secundária do tema
        theme_accent_color: Cor de destaque do tema
        logo_url: Referência opcional ao logo
    """

    id: str = field(default_factory=lambda: str(uuid.uuid4()))
    name: str = ""
    slug: str = ""
    theme_primary_color: str = "#1a365d"
    theme_secondary_color: str = "#2d3748"
    theme_accent_color: str = "#4299e1"
    logo_url: Optional[str] = None

    SLUG_PATTERN = re.compile(r"^[a-z0-9]+(?:-[a-z0-9]+)*$")
    COLOR_PATTERN = re.compile(r"^#[0-9A-Fa-f]{6}$")

    @classmethod
    def criar(
        cls,
        name: str,
        slug: str,
        theme_primary_color: str = "#1a365d",
        theme_secondary_color: str = "#2d3748",
        theme_accent_color: str = "#4299e1",
        logo_url: Optional[str] = None,
    ) -> "OrganizationEntity":
        """
        Factory method para criar organização com validações.

        Raises:
            ValidationError: Se nome, slug ou cores inválidos
        """
        if not name or not name.strip():
            raise ValidationError("Nome da organização é obrigatório", field="name")

        slug = (slug or "").strip().lower()
        if not cls.SLUG_PATTERN.match(slug):
            raise ValidationError(
                "Slug deve conter apenas letras minúsculas, números e hífens",
                field="slug"
            )

        cores = {
            "theme_primary_color": theme_primary_color,
            "theme_secondary_color": theme_secondary_color,
            "theme_accent_color": theme_accent_color,
        }
        for campo, cor in cores.items():
            if not cls.COLOR_PATTERN.match(cor or ""):
                raise ValidationError(f"Cor inválida: {cor}", field=campo)

        return cls(
            name=name.strip(),
            slug=slug,
            logo_url=logo_url or None,
            **cores,
        )

    @property
    def tema(self) -> dict:
        """Cores do tema, no formato consumido pelo frontend."""
        return {
            "primary": self.theme_primary_color,
            "secondary": self.theme_secondary_color,
            "accent": self.theme_accent_color,
        }

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, OrganizationEntity):
            return False
        return self.id == other.id

    def __hash__(self) -> int:
        return hash(self.id)


@dataclass
class UserEntity:
    """
    Entidade de Domínio: Usuário.

    Referenciado pelos tickets apenas por id (assigned_to), sem posse.
    """

    id: str
    email: str
    role: UserRole = UserRole.USER
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN


@dataclass(frozen=True)
class MembershipEntity:
    """Associação usuário ↔ organização (tabela user_organizations)."""

    user_id: str
    organization_id: str
    role: MembershipRole = MembershipRole.MEMBER


@dataclass(frozen=True)
class OrganizationContext:
    """
    Contexto de sessão: qual usuário, em qual tenant.

    Construído por SelecionarOrganizacaoService depois de verificar a
    associação do usuário. É passado explicitamente para as camadas que
    montam os DTOs; nunca é guardado em estado global.

    Attributes:
        user_id: ID do usuário autenticado
        user_email: Email do usuário (registrado como opened_by)
        organization_id: Tenant selecionado
        organization_slug: Slug do tenant
        role: Papel do usuário no tenant
    """

    user_id: str
    user_email: str
    organization_id: str
    organization_slug: str
    role: MembershipRole = MembershipRole.MEMBER

    @property
    def is_org_admin(self) -> bool:
        return self.role == MembershipRole.ADMIN
