"""
Ports (Interfaces) do Domínio de Organizações.

- OrganizationRepository: tenants e associações de usuários
- UserDirectory: diretório de usuários (listUsers do armazenamento remoto)

Implementações:
- Django: helpdesk.adapters.django_app.organizations.repositories
- Memória: InMemoryOrganizationRepository / InMemoryUserDirectory (testes)
"""

from typing import Dict, List, Optional, Protocol, Tuple, runtime_checkable

from .entities import (
    MembershipEntity,
    MembershipRole,
    OrganizationEntity,
    UserEntity,
)


@runtime_checkable
class OrganizationRepository(Protocol):
    """Interface para leitura de organizações e associações."""

    def get_by_id(self, organization_id: str) -> Optional[OrganizationEntity]:
        ...

    def get_by_slug(self, slug: str) -> Optional[OrganizationEntity]:
        ...

    def list_for_user(self, user_id: str) -> List[OrganizationEntity]:
        """Organizações das quais o usuário é membro, ordenadas por nome."""
        ...

    def list_all(self) -> List[OrganizationEntity]:
        ...

    def get_membership(
        self,
        user_id: str,
        organization_id: str
    ) -> Optional[MembershipEntity]:
        """Associação do usuário com a organização, se existir."""
        ...


@runtime_checkable
class UserDirectory(Protocol):
    """Interface para consulta de usuários (assignees)."""

    def list_users(self) -> List[UserEntity]:
        ...

    def get_by_id(self, user_id: str) -> Optional[UserEntity]:
        ...


class InMemoryOrganizationRepository:
    """
    Implementação em memória do OrganizationRepository.

    Example:
        repo = InMemoryOrganizationRepository()
        org = repo.add(OrganizationEntity.criar(name="Acme", slug="acme"))
        repo.add_membership("user-1", org.id)
    """

    def __init__(self):
        self._organizations: Dict[str, OrganizationEntity] = {}
        self._memberships: Dict[Tuple[str, str], MembershipEntity] = {}

    def add(self, organization: OrganizationEntity) -> OrganizationEntity:
        self._organizations[organization.id] = organization
        return organization

    def add_membership(
        self,
        user_id: str,
        organization_id: str,
        role: MembershipRole = MembershipRole.MEMBER,
    ) -> MembershipEntity:
        membership = MembershipEntity(
            user_id=user_id,
            organization_id=organization_id,
            role=role,
        )
        self._memberships[(user_id, organization_id)] = membership
        return membership

    def get_by_id(self, organization_id: str) -> Optional[OrganizationEntity]:
        return self._organizations.get(organization_id)

    def get_by_slug(self, slug: str) -> Optional[OrganizationEntity]:
        for organization in self._organizations.values():
            if organization.slug == slug:
                return organization
        return None

    def list_for_user(self, user_id: str) -> List[OrganizationEntity]:
        organizations = [
            self._organizations[org_id]
            for (member_id, org_id) in self._memberships
            if member_id == user_id and org_id in self._organizations
        ]
        return sorted(organizations, key=lambda o: o.name)

    def list_all(self) -> List[OrganizationEntity]:
        return sorted(self._organizations.values(), key=lambda o: o.name)

    def get_membership(
        self,
        user_id: str,
        organization_id: str
    ) -> Optional[MembershipEntity]:
        return self._memberships.get((user_id, organization_id))


class InMemoryUserDirectory:
    """Diretório de usuários em memória (testes)."""

    def __init__(self, users: Optional[List[UserEntity]] = None):
        self._users: Dict[str, UserEntity] = {}
        for user in users or []:
            self.add(user)

    def add(self, user: UserEntity) -> UserEntity:
        self._users[user.id] = user
        return user

    def list_users(self) -> List[UserEntity]:
        return sorted(self._users.values(), key=lambda u: u.email)

    def get_by_id(self, user_id: str) -> Optional[UserEntity]:
        return self._users.get(user_id)
