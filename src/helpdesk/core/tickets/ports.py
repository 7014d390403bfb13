"""
Ports (Interfaces) do Domínio de Tickets.

Define os contratos que os Adapters de infraestrutura devem implementar
para persistência, armazenamento de anexos e notificações.

Tipos de Ports:
- TicketRepository: Armazenamento de tickets (insert/update/select)
- AttachmentStorage: Upload de arquivos, retorna URL
- NotificationGateway: Registros de notificação de atribuição

Princípio:
    Core define interfaces → Adapters implementam
    Dependências sempre apontam para o Core

Implementações:
- Django: helpdesk.adapters.django_app.tickets
- Memória: InMemory* (testes e prototipagem)
"""

from copy import deepcopy
from datetime import datetime
from typing import Any, Dict, List, Optional, Protocol, Set, Tuple, runtime_checkable
import uuid

from helpdesk.core.shared.exceptions import EntityNotFoundError

from .entities import TicketEntity, TicketStatus, agora


@runtime_checkable
class TicketRepository(Protocol):
    """
    Interface para persistência de Tickets.

    Todas as leituras por lista são escopadas por organização; o
    repositório nunca decide sozinho qual é o tenant corrente.

    Implementações:
    - DjangoTicketRepository (PostgreSQL via ORM)
    - InMemoryTicketRepository (para testes)

    Example:
        ticket = repo.insert(TicketEntity.criar(...))
        print(ticket.ticket_no)  # TKT-000001
    """

    def insert(self, ticket: TicketEntity) -> TicketEntity:
        """
        Persiste novo ticket.

        O ticket_no é gerado aqui, a partir da sequência da organização.

        Returns:
            Ticket persistido (com ticket_no)

        Raises:
            PersistenceError: Se falha na persistência
        """
        ...

    def update(self, ticket_id: str, campos: Dict[str, Any]) -> TicketEntity:
        """
        Atualização parcial: grava apenas os campos informados.

        Raises:
            EntityNotFoundError: Se ticket não existe
            PersistenceError: Se falha na persistência
        """
        ...

    def select_by_organization(
        self,
        organization_id: str,
        termo: Optional[str] = None,
        status: Optional[str] = None,
    ) -> List[TicketEntity]:
        """
        Tickets da organização que atendem aos filtros.

        Ordenação: created_on decrescente (created_at desempata).
        """
        ...

    def select_by_id(self, ticket_id: str) -> Optional[TicketEntity]:
        ...

    def count_by_organization(
        self,
        organization_id: str,
        status: Optional[TicketStatus] = None,
        apenas_atribuidos: bool = False,
    ) -> int:
        """Contagem filtrada (estratégia "consultas" do dashboard)."""
        ...


@runtime_checkable
class AttachmentStorage(Protocol):
    """Interface para armazenamento de arquivos anexados."""

    def upload(self, content: bytes, name: str, mime_type: str, user_id: str) -> str:
        """
        Armazena arquivo e retorna sua URL.

        Raises:
            AttachmentError: Se falha no upload
        """
        ...


@runtime_checkable
class NotificationGateway(Protocol):
    """
    Interface para registros de notificação de atribuição.

    Uma notificação não lida por (usuário, ticket); abrir a notificação
    marca como lida.
    """

    def notify_assignment(self, ticket_id: str, assignee_id: str) -> None:
        ...

    def get_notifications(self, user_id: str) -> List[TicketEntity]:
        """Tickets com notificação não lida para o usuário (mais recente primeiro)."""
        ...

    def mark_read(self, user_id: str, ticket_id: str) -> None:
        ...

    def has_notification(self, user_id: str, ticket_id: str) -> bool:
        """Se o usuário já foi notificado do ticket (lida ou não)."""
        ...


# =============================================================================
# Implementações em memória
# =============================================================================

def ordenar_por_criacao(tickets: List[TicketEntity]) -> List[TicketEntity]:
    """Ordena por created_on e created_at, mais recentes primeiro."""
    return sorted(tickets, key=lambda t: (t.created_on, t.created_at), reverse=True)


class InMemoryTicketRepository:
    """
    Implementação em memória do TicketRepository.

    Útil para:
    - Testes unitários
    - Prototipagem

    Retorna sempre cópias, como um armazenamento remoto faria:
    alterar uma entidade lida não altera o que está armazenado.

    Example:
        repo = InMemoryTicketRepository()
        ticket = repo.insert(ticket)
        found = repo.select_by_id(ticket.id)
    """

    def __init__(self):
        self._tickets: Dict[str, TicketEntity] = {}
        self._sequencias: Dict[str, int] = {}

    def insert(self, ticket: TicketEntity) -> TicketEntity:
        proximo = self._sequencias.get(ticket.organization_id, 0) + 1
        self._sequencias[ticket.organization_id] = proximo

        armazenado = deepcopy(ticket)
        armazenado.ticket_no = f"TKT-{proximo:06d}"
        self._tickets[armazenado.id] = armazenado
        return deepcopy(armazenado)

    def update(self, ticket_id: str, campos: Dict[str, Any]) -> TicketEntity:
        armazenado = self._tickets.get(ticket_id)
        if armazenado is None:
            raise EntityNotFoundError(
                f"Ticket {ticket_id} não encontrado",
                entity_type="Ticket",
                entity_id=ticket_id
            )

        for campo, valor in campos.items():
            setattr(armazenado, campo, deepcopy(valor))
        return deepcopy(armazenado)

    def select_by_organization(
        self,
        organization_id: str,
        termo: Optional[str] = None,
        status: Optional[str] = None,
    ) -> List[TicketEntity]:
        encontrados = [
            deepcopy(t) for t in self._tickets.values()
            if t.organization_id == organization_id and t.corresponde_busca(termo, status)
        ]
        return ordenar_por_criacao(encontrados)

    def select_by_id(self, ticket_id: str) -> Optional[TicketEntity]:
        ticket = self._tickets.get(ticket_id)
        return deepcopy(ticket) if ticket else None

    def count_by_organization(
        self,
        organization_id: str,
        status: Optional[TicketStatus] = None,
        apenas_atribuidos: bool = False,
    ) -> int:
        return len([
            t for t in self._tickets.values()
            if t.organization_id == organization_id
            and (status is None or t.status == status)
            and (not apenas_atribuidos or t.esta_atribuido)
        ])

    def clear(self) -> None:
        """Limpa todos os dados (útil para testes)."""
        self._tickets.clear()
        self._sequencias.clear()


class InMemoryAttachmentStorage:
    """Storage em memória; a URL usa o esquema memory://."""

    def __init__(self):
        self.arquivos: Dict[str, bytes] = {}

    def upload(self, content: bytes, name: str, mime_type: str, user_id: str) -> str:
        extensao = name.rsplit(".", 1)[-1].lower() if "." in name else "bin"
        caminho = (
            f"ticket-attachments/{user_id}/"
            f"{int(agora().timestamp() * 1000)}-{uuid.uuid4().hex}.{extensao}"
        )
        self.arquivos[caminho] = content
        return f"memory://{caminho}"


class InMemoryNotificationGateway:
    """
    Notificações em memória, resolvidas contra um TicketRepository.

    Example:
        gateway = InMemoryNotificationGateway(ticket_repo)
        gateway.notify_assignment(ticket.id, "user-1")
        gateway.get_notifications("user-1")  # [ticket]
    """

    def __init__(self, ticket_repo: TicketRepository):
        self.ticket_repo = ticket_repo
        self._nao_lidas: Dict[Tuple[str, str], datetime] = {}
        self._lidas: Set[Tuple[str, str]] = set()

    def notify_assignment(self, ticket_id: str, assignee_id: str) -> None:
        self._nao_lidas[(assignee_id, ticket_id)] = agora()

    def get_notifications(self, user_id: str) -> List[TicketEntity]:
        pendentes = sorted(
            (
                (criada_em, ticket_id)
                for (usuario, ticket_id), criada_em in self._nao_lidas.items()
                if usuario == user_id
            ),
            reverse=True,
        )
        tickets = [self.ticket_repo.select_by_id(ticket_id) for _, ticket_id in pendentes]
        return [t for t in tickets if t is not None]

    def mark_read(self, user_id: str, ticket_id: str) -> None:
        if self._nao_lidas.pop((user_id, ticket_id), None):
            self._lidas.add((user_id, ticket_id))

    def has_notification(self, user_id: str, ticket_id: str) -> bool:
        chave = (user_id, ticket_id)
        return chave in self._nao_lidas or chave in self._lidas
