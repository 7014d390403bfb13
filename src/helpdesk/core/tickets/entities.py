"""
Entidades do Domínio de Tickets.

Este módulo define as entidades de domínio que encapsulam
regras de negócio relacionadas a tickets de atendimento.

Entidades:
- TicketEntity: Agregado principal do domínio
- TicketStatus: Estados possíveis de um ticket
- IssueType: Catálogo fixo de tipos de problema
- AttachmentEntity: Arquivo anexado ao ticket

Regras de Negócio Encapsuladas:
- Campos obrigatórios validados antes de qualquer persistência
- Ticket fechado exige data (closed_on) e responsável (closed_by)
- id, ticket_no e organization_id imutáveis após a criação
- Registro do primeiro atendimento (responded_at) para métricas
"""

from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Optional
import uuid

from helpdesk.core.shared.exceptions import AttachmentError, ValidationError


def agora() -> datetime:
    """Timestamp atual em UTC."""
    return datetime.now(timezone.utc)


class TicketStatus(Enum):
    """
    Estados possíveis de um ticket.

    Fluxo de Estados:
        OPEN → IN_PROGRESS → CLOSED
          └────────────────────↑
        CLOSED → OPEN (reabrir)

    Nenhuma transição é bloqueada; apenas o fechamento exige
    closed_on e closed_by preenchidos.
    """

    ABERTO = "open"
    EM_PROGRESSO = "in_progress"
    FECHADO = "closed"

    @classmethod
    def from_string(cls, value: str) -> "TicketStatus":
        """
        Converte string para enum.

        Args:
            value: Valor ("in_progress") ou nome ("EM_PROGRESSO")

        Returns:
            TicketStatus correspondente

        Raises:
            ValueError: Se valor inválido
        """
        if isinstance(value, cls):
            return value

        normalizado = (value or "").strip()
        for status in cls:
            if normalizado.lower() == status.value or normalizado.upper() == status.name:
                return status

        raise ValueError(f"Status inválido: {value}")


class IssueType(Enum):
    """Catálogo de tipos de problema atendidos."""

    DECLARATION = "Declaration"
    ESTIMATION = "Estimation"
    PAYMENT = "Payment"
    FILING_UPDATE = "Filing Update"
    REFUND_UPDATE = "Refund Update"
    NOTICE_148 = "Notice U/s 148"
    NOTICE_133_6 = "Notice U/s 133(6)"
    OTHER_NOTICES = "Other Notices"
    GST_FILING = "GST Filing"
    REFERRAL_BONUS = "Referral Bonus"
    GST_REGISTRATION = "GST Registration"
    FILING_COPIES = "Filing Copies"
    COMPUTATION_COPIES = "Computation Copies"
    OTHERS = "Others"

    @classmethod
    def valores(cls) -> List[str]:
        """Valores do catálogo, na ordem de exibição."""
        return [issue.value for issue in cls]


@dataclass(frozen=True)
class AttachmentEntity:
    """
    Arquivo anexado a um ticket.

    Criado no momento do upload e vinculado ao ticket em composição.
    Depois de vinculado não é removido por nenhuma operação.

    Attributes:
        name: Nome original do arquivo
        size: Tamanho em bytes (máximo 10 MB)
        mime_type: Tipo MIME (lista fechada)
        url: Localização no storage
    """

    name: str
    size: int
    mime_type: str
    url: str

    MAX_SIZE = 10 * 1024 * 1024  # 10MB
    ALLOWED_MIME_TYPES = (
        "image/jpeg",
        "image/png",
        "application/pdf",
        "application/msword",
        "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
    )

    @classmethod
    def validar(cls, name: str, size: int, mime_type: str, max_size: Optional[int] = None) -> None:
        """
        Valida tamanho e tipo de um arquivo antes do upload.

        Args:
            name: Nome do arquivo (para a mensagem de erro)
            size: Tamanho em bytes
            mime_type: Tipo MIME declarado
            max_size: Limite em bytes (default: MAX_SIZE)

        Raises:
            AttachmentError: Se tamanho excede o limite ou tipo não permitido
        """
        limite = max_size or cls.MAX_SIZE

        if size > limite:
            raise AttachmentError(
                f"Arquivo {name} excede o limite de {limite // (1024 * 1024)}MB",
                file_name=name,
                reason="tamanho"
            )

        if mime_type not in cls.ALLOWED_MIME_TYPES:
            raise AttachmentError(
                f"Tipo de arquivo não permitido: {mime_type}",
                file_name=name,
                reason="tipo"
            )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "size": self.size,
            "mime_type": self.mime_type,
            "url": self.url,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "AttachmentEntity":
        return cls(
            name=data["name"],
            size=int(data["size"]),
            mime_type=data["mime_type"],
            url=data["url"],
        )


@dataclass
class TicketEntity:
    """
    Entidade de Domínio: Ticket.

    Agregado principal do domínio de atendimento. Pertence a exatamente
    uma organização e nunca é removido fisicamente.

    Invariantes:
    - client_file_no, mobile_no, name_of_client, issue_type e
      description não podem ser vazios
    - closed_on/closed_by preenchidos somente com status closed
    - id, ticket_no e organization_id imutáveis após criação
    - ticket_no é gerado pela camada de persistência (sequência por tenant)

    Attributes:
        id: Identificador único (UUID)
        ticket_no: Número legível, único por organização
        organization_id: Organização dona do ticket
        created_on: Data de abertura
        opened_by: Email de quem abriu
        client_file_no: Número do arquivo do cliente
        mobile_no: Celular do cliente
        name_of_client: Nome do cliente
        issue_type: Tipo de problema (catálogo IssueType)
        description: Descrição livre
        resolution: Resolução livre
        status: Estado atual
        closed_on: Data de fechamento
        closed_by: Quem fechou
        assigned_to: ID do usuário responsável
        attachments: Arquivos anexados
        created_at: Timestamp de criação
        updated_at: Timestamp da última alteração
        responded_at: Primeira saída do status open (métrica de resposta)

    Example:
        ticket = TicketEntity.criar(
            organization_id="org-1",
            opened_by="agente@empresa.com",
            client_file_no="F100",
            mobile_no="9998887776",
            name_of_client="Jane Doe",
            issue_type="Payment",
            description="late payment",
        )
    """

    # Identificação
    id: str = field(default_factory=lambda: str(uuid.uuid4()))
    ticket_no: Optional[str] = None
    organization_id: str = ""

    # Abertura
    created_on: date = field(default_factory=date.today)
    opened_by: str = ""

    # Dados do cliente
    client_file_no: str = ""
    mobile_no: str = ""
    name_of_client: str = ""

    # Problema
    issue_type: str = ""
    description: str = ""
    resolution: str = ""

    # Estado
    status: TicketStatus = field(default=TicketStatus.ABERTO)
    closed_on: Optional[date] = None
    closed_by: Optional[str] = None

    # Relacionamentos (referência fraca por id)
    assigned_to: Optional[str] = None

    attachments: List[AttachmentEntity] = field(default_factory=list)

    # Timestamps
    created_at: datetime = field(default_factory=agora)
    updated_at: datetime = field(default_factory=agora)
    responded_at: Optional[datetime] = None

    CAMPOS_OBRIGATORIOS = {
        "client_file_no": "Número do arquivo do cliente",
        "mobile_no": "Celular",
        "name_of_client": "Nome do cliente",
        "issue_type": "Tipo de problema",
        "description": "Descrição",
    }
    CAMPOS_IMUTAVEIS = (
        "id",
        "ticket_no",
        "organization_id",
        "created_on",
        "created_at",
        "opened_by",
    )
    CAMPOS_EDITAVEIS = (
        "client_file_no",
        "mobile_no",
        "name_of_client",
        "issue_type",
        "description",
        "resolution",
        "status",
        "closed_on",
        "closed_by",
        "assigned_to",
    )

    @classmethod
    def criar(
        cls,
        organization_id: str,
        opened_by: str,
        client_file_no: str,
        mobile_no: str,
        name_of_client: str,
        issue_type: str,
        description: str,
        resolution: str = "",
        assigned_to: Optional[str] = None,
        attachments: Optional[List[AttachmentEntity]] = None,
    ) -> "TicketEntity":
        """
        Factory method para criar ticket com validações.

        Validação puramente local (sem I/O). O ticket_no fica vazio até
        a inserção no repositório.

        Returns:
            Nova instância de TicketEntity com status open

        Raises:
            ValidationError: Se algum campo obrigatório estiver vazio
        """
        valores = {
            "client_file_no": client_file_no,
            "mobile_no": mobile_no,
            "name_of_client": name_of_client,
            "issue_type": issue_type,
            "description": description,
        }
        for campo, valor in valores.items():
            cls._validar_obrigatorio(campo, valor)

        if not organization_id:
            raise ValidationError("Organização é obrigatória", field="organization_id")
        if not opened_by or not opened_by.strip():
            raise ValidationError("Responsável pela abertura é obrigatório", field="opened_by")

        return cls(
            organization_id=organization_id,
            opened_by=opened_by.strip(),
            status=TicketStatus.ABERTO,
            resolution=(resolution or "").strip(),
            assigned_to=assigned_to or None,
            attachments=list(attachments or []),
            **{campo: str(valor).strip() for campo, valor in valores.items()},
        )

    @classmethod
    def _validar_obrigatorio(cls, campo: str, valor: Any) -> str:
        """Valida campo obrigatório e retorna valor normalizado."""
        normalizado = str(valor).strip() if valor is not None else ""
        if not normalizado:
            raise ValidationError(
                f"{cls.CAMPOS_OBRIGATORIOS[campo]} é obrigatório",
                field=campo
            )
        return normalizado

    @staticmethod
    def _parse_data(campo: str, valor: Any) -> Optional[date]:
        """Aceita date, datetime ou string ISO (YYYY-MM-DD)."""
        if valor in (None, ""):
            return None
        if isinstance(valor, datetime):
            return valor.date()
        if isinstance(valor, date):
            return valor
        try:
            return date.fromisoformat(str(valor)[:10])
        except ValueError:
            raise ValidationError(f"Data inválida: {valor}", field=campo)

    # =========================================================================
    # Comportamento
    # =========================================================================

    def atribuir_a(self, usuario_id: Optional[str]) -> bool:
        """
        Define o responsável pelo ticket.

        O status não muda com a atribuição; o atendimento começa quando
        o responsável abre a notificação.

        Args:
            usuario_id: ID do usuário (None remove a atribuição)

        Returns:
            True se o ticket passou para um novo responsável não nulo
            (situação que exige notificação)
        """
        anterior = self.assigned_to
        self.assigned_to = usuario_id or None

        if self.assigned_to != anterior:
            self._atualizar_timestamp()

        return self.assigned_to is not None and self.assigned_to != anterior

    def alterar_status(
        self,
        novo_status: TicketStatus,
        closed_on: Optional[date] = None,
        closed_by: Optional[str] = None,
    ) -> None:
        """
        Altera status do ticket.

        Regras:
        - Fechar exige closed_on e closed_by juntos
        - Qualquer status diferente de closed limpa closed_on/closed_by
        - A primeira saída de open registra responded_at

        Raises:
            ValidationError: Se fechamento sem data ou sem responsável
        """
        if novo_status == TicketStatus.FECHADO:
            if not closed_on:
                raise ValidationError(
                    "Ticket fechado exige data de fechamento",
                    field="closed_on"
                )
            if not closed_by:
                raise ValidationError(
                    "Ticket fechado exige responsável pelo fechamento",
                    field="closed_by"
                )
            self.closed_on = closed_on
            self.closed_by = closed_by
        else:
            self.closed_on = None
            self.closed_by = None

        if (
            self.status == TicketStatus.ABERTO
            and novo_status != TicketStatus.ABERTO
            and self.responded_at is None
        ):
            self.responded_at = agora()

        self.status = novo_status
        self._atualizar_timestamp()

    def marcar_em_atendimento(self) -> bool:
        """
        Move ticket open para in_progress (abertura da notificação).

        Returns:
            True se o status mudou
        """
        if self.status != TicketStatus.ABERTO:
            return False

        self.alterar_status(TicketStatus.EM_PROGRESSO)
        return True

    def aplicar_alteracoes(self, campos: Dict[str, Any]) -> Dict[str, Any]:
        """
        Aplica atualização parcial com validação.

        Campos imutáveis só são aceitos se o valor for igual ao atual.
        Campos obrigatórios não podem ser esvaziados. Status, closed_on e
        closed_by são tratados em conjunto pela regra de fechamento.

        Args:
            campos: Campos a alterar (nomes das colunas)

        Returns:
            Campos efetivamente alterados, com valores de domínio
            (inclui updated_at/responded_at quando mudam)

        Raises:
            ValidationError: Campo desconhecido, imutável, obrigatório
                vazio, status inválido ou fechamento inconsistente
        """
        for campo in campos:
            if campo not in self.CAMPOS_EDITAVEIS and campo not in self.CAMPOS_IMUTAVEIS:
                raise ValidationError(f"Campo desconhecido: {campo}", field=campo)

        for campo in self.CAMPOS_IMUTAVEIS:
            if campo in campos and str(campos[campo]) != str(getattr(self, campo)):
                raise ValidationError(
                    f"Campo {campo} não pode ser alterado",
                    field=campo
                )

        antes = {campo: getattr(self, campo) for campo in self.CAMPOS_EDITAVEIS}
        antes["responded_at"] = self.responded_at

        for campo in self.CAMPOS_OBRIGATORIOS:
            if campo in campos:
                setattr(self, campo, self._validar_obrigatorio(campo, campos[campo]))

        if "resolution" in campos:
            self.resolution = (campos["resolution"] or "").strip()

        if "assigned_to" in campos:
            self.atribuir_a(campos["assigned_to"])

        if {"status", "closed_on", "closed_by"} & set(campos):
            self._aplicar_status(campos)

        alteracoes = {
            campo: getattr(self, campo)
            for campo in antes
            if getattr(self, campo) != antes[campo]
        }
        if alteracoes:
            self._atualizar_timestamp()
            alteracoes["updated_at"] = self.updated_at

        return alteracoes

    def _aplicar_status(self, campos: Dict[str, Any]) -> None:
        novo_status = self.status
        if "status" in campos:
            try:
                novo_status = TicketStatus.from_string(campos["status"])
            except ValueError as e:
                raise ValidationError(str(e), field="status")

        if novo_status != TicketStatus.FECHADO:
            # Fora do status closed os campos de fechamento são descartados
            self.alterar_status(novo_status)
            return

        closed_on = (
            self._parse_data("closed_on", campos["closed_on"])
            if "closed_on" in campos else self.closed_on
        )
        closed_by = (
            (campos["closed_by"] or None) if "closed_by" in campos else self.closed_by
        )
        self.alterar_status(novo_status, closed_on=closed_on, closed_by=closed_by)

    def _atualizar_timestamp(self) -> None:
        self.updated_at = agora()

    # =========================================================================
    # Consultas
    # =========================================================================

    def corresponde_busca(self, termo: Optional[str] = None, status: Optional[str] = None) -> bool:
        """
        Verifica se o ticket atende aos filtros de busca.

        - status: igualdade exata com o valor do status
        - termo: substring (case-insensitive) em mobile_no,
          client_file_no, name_of_client ou ticket_no

        Filtros vazios não restringem.
        """
        if status and self.status.value != status:
            return False

        if termo:
            termo = termo.lower()
            campos = (self.mobile_no, self.client_file_no, self.name_of_client, self.ticket_no)
            return any(termo in (valor or "").lower() for valor in campos)

        return True

    @property
    def esta_fechado(self) -> bool:
        return self.status == TicketStatus.FECHADO

    @property
    def esta_atribuido(self) -> bool:
        """Verifica se ticket está atribuído a alguém."""
        return self.assigned_to is not None

    @property
    def tempo_resposta_horas(self) -> Optional[float]:
        """
        Horas entre a criação e o primeiro atendimento.

        Para tickets sem responded_at registrado, tickets fechados usam
        updated_at. Nunca negativo.
        """
        referencia = self.responded_at
        if referencia is None and self.esta_fechado:
            referencia = self.updated_at
        if referencia is None:
            return None

        horas = (referencia - self.created_at).total_seconds() / 3600
        return max(horas, 0.0)

    def __repr__(self) -> str:
        return (
            f"TicketEntity("
            f"id={self.id[:8]}..., "
            f"ticket_no={self.ticket_no}, "
            f"org={self.organization_id}, "
            f"status={self.status.value}"
            f")"
        )

    def __eq__(self, other: object) -> bool:
        """Comparação por ID (identidade de entidade)."""
        if not isinstance(other, TicketEntity):
            return False
        return self.id == other.id

    def __hash__(self) -> int:
        return hash(self.id)
