"""
Exceções de Domínio do HelpDesk.

Este módulo define exceções específicas do domínio que permitem
comunicar erros de forma clara e tipada entre as camadas.

Hierarquia:
    DomainException (base)
    ├── ValidationError (campo obrigatório ausente, estado inconsistente)
    ├── EntityNotFoundError / NotFoundError (id não resolve)
    ├── AccessDeniedError (usuário fora da organização)
    ├── PersistenceError (falha no armazenamento remoto)
    └── AttachmentError (anexo rejeitado ou falha no upload)

Nenhuma destas exceções é fatal para o processo: todas são reportadas
à camada que invocou a operação (views/API).
"""


class DomainException(Exception):
    """
    Exceção base para todos os erros de domínio.

    Todas as exceções específicas do domínio devem herdar desta classe.
    Isso permite capturar qualquer erro de domínio de forma genérica.

    Example:
        try:
            service.execute(input_dto)
        except DomainException as e:
            logger.error(f"Erro de domínio: {e}")
    """

    def __init__(self, message: str, code: str = None):
        self.message = message
        self.code = code or self.__class__.__name__
        super().__init__(self.message)

    def __str__(self) -> str:
        return f"[{self.code}] {self.message}"

    def to_dict(self) -> dict:
        """Serializa exceção para dicionário (útil para APIs)."""
        return {
            "error": self.code,
            "message": self.message,
        }


class ValidationError(DomainException):
    """
    Erro de validação de dados de entrada.

    Lançada quando um campo obrigatório está vazio ou quando a
    combinação de campos é inconsistente (ex: ticket fechado sem
    data de fechamento). Sempre recuperável localmente.

    Example:
        if not mobile_no.strip():
            raise ValidationError("Celular é obrigatório", field="mobile_no")
    """

    def __init__(self, message: str, field: str = None):
        self.field = field
        code = f"VALIDATION_ERROR_{field.upper()}" if field else "VALIDATION_ERROR"
        super().__init__(message, code)

    def to_dict(self) -> dict:
        result = super().to_dict()
        if self.field:
            result["field"] = self.field
        return result


class EntityNotFoundError(DomainException):
    """
    Entidade não encontrada no repositório.

    Lançada quando um id de ticket, usuário ou organização não resolve,
    inclusive quando o ticket existe mas pertence a outra organização.

    Example:
        ticket = repo.select_by_id(ticket_id)
        if not ticket:
            raise EntityNotFoundError(f"Ticket {ticket_id} não encontrado")
    """

    def __init__(self, message: str, entity_type: str = None, entity_id: str = None):
        self.entity_type = entity_type
        self.entity_id = entity_id
        super().__init__(message, "ENTITY_NOT_FOUND")

    def to_dict(self) -> dict:
        result = super().to_dict()
        if self.entity_type:
            result["entity_type"] = self.entity_type
        if self.entity_id:
            result["entity_id"] = self.entity_id
        return result


class AccessDeniedError(DomainException):
    """
    Usuário não tem acesso à organização solicitada.

    A associação usuário/organização (membership) determina a
    visibilidade dos tickets de cada tenant.
    """

    def __init__(self, message: str, organization_id: str = None):
        self.organization_id = organization_id
        super().__init__(message, "ACCESS_DENIED")


class PersistenceError(DomainException):
    """
    Falha em chamada ao armazenamento remoto.

    Apresentada ao usuário como falha genérica. Não há retry
    automático: o erro é repassado imediatamente a quem chamou.

    Example:
        try:
            TicketModel.objects.create(...)
        except DatabaseError as e:
            raise PersistenceError("Falha ao inserir ticket", operation="insert") from e
    """

    def __init__(self, message: str, operation: str = None):
        self.operation = operation
        super().__init__(message, "PERSISTENCE_ERROR")

    def to_dict(self) -> dict:
        result = super().to_dict()
        if self.operation:
            result["operation"] = self.operation
        return result


class AttachmentError(DomainException):
    """
    Anexo rejeitado (tamanho/tipo) ou falha no upload.

    Erro por arquivo: não aborta os demais arquivos do lote.

    Attributes:
        file_name: Nome do arquivo rejeitado
        reason: Motivo curto ("tamanho", "tipo", "upload")
    """

    def __init__(self, message: str, file_name: str = None, reason: str = None):
        self.file_name = file_name
        self.reason = reason
        super().__init__(message, "ATTACHMENT_ERROR")

    def to_dict(self) -> dict:
        result = super().to_dict()
        if self.file_name:
            result["file_name"] = self.file_name
        if self.reason:
            result["reason"] = self.reason
        return result


# Alias com o nome usado na taxonomia de erros do produto
NotFoundError = EntityNotFoundError
