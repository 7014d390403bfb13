"""
Mappers para conversão entre Entities (Core) e Models (Django).

Responsabilidades:
- Converter TicketEntity → campos do TicketModel (para persistência)
- Converter TicketModel → TicketEntity (para uso no Core)
- Converter alterações parciais de domínio em colunas

Princípios:
- Mappers são stateless
- Não contêm lógica de negócio
- Tratam apenas conversão de dados
"""

from enum import Enum
from typing import Any, Dict, List

from helpdesk.core.tickets.entities import (
    AttachmentEntity,
    TicketEntity,
    TicketStatus,
)

from .models import TicketAttachmentModel, TicketModel


class AttachmentMapper:

    @staticmethod
    def to_entity(model: TicketAttachmentModel) -> AttachmentEntity:
        return AttachmentEntity(
            name=model.name,
            size=model.size,
            mime_type=model.mime_type,
            url=model.url,
        )

    @staticmethod
    def to_model(entity: AttachmentEntity, ticket_id: str, position: int) -> TicketAttachmentModel:
        return TicketAttachmentModel(
            ticket_id=ticket_id,
            name=entity.name,
            size=entity.size,
            mime_type=entity.mime_type,
            url=entity.url,
            position=position,
        )


class TicketMapper:
    """
    Mapper para conversão entre TicketEntity e TicketModel.

    Responsável por:
    - to_fields(): Entity → campos do Model
    - to_columns(): alterações parciais → colunas
    - to_entity(): Model → Entity
    - to_entity_list(): List[Model] → List[Entity]
    """

    @staticmethod
    def to_fields(entity: TicketEntity) -> Dict[str, Any]:
        """
        Campos do TicketModel para uma nova entidade.

        Note:
            Não inclui anexos (tabela própria) nem chama .save()
        """
        return {
            'id': entity.id,
            'ticket_no': entity.ticket_no,
            'organization_id': entity.organization_id,
            'created_on': entity.created_on,
            'opened_by': entity.opened_by,
            'client_file_no': entity.client_file_no,
            'mobile_no': entity.mobile_no,
            'name_of_client': entity.name_of_client,
            'issue_type': entity.issue_type,
            'description': entity.description,
            'resolution': entity.resolution,
            'status': entity.status.value,
            'closed_on': entity.closed_on,
            'closed_by': entity.closed_by,
            'assigned_to': entity.assigned_to,
            'created_at': entity.created_at,
            'updated_at': entity.updated_at,
            'responded_at': entity.responded_at,
        }

    @staticmethod
    def to_columns(campos: Dict[str, Any]) -> Dict[str, Any]:
        """Converte valores de domínio (enums) em valores de coluna."""
        return {
            campo: valor.value if isinstance(valor, Enum) else valor
            for campo, valor in campos.items()
            if campo != 'attachments'
        }

    @staticmethod
    def to_entity(model: TicketModel) -> TicketEntity:
        """
        Converte TicketModel para TicketEntity.

        Note:
            Bypassa validações do factory method .criar()
            pois dados já foram validados na criação original.
            Anexos devem vir pré-carregados (prefetch_related).
        """
        return TicketEntity(
            id=model.id,
            ticket_no=model.ticket_no,
            organization_id=model.organization_id,
            created_on=model.created_on,
            opened_by=model.opened_by,
            client_file_no=model.client_file_no,
            mobile_no=model.mobile_no,
            name_of_client=model.name_of_client,
            issue_type=model.issue_type,
            description=model.description,
            resolution=model.resolution or '',
            status=TicketStatus(model.status),
            closed_on=model.closed_on,
            closed_by=model.closed_by,
            assigned_to=model.assigned_to,
            attachments=[AttachmentMapper.to_entity(a) for a in model.attachments.all()],
            created_at=model.created_at,
            updated_at=model.updated_at,
            responded_at=model.responded_at,
        )

    @staticmethod
    def to_entity_list(models: List[TicketModel]) -> List[TicketEntity]:
        return [TicketMapper.to_entity(model) for model in models]
