"""
Upload de anexos em lote.

Cada arquivo é validado (tamanho e tipo) e enviado ao storage de forma
independente: a falha de um não interrompe os demais. Os uploads correm
em paralelo num pool de threads; os resultados voltam na ordem de entrada.

Arquivos enviados e não vinculados a um ticket ficam órfãos no storage.
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import List, Optional

from helpdesk.core.shared.exceptions import AttachmentError, ValidationError

from .dtos import ArquivoUploadDTO, ResultadoUploadDTO
from .entities import AttachmentEntity
from .ports import AttachmentStorage

logger = logging.getLogger(__name__)


class EnviarAnexosService:
    """
    Use Case: enviar arquivos para anexar ao ticket em composição.

    Example:
        service = EnviarAnexosService(storage, max_workers=4)
        resultados = service.execute(arquivos, user_id="user-1")
        anexos = [r.anexo for r in resultados if r.sucesso]
    """

    def __init__(
        self,
        storage: AttachmentStorage,
        max_size: Optional[int] = None,
        max_workers: int = 4,
    ):
        self.storage = storage
        self.max_size = max_size or AttachmentEntity.MAX_SIZE
        self.max_workers = max(1, max_workers)

    def execute(self, arquivos: List[ArquivoUploadDTO], user_id: str) -> List[ResultadoUploadDTO]:
        """
        Raises:
            ValidationError: Se usuário não informado
        """
        if not user_id:
            raise ValidationError("Usuário é obrigatório", field="user_id")
        if not arquivos:
            return []

        with ThreadPoolExecutor(max_workers=min(self.max_workers, len(arquivos))) as executor:
            futures = [executor.submit(self._enviar, arquivo, user_id) for arquivo in arquivos]
            resultados = [future.result() for future in futures]

        enviados = len([r for r in resultados if r.sucesso])
        logger.info(f"Upload de anexos de {user_id}: {enviados}/{len(resultados)} enviados")
        return resultados

    def _enviar(self, arquivo: ArquivoUploadDTO, user_id: str) -> ResultadoUploadDTO:
        try:
            AttachmentEntity.validar(
                arquivo.name, arquivo.size, arquivo.mime_type, max_size=self.max_size
            )
            url = self.storage.upload(arquivo.content, arquivo.name, arquivo.mime_type, user_id)
        except AttachmentError as e:
            logger.warning(f"Anexo {arquivo.name} rejeitado: {e.message}")
            return ResultadoUploadDTO(name=arquivo.name, sucesso=False, erro=e.message)
        except Exception as e:
            # Falha inesperada do backend de storage fica restrita a este arquivo
            logger.error(f"Erro inesperado no upload de {arquivo.name}: {e}", exc_info=True)
            return ResultadoUploadDTO(name=arquivo.name, sucesso=False, erro="Falha no upload")

        anexo = AttachmentEntity(
            name=arquivo.name,
            size=arquivo.size,
            mime_type=arquivo.mime_type,
            url=url,
        )
        return ResultadoUploadDTO(name=arquivo.name, sucesso=True, anexo=anexo)
