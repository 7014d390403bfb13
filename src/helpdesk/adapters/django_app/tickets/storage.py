"""
Storage de anexos sobre o Django Storage API.

Usa default_storage (FileSystemStorage em MEDIA_ROOT por padrão; pode
ser trocado por qualquer backend configurado em STORAGES).

Caminho: ticket-attachments/{user_id}/{timestamp}-{uuid}.{ext}
"""

import logging
import uuid

from django.core.files.base import ContentFile
from django.core.files.storage import default_storage
from django.utils import timezone

from helpdesk.core.shared.exceptions import AttachmentError

logger = logging.getLogger(__name__)


class DjangoAttachmentStorage:
    """Implementação Django do AttachmentStorage."""

    PASTA = 'ticket-attachments'

    def __init__(self, storage=None):
        self._storage = storage or default_storage

    def upload(self, content: bytes, name: str, mime_type: str, user_id: str) -> str:
        """
        Raises:
            AttachmentError: Se o storage falhar
        """
        extensao = name.rsplit('.', 1)[-1].lower() if '.' in name else 'bin'
        timestamp = int(timezone.now().timestamp() * 1000)
        caminho = f"{self.PASTA}/{user_id}/{timestamp}-{uuid.uuid4().hex}.{extensao}"

        try:
            salvo = self._storage.save(caminho, ContentFile(content))
            url = self._storage.url(salvo)
        except OSError as e:
            logger.error(f"Falha no upload de {name}: {e}")
            raise AttachmentError(
                f"Falha no upload de {name}",
                file_name=name,
                reason="upload"
            )

        logger.info(f"Attachment stored: {salvo} ({mime_type}, {len(content)} bytes)")
        return url
