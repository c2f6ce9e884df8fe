"""
Inline fallback encoding.

Produces a self-contained data URI when no remote reference is available.
"""
import base64
import logging

from ...exceptions import FallbackReadError
from ..protocols import BlobProtocol

DEFAULT_MIME_TYPE = 'application/octet-stream'


class Base64FallbackEncoder:
    """Encodes file bytes as a base64 data URI tagged with the declared MIME type."""

    def __init__(self):
        self._logger = logging.getLogger('rteupload.upload.fallback')

    async def encode(self, file: BlobProtocol) -> str:
        """
        Encode a file as a data URI.

        Args:
            file: Payload to encode

        Returns:
            'data:<mime>;base64,<payload>'

        Raises:
            FallbackReadError: If the bytes cannot be read
        """
        try:
            data = await file.read()
        except Exception as e:
            self._logger.error(f"Failed to read {file.name} for inline encoding: {e}")
            raise FallbackReadError() from e

        mime_type = file.mime_type or DEFAULT_MIME_TYPE
        encoded = base64.b64encode(data).decode('ascii')
        self._logger.debug(f"Encoded {file.name} inline ({len(data)} bytes)")
        return f"data:{mime_type};base64,{encoded}"


async def fallback_to_base64(file: BlobProtocol) -> str:
    """Encode a file as a base64 data URI."""
    return await Base64FallbackEncoder().encode(file)
