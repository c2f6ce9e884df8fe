"""
Data models for upload module.

Uses dataclasses for immutable, type-safe data structures.
"""
import mimetypes
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any, Callable, Dict, Mapping, Optional, Union

import aiofiles

from ...config.upload_config import DEFAULT_URL_FIELD


def guess_mime_type(name: str) -> str:
    """Guess a MIME type from a file name; empty string when unknown."""
    return mimetypes.guess_type(name)[0] or ''


@dataclass
class UploadFile:
    """
    Binary payload handed to the pipeline.

    Holds either the bytes themselves or a path that is read on demand.

    Attributes:
        name: File name sent with the upload
        size: Size in bytes
        mime_type: Declared MIME type ('' when unknown)
        data: In-memory content
        path: On-disk content

    Example:
        >>> f = UploadFile.from_bytes(b"hello", "note.txt")
        >>> f.mime_type
        'text/plain'
    """
    name: str
    size: int
    mime_type: str = ''
    data: Optional[bytes] = field(default=None, repr=False)
    path: Optional[Path] = None

    def __post_init__(self):
        if isinstance(self.path, str):
            self.path = Path(self.path)
        self.mime_type = self.mime_type or ''

    @classmethod
    def from_bytes(
        cls,
        data: bytes,
        name: str,
        mime_type: Optional[str] = None
    ) -> 'UploadFile':
        """Create from in-memory bytes; MIME type is guessed from name if omitted."""
        return cls(
            name=name,
            size=len(data),
            mime_type=guess_mime_type(name) if mime_type is None else mime_type,
            data=bytes(data),
        )

    @classmethod
    def from_path(
        cls,
        path: Union[str, Path],
        mime_type: Optional[str] = None,
        name: Optional[str] = None
    ) -> 'UploadFile':
        """
        Create from a file on disk.

        Raises:
            FileNotFoundError: If the file doesn't exist
        """
        path = Path(path)
        file_name = name or path.name
        return cls(
            name=file_name,
            size=path.stat().st_size,
            mime_type=guess_mime_type(file_name) if mime_type is None else mime_type,
            path=path,
        )

    async def read(self) -> bytes:
        """
        Read the full content.

        Raises:
            OSError: If the content cannot be read
        """
        if self.data is not None:
            return self.data
        if self.path is None:
            raise OSError(f"No content source for {self.name}")
        async with aiofiles.open(self.path, 'rb') as f:
            return await f.read()


@dataclass(frozen=True)
class UploadProgress:
    """
    Upload progress information.

    Attributes:
        percent: Rounded percentage 0-100
        bytes_sent: Bytes handed to the connection so far
        bytes_total: Total bytes of the file part
    """
    percent: int
    bytes_sent: int
    bytes_total: int

    @property
    def is_complete(self) -> bool:
        """Returns True if every byte has been sent."""
        return self.bytes_sent >= self.bytes_total


@dataclass(frozen=True)
class UploadResult:
    """
    Result of a successful remote upload.

    Attributes:
        reference_url: Public URL of the uploaded file
        id: Server-side identifier, if any
        metadata: Server-provided metadata, if any
        raw: Parsed response payload
    """
    reference_url: Optional[str]
    id: Optional[str] = None
    metadata: Optional[Dict[str, Any]] = None
    raw: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_payload(
        cls,
        payload: Mapping[str, Any],
        url_field: str = DEFAULT_URL_FIELD
    ) -> 'UploadResult':
        """
        Create from a parsed response object.

        A non-default url_field that is present in the payload takes the
        place of the canonical 'url' field.
        """
        url = payload.get(DEFAULT_URL_FIELD)
        if url_field != DEFAULT_URL_FIELD and payload.get(url_field):
            url = payload[url_field]

        file_id = payload.get('id')
        metadata = payload.get('metadata')
        return cls(
            reference_url=str(url) if url else None,
            id=str(file_id) if file_id is not None else None,
            metadata=dict(metadata) if isinstance(metadata, Mapping) else None,
            raw=dict(payload),
        )

    def with_reference(self, reference_url: str) -> 'UploadResult':
        """Returns a copy with a different reference URL."""
        return replace(self, reference_url=reference_url)


ProgressCallback = Callable[[UploadProgress], None]
SuccessCallback = Callable[[str, Any], None]
ErrorCallback = Callable[[Exception, Any], None]


@dataclass
class UploadOptions:
    """
    Per-call policy for the upload coordinator.

    Attributes:
        enable_server_upload: Try the remote endpoint at all
        server_config: Call-site config overrides
        provider: Optional preset name the overrides apply on top of
        fallback_to_base64_on_error: Return a data URI if the remote path fails
        on_progress: Receives UploadProgress
        on_success: Receives (reference_url, file)
        on_error: Receives (error, file); fires even when fallback recovers
    """
    enable_server_upload: bool = False
    server_config: Optional[Dict[str, Any]] = None
    provider: Optional[str] = None
    fallback_to_base64_on_error: bool = True
    on_progress: Optional[ProgressCallback] = None
    on_success: Optional[SuccessCallback] = None
    on_error: Optional[ErrorCallback] = None
