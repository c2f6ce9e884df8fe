"""
Upload facade.

Provides a simplified interface for file uploads.
Follows Facade Pattern - hides complexity of the upload subsystem.
"""
from pathlib import Path
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional, Union
import json
import logging

from ..config import AmbientSettings, resolve_preset
from .coordinator import UploadCoordinator
from .models import ProgressCallback, UploadFile, UploadOptions, UploadResult
from .protocols import BlobProtocol
from .services import FileValidator, HttpTransport

Source = Union[str, Path, bytes, BlobProtocol]


class UploadFacade:
    """
    Simplified interface for attaching files to documents.

    This is the main entry point. Accepts paths, raw bytes or blob objects
    and returns reference strings.

    Example:
        >>> from rteupload import UploadFacade
        >>> async with UploadFacade() as uploader:
        ...     ref = await uploader.upload(
        ...         "photo.png",
        ...         enable_server_upload=True,
        ...         server_config={'endpoint_url': 'https://api.example.com/upload'},
        ...     )
    """

    def __init__(
        self,
        transport: Optional[HttpTransport] = None,
        settings_loader: Callable[[], AmbientSettings] = AmbientSettings.from_env,
        log_level: Optional[int] = None
    ):
        """
        Initialize upload facade.

        Args:
            transport: Optional transport shared by all uploads
            settings_loader: Returns the ambient snapshot for one resolution
            log_level: Optional level for the 'rteupload.upload' logger
        """
        self._logger = logging.getLogger('rteupload.upload')
        if log_level is not None:
            self._logger.setLevel(log_level)

        self._owns_transport = transport is None
        self._transport = transport or HttpTransport()
        self._settings_loader = settings_loader
        self._validator = FileValidator()
        self._coordinator = UploadCoordinator(
            transport=self._transport,
            validator=self._validator,
            settings_loader=settings_loader
        )

    async def __aenter__(self) -> 'UploadFacade':
        return self

    async def __aexit__(self, *args):
        await self.close()

    async def close(self):
        """Close the transport if we created it."""
        if self._owns_transport:
            await self._transport.close()

    def to_upload_file(
        self,
        source: Source,
        name: Optional[str] = None,
        mime_type: Optional[str] = None
    ) -> BlobProtocol:
        """
        Normalize a path, bytes or blob into an uploadable payload.

        Raises:
            FileNotFoundError: If a path doesn't exist
            ValidationError: If a path is not a regular file
            ValueError: If bytes are given without a name
        """
        if isinstance(source, (str, Path)):
            path, _ = self._validator.validate_path(source)
            return UploadFile.from_path(path, mime_type=mime_type, name=name)
        if isinstance(source, (bytes, bytearray, memoryview)):
            if not name:
                raise ValueError("A file name is required when uploading raw bytes")
            return UploadFile.from_bytes(bytes(source), name, mime_type)
        return source

    async def upload(
        self,
        source: Source,
        name: Optional[str] = None,
        mime_type: Optional[str] = None,
        options: Optional[UploadOptions] = None,
        **option_fields: Any
    ) -> str:
        """
        Produce a reference for a file.

        Args:
            source: Path, bytes or blob
            name: File name (required for bytes, overrides path name)
            mime_type: Declared MIME type (guessed from the name if omitted)
            options: Explicit UploadOptions
            **option_fields: UploadOptions fields, used when options is omitted

        Returns:
            Remote URL or data URI

        Example:
            >>> ref = await uploader.upload(
            ...     b"...", name="a.png",
            ...     enable_server_upload=True, provider="aws",
            ...     fallback_to_base64_on_error=False,
            ... )
        """
        file = self.to_upload_file(source, name, mime_type)
        return await self._coordinator.upload(file, options or UploadOptions(**option_fields))

    async def upload_many(
        self,
        sources: Iterable[Source],
        options: Optional[UploadOptions] = None,
        **option_fields: Any
    ) -> List[Optional[str]]:
        """
        Upload several files one after another; failed slots are None.

        A source that cannot be opened (missing path, unnamed bytes) fails
        only its own slot; later sources still run.
        """
        options = options or UploadOptions(**option_fields)
        references: List[Optional[str]] = []
        for source in sources:
            try:
                file = self.to_upload_file(source)
            except Exception as e:
                self._logger.error(f"Failed to open upload source {source!r:.80}: {e}")
                references.append(None)
                continue
            references.extend(await self._coordinator.upload_many([file], options))
        return references

    async def upload_to_google_drive(
        self,
        source: Source,
        access_token: str,
        folder_id: Optional[str] = None,
        file_name: Optional[str] = None,
        description: Optional[str] = None,
        on_progress: Optional[ProgressCallback] = None,
        **options: Any
    ) -> UploadResult:
        """
        Upload straight to Google Drive (no fallback).

        Drive answers with a file id; when no URL comes back the view URL is
        built from it.
        """
        file = self.to_upload_file(source)
        settings = self._settings_loader()
        metadata: Dict[str, Any] = {
            'name': file_name or file.name,
            'description': description or (
                f"Uploaded by rteupload on {settings.captured_at.isoformat()}"
            ),
        }
        if folder_id:
            metadata['parents'] = [folder_id]

        options.setdefault('endpoint_url', 'https://www.googleapis.com/upload/drive/v3/files?uploadType=multipart')
        options['api_key'] = access_token
        options['additional_form_fields'] = {
            'metadata': json.dumps(metadata),
            **options.get('additional_form_fields', {}),
        }
        config = resolve_preset('googledrive', options, settings=settings)

        result = await self._transport.send(file, config, on_progress)
        if not result.reference_url and result.id:
            result = result.with_reference(f"https://drive.google.com/file/d/{result.id}/view")
        return result

    async def upload_to_dropbox(
        self,
        source: Source,
        access_token: str,
        path: Optional[str] = None,
        mode: str = 'add',
        autorename: bool = True,
        on_progress: Optional[ProgressCallback] = None,
        **options: Any
    ) -> UploadResult:
        """
        Upload straight to Dropbox (no fallback).

        Without a returned URL, a shared-link style URL is built from the id.
        """
        file = self.to_upload_file(source)
        settings = self._settings_loader()
        timestamp_ms = int(settings.captured_at.timestamp() * 1000)
        options.update({
            'api_key': access_token,
            'path': path or f"/rte-uploads/{timestamp_ms}-{file.name}",
            'mode': mode,
            'autorename': autorename,
        })
        config = resolve_preset('dropbox', options, settings=settings)

        result = await self._transport.send(file, config, on_progress)
        if not result.reference_url and result.id:
            result = result.with_reference(f"https://www.dropbox.com/s/{result.id}/{file.name}")
        return result

    async def upload_to_icloud(
        self,
        source: Source,
        api_key: str,
        container_id: Optional[str] = None,
        zone_name: str = '_defaultZone',
        record_type: str = 'RTE_Upload',
        on_progress: Optional[ProgressCallback] = None,
        **options: Any
    ) -> UploadResult:
        """Upload straight to iCloud Drive via CloudKit (no fallback)."""
        file = self.to_upload_file(source)
        options.update({
            'api_key': api_key,
            'container_id': container_id,
            'zone_name': zone_name,
            'record_type': record_type,
        })
        config = resolve_preset('icloud', options, settings=self._settings_loader())
        return await self._transport.send(file, config, on_progress)

    async def upload_to_custom_server(
        self,
        source: Source,
        config: Mapping[str, Any],
        custom_parser: Optional[Callable[[Any], Any]] = None,
        on_progress: Optional[ProgressCallback] = None
    ) -> UploadResult:
        """
        Upload straight to a self-hosted endpoint (no fallback).

        Args:
            source: Path, bytes or blob
            config: UploadConfig fields for the custom preset
            custom_parser: Receives the parsed JSON body when
                response_format is 'custom'
            on_progress: Progress observer
        """
        file = self.to_upload_file(source)
        options = dict(config)
        if custom_parser is not None:
            options['custom_parser'] = custom_parser
        effective = resolve_preset('custom', options, settings=self._settings_loader())
        return await self._transport.send(file, effective, on_progress)

