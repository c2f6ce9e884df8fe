"""
Upload coordinator.

Orchestrates the upload process using injected dependencies.
Follows Dependency Inversion Principle - depends on abstractions, not concretions.
"""
from typing import Any, Callable, Iterable, List, Optional
import time

from ..config import AmbientSettings, UploadConfig, resolve_config, resolve_preset
from ..events import EventEmitter
from ..exceptions import ConfigurationError, InvalidResponseFormatError
from ..logging import get_logger
from .models import UploadOptions, UploadResult
from .protocols import (
    BlobProtocol,
    FallbackEncoderProtocol,
    FileValidatorProtocol,
    TransportProtocol,
)
from .services import Base64FallbackEncoder, FileValidator, HttpTransport

logger = get_logger('rteupload.upload.coordinator')

EVENT_PROGRESS = 'progress'
EVENT_SUCCESS = 'success'
EVENT_ERROR = 'error'


class UploadCoordinator:
    """
    Coordinates validation, transport and fallback for each file.

    Uses dependency injection for all components, making it:
    - Testable (stub transports, count calls)
    - Extensible (swap transport, validator or encoder)
    - Maintainable (single responsibility)

    Policy per call:
    - Remote disabled, or no endpoint after resolution: inline data URI
    - Remote succeeds: success notification, remote reference
    - Remote fails: error notification, then inline data URI if
      fallback is on, otherwise the original exception
    """

    def __init__(
        self,
        transport: Optional[TransportProtocol] = None,
        validator: Optional[FileValidatorProtocol] = None,
        fallback_encoder: Optional[FallbackEncoderProtocol] = None,
        settings_loader: Callable[[], AmbientSettings] = AmbientSettings.from_env
    ):
        """
        Initialize upload coordinator.

        Args:
            transport: Remote transport (HttpTransport by default)
            validator: Pre-flight validator
            fallback_encoder: Inline reference encoder
            settings_loader: Returns the ambient snapshot for one resolution
        """
        self._owns_transport = transport is None
        self._transport = transport or HttpTransport()
        self._validator = validator or FileValidator()
        self._fallback = fallback_encoder or Base64FallbackEncoder()
        self._settings_loader = settings_loader

    async def __aenter__(self) -> 'UploadCoordinator':
        return self

    async def __aexit__(self, *args):
        await self.close()

    async def close(self):
        """Close the transport if we created it."""
        if self._owns_transport:
            await self._transport.close()

    def resolve(self, options: UploadOptions) -> UploadConfig:
        """Effective configuration for one call."""
        settings = self._settings_loader()
        if options.provider:
            return resolve_preset(options.provider, options.server_config, settings=settings)
        return resolve_config(options.server_config, settings=settings)

    async def upload(
        self,
        file: BlobProtocol,
        options: Optional[UploadOptions] = None
    ) -> str:
        """
        Produce a reference for a file.

        Args:
            file: Payload to upload
            options: Per-call policy and callbacks

        Returns:
            Remote URL or data URI

        Raises:
            UploadException: Original failure when fallback is disabled
            FallbackReadError: If the inline encoding cannot read the file
            ConfigurationError: If options name an unknown provider or invalid enum value
        """
        options = options or UploadOptions()
        events = self._build_events(options)

        if not options.enable_server_upload:
            logger.debug(f"Server upload disabled, encoding {file.name} inline")
            return await self._fallback.encode(file)

        try:
            config = self.resolve(options)
        except ConfigurationError as error:
            logger.error(f"Invalid upload configuration: {error}")
            events.emit(EVENT_ERROR, error, file)
            raise

        if not config.has_endpoint:
            logger.info(f"No upload endpoint configured, encoding {file.name} inline")
            return await self._fallback.encode(file)

        upload_start = time.time()
        logger.info(f"Starting upload: {file.name} ({file.size} bytes)")

        try:
            self._validator.validate(file, config)
            result = await self._transport.send(
                file,
                config,
                on_progress=lambda progress: events.emit(EVENT_PROGRESS, progress)
            )
            reference = self._require_reference(result)
        except Exception as error:
            logger.warning(f"Server upload failed: {error}")
            events.emit(EVENT_ERROR, error, file)
            if not options.fallback_to_base64_on_error:
                raise
            logger.info(f"Falling back to inline encoding for {file.name}")
            return await self._fallback.encode(file)

        upload_time = time.time() - upload_start
        logger.info(f"Uploaded {file.name} in {upload_time:.2f}s: {reference}")
        events.emit(EVENT_SUCCESS, reference, file)
        return reference

    async def upload_many(
        self,
        files: Iterable[BlobProtocol],
        options: Optional[UploadOptions] = None
    ) -> List[Optional[str]]:
        """
        Upload a batch strictly one file at a time.

        Each file is fully resolved, fallback included, before the next
        starts. A file that fails leaves None in its slot and does not stop
        the batch; its error notification has already fired.

        Returns:
            References in input order
        """
        references: List[Optional[str]] = []
        for file in files:
            try:
                references.append(await self.upload(file, options))
            except Exception as e:
                logger.error(f"Failed to upload file {file.name}: {e}")
                references.append(None)
        return references

    @staticmethod
    def _build_events(options: UploadOptions) -> EventEmitter:
        return (
            EventEmitter()
            .on(EVENT_PROGRESS, options.on_progress)
            .on(EVENT_SUCCESS, options.on_success)
            .on(EVENT_ERROR, options.on_error)
        )

    @staticmethod
    def _require_reference(result: Any) -> str:
        if isinstance(result, UploadResult) and result.reference_url:
            return result.reference_url
        raise InvalidResponseFormatError(
            "Upload response did not include a reference URL"
        )
