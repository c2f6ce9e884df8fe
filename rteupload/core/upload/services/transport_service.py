"""
HTTP transport service.

Sends one file as a multipart request to the configured endpoint.
"""
from typing import AsyncIterator, Optional
import asyncio
import logging
import time

import aiohttp

from ...exceptions import (
    HttpStatusError,
    MissingEndpointError,
    NetworkError,
    TransportError,
    UploadTimeoutError,
)
from ..models import ProgressCallback, UploadConfig, UploadProgress, UploadResult
from ..protocols import BlobProtocol, ChunkingStrategy
from ..strategies import FixedSizeChunkingStrategy, build_headers, parse_response

DEFAULT_CONTENT_TYPE = 'application/octet-stream'


class HttpTransport:
    """
    Uploads files over HTTP with aiohttp.

    Reuses one session across uploads when given one, otherwise creates it
    lazily and closes it in close().

    Responsibilities:
    - Build headers and multipart body from the effective config
    - Stream the file part and report progress
    - Map every failure to a TransportError subclass
    """

    def __init__(
        self,
        session: Optional[aiohttp.ClientSession] = None,
        chunking_strategy: Optional[ChunkingStrategy] = None
    ):
        """
        Initialize transport.

        Args:
            session: Optional shared session
            chunking_strategy: How the file part is sliced while streaming
        """
        self._session = session
        self._owns_session = False
        self._chunking = chunking_strategy or FixedSizeChunkingStrategy()
        self._logger = logging.getLogger('rteupload.upload.transport')

    async def __aenter__(self) -> 'HttpTransport':
        return self

    async def __aexit__(self, *args):
        await self.close()

    async def _get_session(self) -> aiohttp.ClientSession:
        """Get or create HTTP session."""
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession()
            self._owns_session = True
        return self._session

    async def close(self):
        """Close session if we own it."""
        if self._owns_session and self._session:
            await self._session.close()
            self._session = None
            self._owns_session = False

    async def send(
        self,
        file: BlobProtocol,
        config: UploadConfig,
        on_progress: Optional[ProgressCallback] = None
    ) -> UploadResult:
        """
        Upload a single file.

        Args:
            file: Payload to send
            config: Effective configuration
            on_progress: Called with UploadProgress when config.enable_progress

        Returns:
            Parsed upload result

        Raises:
            MissingEndpointError: If config has no endpoint
            UploadTimeoutError: If config.timeout_ms elapses first
            NetworkError: If no response was received
            HttpStatusError: If the response status is not 2xx
            InvalidResponseFormatError: If the body does not match response_format
        """
        if not config.has_endpoint:
            raise MissingEndpointError()

        try:
            data = await file.read()
        except Exception as e:
            self._logger.error(f"Failed to read {file.name}: {e}")
            raise TransportError(f"Failed to read file {file.name}: {e}", error_code='read') from e

        headers = build_headers(config)
        progress = on_progress if config.enable_progress else None
        form = self._build_form(file, data, config, progress)
        session = await self._get_session()

        size_kb = len(data) / 1024
        upload_start = time.time()
        self._logger.debug(
            f"Uploading {file.name} ({size_kb:.1f} KB) with {config.http_method} {config.endpoint_url}"
        )

        try:
            async with session.request(
                config.http_method,
                config.endpoint_url,
                data=form,
                headers=headers,
                timeout=config.to_aiohttp_timeout()
            ) as response:
                body = await response.text(errors='replace')
                upload_time = time.time() - upload_start

                if not 200 <= response.status < 300:
                    self._logger.error(
                        f"Upload of {file.name} rejected with HTTP {response.status} after {upload_time:.2f}s"
                    )
                    raise HttpStatusError(response.status, response.reason or '')

                result = parse_response(body, config)
                speed_kbps = (size_kb / upload_time) if upload_time > 0 else 0
                self._logger.debug(
                    f"{file.name} uploaded in {upload_time:.2f}s ({speed_kbps:.1f} KB/s)"
                )
                return result
        except asyncio.TimeoutError as e:
            upload_time = time.time() - upload_start
            self._logger.error(
                f"Upload of {file.name} timed out after {upload_time:.2f}s (timeout={config.timeout_ms}ms)"
            )
            raise UploadTimeoutError() from e
        except aiohttp.ClientError as e:
            upload_time = time.time() - upload_start
            self._logger.error(f"Upload of {file.name} failed after {upload_time:.2f}s: {e}")
            raise NetworkError() from e

    def _build_form(
        self,
        file: BlobProtocol,
        data: bytes,
        config: UploadConfig,
        on_progress: Optional[ProgressCallback]
    ) -> aiohttp.FormData:
        """
        Build the multipart body.

        Field order: file part, filename, type, size, additional fields.
        """
        form = aiohttp.FormData()
        payload = self._stream(data, on_progress) if on_progress else data
        form.add_field(
            config.file_field_name,
            payload,
            filename=file.name,
            content_type=file.mime_type or DEFAULT_CONTENT_TYPE
        )
        form.add_field('filename', file.name)
        form.add_field('type', file.mime_type)
        form.add_field('size', str(file.size))
        for name, value in config.additional_form_fields.items():
            form.add_field(name, value)
        return form

    async def _stream(
        self,
        data: bytes,
        on_progress: ProgressCallback
    ) -> AsyncIterator[bytes]:
        """
        Yield the file part chunk by chunk, reporting progress.

        Progress is reported once a chunk has been written, only when the
        rounded percentage increases.
        """
        total = len(data)
        last_percent = -1
        for start, end in self._chunking.calculate_chunks(total):
            yield data[start:end]
            percent = int(end * 100 / total + 0.5)
            if percent > last_percent:
                last_percent = percent
                self._notify(on_progress, UploadProgress(percent, end, total))

    def _notify(self, on_progress: ProgressCallback, progress: UploadProgress) -> None:
        try:
            on_progress(progress)
        except Exception as e:
            self._logger.warning(f"Progress callback failed at {progress.percent}%: {e}")
