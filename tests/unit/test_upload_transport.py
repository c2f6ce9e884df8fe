"""Tests for the HTTP transport against a local aiohttp server."""
import asyncio
from unittest.mock import AsyncMock, Mock

import pytest
from aiohttp import web
from aiohttp import test_utils

from rteupload import (
    HttpStatusError,
    HttpTransport,
    InvalidResponseFormatError,
    MissingEndpointError,
    NetworkError,
    TransportError,
    UploadConfig,
    UploadFile,
    UploadTimeoutError,
)
from rteupload.core.upload.strategies import FixedSizeChunkingStrategy


def make_app(received, status=200, body='{"url":"https://cdn.example.com/a","id":"123"}', delay=0):
    """Build an app that records each request and answers with a fixed body."""

    async def handler(request):
        form = {}
        for name, value in (await request.post()).items():
            if isinstance(value, web.FileField):
                value = (value.filename, value.content_type, value.file.read())
            form[name] = value
        received.append({
            'method': request.method,
            'headers': request.headers.copy(),
            'form': form,
        })
        if delay:
            await asyncio.sleep(delay)
        return web.Response(status=status, text=body)

    app = web.Application()
    app.router.add_route('*', '/upload', handler)
    return app


class TestHttpTransport:
    """Test suite for HttpTransport."""

    @pytest.fixture
    def received(self):
        """Requests seen by the server."""
        return []

    @pytest.mark.asyncio
    async def test_successful_upload(self, received, text_file):
        """Test a JSON response becomes an UploadResult."""
        async with test_utils.TestServer(make_app(received)) as server:
            config = UploadConfig(endpoint_url=str(server.make_url('/upload')), api_key='secret')
            async with HttpTransport() as transport:
                result = await transport.send(text_file, config)

        assert result.reference_url == 'https://cdn.example.com/a'
        assert result.id == '123'
        assert received[0]['method'] == 'POST'
        assert received[0]['headers']['Authorization'] == 'Bearer secret'

    @pytest.mark.asyncio
    async def test_form_fields(self, received, text_file):
        """Test the multipart body carries file, metadata and extra fields."""
        async with test_utils.TestServer(make_app(received)) as server:
            config = UploadConfig(
                endpoint_url=str(server.make_url('/upload')),
                file_field_name='attachment',
                additional_form_fields={'folder': 'docs'},
            )
            async with HttpTransport() as transport:
                await transport.send(text_file, config)

        form = received[0]['form']
        assert form['attachment'] == ('notes.txt', 'text/plain', b"test content")
        assert form['filename'] == 'notes.txt'
        assert form['type'] == 'text/plain'
        assert form['size'] == '12'
        assert form['folder'] == 'docs'

    @pytest.mark.asyncio
    async def test_custom_method_and_headers(self, received, text_file):
        """Test configured method and extra headers are sent."""
        async with test_utils.TestServer(make_app(received)) as server:
            config = UploadConfig(
                endpoint_url=str(server.make_url('/upload')),
                http_method='put',
                api_key='k',
                extra_headers={'authorization': 'Token t', 'X-Trace': 'abc'},
            )
            async with HttpTransport() as transport:
                await transport.send(text_file, config)

        assert received[0]['method'] == 'PUT'
        assert received[0]['headers']['Authorization'] == 'Token t'
        assert received[0]['headers']['X-Trace'] == 'abc'

    @pytest.mark.asyncio
    async def test_progress_is_reported(self, received):
        """Test progress percents strictly increase and end at 100."""
        file = UploadFile.from_bytes(b"x" * 1000, "data.bin")
        progress = []

        async with test_utils.TestServer(make_app(received)) as server:
            config = UploadConfig(endpoint_url=str(server.make_url('/upload')), enable_progress=True)
            transport = HttpTransport(chunking_strategy=FixedSizeChunkingStrategy(chunk_size=100))
            async with transport:
                await transport.send(file, config, on_progress=progress.append)

        percents = [p.percent for p in progress]
        assert percents == [10, 20, 30, 40, 50, 60, 70, 80, 90, 100]
        assert progress[-1].is_complete
        assert received[0]['form']['file'][2] == b"x" * 1000

    @pytest.mark.asyncio
    async def test_progress_disabled(self, received, text_file):
        """Test no progress without enable_progress."""
        progress = []

        async with test_utils.TestServer(make_app(received)) as server:
            config = UploadConfig(endpoint_url=str(server.make_url('/upload')))
            async with HttpTransport() as transport:
                await transport.send(text_file, config, on_progress=progress.append)

        assert progress == []

    @pytest.mark.asyncio
    async def test_progress_callback_failure_does_not_abort(self, received, text_file):
        """Test a raising progress callback is contained."""
        def broken(progress):
            raise RuntimeError("observer bug")

        async with test_utils.TestServer(make_app(received)) as server:
            config = UploadConfig(endpoint_url=str(server.make_url('/upload')), enable_progress=True)
            async with HttpTransport() as transport:
                result = await transport.send(text_file, config, on_progress=broken)

        assert result.reference_url == 'https://cdn.example.com/a'

    @pytest.mark.asyncio
    async def test_non_2xx_status(self, received, text_file):
        """Test error statuses raise HttpStatusError."""
        async with test_utils.TestServer(make_app(received, status=500, body='boom')) as server:
            config = UploadConfig(endpoint_url=str(server.make_url('/upload')))
            async with HttpTransport() as transport:
                with pytest.raises(HttpStatusError) as exc_info:
                    await transport.send(text_file, config)

        assert exc_info.value.status == 500
        assert str(exc_info.value) == "Upload failed with status 500: Internal Server Error"

    @pytest.mark.asyncio
    async def test_invalid_json(self, received, text_file):
        """Test non-JSON 2xx bodies."""
        async with test_utils.TestServer(make_app(received, body='not json')) as server:
            config = UploadConfig(endpoint_url=str(server.make_url('/upload')))
            async with HttpTransport() as transport:
                with pytest.raises(InvalidResponseFormatError):
                    await transport.send(text_file, config)

    @pytest.mark.asyncio
    async def test_text_response(self, received, text_file):
        """Test text responses are used verbatim."""
        async with test_utils.TestServer(make_app(received, body='https://cdn.example.com/t.txt')) as server:
            config = UploadConfig(endpoint_url=str(server.make_url('/upload')), response_format='text')
            async with HttpTransport() as transport:
                result = await transport.send(text_file, config)

        assert result.reference_url == 'https://cdn.example.com/t.txt'

    @pytest.mark.asyncio
    async def test_timeout(self, received, text_file):
        """Test slow servers raise UploadTimeoutError."""
        async with test_utils.TestServer(make_app(received, delay=1)) as server:
            config = UploadConfig(endpoint_url=str(server.make_url('/upload')), timeout_ms=100)
            async with HttpTransport() as transport:
                with pytest.raises(UploadTimeoutError) as exc_info:
                    await transport.send(text_file, config)

        assert str(exc_info.value) == "Upload timeout"

    @pytest.mark.asyncio
    async def test_network_error(self, text_file):
        """Test connection failures raise NetworkError."""
        config = UploadConfig(endpoint_url='http://127.0.0.1:1/upload', timeout_ms=5000)

        async with HttpTransport() as transport:
            with pytest.raises(NetworkError) as exc_info:
                await transport.send(text_file, config)

        assert str(exc_info.value) == "Network error during upload"

    @pytest.mark.asyncio
    async def test_missing_endpoint(self, text_file):
        """Test sending without an endpoint."""
        async with HttpTransport() as transport:
            with pytest.raises(MissingEndpointError):
                await transport.send(text_file, UploadConfig())

    @pytest.mark.asyncio
    async def test_unreadable_file(self, tmp_path):
        """Test read failures surface as TransportError."""
        path = tmp_path / "gone.txt"
        path.write_bytes(b"abc")
        file = UploadFile.from_path(path)
        path.unlink()

        async with HttpTransport() as transport:
            with pytest.raises(TransportError) as exc_info:
                await transport.send(file, UploadConfig(endpoint_url='http://127.0.0.1:1/upload'))

        assert exc_info.value.error_code == 'read'

    @pytest.mark.asyncio
    async def test_blob_read_error_is_wrapped(self):
        """Test any read failure from a blob surfaces as TransportError."""
        file = Mock()
        file.name = "stream.bin"
        file.size = 3
        file.mime_type = ""
        file.read = AsyncMock(side_effect=ValueError("closed stream"))

        async with HttpTransport() as transport:
            with pytest.raises(TransportError) as exc_info:
                await transport.send(file, UploadConfig(endpoint_url='http://127.0.0.1:1/upload'))

        assert exc_info.value.error_code == 'read'
        assert isinstance(exc_info.value.__cause__, ValueError)

    @pytest.mark.asyncio
    async def test_shared_session_is_not_closed(self, received, text_file):
        """Test a caller-provided session stays open."""
        import aiohttp

        async with test_utils.TestServer(make_app(received)) as server:
            async with aiohttp.ClientSession() as session:
                transport = HttpTransport(session=session)
                config = UploadConfig(endpoint_url=str(server.make_url('/upload')))
                await transport.send(text_file, config)
                await transport.close()

                assert not session.closed
