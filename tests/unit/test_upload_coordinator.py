"""Tests for the upload coordinator."""
import base64
import logging
from unittest.mock import AsyncMock, Mock

import pytest

from rteupload import (
    AmbientSettings,
    ConfigurationError,
    FallbackReadError,
    HttpStatusError,
    InvalidResponseFormatError,
    NetworkError,
    UploadCoordinator,
    UploadFile,
    UploadOptions,
    UploadProgress,
    UploadResult,
    ValidationError,
)


class StubTransport:
    """Transport double that records calls and plays back a script."""

    def __init__(self, result=None, error=None, progress=()):
        self.result = result or UploadResult(reference_url='https://cdn.example.com/file')
        self.error = error
        self.progress = progress
        self.calls = []

    async def send(self, file, config, on_progress=None):
        self.calls.append((file, config))
        for percent in self.progress:
            if on_progress:
                on_progress(UploadProgress(percent, percent, 100))
        if self.error:
            raise self.error
        return self.result

    async def close(self):
        pass


def data_uri(file):
    return f"data:{file.mime_type};base64," + base64.b64encode(file.data).decode()


class TestUploadCoordinator:
    """Test suite for UploadCoordinator."""

    @pytest.fixture
    def transport(self):
        """Transport that succeeds."""
        return StubTransport()

    @pytest.fixture
    def coordinator(self, transport, settings_loader):
        """Coordinator isolated from the environment."""
        return UploadCoordinator(transport=transport, settings_loader=settings_loader)

    @pytest.fixture
    def options(self):
        """Remote upload with an explicit endpoint and recording callbacks."""
        return UploadOptions(
            enable_server_upload=True,
            server_config={'endpoint_url': 'https://api.example.com/upload'},
            on_progress=Mock(),
            on_success=Mock(),
            on_error=Mock(),
        )

    @pytest.mark.asyncio
    async def test_disabled_never_contacts_transport(self, coordinator, transport, text_file):
        """Test disabled remote upload always inlines."""
        reference = await coordinator.upload(text_file, UploadOptions(enable_server_upload=False))

        assert reference == data_uri(text_file)
        assert transport.calls == []

    @pytest.mark.asyncio
    async def test_default_options_inline(self, coordinator, transport, text_file):
        """Test the default policy is inline encoding."""
        assert (await coordinator.upload(text_file)).startswith("data:text/plain;base64,")
        assert transport.calls == []

    @pytest.mark.asyncio
    async def test_no_endpoint_falls_back_silently(self, coordinator, transport, text_file):
        """Test an enabled upload without any endpoint."""
        on_error = Mock()

        reference = await coordinator.upload(
            text_file, UploadOptions(enable_server_upload=True, on_error=on_error)
        )

        assert reference == data_uri(text_file)
        assert transport.calls == []
        on_error.assert_not_called()

    @pytest.mark.asyncio
    async def test_ambient_endpoint_is_used(self, transport, text_file):
        """Test the environment endpoint applies without server_config."""
        settings = AmbientSettings.from_env({'RTE_UPLOAD_URL': 'https://env.example.com/up'})
        coordinator = UploadCoordinator(transport=transport, settings_loader=lambda: settings)

        await coordinator.upload(text_file, UploadOptions(enable_server_upload=True))

        assert transport.calls[0][1].endpoint_url == 'https://env.example.com/up'

    @pytest.mark.asyncio
    async def test_success(self, coordinator, transport, options, text_file):
        """Test a successful remote upload."""
        reference = await coordinator.upload(text_file, options)

        assert reference == 'https://cdn.example.com/file'
        assert len(transport.calls) == 1
        options.on_success.assert_called_once_with('https://cdn.example.com/file', text_file)
        options.on_error.assert_not_called()

    @pytest.mark.asyncio
    async def test_progress_is_forwarded(self, settings_loader, options, text_file):
        """Test transport progress reaches on_progress."""
        transport = StubTransport(progress=[50, 100])
        coordinator = UploadCoordinator(transport=transport, settings_loader=settings_loader)

        await coordinator.upload(text_file, options)

        percents = [call.args[0].percent for call in options.on_progress.call_args_list]
        assert percents == [50, 100]

    @pytest.mark.asyncio
    async def test_failure_with_fallback(self, settings_loader, options, text_file):
        """Test a transport failure notifies then inlines."""
        error = HttpStatusError(500, 'Internal Server Error')
        transport = StubTransport(error=error)
        coordinator = UploadCoordinator(transport=transport, settings_loader=settings_loader)

        reference = await coordinator.upload(text_file, options)

        assert reference == data_uri(text_file)
        options.on_error.assert_called_once_with(error, text_file)
        options.on_success.assert_not_called()

    @pytest.mark.asyncio
    async def test_failure_without_fallback(self, settings_loader, options, text_file):
        """Test the original error is raised when fallback is off."""
        error = NetworkError()
        coordinator = UploadCoordinator(
            transport=StubTransport(error=error), settings_loader=settings_loader
        )
        options.fallback_to_base64_on_error = False

        with pytest.raises(NetworkError) as exc_info:
            await coordinator.upload(text_file, options)

        assert exc_info.value is error
        options.on_error.assert_called_once_with(error, text_file)

    @pytest.mark.asyncio
    async def test_fallback_encoder_not_invoked_when_disabled(self, settings_loader, options, text_file):
        """Test the encoder stays untouched when fallback is off."""
        encoder = Mock()
        encoder.encode = AsyncMock(return_value="data:,")
        coordinator = UploadCoordinator(
            transport=StubTransport(error=NetworkError()),
            fallback_encoder=encoder,
            settings_loader=settings_loader
        )
        options.fallback_to_base64_on_error = False

        with pytest.raises(NetworkError):
            await coordinator.upload(text_file, options)

        encoder.encode.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_validation_failure_skips_transport(self, coordinator, transport, options, text_file):
        """Test oversized files never reach the transport."""
        options.server_config['max_file_size'] = 5

        reference = await coordinator.upload(text_file, options)

        assert reference == data_uri(text_file)
        assert transport.calls == []
        error = options.on_error.call_args.args[0]
        assert isinstance(error, ValidationError)
        assert "exceeds maximum allowed size" in str(error)

    @pytest.mark.asyncio
    async def test_validation_failure_without_fallback(self, coordinator, transport, options, text_file):
        """Test validation errors propagate when fallback is off."""
        options.server_config['allowed_types'] = ['image/*']
        options.fallback_to_base64_on_error = False

        with pytest.raises(ValidationError, match="Allowed types: image/\\*"):
            await coordinator.upload(text_file, options)

        assert transport.calls == []

    @pytest.mark.asyncio
    async def test_missing_reference_is_an_error(self, settings_loader, options, text_file):
        """Test a 2xx response without a URL is treated as a failure."""
        transport = StubTransport(result=UploadResult(reference_url=None, id='1'))
        coordinator = UploadCoordinator(transport=transport, settings_loader=settings_loader)

        reference = await coordinator.upload(text_file, options)

        assert reference.startswith("data:")
        assert isinstance(options.on_error.call_args.args[0], InvalidResponseFormatError)

    @pytest.mark.asyncio
    async def test_unknown_provider_raises(self, coordinator, transport, options, text_file):
        """Test configuration errors are not swallowed by fallback."""
        options.provider = 'ftp'

        with pytest.raises(ConfigurationError):
            await coordinator.upload(text_file, options)

        assert transport.calls == []
        assert isinstance(options.on_error.call_args.args[0], ConfigurationError)

    @pytest.mark.asyncio
    async def test_provider_preset_applies(self, coordinator, transport, options, text_file):
        """Test a provider seeds headers under the explicit endpoint."""
        options.provider = 'aws'

        await coordinator.upload(text_file, options)

        config = transport.calls[0][1]
        assert config.endpoint_url == 'https://api.example.com/upload'
        assert config.extra_headers['x-amz-acl'] == 'public-read'

    @pytest.mark.asyncio
    async def test_raising_listener_does_not_change_outcome(self, coordinator, options, text_file):
        """Test listener exceptions are contained."""
        options.on_success = Mock(side_effect=RuntimeError("listener bug"))

        reference = await coordinator.upload(text_file, options)

        assert reference == 'https://cdn.example.com/file'
        options.on_success.assert_called_once()

    @pytest.mark.asyncio
    async def test_fallback_read_failure_propagates(self, settings_loader, options):
        """Test unreadable files surface FallbackReadError."""
        file = Mock()
        file.name = "broken.bin"
        file.size = 1
        file.mime_type = ""
        file.read = AsyncMock(side_effect=OSError("gone"))
        coordinator = UploadCoordinator(
            transport=StubTransport(error=NetworkError()), settings_loader=settings_loader
        )

        with pytest.raises(FallbackReadError):
            await coordinator.upload(file, options)

    @pytest.mark.asyncio
    async def test_upload_many_is_sequential(self, settings_loader, options):
        """Test batch uploads keep order and isolate failures."""
        files = [
            UploadFile.from_bytes(b"a", "a.txt"),
            UploadFile.from_bytes(b"b" * 50, "b.txt"),
            UploadFile.from_bytes(b"c", "c.txt"),
        ]
        transport = StubTransport()
        coordinator = UploadCoordinator(transport=transport, settings_loader=settings_loader)
        options.server_config['max_file_size'] = 10
        options.fallback_to_base64_on_error = False

        references = await coordinator.upload_many(files, options)

        assert references == ['https://cdn.example.com/file', None, 'https://cdn.example.com/file']
        assert [call[0].name for call in transport.calls] == ['a.txt', 'c.txt']

    @pytest.mark.asyncio
    async def test_failure_is_logged(self, settings_loader, options, text_file, caplog):
        """Test remote failures produce a warning."""
        coordinator = UploadCoordinator(
            transport=StubTransport(error=NetworkError()), settings_loader=settings_loader
        )

        with caplog.at_level(logging.WARNING, logger='rteupload'):
            await coordinator.upload(text_file, options)

        assert any("Server upload failed" in r.getMessage() for r in caplog.records)

    @pytest.mark.asyncio
    async def test_owned_transport_is_closed(self, settings_loader):
        """Test the default transport is closed with the coordinator."""
        async with UploadCoordinator(settings_loader=settings_loader) as coordinator:
            transport = coordinator._transport
            transport.close = AsyncMock()

        transport.close.assert_awaited_once()
