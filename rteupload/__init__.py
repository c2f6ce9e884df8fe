"""
rteupload - Async attachment upload pipeline for rich-text editors.

Usage:
    >>> from rteupload import UploadFacade
    >>>
    >>> async with UploadFacade() as uploader:
    ...     ref = await uploader.upload(
    ...         "photo.png",
    ...         enable_server_upload=True,
    ...         provider="aws",
    ...         on_error=lambda error, file: print(f"{file.name}: {error}"),
    ...     )
    ...     print(ref)  # remote URL, or a data URI if the upload failed
"""
from .core.logging import get_logger, setup_logging
from .core.exceptions import (
    UploadException,
    ConfigurationError,
    MissingEndpointError,
    ValidationError,
    TransportError,
    NetworkError,
    UploadTimeoutError,
    HttpStatusError,
    InvalidResponseFormatError,
    FallbackReadError,
)
from .core.config import (
    AmbientSettings,
    AuthScheme,
    PRESETS,
    PresetRegistry,
    ResponseFormat,
    UploadConfig,
    resolve_config,
    resolve_preset,
)
from .core.events import EventEmitter
from .core.upload import (
    Base64FallbackEncoder,
    FileValidator,
    HttpTransport,
    UploadCoordinator,
    UploadFacade,
    UploadFile,
    UploadOptions,
    UploadProgress,
    UploadResult,
    fallback_to_base64,
)

__version__ = '1.0.0'

__all__ = [
    # Main
    'UploadFacade',
    'UploadCoordinator',
    # Configuration
    'AmbientSettings',
    'AuthScheme',
    'PRESETS',
    'PresetRegistry',
    'ResponseFormat',
    'UploadConfig',
    'resolve_config',
    'resolve_preset',
    # Services
    'FileValidator',
    'HttpTransport',
    'Base64FallbackEncoder',
    'fallback_to_base64',
    # Models
    'UploadFile',
    'UploadOptions',
    'UploadProgress',
    'UploadResult',
    # Events and logging
    'EventEmitter',
    'get_logger',
    'setup_logging',
    # Errors
    'UploadException',
    'ConfigurationError',
    'MissingEndpointError',
    'ValidationError',
    'TransportError',
    'NetworkError',
    'UploadTimeoutError',
    'HttpStatusError',
    'InvalidResponseFormatError',
    'FallbackReadError',
]
