"""
Upload module for document attachments.

This module resolves where attached content should live and returns a
reference string: a remote URL when the configured endpoint accepts the
file, or an inline data URI otherwise.
"""
from .models import (
    UploadConfig,
    UploadFile,
    UploadOptions,
    UploadProgress,
    UploadResult,
)
from .protocols import (
    BlobProtocol,
    ChunkingStrategy,
    FallbackEncoderProtocol,
    FileValidatorProtocol,
    TransportProtocol,
)
from .services import Base64FallbackEncoder, FileValidator, HttpTransport, fallback_to_base64
from .coordinator import UploadCoordinator
from .facade import UploadFacade

__all__ = [
    # Main classes
    'UploadFacade',
    'UploadCoordinator',

    # Services
    'FileValidator',
    'HttpTransport',
    'Base64FallbackEncoder',
    'fallback_to_base64',

    # Models
    'UploadConfig',
    'UploadFile',
    'UploadOptions',
    'UploadProgress',
    'UploadResult',

    # Protocols
    'BlobProtocol',
    'ChunkingStrategy',
    'FallbackEncoderProtocol',
    'FileValidatorProtocol',
    'TransportProtocol',
]
