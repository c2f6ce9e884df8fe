"""Upload services module."""
from .file_service import FileValidator
from .transport_service import HttpTransport
from .fallback_service import Base64FallbackEncoder, fallback_to_base64

__all__ = [
    'FileValidator',
    'HttpTransport',
    'Base64FallbackEncoder',
    'fallback_to_base64',
]
