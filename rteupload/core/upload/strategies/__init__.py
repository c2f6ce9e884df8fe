"""Upload strategies module."""
from .chunking import FixedSizeChunkingStrategy
from .auth import AUTH_STRATEGIES, auth_headers, build_headers
from .response import RESPONSE_PARSERS, parse_response

__all__ = [
    'FixedSizeChunkingStrategy',
    'AUTH_STRATEGIES',
    'auth_headers',
    'build_headers',
    'RESPONSE_PARSERS',
    'parse_response',
]
