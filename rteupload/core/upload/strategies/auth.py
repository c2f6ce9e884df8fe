"""
Authentication header strategies.

Each scheme turns the configured API key into at most one request header.
"""
import base64
from typing import Callable, Dict, Optional

from multidict import CIMultiDict

from ..models import AuthScheme, UploadConfig

AuthStrategy = Callable[[str], Dict[str, str]]


def bearer_auth(api_key: str) -> Dict[str, str]:
    return {'Authorization': f"Bearer {api_key}"}


def api_key_auth(api_key: str) -> Dict[str, str]:
    return {'X-API-Key': api_key}


def basic_auth(api_key: str) -> Dict[str, str]:
    encoded = base64.b64encode(api_key.encode('utf-8')).decode('ascii')
    return {'Authorization': f"Basic {encoded}"}


def custom_auth(api_key: str) -> Dict[str, str]:
    # Credential material is expected in extra_headers
    return {}


AUTH_STRATEGIES: Dict[AuthScheme, AuthStrategy] = {
    AuthScheme.BEARER: bearer_auth,
    AuthScheme.APIKEY: api_key_auth,
    AuthScheme.BASIC: basic_auth,
    AuthScheme.CUSTOM: custom_auth,
}


def auth_headers(scheme: AuthScheme, api_key: Optional[str]) -> Dict[str, str]:
    """Returns the header produced by scheme, or nothing without a key."""
    if not api_key:
        return {}
    return AUTH_STRATEGIES[scheme](api_key)


def build_headers(config: UploadConfig) -> CIMultiDict:
    """
    Build request headers for an upload.

    The auth header goes in first, then extra_headers in insertion order.
    Names compare case-insensitively, so an extra 'authorization' header
    replaces the scheme-derived one.

    Args:
        config: Effective configuration

    Returns:
        Case-insensitive header mapping
    """
    headers: CIMultiDict = CIMultiDict()
    for name, value in auth_headers(config.auth_scheme, config.api_key).items():
        headers[name] = value
    for name, value in config.extra_headers.items():
        headers[name] = value
    return headers
