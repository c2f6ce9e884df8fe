"""
Ambient settings read from the process environment.

The environment is snapshotted once per resolution so that a single
resolution never observes a mix of old and new values.
"""
import json
import os
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, Mapping, Optional, Tuple

from ..logging import get_logger
from .upload_config import DEFAULT_MAX_FILE_SIZE, DEFAULT_TIMEOUT_MS

logger = get_logger(__name__)

ENV_UPLOAD_URL = 'RTE_UPLOAD_URL'
ENV_API_KEY = 'RTE_API_KEY'
ENV_MAX_FILE_SIZE = 'RTE_MAX_FILE_SIZE'
ENV_UPLOAD_TIMEOUT = 'RTE_UPLOAD_TIMEOUT'
ENV_ENABLE_PROGRESS = 'RTE_ENABLE_PROGRESS'
ENV_ALLOWED_TYPES = 'RTE_ALLOWED_TYPES'
ENV_CUSTOM_HEADERS = 'RTE_CUSTOM_HEADERS'


def _parse_int(environ: Mapping[str, str], name: str, default: int) -> int:
    raw = environ.get(name)
    if not raw:
        return default
    try:
        return int(raw.strip())
    except ValueError:
        logger.warning(f"Failed to parse {name}={raw!r}, using default {default}")
        return default


def _parse_allowed_types(raw: Optional[str]) -> Optional[Tuple[str, ...]]:
    if not raw:
        return None
    return tuple(t.strip() for t in raw.split(',') if t.strip())


def _parse_headers(raw: Optional[str]) -> Optional[Dict[str, str]]:
    if not raw:
        return None
    try:
        headers = json.loads(raw)
    except json.JSONDecodeError as e:
        logger.warning(f"Failed to parse {ENV_CUSTOM_HEADERS}: {e}")
        return None
    if not isinstance(headers, dict):
        logger.warning(
            f"Failed to parse {ENV_CUSTOM_HEADERS}: expected a JSON object, "
            f"got {type(headers).__name__}"
        )
        return None
    return {str(k): str(v) for k, v in headers.items()}


@dataclass(frozen=True)
class AmbientSettings:
    """
    Read-only snapshot of environment-derived upload defaults.

    Attributes:
        upload_url: RTE_UPLOAD_URL
        api_key: RTE_API_KEY
        max_file_size: RTE_MAX_FILE_SIZE in bytes
        timeout_ms: RTE_UPLOAD_TIMEOUT in milliseconds
        enable_progress: RTE_ENABLE_PROGRESS == 'true'
        allowed_types: RTE_ALLOWED_TYPES, comma separated
        extra_headers: RTE_CUSTOM_HEADERS, JSON object
        environ: Copy of the environment, used by provider presets
        captured_at: When the snapshot was taken (UTC)
    """
    upload_url: Optional[str] = None
    api_key: Optional[str] = None
    max_file_size: int = DEFAULT_MAX_FILE_SIZE
    timeout_ms: int = DEFAULT_TIMEOUT_MS
    enable_progress: bool = False
    allowed_types: Optional[Tuple[str, ...]] = None
    extra_headers: Optional[Dict[str, str]] = None
    environ: Mapping[str, str] = field(default_factory=dict)
    captured_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> 'AmbientSettings':
        """
        Snapshot settings from the environment.

        Args:
            environ: Mapping to read instead of os.environ

        Returns:
            Settings snapshot
        """
        env = dict(os.environ if environ is None else environ)
        return cls(
            upload_url=env.get(ENV_UPLOAD_URL) or None,
            api_key=env.get(ENV_API_KEY) or None,
            max_file_size=_parse_int(env, ENV_MAX_FILE_SIZE, DEFAULT_MAX_FILE_SIZE),
            timeout_ms=_parse_int(env, ENV_UPLOAD_TIMEOUT, DEFAULT_TIMEOUT_MS),
            enable_progress=env.get(ENV_ENABLE_PROGRESS) == 'true',
            allowed_types=_parse_allowed_types(env.get(ENV_ALLOWED_TYPES)),
            extra_headers=_parse_headers(env.get(ENV_CUSTOM_HEADERS)),
            environ=env,
        )

    def get(self, name: str, default: Optional[str] = None) -> Optional[str]:
        """Look up a raw variable in the snapshot; empty values count as unset."""
        return self.environ.get(name) or default

    def to_partial_config(self) -> Dict[str, Any]:
        """Convert to a partial UploadConfig mapping (unset values omitted)."""
        partial: Dict[str, Any] = {
            'max_file_size': self.max_file_size,
            'timeout_ms': self.timeout_ms,
            'enable_progress': self.enable_progress,
        }
        if self.upload_url:
            partial['endpoint_url'] = self.upload_url
        if self.api_key:
            partial['api_key'] = self.api_key
        if self.allowed_types:
            partial['allowed_types'] = self.allowed_types
        if self.extra_headers:
            partial['extra_headers'] = dict(self.extra_headers)
        return partial
