"""
Provider presets.

Each preset is a function (options, settings) -> partial config that seeds
endpoint, credential and header conventions for one storage backend.
New providers register a preset without touching the resolver.
"""
import json
from typing import Any, Callable, Dict, List, Mapping, Optional

from ..exceptions import ConfigurationError
from .settings import AmbientSettings
from .upload_config import (
    AuthScheme,
    DEFAULT_FILE_FIELD,
    DEFAULT_HTTP_METHOD,
    DEFAULT_URL_FIELD,
    ResponseFormat,
)

PresetFunction = Callable[[Mapping[str, Any], AmbientSettings], Dict[str, Any]]

GOOGLE_DRIVE_UPLOAD_URL = 'https://www.googleapis.com/upload/drive/v3/files'
DROPBOX_UPLOAD_URL = 'https://content.dropboxapi.com/2/files/upload'

GOOGLE_DRIVE_MAX_FILE_SIZE = 15 * 1024 * 1024 * 1024  # 15GB
DROPBOX_MAX_FILE_SIZE = 150 * 1024 * 1024  # 150MB, single-request API limit
ICLOUD_MAX_FILE_SIZE = 50 * 1024 * 1024  # 50MB


class PresetRegistry:
    """Registry of named provider presets."""

    def __init__(self):
        self._presets: Dict[str, PresetFunction] = {}

    def register(self, name: str) -> Callable[[PresetFunction], PresetFunction]:
        """
        Register a preset under a provider name.

        Example:
            >>> @PRESETS.register('minio')
            ... def minio_preset(options, settings):
            ...     return {'endpoint_url': settings.get('RTE_MINIO_URL')}
        """
        key = name.lower()

        def decorator(func: PresetFunction) -> PresetFunction:
            self._presets[key] = func
            return func

        return decorator

    def get(self, name: str) -> PresetFunction:
        """Returns the preset for a provider or raises ConfigurationError."""
        try:
            return self._presets[name.lower()]
        except KeyError:
            raise ConfigurationError(
                f"Unknown storage provider '{name}'. "
                f"Available providers: {', '.join(self.names())}"
            ) from None

    def names(self) -> List[str]:
        return list(self._presets)

    def __contains__(self, name: str) -> bool:
        return name.lower() in self._presets


PRESETS = PresetRegistry()


def _seed(
    options: Mapping[str, Any],
    settings: AmbientSettings,
    url_env: str,
    key_env: str,
    headers: Optional[Dict[str, str]] = None,
    default_url: Optional[str] = None,
    **defaults: Any
) -> Dict[str, Any]:
    """Common preset shape: endpoint and credential from options, env, default."""
    seed: Dict[str, Any] = {
        'endpoint_url': options.get('endpoint_url') or settings.get(url_env, default_url),
        'api_key': options.get('api_key') or settings.get(key_env),
    }
    if headers:
        seed['extra_headers'] = dict(headers)
    seed.update(defaults)
    return seed


@PRESETS.register('aws')
def aws_preset(options: Mapping[str, Any], settings: AmbientSettings) -> Dict[str, Any]:
    """Generic object storage, uploaded objects are public-read."""
    return _seed(
        options, settings, 'RTE_AWS_UPLOAD_URL', 'RTE_AWS_ACCESS_KEY',
        headers={'x-amz-acl': 'public-read'}
    )


@PRESETS.register('gcp')
def gcp_preset(options: Mapping[str, Any], settings: AmbientSettings) -> Dict[str, Any]:
    """Object storage with an uploader metadata tag."""
    return _seed(
        options, settings, 'RTE_GCP_UPLOAD_URL', 'RTE_GCP_API_KEY',
        headers={'x-goog-meta-uploaded-by': 'rteupload'}
    )


@PRESETS.register('azure')
def azure_preset(options: Mapping[str, Any], settings: AmbientSettings) -> Dict[str, Any]:
    """Block-blob storage."""
    return _seed(
        options, settings, 'RTE_AZURE_UPLOAD_URL', 'RTE_AZURE_ACCESS_KEY',
        headers={'x-ms-blob-type': 'BlockBlob'}
    )


@PRESETS.register('cloudinary')
def cloudinary_preset(options: Mapping[str, Any], settings: AmbientSettings) -> Dict[str, Any]:
    """Asset-management service."""
    return _seed(
        options, settings, 'RTE_CLOUDINARY_UPLOAD_URL', 'RTE_CLOUDINARY_API_KEY',
        headers={'X-Requested-With': 'XMLHttpRequest'}
    )


@PRESETS.register('googledrive')
def google_drive_preset(options: Mapping[str, Any], settings: AmbientSettings) -> Dict[str, Any]:
    """Consumer drive storage, OAuth bearer token."""
    return _seed(
        options, settings, 'RTE_GOOGLEDRIVE_UPLOAD_URL', 'RTE_GOOGLEDRIVE_API_KEY',
        default_url=GOOGLE_DRIVE_UPLOAD_URL,
        auth_scheme=AuthScheme.BEARER,
        max_file_size=GOOGLE_DRIVE_MAX_FILE_SIZE,
    )


@PRESETS.register('dropbox')
def dropbox_preset(options: Mapping[str, Any], settings: AmbientSettings) -> Dict[str, Any]:
    """File-sync storage; target path travels in the Dropbox-API-Arg header."""
    timestamp_ms = int(settings.captured_at.timestamp() * 1000)
    api_arg = {
        'path': options.get('path') or f"/rte-uploads/{timestamp_ms}",
        'mode': options.get('mode') or 'add',
        'autorename': options.get('autorename', True),
    }
    return _seed(
        options, settings, 'RTE_DROPBOX_UPLOAD_URL', 'RTE_DROPBOX_ACCESS_TOKEN',
        headers={'Dropbox-API-Arg': json.dumps(api_arg)},
        default_url=DROPBOX_UPLOAD_URL,
        auth_scheme=AuthScheme.BEARER,
        max_file_size=DROPBOX_MAX_FILE_SIZE,
    )


@PRESETS.register('icloud')
def icloud_preset(options: Mapping[str, Any], settings: AmbientSettings) -> Dict[str, Any]:
    """CloudKit-backed drive storage."""
    headers = {
        'X-Apple-CloudKit-Request-ISO8601Date': settings.captured_at.isoformat(),
    }
    key_id = options.get('key_id') or settings.get('RTE_ICLOUD_KEY_ID')
    if key_id:
        headers['X-Apple-CloudKit-Request-KeyID'] = key_id

    form_fields = {
        'zoneName': options.get('zone_name') or '_defaultZone',
        'recordType': options.get('record_type') or 'RTE_Upload',
    }
    container_id = options.get('container_id') or settings.get('RTE_ICLOUD_CONTAINER_ID')
    if container_id:
        form_fields['containerId'] = container_id

    return _seed(
        options, settings, 'RTE_ICLOUD_UPLOAD_URL', 'RTE_ICLOUD_API_KEY',
        headers=headers,
        auth_scheme=AuthScheme.BEARER,
        additional_form_fields=form_fields,
        max_file_size=ICLOUD_MAX_FILE_SIZE,
    )


@PRESETS.register('custom')
def custom_preset(options: Mapping[str, Any], settings: AmbientSettings) -> Dict[str, Any]:
    """Self-hosted endpoint with every request/response knob at its default."""
    return _seed(
        options, settings, 'RTE_UPLOAD_URL', 'RTE_API_KEY',
        http_method=DEFAULT_HTTP_METHOD,
        file_field_name=DEFAULT_FILE_FIELD,
        additional_form_fields={},
        response_format=ResponseFormat.JSON,
        url_response_field=DEFAULT_URL_FIELD,
        auth_scheme=AuthScheme.BEARER,
    )
