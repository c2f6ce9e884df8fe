"""Configuration: ambient settings, provider presets and resolution."""
from .upload_config import (
    AuthScheme,
    ResponseFormat,
    UploadConfig,
    DEFAULT_MAX_FILE_SIZE,
    DEFAULT_TIMEOUT_MS,
)
from .settings import AmbientSettings
from .presets import PRESETS, PresetRegistry
from .resolver import merge_partial, resolve_config, resolve_preset

__all__ = [
    'AuthScheme',
    'ResponseFormat',
    'UploadConfig',
    'DEFAULT_MAX_FILE_SIZE',
    'DEFAULT_TIMEOUT_MS',
    'AmbientSettings',
    'PRESETS',
    'PresetRegistry',
    'merge_partial',
    'resolve_config',
    'resolve_preset',
]
