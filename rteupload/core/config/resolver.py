"""
Configuration resolver.

Merges ambient settings, provider presets and call-site overrides into one
effective UploadConfig. Pure data transformation: no network or file I/O.
"""
from typing import Any, Dict, Mapping, Optional, Union

from ..logging import get_logger
from .presets import PRESETS, PresetRegistry
from .settings import AmbientSettings
from .upload_config import UploadConfig

logger = get_logger(__name__)

# Mapping fields merge key-by-key instead of being replaced
MERGED_MAPPINGS = ('extra_headers', 'additional_form_fields')

PartialConfig = Mapping[str, Any]


def merge_partial(base: PartialConfig, overlay: Optional[PartialConfig]) -> Dict[str, Any]:
    """
    Overlay one partial config on another.

    Values of None in the overlay do not override. Mapping fields listed in
    MERGED_MAPPINGS merge key-by-key, last writer wins per key.

    Args:
        base: Lower-precedence values
        overlay: Higher-precedence values

    Returns:
        New merged mapping
    """
    merged = dict(base)
    for key, value in (overlay or {}).items():
        if value is None:
            continue
        if key in MERGED_MAPPINGS and isinstance(merged.get(key), Mapping):
            combined = dict(merged[key])
            combined.update(value)
            merged[key] = combined
        else:
            merged[key] = value
    return merged


def resolve_config(
    explicit: Optional[Union[PartialConfig, UploadConfig]] = None,
    settings: Optional[AmbientSettings] = None
) -> UploadConfig:
    """
    Build the effective configuration for one upload.

    Precedence, lowest first: UploadConfig defaults, ambient settings,
    explicit values.

    Args:
        explicit: Call-site overrides. A complete UploadConfig is returned as-is.
        settings: Ambient snapshot; taken from os.environ when omitted

    Returns:
        Effective UploadConfig
    """
    if isinstance(explicit, UploadConfig):
        return explicit

    if settings is None:
        settings = AmbientSettings.from_env()

    partial = merge_partial(settings.to_partial_config(), explicit)

    known = UploadConfig.field_names()
    unknown = sorted(set(partial) - known)
    if unknown:
        logger.debug(f"Ignoring unknown config keys: {', '.join(unknown)}")

    return UploadConfig(**{k: v for k, v in partial.items() if k in known})


def resolve_preset(
    provider: str,
    options: Optional[PartialConfig] = None,
    settings: Optional[AmbientSettings] = None,
    registry: PresetRegistry = PRESETS
) -> UploadConfig:
    """
    Build the effective configuration for a named storage provider.

    The preset seeds values, options override them field-by-field, and the
    result is resolved over the ambient settings.

    Args:
        provider: Registered preset name (aws, gcp, azure, ...)
        options: Caller options; may include provider-specific keys
        settings: Ambient snapshot; taken from os.environ when omitted
        registry: Preset registry to look the provider up in

    Returns:
        Effective UploadConfig

    Raises:
        ConfigurationError: If the provider is not registered
    """
    if settings is None:
        settings = AmbientSettings.from_env()

    options = dict(options or {})
    preset = registry.get(provider)
    seed = preset(options, settings)
    logger.debug(f"Applied '{provider}' preset")

    return resolve_config(merge_partial(seed, options), settings=settings)
