"""
Effective upload configuration.

One UploadConfig is built per upload attempt by the resolver and
discarded afterwards.
"""
from dataclasses import dataclass, field, fields
from enum import Enum
from typing import Any, Callable, Dict, FrozenSet, Optional, Tuple, Type

from ..exceptions import ConfigurationError

DEFAULT_MAX_FILE_SIZE = 10 * 1024 * 1024  # 10MB
DEFAULT_TIMEOUT_MS = 30000  # 30s
DEFAULT_HTTP_METHOD = 'POST'
DEFAULT_FILE_FIELD = 'file'
DEFAULT_URL_FIELD = 'url'


class AuthScheme(str, Enum):
    """How the API key is turned into a request header."""
    BEARER = 'bearer'
    APIKEY = 'apikey'
    BASIC = 'basic'
    CUSTOM = 'custom'


class ResponseFormat(str, Enum):
    """How a successful response body is interpreted."""
    JSON = 'json'
    TEXT = 'text'
    CUSTOM = 'custom'


def _coerce_enum(enum_cls: Type[Enum], value: Any, field_name: str) -> Enum:
    if isinstance(value, enum_cls):
        return value
    try:
        return enum_cls(str(value).lower())
    except ValueError:
        allowed = ', '.join(member.value for member in enum_cls)
        raise ConfigurationError(
            f"Invalid {field_name} '{value}'. Expected one of: {allowed}"
        ) from None


@dataclass
class UploadConfig:
    """
    Configuration for a single upload attempt.

    Attributes:
        endpoint_url: Target URL; required before a transport attempt
        api_key: Credential material used by auth_scheme
        max_file_size: Byte ceiling (None disables the size check)
        allowed_types: Exact MIME types or 'category/*' wildcards
        timeout_ms: Request timeout in milliseconds (None disables it)
        enable_progress: Report upload progress to the caller
        extra_headers: Headers sent after the auth header, in order
        http_method: HTTP method for the request
        file_field_name: Multipart field holding the file bytes
        additional_form_fields: Extra multipart text fields
        response_format: json, text or custom
        url_response_field: Response field holding the reference URL
        auth_scheme: bearer, apikey, basic or custom
        custom_parser: Builds an UploadResult from parsed custom responses
    """
    endpoint_url: Optional[str] = None
    api_key: Optional[str] = None
    max_file_size: Optional[int] = DEFAULT_MAX_FILE_SIZE
    allowed_types: Tuple[str, ...] = ()
    timeout_ms: Optional[int] = DEFAULT_TIMEOUT_MS
    enable_progress: bool = False
    extra_headers: Dict[str, str] = field(default_factory=dict)
    http_method: str = DEFAULT_HTTP_METHOD
    file_field_name: str = DEFAULT_FILE_FIELD
    additional_form_fields: Dict[str, str] = field(default_factory=dict)
    response_format: ResponseFormat = ResponseFormat.JSON
    url_response_field: str = DEFAULT_URL_FIELD
    auth_scheme: AuthScheme = AuthScheme.BEARER
    custom_parser: Optional[Callable[[Any], Any]] = None

    def __post_init__(self):
        """Validate and normalize config."""
        self.response_format = _coerce_enum(
            ResponseFormat, self.response_format, 'response_format'
        )
        self.auth_scheme = _coerce_enum(AuthScheme, self.auth_scheme, 'auth_scheme')

        if isinstance(self.allowed_types, str):
            self.allowed_types = tuple(
                t.strip() for t in self.allowed_types.split(',') if t.strip()
            )
        else:
            self.allowed_types = tuple(self.allowed_types or ())

        self.extra_headers = {
            str(k): str(v) for k, v in (self.extra_headers or {}).items()
        }
        self.additional_form_fields = {
            str(k): str(v) for k, v in (self.additional_form_fields or {}).items()
        }
        self.http_method = (self.http_method or DEFAULT_HTTP_METHOD).upper()
        self.file_field_name = self.file_field_name or DEFAULT_FILE_FIELD
        self.url_response_field = self.url_response_field or DEFAULT_URL_FIELD

    @property
    def has_endpoint(self) -> bool:
        """Returns True if an upload endpoint is set."""
        return bool(self.endpoint_url and self.endpoint_url.strip())

    def to_aiohttp_timeout(self):
        """Convert to aiohttp ClientTimeout."""
        import aiohttp
        if not self.timeout_ms:
            return aiohttp.ClientTimeout(total=None)
        return aiohttp.ClientTimeout(total=self.timeout_ms / 1000)

    @classmethod
    def field_names(cls) -> FrozenSet[str]:
        """Names accepted by the constructor."""
        return frozenset(f.name for f in fields(cls))
