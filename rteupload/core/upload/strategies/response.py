"""
Response parsing strategies.

Turn the body of a 2xx response into an UploadResult according to the
configured response format.
"""
import json
from typing import Any, Callable, Dict

from ...exceptions import InvalidResponseFormatError
from ...logging import get_logger
from ..models import ResponseFormat, UploadConfig, UploadResult

logger = get_logger(__name__)

ResponseParser = Callable[[str, UploadConfig], UploadResult]


def _load_object(body: str) -> Dict[str, Any]:
    try:
        payload = json.loads(body)
    except (json.JSONDecodeError, TypeError) as e:
        logger.debug(f"Response is not valid JSON: {e}")
        raise InvalidResponseFormatError() from e
    if not isinstance(payload, dict):
        logger.debug(f"Response JSON is a {type(payload).__name__}, expected an object")
        raise InvalidResponseFormatError()
    return payload


def parse_json(body: str, config: UploadConfig) -> UploadResult:
    """Structured response; reference taken from url_response_field or 'url'."""
    return UploadResult.from_payload(_load_object(body), config.url_response_field)


def parse_text(body: str, config: UploadConfig) -> UploadResult:
    """The whole body is the reference URL."""
    return UploadResult(reference_url=body.strip() or None, raw={'body': body})


def parse_custom(body: str, config: UploadConfig) -> UploadResult:
    """
    Structured response handed to the configured custom_parser.

    Without a parser this behaves like parse_json. Parser failures are
    reported as InvalidResponseFormatError.
    """
    payload = _load_object(body)
    if config.custom_parser is None:
        return UploadResult.from_payload(payload, config.url_response_field)

    try:
        result = config.custom_parser(payload)
    except Exception as e:
        logger.debug(f"Custom response parser failed: {e}")
        raise InvalidResponseFormatError() from e

    if isinstance(result, UploadResult):
        return result
    if isinstance(result, str):
        return UploadResult(reference_url=result, raw=payload)
    if isinstance(result, dict):
        return UploadResult.from_payload(result, config.url_response_field)
    raise InvalidResponseFormatError(
        f"Custom response parser returned unsupported type {type(result).__name__}"
    )


RESPONSE_PARSERS: Dict[ResponseFormat, ResponseParser] = {
    ResponseFormat.JSON: parse_json,
    ResponseFormat.TEXT: parse_text,
    ResponseFormat.CUSTOM: parse_custom,
}


def parse_response(body: str, config: UploadConfig) -> UploadResult:
    """
    Parse a successful response body.

    Args:
        body: Decoded response text
        config: Effective configuration

    Returns:
        Parsed upload result

    Raises:
        InvalidResponseFormatError: If the body does not match the format
    """
    return RESPONSE_PARSERS[config.response_format](body, config)
