"""
Custom exceptions for the upload pipeline.

This module defines exception classes for configuration, validation,
transport and fallback failures.
"""
from typing import Optional


class UploadException(Exception):
    """Base exception for all upload pipeline errors."""

    def __init__(self, message: str, error_code: Optional[str] = None) -> None:
        """
        Initialize the exception.

        Args:
            message: Error message
            error_code: Short machine-readable code (if available)
        """
        self.message = message
        self.error_code = error_code
        super().__init__(message)


class ConfigurationError(UploadException):
    """Exception raised when the effective configuration is unusable."""
    pass


class MissingEndpointError(ConfigurationError):
    """Exception raised when no upload endpoint is configured."""

    def __init__(self, message: Optional[str] = None) -> None:
        super().__init__(
            message or (
                "Upload URL is required. Set RTE_UPLOAD_URL environment "
                "variable or pass endpoint_url in config."
            ),
            error_code="missing_endpoint"
        )


class ValidationError(UploadException):
    """Exception raised when a file fails pre-flight size or type checks."""

    def __init__(self, message: str) -> None:
        super().__init__(message, error_code="validation")


class TransportError(UploadException):
    """Base exception for failures while sending a file."""
    pass


class NetworkError(TransportError):
    """Exception raised when the request produced no response."""

    def __init__(self, message: str = "Network error during upload") -> None:
        super().__init__(message, error_code="network")


class UploadTimeoutError(TransportError):
    """Exception raised when the request exceeded its timeout."""

    def __init__(self, message: str = "Upload timeout") -> None:
        super().__init__(message, error_code="timeout")


class HttpStatusError(TransportError):
    """Exception raised for non-2xx responses."""

    def __init__(self, status: int, status_text: str = "") -> None:
        """
        Initialize the exception.

        Args:
            status: Numeric HTTP status
            status_text: Reason phrase sent by the server
        """
        self.status = status
        self.status_text = status_text
        super().__init__(
            f"Upload failed with status {status}: {status_text}",
            error_code="http_status"
        )


class InvalidResponseFormatError(TransportError):
    """Exception raised when a 2xx response body cannot be interpreted."""

    def __init__(self, message: str = "Invalid response format from server") -> None:
        super().__init__(message, error_code="invalid_response")


class FallbackReadError(UploadException):
    """Exception raised when the file bytes cannot be read for inline encoding."""

    def __init__(self, message: str = "Failed to read file as base64") -> None:
        super().__init__(message, error_code="fallback_read")
