"""
File validation service.

Pre-flight checks that run before any network connection is opened.
"""
from pathlib import Path
from typing import Iterable, Optional, Tuple, Union
import logging

from ...exceptions import ValidationError
from ..models import UploadConfig
from ..protocols import BlobProtocol


class FileValidator:
    """
    Validates files before upload.

    Responsibilities:
    - Check file existence for on-disk sources
    - Enforce the configured size ceiling
    - Enforce the configured MIME type allow-list
    """

    def __init__(self):
        self._logger = logging.getLogger('rteupload.upload.validator')

    def validate(self, file: BlobProtocol, config: UploadConfig) -> None:
        """
        Validate a file against the effective configuration.

        Args:
            file: Payload to check
            config: Effective configuration

        Raises:
            ValidationError: If size or type is not acceptable
        """
        self.validate_size(file.size, config.max_file_size)
        self.validate_type(file.mime_type, config.allowed_types)
        self._logger.debug(f"File validated: {file.name} ({file.size} bytes, {file.mime_type or 'no type'})")

    def validate_size(self, file_size: int, max_size: Optional[int] = None) -> None:
        """
        Validate file size.

        Args:
            file_size: File size in bytes
            max_size: Optional maximum allowed size

        Raises:
            ValidationError: If file exceeds max size
        """
        if max_size and file_size > max_size:
            self._logger.info(f"Rejected file of {file_size} bytes (limit {max_size})")
            raise ValidationError(
                f"File size ({file_size} bytes) exceeds maximum allowed size ({max_size} bytes)"
            )

    def validate_type(self, mime_type: str, allowed_types: Iterable[str] = ()) -> None:
        """
        Validate MIME type against an allow-list.

        Entries are exact types or 'category/*' wildcards. An empty list
        allows everything.

        Raises:
            ValidationError: If no entry matches
        """
        allowed = list(allowed_types or ())
        if not allowed:
            return

        if any(self.matches(mime_type, pattern) for pattern in allowed):
            return

        self._logger.info(f"Rejected file type {mime_type!r}")
        raise ValidationError(
            f"File type ({mime_type}) is not allowed. Allowed types: {', '.join(allowed)}"
        )

    @staticmethod
    def matches(mime_type: str, pattern: str) -> bool:
        """Returns True if mime_type satisfies an allow-list entry."""
        if pattern.endswith('/*'):
            return mime_type.startswith(pattern[:-1])
        return mime_type == pattern

    def validate_path(self, file_path: Union[str, Path]) -> Tuple[Path, int]:
        """
        Validate an on-disk file.

        Args:
            file_path: Path to the file

        Returns:
            Tuple of (validated Path, file size in bytes)

        Raises:
            FileNotFoundError: If file doesn't exist
            ValidationError: If path is not a regular file
        """
        path = Path(file_path) if isinstance(file_path, str) else file_path

        if not path.exists():
            raise FileNotFoundError(f"File not found: {path}")

        if not path.is_file():
            raise ValidationError(f"Path is not a file: {path}")

        return path, path.stat().st_size
