"""
Protocol definitions for upload module.

Defines interfaces (protocols) for dependency injection and strategy pattern.
Following Interface Segregation Principle (ISP) and Dependency Inversion Principle (DIP).
"""
from typing import List, Optional, Protocol, Tuple, runtime_checkable

from .models import UploadConfig, UploadResult, ProgressCallback


@runtime_checkable
class BlobProtocol(Protocol):
    """
    Protocol for binary payloads.

    UploadFile implements it; embedding applications may pass their own
    objects as long as they expose the same attributes.
    """

    name: str
    size: int
    mime_type: str

    async def read(self) -> bytes:
        """
        Read the full content.

        Raises:
            OSError: If the content cannot be read
        """
        ...


class ChunkingStrategy(Protocol):
    """
    Protocol for payload chunking strategies.

    Decides how the request body is sliced while streaming, which is what
    drives progress granularity.
    """

    def calculate_chunks(self, file_size: int) -> List[Tuple[int, int]]:
        """
        Calculate chunk boundaries for a payload.

        Args:
            file_size: Total payload size in bytes

        Returns:
            List of (start, end) tuples representing chunk boundaries
        """
        ...


class FileValidatorProtocol(Protocol):
    """Protocol for pre-flight validation."""

    def validate(self, file: BlobProtocol, config: UploadConfig) -> None:
        """
        Check a file against size and type constraints.

        Raises:
            ValidationError: If the file is not acceptable
        """
        ...


class TransportProtocol(Protocol):
    """Protocol for sending one file to a remote endpoint."""

    async def send(
        self,
        file: BlobProtocol,
        config: UploadConfig,
        on_progress: Optional[ProgressCallback] = None
    ) -> UploadResult:
        """
        Upload a file.

        Args:
            file: Payload to send
            config: Effective configuration
            on_progress: Optional progress observer

        Returns:
            Parsed upload result

        Raises:
            TransportError: On any transport failure
            MissingEndpointError: If config has no endpoint
        """
        ...


class FallbackEncoderProtocol(Protocol):
    """Protocol for producing an inline reference when no remote one exists."""

    async def encode(self, file: BlobProtocol) -> str:
        """
        Encode a file as a self-contained reference.

        Raises:
            FallbackReadError: If the file cannot be read
        """
        ...
