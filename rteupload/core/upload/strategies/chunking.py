"""
Request body slicing.

The streamed file part is written one slice at a time; slice size decides
how often upload progress can be reported.
"""
from typing import List, Tuple

DEFAULT_SLICE_SIZE = 64 * 1024  # 64KB


class FixedSizeChunkingStrategy:
    """Slices a payload into equal parts, the last one possibly shorter."""

    def __init__(self, chunk_size: int = DEFAULT_SLICE_SIZE):
        """
        Args:
            chunk_size: Slice size in bytes
        """
        if chunk_size <= 0:
            raise ValueError(f"Chunk size must be positive, got {chunk_size}")
        self.chunk_size = chunk_size

    def calculate_chunks(self, file_size: int) -> List[Tuple[int, int]]:
        """Returns (start, end) offsets covering file_size bytes; empty for 0."""
        return [
            (start, min(start + self.chunk_size, file_size))
            for start in range(0, file_size, self.chunk_size)
        ]
