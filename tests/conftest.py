"""Pytest fixtures for rteupload tests."""
import os
import tempfile
from pathlib import Path

import pytest

from rteupload import AmbientSettings, UploadFile


@pytest.fixture
def empty_settings():
    """Returns a settings snapshot with nothing set in the environment."""
    return AmbientSettings.from_env({})


@pytest.fixture
def settings_loader(empty_settings):
    """Settings loader isolated from the process environment."""
    return lambda: empty_settings


@pytest.fixture
def image_file():
    """Returns a small in-memory PNG payload."""
    return UploadFile.from_bytes(b"\x89PNG\r\n\x1a\nimagedata", "photo.png")


@pytest.fixture
def text_file():
    """Returns a 12-byte text payload."""
    return UploadFile.from_bytes(b"test content", "notes.txt", "text/plain")


@pytest.fixture
def temp_file():
    """Create temporary file on disk."""
    fd, path = tempfile.mkstemp(suffix='.txt')
    os.write(fd, b"test content")
    os.close(fd)
    yield Path(path)
    os.unlink(path)
