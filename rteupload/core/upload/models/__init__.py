"""Upload models."""
from ...config.upload_config import UploadConfig, AuthScheme, ResponseFormat
from .upload_models import (
    UploadFile,
    UploadProgress,
    UploadResult,
    UploadOptions,
    ProgressCallback,
    SuccessCallback,
    ErrorCallback,
    guess_mime_type,
)

__all__ = [
    'UploadConfig',
    'AuthScheme',
    'ResponseFormat',
    'UploadFile',
    'UploadProgress',
    'UploadResult',
    'UploadOptions',
    'ProgressCallback',
    'SuccessCallback',
    'ErrorCallback',
    'guess_mime_type',
]
