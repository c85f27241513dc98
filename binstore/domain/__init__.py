"""Domain layer: entities, value objects, enums and exceptions.

No imports from binstore.application or binstore.infrastructure.
"""

from binstore.domain.enums import DigestEncoding, UploadStatus
from binstore.domain.exceptions import (
    BinstoreException,
    ConfigurationException,
    UploadSessionNotFoundError,
    UploadStateError,
    ValidationException,
)

__all__ = [
    "BinstoreException",
    "ConfigurationException",
    "DigestEncoding",
    "UploadSessionNotFoundError",
    "UploadStateError",
    "UploadStatus",
    "ValidationException",
]
