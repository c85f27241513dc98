"""Domain entities: binary descriptor and multipart upload session."""

from binstore.domain.entities.binary import Binary
from binstore.domain.entities.upload_session import (
    PartListing,
    UploadSession,
    validate_part_number,
)

__all__ = ["Binary", "PartListing", "UploadSession", "validate_part_number"]
