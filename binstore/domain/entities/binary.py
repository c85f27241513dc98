"""Binary descriptor returned when a multipart upload is finalized."""

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class Binary:
    """Descriptor of stored binary content."""

    identifier: str
    mime_type: str | None
    size: int
    modified: datetime
