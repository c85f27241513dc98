"""Shared utilities: datetime and generators."""

from binstore.shared.utils.datetime import from_timestamp_utc, utc_now
from binstore.shared.utils.generators import generate_cuid

__all__ = [
    "generate_cuid",
    "utc_now",
    "from_timestamp_utc",
]
