"""Application interfaces (ports): resolver and service protocols.

Define contracts for infrastructure implementations (DIP).
No runtime imports from binstore.infrastructure.
"""

from binstore.application.interfaces.services import (
    IBinaryService,
    IDigestService,
    IIdentifierService,
)
from binstore.application.interfaces.storage import StorageResolver

__all__ = [
    "IBinaryService",
    "IDigestService",
    "IIdentifierService",
    "StorageResolver",
]
