"""Storage resolvers: local filesystem, HTTP(S) and chunked multipart backends.

BinaryServiceFactory creates resolvers from binstore.core.config; the
file resolver is always present, HTTP and chunked resolvers are optional.

Implementations satisfy StorageResolver (exists, get_content, set_content,
purge_content, get_uri_schemes and the multipart upload operations).
"""

from binstore.application.interfaces.storage import StorageResolver
from binstore.infrastructure.external.storage.chunked_resolver import (
    ChunkedFileResolver,
)
from binstore.infrastructure.external.storage.factory import BinaryServiceFactory
from binstore.infrastructure.external.storage.file_resolver import FileResolver
from binstore.infrastructure.external.storage.http_resolver import (
    HttpResolver,
    HttpResponseStream,
)
from binstore.infrastructure.external.storage.upload_sessions import (
    UploadSessionStore,
)

__all__ = [
    "BinaryServiceFactory",
    "ChunkedFileResolver",
    "FileResolver",
    "HttpResolver",
    "HttpResponseStream",
    "StorageResolver",
    "UploadSessionStore",
]
