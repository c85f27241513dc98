"""Core constants: stream chunking, HTTP defaults and URI schemes.

Single source of truth for literal values shared by resolvers and the
digest engine.
"""

# Streaming read size for copies and digests
CHUNK_SIZE = 64 * 1024  # 64KB

# HTTP pool defaults (overridable via settings)
DEFAULT_HTTP_MAX_CONNECTIONS_PER_ROUTE = 5
DEFAULT_HTTP_MAX_CONNECTIONS_TOTAL = 10
DEFAULT_HTTP_TIMEOUT_SECONDS = 30.0

# HTTP statuses treated as "content absent" (NotFound is not an error)
HTTP_ABSENT_STATUSES = frozenset({404, 410})

# URI schemes claimed by the bundled resolvers
FILE_SCHEMES = ("file",)
HTTP_SCHEMES = ("http", "https")
CHUNKED_SCHEMES = ("chunked",)

# Algorithm used for multipart part digests (hex-encoded, as an S3 ETag)
PART_DIGEST_ALGORITHM = "MD5"

DEFAULT_MIME_TYPE = "application/octet-stream"
