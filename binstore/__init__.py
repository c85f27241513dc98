"""binstore: pluggable binary content storage.

Layers follow the usual split: domain (entities, value objects, errors),
application (binary service, registry, digests, identifiers) and
infrastructure (file, HTTP and chunked resolvers plus the factory).
"""

__version__ = "0.1.0"
