"""Application layer: service protocols and their default implementations."""
