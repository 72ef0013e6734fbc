"""Errors raised by the persistence layer."""


class PersistenceError(RuntimeError):
    """A write to durable storage failed."""


class ArtifactStoreError(PersistenceError):
    """An artifact slot was written twice."""
