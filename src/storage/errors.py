class StorageError(Exception):
    """Base class for persistence failures."""


class IdentityUnavailableError(StorageError):
    """The durable client-local storage holding the session id is inaccessible."""


class BackendUnavailableError(StorageError):
    """The session backend could not be read or written."""
