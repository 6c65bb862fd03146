"""Storage error taxonomy.

Callers above the persistence port only ever see these two kinds; backend
specific exceptions are translated at the adapter and chained as the cause.
"""


class SessionStoreError(Exception):
    """Base error for persistence operations."""

    pass


class NotFoundError(SessionStoreError):
    """No record exists for the given key."""

    def __init__(self, kind: str, key: object):
        super().__init__(f"{kind} not found: {key}")
        self.kind = kind
        self.key = key


class StorageUnavailableError(SessionStoreError):
    """The store could not be reached or a write failed."""

    pass
