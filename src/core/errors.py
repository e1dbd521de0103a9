from __future__ import annotations

from typing import Hashable


class ItemMirrorError(Exception):
    """Base error for the item mirror."""


class ValidationError(ItemMirrorError):
    """Raised when user input is invalid."""


class ExternalServiceError(ItemMirrorError):
    """Raised when the remote item service fails."""


class NotFoundError(ItemMirrorError):
    """Raised when a requested item is not found."""


class NotFullyPopulatedError(ItemMirrorError):
    """Raised when a whole-collection query hits a partial cache."""


class PollingTimeoutError(ItemMirrorError):
    """Raised when a blocking read gives up waiting for full population."""


class SynchronizationInconsistencyError(ItemMirrorError):
    """Raised when a fully populated cache is asked to touch a key it does not hold.

    The cache has already applied the mutation and dropped to the partial
    state by the time this is raised, so callers may log it and carry on.
    """

    def __init__(self, key: Hashable, message: str) -> None:
        super().__init__(message)
        self.key = key
