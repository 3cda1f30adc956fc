from __future__ import annotations
"""Domain exceptions raised by services and translated to HTTP errors by routers."""


class TroupeError(Exception):
    """Base class for expected, caller-visible failures."""

    status_code = 400

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NotFoundError(TroupeError):
    status_code = 404


class ReorderMismatchError(TroupeError):
    """The submitted ordering is not a permutation of the current sibling set."""

    status_code = 409

    def __init__(
        self,
        message: str,
        missing: list[str] | None = None,
        unknown: list[str] | None = None,
        duplicates: list[str] | None = None,
    ):
        super().__init__(message)
        self.missing = missing or []
        self.unknown = unknown or []
        self.duplicates = duplicates or []


class UploadSlotNotFoundError(TroupeError):
    status_code = 404


class UploadSlotExpiredError(TroupeError):
    """The upload URL was already used or has expired."""

    status_code = 410


class UploadTooLargeError(TroupeError):
    status_code = 413
