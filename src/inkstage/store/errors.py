"""Errors raised by content and settings stores."""


class DataStoreError(Exception):
    """Backing store failure carrying the store's status code."""

    status: int = 500

    def __init__(self, message: str, status: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        if status is not None:
            self.status = status


class SettingNotFoundError(DataStoreError):
    """A requested setting key does not exist."""

    status = 404


class BadRequestError(DataStoreError):
    """The store rejected the query options."""

    status = 400
