# app/storage/errors.py


class StorageError(Exception):
    """Base class for errors raised by a repository."""


class ConflictError(StorageError):
    """A write would break a uniqueness rule (username, product code)."""

    def __init__(self, entity: str, field: str, value=None):
        self.entity = entity
        self.field = field
        self.value = value
        message = f"{entity} with this {field} already exists"
        if value is not None:
            message = f"{entity} with {field} '{value}' already exists"
        super().__init__(message)
