"""Exceptions raised by the persistence services and mapped to HTTP errors in main."""


class ServiceError(Exception):
    """Base class for expected service failures."""


class InvalidInputError(ServiceError):
    """Request is missing a required field or carries a malformed one (400)."""


class RecordNotFoundError(ServiceError):
    """No row matched the lookup (404)."""


class DuplicateRecordError(ServiceError):
    """A row with the same natural key already exists (409)."""
