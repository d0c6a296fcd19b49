"""Common exceptions for the server.

This module contains reusable exception classes that can be used
across different services and modules. They are translated into HTTP
responses by ``bus_system.exception_handlers``.
"""


class ResourceNotFoundError(Exception):
    """Raised when a resource doesn't exist.

    Generic exception for any resource that cannot be found by its identifier.
    """

    def __init__(self, resource_type: str, identifier: str | int):
        self.resource_type = resource_type
        self.identifier = identifier
        super().__init__(f"{resource_type} not found: {identifier}")


class ResourceConflictError(Exception):
    """Raised when a write would violate a uniqueness rule, e.g. a duplicate plate number."""

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class BadRequestError(Exception):
    """Raised when input fails a business validation rule."""

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)
