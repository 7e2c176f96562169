"""Exceptions shared by the service layer."""
from __future__ import annotations


class ServiceError(Exception):
    """Base exception for service workflows."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class RecordNotFoundError(ServiceError):
    """Raised when the referenced id is not in its collection."""


class InvalidRequestError(ServiceError):
    """Raised when query parameters cannot be interpreted."""
