"""Exceptions raised by contact loaders."""
from typing import Optional


class ContactLoadError(Exception):
    """A contact load could not be completed."""


class TransportError(ContactLoadError):
    """An upstream request failed: network error, non-2xx status, or non-JSON body."""

    def __init__(self, message: str, url: Optional[str] = None, status_code: Optional[int] = None):
        super().__init__(message)
        self.url = url
        self.status_code = status_code


class MappingError(ContactLoadError):
    """A person record lacks fields required to build a campaign contact."""
